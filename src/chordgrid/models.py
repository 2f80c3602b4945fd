import copy
from dataclasses import dataclass, field
from enum import Enum


class CellType(Enum):
    CHORD = "chord"
    EMPTY = "empty"  # one beat with no chord change: "."
    REPEAT = "repeat"  # repeat previous measure: "%" or "%%"
    BAR = "bar"
    BAR_DOUBLE = "barDouble"
    BAR_END = "barEnd"
    REPEAT_START = "repeatStart"
    REPEAT_END = "repeatEnd"
    REPEAT_BOTH = "repeatBoth"


BAR_TYPES = frozenset(
    {
        CellType.BAR,
        CellType.BAR_DOUBLE,
        CellType.BAR_END,
        CellType.REPEAT_START,
        CellType.REPEAT_END,
        CellType.REPEAT_BOTH,
    }
)


@dataclass
class Cell:
    """One token of a chord grid.

    Chord cells carry the chord symbol in ``value`` (``"G/B"``, ``"C~G"``);
    repeat cells keep the original ``%`` / ``%%`` token.  Bar-line cells only
    ever appear in rows, never inside a :class:`Measure`.
    """

    type: CellType
    value: str | None = None

    @property
    def is_bar(self) -> bool:
        return self.type in BAR_TYPES

    def copy(self) -> "Cell":
        return Cell(type=self.type, value=self.value)

    @classmethod
    def chord(cls, value: str) -> "Cell":
        return cls(CellType.CHORD, value)

    @classmethod
    def empty(cls) -> "Cell":
        return cls(CellType.EMPTY)

    @classmethod
    def repeat(cls, value: str = "%") -> "Cell":
        return cls(CellType.REPEAT, value)

    @classmethod
    def bar(cls, type: CellType = CellType.BAR) -> "Cell":
        return cls(type)


@dataclass
class Measure:
    """One bar of music plus the words sung during it."""

    cells: list[Cell] = field(default_factory=list)
    lyrics_hint: str | None = None

    @property
    def has_lyrics(self) -> bool:
        return bool(self.lyrics_hint and self.lyrics_hint.strip())

    def copy(self) -> "Measure":
        return Measure(cells=[c.copy() for c in self.cells], lyrics_hint=self.lyrics_hint)


@dataclass
class GridRow:
    """A raw bar-delimited row as written in a grid section."""

    cells: list[Cell] = field(default_factory=list)


@dataclass
class GridSection:
    measures: list[Measure] = field(default_factory=list)
    shape: str | None = None  # opaque layout hint, e.g. "4x4"
    rows: list[GridRow] = field(default_factory=list)  # legacy input shape, never written


@dataclass
class LyricsSegment:
    """A chord and the text sung from it up to the next chord.

    ``chord`` is None only for text that precedes the first chord of a line.
    """

    chord: str | None
    text: str


@dataclass
class LyricsLine:
    segments: list[LyricsSegment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(seg.text for seg in self.segments)

    @property
    def chords(self) -> list[str]:
        return [seg.chord for seg in self.segments if seg.chord is not None]


@dataclass
class LyricsSection:
    lines: list[LyricsLine] = field(default_factory=list)


@dataclass
class TabSection:
    lines: list[str] = field(default_factory=list)


SectionContent = LyricsSection | GridSection | TabSection


class SectionType(Enum):
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    INTRO = "intro"
    OUTRO = "outro"
    TAB = "tab"
    GRID = "grid"
    GENERIC = "generic"


@dataclass
class Section:
    """A song section (verse, chorus, grid, etc.)."""

    type: SectionType
    content: SectionContent = field(default_factory=LyricsSection)
    label: str | None = None  # display caption, e.g. "Verse 1"


@dataclass
class ParsedSong:
    """Canonical representation of a song chart."""

    title: str = ""
    artist: str = ""
    key: str | None = None
    capo: int | None = None
    tempo: int | None = None
    time: str | None = None  # e.g. "3/4"
    sections: list[Section] = field(default_factory=list)

    def copy(self) -> "ParsedSong":
        return copy.deepcopy(self)

    def grid_sections(self) -> list[tuple[int, Section]]:
        """Return ``(index, section)`` pairs for every grid section."""
        return [(i, s) for i, s in enumerate(self.sections) if isinstance(s.content, GridSection)]
