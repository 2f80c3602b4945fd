"""ChordPro dialect parser.

Turns chart text into a :class:`~chordgrid.models.ParsedSong`:

  1. parse_lyrics_line(): ``[C]Hello [G]world`` → chord/text segments
  2. parse_grid_row():    ``|| C . . . | G . . . ||`` → cells
  3. parse_directive():   ``{name: value}`` → (name, value)
  4. parse_chordpro():    whole document → ParsedSong

Grid sections are closed through :func:`~chordgrid.measures.build_grid_section`
so that every grid the parser returns already carries its measures.

The parser is total: any string is a valid document.  Unknown directives are
ignored, unterminated sections are closed at end of input.
"""

import logging
import re
from enum import Enum, auto

from .measures import build_grid_section
from .models import (
    Cell,
    CellType,
    GridRow,
    LyricsLine,
    LyricsSection,
    LyricsSegment,
    ParsedSong,
    Section,
    SectionType,
    TabSection,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# {name}, {name: value} and the tolerant {name value}
DIRECTIVE_RE = re.compile(r"^\{\s*([^\s:}]+)\s*(?::\s*(.*?)|\s+(.*?))?\s*\}$")

# Inline chord marker in a lyric line: [C], [G/B], [N.C.]
CHORD_MARKER_RE = re.compile(r"\[([^\]]+)\]")

LABEL_ATTR_RE = re.compile(r'label\s*=\s*"([^"]+)"')
SHAPE_ATTR_RE = re.compile(r'shape\s*=\s*"([^"]+)"')

# Legacy bare shape value: {start_of_grid: 4x4} or {start_of_grid: 1+4x4+1}
LEGACY_SHAPE_RE = re.compile(r"^(\d+\+\d+x\d+\+\d+|\d+x\d+)")

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Grid tokens.  Tokens are whitespace-delimited, so exact lookups suffice.
_BAR_TOKENS = {
    "||": CellType.BAR_DOUBLE,
    "|.": CellType.BAR_END,
    "|:": CellType.REPEAT_START,
    ":|": CellType.REPEAT_END,
    ":|:": CellType.REPEAT_BOTH,
    "|": CellType.BAR,
}

# Every token that parse_grid_row reads as something other than a chord.
GRID_SYMBOLS = frozenset({*_BAR_TOKENS, ".", "%", "%%"})

# Section kind from the directive name, checked in this order.
_SECTION_KEYWORDS = [
    ("verse", "sov", SectionType.VERSE),
    ("chorus", "soc", SectionType.CHORUS),
    ("bridge", "sob", SectionType.BRIDGE),
    ("intro", None, SectionType.INTRO),
    ("outro", None, SectionType.OUTRO),
    ("grid", "sog", SectionType.GRID),
    ("tab", "sot", SectionType.TAB),
]


class ParserState(Enum):
    NONE = auto()  # between sections
    LYRICS = auto()
    GRID = auto()
    TAB = auto()


# ---------------------------------------------------------------------------
# Line parsers
# ---------------------------------------------------------------------------


def parse_lyrics_line(line: str) -> LyricsLine:
    """Split a lyric line with inline ``[Chord]`` markers into segments.

    Each chord owns the text up to the next chord.  Text before the first
    chord becomes a ``chord=None`` segment, but only if it is non-empty::

        "[C]Hello [G]world" → [(C, "Hello "), (G, "world")]
        "Oh [C]my"          → [(None, "Oh "), (C, "my")]

    A line without chords is returned as a single text segment, even when
    *line* is empty.
    """
    segments: list[LyricsSegment] = []
    last = 0

    for m in CHORD_MARKER_RE.finditer(line):
        if m.start() > last:
            _append_text(segments, line[last : m.start()])
        segments.append(LyricsSegment(chord=m.group(1), text=""))
        last = m.end()

    if last < len(line):
        _append_text(segments, line[last:])

    if not segments:
        segments.append(LyricsSegment(chord=None, text=line))

    return LyricsLine(segments=segments)


def _append_text(segments: list[LyricsSegment], text: str) -> None:
    if segments:
        segments[-1].text += text
    else:
        segments.append(LyricsSegment(chord=None, text=text))


def parse_grid_row(line: str) -> list[Cell]:
    """Tokenize one grid row into cells.

    ``"|| C . . . | G/B % ||"`` → barDouble, chord C, 3 × empty, bar,
    chord G/B, repeat, barDouble.
    """
    cells: list[Cell] = []
    for token in line.split():
        if token in _BAR_TOKENS:
            cells.append(Cell(_BAR_TOKENS[token]))
        elif token == ".":
            cells.append(Cell.empty())
        elif token in ("%", "%%"):
            cells.append(Cell.repeat(token))
        else:
            cells.append(Cell.chord(token))
    return cells


def parse_directive(line: str) -> tuple[str, str | None] | None:
    """Return ``(name, value)`` for a directive line, or None.

    *name* is lower-cased; *value* is stripped and None when absent.
    """
    m = DIRECTIVE_RE.match(line.strip())
    if not m:
        return None
    name = m.group(1).lower()
    value = m.group(2) if m.group(2) is not None else m.group(3)
    if value is not None:
        value = value.strip()
    return name, value


# ---------------------------------------------------------------------------
# Directive helpers
# ---------------------------------------------------------------------------


def section_type_for(directive: str) -> SectionType:
    """Infer the section kind from a ``start_of_*`` / ``so*`` directive name."""
    for keyword, short, section_type in _SECTION_KEYWORDS:
        if keyword in directive or directive == short:
            return section_type
    return SectionType.GENERIC


def extract_label(value: str | None) -> str | None:
    """Return the section label from a start directive's value.

    ``label="Verse 1"`` wins; a bare legacy value (``{start_of_verse: Verse 1}``)
    is used as-is; attribute lists without a label give None.
    """
    if not value:
        return None
    m = LABEL_ATTR_RE.search(value)
    if m:
        return m.group(1)
    if "=" not in value:
        return value
    return None


def extract_shape(value: str | None) -> str | None:
    if not value:
        return None
    m = SHAPE_ATTR_RE.search(value)
    if m:
        return m.group(1)
    m = LEGACY_SHAPE_RE.match(value)
    if m:
        return m.group(1)
    return None


def _parse_int(value: str | None, default: int) -> int | None:
    """Leading base-10 integer of *value*; *default* when absent; None if unreadable."""
    if not value:
        return default
    m = LEADING_INT_RE.match(value)
    if not m:
        logger.debug("unreadable integer metadata value %r", value)
        return None
    return int(m.group(1))


def _is_section_start(name: str) -> bool:
    return name.startswith("start_of_") or name.startswith("so")


def _is_section_end(name: str) -> bool:
    return name.startswith("end_of_") or name.startswith("eo")


# ---------------------------------------------------------------------------
# Document parser
# ---------------------------------------------------------------------------


class _SectionBuilder:
    """Accumulates the content of the section currently being parsed."""

    def __init__(self, section_type: SectionType, label: str | None, shape: str | None = None):
        self.type = section_type
        self.label = label
        self.shape = shape
        self.rows: list[GridRow] = []
        self.hints: list[str] = []
        self.tab_lines: list[str] = []
        self.lyrics_lines: list[LyricsLine] = []

    @property
    def state(self) -> ParserState:
        if self.type == SectionType.GRID:
            return ParserState.GRID
        if self.type == SectionType.TAB:
            return ParserState.TAB
        return ParserState.LYRICS

    def build(self) -> Section:
        state = self.state
        if state == ParserState.GRID:
            content = build_grid_section(self.rows, self.hints, self.shape)
        elif state == ParserState.TAB:
            content = TabSection(lines=self.tab_lines)
        else:
            content = LyricsSection(lines=self.lyrics_lines)
        return Section(type=self.type, content=content, label=self.label)


def parse_chordpro(text: str) -> ParsedSong:
    """Parse ChordPro *text* into a :class:`~chordgrid.models.ParsedSong`.

    Never raises: malformed directives are ignored and unterminated sections
    are closed at end of input.
    """
    song = ParsedSong()
    current: _SectionBuilder | None = None

    def flush() -> None:
        nonlocal current
        if current is not None:
            song.sections.append(current.build())
            current = None

    for line in text.split("\n"):
        stripped = line.strip()
        state = current.state if current else ParserState.NONE

        if not stripped and state == ParserState.NONE:
            continue

        directive = parse_directive(stripped)
        if directive is not None:
            name, value = directive

            # --- Metadata ---
            if name in ("title", "t"):
                song.title = value or ""
            elif name in ("artist", "a"):
                song.artist = value or ""
            elif name == "key":
                song.key = value or None
            elif name == "capo":
                song.capo = _parse_int(value, 0)
            elif name == "tempo":
                song.tempo = _parse_int(value, 120)
            elif name == "time":
                song.time = value or None

            # --- Section boundaries ---
            elif _is_section_start(name):
                flush()
                section_type = section_type_for(name)
                shape = extract_shape(value) if section_type == SectionType.GRID else None
                current = _SectionBuilder(section_type, extract_label(value), shape)
            elif _is_section_end(name):
                flush()

            # --- Grid annotations ---
            elif name == "lyrics_hint":
                if state == ParserState.GRID:
                    current.hints.append(value or "")
                else:
                    logger.debug("lyrics_hint outside a grid section ignored")
            else:
                logger.debug("ignoring directive {%s}", name)
            continue

        # --- Content lines ---
        if state == ParserState.GRID:
            cells = parse_grid_row(stripped)
            if cells:
                current.rows.append(GridRow(cells=cells))
        elif state == ParserState.TAB:
            current.tab_lines.append(line)
        elif stripped:
            if current is None:
                current = _SectionBuilder(SectionType.GENERIC, None)
            current.lyrics_lines.append(parse_lyrics_line(stripped))
        elif current.lyrics_lines:
            # blank line inside a verse
            current.lyrics_lines.append(LyricsLine(segments=[LyricsSegment(chord=None, text="")]))

    flush()
    return song
