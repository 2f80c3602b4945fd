"""Guitar chord lookup table.

Frets are listed low to high string ``[E, A, D, G, B, e]``: ``-1`` is a muted
string, ``0`` an open one.  The table is a static lookup; nothing here
renders diagrams.
"""

from dataclasses import dataclass, replace

from .models import CellType, GridSection, LyricsSection, Section


@dataclass(frozen=True)
class ChordDiagram:
    name: str
    frets: tuple[int, ...]
    barre: int | None = None
    base_fret: int | None = None

    def fret_string(self) -> str:
        """``x32010`` style notation; frets above 9 are written in parentheses."""
        parts = []
        for fret in self.frets:
            if fret < 0:
                parts.append("x")
            elif fret > 9:
                parts.append(f"({fret})")
            else:
                parts.append(str(fret))
        return "".join(parts)


def _d(name: str, frets: tuple[int, ...], barre: int | None = None, base_fret: int | None = None) -> ChordDiagram:
    return ChordDiagram(name, frets, barre, base_fret)


CHORD_DICTIONARY: dict[str, ChordDiagram] = {
    d.name: d
    for d in [
        # Major
        _d("C", (-1, 3, 2, 0, 1, 0)),
        _d("D", (-1, -1, 0, 2, 3, 2)),
        _d("E", (0, 2, 2, 1, 0, 0)),
        _d("F", (1, 3, 3, 2, 1, 1), barre=1),
        _d("G", (3, 2, 0, 0, 0, 3)),
        _d("A", (-1, 0, 2, 2, 2, 0)),
        _d("B", (-1, 2, 4, 4, 4, 2), barre=2, base_fret=2),
        # Minor
        _d("Cm", (-1, 3, 5, 5, 4, 3), barre=3, base_fret=3),
        _d("Dm", (-1, -1, 0, 2, 3, 1)),
        _d("Em", (0, 2, 2, 0, 0, 0)),
        _d("Fm", (1, 3, 3, 1, 1, 1), barre=1),
        _d("Gm", (3, 5, 5, 3, 3, 3), barre=3, base_fret=3),
        _d("Am", (-1, 0, 2, 2, 1, 0)),
        _d("Bm", (-1, 2, 4, 4, 3, 2), barre=2, base_fret=2),
        # Dominant 7th
        _d("C7", (-1, 3, 2, 3, 1, 0)),
        _d("D7", (-1, -1, 0, 2, 1, 2)),
        _d("E7", (0, 2, 0, 1, 0, 0)),
        _d("F7", (1, 3, 1, 2, 1, 1), barre=1),
        _d("G7", (3, 2, 0, 0, 0, 1)),
        _d("A7", (-1, 0, 2, 0, 2, 0)),
        _d("B7", (-1, 2, 1, 2, 0, 2)),
        # Major 7th
        _d("Cmaj7", (-1, 3, 2, 0, 0, 0)),
        _d("Dmaj7", (-1, -1, 0, 2, 2, 2)),
        _d("Emaj7", (0, 2, 1, 1, 0, 0)),
        _d("Fmaj7", (1, -1, 2, 2, 1, 0)),
        _d("Gmaj7", (3, 2, 0, 0, 0, 2)),
        _d("Amaj7", (-1, 0, 2, 1, 2, 0)),
        # Minor 7th
        _d("Cm7", (-1, 3, 5, 3, 4, 3), barre=3, base_fret=3),
        _d("Dm7", (-1, -1, 0, 2, 1, 1)),
        _d("Em7", (0, 2, 0, 0, 0, 0)),
        _d("Fm7", (1, 3, 1, 1, 1, 1), barre=1),
        _d("Gm7", (3, 5, 3, 3, 3, 3), barre=3, base_fret=3),
        _d("Am7", (-1, 0, 2, 0, 1, 0)),
        _d("Bm7", (-1, 2, 4, 2, 3, 2), barre=2, base_fret=2),
        # Suspended
        _d("Csus4", (-1, 3, 3, 0, 1, 1)),
        _d("Dsus4", (-1, -1, 0, 2, 3, 3)),
        _d("Esus4", (0, 2, 2, 2, 0, 0)),
        _d("Gsus4", (3, 3, 0, 0, 1, 3)),
        _d("Asus4", (-1, 0, 2, 2, 3, 0)),
        _d("Dsus2", (-1, -1, 0, 2, 3, 0)),
        _d("Asus2", (-1, 0, 2, 2, 0, 0)),
        # Add9
        _d("Cadd9", (-1, 3, 2, 0, 3, 0)),
        _d("Dadd9", (-1, -1, 0, 2, 3, 0)),
        _d("Eadd9", (0, 2, 2, 1, 0, 2)),
        _d("Gadd9", (3, 0, 0, 0, 0, 3)),
        # Slash chords
        _d("G/B", (-1, 2, 0, 0, 0, 3)),
        _d("C/G", (3, 3, 2, 0, 1, 0)),
        _d("D/F#", (2, -1, 0, 2, 3, 2)),
        _d("Am/G", (3, 0, 2, 2, 1, 0)),
        _d("Em/D", (-1, -1, 0, 0, 0, 0)),
    ]
}


def get_chord_diagram(name: str) -> ChordDiagram | None:
    """Look up *name*, falling back to the base chord of an unknown slash chord.

    ``"C/E"`` is not in the table, so it is answered with C's shape under the
    name ``"C/E"``.
    """
    normalized = "".join(name.split())
    if normalized in CHORD_DICTIONARY:
        return CHORD_DICTIONARY[normalized]

    base, slash, _ = normalized.partition("/")
    if slash and base and base in CHORD_DICTIONARY:
        return replace(CHORD_DICTIONARY[base], name=normalized)

    return None


def extract_unique_chords(sections: list[Section]) -> list[str]:
    """Return the sorted set of chord names used anywhere in *sections*.

    Grid cells holding alternatives (``"C~G"``) contribute each alternative.
    """
    chords: set[str] = set()

    for section in sections:
        content = section.content
        if isinstance(content, LyricsSection):
            for line in content.lines:
                chords.update(line.chords)
        elif isinstance(content, GridSection):
            for measure in content.measures:
                for cell in measure.cells:
                    if cell.type != CellType.CHORD or not cell.value:
                        continue
                    chords.update(c for c in cell.value.split("~") if c and c not in ("/", "."))

    return sorted(chords)
