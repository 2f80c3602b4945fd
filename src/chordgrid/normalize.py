"""Normalization of parsed songs into the canonical measure model.

After :func:`parse_chordpro_to_extended` every grid section carries a
populated ``measures`` list, and every lyric line that carries chords has been
promoted to a grid row::

    {start_of_verse: Verse 1}          {start_of_grid label="Verse 1 (Grid)"}
    [C]Hello [G]world           →      || C G ||
    {end_of_verse}                     {lyrics_hint: Hello world}
                                       {end_of_grid}

Lines without chords stay in a lyrics section at the same position.
"""

import logging

from .measures import attach_row_hints, build_grid_section, segment_rows
from .models import (
    Cell,
    CellType,
    GridRow,
    GridSection,
    LyricsLine,
    LyricsSection,
    Measure,
    ParsedSong,
    Section,
    SectionType,
)
from .parser import GRID_SYMBOLS, parse_chordpro
from .playback import parse_beats_per_measure

logger = logging.getLogger(__name__)

UNLABELED_GRID_LABEL = "Chord Progression"


def auto_assign_measures_to_grid(chords: list[str], beats_per_measure: int = 4) -> GridRow:
    """Lay *chords* out as one row, one chord per beat.

    A bar is inserted after every *beats_per_measure* chords (but not after
    the last chord) and the row is wrapped in double bars::

        ["C", "Am", "F", "G", "C"], 4 → || C Am F G | C ||
    """
    beats_per_measure = max(beats_per_measure, 1)
    cells = [Cell.bar(CellType.BAR_DOUBLE)]
    for i, chord in enumerate(chords):
        cells.append(Cell.chord(chord))
        if (i + 1) % beats_per_measure == 0 and i < len(chords) - 1:
            cells.append(Cell.bar())
    cells.append(Cell.bar(CellType.BAR_DOUBLE))
    return GridRow(cells=cells)


def grid_chord_token(chord: str) -> str | None:
    """Return *chord* as a single grid token, or None if it cannot be one.

    Inner whitespace is dropped (``"C add9"`` → ``"Cadd9"``).  A chord that is
    empty or spells a grid symbol (``.``, ``%``, ``|`` …) gives None.
    """
    token = "".join(chord.split())
    if not token or token in GRID_SYMBOLS:
        return None
    return token


def lyrics_line_to_grid_row(line: LyricsLine, beats_per_measure: int = 4) -> GridRow | None:
    """Return a grid row for a chord-bearing *line*, or None.

    None means the line has no chords, or one of its chords cannot be
    written as a grid token; such a line stays a lyric line.
    """
    chords = [grid_chord_token(chord) for chord in line.chords]
    if not chords or None in chords:
        return None
    return auto_assign_measures_to_grid(chords, beats_per_measure)


def _grid_label(label: str | None) -> str:
    return f"{label} (Grid)" if label else UNLABELED_GRID_LABEL


def auto_assign_measures(song: ParsedSong, beats_per_measure: int = 4) -> ParsedSong:
    """Promote chord-bearing lyric lines to grid sections.

    Returns a new song; *song* is not modified.  For each lyrics section, the
    lines that carry chords become one grid section (each line one row, the
    line's text becoming the row's lyrics hint) placed where the section was.
    The remaining lines, blank ones included, stay behind it as a lyrics
    section; if every line was converted, the lyrics section disappears.
    """
    result = song.copy()
    sections: list[Section] = []

    for section in result.sections:
        content = section.content
        if not isinstance(content, LyricsSection):
            sections.append(section)
            continue

        rows: list[GridRow] = []
        row_hints: list[str | None] = []
        remaining: list[LyricsLine] = []

        for line in content.lines:
            row = lyrics_line_to_grid_row(line, beats_per_measure)
            if row is None:
                remaining.append(line)
                continue
            rows.append(row)
            row_hints.append(line.text.strip() or None)

        if not rows:
            sections.append(section)
            continue

        measures, row_starts = segment_rows(rows)
        attach_row_hints(measures, row_starts, row_hints)
        logger.debug(
            "promoted %d chord lines of %r into %d measures",
            len(rows),
            section.label,
            len(measures),
        )
        sections.append(
            Section(
                type=SectionType.GRID,
                content=GridSection(measures=measures, rows=rows),
                label=_grid_label(section.label),
            )
        )
        if remaining:
            sections.append(Section(type=section.type, content=LyricsSection(lines=remaining), label=section.label))

    result.sections = sections
    return result


def ensure_grid_measures(song: ParsedSong) -> ParsedSong:
    """Guarantee every grid section has at least one measure.

    Measures that are already populated are kept untouched; a grid that only
    has legacy rows gets its measures built from them; a grid with neither
    gets a single empty measure.  Returns a new song.
    """
    result = song.copy()
    for section in result.sections:
        grid = section.content
        if not isinstance(grid, GridSection) or grid.measures:
            continue
        built = build_grid_section(grid.rows, shape=grid.shape)
        grid.measures = built.measures or [Measure(cells=[Cell.empty()])]
    return result


def parse_chordpro_to_extended(text: str, beats_per_measure: int | None = None) -> ParsedSong:
    """Parse *text* and normalize it into the canonical measure model.

    *beats_per_measure* defaults to the numerator of the song's ``{time}``.
    """
    song = parse_chordpro(text)
    if beats_per_measure is None:
        beats_per_measure = parse_beats_per_measure(song.time)
    song = auto_assign_measures(song, beats_per_measure)
    return ensure_grid_measures(song)
