"""Display layout: measures chunked into rows, songs flattened into karaoke rows.

Row chunking is shared by the grid views and by the serializer, so a chart
written by :mod:`chordgrid.chordpro` looks exactly like the grid on screen::

    measures_per_row=4, 6 measures →
        || C . . . | G . . . | Am . . . | F . . . |
        || C . . . | G . . . ||
"""

from dataclasses import dataclass, field
from enum import Enum

from .models import (
    Cell,
    CellType,
    GridRow,
    GridSection,
    LyricsSection,
    LyricsSegment,
    Measure,
    ParsedSong,
    TabSection,
)

MEASURES_PER_ROW = 4


def grid_rows_from_measures(measures: list[Measure], measures_per_row: int = MEASURES_PER_ROW) -> list[GridRow]:
    """Group *measures* into rows of *measures_per_row*.

    Every row opens with a double bar and separates its measures with single
    bars.  Rows other than the last close with a single bar; the last row
    closes with a double bar.  Cells are copied.
    """
    measures_per_row = max(measures_per_row, 1)
    rows: list[GridRow] = []

    for start in range(0, len(measures), measures_per_row):
        chunk = measures[start : start + measures_per_row]
        cells = [Cell.bar(CellType.BAR_DOUBLE)]
        for i, measure in enumerate(chunk):
            if i > 0:
                cells.append(Cell.bar())
            cells.extend(c.copy() for c in measure.cells)
        is_last = start + measures_per_row >= len(measures)
        cells.append(Cell.bar(CellType.BAR_DOUBLE if is_last else CellType.BAR))
        rows.append(GridRow(cells=cells))

    return rows


def row_hint(measures: list[Measure], start: int, end: int) -> str | None:
    """Join the non-blank hints of ``measures[start..end]`` (inclusive)."""
    hints = [m.lyrics_hint.strip() for m in measures[start : end + 1] if m.has_lyrics]
    return " ".join(hints) if hints else None


def measure_hints(grid: GridSection) -> list[str]:
    """One hint string per measure, ``""`` where a measure has none."""
    return [m.lyrics_hint or "" for m in grid.measures]


# ---------------------------------------------------------------------------
# Song-wide measure indexing
# ---------------------------------------------------------------------------


def _measure_span(content) -> int:
    """Number of playback measures a section occupies.

    Grid sections count their measures (at least one); each lyric line
    counts as one measure; tab sections take no time.
    """
    if isinstance(content, GridSection):
        return max(len(content.measures), 1)
    if isinstance(content, LyricsSection):
        return len(content.lines)
    if isinstance(content, TabSection):
        return 0
    raise TypeError(f"unknown section content: {type(content).__name__}")


def total_measures(song: ParsedSong) -> int:
    return max(sum(_measure_span(s.content) for s in song.sections), 1)


def section_measure_offsets(song: ParsedSong) -> list[int]:
    """Global index of the first measure of each section."""
    offsets: list[int] = []
    offset = 0
    for section in song.sections:
        offsets.append(offset)
        offset += _measure_span(section.content)
    return offsets


# ---------------------------------------------------------------------------
# Karaoke rows
# ---------------------------------------------------------------------------


class RowKind(Enum):
    LABEL = "label"
    GRID = "grid"
    LYRICS = "lyrics"
    SPACER = "spacer"


@dataclass
class KaraokeRow:
    """One display row of the karaoke view.

    ``start_measure``/``end_measure`` are global, inclusive measure indices
    used to decide whether the row is the one currently playing.
    """

    kind: RowKind
    section_index: int
    row_index: int
    start_measure: int
    end_measure: int
    cells: list[Cell] = field(default_factory=list)  # grid rows
    hint: str | None = None  # grid rows
    segments: list[LyricsSegment] = field(default_factory=list)  # lyrics rows
    text: str | None = None  # label rows

    def contains(self, measure: int) -> bool:
        return self.start_measure <= measure <= self.end_measure


def build_karaoke_rows(song: ParsedSong, measures_per_row: int = MEASURES_PER_ROW) -> list[KaraokeRow]:
    measures_per_row = max(measures_per_row, 1)
    rows: list[KaraokeRow] = []
    offset = 0

    for section_index, section in enumerate(song.sections):
        if section.label:
            rows.append(KaraokeRow(RowKind.LABEL, section_index, -1, offset, offset, text=section.label))

        content = section.content
        if isinstance(content, GridSection):
            measures = content.measures
            for row_index, row in enumerate(grid_rows_from_measures(measures, measures_per_row)):
                local_start = row_index * measures_per_row
                local_end = min(len(measures) - 1, local_start + measures_per_row - 1)
                rows.append(
                    KaraokeRow(
                        RowKind.GRID,
                        section_index,
                        row_index,
                        offset + local_start,
                        offset + local_end,
                        cells=row.cells,
                        hint=row_hint(measures, local_start, local_end),
                    )
                )
            offset += len(measures)
        elif isinstance(content, LyricsSection):
            for row_index, line in enumerate(content.lines):
                start = offset + row_index
                rows.append(
                    KaraokeRow(RowKind.LYRICS, section_index, row_index, start, start, segments=line.segments)
                )
            offset += len(content.lines)

        rows.append(KaraokeRow(RowKind.SPACER, section_index, -1, offset, offset))

    return rows


def current_row_index(rows: list[KaraokeRow], measure: int) -> int:
    """Index of the first grid or lyrics row containing *measure*, else 0."""
    for i, row in enumerate(rows):
        if row.kind in (RowKind.GRID, RowKind.LYRICS) and row.contains(measure):
            return i
    return 0
