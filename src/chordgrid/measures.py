"""Row → measure segmentation and lyric-hint reconciliation.

Grid sections arrive from the text format as bar-delimited rows::

    || C . . . | G . . . |
    || Am . . . | F . . . ||
    {lyrics_hint: First line}
    {lyrics_hint: Second line}

and are stored as a flat list of :class:`~chordgrid.models.Measure` objects.
Older charts wrote one ``lyrics_hint`` per *row* rather than per measure, so
the hints are reconciled against the measures by count:

  1. hints == measures  → one hint per measure
  2. hints == rows      → each hint goes to the first measure of its row
  3. otherwise          → zip the shorter of the two lists
"""

import logging

from .models import Cell, GridRow, GridSection, Measure

logger = logging.getLogger(__name__)


def segment_rows(rows: list[GridRow]) -> tuple[list[Measure], list[int]]:
    """Split *rows* into measures at every bar-line cell.

    Returns ``(measures, row_starts)`` where ``row_starts[i]`` is the index of
    the row in which measure ``i``'s first cell appears.  A run of cells that
    is not closed by a bar at the end of a row continues into the next row.
    Runs with no cells (``|| |``) do not produce measures.
    """
    measures: list[Measure] = []
    row_starts: list[int] = []
    current: list[Cell] = []
    start_row = 0

    for row_index, row in enumerate(rows):
        for cell in row.cells:
            if cell.is_bar:
                if current:
                    measures.append(Measure(cells=current))
                    row_starts.append(start_row)
                current = []
                continue
            if not current:
                start_row = row_index
            current.append(cell.copy())

    if current:
        measures.append(Measure(cells=current))
        row_starts.append(start_row)

    return measures, row_starts


def rows_to_measures(rows: list[GridRow]) -> list[Measure]:
    """Return the measures of *rows*, bar lines discarded."""
    measures, _ = segment_rows(rows)
    return measures


def _clean_hint(hint: str | None) -> str | None:
    if hint is None:
        return None
    hint = hint.strip()
    return hint or None


def assign_lyrics_hints(
    measures: list[Measure],
    hints: list[str],
    row_starts: list[int],
    row_count: int,
) -> list[Measure]:
    """Attach *hints* to *measures* in place and return them.

    See the module docstring for the three matching tiers.  The third tier is
    a legacy heuristic for ragged input and is kept as-is.
    """
    if not hints:
        return measures

    if len(hints) == len(measures):
        logger.debug("lyrics hints: %d hints matched one-to-one", len(hints))
        for measure, hint in zip(measures, hints):
            measure.lyrics_hint = _clean_hint(hint)
        return measures

    if len(hints) == row_count:
        logger.debug("lyrics hints: %d hints matched to rows", len(hints))
        seen_rows: set[int] = set()
        for measure, row_index in zip(measures, row_starts):
            if row_index in seen_rows:
                continue
            seen_rows.add(row_index)
            measure.lyrics_hint = _clean_hint(hints[row_index])
        return measures

    logger.debug(
        "lyrics hints: %d hints for %d measures in %d rows, zipping",
        len(hints),
        len(measures),
        row_count,
    )
    for measure, hint in zip(measures, hints):
        measure.lyrics_hint = _clean_hint(hint)
    return measures


def attach_row_hints(
    measures: list[Measure], row_starts: list[int], row_hints: list[str | None]
) -> list[Measure]:
    """Give each row's hint to the first measure that starts in that row."""
    seen_rows: set[int] = set()
    for measure, row_index in zip(measures, row_starts):
        if row_index in seen_rows or row_index >= len(row_hints):
            continue
        seen_rows.add(row_index)
        measure.lyrics_hint = _clean_hint(row_hints[row_index])
    return measures


def build_grid_section(
    rows: list[GridRow], hints: list[str] | None = None, shape: str | None = None
) -> GridSection:
    """Build a canonical :class:`GridSection` from raw rows and hint values."""
    measures, row_starts = segment_rows(rows)
    assign_lyrics_hints(measures, hints or [], row_starts, len(rows))
    return GridSection(measures=measures, shape=shape, rows=rows)
