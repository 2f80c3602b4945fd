"""Measure edits on a flat, bar-delimited cell list.

This is the row-level counterpart of :mod:`chordgrid.editing`, for callers
that hold a grid as one stream of cells::

    || C . . . | G . . . ||

A measure is a run of non-bar cells between bar cells.  The operations keep
the same contract as their measure-list versions (bad indices are no-ops, a
grid never loses its last measure) and always return a new list of copied
cells.  Flat cells carry no lyrics, so nothing is protected from deletion.
"""

import logging
from dataclasses import dataclass

from .models import Cell, CellType, GridRow

logger = logging.getLogger(__name__)


@dataclass
class CellRange:
    """Inclusive index range of one measure's cells in the flat list."""

    start: int
    end: int


@dataclass
class FlatMeasure:
    cells: list[Cell]
    start: int
    end: int


def _copy(cells: list[Cell]) -> list[Cell]:
    return [c.copy() for c in cells]


def get_measures(cells: list[Cell]) -> list[FlatMeasure]:
    measures: list[FlatMeasure] = []
    current: list[Cell] = []
    start = 0

    for i, cell in enumerate(cells):
        if cell.is_bar:
            if current:
                measures.append(FlatMeasure(current, start, i - 1))
            current = []
            start = i + 1
        else:
            current.append(cell)

    # unterminated trailing run
    if current:
        measures.append(FlatMeasure(current, start, len(cells) - 1))

    return measures


def get_measure_cell_range(cells: list[Cell], measure_index: int) -> CellRange | None:
    measures = get_measures(cells)
    if not 0 <= measure_index < len(measures):
        return None
    m = measures[measure_index]
    return CellRange(m.start, m.end)


def create_empty_measure(beats_per_measure: int) -> list[Cell]:
    return [Cell.empty() for _ in range(max(beats_per_measure, 1))]


def add_measure(
    cells: list[Cell], position: str = "end", index: int | None = None, beats_per_measure: int = 4
) -> list[Cell]:
    """Insert *beats_per_measure* empty beats as a new measure.

    ``"end"`` inserts before the closing bar; ``"before"``/``"after"`` insert
    next to measure *index*.
    """
    new_cells = create_empty_measure(beats_per_measure)

    if position == "end":
        if not cells:
            return [Cell.bar(CellType.BAR_DOUBLE), *new_cells, Cell.bar(CellType.BAR_DOUBLE)]
        last = len(cells) - 1
        return [*_copy(cells[:last]), Cell.bar(), *new_cells, *_copy(cells[last:])]

    if index is None:
        return _copy(cells)
    cell_range = get_measure_cell_range(cells, index)
    if cell_range is None:
        return _copy(cells)

    if position == "before":
        at = cell_range.start
        return [*_copy(cells[:at]), *new_cells, Cell.bar(), *_copy(cells[at:])]
    if position == "after":
        at = cell_range.end + 1
        return [*_copy(cells[:at]), Cell.bar(), *new_cells, *_copy(cells[at:])]
    return _copy(cells)


def delete_measure(cells: list[Cell], measure_index: int) -> list[Cell]:
    """Remove a measure together with one adjacent bar."""
    measures = get_measures(cells)
    if len(measures) <= 1 or not 0 <= measure_index < len(measures):
        return _copy(cells)

    m = measures[measure_index]
    start, end = m.start, m.end
    if measure_index > 0 and start > 0 and cells[start - 1].is_bar:
        start -= 1
    elif measure_index == 0 and end + 1 < len(cells) and cells[end + 1].is_bar:
        end += 1

    return _copy(cells[:start]) + _copy(cells[end + 1 :])


def copy_measure(cells: list[Cell], measure_index: int) -> list[Cell]:
    """Insert a copy of a measure right after it."""
    cell_range = get_measure_cell_range(cells, measure_index)
    if cell_range is None:
        return _copy(cells)
    at = cell_range.end + 1
    copied = _copy(cells[cell_range.start : at])
    return [*_copy(cells[:at]), Cell.bar(), *copied, *_copy(cells[at:])]


def _replace_measure_contents(cells: list[Cell], contents: list[list[Cell]]) -> list[Cell]:
    """Rebuild *cells* keeping every bar and substituting measure runs in order."""
    result: list[Cell] = []
    measure_index = 0
    in_measure = False
    for cell in cells:
        if cell.is_bar:
            result.append(cell.copy())
            in_measure = False
            continue
        if not in_measure:
            result.extend(_copy(contents[measure_index]))
            measure_index += 1
            in_measure = True
    return result


def swap_measures(cells: list[Cell], index1: int, index2: int) -> list[Cell]:
    measures = get_measures(cells)
    if not (0 <= index1 < len(measures) and 0 <= index2 < len(measures)) or index1 == index2:
        return _copy(cells)
    contents = [m.cells for m in measures]
    contents[index1], contents[index2] = contents[index2], contents[index1]
    return _replace_measure_contents(cells, contents)


def reorder_cells_in_measure(cells: list[Cell], measure_index: int, new_order: list[Cell]) -> list[Cell]:
    """Replace one measure's cells with *new_order* if the counts agree."""
    measures = get_measures(cells)
    if not 0 <= measure_index < len(measures):
        return _copy(cells)
    if len(new_order) != len(measures[measure_index].cells):
        logger.warning(
            "cell count mismatch in reorder: expected %d, got %d",
            len(measures[measure_index].cells),
            len(new_order),
        )
        return _copy(cells)
    contents = [m.cells for m in measures]
    contents[measure_index] = [c for c in new_order if not c.is_bar]
    if len(contents[measure_index]) != len(new_order):
        return _copy(cells)
    return _replace_measure_contents(cells, contents)


def flatten_rows(rows: list[GridRow]) -> list[Cell]:
    return [cell.copy() for row in rows for cell in row.cells]


def cells_to_rows(cells: list[Cell]) -> list[GridRow]:
    return [GridRow(cells=_copy(cells))]
