"""Structural edits on grid measures and song sections.

Every function returns a new list built from copies, so the caller's
measures and cells are never shared with the result.  Invalid indices leave
the input unchanged (the result is still a fresh copy).  The one exception
is deleting a measure that carries lyrics: that raises
:class:`~chordgrid.exceptions.ProtectedContentError` so the user can be told
why nothing happened.
"""

import copy
import logging

from .exceptions import ProtectedContentError
from .models import Cell, GridSection, Measure, Section, SectionType

logger = logging.getLogger(__name__)

POSITIONS = ("end", "before", "after")
DIRECTIONS = ("left", "right")


def clone_measures(measures: list[Measure]) -> list[Measure]:
    return [m.copy() for m in measures]


def create_empty_measure() -> Measure:
    return Measure(cells=[Cell.empty()])


def _in_range(measures: list, index: int | None) -> bool:
    return index is not None and 0 <= index < len(measures)


# ---------------------------------------------------------------------------
# Measure operations
# ---------------------------------------------------------------------------


def add_measure(measures: list[Measure], position: str = "end", index: int | None = None) -> list[Measure]:
    """Insert an empty measure at the end, or before/after measure *index*."""
    result = clone_measures(measures)
    if position == "end":
        result.append(create_empty_measure())
        return result
    if position not in POSITIONS or not _in_range(measures, index):
        return result
    insert_at = index if position == "before" else index + 1
    result.insert(insert_at, create_empty_measure())
    return result


def copy_measure(measures: list[Measure], index: int) -> list[Measure]:
    """Duplicate measure *index* (cells and hint) right after itself."""
    result = clone_measures(measures)
    if not _in_range(measures, index):
        return result
    result.insert(index + 1, result[index].copy())
    return result


def delete_measure(measures: list[Measure], index: int) -> list[Measure]:
    """Remove measure *index*.

    The last remaining measure is never removed.  Raises
    :class:`ProtectedContentError` if the measure has a lyrics hint; clear it
    with :func:`delete_lyrics` first.
    """
    result = clone_measures(measures)
    if len(measures) <= 1 or not _in_range(measures, index):
        return result
    if measures[index].has_lyrics:
        raise ProtectedContentError(index)
    del result[index]
    return result


def delete_lyrics(measures: list[Measure], index: int) -> list[Measure]:
    result = clone_measures(measures)
    if _in_range(measures, index):
        result[index].lyrics_hint = None
    return result


def delete_chords(measures: list[Measure], index: int) -> list[Measure]:
    """Blank every cell of measure *index*, keeping its beat count and hint."""
    result = clone_measures(measures)
    if _in_range(measures, index):
        target = result[index]
        target.cells = [Cell.empty() for _ in target.cells] or [Cell.empty()]
    return result


def swap_measures(measures: list[Measure], index1: int, index2: int) -> list[Measure]:
    result = clone_measures(measures)
    if _in_range(measures, index1) and _in_range(measures, index2):
        result[index1], result[index2] = result[index2], result[index1]
    return result


def move_measure(measures: list[Measure], index: int, direction: str) -> list[Measure]:
    """Swap measure *index* with its left or right neighbour."""
    if direction not in DIRECTIONS:
        return clone_measures(measures)
    target = index - 1 if direction == "left" else index + 1
    return swap_measures(measures, index, target)


def merge_lyrics(measures: list[Measure], direction: str, index: int) -> list[Measure]:
    """Move the hint of measure *index* onto its left or right neighbour.

    The merged hint keeps reading order: the left measure's words come first
    whichever way the merge goes.  Nothing happens if the source has no hint.
    """
    result = clone_measures(measures)
    if direction not in DIRECTIONS or not _in_range(measures, index):
        return result
    target = index - 1 if direction == "left" else index + 1
    if not _in_range(measures, target):
        return result

    source_hint = (measures[index].lyrics_hint or "").strip()
    if not source_hint:
        return result

    target_hint = (measures[target].lyrics_hint or "").strip()
    if not target_hint:
        merged = source_hint
    elif direction == "left":
        merged = f"{target_hint} {source_hint}"
    else:
        merged = f"{source_hint} {target_hint}"

    result[target].lyrics_hint = merged
    result[index].lyrics_hint = None
    return result


def cell_ids(measures: list[Measure], index: int) -> list[str]:
    """Stable ids (``"<measure>-<cell>"``) for the cells of measure *index*."""
    if not _in_range(measures, index):
        return []
    return [f"{index}-{i}" for i in range(len(measures[index].cells))]


def reorder_cells(measures: list[Measure], index: int, ordered_ids: list[str]) -> list[Measure]:
    """Reorder the cells of measure *index* following *ordered_ids*.

    Ids come from :func:`cell_ids`.  Unknown ids are dropped and repeated ids
    count once; if what is left does not cover every cell the payload is
    rejected and the measures are returned unchanged.
    """
    result = clone_measures(measures)
    if not _in_range(measures, index):
        return result

    by_id = dict(zip(cell_ids(measures, index), measures[index].cells))
    seen: set[str] = set()
    reordered: list[Cell] = []
    for cell_id in ordered_ids:
        if cell_id in by_id and cell_id not in seen:
            seen.add(cell_id)
            reordered.append(by_id[cell_id].copy())

    if len(reordered) != len(by_id):
        logger.warning(
            "cell count mismatch in reorder of measure %d: expected %d, got %d",
            index,
            len(by_id),
            len(reordered),
        )
        return result

    result[index].cells = reordered
    return result


def update_measure_cells(measures: list[Measure], index: int, cells: list[Cell]) -> list[Measure]:
    """Replace the cells of measure *index*.  Bar-line cells are dropped."""
    result = clone_measures(measures)
    if _in_range(measures, index):
        result[index].cells = [c.copy() for c in cells if not c.is_bar] or [Cell.empty()]
    return result


# ---------------------------------------------------------------------------
# Section operations
# ---------------------------------------------------------------------------


def _copy_sections(sections: list[Section]) -> list[Section]:
    return copy.deepcopy(sections)


def split_grid_section(
    sections: list[Section], section_index: int, measure_index: int, label: str | None = None
) -> list[Section]:
    """Split a grid section after *measure_index* into two grid sections.

    The left section keeps measures ``0..measure_index`` and the original
    label; the right one gets the rest and *label*.  Both keep the shape.
    Both halves must end up with at least one measure.
    """
    result = _copy_sections(sections)
    if not _in_range(sections, section_index):
        return result
    section = result[section_index]
    grid = section.content
    if not isinstance(grid, GridSection):
        return result
    if not 0 <= measure_index < len(grid.measures) - 1:
        return result

    left = GridSection(measures=grid.measures[: measure_index + 1], shape=grid.shape)
    right = GridSection(measures=grid.measures[measure_index + 1 :], shape=grid.shape)
    result[section_index] = Section(type=section.type, content=left, label=section.label)
    result.insert(section_index + 1, Section(type=SectionType.GRID, content=right, label=label))
    return result


def add_grid_section(sections: list[Section], after_index: int | None = None, label: str | None = None) -> list[Section]:
    """Insert a one-measure grid section after *after_index* (or at the end)."""
    result = _copy_sections(sections)
    new = Section(type=SectionType.GRID, content=GridSection(measures=[create_empty_measure()]), label=label)
    if after_index is None or not _in_range(sections, after_index):
        result.append(new)
    else:
        result.insert(after_index + 1, new)
    return result


def remove_section(sections: list[Section], index: int) -> list[Section]:
    result = _copy_sections(sections)
    if _in_range(sections, index):
        del result[index]
    return result


def move_section(sections: list[Section], index: int, direction: str) -> list[Section]:
    """Swap section *index* with the one above (``"up"``) or below (``"down"``)."""
    result = _copy_sections(sections)
    if direction not in ("up", "down") or not _in_range(sections, index):
        return result
    target = index - 1 if direction == "up" else index + 1
    if _in_range(sections, target):
        result[index], result[target] = result[target], result[index]
    return result


def update_section_label(sections: list[Section], index: int, label: str | None) -> list[Section]:
    result = _copy_sections(sections)
    if _in_range(sections, index):
        result[index].label = label.strip() if label and label.strip() else None
    return result
