import pytest

from chordgrid.editing import (
    add_grid_section,
    add_measure,
    cell_ids,
    copy_measure,
    delete_chords,
    delete_lyrics,
    delete_measure,
    merge_lyrics,
    move_measure,
    move_section,
    remove_section,
    reorder_cells,
    split_grid_section,
    swap_measures,
    update_measure_cells,
    update_section_label,
)
from chordgrid.exceptions import ProtectedContentError
from chordgrid.models import Cell, CellType, GridSection, LyricsSection, Measure, Section, SectionType


def _m(chord: str, hint: str | None = None) -> Measure:
    return Measure(cells=[Cell.chord(chord), Cell.empty()], lyrics_hint=hint)


def _chords(measures: list[Measure]) -> list[str]:
    return [m.cells[0].value or "." for m in measures]


def _grid(*chords: str, label: str | None = None) -> Section:
    return Section(SectionType.GRID, GridSection(measures=[_m(c) for c in chords]), label)


# ---------------------------------------------------------------------------
# add / copy
# ---------------------------------------------------------------------------


def test_add_measure_at_end():
    result = add_measure([_m("C")])
    assert len(result) == 2
    assert result[1].cells == [Cell.empty()]


def test_add_measure_before_and_after():
    measures = [_m("C"), _m("G")]
    assert _chords(add_measure(measures, "before", 1)) == ["C", ".", "G"]
    assert _chords(add_measure(measures, "after", 1)) == ["C", "G", "."]


def test_add_measure_bad_index_is_noop():
    measures = [_m("C")]
    assert add_measure(measures, "before", 5) == measures
    assert add_measure(measures, "after", None) == measures


def test_add_measure_does_not_share_cells():
    measures = [_m("C")]
    result = add_measure(measures)
    result[0].cells[0].value = "D"
    assert measures[0].cells[0].value == "C"


def test_copy_measure_inserts_after():
    result = copy_measure([_m("C", "hi"), _m("G")], 0)
    assert _chords(result) == ["C", "C", "G"]
    assert result[1].lyrics_hint == "hi"
    assert result[1] is not result[0]


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def test_delete_measure():
    assert _chords(delete_measure([_m("C"), _m("G")], 0)) == ["G"]


def test_delete_last_measure_is_noop():
    assert _chords(delete_measure([_m("C")], 0)) == ["C"]


def test_delete_measure_with_lyrics_is_rejected():
    measures = [_m("C", "Keep"), _m("G")]
    with pytest.raises(ProtectedContentError) as exc_info:
        delete_measure(measures, 0)
    assert exc_info.value.measure_index == 0
    assert _chords(measures) == ["C", "G"]


def test_delete_lyrics_then_measure():
    measures = delete_lyrics([_m("C", "Keep"), _m("G")], 0)
    assert measures[0].lyrics_hint is None
    assert _chords(delete_measure(measures, 0)) == ["G"]


def test_delete_chords_keeps_beats_and_hint():
    result = delete_chords([_m("C", "words")], 0)
    assert result[0].cells == [Cell.empty(), Cell.empty()]
    assert result[0].lyrics_hint == "words"


# ---------------------------------------------------------------------------
# swap / move
# ---------------------------------------------------------------------------


def test_swap_measures():
    assert _chords(swap_measures([_m("C"), _m("G"), _m("D")], 0, 2)) == ["D", "G", "C"]


def test_swap_out_of_range_is_noop():
    assert _chords(swap_measures([_m("C"), _m("G")], 0, 2)) == ["C", "G"]


def test_move_measure():
    measures = [_m("C"), _m("G"), _m("D")]
    assert _chords(move_measure(measures, 1, "left")) == ["G", "C", "D"]
    assert _chords(move_measure(measures, 1, "right")) == ["C", "D", "G"]


def test_move_measure_at_edge_is_noop():
    measures = [_m("C"), _m("G")]
    assert _chords(move_measure(measures, 0, "left")) == ["C", "G"]
    assert _chords(move_measure(measures, 1, "right")) == ["C", "G"]


# ---------------------------------------------------------------------------
# merge_lyrics
# ---------------------------------------------------------------------------


def test_merge_lyrics_left():
    result = merge_lyrics([_m("C", "Prev"), _m("G", "Current")], "left", 1)
    assert result[0].lyrics_hint == "Prev Current"
    assert result[1].lyrics_hint is None


def test_merge_lyrics_right_keeps_reading_order():
    result = merge_lyrics([_m("C", "First"), _m("G", "Second")], "right", 0)
    assert result[1].lyrics_hint == "First Second"
    assert result[0].lyrics_hint is None


def test_merge_into_empty_neighbour():
    result = merge_lyrics([_m("C"), _m("G", "Only")], "left", 1)
    assert result[0].lyrics_hint == "Only"


def test_merge_without_source_hint_is_noop():
    measures = [_m("C", "Prev"), _m("G")]
    assert merge_lyrics(measures, "left", 1) == measures


def test_merge_at_edge_is_noop():
    measures = [_m("C", "Prev"), _m("G")]
    assert merge_lyrics(measures, "left", 0) == measures


# ---------------------------------------------------------------------------
# Cell edits
# ---------------------------------------------------------------------------


def test_cell_ids():
    assert cell_ids([_m("C"), _m("G")], 1) == ["1-0", "1-1"]
    assert cell_ids([_m("C")], 3) == []


def test_reorder_cells():
    result = reorder_cells([_m("C")], 0, ["0-1", "0-0"])
    assert [c.type for c in result[0].cells] == [CellType.EMPTY, CellType.CHORD]


def test_reorder_with_missing_ids_is_rejected():
    measures = [_m("C")]
    assert reorder_cells(measures, 0, ["0-1"]) == measures


def test_reorder_duplicate_ids_count_once():
    measures = [_m("C")]
    assert reorder_cells(measures, 0, ["0-1", "0-1"]) == measures


def test_update_measure_cells_drops_bars():
    result = update_measure_cells([_m("C")], 0, [Cell.chord("D"), Cell.bar(), Cell.chord("E")])
    assert [c.value for c in result[0].cells] == ["D", "E"]


def test_update_measure_cells_never_empty():
    result = update_measure_cells([_m("C")], 0, [])
    assert result[0].cells == [Cell.empty()]


# ---------------------------------------------------------------------------
# Section operations
# ---------------------------------------------------------------------------


def test_split_grid_section():
    sections = [_grid("C", "G", "D", label="Verse")]
    result = split_grid_section(sections, 0, 0, "Verse B")
    assert [s.label for s in result] == ["Verse", "Verse B"]
    assert _chords(result[0].content.measures) == ["C"]
    assert _chords(result[1].content.measures) == ["G", "D"]
    assert len(sections[0].content.measures) == 3


def test_split_after_last_measure_is_noop():
    sections = [_grid("C", "G")]
    assert len(split_grid_section(sections, 0, 1)) == 1


def test_split_non_grid_is_noop():
    sections = [Section(SectionType.VERSE, LyricsSection())]
    assert split_grid_section(sections, 0, 0) == sections


def test_add_grid_section():
    sections = [_grid("C"), _grid("G")]
    result = add_grid_section(sections, 0, "New")
    assert [s.label for s in result] == [None, "New", None]
    assert result[1].content.measures == [Measure(cells=[Cell.empty()])]


def test_add_grid_section_at_end():
    result = add_grid_section([_grid("C")])
    assert len(result) == 2
    assert result[1].type == SectionType.GRID


def test_remove_section():
    assert len(remove_section([_grid("C"), _grid("G")], 0)) == 1
    assert len(remove_section([_grid("C")], 4)) == 1


def test_move_section():
    sections = [_grid("C", label="A"), _grid("G", label="B")]
    assert [s.label for s in move_section(sections, 1, "up")] == ["B", "A"]
    assert [s.label for s in move_section(sections, 1, "down")] == ["A", "B"]


def test_update_section_label():
    sections = [_grid("C", label="Old")]
    assert update_section_label(sections, 0, " New ")[0].label == "New"
    assert update_section_label(sections, 0, "   ")[0].label is None
    assert sections[0].label == "Old"


def test_grid_keeps_one_measure_through_edits():
    measures = [_m("C"), _m("G"), _m("D")]
    for _ in range(5):
        measures = delete_measure(measures, 0)
    measures = update_measure_cells(measures, 0, [])
    measures = delete_chords(measures, 0)
    assert len(measures) == 1
    assert measures[0].cells
