from chordgrid.measures import (
    assign_lyrics_hints,
    attach_row_hints,
    build_grid_section,
    rows_to_measures,
    segment_rows,
)
from chordgrid.models import Cell, GridRow, Measure
from chordgrid.parser import parse_grid_row


def _rows(*lines: str) -> list[GridRow]:
    return [GridRow(cells=parse_grid_row(line)) for line in lines]


def _chords(measure: Measure) -> list[str | None]:
    return [c.value for c in measure.cells]


# ---------------------------------------------------------------------------
# segment_rows
# ---------------------------------------------------------------------------


def test_segment_single_row():
    measures, row_starts = segment_rows(_rows("|| C . . . | G . . . ||"))
    assert [_chords(m) for m in measures] == [["C", None, None, None], ["G", None, None, None]]
    assert row_starts == [0, 0]


def test_segment_multiple_rows():
    measures, row_starts = segment_rows(_rows("|| C | G |", "|| Am | F ||"))
    assert [_chords(m) for m in measures] == [["C"], ["G"], ["Am"], ["F"]]
    assert row_starts == [0, 0, 1, 1]


def test_empty_bar_runs_are_skipped():
    assert rows_to_measures(_rows("|| | C || | G ||")) == [
        Measure(cells=[Cell.chord("C")]),
        Measure(cells=[Cell.chord("G")]),
    ]


def test_unclosed_run_continues_into_next_row():
    measures, row_starts = segment_rows(_rows("|| C .", ". . | G ||"))
    assert [_chords(m) for m in measures] == [["C", None, None, None], ["G"]]
    assert row_starts == [0, 1]


def test_unterminated_last_run_is_kept():
    assert [_chords(m) for m in rows_to_measures(_rows("| C G"))] == [["C", "G"]]


def test_measures_never_contain_bars():
    measures = rows_to_measures(_rows("|: C % :|: G . :|", "|| D |."))
    assert all(not c.is_bar for m in measures for c in m.cells)


def test_segment_copies_cells():
    rows = _rows("|| C ||")
    measures = rows_to_measures(rows)
    measures[0].cells[0].value = "D"
    assert rows[0].cells[1].value == "C"


# ---------------------------------------------------------------------------
# assign_lyrics_hints
# ---------------------------------------------------------------------------


def test_hints_match_measures():
    measures, row_starts = segment_rows(_rows("|| C . . . | G . . . ||"))
    assign_lyrics_hints(measures, ["First line", "Second"], row_starts, 1)
    assert [m.lyrics_hint for m in measures] == ["First line", "Second"]


def test_hints_match_rows():
    measures, row_starts = segment_rows(_rows("|| C . . . | G . . . ||"))
    assign_lyrics_hints(measures, ["First line"], row_starts, 1)
    assert [m.lyrics_hint for m in measures] == ["First line", None]


def test_row_hints_go_to_first_measure_of_each_row():
    measures, row_starts = segment_rows(_rows("|| C | G | D |", "|| Am | F ||"))
    assign_lyrics_hints(measures, ["one", "two"], row_starts, 2)
    assert [m.lyrics_hint for m in measures] == ["one", None, None, "two", None]


def test_ragged_hints_are_zipped():
    measures, row_starts = segment_rows(_rows("|| C | G | D ||"))
    assign_lyrics_hints(measures, ["a", "b"], row_starts, 1)
    assert [m.lyrics_hint for m in measures] == ["a", "b", None]


def test_blank_hints_become_none():
    measures, row_starts = segment_rows(_rows("|| C | G ||"))
    assign_lyrics_hints(measures, ["  ", " x "], row_starts, 1)
    assert [m.lyrics_hint for m in measures] == [None, "x"]


def test_no_hints_leaves_measures_alone():
    measures, row_starts = segment_rows(_rows("|| C ||"))
    assign_lyrics_hints(measures, [], row_starts, 1)
    assert measures[0].lyrics_hint is None


# ---------------------------------------------------------------------------
# attach_row_hints / build_grid_section
# ---------------------------------------------------------------------------


def test_attach_row_hints_skips_missing_rows():
    measures, row_starts = segment_rows(_rows("|| C ||", "|| G ||"))
    attach_row_hints(measures, row_starts, ["hello"])
    assert [m.lyrics_hint for m in measures] == ["hello", None]


def test_build_grid_section_keeps_rows_and_shape():
    rows = _rows("|| C | G ||")
    grid = build_grid_section(rows, ["x", "y"], shape="2x1")
    assert grid.shape == "2x1"
    assert grid.rows is rows
    assert [m.lyrics_hint for m in grid.measures] == ["x", "y"]
