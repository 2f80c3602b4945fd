import pytest

from chordgrid.chordpro import cell_to_string
from chordgrid.layout import (
    RowKind,
    build_karaoke_rows,
    current_row_index,
    grid_rows_from_measures,
    measure_hints,
    row_hint,
    section_measure_offsets,
    total_measures,
)
from chordgrid.models import (
    Cell,
    GridSection,
    LyricsSection,
    Measure,
    ParsedSong,
    Section,
    SectionType,
    TabSection,
)
from chordgrid.parser import parse_lyrics_line


def _m(chord: str, hint: str | None = None) -> Measure:
    return Measure(cells=[Cell.chord(chord)], lyrics_hint=hint)


def _text(row) -> str:
    return " ".join(cell_to_string(c) for c in row.cells)


def _song() -> ParsedSong:
    return ParsedSong(sections=[
        Section(SectionType.GRID, GridSection(measures=[_m("C", "one"), _m("G"), _m("Am", "two")]), "Intro"),
        Section(SectionType.VERSE, LyricsSection(lines=[parse_lyrics_line("a"), parse_lyrics_line("b")])),
        Section(SectionType.TAB, TabSection(lines=["e|--|"])),
    ])


# ---------------------------------------------------------------------------
# grid_rows_from_measures
# ---------------------------------------------------------------------------


def test_rows_chunked_by_measures_per_row():
    rows = grid_rows_from_measures([_m(c) for c in "CGDAE"], 2)
    assert [_text(r) for r in rows] == ["|| C | G |", "|| D | A |", "|| E ||"]


def test_single_row_closes_with_double_bar():
    rows = grid_rows_from_measures([_m("C"), _m("G")])
    assert [_text(r) for r in rows] == ["|| C | G ||"]


def test_no_measures_no_rows():
    assert grid_rows_from_measures([]) == []


def test_measures_per_row_below_one_treated_as_one():
    rows = grid_rows_from_measures([_m("C"), _m("G")], 0)
    assert len(rows) == 2


# ---------------------------------------------------------------------------
# Hints
# ---------------------------------------------------------------------------


def test_row_hint_joins_nonblank_hints():
    measures = [_m("C", "one"), _m("G", "  "), _m("D", "two")]
    assert row_hint(measures, 0, 2) == "one two"
    assert row_hint(measures, 1, 1) is None


def test_measure_hints():
    grid = GridSection(measures=[_m("C", "x"), _m("G")])
    assert measure_hints(grid) == ["x", ""]


# ---------------------------------------------------------------------------
# Measure indexing
# ---------------------------------------------------------------------------


def test_total_measures_counts_grids_and_lyric_lines():
    assert total_measures(_song()) == 5


def test_total_measures_at_least_one():
    assert total_measures(ParsedSong()) == 1


def test_section_offsets():
    assert section_measure_offsets(_song()) == [0, 3, 5]


def test_unknown_content_rejected():
    with pytest.raises(TypeError):
        total_measures(ParsedSong(sections=[Section(SectionType.VERSE, content=None)]))


# ---------------------------------------------------------------------------
# Karaoke rows
# ---------------------------------------------------------------------------


def test_karaoke_rows_kinds():
    rows = build_karaoke_rows(_song(), 2)
    assert [r.kind for r in rows] == [
        RowKind.LABEL,
        RowKind.GRID,
        RowKind.GRID,
        RowKind.SPACER,
        RowKind.LYRICS,
        RowKind.LYRICS,
        RowKind.SPACER,
        RowKind.SPACER,
    ]


def test_karaoke_grid_rows_carry_measure_ranges():
    grid_rows = [r for r in build_karaoke_rows(_song(), 2) if r.kind == RowKind.GRID]
    assert [(r.start_measure, r.end_measure) for r in grid_rows] == [(0, 1), (2, 2)]
    assert [r.hint for r in grid_rows] == ["one", "two"]


def test_karaoke_lyrics_rows_follow_grid():
    lyric_rows = [r for r in build_karaoke_rows(_song(), 2) if r.kind == RowKind.LYRICS]
    assert [r.start_measure for r in lyric_rows] == [3, 4]


def test_current_row_index():
    rows = build_karaoke_rows(_song(), 2)
    assert rows[current_row_index(rows, 1)].start_measure == 0
    assert rows[current_row_index(rows, 2)].start_measure == 2
    assert rows[current_row_index(rows, 4)].kind == RowKind.LYRICS


def test_current_row_index_defaults_to_zero():
    assert current_row_index(build_karaoke_rows(_song()), 99) == 0
