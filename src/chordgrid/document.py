"""Editing session over one song.

:class:`SongDocument` owns a parsed song and applies the pure edits of
:mod:`chordgrid.editing` to it.  It tracks which section and measure are
selected and whether the song differs from what was last loaded or saved.

One document must only be edited from one place at a time.
"""

import logging

from . import editing
from .chordpro import generate_chordpro
from .layout import MEASURES_PER_ROW, build_karaoke_rows, total_measures
from .models import Cell, GridSection, Measure, ParsedSong, Section
from .normalize import parse_chordpro_to_extended
from .playback import parse_beats_per_measure

logger = logging.getLogger(__name__)


class SongDocument:
    """A loaded song plus its selection and saved state."""

    def __init__(self, content: str = "", measures_per_row: int = MEASURES_PER_ROW):
        self.measures_per_row = measures_per_row
        self.song: ParsedSong | None = None
        self.original_content = ""
        self._saved_content = ""
        self.selected_section: int | None = None
        self.selected_measure: int | None = None
        if content:
            self.load(content)

    # --- Loading / saving ---

    def load(self, content: str) -> ParsedSong:
        self.original_content = content
        self.song = parse_chordpro_to_extended(content)
        self._saved_content = self.serialize()
        self.selected_section = None
        self.selected_measure = None
        logger.debug("loaded %r with %d sections", self.song.title, len(self.song.sections))
        return self.song

    def serialize(self) -> str:
        if self.song is None:
            return self.original_content
        return generate_chordpro(self.song, self.measures_per_row)

    @property
    def is_dirty(self) -> bool:
        if self.song is None:
            return False
        return self.serialize() != self._saved_content

    def mark_saved(self) -> None:
        if self.song is not None:
            self._saved_content = self.serialize()

    # --- Views ---

    @property
    def sections(self) -> list[Section]:
        return self.song.sections if self.song else []

    @property
    def beats_per_measure(self) -> int:
        return parse_beats_per_measure(self.song.time if self.song else None)

    @property
    def total_measures(self) -> int:
        """Playback length in measures, counting grid measures only."""
        if self.song is None:
            return 1
        count = sum(len(s.content.measures) for _, s in self.song.grid_sections())
        return max(count, 1)

    @property
    def playback_measures(self) -> int:
        """Playback length counting grid measures and lyric lines."""
        return total_measures(self.song) if self.song else 1

    def karaoke_rows(self):
        return build_karaoke_rows(self.song, self.measures_per_row) if self.song else []

    def grid(self, section_index: int | None = None) -> GridSection | None:
        index = self.selected_section if section_index is None else section_index
        if self.song is None or index is None or not 0 <= index < len(self.song.sections):
            return None
        content = self.song.sections[index].content
        return content if isinstance(content, GridSection) else None

    @property
    def measures(self) -> list[Measure]:
        grid = self.grid()
        return grid.measures if grid else []

    # --- Selection ---

    def select_section(self, index: int | None) -> None:
        self.selected_section = index
        self.selected_measure = None

    def select_measure(self, index: int | None) -> None:
        self.selected_measure = index

    # --- Measure edits on the selected grid ---

    def _apply(self, op, *args) -> bool:
        """Run *op* on the selected grid's measures; return True if they changed."""
        grid = self.grid()
        if grid is None:
            return False
        updated = op(grid.measures, *args)
        changed = updated != grid.measures
        grid.measures = updated
        return changed

    def add_measure(self, position: str = "end") -> bool:
        return self._apply(editing.add_measure, position, self.selected_measure)

    def copy_measure(self, index: int | None = None) -> bool:
        return self._apply(editing.copy_measure, self._measure_index(index))

    def delete_measure(self, index: int | None = None) -> bool:
        """Delete a measure; raises ProtectedContentError if it has lyrics."""
        idx = self._measure_index(index)
        if idx is None or not self._apply(editing.delete_measure, idx):
            return False
        if self.selected_measure == idx:
            self.selected_measure = None
        return True

    def delete_lyrics(self, index: int | None = None) -> bool:
        return self._apply(editing.delete_lyrics, self._measure_index(index))

    def delete_chords(self, index: int | None = None) -> bool:
        return self._apply(editing.delete_chords, self._measure_index(index))

    def swap_measures(self, index1: int, index2: int) -> bool:
        return self._apply(editing.swap_measures, index1, index2)

    def move_measure(self, direction: str) -> bool:
        """Move the selected measure left or right; the selection follows it."""
        idx = self.selected_measure
        if idx is None or direction not in editing.DIRECTIONS:
            return False
        target = idx - 1 if direction == "left" else idx + 1
        if not 0 <= target < len(self.measures):
            return False
        self._apply(editing.move_measure, idx, direction)
        self.selected_measure = target
        return True

    def merge_lyrics(self, direction: str, index: int | None = None) -> bool:
        return self._apply(editing.merge_lyrics, direction, self._measure_index(index))

    def reorder_cells(self, measure_index: int, ordered_ids: list[str]) -> bool:
        return self._apply(editing.reorder_cells, measure_index, ordered_ids)

    def update_measure_cells(self, measure_index: int, cells: list[Cell]) -> bool:
        return self._apply(editing.update_measure_cells, measure_index, cells)

    def _measure_index(self, index: int | None) -> int | None:
        return self.selected_measure if index is None else index

    # --- Section edits ---

    def _apply_sections(self, op, *args) -> None:
        if self.song is not None:
            self.song.sections = op(self.song.sections, *args)

    def split_grid_section(self, section_index: int, measure_index: int, label: str | None = None) -> None:
        self._apply_sections(editing.split_grid_section, section_index, measure_index, label)

    def add_grid_section(self, after_index: int | None = None, label: str | None = None) -> None:
        self._apply_sections(editing.add_grid_section, after_index, label)

    def remove_section(self, index: int) -> None:
        self._apply_sections(editing.remove_section, index)
        if self.selected_section == index:
            self.select_section(None)

    def move_section(self, index: int, direction: str) -> None:
        self._apply_sections(editing.move_section, index, direction)

    def update_section_label(self, index: int, label: str | None) -> None:
        self._apply_sections(editing.update_section_label, index, label)
