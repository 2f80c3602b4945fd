"""ChordPro serializer.

Renders a :class:`~chordgrid.models.ParsedSong` back to ChordPro (``.cho``)
text that :func:`chordgrid.normalize.parse_chordpro_to_extended` reads back
into the same measures, hints and metadata.

Section → directive mapping
---------------------------

+----------------+-----------------------------------------------------------+
| Content        | Output                                                    |
+================+===========================================================+
| lyrics         | ``{start_of_<type> label="…"}``, ``[C]text`` lines,       |
|                | ``{end_of_<type>}``                                       |
+----------------+-----------------------------------------------------------+
| grid           | ``{start_of_grid label="…" shape="…"}``, bar-delimited    |
|                | rows (4 measures per row by default), one                 |
|                | ``{lyrics_hint: …}`` per measure, ``{end_of_grid}``       |
+----------------+-----------------------------------------------------------+
| tab            | ``{start_of_tab label="…"}``, verbatim lines,             |
|                | ``{end_of_tab}``                                          |
+----------------+-----------------------------------------------------------+

Lyrics hints are always written per measure, never per row.  When a grid has
any hint at all, measures without one get a bare ``{lyrics_hint}`` so the
hint count matches the measure count on the next load.

Usage::

    from chordgrid.chordpro import ChordProFormatter
    text = ChordProFormatter(measures_per_row=4).render(song)
"""

from .layout import MEASURES_PER_ROW, grid_rows_from_measures
from .models import (
    Cell,
    CellType,
    GridSection,
    LyricsLine,
    LyricsSection,
    ParsedSong,
    Section,
    TabSection,
)

_CELL_TOKENS = {
    CellType.BAR: "|",
    CellType.BAR_DOUBLE: "||",
    CellType.BAR_END: "|.",
    CellType.REPEAT_START: "|:",
    CellType.REPEAT_END: ":|",
    CellType.REPEAT_BOTH: ":|:",
    CellType.EMPTY: ".",
}


class ChordProFormatter:
    """Render a :class:`~chordgrid.models.ParsedSong` to ChordPro text."""

    def __init__(self, measures_per_row: int = MEASURES_PER_ROW):
        self.measures_per_row = measures_per_row

    def render(self, song: ParsedSong) -> str:
        """Return ChordPro text for *song*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        parts: list[str] = []

        # --- Metadata block ---
        if song.title:
            parts.append(f"{{title: {song.title}}}")
        if song.artist:
            parts.append(f"{{artist: {song.artist}}}")
        if song.key:
            parts.append(f"{{key: {song.key}}}")
        if song.capo is not None:
            parts.append(f"{{capo: {song.capo}}}")
        if song.tempo is not None:
            parts.append(f"{{tempo: {song.tempo}}}")
        if song.time:
            parts.append(f"{{time: {song.time}}}")
        parts.append("")

        # --- Section blocks ---
        for section in song.sections:
            parts.extend(self._render_section(section))
            parts.append("")  # blank line after every section

        return "\n".join(parts).rstrip("\n") + "\n"

    def _render_section(self, section: Section) -> list[str]:
        """Return a list of lines for one section (no trailing blank line)."""
        content = section.content
        directive = section.type.value
        attrs = _attr("label", section.label)

        if isinstance(content, GridSection):
            attrs += _attr("shape", content.shape)
            lines = [f"{{start_of_{directive}{attrs}}}"]
            lines.extend(self._render_grid(content))
        elif isinstance(content, TabSection):
            lines = [f"{{start_of_{directive}{attrs}}}", *content.lines]
        elif isinstance(content, LyricsSection):
            lines = [f"{{start_of_{directive}{attrs}}}"]
            lines.extend(lyrics_line_to_string(line) for line in content.lines)
        else:
            raise TypeError(f"unknown section content: {type(content).__name__}")

        lines.append(f"{{end_of_{directive}}}")
        return lines

    def _render_grid(self, grid: GridSection) -> list[str]:
        lines = [
            " ".join(cell_to_string(c) for c in row.cells)
            for row in grid_rows_from_measures(grid.measures, self.measures_per_row)
        ]
        if any(m.has_lyrics for m in grid.measures):
            for measure in grid.measures:
                if measure.has_lyrics:
                    lines.append(f"{{lyrics_hint: {measure.lyrics_hint.strip()}}}")
                else:
                    lines.append("{lyrics_hint}")
        return lines


def generate_chordpro(song: ParsedSong, measures_per_row: int = MEASURES_PER_ROW) -> str:
    """Convenience wrapper around :meth:`ChordProFormatter.render`."""
    return ChordProFormatter(measures_per_row).render(song)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _attr(name: str, value: str | None) -> str:
    # attribute values are read back up to the next double quote
    if not value:
        return ""
    value = value.replace('"', "'")
    return f' {name}="{value}"'


def cell_to_string(cell: Cell) -> str:
    if cell.type == CellType.CHORD:
        return cell.value or ""
    if cell.type == CellType.REPEAT:
        return cell.value or "%"
    return _CELL_TOKENS[cell.type]


def lyrics_line_to_string(line: LyricsLine) -> str:
    """Inverse of :func:`~chordgrid.parser.parse_lyrics_line`."""
    return "".join(f"[{seg.chord}]{seg.text}" if seg.chord else seg.text for seg in line.segments)
