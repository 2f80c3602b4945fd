import logging
import re
import sys
from pathlib import Path

import click

from .chordpro import ChordProFormatter, cell_to_string, lyrics_line_to_string
from .chords import extract_unique_chords, get_chord_diagram
from .config import Settings
from .exceptions import ChordGridError
from .layout import RowKind, build_karaoke_rows, current_row_index
from .models import LyricsLine
from .normalize import parse_chordpro_to_extended
from .playback import DEFAULT_TEMPO, current_measure, parse_beats_per_measure, seconds_per_measure
from .registry import get_store
from .stores.base import song_id


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_key(artist: str, title: str) -> str:
    slug = "-".join(part for part in (_slugify(artist), _slugify(title)) if part)
    return slug or "untitled"


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _emit(text: str, output_path: str | None, stdout: bool, fallback: str) -> None:
    if stdout:
        click.echo(text, nl=False)
        return
    dest = Path(output_path) if output_path else Path(fallback)
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")


_per_row_option = click.option(
    "--per-row",
    "measures_per_row",
    type=click.IntRange(min=1),
    default=None,
    help="Grid measures per row (default: 4).",
)

_store_option = click.option(
    "--store",
    "location",
    default=None,
    metavar="DIR|URL",
    help="Song store: a directory or an API endpoint URL.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log parsing decisions.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Normalize, inspect and store ChordPro chord-grid charts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Settings.from_env()


# ---------------------------------------------------------------------------
# Local files
# ---------------------------------------------------------------------------


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@_per_row_option
@click.pass_obj
def normalize(settings: Settings, path: str, output_path: str | None, stdout: bool,
              measures_per_row: int | None) -> None:
    """Rewrite a chart in canonical measure form.

    Chorded lyric lines become grid measures, and lyrics hints are written
    once per measure.
    """
    song = parse_chordpro_to_extended(_read(path))
    text = ChordProFormatter(measures_per_row or settings.measures_per_row).render(song)
    _emit(text, output_path, stdout, f"{_default_key(song.artist, song.title)}.cho")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@_per_row_option
@click.pass_obj
def show(settings: Settings, path: str, measures_per_row: int | None) -> None:
    """Print a chart as karaoke rows with measure numbers."""
    song = parse_chordpro_to_extended(_read(path))
    header = " - ".join(part for part in (song.title, song.artist) if part)
    if header:
        click.echo(header)
    for row in build_karaoke_rows(song, measures_per_row or settings.measures_per_row):
        click.echo(_format_row(row))


def _format_row(row) -> str:
    if row.kind == RowKind.LABEL:
        return f"[{row.text}]"
    if row.kind == RowKind.SPACER:
        return ""
    prefix = f"{row.start_measure + 1:>4}  "
    if row.kind == RowKind.GRID:
        line = prefix + " ".join(cell_to_string(c) for c in row.cells)
        return f"{line}   {row.hint}" if row.hint else line
    return prefix + lyrics_line_to_string(LyricsLine(segments=row.segments))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def chords(path: str) -> None:
    """List the chords a chart uses, with guitar frets when known."""
    song = parse_chordpro_to_extended(_read(path))
    for name in extract_unique_chords(song.sections):
        diagram = get_chord_diagram(name)
        click.echo(f"{name:<8}{diagram.fret_string() if diagram else '?'}")


@main.command("measure-at")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("seconds", type=click.FloatRange(min=0))
@click.option("--tempo", type=click.IntRange(min=1), default=None,
              help="Override the chart's {tempo}.")
def measure_at(path: str, seconds: float, tempo: int | None) -> None:
    """Show which measure is playing SECONDS into the song."""
    song = parse_chordpro_to_extended(_read(path))
    bpm = tempo or song.tempo or DEFAULT_TEMPO
    spm = seconds_per_measure(bpm, parse_beats_per_measure(song.time))
    measure = current_measure(seconds, spm)
    rows = build_karaoke_rows(song)
    click.echo(f"Measure {measure + 1} ({spm:g}s per measure at {bpm} BPM)")
    if rows:
        row = rows[current_row_index(rows, measure)]
        if row.contains(measure):
            click.echo(_format_row(row))


# ---------------------------------------------------------------------------
# Song store
# ---------------------------------------------------------------------------


def _store(settings: Settings, location: str | None):
    return get_store(location or settings.store)


@main.command("ls")
@_store_option
@click.pass_obj
def list_songs(settings: Settings, location: str | None) -> None:
    """List the songs in the store."""
    try:
        songs = _store(settings, location).list()
    except ChordGridError as exc:
        _fail(exc)
    for song in songs:
        click.echo(song.id)


@main.command()
@click.argument("key")
@_store_option
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <key>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.pass_obj
def pull(settings: Settings, key: str, location: str | None, output_path: str | None, stdout: bool) -> None:
    """Download a song from the store."""
    try:
        text = _store(settings, location).get(key)
    except ChordGridError as exc:
        _fail(exc)
    _emit(text, output_path, stdout, f"{Path(song_id(key)).name}.cho")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--key", default=None, help="Store key (default: <artist>-<title>).")
@click.option("--raw", is_flag=True, default=False, help="Upload the file as-is, without normalizing.")
@_store_option
@_per_row_option
@click.pass_obj
def push(settings: Settings, path: str, key: str | None, raw: bool, location: str | None,
         measures_per_row: int | None) -> None:
    """Normalize a chart and upload it to the store."""
    text = _read(path)
    song = parse_chordpro_to_extended(text)
    if not raw:
        text = ChordProFormatter(measures_per_row or settings.measures_per_row).render(song)
    key = key or _default_key(song.artist, song.title)
    try:
        _store(settings, location).put(key, text)
    except ChordGridError as exc:
        _fail(exc)
    click.echo(f"Saved {key}")


@main.command("rm")
@click.argument("key")
@_store_option
@click.pass_obj
def remove(settings: Settings, key: str, location: str | None) -> None:
    """Delete a song from the store."""
    try:
        _store(settings, location).delete(key)
    except ChordGridError as exc:
        _fail(exc)
    click.echo(f"Deleted {key}")
