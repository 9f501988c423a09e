import logging
import re
import sys
from pathlib import Path

import click

from .chordpro import generate_chordpro
from .client import ApiClient
from .exceptions import ApiError
from .models import ParsedSong
from .parser import parse_original_format
from .registry import DEFAULT_DETECTOR, detector_names, get_detector
from .validator import validate_original_format


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str) -> str:
    slug = "-".join(part for part in (_slugify(artist), _slugify(title)) if part)
    return f"{slug or 'song'}.cho"


def _report_errors(errors: list[str]) -> None:
    for error in errors:
        click.echo(f"Error: {error}", err=True)


def _convert(text: str, detector_name: str) -> tuple[ParsedSong, str]:
    song = parse_original_format(text, detector=get_detector(detector_name))
    return song, generate_chordpro(song)


_detector_option = click.option(
    "--detector",
    "detector_name",
    type=click.Choice(detector_names()),
    default=DEFAULT_DETECTOR,
    show_default=True,
    help="Heuristic used to recognize chord-only lines.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def main(verbose: bool) -> None:
    """Convert typed lyrics-and-chords text to canonical ChordPro."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--strict", is_flag=True, default=False,
              help="Refuse to convert text that fails validation.")
@_detector_option
def convert(source, output_path: str | None, stdout: bool, strict: bool, detector_name: str) -> None:
    """Convert SOURCE (a file, or - for stdin) to ChordPro.

    \b
    Expected input:
      title <song title>
      artist <artist>
      key <key>            (optional, defaults to C)
      Estrofa:             (or Coro:, Chorus, Puente:, Intro, ...)
      G         C
      lyric line under its chord line
    """
    text = source.read()

    result = validate_original_format(text)
    if not result.is_valid:
        _report_errors(result.errors)
        if strict:
            sys.exit(1)

    song, chordpro_text = _convert(text, detector_name)

    if stdout:
        click.echo(chordpro_text)
        return

    meta = song.metadata
    dest = Path(output_path) if output_path else Path(_default_filename(meta.artist, meta.title))
    dest.write_text(chordpro_text + "\n", encoding="utf-8")
    click.echo(f"Written to {dest}")


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def validate(source) -> None:
    """Check that SOURCE has a title, an artist and some content."""
    result = validate_original_format(source.read())
    if not result.is_valid:
        _report_errors(result.errors)
        sys.exit(1)
    click.echo("OK")


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--api-url", envvar="LYRIC2PRO_API_URL", required=True,
              help="Base URL of the songs API (env: LYRIC2PRO_API_URL).")
@click.option("--token", envvar="LYRIC2PRO_TOKEN", default=None,
              help="Bearer token (env: LYRIC2PRO_TOKEN).")
@click.option("--song-id", default=None,
              help="Update this song instead of creating a new one.")
@_detector_option
def upload(source, api_url: str, token: str | None, song_id: str | None, detector_name: str) -> None:
    """Convert SOURCE and send it to the songs API as ChordPro."""
    text = source.read()

    result = validate_original_format(text)
    if not result.is_valid:
        _report_errors(result.errors)
        sys.exit(1)

    _, chordpro_text = _convert(text, detector_name)

    try:
        with ApiClient(api_url, token=token) as client:
            if song_id:
                saved = client.update_song_chordpro(song_id, chordpro_text)
            else:
                saved = client.create_song_chordpro(chordpro_text)
    except ApiError as exc:
        msg = f"Error: Could not save song to {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        if exc.status_code == 401:
            msg += "; check --token"
        click.echo(msg, err=True)
        sys.exit(1)

    click.echo(f"Saved song {saved.get('_id') or saved.get('id') or ''}".rstrip())
