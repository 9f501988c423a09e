"""Canonical ChordPro serializer.

Renders a :class:`~lyric2pro.models.ParsedSong` to ChordPro text::

    {title: Cuan grande es Él}
    {artist: Tradicional}
    {key: G}

    {verse}
    [G]Señor mi Dios, al [C]contemplar los cielos

    {chorus}
    ...

Each section is written as a bare ``{name}`` directive followed by its
lines and a blank line; a section with no text is left out.  Chords go
back in as ``[note]`` at their stored index.  The output re-parses to
the same song, so rendering it again gives identical text.

Usage::

    from lyric2pro.chordpro import ChordProFormatter
    text = ChordProFormatter().render(parsed)
"""

from .detectors.base import ChordLineDetector
from .models import LyricLine, ParsedSong, Section, SongMetadata
from .parser import parse_original_format


class ChordProFormatter:
    """Render a :class:`~lyric2pro.models.ParsedSong` to ChordPro text."""

    def render(self, song: ParsedSong) -> str:
        """Return ChordPro text for *song*, without a trailing newline.

        *song* is not modified.
        """
        meta = song.metadata
        parts: list[str] = [
            f"{{title: {meta.title}}}",
            f"{{artist: {meta.artist}}}",
            f"{{key: {meta.key}}}",
            "",
        ]

        for section in song.sections:
            lines = _render_section(section)
            if not lines:
                continue
            parts.append(f"{{{section.name}}}")
            parts.extend(lines)
            parts.append("")  # blank line after every section

        if meta.notes:
            parts.append(f"{{notes: {meta.notes}}}")

        return "\n".join(parts).strip()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_section(section: Section) -> list[str]:
    """Return the rendered lines of *section*; empty if none has text."""
    return [render_line(line) for line in section.lines if line.text.strip()]


def render_line(line: LyricLine) -> str:
    """Return *line* with its chords inserted inline as ``[note]``.

    The text is trimmed first; chord indices move left with any leading
    whitespace and are clamped to the trimmed length.  Chords go in from the
    highest index down so each insertion leaves the lower offsets untouched.
    Chords sharing an index keep their order.
    """
    lead = len(line.text) - len(line.text.lstrip())
    result = line.text.strip()
    length = len(result)
    ordered = sorted(line.chords, key=lambda c: c.index)
    for chord in reversed(ordered):
        pos = min(max(chord.index - lead, 0), length)
        result = result[:pos] + f"[{chord.note}]" + result[pos:]
    return result


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def generate_chordpro(song: ParsedSong) -> str:
    return ChordProFormatter().render(song)


def transform_to_chordpro(text: str, detector: ChordLineDetector | None = None) -> str:
    """Parse typed song *text* and return canonical ChordPro."""
    return generate_chordpro(parse_original_format(text, detector=detector))


def render_lyrics_lines(metadata: SongMetadata, lines: list[LyricLine]) -> str:
    """Render the API's ``lyricsLines`` with the same formatter.

    Consecutive lines of one section share a ``{section}`` block; lines
    without a section go under ``{verse}``.
    """
    return generate_chordpro(ParsedSong.from_lyrics_lines(metadata, lines))
