"""Typed song text → :class:`~lyric2pro.models.ParsedSong`.

The pipeline has three stages:

  1. extract_metadata()  — ``title``/``artist``/``key`` headers out of the body
  2. segment_sections()  — split the body at section headers
  3. parse_lyric_line() / align_chord_line() — chords and their offsets

Two input styles are understood:

  "plain"    — what people type::

                   title Cuan grande es Él
                   artist Tradicional
                   key G
                   Estrofa:
                   G          C
                   Señor mi Dios, al contemplar los cielos

  "chordpro" — the canonical output of :mod:`lyric2pro.chordpro`::

                   {title: Cuan grande es Él}
                   {verse}
                   [G]Señor mi Dios, al [C]contemplar los cielos

The style is detected per document: text whose first line is a
``{title: …}`` directive is ``"chordpro"``, anything else is ``"plain"``.
"""

import logging
import re

from .detectors.base import ChordLineDetector
from .detectors.utils import (
    BRACKET_CHORD_RE,
    find_chords,
    is_section_header,
    section_name,
    strip_chords,
)
from .models import Chord, LyricLine, ParsedSong, Section, SongMetadata
from .registry import get_detector

logger = logging.getLogger(__name__)

PLAIN = "plain"
CHORDPRO = "chordpro"

# Plain-style header prefixes (case-sensitive, trailing space required)
_METADATA_PREFIXES = (
    ("title ", "title"),
    ("artist ", "artist"),
    ("key ", "key"),
)

# {name} or {name: value}
DIRECTIVE_RE = re.compile(r"^\{\s*([^:{}]+?)\s*(?::\s*(.*?))?\s*\}$")

_METADATA_DIRECTIVES = {
    "title": "title",
    "t": "title",
    "artist": "artist",
    "key": "key",
    "notes": "notes",
}

_COMMENT_DIRECTIVES = ("comment", "c")

_TITLE_DIRECTIVES = ("title", "t")


# ---------------------------------------------------------------------------
# Line preparation
# ---------------------------------------------------------------------------


def split_lines(text: str) -> list[str]:
    """Split *text* into trimmed, non-blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def detect_style(lines: list[str]) -> str:
    """Return ``"chordpro"`` only when the first line is a title directive.

    Typed text may hold stray ``{…}`` lines (``{repetir}``) and stays plain.
    """
    if lines:
        m = DIRECTIVE_RE.match(lines[0].strip())
        if m and m.group(2) is not None and m.group(1).lower() in _TITLE_DIRECTIVES:
            return CHORDPRO
    return PLAIN


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def metadata_field(line: str, style: str) -> tuple[str, str] | None:
    """Return ``(field, value)`` if *line* is a metadata header, else None."""
    stripped = line.strip()
    if style == CHORDPRO:
        m = DIRECTIVE_RE.match(stripped)
        if not m:
            return None
        field_name = _METADATA_DIRECTIVES.get(m.group(1).lower())
        if field_name is None:
            return None
        return field_name, (m.group(2) or "").strip()

    for prefix, field_name in _METADATA_PREFIXES:
        if stripped.startswith(prefix):
            return field_name, stripped[len(prefix):].strip()
    return None


def extract_metadata(lines: list[str], style: str) -> tuple[SongMetadata, list[str]]:
    """Return the song metadata and the remaining body lines.

    A header that appears twice keeps its last value.
    """
    metadata = SongMetadata()
    body: list[str] = []
    for line in lines:
        found = metadata_field(line, style)
        if found is None:
            body.append(line)
            continue
        field_name, value = found
        setattr(metadata, field_name, value)
    return metadata, body


# ---------------------------------------------------------------------------
# Section headers
# ---------------------------------------------------------------------------


def header_name(line: str, style: str) -> str | None:
    """Return the canonical section name if *line* is a section header."""
    stripped = line.strip()
    if style == PLAIN:
        return section_name(stripped) if is_section_header(stripped) else None

    m = DIRECTIVE_RE.match(stripped)
    if not m:
        return None
    name, value = m.group(1).lower(), m.group(2)
    if name in _COMMENT_DIRECTIVES:
        if value and is_section_header(value):
            return section_name(value)
        return None
    if name.startswith("start_of_"):
        return section_name(name[len("start_of_"):])
    if value is not None or name.startswith("end_of_"):
        return None
    return section_name(name)


# ---------------------------------------------------------------------------
# Chord alignment
# ---------------------------------------------------------------------------


def align_chord_line(chord_line: str, lyric_line: str) -> LyricLine | None:
    """Anchor the chords of *chord_line* onto the text of *lyric_line*.

    Both lines are trimmed.  A chord's column in the chord line is reused as
    its index into the lyric text, clamped to the text length::

        chord_line = "C       G"
        lyric_line = "Hi"
        result     = LyricLine(text="Hi", chords=[C@0, G@2])

    Returns None if *lyric_line* is blank.
    """
    text = lyric_line.strip()
    if not text:
        return None
    chords = [
        Chord(note=m.group(), index=min(m.start(), len(text)))
        for m in find_chords(chord_line.strip())
    ]
    return LyricLine(text=text, chords=chords)


def _parse_bracketed(line: str) -> LyricLine:
    # each index is the bracket's position once earlier brackets are removed
    chords: list[Chord] = []
    removed = 0
    for m in BRACKET_CHORD_RE.finditer(line):
        chords.append(Chord(note=m.group(1), index=m.start() - removed))
        removed += len(m.group())
    text = BRACKET_CHORD_RE.sub("", line)
    lead = len(text) - len(text.lstrip())
    if lead:
        chords = [Chord(note=c.note, index=max(c.index - lead, 0)) for c in chords]
    return LyricLine(text=text.strip(), chords=chords)


def parse_lyric_line(line: str, style: str = PLAIN) -> LyricLine | None:
    """Parse a line that is neither a header nor a chord-only line.

    ``[G]`` brackets are read as inline ChordPro chords; in the chordpro
    style they are the only chords.  Otherwise every chord-grammar match is
    recorded at its offset in the line and removed from the lyric text::

        "Cuando Dios F nos ama"  ->  text="Cuando Dios  nos ama", chords=[F@12]

    Each match removes its own span, so ``"C Dios C"`` loses both ``C`` and
    the ``C`` of ``"Cuando"`` is never touched.
    """
    stripped = line.strip()
    if not stripped:
        return None
    if style == CHORDPRO or BRACKET_CHORD_RE.search(stripped):
        return _parse_bracketed(stripped)
    chords = [Chord(note=m.group(), index=m.start()) for m in find_chords(stripped)]
    return LyricLine(text=strip_chords(stripped).strip(), chords=chords)


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------


def segment_sections(
    body: list[str], style: str, detector: ChordLineDetector
) -> list[Section]:
    """Group *body* lines into sections, aligning chords along the way.

    Algorithm
    ---------
    1. A header closes the current section (kept only if it has lines) and
       opens a new one.  Repeated headers give distinct sections.
    2. Lines before the first header have no section and are dropped.
    3. A chord-only line (per *detector*, plain style only) is merged with
       the line right after it.  If that line is a header, or there is none,
       the chord line is dropped.
    4. Every other line goes through :func:`parse_lyric_line`.
    """
    sections: list[Section] = []
    current: Section | None = None

    i = 0
    while i < len(body):
        line = body[i].strip()

        name = header_name(line, style)
        if name is not None:
            if current is not None:
                if current.lines:
                    sections.append(current)
                else:
                    logger.debug("Dropping empty %s section", current.name)
            current = Section(name=name)
            i += 1
            continue

        if style == CHORDPRO and DIRECTIVE_RE.match(line):
            logger.debug("Skipping directive %r", line)
            i += 1
            continue

        if current is None:
            logger.debug("Discarding line before first section header: %r", line)
            i += 1
            continue

        if (
            style == PLAIN
            and not BRACKET_CHORD_RE.search(line)
            and detector.is_chord_only_line(line)
        ):
            following = body[i + 1] if i + 1 < len(body) else None
            if following is None or header_name(following, style) is not None:
                logger.debug("Dropping chord line with no lyric line: %r", line)
                i += 1
                continue
            aligned = align_chord_line(body[i], following)
            if aligned is not None:
                current.lines.append(aligned)
            i += 2
            continue

        parsed = parse_lyric_line(line, style)
        if parsed is not None:
            current.lines.append(parsed)
        i += 1

    if current is not None and current.lines:
        sections.append(current)

    return sections


# ---------------------------------------------------------------------------
# Full parser
# ---------------------------------------------------------------------------


def parse_original_format(
    text: str,
    detector: ChordLineDetector | None = None,
    style: str | None = None,
) -> ParsedSong:
    """Parse typed song text into a :class:`~lyric2pro.models.ParsedSong`.

    Never raises on string input; problems in the text are reported by
    :func:`lyric2pro.validator.validate_original_format` instead.

    Args:
        text:     Raw song text.
        detector: Chord-only line heuristic (default: character-class).
        style:    ``"plain"`` or ``"chordpro"``; detected when omitted.
    """
    lines = split_lines(text)
    style = style or detect_style(lines)
    detector = detector or get_detector()
    metadata, body = extract_metadata(lines, style)
    sections = segment_sections(body, style, detector)
    logger.debug(
        "Parsed %s song %r: %d section(s)", style, metadata.title, len(sections)
    )
    return ParsedSong(metadata=metadata, sections=sections)
