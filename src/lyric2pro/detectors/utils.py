"""Shared chord and section-header recognition used by the parser.

Chord grammar
-------------

A chord is a root letter ``A``-``G``, an optional accidental (``#`` or
``b``) and an optional quality from the closed set
``m maj min dim aug sus add 7 9 11 13``::

    C  F#  Bb  Am  Cmaj  Ddim  Esus  G7  A13

Section headers
---------------

Spanish and English keywords collapse to one canonical tag.  A plain-text
line is a header when it contains ``keyword:`` anywhere (``Coro:``,
``CORO: x2``), when the whole line is a bare keyword (``ESTROFA``), or
when the whole line is ``[keyword]``.
"""

import re

from ..models import DEFAULT_SECTION

# Longer qualities come first so "maj" is not read as "m" + "aj".
_QUALITIES = r"(?:maj|min|dim|aug|sus|add|m|11|13|7|9)"
_CHORD_PAT = r"[A-G][#b]?" + _QUALITIES + r"?"

# A chord token inside free text.  The trailing lookahead (rather than \b)
# keeps the "#" of a sharp chord inside the token.
CHORD_RE = re.compile(r"\b" + _CHORD_PAT + r"(?![\w#])")

# A whole line holding one or two chord tokens, e.g. "Am", "C - G"
TWO_CHORD_LINE_RE = re.compile(_CHORD_PAT + r"(?:[\s-]+" + _CHORD_PAT + r")?")

# An inline ChordPro chord: [G], [Am], [C#m].  Other brackets ([x2]) are text.
BRACKET_CHORD_RE = re.compile(r"\[(" + _CHORD_PAT + r")\]")

# A whole-line [label], e.g. "[Coro]"
BRACKET_LABEL_RE = re.compile(r"^\[([^\[\]]+)\]$")

# Canonical section tag -> accepted keywords, in matching order.
SECTION_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("intro", ("intro",)),
    ("interlude", ("interlude", "interludio")),
    ("verse", ("estrofa", "verso", "verse")),
    ("chorus", ("coro", "chorus", "estribillo")),
    ("bridge", ("puente", "bridge")),
    ("outro", ("outro",)),
    ("instrumental", ("instrumental",)),
    ("solo", ("solo",)),
    ("break", ("break",)),
)

SECTION_NAMES = frozenset(tag for tag, _ in SECTION_KEYWORDS)


def find_chords(line: str) -> list[re.Match]:
    """Return chord-grammar matches in *line*, left to right."""
    return list(CHORD_RE.finditer(line))


def strip_chords(line: str) -> str:
    """Return *line* with every chord-grammar match removed."""
    return CHORD_RE.sub("", line)


def _unbracket(line: str) -> str:
    m = BRACKET_LABEL_RE.match(line)
    return m.group(1).strip() if m else line


def is_section_header(line: str) -> bool:
    """Return True if the plain-text *line* opens a new section."""
    candidate = _unbracket(line.strip()).lower()
    for _, keywords in SECTION_KEYWORDS:
        for keyword in keywords:
            if f"{keyword}:" in candidate or candidate == keyword:
                return True
    return False


def section_name(label: str) -> str:
    """Map header text to its canonical section tag.

    Colon forms are checked before bare keywords; unrecognized text falls
    back to ``verse``.
    """
    candidate = _unbracket(label.strip()).lower()
    for tag, keywords in SECTION_KEYWORDS:
        if any(f"{keyword}:" in candidate for keyword in keywords):
            return tag
    for tag, keywords in SECTION_KEYWORDS:
        if candidate in keywords or candidate == tag:
            return tag
    return DEFAULT_SECTION
