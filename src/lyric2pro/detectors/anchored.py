"""Anchored chord-line detector (legacy behaviour).

The whole trimmed line must be one or two chord tokens separated by
whitespace or hyphens.  Lines with three or more chords are not
recognized and fall through to the mixed chord/lyric scan.
"""

from .base import ChordLineDetector
from .utils import TWO_CHORD_LINE_RE


class AnchoredDetector(ChordLineDetector):

    name = "anchored"

    def is_chord_only_line(self, line: str) -> bool:
        return TWO_CHORD_LINE_RE.fullmatch(line.strip()) is not None
