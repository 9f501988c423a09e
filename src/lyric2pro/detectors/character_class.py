"""Character-class chord-line detector (the default).

A line qualifies when it has at least one chord token and no alphabetic
character survives once the chord tokens are removed.  Digits, spaces,
hyphens and bar marks are allowed, so ``"C   G   Am"`` and ``"| D - A |"``
are chord lines while ``"Cuando el cielo truena"`` is not.
"""

from .base import ChordLineDetector
from .utils import find_chords, strip_chords


class CharacterClassDetector(ChordLineDetector):

    name = "character-class"

    def is_chord_only_line(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped or not find_chords(stripped):
            return False
        return not any(ch.isalpha() for ch in strip_chords(stripped))
