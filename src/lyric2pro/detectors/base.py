from abc import ABC, abstractmethod


class ChordLineDetector(ABC):
    """Abstract base class for chord-only line heuristics.

    A chord-only line sits above the lyric line it annotates; the parser
    pairs it with the following line instead of emitting it.
    """

    #: Name the detector is registered under.
    name: str = ""

    @abstractmethod
    def is_chord_only_line(self, line: str) -> bool:
        """Return True if *line* holds chord symbols and nothing else."""
