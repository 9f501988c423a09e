from .detectors.anchored import AnchoredDetector
from .detectors.base import ChordLineDetector
from .detectors.character_class import CharacterClassDetector
from .exceptions import UnknownDetectorError

_DETECTORS: list[type[ChordLineDetector]] = [
    CharacterClassDetector,
    AnchoredDetector,
]

DEFAULT_DETECTOR = CharacterClassDetector.name


def detector_names() -> list[str]:
    return [cls.name for cls in _DETECTORS]


def get_detector(name: str = DEFAULT_DETECTOR) -> ChordLineDetector:
    """Return an instantiated chord-line detector registered under *name*.

    Raises UnknownDetectorError if no detector matches.
    """
    for cls in _DETECTORS:
        if cls.name == name:
            return cls()
    raise UnknownDetectorError(name)
