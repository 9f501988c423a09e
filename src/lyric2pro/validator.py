"""Checks that typed song text has what the transformer needs.

All checks run and accumulate; nothing here raises.  The caller decides
whether an invalid song may still be submitted.
"""

from dataclasses import dataclass, field

from .parser import detect_style, metadata_field, split_lines

EMPTY_TEXT = "text is empty"
NO_TITLE = 'no title found (expected a line starting with "title ")'
NO_ARTIST = 'no artist found (expected a line starting with "artist ")'
NO_CONTENT = "no content found (lyrics or chords)"


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "errors": list(self.errors)}


def validate_original_format(text: str) -> ValidationResult:
    """Return the problems found in *text*.

    Empty or whitespace-only text gives a single error.  Otherwise a missing
    title, a missing artist and a missing body are each reported.
    """
    if not text.strip():
        return ValidationResult(errors=[EMPTY_TEXT])

    lines = split_lines(text)
    style = detect_style(lines)
    fields = [metadata_field(line, style) for line in lines]
    present = {found[0] for found in fields if found is not None}

    errors: list[str] = []
    if "title" not in present:
        errors.append(NO_TITLE)
    if "artist" not in present:
        errors.append(NO_ARTIST)
    if all(found is not None for found in fields):
        errors.append(NO_CONTENT)
    return ValidationResult(errors=errors)
