"""Typed decode failures raised while reading Standard MIDI Files."""
from __future__ import annotations

from typing import Any


class FormatError(ValueError):
    """Base class for every SMF decode failure.

    Subclasses :class:`ValueError` so callers that already guard MIDI reads
    with ``except ValueError`` keep working.
    """

    def __init__(
        self,
        detail: str,
        *,
        offset: int,
        expected: Any = None,
        found: Any = None,
    ) -> None:
        self.detail = detail
        self.offset = int(offset)
        self.expected = expected
        self.found = found
        super().__init__(self._render())

    def _render(self) -> str:
        message = f"{self.detail} at byte {self.offset}"
        if self.expected is not None or self.found is not None:
            message += f" (expected {self.expected!r}, found {self.found!r})"
        return message


class BadTagError(FormatError):
    """A chunk did not start with the expected four-byte tag."""


class TruncatedStreamError(FormatError):
    """A fixed-size read needed more bytes than the active region holds."""


class MalformedVLQError(FormatError):
    """A variable-length quantity kept its continuation bit past the cap."""


__all__ = [
    "BadTagError",
    "FormatError",
    "MalformedVLQError",
    "TruncatedStreamError",
]
