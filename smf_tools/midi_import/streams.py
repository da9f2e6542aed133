"""Byte cursor shared by the SMF chunk decoders."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from .errors import MalformedVLQError, TruncatedStreamError

MAX_VLQ_BYTES = 4


def unpack_be(data: bytes, width: int, *, offset: int = 0) -> int:
    """Decode ``width`` bytes of ``data`` as an unsigned big-endian integer."""

    if width <= 0:
        raise ValueError("Width must be positive.")
    if len(data) < width:
        raise TruncatedStreamError(
            "Big-endian field is shorter than its width",
            offset=offset,
            expected=f"{width} bytes",
            found=f"{len(data)} bytes",
        )
    return int.from_bytes(data[:width], "big", signed=False)


class ByteCursor:
    """Forward-only reader over an immutable buffer with a narrowable fence.

    Every read is bounded by the fence, which is the end of the buffer unless
    a chunk decoder narrowed it to its own declared length.  Reads that would
    cross the fence raise :class:`TruncatedStreamError` instead of returning
    short data.
    """

    __slots__ = ("_data", "_length", "_position", "_fence")

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._length = len(self._data)
        self._position = 0
        self._fence = self._length

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def position(self) -> int:
        return self._position

    @property
    def fence(self) -> int:
        return self._fence

    @property
    def size(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._fence - self._position

    def tell(self) -> int:
        return self._position

    def has_next(self, offset: int = 1) -> bool:
        target = self._position + offset
        return target < self._length and target < self._fence

    def consume(self, size: int = 1) -> int:
        """Advance up to ``size`` bytes, stopping at the fence."""

        if size < 0:
            raise ValueError("Size must be non-negative.")
        advanced = min(size, self.remaining)
        self._position += advanced
        return advanced

    def peek_byte(self) -> int:
        if self._position >= self._fence:
            raise self._truncated(1)
        return self._data[self._position]

    def read_byte(self) -> int:
        value = self.peek_byte()
        self._position += 1
        return value

    def peek_bytes(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if size > self.remaining:
            raise self._truncated(size)
        start = self._position
        return self._data[start : start + size]

    def read_bytes(self, size: int) -> bytes:
        payload = self.peek_bytes(size)
        self._position += size
        return payload

    def read_string(self, size: int, encoding: str = "latin-1") -> str:
        return self.read_bytes(size).decode(encoding, errors="replace")

    def read_uint16(self) -> int:
        offset = self._position
        return unpack_be(self.read_bytes(2), 2, offset=offset)

    def read_uint32(self) -> int:
        offset = self._position
        return unpack_be(self.read_bytes(4), 4, offset=offset)

    def read_vlq(self, *, max_bytes: int = MAX_VLQ_BYTES) -> int:
        """Decode a MIDI variable-length quantity of at most ``max_bytes``."""

        start = self._position
        value = 0
        for _ in range(max(1, max_bytes)):
            byte = self.read_byte()
            value = (value << 7) | (byte & 0x7F)
            if byte & 0x80 == 0:
                return value
        raise MalformedVLQError(
            "Variable-length quantity exceeds maximum length",
            offset=start,
            expected=f"at most {max_bytes} bytes",
            found=self._data[start : self._position].hex(" "),
        )

    def narrow_fence(self, size: int) -> None:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        candidate = self._position + size
        if candidate < self._fence:
            self._fence = candidate

    def reset_fence(self) -> None:
        self._fence = self._length

    @contextmanager
    def bounded(self, size: int) -> Iterator["ByteCursor"]:
        """Narrow the fence to ``size`` bytes for the duration of the block."""

        previous = self._fence
        self.narrow_fence(size)
        try:
            yield self
        finally:
            self._fence = previous

    def _truncated(self, size: int) -> TruncatedStreamError:
        return TruncatedStreamError(
            "Unexpected end of MIDI data",
            offset=self._position,
            expected=f"{size} bytes",
            found=f"{self.remaining} bytes",
        )


__all__ = ["ByteCursor", "MAX_VLQ_BYTES", "unpack_be"]
