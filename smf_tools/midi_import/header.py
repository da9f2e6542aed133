"""Decoder for the ``MThd`` header chunk."""
from __future__ import annotations

import logging

from .errors import BadTagError
from .models import HEADER_TAG, STANDARD_HEADER_LENGTH, HeaderChunk
from .streams import ByteCursor

logger = logging.getLogger(__name__)


def expect_chunk_tag(cursor: ByteCursor, tag: bytes) -> None:
    """Consume ``tag`` at the cursor or raise :class:`BadTagError`."""

    offset = cursor.tell()
    found = cursor.peek_bytes(min(len(tag), cursor.remaining))
    if found != tag:
        raise BadTagError(
            f"Not a {tag.decode('ascii')} chunk",
            offset=offset,
            expected=tag,
            found=found,
        )
    cursor.consume(len(tag))


def read_header(cursor: ByteCursor) -> HeaderChunk:
    """Read the file header at the cursor.

    A declared length other than 6 is tolerated; any bytes beyond the three
    standard fields are skipped so the first track chunk stays aligned.
    """

    expect_chunk_tag(cursor, HEADER_TAG)
    length = cursor.read_uint32()
    format_type = cursor.read_uint16()
    track_count = cursor.read_uint16()
    division = cursor.read_uint16()

    if length != STANDARD_HEADER_LENGTH:
        logger.warning("MIDI header declares length %d (expected %d)", length, STANDARD_HEADER_LENGTH)
        if length > STANDARD_HEADER_LENGTH:
            cursor.consume(length - STANDARD_HEADER_LENGTH)

    return HeaderChunk(
        format=format_type,
        track_count=track_count,
        division=division,
        length=length,
    )


__all__ = ["expect_chunk_tag", "read_header"]
