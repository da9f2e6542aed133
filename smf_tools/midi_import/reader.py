"""Facade for reading whole Standard MIDI Files with optional recovery."""
from __future__ import annotations

import logging
from os import PathLike
from typing import List, Optional

from app.config import VALID_MODES, ParserConfig, get_parser_config

from .decoders import TrackChunkDecoder
from .errors import FormatError
from .header import read_header
from .models import HeaderChunk, SMFDocument, SmfSource, TrackChunk, TrackIssue
from .streams import ByteCursor

logger = logging.getLogger(__name__)


def load_bytes(source: SmfSource) -> bytes:
    """Materialize ``source`` fully into memory."""

    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, (str, PathLike)):
        with open(source, "rb") as handle:
            return handle.read()
    read = getattr(source, "read", None)
    if callable(read):
        data = read()
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("MIDI file objects must be opened in binary mode.")
        return bytes(data)
    raise TypeError(f"Unsupported MIDI source: {type(source).__name__}")


def read_smf(
    source: SmfSource,
    *,
    mode: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> SMFDocument:
    """Decode a Standard MIDI File from a path, buffer or binary file object.

    ``mode`` overrides the configured parse mode.  ``strict`` aborts on the
    first decode error, ``lenient`` records track-level errors as issues and
    keeps going, ``auto`` tries strict first and falls back to lenient.
    """

    config = config or get_parser_config()
    mode_normalized = (mode or config.mode).lower()
    if mode_normalized not in VALID_MODES:
        raise ValueError(f"Unsupported MIDI import mode: {mode}")

    data = load_bytes(source)

    if mode_normalized != "auto":
        return parse_smf(data, lenient=mode_normalized == "lenient", config=config)

    # Header failures are fatal in every mode, so only the tracks are retried.
    cursor = ByteCursor(data)
    header = _read_logged_header(cursor)
    tracks_start = cursor.tell()
    try:
        return _read_tracks(cursor, header, lenient=False, config=config)
    except FormatError as exc:
        logger.warning("Strict MIDI decode failed (%s); retrying in lenient mode", exc)
        retry = ByteCursor(data)
        retry.consume(tracks_start)
        return _read_tracks(retry, header, lenient=True, config=config)


def parse_smf(data: bytes, *, lenient: bool = False, config: Optional[ParserConfig] = None) -> SMFDocument:
    """Decode an in-memory SMF buffer in a single forward pass."""

    config = config or get_parser_config()
    cursor = ByteCursor(data)
    header = _read_logged_header(cursor)
    return _read_tracks(cursor, header, lenient=lenient, config=config)


def _read_logged_header(cursor: ByteCursor) -> HeaderChunk:
    header = read_header(cursor)
    logger.info(
        "MThd length=%d format=%d tracks=%d division=%d",
        header.length,
        header.format,
        header.track_count,
        header.division,
    )
    return header


def _read_tracks(
    cursor: ByteCursor,
    header: HeaderChunk,
    *,
    lenient: bool,
    config: ParserConfig,
) -> SMFDocument:
    tracks: List[TrackChunk] = []
    issues: List[TrackIssue] = []

    while cursor.has_next():
        track_index = len(tracks)
        decoder = TrackChunkDecoder(
            cursor,
            max_vlq_bytes=config.max_vlq_bytes,
            text_encoding=config.text_encoding,
        )
        try:
            decoder.read_chunk_header()
        except FormatError as exc:
            if not lenient:
                raise
            # Chunk framing is unknown past this point.
            issues.append(_issue_from(exc, track_index, tick=0))
            logger.warning("Stopped reading tracks at chunk %d: %s", track_index, exc)
            break

        try:
            decoder.decode_events()
        except FormatError as exc:
            if not lenient:
                raise
            issues.append(_issue_from(exc, track_index, tick=decoder.tick))
            logger.warning("Track %d truncated after %d events: %s", track_index, len(decoder.events), exc)
            cursor.consume(max(0, decoder.chunk_end - cursor.tell()))

        track = decoder.build()
        logger.info(
            "MTrk %d tempo=%d us events=%d ticks=%d",
            track_index,
            track.tempo_micros_per_quarter,
            len(track.events),
            track.cumulative_ticks,
        )
        tracks.append(track)

    if len(tracks) != header.track_count:
        logger.warning(
            "MIDI header declares %d tracks but %d were read", header.track_count, len(tracks)
        )

    return SMFDocument(
        header=header,
        tracks=tuple(tracks),
        mode="lenient" if lenient else "strict",
        issues=tuple(sorted(issues, key=lambda issue: (issue.track_index, issue.offset, issue.tick, issue.detail))),
    )


def _issue_from(exc: FormatError, track_index: int, *, tick: int) -> TrackIssue:
    return TrackIssue(track_index=track_index, offset=exc.offset, tick=int(tick), detail=str(exc))


__all__ = ["load_bytes", "parse_smf", "read_smf"]
