"""Track chunk decoding: delta-times, running status and meta/sysex dispatch."""
from __future__ import annotations

import logging
from typing import List, Optional

from .errors import TruncatedStreamError
from .header import expect_chunk_tag
from .models import (
    TRACK_TAG,
    EventKind,
    KeySignature,
    MetaEvent,
    MetaType,
    NoteData,
    SysexEvent,
    TimeSignature,
    TrackChunk,
    TrackEvent,
)
from .streams import MAX_VLQ_BYTES, ByteCursor, unpack_be

logger = logging.getLogger(__name__)

_UNKNOWN_DATA_LENGTHS = {0xA0: 2, 0xD0: 1}


class TrackChunkDecoder:
    """Decode one ``MTrk`` chunk from a shared :class:`ByteCursor`.

    The cursor's fence is narrowed to the chunk's declared length while events
    are decoded and restored afterwards, including when decoding fails.
    """

    def __init__(
        self,
        cursor: ByteCursor,
        *,
        max_vlq_bytes: int = MAX_VLQ_BYTES,
        text_encoding: str = "latin-1",
    ):
        self.cursor = cursor
        self.max_vlq_bytes = max_vlq_bytes
        self.text_encoding = text_encoding
        self.declared_byte_length = 0
        self.chunk_end = cursor.tell()
        self.tick = 0
        self.running_status = 0
        self.tempo = 0
        self.name: Optional[str] = None
        self.time_signature: Optional[TimeSignature] = None
        self.key_signature: Optional[KeySignature] = None
        self.events: List[TrackEvent] = []
        self.notes: List[NoteData] = []
        self.meta_events: List[MetaEvent] = []
        self.sysex_events: List[SysexEvent] = []

    @classmethod
    def read(
        cls,
        cursor: ByteCursor,
        *,
        max_vlq_bytes: int = MAX_VLQ_BYTES,
        text_encoding: str = "latin-1",
    ) -> TrackChunk:
        decoder = cls(cursor, max_vlq_bytes=max_vlq_bytes, text_encoding=text_encoding)
        decoder.read_chunk_header()
        decoder.decode_events()
        return decoder.build()

    def read_chunk_header(self) -> None:
        cursor = self.cursor
        expect_chunk_tag(cursor, TRACK_TAG)
        self.declared_byte_length = cursor.read_uint32()
        self.chunk_end = cursor.tell() + self.declared_byte_length
        if self.chunk_end > cursor.size:
            raise TruncatedStreamError(
                "Track chunk extends past end of data",
                offset=cursor.tell(),
                expected=f"{self.declared_byte_length} bytes",
                found=f"{cursor.size - cursor.tell()} bytes",
            )

    def decode_events(self) -> None:
        cursor = self.cursor
        with cursor.bounded(self.declared_byte_length):
            while cursor.has_next():
                self._decode_event()
            # A single trailing byte cannot hold an event; drop it to stay aligned.
            cursor.consume(cursor.remaining)

    def build(self) -> TrackChunk:
        return TrackChunk(
            declared_byte_length=self.declared_byte_length,
            cumulative_ticks=self.tick,
            tempo_micros_per_quarter=self.tempo,
            events=tuple(self.events),
            notes=tuple(self.notes),
            name=self.name,
            time_signature=self.time_signature,
            key_signature=self.key_signature,
            meta_events=tuple(self.meta_events),
            sysex_events=tuple(self.sysex_events),
        )

    def _decode_event(self) -> None:
        cursor = self.cursor
        delta = cursor.read_vlq(max_bytes=self.max_vlq_bytes)
        self.tick += delta

        status, explicit = self._consume_status_byte()
        event_type = status & 0xF0
        channel = status & 0x0F

        if status == 0xFF:
            self._emit(EventKind.SYSEX_OR_META, delta)
            self._parse_meta()
        elif status in (0xF0, 0xF7):
            self._emit(EventKind.SYSEX_OR_META, delta)
            self._parse_sysex(status)
        elif event_type == 0xC0:
            program = cursor.read_byte() & 0x7F
            logger.debug("%d Program Change CH: %d, PR: %d", delta, channel, program)
            self._emit(EventKind.PROGRAM_CHANGE, delta)
        elif event_type in (0x90, 0x80):
            self._parse_note_event(event_type, channel, delta)
        elif event_type == 0xB0:
            controller = cursor.read_byte() & 0x7F
            value = cursor.read_byte() & 0x7F
            logger.debug("%d Control Change CH: %d, c: %d, v: %d", delta, channel, controller, value)
            self._emit(EventKind.CONTROL_CHANGE, delta)
        elif event_type == 0xE0:
            lsb = cursor.read_byte() & 0x7F
            msb = cursor.read_byte() & 0x7F
            logger.debug("%d Pitch Bend CH: %d, l: %d, m: %d", delta, channel, lsb, msb)
            self._emit(EventKind.PITCH_BEND, delta, note_index=0)
        else:
            self._skip_unknown(status, explicit)
            self._emit(EventKind.UNKNOWN, delta)

    def _consume_status_byte(self) -> tuple[int, bool]:
        cursor = self.cursor
        status = cursor.peek_byte()
        if status & 0x80 == 0:
            # Running status: the peeked byte is the first data byte.
            return self.running_status, False
        cursor.consume(1)
        self.running_status = 0 if status >= 0xF0 else status
        return status, True

    def _emit(self, kind: EventKind, delta: int, *, note_index: Optional[int] = None) -> None:
        self.events.append(
            TrackEvent(kind=kind, delta_ticks=delta, note_index=note_index, tick=self.tick)
        )

    def _parse_note_event(self, event_type: int, channel: int, delta: int) -> None:
        cursor = self.cursor
        key = cursor.read_byte() & 0x7F
        velocity = cursor.read_byte() & 0x7F
        kind = EventKind.NOTE_ON if event_type == 0x90 else EventKind.NOTE_OFF
        logger.debug(
            "%d %s CH: %d, Key: %d, Vel %d",
            delta,
            "Note On" if kind is EventKind.NOTE_ON else "Note Off",
            channel,
            key,
            velocity,
        )
        self._emit(kind, delta, note_index=len(self.notes))
        self.notes.append(NoteData(channel=channel, key=key, velocity=velocity))

    def _parse_meta(self) -> None:
        cursor = self.cursor
        meta_type = cursor.read_byte()
        length = cursor.read_vlq(max_bytes=self.max_vlq_bytes)
        payload_offset = cursor.tell()
        payload = cursor.read_bytes(length)
        self.meta_events.append(
            MetaEvent(
                tick=self.tick,
                meta_type=meta_type,
                data=payload,
                event_index=len(self.events) - 1,
            )
        )

        if meta_type == MetaType.SET_TEMPO:
            self.tempo = unpack_be(payload, 3, offset=payload_offset)
            logger.debug("Set Tempo %d us", self.tempo)
        elif meta_type == MetaType.TIME_SIGNATURE:
            _require(payload, 4, "Time Signature", payload_offset)
            self.time_signature = TimeSignature(
                numerator=payload[0],
                denominator_power=payload[1],
                clocks_per_click=payload[2],
                thirty_seconds_per_quarter=payload[3],
            )
            logger.debug(
                "Time Signature %d/%d, %d MIDI clocks, %d",
                payload[0],
                self.time_signature.denominator,
                payload[2],
                payload[3],
            )
        elif meta_type == MetaType.KEY_SIGNATURE:
            _require(payload, 2, "Key Signature", payload_offset)
            sharps_flats = payload[0] - 0x100 if payload[0] & 0x80 else payload[0]
            self.key_signature = KeySignature(sharps_flats=sharps_flats, minor=payload[1] == 1)
        elif meta_type == MetaType.TRACK_NAME:
            self.name = payload.decode(self.text_encoding, errors="replace")
            logger.debug("Track Name: %s", self.name)
        elif meta_type == MetaType.SEQUENCER_SPECIFIC:
            logger.debug("Sequencer Specific Meta-Event: %s", payload.hex(" "))
        else:
            try:
                label = MetaType(meta_type).name
            except ValueError:
                logger.debug("Unrecognised Meta Event: %#04x (%d bytes)", meta_type, length)
            else:
                logger.debug("%s (%d bytes)", label, length)

    def _parse_sysex(self, status: int) -> None:
        cursor = self.cursor
        length = cursor.read_vlq(max_bytes=self.max_vlq_bytes)
        payload = cursor.read_bytes(length)
        self.sysex_events.append(
            SysexEvent(
                tick=self.tick,
                status=status,
                data=payload,
                event_index=len(self.events) - 1,
            )
        )
        logger.debug(
            "System Exclusive %s: %s",
            "Begin" if status == 0xF0 else "End",
            payload.hex(" "),
        )

    def _skip_unknown(self, status: int, explicit: bool) -> None:
        cursor = self.cursor
        data_length = _UNKNOWN_DATA_LENGTHS.get(status & 0xF0, 0)
        if data_length:
            cursor.read_bytes(data_length)
        elif not explicit:
            # Data byte with no running status to attach it to.
            cursor.consume(1)
        logger.debug("Not Implemented: %#04x", status)


def _require(payload: bytes, size: int, label: str, offset: int) -> None:
    if len(payload) < size:
        raise TruncatedStreamError(
            f"{label} payload is too short",
            offset=offset,
            expected=f"{size} bytes",
            found=f"{len(payload)} bytes",
        )


def read_track(
    cursor: ByteCursor,
    *,
    max_vlq_bytes: int = MAX_VLQ_BYTES,
    text_encoding: str = "latin-1",
) -> TrackChunk:
    """Read the ``MTrk`` chunk at the cursor."""

    return TrackChunkDecoder.read(cursor, max_vlq_bytes=max_vlq_bytes, text_encoding=text_encoding)


__all__ = ["TrackChunkDecoder", "read_track"]
