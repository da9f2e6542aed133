"""Data models produced by a Standard MIDI File parse."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from os import PathLike
from typing import TYPE_CHECKING, BinaryIO, Optional, Tuple, Union

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from app.config import ParserConfig

SmfSource = Union[str, "PathLike[str]", bytes, bytearray, memoryview, BinaryIO]

HEADER_TAG = b"MThd"
TRACK_TAG = b"MTrk"
STANDARD_HEADER_LENGTH = 6


class EventKind(str, Enum):
    """Closed set of event variants a track can contain."""

    NOTE_ON = "note_on"
    NOTE_OFF = "note_off"
    PROGRAM_CHANGE = "program_change"
    CONTROL_CHANGE = "control_change"
    PITCH_BEND = "pitch_bend"
    SYSEX_OR_META = "sysex_or_meta"
    UNKNOWN = "unknown"


class MetaType(IntEnum):
    """Meta-event type bytes defined by SMF 1.1."""

    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


TEXT_META_TYPES = frozenset(
    {
        MetaType.TEXT,
        MetaType.COPYRIGHT,
        MetaType.TRACK_NAME,
        MetaType.INSTRUMENT_NAME,
        MetaType.LYRIC,
        MetaType.MARKER,
        MetaType.CUE_POINT,
    }
)


@dataclass(frozen=True)
class Division:
    """Interpretation of the header's raw 16-bit division word."""

    raw: int

    @property
    def is_smpte(self) -> bool:
        return bool(self.raw & 0x8000)

    @property
    def ticks_per_quarter(self) -> Optional[int]:
        if self.is_smpte:
            return None
        return self.raw

    @property
    def smpte_format(self) -> Optional[int]:
        """Negative frames-per-second value (-24, -25, -29 or -30)."""
        if not self.is_smpte:
            return None
        return ((self.raw >> 8) & 0xFF) - 0x100

    @property
    def ticks_per_frame(self) -> Optional[int]:
        if not self.is_smpte:
            return None
        return self.raw & 0xFF


@dataclass(frozen=True)
class HeaderChunk:
    """Contents of the ``MThd`` chunk."""

    format: int
    track_count: int
    division: int
    length: int = STANDARD_HEADER_LENGTH

    @property
    def timing(self) -> Division:
        return Division(self.division)


@dataclass(frozen=True)
class NoteData:
    channel: int
    key: int
    velocity: int


@dataclass(frozen=True)
class TrackEvent:
    """One decoded event; ``note_index`` points into the track's note table."""

    kind: EventKind
    delta_ticks: int
    note_index: Optional[int] = None
    tick: int = 0


@dataclass(frozen=True)
class MetaEvent:
    tick: int
    meta_type: int
    data: bytes
    event_index: int = -1

    @property
    def kind(self) -> Optional[MetaType]:
        try:
            return MetaType(self.meta_type)
        except ValueError:
            return None

    def text(self, encoding: str = "latin-1") -> str:
        return self.data.decode(encoding, errors="replace")


@dataclass(frozen=True)
class SysexEvent:
    """Opaque system-exclusive payload introduced by ``0xF0`` or ``0xF7``."""

    tick: int
    status: int
    data: bytes
    event_index: int = -1


@dataclass(frozen=True)
class TimeSignature:
    numerator: int
    denominator_power: int
    clocks_per_click: int
    thirty_seconds_per_quarter: int

    @property
    def denominator(self) -> int:
        return 2 ** self.denominator_power


@dataclass(frozen=True)
class KeySignature:
    sharps_flats: int
    minor: bool


@dataclass(frozen=True)
class TrackChunk:
    """Decoded ``MTrk`` chunk.

    ``cumulative_ticks`` is the sum of every delta-time in the track, which is
    unrelated to ``declared_byte_length``.  ``tempo_micros_per_quarter`` stays
    0 unless a Set Tempo meta event appeared; the last one wins.
    """

    declared_byte_length: int
    cumulative_ticks: int
    tempo_micros_per_quarter: int
    events: Tuple[TrackEvent, ...]
    notes: Tuple[NoteData, ...]
    name: Optional[str] = None
    time_signature: Optional[TimeSignature] = None
    key_signature: Optional[KeySignature] = None
    meta_events: Tuple[MetaEvent, ...] = ()
    sysex_events: Tuple[SysexEvent, ...] = ()

    @property
    def bpm(self) -> int:
        if self.tempo_micros_per_quarter == 0:
            return 0
        return 60_000_000 // self.tempo_micros_per_quarter

    def note_for(self, event: TrackEvent) -> Optional[NoteData]:
        if event.note_index is None or event.kind not in (EventKind.NOTE_ON, EventKind.NOTE_OFF):
            return None
        return self.notes[event.note_index]


@dataclass(frozen=True)
class TrackIssue:
    """Problem recorded while decoding a track in lenient mode."""

    track_index: int
    offset: int
    tick: int
    detail: str


@dataclass(frozen=True)
class SMFDocument:
    """One header plus its track chunks in file order."""

    header: HeaderChunk
    tracks: Tuple[TrackChunk, ...]
    mode: str = "strict"
    issues: Tuple[TrackIssue, ...] = ()

    @classmethod
    def open(
        cls,
        source: SmfSource,
        *,
        mode: Optional[str] = None,
        config: Optional["ParserConfig"] = None,
    ) -> "SMFDocument":
        from .reader import read_smf

        return read_smf(source, mode=mode, config=config)

    def tempo_track(self) -> Optional[TrackChunk]:
        for track in self.tracks:
            if track.tempo_micros_per_quarter:
                return track
        return None

    def effective_tempo(self, default: int = 0) -> int:
        track = self.tempo_track()
        if track is None:
            return default
        return track.tempo_micros_per_quarter


__all__ = [
    "Division",
    "EventKind",
    "HEADER_TAG",
    "HeaderChunk",
    "KeySignature",
    "MetaEvent",
    "MetaType",
    "NoteData",
    "SMFDocument",
    "STANDARD_HEADER_LENGTH",
    "SmfSource",
    "SysexEvent",
    "TEXT_META_TYPES",
    "TRACK_TAG",
    "TimeSignature",
    "TrackChunk",
    "TrackEvent",
    "TrackIssue",
]
