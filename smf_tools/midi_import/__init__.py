"""Public facade for Standard MIDI File decoding."""

from .errors import BadTagError, FormatError, MalformedVLQError, TruncatedStreamError
from .models import (
    Division,
    EventKind,
    HeaderChunk,
    KeySignature,
    MetaEvent,
    MetaType,
    NoteData,
    SMFDocument,
    SysexEvent,
    TimeSignature,
    TrackChunk,
    TrackEvent,
    TrackIssue,
)
from .streams import ByteCursor, unpack_be
from .header import read_header
from .decoders import TrackChunkDecoder, read_track
from .reader import load_bytes, parse_smf, read_smf

__all__ = [
    "BadTagError",
    "ByteCursor",
    "Division",
    "EventKind",
    "FormatError",
    "HeaderChunk",
    "KeySignature",
    "MalformedVLQError",
    "MetaEvent",
    "MetaType",
    "NoteData",
    "SMFDocument",
    "SysexEvent",
    "TimeSignature",
    "TrackChunk",
    "TrackChunkDecoder",
    "TrackEvent",
    "TrackIssue",
    "TruncatedStreamError",
    "load_bytes",
    "parse_smf",
    "read_header",
    "read_smf",
    "read_track",
    "unpack_be",
]
