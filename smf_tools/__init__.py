import logging

from .midi_import import (
    BadTagError,
    ByteCursor,
    EventKind,
    FormatError,
    HeaderChunk,
    MalformedVLQError,
    MetaType,
    NoteData,
    SMFDocument,
    TrackChunk,
    TrackEvent,
    TrackIssue,
    TruncatedStreamError,
    read_smf,
)
from .pitch import key_to_frequency, midi_to_name, midi_to_pitch, parse_note_name
from .playback import ScheduledEvent, build_schedule, schedule_document
from .describe import describe_document, describe_event, describe_header, describe_track

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = [
    "read_smf",
    "SMFDocument",
    "HeaderChunk",
    "TrackChunk",
    "TrackEvent",
    "TrackIssue",
    "NoteData",
    "EventKind",
    "MetaType",
    "ByteCursor",
    "FormatError",
    "BadTagError",
    "TruncatedStreamError",
    "MalformedVLQError",
    "key_to_frequency",
    "midi_to_pitch",
    "midi_to_name",
    "parse_note_name",
    "ScheduledEvent",
    "build_schedule",
    "schedule_document",
    "describe_header",
    "describe_track",
    "describe_event",
    "describe_document",
]
