"""Human-readable summaries of decoded MIDI structures.

Rendering lives here so the data model keeps raw bytes; sysex and
sequencer-specific payloads are shown as hex only at display time.
"""
from __future__ import annotations

from typing import Dict, List

from shared.tempo import bpm_from_micros

from .midi_import.models import (
    EventKind,
    HeaderChunk,
    MetaEvent,
    MetaType,
    SMFDocument,
    SysexEvent,
    TEXT_META_TYPES,
    TrackChunk,
)

_META_LABELS = {
    MetaType.SEQUENCE_NUMBER: "Sequence Number",
    MetaType.TEXT: "Text Event",
    MetaType.COPYRIGHT: "Copyright Notice",
    MetaType.TRACK_NAME: "Track Name",
    MetaType.INSTRUMENT_NAME: "Instrument Name",
    MetaType.LYRIC: "Lyric",
    MetaType.MARKER: "Marker",
    MetaType.CUE_POINT: "Cue Point",
    MetaType.CHANNEL_PREFIX: "MIDI Channel Prefix",
    MetaType.END_OF_TRACK: "End of Track",
    MetaType.SET_TEMPO: "Set Tempo",
    MetaType.SMPTE_OFFSET: "SMPTE Offset",
    MetaType.TIME_SIGNATURE: "Time Signature",
    MetaType.KEY_SIGNATURE: "Key Signature",
    MetaType.SEQUENCER_SPECIFIC: "Sequencer Specific Meta-Event",
}


def describe_header(header: HeaderChunk) -> str:
    return (
        f"MThd {{ length: {header.length}, format: {header.format}, "
        f"tracks: {header.track_count}, division: {header.division} }}"
    )


def describe_track(track: TrackChunk) -> str:
    return (
        f"MTrk {{ tempo: {track.tempo_micros_per_quarter} us, BPM: {track.bpm}, "
        f"events: {len(track.events)}, length: {track.cumulative_ticks} }}"
    )


def describe_event(track: TrackChunk, index: int, encoding: str = "latin-1") -> str:
    """Render ``track.events[index]`` as one line prefixed by its delta-time."""

    event = track.events[index]
    prefix = f"{event.delta_ticks}"
    if event.kind in (EventKind.NOTE_ON, EventKind.NOTE_OFF):
        note = track.note_for(event)
        label = "Note On" if event.kind is EventKind.NOTE_ON else "Note Off"
        return f"{prefix} {label} CH: {note.channel}, Key: {note.key}, Vel {note.velocity}"
    if event.kind is EventKind.SYSEX_OR_META:
        payloads = _payloads_by_event(track)
        payload = payloads.get(index)
        if isinstance(payload, MetaEvent):
            return f"{prefix} {_describe_meta(payload, encoding)}"
        if isinstance(payload, SysexEvent):
            label = "Begin" if payload.status == 0xF0 else "End"
            return f"{prefix} System Exclusive {label}: {payload.data.hex(' ')}"
        return f"{prefix} System Exclusive/Meta"
    labels = {
        EventKind.PROGRAM_CHANGE: "Program Change",
        EventKind.CONTROL_CHANGE: "Control Change",
        EventKind.PITCH_BEND: "Pitch Bend",
        EventKind.UNKNOWN: "Not Implemented",
    }
    return f"{prefix} {labels[event.kind]}"


def describe_document(document: SMFDocument, *, events: bool = False) -> List[str]:
    lines = [describe_header(document.header)]
    for track in document.tracks:
        lines.append(describe_track(track))
        if events:
            lines.extend(f"  {describe_event(track, index)}" for index in range(len(track.events)))
    for issue in document.issues:
        lines.append(f"! track {issue.track_index} @ {issue.offset} (tick {issue.tick}): {issue.detail}")
    return lines


def _describe_meta(meta: MetaEvent, encoding: str) -> str:
    kind = meta.kind
    if kind is None:
        return f"Unrecognised Meta Event: {meta.meta_type:#04x}"
    label = _META_LABELS[kind]
    if kind in TEXT_META_TYPES:
        return f"{label}: {meta.text(encoding)}"
    if kind is MetaType.SET_TEMPO and len(meta.data) >= 3:
        tempo = int.from_bytes(meta.data[:3], "big")
        bpm = int(bpm_from_micros(tempo))
        return f"{label} {tempo} us ({bpm} BPM)"
    if kind is MetaType.TIME_SIGNATURE and len(meta.data) >= 4:
        numerator, power, clocks, quarter = meta.data[:4]
        return f"{label} {numerator}/{2 ** power}, {clocks} MIDI clocks, {quarter}"
    if kind is MetaType.SEQUENCER_SPECIFIC:
        return f"{label}: {meta.data.hex(' ')}"
    return label


def _payloads_by_event(track: TrackChunk) -> Dict[int, object]:
    payloads: Dict[int, object] = {meta.event_index: meta for meta in track.meta_events}
    payloads.update({sysex.event_index: sysex for sysex in track.sysex_events})
    return payloads


__all__ = ["describe_document", "describe_event", "describe_header", "describe_track"]
