"""Convert a decoded track into a wall-clock schedule for a tone generator.

Nothing here touches the parsed model; the schedule is a fresh tuple each
time.  Devices that consume it (audio callbacks, buzzer drivers) live outside
this package.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from app.config import ParserConfig, get_parser_config
from shared.tempo import ticks_to_micros

from .midi_import.models import EventKind, SMFDocument, TrackChunk
from .pitch import key_to_frequency


@dataclass(frozen=True)
class ScheduledEvent:
    """A track event placed on the microsecond timeline."""

    kind: EventKind
    tick: int
    delta_micros: float
    at_micros: float
    channel: Optional[int] = None
    key: Optional[int] = None
    velocity: Optional[int] = None
    frequency: Optional[float] = None

    @property
    def sounding(self) -> bool:
        """True for a Note On that starts a tone (velocity 0 acts as release)."""
        return self.kind is EventKind.NOTE_ON and bool(self.velocity)


def build_schedule(track: TrackChunk, division: int, tempo_us: int) -> Tuple[ScheduledEvent, ...]:
    scheduled = []
    for event in track.events:
        note = track.note_for(event)
        scheduled.append(
            ScheduledEvent(
                kind=event.kind,
                tick=event.tick,
                delta_micros=ticks_to_micros(event.delta_ticks, tempo_us, division),
                at_micros=ticks_to_micros(event.tick, tempo_us, division),
                channel=note.channel if note else None,
                key=note.key if note else None,
                velocity=note.velocity if note else None,
                frequency=key_to_frequency(note.key) if note else None,
            )
        )
    return tuple(scheduled)


def schedule_document(
    document: SMFDocument,
    track_index: int,
    *,
    tempo_us: Optional[int] = None,
    config: Optional[ParserConfig] = None,
) -> Tuple[ScheduledEvent, ...]:
    """Schedule one track using the header division and the document tempo.

    The tempo comes from the first track that sets one unless ``tempo_us`` is
    given; files without any Set Tempo event use the configured default.
    """

    division = document.header.timing.ticks_per_quarter
    if division is None:
        raise ValueError("SMPTE time division is not supported for playback")
    if division <= 0:
        raise ValueError(f"Division must be a positive ticks-per-quarter value, got {division}")
    if tempo_us is None:
        config = config or get_parser_config()
        tempo_us = document.effective_tempo(default=config.default_tempo_us)
    return build_schedule(document.tracks[track_index], division, tempo_us)


__all__ = ["ScheduledEvent", "build_schedule", "schedule_document"]
