"""Tempo unit conversions shared by the parser summaries and playback timing."""

from __future__ import annotations

DEFAULT_TEMPO_US = 500_000
MICROS_PER_MINUTE = 60_000_000


def bpm_from_micros(tempo_us: int) -> float:
    """Return beats per minute for a microseconds-per-quarter tempo (0 stays 0)."""

    if tempo_us <= 0:
        return 0.0
    return MICROS_PER_MINUTE / float(tempo_us)


def ticks_to_micros(ticks: int, tempo_us: int, division: int) -> float:
    """Convert a tick count to microseconds at a fixed tempo.

    ``division`` is the header's ticks per quarter note.
    """

    if division <= 0:
        raise ValueError(f"Division must be a positive ticks-per-quarter value, got {division}")
    return ticks * tempo_us / division


__all__ = [
    "DEFAULT_TEMPO_US",
    "MICROS_PER_MINUTE",
    "bpm_from_micros",
    "ticks_to_micros",
]
