from __future__ import annotations

import struct


def vlq(value: int) -> bytes:
    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def header_chunk(format_type: int = 0, track_count: int = 1, division: int = 96, *, extra: bytes = b"") -> bytes:
    return b"MThd" + struct.pack(">IHHH", 6 + len(extra), format_type, track_count, division) + extra


def track_chunk(events: bytes, *, declared_length: int | None = None) -> bytes:
    length = len(events) if declared_length is None else declared_length
    return b"MTrk" + struct.pack(">I", length) + events


def tempo_event(micros: int, delta: int = 0) -> bytes:
    return vlq(delta) + b"\xff\x51\x03" + micros.to_bytes(3, "big")


def meta_event(meta_type: int, payload: bytes, delta: int = 0) -> bytes:
    return vlq(delta) + bytes([0xFF, meta_type]) + vlq(len(payload)) + payload


def note_on(key: int, velocity: int, *, channel: int = 0, delta: int = 0, running: bool = False) -> bytes:
    status = b"" if running else bytes([0x90 | channel])
    return vlq(delta) + status + bytes([key, velocity])


def note_off(key: int, velocity: int = 0, *, channel: int = 0, delta: int = 0) -> bytes:
    return vlq(delta) + bytes([0x80 | channel, key, velocity])


def end_of_track(delta: int = 0) -> bytes:
    return vlq(delta) + b"\xff\x2f\x00"


def build_smf(*tracks: bytes, format_type: int = 0, division: int = 96, track_count: int | None = None) -> bytes:
    count = len(tracks) if track_count is None else track_count
    return header_chunk(format_type, count, division) + b"".join(track_chunk(events) for events in tracks)


def single_note_song() -> bytes:
    """Tempo 500000 us, one Note On (ch 0, key 60, vel 100) after 96 ticks, end-of-track."""

    events = tempo_event(500_000) + note_on(60, 100, delta=96) + end_of_track()
    return build_smf(events, division=96)
