"""Pitch conversion helpers for MIDI key numbers (C4 = 60, A4 = 440 Hz)."""

from __future__ import annotations

import re
from typing import Tuple

A4_KEY = 69
A4_FREQUENCY = 440.0

NAME_TO_PC = {
    'C': 0,
    'C#': 1,
    'Db': 1,
    'D': 2,
    'D#': 3,
    'Eb': 3,
    'E': 4,
    'F': 5,
    'F#': 6,
    'Gb': 6,
    'G': 7,
    'G#': 8,
    'Ab': 8,
    'A': 9,
    'A#': 10,
    'Bb': 10,
    'B': 11,
}
PC_TO_NAME_SHARP = {0: 'C', 1: 'C#', 2: 'D', 3: 'D#', 4: 'E', 5: 'F', 6: 'F#', 7: 'G', 8: 'G#', 9: 'A', 10: 'A#', 11: 'B'}
PC_TO_NAME_FLAT = {0: 'C', 1: 'Db', 2: 'D', 3: 'Eb', 4: 'E', 5: 'F', 6: 'Gb', 7: 'G', 8: 'Ab', 9: 'A', 10: 'Bb', 11: 'B'}


def key_to_frequency(key: int) -> float:
    """Equal-tempered frequency in Hz: ``440 * 2 ** ((key - 69) / 12)``."""
    return A4_FREQUENCY * 2.0 ** ((key - A4_KEY) / 12.0)


def midi_to_pitch(key: int, flats: bool = False) -> Tuple[str, int]:
    """Split a key into the pitch name and octave a tone generator expects."""
    octave = key // 12 - 1
    pc = key % 12
    name = PC_TO_NAME_FLAT[pc] if flats else PC_TO_NAME_SHARP[pc]
    return name, octave


def midi_to_name(key: int, flats: bool = False) -> str:
    name, octave = midi_to_pitch(key, flats=flats)
    return f"{name}{octave}"


def parse_note_name(name: str) -> int:
    """Parse forms like 'A4', 'F#5', 'Bb4' into a MIDI integer."""
    m = re.match(r'^([A-Ga-g])([#b])?(-?\d+)$', name.strip())
    if not m:
        raise ValueError(f"Bad note name: {name}")
    key = m.group(1).upper() + (m.group(2) or '')
    octave = int(m.group(3))
    midi = (octave + 1) * 12 + NAME_TO_PC[key]
    if not 0 <= midi <= 127:
        raise ValueError(f"Note out of MIDI range: {name}")
    return midi


__all__ = [
    'A4_FREQUENCY',
    'A4_KEY',
    'NAME_TO_PC',
    'PC_TO_NAME_FLAT',
    'PC_TO_NAME_SHARP',
    'key_to_frequency',
    'midi_to_name',
    'midi_to_pitch',
    'parse_note_name',
]
