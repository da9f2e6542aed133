from __future__ import annotations

import pytest

from app.config import ParserConfig
from smf_tools import EventKind, read_smf, schedule_document
from smf_tools.playback import build_schedule

from tests.helpers import build_smf, end_of_track, header_chunk, note_off, note_on, single_note_song, track_chunk


def test_schedule_places_note_on_wall_clock() -> None:
    document = read_smf(single_note_song())

    schedule = schedule_document(document, 0)

    assert [event.kind for event in schedule] == [
        EventKind.SYSEX_OR_META,
        EventKind.NOTE_ON,
        EventKind.SYSEX_OR_META,
    ]
    note = schedule[1]
    assert note.tick == 96
    assert note.delta_micros == pytest.approx(500_000.0)
    assert note.at_micros == pytest.approx(500_000.0)
    assert (note.channel, note.key, note.velocity) == (0, 60, 100)
    assert note.frequency == pytest.approx(261.6256, rel=1e-5)
    assert note.sounding
    assert schedule[0].key is None
    assert schedule[2].at_micros == pytest.approx(500_000.0)


def test_tempo_override_scales_schedule() -> None:
    document = read_smf(single_note_song())

    schedule = schedule_document(document, 0, tempo_us=250_000)

    assert schedule[1].at_micros == pytest.approx(250_000.0)


def test_missing_tempo_uses_configured_default() -> None:
    document = read_smf(build_smf(note_on(69, 90, delta=48) + end_of_track(), division=96))

    schedule = schedule_document(document, 0, config=ParserConfig(default_tempo_us=1_000_000))

    assert schedule[0].at_micros == pytest.approx(500_000.0)
    assert schedule[0].frequency == pytest.approx(440.0)


def test_zero_velocity_note_on_is_not_sounding() -> None:
    document = read_smf(build_smf(note_on(60, 100) + note_on(60, 0, delta=96) + note_off(62, delta=1)))

    schedule = build_schedule(document.tracks[0], 96, 500_000)

    assert [event.sounding for event in schedule] == [True, False, False]
    assert schedule[2].kind is EventKind.NOTE_OFF
    assert schedule[2].at_micros == pytest.approx(97 * 500_000 / 96)


def test_smpte_division_cannot_be_scheduled() -> None:
    data = header_chunk(0, 1, 0xE250) + track_chunk(note_on(60, 100) + end_of_track())
    document = read_smf(data)

    with pytest.raises(ValueError, match="SMPTE"):
        schedule_document(document, 0)


def test_zero_division_cannot_be_scheduled() -> None:
    document = read_smf(build_smf(end_of_track(), division=0))

    with pytest.raises(ValueError, match="Division"):
        schedule_document(document, 0)
