"""
Tests for core/tuner/notes.py — frequency → note, cents and piano key.

Validates:
    - map_to_note: reference notes, sharp/flat deviations, piano-key range
    - Cents always in (-50, +50]; target frequency maps back to the same note
    - nearest_midi: halves round down
    - midi_to_name / piano_key_for_midi / in_frequency_range
    - Error handling: non-positive and non-finite frequencies
"""

import math

import numpy as np
import pytest

from core.tuner.notes import (
    NOTE_NAMES,
    frequency_to_midi,
    in_frequency_range,
    map_to_note,
    midi_to_frequency,
    midi_to_name,
    nearest_midi,
    piano_key_for_midi,
)
from core.tuner.types import NoteInfo

# ---------------------------------------------------------------------------
# map_to_note — reference points
# ---------------------------------------------------------------------------


class TestMapToNoteReference:
    def test_a4(self):
        info = map_to_note(440.0)
        assert isinstance(info, NoteInfo)
        assert info.note_name == "A4"
        assert info.pitch_class == "A"
        assert info.octave == 4
        assert info.midi == 69
        assert info.target_frequency == pytest.approx(440.0)
        assert info.cents == pytest.approx(0.0, abs=1e-9)
        assert info.piano_key == 49

    def test_middle_c(self):
        info = map_to_note(261.63)
        assert info.note_name == "C4"
        assert info.midi == 60
        assert info.target_frequency == pytest.approx(261.6256, rel=1e-6)
        assert abs(info.cents) < 0.1
        assert info.piano_key == 40

    def test_lowest_piano_key(self):
        info = map_to_note(27.5)
        assert info.note_name == "A0"
        assert info.piano_key == 1

    def test_highest_piano_key(self):
        info = map_to_note(4186.0)
        assert info.note_name == "C8"
        assert info.piano_key == 88

    def test_sharp_note_names_use_sharp_sign(self):
        info = map_to_note(277.18)  # C♯4
        assert info.note_name == "C♯4"
        assert info.pitch_class == "C♯"

    def test_detected_frequency_is_kept(self):
        assert map_to_note(441.5).frequency == 441.5


# ---------------------------------------------------------------------------
# map_to_note — deviations
# ---------------------------------------------------------------------------


class TestMapToNoteDeviation:
    def test_sharp_is_positive(self):
        info = map_to_note(445.0)
        assert info.note_name == "A4"
        assert info.cents == pytest.approx(1200 * math.log2(445.0 / 440.0))
        assert info.cents > 0

    def test_flat_is_negative(self):
        info = map_to_note(430.0)
        assert info.note_name == "A4"
        assert info.cents == pytest.approx(1200 * math.log2(430.0 / 440.0))
        assert info.cents < 0

    def test_just_past_half_semitone_moves_to_next_note(self):
        info = map_to_note(midi_to_frequency(69.51))
        assert info.note_name == "A♯4"
        assert info.cents == pytest.approx(-49.0, abs=1e-6)

    def test_just_below_half_semitone_stays(self):
        info = map_to_note(midi_to_frequency(69.49))
        assert info.note_name == "A4"
        assert info.cents == pytest.approx(49.0, abs=1e-6)

    def test_cents_always_within_half_semitone(self):
        for f in np.geomspace(8.0, 20000.0, 2000):
            cents = map_to_note(float(f)).cents
            assert -50.0 < cents <= 50.0

    def test_target_frequency_round_trips_to_same_note(self):
        for f in np.geomspace(27.5, 4186.0, 500):
            info = map_to_note(float(f))
            again = map_to_note(info.target_frequency)
            assert again.midi == info.midi
            assert again.note_name == info.note_name
            assert again.cents == pytest.approx(0.0, abs=1e-6)


# ---------------------------------------------------------------------------
# map_to_note — piano range
# ---------------------------------------------------------------------------


class TestMapToNotePianoRange:
    def test_far_above_keyboard_has_no_key(self):
        info = map_to_note(20000.0)
        assert info.piano_key is None
        assert info.in_piano_range is False

    def test_below_keyboard_has_no_key(self):
        info = map_to_note(20.0)
        assert info.piano_key is None
        assert info.midi < 21

    def test_in_range_has_key(self):
        assert map_to_note(440.0).in_piano_range is True

    def test_key_is_midi_minus_20(self):
        for f in np.geomspace(27.5, 4186.0, 200):
            info = map_to_note(float(f))
            assert info.piano_key == info.midi - 20
            assert 1 <= info.piano_key <= 88


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestNearestMidi:
    def test_half_rounds_down(self):
        assert nearest_midi(60.5) == 60
        assert nearest_midi(69.5) == 69

    def test_rounds_to_nearest(self):
        assert nearest_midi(60.49) == 60
        assert nearest_midi(60.51) == 61
        assert nearest_midi(59.6) == 60

    def test_negative_values(self):
        assert nearest_midi(-0.5) == -1
        assert nearest_midi(-0.4) == 0


class TestConversions:
    def test_frequency_to_midi_a4(self):
        assert frequency_to_midi(440.0) == pytest.approx(69.0)

    def test_octave_is_twelve_semitones(self):
        assert frequency_to_midi(880.0) - frequency_to_midi(440.0) == pytest.approx(12.0)

    def test_midi_to_frequency(self):
        assert midi_to_frequency(69) == pytest.approx(440.0)
        assert midi_to_frequency(60) == pytest.approx(261.6256, rel=1e-6)
        assert midi_to_frequency(21) == pytest.approx(27.5)

    @pytest.mark.parametrize("bad", [0.0, -440.0, float("nan"), float("inf")])
    def test_invalid_frequency_raises(self, bad):
        with pytest.raises(ValueError, match="frequency"):
            frequency_to_midi(bad)
        with pytest.raises(ValueError, match="frequency"):
            map_to_note(bad)


class TestMidiToName:
    @pytest.mark.parametrize(
        ("midi", "name"),
        [(69, "A4"), (60, "C4"), (61, "C♯4"), (21, "A0"), (108, "C8"), (0, "C-1"), (127, "G9")],
    )
    def test_names(self, midi, name):
        assert midi_to_name(midi) == name

    def test_chromatic_table_starts_at_c(self):
        assert NOTE_NAMES[0] == "C"
        assert len(NOTE_NAMES) == 12
        assert NOTE_NAMES[9] == "A"


class TestPianoKeyForMidi:
    def test_bounds(self):
        assert piano_key_for_midi(21) == 1
        assert piano_key_for_midi(108) == 88

    def test_outside(self):
        assert piano_key_for_midi(20) is None
        assert piano_key_for_midi(109) is None


class TestInFrequencyRange:
    @pytest.mark.parametrize("f", [27.5, 440.0, 4186.0])
    def test_inside(self, f):
        assert in_frequency_range(f) is True

    @pytest.mark.parametrize(
        "f", [27.4, 4186.1, 20000.0, 0.0, -100.0, float("nan"), float("inf"), None]
    )
    def test_outside(self, f):
        assert in_frequency_range(f) is False

    def test_custom_bounds(self):
        assert in_frequency_range(6000.0, 20.0, 8000.0) is True
        assert in_frequency_range(6000.0) is False
