"""
core/tuner/notes.py — Frequency → equal-tempered note mapping.

Reference pitch is A4 = 440 Hz = MIDI 69. A frequency maps to a fractional
MIDI number n = 69 + 12·log₂(f / 440); the nearest integer note is taken
and the remainder is reported in cents (100 cents = one semitone).

Pure math, no numpy.
"""

from __future__ import annotations

import math

from core.tuner.config import MAX_FREQUENCY, MIN_FREQUENCY
from core.tuner.types import NoteInfo

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

A4_FREQUENCY: float = 440.0
A4_MIDI: int = 69

PIANO_LOWEST_MIDI: int = 21
"""A0 — piano key 1."""

PIANO_HIGHEST_MIDI: int = 108
"""C8 — piano key 88."""

NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C♯",
    "D",
    "D♯",
    "E",
    "F",
    "F♯",
    "G",
    "G♯",
    "A",
    "A♯",
    "B",
)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def frequency_to_midi(frequency: float) -> float:
    """Fractional MIDI note number for a frequency.

    Raises:
        ValueError: If frequency is not a finite positive number.
    """
    if not math.isfinite(frequency) or frequency <= 0.0:
        raise ValueError(f"frequency must be finite and > 0, got {frequency}")
    return A4_MIDI + 12.0 * math.log2(frequency / A4_FREQUENCY)


def midi_to_frequency(midi: float) -> float:
    """Equal-tempered frequency of a (possibly fractional) MIDI note."""
    return A4_FREQUENCY * 2.0 ** ((midi - A4_MIDI) / 12.0)


def nearest_midi(midi: float) -> int:
    """Round a fractional MIDI number, sending exact halves down.

    Halves go to the lower note so the cents deviation lands in (-50, +50]
    rather than [-50, +50).
    """
    return math.ceil(midi - 0.5)


def midi_to_name(midi: int) -> str:
    """Scientific pitch name for a MIDI note.

    Examples:
        69 → 'A4'
        60 → 'C4'
        61 → 'C♯4'
    """
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


def piano_key_for_midi(midi: int) -> int | None:
    """88-key piano index for a MIDI note, or None off the keyboard."""
    if PIANO_LOWEST_MIDI <= midi <= PIANO_HIGHEST_MIDI:
        return midi - (PIANO_LOWEST_MIDI - 1)
    return None


def in_frequency_range(
    frequency: float | None,
    min_frequency: float = MIN_FREQUENCY,
    max_frequency: float = MAX_FREQUENCY,
) -> bool:
    """True for finite, positive frequencies within [min_frequency, max_frequency]."""
    if frequency is None or not math.isfinite(frequency) or frequency <= 0.0:
        return False
    return min_frequency <= frequency <= max_frequency


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


def map_to_note(frequency: float) -> NoteInfo:
    """Map a detected frequency to its nearest equal-tempered note.

    Args:
        frequency: Detected frequency in Hz. Callers normally filter with
            in_frequency_range() first; frequencies outside the keyboard are
            still mapped but come back with piano_key=None.

    Returns:
        NoteInfo with note name, target frequency, cents and piano key.

    Raises:
        ValueError: If frequency is not a finite positive number.
    """
    midi = nearest_midi(frequency_to_midi(frequency))
    target = midi_to_frequency(midi)
    cents = 1200.0 * math.log2(frequency / target)

    return NoteInfo(
        note_name=midi_to_name(midi),
        pitch_class=NOTE_NAMES[midi % 12],
        octave=midi // 12 - 1,
        midi=midi,
        frequency=float(frequency),
        target_frequency=target,
        cents=cents,
        piano_key=piano_key_for_midi(midi),
    )
