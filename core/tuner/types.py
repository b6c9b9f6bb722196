"""
core/tuner/types.py — Frozen data types for the tuner pipeline.

All types are frozen dataclasses: immutable value objects produced once per
audio block and handed to whatever presents them (HTTP response, CLI line,
display adapter).

Design principles:
    - No I/O, no state, no side effects.
    - Invariants are documented but NOT enforced at construction time;
      validation happens at creation sites (gate.py, notes.py, session.py).
    - Non-success outcomes are tags on TunerReading, never exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TunerOutcome(str, Enum):
    """What happened to a single audio block."""

    NOTE = "note"
    """A pitch was found and mapped to a piano key."""

    NO_SIGNAL = "no_signal"
    """RMS at or below the gate threshold, too quiet to analyse."""

    NO_PITCH = "no_pitch"
    """The gate passed but no periodicity was found (noise, transients)."""

    OUT_OF_RANGE = "out_of_range"
    """A pitch was found but it lies outside the instrument range."""


@dataclass(frozen=True)
class NoteInfo:
    """Nearest equal-tempered note for a detected frequency.

    Invariants:
        -50 < cents <= 50
        piano_key is None or 1 <= piano_key <= 88
        piano_key == midi - 20 whenever it is present
    """

    note_name: str
    """Pitch class plus octave, e.g. 'A4', 'C♯5'."""

    pitch_class: str
    """Pitch class only, e.g. 'A', 'C♯'."""

    octave: int
    """Scientific octave number. C4 = middle C."""

    midi: int
    """Nearest MIDI note number. A4 = 69."""

    frequency: float
    """Detected frequency in Hz."""

    target_frequency: float
    """Exact equal-tempered frequency of the nearest note in Hz."""

    cents: float
    """Signed deviation of the detected frequency from the target.
    Positive = sharp, negative = flat."""

    piano_key: int | None = None
    """88-key piano index (A0 = 1, C8 = 88). None outside the keyboard."""

    @property
    def in_piano_range(self) -> bool:
        """True when the note sits on a standard 88-key piano."""
        return self.piano_key is not None


@dataclass(frozen=True)
class GateDecision:
    """Result of the RMS energy gate for one block."""

    rms: float
    threshold: float
    passed: bool


@dataclass(frozen=True)
class TunerReading:
    """Everything the tuner knows about one audio block.

    `rms` and `threshold` are always populated so a caller can show a level
    meter even when nothing was detected.

    Invariants:
        outcome == NOTE          → frequency and note are set, note.piano_key set
        outcome == NO_SIGNAL     → frequency is None, note is None
        outcome == NO_PITCH      → frequency is None, note is None
        outcome == OUT_OF_RANGE  → frequency is set; note may be set
    """

    outcome: TunerOutcome
    rms: float
    threshold: float
    frequency: float | None = None
    note: NoteInfo | None = None

    @property
    def has_note(self) -> bool:
        return self.outcome is TunerOutcome.NOTE
