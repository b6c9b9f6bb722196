"""
core/tuner/display.py — Presentation adapter for tuner readings.

Turns a TunerReading into the strings and needle angle a tuner face shows.
It performs no rendering itself; a UI, terminal or HTTP client applies the
returned TunerDisplay however it likes.

Needle mapping: cents are clamped to ±MAX_DETUNE_CENTS and scaled linearly
to ±NEEDLE_SWING_DEG, so a note 50 cents sharp pins the needle at +25°.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.tuner.types import TunerOutcome, TunerReading

MAX_DETUNE_CENTS: float = 50.0
NEEDLE_SWING_DEG: float = 25.0

IN_TUNE_CENTS: float = 5.0
"""Deviation still shown as in tune. Roughly the just-noticeable difference."""

EMPTY_NOTE_LABEL = "--"

Direction = Literal["in_tune", "flat", "sharp"]

STATUS_MESSAGES: dict[TunerOutcome, str] = {
    TunerOutcome.NOTE: "Try to bring the needle to 0 cents.",
    TunerOutcome.NO_SIGNAL: "Too quiet. Play a little louder or raise the sensitivity.",
    TunerOutcome.NO_PITCH: "Play a clear, single note and let it ring.",
    TunerOutcome.OUT_OF_RANGE: "That note is outside the piano's range.",
}


@dataclass(frozen=True)
class TunerDisplay:
    """What a tuner face shows for one reading."""

    note_label: str
    frequency_text: str
    cents_text: str
    needle_angle: float
    direction: Direction | None
    status: str


def needle_angle(cents: float) -> float:
    """Needle rotation in degrees for a cents deviation."""
    clamped = max(-MAX_DETUNE_CENTS, min(MAX_DETUNE_CENTS, cents))
    return clamped / MAX_DETUNE_CENTS * NEEDLE_SWING_DEG


def tuning_direction(cents: float) -> Direction:
    if abs(cents) <= IN_TUNE_CENTS:
        return "in_tune"
    return "sharp" if cents > 0 else "flat"


def render_reading(reading: TunerReading) -> TunerDisplay:
    """Build display values for a reading.

    Only NOTE readings move the needle; every other outcome parks it at 0°
    and shows '--' with its own status message.
    """
    status = STATUS_MESSAGES[reading.outcome]

    if reading.outcome is TunerOutcome.NOTE and reading.note is not None:
        cents = reading.note.cents
        return TunerDisplay(
            note_label=reading.note.note_name,
            frequency_text=f"{reading.note.frequency:.1f}",
            cents_text=f"{cents:+.1f}",
            needle_angle=needle_angle(cents),
            direction=tuning_direction(cents),
            status=status,
        )

    return TunerDisplay(
        note_label=EMPTY_NOTE_LABEL,
        frequency_text="0.0",
        cents_text="0.0",
        needle_angle=0.0,
        direction=None,
        status=status,
    )
