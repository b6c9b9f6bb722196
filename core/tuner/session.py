"""
core/tuner/session.py — Per-instance tuner state and the per-block pipeline.

A TunerSession replaces process-wide globals: it owns a TunerConfig and the
one piece of mutable state the tuner has, the user's sensitivity. Hosts
(an HTTP worker, a file driver, a test) call process_block() once per block
at whatever cadence they like.

    block ─► evaluate_gate ─► estimate_pitch ─► in_frequency_range ─► map_to_note
               │ fail            │ None            │ outside            │ no piano key
               ▼                 ▼                 ▼                    ▼
           NO_SIGNAL          NO_PITCH        OUT_OF_RANGE         OUT_OF_RANGE

Sensitivity is read fresh on every block and guarded by a lock, so one
thread can move the slider while another is mid-block.
"""

from __future__ import annotations

import threading
from typing import Any

from core.tuner.config import DEFAULT_CONFIG, MAX_SENSITIVITY, MIN_SENSITIVITY, TunerConfig
from core.tuner.gate import as_block, evaluate_gate, threshold_for_sensitivity
from core.tuner.notes import in_frequency_range, map_to_note
from core.tuner.pitch import estimate_pitch
from core.tuner.types import TunerOutcome, TunerReading


class TunerSession:
    """Holds tuner configuration plus the current sensitivity.

    Example:
        session = TunerSession(sensitivity=80)
        reading = session.process_block(block, 44100)
        if reading.has_note:
            print(reading.note.note_name, reading.note.cents)
    """

    def __init__(
        self,
        config: TunerConfig = DEFAULT_CONFIG,
        *,
        sensitivity: float | None = None,
    ) -> None:
        """Create a session.

        Args:
            config: Fixed tuner constants.
            sensitivity: Starting sensitivity (1–100). Defaults to
                config.default_sensitivity.

        Raises:
            ValueError: If sensitivity is outside [1, 100].
        """
        self._config = config
        self._lock = threading.Lock()
        self._sensitivity = self._validate_sensitivity(
            config.default_sensitivity if sensitivity is None else sensitivity
        )

    @staticmethod
    def _validate_sensitivity(value: float) -> float:
        if not MIN_SENSITIVITY <= value <= MAX_SENSITIVITY:
            raise ValueError(
                f"sensitivity must be in [{MIN_SENSITIVITY}, {MAX_SENSITIVITY}], got {value}"
            )
        return float(value)

    @property
    def config(self) -> TunerConfig:
        return self._config

    @property
    def sensitivity(self) -> float:
        with self._lock:
            return self._sensitivity

    @sensitivity.setter
    def sensitivity(self, value: float) -> None:
        validated = self._validate_sensitivity(value)
        with self._lock:
            self._sensitivity = validated

    @property
    def threshold(self) -> float:
        """Current RMS gate threshold."""
        if self._config.fixed_threshold is not None:
            return self._config.fixed_threshold
        return threshold_for_sensitivity(
            self.sensitivity,
            min_threshold=self._config.min_threshold,
            max_threshold=self._config.max_threshold,
        )

    def process_block(self, block: Any, sample_rate: int) -> TunerReading:
        """Run gate → estimator → range filter → mapper on one block.

        Args:
            block: 1-D sequence of mono samples.
            sample_rate: Sample rate of the block in Hz.

        Returns:
            TunerReading tagged with the outcome. RMS and threshold are
            always populated.

        Raises:
            ValueError: If sample_rate is not positive or the block is not 1-D.
        """
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")

        x = as_block(block)
        gate = evaluate_gate(x, self.threshold)
        if not gate.passed:
            return TunerReading(
                outcome=TunerOutcome.NO_SIGNAL,
                rms=gate.rms,
                threshold=gate.threshold,
            )

        frequency = estimate_pitch(x, sample_rate, threshold=self._config.yin_threshold)
        if frequency is None:
            return TunerReading(
                outcome=TunerOutcome.NO_PITCH,
                rms=gate.rms,
                threshold=gate.threshold,
            )

        if not in_frequency_range(
            frequency, self._config.min_frequency, self._config.max_frequency
        ):
            return TunerReading(
                outcome=TunerOutcome.OUT_OF_RANGE,
                rms=gate.rms,
                threshold=gate.threshold,
                frequency=frequency,
            )

        note = map_to_note(frequency)
        outcome = TunerOutcome.NOTE if note.in_piano_range else TunerOutcome.OUT_OF_RANGE
        return TunerReading(
            outcome=outcome,
            rms=gate.rms,
            threshold=gate.threshold,
            frequency=frequency,
            note=note,
        )
