"""
core/tuner/gate.py — RMS energy gate.

Decides whether a block carries enough energy to be worth running the pitch
estimator on. The threshold comes from the user-facing sensitivity (1–100)
by linear interpolation between a floor and a ceiling:

    threshold = max_threshold - (sensitivity / 100) * (max_threshold - min_threshold)

Higher sensitivity → lower threshold → quieter notes are analysed.

All functions are pure.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from core.tuner.config import MAX_SENSITIVITY, MIN_SENSITIVITY
from core.tuner.types import GateDecision


def as_block(block: Any) -> np.ndarray:
    """Return `block` as a 1-D float64 array.

    A new array is returned whenever a dtype conversion happens; the caller's
    buffer is never written to by anything downstream.

    Raises:
        ValueError: If the block is not one-dimensional.
    """
    arr = np.asarray(block, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Audio block must be 1-D (mono), got shape {arr.shape}")
    return arr


def signal_rms(block: Any) -> float:
    """Root-mean-square energy of a block.

    An empty block has RMS 0.0 (not NaN).
    """
    x = as_block(block)
    if x.size == 0:
        return 0.0
    return float(math.sqrt(float(np.mean(x * x))))


def threshold_for_sensitivity(
    sensitivity: float,
    *,
    min_threshold: float = 0.0005,
    max_threshold: float = 0.01,
) -> float:
    """Map sensitivity in [1, 100] to an RMS threshold.

    Args:
        sensitivity: User sensitivity. 100 = most sensitive.
        min_threshold: Threshold reached at sensitivity 100.
        max_threshold: Threshold approached at sensitivity 0.

    Returns:
        RMS threshold. Non-increasing as sensitivity grows.

    Raises:
        ValueError: If sensitivity is outside [1, 100] or not finite.
    """
    if not math.isfinite(sensitivity) or not MIN_SENSITIVITY <= sensitivity <= MAX_SENSITIVITY:
        raise ValueError(
            f"sensitivity must be in [{MIN_SENSITIVITY}, {MAX_SENSITIVITY}], got {sensitivity}"
        )
    return max_threshold - (sensitivity / 100.0) * (max_threshold - min_threshold)


def evaluate_gate(block: Any, threshold: float) -> GateDecision:
    """Compute RMS and compare it against `threshold` (strictly greater passes)."""
    rms = signal_rms(block)
    return GateDecision(rms=rms, threshold=threshold, passed=rms > threshold)


def should_analyze(block: Any, threshold: float) -> bool:
    """True iff the block's RMS exceeds `threshold`."""
    return evaluate_gate(block, threshold).passed
