"""Prometheus metrics for the tuner service.

Exposes tuner outcomes in metrics so dashboards show how often players are
too quiet, out of range or actually landing on a note, not just generic
HTTP stats.

Metrics:
    tuner_blocks_total               Counter of analysed blocks by outcome
                                     (/tuner/block requests and file blocks)
    tuner_block_latency_seconds      Histogram of per-block analysis latency
    tuner_block_rms                  Histogram of block RMS (input level)
    tuner_files_total                Counter of file analyses by status
    tuner_sensitivity                Gauge of the current session sensitivity

Usage::

    from infrastructure.metrics import BlockTimer, record_file

    with BlockTimer() as timer:
        timer.reading = session.process_block(block, sr)
    record_file("success")
"""

from __future__ import annotations

import logging
import time
from typing import Any

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

tuner_blocks_total = Counter(
    "tuner_blocks_total",
    "Analysed audio blocks by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

tuner_block_latency_seconds = Histogram(
    "tuner_block_latency_seconds",
    "Gate + pitch estimation + note mapping latency per block",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1],
    registry=_REGISTRY,
)

tuner_block_rms = Histogram(
    "tuner_block_rms",
    "RMS level of analysed blocks",
    buckets=[0.0005, 0.001, 0.002, 0.005, 0.01, 0.02, 0.05, 0.1, 0.25, 0.5, 1.0],
    registry=_REGISTRY,
)

tuner_files_total = Counter(
    "tuner_files_total",
    "File analyses by status",
    ["status"],
    registry=_REGISTRY,
)

tuner_sensitivity = Gauge(
    "tuner_sensitivity",
    "Current tuner sensitivity (1-100)",
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_block(*, outcome: str, rms: float, latency_seconds: float) -> None:
    """Record one analysed block.

    Args:
        outcome: TunerOutcome value ("note", "no_signal", "no_pitch", "out_of_range").
        rms: Block RMS as reported by the gate.
        latency_seconds: Wall-clock analysis time in seconds.
    """
    tuner_blocks_total.labels(outcome=outcome).inc()
    tuner_block_latency_seconds.observe(latency_seconds)
    tuner_block_rms.observe(rms)


def record_file(status: str) -> None:
    """Increment the file analysis counter.

    Args:
        status: One of "success", "rejected", "error".
    """
    tuner_files_total.labels(status=status).inc()


def set_sensitivity(value: float) -> None:
    """Publish the current session sensitivity."""
    tuner_sensitivity.set(value)


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class BlockTimer:
    """Times one block analysis and records it when the ``with`` body ends.

    Assign the reading to ``timer.reading`` inside the body. Nothing is
    recorded if the body raises or never sets it.

    Usage::

        with BlockTimer() as timer:
            timer.reading = session.process_block(block, sr)
    """

    def __init__(self) -> None:
        self.reading: Any = None
        self.elapsed: float = 0.0
        self._started: float = 0.0

    def __enter__(self) -> BlockTimer:
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._started
        if exc_type is None and self.reading is not None:
            record_block(
                outcome=self.reading.outcome.value,
                rms=self.reading.rms,
                latency_seconds=self.elapsed,
            )
