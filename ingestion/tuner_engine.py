"""
ingestion/tuner_engine.py — File host for the tuner core.

TunerEngine stands in for the microphone: it decodes a recording, cuts it
into the same fixed-size blocks a live audio callback delivers, and feeds
them through a TunerSession one at a time.

    audio file
        │
        ├─ load_audio()             [ingestion/audio_loader.py — I/O boundary]
        │       ↓
        ├─ iter_blocks()            [ingestion/audio_loader.py — fixed-size blocks]
        │       ↓
        └─ session.process_block()  [core/tuner/session.py — gate → YIN → note]

This module is in `ingestion/` because it performs file I/O. The tuner logic
is pure and lives in `core/tuner/`.

Usage:
    engine = TunerEngine(TunerSession(sensitivity=70))
    report = engine.analyze_file("/path/to/a440.wav")
    print(report.dominant_note, report.median_cents)
"""

from __future__ import annotations

import logging
import statistics
import time
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.tuner.session import TunerSession
from core.tuner.types import TunerOutcome, TunerReading
from infrastructure.metrics import BlockTimer
from ingestion.audio_loader import DEFAULT_DURATION, iter_blocks, load_audio

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FileTuningReport — the output of analyze_file()
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileTuningReport:
    """Per-block readings for one audio file plus summary helpers.

    Attributes:
        path:               File that was analysed.
        sample_rate:        Sample rate the blocks were analysed at (Hz).
        block_size:         Samples per block.
        hop:                Samples between block starts.
        readings:           One TunerReading per block, in time order.
        processing_time_ms: Wall-clock time for decode + analysis.
    """

    path: str
    sample_rate: int
    block_size: int
    hop: int
    readings: tuple[TunerReading, ...]
    processing_time_ms: float = 0.0

    @property
    def block_count(self) -> int:
        return len(self.readings)

    @property
    def note_readings(self) -> tuple[TunerReading, ...]:
        return tuple(r for r in self.readings if r.has_note)

    def outcome_counts(self) -> dict[str, int]:
        """Number of blocks per outcome. Every outcome is present, zero or not."""
        counts = Counter(r.outcome for r in self.readings)
        return {outcome.value: counts.get(outcome, 0) for outcome in TunerOutcome}

    def block_time(self, index: int) -> float:
        """Start time in seconds of block `index`."""
        return index * self.hop / self.sample_rate

    @property
    def dominant_note(self) -> str | None:
        """Most frequent note name across NOTE blocks (earliest wins ties)."""
        names = [r.note.note_name for r in self.note_readings if r.note is not None]
        if not names:
            return None
        return Counter(names).most_common(1)[0][0]

    @property
    def median_frequency(self) -> float | None:
        freqs = [r.frequency for r in self.note_readings if r.frequency is not None]
        return statistics.median(freqs) if freqs else None

    @property
    def median_cents(self) -> float | None:
        """Median deviation over blocks that landed on the dominant note."""
        dominant = self.dominant_note
        if dominant is None:
            return None
        cents = [
            r.note.cents
            for r in self.note_readings
            if r.note is not None and r.note.note_name == dominant
        ]
        return statistics.median(cents)


# ---------------------------------------------------------------------------
# TunerEngine
# ---------------------------------------------------------------------------


class TunerEngine:
    """Drives a TunerSession over the blocks of an audio file.

    librosa is imported lazily by the loader (or injected for testing).
    The session is shared, so a sensitivity change made elsewhere applies
    to the next file analysed.
    """

    def __init__(self, session: TunerSession | None = None, *, librosa: Any = None) -> None:
        """Initialise the engine.

        Args:
            session: Tuner session to run blocks through. None = a fresh
                     session with the default config.
            librosa: Injected librosa module. Pass a MagicMock in tests to
                     avoid loading the audio stack.
        """
        self._session = session if session is not None else TunerSession()
        self._librosa = librosa

    @property
    def session(self) -> TunerSession:
        return self._session

    def analyze_blocks(
        self,
        y: Any,
        sample_rate: int,
        *,
        block_size: int | None = None,
        hop: int | None = None,
    ) -> tuple[TunerReading, ...]:
        """Run every full block of an in-memory signal through the session.

        Each block is recorded in the block metrics, same as /tuner/block.
        """
        size = self._session.config.block_size if block_size is None else block_size
        readings: list[TunerReading] = []
        for block in iter_blocks(y, size, hop=hop):
            with BlockTimer() as timer:
                timer.reading = self._session.process_block(block, sample_rate)
            readings.append(timer.reading)
        return tuple(readings)

    def analyze_file(
        self,
        path: str | Path,
        *,
        block_size: int | None = None,
        hop: int | None = None,
        duration: float | None = DEFAULT_DURATION,
    ) -> FileTuningReport:
        """Load an audio file and produce one reading per block.

        Args:
            path:       Path to an audio file.
            block_size: Samples per block. None = session config block_size.
            hop:        Samples between blocks. None = block_size.
            duration:   Maximum seconds to load.

        Returns:
            FileTuningReport with readings in time order. A file shorter than
            one block yields an empty report, not an error.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: Unsupported extension, or non-positive block_size/hop.
            RuntimeError: If the audio cannot be decoded.
        """
        t0 = time.perf_counter()
        size = self._session.config.block_size if block_size is None else block_size
        step = size if hop is None else hop

        y, sr = load_audio(path, duration=duration, librosa=self._librosa)
        readings = self.analyze_blocks(y, sr, block_size=size, hop=step)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        report = FileTuningReport(
            path=str(path),
            sample_rate=sr,
            block_size=size,
            hop=step,
            readings=readings,
            processing_time_ms=elapsed_ms,
        )
        logger.info(
            "Tuned %s: %d blocks at %d Hz, dominant=%s (%.1f ms)",
            Path(path).name,
            report.block_count,
            sr,
            report.dominant_note,
            elapsed_ms,
        )
        return report
