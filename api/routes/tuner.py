"""
api/routes/tuner.py — Tuner endpoints.

Endpoints:
    POST /tuner/block        — Analyse one block of mono samples
    GET  /tuner/sensitivity  — Current sensitivity and gate threshold
    PUT  /tuner/sensitivity  — Change sensitivity for subsequent blocks
    POST /tuner/file         — Block-by-block analysis of a server-side audio file

The block endpoint is the HTTP form of the live audio callback: a client
captures a block from its microphone, posts it, and renders the returned
display values. All tuner logic lives in core/tuner/.
"""

from __future__ import annotations

import logging

import numpy as np
from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_tuner_engine, get_tuner_session
from api.schemas.tuner import (
    BlockAnalyzeRequest,
    DisplayOut,
    FileTuneRequest,
    FileTuneResponse,
    NoteOut,
    ReadingOut,
    SensitivityOut,
    SensitivityUpdate,
)
from core.tuner.display import render_reading
from core.tuner.session import TunerSession
from core.tuner.types import TunerReading
from infrastructure.metrics import BlockTimer, record_file, set_sensitivity
from ingestion.tuner_engine import TunerEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tuner", tags=["tuner"])


def _reading_out(reading: TunerReading) -> ReadingOut:
    display = render_reading(reading)
    note_out = None
    if reading.note is not None:
        n = reading.note
        note_out = NoteOut(
            note_name=n.note_name,
            pitch_class=n.pitch_class,
            octave=n.octave,
            midi=n.midi,
            frequency=n.frequency,
            target_frequency=n.target_frequency,
            cents=n.cents,
            piano_key=n.piano_key,
        )
    return ReadingOut(
        outcome=reading.outcome,
        rms=reading.rms,
        threshold=reading.threshold,
        frequency=reading.frequency,
        note=note_out,
        display=DisplayOut(
            note_label=display.note_label,
            frequency_text=display.frequency_text,
            cents_text=display.cents_text,
            needle_angle=display.needle_angle,
            direction=display.direction,
            status=display.status,
        ),
    )


def _sensitivity_out(session: TunerSession) -> SensitivityOut:
    return SensitivityOut(
        sensitivity=session.sensitivity,
        threshold=session.threshold,
        fixed=session.config.fixed_threshold is not None,
    )


# ---------------------------------------------------------------------------
# POST /tuner/block
# ---------------------------------------------------------------------------


@router.post("/block", response_model=ReadingOut)
def analyze_block(
    request: BlockAnalyzeRequest,
    session: TunerSession = Depends(get_tuner_session),
) -> ReadingOut:
    """Run the gate, pitch estimator and note mapper on one block.

    Quiet, noisy and out-of-range blocks are normal outcomes and come back
    as 200 with the matching `outcome` tag.

    Args:
        request: BlockAnalyzeRequest with samples and sample_rate.

    Returns:
        ReadingOut with outcome, RMS, threshold, optional note and display.
    """
    block = np.asarray(request.samples, dtype=np.float64)
    with BlockTimer() as timer:
        timer.reading = session.process_block(block, request.sample_rate)
    reading = timer.reading
    logger.debug(
        "Block %d samples @ %d Hz → %s (rms=%.5f)",
        block.size,
        request.sample_rate,
        reading.outcome.value,
        reading.rms,
    )
    return _reading_out(reading)


# ---------------------------------------------------------------------------
# /tuner/sensitivity
# ---------------------------------------------------------------------------


@router.get("/sensitivity", response_model=SensitivityOut)
def get_sensitivity(session: TunerSession = Depends(get_tuner_session)) -> SensitivityOut:
    """Return the current sensitivity and the RMS threshold it yields."""
    return _sensitivity_out(session)


@router.put("/sensitivity", response_model=SensitivityOut)
def update_sensitivity(
    request: SensitivityUpdate,
    session: TunerSession = Depends(get_tuner_session),
) -> SensitivityOut:
    """Set sensitivity (1–100). Takes effect from the next block."""
    session.sensitivity = request.sensitivity
    set_sensitivity(session.sensitivity)
    logger.info("Sensitivity set to %.1f (threshold %.5f)", session.sensitivity, session.threshold)
    return _sensitivity_out(session)


# ---------------------------------------------------------------------------
# POST /tuner/file
# ---------------------------------------------------------------------------


@router.post("/file", response_model=FileTuneResponse)
def tune_file(
    request: FileTuneRequest,
    engine: TunerEngine = Depends(get_tuner_engine),
) -> FileTuneResponse:
    """Analyse a server-side audio file block by block.

    Raises:
        422: file_path does not exist, extension not supported, bad block sizes.
        500: Audio decoding failure.
    """
    try:
        report = engine.analyze_file(
            request.file_path,
            block_size=request.block_size,
            hop=request.hop,
            duration=request.duration,
        )
    except FileNotFoundError as exc:
        record_file("rejected")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        record_file("rejected")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        record_file("error")
        logger.error("Tuner file analysis failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Audio analysis failed: {exc}") from exc

    record_file("success")
    return FileTuneResponse(
        file_path=report.path,
        sample_rate=report.sample_rate,
        block_size=report.block_size,
        hop=report.hop,
        block_count=report.block_count,
        outcome_counts=report.outcome_counts(),
        dominant_note=report.dominant_note,
        median_frequency=report.median_frequency,
        median_cents=report.median_cents,
        processing_time_ms=report.processing_time_ms,
        readings=(
            [_reading_out(r) for r in report.readings] if request.include_readings else []
        ),
    )
