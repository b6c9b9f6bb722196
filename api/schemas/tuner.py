"""
api/schemas/tuner.py — Pydantic request/response schemas for tuner endpoints.

Covers:
    /tuner/block        — BlockAnalyzeRequest / ReadingOut
    /tuner/sensitivity  — SensitivityUpdate / SensitivityOut
    /tuner/file         — FileTuneRequest / FileTuneResponse
"""

import math

from pydantic import BaseModel, Field, field_validator

from core.tuner.types import TunerOutcome

MAX_BLOCK_SAMPLES: int = 65536
"""Upper bound on samples per /tuner/block request (~1.5 s at 44.1 kHz)."""

# ---------------------------------------------------------------------------
# Shared sub-schemas
# ---------------------------------------------------------------------------


class NoteOut(BaseModel):
    """Nearest equal-tempered note for a detected pitch."""

    note_name: str
    pitch_class: str
    octave: int
    midi: int
    frequency: float = Field(..., gt=0.0)
    target_frequency: float = Field(..., gt=0.0)
    cents: float
    piano_key: int | None = Field(default=None, ge=1, le=88)


class DisplayOut(BaseModel):
    """Ready-to-show tuner face values."""

    note_label: str
    frequency_text: str
    cents_text: str
    needle_angle: float = Field(..., ge=-25.0, le=25.0)
    direction: str | None = None
    status: str


class ReadingOut(BaseModel):
    """One block's tuner reading."""

    outcome: TunerOutcome
    rms: float = Field(..., ge=0.0)
    threshold: float = Field(..., ge=0.0)
    frequency: float | None = None
    note: NoteOut | None = None
    display: DisplayOut


# ---------------------------------------------------------------------------
# /tuner/block
# ---------------------------------------------------------------------------


class BlockAnalyzeRequest(BaseModel):
    """Request body for POST /tuner/block."""

    samples: list[float] = Field(
        ...,
        max_length=MAX_BLOCK_SAMPLES,
        description="Mono samples in [-1, 1], typically 2048 of them.",
    )
    sample_rate: int = Field(
        ...,
        gt=0,
        le=384000,
        description="Sample rate of the block in Hz.",
    )

    @field_validator("samples")
    @classmethod
    def samples_must_be_finite(cls, v: list[float]) -> list[float]:
        if not all(math.isfinite(s) for s in v):
            raise ValueError("samples must be finite numbers")
        return v


# ---------------------------------------------------------------------------
# /tuner/sensitivity
# ---------------------------------------------------------------------------


class SensitivityUpdate(BaseModel):
    """Request body for PUT /tuner/sensitivity."""

    sensitivity: float = Field(..., ge=1.0, le=100.0)


class SensitivityOut(BaseModel):
    """Current sensitivity and the RMS threshold it produces."""

    sensitivity: float
    threshold: float
    fixed: bool = Field(
        default=False,
        description="True when the gate uses a fixed threshold and ignores sensitivity.",
    )


# ---------------------------------------------------------------------------
# /tuner/file
# ---------------------------------------------------------------------------


class FileTuneRequest(BaseModel):
    """Request body for POST /tuner/file."""

    file_path: str = Field(
        ...,
        description="Absolute path to audio file on the server filesystem.",
    )
    duration: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Maximum seconds to analyse (default 30s).",
    )
    block_size: int | None = Field(
        default=None,
        ge=64,
        le=MAX_BLOCK_SAMPLES,
        description="Samples per block. Omit to use the service default (TUNER_BLOCK_SIZE).",
    )
    hop: int | None = Field(default=None, ge=1, le=MAX_BLOCK_SAMPLES)
    include_readings: bool = Field(
        default=False,
        description="If True, include every per-block reading (can be large).",
    )


class FileTuneResponse(BaseModel):
    """Response body for POST /tuner/file."""

    file_path: str
    sample_rate: int
    block_size: int
    hop: int
    block_count: int
    outcome_counts: dict[str, int]
    dominant_note: str | None = None
    median_frequency: float | None = None
    median_cents: float | None = None
    processing_time_ms: float
    readings: list[ReadingOut] = Field(default_factory=list)
