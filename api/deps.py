"""
FastAPI dependency providers.

Provides singletons for the tuner session and the file engine so they are
created once and shared across requests. The session carries the only
mutable tuner state (sensitivity), so every request sees the value most
recently set through PUT /tuner/sensitivity.

Environment:
    TUNER_SENSITIVITY   Starting sensitivity, 1–100 (default 50).
    TUNER_BLOCK_SIZE    Default samples per block for file analysis (default 2048).
    TUNER_FIXED_GATE    If set, a fixed RMS threshold that overrides sensitivity.
"""

import logging
import os

from core.tuner.config import DEFAULT_CONFIG, TunerConfig
from core.tuner.session import TunerSession
from infrastructure.metrics import set_sensitivity
from ingestion.tuner_engine import TunerEngine

logger = logging.getLogger(__name__)


def load_tuner_config() -> TunerConfig:
    """Build a TunerConfig from environment variables.

    Unset variables keep DEFAULT_CONFIG values.

    Raises:
        ValueError: If a variable is set but not a valid number, or the
            resulting config fails validation.
    """
    sensitivity = os.environ.get("TUNER_SENSITIVITY")
    block_size = os.environ.get("TUNER_BLOCK_SIZE")
    fixed_gate = os.environ.get("TUNER_FIXED_GATE")
    return TunerConfig(
        default_sensitivity=(
            float(sensitivity) if sensitivity else DEFAULT_CONFIG.default_sensitivity
        ),
        block_size=int(block_size) if block_size else DEFAULT_CONFIG.block_size,
        fixed_threshold=float(fixed_gate) if fixed_gate else None,
    )


_tuner_session: TunerSession | None = None


def get_tuner_session() -> TunerSession:
    """
    Return a cached ``TunerSession`` singleton.

    Reads ``TUNER_*`` env vars on first call. The session is reused
    thereafter so sensitivity changes persist across requests.
    """
    global _tuner_session  # noqa: PLW0603
    if _tuner_session is None:
        config = load_tuner_config()
        _tuner_session = TunerSession(config)
        set_sensitivity(_tuner_session.sensitivity)
        logger.info(
            "Tuner session created: sensitivity=%.0f block_size=%d fixed_gate=%s",
            _tuner_session.sensitivity,
            config.block_size,
            config.fixed_threshold,
        )
    return _tuner_session


_tuner_engine: TunerEngine | None = None


def get_tuner_engine() -> TunerEngine:
    """Return a cached ``TunerEngine`` bound to the shared session.

    librosa is imported lazily on the first file request.
    """
    global _tuner_engine  # noqa: PLW0603
    if _tuner_engine is None:
        _tuner_engine = TunerEngine(get_tuner_session())
    return _tuner_engine
