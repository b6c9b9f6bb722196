"""
Shared fixtures for the tuner test suite.

Provides a fresh TunerSession per test, a fake librosa that "decodes" any
file to one second of A4, and an HTTP client wired to both through
FastAPI dependency overrides.
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
from fastapi.testclient import TestClient

from api.deps import get_tuner_engine, get_tuner_session
from api.main import app
from core.tuner.session import TunerSession
from ingestion.tuner_engine import TunerEngine

SAMPLE_RATE: int = 44100
"""Sample rate used by most fixtures (CD / browser default)."""


def make_mock_librosa(y: np.ndarray | None = None, sr: int = SAMPLE_RATE) -> MagicMock:
    """Build a ``MagicMock`` librosa whose ``load`` returns ``(y, sr)``.

    Defaults to one second of a 440 Hz sine at half amplitude.
    """
    if y is None:
        t = np.arange(sr) / sr
        y = (0.5 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)
    mock = MagicMock()
    mock.load.return_value = (y, sr)
    return mock


@pytest.fixture()
def tuner_session() -> TunerSession:
    """Fresh session with the default config (sensitivity 50)."""
    return TunerSession()


@pytest.fixture()
def mock_librosa() -> MagicMock:
    return make_mock_librosa()


@pytest.fixture()
def api_client(tuner_session: TunerSession, mock_librosa: MagicMock):
    """``TestClient`` whose session and engine are this test's own.

    The session and the mock are reachable as ``client._session`` and
    ``client._librosa`` so tests can inspect or reconfigure them.
    """
    engine = TunerEngine(tuner_session, librosa=mock_librosa)
    app.dependency_overrides[get_tuner_session] = lambda: tuner_session
    app.dependency_overrides[get_tuner_engine] = lambda: engine

    with TestClient(app) as client:
        client._session = tuner_session  # type: ignore[attr-defined]
        client._librosa = mock_librosa  # type: ignore[attr-defined]
        yield client

    app.dependency_overrides.clear()
