"""
ingestion/audio_loader.py — File I/O boundary for the tuner's file host.

This is the ONLY module that reads audio from disk. The tuner core
(core/tuner/) takes pre-loaded blocks and a sample rate, never file paths.

Two steps:
    load_audio()  — decode a file to a mono float32 array via librosa
    iter_blocks() — cut that array into the fixed-size blocks a live
                    audio callback would have delivered

Usage:
    from ingestion.audio_loader import iter_blocks, load_audio
    y, sr = load_audio("/path/to/a440.wav", duration=10.0)
    for block in iter_blocks(y, 2048):
        ...
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import numpy as np

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus"}
)

# Default: load only the first N seconds of a take
DEFAULT_DURATION: float = 30.0


def load_audio(
    path: str | Path,
    *,
    duration: float | None = DEFAULT_DURATION,
    sr: int | None = None,
    librosa: Any = None,
) -> tuple[np.ndarray, int]:
    """Load an audio file as mono and return (y, sr).

    Args:
        path: Path to an audio file (mp3, wav, flac, aiff, ogg, m4a, opus).
        duration: Maximum seconds to load. None loads the whole file.
        sr: Target sample rate in Hz. None keeps the native rate, which is
            what a microphone host would report.
        librosa: Injected librosa module. None = import lazily.

    Returns:
        (y, sr) — 1-D float32 array and integer sample rate.

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: File extension is not a supported audio format.
        RuntimeError: The file could not be decoded.
    """
    if librosa is None:
        import librosa  # deferred to allow testing without audio backend

    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    try:
        y, loaded_sr = librosa.load(file_path, sr=sr, mono=True, duration=duration)
    except Exception as exc:
        raise RuntimeError(f"Failed to decode audio file {file_path.name!r}: {exc}") from exc

    return np.asarray(y, dtype=np.float32), int(loaded_sr)


def iter_blocks(
    y: np.ndarray,
    block_size: int,
    *,
    hop: int | None = None,
) -> Iterator[np.ndarray]:
    """Yield consecutive fixed-size blocks from a mono signal.

    A trailing partial block is dropped; a live host never delivers one.

    Args:
        y: 1-D audio array.
        block_size: Samples per block.
        hop: Samples between block starts. None = block_size (no overlap).

    Yields:
        Read-only views of length block_size.

    Raises:
        ValueError: If block_size or hop is not positive.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")
    step = block_size if hop is None else hop
    if step <= 0:
        raise ValueError(f"hop must be positive, got {step}")

    y = np.asarray(y)
    for start in range(0, len(y) - block_size + 1, step):
        block = y[start : start + block_size]
        block.flags.writeable = False
        yield block
