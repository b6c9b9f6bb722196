"""
Tests for ingestion/audio_loader.py — file I/O boundary.

librosa is never imported for real: tests either inject a MagicMock or
patch it into sys.modules, so no audio backend or real audio file is needed.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from ingestion.audio_loader import AUDIO_EXTENSIONS, DEFAULT_DURATION, iter_blocks, load_audio

# ---------------------------------------------------------------------------
# load_audio — error conditions
# ---------------------------------------------------------------------------


class TestLoadAudioErrors:
    def test_raises_file_not_found(self, mock_librosa):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_audio("/nonexistent/a440.wav", librosa=mock_librosa)
        mock_librosa.load.assert_not_called()

    def test_raises_value_error_for_unsupported_extension(self, tmp_path, mock_librosa):
        doc = tmp_path / "notes.pdf"
        doc.write_bytes(b"not audio")
        with pytest.raises(ValueError, match="Unsupported audio format"):
            load_audio(doc, librosa=mock_librosa)

    def test_raises_runtime_error_on_decode_failure(self, tmp_path, mock_librosa):
        audio_file = tmp_path / "corrupt.wav"
        audio_file.write_bytes(b"not valid audio data")
        mock_librosa.load.side_effect = Exception("decode error")

        with pytest.raises(RuntimeError, match="Failed to decode") as exc_info:
            load_audio(audio_file, librosa=mock_librosa)
        assert isinstance(exc_info.value.__cause__, Exception)


# ---------------------------------------------------------------------------
# load_audio — success
# ---------------------------------------------------------------------------


class TestLoadAudioSuccess:
    def test_returns_float32_mono_and_int_sr(self, tmp_path, mock_librosa):
        audio_file = tmp_path / "a440.wav"
        audio_file.write_bytes(b"fake wav")

        y, sr = load_audio(audio_file, librosa=mock_librosa)

        assert isinstance(y, np.ndarray)
        assert y.dtype == np.float32
        assert y.ndim == 1
        assert sr == 44100
        assert type(sr) is int

    def test_passes_mono_native_rate_and_duration(self, tmp_path, mock_librosa):
        audio_file = tmp_path / "a440.flac"
        audio_file.write_bytes(b"fake flac")

        load_audio(audio_file, librosa=mock_librosa)

        _, kwargs = mock_librosa.load.call_args
        assert kwargs["mono"] is True
        assert kwargs["sr"] is None
        assert kwargs["duration"] == DEFAULT_DURATION

    def test_custom_duration_and_sr(self, tmp_path, mock_librosa):
        audio_file = tmp_path / "a440.wav"
        audio_file.write_bytes(b"fake wav")

        load_audio(audio_file, duration=None, sr=22050, librosa=mock_librosa)

        _, kwargs = mock_librosa.load.call_args
        assert kwargs["duration"] is None
        assert kwargs["sr"] == 22050

    def test_uppercase_extension_accepted(self, tmp_path, mock_librosa):
        audio_file = tmp_path / "A440.WAV"
        audio_file.write_bytes(b"fake wav")
        _, sr = load_audio(audio_file, librosa=mock_librosa)
        assert sr == 44100

    def test_lazy_import_uses_sys_modules(self, tmp_path):
        audio_file = tmp_path / "a440.mp3"
        audio_file.write_bytes(b"fake mp3")
        mock = MagicMock()
        mock.load.return_value = (np.zeros(48000, dtype=np.float32), 48000)

        with patch.dict("sys.modules", {"librosa": mock}):
            _, sr = load_audio(audio_file)

        assert sr == 48000
        mock.load.assert_called_once()

    def test_common_formats_supported(self):
        for ext in (".wav", ".mp3", ".flac", ".ogg"):
            assert ext in AUDIO_EXTENSIONS


# ---------------------------------------------------------------------------
# iter_blocks
# ---------------------------------------------------------------------------


class TestIterBlocks:
    def test_exact_multiple(self):
        blocks = list(iter_blocks(np.arange(8192, dtype=np.float32), 2048))
        assert len(blocks) == 4
        assert all(len(b) == 2048 for b in blocks)
        assert blocks[1][0] == 2048

    def test_trailing_partial_block_dropped(self):
        blocks = list(iter_blocks(np.zeros(5000), 2048))
        assert len(blocks) == 2

    def test_signal_shorter_than_block_yields_nothing(self):
        assert list(iter_blocks(np.zeros(100), 2048)) == []

    def test_hop_overlaps_blocks(self):
        blocks = list(iter_blocks(np.arange(4096, dtype=np.float32), 2048, hop=1024))
        assert len(blocks) == 3
        assert blocks[1][0] == 1024

    def test_blocks_are_read_only_views(self):
        y = np.zeros(4096)
        block = next(iter_blocks(y, 2048))
        with pytest.raises(ValueError):
            block[0] = 1.0
        y[0] = 0.25
        assert block[0] == 0.25

    def test_accepts_lists(self):
        blocks = list(iter_blocks([0.0] * 10, 5))
        assert len(blocks) == 2

    @pytest.mark.parametrize(("block_size", "hop"), [(0, None), (-1, None), (2048, 0), (2048, -5)])
    def test_non_positive_sizes_raise(self, block_size, hop):
        with pytest.raises(ValueError):
            list(iter_blocks(np.zeros(4096), block_size, hop=hop))
