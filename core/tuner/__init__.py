"""
core/tuner — Pure real-time tuner core.

Per audio block: RMS gate → YIN pitch estimate → frequency range filter →
nearest equal-tempered note with cents deviation and piano key. Every
function takes (block, sample_rate) or a frequency and returns a value; no
file I/O, no logging, no cross-block state. Loading audio lives in
ingestion/audio_loader.py, HTTP in api/routes/tuner.py.

Public API:
    Types:     TunerOutcome, TunerReading, NoteInfo, GateDecision
    Config:    TunerConfig, DEFAULT_CONFIG, LEGACY_GATE_CONFIG
    Gate:      signal_rms, threshold_for_sensitivity, should_analyze, evaluate_gate
    Estimator: estimate_pitch
    Mapper:    map_to_note, in_frequency_range
    Session:   TunerSession
    Display:   TunerDisplay, render_reading
"""

from core.tuner.config import DEFAULT_CONFIG, LEGACY_GATE_CONFIG, TunerConfig
from core.tuner.display import TunerDisplay, render_reading
from core.tuner.gate import evaluate_gate, should_analyze, signal_rms, threshold_for_sensitivity
from core.tuner.notes import in_frequency_range, map_to_note
from core.tuner.pitch import estimate_pitch
from core.tuner.session import TunerSession
from core.tuner.types import GateDecision, NoteInfo, TunerOutcome, TunerReading

__all__ = [
    "DEFAULT_CONFIG",
    "LEGACY_GATE_CONFIG",
    "GateDecision",
    "NoteInfo",
    "TunerConfig",
    "TunerDisplay",
    "TunerOutcome",
    "TunerReading",
    "TunerSession",
    "estimate_pitch",
    "evaluate_gate",
    "in_frequency_range",
    "map_to_note",
    "render_reading",
    "should_analyze",
    "signal_rms",
    "threshold_for_sensitivity",
]
