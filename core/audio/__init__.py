"""
core/audio — Pure audio analysis module.

Estimates the tuning reference and musical key of decoded audio.
All functions take a SampleBuffer (one channel + sample rate) and return
plain values or frozen dataclasses. No file I/O — that lives in
ingestion/audio_loader.py.

Architecture note:
    numpy and scipy are DSP-pure libraries (no I/O, no side effects).
    librosa is injected into LibrosaChromaExtractor — never imported at
    module top — so tests can swap it for a mock.

Public API:
    Types:      SampleBuffer, KeyEstimate, TuningEstimate, PitchShiftPlan
    Tuning:     detect_tuning_reference, estimate_tuning
    Key:        detect_key, estimate_key
    Pitch:      semitones_between, key_shift, plan_pitch_shift
"""

from core.audio.key import detect_key, estimate_key
from core.audio.pitch import key_shift, plan_pitch_shift, semitones_between
from core.audio.tuning import detect_tuning_reference, estimate_tuning
from core.audio.types import (
    UNKNOWN_KEY,
    KeyEstimate,
    PitchShiftPlan,
    SampleBuffer,
    TuningEstimate,
)

__all__ = [
    "SampleBuffer",
    "KeyEstimate",
    "TuningEstimate",
    "PitchShiftPlan",
    "UNKNOWN_KEY",
    "detect_tuning_reference",
    "estimate_tuning",
    "detect_key",
    "estimate_key",
    "semitones_between",
    "key_shift",
    "plan_pitch_shift",
]
