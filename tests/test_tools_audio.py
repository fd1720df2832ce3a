"""
Tests for tools/music/analyze_audio.py and tools/music/plan_pitch_shift.py.

AnalyzeAudio gets a fake engine so no audio backend is touched.
PlanPitchShift is pure math.
"""

from unittest.mock import MagicMock, patch

import pytest

from core.audio.pitch import available_keys
from core.audio.types import KeyEstimate, TuningEstimate
from core.config import (
    DEFAULT_KEY_CONFIG,
    DEFAULT_TUNING_CONFIG,
    HIGH_RESOLUTION_TUNING_CONFIG,
    OVERLAPPING_KEY_CONFIG,
)
from ingestion.audio_engine import AudioAnalysis
from tools.music.analyze_audio import AnalyzeAudio
from tools.music.plan_pitch_shift import PlanPitchShift

# ---------------------------------------------------------------------------
# AnalyzeAudio
# ---------------------------------------------------------------------------


def _analysis(key: KeyEstimate | None = None, reference_hz: int = 432) -> AudioAnalysis:
    return AudioAnalysis(
        key=key,
        tuning=TuningEstimate(reference_hz=reference_hz, cents_offset=-31.7654, chunks_used=40),
        duration_sec=12.3456,
        sample_rate=44100,
        processing_time_ms=87.654,
    )


def _fake_engine(analysis: AudioAnalysis | None = None, error: Exception | None = None):
    engine = MagicMock()
    if error is not None:
        engine.analyze_file.side_effect = error
    else:
        engine.analyze_file.return_value = analysis or _analysis()
    return engine


class TestAnalyzeAudioProperties:
    def test_name(self):
        """Tool is registered as analyze_audio."""
        assert AnalyzeAudio().name == "analyze_audio"

    def test_file_path_is_required(self):
        """Only file_path is required; the rest have defaults."""
        params = {p.name: p for p in AnalyzeAudio().parameters}
        assert params["file_path"].required is True
        assert params["duration"].required is False
        assert params["overlap"].default is False
        assert params["high_resolution"].default is False


class TestAnalyzeAudioEngineSelection:
    """The option flags pick the engine's presets."""

    def _built_engine(self, **kwargs):
        with patch("ingestion.audio_engine.AudioAnalysisEngine") as engine_cls:
            engine_cls.return_value.analyze_file.return_value = _analysis()
            result = AnalyzeAudio()(file_path="/music/song.wav", **kwargs)
        assert result.success is True
        return engine_cls.call_args.kwargs, result

    def test_defaults(self):
        """No flags → default tuning and key presets."""
        kwargs, _ = self._built_engine()
        assert kwargs["tuning_config"] is DEFAULT_TUNING_CONFIG
        assert kwargs["key_config"] is DEFAULT_KEY_CONFIG

    def test_high_resolution_uses_long_window(self):
        """high_resolution=True selects the 16384-sample tuning preset."""
        kwargs, result = self._built_engine(high_resolution=True)
        assert kwargs["tuning_config"] is HIGH_RESOLUTION_TUNING_CONFIG
        assert result.metadata["high_resolution"] is True

    def test_overlap_uses_overlapping_frames(self):
        """overlap=True selects the overlapping key preset."""
        kwargs, result = self._built_engine(overlap=True)
        assert kwargs["key_config"] is OVERLAPPING_KEY_CONFIG
        assert result.metadata["overlap"] is True


class TestAnalyzeAudioExecute:
    def test_success_payload(self):
        """Key, tuning, duration and sample rate are reported and rounded."""
        key = KeyEstimate(tonic="A", mode="Minor", score=0.876543)
        tool = AnalyzeAudio(engine=_fake_engine(_analysis(key)))

        result = tool(file_path="/music/song.wav")

        assert result.success is True
        assert result.data["key"] == {
            "label": "A Minor",
            "tonic": "A",
            "mode": "Minor",
            "score": 0.8765,
        }
        assert result.data["tuning"] == {
            "reference_hz": 432,
            "cents_offset": -31.77,
            "chunks_used": 40,
        }
        assert result.data["duration_sec"] == 12.35
        assert result.data["sample_rate"] == 44100
        assert result.metadata["file"] == "/music/song.wav"
        assert result.metadata["processing_time_ms"] == 87.7

    def test_unknown_key_payload(self):
        """An undetermined key is reported as label 'Unknown' only."""
        tool = AnalyzeAudio(engine=_fake_engine(_analysis(None)))
        result = tool(file_path="/music/noise.wav")
        assert result.success is True
        assert result.data["key"] == {"label": "Unknown"}

    def test_duration_forwarded_as_float(self):
        """An int duration reaches the engine as float."""
        engine = _fake_engine()
        AnalyzeAudio(engine=engine)(file_path="/music/song.wav", duration=30)
        assert engine.analyze_file.call_args.kwargs["duration"] == 30.0

    def test_empty_path_is_error(self):
        """A blank path is rejected before the engine runs."""
        result = AnalyzeAudio(engine=_fake_engine())(file_path="   ")
        assert result.success is False
        assert "cannot be empty" in result.error

    def test_missing_path_is_validation_error(self):
        """Omitting file_path fails validation."""
        result = AnalyzeAudio(engine=_fake_engine())()
        assert result.success is False
        assert "Required parameter 'file_path'" in result.error

    def test_file_not_found(self):
        """FileNotFoundError becomes a 'File not found' result."""
        engine = _fake_engine(error=FileNotFoundError("Audio file not found: /x.wav"))
        result = AnalyzeAudio(engine=engine)(file_path="/x.wav")
        assert result.success is False
        assert result.error.startswith("File not found")

    def test_unsupported_format(self):
        """ValueError from the loader is passed through."""
        engine = _fake_engine(error=ValueError("Unsupported audio format '.pdf'"))
        result = AnalyzeAudio(engine=engine)(file_path="/x.pdf")
        assert result.success is False
        assert "Unsupported audio format" in result.error

    def test_decode_failure(self):
        """RuntimeError becomes an 'Analysis failed' result."""
        engine = _fake_engine(error=RuntimeError("Failed to decode audio file"))
        result = AnalyzeAudio(engine=engine)(file_path="/x.mp3")
        assert result.success is False
        assert result.error.startswith("Analysis failed")

    def test_real_engine_reports_missing_file(self):
        """Without an injected engine the default pipeline is built and fails cleanly."""
        with patch.dict("sys.modules", {"librosa": MagicMock()}):
            result = AnalyzeAudio()(file_path="/nonexistent/song.wav", overlap=True)
        assert result.success is False
        assert "not found" in result.error


# ---------------------------------------------------------------------------
# PlanPitchShift
# ---------------------------------------------------------------------------


class TestPlanPitchShiftHz:
    def test_defaults_retune_440_to_432(self):
        """With no arguments the plan retunes 440 → 432 by varispeed."""
        result = PlanPitchShift()()
        assert result.success is True
        assert result.data["semitones"] == pytest.approx(-0.3177, abs=1e-4)
        assert result.data["playback_rate"] == pytest.approx(432 / 440, abs=1e-6)
        assert result.data["pitch_shift_semitones"] == 0.0
        assert result.metadata == {"mode": "hz", "base_hz": 440.0, "target_hz": 432.0}

    def test_preserve_tempo(self):
        """preserve_tempo moves the shift from the rate to the shifter."""
        result = PlanPitchShift()(base_hz=440, target_hz=432, preserve_tempo=True)
        assert result.data["playback_rate"] == 1.0
        assert result.data["pitch_shift_semitones"] == pytest.approx(-0.3177, abs=1e-4)
        assert result.data["preserve_tempo"] is True

    def test_bypass(self):
        """bypass keeps the semitone amount but plays the original."""
        result = PlanPitchShift()(target_hz=880.0, bypass=True)
        assert result.data["semitones"] == pytest.approx(12.0)
        assert result.data["playback_rate"] == 1.0
        assert result.data["bypassed"] is True

    def test_non_positive_frequency_is_error(self):
        """A zero base frequency is reported, not raised."""
        result = PlanPitchShift()(base_hz=0.0)
        assert result.success is False
        assert "must be finite and > 0" in result.error

    @pytest.mark.parametrize("base_hz", [float("nan"), float("inf")])
    def test_non_finite_frequency_is_error(self, base_hz):
        """NaN or infinite input fails instead of producing NaN output."""
        result = PlanPitchShift()(base_hz=base_hz, target_hz=432.0)
        assert result.success is False
        assert result.data is None
        assert "finite" in result.error

    def test_invalid_mode_rejected(self):
        """Modes other than hz and key fail validation."""
        result = PlanPitchShift()(mode="cents")
        assert result.success is False
        assert "must be one of" in result.error


class TestPlanPitchShiftKey:
    def test_key_choices_are_the_24_keys(self):
        """from_key and to_key only accept the labels of available_keys()."""
        params = {p.name: p for p in PlanPitchShift().parameters}
        assert params["from_key"].choices == available_keys()
        assert params["to_key"].choices == available_keys()

    def test_a_minor_to_c_major(self):
        """A → C is +3 semitones."""
        result = PlanPitchShift()(mode="key", from_key="A Minor", to_key="C Major")
        assert result.success is True
        assert result.data["semitones"] == 3.0
        assert result.data["playback_rate"] == pytest.approx(2 ** (3 / 12), abs=1e-6)
        assert result.metadata == {"mode": "key", "from_key": "A Minor", "to_key": "C Major"}

    def test_shortest_path_down(self):
        """C → A folds to -3 semitones."""
        result = PlanPitchShift()(mode="key", from_key="C Major", to_key="A Minor")
        assert result.data["semitones"] == -3.0

    def test_missing_key_is_error(self):
        """Key mode needs both keys."""
        result = PlanPitchShift()(mode="key", from_key="C Major")
        assert result.success is False
        assert "from_key and to_key are required" in result.error

    def test_unknown_key_is_error(self):
        """'Unknown' is not a key that can be transposed from."""
        result = PlanPitchShift()(mode="key", from_key="Unknown", to_key="C Major")
        assert result.success is False
        assert "Parameter 'from_key' must be one of" in result.error

    def test_flat_notation_is_rejected(self):
        """Only sharps-notation labels are accepted."""
        result = PlanPitchShift()(mode="key", from_key="C Major", to_key="Bb Major")
        assert result.success is False
        assert "Parameter 'to_key' must be one of" in result.error
