"""
ingestion/audio_engine.py — Orchestrator for the file → analysis pipeline.

AudioAnalysisEngine wires the stages together:

    audio file
        │
        ├─ load_audio()               [ingestion/audio_loader.py — I/O boundary]
        │       ↓  SampleBuffer (channel 0)
        ├─ estimate_key()             [core/audio/key.py — chroma + K-S]
        │       ↓
        └─ estimate_tuning()          [core/audio/tuning.py — peak cents]

This module is in `ingestion/` because it performs file I/O. The analysis
itself is pure and lives in `core/`. The file is decoded once; both
estimators read the same buffer and share nothing else.

Usage:
    engine = AudioAnalysisEngine()
    analysis = engine.analyze_file("/path/to/song.flac")
    print(analysis.key_label, analysis.tuning.reference_hz)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.audio.key import estimate_key
from core.audio.spectrum import ChromaExtractor, LibrosaChromaExtractor, SpectrumAnalyzer
from core.audio.tuning import estimate_tuning
from core.audio.types import UNKNOWN_KEY, KeyEstimate, SampleBuffer, TuningEstimate
from core.config import DEFAULT_KEY_CONFIG, DEFAULT_TUNING_CONFIG, KeyConfig, TuningConfig
from ingestion.audio_loader import load_audio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioAnalysis:
    """Output of AudioAnalysisEngine.

    Attributes:
        key:                Best key estimate, None if undetermined.
        tuning:             Tuning-reference estimate (440 Hz default on failure).
        duration_sec:       Duration of the analysed buffer in seconds.
        sample_rate:        Sample rate of the analysed buffer in Hz.
        processing_time_ms: Wall-clock time of both estimators in milliseconds.
    """

    key: KeyEstimate | None
    tuning: TuningEstimate
    duration_sec: float
    sample_rate: int
    processing_time_ms: float = 0.0

    @property
    def key_label(self) -> str:
        """'A Minor'-style label, or 'Unknown'."""
        return self.key.label if self.key is not None else UNKNOWN_KEY


class AudioAnalysisEngine:
    """Runs tuning and key estimation over an audio file or buffer.

    librosa is imported lazily on first use (or injected for testing) and
    shared by the loader and the default chroma backend.

    Example:
        engine = AudioAnalysisEngine(key_config=OVERLAPPING_KEY_CONFIG)
        analysis = engine.analyze_file("/path/to/loop.wav", duration=60.0)
    """

    def __init__(
        self,
        librosa: Any = None,
        *,
        analyzer: SpectrumAnalyzer | None = None,
        extractor: ChromaExtractor | None = None,
        tuning_config: TuningConfig = DEFAULT_TUNING_CONFIG,
        key_config: KeyConfig = DEFAULT_KEY_CONFIG,
    ) -> None:
        """Initialise the engine.

        Args:
            librosa: Injected librosa module. Pass a MagicMock in tests to avoid
                     loading the audio stack. None = import lazily on first use.
            analyzer: Spectrum backend for tuning. None = FFT default.
            extractor: Chroma backend for key detection. None = librosa chroma.
            tuning_config: Settings for estimate_tuning().
            key_config: Settings for estimate_key().
        """
        self._librosa = librosa
        self._analyzer = analyzer
        self._extractor = extractor
        self.tuning_config = tuning_config
        self.key_config = key_config

    def _get_librosa(self) -> Any:
        """Return librosa, importing it lazily if not already injected."""
        if self._librosa is None:
            import librosa as _lib  # lazy import

            self._librosa = _lib
        return self._librosa

    def _get_extractor(self) -> ChromaExtractor:
        if self._extractor is None:
            self._extractor = LibrosaChromaExtractor(librosa=self._get_librosa())
        return self._extractor

    def analyze_buffer(self, buffer: SampleBuffer) -> AudioAnalysis:
        """Estimate key and tuning reference of an already-decoded buffer."""
        started = time.perf_counter()

        key = estimate_key(buffer, extractor=self._get_extractor(), config=self.key_config)
        tuning = estimate_tuning(buffer, analyzer=self._analyzer, config=self.tuning_config)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        analysis = AudioAnalysis(
            key=key,
            tuning=tuning,
            duration_sec=buffer.duration_sec,
            sample_rate=buffer.sample_rate,
            processing_time_ms=elapsed_ms,
        )

        if key is None:
            logger.warning("Key undetermined for %.2f s of audio", buffer.duration_sec)
        if tuning.is_default:
            logger.warning(
                "No usable spectral peaks; tuning reference defaulted to %d Hz",
                tuning.reference_hz,
            )
        logger.info(
            "Analysis: key=%s reference=%d Hz (%+.1f cents, %d chunks) in %.0f ms",
            analysis.key_label,
            tuning.reference_hz,
            tuning.cents_offset,
            tuning.chunks_used,
            elapsed_ms,
        )
        return analysis

    def analyze_file(
        self,
        path: str | Path,
        *,
        duration: float | None = None,
    ) -> AudioAnalysis:
        """Load an audio file and estimate its key and tuning reference.

        Args:
            path:     Path to an audio file (mp3, wav, flac, etc.)
            duration: Maximum seconds to load. None loads the whole file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file extension is not a supported format.
            RuntimeError: If the audio cannot be decoded.
        """
        buffer = load_audio(path, duration=duration, librosa=self._get_librosa())
        return self.analyze_buffer(buffer)
