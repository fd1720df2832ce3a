"""
Shared fixtures for the test suite.

Synthetic signals and fake spectral backends, so estimator tests run on
known inputs without audio files or the librosa stack.
"""

from collections.abc import Sequence

import numpy as np
import pytest

from core.audio.types import SampleBuffer

SR: int = 44100
"""Sample rate used by the synthetic buffers."""


# ---------------------------------------------------------------------------
# Signal factories
# ---------------------------------------------------------------------------


def make_tone(
    frequencies: Sequence[float],
    *,
    seconds: float = 2.0,
    sr: int = SR,
    amplitude: float = 0.5,
) -> SampleBuffer:
    """Sum of equal-amplitude sines, scaled to `amplitude` peak per partial."""
    t = np.arange(int(seconds * sr)) / sr
    y = np.zeros_like(t)
    for freq in frequencies:
        y += amplitude * np.sin(2.0 * np.pi * freq * t)
    return SampleBuffer(samples=y / max(1, len(frequencies)), sample_rate=sr)


def make_sine(freq: float, **kwargs) -> SampleBuffer:
    """Pure sine tone buffer."""
    return make_tone([freq], **kwargs)


def make_silence(n_samples: int, sr: int = SR) -> SampleBuffer:
    """All-zero buffer."""
    return SampleBuffer(samples=np.zeros(n_samples), sample_rate=sr)


# ---------------------------------------------------------------------------
# Fake backends
# ---------------------------------------------------------------------------


class ConstantChroma:
    """ChromaExtractor that returns the same vector for every frame."""

    def __init__(self, vector: Sequence[float]) -> None:
        self.vector = np.asarray(vector, dtype=np.float64)
        self.calls = 0

    def chroma(self, window: np.ndarray, sample_rate: int) -> np.ndarray:
        self.calls += 1
        return self.vector.copy()


class RecordingChroma:
    """ChromaExtractor that records the first sample of every frame it sees."""

    def __init__(self, vector: Sequence[float]) -> None:
        self.vector = np.asarray(vector, dtype=np.float64)
        self.first_samples: list[float] = []
        self.lengths: list[int] = []

    def chroma(self, window: np.ndarray, sample_rate: int) -> np.ndarray:
        self.first_samples.append(float(window[0]))
        self.lengths.append(len(window))
        return self.vector.copy()


class SpikeSpectrum:
    """SpectrumAnalyzer whose spectrum is zero except for one bin."""

    def __init__(self, peak_bin: int, magnitude: float = 10.0) -> None:
        self.peak_bin = peak_bin
        self.magnitude = magnitude

    def magnitude_spectrum(self, window: np.ndarray) -> np.ndarray:
        spectrum = np.zeros(len(window) // 2)
        spectrum[self.peak_bin] = self.magnitude
        return spectrum


class FailingBackend:
    """Backend that raises on every call."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or RuntimeError("backend exploded")
        self.calls = 0

    def magnitude_spectrum(self, window: np.ndarray) -> np.ndarray:
        self.calls += 1
        raise self.exc

    def chroma(self, window: np.ndarray, sample_rate: int) -> np.ndarray:
        self.calls += 1
        raise self.exc


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sine_440() -> SampleBuffer:
    return make_sine(440.0)


@pytest.fixture
def sine_432() -> SampleBuffer:
    return make_sine(432.0)


@pytest.fixture
def silent_buffer() -> SampleBuffer:
    return make_silence(SR * 2)


@pytest.fixture
def short_buffer() -> SampleBuffer:
    """1000 samples — shorter than any analysis window."""
    return make_sine(432.0, seconds=1000 / SR)
