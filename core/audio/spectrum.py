"""
core/audio/spectrum.py — Spectral primitives used by the estimators.

Defines the two capability interfaces the estimators depend on, plus the
default implementations:

    SpectrumAnalyzer  → FFTSpectrumAnalyzer     (numpy rfft, scipy Hann window)
    ChromaExtractor   → LibrosaChromaExtractor  (librosa.feature.chroma_stft)

Architecture note:
    The estimators only see the protocols, so the FFT/chroma backend can be
    swapped (or faked in tests) without touching the averaging and
    correlation logic. librosa is injected — never imported at module top —
    and the sample rate is passed explicitly on every call instead of being
    set on a shared library context.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np
from scipy import signal as scipy_signal

CHROMA_BINS: int = 12


class AnalysisUnavailable(RuntimeError):
    """A primitive could not produce a usable result for one window.

    Estimators treat this as "skip this chunk/frame" and carry on.
    """


@runtime_checkable
class SpectrumAnalyzer(Protocol):
    """
    Protocol for magnitude-spectrum backends.

    Any object with a ``magnitude_spectrum`` method can be passed to
    ``detect_tuning_reference``.
    """

    def magnitude_spectrum(self, window: np.ndarray) -> np.ndarray:
        """
        Compute the amplitude spectrum of one analysis window.

        Args:
            window: 1-D array of samples. Its length is the FFT size.

        Returns:
            Non-negative magnitudes, one per bin, length ``len(window) // 2``.
            Bin k is centred on ``k * sample_rate / len(window)`` Hz.
        """
        ...


@runtime_checkable
class ChromaExtractor(Protocol):
    """
    Protocol for chroma backends.

    Any object with a ``chroma`` method can be passed to ``detect_key``.
    """

    def chroma(self, window: np.ndarray, sample_rate: int) -> np.ndarray:
        """
        Compute the pitch-class energy of one analysis window.

        Args:
            window: 1-D array of samples.
            sample_rate: Sample rate of the window in Hz.

        Returns:
            Non-negative array of shape (12,), index 0 = C … 11 = B.
        """
        ...


class FFTSpectrumAnalyzer:
    """Hann-windowed real FFT magnitude spectrum.

    Magnitudes are not normalised: a full-scale sine peaks at roughly
    ``len(window) / 4``. The silence threshold in TuningConfig is expressed
    in these units.
    """

    def __init__(self, window: str = "hann") -> None:
        self.window = window

    def magnitude_spectrum(self, window: np.ndarray) -> np.ndarray:
        x = np.asarray(window, dtype=np.float64)
        if x.ndim != 1 or x.shape[0] < 2:
            raise AnalysisUnavailable(f"expected a 1-D window of >= 2 samples, got {x.shape}")
        if not np.all(np.isfinite(x)):
            raise AnalysisUnavailable("window contains non-finite samples")

        n = x.shape[0]
        taper = scipy_signal.get_window(self.window, n)
        spectrum = np.abs(np.fft.rfft(x * taper))
        return spectrum[: n // 2]


class LibrosaChromaExtractor:
    """Single-frame STFT chromagram via librosa.

    Each window is analysed as exactly one STFT frame (n_fft = hop = window
    length, no centring), so the result describes that window alone.
    Tuning estimation inside librosa is disabled; the chroma filterbank is
    laid out on the A440 grid.
    """

    def __init__(self, librosa: Any = None) -> None:
        """
        Args:
            librosa: Injected librosa module. Pass a MagicMock in tests.
                     None = import lazily on first use.
        """
        self._librosa = librosa

    def _get_librosa(self) -> Any:
        if self._librosa is None:
            import librosa as _lib  # lazy import

            self._librosa = _lib
        return self._librosa

    def chroma(self, window: np.ndarray, sample_rate: int) -> np.ndarray:
        librosa = self._get_librosa()
        y = np.asarray(window, dtype=np.float32)
        n_fft = int(y.shape[0])
        chromagram = librosa.feature.chroma_stft(
            y=y,
            sr=sample_rate,
            n_fft=n_fft,
            hop_length=n_fft,
            center=False,
            tuning=0.0,
        )
        return validate_chroma(np.mean(np.asarray(chromagram, dtype=np.float64), axis=-1))


def validate_spectrum(spectrum: Any, window_size: int) -> np.ndarray:
    """Coerce a backend spectrum to a float array or raise AnalysisUnavailable.

    Args:
        spectrum: Whatever the analyzer returned.
        window_size: Length of the window that was analysed.

    Returns:
        1-D float64 array of length ``window_size // 2``.
    """
    if spectrum is None:
        raise AnalysisUnavailable("spectrum backend returned None")
    arr = np.asarray(spectrum, dtype=np.float64)
    expected = window_size // 2
    if arr.ndim != 1 or arr.shape[0] != expected:
        raise AnalysisUnavailable(
            f"spectrum must have shape ({expected},), got {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise AnalysisUnavailable("spectrum contains non-finite values")
    return np.abs(arr)


def validate_chroma(chroma: Any) -> np.ndarray:
    """Coerce a backend chroma vector to shape (12,) or raise AnalysisUnavailable."""
    if chroma is None:
        raise AnalysisUnavailable("chroma backend returned None")
    arr = np.asarray(chroma, dtype=np.float64)
    if arr.shape != (CHROMA_BINS,):
        raise AnalysisUnavailable(f"chroma must have shape (12,), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise AnalysisUnavailable("chroma contains non-finite values")
    return np.clip(arr, 0.0, None)
