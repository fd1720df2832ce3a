"""
core/audio/tuning.py — Concert-pitch (tuning reference) estimation.

Estimates whether a recording was tuned to A440, A432, or anything in
between by measuring how far its dominant spectral peaks sit from the
equal-tempered A440 grid:

    buffer ──► N evenly spaced chunks ──► magnitude spectrum per chunk
           ──► peak bin above the rumble cutoff (skip silent chunks)
           ──► cents from nearest A440 semitone
           ──► mean cents ──► 440 · 2^(cents / 1200) Hz

The mean is taken in cents, not Hz, so peaks in different octaves weigh
equally. Deviations are folded into [-50, 50] cents by construction, so
references more than a quarter-tone from 440 Hz alias onto the
neighbouring semitone.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from core.audio.spectrum import (
    AnalysisUnavailable,
    FFTSpectrumAnalyzer,
    SpectrumAnalyzer,
    validate_spectrum,
)
from core.audio.types import SampleBuffer, TuningEstimate
from core.config import DEFAULT_TUNING_CONFIG, TuningConfig

logger = logging.getLogger(__name__)

A4_HZ: float = 440.0
A4_MIDI: int = 69

_EPS = 1e-12  # floor for log magnitudes


# ---------------------------------------------------------------------------
# Pitch math (pure, no numpy)
# ---------------------------------------------------------------------------


def hz_to_midi(hz: float) -> float:
    """Fractional MIDI note number on the A440 grid (A4 = 69).

    Raises:
        ValueError: If hz <= 0.
    """
    if hz <= 0.0:
        raise ValueError(f"Hz must be > 0, got {hz}")
    return A4_MIDI + 12.0 * math.log2(hz / A4_HZ)


def cents_from_grid(hz: float) -> float:
    """Deviation of hz from the nearest A440 semitone, in cents [-50, 50]."""
    midi = hz_to_midi(hz)
    return (midi - round(midi)) * 100.0


def reference_from_cents(cents: float) -> float:
    """Frequency of A4 for a tuning offset of `cents` from A440."""
    return A4_HZ * 2.0 ** (cents / 1200.0)


# ---------------------------------------------------------------------------
# Spectral peak picking
# ---------------------------------------------------------------------------


def _interpolate_peak(spectrum: np.ndarray, peak: int) -> float:
    """Sub-bin peak offset from a parabola through three log magnitudes.

    Returns a fractional offset in (-0.5, 0.5) to add to `peak`; 0.0 at
    the spectrum edges or when the neighbourhood is flat.
    """
    if peak <= 0 or peak >= spectrum.shape[0] - 1:
        return 0.0
    alpha, beta, gamma = np.log(np.maximum(spectrum[peak - 1 : peak + 2], _EPS))
    curvature = alpha - 2.0 * beta + gamma
    if curvature >= 0.0:
        return 0.0
    offset = 0.5 * (alpha - gamma) / curvature
    return float(max(-0.5, min(0.5, offset)))


def find_peak_frequency(
    spectrum: np.ndarray,
    sample_rate: int,
    window_size: int,
    config: TuningConfig = DEFAULT_TUNING_CONFIG,
) -> tuple[float, float] | None:
    """Locate the strongest bin above the low-frequency cutoff.

    Args:
        spectrum: Magnitudes of length window_size // 2.
        sample_rate: Sample rate in Hz.
        window_size: FFT size that produced `spectrum`.
        config: Cutoff, silence threshold and interpolation settings.

    Returns:
        (frequency_hz, magnitude) of the peak, or None when the peak is
        below the silence threshold.

    Raises:
        AnalysisUnavailable: If no bin lies between the cutoff and Nyquist.
    """
    bin_hz = sample_rate / float(window_size)
    cutoff = max(1, math.ceil(config.min_frequency_hz / bin_hz))
    if cutoff >= spectrum.shape[0]:
        raise AnalysisUnavailable(
            f"cutoff bin {cutoff} is beyond the spectrum ({spectrum.shape[0]} bins)"
        )

    peak = cutoff + int(np.argmax(spectrum[cutoff:]))
    magnitude = float(spectrum[peak])
    if magnitude < config.silence_threshold:
        return None

    position = float(peak)
    if config.interpolate_peak:
        position += _interpolate_peak(spectrum, peak)
    return position * bin_hz, magnitude


# ---------------------------------------------------------------------------
# Estimator
# ---------------------------------------------------------------------------


def chunk_starts(length: int, window_size: int, chunk_count: int) -> list[int]:
    """Start offsets of the analysis chunks that fit inside the buffer.

    Starts are spaced ``length // chunk_count`` apart; chunks whose window
    would run past the end are dropped.
    """
    step = length // chunk_count
    return [i * step for i in range(chunk_count) if i * step + window_size <= length]


def estimate_tuning(
    buffer: SampleBuffer,
    *,
    analyzer: SpectrumAnalyzer | None = None,
    config: TuningConfig = DEFAULT_TUNING_CONFIG,
) -> TuningEstimate:
    """Estimate the tuning reference of a buffer.

    Args:
        buffer: Channel-0 samples and sample rate.
        analyzer: Spectrum backend. None = FFTSpectrumAnalyzer().
        config: Window, chunking and threshold settings.

    Returns:
        TuningEstimate. When no chunk is usable (silence, too short, every
        chunk failed) reference_hz is config.default_reference_hz and
        chunks_used is 0.
    """
    analyzer = analyzer or FFTSpectrumAnalyzer()
    window_size = config.window_size
    samples = buffer.samples

    total_cents = 0.0
    valid_chunks = 0

    for start in chunk_starts(buffer.length, window_size, config.chunk_count):
        window = samples[start : start + window_size]
        try:
            spectrum = validate_spectrum(analyzer.magnitude_spectrum(window), window_size)
            peak = find_peak_frequency(spectrum, buffer.sample_rate, window_size, config)
        except Exception as exc:  # best-effort per chunk
            logger.debug("Skipping tuning chunk at sample %d: %s", start, exc)
            continue

        if peak is None:
            continue
        frequency_hz, _magnitude = peak
        total_cents += cents_from_grid(frequency_hz)
        valid_chunks += 1

    if valid_chunks == 0:
        logger.debug(
            "No usable chunks in %d samples; defaulting to %d Hz",
            buffer.length,
            config.default_reference_hz,
        )
        return TuningEstimate(
            reference_hz=config.default_reference_hz,
            cents_offset=0.0,
            chunks_used=0,
        )

    mean_cents = total_cents / valid_chunks
    return TuningEstimate(
        reference_hz=int(round(reference_from_cents(mean_cents))),
        cents_offset=mean_cents,
        chunks_used=valid_chunks,
    )


def detect_tuning_reference(
    buffer: SampleBuffer,
    *,
    analyzer: SpectrumAnalyzer | None = None,
    config: TuningConfig = DEFAULT_TUNING_CONFIG,
) -> int:
    """Tuning reference of a buffer in whole Hz (default 440).

    Never raises for signal problems; see estimate_tuning().
    """
    return estimate_tuning(buffer, analyzer=analyzer, config=config).reference_hz
