"""
core/audio/key.py — Musical key estimation from accumulated chroma.

Pipeline:
    1. Take a centred window of up to KeyConfig.max_seconds.
    2. Cut it into frames of frame_size, one every hop_size samples.
    3. Sum the 12-bin chroma of every frame, divide by the frame count.
    4. Correlate the mean chroma with all 24 Krumhansl-Schmuckler
       templates (see core/audio/profiles.py) and keep the best.

The chroma backend is injected through the ChromaExtractor protocol; the
default wraps librosa and imports it lazily.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from core.audio.profiles import best_key
from core.audio.spectrum import (
    CHROMA_BINS,
    ChromaExtractor,
    LibrosaChromaExtractor,
    validate_chroma,
)
from core.audio.types import UNKNOWN_KEY, KeyEstimate, SampleBuffer
from core.config import DEFAULT_KEY_CONFIG, KeyConfig

logger = logging.getLogger(__name__)


def analysis_window(buffer: SampleBuffer, max_seconds: float) -> tuple[int, int]:
    """Sample range [start, end) of the centred analysis window.

    The window is min(max_seconds, duration) long, centred on the middle
    of the buffer and clamped to its bounds.
    """
    sr = buffer.sample_rate
    duration = buffer.duration_sec
    span = min(max_seconds, duration)
    start = max(0, math.floor((duration / 2.0 - span / 2.0) * sr))
    end = min(start + round(span * sr), buffer.length)
    return start, end


def frame_starts(start: int, end: int, frame_size: int, hop_size: int) -> range:
    """Start offsets of every full frame that fits in [start, end)."""
    last = end - frame_size
    if last < start:
        return range(0)
    return range(start, last + 1, hop_size)


def mean_chroma(
    buffer: SampleBuffer,
    *,
    extractor: ChromaExtractor | None = None,
    config: KeyConfig = DEFAULT_KEY_CONFIG,
) -> np.ndarray | None:
    """Average chroma over the analysis frames of a buffer.

    Frames whose chroma cannot be computed are skipped.

    Returns:
        np.ndarray of shape (12,), or None when no frame was analysed.
    """
    extractor = extractor or LibrosaChromaExtractor()
    samples = buffer.samples
    total = np.zeros(CHROMA_BINS, dtype=np.float64)
    frames = 0

    start, end = analysis_window(buffer, config.max_seconds)
    for offset in frame_starts(start, end, config.frame_size, config.hop_size):
        frame = samples[offset : offset + config.frame_size]
        try:
            chroma = validate_chroma(extractor.chroma(frame, buffer.sample_rate))
        except Exception as exc:  # best-effort per frame
            logger.debug("Skipping chroma frame at sample %d: %s", offset, exc)
            continue
        total += chroma
        frames += 1

    if frames == 0:
        return None
    return total / frames


def estimate_key(
    buffer: SampleBuffer,
    *,
    extractor: ChromaExtractor | None = None,
    config: KeyConfig = DEFAULT_KEY_CONFIG,
) -> KeyEstimate | None:
    """Estimate the key of a buffer.

    Args:
        buffer: Channel-0 samples and sample rate.
        extractor: Chroma backend. None = LibrosaChromaExtractor().
        config: Frame, hop and window settings.

    Returns:
        KeyEstimate, or None when no frame could be analysed or the mean
        chroma is flat (every template correlation undefined).
    """
    chroma = mean_chroma(buffer, extractor=extractor, config=config)
    if chroma is None:
        logger.debug("No chroma frames in %d samples", buffer.length)
        return None

    estimate = best_key(chroma)
    if estimate is None:
        logger.debug("Mean chroma has zero variance; key undefined")
    return estimate


def detect_key(
    buffer: SampleBuffer,
    *,
    extractor: ChromaExtractor | None = None,
    config: KeyConfig = DEFAULT_KEY_CONFIG,
) -> str:
    """Key label such as 'A Minor', or 'Unknown'.

    Never raises for signal problems; see estimate_key().
    """
    estimate = estimate_key(buffer, extractor=extractor, config=config)
    return estimate.label if estimate is not None else UNKNOWN_KEY
