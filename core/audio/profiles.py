"""
core/audio/profiles.py — Krumhansl-Schmuckler tonal profiles and correlation.

Pure math, no librosa dependency.

Krumhansl-Schmuckler profiles (1990):
    Probe-tone salience weights for each of 12 pitch classes relative to a
    tonal centre, starting from C. Only the two canonical profiles are
    stored; the 24 key templates are produced by cyclic rotation.

Candidate order is fixed: 12 major rotations (tonic C → B), then 12 minor
rotations. Selection uses strict ``>``, so ties keep the earliest candidate.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from core.audio.types import MAJOR, MINOR, PITCH_CLASSES, KeyEstimate

MAJOR_PROFILE: tuple[float, ...] = (
    6.35,
    2.23,
    3.48,
    2.33,
    4.38,
    4.09,
    2.52,
    5.19,
    2.39,
    3.66,
    2.29,
    2.88,
)
MINOR_PROFILE: tuple[float, ...] = (
    6.33,
    2.68,
    3.52,
    5.38,
    2.60,
    3.53,
    2.54,
    4.75,
    3.98,
    2.69,
    3.34,
    3.17,
)

PROFILES: dict[str, tuple[float, ...]] = {MAJOR: MAJOR_PROFILE, MINOR: MINOR_PROFILE}

NO_MATCH: float = -math.inf
"""Score of a candidate whose correlation is undefined (zero variance)."""


def rotate(profile: Sequence[float], n: int) -> tuple[float, ...]:
    """Rotate a 12-element profile so its tonic lands n semitones above C.

    Element i of the result is ``profile[(i - n) mod 12]``.

    Examples:
        rotate(p, 0) == p
        rotate(p, 12) == p
        rotate(MAJOR_PROFILE, 9)[9] == MAJOR_PROFILE[0]   # A major tonic
    """
    profile_arr = np.asarray(profile, dtype=np.float64)
    if profile_arr.shape != (len(PITCH_CLASSES),):
        raise ValueError(f"profile must have 12 elements, got shape {profile_arr.shape}")
    return tuple(float(v) for v in np.roll(profile_arr, n))


def correlate(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient of two 12-element vectors.

    Returns:
        r in [-1, 1], or NO_MATCH (-inf) when either vector has zero
        variance and the coefficient is undefined.

    Raises:
        ValueError: If the vectors are not both of length 12.
    """
    xa = np.asarray(x, dtype=np.float64)
    ya = np.asarray(y, dtype=np.float64)
    if xa.shape != (12,) or ya.shape != (12,):
        raise ValueError(f"vectors must have shape (12,), got {xa.shape} and {ya.shape}")

    xc = xa - xa.mean()
    yc = ya - ya.mean()
    denominator = math.sqrt(float(np.dot(xc, xc)) * float(np.dot(yc, yc)))
    if denominator == 0.0 or not math.isfinite(denominator):
        return NO_MATCH
    return float(np.dot(xc, yc)) / denominator


def score_keys(chroma: Sequence[float]) -> list[tuple[int, str, float]]:
    """Score a chroma vector against all 24 key templates.

    Returns:
        List of (tonic_index, mode, score) in evaluation order:
        majors C..B, then minors C..B.
    """
    scores: list[tuple[int, str, float]] = []
    for mode in (MAJOR, MINOR):
        profile = PROFILES[mode]
        for tonic in range(12):
            scores.append((tonic, mode, correlate(chroma, rotate(profile, tonic))))
    return scores


def best_key(chroma: Sequence[float]) -> KeyEstimate | None:
    """Pick the best-correlated key for a chroma vector.

    Returns:
        KeyEstimate for the first highest-scoring candidate, or None when
        every candidate is NO_MATCH (flat or silent chroma).
    """
    best_score = NO_MATCH
    best: tuple[int, str] | None = None
    for tonic, mode, score in score_keys(chroma):
        if score > best_score:
            best_score = score
            best = (tonic, mode)

    if best is None:
        return None
    tonic, mode = best
    return KeyEstimate(tonic=PITCH_CLASSES[tonic], mode=mode, score=best_score)
