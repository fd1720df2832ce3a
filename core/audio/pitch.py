"""
core/audio/pitch.py — Pitch-shift planning.

Turns "retune from 440 Hz to 432 Hz" or "move this song from A Minor to
C Major" into the numbers a player needs: a semitone amount, and how to
split it between playback rate (varispeed) and a tempo-preserving pitch
shifter. Nothing here renders audio.
"""

from __future__ import annotations

import math

from core.audio.types import MODES, PITCH_CLASSES, PitchShiftPlan


def semitones_between(base_hz: float, target_hz: float) -> float:
    """Shift in semitones that moves base_hz onto target_hz.

    Examples:
        semitones_between(440, 880) == 12.0
        semitones_between(440, 432) ≈ -0.3177

    Raises:
        ValueError: If either frequency is not a finite positive number.
    """
    finite = math.isfinite(base_hz) and math.isfinite(target_hz)
    if not finite or base_hz <= 0 or target_hz <= 0:
        raise ValueError(
            f"Frequencies must be finite and > 0, got base_hz={base_hz}, target_hz={target_hz}"
        )
    return 12.0 * math.log2(target_hz / base_hz)


def parse_key_label(label: str | None) -> tuple[str, str] | None:
    """Split a key label like 'C# Minor' into ('C#', 'Minor').

    Returns None for 'Unknown', empty strings, or anything that is not a
    sharps-notation pitch class followed by Major/Minor.
    """
    if not label:
        return None
    parts = label.split()
    if len(parts) != 2:
        return None
    tonic, mode = parts[0], parts[1].capitalize()
    if tonic not in PITCH_CLASSES or mode not in MODES:
        return None
    return tonic, mode


def key_shift(from_key: str | None, to_key: str | None) -> int:
    """Shortest transposition between the tonics of two key labels.

    Only tonics count; mode is ignored. The result is folded into
    [-6, 6] so a song never moves more than a tritone.

    Returns 0 when either label cannot be parsed.

    Examples:
        key_shift("C Major", "D Major") == 2
        key_shift("C Major", "A Minor") == -3
        key_shift("Unknown", "C Major") == 0
    """
    parsed_from = parse_key_label(from_key)
    parsed_to = parse_key_label(to_key)
    if parsed_from is None or parsed_to is None:
        return 0

    diff = PITCH_CLASSES.index(parsed_to[0]) - PITCH_CLASSES.index(parsed_from[0])
    if diff > 6:
        diff -= 12
    if diff < -6:
        diff += 12
    return diff


def plan_pitch_shift(
    semitones: float,
    *,
    preserve_tempo: bool = False,
    bypassed: bool = False,
) -> PitchShiftPlan:
    """Split a semitone shift between playback rate and pitch shifter.

    Args:
        semitones: Requested shift. Positive = up.
        preserve_tempo: False (default) = varispeed: the player's rate
            becomes 2^(semitones/12) and tempo follows pitch.
            True = keep rate 1.0 and hand the shift to the pitch shifter.
        bypassed: Play the original audio untouched.
    """
    if bypassed:
        rate, shift = 1.0, 0.0
    elif preserve_tempo:
        rate, shift = 1.0, float(semitones)
    else:
        rate, shift = 2.0 ** (semitones / 12.0), 0.0

    return PitchShiftPlan(
        semitones=float(semitones),
        playback_rate=rate,
        pitch_shift_semitones=shift,
        preserve_tempo=preserve_tempo,
        bypassed=bypassed,
    )


def available_keys() -> tuple[str, ...]:
    """All 24 key labels: 'C Major', 'C Minor', 'C# Major', …"""
    return tuple(f"{tonic} {mode}" for tonic in PITCH_CLASSES for mode in MODES)
