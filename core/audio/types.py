"""
core/audio/types.py — Data types shared by the analysis estimators.

Design principles:
    - No I/O, no side effects.
    - Result types are frozen dataclasses — immutable value objects that
      can be passed between layers and cached.
    - SampleBuffer wraps a read-only numpy array; estimators can never
      write into the caller's audio.
    - `KeyEstimate.label` is a computed property to avoid duplicate storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

MAJOR: str = "Major"
MINOR: str = "Minor"
MODES: tuple[str, ...] = (MAJOR, MINOR)

UNKNOWN_KEY: str = "Unknown"
"""Sentinel returned by detect_key() when no frame could be analysed."""

PITCH_CLASSES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """One channel of decoded audio.

    Invariants:
        samples is 1-D, float32 and read-only
        sample_rate > 0

    A writeable caller array is copied; a read-only float32 array is
    kept as is.
    """

    samples: np.ndarray = field(repr=False)
    """Audio samples, nominally in [-1, 1]."""

    sample_rate: int
    """Sample rate in Hz."""

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        source = self.samples
        samples = np.asarray(source, dtype=np.float32)
        aliased = isinstance(source, np.ndarray) and np.shares_memory(samples, source)
        if aliased and samples.flags.writeable:
            samples = samples.copy()
        if samples.ndim != 1:
            raise ValueError(
                f"SampleBuffer holds one channel, got array with shape {samples.shape}. "
                "Use SampleBuffer.from_channels() for multi-channel audio."
            )
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_channels(cls, y: np.ndarray, sample_rate: int) -> SampleBuffer:
        """Build a buffer from mono (N,) or multi-channel (C, N) audio.

        Only channel 0 is kept; no down-mixing is done. The buffer takes
        ownership: it views y without copying, so y must not be written
        to afterwards.
        """
        arr = np.asarray(y, dtype=np.float32)
        channel = (arr[0] if arr.ndim == 2 else arr).view()
        channel.setflags(write=False)
        return cls(samples=channel, sample_rate=int(sample_rate))

    @property
    def length(self) -> int:
        """Total number of samples."""
        return int(self.samples.shape[0])

    @property
    def duration_sec(self) -> float:
        """Duration in seconds."""
        return self.length / float(self.sample_rate)

    def __len__(self) -> int:
        return self.length


@dataclass(frozen=True)
class KeyEstimate:
    """Musical key selected by Krumhansl-Schmuckler correlation.

    Invariants:
        tonic in PITCH_CLASSES
        mode in {"Major", "Minor"}
        -1.0 <= score <= 1.0
    """

    tonic: str
    """Pitch class of the tonic, sharps notation, e.g. 'A', 'C#'."""

    mode: str
    """'Major' or 'Minor'."""

    score: float
    """Pearson correlation of the winning profile rotation."""

    @property
    def tonic_index(self) -> int:
        """Semitones above C (0–11)."""
        return PITCH_CLASSES.index(self.tonic)

    @property
    def label(self) -> str:
        """Key label as shown to users, e.g. 'A Minor', 'C# Major'."""
        return f"{self.tonic} {self.mode}"


@dataclass(frozen=True)
class TuningEstimate:
    """Concert-pitch reference estimated from spectral peaks.

    Invariants:
        reference_hz > 0
        chunks_used >= 0  (0 = no usable signal, reference_hz is the default)
    """

    reference_hz: int
    """Estimated frequency of A4, rounded to the nearest Hz."""

    cents_offset: float
    """Mean deviation of the analysed peaks from the A440 grid, in cents."""

    chunks_used: int
    """Number of chunks that contributed to the average."""

    @property
    def is_default(self) -> bool:
        """True when no chunk was usable and the default was returned."""
        return self.chunks_used == 0


@dataclass(frozen=True)
class PitchShiftPlan:
    """How a player should realise a pitch shift.

    Varispeed changes playback rate (pitch and tempo move together).
    Tempo-preserving mode keeps the rate at 1.0 and hands the shift to a
    pitch-shifting stage.
    """

    semitones: float
    """Requested shift in semitones (before bypass)."""

    playback_rate: float
    """Rate multiplier for the player. 1.0 = unchanged."""

    pitch_shift_semitones: float
    """Shift applied by the pitch-shifting stage. 0.0 when not used."""

    preserve_tempo: bool
    bypassed: bool
