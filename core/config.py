"""
Configuration dataclasses for the audio analysis estimators.

These immutable config objects keep window sizes, chunk counts and
thresholds out of the estimator signatures, so standard configurations
can be defined once and reused across calls and threads.
"""

from dataclasses import dataclass

# Smallest FFT window that still resolves ~10 Hz bins at common sample rates.
MIN_WINDOW_SIZE: int = 256


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


@dataclass(frozen=True)
class TuningConfig:
    """
    Configuration for tuning-reference detection.

    Attributes:
        window_size: FFT window length in samples. Must be a power of two.
            Defaults to 4096 (~10.8 Hz bins at 44.1 kHz).
        chunk_count: Number of evenly spaced chunks sampled from the buffer.
            Defaults to 50.
        min_frequency_hz: Bins below this frequency are ignored when
            picking the spectral peak (rumble, DC). Defaults to 100 Hz.
        silence_threshold: Chunks whose peak magnitude is below this value
            (in analyzer units) are discarded. Defaults to 0.1.
        default_reference_hz: Value returned when no chunk is usable.
        interpolate_peak: Refine the peak frequency between bins with a
            quadratic fit over log magnitudes. Defaults to True.

    Example:
        >>> config = TuningConfig(window_size=8192, chunk_count=20)
        >>> detect_tuning_reference(buffer, config=config)
    """

    window_size: int = 4096
    chunk_count: int = 50
    min_frequency_hz: float = 100.0
    silence_threshold: float = 0.1
    default_reference_hz: int = 440
    interpolate_peak: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not _is_power_of_two(self.window_size) or self.window_size < MIN_WINDOW_SIZE:
            raise ValueError(
                f"window_size must be a power of two >= {MIN_WINDOW_SIZE}, "
                f"got {self.window_size}"
            )
        if self.chunk_count <= 0:
            raise ValueError(f"chunk_count must be positive, got {self.chunk_count}")
        if self.min_frequency_hz < 0:
            raise ValueError(
                f"min_frequency_hz must be non-negative, got {self.min_frequency_hz}"
            )
        if self.silence_threshold < 0:
            raise ValueError(
                f"silence_threshold must be non-negative, got {self.silence_threshold}"
            )
        if self.default_reference_hz <= 0:
            raise ValueError(
                f"default_reference_hz must be positive, got {self.default_reference_hz}"
            )


@dataclass(frozen=True)
class KeyConfig:
    """
    Configuration for musical key detection.

    Attributes:
        frame_size: Samples per chroma frame. Defaults to 4096.
        hop_size: Samples between consecutive frame starts. Defaults to
            8192, which leaves a gap of one frame between analysed frames.
            Use a hop smaller than frame_size for overlapping frames.
        max_seconds: Length of the centred analysis window. The whole
            buffer is used when it is shorter. Defaults to 30 s.
    """

    frame_size: int = 4096
    hop_size: int = 8192
    max_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {self.frame_size}")
        if self.hop_size <= 0:
            raise ValueError(f"hop_size must be positive, got {self.hop_size}")
        if self.max_seconds <= 0:
            raise ValueError(f"max_seconds must be positive, got {self.max_seconds}")


# Pre-defined configurations for common use cases

DEFAULT_TUNING_CONFIG = TuningConfig()
"""Default tuning configuration: 4096-sample window, 50 chunks, 100 Hz cutoff."""

HIGH_RESOLUTION_TUNING_CONFIG = TuningConfig(window_size=16384, chunk_count=25)
"""Longer window for sustained material; ~2.7 Hz bins at 44.1 kHz."""

DEFAULT_KEY_CONFIG = KeyConfig()
"""Default key configuration: 4096-sample frames every 8192 samples over 30 s."""

OVERLAPPING_KEY_CONFIG = KeyConfig(frame_size=4096, hop_size=2048)
"""50% overlapping frames for denser chroma coverage (four times the work)."""
