"""
ingestion/audio_loader.py — File I/O boundary for audio loading.

This is the ONLY module in the analysis pipeline that reads files from
disk. Everything downstream (core/audio/tuning.py, core/audio/key.py)
takes a pre-loaded SampleBuffer — never file paths.

Usage:
    from ingestion.audio_loader import load_audio
    buffer = load_audio("/path/to/track.mp3")
    print(buffer.sample_rate, buffer.duration_sec)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from core.audio.types import SampleBuffer

logger = logging.getLogger(__name__)

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus"}
)


def load_audio(
    path: str | Path,
    *,
    duration: float | None = None,
    offset: float = 0.0,
    sr: int | None = None,
    librosa: Any = None,
) -> SampleBuffer:
    """Load an audio file and return its first channel as a SampleBuffer.

    The file is decoded once at its native channel count; channel 0 is
    kept and the rest discarded (no down-mix).

    Args:
        path: Absolute or relative path to an audio file.
              Supported formats: mp3, wav, flac, aiff, ogg, m4a, opus.
        duration: Maximum seconds to load. None loads the whole file.
        offset: Seconds to skip at the start of the file.
        sr: Target sample rate in Hz. None preserves the native rate.
        librosa: Injected librosa module. None = import lazily.

    Returns:
        SampleBuffer with read-only float32 samples.

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: File extension is not a supported audio format.
        RuntimeError: librosa/soundfile could not decode the file
                      (corrupted, truncated, DRM-protected, etc.).
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    if librosa is None:
        import librosa  # lazy import

    try:
        y, loaded_sr = librosa.load(
            file_path,
            sr=sr,
            mono=False,
            duration=duration,
            offset=offset,
        )
        buffer = SampleBuffer.from_channels(y, int(loaded_sr))
    except Exception as exc:
        raise RuntimeError(
            f"Failed to decode audio file {file_path.name!r}: {exc}"
        ) from exc

    logger.debug(
        "Loaded %s: %d samples @ %d Hz (%.2f s)",
        file_path.name,
        buffer.length,
        buffer.sample_rate,
        buffer.duration_sec,
    )
    return buffer
