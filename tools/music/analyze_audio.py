"""
analyze_audio tool — key and tuning reference of an audio file.

Loads the file once (channel 0), then runs:
  - Krumhansl-Schmuckler key detection over averaged chroma
  - Tuning-reference estimation from spectral-peak cents deviation

Requires the audio stack (librosa + soundfile) to be installed.
"""

from typing import Any

from core.config import (
    DEFAULT_KEY_CONFIG,
    DEFAULT_TUNING_CONFIG,
    HIGH_RESOLUTION_TUNING_CONFIG,
    OVERLAPPING_KEY_CONFIG,
)
from tools.base import AudioTool, ToolParameter, ToolResult


class AnalyzeAudio(AudioTool):
    """Estimate the musical key and concert-pitch reference of an audio file.

    Example:
        tool = AnalyzeAudio()
        result = tool(file_path="/path/to/song.wav")
        # result.data["key"]["label"] == "A Minor"
        # result.data["tuning"]["reference_hz"] == 432
    """

    def __init__(self, engine: Any = None) -> None:
        """
        Args:
            engine: AudioAnalysisEngine-compatible object. None = build one
                    per call with the requested key configuration.
        """
        self._engine = engine

    @property
    def name(self) -> str:
        return "analyze_audio"

    @property
    def description(self) -> str:
        return (
            "Estimate the musical key (e.g. 'A Minor') and tuning reference in Hz "
            "(e.g. 440 vs 432) of an audio file. "
            "Supports .mp3, .wav, .flac, .aiff, .ogg, .m4a, .opus files. "
            "Only the first channel is analysed."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="file_path",
                type=str,
                description="Path to an audio file on the local filesystem.",
                required=True,
            ),
            ToolParameter(
                name="duration",
                type=float,
                description="Max seconds to load. Omit to load the whole file.",
                required=False,
                default=None,
            ),
            ToolParameter(
                name="overlap",
                type=bool,
                description="Use 50% overlapping chroma frames (slower, denser).",
                required=False,
                default=False,
            ),
            ToolParameter(
                name="high_resolution",
                type=bool,
                description="Use a 16384-sample tuning window (finer bins, fewer chunks).",
                required=False,
                default=False,
            ),
        ]

    def _build_engine(self, overlap: bool, high_resolution: bool) -> Any:
        if self._engine is not None:
            return self._engine
        from ingestion.audio_engine import AudioAnalysisEngine

        return AudioAnalysisEngine(
            tuning_config=(
                HIGH_RESOLUTION_TUNING_CONFIG if high_resolution else DEFAULT_TUNING_CONFIG
            ),
            key_config=OVERLAPPING_KEY_CONFIG if overlap else DEFAULT_KEY_CONFIG,
        )

    def execute(self, **kwargs: Any) -> ToolResult:
        """Run the analysis.

        Returns:
            ToolResult.data with keys:
                key (dict with label/tonic/mode/score, or label 'Unknown'),
                tuning (dict with reference_hz/cents_offset/chunks_used),
                duration_sec (float), sample_rate (int)
        """
        file_path: str = (kwargs.get("file_path") or "").strip()
        duration = kwargs.get("duration")
        overlap = bool(kwargs.get("overlap"))
        high_resolution = bool(kwargs.get("high_resolution"))

        if not file_path:
            return ToolResult(success=False, error="file_path cannot be empty")

        try:
            analysis = self._build_engine(overlap, high_resolution).analyze_file(
                file_path,
                duration=float(duration) if duration is not None else None,
            )
        except FileNotFoundError as exc:
            return ToolResult(success=False, error=f"File not found: {exc}")
        except ValueError as exc:
            return ToolResult(success=False, error=str(exc))
        except RuntimeError as exc:
            return ToolResult(success=False, error=f"Analysis failed: {exc}")

        key_data: dict[str, Any] = {"label": analysis.key_label}
        if analysis.key is not None:
            key_data.update(
                tonic=analysis.key.tonic,
                mode=analysis.key.mode,
                score=round(analysis.key.score, 4),
            )

        return ToolResult(
            success=True,
            data={
                "key": key_data,
                "tuning": {
                    "reference_hz": analysis.tuning.reference_hz,
                    "cents_offset": round(analysis.tuning.cents_offset, 2),
                    "chunks_used": analysis.tuning.chunks_used,
                },
                "duration_sec": round(analysis.duration_sec, 2),
                "sample_rate": analysis.sample_rate,
            },
            metadata={
                "file": file_path,
                "overlap": overlap,
                "high_resolution": high_resolution,
                "processing_time_ms": round(analysis.processing_time_ms, 1),
            },
        )
