"""
plan_pitch_shift tool — semitones, playback rate and shifter amount.

Two ways to describe a shift:
  - mode="hz":  retune from base_hz to target_hz (e.g. 440 → 432)
  - mode="key": transpose from_key to to_key by the shortest path

The plan says how a player should realise the shift: varispeed (playback
rate changes, tempo follows) or tempo-preserving (rate stays 1.0, a pitch
shifter does the work). Pure math; no audio is touched.
"""

from typing import Any

from core.audio.pitch import available_keys, key_shift, plan_pitch_shift, semitones_between
from tools.base import AudioTool, ToolParameter, ToolResult


class PlanPitchShift(AudioTool):
    """Compute the pitch-shift plan between two tunings or two keys.

    Example:
        tool = PlanPitchShift()
        tool(mode="hz", base_hz=440.0, target_hz=432.0).data["semitones"]
        # -0.3177
        tool(mode="key", from_key="A Minor", to_key="C Major").data["semitones"]
        # 3.0
    """

    @property
    def name(self) -> str:
        return "plan_pitch_shift"

    @property
    def description(self) -> str:
        return (
            "Compute how many semitones to shift audio to move it from one tuning "
            "reference to another (mode='hz') or from one key to another (mode='key'), "
            "and the resulting playback rate for varispeed or tempo-preserving playback."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="mode",
                type=str,
                description="'hz' to retune between frequencies, 'key' to transpose.",
                required=False,
                default="hz",
                choices=("hz", "key"),
            ),
            ToolParameter(
                name="base_hz",
                type=float,
                description="Current tuning reference in Hz (mode='hz').",
                required=False,
                default=440.0,
            ),
            ToolParameter(
                name="target_hz",
                type=float,
                description="Desired tuning reference in Hz (mode='hz').",
                required=False,
                default=432.0,
            ),
            ToolParameter(
                name="from_key",
                type=str,
                description="Current key label, e.g. 'A Minor' (mode='key').",
                required=False,
                choices=available_keys(),
            ),
            ToolParameter(
                name="to_key",
                type=str,
                description="Desired key label, e.g. 'C Major' (mode='key').",
                required=False,
                choices=available_keys(),
            ),
            ToolParameter(
                name="preserve_tempo",
                type=bool,
                description="Keep tempo by pitch shifting instead of changing playback rate.",
                required=False,
                default=False,
            ),
            ToolParameter(
                name="bypass",
                type=bool,
                description="Plan playback of the untouched original.",
                required=False,
                default=False,
            ),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        mode: str = kwargs.get("mode") or "hz"
        preserve_tempo = bool(kwargs.get("preserve_tempo"))
        bypassed = bool(kwargs.get("bypass"))

        if mode == "hz":
            base_hz = float(kwargs["base_hz"])
            target_hz = float(kwargs["target_hz"])
            try:
                semitones = semitones_between(base_hz, target_hz)
            except ValueError as exc:
                return ToolResult(success=False, error=str(exc))
            source = {"base_hz": base_hz, "target_hz": target_hz}
        else:
            from_key = kwargs.get("from_key")
            to_key = kwargs.get("to_key")
            if from_key is None or to_key is None:
                return ToolResult(
                    success=False,
                    error="from_key and to_key are required when mode='key'",
                )
            semitones = float(key_shift(from_key, to_key))
            source = {"from_key": from_key, "to_key": to_key}

        plan = plan_pitch_shift(semitones, preserve_tempo=preserve_tempo, bypassed=bypassed)
        return ToolResult(
            success=True,
            data={
                "semitones": round(plan.semitones, 4),
                "playback_rate": round(plan.playback_rate, 6),
                "pitch_shift_semitones": round(plan.pitch_shift_semitones, 4),
                "preserve_tempo": plan.preserve_tempo,
                "bypassed": plan.bypassed,
            },
            metadata={"mode": mode, **source},
        )
