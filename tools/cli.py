"""
Command-line entry point for the analysis tools.

Usage
-----
    # Key + tuning reference of a file
    python -m tools.cli analyze song.flac

    # Only the first 60 seconds, overlapping chroma frames
    python -m tools.cli analyze song.flac --duration 60 --overlap

    # Finer tuning estimate for sustained material
    python -m tools.cli analyze drone.wav --high-resolution

    # Retune 440 → 432 keeping tempo
    python -m tools.cli shift --base-hz 440 --target-hz 432 --preserve-tempo

    # Transpose A Minor → C Major (varispeed)
    python -m tools.cli shift --mode key --from-key "A Minor" --to-key "C Major"

    # List available tools
    python -m tools.cli list

Exit codes
----------
    0  — success
    1  — the tool reported a failure (bad file, bad input)

Log level comes from --verbose or the AUDIO_ANALYSIS_LOG_LEVEL environment
variable (default WARNING). Results are printed to stdout as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from tools.registry import get_registry

LOG_LEVEL_ENV: str = "AUDIO_ANALYSIS_LOG_LEVEL"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Key and tuning-reference analysis")
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="-v for INFO, -vv for DEBUG logging",
    )
    sub = p.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Estimate key and tuning reference of a file")
    analyze.add_argument("file_path", help="Audio file to analyse")
    analyze.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Max seconds to load (default: whole file)",
    )
    analyze.add_argument(
        "--overlap",
        action="store_true",
        help="Use 50%% overlapping chroma frames",
    )
    analyze.add_argument(
        "--high-resolution",
        action="store_true",
        help="Use a 16384-sample tuning window",
    )

    shift = sub.add_parser("shift", help="Plan a pitch shift between tunings or keys")
    shift.add_argument("--mode", choices=["hz", "key"], default="hz")
    shift.add_argument("--base-hz", type=float, default=440.0)
    shift.add_argument("--target-hz", type=float, default=432.0)
    shift.add_argument("--from-key", default=None, help="e.g. 'A Minor'")
    shift.add_argument("--to-key", default=None, help="e.g. 'C Major'")
    shift.add_argument("--preserve-tempo", action="store_true")
    shift.add_argument("--bypass", action="store_true")

    sub.add_parser("list", help="List available tools")
    return p.parse_args(argv)


def configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level: int | str = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _tool_kwargs(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    if args.command == "analyze":
        return "analyze_audio", {
            "file_path": args.file_path,
            "duration": args.duration,
            "overlap": args.overlap,
            "high_resolution": args.high_resolution,
        }
    return "plan_pitch_shift", {
        "mode": args.mode,
        "base_hz": args.base_hz,
        "target_hz": args.target_hz,
        "from_key": args.from_key,
        "to_key": args.to_key,
        "preserve_tempo": args.preserve_tempo,
        "bypass": args.bypass,
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    registry = get_registry()

    if args.command == "list":
        print(json.dumps(registry.list_tools(), indent=2))
        return 0

    tool_name, kwargs = _tool_kwargs(args)
    tool = registry.get(tool_name)
    if tool is None:
        print(f"Tool {tool_name!r} is not available", file=sys.stderr)
        return 1

    result = tool(**kwargs)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
