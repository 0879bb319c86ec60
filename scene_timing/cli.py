"""Command-line harness for the scene-timing engine.

WHY: Tuning pacing rules means looking at real numbers. This harness runs
the engine on a built-in sample or a JSON storyboard and prints the debug
report, a JSON timeline, or story beats, without any editor in the loop.

HOW: argparse collects the input source, preset and option overrides.
The input is loaded through serialization.load_segments(), timed with
compute_scene_timings(), and rendered in the chosen output mode. Logging
is configured here, never in the library.

RULES:
- Input: --sample NAME, or a positional JSON path ("-" reads stdin).
- Output modes: text (report + table), json (timeline), beats.
- Exit codes: 0 = success, 1 = error.
- Diagnostics go to stderr; results go to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import jsonschema

from .core import compute_scene_timings
from .presets import FIXED_TIMING_POLICIES, PRESETS
from .report import format_summary_table, format_timing_report
from .samples import SAMPLES
from .serialization import InputError, load_segments_json, timeline_to_json, to_story_beats
from .settings import DEFAULT_LOG_LEVEL, DEFAULT_PRESET, DEFAULT_SAMPLE, LOG_FORMAT

OUTPUT_MODES = ("text", "json", "beats")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect option overrides from flags the user actually set."""
    overrides: Dict[str, Any] = {
        "words_per_minute": args.wpm,
        "min_duration": args.min_duration,
        "max_duration": args.max_duration,
        "fixed_timing_policy": args.fixed_policy,
    }
    if args.auto_split:
        overrides["auto_split_enabled"] = True
    return {k: v for k, v in overrides.items() if v is not None}


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="scene_timing",
        description="Compute a gap-free scene timeline from narration segments.",
    )

    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Path to a JSON segment list ('-' for stdin). "
             "When omitted, --sample is used.",
    )
    parser.add_argument(
        "--sample",
        default=None,
        choices=sorted(SAMPLES.keys()),
        help="Run a built-in sample (default when no input: {}).".format(DEFAULT_SAMPLE),
    )
    parser.add_argument(
        "--list-samples",
        action="store_true",
        help="List the built-in samples and exit.",
    )
    parser.add_argument(
        "--preset",
        default=DEFAULT_PRESET,
        help="Timing preset. Available: {} (default: %(default)s).".format(
            ", ".join(PRESETS.keys())),
    )
    parser.add_argument("--wpm", type=float, default=None, help="Words per minute.")
    parser.add_argument("--min-duration", type=float, default=None,
                        help="Minimum narration scene duration in seconds.")
    parser.add_argument("--max-duration", type=float, default=None,
                        help="Maximum scene duration in seconds.")
    parser.add_argument(
        "--auto-split",
        action="store_true",
        help="Split over-long unmeasured scenes at a sentence boundary.",
    )
    parser.add_argument(
        "--fixed-policy",
        default=None,
        choices=FIXED_TIMING_POLICIES,
        help="How measured scenes meet the running timeline.",
    )
    parser.add_argument(
        "--output",
        default="text",
        choices=OUTPUT_MODES,
        help="Output mode (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=DEFAULT_LOG_LEVEL,
        choices=LOG_LEVELS,
        help="Logging level for diagnostics on stderr (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m scene_timing`` and ``scene-timing``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT, stream=sys.stderr)

    if args.list_samples:
        for name in sorted(SAMPLES):
            print("{:<12} {} segments".format(name, len(SAMPLES[name])))
        sys.exit(0)

    if args.input is not None and args.sample is not None:
        _status("Error: Give either an input file or --sample, not both")
        sys.exit(1)

    try:
        if args.input is not None:
            segments = load_segments_json(_read_input(args.input))
            source = args.input
        else:
            name = args.sample or DEFAULT_SAMPLE
            if name not in SAMPLES:
                raise InputError("Unknown sample '{}'. Available: {}".format(
                    name, ", ".join(sorted(SAMPLES))))
            segments = SAMPLES[name]
            source = "sample '{}'".format(name)

        timings = compute_scene_timings(segments, _overrides(args), preset=args.preset)

        if args.output == "json":
            rendered = timeline_to_json(timings)
        elif args.output == "beats":
            rendered = json.dumps(to_story_beats(timings, segments), indent=2, ensure_ascii=False)
        else:
            rendered = "{}\n{}".format(format_timing_report(timings), format_summary_table(timings))
    except OSError as e:
        _status("Error: {}".format(e))
        sys.exit(1)
    except ValueError as e:
        # InputError and config errors (unknown preset, bad bounds)
        _status("Error: {}".format(e))
        sys.exit(1)
    except jsonschema.ValidationError as e:
        _status("Error: Timeline failed export validation: {}".format(e.message))
        sys.exit(1)

    print(rendered)

    _status("Timed {} scenes from {} ({} input segments)".format(
        len(timings), source, len(segments)))


if __name__ == "__main__":
    main()
