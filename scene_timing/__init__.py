"""Deterministic scene-timing engine for narrated video timelines.

WHY: The editor breaks a script into storyboard segments, optionally
aligns them to recorded narration, then needs a timeline it can render.
Scene windows must be reproducible from the same inputs, contiguous, and
explainable when a cut feels off. This package is that single source of
truth for scene durations.

HOW: The public entry point is compute_scene_timings(segments, config).
It resolves the config against a preset, then runs auto-split (disabled
by default), per-segment resolution, the short-run merge and the
sequencer, returning immutable SegmentOutput records with provenance and
debug metadata.

RULES:
- compute_scene_timings() is the ONLY public API for producing timings.
- Preset names: "default" (authoritative), "legacy" (old 1.8s/7.0s bounds).
- The engine performs no I/O; diagnostics go through logging only.
- Never mutate the preset constants; copies are made internally.
"""

from .core import compute_scene_timings, count_words, estimate_duration, pause_padding
from .models import (
    SegmentInput,
    SegmentKind,
    SegmentOutput,
    TimingDebug,
    TimingReason,
    TimingSummary,
)
from .presets import PRESETS, TimingConfig, resolve_config
from .report import format_summary_table, format_timing_report, summarize
from .serialization import (
    InputError,
    load_segments,
    timeline_to_dict,
    timeline_to_json,
    to_story_beats,
)

__version__ = "0.1.0"

__all__ = [
    "compute_scene_timings",
    "count_words",
    "estimate_duration",
    "pause_padding",
    "SegmentInput",
    "SegmentKind",
    "SegmentOutput",
    "TimingDebug",
    "TimingReason",
    "TimingSummary",
    "PRESETS",
    "TimingConfig",
    "resolve_config",
    "format_summary_table",
    "format_timing_report",
    "summarize",
    "InputError",
    "load_segments",
    "timeline_to_dict",
    "timeline_to_json",
    "to_story_beats",
]
