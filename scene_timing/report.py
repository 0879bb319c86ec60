"""Human-readable timing diagnostics.

WHY: When a cut feels rushed or draggy the first question is which rule
set the duration. The debug metadata on each SegmentOutput answers that,
but only if someone can read it at a glance.

HOW: summarize() aggregates a timeline into a TimingSummary.
format_timing_report() renders one block per segment with its window,
reason and debug fields. format_summary_table() renders a fixed-width
table plus the aggregate figures. All three are pure; the pipeline logs
the report, the CLI prints it.

RULES:
- Never mutate the outputs passed in.
- Text previews are cut at a fixed width with a trailing "...".
"""

from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from .models import SegmentOutput, TimingSummary

RULE = "=" * 60
TABLE_RULE = "-" * 100


def _preview(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width] + "..."


def summarize(timings: Sequence[SegmentOutput]) -> TimingSummary:
    """Aggregate segment count, durations, words and per-reason counts."""
    total_duration = round(sum(t.duration_sec for t in timings), 2)
    total_words = sum(t.debug.word_count for t in timings)
    count = len(timings)

    reason_counts = Counter(t.reason.value for t in timings)

    return TimingSummary(
        segment_count=count,
        total_duration=total_duration,
        average_duration=round(total_duration / count, 2) if count else 0.0,
        total_words=total_words,
        effective_wpm=round(total_words / total_duration * 60, 1) if total_duration > 0 else 0.0,
        reason_counts=dict(reason_counts),
    )


def format_timing_report(timings: Sequence[SegmentOutput]) -> str:
    """Render the per-segment debug report.

    Each block shows the window, reason, word count, base seconds and pause
    padding, plus clamp, split and merge details when present. The report
    ends with the total duration in seconds and minutes.
    """
    lines: List[str] = [RULE, "TIMING DEBUG REPORT".center(60), RULE, ""]

    for idx, timing in enumerate(timings, 1):
        debug = timing.debug
        lines.append('Scene {}: "{}"'.format(idx, _preview(timing.text, 50)))
        lines.append("  Timing: {:.2f}s -> {:.2f}s ({:.2f}s)".format(
            timing.start_time, timing.end_time, timing.duration_sec))
        lines.append("  Reason: {}".format(timing.reason.value))
        lines.append("  Words: {}".format(debug.word_count))
        lines.append("  Base: {:.2f}s".format(debug.base_sec))
        lines.append("  Pause padding: +{:.2f}s".format(debug.pause_padding_sec))

        if debug.clamp_applied and debug.original_duration is not None:
            lines.append("  Clamped from {:.2f}s".format(debug.original_duration))
        if debug.split_parts:
            lines.append("  Split into {} parts".format(debug.split_parts))
        if debug.merge_group_id:
            lines.append("  Merged ({}: {})".format(
                debug.merge_group_id, ", ".join(debug.merged_ids)))
        lines.append("")

    summary = summarize(timings)
    lines.append("Total duration: {:.2f}s ({:.2f} minutes)".format(
        summary.total_duration, summary.total_duration / 60))
    lines.append(RULE)
    return "\n".join(lines)


def format_summary_table(timings: Sequence[SegmentOutput]) -> str:
    """Render a fixed-width table of the timeline and its aggregate figures."""
    header = (
        "Scene".ljust(10) + "Start".ljust(10) + "End".ljust(10)
        + "Duration".ljust(12) + "Reason".ljust(12) + "Words".ljust(8) + "Text"
    )
    lines: List[str] = ["SUMMARY TABLE:", TABLE_RULE, header, TABLE_RULE]

    for idx, timing in enumerate(timings, 1):
        lines.append(
            str(idx).ljust(10)
            + "{:.2f}".format(timing.start_time).ljust(10)
            + "{:.2f}".format(timing.end_time).ljust(10)
            + "{:.2f}".format(timing.duration_sec).ljust(12)
            + timing.reason.value.ljust(12)
            + str(timing.debug.word_count).ljust(8)
            + _preview(timing.text, 40)
        )

    lines.append(TABLE_RULE)

    summary = summarize(timings)
    lines.append("")
    lines.append("Total scenes: {}".format(summary.segment_count))
    lines.append("Total duration: {:.2f}s ({:.2f} minutes)".format(
        summary.total_duration, summary.total_duration / 60))
    lines.append("Average duration: {:.2f}s".format(summary.average_duration))
    lines.append("Total words: {}".format(summary.total_words))
    lines.append("Effective WPM: {:.1f}".format(summary.effective_wpm))
    return "\n".join(lines)
