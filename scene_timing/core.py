"""Scene timing pipeline: estimation, clamping, splitting, merging, sequencing.

WHY: A storyboard of narration segments has to become a gap-free timeline
before anything can be rendered. Durations come either from measured audio
or from a speaking-rate estimate, and both need pacing rules on top so the
video neither flashes by nor stalls. Every rule lives here so the whole
timeline is reproducible from its inputs.

HOW: The pipeline has four stages, run in order by compute_scene_timings():
  1. auto_split_segments(): optional split of over-long unmeasured text at
     the sentence boundary closest to its midpoint (off by default).
  2. resolve_segment(): per segment: measured span, or estimate plus
     min/max clamp, then the dead-air cap for visual-only segments.
  3. merge_short_runs(): collapses runs of consecutive short segments.
  4. sequence_segments(): assigns absolute start/end with a running cursor.

RULES:
- ALL functions take an explicit TimingConfig; there is no module state.
- Input order is preserved through every stage.
- Durations and timeline positions are rounded to 2 decimals.
- Segment text is never rewritten except joined by the merge rule.
- Nothing here raises for well-typed input; odd values are logged instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .models import (
    SegmentInput,
    SegmentKind,
    SegmentOutput,
    TimingDebug,
    TimingReason,
)
from .presets import TimingConfig, resolve_config
from .report import format_timing_report, summarize

logger = logging.getLogger(__name__)

# =============================================================================
# Text Utilities
# =============================================================================

END_PUNCT_RE = re.compile(r"[.!?]+$")
MID_PUNCT_RE = re.compile(r"[,;:]")
SENTENCE_BREAK_RE = re.compile(r"[.!?]+\s+")

EXCLAMATION_PAUSE = 0.5
QUESTION_PAUSE = 0.4
PERIOD_PAUSE = 0.3
MID_PUNCT_PAUSE = 0.15
ELLIPSIS_PAUSE = 0.6

# Fixed-timing mismatches smaller than this are rounding noise
CURSOR_TOLERANCE = 0.005

_TITLE_KINDS = (SegmentKind.TITLE, SegmentKind.TRANSITION)


def count_words(text: str) -> int:
    """Count whitespace-delimited words. Attached punctuation stays on the word."""
    return len(text.split())


def pause_padding(text: str) -> float:
    """Estimate the seconds of natural pause implied by punctuation.

    HOW: One terminal pause if the trimmed text ends in a run of . ! or ?
    (0.5 when the text contains any "!", else 0.4 when it contains any "?",
    else 0.3), plus 0.15 per , ; or : and 0.6 per "...".

    RULES:
    - Text ending in "..." earns both the ellipsis and the terminal period
      pause.
    """
    trimmed = text.strip()
    padding = 0.0

    if END_PUNCT_RE.search(trimmed):
        if "!" in trimmed:
            padding += EXCLAMATION_PAUSE
        elif "?" in trimmed:
            padding += QUESTION_PAUSE
        else:
            padding += PERIOD_PAUSE

    padding += len(MID_PUNCT_RE.findall(trimmed)) * MID_PUNCT_PAUSE
    padding += trimmed.count("...") * ELLIPSIS_PAUSE

    return padding


def base_duration(word_count: int, config: TimingConfig) -> float:
    """Raw speaking time for word_count words at config.words_per_minute."""
    return word_count * config.seconds_per_word


def estimate_duration(text: str, config: TimingConfig) -> float:
    """Speaking time plus pause padding, before any clamping."""
    return base_duration(count_words(text), config) + pause_padding(text)


def find_split_point(text: str) -> Optional[int]:
    """Return the offset of the sentence boundary closest to the midpoint.

    The offset indexes into text.strip(). Returns None when the text holds
    a single sentence.
    """
    stripped = text.strip()
    breaks = [m.end() for m in SENTENCE_BREAK_RE.finditer(stripped)]
    if not breaks:
        return None
    midpoint = len(stripped) / 2.0
    return min(breaks, key=lambda b: abs(b - midpoint))


# =============================================================================
# Rule D: Auto-Split
# =============================================================================

def auto_split_segments(
    segments: Sequence[SegmentInput], config: TimingConfig
) -> List[SegmentInput]:
    """Split over-long unmeasured segments at a natural sentence break.

    WHY: A single storyboard beat that runs past max_duration would
    otherwise be clamped, leaving the narration longer than its picture.
    Splitting gives the second half its own scene.

    HOW: Disabled unless config.auto_split_enabled. When enabled, every
    segment without measured timing whose estimate exceeds max_duration is
    cut once at find_split_point() into "<id>-part1" and "<id>-part2".

    RULES:
    - Returns the input unchanged when disabled.
    - Segments with measured timing are never split.
    - Single-sentence text is never split.
    """
    if not config.auto_split_enabled:
        return list(segments)

    result: List[SegmentInput] = []
    for segment in segments:
        if segment.has_measured_timing or estimate_duration(segment.text, config) <= config.max_duration:
            result.append(segment)
            continue

        cut = find_split_point(segment.text)
        if cut is None:
            result.append(segment)
            continue

        stripped = segment.text.strip()
        first, second = stripped[:cut].strip(), stripped[cut:].strip()
        logger.debug("Split %s at offset %d of %d chars", segment.id, cut, len(stripped))
        result.append(replace(segment, id="{}-part1".format(segment.id), text=first, split_parts=2))
        result.append(replace(segment, id="{}-part2".format(segment.id), text=second, split_parts=2))

    return result


# =============================================================================
# Rules A, B, C, F: Per-Segment Resolution
# =============================================================================

def timing_bounds(kind: SegmentKind, config: TimingConfig) -> Tuple[float, float]:
    """Return the (minimum, maximum) duration that applies to kind."""
    minimum = config.min_title_duration if kind in _TITLE_KINDS else config.min_duration
    return minimum, config.max_duration


def _apply_measured_timing(segment: SegmentInput) -> Optional[SegmentOutput]:
    """Rule A: use the measured audio window when it is usable."""
    if not segment.has_measured_timing:
        return None

    start = round(segment.measured_start, 2)
    end = round(segment.measured_end, 2)
    duration = round(end - start, 2)
    if start < 0 or duration <= 0:
        logger.warning(
            "Ignoring measured timing for %s: window %.2f-%.2f is not usable",
            segment.id, segment.measured_start, segment.measured_end,
        )
        return None

    return SegmentOutput(
        id=segment.id,
        start_time=start,
        end_time=end,
        duration_sec=duration,
        text=segment.text,
        reason=TimingReason.NARRATION,
        debug=TimingDebug(
            word_count=count_words(segment.text),
            base_sec=duration,
            pause_padding_sec=0.0,
            split_parts=segment.split_parts,
        ),
        is_fixed=True,
    )


def _estimate_and_clamp(segment: SegmentInput, config: TimingConfig) -> SegmentOutput:
    """Rules B and C: words-per-minute estimate bounded by the kind's limits."""
    word_count = count_words(segment.text)
    base = base_duration(word_count, config)
    padding = pause_padding(segment.text)
    estimated = base + padding

    minimum, maximum = timing_bounds(segment.kind, config)

    final = estimated
    reason = TimingReason.ESTIMATE
    if estimated < minimum:
        final, reason = minimum, TimingReason.MIN
    elif estimated > maximum:
        final, reason = maximum, TimingReason.MAX

    clamped = reason is not TimingReason.ESTIMATE
    return SegmentOutput(
        id=segment.id,
        start_time=0.0,
        end_time=0.0,
        duration_sec=round(final, 2),
        text=segment.text,
        reason=reason,
        debug=TimingDebug(
            word_count=word_count,
            base_sec=round(base, 2),
            pause_padding_sec=round(padding, 2),
            clamp_applied=clamped,
            original_duration=round(estimated, 2) if clamped else None,
            split_parts=segment.split_parts,
        ),
    )


def _apply_dead_air_cap(
    segment: SegmentInput, timing: SegmentOutput, config: TimingConfig
) -> SegmentOutput:
    """Rule F: visual-only segments never hold the screen past max_dead_air."""
    if segment.kind is not SegmentKind.VISUAL_ONLY or timing.duration_sec <= config.max_dead_air:
        return timing

    return replace(
        timing,
        duration_sec=round(config.max_dead_air, 2),
        reason=TimingReason.CLAMP,
        debug=replace(
            timing.debug,
            clamp_applied=True,
            original_duration=timing.duration_sec,
        ),
    )


def resolve_segment(segment: SegmentInput, config: TimingConfig) -> SegmentOutput:
    """Resolve one segment's duration (Rules A, B, C, F in that order).

    RULES:
    - A usable measured window short-circuits the other rules.
    - A zero or negative measured span, or a negative start, is logged
      and estimated instead.
    - The dead-air cap runs after clamping and only for visual-only kinds.
    """
    measured = _apply_measured_timing(segment)
    if measured is not None:
        return measured

    timing = _estimate_and_clamp(segment, config)
    return _apply_dead_air_cap(segment, timing, config)


# =============================================================================
# Rule E: Anti-Jitter Merge
# =============================================================================

def _short_run_end(timings: Sequence[SegmentOutput], start: int, threshold: float) -> int:
    """Return the exclusive end index of the short-duration run at start."""
    end = start
    while end < len(timings) and timings[end].duration_sec < threshold:
        end += 1
    return end


def _merge_run(timings: Sequence[SegmentOutput], start: int, end: int) -> SegmentOutput:
    run = timings[start:end]
    text = " ".join(t.text for t in run)
    duration = round(sum(t.duration_sec for t in run), 2)
    return SegmentOutput(
        id="{}-merged".format(run[0].id),
        start_time=0.0,
        end_time=0.0,
        duration_sec=duration,
        text=text,
        reason=TimingReason.MERGED,
        debug=TimingDebug(
            word_count=count_words(text),
            base_sec=duration,
            pause_padding_sec=0.0,
            merge_group_id="merge-{}-{}".format(start, end - 1),
            merged_ids=tuple(t.id for t in run),
        ),
    )


def merge_short_runs(
    timings: Sequence[SegmentOutput], config: TimingConfig
) -> List[SegmentOutput]:
    """Collapse runs of consecutive short segments into one (anti-jitter).

    WHY: Staccato dialogue or list-like scripts produce strings of scenes a
    second or two long, which reads as flicker on screen.

    HOW: Scan left to right. At each index measure the run of segments with
    duration_sec < short_scene_threshold. A run of at least
    merge_min_consecutive becomes one merged segment and the scan jumps
    past it; otherwise the current segment is kept and the scan advances
    by one.

    RULES:
    - Merged text is the run's texts joined by single spaces, in order.
    - Merged duration is the exact sum of the run's durations.
    - Measured segments are eligible; merging drops their fixed window and
      the sequencer places the group like an estimated segment.
    """
    result: List[SegmentOutput] = []
    i = 0

    while i < len(timings):
        j = _short_run_end(timings, i, config.short_scene_threshold)

        if j - i >= config.merge_min_consecutive:
            merged = _merge_run(timings, i, j)
            logger.info(
                "Merged %d short segments (%s): %.1fs",
                j - i, merged.debug.merge_group_id, merged.duration_sec,
            )
            result.append(merged)
            i = j
        else:
            result.append(timings[i])
            i += 1

    return result


# =============================================================================
# Sequencing
# =============================================================================

def sequence_segments(
    timings: Sequence[SegmentOutput], config: TimingConfig
) -> List[SegmentOutput]:
    """Assign absolute start/end times with a running cursor.

    HOW: The cursor starts at 0.0. Estimated-class segments are placed at
    the cursor and advance it by their duration. Fixed (measured) segments
    follow config.fixed_timing_policy:
      "measured": keep their own window; the cursor jumps to their end.
      "cursor"  : shift them to the cursor, keeping their duration.

    RULES:
    - The cursor always holds a 2-decimal value, so each start equals the
      previous end exactly.
    - Under "measured" a fixed window that disagrees with the cursor can
      leave a gap or overlap; it is kept and logged as a warning.
    """
    result: List[SegmentOutput] = []
    cursor = 0.0

    for timing in timings:
        if timing.is_fixed and config.fixed_timing_policy == "measured":
            if abs(timing.start_time - cursor) > CURSOR_TOLERANCE:
                logger.warning(
                    "Measured segment %s starts at %.2fs but the timeline is at %.2fs (%s of %.2fs)",
                    timing.id, timing.start_time, cursor,
                    "gap" if timing.start_time > cursor else "overlap",
                    abs(timing.start_time - cursor),
                )
            cursor = timing.end_time
            result.append(timing)
            continue

        start = cursor
        end = round(cursor + timing.duration_sec, 2)
        cursor = end
        result.append(replace(timing, start_time=start, end_time=end))

    return result


# =============================================================================
# Orchestration
# =============================================================================

def compute_scene_timings(
    segments: Iterable[SegmentInput],
    config: Optional[Union[Mapping, TimingConfig]] = None,
    preset: str = "default",
) -> List[SegmentOutput]:
    """Turn storyboard segments into a sequenced scene timeline.

    WHY: This is the single entry point the editor, exporter, CLI and tests
    call. It owns the stage order so callers cannot run the rules out of
    sequence.

    HOW: Resolves the config, then runs auto-split, per-segment resolution,
    the short-run merge and the sequencer. Logs a one-line summary at INFO
    and the full per-segment report at DEBUG.

    RULES:
    - Empty input returns an empty list.
    - Logging never changes the returned data.
    - config may be a partial option mapping or a TimingConfig.

    Args:
        segments: SegmentInput objects in timeline order.
        config: Option overrides or a resolved TimingConfig.
        preset: Preset name used when config is not a TimingConfig.

    Returns:
        SegmentOutput list covering [0, total_duration].

    Raises:
        ValueError: If the preset or an option is invalid.
    """
    cfg = resolve_config(config, preset=preset)
    inputs = list(segments)

    logger.info(
        "Computing scene timings for %d segments (%s WPM, %.1f-%.1fs range)",
        len(inputs), cfg.words_per_minute, cfg.min_duration, cfg.max_duration,
    )

    prepared = auto_split_segments(inputs, cfg)
    resolved = [resolve_segment(segment, cfg) for segment in prepared]
    merged = merge_short_runs(resolved, cfg)
    sequenced = sequence_segments(merged, cfg)

    summary = summarize(sequenced)
    counts = summary.reason_counts
    logger.info(
        "Calculated %d scenes from %d inputs. Total: %.1fs | Narration: %d | "
        "Estimate: %d | Clamped: %d | Merged: %d",
        summary.segment_count, len(inputs), summary.total_duration,
        counts.get("narration", 0), counts.get("estimate", 0),
        counts.get("min", 0) + counts.get("max", 0) + counts.get("clamp", 0),
        counts.get("merged", 0),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("\n%s", format_timing_report(sequenced))

    return sequenced

