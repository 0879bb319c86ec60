"""Value objects for the scene-timing engine.

WHY: Every stage of the timing pipeline (resolve, split, merge, sequence)
consumes and produces the same small set of records. Keeping them as frozen
dataclasses makes each call's output a fresh, immutable value that callers
can hold on to without worrying about later mutation.

HOW: SegmentInput is the planned storyboard unit handed in by the caller.
SegmentOutput is the scheduled result, carrying a TimingReason provenance
tag and a TimingDebug record describing how the duration was derived.

RULES:
- Times and durations are float seconds.
- SegmentOutput.text is never modified except by the merge rule, which
  joins the original texts with single spaces.
- Measured timing is authoritative only when BOTH measured_start and
  measured_end are present.
- Kind and reason values are str Enums so they serialize as plain strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SegmentKind(str, Enum):
    """What a segment shows on screen; governs minimum and dead-air policy."""

    NARRATION = "narration"
    TITLE = "title"
    TRANSITION = "transition"
    VISUAL_ONLY = "visual-only"


class TimingReason(str, Enum):
    """Which rule determined a segment's final duration."""

    NARRATION = "narration"  # measured audio span (Rule A)
    ESTIMATE = "estimate"    # words-per-minute estimate within bounds
    MIN = "min"              # raised to the kind's minimum
    MAX = "max"              # lowered to max_duration
    CLAMP = "clamp"          # visual-only dead-air cap (Rule F)
    MERGED = "merged"        # run of short segments collapsed (Rule E)


@dataclass(frozen=True)
class SegmentInput:
    """One planned narration or visual unit before timing resolution.

    Attributes:
        id: Caller-assigned identifier, unique within the batch.
        text: Narration or caption text. May be empty for visual beats.
        kind: SegmentKind (plain strings are coerced).
        measured_start: Audio-aligned start in seconds, if known.
        measured_end: Audio-aligned end in seconds, if known.
        split_parts: Set by the auto-split rule on the parts it produces.
    """

    id: str
    text: str = ""
    kind: SegmentKind = SegmentKind.NARRATION
    measured_start: float | None = None
    measured_end: float | None = None
    split_parts: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SegmentKind):
            object.__setattr__(self, "kind", SegmentKind(self.kind))
        if self.text is None:
            object.__setattr__(self, "text", "")

    @property
    def has_measured_timing(self) -> bool:
        return self.measured_start is not None and self.measured_end is not None


@dataclass(frozen=True)
class TimingDebug:
    """How a segment's duration was derived.

    Attributes:
        word_count: Whitespace-delimited words in the segment text.
        base_sec: Speaking time before padding. For measured segments this
            is the measured span; for merged groups the summed duration.
        pause_padding_sec: Seconds added for punctuation pauses.
        clamp_applied: True when a min, max or dead-air bound replaced the
            computed duration.
        original_duration: The duration before the clamp, when one fired.
        split_parts: Number of parts when produced by the auto-split rule.
        merge_group_id: "merge-<first>-<last>" for merged groups.
        merged_ids: Ids of the segments folded into a merged group.
    """

    word_count: int
    base_sec: float
    pause_padding_sec: float
    clamp_applied: bool = False
    original_duration: float | None = None
    split_parts: int | None = None
    merge_group_id: str | None = None
    merged_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict, omitting unset optional fields."""
        out: dict[str, Any] = {
            "word_count": self.word_count,
            "base_sec": self.base_sec,
            "pause_padding_sec": self.pause_padding_sec,
            "clamp_applied": self.clamp_applied,
        }
        if self.original_duration is not None:
            out["original_duration"] = self.original_duration
        if self.split_parts is not None:
            out["split_parts"] = self.split_parts
        if self.merge_group_id is not None:
            out["merge_group_id"] = self.merge_group_id
            out["merged_ids"] = list(self.merged_ids)
        return out


@dataclass(frozen=True)
class SegmentOutput:
    """One scheduled segment on the shared timeline.

    start_time and end_time are 0.0 until the sequencer runs, except for
    segments carrying measured timing (is_fixed), which know their window
    from the start.
    """

    id: str
    start_time: float
    end_time: float
    duration_sec: float
    text: str
    reason: TimingReason
    debug: TimingDebug
    is_fixed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_sec": self.duration_sec,
            "text": self.text,
            "reason": self.reason.value,
            "debug": self.debug.to_dict(),
        }


@dataclass(frozen=True)
class TimingSummary:
    """Aggregate figures over a computed timeline."""

    segment_count: int
    total_duration: float
    average_duration: float
    total_words: int
    effective_wpm: float
    reason_counts: dict[str, int] = field(default_factory=dict)
