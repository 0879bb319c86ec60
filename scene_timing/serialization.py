"""JSON input loading, timeline export and story-beat conversion.

WHY: The engine works on dataclasses, but its neighbours speak JSON: the
script breakdown arrives as a list of segment objects (often with the
editor's camelCase field names), and the export pipeline expects a
timeline document it can trust. This module is the boundary between the
two.

HOW: load_segments() validates a parsed document against
schemas/segments.schema.json with jsonschema, then builds SegmentInput
objects. timeline_to_dict() builds the export document and validates it
against schemas/timeline.schema.json before returning it.
to_story_beats() reshapes outputs into the editor's beat records.

RULES:
- Input field aliases: measured_start / measuredStart / audioStart (same
  for end) and kind / sceneType. The first present alias wins.
- Malformed input raises InputError, never a bare jsonschema error.
- Export validation failures raise jsonschema.ValidationError; they mean
  the engine produced something it should not have.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import jsonschema

from .models import SegmentInput, SegmentOutput

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

_START_KEYS = ("measured_start", "measuredStart", "audioStart")
_END_KEYS = ("measured_end", "measuredEnd", "audioEnd")
_KIND_KEYS = ("kind", "sceneType")

DEFAULT_MOTION = "slow_zoom_in"


class InputError(ValueError):
    """Raised when a segment document cannot be turned into SegmentInputs."""


_CACHED_SCHEMAS: Dict[str, Dict[str, Any]] = {}


def _get_schema(name: str) -> Dict[str, Any]:
    """Load a bundled JSON schema, cached after the first read."""
    if name not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / name, encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]


def _first_present(item: Dict[str, Any], keys: Sequence[str]) -> Optional[Any]:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def load_segments(data: Any) -> List[SegmentInput]:
    """Build SegmentInputs from a parsed JSON document.

    Args:
        data: A list of segment objects, or {"segments": [...]}.

    Returns:
        SegmentInput list in document order.

    Raises:
        InputError: If the document does not match the segment schema or
            segment ids repeat.
    """
    try:
        jsonschema.validate(instance=data, schema=_get_schema("segments.schema.json"))
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise InputError("Invalid segment input at {}: {}".format(location, e.message)) from e

    items = data["segments"] if isinstance(data, dict) else data

    segments: List[SegmentInput] = []
    seen = set()
    for item in items:
        segment_id = item["id"]
        if segment_id in seen:
            raise InputError("Duplicate segment id '{}'".format(segment_id))
        seen.add(segment_id)

        start = _first_present(item, _START_KEYS)
        end = _first_present(item, _END_KEYS)
        segments.append(SegmentInput(
            id=segment_id,
            text=item.get("text") or "",
            kind=_first_present(item, _KIND_KEYS) or "narration",
            measured_start=float(start) if start is not None else None,
            measured_end=float(end) if end is not None else None,
        ))

    return segments


def load_segments_json(raw: str) -> List[SegmentInput]:
    """Parse a JSON string and load its segments.

    Raises:
        InputError: If the string is not JSON or fails validation.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InputError("Could not parse JSON input: {}".format(e)) from e
    return load_segments(data)


def timeline_to_dict(timings: Sequence[SegmentOutput]) -> Dict[str, Any]:
    """Build the validated timeline export document.

    Raises:
        jsonschema.ValidationError: If the document violates the timeline
            schema.
    """
    output: Dict[str, Any] = {
        "total_duration": timings[-1].end_time if timings else 0.0,
        "segments": [t.to_dict() for t in timings],
    }
    jsonschema.validate(instance=output, schema=_get_schema("timeline.schema.json"))
    return output


def timeline_to_json(timings: Sequence[SegmentOutput], indent: int = 2) -> str:
    return json.dumps(timeline_to_dict(timings), indent=indent, ensure_ascii=False)


def to_story_beats(
    timings: Sequence[SegmentOutput], inputs: Sequence[SegmentInput]
) -> List[Dict[str, Any]]:
    """Convert timed segments into the editor's story-beat records.

    The beat's script_text comes from the input with the same id, falling
    back to the output's own text for merged and split segments. Visual
    prompt and image state start empty; the scene generator fills them.
    """
    by_id = {segment.id: segment for segment in inputs}

    beats: List[Dict[str, Any]] = []
    for timing in timings:
        source = by_id.get(timing.id)
        beats.append({
            "id": timing.id,
            "script_text": source.text if source is not None else timing.text,
            "visual_prompt": "",
            "suggested_duration": timing.duration_sec,
            "start_time": timing.start_time,
            "end_time": timing.end_time,
            "is_generating_image": False,
            "motion": DEFAULT_MOTION,
            "timing_debug": timing.debug.to_dict(),
            "timing_reason": timing.reason.value,
        })
    return beats
