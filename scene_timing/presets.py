"""Timing presets and configuration resolution.

WHY: Pacing rules differ between targets and have drifted over time. The
executable defaults (3.0s minimum, 12.0s maximum, 155 WPM) replaced an
older, tighter set (1.8s / 7.0s / 1.0s titles) that still shows up in old
fixtures. Naming both as presets lets callers pick one explicitly instead
of copying magic numbers around.

HOW: Each preset is a plain dict of option name -> value. resolve_config()
copies the chosen preset, applies caller overrides, validates the result
and returns a frozen TimingConfig that every pipeline stage receives as an
explicit parameter.

RULES:
- Presets are frozen constants; never mutate them at runtime.
- Unknown preset names and unknown option names raise ValueError.
- "default" is the authoritative behavior; "legacy" exists only to
  reproduce the older bounds.
- fixed_timing_policy is "measured" (measured windows win, the cursor
  jumps) or "cursor" (measured segments are shifted onto the cursor).
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional, Union

FIXED_TIMING_POLICIES = ("measured", "cursor")

# Smallest bound that survives rounding durations to 2 decimals
MIN_DURATION_FLOOR = 0.01

PRESET_DEFAULT: Dict[str, Any] = {
    "words_per_minute": 155,
    "min_duration": 3.0,
    "max_duration": 12.0,
    "min_title_duration": 1.5,
    "short_scene_threshold": 2.2,
    "merge_min_consecutive": 3,
    "max_dead_air": 2.0,
    "auto_split_enabled": False,
    "fixed_timing_policy": "measured",
}

# Bounds from the first pacing pass, kept for comparison runs
PRESET_LEGACY: Dict[str, Any] = dict(
    PRESET_DEFAULT,
    min_duration=1.8,
    max_duration=7.0,
    min_title_duration=1.0,
)

PRESETS: Dict[str, Dict[str, Any]] = {
    "default": PRESET_DEFAULT,
    "legacy": PRESET_LEGACY,
}


@dataclass(frozen=True)
class TimingConfig:
    """Resolved, validated timing options. Read-only and safe to share."""

    words_per_minute: float = 155
    min_duration: float = 3.0
    max_duration: float = 12.0
    min_title_duration: float = 1.5
    short_scene_threshold: float = 2.2
    merge_min_consecutive: int = 3
    max_dead_air: float = 2.0
    auto_split_enabled: bool = False
    fixed_timing_policy: str = "measured"

    @property
    def seconds_per_word(self) -> float:
        return 60.0 / self.words_per_minute


_OPTION_NAMES = tuple(f.name for f in fields(TimingConfig))


def resolve_config(
    overrides: Optional[Union[Mapping[str, Any], TimingConfig]] = None,
    preset: str = "default",
) -> TimingConfig:
    """Build a validated TimingConfig from a preset plus overrides.

    WHY: Callers usually tweak one or two numbers (a faster narrator, a
    longer title card) and expect the rest to follow the preset. Doing the
    merge and validation in one place keeps the pipeline stages free of
    defaulting logic.

    HOW: A TimingConfig passed as overrides is re-validated and returned.
    Otherwise the preset dict is deep-copied, overrides are applied on top
    and the result is checked for consistency.

    RULES:
    - preset must be a key of PRESETS.
    - Override keys must be TimingConfig field names.
    - words_per_minute > 0, short_scene_threshold > 0, minimums and
      max_dead_air >= 0.01s, min_duration <= max_duration,
      min_title_duration <= max_duration, merge_min_consecutive >= 1.

    Args:
        overrides: Partial option mapping, a full TimingConfig, or None.
        preset: Preset name. Default: "default".

    Returns:
        A frozen TimingConfig.

    Raises:
        ValueError: On unknown preset/option names or inconsistent values.
    """
    if isinstance(overrides, TimingConfig):
        values = asdict(overrides)
    else:
        if preset not in PRESETS:
            raise ValueError(
                "Unknown preset '{}'. Available: {}".format(
                    preset, ", ".join(PRESETS.keys())
                )
            )
        values = copy.deepcopy(PRESETS[preset])
        for key, value in (overrides or {}).items():
            if key not in _OPTION_NAMES:
                raise ValueError(
                    "Unknown timing option '{}'. Available: {}".format(
                        key, ", ".join(_OPTION_NAMES)
                    )
                )
            if value is not None:
                values[key] = value

    config = TimingConfig(**values)
    _validate(config)
    return config


def _validate(config: TimingConfig) -> None:
    if config.words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive, got {}".format(
            config.words_per_minute))
    for name in ("min_duration", "min_title_duration", "max_dead_air"):
        if getattr(config, name) < MIN_DURATION_FLOOR:
            raise ValueError("{} must be at least {}s, got {}".format(
                name, MIN_DURATION_FLOOR, getattr(config, name)))
    if config.short_scene_threshold <= 0:
        raise ValueError("short_scene_threshold must be positive, got {}".format(
            config.short_scene_threshold))
    if config.min_duration > config.max_duration:
        raise ValueError("min_duration ({}) exceeds max_duration ({})".format(
            config.min_duration, config.max_duration))
    if config.min_title_duration > config.max_duration:
        raise ValueError("min_title_duration ({}) exceeds max_duration ({})".format(
            config.min_title_duration, config.max_duration))
    if config.merge_min_consecutive < 1:
        raise ValueError("merge_min_consecutive must be at least 1")
    if config.fixed_timing_policy not in FIXED_TIMING_POLICIES:
        raise ValueError(
            "Unknown fixed_timing_policy '{}'. Available: {}".format(
                config.fixed_timing_policy, ", ".join(FIXED_TIMING_POLICIES)
            )
        )
