"""Shared test fixtures for the scene_timing test suite.

WHY: Several test modules need the same resolved configuration and the
same ten-segment documentary opening used to sanity-check pacing.
Centralizing them keeps every module on the same reference data.

HOW: Pytest fixtures return a fresh default TimingConfig, the legacy
config, and the documentary storyboard from scene_timing.samples.

RULES:
- Fixtures return new lists so tests may reorder or slice them freely.
- The documentary text must not be edited; golden assertions depend on it.
"""

from typing import List

import pytest

from scene_timing.models import SegmentInput
from scene_timing.presets import resolve_config
from scene_timing.samples import SAMPLES


@pytest.fixture
def default_config():
    return resolve_config()


@pytest.fixture
def legacy_config():
    return resolve_config(preset="legacy")


@pytest.fixture
def documentary_segments() -> List[SegmentInput]:
    """The ten-segment documentary opening (narration only, no audio)."""
    return list(SAMPLES["documentary"])


@pytest.fixture
def long_three_sentence_text() -> str:
    return (
        "This is the first sentence with many words. "
        "This is the second sentence that continues the thought. "
        "And here is a third sentence to make it even longer and exceed our maximum duration limit."
    )
