"""Environment defaults for the command-line harness.

WHY: The CLI is used for repeated manual runs against the same preset and
log verbosity. Reading those defaults from a .env file saves retyping
flags, while the engine itself stays free of environment lookups.

HOW: python-dotenv loads the .env file on import. Values are read once
into module-level constants that build_parser() uses as flag defaults.

RULES:
- Only the CLI imports this module; the timing engine never does.
- Command-line flags always override these defaults.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PRESET = os.getenv("SCENE_TIMING_PRESET", "default")
DEFAULT_LOG_LEVEL = os.getenv("SCENE_TIMING_LOG_LEVEL", "WARNING").upper()
DEFAULT_SAMPLE = os.getenv("SCENE_TIMING_SAMPLE", "documentary")

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
