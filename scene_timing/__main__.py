"""Package entry point for ``python -m scene_timing``."""

from scene_timing.cli import main

if __name__ == "__main__":
    main()
