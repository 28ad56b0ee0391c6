"""Pytest configuration: makes the repo root importable and loads fixtures."""

import sys
from pathlib import Path

# Repo root on sys.path so `tradelens` and `tests.fixtures` import uninstalled
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Candle, ratio and strategy fixtures
from tests.fixtures.sample_data import *  # noqa: F401, F403, E402
