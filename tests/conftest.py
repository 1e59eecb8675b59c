import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from circuit_weave.circuit_weave import Config  # noqa: E402


@pytest.fixture(autouse=True)
def _restore_config():
    """Config is a process-wide singleton; undo whatever a test changed."""
    cfg = Config()
    seed = cfg.random_seed
    tolerance = cfg.probability_tolerance
    policy = cfg.default_policy
    yield cfg
    cfg.set_seed(seed)
    cfg.set_probability_tolerance(tolerance)
    cfg.set_default_policy(policy)
