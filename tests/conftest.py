from __future__ import annotations

import pytest

from probmonad.config import SamplingConfig, set_config
from probmonad.random_source import seed


@pytest.fixture(autouse=True)
def _seeded_source():
    """Every test starts from the same generator state and default settings."""
    seed(12345)
    previous = set_config(SamplingConfig())
    yield
    set_config(previous)
