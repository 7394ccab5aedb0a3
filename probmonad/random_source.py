"""
The shared source of uniform and gaussian randomness.

Every primitive distribution draws from one process-wide `RandomSource`. The
source wraps a `numpy.random.Generator` and serialises access to it with a
lock, so distributions may be sampled from several threads without corrupting
generator state (draw order across threads is then unspecified).

The initialisation step is `seed(...)` or `set_random_source(...)`; without
either, a fresh unseeded source is created on first use.
"""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from probmonad.config import RandomSourceConfig


class RandomSource:
    """
    Process-wide uniform/gaussian generator.

    Attributes:
        config: Seed and bit generator used to build the numpy generator.
    """

    def __init__(self, config: Optional[RandomSourceConfig] = None) -> None:
        self.config = config or RandomSourceConfig()
        self.config.validate()
        bitgen_cls = getattr(np.random, self.config.bitgen)
        self._rng = np.random.Generator(bitgen_cls(self.config.seed))
        self._lock = threading.Lock()

    def uniform(self) -> float:
        """One draw from the half-open unit interval [0, 1)."""
        with self._lock:
            return float(self._rng.random())

    def gaussian(self) -> float:
        """One standard normal draw."""
        with self._lock:
            return float(self._rng.standard_normal())

    def index(self, n: int) -> int:
        """One uniform draw from {0, ..., n - 1}."""
        if int(n) <= 0:
            raise ValueError("n must be positive")
        with self._lock:
            return int(self._rng.integers(0, int(n)))


_source: Optional[RandomSource] = None
_source_lock = threading.Lock()


def get_random_source() -> RandomSource:
    """Return the shared random source, creating an unseeded one if needed."""
    global _source
    with _source_lock:
        if _source is None:
            _source = RandomSource()
        return _source


def set_random_source(source: RandomSource) -> None:
    """Install `source` as the shared random source."""
    global _source
    with _source_lock:
        _source = source


def seed(value: Optional[int] = None, *, bitgen: str = "PCG64") -> RandomSource:
    """
    Reinitialise the shared random source from a seed.

    Args:
        value: Integer seed, or None for fresh OS entropy.
        bitgen: Name of the numpy bit generator.

    Returns:
        The newly installed source.
    """
    source = RandomSource(RandomSourceConfig(seed=value, bitgen=bitgen))  # type: ignore[arg-type]
    set_random_source(source)
    return source
