"""
Configuration objects for sampling defaults.

In this module, configuration dataclasses are provided as a stable, typed
surface for the Monte Carlo defaults used across the package. A single
process-wide `SamplingConfig` is consulted whenever an estimator or
constructor is called without an explicit value.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Optional


@dataclass(frozen=True)
class SamplingConfig:
    """
    Default sample sizes and numerical tolerances.

    Attributes:
        samples: Draws per Monte Carlo estimate (`pr`, `mean`, `variance`, ...).
        freeze_factor: Multiplier on `samples` giving the pool size of `freeze`.
        ks_samples: Draws per distribution in the two-sample KS test.
        alias_tolerance: Slack used when re-bucketing alias-table remainders.
        hist_buckets: Target bucket count for bucketed histograms.
        min_expected_hits: Expected-hit threshold below which `pr` warns.
    """

    samples: int = 10_000
    freeze_factor: int = 10
    ks_samples: int = 100_000
    alias_tolerance: float = 1e-4
    hist_buckets: int = 20
    min_expected_hits: float = 20.0

    def validate(self) -> None:
        """
        Configuration validation is performed.
        """
        if int(self.samples) <= 0:
            raise ValueError("samples must be positive")
        if int(self.freeze_factor) <= 0:
            raise ValueError("freeze_factor must be positive")
        if int(self.ks_samples) <= 0:
            raise ValueError("ks_samples must be positive")
        if not (0.0 <= float(self.alias_tolerance) < 1.0):
            raise ValueError("alias_tolerance must be in [0, 1)")
        if int(self.hist_buckets) <= 0:
            raise ValueError("hist_buckets must be positive")
        if float(self.min_expected_hits) < 0.0:
            raise ValueError("min_expected_hits must be non-negative")

    @property
    def freeze_pool_size(self) -> int:
        return int(self.samples) * int(self.freeze_factor)


@dataclass(frozen=True)
class RandomSourceConfig:
    """
    Configuration for the shared random source.
    """

    seed: Optional[int] = None
    bitgen: Literal["PCG64", "PCG64DXSM", "Philox", "SFC64", "MT19937"] = "PCG64"

    def validate(self) -> None:
        if self.seed is not None and int(self.seed) < 0:
            raise ValueError("seed must be non-negative when provided")
        if str(self.bitgen) not in {"PCG64", "PCG64DXSM", "Philox", "SFC64", "MT19937"}:
            raise ValueError("bitgen is not recognised")


_config = SamplingConfig()


def get_config() -> SamplingConfig:
    """Return the process-wide sampling defaults."""
    return _config


def set_config(config: SamplingConfig) -> SamplingConfig:
    """
    Replace the process-wide sampling defaults.

    Returns:
        The previously active configuration, so callers can restore it.
    """
    global _config
    config.validate()
    previous = _config
    _config = config
    return previous


def configure(**overrides: Any) -> SamplingConfig:
    """
    Override individual fields of the active configuration.

    Returns:
        The previously active configuration.
    """
    return set_config(replace(_config, **overrides))
