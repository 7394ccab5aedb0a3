"""
Statistical checks on distributions.

The following items are provided:
  - the two-sample Kolmogorov-Smirnov statistic between two distributions
  - the asymptotic p-value for that statistic
  - Wilson confidence intervals for Monte Carlo probability estimates
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, TypeVar

import numpy as np
from scipy.stats import kstwobign, norm

from probmonad.config import get_config
from probmonad.distribution import Distribution
from probmonad.exceptions import InvalidParameterError

A = TypeVar("A")

_MIN_KS_SAMPLES = 1000


def ks_test(
    d1: Distribution[A],
    d2: Distribution[A],
    n: Optional[int] = None,
    *,
    key: Optional[Callable[[A], Any]] = None,
) -> float:
    """
    Two-sample Kolmogorov-Smirnov statistic between `d1` and `d2`.

    Both samples are sorted and each value is tagged with its index i in its
    own sample. In the merged order a value at position j would sit near
    j = 2i if the distributions agree, so the largest |2i - j| measures the
    worst gap between the empirical CDFs.

    The distributions are unlikely to be the same (p < 0.05) if the value is
    greater than 1.35 and very unlikely (p < 0.001) if it is greater than
    1.95. No decision is taken here.

    Args:
        d1: First distribution.
        d2: Second distribution.
        n: Draws per distribution; defaults to the configured `ks_samples`.
        key: Sort key giving the total order on values; natural order if None.

    Returns:
        The normalised KS statistic.
    """
    n = get_config().ks_samples if n is None else int(n)
    if n <= 0:
        raise InvalidParameterError("n must be positive", {"n": n})
    if n < _MIN_KS_SAMPLES:
        warnings.warn(
            f"KS test with n={n} draws per distribution; the 1.35 / 1.95 "
            "thresholds are asymptotic and unreliable for small samples.",
            UserWarning,
            stacklevel=2,
        )

    order: Callable[[A], Any] = key if key is not None else (lambda x: x)
    s1 = sorted(d1.sample(n), key=order)
    s2 = sorted(d2.sample(n), key=order)

    tagged: List[Tuple[Any, int, int]] = [(order(x), i, 0) for i, x in enumerate(s1)]
    tagged.extend((order(x), i, 1) for i, x in enumerate(s2))
    tagged.sort()

    own_index = np.fromiter((t[1] for t in tagged), dtype=np.int64, count=2 * n)
    merged_index = np.arange(2 * n, dtype=np.int64)
    worst_offset = int(np.max(np.abs(2 * own_index - merged_index))) // 2

    statistic = worst_offset / n
    return float(statistic / math.sqrt(2.0 * n / (n * n)))


def ks_pvalue(statistic: float) -> float:
    """
    Asymptotic p-value of a normalised KS statistic (Kolmogorov distribution).
    """
    statistic = float(statistic)
    if statistic < 0.0:
        raise InvalidParameterError("statistic must be non-negative", {"statistic": statistic})
    return float(kstwobign.sf(statistic))


@dataclass(frozen=True)
class BinomialInterval:
    estimate: float
    level: float
    lower: float
    upper: float


def wilson_interval_from_count(k: int, n: int, *, level: float = 0.95) -> BinomialInterval:
    """
    Wilson score interval for `k` hits out of `n` Monte Carlo draws.

    Unlike the normal approximation, the interval stays inside [0, 1] and
    has non-zero width when every draw (or none) satisfied the predicate.

    Raises:
        InvalidParameterError: If `n` is not positive, `k` is outside [0, n],
            or `level` is outside (0, 1).
    """
    n = int(n)
    k = int(k)
    level = float(level)
    if n <= 0:
        raise InvalidParameterError("n must be positive", {"n": n})
    if not (0 <= k <= n):
        raise InvalidParameterError("k must be in [0, n]", {"k": k, "n": n})
    if not (0.0 < level < 1.0):
        raise InvalidParameterError("level must be in (0, 1)", {"level": level})

    estimate = k / n
    z2 = float(norm.ppf(0.5 + level / 2.0)) ** 2
    shrink = 1.0 / (1.0 + z2 / n)
    center = shrink * (estimate + z2 / (2.0 * n))
    half_width = shrink * math.sqrt(z2 * estimate * (1.0 - estimate) / n + z2 * z2 / (4.0 * n * n))
    return BinomialInterval(
        estimate=estimate,
        level=level,
        lower=max(0.0, center - half_width),
        upper=min(1.0, center + half_width),
    )


def pr_interval(
    dist: Distribution[A],
    pred: Callable[[A], bool],
    given: Optional[Callable[[A], bool]] = None,
    samples: Optional[int] = None,
    *,
    level: float = 0.95,
) -> BinomialInterval:
    """
    Like `Distribution.pr`, with a Wilson interval around the estimate.
    """
    n = get_config().samples if samples is None else int(samples)
    if n <= 0:
        raise InvalidParameterError("samples must be positive", {"samples": n})
    source = dist if given is None else dist.filter(given)
    hits = sum(1 for value in source.sample(n) if pred(value))
    return wilson_interval_from_count(hits, n, level=level)
