"""
Histogram data for real-valued distributions.

Only the numbers behind a histogram are computed here: bucket anchors and the
relative frequency of draws rounded to each anchor. Bucket arithmetic is done
in `Decimal` so that anchors such as 0.3 come out exact.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from probmonad.config import get_config
from probmonad.distribution import Distribution, _resolve_samples, _to_float
from probmonad.exceptions import InvalidParameterError

_NICE_WIDTHS: Tuple[Decimal, ...] = tuple(
    Decimal(w) for w in ("0.1", "0.2", "0.25", "0.5", "1", "2", "2.5", "5", "10")
)


@dataclass(frozen=True)
class Bucketing:
    outer_min: Decimal
    outer_max: Decimal
    width: Decimal
    buckets: int


def _dec(x: float) -> Decimal:
    return Decimal(repr(float(x)))


def find_bucket_width(lo: float, hi: float, buckets: int) -> Bucketing:
    """
    Choose a round bucket width covering [lo, hi] with about `buckets` buckets.

    The width is one of 0.1, 0.2, 0.25, 0.5, 1, 2, 2.5, 5, 10 times a power of
    ten, whichever gives a bucket count closest to `buckets`. The outer bounds
    are snapped outwards to multiples of the width.
    """
    buckets = int(buckets)
    if buckets <= 0:
        raise InvalidParameterError("buckets must be positive", {"buckets": buckets})
    if not (math.isfinite(lo) and math.isfinite(hi)) or hi < lo:
        raise InvalidParameterError("need finite lo <= hi", {"lo": lo, "hi": hi})

    dlo = _dec(lo)
    dhi = _dec(hi)
    span = dhi - dlo
    if span == 0:
        # Degenerate sample: a single unit-width bucket.
        return Bucketing(dlo, dlo + 1, Decimal(1), 1)

    p = int(math.log10(float(span))) - 1
    scale = Decimal(10) ** p
    best = min((w * scale for w in _NICE_WIDTHS), key=lambda w: abs(span / w - buckets))
    outer_min = (dlo / best).to_integral_value(rounding=ROUND_FLOOR) * best
    outer_max = ((dhi / best).to_integral_value(rounding=ROUND_FLOOR) + 1) * best
    actual = int((outer_max - outer_min) / best)
    return Bucketing(outer_min, outer_max, best, actual)


def _bucketed(lo: Decimal, hi: Decimal, nbuckets: int, data: Sequence[float]) -> List[Tuple[float, float]]:
    width = (hi - lo) / nbuckets
    counts: Dict[Decimal, int] = {}
    for x in data:
        anchor = ((_dec(x) - lo) / width).quantize(Decimal(1), rounding=ROUND_HALF_UP) * width + lo
        counts[anchor] = counts.get(anchor, 0) + 1
    n = len(data)
    out: List[Tuple[float, float]] = []
    for i in range(nbuckets + 1):
        anchor = Decimal(i) * width + lo
        freq = counts.get(anchor, 0) / n if n else 0.0
        out.append((float(anchor), float(freq)))
    return out


def bucketed_hist_data(
    dist: Distribution[float],
    buckets: Optional[int] = None,
    samples: Optional[int] = None,
) -> List[Tuple[float, float]]:
    """
    Bucketed frequency table with automatically chosen round bucket widths.

    Returns:
        (bucket anchor, relative frequency) pairs in increasing anchor order.
    """
    buckets = get_config().hist_buckets if buckets is None else int(buckets)
    data = sorted(_to_float(x) for x in dist.sample(_resolve_samples(samples)))
    b = find_bucket_width(data[0], data[-1], buckets)
    return _bucketed(b.outer_min, b.outer_max, b.buckets, data)


def bucketed_hist_range(
    dist: Distribution[float],
    lo: float,
    hi: float,
    nbuckets: int,
    samples: Optional[int] = None,
) -> List[Tuple[float, float]]:
    """
    Bucketed frequency table over a fixed range; draws outside [lo, hi] are dropped.

    Frequencies are relative to the number of draws kept.
    """
    nbuckets = int(nbuckets)
    if nbuckets <= 0:
        raise InvalidParameterError("nbuckets must be positive", {"nbuckets": nbuckets})
    if not hi > lo:
        raise InvalidParameterError("hi must exceed lo", {"lo": lo, "hi": hi})
    values = (_to_float(x) for x in dist.sample(_resolve_samples(samples)))
    data = sorted(x for x in values if lo <= x <= hi)
    return _bucketed(_dec(lo), _dec(hi), nbuckets, data)
