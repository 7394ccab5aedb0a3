"""
Discrete distributions.

`discrete` samples arbitrary weighted outcomes in O(1) per draw using the
alias method (Vose's variant): the n weights are rescaled to average 1 and
packed into n equal-width columns, each holding at most two outcomes. A draw
picks a column and then one of its two outcomes. Building the table is O(n).

The named families below are compositions of `discrete`, `tf` and the
`Distribution` combinators rather than separate algorithms.
"""

from __future__ import annotations

import enum
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, Iterable, List, Optional, Tuple, TypeVar

from probmonad.config import get_config
from probmonad.distribution import Distribution
from probmonad.exceptions import InvalidParameterError
from probmonad.random_source import get_random_source

A = TypeVar("A")


def _check_probability(p: float, name: str = "p") -> float:
    p = float(p)
    if not (0.0 <= p <= 1.0):
        raise InvalidParameterError(f"{name} must be in [0, 1]", {name: p})
    return p


@dataclass(frozen=True)
class AliasRow(Generic[A]):
    """
    One column of an alias table.

    Attributes:
        primary: Outcome returned when the second uniform falls at or below `cutoff`.
        cutoff: Probability mass of `primary` within the column.
        alternate: Outcome filling the rest of the column.
        has_alternate: False for full columns; `alternate` is then unused.
    """

    primary: A
    cutoff: float
    alternate: Optional[A] = None
    has_alternate: bool = False

    def select(self, u: float) -> A:
        if not self.has_alternate:
            return self.primary
        return self.primary if u <= self.cutoff else self.alternate  # type: ignore[return-value]


class AliasTable(Generic[A]):
    """
    Immutable alias table built from (value, weight) pairs.

    Attributes:
        rows: Exactly one row per input pair.
    """

    __slots__ = ("rows",)

    def __init__(self, rows: Iterable[AliasRow[A]]) -> None:
        self.rows: Tuple[AliasRow[A], ...] = tuple(rows)
        if not self.rows:
            raise InvalidParameterError("Alias table cannot be empty")

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def build(
        cls,
        weighted_values: Iterable[Tuple[A, float]],
        *,
        tolerance: Optional[float] = None,
    ) -> "AliasTable[A]":
        """
        Build the table from weights that need not sum to 1.

        Args:
            weighted_values: (value, non-negative weight) pairs.
            tolerance: A remainder within `tolerance` below 1.0 is treated as a
                full column; this stops floating error from bouncing an entry
                between the two buckets. Defaults to the configured
                `alias_tolerance`.

        Raises:
            InvalidParameterError: If the input is empty, a weight is negative
                or not finite, or all weights are zero.
        """
        tol = float(get_config().alias_tolerance if tolerance is None else tolerance)
        if not (0.0 <= tol < 1.0):
            raise InvalidParameterError("tolerance must be in [0, 1)", {"tolerance": tol})

        pairs: List[Tuple[A, float]] = [(v, float(w)) for v, w in weighted_values]
        if not pairs:
            raise InvalidParameterError("weighted_values cannot be empty")
        for v, w in pairs:
            if not math.isfinite(w) or w < 0.0:
                raise InvalidParameterError(
                    f"Weight for {v!r} must be finite and non-negative", {"weight": w}
                )
        total = math.fsum(w for _, w in pairs)
        if total <= 0.0:
            raise InvalidParameterError("Weights must not all be zero")

        n = len(pairs)
        scale = n / total
        scaled = [(v, w * scale) for v, w in pairs]
        smaller: Deque[Tuple[A, float]] = deque(e for e in scaled if e[1] < 1.0)
        bigger: Deque[Tuple[A, float]] = deque(e for e in scaled if e[1] >= 1.0)

        rows: List[AliasRow[A]] = []
        while smaller:
            s, sp = smaller.popleft()
            if not bigger:
                # Only reachable through accumulated rounding error.
                rows.append(AliasRow(s, 1.0))
                continue
            b, pb = bigger.popleft()
            rows.append(AliasRow(s, sp, b, True))
            remainder = (b, pb - (1.0 - sp))
            if remainder[1] < 1.0 - tol:
                smaller.appendleft(remainder)
            else:
                bigger.appendleft(remainder)
        rows.extend(AliasRow(b, 1.0) for b, _ in bigger)
        return cls(rows)

    def select(self, u1: float, u2: float) -> A:
        """Map two independent unit-interval draws to an outcome."""
        n = len(self.rows)
        return self.rows[min(int(u1 * n), n - 1)].select(u2)


def discrete_uniform(values: Iterable[A]) -> Distribution[A]:
    """Uniform over a finite collection (duplicates count separately)."""
    vec: Tuple[A, ...] = tuple(values)
    if not vec:
        raise InvalidParameterError("values cannot be empty")
    size = len(vec)
    return Distribution(lambda: vec[get_random_source().index(size)])


def discrete(
    weighted_values: Iterable[Tuple[A, float]],
    *,
    tolerance: Optional[float] = None,
) -> Distribution[A]:
    """
    Weighted discrete distribution sampled with the alias method.

    The table is built (and the weights validated) immediately.
    """
    table = AliasTable.build(weighted_values, tolerance=tolerance)

    def sampler() -> A:
        source = get_random_source()
        u1 = source.uniform()
        u2 = source.uniform()
        return table.select(u1, u2)

    return Distribution(sampler)


class Coin(enum.Enum):
    H = "H"
    T = "T"

    def __repr__(self) -> str:
        return self.value


H = Coin.H
T = Coin.T


def biased_coin(p: float) -> Distribution[Coin]:
    p = _check_probability(p)
    return discrete([(H, p), (T, 1.0 - p)])


def d(n: int) -> Distribution[int]:
    """A fair n-sided die with faces 1..n."""
    n = int(n)
    if n <= 0:
        raise InvalidParameterError("n must be positive", {"n": n})
    return discrete_uniform(range(1, n + 1))


coin: Distribution[Coin] = discrete_uniform([H, T])
die: Distribution[int] = d(6)


def dice(n: int) -> Distribution[List[int]]:
    return die.repeat(n)


def tf(p: float = 0.5) -> Distribution[bool]:
    """True with probability `p`."""
    p = _check_probability(p)
    return discrete([(True, p), (False, 1.0 - p)])


def bernoulli(p: float = 0.5) -> Distribution[bool]:
    return tf(p)


def geometric(p: float) -> Distribution[int]:
    """Number of failures before the first success of a `tf(p)` trial."""
    p = _check_probability(p)
    if p == 0.0:
        raise InvalidParameterError("p must be positive for a geometric distribution", {"p": p})
    return tf(p).until(lambda xs: bool(xs) and xs[0] is True).map(lambda xs: len(xs) - 1)


def binomial(p: float, n: int) -> Distribution[int]:
    """Number of successes in `n` independent `tf(p)` trials."""
    p = _check_probability(p)
    n = int(n)
    if n < 0:
        raise InvalidParameterError("n must be non-negative", {"n": n})
    return tf(p).repeat(n).map(lambda xs: sum(1 for b in xs if b))


def negative_binomial(p: float, r: int) -> Distribution[int]:
    """Number of failures before the `r`-th success of `tf(p)` trials."""
    p = _check_probability(p)
    r = int(r)
    if r < 0:
        raise InvalidParameterError("r must be non-negative", {"r": r})
    if p == 0.0 and r > 0:
        raise InvalidParameterError("p must be positive when r > 0", {"p": p, "r": r})
    return tf(p).until(lambda xs: sum(1 for b in xs if b) == r).map(lambda xs: len(xs) - r)


def poisson(lam: float) -> Distribution[int]:
    """
    Poisson(lam) by the product-of-uniforms method.

    Uniform draws are multiplied until the running product drops to
    exp(-lam) or below; the number of products still above the threshold is
    the sample.
    """
    lam = float(lam)
    if not math.isfinite(lam) or lam < 0.0:
        raise InvalidParameterError("lam must be finite and non-negative", {"lam": lam})
    threshold = math.exp(-lam)

    def sampler() -> int:
        source = get_random_source()
        count = 0
        product = source.uniform()
        while product > threshold:
            count += 1
            product *= source.uniform()
        return count

    return Distribution(sampler)


def zipf(s: float, n: int) -> Distribution[int]:
    """Ranks 1..n with probability proportional to k ** -s."""
    s = float(s)
    n = int(n)
    if n <= 0:
        raise InvalidParameterError("n must be positive", {"n": n})
    return discrete([(k, 1.0 / math.pow(k, s)) for k in range(1, n + 1)])
