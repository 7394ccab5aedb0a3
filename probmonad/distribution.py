"""
The lazy `Distribution` abstraction and its combinators.

A `Distribution` wraps a parameterless sampling procedure. Combinators build
new procedures that call the underlying ones, so every draw of a composite
draws fresh, independent values from its sources. The only exception is
`freeze`, which pre-draws a fixed pool once.

Several operations (`filter`/`given`, `until`, `iterate_until`, `posterior`)
redraw until a predicate holds. They never give up: a predicate with
probability zero under the distribution makes the draw loop forever. All of
them are plain loops, so acceptance probability never affects stack depth.
"""

from __future__ import annotations

import math
import numbers
import operator
import warnings
from collections import Counter
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

import numpy as np

from probmonad.config import get_config
from probmonad.exceptions import InvalidParameterError, TypeConstraintError
from probmonad.random_source import get_random_source

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")

Number = Union[int, float]


def _resolve_samples(samples: Optional[int]) -> int:
    n = get_config().samples if samples is None else int(samples)
    if n <= 0:
        raise InvalidParameterError("samples must be positive", {"samples": samples})
    return n


def _require_number(value: Any, symbol: str) -> Any:
    if not isinstance(value, numbers.Number):
        raise TypeConstraintError(
            f"Operator {symbol!r} requires numeric values, got {type(value).__name__}",
            {"value": value},
        )
    return value


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise TypeConstraintError(
            f"Value of type {type(value).__name__} is not convertible to float",
            {"value": value},
        ) from None


def _divide(a: Any, b: Any) -> float:
    # IEEE semantics: x / 0.0 is +-inf and 0.0 / 0.0 is nan.
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(_to_float(a)), np.float64(_to_float(b))))


class _Trial(NamedTuple):
    prior: Any
    evidence: Any


class Distribution(Generic[A]):
    """
    Lazy random variable backed by a sampling procedure.

    Attributes:
        _sampler: Parameterless callable returning one independent draw.
    """

    __slots__ = ("_sampler",)

    def __init__(self, sampler: Callable[[], A]) -> None:
        self._sampler = sampler

    def __repr__(self) -> str:
        return "<distribution>"

    def draw(self) -> A:
        """Draw one value."""
        return self._sampler()

    # ---------------- monadic combinators ----------------

    def map(self, f: Callable[[A], B]) -> "Distribution[B]":
        return Distribution(lambda: f(self.draw()))

    def flat_map(self, f: Callable[[A], "Distribution[B]"]) -> "Distribution[B]":
        """
        Draw a value and then draw from the distribution `f` builds from it.

        This is how statistical dependence is expressed.
        """
        return Distribution(lambda: f(self.draw()).draw())

    def filter(self, pred: Callable[[A], bool]) -> "Distribution[A]":
        """
        Condition on `pred` by redrawing until it holds.

        The draw never terminates if `pred` has probability zero.
        """

        def sampler() -> A:
            while True:
                value = self.draw()
                if pred(value):
                    return value

        return Distribution(sampler)

    def given(self, pred: Callable[[A], bool]) -> "Distribution[A]":
        return self.filter(pred)

    def zip(self, other: "Distribution[B]") -> "Distribution[Tuple[A, B]]":
        return Distribution(lambda: (self.draw(), other.draw()))

    def zip_with(
        self, other: "Distribution[B]", f: Callable[[A, B], C]
    ) -> "Distribution[C]":
        return Distribution(lambda: f(self.draw(), other.draw()))

    def until(self, pred: Callable[[List[A]], bool]) -> "Distribution[List[A]]":
        """
        Accumulate draws until `pred` holds on the accumulated list.

        Each new draw is prepended, so the list is most-recent-first. `pred` is
        evaluated on the empty list before the first draw.
        """

        def sampler() -> List[A]:
            sofar: List[A] = []
            while not pred(sofar):
                sofar.insert(0, self.draw())
            return sofar

        return Distribution(sampler)

    def repeat(self, n: int) -> "Distribution[List[A]]":
        """Lists of exactly `n` independent draws, most recent first."""
        n = int(n)
        if n < 0:
            raise InvalidParameterError("n must be non-negative", {"n": n})

        def sampler() -> List[A]:
            out = [self.draw() for _ in range(n)]
            out.reverse()
            return out

        return Distribution(sampler)

    def iterate(self, n: int, f: Callable[[A], "Distribution[A]"]) -> "Distribution[A]":
        """
        Apply `flat_map(f)` exactly `n` times.

        Args:
            n: Number of steps; 0 returns this distribution unchanged.
            f: Transition from a value to the distribution of the next value.
        """
        n = int(n)
        if n < 0:
            raise InvalidParameterError("n must be non-negative", {"n": n})
        if n == 0:
            return self

        def sampler() -> A:
            value = self.draw()
            for _ in range(n):
                value = f(value).draw()
            return value

        return Distribution(sampler)

    def iterate_until(
        self, pred: Callable[[A], bool], f: Callable[[A], "Distribution[A]"]
    ) -> "Distribution[A]":
        """
        Walk `f` from a draw of this distribution until `pred` holds.

        The draw never terminates if `pred` is unreachable from the start state.
        """

        def sampler() -> A:
            value = self.draw()
            while not pred(value):
                value = f(value).draw()
            return value

        return Distribution(sampler)

    def posterior(
        self,
        experiment: Callable[[A], "Distribution[B]"],
        observed: Callable[[B], bool],
    ) -> "Distribution[A]":
        """
        Using this distribution as a prior, compute the posterior distribution
        after running an experiment and observing some outcomes and not others.

        Args:
            experiment: Maps a prior value to the distribution of the evidence.
            observed: Predicate on the evidence that must hold.
        """
        trials = self.flat_map(lambda p: experiment(p).map(lambda e: _Trial(p, e)))
        return trials.filter(lambda t: observed(t.evidence)).map(lambda t: t.prior)

    def freeze(self, pool_size: Optional[int] = None) -> "FrozenDistribution[A]":
        """
        Draw a fixed pool once and serve values out of it at random.

        Useful when a distribution is expensive to compute and is sampled from
        repeatedly. The result is an approximation whose accuracy is bounded by
        the pool size.
        """
        cfg = get_config()
        size = cfg.freeze_pool_size if pool_size is None else int(pool_size)
        if size <= 0:
            raise InvalidParameterError("pool_size must be positive", {"pool_size": size})
        if size < cfg.freeze_pool_size:
            warnings.warn(
                f"Freeze pool of {size} draws is smaller than the recommended "
                f"{cfg.freeze_pool_size}; estimates from the frozen distribution "
                "will be noisier than those from the source distribution.",
                UserWarning,
                stacklevel=2,
            )
        return FrozenDistribution(self.sample(size))

    # ---------------- arithmetic lifting ----------------

    def _lift(
        self,
        other: Union["Distribution[Any]", Number],
        op: Callable[[Any, Any], Any],
        symbol: str,
        *,
        reflected: bool = False,
        numeric: bool = True,
    ) -> "Distribution[Any]":
        if isinstance(other, Distribution):
            right: Callable[[], Any] = other.draw
        else:
            _require_number(other, symbol)
            right = lambda: other  # noqa: E731
        left = self.draw

        def sampler() -> Any:
            a = left()
            b = right()
            if numeric:
                _require_number(a, symbol)
                _require_number(b, symbol)
            return op(b, a) if reflected else op(a, b)

        return Distribution(sampler)

    def __add__(self, other: Union["Distribution[Any]", Number]) -> "Distribution[Any]":
        return self._lift(other, operator.add, "+")

    def __radd__(self, other: Number) -> "Distribution[Any]":
        return self._lift(other, operator.add, "+", reflected=True)

    def __sub__(self, other: Union["Distribution[Any]", Number]) -> "Distribution[Any]":
        return self._lift(other, operator.sub, "-")

    def __rsub__(self, other: Number) -> "Distribution[Any]":
        return self._lift(other, operator.sub, "-", reflected=True)

    def __mul__(self, other: Union["Distribution[Any]", Number]) -> "Distribution[Any]":
        return self._lift(other, operator.mul, "*")

    def __rmul__(self, other: Number) -> "Distribution[Any]":
        return self._lift(other, operator.mul, "*", reflected=True)

    def __truediv__(self, other: Union["Distribution[Any]", Number]) -> "Distribution[float]":
        if not isinstance(other, Distribution):
            _to_float(_require_number(other, "/"))
        return self._lift(other, _divide, "/", numeric=False)

    def __rtruediv__(self, other: Number) -> "Distribution[float]":
        _to_float(_require_number(other, "/"))
        return self._lift(other, _divide, "/", reflected=True, numeric=False)

    def __neg__(self) -> "Distribution[Any]":
        def sampler() -> Any:
            return -_require_number(self.draw(), "-")

        return Distribution(sampler)

    # ---------------- sampling & estimators ----------------

    def sample(self, n: Optional[int] = None) -> List[A]:
        """Return `n` independent draws in draw order."""
        n = _resolve_samples(n)
        return [self.draw() for _ in range(n)]

    def _float_samples(self, samples: Optional[int]) -> np.ndarray:
        n = _resolve_samples(samples)
        return np.fromiter((_to_float(self.draw()) for _ in range(n)), dtype=float, count=n)

    def pr(
        self,
        pred: Callable[[A], bool],
        given: Optional[Callable[[A], bool]] = None,
        samples: Optional[int] = None,
    ) -> float:
        """
        Monte Carlo estimate of P(pred | given).

        Args:
            pred: Event whose probability is estimated.
            given: Optional conditioning event, applied through `filter`.
            samples: Number of draws; defaults to the configured sample count.

        Returns:
            Fraction of draws satisfying `pred`, in [0, 1].
        """
        n = _resolve_samples(samples)
        source = self if given is None else self.filter(given)
        hits = sum(1 for value in source.sample(n) if pred(value))
        min_hits = float(get_config().min_expected_hits)
        if 0 < hits < min_hits:
            warnings.warn(
                f"Only {hits} of {n} draws satisfied the event; the estimate is "
                "under-sampled. Increase `samples` for a tighter estimate.",
                UserWarning,
                stacklevel=2,
            )
        return float(hits) / float(n)

    def ev(self, samples: Optional[int] = None) -> float:
        """
        Expected value.

        Only real-valued distributions qualify: drawn values must convert to
        float, otherwise `TypeConstraintError` is raised.
        """
        return float(np.mean(self._float_samples(samples)))

    def mean(self, samples: Optional[int] = None) -> float:
        return self.ev(samples)

    def variance(self, samples: Optional[int] = None) -> float:
        """
        Mean squared deviation from the mean.

        The mean and the squared deviations come from two independent sampling
        passes.
        """
        m = self.mean(samples)
        return self.map(lambda x: (_to_float(x) - m) ** 2).ev(samples)

    def stdev(self, samples: Optional[int] = None) -> float:
        return math.sqrt(self.variance(samples))

    def skewness(self, samples: Optional[int] = None) -> float:
        m = self.mean(samples)
        s = self.stdev(samples)
        return self.map(lambda x: _divide(_to_float(x) - m, s) ** 3).ev(samples)

    def kurtosis(self, samples: Optional[int] = None) -> float:
        """
        Non-excess kurtosis (3.0 for a normal distribution).

        A constant distribution has zero variance and yields nan, as does
        `skewness`.
        """
        m = self.mean(samples)
        v = self.variance(samples)
        return _divide(self.map(lambda x: ((_to_float(x) - m) ** 2) ** 2).ev(samples), v**2)

    def hist_data(self, samples: Optional[int] = None) -> Dict[A, float]:
        """
        Empirical frequency table: value -> observed relative frequency.

        Frequencies sum to 1.0. Values must be hashable.
        """
        n = _resolve_samples(samples)
        counts = Counter(self.sample(n))
        return {value: c / n for value, c in counts.items()}


class FrozenDistribution(Distribution[A]):
    """
    Distribution backed by a fixed pool, sampled uniformly with replacement.

    Attributes:
        pool: The pre-drawn values.
    """

    __slots__ = ("pool",)

    def __init__(self, pool: Sequence[A]) -> None:
        if len(pool) == 0:
            raise InvalidParameterError("pool cannot be empty")
        self.pool: Tuple[A, ...] = tuple(pool)
        size = len(self.pool)
        super().__init__(lambda: self.pool[get_random_source().index(size)])


def always(value: A) -> Distribution[A]:
    """Point mass at `value`."""
    return Distribution(lambda: value)
