"""
Continuous distributions.

`uniform` and `normal` delegate to the shared random source. Every other
family is a closed-form transform of those two (inverse CDF or a standard
identity), except `gamma`, whose fractional shape uses the Ahrens-Dieter
rejection sampler, and `beta`, which is built from two gammas.
"""

from __future__ import annotations

import math

from probmonad.distribution import Distribution
from probmonad.exceptions import InvalidParameterError
from probmonad.random_source import get_random_source


def _check_positive(value: float, name: str) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"{name} must be finite and positive", {name: value})
    return value


def _check_count(value: int, name: str) -> int:
    value = int(value)
    if value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer", {name: value})
    return value


uniform: Distribution[float] = Distribution(lambda: get_random_source().uniform())
normal: Distribution[float] = Distribution(lambda: get_random_source().gaussian())

# Uniform on the open interval (0, 1); safe to pass to log and negative powers.
_open_uniform: Distribution[float] = uniform.filter(lambda u: u > 0.0)


def exponential(rate: float) -> Distribution[float]:
    rate = _check_positive(rate, "rate")
    return _open_uniform.map(lambda u: -math.log(u) / rate)


def pareto(a: float, xm: float = 1.0) -> Distribution[float]:
    a = _check_positive(a, "a")
    xm = _check_positive(xm, "xm")
    return _open_uniform.map(lambda u: xm * math.pow(u, -1.0 / a))


def laplace(b: float) -> Distribution[float]:
    """Difference of two independent exponentials with mean `b`."""
    b = _check_positive(b, "b")
    e = exponential(1.0 / b)
    return e - e


def chi2(n: int) -> Distribution[float]:
    n = _check_count(n, "n")
    return normal.map(lambda x: x * x).repeat(n).map(math.fsum)


def students_t(df: int) -> Distribution[float]:
    df = _check_count(df, "df")
    v = chi2(df)
    return normal.flat_map(lambda z: v.map(lambda x: z * math.sqrt(df / x)))


def f(d1: int, d2: int) -> Distribution[float]:
    """Ratio of independent chi-squared variables, without the d2 / d1 normalisation."""
    return chi2(d1) / chi2(d2)


lognormal: Distribution[float] = normal.map(math.exp)
cauchy: Distribution[float] = normal / normal


def weibull(scale: float, k: float) -> Distribution[float]:
    scale = _check_positive(scale, "scale")
    k = _check_positive(k, "k")
    return exponential(1.0).map(lambda y: scale * math.pow(y, 1.0 / k))


def _gamma_fraction(delta: float) -> Distribution[float]:
    """
    Gamma(delta, 1) for 0 < delta < 1 by Ahrens-Dieter rejection.

    Each trial draws three uniforms; rejected trials restart from scratch.
    Acceptance is certain eventually, so the loop terminates with
    probability 1.
    """
    v0 = math.e / (math.e + delta)

    def sampler() -> float:
        while True:
            u1 = _open_uniform.draw()
            u2 = _open_uniform.draw()
            u3 = _open_uniform.draw()
            if u1 <= v0:
                zeta = math.pow(u2, 1.0 / delta)
                eta = u3 * math.pow(zeta, delta - 1.0)
            else:
                zeta = 1.0 - math.log(u2)
                eta = u3 * math.exp(-zeta)
            if eta <= math.pow(zeta, delta - 1.0) * math.exp(-zeta):
                return zeta

    return Distribution(sampler)


def gamma(k: float, theta: float) -> Distribution[float]:
    """
    Gamma with shape `k` and scale `theta`.

    The integer part of the shape is a sum of floor(k) standard exponentials;
    the fractional remainder, if any, comes from the rejection sampler.
    """
    k = _check_positive(k, "k")
    theta = _check_positive(theta, "theta")
    n = int(math.floor(k))
    delta = k - n

    integer_part = _open_uniform.map(lambda u: -math.log(u)).repeat(n).map(math.fsum)
    if delta > 0.0:
        total = integer_part + _gamma_fraction(delta)
    else:
        total = integer_part
    return total * theta


def beta(a: float, b: float) -> Distribution[float]:
    x = gamma(a, 1.0)
    y = gamma(b, 1.0)
    return x.zip_with(y, lambda xv, yv: xv / (xv + yv))
