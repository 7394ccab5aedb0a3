"""
Unit tests for the Monte Carlo estimators.
"""

from __future__ import annotations

import math

import pytest

from probmonad.config import configure
from probmonad.continuous import normal, uniform
from probmonad.discrete import coin, d
from probmonad.distribution import always
from probmonad.exceptions import InvalidParameterError, TypeConstraintError


def test_normal_moments() -> None:
    assert abs(normal.mean()) < 0.05
    assert abs(normal.variance() - 1.0) < 0.05
    assert abs(normal.stdev() - 1.0) < 0.03
    assert abs(normal.skewness()) < 0.1


def test_kurtosis_is_non_excess() -> None:
    assert abs(normal.kurtosis(samples=50_000) - 3.0) < 0.2
    # Uniform kurtosis is 9/5.
    assert abs(uniform.kurtosis() - 1.8) < 0.1


def test_constant_distribution_has_undefined_shape_moments() -> None:
    point = always(2.0)
    assert point.stdev(samples=100) == 0.0
    assert math.isnan(point.skewness(samples=100))
    assert math.isnan(point.kurtosis(samples=100))


def test_ev_matches_mean() -> None:
    assert always(2.5).ev() == 2.5
    assert always(2.5).mean() == 2.5
    assert always(3).variance() == 0.0


def test_pr_in_unit_interval() -> None:
    p = d(6).pr(lambda x: x == 6)
    assert 0.0 <= p <= 1.0
    assert abs(p - 1.0 / 6.0) < 0.02


def test_pr_with_given() -> None:
    p = d(6).pr(lambda x: x == 6, given=lambda x: x % 2 == 0)
    assert abs(p - 1.0 / 3.0) < 0.03


def test_pr_warns_when_under_sampled() -> None:
    with pytest.warns(UserWarning, match="under-sampled"):
        normal.pr(lambda x: x > 3.2, samples=10_000)


def test_sample_uses_configured_default() -> None:
    assert len(uniform.sample()) == 10_000
    configure(samples=250)
    assert len(uniform.sample()) == 250
    assert len(uniform.sample(7)) == 7


def test_estimators_reject_non_numeric_values() -> None:
    with pytest.raises(TypeConstraintError):
        coin.mean()
    with pytest.raises(InvalidParameterError):
        normal.sample(0)
