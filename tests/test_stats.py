"""
Unit tests for the KS statistic and interval helpers.
"""

from __future__ import annotations

import pytest

from probmonad.continuous import normal, uniform
from probmonad.discrete import d
from probmonad.distribution import always
from probmonad.exceptions import InvalidParameterError
from probmonad.stats import ks_pvalue, ks_test, pr_interval, wilson_interval_from_count


def test_ks_same_distribution_is_small() -> None:
    assert ks_test(normal, normal) < 1.35


def test_ks_different_distributions_is_large() -> None:
    assert ks_test(normal, uniform) > 1.95


def test_ks_identical_point_masses() -> None:
    assert ks_test(always(1.0), always(1.0), n=5000) == 0.0


def test_ks_accepts_custom_order() -> None:
    s = ks_test(d(6), d(6).map(lambda x: 7 - x), n=5000, key=lambda x: -x)
    assert s < 1.95


def test_ks_warns_for_small_samples() -> None:
    with pytest.warns(UserWarning, match="asymptotic"):
        ks_test(normal, normal, n=100)
    with pytest.raises(InvalidParameterError):
        ks_test(normal, normal, n=0)


def test_ks_pvalue_matches_documented_thresholds() -> None:
    assert abs(ks_pvalue(1.35) - 0.05) < 0.005
    assert ks_pvalue(1.95) < 0.0011
    assert ks_pvalue(0.0) == 1.0


def test_wilson_interval_bounds() -> None:
    ci = wilson_interval_from_count(3, 10, level=0.95)
    assert 0.0 <= ci.lower <= ci.estimate <= ci.upper <= 1.0
    with pytest.raises(InvalidParameterError):
        wilson_interval_from_count(11, 10)
    with pytest.raises(InvalidParameterError):
        wilson_interval_from_count(0, 0)
    with pytest.raises(InvalidParameterError):
        wilson_interval_from_count(3, 10, level=1.0)


def test_wilson_interval_has_width_at_the_extremes() -> None:
    none = wilson_interval_from_count(0, 50)
    assert none.estimate == 0.0
    assert none.lower < 1e-12 < none.upper
    every = wilson_interval_from_count(50, 50)
    assert every.lower < 1.0 - 1e-12 < every.upper


def test_pr_interval_covers_truth() -> None:
    ci = pr_interval(d(6), lambda x: x <= 2, samples=20_000, level=0.999)
    assert ci.lower <= 1.0 / 3.0 <= ci.upper
