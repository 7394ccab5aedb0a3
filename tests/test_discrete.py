"""
Unit tests for the alias-method sampler and the discrete families.
"""

from __future__ import annotations

import math

import pytest

from probmonad.discrete import (
    H,
    T,
    AliasTable,
    bernoulli,
    biased_coin,
    binomial,
    coin,
    d,
    dice,
    die,
    discrete,
    discrete_uniform,
    geometric,
    negative_binomial,
    poisson,
    tf,
    zipf,
)
from probmonad.exceptions import InvalidParameterError


def test_alias_table_has_one_row_per_outcome() -> None:
    table = AliasTable.build([("A", 1.0), ("B", 1.0), ("C", 2.0)])
    assert len(table) == 3
    # Scaled weights are 0.75, 0.75, 1.5: both small entries borrow from C.
    a, b, c = table.rows
    assert (a.primary, a.cutoff, a.alternate, a.has_alternate) == ("A", 0.75, "C", True)
    assert (b.primary, b.cutoff, b.alternate, b.has_alternate) == ("B", 0.75, "C", True)
    assert (c.primary, c.cutoff, c.has_alternate) == ("C", 1.0, False)


def test_alias_table_preserves_mass() -> None:
    weights = {"w": 0.1, "x": 3.0, "y": 0.0, "z": 1.7, "v": 5.2}
    table = AliasTable.build(weights.items())
    n = len(table)
    mass = {k: 0.0 for k in weights}
    for row in table.rows:
        mass[row.primary] += row.cutoff / n
        if row.has_alternate:
            mass[row.alternate] += (1.0 - row.cutoff) / n
    total = sum(weights.values())
    for k, w in weights.items():
        assert math.isclose(mass[k], w / total, abs_tol=1e-3)


def test_alias_table_full_column_for_rounding_leftover() -> None:
    # Scaled weights are 2/3, 2/3, 2/3 and 2. With no tolerance, D's remainder
    # after three borrows lands a few ulps under 1.0 with no bigger entry left.
    weights = {"A": 1.0, "B": 1.0, "C": 1.0, "D": 3.0}
    table = AliasTable.build(weights.items(), tolerance=0.0)
    assert len(table) == 4
    assert all(0.0 <= row.cutoff <= 1.0 for row in table.rows)
    full = [row for row in table.rows if not row.has_alternate]
    assert [row.primary for row in full] == ["D"]
    assert full[0].cutoff == 1.0
    mass = {k: 0.0 for k in weights}
    for row in table.rows:
        mass[row.primary] += row.cutoff / 4
        if row.has_alternate:
            mass[row.alternate] += (1.0 - row.cutoff) / 4
    for k, w in weights.items():
        assert math.isclose(mass[k], w / 6.0, abs_tol=1e-9)


def test_alias_select_uses_two_uniforms() -> None:
    table = AliasTable.build([("A", 1.0), ("B", 1.0), ("C", 2.0)])
    assert table.select(0.0, 0.5) == "A"
    assert table.select(0.0, 0.9) == "C"
    assert table.select(0.5, 0.75) == "B"
    assert table.select(0.9, 0.99) == "C"


def test_weighted_discrete_probability() -> None:
    dist = discrete([("A", 1.0), ("B", 1.0), ("C", 2.0)])
    assert abs(dist.pr(lambda x: x == "C", samples=100_000) - 0.5) < 0.02


def test_discrete_validates_weights_eagerly() -> None:
    with pytest.raises(InvalidParameterError):
        discrete([])
    with pytest.raises(InvalidParameterError):
        discrete([("A", -1.0), ("B", 2.0)])
    with pytest.raises(InvalidParameterError):
        discrete([("A", 0.0), ("B", 0.0)])
    with pytest.raises(InvalidParameterError):
        discrete([("A", float("nan"))])
    with pytest.raises(InvalidParameterError):
        discrete([("A", 1.0)], tolerance=1.5)


def test_discrete_uniform_draws_only_given_values() -> None:
    values = ["a", "b", "c", "d"]
    freqs = discrete_uniform(values).hist_data(samples=40_000)
    assert set(freqs) <= set(values)
    for v in values:
        assert abs(freqs[v] - 0.25) < 0.02
    with pytest.raises(InvalidParameterError):
        discrete_uniform([])


def test_two_dice_mean() -> None:
    assert abs(die.repeat(2).map(sum).mean(samples=100_000) - 7.0) < 0.1
    assert all(len(roll) == 3 for roll in dice(3).sample(100))


def test_coin_and_biased_coin() -> None:
    assert set(coin.sample(200)) == {H, T}
    assert abs(biased_coin(0.3).pr(lambda c: c is H) - 0.3) < 0.02
    with pytest.raises(InvalidParameterError):
        biased_coin(1.2)


def test_tf_and_bernoulli() -> None:
    assert set(tf(1.0).sample(100)) == {True}
    assert set(tf(0.0).sample(100)) == {False}
    assert abs(bernoulli(0.25).pr(lambda b: b) - 0.25) < 0.02


def test_d_faces() -> None:
    assert set(d(3).sample(500)) == {1, 2, 3}
    with pytest.raises(InvalidParameterError):
        d(0)


def test_binomial_moments() -> None:
    dist = binomial(0.5, 10).map(float)
    assert abs(dist.mean(samples=100_000) - 5.0) < 0.2
    assert abs(dist.variance(samples=100_000) - 2.5) < 0.3


def test_geometric_counts_failures() -> None:
    # Mean of failures before first success is (1 - p) / p.
    assert abs(geometric(0.25).mean() - 3.0) < 0.15
    assert set(geometric(1.0).sample(50)) == {0}
    with pytest.raises(InvalidParameterError):
        geometric(0.0)


def test_negative_binomial_counts_failures() -> None:
    # Mean of failures before the r-th success is r (1 - p) / p.
    assert abs(negative_binomial(0.5, 3).mean() - 3.0) < 0.15
    assert set(negative_binomial(0.5, 0).sample(20)) == {0}


def test_poisson_moments() -> None:
    dist = poisson(4.0)
    assert abs(dist.mean() - 4.0) < 0.15
    assert abs(dist.variance() - 4.0) < 0.3
    assert set(poisson(0.0).sample(20)) == {0}
    with pytest.raises(InvalidParameterError):
        poisson(-1.0)


def test_zipf_weights() -> None:
    # Weights 1, 1/2, 1/3 normalise to 6/11, 3/11, 2/11.
    dist = zipf(1.0, 3)
    assert abs(dist.pr(lambda k: k == 1, samples=50_000) - 6.0 / 11.0) < 0.02
    assert set(dist.sample(500)) == {1, 2, 3}
