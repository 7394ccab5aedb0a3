"""
Composable random variables sampled by Monte Carlo.

This package provides a lazy `Distribution` type with monadic combinators,
Monte Carlo estimators for probabilities and moments, discrete (alias method)
and continuous distribution families, Markov-chain iteration, and a
two-sample Kolmogorov-Smirnov statistic.
"""

from probmonad.config import (
    RandomSourceConfig,
    SamplingConfig,
    configure,
    get_config,
    set_config,
)
from probmonad.continuous import (
    beta,
    cauchy,
    chi2,
    exponential,
    f,
    gamma,
    laplace,
    lognormal,
    normal,
    pareto,
    students_t,
    uniform,
    weibull,
)
from probmonad.discrete import (
    H,
    T,
    AliasRow,
    AliasTable,
    Coin,
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
from probmonad.distribution import Distribution, FrozenDistribution, always
from probmonad.exceptions import (
    InvalidParameterError,
    ProbMonadError,
    TypeConstraintError,
)
from probmonad.histogram import (
    Bucketing,
    bucketed_hist_data,
    bucketed_hist_range,
    find_bucket_width,
)
from probmonad.markov import markov, markov_until
from probmonad.random_source import (
    RandomSource,
    get_random_source,
    seed,
    set_random_source,
)
from probmonad.stats import (
    BinomialInterval,
    ks_pvalue,
    ks_test,
    pr_interval,
    wilson_interval_from_count,
)

__all__ = [
    "Distribution",
    "FrozenDistribution",
    "always",
    "SamplingConfig",
    "RandomSourceConfig",
    "get_config",
    "set_config",
    "configure",
    "RandomSource",
    "get_random_source",
    "set_random_source",
    "seed",
    "ProbMonadError",
    "InvalidParameterError",
    "TypeConstraintError",
    "AliasRow",
    "AliasTable",
    "Coin",
    "H",
    "T",
    "discrete_uniform",
    "discrete",
    "coin",
    "biased_coin",
    "d",
    "die",
    "dice",
    "tf",
    "bernoulli",
    "geometric",
    "binomial",
    "negative_binomial",
    "poisson",
    "zipf",
    "uniform",
    "normal",
    "exponential",
    "pareto",
    "laplace",
    "chi2",
    "students_t",
    "f",
    "lognormal",
    "cauchy",
    "weibull",
    "gamma",
    "beta",
    "markov",
    "markov_until",
    "ks_test",
    "ks_pvalue",
    "BinomialInterval",
    "wilson_interval_from_count",
    "pr_interval",
    "Bucketing",
    "find_bucket_width",
    "bucketed_hist_data",
    "bucketed_hist_range",
]
