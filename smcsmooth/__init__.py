# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Fixed-interval particle smoothing for linear-Gaussian models in JAX."""

from importlib.metadata import PackageNotFoundError as _PackageNotFoundError
from importlib.metadata import version as _version

from smcsmooth.accumulator import CrossMomentAccumulator, outer_product_sum
from smcsmooth.containers import (
    LDSParams,
    ParticleSmootherPosterior,
    WhitenedParticles,
)
from smcsmooth.diagnostics import (
    effective_sample_size,
    second_moment_sum,
    weighted_covariance,
    weighted_mean,
)
from smcsmooth.domains import LINEAR, LOG, WeightDomain, get_domain
from smcsmooth.errors import (
    ConfigError,
    NumericalError,
    ShapeError,
    SmootherError,
    SmoothingCancelled,
)
from smcsmooth.smoother import backward_step, particle_smoother
from smcsmooth.transition import pairwise_log_density, pairwise_transition
from smcsmooth.weights import log_normalize, logsumexp, normalize
from smcsmooth.whitening import whiten

try:
    __version__ = _version('smcsmooth')
except _PackageNotFoundError:
    __version__ = '0.0.0'

__all__ = [
    'LINEAR',
    'LOG',
    'ConfigError',
    'CrossMomentAccumulator',
    'LDSParams',
    'NumericalError',
    'ParticleSmootherPosterior',
    'ShapeError',
    'SmootherError',
    'SmoothingCancelled',
    'WeightDomain',
    'WhitenedParticles',
    '__version__',
    'backward_step',
    'effective_sample_size',
    'get_domain',
    'log_normalize',
    'logsumexp',
    'normalize',
    'outer_product_sum',
    'pairwise_log_density',
    'pairwise_transition',
    'particle_smoother',
    'second_moment_sum',
    'weighted_covariance',
    'weighted_mean',
    'whiten',
]
