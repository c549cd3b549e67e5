# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Log-space aggregation and weight normalization utilities."""

from typing import Optional, Union

import jax.numpy as jnp
from jax.scipy.special import logsumexp as _logsumexp
from jaxtyping import Array, Float

from smcsmooth.types import Scalar

Axis = Optional[Union[int, tuple[int, ...]]]


def logsumexp(
    values: Float[Array, '...'],
    axis: Axis = None,
) -> Float[Array, '...']:
    r"""Compute :math:`\log \sum \exp(\text{values})` along *axis*.

    Uses the max-subtraction trick, so neither large nor very negative
    inputs overflow or underflow.  A slice whose entries are all
    :math:`-\infty` reduces to :math:`-\infty` rather than NaN.

    Args:
        values: Log-values.
        axis: Axis or axes to reduce over; ``None`` reduces everything.

    Returns:
        The reduced log-sum.
    """
    return _logsumexp(values, axis=axis)


def log_normalize(
    log_weights: Float[Array, ' num_particles'],
) -> tuple[Float[Array, ' num_particles'], Scalar]:
    """Normalize log weights and return the log normalizing constant.

    Args:
        log_weights: Unnormalized log weights.

    Returns:
        A tuple ``(log_normalized, log_normalizer)`` where
        *log_normalized* has ``logsumexp == 0`` and
        *log_normalizer* is ``logsumexp(log_weights)``.
    """
    log_normalizer = logsumexp(log_weights)
    log_normalized = log_weights - log_normalizer
    return log_normalized, log_normalizer


def normalize(
    log_weights: Float[Array, ' num_particles'],
) -> Float[Array, ' num_particles']:
    """Exponentiate and normalize log weights.

    Args:
        log_weights: Unnormalized log weights.

    Returns:
        Normalized weights that sum to one.
    """
    log_norm, _ = log_normalize(log_weights)
    return jnp.exp(log_norm)
