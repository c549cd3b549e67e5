# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""All-pairs transition densities between consecutive particle sets.

Entry ``(k, j)`` of the returned matrix scores particle :math:`k` at
time :math:`t+1` against particle :math:`j` at time :math:`t`:

.. math::

    \log p(x_{t+1}^{(k)} \mid x_t^{(j)})
        = -\tfrac12 \lVert v_{t+1}^{(k)} - m_t^{(j)} \rVert^2 - \log Z

This is the dominant cost of smoothing: :math:`O(S N^2)` per step.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float

from smcsmooth.domains import WeightDomain
from smcsmooth.types import Scalar


def pairwise_log_density(
    values_next: Float[Array, 'num_particles state_dim'],
    means_now: Float[Array, 'num_particles state_dim'],
    log_normalizer: Scalar,
) -> Float[Array, 'num_particles num_particles']:
    """Transition log-density of every next particle given every current one.

    Args:
        values_next: Whitened particles at ``t + 1``.
        means_now: Whitened predicted means of the particles at ``t``.
        log_normalizer: Gaussian log normalizer from whitening.

    Returns:
        Matrix ``L`` with ``L[k, j] = log p(x_{t+1}^k | x_t^j)``.
    """
    # (N, 1, S) - (1, N, S) -> (N, N, S)
    residuals = values_next[:, None, :] - means_now[None, :, :]
    return -0.5 * jnp.sum(residuals**2, axis=-1) - log_normalizer


def pairwise_transition(
    domain: WeightDomain,
    values_next: Float[Array, 'num_particles state_dim'],
    means_now: Float[Array, 'num_particles state_dim'],
    log_normalizer: Scalar,
) -> Float[Array, 'num_particles num_particles']:
    """Pairwise transition scores expressed in *domain*.

    Densities in the linear domain, log-densities in the log domain.
    """
    return domain.from_log_density(
        pairwise_log_density(values_next, means_now, log_normalizer)
    )
