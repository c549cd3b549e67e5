# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""Summaries of weighted particle sets.

Expected sufficient statistics for an EM update of the transition model:

- :func:`weighted_mean` — :math:`E[x_t]` at each time step
- :func:`weighted_covariance` — :math:`\mathrm{Cov}[x_t]` at each step
- :func:`second_moment_sum` — :math:`\sum_t E[x_t x_t^\top]`, the
  companion of the smoother's cross-moment sum

Health of the particle approximation:

- :func:`effective_sample_size` — ESS of each weight column

All functions are pure, take particles of shape
``(state_dim, num_particles, ntime)`` and weights of shape
``(num_particles, ntime)`` in the domain given by *mode*, and are
JIT-compatible with *mode* marked static.
"""

import jax.numpy as jnp
from blackjax.smc.ess import ess as _ess
from jax import vmap
from jaxtyping import Array, Float

from smcsmooth.domains import get_domain
from smcsmooth.types import Mode


def _linear_weights(
    weights: Float[Array, 'num_particles ntime'], mode: Mode
) -> Float[Array, 'num_particles ntime']:
    return get_domain(mode).to_linear(weights)


def weighted_mean(
    particles: Float[Array, 'state_dim num_particles ntime'],
    weights: Float[Array, 'num_particles ntime'],
    mode: Mode = 'linear',
) -> Float[Array, 'ntime state_dim']:
    """Compute the weighted mean of particles at each time step.

    Args:
        particles: Particle values.
        weights: Normalized weights, forward or smoothed.
        mode: Domain of *weights*.

    Returns:
        Weighted means, shape ``(ntime, state_dim)``.
    """
    w = _linear_weights(weights, mode)
    return jnp.einsum('nt,snt->ts', w, particles)


def weighted_covariance(
    particles: Float[Array, 'state_dim num_particles ntime'],
    weights: Float[Array, 'num_particles ntime'],
    mode: Mode = 'linear',
) -> Float[Array, 'ntime state_dim state_dim']:
    r"""Compute the weighted covariance of particles at each time step.

    Uses :math:`C_t = \sum_i w_t^{(i)} (x_t^{(i)} - \mu_t)
    (x_t^{(i)} - \mu_t)^\top` with :math:`\mu_t` the weighted mean.

    Returns:
        Covariances, shape ``(ntime, state_dim, state_dim)``.
    """
    w = _linear_weights(weights, mode)
    means = weighted_mean(particles, weights, mode)
    # (state_dim, num_particles, ntime) - (state_dim, 1, ntime)
    deviations = particles - means.T[:, None, :]
    return jnp.einsum('nt,snt,rnt->tsr', w, deviations, deviations)


def second_moment_sum(
    particles: Float[Array, 'state_dim num_particles ntime'],
    weights: Float[Array, 'num_particles ntime'],
    mode: Mode = 'linear',
) -> Float[Array, 'state_dim state_dim']:
    r"""Sum over time of the weighted second moments.

    .. math::

        \sum_t E[x_t x_t^\top]
            = \sum_t \sum_i w_t^{(i)} x_t^{(i)} x_t^{(i)\top}

    Like the smoother's cross-moment, this is a sum, not a mean.

    Returns:
        Shape ``(state_dim, state_dim)``.
    """
    w = _linear_weights(weights, mode)
    return jnp.einsum('nt,snt,rnt->sr', w, particles, particles)


def effective_sample_size(
    weights: Float[Array, 'num_particles ntime'],
    mode: Mode = 'linear',
) -> Float[Array, ' ntime']:
    r"""Effective sample size of each weight column.

    .. math::

        \mathrm{ESS}_t = \frac{(\sum_i w_t^{(i)})^2}{\sum_i (w_t^{(i)})^2}

    Computed by :func:`blackjax.smc.ess.ess` on log weights.

    Returns:
        ESS per time step, shape ``(ntime,)``.
    """
    domain = get_domain(mode)
    log_weights = weights if domain.name == 'log' else jnp.log(weights)
    return vmap(_ess, in_axes=1)(log_weights)
