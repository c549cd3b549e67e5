# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Containers for model parameters and smoother outputs.

All containers are :class:`~typing.NamedTuple` subclasses so they are
registered as JAX PyTrees by default.
"""

from typing import NamedTuple

from jaxtyping import Array, Float

from smcsmooth.types import Scalar


class LDSParams(NamedTuple):
    r"""Transition model of a linear dynamical system.

    .. math::

        x_{t+1} = A x_t + \mu_X + \varepsilon_t, \quad
        \varepsilon_t \sim \mathcal{N}(0, \Sigma_X)

    Attributes:
        A: Transition matrix, shape ``(state_dim, state_dim)``.
        SigmaX: Process noise covariance (symmetric positive-definite),
            shape ``(state_dim, state_dim)``.
        muX: Mean offset added after the transition, shape
            ``(state_dim,)``.
    """

    A: Float[Array, 'state_dim state_dim']
    SigmaX: Float[Array, 'state_dim state_dim']
    muX: Float[Array, ' state_dim']


class WhitenedParticles(NamedTuple):
    r"""Particles expressed in the coordinates where :math:`\Sigma_X = I`.

    With :math:`L L^\top = \Sigma_X`, the transition log-density reduces
    to :math:`-\tfrac12 \lVert v_{t+1} - m_t \rVert^2 - \log Z`.

    Attributes:
        values: :math:`L^{-1} x`, shape ``(ntime, num_particles, state_dim)``.
        predicted_means: :math:`L^{-1}(A x + \mu_X)`, same shape.
        log_normalizer: :math:`\log Z = \tfrac{S}{2}\log 2\pi
            + \sum_i \log L_{ii}`.
    """

    values: Float[Array, 'ntime num_particles state_dim']
    predicted_means: Float[Array, 'ntime num_particles state_dim']
    log_normalizer: Scalar


class ParticleSmootherPosterior(NamedTuple):
    r"""Output of a fixed-interval particle smoother run.

    Attributes:
        smoothed_weights: Smoothed particle weights in the same domain as
            the forward weights, shape ``(num_particles, ntime)``.
        cross_moment_sum: :math:`\sum_t E[x_{t+1} x_t^\top \mid y_{0:T}]`,
            shape ``(state_dim, state_dim)``.  This is a *sum* over time,
            not a mean.
    """

    smoothed_weights: Float[Array, 'num_particles ntime']
    cross_moment_sum: Float[Array, 'state_dim state_dim']
