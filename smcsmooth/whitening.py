# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""Whitening of particles under the transition noise covariance.

With :math:`L L^\top = \Sigma_X` the Gaussian transition density

.. math::

    \log p(x_{t+1} \mid x_t)
        = -\tfrac12 \lVert L^{-1} x_{t+1}
                       - L^{-1}(A x_t + \mu_X) \rVert^2 - \log Z

needs only squared distances once every particle has been mapped through
:math:`L^{-1}`.  The factorization and the triangular solves run once per
smoothing call instead of once per particle pair.
"""

import jax.numpy as jnp
from jax.scipy.linalg import solve_triangular
from jaxtyping import Array, Float

from smcsmooth.containers import LDSParams, WhitenedParticles
from smcsmooth.errors import NumericalError


def cholesky_factor(
    cov: Float[Array, 'state_dim state_dim'],
) -> Float[Array, 'state_dim state_dim']:
    """Lower Cholesky factor of a symmetric positive-definite matrix.

    Args:
        cov: Covariance matrix.

    Returns:
        Lower-triangular ``L`` with ``L @ L.T == cov``.

    Raises:
        NumericalError: If *cov* is not symmetric positive-definite.
    """
    cov = jnp.asarray(cov)
    tol = jnp.sqrt(jnp.finfo(cov.dtype).eps) * jnp.max(jnp.abs(cov))
    if not bool(jnp.all(jnp.abs(cov - cov.T) <= tol)):
        raise NumericalError('SigmaX is not symmetric')
    # jnp.linalg.cholesky signals failure with NaNs instead of raising.
    chol = jnp.linalg.cholesky(cov)
    if not bool(jnp.all(jnp.isfinite(chol)) & jnp.all(jnp.diag(chol) > 0)):
        raise NumericalError('SigmaX is not positive-definite')
    return chol


def whiten(
    particles: Float[Array, 'ntime num_particles state_dim'],
    params: LDSParams,
) -> WhitenedParticles:
    r"""Whiten particles and their one-step predicted means.

    Args:
        particles: Particle values, time-major,
            shape ``(ntime, num_particles, state_dim)``.
        params: Transition model parameters.

    Returns:
        :class:`~smcsmooth.containers.WhitenedParticles` holding
        :math:`L^{-1}x`, :math:`L^{-1}(Ax + \mu_X)` and :math:`\log Z`.

    Raises:
        NumericalError: If ``params.SigmaX`` is not symmetric
            positive-definite.
    """
    chol = cholesky_factor(params.SigmaX)
    state_dim = chol.shape[0]

    # Solve against every particle at once: (S, T*N) right-hand sides.
    flat = particles.reshape(-1, state_dim).T
    predicted = params.A @ flat + params.muX[:, None]
    values = solve_triangular(chol, flat, lower=True)
    means = solve_triangular(chol, predicted, lower=True)

    log_normalizer = 0.5 * state_dim * jnp.log(2 * jnp.pi) + jnp.sum(
        jnp.log(jnp.diag(chol))
    )
    return WhitenedParticles(
        values=values.T.reshape(particles.shape),
        predicted_means=means.T.reshape(particles.shape),
        log_normalizer=log_normalizer,
    )
