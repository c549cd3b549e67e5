# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""Running sum of the cross-time second moment.

The smoother accumulates

.. math::

    \sum_t \sum_{k,j} W^{xx}_{t}[k, j]\,
        x_{t+1}^{(k)} \bigl(x_t^{(j)}\bigr)^\top

which is :math:`\sum_t E[x_{t+1} x_t^\top \mid y_{0:T}]`.  It is a
*sum*: a consumer that needs a time average must divide by the number
of transitions itself.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float

from smcsmooth.errors import ShapeError


def outer_product_sum(
    weights: Float[Array, 'num_particles num_particles'],
    particles_next: Float[Array, 'num_particles state_dim'],
    particles_now: Float[Array, 'num_particles state_dim'],
) -> Float[Array, 'state_dim state_dim']:
    """Weighted sum of outer products over all particle pairs.

    Args:
        weights: Joint probabilities ``W[k, j]`` of (particle ``k`` at
            ``t + 1``, particle ``j`` at ``t``), in the linear domain.
        particles_next: Particles at ``t + 1``.
        particles_now: Particles at ``t``.

    Returns:
        ``sum_{k,j} W[k, j] * outer(x_next[k], x_now[j])``.
    """
    return jnp.einsum('kj,ks,jr->sr', weights, particles_next, particles_now)


class CrossMomentAccumulator:
    """Accumulates ``state_dim x state_dim`` terms into a running total.

    Each smoothing call owns its own accumulator, so independent calls
    never share state.
    """

    def __init__(self, state_dim: int, dtype=None):
        self._total = jnp.zeros((state_dim, state_dim), dtype=dtype)

    def add(self, term: Float[Array, 'state_dim state_dim']) -> None:
        """Add *term* to the running total."""
        term = jnp.asarray(term)
        if term.shape != self._total.shape:
            raise ShapeError(
                f'expected a term of shape {self._total.shape}, '
                f'got {term.shape}'
            )
        self._total = self._total + term

    def total(self) -> Float[Array, 'state_dim state_dim']:
        """Return the accumulated sum (never normalized)."""
        return self._total
