# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""Fixed-interval particle smoother for linear-Gaussian dynamics.

Given particles :math:`x_t^{(j)}` with forward (filtering) weights
:math:`w_t^{(j)} \approx p(x_t^{(j)} \mid y_{0:t})`, the smoother walks
backwards in time and reweights each particle by how much of the
smoothed mass at :math:`t+1` it explains [Doucet & Johansen, 2008]:

.. math::

    R_t[k, j] = \tilde{w}_{t+1}^{(k)}
        \frac{p(x_{t+1}^{(k)} \mid x_t^{(j)})}
             {\sum_m p(x_{t+1}^{(k)} \mid x_t^{(m)})\, w_t^{(m)}},
    \qquad
    \tilde{w}_t^{(j)} = w_t^{(j)} \sum_k R_t[k, j].

The joint weights :math:`w_t^{(j)} R_t[k, j]` of consecutive particle
pairs give the sufficient statistic
:math:`\sum_t E[x_{t+1} x_t^\top \mid y_{0:T}]` needed by an EM update
of the transition model.

Weights may be stored as probabilities (``mode='linear'``) or as
log-probabilities (``mode='log'``).  Both run the same recursion through
a :class:`~smcsmooth.domains.WeightDomain`; the log mode is slower but
does not underflow for peaked weights or long horizons.
"""

import time
from collections.abc import Callable
from functools import partial
from typing import Any, Optional

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from smcsmooth.accumulator import CrossMomentAccumulator, outer_product_sum
from smcsmooth.containers import ParticleSmootherPosterior
from smcsmooth.domains import get_domain
from smcsmooth.errors import NumericalError, SmootherError, SmoothingCancelled
from smcsmooth.logger import get_logger
from smcsmooth.transition import pairwise_transition
from smcsmooth.types import BoolScalar, Mode, Scalar
from smcsmooth.validation import validate_inputs
from smcsmooth.whitening import whiten

logger = get_logger(__name__)


def backward_step(
    mode: Mode,
    smoothed_next: Float[Array, ' num_particles'],
    forward_now: Float[Array, ' num_particles'],
    whitened_next: Float[Array, 'num_particles state_dim'],
    predicted_now: Float[Array, 'num_particles state_dim'],
    log_normalizer: Scalar,
    particles_next: Float[Array, 'num_particles state_dim'],
    particles_now: Float[Array, 'num_particles state_dim'],
) -> tuple[
    Float[Array, ' num_particles'],
    Float[Array, 'state_dim state_dim'],
    BoolScalar,
]:
    r"""Smooth one time step backwards.

    Pure and traceable: compile with ``jax.jit(backward_step,
    static_argnums=0)`` and batch independent problems with
    :func:`jax.vmap` over ``functools.partial(backward_step, mode)``.

    Args:
        mode: ``'linear'`` or ``'log'``; the domain of all weights.
        smoothed_next: Smoothed weights at ``t + 1``.
        forward_now: Forward weights at ``t``.
        whitened_next: Whitened particles at ``t + 1``.
        predicted_now: Whitened predicted means of the particles at ``t``.
        log_normalizer: Gaussian log normalizer from whitening.
        particles_next: Particles at ``t + 1``.
        particles_now: Particles at ``t``.

    Returns:
        A tuple ``(smoothed_now, cross_moment, degenerate)``:
        smoothed weights at ``t``; this step's contribution
        :math:`\sum_{k,j} W^{xx}[k, j] x_{t+1}^{(k)} x_t^{(j)\top}`;
        and a flag that is true when a backward normalizer vanished.
    """
    domain = get_domain(mode)

    # scores[k, j]: particle k at t+1 given particle j at t
    scores = pairwise_transition(
        domain, whitened_next, predicted_now, log_normalizer
    )
    # Forward-predicted density of each particle at t+1
    normalizers = domain.sum(
        domain.mul(scores, forward_now[None, :]), axis=1
    )
    ratios = domain.mul(
        domain.div(scores, normalizers[:, None]), smoothed_next[:, None]
    )
    smoothed_now = domain.mul(forward_now, domain.sum(ratios, axis=0))

    # Joint weight of (particle k at t+1, particle j at t)
    joint = domain.mul(forward_now[None, :], ratios)
    cross_moment = outer_product_sum(
        domain.to_linear(joint), particles_next, particles_now
    )

    degenerate = jnp.any(domain.is_degenerate(normalizers))
    return smoothed_now, cross_moment, degenerate


_backward_step = jax.jit(backward_step, static_argnums=0)


def particle_smoother(
    particles: Float[Array, 'state_dim num_particles ntime'],
    forward_weights: Float[Array, 'num_particles ntime'],
    params: Any,
    mode: Mode = 'linear',
    *,
    should_cancel: Optional[Callable[[int], bool]] = None,
) -> ParticleSmootherPosterior:
    r"""Run the fixed-interval particle smoother.

    Args:
        particles: Filtered particles, shape
            ``(state_dim, num_particles, ntime)``.
        forward_weights: Forward weights, shape ``(num_particles, ntime)``,
            each column normalized in the domain given by *mode*.
        params: Transition model: an
            :class:`~smcsmooth.containers.LDSParams`, or a mapping or
            object with fields ``A``, ``SigmaX`` and ``muX`` (Dynamax
            names ``dynamics_weights``, ``dynamics_cov`` and
            ``dynamics_bias`` are accepted too).
        mode: ``'linear'`` if the weights are probabilities, ``'log'`` if
            they are log-probabilities.
        should_cancel: Optional callback polled before each time step
            with the index of the step about to run; returning ``True``
            aborts the run.

    Returns:
        :class:`~smcsmooth.containers.ParticleSmootherPosterior` with
        smoothed weights in the same domain as *forward_weights* and
        the cross-moment *sum* over time.

    Raises:
        ShapeError: If particles, weights and parameters disagree in size.
        ConfigError: If *mode* is unknown, a parameter is missing, or a
            column of *forward_weights* is not normalized in *mode*.
        NumericalError: If ``SigmaX`` is not positive-definite, an input
            is non-finite, or the forward weights give no support to some
            particle at the next time step, or a step overflows.
        SmoothingCancelled: If *should_cancel* returned ``True``.
    """
    try:
        return _particle_smoother(
            particles, forward_weights, params, mode, should_cancel
        )
    except SmootherError as err:
        logger.warning('Particle smoothing failed: %s', err)
        raise


def _particle_smoother(
    particles: Any,
    forward_weights: Any,
    params: Any,
    mode: Mode,
    should_cancel: Optional[Callable[[int], bool]],
) -> ParticleSmootherPosterior:
    domain = get_domain(mode)
    particles, forward_weights, params = validate_inputs(
        particles, forward_weights, params, domain
    )
    state_dim, num_particles, ntime = particles.shape
    accumulator = CrossMomentAccumulator(state_dim, dtype=particles.dtype)
    logger.info(
        'Smoothing %d particles over %d steps (state_dim=%d, mode=%s)',
        num_particles,
        ntime,
        state_dim,
        mode,
    )
    if ntime == 1:
        return ParticleSmootherPosterior(
            smoothed_weights=forward_weights,
            cross_moment_sum=accumulator.total(),
        )

    # Time-major copies: (ntime, num_particles, state_dim)
    xs = jnp.transpose(particles, (2, 1, 0))
    whitened = whiten(xs, params)
    step = partial(_backward_step, mode)

    start = time.perf_counter()
    columns: list[Array] = [forward_weights[:, -1]] * ntime
    smoothed_next = forward_weights[:, -1]
    for t in range(ntime - 2, -1, -1):
        if should_cancel is not None and should_cancel(t):
            raise SmoothingCancelled(f'cancelled before time step {t}')

        smoothed_now, cross_moment, degenerate = step(
            smoothed_next,
            forward_weights[:, t],
            whitened.values[t + 1],
            whitened.predicted_means[t],
            whitened.log_normalizer,
            xs[t + 1],
            xs[t],
        )
        if bool(degenerate):
            raise NumericalError(
                f'backward normalizer vanished at time step {t}: the '
                f'forward weights at {t} give (numerically) no support to '
                f'some particle at {t + 1}'
            )
        if not bool(
            jnp.all(jnp.isfinite(domain.to_linear(smoothed_now)))
            & jnp.all(jnp.isfinite(cross_moment))
        ):
            raise NumericalError(
                f'non-finite smoothed weights or cross moment at time step '
                f'{t}: the step overflowed'
            )
        accumulator.add(cross_moment)
        columns[t] = smoothed_now
        smoothed_next = smoothed_now
        logger.debug('Smoothed time step %d', t)

    logger.info(
        'Particle smoothing finished in %.3fs', time.perf_counter() - start
    )
    return ParticleSmootherPosterior(
        smoothed_weights=jnp.stack(columns, axis=1),
        cross_moment_sum=accumulator.total(),
    )
