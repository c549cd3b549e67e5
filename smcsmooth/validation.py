# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Eager input checks for the particle smoother.

These run in Python on concrete arrays, before anything is traced or
compiled, so that bad inputs fail with a descriptive exception instead
of surfacing later as NaNs.
"""

from collections.abc import Mapping
from typing import Any

import jax.numpy as jnp
from jaxtyping import Array, Float

from smcsmooth.containers import LDSParams
from smcsmooth.domains import WeightDomain
from smcsmooth.errors import ConfigError, NumericalError, ShapeError
from smcsmooth.weights import logsumexp

# Accepted spellings of each parameter field.  The second name matches
# Dynamax's ``make_lgssm_params`` keywords.
_PARAM_ALIASES = {
    'A': ('A', 'dynamics_weights'),
    'SigmaX': ('SigmaX', 'dynamics_cov'),
    'muX': ('muX', 'dynamics_bias'),
}

# Smallest tolerance on a forward-weight column total.
_MIN_NORMALIZATION_TOL = 1e-10


def _as_float(x: Any) -> Array:
    x = jnp.asarray(x)
    if not jnp.issubdtype(x.dtype, jnp.floating):
        x = x.astype(jnp.result_type(float))
    return x


def _lookup(params: Any, names: tuple[str, ...]) -> Any:
    for name in names:
        if isinstance(params, Mapping):
            if params.get(name) is not None:
                return params[name]
        elif getattr(params, name, None) is not None:
            return getattr(params, name)
    raise ConfigError(
        f'model parameters are missing the {names[0]!r} field '
        f'(also accepted as {names[1]!r})'
    )


def as_lds_params(params: Any) -> LDSParams:
    """Coerce *params* into an :class:`~smcsmooth.containers.LDSParams`.

    Args:
        params: An ``LDSParams``, or any mapping or object with fields
            ``A``, ``SigmaX`` and ``muX`` (or the Dynamax names
            ``dynamics_weights``, ``dynamics_cov`` and
            ``dynamics_bias``).  Scalars are promoted for 1-D states.

    Returns:
        Parameters as floating-point arrays of rank 2, 2 and 1.

    Raises:
        ConfigError: If a field is missing.
        NumericalError: If a field contains NaN or inf.
    """
    if params is None:
        raise ConfigError('model parameters are required')
    A = jnp.atleast_2d(_as_float(_lookup(params, _PARAM_ALIASES['A'])))
    sigma = jnp.atleast_2d(
        _as_float(_lookup(params, _PARAM_ALIASES['SigmaX']))
    )
    mu = _as_float(_lookup(params, _PARAM_ALIASES['muX']))
    # A column vector offset (state_dim, 1) is flattened like a scalar.
    if mu.ndim == 2 and mu.shape[1] == 1:
        mu = mu[:, 0]
    mu = jnp.atleast_1d(mu)
    for name, value in (('A', A), ('SigmaX', sigma), ('muX', mu)):
        if not bool(jnp.all(jnp.isfinite(value))):
            raise NumericalError(f'{name} contains NaN or inf')
    return LDSParams(A=A, SigmaX=sigma, muX=mu)


def check_shapes(
    particles: Array,
    forward_weights: Array,
    params: LDSParams,
) -> None:
    """Check that particles, weights and parameters agree in size.

    Raises:
        ShapeError: On any dimension mismatch.
    """
    if particles.ndim != 3:
        raise ShapeError(
            'particles must have shape (state_dim, num_particles, ntime), '
            f'got {particles.shape}'
        )
    if forward_weights.ndim != 2:
        raise ShapeError(
            'forward weights must have shape (num_particles, ntime), '
            f'got {forward_weights.shape}'
        )
    state_dim, num_particles, ntime = particles.shape
    if min(particles.shape) < 1:
        raise ShapeError(f'particles must be non-empty, got {particles.shape}')
    if forward_weights.shape != (num_particles, ntime):
        raise ShapeError(
            f'forward weights have shape {forward_weights.shape}, expected '
            f'{(num_particles, ntime)} to match particles {particles.shape}'
        )
    if params.A.shape != (state_dim, state_dim):
        raise ShapeError(
            f'A has shape {params.A.shape}, expected {(state_dim, state_dim)}'
        )
    if params.SigmaX.shape != (state_dim, state_dim):
        raise ShapeError(
            f'SigmaX has shape {params.SigmaX.shape}, '
            f'expected {(state_dim, state_dim)}'
        )
    if params.muX.shape != (state_dim,):
        raise ShapeError(
            f'muX has shape {params.muX.shape}, expected {(state_dim,)}'
        )


def check_forward_weights(
    forward_weights: Float[Array, 'num_particles ntime'],
    domain: WeightDomain,
) -> None:
    """Check that each column of *forward_weights* is normalized in *domain*.

    The tolerance is ``16 * num_particles * eps`` of the weights' dtype,
    and never below ``1e-10``, so accepted float64 columns are normalized
    well within ``1e-9``.

    Raises:
        ConfigError: If some column is not a distribution in *domain*.
    """
    eps = float(jnp.finfo(forward_weights.dtype).eps)
    tol = max(16 * forward_weights.shape[0] * eps, _MIN_NORMALIZATION_TOL)
    if domain.name == 'linear':
        if bool(jnp.any(forward_weights < 0)):
            raise ConfigError('linear forward weights must be non-negative')
        totals = jnp.sum(forward_weights, axis=0)
        errors = jnp.abs(totals - 1.0)
    else:
        if bool(jnp.any(jnp.isnan(forward_weights))) or bool(
            jnp.any(forward_weights == jnp.inf)
        ):
            raise ConfigError('log forward weights must not be NaN or +inf')
        totals = logsumexp(forward_weights, axis=0)
        errors = jnp.abs(totals)
    # NaN errors fail this comparison too.
    bad = ~(errors <= tol)
    if bool(jnp.any(bad)):
        t = int(jnp.argmax(bad))
        raise ConfigError(
            f'forward weights at time {t} are not normalized in the '
            f'{domain.name!r} domain (column total {float(totals[t])!r})'
        )


def validate_inputs(
    particles: Any,
    forward_weights: Any,
    params: Any,
    domain: WeightDomain,
) -> tuple[Array, Array, LDSParams]:
    """Run every eager check and return the inputs as float arrays.

    Returns:
        ``(particles, forward_weights, params)`` converted to JAX arrays.

    Raises:
        ShapeError: On dimension mismatches.
        ConfigError: On missing parameters or unnormalized weights.
        NumericalError: On non-finite particles or parameters.
    """
    particles = _as_float(particles)
    forward_weights = _as_float(forward_weights)
    params = as_lds_params(params)
    check_shapes(particles, forward_weights, params)
    if not bool(jnp.all(jnp.isfinite(particles))):
        raise NumericalError('particles contain NaN or inf')
    check_forward_weights(forward_weights, domain)
    return particles, forward_weights, params
