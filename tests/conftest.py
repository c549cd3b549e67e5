# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Shared test fixtures for smcsmooth."""

import jax
import jax.numpy as jnp
import jax.random as jr
import pytest

import smcsmooth
from smcsmooth.containers import LDSParams


@pytest.fixture
def package():
    """Return the top-level package module for introspection."""
    return smcsmooth


@pytest.fixture
def key():
    """Fixed JAX PRNG key for reproducibility."""
    return jr.PRNGKey(42)


@pytest.fixture
def lgssm_params():
    """Simple 1-D linear Gaussian SSM parameters.

    Model:
        z_0  ~ N(0, 1)
        z_t  = 0.9 * z_{t-1} + eps,  eps ~ N(0, 0.5^2)
        y_t  = z_t + eta,             eta ~ N(0, 1.0^2)

    Returns a dict with keys matching Dynamax ``make_lgssm_params``.
    """
    return dict(
        initial_mean=jnp.array([0.0]),
        initial_cov=jnp.array([[1.0]]),
        dynamics_weights=jnp.array([[0.9]]),
        dynamics_cov=jnp.array([[0.25]]),  # 0.5^2
        emissions_weights=jnp.array([[1.0]]),
        emissions_cov=jnp.array([[1.0]]),
    )


@pytest.fixture
def lgssm_data(key, lgssm_params):
    """Simulate T=50 observations from the 1-D LGSSM.

    Returns (states, emissions) each of shape (50, 1).
    """
    from dynamax.linear_gaussian_ssm.inference import (
        lgssm_joint_sample,
        make_lgssm_params,
    )

    params = make_lgssm_params(**lgssm_params)
    states, emissions = lgssm_joint_sample(params, key, num_timesteps=50)
    return states, emissions


@pytest.fixture
def toy_problem():
    """Scalar model with two particles over three time steps.

    Model:
        x_{t+1} = 0.5 * x_t + eps,  eps ~ N(0, 1)

    Particles are [0, 1], [0.5, 1.5], [1, 2] and forward weights are
    uniform.  Returns (particles, forward_weights, params) with
    particles of shape (1, 2, 3).
    """
    particles = jnp.array([[[0.0, 0.5, 1.0], [1.0, 1.5, 2.0]]])
    forward_weights = jnp.full((2, 3), 0.5)
    params = LDSParams(
        A=jnp.array([[0.5]]),
        SigmaX=jnp.array([[1.0]]),
        muX=jnp.array([0.0]),
    )
    return particles, forward_weights, params


@pytest.fixture
def make_problem():
    """Factory for random smoothing problems.

    ``make_problem(seed, state_dim, num_particles, ntime, mode)`` returns
    (particles, forward_weights, params) with forward weights normalized
    in *mode*.
    """

    def _make(seed, state_dim=2, num_particles=8, ntime=5, mode='linear'):
        k_x, k_w, k_a = jr.split(jr.PRNGKey(seed), 3)
        particles = jr.normal(k_x, (state_dim, num_particles, ntime))
        logits = jr.normal(k_w, (num_particles, ntime))
        if mode == 'log':
            forward_weights = jax.nn.log_softmax(logits, axis=0)
        else:
            forward_weights = jax.nn.softmax(logits, axis=0)
        noise = 0.1 * jr.normal(k_a, (state_dim, state_dim))
        params = LDSParams(
            A=0.8 * jnp.eye(state_dim) + noise,
            SigmaX=0.5 * jnp.eye(state_dim) + 0.1 * jnp.ones(
                (state_dim, state_dim)
            ),
            muX=jnp.full((state_dim,), 0.1),
        )
        return particles, forward_weights, params

    return _make


# Configure JAX to use 64-bit floats for higher precision in tests.
jax.config.update('jax_enable_x64', True)
