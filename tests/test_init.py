# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Tests for the package-level API."""

from importlib.metadata import PackageNotFoundError
from unittest.mock import patch

from smcsmooth import __version__


def test_version_is_accessible():
    """Test that __version__ is a non-empty string."""
    assert isinstance(__version__, str)
    assert __version__ != ''


def test_public_api_exports_all_expected_names(package):
    """Test that __all__ contains exactly the expected public API."""
    expected = [
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
    assert sorted(package.__all__) == sorted(expected)


def test_errors_share_a_base_class(package):
    for name in ('ShapeError', 'ConfigError', 'NumericalError'):
        assert issubclass(getattr(package, name), package.SmootherError)
    assert issubclass(package.ShapeError, ValueError)
    assert issubclass(package.NumericalError, ArithmeticError)


def test_version_fallback_when_package_not_found():
    """Test that __version__ falls back to '0.0.0' when not installed."""
    import importlib

    import smcsmooth

    with patch(
        'importlib.metadata.version',
        side_effect=PackageNotFoundError,
    ):
        importlib.reload(smcsmooth)
        assert smcsmooth.__version__ == '0.0.0'

    # Restore the real version
    importlib.reload(smcsmooth)
