# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by smcsmooth.

Every error derives from :class:`SmootherError`, so callers running an
outer EM loop can treat any failure of the current iteration as fatal
with a single ``except`` clause.
"""


class SmootherError(Exception):
    """Base class for all smcsmooth errors."""


class ShapeError(SmootherError, ValueError):
    """Array dimensions of particles, weights and parameters disagree."""


class ConfigError(SmootherError, ValueError):
    """Missing parameter field, unknown mode, or weights inconsistent
    with the declared mode."""


class NumericalError(SmootherError, ArithmeticError):
    """Non positive-definite covariance, non-finite input, or a
    degenerate backward normalizer."""


class SmoothingCancelled(SmootherError):
    """The caller's cancellation callback asked the smoother to stop."""
