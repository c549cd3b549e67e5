# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
r"""Arithmetic strategies for weights stored as probabilities or logs.

The backward recursion is written once against a :class:`WeightDomain`
and instantiated with either :data:`LINEAR` or :data:`LOG`:

==============  ==================  =========================
operation       linear              log
==============  ==================  =========================
``mul(a, b)``   :math:`a b`         :math:`a + b`
``div(a, b)``   :math:`a / b`       :math:`a - b`
``sum(a)``      :math:`\sum a`      :math:`\log\sum\exp a`
==============  ==================  =========================

Because both instances implement the same semiring, the two modes give
the same smoothed weights up to rounding.
"""

from collections.abc import Callable
from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from smcsmooth.errors import ConfigError
from smcsmooth.weights import logsumexp


class WeightDomain(NamedTuple):
    """Interchangeable weight arithmetic.

    Attributes:
        name: ``'linear'`` or ``'log'``.
        mul: Combine two weights (product of probabilities).
        div: Divide one weight by another.
        sum: Reduce weights along an axis (sum of probabilities).
        from_log_density: Convert a log-density into this domain.
        to_linear: Convert weights in this domain into probabilities.
        is_degenerate: Elementwise test for a normalizer that cannot be
            divided by.
    """

    name: str
    mul: Callable[[Array, Array], Array]
    div: Callable[[Array, Array], Array]
    sum: Callable[..., Array]
    from_log_density: Callable[[Array], Array]
    to_linear: Callable[[Array], Array]
    is_degenerate: Callable[[Array], Bool[Array, '...']]


def _linear_degenerate(x: Float[Array, '...']) -> Bool[Array, '...']:
    # Anything below the smallest normal float is indistinguishable from 0.
    tiny = jnp.finfo(x.dtype).tiny
    return ~(jnp.isfinite(x) & (x >= tiny))


def _log_degenerate(x: Float[Array, '...']) -> Bool[Array, '...']:
    return ~jnp.isfinite(x)


LINEAR = WeightDomain(
    name='linear',
    mul=jnp.multiply,
    div=jnp.divide,
    sum=jnp.sum,
    from_log_density=jnp.exp,
    to_linear=lambda w: w,
    is_degenerate=_linear_degenerate,
)

LOG = WeightDomain(
    name='log',
    mul=jnp.add,
    div=jnp.subtract,
    sum=logsumexp,
    from_log_density=lambda log_p: log_p,
    to_linear=jnp.exp,
    is_degenerate=_log_degenerate,
)

_DOMAINS = {'linear': LINEAR, 'log': LOG}


def get_domain(mode: str) -> WeightDomain:
    """Look up the weight domain for *mode*.

    Args:
        mode: ``'linear'`` or ``'log'``.

    Returns:
        The matching :class:`WeightDomain`.

    Raises:
        ConfigError: If *mode* is not a recognized mode.
    """
    try:
        return _DOMAINS[mode]
    except (KeyError, TypeError):
        raise ConfigError(
            f"unknown mode {mode!r}; expected one of {sorted(_DOMAINS)}"
        ) from None
