# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Type aliases for smcsmooth.

Matches the conventions used by Dynamax (``dynamax.types``).
"""

from typing import Literal, Union

from jaxtyping import Array, Bool, Float

Scalar = Union[float, Float[Array, ""]]
"""Python float or scalar JAX array with float dtype."""

BoolScalar = Union[bool, Bool[Array, ""]]
"""Python bool or scalar JAX array with bool dtype."""

Mode = Literal['linear', 'log']
"""Domain in which weights are stored: probabilities or log-probabilities."""
