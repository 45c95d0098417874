# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Tensor constructors.

Every constructor follows the same steps: settle the shape, derive the
row-major strides, ask the backend engine for a buffer of ``product(shape)``
elements and wrap it with ``offset = 0``. The returned tensor is the only
owner of its buffer.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np

from ._backend import Backend, allocation_guard, backend_of, get_engine
from .config import CheckMode, is_numeric, resolve_check_mode, resolve_dtype
from .flatten import flatten
from .sampling import Bound, draw_uniform
from .shape import ShapeLike, check_nested_elements, normalize_shape, product
from .tensor import Tensor

BackendLike = Union[Backend, str, None]


def _assemble(shape, buffer) -> Tensor:
    return Tensor(buffer, shape, offset=0)


def _numeric_dtype(dtype: Any, caller: str) -> np.dtype:
    resolved = resolve_dtype(dtype)
    if not is_numeric(resolved):
        raise TypeError(f"{caller}() requires a numeric dtype, got {resolved}")
    return resolved


def _source_tensor(tensor: Any, caller: str) -> Tensor:
    if not isinstance(tensor, Tensor):
        raise TypeError(f"{caller}() expects a Tensor, got {type(tensor).__name__}")
    return tensor


def new_tensor(
    shape: ShapeLike, dtype: Any = None, backend: BackendLike = None
) -> Tensor:
    """Create a tensor filled with the dtype's default value.

    Numbers start at 0, booleans at ``False`` and strings empty.

    Raises:
        AllocationFailure: if the buffer cannot be allocated.
        UnsupportedBackend: if ``backend`` has no storage engine.
    """
    shape = normalize_shape(shape)
    engine = get_engine(backend)
    return _assemble(shape, engine.allocate(product(shape), resolve_dtype(dtype)))


def zeros(shape: ShapeLike, dtype: Any = None, backend: BackendLike = None) -> Tensor:
    """Create a tensor filled with zeros."""
    return new_tensor(shape, _numeric_dtype(dtype, "zeros"), backend)


def ones(shape: ShapeLike, dtype: Any = None, backend: BackendLike = None) -> Tensor:
    """Create a tensor filled with ones."""
    resolved = _numeric_dtype(dtype, "ones")
    shape = normalize_shape(shape)
    engine = get_engine(backend)
    return _assemble(shape, engine.allocate(product(shape), resolved, fill=1))


def zeros_like(tensor: Tensor, dtype: Any = None) -> Tensor:
    """Create a zero tensor with the shape, dtype and backend of ``tensor``.

    The backend is read from the concrete storage of ``tensor``; storage no
    engine recognizes raises ``UnsupportedBackend``.
    """
    source = _source_tensor(tensor, "zeros_like")
    backend = backend_of(source.data)
    return zeros(source.shape, dtype if dtype is not None else source.data.dtype, backend)


def ones_like(tensor: Tensor, dtype: Any = None) -> Tensor:
    """Create a tensor of ones with the shape, dtype and backend of ``tensor``."""
    source = _source_tensor(tensor, "ones_like")
    backend = backend_of(source.data)
    return ones(source.shape, dtype if dtype is not None else source.data.dtype, backend)


def to_tensor(
    data: Any,
    backend: BackendLike = None,
    *,
    check: Union[CheckMode, str, bool, None] = None,
) -> Tensor:
    """Convert a nested sequence, or a string, into a tensor.

    A string becomes a rank 1 tensor of characters. Other input is flattened
    in row-major order and its shape read from the first element of every
    nesting level.

    Args:
        data: Nested sequences of a single element type, or a string.
        backend: Target backend, the default backend when ``None``.
        check: Shape check mode for this call; ``None`` uses
            :func:`stridetensor.config.get_check_mode`.

    Raises:
        ShapeMismatch: ragged input while checks are enabled. With checks
            disabled ragged input yields a tensor whose ``data`` length
            differs from ``product(shape)``.
        TypeError: mixed element types or a non-sequence argument.
    """
    mode = resolve_check_mode(check)
    engine = get_engine(backend)

    shape, flat = flatten(data)
    if mode is CheckMode.CHECKED:
        check_nested_elements(shape, flat.size)
    return _assemble(shape, engine.adopt(flat))


def from_numpy(array: np.ndarray, backend: BackendLike = None) -> Tensor:
    """Copy a NumPy array into a new row-major tensor."""
    if not isinstance(array, np.ndarray):
        raise TypeError(f"from_numpy() expects an ndarray, got {type(array).__name__}")
    engine = get_engine(backend)
    flat = np.array(array, order="C", copy=True).reshape(-1)
    return _assemble(array.shape, engine.adopt(flat))


def random_tensor(
    shape: ShapeLike,
    bound: Bound,
    backend: BackendLike = None,
    *,
    sampler: Optional[np.random.Generator] = None,
) -> Tensor:
    """Create a tensor of independent uniform draws.

    The element type follows ``bound``:

    * ``float``: float64 values in ``[0, bound)``;
    * ``int``: int64 values in ``[0, bound)``;
    * ``range`` or :class:`stridetensor.sampling.Interval`: values from that
      range under its own inclusivity rule.

    Draws come from ``sampler`` or, when omitted, the package sampler seeded
    by :func:`stridetensor.manual_seed`.
    """
    shape = normalize_shape(shape)
    engine = get_engine(backend)
    size = product(shape)
    with allocation_guard(size, "random draws"):
        host = draw_uniform(size, bound, sampler)
    return _assemble(shape, engine.adopt(host))


# NumPy-style alias
tensor = to_tensor


__all__ = [
    "new_tensor",
    "zeros",
    "zeros_like",
    "ones",
    "ones_like",
    "to_tensor",
    "tensor",
    "from_numpy",
    "random_tensor",
]
