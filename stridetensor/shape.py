# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Shape and stride arithmetic for row-major tensors."""

from __future__ import annotations

from numbers import Integral
from typing import Sequence, Tuple, Union

from .errors import ShapeMismatch

ShapeLike = Union[int, Sequence[int]]


def normalize_shape(shape: ShapeLike) -> Tuple[int, ...]:
    """Return ``shape`` as a tuple of non-negative ints.

    Accepts a single int (rank 1) or any sequence of ints. ``()`` and ``[]``
    describe a rank 0 tensor.
    """

    if isinstance(shape, Integral) and not isinstance(shape, bool):
        dims = (shape,)
    elif isinstance(shape, (str, bytes)) or not isinstance(shape, Sequence):
        raise TypeError(
            f"shape must be an int or a sequence of ints, got {type(shape).__name__}"
        )
    else:
        dims = tuple(shape)

    result = []
    for dim in dims:
        if isinstance(dim, bool) or not isinstance(dim, Integral):
            raise TypeError(
                f"shape entries must be ints, got {type(dim).__name__}"
            )
        if dim < 0:
            raise ValueError(f"shape entries must be non-negative, got {tuple(dims)}")
        result.append(int(dim))
    return tuple(result)


def product(shape: Sequence[int]) -> int:
    """Number of elements described by ``shape`` (1 for rank 0)."""
    result = 1
    for dim in shape:
        result *= dim
    return result


def shape_to_strides(shape: Sequence[int]) -> Tuple[int, ...]:
    """Compute row-major (last axis fastest) strides, in elements.

    ``strides[-1] == 1`` and ``strides[i] == strides[i + 1] * shape[i + 1]``.
    A zero-length axis needs no special case: it only zeroes the strides of
    the axes before it.
    """

    strides = [0] * len(shape)
    accum = 1
    for axis in range(len(shape) - 1, -1, -1):
        strides[axis] = accum
        accum *= shape[axis]
    return tuple(strides)


def is_canonical(shape: Sequence[int], strides: Sequence[int]) -> bool:
    """Return ``True`` when ``strides`` is the row-major layout of ``shape``."""
    return len(shape) == len(strides) and tuple(strides) == shape_to_strides(shape)


def check_nested_elements(shape: Sequence[int], length: int) -> None:
    """Compare a shape detected by flattening with the real data length.

    Raises:
        ShapeMismatch: if ``product(shape) != length``.
    """

    expected = product(shape)
    if expected != length:
        raise ShapeMismatch(shape, expected, length)


__all__ = [
    "ShapeLike",
    "normalize_shape",
    "product",
    "shape_to_strides",
    "is_canonical",
    "check_nested_elements",
]
