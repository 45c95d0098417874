# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Flatten nested Python sequences into a row-major buffer.

The shape is read along the first element of every nesting level only, so
ragged input is not detected here. Callers compare the flattened length with
the inferred shape through :func:`stridetensor.shape.check_nested_elements`.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence, Tuple

import numpy as np

from .config import resolve_dtype


def _is_nested(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def infer_shape(data: Any) -> Tuple[int, ...]:
    """Infer one axis per nesting level from the first sequence of each level.

    A top-level string is a rank 1 sequence of characters. Descent stops at
    the first empty sequence, so ``[]`` is ``(0,)`` and ``[[]]`` is ``(1, 0)``.
    """

    if isinstance(data, str):
        return (len(data),)

    shape = []
    node = data
    while _is_nested(node):
        shape.append(len(node))
        if len(node) == 0:
            break
        node = node[0]
    return tuple(shape)


def flat_iter(data: Any, rank: int) -> Iterator[Any]:
    """Yield the leaves of ``data`` depth first, left to right.

    Leaves are expected exactly ``rank`` levels deep. Finding a sequence where
    a leaf belongs, or a leaf where a sequence belongs, is a type error.
    """

    if isinstance(data, str):
        yield from data
        return

    def walk(node: Any, depth: int) -> Iterator[Any]:
        if depth == rank:
            if _is_nested(node):
                raise TypeError(
                    f"Expected a scalar element at depth {depth}, got a "
                    f"{type(node).__name__}"
                )
            yield node
            return
        if not _is_nested(node):
            raise TypeError(
                f"Expected a sequence at depth {depth}, got {type(node).__name__}"
            )
        for item in node:
            yield from walk(item, depth + 1)

    yield from walk(data, 0)


def _leaf_dtype(leaf: Any) -> Any:
    if isinstance(leaf, np.generic):
        return leaf.dtype
    leaf_type = type(leaf)
    if leaf_type is bool:
        return np.dtype(bool)
    if leaf_type is int:
        return np.dtype(np.int64)
    if leaf_type is float:
        return np.dtype(np.float64)
    if leaf_type is str:
        # Let NumPy size the unicode dtype to the longest string.
        return None
    return np.dtype(object)


def _check_homogeneous(leaves: List[Any]) -> None:
    first_type = type(leaves[0])
    for leaf in leaves:
        if type(leaf) is not first_type:
            raise TypeError(
                "Tensor elements must share a single type, got "
                f"{first_type.__name__} and {type(leaf).__name__}"
            )


def flatten(data: Any) -> Tuple[Tuple[int, ...], np.ndarray]:
    """Return the inferred shape of ``data`` and its leaves as a flat array.

    The element type comes from the first leaf; every other leaf must have
    the same Python type. Empty input produces an empty buffer of the default
    dtype.
    """

    if not (isinstance(data, str) or _is_nested(data)):
        raise TypeError(
            f"Expected a (nested) sequence or a string, got {type(data).__name__}"
        )

    shape = infer_shape(data)
    leaves = list(flat_iter(data, len(shape)))

    if isinstance(data, str):
        return shape, np.array(leaves, dtype="U1")
    if not leaves:
        return shape, np.zeros(0, dtype=resolve_dtype(None))

    _check_homogeneous(leaves)
    dtype = _leaf_dtype(leaves[0])
    if dtype is not None and dtype.kind == "O":
        # np.array would unpack array-like leaves into extra axes.
        buffer = np.empty(len(leaves), dtype=object)
        for i, leaf in enumerate(leaves):
            buffer[i] = leaf
        return shape, buffer
    return shape, np.array(leaves, dtype=dtype)


__all__ = ["infer_shape", "flat_iter", "flatten"]
