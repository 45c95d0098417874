# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Exceptions raised while building tensors."""

from __future__ import annotations

from typing import Sequence


class TensorError(Exception):
    """Base class for stridetensor construction errors."""


class ShapeMismatch(TensorError, ValueError):
    """A flattened buffer does not hold ``product(shape)`` elements."""

    def __init__(self, shape: Sequence[int], expected: int, length: int):
        self.shape = tuple(shape)
        self.expected = expected
        self.length = length
        super().__init__(
            "Each nested sequence at the same level must have the same number "
            f"of elements: inferred shape {self.shape} needs {expected} "
            f"elements, got {length}"
        )


class AllocationFailure(TensorError, MemoryError):
    """The backend could not provide a buffer of the requested size."""


class UnsupportedBackend(TensorError, RuntimeError):
    """A constructor was asked for a backend it has no code path for."""


__all__ = [
    "TensorError",
    "ShapeMismatch",
    "AllocationFailure",
    "UnsupportedBackend",
]
