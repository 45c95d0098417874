# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Strided tensor record: shape, strides, offset and a flat buffer.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ._backend import backend_of, get_engine
from .config import dtype_name
from .shape import is_canonical, normalize_shape, product, shape_to_strides


class Tensor:
    """
    A multi-dimensional view over a flat, contiguous buffer.

    Element ``(i0, ..., in)`` lives at ``data[offset + sum(ik * strides[k])]``.
    Tensors returned by the constructors in :mod:`stridetensor.creation` own
    their buffer and use the canonical row-major strides. Building a
    ``Tensor`` directly around an existing buffer shares it, which is how
    views over another tensor's storage are made.
    """

    def __init__(
        self,
        data: Any,
        shape: Sequence[int],
        strides: Optional[Sequence[int]] = None,
        offset: int = 0,
    ):
        """
        Args:
            data: One dimensional buffer owned by a registered backend
                (``numpy.ndarray`` for CPU).
            shape: Axis lengths; ``()`` for a scalar.
            strides: Element steps per axis. Defaults to row-major strides.
            offset: Flat index of the first element.

        Examples:
            >>> Tensor(np.arange(6), (2, 3)).strides
            (3, 1)
            >>> Tensor(np.arange(6), (3, 2), strides=(1, 3))  # transposed view
        """
        # Raises UnsupportedBackend for foreign storage.
        backend_of(data)
        if getattr(data, "ndim", 1) != 1:
            raise ValueError("Tensor storage must be a flat, one dimensional buffer")

        shape = normalize_shape(shape)
        if strides is None:
            strides = shape_to_strides(shape)
        else:
            strides = tuple(int(s) for s in strides)
            if len(strides) != len(shape):
                raise ValueError(
                    f"strides {strides} do not match the rank of shape {shape}"
                )
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")

        self._data = data
        self._shape = shape
        self._strides = strides
        self._offset = int(offset)

    # Layout
    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def strides(self) -> Tuple[int, ...]:
        """Per-axis steps in elements (not bytes)."""
        return self._strides

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def data(self) -> Any:
        """The flat backing buffer, shared with any view built over it."""
        return self._data

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        """Total number of elements."""
        return product(self._shape)

    @property
    def dtype(self) -> str:
        return dtype_name(self._data.dtype)

    @property
    def device(self) -> str:
        """Name of the backend holding the buffer."""
        return backend_of(self._data).value

    def numel(self) -> int:
        return self.size

    def dim(self) -> int:
        return self.ndim

    def is_contiguous(self) -> bool:
        """Check for row-major strides starting at the front of the buffer."""
        return self._offset == 0 and is_canonical(self._shape, self._strides)

    # Data conversion
    def _flat_indices(self) -> np.ndarray:
        index = np.full(self._shape, self._offset, dtype=np.intp)
        rank = self.ndim
        for axis, (dim, stride) in enumerate(zip(self._shape, self._strides)):
            steps = np.arange(dim, dtype=np.intp) * stride
            index = index + steps.reshape((dim,) + (1,) * (rank - axis - 1))
        return index

    def numpy(self) -> np.ndarray:
        """Gather the logical tensor into a new NumPy array.

        Elements are read through ``shape``, ``strides`` and ``offset``; CUDA
        buffers are copied to the host first.

        Raises:
            IndexError: when the layout reaches outside ``data``, as
                happens for ragged input built without shape checks.
        """
        host = get_engine(backend_of(self._data)).to_host(self._data)
        index = self._flat_indices()
        if index.size and (index.min() < 0 or index.max() >= len(host)):
            raise IndexError(
                f"Tensor layout reads elements {index.min()}..{index.max()} "
                f"outside a buffer of length {len(host)}"
            )
        return np.asarray(host[index])

    def tolist(self) -> Any:
        return self.numpy().tolist()

    def __len__(self) -> int:
        if not self._shape:
            raise TypeError("len() of a 0-d tensor")
        return self._shape[0]

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self._shape}, strides={self._strides}, "
            f"offset={self._offset}, dtype={self.dtype}, device={self.device})"
        )


__all__ = ["Tensor"]
