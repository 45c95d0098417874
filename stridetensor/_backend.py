# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Storage backends.

Every backend tag maps to exactly one storage engine. Constructors never
branch on the tag themselves: they ask :func:`get_engine` for the engine and
call it, so a tag without an engine fails with ``UnsupportedBackend`` instead
of falling back to the CPU.
"""

from __future__ import annotations

import importlib
import logging
import sys
from contextlib import contextmanager
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, Iterator, Optional, Union

import numpy as np

from .errors import AllocationFailure, UnsupportedBackend

logger = logging.getLogger(__name__)


class Backend(Enum):
    """Storage/execution target of a tensor."""

    CPU = "cpu"
    CUDA = "cuda"

    @classmethod
    def resolve(cls, spec: Union["Backend", str, None] = None) -> "Backend":
        """Normalize ``spec`` (``Backend``, ``"cpu"``, ``"cuda:0"``, ``None``)."""

        if spec is None:
            return get_default_backend()
        if isinstance(spec, Backend):
            return spec
        if isinstance(spec, str):
            # Device indices ("cuda:1") select a device, not a backend.
            name = spec.split(":", 1)[0].strip().lower()
            for member in cls:
                if member.value == name:
                    return member
        raise UnsupportedBackend(f"Unknown backend {spec!r}")


_default_backend = Backend.CPU


def set_default_backend(spec: Union[Backend, str]) -> None:
    """Select the backend used when constructors receive ``backend=None``."""
    global _default_backend

    if spec is None:
        raise UnsupportedBackend("The default backend cannot be None")
    _default_backend = Backend.resolve(spec)


def get_default_backend() -> Backend:
    return _default_backend


@contextmanager
def allocation_guard(size: int, dtype: Any) -> Iterator[None]:
    """Report allocator failures as ``AllocationFailure``."""

    try:
        yield
    except MemoryError as exc:
        raise AllocationFailure(
            f"Unable to allocate {size} elements of {dtype}"
        ) from exc
    except ValueError as exc:
        # NumPy rejects sizes beyond the address space with ValueError.
        message = str(exc).lower()
        if "too big" in message or "maximum" in message:
            raise AllocationFailure(
                f"Unable to allocate {size} elements of {dtype}"
            ) from exc
        raise


class StorageEngine:
    """Allocation strategy for one backend.

    Engines produce flat, one dimensional, contiguous buffers. ``fill=None``
    means the dtype's default value.
    """

    backend: Backend

    def owns(self, buffer: Any) -> bool:
        raise NotImplementedError

    def allocate(self, size: int, dtype: np.dtype, fill: Any = None) -> Any:
        raise NotImplementedError

    def adopt(self, host: np.ndarray) -> Any:
        """Turn a freshly built flat host array into this backend's storage."""
        raise NotImplementedError

    def to_host(self, buffer: Any) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend.value!r})"


class CpuEngine(StorageEngine):
    """Host memory through NumPy."""

    backend = Backend.CPU

    def owns(self, buffer: Any) -> bool:
        return isinstance(buffer, np.ndarray)

    def allocate(self, size: int, dtype: np.dtype, fill: Any = None) -> np.ndarray:
        with allocation_guard(size, dtype):
            if fill is None:
                return np.zeros(size, dtype=dtype)
            return np.full(size, fill, dtype=dtype)

    def adopt(self, host: np.ndarray) -> np.ndarray:
        return host.reshape(-1)

    def to_host(self, buffer: np.ndarray) -> np.ndarray:
        return buffer


class CudaEngine(StorageEngine):
    """Accelerator memory through CuPy, imported on first use."""

    backend = Backend.CUDA

    def __init__(self):
        self._cp = None

    def _cupy(self):
        if self._cp is not None:
            return self._cp
        try:
            cp = importlib.import_module("cupy")
        except ModuleNotFoundError as exc:
            raise UnsupportedBackend(
                "The cuda backend requires CuPy; install it with "
                "`pip install stridetensor[cuda]`."
            ) from exc
        try:
            count = cp.cuda.runtime.getDeviceCount()
        except Exception as exc:
            raise UnsupportedBackend(
                f"CuPy is installed but no CUDA device is usable: {exc}"
            ) from exc
        if count < 1:
            raise UnsupportedBackend("CuPy is installed but reports no CUDA devices")
        logger.debug("Loaded CuPy %s with %d device(s)", cp.__version__, count)
        self._cp = cp
        return cp

    @staticmethod
    def _check_dtype(dtype: np.dtype) -> None:
        if dtype.kind not in "biuf":
            raise UnsupportedBackend(
                f"The cuda backend cannot store elements of dtype {dtype}"
            )

    def owns(self, buffer: Any) -> bool:
        # No CuPy array can exist before CuPy has been imported.
        cp = sys.modules.get("cupy")
        return cp is not None and isinstance(buffer, cp.ndarray)

    def allocate(self, size: int, dtype: np.dtype, fill: Any = None) -> Any:
        self._check_dtype(dtype)
        cp = self._cupy()
        with allocation_guard(size, dtype):
            if fill is None:
                return cp.zeros(size, dtype=dtype)
            return cp.full(size, fill, dtype=dtype)

    def adopt(self, host: np.ndarray) -> Any:
        self._check_dtype(host.dtype)
        cp = self._cupy()
        with allocation_guard(host.size, host.dtype):
            return cp.asarray(host.reshape(-1))

    def to_host(self, buffer: Any) -> np.ndarray:
        return self._cupy().asnumpy(buffer)


_ENGINE_FACTORIES: Dict[Backend, Callable[[], StorageEngine]] = {
    Backend.CPU: CpuEngine,
    Backend.CUDA: CudaEngine,
}

# Engines are created once per backend and reused.
_ENGINES: Dict[Backend, StorageEngine] = {}
_ENGINE_LOCK = RLock()


def get_engine(spec: Union[Backend, str, None] = None) -> StorageEngine:
    """Return the storage engine for ``spec``.

    Raises:
        UnsupportedBackend: for unknown tags or tags without an engine.
    """

    backend = Backend.resolve(spec)
    with _ENGINE_LOCK:
        engine = _ENGINES.get(backend)
        if engine is not None:
            return engine
        factory = _ENGINE_FACTORIES.get(backend)
        if factory is None:
            raise UnsupportedBackend(
                f"No storage engine is registered for backend '{backend.value}'"
            )
        engine = factory()
        _ENGINES[backend] = engine
        return engine


def register_engine(engine: StorageEngine) -> Optional[StorageEngine]:
    """Install ``engine`` for its backend and return the engine it replaces."""

    if not isinstance(engine, StorageEngine):
        raise TypeError("register_engine() expects a StorageEngine instance")
    backend = Backend.resolve(engine.backend)
    with _ENGINE_LOCK:
        previous = _ENGINES.get(backend)
        _ENGINES[backend] = engine
    logger.debug("Registered %r for backend '%s'", engine, backend.value)
    return previous


def reset_engine(spec: Union[Backend, str]) -> None:
    """Drop a registered engine so the built-in one is created on next use."""

    backend = Backend.resolve(spec)
    with _ENGINE_LOCK:
        _ENGINES.pop(backend, None)


def backend_of(buffer: Any) -> Backend:
    """Return the backend whose engine owns the storage ``buffer``.

    Raises:
        UnsupportedBackend: when no engine recognizes the storage.
    """

    for backend in Backend:
        if get_engine(backend).owns(buffer):
            return backend
    raise UnsupportedBackend(
        f"Unrecognized tensor storage of type {type(buffer).__name__}"
    )


__all__ = [
    "Backend",
    "StorageEngine",
    "CpuEngine",
    "CudaEngine",
    "get_engine",
    "register_engine",
    "reset_engine",
    "backend_of",
    "allocation_guard",
    "set_default_backend",
    "get_default_backend",
]
