# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Process-wide construction defaults: element dtype and shape-check mode.

Both follow the same pattern: a module level value, a getter/setter pair and a
context manager that restores the previous value on exit.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from enum import Enum
from threading import RLock
from typing import Any, Iterator, Optional, Union

import numpy as np

_SUPPORTED_DTYPES = {"float32", "float64", "int32", "int64", "bool"}

# Python scalar types map to the widths NumPy uses for them.
_PYTHON_TYPE_DTYPES = {
    bool: "bool",
    int: "int64",
    float: "float64",
    str: "U1",
}

_CONFIG_LOCK = RLock()
_default_dtype = "float32"

CHECK_MODE_ENV = "STRIDETENSOR_SHAPE_CHECKS"


class CheckMode(Enum):
    """Whether nested input is validated against its inferred shape."""

    CHECKED = "checked"
    UNCHECKED = "unchecked"

    @classmethod
    def parse(cls, value: Union["CheckMode", str, bool]) -> "CheckMode":
        if isinstance(value, CheckMode):
            return value
        if isinstance(value, bool):
            return cls.CHECKED if value else cls.UNCHECKED
        if isinstance(value, str):
            key = value.strip().lower()
            if key in {"checked", "1", "on", "true"}:
                return cls.CHECKED
            if key in {"unchecked", "0", "off", "false"}:
                return cls.UNCHECKED
        raise ValueError(f"Unsupported shape check mode {value!r}")


def _initial_check_mode() -> CheckMode:
    env = os.environ.get(CHECK_MODE_ENV)
    if env:
        return CheckMode.parse(env)
    # ``python -O`` is the unchecked build.
    return CheckMode.CHECKED if __debug__ else CheckMode.UNCHECKED


_check_mode = _initial_check_mode()


def resolve_dtype(dtype: Any = None) -> np.dtype:
    """Translate a dtype spec into a NumPy dtype.

    ``None`` selects the default dtype. Strings must be one of the supported
    names; Python ``bool``/``int``/``float``/``str`` and NumPy dtypes are also
    accepted.
    """

    if dtype is None:
        return np.dtype(get_default_dtype())
    if isinstance(dtype, str):
        if dtype not in _SUPPORTED_DTYPES:
            raise ValueError(f"Unsupported dtype '{dtype}'")
        return np.dtype(dtype)
    if isinstance(dtype, type) and dtype in _PYTHON_TYPE_DTYPES:
        return np.dtype(_PYTHON_TYPE_DTYPES[dtype])
    try:
        return np.dtype(dtype)
    except TypeError as exc:
        raise TypeError(f"Cannot interpret {dtype!r} as a tensor dtype") from exc


def dtype_name(dtype: np.dtype) -> str:
    """Short name used for ``Tensor.dtype`` (``"float32"``, ``"U1"``...)."""
    if dtype.kind == "U":
        return f"U{dtype.itemsize // 4}"
    return dtype.name


def is_numeric(dtype: np.dtype) -> bool:
    return dtype.kind in "iuf"


def set_default_dtype(dtype: str) -> None:
    """Set the global default data type for new tensors."""
    global _default_dtype

    if dtype not in _SUPPORTED_DTYPES:
        raise ValueError(f"Unsupported dtype '{dtype}'")
    with _CONFIG_LOCK:
        _default_dtype = dtype


def get_default_dtype() -> str:
    """Get the current global default data type."""
    return _default_dtype


@contextmanager
def default_dtype(dtype: str) -> Iterator[None]:
    """Temporarily switch the default dtype."""

    previous = get_default_dtype()
    set_default_dtype(dtype)
    try:
        yield
    finally:
        set_default_dtype(previous)


def set_check_mode(mode: Union[CheckMode, str, bool]) -> None:
    """Select whether ``to_tensor`` validates nested input by default."""
    global _check_mode

    parsed = CheckMode.parse(mode)
    with _CONFIG_LOCK:
        _check_mode = parsed


def get_check_mode() -> CheckMode:
    return _check_mode


def resolve_check_mode(mode: Optional[Union[CheckMode, str, bool]]) -> CheckMode:
    if mode is None:
        return get_check_mode()
    return CheckMode.parse(mode)


@contextmanager
def check_mode(mode: Union[CheckMode, str, bool]) -> Iterator[None]:
    """Temporarily switch the default shape-check mode."""

    previous = get_check_mode()
    set_check_mode(mode)
    try:
        yield
    finally:
        set_check_mode(previous)


__all__ = [
    "CHECK_MODE_ENV",
    "CheckMode",
    "resolve_dtype",
    "dtype_name",
    "is_numeric",
    "set_default_dtype",
    "get_default_dtype",
    "default_dtype",
    "set_check_mode",
    "get_check_mode",
    "resolve_check_mode",
    "check_mode",
]
