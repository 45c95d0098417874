# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging

from . import config, creation, sampling, shape
from ._backend import (
    Backend,
    StorageEngine,
    backend_of,
    get_default_backend,
    get_engine,
    register_engine,
    reset_engine,
    set_default_backend,
)
from .config import (
    CheckMode,
    check_mode,
    default_dtype,
    get_check_mode,
    get_default_dtype,
    set_check_mode,
    set_default_dtype,
)
from .creation import (
    from_numpy,
    new_tensor,
    ones,
    ones_like,
    random_tensor,
    tensor,
    to_tensor,
    zeros,
    zeros_like,
)
from .errors import AllocationFailure, ShapeMismatch, TensorError, UnsupportedBackend
from .sampling import Interval, get_sampler, manual_seed
from .shape import check_nested_elements, shape_to_strides
from .tensor import Tensor

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

cpu = Backend.CPU
cuda = Backend.CUDA

__all__ = [
    "Tensor",
    "Backend",
    "StorageEngine",
    "CheckMode",
    "Interval",
    "config",
    "creation",
    "sampling",
    "shape",
    "cpu",
    "cuda",
    "new_tensor",
    "zeros",
    "zeros_like",
    "ones",
    "ones_like",
    "to_tensor",
    "tensor",
    "from_numpy",
    "random_tensor",
    "shape_to_strides",
    "check_nested_elements",
    "manual_seed",
    "get_sampler",
    "backend_of",
    "get_engine",
    "register_engine",
    "reset_engine",
    "set_default_backend",
    "get_default_backend",
    "set_default_dtype",
    "get_default_dtype",
    "default_dtype",
    "set_check_mode",
    "get_check_mode",
    "check_mode",
    "TensorError",
    "ShapeMismatch",
    "AllocationFailure",
    "UnsupportedBackend",
]
