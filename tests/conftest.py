# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import stridetensor as st  # noqa: E402
from stridetensor._backend import Backend, StorageEngine  # noqa: E402


class FakeDeviceArray:
    """Stand-in for accelerator memory: a host array behind a distinct type."""

    def __init__(self, array):
        self.array = array

    @property
    def dtype(self):
        return self.array.dtype

    @property
    def ndim(self):
        return self.array.ndim

    @property
    def size(self):
        return self.array.size

    def __len__(self):
        return len(self.array)


class FakeAcceleratorEngine(StorageEngine):
    backend = Backend.CUDA

    def __init__(self):
        self.allocations = 0

    def owns(self, buffer):
        return isinstance(buffer, FakeDeviceArray)

    def allocate(self, size, dtype, fill=None):
        self.allocations += 1
        if fill is None:
            return FakeDeviceArray(np.zeros(size, dtype=dtype))
        return FakeDeviceArray(np.full(size, fill, dtype=dtype))

    def adopt(self, host):
        self.allocations += 1
        return FakeDeviceArray(host.reshape(-1).copy())

    def to_host(self, buffer):
        return buffer.array


@pytest.fixture
def accelerator():
    """Install a fake accelerator engine for the duration of a test."""

    engine = FakeAcceleratorEngine()
    previous = st.register_engine(engine)
    try:
        yield engine
    finally:
        if previous is None:
            st.reset_engine(Backend.CUDA)
        else:
            st.register_engine(previous)


@pytest.fixture(autouse=True)
def restore_defaults():
    dtype = st.get_default_dtype()
    mode = st.get_check_mode()
    backend = st.get_default_backend()
    yield
    st.set_default_dtype(dtype)
    st.set_check_mode(mode)
    st.set_default_backend(backend)
