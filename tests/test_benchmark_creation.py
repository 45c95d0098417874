# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import pytest

pytest.importorskip("pytest_benchmark")

import stridetensor as st  # noqa: E402

NESTED = [[[float(i + j + k) for k in range(16)] for j in range(16)] for i in range(16)]


def test_benchmark_to_tensor_checked(benchmark):
    result = benchmark(st.to_tensor, NESTED, check="checked")
    assert result.shape == (16, 16, 16)


def test_benchmark_to_tensor_unchecked(benchmark):
    result = benchmark(st.to_tensor, NESTED, check="unchecked")
    assert result.shape == (16, 16, 16)


def test_benchmark_random_tensor(benchmark):
    result = benchmark(st.random_tensor, (64, 64), 1.0)
    assert result.data.size == 4096
