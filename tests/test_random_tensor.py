# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import pytest

import stridetensor as st
from stridetensor.sampling import Interval


def test_integer_bound_draws_from_zero_to_bound_exclusive():
    t = st.random_tensor([100], 10, st.cpu)
    assert t.dtype == "int64"
    assert t.shape == (100,)
    assert ((t.data >= 0) & (t.data < 10)).all()


def test_float_bound_draws_from_half_open_interval():
    t = st.random_tensor([100], 10.0, st.cpu)
    assert t.dtype == "float64"
    assert ((t.data >= 0.0) & (t.data < 10.0)).all()


def test_random_tensor_layout():
    t = st.random_tensor((3, 4, 5), 1.0)
    assert t.strides == (20, 5, 1)
    assert t.offset == 0
    assert t.data.size == 60


def test_rank_zero_random_tensor():
    t = st.random_tensor((), 5)
    assert t.strides == ()
    assert t.data.size == 1


def test_range_bound_honours_step():
    t = st.random_tensor((200,), range(10, 20, 3))
    assert set(t.data.tolist()) <= {10, 13, 16, 19}
    assert t.dtype == "int64"


def test_closed_integer_interval_includes_high():
    sampler = np.random.default_rng(0)
    t = st.random_tensor((500,), Interval(1, 3), sampler=sampler)
    assert set(t.data.tolist()) == {1, 2, 3}


def test_half_open_integer_interval_excludes_high():
    t = st.random_tensor((500,), Interval(1, 3, closed=False))
    assert set(t.data.tolist()) <= {1, 2}


def test_float_interval():
    t = st.random_tensor((100,), Interval(-1.0, 1.0, closed=False))
    assert t.dtype == "float64"
    assert ((t.data >= -1.0) & (t.data < 1.0)).all()


def test_seeded_samplers_are_deterministic():
    first = st.random_tensor((4, 4), 100, sampler=np.random.default_rng(7))
    second = st.random_tensor((4, 4), 100, sampler=np.random.default_rng(7))
    np.testing.assert_array_equal(first.data, second.data)


def test_manual_seed_makes_random_tensor_deterministic():
    st.manual_seed(123)
    first = st.random_tensor((2, 3), 1.0).numpy()
    st.manual_seed(123)
    second = st.random_tensor((2, 3), 1.0).numpy()
    np.testing.assert_array_equal(first, second)


def test_explicit_sampler_leaves_package_sampler_untouched():
    st.manual_seed(5)
    expected = st.get_sampler().random(3)
    st.manual_seed(5)
    st.random_tensor((10,), 1.0, sampler=np.random.default_rng(1))
    np.testing.assert_array_equal(st.get_sampler().random(3), expected)


@pytest.mark.parametrize("bound", [0, -3, 0.0, float("inf"), range(5, 5)])
def test_empty_or_invalid_bounds_raise_value_error(bound):
    with pytest.raises(ValueError):
        st.random_tensor((3,), bound)


@pytest.mark.parametrize("bound", [True, "10", None, [0, 1]])
def test_unsupported_bound_types_raise_type_error(bound):
    with pytest.raises(TypeError):
        st.random_tensor((3,), bound)


def test_interval_validation():
    with pytest.raises(ValueError):
        Interval(3, 1)
    with pytest.raises(ValueError):
        Interval(2, 2, closed=False)
    with pytest.raises(TypeError):
        Interval("a", "b")


@pytest.mark.parametrize("end", [float("nan"), float("inf"), float("-inf")])
def test_interval_rejects_non_finite_endpoints(end):
    with pytest.raises(ValueError):
        Interval(0.0, end)
    with pytest.raises(ValueError):
        Interval(end, 1.0)
