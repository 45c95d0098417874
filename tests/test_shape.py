# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import pytest

from stridetensor.errors import ShapeMismatch
from stridetensor.shape import (
    check_nested_elements,
    is_canonical,
    normalize_shape,
    product,
    shape_to_strides,
)


@pytest.mark.parametrize(
    "shape",
    [(1,), (5,), (2, 3), (4, 1, 7), (2, 3, 4, 5), (3, 0, 2), (0,), (1, 1, 1)],
)
def test_strides_follow_row_major_recurrence(shape):
    strides = shape_to_strides(shape)
    assert len(strides) == len(shape)
    assert strides[-1] == 1
    for i in range(len(shape) - 1):
        assert strides[i] == strides[i + 1] * shape[i + 1]


def test_known_strides():
    assert shape_to_strides([2, 3]) == (3, 1)
    assert shape_to_strides((2, 3, 4)) == (12, 4, 1)
    assert shape_to_strides([5]) == (1,)


def test_rank_zero_has_no_strides():
    assert shape_to_strides(()) == ()
    assert product(()) == 1


def test_zero_length_axis():
    assert shape_to_strides((3, 0, 2)) == (0, 2, 1)
    assert product((3, 0, 2)) == 0


def test_check_nested_elements_accepts_matching_length():
    check_nested_elements((2, 3), 6)
    check_nested_elements((), 1)
    check_nested_elements((0, 4), 0)


def test_check_nested_elements_reports_mismatch():
    with pytest.raises(ShapeMismatch) as info:
        check_nested_elements([2, 2], 3)
    assert info.value.shape == (2, 2)
    assert info.value.expected == 4
    assert info.value.length == 3
    assert isinstance(info.value, ValueError)


def test_normalize_shape_accepts_int_and_sequences():
    assert normalize_shape(4) == (4,)
    assert normalize_shape([2, 3]) == (2, 3)
    assert normalize_shape(()) == ()


@pytest.mark.parametrize("bad", [(2, -1), -3])
def test_normalize_shape_rejects_negative(bad):
    with pytest.raises(ValueError):
        normalize_shape(bad)


@pytest.mark.parametrize("bad", [(2.0, 3), (True,), "23", None])
def test_normalize_shape_rejects_non_integers(bad):
    with pytest.raises(TypeError):
        normalize_shape(bad)


def test_is_canonical():
    assert is_canonical((2, 3), (3, 1))
    assert not is_canonical((2, 3), (1, 2))
    assert not is_canonical((2, 3), (3,))
