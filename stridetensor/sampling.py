# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Uniform sampling for ``random_tensor``.

Random numbers come from a ``numpy.random.Generator``. The package keeps one
shared generator, reseeded with :func:`manual_seed`; any call can pass its own
generator instead. A shared generator is not synchronized, so threads that
build random tensors concurrently should pass their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral, Real
from threading import RLock
from typing import Optional, Union

import numpy as np

_SAMPLER_LOCK = RLock()
_sampler = np.random.default_rng()


def manual_seed(seed: int) -> None:
    """Reseed the package sampler so random tensors become reproducible."""
    global _sampler

    with _SAMPLER_LOCK:
        _sampler = np.random.default_rng(seed)


def get_sampler() -> np.random.Generator:
    """Return the package-wide generator."""
    return _sampler


@dataclass(frozen=True)
class Interval:
    """A range of values to draw from.

    ``closed=True`` includes ``high``, matching an inclusive ``low..high``
    slice; ``closed=False`` is half-open ``[low, high)``.
    """

    low: Union[int, float]
    high: Union[int, float]
    closed: bool = True

    def __post_init__(self):
        for end in (self.low, self.high):
            if isinstance(end, bool) or not isinstance(end, Real):
                raise TypeError(
                    f"Interval endpoints must be numbers, got {type(end).__name__}"
                )
            if not isinstance(end, Integral) and not np.isfinite(end):
                raise ValueError(f"Interval endpoints must be finite, got {end}")
        if self.high < self.low or (not self.closed and self.high == self.low):
            raise ValueError(f"Empty interval {self!r}")

    @property
    def is_integral(self) -> bool:
        return isinstance(self.low, Integral) and isinstance(self.high, Integral)


Bound = Union[int, float, range, Interval]


def _below(values: np.ndarray, high: float) -> np.ndarray:
    # Rounding in ``low + span * u`` can land exactly on ``high``.
    values[values >= high] = np.nextafter(high, -np.inf)
    return values


def draw_uniform(
    size: int, bound: Bound, sampler: Optional[np.random.Generator] = None
) -> np.ndarray:
    """Draw ``size`` independent uniform values described by ``bound``.

    * ``float``: float64 values in ``[0, bound)``;
    * ``int``: int64 values in ``[0, bound)``;
    * ``range``: int64 values taken from the range (step honoured);
    * ``Interval``: values in the interval, int64 for integer endpoints,
      float64 otherwise.
    """

    rng = sampler if sampler is not None else get_sampler()

    if isinstance(bound, bool):
        raise TypeError("random_tensor() bound cannot be a bool")

    if isinstance(bound, Integral):
        if bound <= 0:
            raise ValueError(f"Integer bound must be positive, got {bound}")
        return rng.integers(0, int(bound), size=size, dtype=np.int64)

    if isinstance(bound, Real):
        bound = float(bound)
        if not np.isfinite(bound) or bound <= 0.0:
            raise ValueError(f"Float bound must be positive and finite, got {bound}")
        return _below(rng.random(size) * bound, bound)

    if isinstance(bound, range):
        if len(bound) == 0:
            raise ValueError(f"Cannot draw from an empty {bound!r}")
        picks = rng.integers(0, len(bound), size=size, dtype=np.int64)
        return bound.start + bound.step * picks

    if isinstance(bound, Interval):
        if bound.is_integral:
            return rng.integers(
                int(bound.low),
                int(bound.high),
                size=size,
                dtype=np.int64,
                endpoint=bound.closed,
            )
        low, high = float(bound.low), float(bound.high)
        values = low + (high - low) * rng.random(size)
        if bound.closed:
            return values
        return _below(values, high)

    raise TypeError(
        "random_tensor() bound must be an int, a float, a range or an Interval, "
        f"got {type(bound).__name__}"
    )


__all__ = ["Interval", "Bound", "manual_seed", "get_sampler", "draw_uniform"]
