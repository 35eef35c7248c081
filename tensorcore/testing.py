"""Assertion helpers for tests of tensor values."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from .tensor import Tensor

TEST_EPSILON = 1e-3


def _as_array(x: Any) -> np.ndarray:
    if isinstance(x, Tensor):
        return x.data_sync().astype(np.float64)
    return np.asarray(x, dtype=np.float64).reshape(-1)


def expect_arrays_close(
    actual: Any, expected: Any, epsilon: Optional[float] = None
) -> None:
    """Check element-wise closeness of two flat value sequences.

    Args:
    ----
        actual: tensor, array or nested list
        expected: tensor, array or nested list
        epsilon: absolute and relative tolerance, 1e-3 by default

    """
    epsilon = TEST_EPSILON if epsilon is None else epsilon
    a = _as_array(actual)
    e = _as_array(expected)
    if a.size != e.size:
        raise AssertionError(
            f"Arrays have different lengths actual: {a.size} vs expected: {e.size}.\n"
            f"Actual:   {a.tolist()}.\nExpected: {e.tolist()}."
        )
    np.testing.assert_allclose(a, e, rtol=epsilon, atol=epsilon, equal_nan=True)


def expect_numbers_close(a: float, e: float, epsilon: Optional[float] = None) -> None:
    """Check that two numbers are within `epsilon` of each other."""
    epsilon = TEST_EPSILON if epsilon is None else epsilon
    np.testing.assert_allclose(a, e, rtol=epsilon, atol=epsilon, equal_nan=True)


def expect_arrays_equal(actual: Any, expected: Any) -> None:
    """Check exact equality of two flat value sequences."""
    np.testing.assert_array_equal(_as_array(actual), _as_array(expected))
