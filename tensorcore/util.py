"""Helpers for working with flat and nested values."""

from __future__ import annotations

import math
import numbers
from typing import Any, Callable, Iterable, List, Sequence

import numpy as np

from .dtypes import storage_type


def assert_true(condition: bool, message: Callable[[], str]) -> None:
    """Raise a ValueError built from `message` when `condition` fails."""
    if not condition:
        raise ValueError(message())


def is_nested(values: Any) -> bool:
    """True for lists, tuples and numpy arrays."""
    return isinstance(values, (list, tuple, np.ndarray))


def is_number(value: Any) -> bool:
    """True for Python/numpy numbers and bools."""
    return isinstance(value, (numbers.Number, np.generic)) and not isinstance(
        value, (str, bytes)
    )


def flatten(values: Any) -> List[Any]:
    """Flatten nested lists, tuples and arrays depth first.

    Args:
    ----
        values: nested data

    Returns:
    -------
        The leaves in order.

    """
    if isinstance(values, np.ndarray):
        return values.ravel().tolist()
    if isinstance(values, (list, tuple)):
        return [y for x in values for y in flatten(x)]
    return [values]


def size_from_shape(shape: Iterable[int]) -> int:
    """Number of elements in a tensor of `shape`."""
    size = 1
    for dim in shape:
        size *= int(dim)
    return size


def compute_strides(shape: Sequence[int]) -> tuple:
    """Row-major strides for `shape`."""
    strides = []
    offset = 1
    for dim in reversed(shape):
        strides.append(offset)
        offset *= int(dim)
    return tuple(reversed(strides))


def _to_int32(value: Any) -> int:
    if isinstance(value, numbers.Integral):
        value = int(value)
    else:
        value = float(value)
        if not math.isfinite(value):
            return 0
        value = int(value)
    return (value + 2**31) % 2**32 - 2**31


def to_typed_array(values: Any, dtype: str, debug: bool = False) -> np.ndarray:
    """Flatten `values` into a 1-D buffer of the storage type for `dtype`.

    int32 truncates toward zero, wraps modulo 2**32 and maps NaN and
    infinities to 0. bool maps any nonzero value to 1.

    Args:
    ----
        values: nested data or a number
        dtype: target dtype
        debug: when set, float32 data is checked for NaN/Infinity

    Returns:
    -------
        Flat numpy array.

    """
    flat = flatten(values)
    if dtype == "int32":
        return np.array([_to_int32(v) for v in flat], dtype=storage_type(dtype))
    if dtype == "bool":
        return np.array([1 if v else 0 for v in flat], dtype=storage_type(dtype))
    buf = np.array(flat, dtype=storage_type(dtype))
    if debug:
        check_conversion_for_errors(buf, dtype)
    return buf


def check_conversion_for_errors(vals: np.ndarray, dtype: str) -> None:
    """Raise if `vals` holds NaN or an infinity."""
    bad = ~np.isfinite(vals)
    if bad.any():
        num = vals[np.argmax(bad)]
        raise ValueError(f"A tensor of type {dtype} being uploaded contains {num}.")


def to_nested(flat: Sequence[Any], shape: Sequence[int]) -> Any:
    """Inverse of `flatten` for a known shape."""
    if len(shape) == 0:
        return flat[0]
    if len(shape) == 1:
        return list(flat[: shape[0]])
    step = size_from_shape(shape[1:])
    return [
        to_nested(flat[i * step : (i + 1) * step], shape[1:]) for i in range(shape[0])
    ]
