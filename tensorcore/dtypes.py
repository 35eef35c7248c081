"""Element types understood by tensorcore tensors."""

from __future__ import annotations

from typing import Any, Dict, Literal

import numpy as np

DataType = Literal["float32", "int32", "bool"]

DTYPES = ("float32", "int32", "bool")

_STORAGE: Dict[str, Any] = {
    "float32": np.float32,
    "int32": np.int32,
    "bool": np.uint8,
}

# Widening order used when two dtypes meet.
_UPCAST_ORDER = {"bool": 0, "int32": 1, "float32": 2}


def check_dtype(dtype: str) -> str:
    """Validate a dtype name and return it.

    Args:
    ----
        dtype: name of the element type

    Returns:
    -------
        The same name.

    """
    if dtype not in _STORAGE:
        raise ValueError(
            f"Unknown dtype {dtype!r}, expected one of {', '.join(DTYPES)}"
        )
    return dtype


def storage_type(dtype: str) -> Any:
    """Numpy type used to hold values of `dtype`."""
    return _STORAGE[check_dtype(dtype)]


def upcast_type(a: str, b: str) -> str:
    """Return the wider of two dtypes (bool < int32 < float32).

    Args:
    ----
        a: first dtype
        b: second dtype

    Returns:
    -------
        The dtype both can be represented in.

    """
    check_dtype(a)
    check_dtype(b)
    return a if _UPCAST_ORDER[a] >= _UPCAST_ORDER[b] else b


def infer_dtype(values: Any) -> str:
    """Guess a dtype for `values`.

    Numpy arrays and numpy scalars keep their element kind. Python numbers,
    bools and nested lists default to float32.
    """
    if isinstance(values, (np.ndarray, np.generic)):
        kind = values.dtype.kind
        if kind == "b":
            return "bool"
        if kind in "iu":
            return "int32"
    return "float32"
