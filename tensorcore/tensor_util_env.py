"""Coercion of tensor-like values into tensors."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import numpy as np

from .dtypes import check_dtype, infer_dtype
from .environment import env
from .tensor import Shape, Tensor
from .util import assert_true, is_nested, is_number, to_typed_array

logger = logging.getLogger(__name__)


def infer_shape(val: Any) -> Shape:
    """Infer the shape of nested data.

    The shape follows the first element at every level. When the
    ``TENSORLIKE_CHECK_SHAPE_CONSISTENCY`` flag is on, every other element
    is checked against it.

    Args:
    ----
        val: a number, a nested list/tuple or a numpy array

    Returns:
    -------
        The inferred shape.

    """
    if isinstance(val, np.ndarray):
        return tuple(val.shape)
    if not isinstance(val, (list, tuple)):
        return ()
    shape: List[int] = []
    first_elem = val
    while is_nested(first_elem):
        shape.append(len(first_elem))
        if len(first_elem) == 0:
            break
        first_elem = first_elem[0]
    if env().get_bool("TENSORLIKE_CHECK_SHAPE_CONSISTENCY"):
        deep_assert_shape_consistency(val, shape, [])
    return tuple(shape)


def deep_assert_shape_consistency(
    val: Any, shape: Sequence[int], indices: List[int]
) -> None:
    """Check that `val` is a rectangular array of `shape`."""
    where = "][".join(str(i) for i in indices)
    if not is_nested(val):
        assert_true(
            len(shape) == 0,
            lambda: f"Element arr[{where}] is a primitive, "
            f"but should be an array of {shape[0]} elements",
        )
        return
    assert_true(
        len(shape) > 0,
        lambda: f"Element arr[{where}] should be a primitive, "
        f"but is an array of {len(val)} elements",
    )
    assert_true(
        len(val) == shape[0],
        lambda: f"Element arr[{where}] should have {shape[0]} elements, "
        f"but has {len(val)} elements",
    )
    sub_shape = shape[1:]
    for i, item in enumerate(val):
        deep_assert_shape_consistency(item, sub_shape, indices + [i])


def assert_dtype(
    expected_dtype: Optional[str], actual_dtype: str, arg_name: str, function_name: str
) -> None:
    """Raise when `actual_dtype` does not satisfy `expected_dtype`.

    ``None`` and ``"numeric"`` accept every dtype.
    """
    if expected_dtype is None or expected_dtype == "numeric":
        return
    if expected_dtype != actual_dtype:
        raise TypeError(
            f"Argument '{arg_name}' passed to '{function_name}' must be "
            f"{expected_dtype} tensor, but got {actual_dtype} tensor"
        )


def non_numeric_type(x: Any) -> Optional[type]:
    """Type of the first value in `x` that cannot be tensor data, else None.

    Numbers and bools are accepted, as are lists, tuples and numpy arrays
    holding only those. String, object and record arrays are rejected.
    """
    if isinstance(x, np.ndarray):
        return x.dtype.type if x.dtype.kind in "USOV" else None
    if isinstance(x, (list, tuple)):
        for item in x:
            bad = non_numeric_type(item)
            if bad is not None:
                return bad
        return None
    return None if is_number(x) else type(x)


def convert_to_tensor(
    x: Any, arg_name: str, function_name: str, dtype: Optional[str] = None
) -> Tensor:
    """Turn a tensor-like argument into a tensor.

    Tensors are returned unchanged, whatever `dtype` asks for. Numbers,
    bools, nested lists and numpy arrays become new tensors of the inferred
    shape. NaN becomes 0 when the dtype is int32.

    Args:
    ----
        x: the argument
        arg_name: name of the argument, used in error messages
        function_name: name of the calling op, used in error messages
        dtype: dtype to parse the values as (inferred when None or "numeric")

    Returns:
    -------
        :class:`Tensor`

    """
    if isinstance(x, Tensor):
        return x
    bad = non_numeric_type(x)
    if bad is not None:
        raise TypeError(
            f"Argument '{arg_name}' passed to '{function_name}' must be a Tensor "
            f"or TensorLike, but got {bad.__name__}"
        )
    if dtype is None or dtype == "numeric":
        dtype = infer_dtype(x)
    check_dtype(dtype)
    shape = infer_shape(x)
    values = to_typed_array(x, dtype, env().get_bool("DEBUG"))
    logger.debug(
        "Converted argument %r of %r to %s tensor of shape %s",
        arg_name,
        function_name,
        dtype,
        list(shape),
    )
    return Tensor(values, shape, dtype)


def convert_to_tensor_array(
    arg: Any, arg_name: str, function_name: str, dtype: Optional[str] = None
) -> List[Tensor]:
    """Convert each element of a list with :func:`convert_to_tensor`."""
    if not isinstance(arg, (list, tuple)):
        raise TypeError(
            f"Argument {arg_name} passed to {function_name} must be a "
            "`Tensor[]` or `TensorLike[]`"
        )
    return [
        convert_to_tensor(t, f"{arg_name}[{i}]", function_name, dtype)
        for i, t in enumerate(arg)
    ]
