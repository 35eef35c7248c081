"""Helpers for constructing tensors."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

from .dtypes import check_dtype, infer_dtype
from .environment import env
from .tensor import Tensor
from .tensor_util_env import infer_shape, non_numeric_type
from .util import flatten, is_number, size_from_shape, to_typed_array

if TYPE_CHECKING:
    from typing import Any, List

    from .tensor import UserShape


def zeros(shape: UserShape, dtype: str = "float32") -> Tensor:
    """Produce a zero tensor of size `shape`.

    Args:
    ----
        shape : shape of tensor
        dtype : element type

    Returns:
    -------
        new tensor

    """
    return Tensor.make([0] * size_from_shape(shape), shape, dtype=dtype)


def ones(shape: UserShape, dtype: str = "float32") -> Tensor:
    """Produce a ones tensor of size `shape`.

    Args:
    ----
        shape : shape of tensor
        dtype : element type

    Returns:
    -------
        new tensor

    """
    return Tensor.make([1] * size_from_shape(shape), shape, dtype=dtype)


def rand(shape: UserShape, dtype: str = "float32") -> Tensor:
    """Produce a random tensor of size `shape`.

    Values are drawn uniformly from [0, 1). Under int32 they all truncate
    to 0, under bool they are all 1.

    Args:
    ----
        shape : shape of tensor
        dtype : element type

    Returns:
    -------
        :class:`Tensor` : new tensor

    """
    vals = [random.random() for _ in range(size_from_shape(shape))]
    return _tensor(vals, shape, dtype)


def _tensor(ls: Any, shape: UserShape, dtype: str) -> Tensor:
    """Produce a tensor with data ls and shape `shape`.

    Args:
    ----
        ls: data for tensor (nested or flat)
        shape: shape of tensor
        dtype: element type

    Returns:
    -------
        new tensor

    """
    values = to_typed_array(ls, dtype, env().get_bool("DEBUG"))
    return Tensor(values, shape, dtype)


def tensor(
    ls: Any, shape: Optional[UserShape] = None, dtype: Optional[str] = None
) -> Tensor:
    """Produce a tensor with data and shape from ls

    Args:
    ----
        ls: data for tensor
        shape: shape of tensor, inferred from `ls` when None
        dtype: element type, inferred from `ls` when None

    Returns:
    -------
        :class:`Tensor` : new tensor

    """
    bad = non_numeric_type(ls)
    if bad is not None:
        raise TypeError(
            f"tensor() expects numbers, nested lists or arrays, got {bad.__name__}"
        )
    dtype = check_dtype(dtype) if dtype is not None else infer_dtype(ls)
    if shape is None:
        return _tensor(ls, infer_shape(ls), dtype)
    shape = tuple(shape)
    count = len(flatten(ls))
    if count != size_from_shape(shape):
        raise ValueError(
            f"Based on the provided shape, {list(shape)}, the tensor should have "
            f"{size_from_shape(shape)} values but has {count}"
        )
    return _tensor(ls, shape, dtype)


def _make_ranked(ls: Any, rank: int, name: str, dtype: Optional[str]) -> Tensor:
    inferred = infer_shape(ls)
    if len(inferred) != rank:
        raise ValueError(
            f"{name}() requires values of rank {rank}, but got rank {len(inferred)}"
        )
    return tensor(ls, dtype=dtype)


def scalar(value: Any, dtype: Optional[str] = None) -> Tensor:
    """Produce a rank-0 tensor holding `value`."""
    if not is_number(value):
        raise TypeError(
            f"scalar() requires a number or bool, got {type(value).__name__}"
        )
    return tensor(value, dtype=dtype)


def tensor1d(values: List[Any], dtype: Optional[str] = None) -> Tensor:  # noqa: D103
    return _make_ranked(values, 1, "tensor1d", dtype)


def tensor2d(values: List[Any], dtype: Optional[str] = None) -> Tensor:  # noqa: D103
    return _make_ranked(values, 2, "tensor2d", dtype)


def tensor3d(values: List[Any], dtype: Optional[str] = None) -> Tensor:  # noqa: D103
    return _make_ranked(values, 3, "tensor3d", dtype)


def tensor4d(values: List[Any], dtype: Optional[str] = None) -> Tensor:  # noqa: D103
    return _make_ranked(values, 4, "tensor4d", dtype)
