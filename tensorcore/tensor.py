"""Implementation of the core Tensor object."""

from __future__ import annotations

import itertools
import logging
from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from . import util
from .dtypes import check_dtype, storage_type

logger = logging.getLogger(__name__)

Shape = Tuple[int, ...]
UserShape = Sequence[int]
UserIndex = Sequence[int]

_next_id = itertools.count()


class Tensor:
    """A shaped, typed handle over a flat buffer of values.

    Tensors are compared and hashed by identity, so they can be used as
    dictionary keys and in identity based membership checks.
    """

    def __init__(self, values: np.ndarray, shape: UserShape, dtype: str) -> None:
        check_dtype(dtype)
        shape = tuple(int(d) for d in shape)
        values = np.asarray(values, dtype=storage_type(dtype)).reshape(-1)
        if values.size != util.size_from_shape(shape):
            raise ValueError(
                f"Based on the provided shape, {list(shape)}, the tensor should "
                f"have {util.size_from_shape(shape)} values but has {values.size}"
            )
        self._values = values
        self._shape: Shape = shape
        self._strides = util.compute_strides(shape)
        self.dtype = dtype
        self.id = next(_next_id)
        self.is_disposed = False

    @staticmethod
    def make(
        values: Union[np.ndarray, List[Any]], shape: UserShape, dtype: str = "float32"
    ) -> Tensor:
        """Create a tensor from a flat list or buffer of values."""
        return Tensor(np.asarray(values), shape, dtype)

    @property
    def shape(self) -> Shape:  # noqa: D102
        return self._shape

    @property
    def rank(self) -> int:  # noqa: D102
        return len(self._shape)

    @property
    def size(self) -> int:  # noqa: D102
        return util.size_from_shape(self._shape)

    @property
    def strides(self) -> Shape:  # noqa: D102
        return self._strides

    def _throw_if_disposed(self) -> None:
        if self.is_disposed:
            raise RuntimeError("Tensor is disposed.")

    def index(self, locs: UserIndex) -> int:
        """Flat position of the element at `locs`.

        Args:
        ----
            locs: one index per dimension

        Returns:
        -------
            Position in the flat buffer.

        """
        if len(locs) != self.rank:
            raise IndexError(
                f"Index {list(locs)} must have {self.rank} entries for shape {list(self.shape)}"
            )
        pos = 0
        for i, (loc, dim) in enumerate(zip(locs, self._shape)):
            if loc < 0 or loc >= dim:
                raise IndexError(f"Index {loc} out of range for dimension {i} of size {dim}")
            pos += loc * self._strides[i]
        return pos

    def get(self, *locs: int) -> Union[int, float]:
        """Read one element as a Python number.

        With no arguments the tensor must hold a single value.
        """
        self._throw_if_disposed()
        if len(locs) == 0:
            if self.size != 1:
                raise ValueError(
                    f"get() with no index needs a single element tensor, got shape {list(self.shape)}"
                )
            return self._values[0].item()
        return self._values[self.index(locs)].item()

    def item(self) -> Union[int, float]:
        """Value of a single element tensor."""
        return self.get()

    def data_sync(self) -> np.ndarray:
        """Copy of the flat values."""
        self._throw_if_disposed()
        return self._values.copy()

    def array(self) -> Any:
        """Values as nested Python lists."""
        self._throw_if_disposed()
        return util.to_nested(self._values.tolist(), self._shape)

    def to_numpy(self) -> np.ndarray:
        """Values as a shaped numpy array."""
        return self.data_sync().reshape(self._shape)

    def cast(self, dtype: str) -> Tensor:
        """Convert to another dtype. Same dtype returns self."""
        self._throw_if_disposed()
        check_dtype(dtype)
        if dtype == self.dtype:
            return self
        values = util.to_typed_array(self._values, dtype)
        return Tensor(values, self._shape, dtype)

    def reshape(self, shape: UserShape) -> Tensor:
        """New tensor over the same values with a different shape."""
        self._throw_if_disposed()
        shape = tuple(shape)
        if util.size_from_shape(shape) != self.size:
            raise ValueError(
                f"Size({self.size}) must match the product of shape {list(shape)}"
            )
        return Tensor(self._values, shape, self.dtype)

    def dispose(self) -> None:
        """Release the values. Further reads raise."""
        if self.is_disposed:
            return
        logger.debug("Disposing tensor %d", self.id)
        self.is_disposed = True
        self._values = np.empty(0, dtype=storage_type(self.dtype))

    def __repr__(self) -> str:
        if self.is_disposed:
            return f"Tensor(id={self.id}, disposed)"
        return f"Tensor({self.array()!r}, shape={list(self.shape)}, dtype={self.dtype})"

    __str__ = __repr__


def is_tensor(x: Any) -> bool:  # noqa: D103
    return isinstance(x, Tensor)
