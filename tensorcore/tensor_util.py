"""Utilities for lists, maps and nested containers of tensors."""

from __future__ import annotations

import dataclasses
import logging
import types
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, Tuple, Union

import numpy as np

from .dtypes import upcast_type
from .tensor import Tensor

logger = logging.getLogger(__name__)

NamedTensorMap = Dict[str, Tensor]


def make_types_match(a: Tensor, b: Tensor) -> Tuple[Tensor, Tensor]:
    """Cast `a` and `b` to a common dtype when they differ.

    Args:
    ----
        a: first tensor
        b: second tensor

    Returns:
    -------
        The pair, both of the upcast dtype.

    """
    if a.dtype == b.dtype:
        return a, b
    dtype = upcast_type(a.dtype, b.dtype)
    return a.cast(dtype), b.cast(dtype)


def assert_types_match(a: Tensor, b: Tensor) -> None:  # noqa: D103
    if a.dtype != b.dtype:
        raise TypeError(
            f"The dtypes of the first({a.dtype}) and second({b.dtype}) input must match"
        )


def is_tensor_in_list(tensor: Tensor, tensor_list: Iterable[Tensor]) -> bool:
    """True when `tensor` itself (not an equal copy) is in the list."""
    return any(x is tensor for x in tensor_list)


def flatten_name_array_map(
    name_array_map: Union[Tensor, Mapping[str, Tensor]], keys: Sequence[str]
) -> List[Tensor]:
    """List the tensors of `name_array_map` in the order given by `keys`.

    A bare tensor is returned as a one element list.
    """
    if isinstance(name_array_map, Tensor):
        return [name_array_map]
    return [name_array_map[key] for key in keys]


def unflatten_to_name_array_map(
    keys: Sequence[str], flat_arrays: Sequence[Tensor]
) -> NamedTensorMap:
    """Pair up `keys` and `flat_arrays` into a name to tensor dict."""
    if len(keys) != len(flat_arrays):
        raise ValueError(
            f"Got {len(keys)} names but {len(flat_arrays)} tensors to unflatten"
        )
    return dict(zip(keys, flat_arrays))


def get_tensors_in_container(container: Any) -> List[Tensor]:
    """Collect every tensor reachable from `container`.

    Mappings, lists, tuples, sets, dataclass instances and the attributes
    of other objects are walked depth first. Classes, modules and numpy
    arrays are leaves. Reference cycles are followed once, and a tensor
    that is reachable along several paths is collected once.

    Args:
    ----
        container: arbitrary nested data

    Returns:
    -------
        The tensors, in the order they were first reached.

    """
    result: List[Tensor] = []
    walk_tensor_container(container, result, {id(container)})
    logger.debug("Found %d tensors in container", len(result))
    return result


def _children(container: Any) -> Iterable[Any]:
    if isinstance(container, Mapping):
        return container.values()
    if isinstance(container, (list, tuple, set, frozenset)):
        return container
    if isinstance(container, (type, types.ModuleType, np.ndarray)):
        return ()
    if dataclasses.is_dataclass(container):
        return [getattr(container, f.name) for f in dataclasses.fields(container)]
    if hasattr(container, "__dict__"):
        return list(vars(container).values())
    return ()


def walk_tensor_container(container: Any, out: List[Tensor], walked: Set[int]) -> None:
    """Append the tensors under `container` to `out`.

    Args:
    ----
        container: node to walk
        out: collected tensors
        walked: ids of every node already visited

    """
    if container is None:
        return
    if isinstance(container, Tensor):
        out.append(container)
        return
    for val in _children(container):
        if id(val) in walked:
            continue
        walked.add(id(val))
        walk_tensor_container(val, out, walked)
