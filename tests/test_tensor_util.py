from dataclasses import dataclass

import pytest

import tensorcore as tc
from tensorcore.tensor_util import (
    assert_types_match,
    flatten_name_array_map,
    get_tensors_in_container,
    is_tensor_in_list,
    make_types_match,
    unflatten_to_name_array_map,
    walk_tensor_container,
)


def test_is_tensor_in_list_not_in_list():
    a = tc.scalar(1)
    tensors = [tc.scalar(1), tc.tensor1d([1, 2, 3])]

    assert is_tensor_in_list(a, tensors) is False


def test_is_tensor_in_list_in_list():
    a = tc.scalar(1)
    tensors = [tc.scalar(2), tc.tensor1d([1, 2, 3]), a]

    assert is_tensor_in_list(a, tensors) is True


def test_flatten_name_array_map():
    a = tc.scalar(1)
    b = tc.scalar(3)
    c = tc.tensor1d([1, 2, 3])

    named = {"a": a, "b": b, "c": c}
    result = flatten_name_array_map(named, list(named.keys()))

    assert len(result) == 3
    assert all(x is y for x, y in zip(result, [a, b, c]))


def test_flatten_name_array_map_follows_key_order():
    a = tc.scalar(1)
    b = tc.scalar(3)

    result = flatten_name_array_map({"a": a, "b": b}, ["b", "a"])

    assert result[0] is b
    assert result[1] is a


def test_flatten_name_array_map_bare_tensor():
    a = tc.scalar(1)

    result = flatten_name_array_map(a, [])

    assert len(result) == 1
    assert result[0] is a


def test_flatten_name_array_map_missing_key():
    with pytest.raises(KeyError):
        flatten_name_array_map({"a": tc.scalar(1)}, ["a", "b"])


def test_unflatten_to_name_array_map():
    a = tc.scalar(1)
    b = tc.scalar(3)
    c = tc.tensor1d([1, 2, 3])

    result = unflatten_to_name_array_map(["a", "b", "c"], [a, b, c])

    assert list(result.keys()) == ["a", "b", "c"]
    assert result["a"] is a
    assert result["b"] is b
    assert result["c"] is c


def test_unflatten_to_name_array_map_length_mismatch():
    with pytest.raises(ValueError, match="2 names but 1 tensors"):
        unflatten_to_name_array_map(["a", "b"], [tc.scalar(1)])


def test_get_tensors_in_container_none():
    assert get_tensors_in_container(None) == []


def test_get_tensors_in_container_tensor():
    x = tc.scalar(1)

    results = get_tensors_in_container(x)

    assert len(results) == 1
    assert results[0] is x


def test_get_tensors_in_container_name_tensor_map():
    x1 = tc.scalar(1)
    x2 = tc.scalar(3)
    x3 = tc.scalar(4)

    results = get_tensors_in_container({"x1": x1, "x2": x2, "x3": x3})

    assert len(results) == 3
    assert all(r is e for r, e in zip(results, [x1, x2, x3]))


def test_get_tensors_in_container_arbitrary_depth():
    container = [
        {"x": tc.scalar(1), "y": tc.scalar(2)},
        [[[tc.scalar(3)]], {"z": tc.scalar(4)}],
    ]

    results = get_tensors_in_container(container)

    assert len(results) == 4
    assert [t.get() for t in results] == [1, 2, 3, 4]


def test_get_tensors_in_container_with_loops():
    container = [tc.scalar(1), tc.scalar(2), [tc.scalar(3)]]
    inner_container = [container]
    container.append(inner_container)

    results = get_tensors_in_container(container)

    assert len(results) == 3


def test_get_tensors_in_container_self_referencing_dict():
    x = tc.scalar(1)
    container = {"x": x}
    container["self"] = container

    results = get_tensors_in_container(container)

    assert len(results) == 1
    assert results[0] is x


def test_get_tensors_in_container_same_tensor_twice():
    x = tc.scalar(1)

    results = get_tensors_in_container([x, {"again": x}, (x,)])

    assert len(results) == 1


def test_get_tensors_in_container_skips_leaves():
    x = tc.scalar(1)

    results = get_tensors_in_container([1, "str", 2.5, None, x, b"raw"])

    assert len(results) == 1
    assert results[0] is x


def test_get_tensors_in_container_tuples_and_sets():
    x = tc.scalar(1)
    y = tc.scalar(2)

    results = get_tensors_in_container((x, frozenset([y])))

    assert len(results) == 2


def test_get_tensors_in_container_dataclass():
    @dataclass
    class Batch:
        inputs: tc.Tensor
        labels: tc.Tensor
        name: str

    x = tc.tensor2d([[1, 2], [3, 4]])
    y = tc.tensor1d([0, 1])

    results = get_tensors_in_container({"batch": Batch(x, y, "train")})

    assert len(results) == 2
    assert results[0] is x
    assert results[1] is y


def test_walk_tensor_container_shares_walked_set():
    x = tc.scalar(1)
    y = tc.scalar(2)
    out = []
    walked = set()

    walk_tensor_container([x], out, walked)
    walk_tensor_container([x, y], out, walked)

    assert len(out) == 2
    assert out[1] is y


def test_make_types_match_same_dtype_returns_inputs():
    a = tc.scalar(1, "int32")
    b = tc.scalar(2, "int32")

    a2, b2 = make_types_match(a, b)

    assert a2 is a
    assert b2 is b


def test_make_types_match_upcasts():
    a = tc.scalar(1, "int32")
    b = tc.scalar(2.5)

    a2, b2 = make_types_match(a, b)

    assert a2.dtype == "float32"
    assert b2.dtype == "float32"
    assert b2 is b
    assert a2.get() == 1.0


def test_make_types_match_bool_and_int():
    a = tc.scalar(True, "bool")
    b = tc.scalar(3, "int32")

    a2, b2 = make_types_match(a, b)

    assert a2.dtype == "int32"
    assert b2.dtype == "int32"


def test_assert_types_match():
    assert_types_match(tc.scalar(1), tc.scalar(2))
    with pytest.raises(
        TypeError, match=r"The dtypes of the first\(int32\) and second\(float32\)"
    ):
        assert_types_match(tc.scalar(1, "int32"), tc.scalar(2))


class Holder:
    def __init__(self, value, label="holder"):
        self.value = value
        self.label = label


def test_get_tensors_in_container_object_attributes():
    x = tc.scalar(1)
    y = tc.scalar(2)

    results = get_tensors_in_container([Holder(x), Holder({"inner": Holder(y)})])

    assert len(results) == 2
    assert results[0] is x
    assert results[1] is y


def test_get_tensors_in_container_object_cycle():
    x = tc.scalar(1)
    holder = Holder(x)
    holder.label = holder

    results = get_tensors_in_container(holder)

    assert len(results) == 1
    assert results[0] is x


def test_get_tensors_in_container_skips_classes_and_arrays():
    import numpy as np

    results = get_tensors_in_container([Holder, np.zeros(3), tc])

    assert results == []


def test_get_tensors_in_container_marks_root_walked():
    x = tc.scalar(1)
    container = [x]
    container.append([container])
    walked = {id(container)}
    out = []

    walk_tensor_container(container, out, walked)

    assert len(out) == 1
    assert id(container) in walked
    assert get_tensors_in_container(container) == [x]
