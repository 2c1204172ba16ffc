"""Tests for dot-path access into nested structures."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

import pytest

from rkutils.errors import InvalidArgumentError
from rkutils.paths import (
    Shape,
    get_value_by_path,
    has_key_by_path,
    put_into_bucket,
    set_value_by_path,
    shape_of,
    split_path,
)


class TestShapeOf:
    """Classification of values into structural shapes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, Shape.ABSENT),
            ({}, Shape.MAPPING),
            (MappingProxyType({"a": 1}), Shape.MAPPING),
            ([], Shape.SEQUENCE),
            ((1, 2), Shape.SEQUENCE),
            ("text", Shape.SCALAR),
            (b"raw", Shape.SCALAR),
            (0, Shape.SCALAR),
            (False, Shape.SCALAR),
        ],
    )
    def test_shape(self, value: Any, expected: Shape) -> None:
        assert shape_of(value) is expected


class TestSplitPath:
    def test_string_is_split_on_dots(self) -> None:
        assert split_path("a.b.c") == ["a", "b", "c"]

    def test_sequence_is_copied(self) -> None:
        segments = ["a", 0]
        result = split_path(segments)
        result.pop()
        assert segments == ["a", 0]


class TestGetValueByPath:
    """Tests for get_value_by_path()."""

    def test_none_collection_returns_default(self) -> None:
        assert get_value_by_path(None, "any", 1) == 1

    def test_empty_path_returns_default(self) -> None:
        assert get_value_by_path({"abc": "def"}, "", 1) == 1

    def test_segment_sequence(self) -> None:
        assert get_value_by_path({"abc": {"def": "ok"}}, ["abc", "def"]) == "ok"

    def test_deeply_nested_values(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.kol2.k1") == 100
        assert get_value_by_path(nested, "kol1.kol2.k2") == 200
        assert get_value_by_path(nested, "kol1.kol2.k3", 300) == 300

    @pytest.mark.parametrize(
        ("path", "expected"),
        [("kol1.kol2.zero", 0), ("kol1.kol2.off", False), ("kol1.kol2.blank", "")],
    )
    def test_falsy_values_are_returned_as_found(
        self, nested: dict[str, Any], path: str, expected: Any
    ) -> None:
        """A found falsy value must not be replaced by the default."""
        result = get_value_by_path(nested, path, "default")
        assert result == expected
        assert type(result) is type(expected)

    def test_none_value_counts_as_absent(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.kol2.nothing", "default") == "default"

    def test_missing_intermediate_returns_default(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.missing.k1", "default") == "default"

    def test_list_index_by_digit_string(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.items.1.id") == "b"

    def test_list_index_by_int_segment(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, ["kol1", "items", 0, "id"]) == "a"

    def test_list_index_out_of_range(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.items.5.id", "none") == "none"

    def test_non_numeric_segment_on_list(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.items.first", "none") == "none"

    def test_scalar_in_the_middle(self, nested: dict[str, Any]) -> None:
        assert get_value_by_path(nested, "kol1.kol2.k1.deeper", "none") == "none"

    def test_int_segment_falls_back_to_string_key(self) -> None:
        assert get_value_by_path({"1": "one"}, [1]) == "one"

    def test_never_raises_on_scalar_collection(self) -> None:
        assert get_value_by_path(42, "a.b", "default") == "default"

    def test_non_ascii_digit_segment_on_list(self) -> None:
        assert get_value_by_path({"a": [1, 2]}, "a.²", "d") == "d"


class TestSetValueByPath:
    """Tests for set_value_by_path()."""

    def test_creates_missing_intermediate_mappings(self) -> None:
        obj: dict[str, Any] = {}
        set_value_by_path(obj, "kol1.kol2.k1", 100)
        assert obj == {"kol1": {"kol2": {"k1": 100}}}

    def test_keeps_sibling_keys(self) -> None:
        obj: dict[str, Any] = {"kol1": {"other": 1}, "top": True}
        set_value_by_path(obj, "kol1.kol2.k1", 100)
        assert obj == {"kol1": {"other": 1, "kol2": {"k1": 100}}, "top": True}

    def test_overwrites_leaf(self, nested: dict[str, Any]) -> None:
        set_value_by_path(nested, "kol1.kol2.k1", "new")
        assert nested["kol1"]["kol2"]["k1"] == "new"

    def test_replaces_none_intermediate(self) -> None:
        obj: dict[str, Any] = {"a": None}
        set_value_by_path(obj, "a.b", 1)
        assert obj == {"a": {"b": 1}}

    def test_segment_sequence(self) -> None:
        obj: dict[str, Any] = {}
        set_value_by_path(obj, ["a.b", "c"], 1)
        assert obj == {"a.b": {"c": 1}}

    def test_assigns_into_list(self, nested: dict[str, Any]) -> None:
        set_value_by_path(nested, "kol1.items.0.id", "z")
        assert nested["kol1"]["items"][0]["id"] == "z"

    def test_appends_at_list_end(self) -> None:
        obj: dict[str, Any] = {"list": [1]}
        set_value_by_path(obj, "list.1", 2)
        assert obj["list"] == [1, 2]

    def test_list_index_past_end_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({"list": [1]}, "list.5", 2)

    def test_non_ascii_digit_index_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({"list": [1]}, "list.²", 2)

    def test_negative_index_before_start_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({"list": [1]}, ["list", -3], 2)

    def test_missing_list_slot_as_intermediate_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({"list": []}, "list.0.name", "x")

    def test_descending_into_scalar_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({"a": 5}, "a.b", 1)

    @pytest.mark.parametrize("collection", [None, 5, "text", (1, 2), MappingProxyType({})])
    def test_invalid_collection_raises(self, collection: Any) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            set_value_by_path(collection, "a", 1)
        assert exc_info.value.code == "INVALID_ARGUMENT"

    def test_empty_path_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            set_value_by_path({}, "", 1)

    @pytest.mark.parametrize("value", [0, False, "", None, [], {"x": 1}])
    def test_round_trip(self, value: Any) -> None:
        obj: dict[str, Any] = {}
        set_value_by_path(obj, "a.b.c", value)
        assert has_key_by_path(obj, "a.b.c") is True
        if value is None:
            assert get_value_by_path(obj, "a.b.c", "default") == "default"
        else:
            assert get_value_by_path(obj, "a.b.c") == value


class TestHasKeyByPath:
    """Tests for has_key_by_path()."""

    def test_none_collection(self) -> None:
        assert has_key_by_path(None, "a") is False

    def test_empty_path(self) -> None:
        assert has_key_by_path({"": 1}, "") is False

    def test_existing_key(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.kol2.k1") is True

    def test_existence_not_truthiness(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.kol2.zero") is True
        assert has_key_by_path(nested, "kol1.kol2.nothing") is True

    def test_missing_leaf(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.kol2.k3") is False

    def test_missing_intermediate(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.nope.k1") is False

    def test_list_index(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.items.1") is True
        assert has_key_by_path(nested, "kol1.items.2") is False

    def test_non_ascii_digit_segment(self) -> None:
        assert has_key_by_path({"a": [1, 2]}, "a.²") is False

    def test_scalar_parent(self, nested: dict[str, Any]) -> None:
        assert has_key_by_path(nested, "kol1.kol2.k1.x") is False


class TestPutIntoBucket:
    """Tests for put_into_bucket()."""

    def test_original_bucket_scenario(self) -> None:
        obj: dict[str, Any] = {"k1": [1], "k2": {"k22": 2}}

        bucket1 = put_into_bucket(obj, "k1", 10)
        bucket2 = put_into_bucket(obj, "k2.k22", 20)
        bucket3 = put_into_bucket(obj, "k3", 3)
        put_into_bucket(obj, "k3", 30)

        assert bucket1 == [1, 10]
        assert bucket2 == [2, 20]
        assert bucket3 == [3, 30]
        assert obj["k2"]["k22"] is bucket2

    def test_grows_in_call_order(self) -> None:
        obj: dict[str, Any] = {}
        for value in ("a", "b", "c"):
            put_into_bucket(obj, "x.y", value)
        assert obj == {"x": {"y": ["a", "b", "c"]}}

    def test_existing_list_is_mutated_in_place(self) -> None:
        existing = [1]
        obj = {"k": existing}
        bucket = put_into_bucket(obj, "k", 2)
        assert bucket is existing
        assert existing == [1, 2]

    def test_flatten_onto_existing_list(self) -> None:
        obj = {"k": ["a"]}
        assert put_into_bucket(obj, "k", ["x", "y"], flatten=True) == ["a", "x", "y"]
        assert obj["k"] == ["a", "x", "y"]

    def test_without_flatten_list_is_one_element(self) -> None:
        obj = {"k": ["a"]}
        assert put_into_bucket(obj, "k", ["x", "y"]) == ["a", ["x", "y"]]

    def test_flatten_into_missing_bucket_copies(self) -> None:
        obj: dict[str, Any] = {}
        value = ["x", "y"]
        bucket = put_into_bucket(obj, "k", value, flatten=True)
        assert bucket == ["x", "y"]
        assert bucket is not value

    def test_flatten_onto_scalar(self) -> None:
        obj = {"k": "a"}
        assert put_into_bucket(obj, "k", ("x", "y"), flatten=True) == ["a", "x", "y"]

    def test_mapping_value_is_widened(self) -> None:
        obj = {"k": {"id": 1}}
        assert put_into_bucket(obj, "k", {"id": 2}) == [{"id": 1}, {"id": 2}]

    def test_tuple_bucket_becomes_list(self) -> None:
        obj = {"k": ("a",)}
        assert put_into_bucket(obj, "k", "b") == ["a", "b"]
        assert obj["k"] == ["a", "b"]

    def test_falsy_scalar_is_kept(self) -> None:
        obj = {"k": 0}
        assert put_into_bucket(obj, "k", 1) == [0, 1]
