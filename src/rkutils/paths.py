"""Dot-separated path access into nested mappings and sequences.

A key path is either a string such as ``"settings.db.hosts.0"`` or an explicit
sequence of segments such as ``["settings", "db", "hosts", 0]``. Integer
segments (or decimal-digit strings) index into lists.

All writers mutate the caller's structure in place; nothing is copied.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, Union

from rkutils.errors import InvalidArgumentError

__all__ = [
    "KeyPath",
    "Shape",
    "shape_of",
    "split_path",
    "get_value_by_path",
    "set_value_by_path",
    "has_key_by_path",
    "put_into_bucket",
]

KeyPath = Union[str, Sequence[Union[str, int]]]

_TEXT_TYPES = (str, bytes, bytearray)

_MISSING = object()


class Shape(enum.Enum):
    """Structural category of a value inside a nested structure."""

    ABSENT = "absent"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SCALAR = "scalar"


def shape_of(value: Any) -> Shape:
    """Classify a value. Strings and bytes are scalars, not sequences."""
    if value is None:
        return Shape.ABSENT
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES):
        return Shape.SEQUENCE
    return Shape.SCALAR


def split_path(key_path: KeyPath) -> list[str | int]:
    """Return the segments of a key path as a new list."""
    if isinstance(key_path, str):
        return list(key_path.split("."))
    return list(key_path)


def _is_empty_path(key_path: KeyPath) -> bool:
    if isinstance(key_path, str):
        return key_path == ""
    return len(key_path) == 0


def _as_index(segment: str | int) -> int | None:
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment
    if isinstance(segment, str) and segment.isascii() and segment.isdigit():
        return int(segment)
    return None


def _child(node: Any, segment: str | int) -> Any:
    """Index one level down, returning _MISSING when there is nothing there."""
    shape = shape_of(node)
    if shape is Shape.MAPPING:
        if segment in node:
            return node[segment]
        if isinstance(segment, int) and str(segment) in node:
            return node[str(segment)]
        return _MISSING
    elif shape is Shape.SEQUENCE:
        index = _as_index(segment)
        if index is None or not -len(node) <= index < len(node):
            return _MISSING
        return node[index]
    elif shape is Shape.SCALAR or shape is Shape.ABSENT:
        return _MISSING
    else:
        raise AssertionError(f"Unhandled shape: {shape}")


def _walk(collection: Any, segments: list[str | int]) -> Any:
    """Follow segments from collection; returns None as soon as a level is absent."""
    value = collection
    for segment in segments:
        value = _child(value, segment)
        if value is _MISSING or value is None:
            return None
    return value


def get_value_by_path(collection: Any, key_path: KeyPath, default: Any = None) -> Any:
    """Get a value by dot-separated path from a nested collection.

    Args:
        collection: The nested structure to read. None yields ``default``.
        key_path: A dot-separated path, e.g. ``"settings.xxx.yyy"``, or a
            sequence of segments.
        default: Returned when the path does not resolve to a value.

    Returns:
        The value at the path. Falsy values such as ``0``, ``False`` or ``""``
        are returned as found; only a missing or None value is replaced by
        ``default``.
    """
    if collection is None or _is_empty_path(key_path):
        return default

    value = _walk(collection, split_path(key_path))
    return default if value is None else value


def set_value_by_path(collection: Any, key_path: KeyPath, value: Any) -> None:
    """Set a value by dot-separated path, creating missing intermediate mappings.

    Raises:
        InvalidArgumentError: If ``collection`` is not a mutable mapping or
            sequence, if the path is empty, or if an intermediate segment
            cannot be descended into.
    """
    if not isinstance(collection, (MutableMapping, MutableSequence)) or isinstance(
        collection, bytearray
    ):
        raise InvalidArgumentError("Invalid collection object.", argument="collection")
    if _is_empty_path(key_path):
        raise InvalidArgumentError("Key path must not be empty.", argument="key_path")

    nodes = split_path(key_path)
    last_key = nodes.pop()
    last_node = collection

    for key in nodes:
        child = _child(last_node, key)
        if child is _MISSING or child is None:
            if shape_of(last_node) is not Shape.MAPPING:
                raise InvalidArgumentError(
                    f"Cannot create '{key}' inside a sequence.", argument="key_path"
                )
            child = last_node[key] = {}
        elif shape_of(child) is Shape.SCALAR:
            raise InvalidArgumentError(
                f"Cannot descend into scalar value at '{key}'.", argument="key_path"
            )
        last_node = child

    _assign(last_node, last_key, value)


def _assign(node: Any, key: str | int, value: Any) -> None:
    shape = shape_of(node)
    if shape is Shape.MAPPING:
        if not isinstance(node, MutableMapping):
            raise InvalidArgumentError("Target mapping is read-only.", argument="collection")
        node[key] = value
    elif shape is Shape.SEQUENCE:
        index = _as_index(key)
        if (
            not isinstance(node, MutableSequence)
            or index is None
            or not -len(node) <= index <= len(node)
        ):
            raise InvalidArgumentError(
                f"Cannot assign index '{key}' on a sequence of length {len(node)}.",
                argument="key_path",
            )
        if index == len(node):
            node.append(value)
        else:
            node[index] = value
    elif shape is Shape.SCALAR or shape is Shape.ABSENT:
        raise InvalidArgumentError(f"Cannot assign '{key}' on a scalar value.", argument="key_path")
    else:
        raise AssertionError(f"Unhandled shape: {shape}")


def has_key_by_path(collection: Any, key_path: KeyPath) -> bool:
    """Check whether a key exists by dot-separated path.

    Existence, not truthiness, is tested: a key holding ``None`` or ``0``
    exists.
    """
    if collection is None or _is_empty_path(key_path):
        return False

    nodes = split_path(key_path)
    last_key = nodes.pop()
    parent = _walk(collection, nodes)

    if parent is None:
        return False
    return _child(parent, last_key) is not _MISSING


def _is_list_value(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def put_into_bucket(
    collection: Any,
    key_path: KeyPath,
    value: Any,
    flatten: bool = False,
) -> list[Any]:
    """Push a value into the list ("bucket") held at a path.

    A missing bucket is created as a one-element list, a scalar already at the
    path is widened into ``[existing, value]``, and an existing list is
    appended to in place.

    Args:
        collection: The nested structure to modify.
        key_path: Where the bucket lives.
        value: The value to add.
        flatten: When True and ``value`` is a list or tuple, add its elements
            instead of the value itself.

    Returns:
        The bucket list after insertion.
    """
    bucket = get_value_by_path(collection, key_path)
    spread = flatten and _is_list_value(value)
    shape = shape_of(bucket)

    if shape is Shape.SEQUENCE and isinstance(bucket, MutableSequence):
        if spread:
            bucket.extend(value)
        else:
            bucket.append(value)
        return bucket

    if shape is Shape.ABSENT:
        bucket = list(value) if spread else [value]
    elif shape is Shape.SEQUENCE:
        # read-only sequence such as a tuple: copy it into a new list
        bucket = [*bucket, *value] if spread else [*bucket, value]
    elif shape is Shape.MAPPING or shape is Shape.SCALAR:
        bucket = [bucket, *value] if spread else [bucket, value]
    else:
        raise AssertionError(f"Unhandled shape: {shape}")

    set_value_by_path(collection, key_path, bucket)
    return bucket
