"""String helpers: interpolation, case conversion, quoting."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from rkutils.errors import InvalidArgumentError
from rkutils.paths import get_value_by_path, has_key_by_path

__all__ = [
    "template",
    "replace_all",
    "pascal_case",
    "quote",
    "is_quoted",
    "is_wrapped_with",
    "bin_to_hex",
    "drop_right_if_ends_with",
    "drop_left_if_starts_with",
]

_INTERPOLATE = re.compile(r"{{([\s\S]+?)}}")

# acronyms, capitalised or lower-case words, digit runs
_WORDS = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


def template(text: str, values: Mapping[str, Any]) -> str:
    """Interpolate ``{{ path }}`` placeholders with values looked up by dot path.

    Only the ``{{ }}`` delimiter is recognised; any other markup is left as-is.

    Raises:
        InvalidArgumentError: If a placeholder names a path missing from
            ``values``.
    """

    def replace(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if not has_key_by_path(values, key):
            raise InvalidArgumentError(f"'{key}' is not defined", argument="values")
        value = get_value_by_path(values, key)
        return "" if value is None else str(value)

    return _INTERPOLATE.sub(replace, text)


def replace_all(text: str, search: str, replacement: str) -> str:
    """Replace every occurrence of ``search``."""
    return replacement.join(text.split(search))


def pascal_case(text: str) -> str:
    """Convert to PascalCase, e.g. ``"--foo-bar--"`` -> ``"FooBar"``."""
    return "".join(word.capitalize() for word in _WORDS.findall(text))


def quote(text: str, quote_char: str = '"') -> str:
    """Wrap in ``quote_char``, escaping inner occurrences with a backslash."""
    return quote_char + replace_all(text, quote_char, "\\" + quote_char) + quote_char


def is_quoted(text: str) -> bool:
    """True when wrapped in matching single or double quotes."""
    return text.startswith(("'", '"')) and text[0] == text[-1]


def is_wrapped_with(text: str, char: str) -> bool:
    return bool(text) and text.startswith(char) and text[0] == text[-1]


def bin_to_hex(data: bytes | str) -> str:
    """Hex dump of each decoded character, like ``0x7F``."""
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8", errors="replace")
    return "0x" + "".join(format(ord(ch), "x") for ch in data)


def drop_right_if_ends_with(text: str, right: str) -> str:
    if right and text.endswith(right):
        return text[: -len(right)]
    return text


def drop_left_if_starts_with(text: str, left: str) -> str:
    if text.startswith(left):
        return text[len(left) :]
    return text
