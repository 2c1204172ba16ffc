"""URL and slash-delimited path helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

__all__ = [
    "url_append_query",
    "url_join",
    "trim_left_slash",
    "trim_right_slash",
    "ensure_left_slash",
    "ensure_right_slash",
]


def url_append_query(url: str, query: str | Mapping[str, Any] | None = None) -> str:
    """Merge query parameters into a url.

    Args:
        url: Original url.
        query: A raw query string, or key-value pairs to url-encode. Mapping
            values override parameters already present in ``url``.

    Returns:
        The url with the query applied.
    """
    if not query:
        return url

    if "?" not in url:
        if isinstance(query, str):
            return f"{url}?{query}"
        return f"{url}?{urlencode(query, doseq=True)}"

    parts = urlsplit(url)
    if isinstance(query, str):
        new_query = f"{parts.query}&{query}"
    else:
        merged: dict[str, Any] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            merged.setdefault(key, []).append(value)
        merged.update(query)
        new_query = urlencode(merged, doseq=True)

    path = parts.path or ("/" if parts.netloc else "")
    return urlunsplit((parts.scheme, parts.netloc, path, new_query, parts.fragment))


def url_join(base: str, *parts: str) -> str:
    """Join url parts, adding '/' where needed. Queries are not supported.

    Examples:
        url_join("/", "/user", "login") -> "/user/login"
        url_join("/") -> "/"
        url_join("") -> "/"
        url_join("/path/", "/user") -> "/path/user"
    """
    if not parts:
        if base in ("", "/"):
            return "/"
        return trim_right_slash(base)

    tail = "/".join(stripped for stripped in (p.strip("/") for p in parts) if stripped)
    return trim_right_slash(base) + ensure_left_slash(tail, exclude_empty=True)


def trim_left_slash(path: str) -> str:
    """Trim leading '/' characters."""
    return path.lstrip("/") if path else path


def trim_right_slash(path: str) -> str:
    """Trim trailing '/' characters."""
    return path.rstrip("/") if path else path


def ensure_left_slash(path: str, exclude_empty: bool = False) -> str:
    """Prefix '/' unless already present. With exclude_empty, '' stays ''."""
    if path and path[0] == "/":
        return path
    if exclude_empty and path == "":
        return ""
    return "/" + path


def ensure_right_slash(path: str) -> str:
    """Suffix '/' unless already present."""
    if path and path[-1] == "/":
        return path
    return path + "/"
