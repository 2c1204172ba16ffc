"""rkutils - Common utilities for nested data, async sequencing and shell work."""

from __future__ import annotations

# Dot-path access
from rkutils.paths import (
    KeyPath,
    Shape,
    get_value_by_path,
    has_key_by_path,
    put_into_bucket,
    set_value_by_path,
    shape_of,
    split_path,
)

# Async sequencing
from rkutils.promises import (
    InvocationHook,
    each_async,
    each_promise,
    hook_invoke,
    if_any_promise,
    sleep,
    wait_until,
)

# Shell
from rkutils.shell import CommandResult, run_cmd, run_cmd_live, run_cmd_sync

# Sandbox
from rkutils.sandbox import load_module, load_module_async

# URL and string helpers
from rkutils.urls import (
    ensure_left_slash,
    ensure_right_slash,
    trim_left_slash,
    trim_right_slash,
    url_append_query,
    url_join,
)
from rkutils.strings import (
    bin_to_hex,
    drop_left_if_starts_with,
    drop_right_if_ends_with,
    is_quoted,
    is_wrapped_with,
    pascal_case,
    quote,
    replace_all,
    template,
)

# Config
from rkutils.config import Config

# Errors
from rkutils.errors import (
    CommandError,
    CommandSpawnError,
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    InvalidArgumentError,
    RkUtilsError,
    SandboxLoadError,
)

__version__ = "2.3.0"

__all__ = [
    # Dot-path access
    "KeyPath",
    "Shape",
    "shape_of",
    "split_path",
    "get_value_by_path",
    "set_value_by_path",
    "has_key_by_path",
    "put_into_bucket",
    # Async sequencing
    "each_promise",
    "if_any_promise",
    "each_async",
    "sleep",
    "wait_until",
    "hook_invoke",
    "InvocationHook",
    # Shell
    "CommandResult",
    "run_cmd",
    "run_cmd_live",
    "run_cmd_sync",
    # Sandbox
    "load_module",
    "load_module_async",
    # URL helpers
    "url_append_query",
    "url_join",
    "trim_left_slash",
    "trim_right_slash",
    "ensure_left_slash",
    "ensure_right_slash",
    # String helpers
    "template",
    "replace_all",
    "pascal_case",
    "quote",
    "is_quoted",
    "is_wrapped_with",
    "bin_to_hex",
    "drop_right_if_ends_with",
    "drop_left_if_starts_with",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "RkUtilsError",
    "InvalidArgumentError",
    "ConfigNotFoundError",
    "ConfigError",
    "CommandError",
    "CommandSpawnError",
    "SandboxLoadError",
]
