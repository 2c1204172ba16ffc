"""Load Python source files into isolated, uncached module objects."""

from __future__ import annotations

import asyncio
import builtins
import importlib.util
import logging
import pathlib
import types
import uuid
from collections.abc import Mapping
from typing import Any

from rkutils.errors import SandboxLoadError

__all__ = ["load_module", "load_module_async"]

_logger = logging.getLogger(__name__)


def _sandbox_builtins(deps: Mapping[str, Any]) -> dict[str, Any]:
    """Builtins namespace whose __import__ serves ``deps`` before the real import system."""
    namespace = dict(vars(builtins))
    real_import = builtins.__import__

    def sandbox_import(
        name: str,
        globals: Mapping[str, Any] | None = None,
        locals: Mapping[str, Any] | None = None,
        fromlist: Any = (),
        level: int = 0,
    ) -> Any:
        if level == 0 and name in deps:
            return deps[name]
        return real_import(name, globals, locals, fromlist, level)

    namespace["__import__"] = sandbox_import
    return namespace


def load_module(
    file_path: str,
    variables: Mapping[str, Any] | None = None,
    deps: Mapping[str, Any] | None = None,
) -> types.ModuleType:
    """Execute a source file as a fresh module.

    The module is never registered in ``sys.modules``, so each call returns an
    independent module object with its own state.

    Args:
        file_path: Path to a Python source file.
        variables: Names injected as module globals before execution.
        deps: Import names mapped to the objects ``import`` should return
            inside the loaded file.

    Returns:
        The executed module.

    Raises:
        SandboxLoadError: If the file is missing, cannot be loaded, or raises
            while executing.
    """
    path = pathlib.Path(file_path)
    if not path.is_file():
        raise SandboxLoadError(file_path=file_path, reason="File does not exist")

    module_name = f"{path.stem}_{uuid.uuid4().hex[:8]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SandboxLoadError(file_path=file_path, reason="Not a loadable Python source file")

    module = importlib.util.module_from_spec(spec)
    if variables:
        module.__dict__.update(variables)
    if deps:
        module.__dict__["__builtins__"] = _sandbox_builtins(deps)

    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise SandboxLoadError(
            file_path=file_path,
            reason=f"{type(exc).__name__}: {exc}",
            cause=exc,
        ) from exc

    _logger.debug("Loaded %s into sandbox module %s", file_path, module_name)
    return module


async def load_module_async(
    file_path: str,
    variables: Mapping[str, Any] | None = None,
    deps: Mapping[str, Any] | None = None,
) -> types.ModuleType:
    """Async counterpart to load_module(), executed in a worker thread."""
    return await asyncio.to_thread(load_module, file_path, variables, deps)
