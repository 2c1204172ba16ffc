"""Sequential async helpers: ordered factory execution, polling and call hooks.

Every step of one ``each_promise`` / ``if_any_promise`` / ``each_async`` call
runs strictly after the previous one has finished. Failures surface when the
returned coroutine is awaited.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Iterable
from typing import Any, Callable

from rkutils.config import Config, config_value
from rkutils.errors import InvalidArgumentError
from rkutils.paths import Shape, shape_of

__all__ = [
    "each_promise",
    "if_any_promise",
    "each_async",
    "sleep",
    "wait_until",
    "hook_invoke",
    "InvocationHook",
]

_logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _takes_previous(factory: Callable[..., Any]) -> bool:
    """Whether a factory requires a positional parameter for the previous result.

    Parameters with defaults do not count, so ``lambda i=i: ...`` stays a
    zero-argument factory.
    """
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return False
    for p in signature.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if p.kind in _POSITIONAL and p.default is p.empty:
            return True
    return False


async def _invoke(factory: Callable[..., Any], previous: Any) -> Any:
    if _takes_previous(factory):
        return await _resolve(factory(previous))
    return await _resolve(factory())


async def each_promise(factories: Iterable[Callable[..., Any]]) -> list[Any]:
    """Run factories one after another and collect their results in order.

    A factory is called with no arguments, or with the previous factory's
    result when it requires a positional parameter (``None`` for the first).
    It may return a plain value or an awaitable.

    Args:
        factories: Ordered factories returning values or awaitables.

    Returns:
        The results, same length and order as ``factories``.

    Raises:
        Exception: The first factory failure, unchanged. Later factories are
            not called and partial results are discarded.
    """
    accumulator: list[Any] = []
    previous: Any = None

    for index, factory in enumerate(factories):
        _logger.debug("each_promise: running step %d", index)
        previous = await _invoke(factory, previous)
        accumulator.append(previous)

    return accumulator


async def if_any_promise(
    factories: Iterable[Callable[[], Any]],
    predicate: Callable[[Any], Any] | None = None,
) -> tuple[int, Any] | None:
    """Run factories in order and stop at the first result that passes the check.

    The check is ``predicate(result)`` when a predicate is given (it may return
    an awaitable), otherwise the truthiness of the result.

    Returns:
        ``(index, result)`` for the first passing result, or None when no
        result passes.
    """
    for index, factory in enumerate(factories):
        result = await _resolve(factory())
        if predicate is not None:
            matched = await _resolve(predicate(result))
        else:
            matched = result
        if matched:
            _logger.debug("if_any_promise: step %d matched", index)
            return index, result

    return None


async def each_async(
    collection: Any,
    iterator: Callable[[Any, Any, Any], Any],
) -> list[Any] | dict[Any, Any]:
    """Apply an iterator to each item of a list or mapping, one item at a time.

    Args:
        collection: A sequence (called as ``iterator(value, index, collection)``)
            or a mapping (called as ``iterator(value, key, collection)``).
        iterator: Sync or async callable.

    Returns:
        A list of results for a sequence, or a dict with the same keys for a
        mapping.

    Raises:
        InvalidArgumentError: If ``collection`` is neither a sequence nor a
            mapping.
    """
    shape = shape_of(collection)

    if shape is Shape.SEQUENCE:
        results: list[Any] = []
        for index, value in enumerate(collection):
            results.append(await _resolve(iterator(value, index, collection)))
        return results
    elif shape is Shape.MAPPING:
        mapped: dict[Any, Any] = {}
        for key, value in collection.items():
            mapped[key] = await _resolve(iterator(value, key, collection))
        return mapped
    elif shape is Shape.SCALAR or shape is Shape.ABSENT:
        raise InvalidArgumentError("Invalid argument!", argument="collection")
    else:
        raise AssertionError(f"Unhandled shape: {shape}")


async def sleep(seconds: float) -> None:
    """Return after the given number of seconds."""
    await asyncio.sleep(seconds)


async def wait_until(
    checker: Callable[[], Any],
    interval: float | None = None,
    max_rounds: int | None = None,
    config: Config | None = None,
) -> Any:
    """Call ``checker`` until it returns a truthy value or the rounds run out.

    The checker runs once immediately, then up to ``max_rounds`` more times
    with ``interval`` seconds between calls.

    Args:
        checker: Sync or async callable.
        interval: Seconds between checks. Defaults to ``wait_until.interval``
            from config, else 1.0.
        max_rounds: Retries after the first check. Defaults to
            ``wait_until.max_rounds`` from config, else 10.
        config: Optional configuration.

    Returns:
        The last checker result (falsy when every round failed).
    """
    if interval is None:
        interval = config_value(config, "wait_until.interval", 1.0)
    if max_rounds is None:
        max_rounds = config_value(config, "wait_until.max_rounds", 10)

    result = await _resolve(checker())
    rounds = 0
    while not result and rounds < max_rounds:
        await asyncio.sleep(interval)
        result = await _resolve(checker())
        rounds += 1

    return result


class InvocationHook:
    """Proxy that reports every method call made through it.

    Non-callable attributes pass straight through to the wrapped object.
    """

    def __init__(
        self,
        target: Any,
        on_calling: Callable[[Any, dict[str, Any]], Any] | None = None,
        on_called: Callable[[Any, dict[str, Any]], Any] | None = None,
    ) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_on_calling", on_calling)
        object.__setattr__(self, "_on_called", on_called)
        object.__setattr__(self, "_pending", set())

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr

        def hooked(*args: Any, **kwargs: Any) -> Any:
            before = None
            if self._on_calling is not None:
                before = self._on_calling(
                    self._target, {"name": name, "args": args, "kwargs": kwargs}
                )
            if inspect.isawaitable(before) and not _loop_running():
                asyncio.run(_resolve(before))
                before = None
            returned = attr(*args, **kwargs)
            if inspect.isawaitable(returned):
                return self._around_await(name, before, returned)
            if inspect.isawaitable(before):
                # sync method called from inside a running loop
                self._schedule("on_calling", name, before)
            if self._on_called is not None:
                self._notify_called(name, returned)
            return returned

        return hooked

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._target, name, value)

    async def _around_await(self, name: str, before: Any, awaitable: Awaitable[Any]) -> Any:
        if inspect.isawaitable(before):
            try:
                await before
            except BaseException:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                raise
        returned = await awaitable
        if self._on_called is not None:
            await self._notify_called_async(name, returned)
        return returned

    def _notify_called(self, name: str, returned: Any) -> None:
        try:
            outcome = self._on_called(self._target, {"name": name, "returned": returned})
        except Exception:
            _logger.exception("on_called hook failed for %s", name)
            return
        if not inspect.isawaitable(outcome):
            return
        if not _loop_running():
            asyncio.run(self._guard("on_called", name, outcome))
            return
        self._schedule("on_called", name, outcome)

    def _schedule(self, hook: str, name: str, outcome: Awaitable[Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._guard(hook, name, outcome))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _notify_called_async(self, name: str, returned: Any) -> None:
        try:
            await _resolve(self._on_called(self._target, {"name": name, "returned": returned}))
        except Exception:
            _logger.exception("on_called hook failed for %s", name)

    async def _guard(self, hook: str, name: str, outcome: Awaitable[Any]) -> None:
        try:
            await outcome
        except Exception:
            _logger.exception("%s hook failed for %s", hook, name)


def hook_invoke(
    obj: Any,
    on_calling: Callable[[Any, dict[str, Any]], Any] | None = None,
    on_called: Callable[[Any, dict[str, Any]], Any] | None = None,
) -> InvocationHook:
    """Wrap ``obj`` so that method calls notify ``on_calling`` and ``on_called``.

    ``on_calling(obj, {"name", "args", "kwargs"})`` runs before each method
    call; ``on_called(obj, {"name", "returned"})`` runs after it, after
    awaiting when the method returns an awaitable. Either hook may be async:
    an async ``on_calling`` is awaited before an async method starts, and is
    scheduled on the running loop when a sync method is called from async
    code. Errors raised by ``on_called`` are logged and do not affect the
    call's result.
    """
    return InvocationHook(obj, on_calling, on_called)
