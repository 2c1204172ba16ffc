"""Shell command execution helpers."""

from __future__ import annotations

import asyncio
import inspect
import logging
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from rkutils.config import Config, config_value
from rkutils.errors import CommandError, CommandSpawnError

__all__ = ["CommandResult", "run_cmd", "run_cmd_live", "run_cmd_sync"]

_logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096


@dataclass
class CommandResult:
    """Captured output of a finished command.

    Attributes:
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        exit_code: Process exit status.
    """

    stdout: str
    stderr: str
    exit_code: int = 0


def _decode(data: bytes | None, config: Config | None) -> str:
    if not data:
        return ""
    encoding = config_value(config, "shell.encoding", "utf-8")
    return data.decode(encoding, errors="replace")


async def run_cmd(
    cmd: str,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    config: Config | None = None,
) -> CommandResult:
    """Execute a shell command and capture its output.

    Args:
        cmd: Command line, interpreted by the system shell.
        cwd: Optional working directory.
        env: Optional environment for the child process.
        config: Optional configuration (``shell.encoding``).

    Returns:
        The decoded stdout and stderr.

    Raises:
        CommandError: If the command exits with a non-zero status.
    """
    _logger.debug("run_cmd: %s", cmd)
    proc = await asyncio.create_subprocess_shell(
        cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=dict(env) if env is not None else None,
    )
    stdout, stderr = await proc.communicate()
    result = CommandResult(
        stdout=_decode(stdout, config),
        stderr=_decode(stderr, config),
        exit_code=proc.returncode if proc.returncode is not None else 0,
    )

    if result.exit_code != 0:
        raise CommandError(
            cmd=cmd,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result


async def _pump(stream: asyncio.StreamReader | None, callback: Callable[[bytes], Any] | None) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        if callback is not None:
            outcome = callback(chunk)
            if inspect.isawaitable(outcome):
                await outcome


async def run_cmd_live(
    cmd: str,
    args: Sequence[str] | None = None,
    on_stdout: Callable[[bytes], Any] | None = None,
    on_stderr: Callable[[bytes], Any] | None = None,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a program and stream its output to callbacks as it is produced.

    The program is started directly, without a shell.

    Args:
        cmd: Program to run.
        args: Program arguments.
        on_stdout: Called with each raw stdout chunk; may be async.
        on_stderr: Called with each raw stderr chunk; may be async.
        cwd: Optional working directory.
        env: Optional environment for the child process.

    Returns:
        The process exit code.

    Raises:
        CommandSpawnError: If the program cannot be started.
    """
    argv = list(args or [])
    _logger.debug("run_cmd_live: %s %s", cmd, argv)
    try:
        proc = await asyncio.create_subprocess_exec(
            cmd,
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except OSError as exc:
        raise CommandSpawnError(cmd=cmd, reason=str(exc), cause=exc) from exc

    readers = [
        asyncio.ensure_future(_pump(proc.stdout, on_stdout)),
        asyncio.ensure_future(_pump(proc.stderr, on_stderr)),
    ]
    try:
        await asyncio.gather(*readers)
    except BaseException:
        for reader in readers:
            reader.cancel()
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()
        raise
    return await proc.wait()


def run_cmd_sync(
    cmd: str,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    config: Config | None = None,
) -> str:
    """Execute a shell command synchronously and return its stdout.

    Raises:
        CommandError: If the command exits with a non-zero status.
    """
    _logger.debug("run_cmd_sync: %s", cmd)
    completed = subprocess.run(
        cmd,
        shell=True,
        capture_output=True,
        cwd=cwd,
        env=dict(env) if env is not None else None,
    )
    stdout = _decode(completed.stdout, config)
    if completed.returncode != 0:
        raise CommandError(
            cmd=cmd,
            exit_code=completed.returncode,
            stdout=stdout,
            stderr=_decode(completed.stderr, config),
        )
    return stdout
