"""Error hierarchy for rkutils."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "RkUtilsError",
    "InvalidArgumentError",
    "ConfigNotFoundError",
    "ConfigError",
    "CommandError",
    "CommandSpawnError",
    "SandboxLoadError",
    "ErrorCodes",
]


class RkUtilsError(Exception):
    """Base error for all rkutils errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidArgumentError(RkUtilsError):
    """Raised when a helper is given an argument of an unusable shape."""

    def __init__(self, message: str, argument: str | None = None, **kwargs: Any) -> None:
        details = {"argument": argument} if argument is not None else {}
        super().__init__(code="INVALID_ARGUMENT", message=message, details=details, **kwargs)


class ConfigNotFoundError(RkUtilsError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(RkUtilsError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="CONFIG_INVALID",
            message=message,
            details={"errors": errors or []},
            **kwargs,
        )

    @property
    def errors(self) -> list[dict[str, Any]]:
        """Field-level validation errors, each with 'field', 'code', 'message'."""
        return self.details["errors"]


class CommandError(RkUtilsError):
    """Raised when a shell command exits with a non-zero status."""

    def __init__(
        self,
        cmd: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="COMMAND_FAILED",
            message=f"Command '{cmd}' exited with status {exit_code}",
            details={"cmd": cmd, "exit_code": exit_code, "stdout": stdout, "stderr": stderr},
            **kwargs,
        )

    @property
    def cmd(self) -> str:
        return self.details["cmd"]

    @property
    def exit_code(self) -> int:
        return self.details["exit_code"]

    @property
    def stdout(self) -> str:
        return self.details["stdout"]

    @property
    def stderr(self) -> str:
        return self.details["stderr"]


class CommandSpawnError(RkUtilsError):
    """Raised when a program cannot be started at all."""

    def __init__(self, cmd: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="COMMAND_SPAWN_FAILED",
            message=f"Failed to spawn '{cmd}': {reason}",
            details={"cmd": cmd, "reason": reason},
            **kwargs,
        )


class SandboxLoadError(RkUtilsError):
    """Raised when a source file cannot be loaded into a sandboxed module."""

    def __init__(self, file_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="SANDBOX_LOAD_ERROR",
            message=f"Failed to load '{file_path}': {reason}",
            details={"file_path": file_path, "reason": reason},
            **kwargs,
        )

    @property
    def file_path(self) -> str:
        return self.details["file_path"]


class ErrorCodes:
    """All rkutils error codes as constants.

    Example:
        if error.code == ErrorCodes.COMMAND_FAILED:
            report(error.stderr)
    """

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    COMMAND_FAILED = "COMMAND_FAILED"
    COMMAND_SPAWN_FAILED = "COMMAND_SPAWN_FAILED"
    SANDBOX_LOAD_ERROR = "SANDBOX_LOAD_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
