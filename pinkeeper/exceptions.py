"""
Exceptions raised by pinkeeper.

Only the file, configuration and registry-setup layers raise. Per-package
outcomes of a pinning run (not locked, no newer version, failed registry
query) are reported and skipped instead.

Every exception carries a ``details`` mapping; ``str(exc)`` appends it to
the message so the CLI can print a single line::

    File not found: requirements.txt (path=requirements.txt, operation=read)
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def _truncate(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _present(**fields: Any) -> Dict[str, Any]:
    """Keep only the fields that were actually provided."""
    return {key: value for key, value in fields.items() if value is not None}


class PinKeeperError(Exception):
    """Root of the pinkeeper exception hierarchy.

    Args:
        message: Human-readable description.
        details: Extra context shown after the message.
    """

    __slots__ = ("message", "details")

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


class InvalidVersionError(PinKeeperError, ValueError):
    """A version string has no numeric segment at all (``"latest"``)."""

    __slots__ = ("version",)

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Invalid version string: {version!r}",
            {"version": _truncate(version, 50)},
        )
        self.version = version


class ParseError(PinKeeperError):
    """A requirements line is not valid PEP 508."""

    __slots__ = ("line_number", "line_content", "file_path")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            _present(file=file_path, line=line_number, content=line_content),
        )
        self.line_number = line_number
        self.line_content = line_content
        self.file_path = file_path


class RegistryError(PinKeeperError):
    """A registry query command is malformed or exited unsuccessfully.

    :class:`~pinkeeper.core.registry.CommandRegistry` only lets this escape
    for malformed templates; failed runs are logged and read as "no
    versions".
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            _present(
                command=command,
                returncode=returncode,
                stderr=_truncate(stderr.strip()) if stderr else None,
            ),
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class FileOperationError(PinKeeperError):
    """Reading, writing or backing up a manifest or lock file failed."""

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            _present(
                path=file_path,
                operation=operation,
                cause=str(original_error) if original_error else None,
            ),
        )
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(PinKeeperError):
    """``pinkeeper.toml`` or ``[tool.pinkeeper]`` is missing, unreadable or invalid."""

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, _present(path=config_path, option=option))
        self.config_path = config_path
        self.option = option
