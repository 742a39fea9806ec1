"""
Custom exception hierarchy for requirekit.

This module defines structured exception types used across requirekit.
All exceptions inherit from :class:`RequireKitError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class RequireKitError(Exception):
    """Base exception for all requirekit errors.

    All requirekit-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class InvalidRequirement(RequireKitError):
    """Raised when a requirement line is malformed.

    Covers a missing package name, version tokens that do not match the
    version grammar, and version tokens that are not strictly increasing.

    Args:
        message: Error description.
        line: Raw content of the problematic line.
        line_number: Line number where parsing failed.
        file_path: Path to the file being parsed.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[str] = None,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "line", line_number)
        _add_if(details, "content", line)
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.line = line
        self.line_number = line_number
        self.file_path = file_path


class NotInstalled(RequireKitError):
    """Raised when an operation targets a package with no installed checkout."""

    def __init__(self, package: str) -> None:
        super().__init__(f"{package} is not an installed package", {"package": package})
        self.package = package


class UnknownCommit(RequireKitError):
    """A published commit is absent from every local repository searched.

    Never raised out of the ancestry search; it is recorded as an advisory
    and the affected version is left out of the search.
    """

    def __init__(self, package: str, commit: str) -> None:
        super().__init__(
            f"unknown {package} commit {commit[:8]}, "
            "metadata may be ahead of package cache",
            {"package": package, "commit": commit},
        )
        self.package = package
        self.commit = commit


class DetachedOrUnborn(RequireKitError):
    """Raised when a repository has no commit to report for ``HEAD``."""

    def __init__(self, path: str) -> None:
        super().__init__("repository has no commits yet", {"path": path})
        self.path = path


class VersionControlError(RequireKitError):
    """Raised when a version-control command fails unexpectedly.

    Args:
        message: Error description.
        command: Command line that was executed.
        returncode: Process exit status.
        stderr: Captured standard error, truncated for safety.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "command", command)
        _add_if(details, "returncode", returncode)
        if stderr:
            details["stderr"] = _truncate(stderr.strip())

        super().__init__(message, details)

        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class MetadataError(RequireKitError):
    """Raised when the published metadata snapshot is malformed."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", path)
        super().__init__(message, details)
        self.path = path


class FileOperationError(RequireKitError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write).
        original_error: Original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(RequireKitError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file.
        option: Offending option name, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
