"""Centralized error classes for s3viewer."""

from __future__ import annotations


class S3ViewerError(Exception):
    """Base class for errors surfaced to the user."""

    pass


class ConfigError(S3ViewerError):
    """Raised when a configuration file cannot be parsed."""

    pass


class ValidationError(S3ViewerError):
    """Raised when a locator is not a well-formed s3:// URL."""

    pass


class ProcessError(S3ViewerError):
    """Raised when a subprocess fails to spawn or exits non-zero.

    Attributes:
        exit_status: Exit code of the process, or None if it never started.
        stderr_text: Diagnostic text captured from stderr (or the OS error).
        spawn_failure: True if the binary could not be started at all.
    """

    def __init__(
        self,
        message: str,
        exit_status: int | None = None,
        stderr_text: str = "",
        spawn_failure: bool = False,
    ) -> None:
        super().__init__(message)
        self.exit_status = exit_status
        self.stderr_text = stderr_text
        self.spawn_failure = spawn_failure


class TransferError(S3ViewerError):
    """Raised when an object download exits non-zero or the local sink fails."""

    def __init__(
        self,
        message: str,
        exit_status: int | None = None,
        stderr_text: str = "",
    ) -> None:
        super().__init__(message)
        self.exit_status = exit_status
        self.stderr_text = stderr_text


class DiscoveryError(S3ViewerError):
    """Raised when a listing query fails or returns an unexpected shape."""

    pass


class ViewerError(S3ViewerError):
    """Raised when the viewer cannot open the downloaded file."""

    pass


class CancelledByUser(Exception):
    """An interactive step returned no selection.

    Not an error: the flow goes back to idle without a message.
    """

    pass
