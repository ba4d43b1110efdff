"""Exceptions raised by the copy workflow.

Library code raises these; the CLI layer turns them into a red error line
and exit status 1.
"""

from __future__ import annotations


class CopyIdError(Exception):
    """Base class for every fatal ssh-copy-id failure."""


class ConfigError(CopyIdError):
    """Raised when the settings file is invalid or missing."""


class TargetError(CopyIdError):
    """Raised when the ``[user@]host`` target cannot be parsed."""


class ToolNotFoundError(CopyIdError):
    """Raised when the ssh client binary is not on PATH."""


class KeyFileError(CopyIdError):
    """Raised when the public key file is missing, unreadable, or empty."""

    def __init__(self, message: str, *, suggestion: list[str] | None = None) -> None:
        super().__init__(message)
        self.suggestion = suggestion or []


class ConnectionFailedError(CopyIdError):
    """Raised when the initial login probe fails."""


class RemoteMutationError(CopyIdError):
    """Raised when creating ~/.ssh or appending the key fails remotely."""
