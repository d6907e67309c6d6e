"""Exceptions raised while provisioning a remote host."""

from typing import Optional


class RemoteInitError(Exception):
    """Base class for every error the tool reports to the operator."""


class ConfigError(RemoteInitError):
    """Raised when the run configuration is missing or invalid."""

    def __init__(self, message: str, usage: Optional[str] = None) -> None:
        super().__init__(message)
        self.usage = usage


class RemoteCommandError(RemoteInitError):
    """Raised when a command on the remote host exits with a non-zero status."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Remote command failed (exit {returncode}): {command}")
        self.command = command
        self.returncode = returncode
