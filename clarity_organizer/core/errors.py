# clarity_organizer/core/errors.py
"""
Typed errors for the organizer core.

Every failure the engine can report to its caller is one of these. Each error
carries a machine-readable kind, a human-readable message, optional details,
and the underlying exception that caused it (if any).
"""

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(Enum):
    """The error kinds surfaced to the shell."""
    CONFIG_IO = "ConfigIO"
    PROTECTED_PATH = "ProtectedPath"
    DIRECTORY_ACCESS = "DirectoryAccess"
    DIRECTORY_CREATE = "DirectoryCreate"
    FILE_MOVE = "FileMove"
    ENTRY_READ = "EntryRead"


class OrganizerError(Exception):
    """Base exception for all organizer errors.

    Attributes:
        message: Human-readable error message.
        kind: Programmatic error kind.
        details: Additional error context.
        cause: Original exception that caused this error.
    """

    kind: ErrorKind = ErrorKind.CONFIG_IO

    def __init__(
        self,
        message: str,
        kind: Optional[ErrorKind] = None,
        details: Optional[dict] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = f"[{self.kind.value}] {self.message}"
        if self.cause:
            result += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return result

    def to_dict(self) -> dict:
        """Convert the error to a dictionary for logging or display."""
        return {
            "error_type": type(self).__name__,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigIOError(OrganizerError):
    """The configuration could not be located, read, written or decoded."""

    kind = ErrorKind.CONFIG_IO

    def __init__(self, message: str, config_path: Optional[Path] = None, **kwargs):
        details = kwargs.pop("details", {})
        if config_path is not None:
            details["config_path"] = str(config_path)
        super().__init__(message, details=details, **kwargs)


class ProtectedPathError(OrganizerError):
    """The target directory matches an unsafe-path rule."""

    kind = ErrorKind.PROTECTED_PATH

    def __init__(self, path, **kwargs):
        self.path = str(path)
        super().__init__(
            f"Path '{self.path}' is protected by the system.",
            details={"path": self.path},
            **kwargs,
        )


class DirectoryAccessError(OrganizerError):
    """Listing the target directory failed."""

    kind = ErrorKind.DIRECTORY_ACCESS

    def __init__(self, path, **kwargs):
        self.path = str(path)
        super().__init__(
            f"Could not access directory '{self.path}'.",
            details={"path": self.path},
            **kwargs,
        )


class DirectoryCreateError(OrganizerError):
    """A category subdirectory could not be created."""

    kind = ErrorKind.DIRECTORY_CREATE

    def __init__(self, category: str, path, **kwargs):
        self.category = category
        self.path = str(path)
        super().__init__(
            f"Could not create folder for category '{category}' at '{self.path}'.",
            details={"category": category, "path": self.path},
            **kwargs,
        )


class FileMoveError(OrganizerError):
    """A classified file could not be relocated."""

    kind = ErrorKind.FILE_MOVE

    def __init__(self, source, destination, **kwargs):
        self.source = str(source)
        self.destination = str(destination)
        super().__init__(
            f"Could not move '{self.source}' to '{self.destination}'.",
            details={"source": self.source, "destination": self.destination},
            **kwargs,
        )


class EntryReadError(OrganizerError):
    """A directory entry could not be read while iterating."""

    kind = ErrorKind.ENTRY_READ

    def __init__(self, path, **kwargs):
        self.path = str(path)
        super().__init__(
            f"Could not read directory entry in '{self.path}'.",
            details={"path": self.path},
            **kwargs,
        )
