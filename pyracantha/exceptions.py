"""Custom exceptions for pyracantha."""

from __future__ import annotations

from pathlib import Path


class PyracanthaError(Exception):
    """Base exception for all pyracantha errors."""


class PreconditionError(PyracanthaError):
    """Raised when an operation is called with inputs it cannot start from."""


class ProjectRootError(PreconditionError):
    """Raised when the project root is missing or is not a directory."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Project root {path}: {reason}")


class ManifestError(PyracanthaError):
    """Base class for manifest read/write failures."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class ManifestReadError(ManifestError):
    """Raised when an existing manifest cannot be read."""


class ManifestWriteError(ManifestError):
    """Raised when the manifest could not be persisted.

    The file at ``path`` keeps whatever content it had before the write.
    """


class ConfigError(PyracanthaError):
    """Raised when a configuration file is unreadable or invalid."""

    def __init__(self, path: Path | None, message: str):
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Invalid configuration{where}: {message}")
