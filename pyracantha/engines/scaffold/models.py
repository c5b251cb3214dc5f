"""Data models for project scaffolding."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from pydantic import BaseModel, field_validator

_DIR_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_FILE_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_relative(value: str) -> PurePosixPath:
    parts = value.replace("\\", "/").split("/")
    if not value or value.startswith(("/", "\\")):
        raise ValueError(f"{value!r} must be a non-empty relative path")
    if any(part in ("", ".", "..") for part in parts):
        raise ValueError(f"{value!r} must not contain empty, '.' or '..' segments")
    return PurePosixPath(*parts)


def validate_directory_name(value: str) -> str:
    """Each segment may contain only letters, digits, hyphens and underscores."""
    path = _check_relative(value)
    for part in path.parts:
        if not _DIR_SEGMENT_RE.match(part):
            raise ValueError(
                f"Invalid directory name: {value}. Only alphanumeric characters, "
                "hyphens and underscores are allowed."
            )
    return path.as_posix()


def validate_file_name(value: str) -> str:
    """Like directory names, but the last segment may also contain periods."""
    path = _check_relative(value)
    *parents, name = path.parts
    for part in parents:
        if not _DIR_SEGMENT_RE.match(part):
            raise ValueError(f"Invalid directory name in file path: {value}")
    if not _FILE_SEGMENT_RE.match(name):
        raise ValueError(
            f"Invalid file name: {value}. Only alphanumeric characters, "
            "hyphens, underscores and periods are allowed."
        )
    return path.as_posix()


class ProjectTemplate(BaseModel):
    """Directories and files every project should have."""

    directories: list[str] = ["src", "tests", "docs", "configs"]
    files: dict[str, str] = {
        ".gitignore": "venv\n__pycache__\n*.pyc\n.DS_Store\n",
        "requirements.txt": "",
        "README.md": "# Project Title\n\nA brief description of your project.\n",
        "src/__init__.py": "",
        "tests/__init__.py": "",
    }
    # Packages seeded into requirements.txt when a project is created
    requirements: list[str] = []

    @field_validator("directories")
    @classmethod
    def _validate_directories(cls, v: list[str]) -> list[str]:
        return [validate_directory_name(d) for d in v]

    @field_validator("files")
    @classmethod
    def _validate_files(cls, v: dict[str, str]) -> dict[str, str]:
        return {validate_file_name(name): content for name, content in v.items()}


@dataclass
class MissingElements:
    """Template entries that do not exist yet under a project root."""

    directories: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    @property
    def is_up_to_date(self) -> bool:
        return not self.directories and not self.files


@dataclass
class StructureReport:
    """What a scaffolding run created."""

    created_directories: list[str] = field(default_factory=list)
    created_files: list[str] = field(default_factory=list)
    added_requirements: list[str] = field(default_factory=list)

    @property
    def created(self) -> list[str]:
        return self.created_directories + self.created_files
