"""Data models for the dependency scanner engine."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from pyracantha.engines.dependency_scanner.stdlib import load_stdlib_modules

DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = ("myenv",)
DEFAULT_SOURCE_SUFFIX = ".py"
DEFAULT_MANIFEST_NAME = "requirements.txt"


@dataclass(frozen=True)
class ScanConfig:
    """Immutable settings shared by every step of a scan + reconcile run."""

    stdlib: frozenset[str]
    ignored_packages: frozenset[str] = frozenset()
    excluded_dirs: frozenset[str] = frozenset(DEFAULT_EXCLUDED_DIRS)
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    manifest_name: str = DEFAULT_MANIFEST_NAME

    @classmethod
    def default(cls) -> ScanConfig:
        return cls(stdlib=load_stdlib_modules())

    @property
    def excluded_packages(self) -> frozenset[str]:
        """Names never reported as dependencies."""
        return self.stdlib | self.ignored_packages


@dataclass(frozen=True)
class ImportCandidate:
    """A raw import target extracted from one line of source."""

    name: str
    source_file: str = ""
    line: int = 0


@dataclass(frozen=True)
class ScanIssue:
    """A file or directory the scanner could not process."""

    path: str
    reason: str


@dataclass(frozen=True)
class ManifestEntry:
    """One requirement line: a package name plus an opaque version specifier."""

    name: str
    specifier: str = ""  # e.g. "==1.2.3"; "" when unversioned

    def render(self) -> str:
        return f"{self.name}{self.specifier}"


@dataclass
class Manifest:
    """Ordered mapping of package name -> ManifestEntry."""

    entries: dict[str, ManifestEntry] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> ManifestEntry | None:
        return self.entries.get(name)

    def names(self) -> list[str]:
        return sorted(self.entries)


@dataclass
class ReconcileResult:
    """Outcome of reconciling a project's imports against its manifest.

    ``existing`` is the manifest as read from disk, ``manifest`` the merged
    result and ``added`` the sorted names the merge introduces. Nothing is
    written until the caller persists ``manifest``.
    """

    manifest_path: Path
    existing: Manifest
    manifest: Manifest
    added: list[str]
    issues: list[ScanIssue] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added)
