"""Package name normalizer — reduce import candidates to external package names."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pyracantha.engines.dependency_scanner.models import ImportCandidate, ScanConfig

_PACKAGE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_package_name(name: str) -> bool:
    return bool(_PACKAGE_NAME_RE.match(name))


def normalize(candidate: ImportCandidate | str, config: ScanConfig) -> str | None:
    """Return the top-level package name for *candidate*, or None if rejected.

    Rejects empty names (relative imports), standard-library and ignored
    modules, and anything outside ``[A-Za-z0-9_-]``.
    """
    raw = candidate.name if isinstance(candidate, ImportCandidate) else candidate
    name = raw.split(".", 1)[0]
    if not name:
        return None
    if name in config.excluded_packages:
        return None
    if not is_valid_package_name(name):
        return None
    return name


def collect_packages(
    candidates: Iterable[ImportCandidate | str], config: ScanConfig
) -> set[str]:
    """Apply :func:`normalize` to a candidate stream and deduplicate."""
    packages: set[str] = set()
    for candidate in candidates:
        name = normalize(candidate, config)
        if name is not None:
            packages.add(name)
    return packages
