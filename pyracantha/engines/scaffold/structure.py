"""Create and audit the conventional directory/file layout of a project."""

from __future__ import annotations

from pathlib import Path

import structlog

from pyracantha.engines.dependency_scanner.manifest import (
    parse_manifest,
    persist,
    read_manifest,
    reconcile,
)
from pyracantha.engines.dependency_scanner.models import DEFAULT_MANIFEST_NAME
from pyracantha.engines.scaffold.models import (
    MissingElements,
    ProjectTemplate,
    StructureReport,
)
from pyracantha.exceptions import ProjectRootError

log = structlog.get_logger("pyracantha.engine")


def find_missing(root: Path, template: ProjectTemplate) -> MissingElements:
    """List template directories and files that do not exist under *root*."""
    if root.exists() and not root.is_dir():
        raise ProjectRootError(root, "is not a directory")
    return MissingElements(
        directories=[d for d in template.directories if not (root / d).exists()],
        files=[f for f in template.files if not (root / f).exists()],
    )


def create_structure(
    root: Path,
    template: ProjectTemplate,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
) -> StructureReport:
    """Create *root* and every missing template entry; existing files are never touched.

    Template ``requirements`` are merged into the manifest, keeping any
    entry (and pin) already present.
    """
    if root.exists() and not root.is_dir():
        raise ProjectRootError(root, "is not a directory")
    if not root.exists():
        root.mkdir(parents=True)
        log.info("scaffold.root_created", path=str(root))

    report = StructureReport()
    todo = find_missing(root, template)

    for rel in todo.directories:
        (root / rel).mkdir(parents=True, exist_ok=True)
        report.created_directories.append(rel)
        log.info("scaffold.directory_created", path=str(root / rel))

    for rel in todo.files:
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(template.files[rel], encoding="utf-8")
        report.created_files.append(rel)
        log.info("scaffold.file_created", path=str(target))

    if template.requirements:
        report.added_requirements = _seed_requirements(
            root / manifest_name, template.requirements
        )

    return report


def _seed_requirements(manifest_path: Path, requirements: list[str]) -> list[str]:
    seeds = parse_manifest("\n".join(requirements))
    existing = read_manifest(manifest_path)
    added = [name for name in seeds.names() if name not in existing]
    if not added:
        return []
    persist(reconcile(existing, [seeds.entries[n] for n in added]), manifest_path)
    log.info("scaffold.requirements_seeded", path=str(manifest_path), added=added)
    return added
