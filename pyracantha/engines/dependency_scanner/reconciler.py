"""ManifestReconciler — discover imported packages and merge them into requirements.txt."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from pyracantha.engines.dependency_scanner.manifest import (
    missing,
    persist,
    read_manifest,
    reconcile,
)
from pyracantha.engines.dependency_scanner.models import (
    Manifest,
    ReconcileResult,
    ScanConfig,
    ScanIssue,
)
from pyracantha.engines.dependency_scanner.normalizer import collect_packages
from pyracantha.engines.dependency_scanner.scanner import ImportScanner

log = structlog.get_logger("pyracantha.engine")


def discover_packages(root: Path | str, config: ScanConfig | None = None) -> set[str]:
    """Return the external top-level packages imported under *root* (no writes)."""
    return ManifestReconciler(config).discover(Path(root))[0]


def reconcile_manifest(
    root: Path | str,
    manifest_path: Path | str | None = None,
    config: ScanConfig | None = None,
) -> ReconcileResult:
    """Compute the merged manifest for *root* without writing it."""
    return ManifestReconciler(config).reconcile(
        Path(root), Path(manifest_path) if manifest_path is not None else None
    )


class ManifestReconciler:
    """Scan a project, diff its imports against the manifest and persist the merge."""

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig.default()

    def manifest_path_for(self, root: Path) -> Path:
        return root / self.config.manifest_name

    def discover(self, root: Path) -> tuple[set[str], list[ScanIssue]]:
        """Return (packages, issues) for the tree under *root*."""
        scanner = ImportScanner(root, self.config)
        packages = collect_packages(scanner, self.config)
        log.debug(
            "reconciler.discovered",
            root=str(root),
            files=scanner.files_scanned,
            packages=len(packages),
            issues=len(scanner.issues),
        )
        return packages, scanner.issues

    def reconcile(self, root: Path, manifest_path: Path | None = None) -> ReconcileResult:
        """Scan *root* and merge newly discovered packages into its manifest (in memory).

        The project root is validated before the manifest is touched.
        """
        packages, issues = self.discover(root)
        path = manifest_path or self.manifest_path_for(root)
        existing = read_manifest(path)
        added = missing(packages, existing)
        merged = reconcile(existing, added)
        log.info(
            "reconciler.reconciled",
            manifest=str(path),
            existing=len(existing),
            added=len(added),
        )
        return ReconcileResult(
            manifest_path=path,
            existing=existing,
            manifest=merged,
            added=added,
            issues=issues,
        )

    def apply(
        self, result: ReconcileResult, selected: Iterable[str] | None = None
    ) -> Manifest:
        """Persist *result*, optionally keeping only the *selected* subset of ``added``.

        Names in *selected* that are not in ``result.added`` are ignored.
        Returns the manifest that was written.
        """
        if selected is None:
            manifest = result.manifest
        else:
            chosen = set(selected)
            manifest = reconcile(
                result.existing, [name for name in result.added if name in chosen]
            )
        persist(manifest, result.manifest_path)
        return manifest
