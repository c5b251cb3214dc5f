"""Dependency scanner engine — discover imported packages and reconcile requirements.txt."""

from pyracantha.engines.dependency_scanner.models import (
    ImportCandidate,
    Manifest,
    ManifestEntry,
    ReconcileResult,
    ScanConfig,
    ScanIssue,
)
from pyracantha.engines.dependency_scanner.reconciler import (
    ManifestReconciler,
    discover_packages,
    reconcile_manifest,
)

__all__ = [
    "ImportCandidate",
    "Manifest",
    "ManifestEntry",
    "ManifestReconciler",
    "ReconcileResult",
    "ScanConfig",
    "ScanIssue",
    "discover_packages",
    "reconcile_manifest",
]
