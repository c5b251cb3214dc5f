"""End-to-end tests for discovery and manifest reconciliation."""

from __future__ import annotations

import shutil

import pytest

from pyracantha.engines.dependency_scanner.manifest import persist, read_manifest, reconcile
from pyracantha.engines.dependency_scanner.models import ScanConfig
from pyracantha.engines.dependency_scanner.reconciler import (
    ManifestReconciler,
    discover_packages,
    reconcile_manifest,
)
from pyracantha.exceptions import ProjectRootError


# ── scenarios ────────────────────────────────────────────────────────────


class TestScenarios:
    def test_empty_project(self, tmp_path):
        assert discover_packages(tmp_path) == set()

        reconciler = ManifestReconciler()
        result = reconciler.reconcile(tmp_path)
        assert result.added == []
        reconciler.apply(result)
        assert (tmp_path / "requirements.txt").read_text() == ""

    def test_stdlib_filtered(self, write_tree):
        root = write_tree(
            {
                "main.py": (
                    "import os\nimport requests\n"
                    "from sklearn.linear_model import LinearRegression\n"
                )
            }
        )
        assert discover_packages(root) == {"requests", "sklearn"}

    def test_existing_pin_preserved(self, write_tree):
        root = write_tree(
            {
                "requirements.txt": "numpy==1.21.0\n",
                "calc.py": "import numpy as np\nimport requests\n",
            }
        )
        reconciler = ManifestReconciler()
        result = reconciler.reconcile(root)
        assert result.added == ["requests"]
        reconciler.apply(result)
        assert (root / "requirements.txt").read_text() == "numpy==1.21.0\nrequests\n"

    def test_interpreter_internal_modules_filtered(self, write_tree):
        root = write_tree(
            {"tool.py": "import opcode\nimport pyexpat\nimport genericpath\nimport this\n"}
        )
        assert discover_packages(root) == set()

    def test_docstring_import_ignored(self, write_tree):
        root = write_tree({"mod.py": '"""import fake_pkg"""\nimport real_pkg\n'})
        assert discover_packages(root) == {"real_pkg"}


# ── properties ───────────────────────────────────────────────────────────


class TestProperties:
    def test_stdlib_never_discovered(self, write_tree, scan_config):
        lines = []
        for name in sorted(scan_config.stdlib):
            lines.append(f"import {name}\n")
            lines.append(f"from {name}.sub import thing\n")
        root = write_tree({"everything.py": "".join(lines)})
        assert discover_packages(root, scan_config) == set()

    def test_excluded_dirs_contribute_nothing(self, write_tree):
        root = write_tree(
            {
                "myenv/lib/python3.12/site-packages/pkg/__init__.py": "import vendored\n",
                "myenv/bin/activate_this.py": "import site_helper\n",
            }
        )
        assert discover_packages(root) == set()

    def test_idempotent(self, write_tree):
        root = write_tree({"app.py": "import flask\nimport redis\n"})
        reconciler = ManifestReconciler()
        first = reconciler.reconcile(root)
        assert first.added == ["flask", "redis"]
        reconciler.apply(first)

        second = reconciler.reconcile(root)
        assert second.added == []
        assert not second.changed

    def test_round_trip_keys_and_pins(self, write_tree):
        root = write_tree({"requirements.txt": "numpy==1.21.0\npandas\nscipy==1.9.3\n"})
        path = root / "requirements.txt"
        before = read_manifest(path)
        new = {"requests", "pandas", "attrs"}

        persist(reconcile(before, new), path)
        after = read_manifest(path)

        assert set(after) == set(before) | new
        for name in before:
            assert after.get(name).specifier == before.get(name).specifier

    def test_deterministic_output(self, tmp_path, write_tree):
        files = {
            "z.py": "import zmq\nimport attrs\n",
            "pkg/a.py": "from yaml import safe_load\nimport boto3\n",
            "requirements.txt": "attrs==23.1.0\n",
        }
        first = write_tree(files, root=tmp_path / "one")
        second = tmp_path / "two"
        shutil.copytree(first, second)

        reconciler = ManifestReconciler()
        reconciler.apply(reconciler.reconcile(first))
        reconciler.apply(reconciler.reconcile(second))
        assert (first / "requirements.txt").read_bytes() == (second / "requirements.txt").read_bytes()


# ── ManifestReconciler ───────────────────────────────────────────────────


class TestManifestReconciler:
    def test_reconcile_does_not_write(self, write_tree):
        root = write_tree({"app.py": "import flask\n"})
        result = reconcile_manifest(root)
        assert result.added == ["flask"]
        assert not (root / "requirements.txt").exists()

    def test_custom_manifest_path(self, tmp_path, write_tree):
        root = write_tree({"app.py": "import flask\n"}, root=tmp_path / "proj")
        manifest = tmp_path / "deps.txt"
        manifest.write_text("click==8.1.7\n")

        result = reconcile_manifest(root, manifest)
        assert result.manifest_path == manifest
        ManifestReconciler().apply(result)
        assert manifest.read_text() == "click==8.1.7\nflask\n"

    def test_manifest_name_from_config(self, write_tree, scan_config):
        config = ScanConfig(stdlib=scan_config.stdlib, manifest_name="requirements.in")
        root = write_tree({"app.py": "import flask\n"})
        result = ManifestReconciler(config).reconcile(root)
        assert result.manifest_path == root / "requirements.in"

    def test_apply_selected_subset(self, write_tree):
        root = write_tree({"app.py": "import flask\nimport redis\nimport celery\n"})
        reconciler = ManifestReconciler()
        result = reconciler.reconcile(root)
        written = reconciler.apply(result, selected=["redis", "not-offered"])
        assert list(written) == ["redis"]
        assert (root / "requirements.txt").read_text() == "redis\n"

    def test_missing_root_raises_before_touching_manifest(self, tmp_path):
        with pytest.raises(ProjectRootError):
            reconcile_manifest(tmp_path / "missing")
        assert not (tmp_path / "missing").exists()

    def test_issues_reported(self, write_tree):
        root = write_tree({"bad.py": b"\xff\xfeimport broken\n", "ok.py": "import flask\n"})
        result = reconcile_manifest(root)
        assert result.added == ["flask"]
        assert len(result.issues) == 1

    def test_already_pinned_package_not_added(self, write_tree):
        root = write_tree(
            {"requirements.txt": "# pinned\nrequests==2.31.0\n", "app.py": "import requests\n"}
        )
        reconciler = ManifestReconciler()
        result = reconciler.reconcile(root)
        assert result.added == []
        assert result.manifest.get("requests").specifier == "==2.31.0"
