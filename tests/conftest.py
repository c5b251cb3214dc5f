"""Shared pytest fixtures for pyracantha tests."""

from pathlib import Path

import pytest

from pyracantha.core.config import CONFIG_ENV_VAR
from pyracantha.engines.dependency_scanner.models import ScanConfig


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def scan_config() -> ScanConfig:
    return ScanConfig.default()


@pytest.fixture
def write_tree(tmp_path):
    """Write ``{relative_path: content}`` under *root* (default: tmp_path)."""

    def _write(files: dict[str, str | bytes], root: Path | None = None) -> Path:
        base = root or tmp_path
        for rel, content in files.items():
            path = base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
        return base

    return _write
