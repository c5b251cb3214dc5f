"""Configuration loading — JSON file or ``[tool.pyracantha]`` in pyproject.toml."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pyracantha.engines.dependency_scanner.models import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_SOURCE_SUFFIX,
    ScanConfig,
)
from pyracantha.engines.dependency_scanner.stdlib import load_stdlib_modules
from pyracantha.engines.scaffold.models import ProjectTemplate, validate_file_name
from pyracantha.exceptions import ConfigError

CONFIG_ENV_VAR = "PYRACANTHA_CONFIG"


class PyracanthaConfig(BaseModel):
    """Settings file contents: the project template plus scanner options."""

    model_config = ConfigDict(extra="forbid")

    template: ProjectTemplate = Field(default_factory=ProjectTemplate)
    excluded_dirs: list[str] = list(DEFAULT_EXCLUDED_DIRS)
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    manifest_name: str = DEFAULT_MANIFEST_NAME
    ignored_packages: list[str] = []

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_template(cls, data: Any) -> Any:
        # Older config files put "directories"/"files" at the top level
        if isinstance(data, dict) and "template" not in data:
            flat = {k: data[k] for k in ("directories", "files", "requirements") if k in data}
            if flat:
                data = {k: v for k, v in data.items() if k not in flat}
                data["template"] = flat
        return data

    @field_validator("source_suffix")
    @classmethod
    def _non_empty_suffix(cls, v: str) -> str:
        if not v:
            raise ValueError("source_suffix must not be empty")
        return v

    @field_validator("manifest_name")
    @classmethod
    def _valid_manifest_name(cls, v: str) -> str:
        return validate_file_name(v)

    def to_scan_config(self, stdlib: frozenset[str] | None = None) -> ScanConfig:
        """Build the immutable :class:`ScanConfig` passed to the engines."""
        return ScanConfig(
            stdlib=stdlib if stdlib is not None else load_stdlib_modules(),
            ignored_packages=frozenset(self.ignored_packages),
            excluded_dirs=frozenset(self.excluded_dirs),
            source_suffix=self.source_suffix,
            manifest_name=self.manifest_name,
        )


def load_config(path: Path | str | None = None) -> PyracanthaConfig:
    """Load settings from *path*, else from ``$PYRACANTHA_CONFIG``, else defaults.

    ``*.toml`` files are read as TOML; for ``pyproject.toml`` only the
    ``[tool.pyracantha]`` table is used. Anything else is parsed as JSON.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return PyracanthaConfig()
        path = env_path

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(config_path, f"cannot read file ({exc})") from exc

    try:
        if config_path.suffix == ".toml":
            data: Any = tomllib.loads(text)
            if config_path.name == "pyproject.toml":
                data = data.get("tool", {}).get("pyracantha", {})
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(config_path, str(exc)) from exc

    try:
        return PyracanthaConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(config_path, str(exc)) from exc


def write_default_config(path: Path) -> PyracanthaConfig:
    """Write the default settings to *path* as JSON and return them."""
    config = PyracanthaConfig()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(), indent=4) + "\n", encoding="utf-8")
    return config
