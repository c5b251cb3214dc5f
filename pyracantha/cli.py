"""CLI entry point: pyracantha.

Subcommands:
    pyracantha init-config -o pyracantha.json   # Write the default settings file
    pyracantha create ./my-project              # Scaffold the project layout
    pyracantha analyze ./my-project             # Report and add missing layout elements
    pyracantha scan ./my-project [--json]       # List imported external packages
    pyracantha update ./my-project              # Merge new packages into requirements.txt
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import NoReturn

import click

from pyracantha import __version__
from pyracantha.core.config import PyracanthaConfig, load_config, write_default_config
from pyracantha.core.logging import setup_logging
from pyracantha.engines.dependency_scanner.manifest import render_manifest
from pyracantha.engines.dependency_scanner.models import ScanIssue
from pyracantha.engines.dependency_scanner.reconciler import ManifestReconciler
from pyracantha.engines.scaffold.structure import create_structure, find_missing
from pyracantha.exceptions import PyracanthaError

_DEFAULT_CONFIG_FILE = "pyracantha.json"


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _report_issues(issues: list[ScanIssue]) -> None:
    for issue in issues:
        click.echo(f"Skipped {issue.path}: {issue.reason}", err=True)


@click.group()
@click.version_option(__version__, prog_name="pyracantha")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (JSON or pyproject.toml); defaults to $PYRACANTHA_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """pyracantha: scaffold Python projects and keep requirements.txt in sync."""
    setup_logging("DEBUG" if verbose else None)
    try:
        ctx.obj = load_config(config_path)
    except PyracanthaError as e:
        _fail(str(e))


@main.command("init-config")
@click.option(
    "-o",
    "--output",
    default=_DEFAULT_CONFIG_FILE,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(output: Path, force: bool) -> None:
    """Write the default settings file."""
    if output.exists() and not force:
        _fail(f"{output} already exists (use --force to overwrite)")
    write_default_config(output)
    click.echo(f"Default config written to {output}")


@main.command("create")
@click.argument("project_path", type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
def create(config: PyracanthaConfig, project_path: Path) -> None:
    """Create the project structure (existing files are left untouched)."""
    try:
        report = create_structure(project_path, config.template, config.manifest_name)
    except (PyracanthaError, OSError) as e:
        _fail(f"Failed to create project structure: {e}")

    if not report.created and not report.added_requirements:
        click.echo("Project structure is already up to date.")
        return
    click.echo(f"Project structure created in {project_path}")
    for rel in report.created:
        click.echo(f"  + {rel}")
    for name in report.added_requirements:
        click.echo(f"  + {config.manifest_name}: {name}")


@main.command("analyze")
@click.argument("project_path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-y", "--yes", is_flag=True, help="Add missing elements without asking")
@click.pass_obj
def analyze(config: PyracanthaConfig, project_path: Path, yes: bool) -> None:
    """Report template directories/files missing from an existing project."""
    try:
        todo = find_missing(project_path, config.template)
    except PyracanthaError as e:
        _fail(f"Failed to analyze project: {e}")

    if todo.is_up_to_date:
        click.echo("Project is up to date.")
        return

    click.echo("Missing elements:")
    for rel in todo.directories:
        click.echo(f"  {rel}/")
    for rel in todo.files:
        click.echo(f"  {rel}")

    if not yes and not click.confirm("Add missing elements?", default=False):
        click.echo("No changes made.")
        return

    try:
        create_structure(project_path, config.template, config.manifest_name)
    except (PyracanthaError, OSError) as e:
        _fail(f"Failed to analyze project: {e}")
    click.echo("Missing elements added.")


@main.command("scan")
@click.argument("project_path", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def scan(config: PyracanthaConfig, project_path: Path, as_json: bool) -> None:
    """List the external packages imported by a project."""
    reconciler = ManifestReconciler(config.to_scan_config())
    try:
        packages, issues = reconciler.discover(project_path)
    except PyracanthaError as e:
        _fail(str(e))

    if as_json:
        payload = {
            "packages": sorted(packages),
            "issues": [asdict(issue) for issue in issues],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    _report_issues(issues)
    if not packages:
        click.echo("No external packages found.")
        return
    for name in sorted(packages):
        click.echo(name)


@main.command("update")
@click.argument("project_path", type=click.Path(path_type=Path))
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Manifest to update (default: <project>/requirements.txt)",
)
@click.option("-y", "--yes", is_flag=True, help="Add all packages without asking")
@click.option("--select", is_flag=True, help="Ask for each package individually")
@click.option("--dry-run", is_flag=True, help="Print the resulting manifest, write nothing")
@click.pass_obj
def update(
    config: PyracanthaConfig,
    project_path: Path,
    manifest_path: Path | None,
    yes: bool,
    select: bool,
    dry_run: bool,
) -> None:
    """Add imported packages missing from requirements.txt, keeping existing pins."""
    reconciler = ManifestReconciler(config.to_scan_config())
    try:
        result = reconciler.reconcile(project_path, manifest_path)
    except PyracanthaError as e:
        _fail(f"Failed to update requirements: {e}")

    _report_issues(result.issues)
    if not result.added:
        click.echo("No packages to add.")
        return

    click.echo("Missing packages:")
    for name in result.added:
        click.echo(f"  {name}")

    if dry_run:
        click.echo(f"\n{result.manifest_path} would become:")
        click.echo(render_manifest(result.manifest), nl=False)
        return

    selected: list[str] | None = None
    if select:
        selected = [name for name in result.added if click.confirm(f"Add {name}?", default=True)]
        if not selected:
            click.echo("No changes made.")
            return
    elif not yes and not click.confirm(f"Add packages to {result.manifest_path}?", default=False):
        click.echo("No changes made.")
        return

    try:
        written = reconciler.apply(result, selected)
    except PyracanthaError as e:
        _fail(f"Failed to update requirements: {e}")

    count = len(written) - len(result.existing)
    click.echo(f"{result.manifest_path} updated ({count} package(s) added).")


if __name__ == "__main__":
    main()
