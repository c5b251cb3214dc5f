"""requirements.txt reader, differ and writer."""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Iterable
from pathlib import Path

import structlog

from pyracantha.engines.dependency_scanner.models import Manifest, ManifestEntry
from pyracantha.exceptions import ManifestReadError, ManifestWriteError

log = structlog.get_logger("pyracantha.engine")

# Matches: bare package name, optionally pinned with ==version
_ENTRY_RE = re.compile(
    r"^([A-Za-z0-9_-]+)"  # package name
    r"(==[0-9A-Za-z._-]+)?$",  # optional pin
)


def parse_manifest(content: str) -> Manifest:
    """Parse manifest text, skipping lines that are not ``name`` or ``name==version``.

    A name listed twice keeps its last occurrence.
    """
    manifest = Manifest()
    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        m = _ENTRY_RE.match(line)
        if not m:
            log.debug("manifest.line_ignored", line=lineno, content=line)
            continue

        name = m.group(1)
        manifest.entries[name] = ManifestEntry(name=name, specifier=m.group(2) or "")
    return manifest


def read_manifest(path: Path) -> Manifest:
    """Read the manifest at *path*; a missing file is an empty manifest."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Manifest()
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(path, f"cannot read manifest ({exc})") from exc
    return parse_manifest(content)


def missing(discovered: Iterable[str], manifest: Manifest) -> list[str]:
    """Return discovered names not yet in *manifest*, sorted (case-sensitive)."""
    return sorted({name for name in discovered if name not in manifest})


def reconcile(
    manifest: Manifest, new_packages: Iterable[str | ManifestEntry]
) -> Manifest:
    """Merge *new_packages* into a copy of *manifest*.

    Existing entries keep their specifiers. New names are added unversioned
    unless passed as a :class:`ManifestEntry` carrying a specifier.
    """
    merged = Manifest(entries=dict(manifest.entries))
    for item in new_packages:
        entry = item if isinstance(item, ManifestEntry) else ManifestEntry(name=item)
        if entry.name not in merged:
            merged.entries[entry.name] = entry
    return merged


def render_manifest(manifest: Manifest) -> str:
    """Serialize *manifest*: one entry per line, sorted by name, newline-terminated."""
    lines = [manifest.entries[name].render() for name in manifest.names()]
    return "".join(f"{line}\n" for line in lines)


def persist(manifest: Manifest, path: Path) -> None:
    """Replace the file at *path* with the full rendered *manifest*.

    The content is written to a temporary file in the same directory and
    moved over *path*, so readers see either the old or the new manifest.
    Raises :class:`ManifestWriteError` if any step fails.
    """
    content = render_manifest(manifest)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        # mkstemp creates 0600; keep the manifest's existing permissions
        try:
            mode = path.stat().st_mode & 0o777
        except FileNotFoundError:
            mode = 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
        raise ManifestWriteError(path, f"cannot write manifest ({exc})") from exc

    log.info("manifest.persisted", path=str(path), entries=len(manifest))
