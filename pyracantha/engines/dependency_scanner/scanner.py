"""Import scanner — walk a project tree and extract import targets from source files."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from pathlib import Path

import structlog

from pyracantha.engines.dependency_scanner.models import ImportCandidate, ScanConfig, ScanIssue
from pyracantha.exceptions import ProjectRootError

log = structlog.get_logger("pyracantha.engine")

# Both quoting styles in one alternation so the earliest opener wins
_TRIPLE_QUOTED_RE = re.compile(r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\'')

# import a.b.c, d as e
_IMPORT_RE = re.compile(r"^import\s+(.+)$")
# from a.b import c
_FROM_RE = re.compile(r"^from\s+(\S+)\s+import\b")


def strip_noise(text: str) -> str:
    """Remove triple-quoted blocks and ``#`` comments, keeping line numbers.

    This is a textual heuristic: a ``#`` inside an ordinary string literal
    truncates the line, and import-like text inside a single-quoted string
    is not removed.
    """
    text = _TRIPLE_QUOTED_RE.sub(lambda m: "\n" * m.group(0).count("\n"), text)
    return "\n".join(line.split("#", 1)[0] for line in text.splitlines())


def _first_segment(path: str) -> str:
    return path.split(".", 1)[0]


def extract_candidates(text: str, source_file: str = "") -> list[ImportCandidate]:
    """Extract one candidate per imported path in *text*."""
    candidates: list[ImportCandidate] = []
    for lineno, line in enumerate(strip_noise(text).splitlines(), start=1):
        for statement in line.split(";"):
            statement = statement.strip()
            if not statement:
                continue

            m = _FROM_RE.match(statement)
            if m:
                candidates.append(
                    ImportCandidate(_first_segment(m.group(1)), source_file, lineno)
                )
                continue

            m = _IMPORT_RE.match(statement)
            if not m:
                continue
            for target in m.group(1).split(","):
                parts = target.split()
                if not parts:
                    continue
                # "a.b as c" -> "a.b"
                candidates.append(
                    ImportCandidate(_first_segment(parts[0]), source_file, lineno)
                )
    return candidates


class ImportScanner:
    """Lazily yield :class:`ImportCandidate` values for every source file under *root*.

    Each iteration walks the tree again from scratch. Files and directories
    that cannot be read are skipped and recorded in :attr:`issues`.
    """

    def __init__(self, root: Path | str, config: ScanConfig) -> None:
        root = Path(root)
        if not root.exists():
            raise ProjectRootError(root, "does not exist")
        if not root.is_dir():
            raise ProjectRootError(root, "is not a directory")
        if not os.access(root, os.R_OK | os.X_OK):
            raise ProjectRootError(root, "is not readable")

        self.root = root
        self.config = config
        self.issues: list[ScanIssue] = []
        self.files_scanned = 0

    def __iter__(self) -> Iterator[ImportCandidate]:
        self.issues = []
        self.files_scanned = 0
        for path in self._iter_source_files():
            candidates = self._scan_file(path)
            if candidates is None:
                continue
            self.files_scanned += 1
            yield from candidates

    # ── traversal ────────────────────────────────────────────────────────

    def _iter_source_files(self) -> Iterator[Path]:
        """Depth-first walk with an explicit stack; symlinked dirs are not followed."""
        stack: list[Path] = [self.root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as exc:
                if directory == self.root:
                    raise ProjectRootError(self.root, str(exc)) from exc
                self._record(directory, exc)
                continue

            subdirs: list[Path] = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        if entry.name in self.config.excluded_dirs:
                            log.debug("scanner.dir_excluded", path=entry.path)
                            continue
                        subdirs.append(Path(entry.path))
                    elif entry.name.endswith(self.config.source_suffix) and entry.is_file():
                        yield Path(entry.path)
                except OSError as exc:
                    # Entry removed or unreadable between listing and stat
                    self._record(Path(entry.path), exc)

            # Reversed so the stack pops subdirectories in name order
            stack.extend(reversed(subdirs))

    def _scan_file(self, path: Path) -> list[ImportCandidate] | None:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._record(path, exc)
            return None
        return extract_candidates(text, str(path.relative_to(self.root)))

    def _record(self, path: Path, exc: BaseException) -> None:
        issue = ScanIssue(path=str(path), reason=f"{type(exc).__name__}: {exc}")
        self.issues.append(issue)
        log.warning("scanner.path_skipped", path=issue.path, reason=issue.reason)
