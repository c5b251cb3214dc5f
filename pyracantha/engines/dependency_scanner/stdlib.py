"""Standard-library registry: module names excluded from dependency discovery."""

from __future__ import annotations

import json
from pathlib import Path

STDLIB_DATA_FILE = Path(__file__).parent / "data" / "stdlib_modules.json"


def load_stdlib_modules(path: Path = STDLIB_DATA_FILE) -> frozenset[str]:
    """Load the set of top-level module names that ship with the interpreter.

    The file is a sorted JSON array of strings covering the public names of
    ``sys.stdlib_module_names`` for every supported interpreter, plus a few
    modules removed in later releases. Callers load it once per invocation
    and pass the result around inside a ``ScanConfig``.
    """
    names = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ValueError(f"{path} must contain a JSON array of module names")
    return frozenset(names)
