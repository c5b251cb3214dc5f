"""Scaffold engine — create and audit a project's directory/file layout."""

from pyracantha.engines.scaffold.models import MissingElements, ProjectTemplate, StructureReport
from pyracantha.engines.scaffold.structure import create_structure, find_missing

__all__ = [
    "MissingElements",
    "ProjectTemplate",
    "StructureReport",
    "create_structure",
    "find_missing",
]
