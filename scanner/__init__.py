"""Scanner module for source discovery, declaration scanning and graph construction."""

from .discovery import discover_files, iter_files
from .parser import scan_file, scan_source
from .registry import ModuleRegistry
from .builder import Project, build_project

__all__ = [
    "discover_files",
    "iter_files",
    "scan_file",
    "scan_source",
    "ModuleRegistry",
    "Project",
    "build_project",
]
