"""Dependency graph model and topological ordering."""

from .model import DependencyGraph, SourceFile
from .toposort import SortResult, find_cycle, topological_sort

__all__ = [
    "DependencyGraph",
    "SourceFile",
    "SortResult",
    "find_cycle",
    "topological_sort",
]
