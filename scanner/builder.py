"""Project builder that orchestrates scanning, module registration and graph construction."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from errors import CyclicDependencyError
from graph.model import DEFAULT_MAX_EDGES_PER_NODE, DependencyGraph, SourceFile
from graph.toposort import find_cycle, topological_sort
from .parser import DEFAULT_MAX_USES_PER_FILE, scan_file
from .registry import ModuleRegistry

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """
    Everything known about one scan: the files, the module registry and the
    dependency graph over file indices.
    """

    files: List[SourceFile]
    registry: ModuleRegistry
    graph: DependencyGraph

    def build_order(self) -> List[int]:
        """
        Compute the build order as a list of file indices.

        Raises:
            CyclicDependencyError: If the modules depend on each other in a
                cycle. No partial order is returned.
        """
        result = topological_sort(self.graph)
        if not result.ok:
            cycle = find_cycle(self.graph, result.blocked)
            raise CyclicDependencyError([str(self.files[i].path) for i in cycle])
        return result.order

    def dependencies_of(self, index: int) -> List[SourceFile]:
        """Files that ``index`` directly depends on, in discovery order."""
        return [self.files[dep] for dep in self.graph.get_dependencies(index)]

    def external_modules(self, index: int) -> List[str]:
        """Modules used by ``index`` that no scanned file defines."""
        return [name for name in self.files[index].used_modules if name not in self.registry]


def scan_files(
    paths: Iterable[Path],
    max_uses: int = DEFAULT_MAX_USES_PER_FILE,
) -> List[SourceFile]:
    """Read every file once and record the modules it defines and uses."""
    files: List[SourceFile] = []
    for path in paths:
        result = scan_file(path, max_uses=max_uses)
        files.append(
            SourceFile(
                path=path,
                defined_modules=list(result.defined_modules),
                used_modules=list(result.used_modules),
            )
        )
    return files


def register_modules(files: Sequence[SourceFile]) -> ModuleRegistry:
    """
    Register every module definition of every file.

    A name defined again later replaces the earlier entry; a warning is
    logged when the two definitions live in different files.
    """
    registry = ModuleRegistry()
    for index, source in enumerate(files):
        for name in source.defined_modules:
            previous = registry.insert(name, index)
            if previous is not None and previous != index:
                logger.warning(
                    "Module '%s' is defined in both %s and %s; using %s",
                    name,
                    files[previous].path,
                    source.path,
                    source.path,
                )
    return registry


def build_dependency_graph(
    files: Sequence[SourceFile],
    registry: ModuleRegistry,
    max_edges_per_node: int = DEFAULT_MAX_EDGES_PER_NODE,
) -> DependencyGraph:
    """
    Resolve each file's used modules through the registry into graph edges.

    Names with no defining file are treated as external, pre-built modules
    and dropped.
    """
    graph = DependencyGraph(len(files), max_edges_per_node=max_edges_per_node)
    for index, source in enumerate(files):
        for name in source.used_modules:
            definer = registry.lookup(name)
            if definer is None:
                logger.debug("%s: module '%s' is external, ignoring", source.path, name)
                continue
            graph.add_edge(definer, index)
    return graph


def build_project(
    paths: Sequence[Path],
    max_uses_per_file: int = DEFAULT_MAX_USES_PER_FILE,
    max_edges_per_node: int = DEFAULT_MAX_EDGES_PER_NODE,
) -> Project:
    """
    Scan source files and build their dependency graph.

    All files are scanned and all definitions registered before any use is
    resolved, so a file may use a module defined in a file listed after it.

    Args:
        paths: Source files in discovery order.
        max_uses_per_file: Maximum distinct modules one file may use.
        max_edges_per_node: Maximum dependents of a single file.

    Returns:
        Project holding the files, registry and graph.
    """
    files = scan_files(paths, max_uses=max_uses_per_file)
    registry = register_modules(files)
    graph = build_dependency_graph(files, registry, max_edges_per_node=max_edges_per_node)

    logger.info(
        "Scanned %d files: %d modules, %d dependencies",
        len(files),
        len(registry),
        graph.edge_count(),
    )
    return Project(files=files, registry=registry, graph=graph)
