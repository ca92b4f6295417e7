"""JSON exporter for the build order (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from scanner.builder import Project
from .paths import display_path


def to_json(
    project: Project,
    order: Sequence[int],
    base: Optional[Path] = None,
    indent: int = 2,
    include_external: bool = True,
) -> str:
    """
    Convert the build order and dependency graph to JSON format.

    Args:
        project: The scanned project.
        order: File indices in build order.
        base: Optional base path for relative path display.
        indent: JSON indentation level.
        include_external: If True, list each file's external (unresolved)
                          modules.

    Returns:
        JSON string with ``order``, ``files`` (in build order) and ``edges``.
    """
    paths = [display_path(source.path, base) for source in project.files]

    files: List[Dict[str, Any]] = []
    for index in order:
        source = project.files[index]
        entry: Dict[str, Any] = {
            "path": paths[index],
            "module": source.defined_module,
            "modules": list(source.defined_modules),
            "uses": list(source.used_modules),
            "depends_on": [paths[dep] for dep in project.graph.get_dependencies(index)],
        }
        if include_external:
            entry["external"] = project.external_modules(index)
        files.append(entry)

    edges: List[Dict[str, str]] = []
    for source_index, target_index in project.graph.iter_edges():
        edges.append({"source": paths[source_index], "target": paths[target_index]})

    data: Dict[str, Any] = {
        "order": [paths[index] for index in order],
        "files": files,
        "edges": edges,
    }

    return json.dumps(data, indent=indent)
