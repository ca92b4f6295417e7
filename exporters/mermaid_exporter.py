"""Mermaid flowchart exporter for the dependency graph."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from scanner.builder import Project
from .paths import display_path


def to_mermaid(
    project: Project,
    order: Sequence[int],
    orientation: str = "LR",
    base: Optional[Path] = None,
    group_by_directory: bool = False,
    include_external: bool = False,
) -> str:
    """
    Convert the dependency graph to Mermaid flowchart syntax.

    Nodes are declared in build order and each edge points from a dependency
    to the file that uses it.

    Args:
        project: The scanned project.
        order: File indices in build order.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        base: Optional base path for relative path display.
        group_by_directory: If True, group nodes by their directory.
        include_external: If True, show external (unresolved) modules as
                          dashed nodes.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    node_ids: Dict[int, str] = {}
    used_ids = set()
    for index in order:
        node_id = _unique_id(_sanitize_id(display_path(project.files[index].path, base)), used_ids)
        node_ids[index] = node_id

    external_ids: Dict[str, str] = {}
    if include_external:
        for index in order:
            for name in project.external_modules(index):
                if name not in external_ids:
                    external_ids[name] = _unique_id(_sanitize_id(f"external_{name}"), used_ids)

    if group_by_directory:
        lines.extend(_grouped_nodes(project, order, node_ids, base))
    else:
        for index in order:
            lines.append(f'    {node_ids[index]}["{_get_label(project, index, base)}"]')

    if external_ids:
        lines.append("")
        lines.append("    %% External modules")
        for name in sorted(external_ids):
            external_id = external_ids[name]
            lines.append(f'    {external_id}["{name} [EXTERNAL]"]')
            lines.append(f"    style {external_id} stroke:#888888,stroke-dasharray: 5 5")

    lines.append("")
    for index in order:
        for dependency in project.graph.get_dependencies(index):
            lines.append(f"    {node_ids[dependency]} --> {node_ids[index]}")

    if external_ids:
        for index in order:
            for name in project.external_modules(index):
                lines.append(f"    {external_ids[name]} -.-> {node_ids[index]}")

    return "\n".join(lines)


def _grouped_nodes(
    project: Project,
    order: Sequence[int],
    node_ids: Dict[int, str],
    base: Optional[Path],
) -> List[str]:
    """Generate node declarations inside one subgraph per directory."""
    groups: Dict[str, List[int]] = {}
    for index in order:
        directory = display_path(project.files[index].path.parent, base)
        groups.setdefault(directory, []).append(index)

    lines: List[str] = []
    used_ids = set(node_ids.values())
    for directory in sorted(groups):
        subgraph_id = _unique_id(_sanitize_id(f"dir_{directory}"), used_ids)
        lines.append(f'    subgraph {subgraph_id}["{directory}"]')
        for index in groups[directory]:
            lines.append(f'        {node_ids[index]}["{_get_label(project, index, base)}"]')
        lines.append("    end")
    return lines


def _sanitize_id(value: str) -> str:
    """
    Sanitize a string to be a valid Mermaid node ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _unique_id(node_id: str, used_ids: set) -> str:
    """Suffix ``node_id`` until it does not clash with ``used_ids``, then claim it."""
    candidate = node_id
    suffix = 2
    while candidate in used_ids:
        candidate = f"{node_id}_{suffix}"
        suffix += 1
    used_ids.add(candidate)
    return candidate


def _get_label(project: Project, index: int, base: Optional[Path]) -> str:
    """Get the display label for a node: its path and the module it defines."""
    source = project.files[index]
    label = display_path(source.path, base)
    if source.defined_module:
        label += f" ({source.defined_module})"
    return label
