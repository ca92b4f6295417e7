"""Makefile-style dependency manifest exporter."""

from pathlib import Path
from typing import List, Optional, Sequence

from scanner.builder import Project
from .paths import display_path


def to_make_deps(
    project: Project,
    order: Sequence[int],
    base: Optional[Path] = None,
) -> str:
    """
    Render one ``file: dependencies...`` rule per file, in build order.

    Each file is followed by the files it directly depends on, in the order
    the dependencies were discovered. A file with no dependencies renders as
    ``file:`` with nothing after the colon.

    Args:
        project: The scanned project.
        order: File indices in build order.
        base: Optional base path for relative path display.

    Returns:
        Makefile dependency lines.
    """
    lines: List[str] = []
    for index in order:
        rule = display_path(project.files[index].path, base) + ":"
        for dependency in project.dependencies_of(index):
            rule += " " + display_path(dependency.path, base)
        lines.append(rule)
    return "\n".join(lines)
