"""Plain build-order exporter: one file per line."""

from pathlib import Path
from typing import Optional, Sequence

from scanner.builder import Project
from .paths import display_path


def to_build_order(
    project: Project,
    order: Sequence[int],
    base: Optional[Path] = None,
) -> str:
    """
    Render the build order as one path per line.

    Args:
        project: The scanned project.
        order: File indices in build order.
        base: Optional base path for relative path display.

    Returns:
        Newline-separated file paths.
    """
    return "\n".join(display_path(project.files[index].path, base) for index in order)
