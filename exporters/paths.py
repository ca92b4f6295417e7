"""Path display helpers shared by the exporters."""

from pathlib import Path
from typing import Optional


def display_path(path: Path, base: Optional[Path] = None) -> str:
    """
    Get the string shown for a file path.

    Paths are shown as discovered unless ``base`` is given, in which case
    paths under ``base`` are shown relative to it.
    """
    if base is not None:
        try:
            rel_path = path.resolve().relative_to(base.resolve())
            return str(rel_path).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")
