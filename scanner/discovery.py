"""File discovery utilities for finding Fortran sources."""

import logging
import stat
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from errors import LimitExceededError, ScanError

logger = logging.getLogger(__name__)


DEFAULT_EXTENSIONS = (".f90", ".for")
DEFAULT_MAX_FILES = 100000


def has_source_extension(name: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """Check whether a file name ends in one of ``extensions``, ignoring case."""
    lowered = name.lower()
    return any(lowered.endswith(ext.lower()) for ext in extensions)


def iter_files(
    directory: Path,
    recursive: bool = False,
    extensions: Optional[Sequence[str]] = None,
) -> Iterator[Path]:
    """
    Iterate over source files in a directory.

    Entries are visited in sorted name order. In recursive mode each
    subdirectory is descended into at its sorted position.

    Args:
        directory: Directory to scan.
        recursive: If True, descend into subdirectories.
        extensions: File name endings to include. If None, uses
                    DEFAULT_EXTENSIONS.

    Yields:
        Paths of matching files, built by joining ``directory`` and the
        entry names.

    Raises:
        ScanError: If a directory cannot be listed or an entry cannot be
            stat'ed (for example a dangling symlink).
    """
    if extensions is None:
        extensions = DEFAULT_EXTENSIONS

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise ScanError(f"Cannot read directory {directory}: {e.strerror or e}") from e

    for entry in entries:
        try:
            mode = entry.stat().st_mode
        except OSError as e:
            raise ScanError(f"Cannot stat {entry}: {e.strerror or e}") from e

        if stat.S_ISDIR(mode):
            if recursive:
                yield from iter_files(entry, recursive, extensions)
        elif stat.S_ISREG(mode):
            if has_source_extension(entry.name, extensions):
                yield entry


def discover_files(
    dirs: Sequence[str] = (),
    recursive_dirs: Sequence[str] = (),
    extensions: Optional[Sequence[str]] = None,
    max_files: int = DEFAULT_MAX_FILES,
) -> List[Path]:
    """
    Collect source files from shallow and recursive directories.

    All shallow directories are scanned first, in the order given, followed
    by all recursive directories. That order is what breaks ties in the
    build order.

    Raises:
        ScanError: If a directory cannot be read or an entry cannot be stat'ed.
        LimitExceededError: If more than ``max_files`` files are found.
    """
    files: List[Path] = []
    targets = [(d, False) for d in dirs] + [(d, True) for d in recursive_dirs]

    for directory, recursive in targets:
        for path in iter_files(Path(directory), recursive, extensions):
            if len(files) >= max_files:
                raise LimitExceededError("source files", max_files)
            files.append(path)

    logger.info("Discovered %d source files in %d directories", len(files), len(targets))
    return files
