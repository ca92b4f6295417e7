"""Declaration scanner for extracting module definitions and uses from Fortran sources."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from errors import LimitExceededError, ScanError

logger = logging.getLogger(__name__)


# Longest line considered; the rest of a longer line is dropped
MAX_LINE_LENGTH = 1023

# Longest module name kept; longer names are truncated
MAX_NAME_LENGTH = 99

DEFAULT_MAX_USES_PER_FILE = 10000

# Only ASCII whitespace separates words
_WHITESPACE = " \t\n\v\f\r"

# "module foo" defines a module, but "module procedure foo" does not
_DEFINITION_RE = re.compile(r"module[ \t\n\v\f\r]", re.IGNORECASE)
_PROCEDURE_RE = re.compile(r"procedure", re.IGNORECASE)
_USE_RE = re.compile(r"use[ \t\n\v\f\r]", re.IGNORECASE)
_SECOND_WORD_RE = re.compile(r"[^ \t\n\v\f\r]+[ \t\n\v\f\r]+([^ \t\n\v\f\r,]*)")


@dataclass(frozen=True)
class ScanResult:
    """Modules defined and used by one source file, all lowercase."""

    defined_modules: Tuple[str, ...] = ()
    used_modules: Tuple[str, ...] = ()

    @property
    def defined_module(self) -> Optional[str]:
        """The module the file declares. The last definition line wins."""
        if not self.defined_modules:
            return None
        return self.defined_modules[-1]


def extract_second_word(line: str) -> Optional[str]:
    """
    Extract the lowercased second word of a statement.

    The word ends at whitespace or at a comma, so that
    ``use mymod, only: x`` yields ``mymod``.

    Args:
        line: A trimmed source line.

    Returns:
        The lowercased word, or None if the line has no second word.
    """
    match = _SECOND_WORD_RE.match(line)
    if match is None:
        return None

    word = match.group(1)
    if not word:
        return None

    return word[:MAX_NAME_LENGTH].lower()


def parse_definition(line: str) -> Optional[str]:
    """Return the module name if the trimmed line is a module definition."""
    if not _DEFINITION_RE.match(line):
        return None
    if _PROCEDURE_RE.search(line):
        return None
    return extract_second_word(line)


def parse_use(line: str) -> Optional[str]:
    """Return the module name if the trimmed line is a use statement."""
    if not _USE_RE.match(line):
        return None
    return extract_second_word(line)


def scan_source(
    text: str,
    max_uses: int = DEFAULT_MAX_USES_PER_FILE,
) -> ScanResult:
    """
    Scan source text for module definitions and use statements.

    Args:
        text: Full contents of a source file.
        max_uses: Maximum number of distinct modules a file may use.

    Returns:
        ScanResult with the defined modules in file order and the used
        modules de-duplicated in first-seen order.

    Raises:
        LimitExceededError: If the file uses more than ``max_uses`` modules.
    """
    defined: List[str] = []
    used: List[str] = []
    seen = set()

    for raw_line in text.split("\n"):
        line = raw_line[:MAX_LINE_LENGTH].strip(_WHITESPACE)
        if not line:
            continue

        name = parse_definition(line)
        if name is not None:
            defined.append(name)
            continue

        name = parse_use(line)
        if name is not None and name not in seen:
            if len(used) >= max_uses:
                raise LimitExceededError("used modules per file", max_uses)
            seen.add(name)
            used.append(name)

    return ScanResult(defined_modules=tuple(defined), used_modules=tuple(used))


def read_source(file_path: Path) -> str:
    """
    Read a source file as text.

    Raises:
        ScanError: If the file cannot be read.
    """
    try:
        # newline="" keeps a lone carriage return inside its line
        with open(file_path, encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        raise ScanError(f"Cannot read {file_path}: {e.strerror or e}") from e


def scan_file(
    file_path: Path,
    max_uses: int = DEFAULT_MAX_USES_PER_FILE,
) -> ScanResult:
    """Read and scan a single source file."""
    result = scan_source(read_source(file_path), max_uses=max_uses)
    logger.debug(
        "%s: defines %s, uses %s",
        file_path,
        list(result.defined_modules),
        list(result.used_modules),
    )
    return result
