"""Registry mapping module names to the files that define them."""

from typing import Dict, Iterator, Optional, Tuple


class ModuleRegistry:
    """
    A mapping from lowercase module name to the index of its defining file.

    Duplicate names are never rejected: the most recent insert for a name
    wins, and ``insert`` hands back the index it replaced so the caller can
    decide whether to warn.
    """

    def __init__(self):
        self._modules: Dict[str, int] = {}

    def insert(self, name: str, file_index: int) -> Optional[int]:
        """
        Register ``name`` as defined by ``file_index``.

        Returns:
            The file index previously registered for ``name``, or None.
        """
        previous = self._modules.get(name)
        self._modules[name] = file_index
        return previous

    def lookup(self, name: str) -> Optional[int]:
        """Return the index of the file defining ``name``, or None if unknown."""
        return self._modules.get(name)

    def items(self) -> Iterator[Tuple[str, int]]:
        """Iterate over (module name, file index) pairs in order of first registration."""
        return iter(self._modules.items())

    def __contains__(self, name: str) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleRegistry(modules={len(self._modules)})"
