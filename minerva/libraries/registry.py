"""
Library Registry

In-process store of loaded libraries, keyed by name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minerva.libraries.base import LibraryBase

logger = logging.getLogger(__name__)


class LibraryRegistry:
    def __init__(self) -> None:
        self._libraries: dict[str, LibraryBase] = {}

    def register(self, library: LibraryBase) -> None:
        self._libraries[library.meta.name] = library
        logger.info("Library registered: %s v%s", library.meta.name, library.meta.version)

    def unregister(self, name: str) -> LibraryBase | None:
        return self._libraries.pop(name, None)

    def all_libraries(self) -> list[LibraryBase]:
        """Return all libraries in load order."""
        return list(self._libraries.values())

    def is_installed(self, name: str) -> bool:
        return name in self._libraries


# ── Global singleton ──────────────────────────────────────────────────────────
library_registry = LibraryRegistry()
