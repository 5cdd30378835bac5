"""
Minerva libraries

Each sub-package of this package is a library: it exposes a ``library``
object (a LibraryBase instance) and may ship ``views/`` templates that take
precedence over the core templates for records it owns.

Public API:
    LibraryMeta      - library metadata dataclass
    LibraryBase      - abstract base class for all libraries
    LibraryRegistry  - loaded-library store
    library_registry - global singleton registry instance
"""

from .base import LibraryBase, LibraryMeta
from .registry import LibraryRegistry, library_registry

__all__ = ["LibraryBase", "LibraryMeta", "LibraryRegistry", "library_registry"]
