"""
Library Base Classes

LibraryMeta: declarative metadata for a library (name, version, models).
LibraryBase: abstract base class all libraries must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minerva.models.base import BridgeModel


@dataclass
class LibraryMeta:
    """
    Declarative metadata describing a library.

    Attributes:
        name:         Package name under minerva/libraries, e.g. "gallery".
                      Records owned by the library store this in ``library``.
        version:      Semver string, e.g. "1.0.0".
        description:  Human-readable description.
        author:       Library author (defaults to "Minerva Core Team").
        models:       Bridge model overrides, one per resource type.
        access_rules: Extra named access rules the library's policies use.
    """

    name: str
    version: str
    description: str
    author: str = "Minerva Core Team"
    models: list[type[BridgeModel]] = field(default_factory=list)
    access_rules: dict[str, Callable[[Any], bool]] = field(default_factory=dict)


class LibraryBase(ABC):
    """
    Abstract base class for Minerva libraries.

    Subclasses must implement the `meta` property.
    Lifecycle methods default to no-ops.
    """

    @property
    @abstractmethod
    def meta(self) -> LibraryMeta:
        """Return the library's metadata."""
        ...

    async def on_load(self, config: dict[str, Any]) -> None:  # noqa: B027
        """Called once at startup with the library's persisted config dict."""

    async def on_unload(self) -> None:  # noqa: B027
        """Called when the application shuts down."""
