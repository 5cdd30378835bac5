"""
Model Registry

Startup-populated lookup table from (resource type, library) to the bridge
model class serving it. Core models are registered once per resource type;
libraries register overrides for the resource types they extend.

Lookups never fail: an unknown library, or a library without an override
for the resource type, resolves to the core model.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minerva.models.base import BridgeModel

logger = logging.getLogger(__name__)

LIBRARIES_NAMESPACE = "libraries"


class ModelRegistry:
    def __init__(self) -> None:
        self._core: dict[str, type[BridgeModel]] = {}
        self._overrides: dict[tuple[str, str], type[BridgeModel]] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register_core(self, model_class: type[BridgeModel]) -> None:
        self._core[model_class.resource_type] = model_class
        logger.debug("Core model registered: %s", model_class.resource_type)

    def register_override(self, library: str, model_class: type[BridgeModel]) -> None:
        """Register ``model_class`` as ``library``'s override of its resource type."""
        if model_class.library != library:
            raise ValueError(
                f"{model_class.__name__}.library is {model_class.library!r}, expected {library!r}"
            )
        key = (model_class.resource_type, library)
        self._overrides[key] = model_class
        logger.info("Model override registered: %s", self.qualified_name(*key))

    def unregister_library(self, library: str) -> None:
        for key in [key for key in self._overrides if key[1] == library]:
            del self._overrides[key]

    def clear(self) -> None:
        self._core.clear()
        self._overrides.clear()

    # ── Lookup ────────────────────────────────────────────────────────────────

    def core(self, resource_type: str) -> type[BridgeModel] | None:
        return self._core.get(resource_type)

    def override(self, resource_type: str, library: str | None) -> type[BridgeModel] | None:
        if not library:
            return None
        return self._overrides.get((resource_type, library))

    def resolve(self, resource_type: str, library: str | None) -> type[BridgeModel] | None:
        """Override for (resource_type, library) if registered, else the core model."""
        return self.override(resource_type, library) or self.core(resource_type)

    def knows(self, resource_type: str) -> bool:
        """True if any model (core or override) serves ``resource_type``."""
        return resource_type in self._core or any(key[0] == resource_type for key in self._overrides)

    def libraries(self) -> set[str]:
        return {library for _, library in self._overrides}

    @staticmethod
    def qualified_name(resource_type: str, library: str | None) -> str:
        """Dotted name of an override, e.g. ``libraries.gallery.models.Block``."""
        return f"{LIBRARIES_NAMESPACE}.{library}.models.{resource_type}"


# ── Global singleton ──────────────────────────────────────────────────────────
model_registry = ModelRegistry()
