"""
Library Loader

Discovers library packages under minerva/libraries, reads their enabled
flags from the libraries config file and registers each library's model
overrides and access rules at application startup.

A library that fails to import or load is logged and skipped; it never
prevents the others, or the application, from starting.
"""

from __future__ import annotations

import importlib
import json
import logging
import pkgutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from minerva.config import settings
from minerva.libraries.base import LibraryBase
from minerva.security.access import access_checker

if TYPE_CHECKING:
    from minerva.bridge.registry import ModelRegistry
    from minerva.libraries.registry import LibraryRegistry
    from minerva.security.access import AccessChecker

logger = logging.getLogger(__name__)

PACKAGE = "minerva.libraries"


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_libraries_config(path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load library configuration from disk.

    Returns an empty config (every discovered library enabled with no
    options) if the file does not exist or cannot be parsed.
    """
    path = Path(path or settings.libraries_config_file)
    if path.exists():
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read libraries config: %s", exc)
    return {}


# ── Discovery ─────────────────────────────────────────────────────────────────


def discover_libraries() -> list[str]:
    """Names of the library packages installed under minerva/libraries."""
    package = importlib.import_module(PACKAGE)
    return sorted(info.name for info in pkgutil.iter_modules(package.__path__) if info.ispkg)


def import_library(name: str) -> LibraryBase | None:
    try:
        module = importlib.import_module(f"{PACKAGE}.{name}")
    except ImportError as exc:
        logger.warning("Library %s could not be imported: %s", name, exc)
        return None

    library = getattr(module, "library", None)
    if not isinstance(library, LibraryBase):
        logger.warning("Library package %s defines no `library` object; skipping", name)
        return None
    if library.meta.name != name:
        logger.warning("Library package %s declares name %r; skipping", name, library.meta.name)
        return None
    return library


# ── Startup / shutdown ────────────────────────────────────────────────────────


async def initialize_libraries(
    models: ModelRegistry,
    libraries: LibraryRegistry,
    checker: AccessChecker = access_checker,
    config: dict[str, dict[str, Any]] | None = None,
) -> list[str]:
    """
    Load every enabled library and register what it contributes.

    Called from the application lifespan after the core models are
    registered.

    Returns:
        Names of the libraries loaded.
    """
    if config is None:
        config = load_libraries_config()

    loaded: list[str] = []
    for name in discover_libraries():
        if libraries.is_installed(name):
            logger.debug("Library %s already loaded", name)
            continue
        library_config = config.get(name, {})
        if not library_config.get("enabled", True):
            logger.info("Library %s disabled by config", name)
            continue

        library = import_library(name)
        if library is None:
            continue

        try:
            await library.on_load(library_config)
        except Exception as exc:
            logger.warning("Library %s failed to load: %s", name, exc)
            continue

        for model_class in library.meta.models:
            models.register_override(name, model_class)
        for rule_name, check in library.meta.access_rules.items():
            checker.add_rule(rule_name, check)
        libraries.register(library)
        loaded.append(name)

    logger.info("Library initialisation complete - %d libraries loaded", len(loaded))
    return loaded


async def shutdown_libraries(models: ModelRegistry, libraries: LibraryRegistry) -> None:
    for library in libraries.all_libraries():
        try:
            await library.on_unload()
        except Exception as exc:
            logger.warning("Library %s raised on unload: %s", library.meta.name, exc)
        models.unregister_library(library.meta.name)
        libraries.unregister(library.meta.name)
