"""
Library Resolver

Determines which library owns the resource a request targets.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from minerva.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Actions addressing an existing record; only these may consult the store
LOOKUP_ACTIONS = frozenset({"read", "update", "delete"})


async def resolve_library(
    resource_type: str,
    action: str,
    explicit_library: str | None,
    url: str | None,
    store: RecordStore | None,
) -> str | None:
    """
    Return the owning library, or None for core.

    An explicitly routed library wins without a lookup. For read, update and
    delete a single projected lookup by url is made; a missing record, or a
    store error, resolves to None. Any other action (create and index
    included) never queries: a new record has no owner yet.
    """
    if explicit_library:
        return explicit_library
    if action not in LOOKUP_ACTIONS or not url or store is None:
        return None

    try:
        record = await store.find_one(resource_type, {"url": url}, fields=["library"])
    except SQLAlchemyError as exc:
        logger.warning("Owning library lookup failed for %s url=%s: %s", resource_type, url, exc)
        return None

    if record is None:
        logger.debug("No %s with url=%s; using core", resource_type, url)
        return None
    return record.library
