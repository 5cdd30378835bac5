"""
Bridge Models

A bridge model is the unit a library overrides. Every resource type has one
core bridge model (PageModel, BlockModel, UserModel) wrapping its table; a
library subclasses it to change how records of that type are found and
saved, which fields forms show, and which access policy applies.

Controllers never name a bridge model class directly. The dispatch
interceptor picks one per request and hands an instance to the action, so
the action code stays identical whether the record is core or owned by a
library.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from minerva.security.access import access_checker
from minerva.utils.slugify import slugify

if TYPE_CHECKING:
    from minerva.security.access import AccessChecker, AccessPolicy
    from minerva.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Columns that callers may never assign through a payload
PROTECTED_COLUMNS = frozenset({"id", "extra", "created_at", "updated_at"})


class BridgeModel:
    """
    Base class for core and library models.

    Class attributes:
        resource_type: Classified resource name, e.g. "Block".
        orm:           SQLAlchemy table class holding the records.
        library:       Owning library name; None for core models.
        display_name:  Human readable name shown by the form templates.
        access:        Access policy replacing the controller default for
                       requests bridged to this model. None leaves the
                       controller default in place.
        fields:        Form field hints keyed by field name.
        title_field:   Column the url slug is generated from.
        restricted_fields: Payload fields only users passing the named access
                       rule may set; dropped from anyone else's payload.
    """

    resource_type: ClassVar[str]
    orm: ClassVar[type]
    library: ClassVar[str | None] = None
    display_name: ClassVar[str] = ""
    access: ClassVar[AccessPolicy | None] = None
    fields: ClassVar[dict[str, dict[str, Any]]] = {}
    title_field: ClassVar[str] = "title"
    restricted_fields: ClassVar[dict[str, str]] = {}

    def __init__(self, store: RecordStore | None = None) -> None:
        self.store = store

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.resource_type} library={self.library!r}>"

    # ── Hooks for libraries ───────────────────────────────────────────────────

    def before_save(self, data: dict[str, Any]) -> dict[str, Any]:
        """Alter the payload before it is applied to a record."""
        return data

    def after_find(self, record: Any) -> Any:
        """Alter a record after it is read from the store."""
        return record

    # ── Write permissions ─────────────────────────────────────────────────────

    def permitted(self, data: dict[str, Any], user: Any, checker: AccessChecker | None = None) -> dict[str, Any]:
        """Drop the restricted fields ``user`` may not set."""
        checker = access_checker if checker is None else checker
        denied = {
            name for name, rule in self.restricted_fields.items() if name in data and not checker.allows(rule, user)
        }
        if denied:
            logger.warning("Ignoring restricted %s fields: %s", self.resource_type, ", ".join(sorted(denied)))
        return {key: value for key, value in data.items() if key not in denied}

    def can_modify(self, record: Any, user: Any) -> bool:
        """Record-level check run after the action's access rules passed."""
        return True

    # ── Schema ────────────────────────────────────────────────────────────────

    @classmethod
    def columns(cls) -> list[str]:
        return [column.key for column in cls.orm.__table__.columns]

    def schema(self) -> dict[str, dict[str, Any]]:
        """Form fields for this model (a copy safe to mutate)."""
        return {name: dict(spec) for name, spec in self.fields.items()}

    def to_dict(self, record: Any) -> dict[str, Any]:
        """Flatten a record: its columns plus library-added fields."""
        document = {name: getattr(record, name) for name in self.columns() if name != "extra"}
        document.update(record.extra or {})
        return document

    # ── Data access ───────────────────────────────────────────────────────────

    def _store(self) -> RecordStore:
        if self.store is None:
            raise RuntimeError(f"{type(self).__name__} has no record store bound")
        return self.store

    async def find_by_url(self, url: str) -> Any | None:
        record = await self._store().find_one(self.resource_type, {"url": url})
        return self.after_find(record) if record is not None else None

    async def find_all(
        self,
        conditions: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Any]:
        records = await self._store().find_many(self.resource_type, conditions, limit=limit, offset=offset)
        return [self.after_find(record) for record in records]

    async def count(self, conditions: dict[str, Any] | None = None) -> int:
        return await self._store().count(self.resource_type, conditions)

    def new(self, data: dict[str, Any] | None = None, library: str | None = None) -> Any:
        """
        Build an unsaved record.

        The owning library is the routed library, or this model's own
        library when none was routed.
        """
        record = self.orm(extra={})
        record.library = library or self.library
        if data:
            self._assign(record, data)
        return record

    def _assign(self, record: Any, data: dict[str, Any]) -> None:
        columns = set(self.columns()) - PROTECTED_COLUMNS - {"library"}
        extra = dict(record.extra or {})
        for key, value in data.items():
            if key in columns:
                setattr(record, key, value)
            elif key not in PROTECTED_COLUMNS and key != "library":
                extra[key] = value
        # Reassign so the JSON column is flagged dirty
        record.extra = extra

    async def save(self, record: Any, data: dict[str, Any] | None = None) -> bool:
        """
        Apply ``data`` (after ``before_save``) and persist the record.

        Returns True on success and False when the store rejected the write,
        e.g. a duplicate url.
        """
        store = self._store()
        if data:
            self._assign(record, self.before_save(dict(data)))
        if not record.url:
            base = slugify(getattr(record, self.title_field, None) or self.resource_type)
            record.url = await store.unique_url(self.resource_type, base or self.resource_type.lower())
        saved = await store.save(record)
        if saved:
            logger.info("%s saved: url=%s library=%s", self.resource_type, record.url, record.library)
        return saved

    async def delete(self, record: Any) -> bool:
        return await self._store().delete(record)
