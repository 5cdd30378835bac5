"""
Core resource controllers

Pages, blocks and users share the same locked-down actions: index, read,
create, update and delete. Actions never name a model class; they use the
bridge model the dispatch interceptor put on the request context, so a
library can change data access, access rules and templates for the records
it owns without any change here.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from minerva.auth import get_current_user
from minerva.bridge.context import RenderOptions, RequestContext, normalize_library
from minerva.bridge.interceptor import dispatch_chain
from minerva.config import settings
from minerva.database import get_db
from minerva.exceptions import (
    AccessDeniedError,
    RecordDeleteError,
    RecordNotFoundError,
    RecordSaveError,
    UnknownResourceError,
)
from minerva.schemas.records import IndexResponse, ReadResponse, RecordPayload
from minerva.security.access import AccessPolicy, access_checker
from minerva.services import render_service
from minerva.services.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
# Reported as the failing rule when a model refuses a record-level change
OWN_RECORD_RULE = "ownRecord"


def build_context(
    request: Request,
    controller: str,
    action: str,
    access: AccessPolicy,
    store: RecordStore | None,
) -> RequestContext:
    """Fresh request context from the route parameters."""
    params = request.path_params
    routed_library = params.get("library")
    library = normalize_library(routed_library)
    if routed_library and library is None:
        logger.warning("Ignoring malformed library identifier %r", routed_library)
    return RequestContext(
        controller=controller,
        action=action,
        url=params.get("url"),
        library=library,
        params=dict(request.query_params),
        access_policy=copy.deepcopy(access),
        store=store,
    )


async def render(
    context: RequestContext,
    template: str,
    data: dict[str, Any],
    layout: Optional[str] = None,
    type_: str = "html",
) -> HTMLResponse:
    options = RenderOptions(
        controller=context.controller,
        template=template,
        layout=settings.default_layout if layout is None else layout,
        type=type_,
        library=context.library,
    )
    html = await render_service.renderer.render(options, data)
    return HTMLResponse(html)


class ResourceController:
    """
    Router factory for one core controller.

    Args:
        name:       Controller name; also the URL prefix ("blocks").
        access:     Default access policy. Never modified; each request works
                    on its own copy, which a bridged library model may replace.
        filterable: Query parameters the index action turns into filters.
    """

    def __init__(self, name: str, access: AccessPolicy, filterable: tuple[str, ...] = ()) -> None:
        self.name = name
        self.access = access
        self.filterable = filterable
        self.router = APIRouter(prefix=f"/{name}", tags=[name.title()])
        self._add_routes()

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def bridge(self, action: str):
        """Dependency running the dispatch chain and access check for ``action``."""

        async def dependency(
            request: Request,
            db: AsyncSession = Depends(get_db),
            user: Optional[dict] = Depends(get_current_user),
        ) -> RequestContext:
            context = build_context(request, self.name, action, self.access, RecordStore(db))
            context.user = user
            context = await dispatch_chain.run(context)
            request.state.bridge = context
            access_checker.enforce(context, user)
            if context.model is None:
                raise UnknownResourceError(context.resource_type)
            return context

        return dependency

    def index_url(self) -> str:
        return f"/{self.name}"

    # ── Actions ───────────────────────────────────────────────────────────────

    async def index(self, context: RequestContext, page: int, limit: int) -> dict[str, Any]:
        page = max(page, 1)
        limit = max(limit, 1)
        conditions = {key: context.params[key] for key in self.filterable if key in context.params}
        model = context.model
        records = await model.find_all(conditions, limit=limit, offset=(page - 1) * limit)
        total = await model.count(conditions)
        return {
            "documents": [model.to_dict(record) for record in records],
            "limit": limit,
            "page": page,
            "total": total,
        }

    async def read(self, context: RequestContext) -> dict[str, Any]:
        record = await context.model.find_by_url(context.url)
        if record is None:
            raise RecordNotFoundError(context.resource_type, context.url)
        return {"record": context.model.to_dict(record)}

    async def create_form(self, context: RequestContext) -> HTMLResponse:
        model = context.model
        fields = model.schema()
        # Query parameters pre-fill the form, e.g. ?block_type=menu
        document = {name: context.params[name] for name in fields if name in context.params}
        action_url = f"/{self.name}/create" + (f"/{context.library}" if context.library else "")
        return await render(
            context,
            "create",
            {
                "display_name": model.display_name,
                "fields": fields,
                "document": document,
                "action_url": action_url,
            },
        )

    async def create(self, context: RequestContext, payload: RecordPayload) -> RedirectResponse:
        model = context.model
        record = model.new(library=context.library)
        if not await model.save(record, model.permitted(payload.to_data(), context.user)):
            raise RecordSaveError(context.resource_type, payload.url)
        return RedirectResponse(self.index_url(), status_code=status.HTTP_303_SEE_OTHER)

    async def find_modifiable(self, context: RequestContext):
        """The addressed record, provided the current user may change it."""
        record = await context.model.find_by_url(context.url)
        if record is None:
            raise RecordNotFoundError(context.resource_type, context.url)
        if not context.model.can_modify(record, context.user):
            raise AccessDeniedError(action=context.action, rule=OWN_RECORD_RULE)
        return record

    async def update_form(self, context: RequestContext) -> HTMLResponse:
        model = context.model
        record = await self.find_modifiable(context)
        return await render(
            context,
            "update",
            {
                "display_name": model.display_name,
                "fields": model.schema(),
                "document": model.to_dict(record),
                "action_url": f"/{self.name}/update/{record.url}",
            },
        )

    async def update(self, context: RequestContext, payload: RecordPayload) -> RedirectResponse:
        model = context.model
        record = await self.find_modifiable(context)
        if not await model.save(record, model.permitted(payload.to_data(), context.user)):
            raise RecordSaveError(context.resource_type, context.url)
        return RedirectResponse(self.index_url(), status_code=status.HTTP_303_SEE_OTHER)

    async def delete(self, context: RequestContext) -> RedirectResponse:
        model = context.model
        record = await self.find_modifiable(context)
        if not await model.delete(record):
            raise RecordDeleteError(context.resource_type, context.url)
        logger.info("%s deleted: url=%s", context.resource_type, context.url)
        return RedirectResponse(self.index_url(), status_code=status.HTTP_303_SEE_OTHER)

    # ── Routes ────────────────────────────────────────────────────────────────

    def _add_routes(self) -> None:
        router = self.router

        @router.get("", response_model=IndexResponse)
        @router.get("/index/{library}", response_model=IndexResponse)
        async def index_action(
            page: int = 1,
            limit: int = DEFAULT_LIMIT,
            context: RequestContext = Depends(self.bridge("index")),
        ):
            return await self.index(context, page, limit)

        @router.get("/read/{url}", response_model=ReadResponse)
        async def read_action(context: RequestContext = Depends(self.bridge("read"))):
            return await self.read(context)

        @router.get("/create", response_class=HTMLResponse)
        @router.get("/create/{library}", response_class=HTMLResponse)
        async def create_form_action(context: RequestContext = Depends(self.bridge("create"))):
            return await self.create_form(context)

        @router.post("/create")
        @router.post("/create/{library}")
        async def create_action(payload: RecordPayload, context: RequestContext = Depends(self.bridge("create"))):
            return await self.create(context, payload)

        @router.get("/update/{url}", response_class=HTMLResponse)
        async def update_form_action(context: RequestContext = Depends(self.bridge("update"))):
            return await self.update_form(context)

        @router.post("/update/{url}")
        async def update_action(payload: RecordPayload, context: RequestContext = Depends(self.bridge("update"))):
            return await self.update(context, payload)

        @router.post("/delete/{url}")
        async def delete_action(context: RequestContext = Depends(self.bridge("delete"))):
            return await self.delete(context)
