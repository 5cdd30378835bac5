"""
Blocks controller

Blocks hold either "dynamic" content stored in the database (read through
the usual actions) or "static" content living in templates under
views/blocks/static, rendered by the view action with the blank layout.
"""

from fastapi import Depends
from fastapi.responses import HTMLResponse

from minerva.bridge.context import RequestContext
from minerva.exceptions import ValidationError
from minerva.models.block import BLOCKS_ACCESS
from minerva.routes.controller import ResourceController, render

DEFAULT_STATIC_BLOCK = "example"


class BlocksController(ResourceController):
    def __init__(self) -> None:
        super().__init__("blocks", BLOCKS_ACCESS, filterable=("block_type",))

    async def view(self, context: RequestContext, path: str) -> HTMLResponse:
        segments = [segment for segment in path.split("/") if segment]
        if not segments:
            segments = [DEFAULT_STATIC_BLOCK]
        if any(segment in (".", "..") or segment.startswith(".") for segment in segments):
            raise ValidationError("Invalid static block path", field="path")
        return await render(context, "/".join(["static", *segments]), {}, layout="blank")

    def _add_routes(self) -> None:
        super()._add_routes()

        @self.router.get("/view", response_class=HTMLResponse)
        @self.router.get("/view/{path:path}", response_class=HTMLResponse)
        async def view_action(path: str = DEFAULT_STATIC_BLOCK, context: RequestContext = Depends(self.bridge("view"))):
            return await self.view(context, path)


blocks = BlocksController()
router = blocks.router
