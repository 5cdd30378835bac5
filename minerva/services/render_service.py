"""Template rendering: render chain for paths, Jinja2 for output."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from minerva.bridge.chain import FilterChain
from minerva.bridge.context import RenderOptions
from minerva.bridge.templates import TemplateResolver, render_chain
from minerva.config import settings
from minerva.exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Renders a view template, then wraps it in the layout.

    The layout receives the rendered view as ``content`` alongside the
    view's own variables.
    """

    def __init__(self, root: Path | str | None = None, chain: FilterChain | None = None) -> None:
        self.root = Path(root) if root is not None else Path(settings.app_root)
        if chain is None:
            chain = render_chain if root is None else FilterChain([TemplateResolver(self.root)])
        self.chain = chain
        self.env = Environment(
            loader=FileSystemLoader(str(self.root)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _load(self, path: str):
        try:
            return self.env.get_template(path)
        except TemplateNotFound as exc:
            logger.error("Missing template %s", path)
            raise TemplateNotFoundError(path) from exc

    async def render(self, options: RenderOptions, data: dict[str, Any]) -> str:
        options = await self.chain.run(options)
        content = self._load(options.paths["template"]).render(**data)
        layout_path = options.paths.get("layout")
        if not layout_path:
            return content
        return self._load(layout_path).render({**data, "content": Markup(content)})


renderer = TemplateRenderer()
