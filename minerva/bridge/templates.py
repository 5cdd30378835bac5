"""
Template Resolver

Render-time filter choosing the layout and view template files. Library
files win when they exist; otherwise the core files are used. Paths are
POSIX paths relative to the application root, which is also the root the
template engine loads from.

Existence is checked on every render; nothing is cached between renders.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from minerva.bridge.chain import FilterChain
from minerva.bridge.context import RenderOptions
from minerva.bridge.registry import LIBRARIES_NAMESPACE
from minerva.config import settings


class TemplateResolver:
    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root is not None else None

    @property
    def root(self) -> Path:
        return self._root if self._root is not None else Path(settings.app_root)

    def _exists(self, relative: PurePosixPath) -> bool:
        return (self.root / relative).is_file()

    def layout_path(self, library: str | None, layout: str, type_: str) -> str:
        filename = f"{layout}.{type_}"
        if library:
            candidate = PurePosixPath(LIBRARIES_NAMESPACE, library, "views", "layouts", filename)
            if self._exists(candidate):
                return candidate.as_posix()
        return PurePosixPath("views", "layouts", filename).as_posix()

    def template_path(self, library: str | None, controller: str, template: str, type_: str) -> str:
        filename = f"{template}.{type_}"
        if library:
            candidate = PurePosixPath(LIBRARIES_NAMESPACE, library, "views", controller, filename)
            if self._exists(candidate):
                return candidate.as_posix()
        # The core template is not checked; a missing one fails at render time
        return PurePosixPath("views", controller, filename).as_posix()

    def __call__(self, options: RenderOptions) -> RenderOptions:
        if options.layout:
            options.paths["layout"] = self.layout_path(options.library, options.layout, options.type)
        else:
            options.paths["layout"] = None
        options.paths["template"] = self.template_path(
            options.library, options.controller, options.template, options.type
        )
        return options


render_chain = FilterChain([TemplateResolver()])
