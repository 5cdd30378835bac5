"""
Filter chains

An ordered list of filters, each taking the context object and returning it
(possibly replaced). Filters may be plain functions or coroutines. The
dispatch chain runs before every controller action, the render chain before
every template render.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

Filter = Callable[[Any], Any]


class FilterChain:
    def __init__(self, filters: Iterable[Filter] = ()) -> None:
        self._filters: list[Filter] = list(filters)

    def __len__(self) -> int:
        return len(self._filters)

    @property
    def filters(self) -> list[Filter]:
        return list(self._filters)

    def append(self, filter_: Filter) -> None:
        self._filters.append(filter_)

    def insert(self, index: int, filter_: Filter) -> None:
        self._filters.insert(index, filter_)

    def remove(self, filter_: Filter) -> None:
        self._filters.remove(filter_)

    async def run(self, context: Any) -> Any:
        for filter_ in self._filters:
            result = filter_(context)
            if inspect.isawaitable(result):
                result = await result
            if result is None:
                raise TypeError(f"Filter {filter_!r} returned None instead of the context")
            context = result
        return context
