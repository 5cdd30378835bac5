"""
Dispatch Interceptor

Runs before every core controller action. Works out the resource type from
the controller name, resolves the owning library when the action needs it,
bridges in the library's model and applies its access policy. It never
blocks a request; access enforcement happens afterwards on the policy it
leaves on the context.
"""

from __future__ import annotations

import logging

from minerva.bridge.bridge import apply_access_policy, bridge_model
from minerva.bridge.chain import FilterChain
from minerva.bridge.context import RequestContext
from minerva.bridge.registry import ModelRegistry, model_registry
from minerva.bridge.resolver import LOOKUP_ACTIONS, resolve_library
from minerva.utils.inflector import resource_type_for

logger = logging.getLogger(__name__)

# Actions bridged from the routed library alone
ROUTED_ACTIONS = frozenset({"create", "index"})


class DispatchInterceptor:
    def __init__(self, registry: ModelRegistry | None = None) -> None:
        self._registry = registry

    @property
    def registry(self) -> ModelRegistry:
        return model_registry if self._registry is None else self._registry

    async def __call__(self, context: RequestContext) -> RequestContext:
        resource_type = resource_type_for(context.controller)
        context.resource_type = resource_type

        # Nothing to bridge: unknown resource type, or no library/slug routed
        if not self.registry.knows(resource_type) or (context.library is None and context.url is None):
            context.model = bridge_model(resource_type, None, context.store, self.registry)
            return context

        if context.action in ROUTED_ACTIONS:
            library = context.library
        elif context.action in LOOKUP_ACTIONS:
            if not context.library_resolved:
                context.library = await resolve_library(
                    resource_type, context.action, context.library, context.url, context.store
                )
                context.library_resolved = True
            library = context.library
        else:
            library = None

        context.model = bridge_model(resource_type, library, context.store, self.registry)
        apply_access_policy(context, context.model)
        logger.debug(
            "Bridged %s.%s -> %r (library=%s)",
            context.controller,
            context.action,
            context.model,
            library,
        )
        return context


dispatch_chain = FilterChain([DispatchInterceptor()])
