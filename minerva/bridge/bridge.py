"""
Model Bridge

Picks the bridge model serving a (resource type, library) pair and moves
its access policy onto the request.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from minerva.bridge.registry import ModelRegistry, model_registry

if TYPE_CHECKING:
    from minerva.bridge.context import RequestContext
    from minerva.models.base import BridgeModel
    from minerva.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def bridge_model(
    resource_type: str,
    library: str | None,
    store: RecordStore | None = None,
    registry: ModelRegistry | None = None,
) -> BridgeModel | None:
    """
    Instantiate the library's override model, falling back to the core model.

    Returns None only when the resource type has no model at all.
    """
    registry = model_registry if registry is None else registry
    model_class = registry.resolve(resource_type, library)
    if model_class is None:
        return None
    if library and model_class.library != library:
        logger.debug(
            "No %s; falling back to core %s",
            registry.qualified_name(resource_type, library),
            resource_type,
        )
    return model_class(store)


def apply_access_policy(context: RequestContext, model: BridgeModel | None) -> RequestContext:
    """
    Replace the request's access policy with the model's, if it defines one.

    The policy is copied onto the request context only; the controller's
    default policy object is never modified.
    """
    if model is None:
        return context
    policy = type(model).access
    if policy is not None:
        context.access_policy = copy.deepcopy(policy)
        logger.debug("Access policy for %s taken from %s", context.controller, type(model).__name__)
    return context
