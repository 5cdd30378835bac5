"""Per-request state threaded through the dispatch and render chains."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minerva.models.base import BridgeModel
    from minerva.security.access import AccessPolicy
    from minerva.services.record_store import RecordStore

LIBRARY_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


def normalize_library(name: str | None) -> str | None:
    """Empty or malformed library identifiers mean "core"."""
    if not name or not LIBRARY_NAME.fullmatch(name):
        return None
    return name


@dataclass
class RequestContext:
    """
    Mutable bag owned by a single request.

    Attributes:
        controller:       Controller name from the route, e.g. "blocks".
        action:           Action name, e.g. "read".
        url:              Record slug from the route, if any.
        library:          Owning library; explicit from the route, or filled
                          in by the dispatch interceptor.
        params:           Remaining request parameters (query string).
        resource_type:    Classified resource type, set by the interceptor.
        model:            Bridge model instance the action must use.
        access_policy:    Policy the access checker evaluates for this request.
        library_resolved: True once the owning library has been determined;
                          later passes reuse ``library`` instead of querying.
        store:            Record store used for lookups and by the model.
        user:             Signed-in user, or None; consulted for field and
                          record level write checks.
    """

    controller: str
    action: str
    url: str | None = None
    library: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    resource_type: str | None = None
    model: BridgeModel | None = None
    access_policy: AccessPolicy = field(default_factory=dict)
    library_resolved: bool = False
    store: RecordStore | None = field(default=None, repr=False)
    user: Any = field(default=None, repr=False)


@dataclass
class RenderOptions:
    """Inputs and outputs of the render chain."""

    controller: str
    template: str
    layout: str | None = "default"
    type: str = "html"
    library: str | None = None
    # Filled in by the template resolver: {"layout": ..., "template": ...}
    paths: dict[str, str | None] = field(default_factory=dict)
