"""
Library bridging

Lets add-on libraries override the model, access policy and templates used
by the fixed core controllers (pages, blocks, users) without touching core
code.
"""

from .bridge import apply_access_policy, bridge_model
from .chain import FilterChain
from .context import RenderOptions, RequestContext, normalize_library
from .interceptor import DispatchInterceptor, dispatch_chain
from .registry import ModelRegistry, model_registry
from .resolver import LOOKUP_ACTIONS, resolve_library
from .templates import TemplateResolver, render_chain

__all__ = [
    "DispatchInterceptor",
    "FilterChain",
    "LOOKUP_ACTIONS",
    "ModelRegistry",
    "RenderOptions",
    "RequestContext",
    "TemplateResolver",
    "apply_access_policy",
    "bridge_model",
    "dispatch_chain",
    "model_registry",
    "normalize_library",
    "render_chain",
    "resolve_library",
]
