from .base import BridgeModel
from .block import BLOCKS_ACCESS, Block, BlockModel
from .page import PAGES_ACCESS, Page, PageModel
from .user import USERS_ACCESS, User, UserModel

# Resource type -> table, as used by the record store
RESOURCE_TABLES = {
    "Page": Page,
    "Block": Block,
    "User": User,
}

CORE_MODELS = [PageModel, BlockModel, UserModel]


def register_core_models(registry) -> None:
    """Register the core model of every resource type."""
    for model_class in CORE_MODELS:
        registry.register_core(model_class)


__all__ = [
    "BridgeModel",
    "Block",
    "BlockModel",
    "BLOCKS_ACCESS",
    "Page",
    "PageModel",
    "PAGES_ACCESS",
    "User",
    "UserModel",
    "USERS_ACCESS",
    "RESOURCE_TABLES",
    "CORE_MODELS",
    "register_core_models",
]
