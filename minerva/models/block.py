from sqlalchemy import Column, String, Text

from minerva.database import Base
from minerva.models.base import BridgeModel
from minerva.models.record import RecordMixin
from minerva.security.access import LOGIN_REDIRECT, AccessRule


class Block(RecordMixin, Base):
    __tablename__ = "blocks"

    title = Column(String, index=True, nullable=False)
    content = Column(Text, nullable=True)
    block_type = Column(String, index=True, nullable=True)


class BlockModel(BridgeModel):
    resource_type = "Block"
    orm = Block
    display_name = "Block"
    fields = {
        "title": {"type": "text", "label": "Title", "position": "main"},
        "content": {"type": "textarea", "label": "Content", "position": "main"},
        "url": {"type": "text", "label": "Pretty URL", "position": "options", "help_text": "Leave blank to generate from the title."},
        "block_type": {"type": "hidden", "label": "Block Type", "position": "options"},
    }


# Manipulation and listing are restricted to managers; everyone can view blocks.
BLOCKS_ACCESS = {
    "index": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "create": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "update": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "delete": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "read": [AccessRule("allowAll")],
    "view": [AccessRule("allowAll")],
}
