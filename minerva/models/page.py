from sqlalchemy import Boolean, Column, String, Text

from minerva.database import Base
from minerva.models.base import BridgeModel
from minerva.models.record import RecordMixin
from minerva.security.access import LOGIN_REDIRECT, AccessRule


class Page(RecordMixin, Base):
    __tablename__ = "pages"

    title = Column(String, index=True, nullable=False)
    body = Column(Text, nullable=True)
    published = Column(Boolean, default=False, nullable=False)


class PageModel(BridgeModel):
    resource_type = "Page"
    orm = Page
    display_name = "Page"
    fields = {
        "title": {"type": "text", "label": "Title", "position": "main"},
        "body": {"type": "textarea", "label": "Body", "position": "main"},
        "url": {"type": "text", "label": "Pretty URL", "position": "options", "help_text": "Leave blank to generate from the title."},
        "published": {"type": "checkbox", "label": "Published", "position": "options"},
    }


PAGES_ACCESS = {
    "index": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "create": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "update": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "delete": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "read": [AccessRule("allowAll")],
}
