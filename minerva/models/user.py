from sqlalchemy import Boolean, Column, String

from minerva.constants.roles import RoleName, get_default_role_name, has_role_at_least
from minerva.database import Base
from minerva.models.base import BridgeModel
from minerva.models.record import RecordMixin
from minerva.security.access import LOGIN_REDIRECT, AccessRule, user_attr


class User(RecordMixin, Base):
    __tablename__ = "users"

    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, default=get_default_role_name, nullable=False)
    active = Column(Boolean, default=True, nullable=False)


class UserModel(BridgeModel):
    resource_type = "User"
    orm = User
    display_name = "User"
    title_field = "username"
    fields = {
        "username": {"type": "text", "label": "Username", "position": "main"},
        "email": {"type": "email", "label": "E-mail", "position": "main"},
        "role": {"type": "select", "label": "Role", "position": "options"},
        "active": {"type": "checkbox", "label": "Active", "position": "options"},
    }
    # Signing up or editing a profile never changes the role or account status
    restricted_fields = {
        "role": "allowAdministrators",
        "active": "allowManagers",
    }

    def can_modify(self, record, user):
        """Managers edit anyone; everyone else only their own account."""
        if has_role_at_least(user_attr(user, "role"), RoleName.MANAGER):
            return True
        return user is not None and user_attr(user, "username") == record.username


USERS_ACCESS = {
    "index": [AccessRule("allowManagers", LOGIN_REDIRECT)],
    "create": [AccessRule("allowAll")],
    "read": [AccessRule("allowAuthenticated", LOGIN_REDIRECT)],
    "update": [AccessRule("allowAuthenticated", LOGIN_REDIRECT)],
    "delete": [AccessRule("allowAdministrators", LOGIN_REDIRECT)],
}
