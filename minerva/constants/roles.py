"""
Role Constants for Minerva CMS

Role names stored on user records and consulted by the named access rules.
"""

from enum import Enum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    USER = "user"
    EDITOR = "editor"
    MANAGER = "manager"
    ADMINISTRATOR = "administrator"


# Default role for new user records
DEFAULT_ROLE = RoleName.USER

# Role hierarchy (higher number = more permissions)
ROLE_HIERARCHY = {
    RoleName.USER: 1,
    RoleName.EDITOR: 2,
    RoleName.MANAGER: 3,
    RoleName.ADMINISTRATOR: 4,
}


def get_default_role_name() -> str:
    """Get the default role name for new users."""
    return DEFAULT_ROLE.value


def _rank(role: str | None) -> int:
    try:
        return ROLE_HIERARCHY.get(RoleName(role), 0)
    except ValueError:
        return 0  # Unknown roles rank below every known role


def has_role_at_least(role: str | None, minimum: RoleName) -> bool:
    """
    Check if ``role`` is at or above ``minimum`` in the hierarchy.

    Args:
        role: Role name taken from the current user (may be None)
        minimum: Lowest role that passes

    Returns:
        bool: True if role >= minimum
    """
    return _rank(role) >= ROLE_HIERARCHY[minimum]
