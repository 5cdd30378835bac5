"""Constants package for Minerva CMS."""

from .roles import DEFAULT_ROLE, ROLE_HIERARCHY, RoleName, get_default_role_name, has_role_at_least

__all__ = [
    "RoleName",
    "DEFAULT_ROLE",
    "ROLE_HIERARCHY",
    "get_default_role_name",
    "has_role_at_least",
]
