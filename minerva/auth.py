"""
Current user lookup.

Authentication itself is handled outside the CMS core; whatever signs a user
in stores a ``{"username": ..., "role": ...}`` mapping under the ``user``
key of the session. Access rules only read that mapping.
"""

from typing import Any, Optional

from fastapi import Request


def get_current_user(request: Request) -> Optional[dict[str, Any]]:
    """Return the signed-in user stored in the session, or None."""
    if "session" not in request.scope:
        return None
    return request.session.get("user")
