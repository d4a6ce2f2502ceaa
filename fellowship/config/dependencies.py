"""Common dependencies for FastAPI routes."""

from fastapi import Depends, HTTPException

from .. import auth
from .db import get_db
from fellowship.domains.shared.interfaces import UserContext, UserPermissions


def require_moderator(current_user: UserContext = Depends(auth.get_required_user)) -> UserContext:
    """Require the caller to hold one of the configured moderator roles."""
    if not UserPermissions(current_user).can_moderate():
        raise HTTPException(status_code=403, detail="Moderator role required")
    return current_user


# Re-export auth dependencies for convenience
get_required_user = auth.get_required_user
get_optional_user = auth.get_optional_user
