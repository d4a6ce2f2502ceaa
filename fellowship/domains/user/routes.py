"""User domain API routes - thin routing layer."""

from typing import List, Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fellowship.config.dependencies import get_db, get_required_user
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.user.schemas import UserProfile, UserSummary
from fellowship.domains.user.service import UserService


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency to get user service."""
    return UserService(db)


async def get_current_user_profile(
    current_user: UserContext = Depends(get_required_user),
    service: UserService = Depends(get_user_service)
) -> UserProfile:
    """Get the current user's profile."""
    user = service.get_user(current_user.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserProfile.model_validate(user)


async def search_users(
    q: Optional[str] = Query(None, description="Username or name fragment"),
    current_user: UserContext = Depends(get_required_user),
    service: UserService = Depends(get_user_service)
) -> List[UserSummary]:
    """Autocomplete other users, e.g. when inviting members to a group."""
    users = service.search_users(q, exclude_id=current_user.id)
    return [UserSummary.from_user(user) for user in users]
