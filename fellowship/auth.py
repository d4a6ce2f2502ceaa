import logging
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from .config.db import get_db
from .domains.shared.interfaces import UserContext, UserContextAdapter
from .domains.user.repository import SqlAlchemyUserRepository

logger = logging.getLogger(__name__)


def get_bearer_token(request: Request) -> Optional[str]:
    """
    Extract the bearer token from the Authorization header if present.
    Returns None when the header is missing or uses another scheme.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        logger.debug("Ignoring non-bearer Authorization header on %s", request.url.path)
        return None
    return token.strip()


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[UserContext]:
    """
    Resolve the caller's account from the API token once per request.
    Does not raise for anonymous callers.
    """
    token = get_bearer_token(request)
    if token is None:
        return None

    db_user = SqlAlchemyUserRepository(db).get_by_token(token)
    if db_user is None:
        logger.info("Unknown API token presented to %s", request.url.path)
        return None
    return UserContextAdapter.to_context(db_user)


async def get_required_user(
    user: Optional[UserContext] = Depends(get_current_user)
) -> UserContext:
    """
    Dependency that requires a user to be authenticated.
    Raises an exception if the user is not authenticated.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    user: Optional[UserContext] = Depends(get_current_user)
) -> Optional[UserContext]:
    """Dependency for routes that serve anonymous and signed-in callers alike."""
    return user
