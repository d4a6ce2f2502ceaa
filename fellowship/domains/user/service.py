"""User domain service layer."""

from typing import List, Optional

from sqlalchemy.orm import Session

from fellowship.domains.user.models import User
from fellowship.domains.user.repository import SqlAlchemyUserRepository
from fellowship.config.settings import get_settings


class UserService:
    """Service layer for user domain operations."""

    def __init__(self, session: Session):
        """Initialize with database session."""
        self.session = session
        self.user_repo = SqlAlchemyUserRepository(session)
        self.settings = get_settings()

    def get_user(self, user_id: int) -> Optional[User]:
        """
        Get a user by ID.

        Args:
            user_id: User database ID

        Returns:
            User instance or None if not found
        """
        return self.user_repo.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self.user_repo.get_by_username(username)

    def search_users(self, query: Optional[str], exclude_id: Optional[int] = None) -> List[User]:
        """
        Autocomplete users by username or name.

        Blank queries return nothing rather than the whole directory.
        """
        query = (query or "").strip()
        if not query:
            return []
        return self.user_repo.search(query, limit=self.settings.user_search_limit, exclude_id=exclude_id)
