from typing import Protocol, Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import case, func, or_

from fellowship.domains.user.models import User, Role
from fellowship.domains.shared.repository import SqlAlchemyRepository


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally (escape char is a backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserRepository(Protocol):
    """Protocol for User repository operations."""

    def get(self, id: int) -> Optional[User]:
        """Get a user by ID."""
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by their unique username."""
        ...

    def get_by_token(self, token: str) -> Optional[User]:
        """Get the user owning an API token."""
        ...

    def search(self, query: str, limit: int = 10, exclude_id: Optional[int] = None) -> List[User]:
        """Search users by username or display name."""
        ...


class SqlAlchemyUserRepository(SqlAlchemyRepository[User]):
    """SQLAlchemy implementation of UserRepository."""

    def __init__(self, session: Session):
        """Initialize with a SQLAlchemy session."""
        super().__init__(session, User)

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by their unique username."""
        return self.session.query(User).filter(
            User.username == username
        ).first()

    def get_by_token(self, token: str) -> Optional[User]:
        """Get the user owning an API token."""
        if not token:
            return None
        return self.session.query(User).filter(
            User.api_token == token
        ).first()

    def search(self, query: str, limit: int = 10, exclude_id: Optional[int] = None) -> List[User]:
        """
        Search users by username or display name for autocomplete.

        Usernames starting with the query rank before looser matches.
        """
        escaped = escape_like(query)
        pattern = f"%{escaped}%"
        db_query = self.session.query(User).filter(
            or_(
                User.username.ilike(pattern, escape="\\"),
                User.name.ilike(pattern, escape="\\")
            )
        )
        if exclude_id is not None:
            db_query = db_query.filter(User.id != exclude_id)

        prefix_rank = case((User.username.ilike(f"{escaped}%", escape="\\"), 0), else_=1)
        return db_query.order_by(
            prefix_rank,
            func.lower(User.username),
            User.id
        ).limit(limit).all()

    def add_role(self, user: User, role_name: str) -> User:
        """Grant a role to a user, creating the role row if needed."""
        role = self.session.query(Role).filter(Role.name == role_name).first()
        if role is None:
            role = Role(name=role_name)
            self.session.add(role)
        if role not in user.roles:
            user.roles.append(role)
        self.session.flush()
        return user
