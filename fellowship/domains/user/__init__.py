from .models import User, Role, user_roles
from .repository import UserRepository, SqlAlchemyUserRepository

__all__ = [
    "User",
    "Role",
    "user_roles",
    "UserRepository",
    "SqlAlchemyUserRepository",
]
