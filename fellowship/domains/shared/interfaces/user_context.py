"""
User Context Interface for Cross-Domain Communication

This module defines interfaces that expose only necessary user information
to each domain, avoiding direct coupling to the User model. The context is
resolved once per request by the auth boundary and passed explicitly into
board queries and actions.
"""

from typing import Optional, Tuple, Iterable
from pydantic import BaseModel, ConfigDict


class UserContext(BaseModel):
    """
    Value object representing user context for cross-domain communication.
    This is a concrete implementation that can be passed between domains.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    image_key: Optional[str] = None
    roles: Tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.username

    def has_any_role(self, role_names: Iterable[str]) -> bool:
        wanted = {name.lower() for name in role_names}
        return any(role.lower() in wanted for role in self.roles)

    @classmethod
    def from_user_model(cls, user: any) -> "UserContext":
        """Create UserContext from a User model instance."""
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            image_key=user.image_key,
            roles=tuple(sorted(role.name for role in user.roles)),
        )


class UserContextAdapter:
    """
    Adapter to convert between User model and UserContext.
    """

    @staticmethod
    def to_context(user: any) -> Optional[UserContext]:
        """Convert User model to UserContext."""
        if user is None:
            return None
        return UserContext.from_user_model(user)


class UserPermissions:
    """
    Role checks for a user context, driven by the configured moderator roles.
    """

    def __init__(self, user_context: Optional[UserContext], moderator_roles: Optional[Iterable[str]] = None):
        self.user_context = user_context
        if moderator_roles is None:
            from fellowship.config.settings import get_settings
            moderator_roles = get_settings().moderator_roles
        self.moderator_roles = tuple(moderator_roles)

    def can_moderate(self) -> bool:
        """Admins and moderators may act on listings they do not own."""
        if self.user_context is None:
            return False
        return self.user_context.has_any_role(self.moderator_roles)

    def owns(self, owner_id: Optional[int]) -> bool:
        return self.user_context is not None and owner_id is not None and self.user_context.id == owner_id
