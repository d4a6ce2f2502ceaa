"""User domain schemas."""

from typing import List, Optional
import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class UserSummary(BaseModel):
    """Author block shown on board cards and in autocomplete results."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: str
    avatar_key: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.name or user.username,
            avatar_key=user.image_key,
        )


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    image_key: Optional[str] = None
    roles: List[str] = []
    created_at: Optional[datetime.datetime] = None

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v):
        return sorted(getattr(role, "name", role) for role in (v or []))
