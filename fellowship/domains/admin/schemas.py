"""Admin dashboard schemas."""

from typing import Dict, List

from pydantic import BaseModel


class BoardStats(BaseModel):
    kind: str
    active_listings: int
    categories: int
    by_category: Dict[str, int] = {}


class AdminStats(BaseModel):
    """Counts feeding the admin dashboard charts."""

    users: int
    boards: List[BoardStats]
    memberships_by_status: Dict[str, int] = {}
    claims_by_status: Dict[str, int] = {}
    moderation_actions: Dict[str, int] = {}
