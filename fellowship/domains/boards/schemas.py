"""Boards domain schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union
import datetime

from pydantic import BaseModel, ConfigDict, Field

from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.user.schemas import UserSummary

ALL_FILTER = "all"
SortDirection = Literal["asc", "desc"]


def parse_page(raw: Optional[str]) -> int:
    """Parse a 1-based page number, falling back to 1 for junk or non-positive values."""
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page > 0 else 1


def parse_sort(raw: Optional[str]) -> SortDirection:
    return "asc" if raw is not None and str(raw).strip().lower() == "asc" else "desc"


# --- Request side ---
@dataclass(frozen=True)
class BoardQuery:
    """Normalized pagination/filter/sort parameters of one board request."""

    page: int = 1
    page_size: int = 20
    filter: Optional[str] = None
    sort: SortDirection = "desc"
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_params(cls, params: Mapping[str, Any], page_size: int) -> "BoardQuery":
        raw_filter = params.get("filter")
        raw_filter = str(raw_filter).strip() if raw_filter is not None else None
        if not raw_filter or raw_filter.lower() == ALL_FILTER:
            raw_filter = None
        return cls(
            page=parse_page(params.get("page")),
            page_size=page_size,
            filter=raw_filter,
            sort=parse_sort(params.get("sort")),
            params={key: str(value) for key, value in params.items()},
        )

    def param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.params.get(name, default)


@dataclass(frozen=True)
class BoardContext:
    """Everything a board query needs about the request, passed explicitly."""

    query: BoardQuery
    viewer: Optional[UserContext] = None


# --- Response side ---
class CategoryFilter(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ListingCard(BaseModel):
    """Display shape common to every listing variant."""

    id: int
    category: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    author: Optional[UserSummary] = None
    can_moderate: bool = False


class GroupCard(ListingCard):
    kind: Literal["group"] = "group"
    name: str
    description: str = ""
    frequency: Optional[str] = None
    meeting_time: Optional[str] = None
    location: Optional[str] = None
    is_online: bool = False
    is_private: bool = False
    capacity: Optional[int] = None
    member_count: int = 0
    has_capacity: bool = True
    is_member: bool = False
    is_leader: bool = False
    is_pending: bool = False
    membership_status: Optional[str] = None


class ShareCard(ListingCard):
    kind: Literal["share"] = "share"
    title: str
    description: str = ""
    location: Optional[str] = None
    image_key: Optional[str] = None
    claimed: bool = False
    share_type: str = "borrow"
    duration: Optional[str] = None
    claim_status: Optional[str] = None


class NeedCard(ListingCard):
    kind: Literal["need"] = "need"
    description: str
    fulfilled: bool = False
    response: Optional[str] = None


class PrayerCard(ListingCard):
    kind: Literal["prayer"] = "prayer"
    description: str
    answered: bool = False
    answered_message: Optional[str] = None
    answered_at: Optional[datetime.datetime] = None
    prayer_count: int = 0


BoardItem = Annotated[
    Union[GroupCard, ShareCard, NeedCard, PrayerCard],
    Field(discriminator="kind"),
]


class BoardPage(BaseModel):
    """Uniform envelope returned by every board."""

    items: List[BoardItem] = []
    total: int
    page: int
    page_size: int
    has_next_page: bool
    filters: List[CategoryFilter] = []
    active_filter: str = ALL_FILTER
    sort: SortDirection = "desc"
    can_moderate: bool = False


class SharePage(BoardPage):
    share_type: str


class ProfileBoardPage(BoardPage):
    profile: UserSummary


# --- Actions ---
class ActionResult(BaseModel):
    success: bool = True
    message: Optional[str] = None
    status: Optional[str] = None
