"""
Board sources.

One strategy object per listing variant describes how its board is built:
the base predicate, the category facet, the eager-load projection, the
normalization of ORM rows into display cards and an optional annotation
step that attaches per-row data needing extra queries (membership counts,
the viewer's relation to each row).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload

from fellowship.domains.boards.models import (
    Category, ListingKind, Group, ShareItem, Need, Prayer,
    MembershipRole, MembershipStatus, ShareStatus, ShareType, NeedStatus,
)
from fellowship.domains.boards.repository import GroupMembershipRepository, ShareClaimRepository
from fellowship.domains.boards.schemas import (
    BoardContext, ListingCard, GroupCard, ShareCard, NeedCard, PrayerCard,
)
from fellowship.domains.shared.interfaces import UserContext, UserPermissions
from fellowship.domains.user.schemas import UserSummary

MEMBER_STATUSES = (MembershipStatus.APPROVED.value, MembershipStatus.ACTIVE.value)


@dataclass(frozen=True)
class BoardSource(ABC):
    """Contract every board variant implements."""

    kind: ClassVar[ListingKind]
    model: ClassVar[type]
    requires_user: ClassVar[bool] = True

    owner_id: Optional[int] = None

    def base_criteria(self, context: BoardContext) -> List[Any]:
        criteria = [self.model.active.is_(True)]
        if self.owner_id is not None:
            criteria.append(self.model.user_id == self.owner_id)
        return criteria

    def category_criteria(self) -> List[Any]:
        """Predicate selecting the filter categories of this variant."""
        return [Category.type == self.kind.value, Category.active.is_(True)]

    def load_options(self) -> List[Any]:
        return [joinedload(self.model.owner), joinedload(self.model.category)]

    @abstractmethod
    def to_card(self, row: Any, can_moderate: bool) -> ListingCard:
        """Flatten one ORM row into its display card."""

    def transform(self, rows: Sequence[Any], viewer: Optional[UserContext]) -> List[ListingCard]:
        can_moderate = UserPermissions(viewer).can_moderate()
        return [self.to_card(row, can_moderate) for row in rows]

    def annotate(self, session: Session, cards: List[ListingCard], viewer: Optional[UserContext]) -> List[ListingCard]:
        return cards

    def with_owner(self, owner_id: int) -> "BoardSource":
        """Copy of this source restricted to one owner's listings."""
        return replace(self, owner_id=owner_id)


def _author(user) -> Optional[UserSummary]:
    return UserSummary.from_user(user) if user is not None else None


def _category_name(row) -> Optional[str]:
    return row.category.name if row.category is not None else None


@dataclass(frozen=True)
class GroupBoardSource(BoardSource):
    kind: ClassVar[ListingKind] = ListingKind.GROUP
    model: ClassVar[type] = Group
    requires_user: ClassVar[bool] = False

    def load_options(self) -> List[Any]:
        return [joinedload(Group.category)]

    def to_card(self, row: Group, can_moderate: bool) -> GroupCard:
        return GroupCard(
            id=row.id,
            name=row.name,
            description=row.description or "",
            frequency=row.frequency,
            meeting_time=row.meeting_time,
            location=row.location,
            is_online=bool(row.is_online),
            is_private=bool(row.is_private),
            capacity=row.capacity,
            category=_category_name(row),
            created_at=row.created_at,
            can_moderate=can_moderate,
        )

    def annotate(self, session: Session, cards: List[GroupCard], viewer: Optional[UserContext]) -> List[GroupCard]:
        """Attach member counts, the leader and the viewer's membership."""
        group_ids = [card.id for card in cards]
        memberships = GroupMembershipRepository(session)
        counts = memberships.counts_for_groups(group_ids)
        leaders = memberships.leaders_for_groups(group_ids)
        mine = memberships.for_user(viewer.id, group_ids) if viewer is not None else {}

        annotated = []
        for card in cards:
            member_count = counts.get(card.id, 0)
            membership = mine.get(card.id)
            status = membership.status if membership is not None else None
            is_member = status in MEMBER_STATUSES
            annotated.append(card.model_copy(update={
                "member_count": member_count,
                "has_capacity": not card.capacity or member_count < card.capacity,
                "author": _author(leaders.get(card.id)),
                "membership_status": status,
                "is_member": is_member,
                "is_leader": is_member and membership.role == MembershipRole.LEADER.value,
                "is_pending": status == MembershipStatus.PENDING.value,
            }))
        return annotated


@dataclass(frozen=True)
class ShareBoardSource(BoardSource):
    kind: ClassVar[ListingKind] = ListingKind.SHARE
    model: ClassVar[type] = ShareItem

    @staticmethod
    def share_type_for(context: BoardContext) -> ShareType:
        raw = (context.query.param("type") or "").strip().upper()
        return ShareType.GIVE if raw == ShareType.GIVE.value else ShareType.BORROW

    def base_criteria(self, context: BoardContext) -> List[Any]:
        criteria = super().base_criteria(context)
        criteria.extend([
            ShareItem.status == ShareStatus.ACTIVE.value,
            ShareItem.share_type == self.share_type_for(context).value,
            ShareItem.claimed.is_(False),  # only unclaimed items are listed
        ])
        return criteria

    def to_card(self, row: ShareItem, can_moderate: bool) -> ShareCard:
        return ShareCard(
            id=row.id,
            title=row.title,
            description=row.description or "",
            location=row.location,
            image_key=row.image_key,
            claimed=bool(row.claimed),
            share_type=(row.share_type or ShareType.BORROW.value).lower(),
            duration=row.duration,
            category=_category_name(row),
            created_at=row.created_at,
            author=_author(row.owner),
            can_moderate=can_moderate,
        )

    def annotate(self, session: Session, cards: List[ShareCard], viewer: Optional[UserContext]) -> List[ShareCard]:
        if viewer is None or not cards:
            return cards
        claims = ShareClaimRepository(session).for_user(viewer.id, [card.id for card in cards])
        return [
            card.model_copy(update={"claim_status": claims[card.id].status}) if card.id in claims else card
            for card in cards
        ]


@dataclass(frozen=True)
class NeedBoardSource(BoardSource):
    kind: ClassVar[ListingKind] = ListingKind.NEED
    model: ClassVar[type] = Need

    def base_criteria(self, context: BoardContext) -> List[Any]:
        criteria = super().base_criteria(context)
        criteria.extend([
            Need.type == ListingKind.NEED.value,
            Need.status == NeedStatus.ACTIVE.value,
        ])
        return criteria

    def to_card(self, row: Need, can_moderate: bool) -> NeedCard:
        return NeedCard(
            id=row.id,
            description=row.description,
            fulfilled=bool(row.fulfilled),
            response=row.response,
            category=_category_name(row),
            created_at=row.created_at,
            author=_author(row.owner),
            can_moderate=can_moderate,
        )


@dataclass(frozen=True)
class PrayerBoardSource(BoardSource):
    kind: ClassVar[ListingKind] = ListingKind.PRAYER
    model: ClassVar[type] = Prayer

    def to_card(self, row: Prayer, can_moderate: bool) -> PrayerCard:
        return PrayerCard(
            id=row.id,
            description=row.description,
            answered=bool(row.answered),
            answered_message=row.answered_message,
            answered_at=row.answered_at,
            prayer_count=row.prayer_count or 0,
            category=_category_name(row),
            created_at=row.created_at,
            author=_author(row.owner),
            can_moderate=can_moderate,
        )


BOARD_SOURCES: Dict[ListingKind, BoardSource] = {
    ListingKind.GROUP: GroupBoardSource(),
    ListingKind.SHARE: ShareBoardSource(),
    ListingKind.NEED: NeedBoardSource(),
    ListingKind.PRAYER: PrayerBoardSource(),
}


def get_board_source(kind: ListingKind, owner_id: Optional[int] = None) -> BoardSource:
    """Look up the registered source for a variant, optionally owner-scoped."""
    source = BOARD_SOURCES[ListingKind(kind)]
    if owner_id is not None:
        source = source.with_owner(owner_id)
    return source
