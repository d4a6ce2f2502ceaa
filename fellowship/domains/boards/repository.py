from typing import Optional, List, Dict, Iterable, Sequence, Any

from sqlalchemy import and_, asc, desc, func, select, update
from sqlalchemy.orm import Session

from fellowship.domains.boards.models import (
    Category, ListingKind, GroupMembership, MembershipRole,
    ShareClaim, ModerationLog, Prayer,
)
from fellowship.domains.user.models import User
from fellowship.domains.shared.repository import SqlAlchemyRepository


class CategoryRepository(SqlAlchemyRepository[Category]):
    """Repository for board filter categories."""

    def __init__(self, session: Session):
        """Initialize with a SQLAlchemy session."""
        super().__init__(session, Category)

    def list_for_kind(self, kind: ListingKind) -> List[Category]:
        """Get the active categories of one listing variant, ordered by name."""
        return self.session.query(Category).filter(
            Category.type == kind.value,
            Category.active.is_(True)
        ).order_by(
            Category.name,
            Category.id
        ).all()

    def find_for_kind(self, kind: ListingKind, name: str) -> Optional[Category]:
        """Find an active category of a variant by name, ignoring case."""
        return self.session.query(Category).filter(
            Category.type == kind.value,
            Category.active.is_(True),
            func.lower(Category.name) == name.lower()
        ).order_by(Category.id).first()

    def count_by_kind(self) -> Dict[str, int]:
        """Count active categories per listing variant."""
        rows = self.session.query(Category.type, func.count(Category.id)).filter(
            Category.active.is_(True)
        ).group_by(Category.type).all()
        return {kind: count for kind, count in rows}


class ListingRepository(SqlAlchemyRepository[Any]):
    """
    Read/write access to one listing variant table.

    The board query paths always join the listing's category so that
    variant and category predicates can be combined in one statement.
    """

    def __init__(self, session: Session, model_class: type):
        super().__init__(session, model_class)

    def _filtered(self, stmt, criteria: Sequence[Any]):
        stmt = stmt.join(Category, self.model_class.category_id == Category.id)
        if criteria:
            stmt = stmt.where(and_(*criteria))
        return stmt

    def count(self, criteria: Sequence[Any]) -> int:
        """Count listings matching all criteria."""
        stmt = self._filtered(
            select(func.count(self.model_class.id)).select_from(self.model_class),
            criteria
        )
        return self.session.execute(stmt).scalar_one()

    def fetch_page(
        self,
        criteria: Sequence[Any],
        sort: str = "desc",
        offset: int = 0,
        limit: int = 20,
        options: Iterable[Any] = ()
    ) -> List[Any]:
        """
        Fetch one page of listings ordered by creation time.

        The id tie-break makes the ordering total, so consecutive pages
        never overlap or skip rows for an unchanged data set.
        """
        direction = asc if sort == "asc" else desc
        stmt = self._filtered(select(self.model_class), criteria).order_by(
            direction(self.model_class.created_at),
            direction(self.model_class.id)
        ).offset(offset).limit(limit)
        options = list(options)
        if options:
            stmt = stmt.options(*options)
        return list(self.session.execute(stmt).scalars().all())

    def count_by_category(self, criteria: Sequence[Any]) -> Dict[str, int]:
        """Count listings per category name for the admin dashboard."""
        stmt = self._filtered(
            select(Category.name, func.count(self.model_class.id)).select_from(self.model_class),
            criteria
        ).group_by(Category.name).order_by(Category.name)
        return {name: count for name, count in self.session.execute(stmt).all()}

    def get_for_update(self, id: int) -> Optional[Any]:
        """Get a listing by id for a mutating action."""
        return self.session.get(self.model_class, id)


class PrayerRepository(ListingRepository):
    """Listing repository with the prayer-specific counter update."""

    def __init__(self, session: Session):
        super().__init__(session, Prayer)

    def increment_prayer_count(self, id: int) -> None:
        """Increment the prayer count in one UPDATE so concurrent prayers do not race."""
        self.session.execute(
            update(Prayer).where(Prayer.id == id).values(
                prayer_count=Prayer.prayer_count + 1
            ).execution_options(synchronize_session=False)
        )
        self.session.flush()


class GroupMembershipRepository(SqlAlchemyRepository[GroupMembership]):
    """Repository for group memberships."""

    def __init__(self, session: Session):
        super().__init__(session, GroupMembership)

    def get_for(self, user_id: int, group_id: int) -> Optional[GroupMembership]:
        """Get a user's membership of one group."""
        return self.session.query(GroupMembership).filter(
            GroupMembership.user_id == user_id,
            GroupMembership.group_id == group_id
        ).first()

    def for_user(self, user_id: int, group_ids: Sequence[int]) -> Dict[int, GroupMembership]:
        """Map group id to the user's membership, limited to the given groups."""
        if not group_ids:
            return {}
        memberships = self.session.query(GroupMembership).filter(
            GroupMembership.user_id == user_id,
            GroupMembership.group_id.in_(list(group_ids))
        ).all()
        return {membership.group_id: membership for membership in memberships}

    def count_for_group(self, group_id: int) -> int:
        """Count every membership row of a group, pending ones included."""
        return self.count_where([GroupMembership.group_id == group_id])

    def counts_for_groups(self, group_ids: Sequence[int]) -> Dict[int, int]:
        """Count memberships per group in one aggregate query."""
        if not group_ids:
            return {}
        rows = self.session.query(
            GroupMembership.group_id, func.count(GroupMembership.id)
        ).filter(
            GroupMembership.group_id.in_(list(group_ids))
        ).group_by(GroupMembership.group_id).all()
        return {group_id: count for group_id, count in rows}

    def leaders_for_groups(self, group_ids: Sequence[int]) -> Dict[int, User]:
        """Map group id to its first leader's user row."""
        if not group_ids:
            return {}
        rows = self.session.query(GroupMembership.group_id, User).join(
            User, GroupMembership.user_id == User.id
        ).filter(
            GroupMembership.group_id.in_(list(group_ids)),
            GroupMembership.role == MembershipRole.LEADER.value
        ).order_by(GroupMembership.group_id, GroupMembership.id).all()
        leaders: Dict[int, User] = {}
        for group_id, user in rows:
            leaders.setdefault(group_id, user)
        return leaders

    def create(self, user_id: int, group_id: int, role: str, status: str) -> GroupMembership:
        """Insert a membership; the (user, group) unique constraint guards duplicates."""
        membership = GroupMembership(
            user_id=user_id,
            group_id=group_id,
            role=role,
            status=status
        )
        return self.add(membership)


class ShareClaimRepository(SqlAlchemyRepository[ShareClaim]):
    """Repository for share item claims."""

    def __init__(self, session: Session):
        super().__init__(session, ShareClaim)

    def get_for(self, user_id: int, item_id: int) -> Optional[ShareClaim]:
        return self.session.query(ShareClaim).filter(
            ShareClaim.user_id == user_id,
            ShareClaim.share_item_id == item_id
        ).first()

    def for_user(self, user_id: int, item_ids: Sequence[int]) -> Dict[int, ShareClaim]:
        """Map item id to the user's claim, limited to the given items."""
        if not item_ids:
            return {}
        claims = self.session.query(ShareClaim).filter(
            ShareClaim.user_id == user_id,
            ShareClaim.share_item_id.in_(list(item_ids))
        ).all()
        return {claim.share_item_id: claim for claim in claims}

    def create(self, user_id: int, item_id: int, status: str) -> ShareClaim:
        claim = ShareClaim(user_id=user_id, share_item_id=item_id, status=status)
        return self.add(claim)


class ModerationLogRepository(SqlAlchemyRepository[ModerationLog]):
    """Append-only audit trail of moderator actions."""

    def __init__(self, session: Session):
        super().__init__(session, ModerationLog)

    def append(
        self,
        moderator_id: int,
        item_id: int,
        item_type: ListingKind,
        action: str,
        reason: str
    ) -> ModerationLog:
        entry = ModerationLog(
            moderator_id=moderator_id,
            item_id=item_id,
            item_type=item_type.value,
            action=action,
            reason=reason
        )
        return self.add(entry)

    def list_for_item(self, item_type: ListingKind, item_id: int) -> List[ModerationLog]:
        return self.session.query(ModerationLog).filter(
            ModerationLog.item_type == item_type.value,
            ModerationLog.item_id == item_id
        ).order_by(ModerationLog.created_at, ModerationLog.id).all()

    def count_by_action(self) -> Dict[str, int]:
        rows = self.session.query(ModerationLog.action, func.count(ModerationLog.id)).group_by(
            ModerationLog.action
        ).all()
        return {action: count for action, count in rows}


class MembershipStatsRepository:
    """Aggregate counts of membership and claim relations."""

    def __init__(self, session: Session):
        self.session = session

    def membership_counts_by_status(self) -> Dict[str, int]:
        rows = self.session.query(GroupMembership.status, func.count(GroupMembership.id)).group_by(
            GroupMembership.status
        ).all()
        return {status: count for status, count in rows}

    def claim_counts_by_status(self) -> Dict[str, int]:
        rows = self.session.query(ShareClaim.status, func.count(ShareClaim.id)).group_by(
            ShareClaim.status
        ).all()
        return {status: count for status, count in rows}
