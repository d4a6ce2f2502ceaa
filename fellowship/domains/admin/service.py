import logging

from sqlalchemy.orm import Session

from fellowship.domains.admin.schemas import AdminStats, BoardStats
from fellowship.domains.boards.models import ListingKind
from fellowship.domains.boards.repository import (
    CategoryRepository,
    ListingRepository,
    MembershipStatsRepository,
    ModerationLogRepository,
)
from fellowship.domains.boards.sources import get_board_source
from fellowship.domains.user.repository import SqlAlchemyUserRepository

logger = logging.getLogger(__name__)


class AdminStatsService:
    """Aggregates for the moderator dashboard."""

    def __init__(self, session: Session):
        self.session = session
        self.category_repo = CategoryRepository(session)
        self.stats_repo = MembershipStatsRepository(session)
        self.log_repo = ModerationLogRepository(session)
        self.user_repo = SqlAlchemyUserRepository(session)

    def _board_stats(self, kind: ListingKind, category_counts) -> BoardStats:
        model = get_board_source(kind).model
        by_category = ListingRepository(self.session, model).count_by_category([model.active.is_(True)])
        return BoardStats(
            kind=kind.value,
            active_listings=sum(by_category.values()),
            categories=category_counts.get(kind.value, 0),
            by_category=by_category,
        )

    def get_stats(self) -> AdminStats:
        category_counts = self.category_repo.count_by_kind()
        stats = AdminStats(
            users=self.user_repo.count_where([]),
            boards=[self._board_stats(kind, category_counts) for kind in ListingKind],
            memberships_by_status=self.stats_repo.membership_counts_by_status(),
            claims_by_status=self.stats_repo.claim_counts_by_status(),
            moderation_actions=self.log_repo.count_by_action(),
        )
        logger.debug("Computed admin stats for %d boards", len(stats.boards))
        return stats
