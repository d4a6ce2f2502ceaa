"""Admin domain API routes - thin routing layer."""

from fastapi import Depends
from sqlalchemy.orm import Session

from fellowship.config.dependencies import get_db, require_moderator
from fellowship.domains.admin.schemas import AdminStats
from fellowship.domains.admin.service import AdminStatsService
from fellowship.domains.shared.interfaces import UserContext


def get_admin_stats_service(db: Session = Depends(get_db)) -> AdminStatsService:
    """Dependency to get the dashboard stats service."""
    return AdminStatsService(db)


async def get_stats(
    current_user: UserContext = Depends(require_moderator),
    service: AdminStatsService = Depends(get_admin_stats_service)
) -> AdminStats:
    """Listing, membership and moderation counts (moderators only)."""
    return service.get_stats()
