"""Admin domain module: moderator dashboard aggregates."""

from .service import AdminStatsService

__all__ = [
    "AdminStatsService",
]
