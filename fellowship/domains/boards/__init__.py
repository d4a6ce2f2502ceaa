from .repository import (
    CategoryRepository,
    ListingRepository,
    PrayerRepository,
    GroupMembershipRepository,
    ShareClaimRepository,
    ModerationLogRepository,
)
from .query import BoardQueryService
from .sources import BoardSource, get_board_source
from .policy import (
    BoardPolicy,
    ListingPolicy,
    GroupPolicy,
    SharePolicy,
    Action,
    PolicyContext,
    PolicyResult,
    check_policy,
    enforce_policy,
)

__all__ = [
    # Repository
    "CategoryRepository",
    "ListingRepository",
    "PrayerRepository",
    "GroupMembershipRepository",
    "ShareClaimRepository",
    "ModerationLogRepository",
    # Query
    "BoardQueryService",
    "BoardSource",
    "get_board_source",
    # Policy
    "BoardPolicy",
    "ListingPolicy",
    "GroupPolicy",
    "SharePolicy",
    "Action",
    "PolicyContext",
    "PolicyResult",
    "check_policy",
    "enforce_policy",
]
