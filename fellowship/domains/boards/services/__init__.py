from .moderation_service import ModerationService
from .group_service import GroupService
from .share_service import ShareService
from .need_service import NeedService
from .prayer_service import PrayerService

__all__ = [
    "ModerationService",
    "GroupService",
    "ShareService",
    "NeedService",
    "PrayerService",
]
