from datetime import datetime, timezone
from typing import Optional

from fellowship.domains.boards.models import ListingKind, Prayer
from fellowship.domains.boards.policy import Action
from fellowship.domains.boards.repository import PrayerRepository
from fellowship.domains.boards.schemas import ActionResult
from fellowship.domains.boards.services.base import ListingService, ProfileBoardMixin
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.shared.uow import SqlAlchemyUoW


class PrayerService(ProfileBoardMixin, ListingService):
    kind = ListingKind.PRAYER
    model = Prayer
    not_found_message = "Prayer not found"
    deleted_message = "Prayer deleted"

    def __init__(self, session, query_service=None):
        super().__init__(session, query_service)
        self.listing_repo = PrayerRepository(session)

    def mark_answered(self, prayer_id: int, user: UserContext, message: Optional[str] = None) -> ActionResult:
        """
        Mark one of the caller's prayers as answered.

        Marking an answered prayer again leaves the first answer in place.

        Raises:
            ListingNotFoundException: If the prayer does not exist or was deleted
            PermissionDeniedException: If the caller does not own the prayer
        """
        prayer = self.get_listing(prayer_id)
        self.enforce(Action.MARK_ANSWERED, prayer, user)

        if prayer.answered:
            return ActionResult(success=True, message="Prayer already marked as answered")

        with SqlAlchemyUoW(session=self.session) as uow:
            prayer.answered = True
            prayer.answered_message = (message or "").strip() or None
            prayer.answered_at = datetime.now(timezone.utc)
            uow.flush()

        self.logger.info("Prayer %s marked answered by user %s", prayer_id, user.id)
        return ActionResult(success=True, message="Prayer marked as answered")

    def pray(self, prayer_id: int, user: UserContext) -> ActionResult:
        prayer = self.get_listing(prayer_id)

        with SqlAlchemyUoW(session=self.session):
            self.listing_repo.increment_prayer_count(prayer.id)

        self.session.refresh(prayer)
        self.logger.debug("User %s prayed for prayer %s", user.id, prayer_id)
        return ActionResult(success=True, message=f"Prayed {prayer.prayer_count} times")
