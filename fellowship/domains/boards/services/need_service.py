from typing import Optional

from fellowship.domains.boards.models import ListingKind, Need
from fellowship.domains.boards.policy import Action
from fellowship.domains.boards.schemas import ActionResult
from fellowship.domains.boards.services.base import ListingService, ProfileBoardMixin
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.shared.uow import SqlAlchemyUoW


class NeedService(ProfileBoardMixin, ListingService):
    kind = ListingKind.NEED
    model = Need
    not_found_message = "Need not found"
    deleted_message = "Need deleted"

    def fulfill(self, need_id: int, user: UserContext, response: Optional[str] = None) -> ActionResult:
        """Mark one of the caller's needs as fulfilled, optionally with a note."""
        need = self.get_listing(need_id)
        self.enforce(Action.FULFILL, need, user)

        with SqlAlchemyUoW(session=self.session) as uow:
            need.fulfilled = True
            response = (response or "").strip()
            if response:
                need.response = response
            uow.flush()

        self.logger.info("Need %s fulfilled by user %s", need_id, user.id)
        return ActionResult(success=True, message="Need marked as fulfilled")
