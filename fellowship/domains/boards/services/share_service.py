from typing import Optional

from sqlalchemy.exc import IntegrityError

from fellowship.domains.boards.models import ClaimStatus, ListingKind, ShareItem, ShareStatus
from fellowship.domains.boards.policy import Action
from fellowship.domains.boards.repository import ShareClaimRepository
from fellowship.domains.boards.schemas import ActionResult, BoardContext, SharePage
from fellowship.domains.boards.sources import ShareBoardSource
from fellowship.domains.boards.exceptions import BusinessRuleViolation, MembershipNotFoundException
from fellowship.domains.boards.services.base import ListingService
from fellowship.domains.boards.services.moderation_service import ModerationService
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.shared.uow import SqlAlchemyUoW


class ShareService(ListingService):
    kind = ListingKind.SHARE
    model = ShareItem
    not_found_message = "Item not found"
    deleted_message = "Item deleted"

    def __init__(self, session, query_service=None):
        super().__init__(session, query_service)
        self.claim_repo = ShareClaimRepository(session)

    def list_board(self, context: BoardContext) -> SharePage:
        """Board of unclaimed items offered to give away or to borrow."""
        page = super().list_board(context)
        share_type = ShareBoardSource.share_type_for(context)
        return SharePage(**page.model_dump(), share_type=share_type.value.lower())

    def claim(self, item_id: int, user: UserContext) -> ActionResult:
        item = self.get_listing(item_id)
        if item.user_id == user.id:
            raise BusinessRuleViolation("You cannot claim your own item")
        self.enforce(Action.CLAIM, item, user)

        existing = self.claim_repo.get_for(user.id, item.id)
        if existing is not None:
            return ActionResult(success=True, message="You have already requested this item.", status=existing.status)

        if item.claimed or item.status != ShareStatus.ACTIVE.value:
            raise BusinessRuleViolation("This item is no longer available")

        try:
            with SqlAlchemyUoW(session=self.session):
                self.claim_repo.create(user_id=user.id, item_id=item.id, status=ClaimStatus.PENDING.value)
        except IntegrityError:
            self.logger.warning("Duplicate claim of share item %s by user %s", item_id, user.id)
            existing = self.claim_repo.get_for(user.id, item_id)
            if existing is None:
                raise
            return ActionResult(success=True, message="You have already requested this item.", status=existing.status)

        self.logger.info("User %s claimed share item %s", user.id, item_id)
        return ActionResult(
            success=True,
            message="Your request has been sent to the owner.",
            status=ClaimStatus.PENDING.value
        )

    def unclaim(self, item_id: int, user: UserContext) -> ActionResult:
        claim = self.claim_repo.get_for(user.id, item_id)
        if claim is None:
            raise MembershipNotFoundException("Claim not found")

        with SqlAlchemyUoW(session=self.session):
            self.claim_repo.remove(claim)

        self.logger.info("User %s withdrew claim on share item %s", user.id, item_id)
        return ActionResult(success=True, message="Your request has been withdrawn.")

    def mark_pending(self, item_id: int, user: UserContext, reason: Optional[str] = None) -> ActionResult:
        """Hold an item back from the board for moderator review."""
        item = self.get_listing(item_id)
        ModerationService(self.session).set_share_status(item, user, ShareStatus.PENDING, reason)
        return ActionResult(success=True, message="Item marked as pending", status=ShareStatus.PENDING.value)

    def mark_removed(self, item_id: int, user: UserContext, reason: Optional[str] = None) -> ActionResult:
        item = self.get_listing(item_id)
        ModerationService(self.session).set_share_status(item, user, ShareStatus.REMOVED, reason)
        return ActionResult(success=True, message="Item removed", status=ShareStatus.REMOVED.value)
