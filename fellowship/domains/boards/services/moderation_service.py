import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from fellowship.domains.boards.models import ListingKind, ModerationAction, ShareItem, ShareStatus
from fellowship.domains.boards.policy import Action, enforce_policy
from fellowship.domains.boards.repository import ModerationLogRepository
from fellowship.domains.boards.exceptions import PermissionDeniedException
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.shared.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Moderation action"


def _reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    return reason or DEFAULT_REASON


class ModerationService:
    """Deletes and status changes on listings, with an audit entry for moderator actions."""

    def __init__(self, session: Session):
        self.session = session
        self.log_repo = ModerationLogRepository(session)

    def _enforce(self, action: Action, resource: Any, user: Optional[UserContext]) -> None:
        try:
            enforce_policy(action=action, resource=resource, user=user)
        except PermissionError as e:
            raise PermissionDeniedException(str(e))

    def delete_listing(
        self,
        kind: ListingKind,
        listing: Any,
        user: UserContext,
        moderator_action: bool = False,
        reason: Optional[str] = None
    ) -> None:
        """
        Soft-delete a listing.

        A moderator action requires a moderator role and appends a DELETE
        entry to the moderation log in the same transaction. Other deletes
        require the caller to own the listing or hold a moderator role.

        Raises:
            PermissionDeniedException: If the caller may not delete the listing
        """
        self._enforce(Action.MODERATE if moderator_action else Action.DELETE, listing, user)

        with SqlAlchemyUoW(session=self.session) as uow:
            if moderator_action:
                self.log_repo.append(
                    moderator_id=user.id,
                    item_id=listing.id,
                    item_type=kind,
                    action=ModerationAction.DELETE.value,
                    reason=_reason(reason)
                )
            listing.active = False
            uow.flush()

        logger.info(
            "%s %s deleted by user %s%s",
            kind.value, listing.id, user.id, " (moderator action)" if moderator_action else ""
        )

    def set_share_status(
        self,
        item: ShareItem,
        user: UserContext,
        status: ShareStatus,
        reason: Optional[str] = None
    ) -> None:
        """Flag a share item for review or remove it from the board (moderators only)."""
        self._enforce(Action.MODERATE, item, user)
        action = ModerationAction.FLAG if status == ShareStatus.PENDING else ModerationAction.REMOVE

        with SqlAlchemyUoW(session=self.session) as uow:
            self.log_repo.append(
                moderator_id=user.id,
                item_id=item.id,
                item_type=ListingKind.SHARE,
                action=action.value,
                reason=_reason(reason)
            )
            item.status = status.value
            uow.flush()

        logger.info("Share item %s set to %s by moderator %s", item.id, status.value, user.id)
