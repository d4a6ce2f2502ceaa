"""
Base Service Module

Common plumbing for the per-variant board services: listing lookup,
policy enforcement, board reads and the shared delete action.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from fellowship.domains.boards.models import ListingKind
from fellowship.domains.boards.policy import Action, enforce_policy
from fellowship.domains.boards.query import BoardQueryService
from fellowship.domains.boards.repository import ListingRepository
from fellowship.domains.boards.schemas import ActionResult, BoardContext, BoardPage, ProfileBoardPage
from fellowship.domains.boards.sources import BoardSource, get_board_source
from fellowship.domains.boards.services.moderation_service import ModerationService
from fellowship.domains.boards.exceptions import (
    ListingNotFoundException, PermissionDeniedException, UserNotFoundException,
)
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.user.repository import SqlAlchemyUserRepository
from fellowship.domains.user.schemas import UserSummary


class ListingService:
    """Base class for board services bound to one listing variant."""

    kind: ListingKind
    model: type
    not_found_message = "Listing not found"
    deleted_message = "Listing deleted"

    def __init__(self, session: Session, query_service: Optional[BoardQueryService] = None):
        self.session = session
        self.listing_repo = ListingRepository(session, self.model)
        self.query_service = query_service or BoardQueryService(session)
        self._logger = None

    @property
    def logger(self) -> logging.Logger:
        """
        Lazy-loaded logger property.

        Returns:
            Logger instance for this service
        """
        if self._logger is None:
            self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        return self._logger

    def source(self, owner_id: Optional[int] = None) -> BoardSource:
        return get_board_source(self.kind, owner_id)

    def list_board(self, context: BoardContext) -> BoardPage:
        return self.query_service.query(context, self.source())

    def get_listing(self, listing_id: int) -> Any:
        """Get an active listing or raise the variant's not-found error."""
        listing = self.listing_repo.get_for_update(listing_id)
        if listing is None or not listing.active:
            raise ListingNotFoundException(self.not_found_message)
        return listing

    def enforce(self, action: Action, resource: Any, user: Optional[UserContext]) -> None:
        try:
            enforce_policy(action=action, resource=resource, user=user)
        except PermissionError as e:
            raise PermissionDeniedException(str(e))

    def delete(
        self,
        listing_id: int,
        user: UserContext,
        moderator_action: bool = False,
        reason: Optional[str] = None
    ) -> ActionResult:
        """Soft-delete a listing as its owner or, with an audit entry, as a moderator."""
        listing = self.get_listing(listing_id)
        ModerationService(self.session).delete_listing(
            self.kind, listing, user, moderator_action=moderator_action, reason=reason
        )
        return ActionResult(success=True, message=self.deleted_message)


class ProfileBoardMixin:
    """Owner-scoped board for the profile tabs of a user."""

    def list_for_user(self, username: str, context: BoardContext) -> ProfileBoardPage:
        owner = SqlAlchemyUserRepository(self.session).get_by_username(username)
        if owner is None:
            raise UserNotFoundException("User not found")
        page = self.query_service.query(context, self.source(owner_id=owner.id))
        return ProfileBoardPage(**page.model_dump(), profile=UserSummary.from_user(owner))
