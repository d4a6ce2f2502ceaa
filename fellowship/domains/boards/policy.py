"""Boards domain authorization policy layer."""

from typing import Optional
from dataclasses import dataclass, field
from enum import Enum

from fellowship.domains.shared.interfaces import UserContext, UserPermissions
from fellowship.domains.boards.models import LISTING_MODELS, Group, ShareItem, Need, Prayer


class Action(Enum):
    """Enumeration of possible actions on board listings."""

    VIEW = "view"
    DELETE = "delete"
    MODERATE = "moderate"
    JOIN = "join"
    CLAIM = "claim"
    MARK_ANSWERED = "mark_answered"
    FULFILL = "fulfill"


@dataclass
class PolicyContext:
    """Context for policy decisions."""

    user: Optional[UserContext]
    action: Action
    resource: Optional[object] = None
    metadata: dict = field(default_factory=dict)


class PolicyResult:
    """Result of a policy check with reason."""

    def __init__(self, allowed: bool, reason: str = ""):
        self.allowed = allowed
        self.reason = reason

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, reason: str = "") -> "PolicyResult":
        """Create an allowed result."""
        return cls(True, reason)

    @classmethod
    def deny(cls, reason: str = "") -> "PolicyResult":
        """Create a denied result."""
        return cls(False, reason)


class ListingPolicy:
    """Authorization rules shared by every listing variant."""

    def can_view(self, listing, user: Optional[UserContext]) -> PolicyResult:
        if listing.active:
            return PolicyResult.allow("Listing is active")
        permissions = UserPermissions(user)
        if permissions.owns(listing.user_id) or permissions.can_moderate():
            return PolicyResult.allow("User owns or moderates the listing")
        return PolicyResult.deny("Listing has been removed")

    def can_delete(self, listing, user: Optional[UserContext]) -> PolicyResult:
        if not user:
            return PolicyResult.deny("Authentication required to delete listings")
        permissions = UserPermissions(user)
        if permissions.owns(listing.user_id):
            return PolicyResult.allow("User is the owner")
        if permissions.can_moderate():
            return PolicyResult.allow("User is a moderator")
        return PolicyResult.deny("User lacks permission to delete this listing")

    def can_moderate(self, listing, user: Optional[UserContext]) -> PolicyResult:
        if not user:
            return PolicyResult.deny("Authentication required to moderate")
        if UserPermissions(user).can_moderate():
            return PolicyResult.allow("User is a moderator")
        return PolicyResult.deny("Only moderators can perform moderation actions")

    def owner_only(self, listing, user: Optional[UserContext], what: str) -> PolicyResult:
        if not user:
            return PolicyResult.deny(f"Authentication required to {what}")
        if UserPermissions(user).owns(listing.user_id):
            return PolicyResult.allow("User is the owner")
        return PolicyResult.deny(f"Only the owner can {what}")


class GroupPolicy(ListingPolicy):
    """Authorization rules for joining groups."""

    def can_join(self, group: Group, user: Optional[UserContext]) -> PolicyResult:
        if not user:
            return PolicyResult.deny("Authentication required to join groups")
        if not group.active:
            return PolicyResult.deny("Group is no longer active")
        return PolicyResult.allow("User can request membership")


class SharePolicy(ListingPolicy):
    """Authorization rules for claiming share items."""

    def can_claim(self, item: ShareItem, user: Optional[UserContext]) -> PolicyResult:
        if not user:
            return PolicyResult.deny("Authentication required to claim items")
        if item.user_id == user.id:
            return PolicyResult.deny("You cannot claim your own item")
        return PolicyResult.allow("User can claim the item")


class BoardPolicy:
    """Main policy class dispatching checks by listing variant and action."""

    def __init__(self):
        self.listing = ListingPolicy()
        self.group = GroupPolicy()
        self.share = SharePolicy()

    def can(self, context: PolicyContext) -> PolicyResult:
        """
        Check if an action is allowed in the given context.

        Args:
            context: The policy context containing user, action, and resource

        Returns:
            PolicyResult indicating if the action is allowed and why
        """
        resource = context.resource
        user = context.user
        action = context.action

        if action == Action.MODERATE:
            return self.listing.can_moderate(resource, user)

        if not isinstance(resource, LISTING_MODELS):
            return PolicyResult.deny("Unknown resource or action")

        if action == Action.VIEW:
            return self.listing.can_view(resource, user)
        if action == Action.DELETE:
            return self.listing.can_delete(resource, user)
        if action == Action.JOIN and isinstance(resource, Group):
            return self.group.can_join(resource, user)
        if action == Action.CLAIM and isinstance(resource, ShareItem):
            return self.share.can_claim(resource, user)
        if action == Action.MARK_ANSWERED and isinstance(resource, Prayer):
            return self.listing.owner_only(resource, user, "mark this prayer as answered")
        if action == Action.FULFILL and isinstance(resource, Need):
            return self.listing.owner_only(resource, user, "mark this need as fulfilled")

        return PolicyResult.deny("Unknown resource or action")

    def enforce(self, context: PolicyContext) -> None:
        """
        Enforce a policy, raising PermissionError if denied.

        Raises:
            PermissionError: If the action is not allowed
        """
        result = self.can(context)
        if not result:
            raise PermissionError(result.reason or "Permission denied")


def check_policy(
    action: Action,
    resource: Optional[object] = None,
    user: Optional[UserContext] = None,
    metadata: Optional[dict] = None
) -> PolicyResult:
    """Convenience function to check a policy."""
    context = PolicyContext(
        user=user,
        action=action,
        resource=resource,
        metadata=metadata or {}
    )
    return BoardPolicy().can(context)


def enforce_policy(
    action: Action,
    resource: Optional[object] = None,
    user: Optional[UserContext] = None,
    metadata: Optional[dict] = None
) -> None:
    """
    Convenience function to enforce a policy.

    Raises:
        PermissionError: If the action is not allowed
    """
    context = PolicyContext(
        user=user,
        action=action,
        resource=resource,
        metadata=metadata or {}
    )
    BoardPolicy().enforce(context)
