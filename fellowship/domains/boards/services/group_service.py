from sqlalchemy.exc import IntegrityError

from fellowship.domains.boards.models import Group, GroupMembership, ListingKind, MembershipRole, MembershipStatus
from fellowship.domains.boards.policy import Action
from fellowship.domains.boards.repository import GroupMembershipRepository
from fellowship.domains.boards.schemas import ActionResult
from fellowship.domains.boards.exceptions import BusinessRuleViolation, MembershipNotFoundException
from fellowship.domains.boards.services.base import ListingService
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.shared.uow import SqlAlchemyUoW


class GroupService(ListingService):
    kind = ListingKind.GROUP
    model = Group
    not_found_message = "Group not found"
    deleted_message = "Group deleted"

    def __init__(self, session, query_service=None):
        super().__init__(session, query_service)
        self.membership_repo = GroupMembershipRepository(session)

    @staticmethod
    def _existing_membership(membership: GroupMembership) -> ActionResult:
        if membership.status == MembershipStatus.PENDING.value:
            message = "Your request to join is already pending approval."
        elif membership.status in (MembershipStatus.APPROVED.value, MembershipStatus.ACTIVE.value):
            message = "You are already a member of this group."
        else:
            message = "Your membership status is being reviewed."
        return ActionResult(success=True, message=message, status=membership.status)

    def join(self, group_id: int, user: UserContext) -> ActionResult:
        """
        Request membership of a group.

        Public groups approve the membership at once, private groups leave it
        pending. Joining twice reports the existing membership instead of
        failing.

        Raises:
            ListingNotFoundException: If the group does not exist or was deleted
            BusinessRuleViolation: If the group is at capacity
        """
        group = self.get_listing(group_id)
        self.enforce(Action.JOIN, group, user)

        existing = self.membership_repo.get_for(user.id, group.id)
        if existing is not None:
            return self._existing_membership(existing)

        if group.capacity and self.membership_repo.count_for_group(group.id) >= group.capacity:
            raise BusinessRuleViolation("Group is at capacity")

        status = MembershipStatus.PENDING if group.is_private else MembershipStatus.APPROVED
        try:
            with SqlAlchemyUoW(session=self.session):
                self.membership_repo.create(
                    user_id=user.id,
                    group_id=group.id,
                    role=MembershipRole.MEMBER.value,
                    status=status.value
                )
        except IntegrityError:
            # A concurrent join won the unique (user, group) constraint
            self.logger.warning("Duplicate join of group %s by user %s", group_id, user.id)
            existing = self.membership_repo.get_for(user.id, group_id)
            if existing is None:
                raise
            return self._existing_membership(existing)

        self.logger.info("User %s joined group %s as %s", user.id, group_id, status.value)
        if status == MembershipStatus.PENDING:
            return ActionResult(success=True, message="Your request to join has been submitted.", status=status.value)
        return ActionResult(success=True, message="You have joined the group.", status=status.value)

    def leave(self, group_id: int, user: UserContext) -> ActionResult:
        membership = self.membership_repo.get_for(user.id, group_id)
        if membership is None:
            raise MembershipNotFoundException("Membership not found")

        with SqlAlchemyUoW(session=self.session):
            self.membership_repo.remove(membership)

        self.logger.info("User %s left group %s", user.id, group_id)
        return ActionResult(success=True, message="You have left the group.")
