import pytest

from conftest import as_context, auth_header
from fellowship.domains.boards.exceptions import (
    BusinessRuleViolation, ListingNotFoundException, MembershipNotFoundException,
)
from fellowship.domains.boards.models import (
    Group, GroupMembership, ListingKind, MembershipRole, MembershipStatus,
)
from fellowship.domains.boards.services import GroupService

GROUPS_URL = "/api/v1/boards/groups"


@pytest.fixture
def study(make_category):
    return make_category(ListingKind.GROUP, "Bible Study")


@pytest.fixture
def public_group(make_listing, other_user, study, make_membership):
    group = make_listing(Group, other_user, study, name="Tuesday Study")
    make_membership(other_user, group, role=MembershipRole.LEADER, status=MembershipStatus.ACTIVE)
    return group


@pytest.fixture
def private_group(make_listing, other_user, study):
    return make_listing(Group, other_user, study, name="Prayer Circle", is_private=True)


def membership_rows(db_session, group, user):
    db_session.expire_all()
    return db_session.query(GroupMembership).filter_by(group_id=group.id, user_id=user.id).all()


class TestJoinService:
    def test_join_public_group_is_approved(self, db_session, member, public_group):
        result = GroupService(db_session).join(public_group.id, as_context(member))

        assert result.success is True
        assert result.message == "You have joined the group."
        assert result.status == "APPROVED"
        rows = membership_rows(db_session, public_group, member)
        assert [(m.role, m.status) for m in rows] == [("MEMBER", "APPROVED")]

    def test_join_private_group_is_pending(self, db_session, member, private_group):
        result = GroupService(db_session).join(private_group.id, as_context(member))

        assert result.message == "Your request to join has been submitted."
        assert result.status == "PENDING"

    @pytest.mark.parametrize("status,message", [
        (MembershipStatus.PENDING, "Your request to join is already pending approval."),
        (MembershipStatus.APPROVED, "You are already a member of this group."),
        (MembershipStatus.ACTIVE, "You are already a member of this group."),
    ])
    def test_existing_membership_is_reported(self, db_session, member, public_group, make_membership, status, message):
        make_membership(member, public_group, status=status)

        result = GroupService(db_session).join(public_group.id, as_context(member))

        assert result.success is True
        assert result.message == message
        assert result.status == status.value
        assert len(membership_rows(db_session, public_group, member)) == 1

    def test_unusual_existing_status_is_under_review(self, db_session, member, public_group):
        db_session.add(GroupMembership(user_id=member.id, group_id=public_group.id, status="SUSPENDED"))
        db_session.commit()

        result = GroupService(db_session).join(public_group.id, as_context(member))

        assert result.message == "Your membership status is being reviewed."

    def test_joining_twice_keeps_one_row(self, db_session, member, public_group):
        service = GroupService(db_session)
        service.join(public_group.id, as_context(member))
        second = service.join(public_group.id, as_context(member))

        assert second.message == "You are already a member of this group."
        assert len(membership_rows(db_session, public_group, member)) == 1

    def test_full_group_rejects_new_members(self, db_session, member, make_user, make_listing, study, make_membership):
        group = make_listing(Group, make_user("leader"), study, capacity=2)
        make_membership(make_user("first"), group)
        make_membership(make_user("second"), group)

        with pytest.raises(BusinessRuleViolation) as exc_info:
            GroupService(db_session).join(group.id, as_context(member))

        assert exc_info.value.detail == "Group is at capacity"
        assert membership_rows(db_session, group, member) == []

    def test_existing_member_of_full_group_is_not_rejected(
        self, db_session, member, make_user, make_listing, study, make_membership
    ):
        group = make_listing(Group, make_user("leader"), study, capacity=1)
        make_membership(member, group)

        result = GroupService(db_session).join(group.id, as_context(member))

        assert result.message == "You are already a member of this group."

    def test_missing_group(self, db_session, member):
        with pytest.raises(ListingNotFoundException) as exc_info:
            GroupService(db_session).join(999, as_context(member))
        assert exc_info.value.detail == "Group not found"

    def test_deleted_group_cannot_be_joined(self, db_session, member, make_listing, other_user, study):
        group = make_listing(Group, other_user, study, active=False)

        with pytest.raises(ListingNotFoundException):
            GroupService(db_session).join(group.id, as_context(member))

    def test_concurrent_join_reports_existing_membership(self, db_session, member, public_group, make_membership):
        make_membership(member, public_group, status=MembershipStatus.APPROVED)
        service = GroupService(db_session)
        real_get_for = service.membership_repo.get_for
        calls = {"n": 0}

        def stale_get_for(user_id, group_id):
            # First lookup misses the row, as if another request inserted it meanwhile
            calls["n"] += 1
            return None if calls["n"] == 1 else real_get_for(user_id, group_id)

        service.membership_repo.get_for = stale_get_for

        result = service.join(public_group.id, as_context(member))

        assert result.success is True
        assert result.message == "You are already a member of this group."
        assert len(membership_rows(db_session, public_group, member)) == 1


class TestLeaveService:
    def test_leave_removes_membership(self, db_session, member, public_group, make_membership):
        make_membership(member, public_group)

        result = GroupService(db_session).leave(public_group.id, as_context(member))

        assert result.message == "You have left the group."
        assert membership_rows(db_session, public_group, member) == []

    def test_leave_without_membership(self, db_session, member, public_group):
        with pytest.raises(MembershipNotFoundException):
            GroupService(db_session).leave(public_group.id, as_context(member))


class TestGroupRoutes:
    def test_board_is_public(self, client, public_group):
        response = client.get(GROUPS_URL)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["kind"] == "group"
        assert data["items"][0]["name"] == "Tuesday Study"
        assert data["items"][0]["member_count"] == 1
        assert data["active_filter"] == "all"
        assert data["filters"] == [{"id": public_group.category_id, "name": "Bible Study"}]

    def test_board_marks_viewer_membership(self, client, member, public_group):
        client.post(GROUPS_URL, data={"_action": "join", "groupId": public_group.id}, headers=auth_header(member))

        data = client.get(GROUPS_URL, headers=auth_header(member)).json()

        assert data["items"][0]["is_member"] is True
        assert data["items"][0]["member_count"] == 2

    def test_junk_query_params_are_normalized(self, client, public_group):
        response = client.get(GROUPS_URL, params={"page": "abc", "sort": "sideways", "filter": "Unknown"})

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["sort"] == "desc"
        assert data["active_filter"] == "all"

    def test_join_via_form(self, client, member, public_group):
        response = client.post(
            GROUPS_URL,
            data={"_action": "join", "groupId": public_group.id},
            headers=auth_header(member),
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "You have joined the group.",
            "status": "APPROVED",
        }

    def test_full_group_returns_400(self, client, member, make_user, make_listing, study, make_membership):
        group = make_listing(Group, make_user("leader"), study, capacity=1)
        make_membership(make_user("first"), group)

        response = client.post(GROUPS_URL, data={"_action": "join", "groupId": group.id}, headers=auth_header(member))

        assert response.status_code == 400
        assert response.json() == {"error": "Group is at capacity"}

    def test_missing_group_returns_404(self, client, member):
        response = client.post(GROUPS_URL, data={"_action": "join", "groupId": 424242}, headers=auth_header(member))

        assert response.status_code == 404
        assert response.json() == {"error": "Group not found"}

    def test_unknown_action_returns_400(self, client, member, public_group):
        response = client.post(
            GROUPS_URL,
            data={"_action": "explode", "groupId": public_group.id},
            headers=auth_header(member),
        )

        assert response.status_code == 400
        assert "error" in response.json()

    def test_actions_require_authentication(self, client, public_group):
        response = client.post(GROUPS_URL, data={"_action": "join", "groupId": public_group.id})

        assert response.status_code == 401

    def test_unknown_token_is_anonymous(self, client, public_group):
        response = client.post(
            GROUPS_URL,
            data={"_action": "join", "groupId": public_group.id},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    def test_leave_via_form(self, client, member, public_group, make_membership):
        make_membership(member, public_group)

        response = client.post(GROUPS_URL, data={"_action": "leave", "groupId": public_group.id}, headers=auth_header(member))

        assert response.status_code == 200
        assert response.json()["success"] is True
