import pytest

from conftest import as_context, auth_header
from fellowship.domains.boards.exceptions import ListingNotFoundException, PermissionDeniedException
from fellowship.domains.boards.models import (
    Group, ShareItem, Prayer, ListingKind, ModerationLog, ShareStatus,
)
from fellowship.domains.boards.policy import Action, check_policy
from fellowship.domains.boards.repository import ModerationLogRepository
from fellowship.domains.boards.services import GroupService, PrayerService, ShareService


@pytest.fixture
def group(make_category, make_listing, member):
    study = make_category(ListingKind.GROUP, "Bible Study")
    return make_listing(Group, member, study)


@pytest.fixture
def share_item(make_category, make_listing, member):
    books = make_category(ListingKind.SHARE, "Books")
    return make_listing(ShareItem, member, books)


def logs_for(db_session, kind, item_id):
    db_session.expire_all()
    return ModerationLogRepository(db_session).list_for_item(kind, item_id)


class TestDeleteService:
    def test_moderator_delete_is_logged_and_soft(self, db_session, moderator, group):
        result = GroupService(db_session).delete(
            group.id, as_context(moderator), moderator_action=True, reason="Spam"
        )

        assert result.success is True
        logs = logs_for(db_session, ListingKind.GROUP, group.id)
        assert [(log.action, log.reason, log.moderator_id, log.item_type) for log in logs] == [
            ("DELETE", "Spam", moderator.id, "GROUP")
        ]
        db_session.refresh(group)
        assert group.active is False

    def test_moderator_delete_default_reason(self, db_session, moderator, group):
        GroupService(db_session).delete(group.id, as_context(moderator), moderator_action=True, reason="  ")

        logs = logs_for(db_session, ListingKind.GROUP, group.id)
        assert logs[0].reason == "Moderation action"

    def test_moderator_action_requires_role(self, db_session, member, group):
        with pytest.raises(PermissionDeniedException):
            GroupService(db_session).delete(group.id, as_context(member), moderator_action=True)

        assert logs_for(db_session, ListingKind.GROUP, group.id) == []
        db_session.refresh(group)
        assert group.active is True

    def test_owner_delete_is_not_logged(self, db_session, member, group):
        GroupService(db_session).delete(group.id, as_context(member))

        assert logs_for(db_session, ListingKind.GROUP, group.id) == []
        db_session.refresh(group)
        assert group.active is False

    def test_stranger_cannot_delete(self, db_session, other_user, group):
        with pytest.raises(PermissionDeniedException):
            GroupService(db_session).delete(group.id, as_context(other_user))

    def test_deleted_listing_is_gone(self, db_session, member, group):
        service = GroupService(db_session)
        service.delete(group.id, as_context(member))

        with pytest.raises(ListingNotFoundException):
            service.delete(group.id, as_context(member))

    def test_admin_counts_as_moderator(self, db_session, admin_user, make_category, make_listing, member):
        prayer = make_listing(Prayer, member, make_category(ListingKind.PRAYER, "Health"))

        PrayerService(db_session).delete(prayer.id, as_context(admin_user), moderator_action=True)

        assert len(logs_for(db_session, ListingKind.PRAYER, prayer.id)) == 1


class TestShareModeration:
    def test_pending_flags_item(self, db_session, moderator, share_item):
        result = ShareService(db_session).mark_pending(share_item.id, as_context(moderator), reason="Check photos")

        assert result.status == "PENDING"
        db_session.refresh(share_item)
        assert share_item.status == ShareStatus.PENDING.value
        assert [log.action for log in logs_for(db_session, ListingKind.SHARE, share_item.id)] == ["FLAG"]

    def test_removed_removes_item(self, db_session, moderator, share_item):
        ShareService(db_session).mark_removed(share_item.id, as_context(moderator))

        db_session.refresh(share_item)
        assert share_item.status == ShareStatus.REMOVED.value
        assert [log.action for log in logs_for(db_session, ListingKind.SHARE, share_item.id)] == ["REMOVE"]

    def test_owner_cannot_moderate(self, db_session, member, share_item):
        with pytest.raises(PermissionDeniedException):
            ShareService(db_session).mark_removed(share_item.id, as_context(member))


class TestPolicy:
    def test_delete_policy(self, member, other_user, moderator, group):
        assert check_policy(Action.DELETE, group, as_context(member))
        assert check_policy(Action.DELETE, group, as_context(moderator))
        assert not check_policy(Action.DELETE, group, as_context(other_user))
        assert not check_policy(Action.DELETE, group, None)

    def test_moderate_policy(self, member, moderator, group):
        assert check_policy(Action.MODERATE, group, as_context(moderator))
        denied = check_policy(Action.MODERATE, group, as_context(member))
        assert not denied
        assert denied.reason == "Only moderators can perform moderation actions"

    def test_claim_own_item_is_denied(self, member, other_user, share_item):
        assert not check_policy(Action.CLAIM, share_item, as_context(member))
        assert check_policy(Action.CLAIM, share_item, as_context(other_user))


class TestModerationRoutes:
    def test_moderator_delete_via_form(self, client, db_session, moderator, group):
        response = client.post(
            "/api/v1/boards/groups",
            data={"_action": "delete", "groupId": group.id, "moderatorAction": "1", "reason": "Off topic"},
            headers=auth_header(moderator),
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        db_session.expire_all()
        log = db_session.query(ModerationLog).one()
        assert (log.item_id, log.reason) == (group.id, "Off topic")

        board = client.get("/api/v1/boards/groups").json()
        assert board["total"] == 0

    def test_moderator_flag_from_member_is_forbidden(self, client, other_user, group):
        response = client.post(
            "/api/v1/boards/groups",
            data={"_action": "delete", "groupId": group.id, "moderatorAction": "1"},
            headers=auth_header(other_user),
        )

        assert response.status_code == 403
        assert "error" in response.json()

    def test_share_removed_via_form(self, client, moderator, share_item):
        response = client.post(
            "/api/v1/boards/share",
            data={"_action": "removed", "itemId": share_item.id},
            headers=auth_header(moderator),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "REMOVED"
