import pytest

from conftest import as_context, auth_header, board_context
from fellowship.domains.boards.exceptions import (
    BusinessRuleViolation, MembershipNotFoundException, PermissionDeniedException, UserNotFoundException,
)
from fellowship.domains.boards.models import ListingKind, Need, Prayer, ShareClaim, ShareItem, ShareType
from fellowship.domains.boards.services import NeedService, PrayerService, ShareService


@pytest.fixture
def books(make_category):
    return make_category(ListingKind.SHARE, "Books")


@pytest.fixture
def ladder(make_listing, other_user, make_category):
    tools = make_category(ListingKind.SHARE, "Tools")
    return make_listing(ShareItem, other_user, tools, title="Ladder", share_type=ShareType.BORROW.value)


@pytest.fixture
def need(make_listing, member, make_category):
    return make_listing(Need, member, make_category(ListingKind.NEED, "Meals"), description="Meals after surgery")


@pytest.fixture
def prayer(make_listing, member, make_category):
    return make_listing(Prayer, member, make_category(ListingKind.PRAYER, "Health"), description="Healing")


class TestShareClaims:
    def test_claim_creates_pending_request(self, db_session, member, ladder):
        result = ShareService(db_session).claim(ladder.id, as_context(member))

        assert result.status == "PENDING"
        db_session.expire_all()
        assert db_session.query(ShareClaim).filter_by(user_id=member.id, share_item_id=ladder.id).count() == 1

    def test_second_claim_reports_existing(self, db_session, member, ladder):
        service = ShareService(db_session)
        service.claim(ladder.id, as_context(member))
        result = service.claim(ladder.id, as_context(member))

        assert result.success is True
        assert result.status == "PENDING"
        db_session.expire_all()
        assert db_session.query(ShareClaim).count() == 1

    def test_owner_cannot_claim(self, db_session, other_user, ladder):
        with pytest.raises(BusinessRuleViolation) as exc_info:
            ShareService(db_session).claim(ladder.id, as_context(other_user))
        assert exc_info.value.detail == "You cannot claim your own item"

    def test_claimed_item_is_unavailable(self, db_session, member, other_user, make_listing, books):
        taken = make_listing(ShareItem, other_user, books, claimed=True)

        with pytest.raises(BusinessRuleViolation):
            ShareService(db_session).claim(taken.id, as_context(member))

    def test_unclaim(self, db_session, member, ladder):
        service = ShareService(db_session)
        service.claim(ladder.id, as_context(member))
        service.unclaim(ladder.id, as_context(member))

        with pytest.raises(MembershipNotFoundException):
            service.unclaim(ladder.id, as_context(member))

    def test_board_shows_claim_status_and_share_type(self, db_session, member, ladder):
        service = ShareService(db_session)
        service.claim(ladder.id, as_context(member))

        page = service.list_board(board_context(member, type="borrow"))

        assert page.share_type == "borrow"
        assert page.items[0].claim_status == "PENDING"
        assert page.items[0].title == "Ladder"

    def test_share_board_requires_user(self, client, ladder):
        assert client.get("/api/v1/boards/share").status_code == 401

    def test_share_board_route(self, client, member, ladder, make_listing, other_user, books):
        make_listing(ShareItem, other_user, books, title="Bread maker", share_type=ShareType.GIVE.value)

        response = client.get("/api/v1/boards/share", params={"type": "give"}, headers=auth_header(member))

        assert response.status_code == 200
        data = response.json()
        assert data["share_type"] == "give"
        assert [item["title"] for item in data["items"]] == ["Bread maker"]
        assert [f["name"] for f in data["filters"]] == ["Books", "Tools"]

    def test_claim_own_item_via_form(self, client, other_user, ladder):
        response = client.post(
            "/api/v1/boards/share",
            data={"_action": "claim", "itemId": ladder.id},
            headers=auth_header(other_user),
        )

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot claim your own item"}


class TestNeeds:
    def test_owner_fulfills_need(self, db_session, member, need):
        result = NeedService(db_session).fulfill(need.id, as_context(member), response="Covered by the Smiths")

        assert result.success is True
        db_session.refresh(need)
        assert need.fulfilled is True
        assert need.response == "Covered by the Smiths"

    def test_stranger_cannot_fulfill(self, db_session, other_user, need):
        with pytest.raises(PermissionDeniedException):
            NeedService(db_session).fulfill(need.id, as_context(other_user))

    def test_profile_board(self, db_session, member, other_user, need, make_listing):
        make_listing(Need, other_user, need.category, description="Ride to church")

        page = NeedService(db_session).list_for_user("member", board_context(other_user))

        assert page.profile.username == "member"
        assert page.profile.display_name == "Mary Member"
        assert [item.id for item in page.items] == [need.id]

    def test_profile_of_unknown_user(self, db_session, member):
        with pytest.raises(UserNotFoundException):
            NeedService(db_session).list_for_user("ghost", board_context(member))

    def test_profile_route_unknown_user(self, client, member):
        response = client.get("/api/v1/users/ghost/needs", headers=auth_header(member))

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_profile_route(self, client, other_user, need):
        response = client.get("/api/v1/users/member/needs", headers=auth_header(other_user))

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["username"] == "member"
        assert data["items"][0]["description"] == "Meals after surgery"

    def test_fulfill_via_form(self, client, member, need):
        response = client.post(
            "/api/v1/boards/needs",
            data={"_action": "fulfill", "needId": need.id, "response": "Done"},
            headers=auth_header(member),
        )

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestPrayers:
    def test_mark_answered(self, db_session, member, prayer):
        result = PrayerService(db_session).mark_answered(prayer.id, as_context(member), message="Fully recovered")

        assert result.message == "Prayer marked as answered"
        db_session.refresh(prayer)
        assert prayer.answered is True
        assert prayer.answered_message == "Fully recovered"
        assert prayer.answered_at is not None

    def test_mark_answered_twice_keeps_first_answer(self, db_session, member, prayer):
        service = PrayerService(db_session)
        service.mark_answered(prayer.id, as_context(member), message="First")
        result = service.mark_answered(prayer.id, as_context(member), message="Second")

        assert result.success is True
        db_session.refresh(prayer)
        assert prayer.answered_message == "First"

    def test_only_owner_marks_answered(self, db_session, other_user, prayer):
        with pytest.raises(PermissionDeniedException):
            PrayerService(db_session).mark_answered(prayer.id, as_context(other_user))

    def test_pray_increments_count(self, db_session, other_user, moderator, prayer):
        service = PrayerService(db_session)
        service.pray(prayer.id, as_context(other_user))
        service.pray(prayer.id, as_context(moderator))

        db_session.refresh(prayer)
        assert prayer.prayer_count == 2

    def test_mark_answered_via_form(self, client, member, prayer):
        response = client.post(
            "/api/v1/boards/prayers",
            data={"_action": "markAnswered", "prayerId": prayer.id, "message": "Thank you all"},
            headers=auth_header(member),
        )

        assert response.status_code == 200
        board = client.get("/api/v1/boards/prayers", headers=auth_header(member)).json()
        assert board["items"][0]["answered"] is True
        assert board["items"][0]["answered_message"] == "Thank you all"

    def test_mark_answered_by_stranger_via_form(self, client, other_user, prayer):
        response = client.post(
            "/api/v1/boards/prayers",
            data={"_action": "markAnswered", "prayerId": prayer.id},
            headers=auth_header(other_user),
        )

        assert response.status_code == 403

    def test_user_prayers_route(self, client, other_user, prayer):
        response = client.get("/api/v1/users/member/prayers", headers=auth_header(other_user))

        assert response.status_code == 200
        assert response.json()["total"] == 1
