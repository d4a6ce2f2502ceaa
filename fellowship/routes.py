"""Consolidated API router for all domain endpoints."""

from typing import List

from fastapi import APIRouter

# Import domain route modules
from fellowship.domains.boards import routes as boards
from fellowship.domains.user import routes as user
from fellowship.domains.admin import routes as admin

# Import schemas for response models
from fellowship.domains.boards.schemas import ActionResult, BoardPage, SharePage, ProfileBoardPage
from fellowship.domains.user.schemas import UserProfile, UserSummary
from fellowship.domains.admin.schemas import AdminStats

# Create main API router
router = APIRouter(prefix="/api/v1")

# Board endpoints
router.add_api_route(
    "/boards/groups",
    boards.list_groups_board,
    methods=["GET"],
    response_model=BoardPage,
    tags=["boards"]
)
router.add_api_route(
    "/boards/groups",
    boards.group_board_action,
    methods=["POST"],
    response_model=ActionResult,
    response_model_exclude_none=True,
    tags=["boards"]
)
router.add_api_route(
    "/boards/share",
    boards.list_share_board,
    methods=["GET"],
    response_model=SharePage,
    tags=["boards"]
)
router.add_api_route(
    "/boards/share",
    boards.share_board_action,
    methods=["POST"],
    response_model=ActionResult,
    response_model_exclude_none=True,
    tags=["boards"]
)
router.add_api_route(
    "/boards/needs",
    boards.list_needs_board,
    methods=["GET"],
    response_model=BoardPage,
    tags=["boards"]
)
router.add_api_route(
    "/boards/needs",
    boards.needs_board_action,
    methods=["POST"],
    response_model=ActionResult,
    response_model_exclude_none=True,
    tags=["boards"]
)
router.add_api_route(
    "/boards/prayers",
    boards.list_prayers_board,
    methods=["GET"],
    response_model=BoardPage,
    tags=["boards"]
)
router.add_api_route(
    "/boards/prayers",
    boards.prayers_board_action,
    methods=["POST"],
    response_model=ActionResult,
    response_model_exclude_none=True,
    tags=["boards"]
)

# User endpoints
router.add_api_route(
    "/users/me",
    user.get_current_user_profile,
    methods=["GET"],
    response_model=UserProfile,
    tags=["users"]
)
router.add_api_route(
    "/users/search",
    user.search_users,
    methods=["GET"],
    response_model=List[UserSummary],
    tags=["users"]
)
router.add_api_route(
    "/users/{username}/needs",
    boards.list_user_needs,
    methods=["GET"],
    response_model=ProfileBoardPage,
    tags=["users"]
)
router.add_api_route(
    "/users/{username}/prayers",
    boards.list_user_prayers,
    methods=["GET"],
    response_model=ProfileBoardPage,
    tags=["users"]
)

# Admin endpoints
router.add_api_route(
    "/admin/stats",
    admin.get_stats,
    methods=["GET"],
    response_model=AdminStats,
    tags=["admin"]
)
