"""Boards domain API routes - thin routing layer."""

from typing import Any, Dict, Optional

from fastapi import Depends, Form, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fellowship.config.dependencies import get_db, get_required_user, get_optional_user
from fellowship.config.settings import get_settings
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.boards.schemas import (
    BoardContext,
    BoardPage,
    BoardQuery,
    SharePage,
)
from fellowship.domains.boards.services import GroupService, ShareService, NeedService, PrayerService
from fellowship.domains.boards.exceptions import BoardException, UnknownActionException


def get_group_service(db: Session = Depends(get_db)) -> GroupService:
    """Dependency to get group board service."""
    return GroupService(db)


def get_share_service(db: Session = Depends(get_db)) -> ShareService:
    return ShareService(db)


def get_need_service(db: Session = Depends(get_db)) -> NeedService:
    return NeedService(db)


def get_prayer_service(db: Session = Depends(get_db)) -> PrayerService:
    return PrayerService(db)


def build_board_context(params: Dict[str, Optional[str]], viewer: Optional[UserContext]) -> BoardContext:
    """Normalize raw query parameters into the context passed to the board services."""
    present = {key: value for key, value in params.items() if value is not None}
    query = BoardQuery.from_params(present, page_size=get_settings().effective_page_size)
    return BoardContext(query=query, viewer=viewer)


def error_response(exc: BoardException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


def is_flag_set(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _unknown_action(action: Optional[str]) -> UnknownActionException:
    return UnknownActionException(f"Unknown action: {action}" if action else "Missing action")


# --- Boards (GET) ---
async def list_groups_board(
    filter: Optional[str] = Query(None, description="Category name to filter by, or 'all'"),
    sort: Optional[str] = Query(None, description="'asc' or 'desc' by creation time"),
    page: Optional[str] = Query(None, description="1-based page number"),
    current_user: Optional[UserContext] = Depends(get_optional_user),
    service: GroupService = Depends(get_group_service)
) -> BoardPage:
    """Get the community groups board."""
    context = build_board_context({"filter": filter, "sort": sort, "page": page}, current_user)
    return service.list_board(context)


async def list_share_board(
    type: Optional[str] = Query(None, description="'give' for items given away, otherwise items to borrow"),
    filter: Optional[str] = Query(None, description="Category name to filter by, or 'all'"),
    sort: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: UserContext = Depends(get_required_user),
    service: ShareService = Depends(get_share_service)
) -> SharePage:
    """Get the share board of unclaimed items."""
    context = build_board_context({"type": type, "filter": filter, "sort": sort, "page": page}, current_user)
    return service.list_board(context)


async def list_needs_board(
    filter: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: UserContext = Depends(get_required_user),
    service: NeedService = Depends(get_need_service)
) -> BoardPage:
    context = build_board_context({"filter": filter, "sort": sort, "page": page}, current_user)
    return service.list_board(context)


async def list_prayers_board(
    filter: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: UserContext = Depends(get_required_user),
    service: PrayerService = Depends(get_prayer_service)
) -> BoardPage:
    context = build_board_context({"filter": filter, "sort": sort, "page": page}, current_user)
    return service.list_board(context)


async def list_user_needs(
    username: str,
    filter: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: UserContext = Depends(get_required_user),
    service: NeedService = Depends(get_need_service)
) -> Any:
    """Get the needs posted by one user."""
    context = build_board_context({"filter": filter, "sort": sort, "page": page}, current_user)
    try:
        return service.list_for_user(username, context)
    except BoardException as e:
        return error_response(e)


async def list_user_prayers(
    username: str,
    filter: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: UserContext = Depends(get_required_user),
    service: PrayerService = Depends(get_prayer_service)
) -> Any:
    """Get the prayers posted by one user."""
    context = build_board_context({"filter": filter, "sort": sort, "page": page}, current_user)
    try:
        return service.list_for_user(username, context)
    except BoardException as e:
        return error_response(e)


# --- Board actions (POST) ---
async def group_board_action(
    action: Optional[str] = Form(None, alias="_action"),
    group_id: int = Form(..., alias="groupId"),
    moderator_action: Optional[str] = Form(None, alias="moderatorAction"),
    reason: Optional[str] = Form(None),
    current_user: UserContext = Depends(get_required_user),
    service: GroupService = Depends(get_group_service)
) -> Any:
    """Join, leave or delete a group."""
    try:
        if action == "join":
            return service.join(group_id, current_user)
        if action == "leave":
            return service.leave(group_id, current_user)
        if action == "delete":
            return service.delete(group_id, current_user, is_flag_set(moderator_action), reason)
        raise _unknown_action(action)
    except BoardException as e:
        return error_response(e)


async def share_board_action(
    action: Optional[str] = Form(None, alias="_action"),
    item_id: int = Form(..., alias="itemId"),
    moderator_action: Optional[str] = Form(None, alias="moderatorAction"),
    reason: Optional[str] = Form(None),
    current_user: UserContext = Depends(get_required_user),
    service: ShareService = Depends(get_share_service)
) -> Any:
    """Claim, unclaim, delete or moderate a share item."""
    try:
        if action == "claim":
            return service.claim(item_id, current_user)
        if action == "unclaim":
            return service.unclaim(item_id, current_user)
        if action == "delete":
            return service.delete(item_id, current_user, is_flag_set(moderator_action), reason)
        if action == "pending":
            return service.mark_pending(item_id, current_user, reason)
        if action == "removed":
            return service.mark_removed(item_id, current_user, reason)
        raise _unknown_action(action)
    except BoardException as e:
        return error_response(e)


async def needs_board_action(
    action: Optional[str] = Form(None, alias="_action"),
    need_id: int = Form(..., alias="needId"),
    moderator_action: Optional[str] = Form(None, alias="moderatorAction"),
    reason: Optional[str] = Form(None),
    response: Optional[str] = Form(None),
    current_user: UserContext = Depends(get_required_user),
    service: NeedService = Depends(get_need_service)
) -> Any:
    try:
        if action == "fulfill":
            return service.fulfill(need_id, current_user, response)
        if action == "delete":
            return service.delete(need_id, current_user, is_flag_set(moderator_action), reason)
        raise _unknown_action(action)
    except BoardException as e:
        return error_response(e)


async def prayers_board_action(
    action: Optional[str] = Form(None, alias="_action"),
    prayer_id: int = Form(..., alias="prayerId"),
    moderator_action: Optional[str] = Form(None, alias="moderatorAction"),
    reason: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    current_user: UserContext = Depends(get_required_user),
    service: PrayerService = Depends(get_prayer_service)
) -> Any:
    """Mark a prayer answered, pray for it or delete it."""
    try:
        if action == "markAnswered":
            return service.mark_answered(prayer_id, current_user, message)
        if action == "pray":
            return service.pray(prayer_id, current_user)
        if action == "delete":
            return service.delete(prayer_id, current_user, is_flag_set(moderator_action), reason)
        raise _unknown_action(action)
    except BoardException as e:
        return error_response(e)
