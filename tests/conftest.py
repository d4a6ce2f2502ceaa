import os
from datetime import datetime, timedelta
from typing import Optional

# Settings are read once at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_CATEGORIES"] = "false"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["APP_ENV"] = "testing"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from fellowship.main import app
from fellowship.config.db import get_db
from fellowship.config.database import build_engine
from fellowship.domains.shared.db_base import Base
from fellowship.domains.shared.interfaces import UserContext
from fellowship.domains.user.models import User
from fellowship.domains.user.repository import SqlAlchemyUserRepository
from fellowship.domains.boards.models import (
    Category, Group, GroupMembership, ShareItem, Need, Prayer, ListingKind,
    MembershipRole, MembershipStatus,
)
from fellowship.domains.boards.schemas import BoardContext, BoardQuery

# One in-memory database shared by every connection of a test
engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    # Fresh tables for every test
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    """Fixture to provide a database session for each test."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def client() -> TestClient:
    """Fixture to provide a test client for the FastAPI application."""
    return TestClient(app)


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {user.api_token}"}


def board_context(viewer: Optional[User] = None, page_size: int = 20, **params) -> BoardContext:
    """Build the context a board route would pass to its service."""
    query = BoardQuery.from_params(params, page_size=page_size)
    user_context = UserContext.from_user_model(viewer) if viewer is not None else None
    return BoardContext(query=query, viewer=user_context)


def as_context(user: User) -> UserContext:
    return UserContext.from_user_model(user)


@pytest.fixture
def make_user(db_session: Session):
    """Factory creating users with an API token and optional roles."""
    def _make(username: str, roles=(), name: Optional[str] = None) -> User:
        user = User(
            username=username,
            name=name,
            email=f"{username}@example.com",
            api_token=f"token-{username}",
        )
        db_session.add(user)
        repo = SqlAlchemyUserRepository(db_session)
        for role_name in roles:
            repo.add_role(user, role_name)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def member(make_user) -> User:
    return make_user("member", name="Mary Member")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user("otto")


@pytest.fixture
def moderator(make_user) -> User:
    return make_user("mod", roles=["moderator"], name="Moderator Max")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user("admin", roles=["admin"])


@pytest.fixture
def make_category(db_session: Session):
    def _make(kind: ListingKind, name: str, active: bool = True) -> Category:
        category = Category(name=name, type=kind.value, active=active)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category
    return _make


@pytest.fixture
def make_listing(db_session: Session):
    """
    Factory creating a listing of any variant.

    Listings get increasing creation times in creation order unless an
    explicit created_at is passed.
    """
    counter = {"n": 0}

    def _make(model, owner: User, category: Category, **fields):
        counter["n"] += 1
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=counter["n"]))
        if model is Group:
            fields.setdefault("name", f"Group {counter['n']}")
        elif model is ShareItem:
            fields.setdefault("title", f"Item {counter['n']}")
        elif model in (Need, Prayer):
            fields.setdefault("description", f"Listing {counter['n']}")
        listing = model(user_id=owner.id, category_id=category.id, **fields)
        db_session.add(listing)
        db_session.commit()
        db_session.refresh(listing)
        return listing
    return _make


@pytest.fixture
def make_membership(db_session: Session):
    def _make(user: User, group: Group, role=MembershipRole.MEMBER, status=MembershipStatus.APPROVED):
        membership = GroupMembership(
            user_id=user.id,
            group_id=group.id,
            role=role.value,
            status=status.value,
        )
        db_session.add(membership)
        db_session.commit()
        db_session.refresh(membership)
        return membership
    return _make
