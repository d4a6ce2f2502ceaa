from enum import Enum

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, Text,
    UniqueConstraint, Index, event, select, inspect
)
from sqlalchemy.orm import relationship, declared_attr
from sqlalchemy.sql import func
from fellowship.domains.shared.db_base import Base


class ListingKind(str, Enum):
    """Listing variant tag shared by categories, boards and moderation logs."""

    GROUP = "GROUP"
    SHARE = "SHARE"
    NEED = "NEED"
    PRAYER = "PRAYER"


class MembershipRole(str, Enum):
    LEADER = "LEADER"
    MEMBER = "MEMBER"


class MembershipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"


class ClaimStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


class ShareType(str, Enum):
    GIVE = "GIVE"
    BORROW = "BORROW"


class ShareStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REMOVED = "REMOVED"


class NeedStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class ModerationAction(str, Enum):
    DELETE = "DELETE"
    FLAG = "FLAG"
    REMOVE = "REMOVE"


# Board filter facets
class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", "type", name="uq_categories_name_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)  # one ListingKind value
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ListingMixin:
    """Columns every listing variant carries."""

    __listing_kind__: ListingKind

    id = Column(Integer, primary_key=True, index=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @declared_attr
    def user_id(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    @declared_attr
    def category_id(cls):
        return Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    @declared_attr
    def owner(cls):
        return relationship("User")

    @declared_attr
    def category(cls):
        return relationship("Category")


class Group(ListingMixin, Base):
    __tablename__ = "groups"
    __listing_kind__ = ListingKind.GROUP

    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    frequency = Column(String, nullable=True)  # e.g., "WEEKLY"
    meeting_time = Column(String, nullable=True)
    location = Column(String, nullable=True)
    is_online = Column(Boolean, default=False, nullable=False)
    is_private = Column(Boolean, default=False, nullable=False)
    capacity = Column(Integer, nullable=True)  # None means unlimited

    memberships = relationship("GroupMembership", back_populates="group", cascade="all, delete-orphan")


class GroupMembership(Base):
    __tablename__ = "group_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_memberships_user_group"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False, default=MembershipRole.MEMBER.value)
    status = Column(String, nullable=False, default=MembershipStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
    group = relationship("Group", back_populates="memberships")


class ShareItem(ListingMixin, Base):
    __tablename__ = "share_items"
    __listing_kind__ = ListingKind.SHARE

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String, nullable=True)
    share_type = Column(String, nullable=False, default=ShareType.BORROW.value, index=True)
    status = Column(String, nullable=False, default=ShareStatus.ACTIVE.value, index=True)
    claimed = Column(Boolean, default=False, nullable=False)
    duration = Column(String, nullable=True)  # borrow window, free text
    image_key = Column(String, nullable=True)  # main image object key

    claims = relationship("ShareClaim", back_populates="item", cascade="all, delete-orphan")


class ShareClaim(Base):
    __tablename__ = "share_claims"
    __table_args__ = (
        UniqueConstraint("user_id", "share_item_id", name="uq_share_claims_user_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    share_item_id = Column(Integer, ForeignKey("share_items.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False, default=ClaimStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
    item = relationship("ShareItem", back_populates="claims")


class Need(ListingMixin, Base):
    __tablename__ = "requests"
    __listing_kind__ = ListingKind.NEED

    type = Column(String, nullable=False, default=ListingKind.NEED.value)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default=NeedStatus.ACTIVE.value, index=True)
    fulfilled = Column(Boolean, default=False, nullable=False)
    response = Column(Text, nullable=True)


class Prayer(ListingMixin, Base):
    __tablename__ = "prayers"
    __listing_kind__ = ListingKind.PRAYER

    description = Column(Text, nullable=False)
    answered = Column(Boolean, default=False, nullable=False)
    answered_message = Column(Text, nullable=True)
    answered_at = Column(DateTime(timezone=True), nullable=True)
    prayer_count = Column(Integer, default=0, nullable=False)


class ModerationLog(Base):
    __tablename__ = "moderation_logs"
    __table_args__ = (
        Index("ix_moderation_logs_item", "item_type", "item_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    moderator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_id = Column(Integer, nullable=False)
    item_type = Column(String, nullable=False)  # ListingKind value
    action = Column(String, nullable=False)  # ModerationAction value
    reason = Column(Text, nullable=False, default="Moderation action")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    moderator = relationship("User")


LISTING_MODELS = (Group, ShareItem, Need, Prayer)


def _check_category_matches_kind(mapper, connection, target):
    """Reject a listing whose category belongs to another listing variant."""
    state = inspect(target)
    if state.persistent:
        changed = (
            state.attrs.category_id.history.has_changes()
            or state.attrs.category.history.has_changes()
        )
        if not changed:
            return

    category = target.__dict__.get("category")
    if category is not None and target.category_id in (None, category.id):
        category_type = category.type
    elif target.category_id is not None:
        category_type = connection.execute(
            select(Category.type).where(Category.id == target.category_id)
        ).scalar()
    else:
        return  # NOT NULL / FK constraints report this case

    if category_type is None:
        return
    expected = target.__listing_kind__.value
    if category_type != expected:
        raise ValueError(
            f"{type(target).__name__} needs a {expected} category, got a {category_type} category"
        )


for _model in LISTING_MODELS:
    event.listen(_model, "before_insert", _check_category_matches_kind)
    event.listen(_model, "before_update", _check_category_matches_kind)
