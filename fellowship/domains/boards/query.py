"""
Board query service.

Builds one board page: resolves the category filter, counts and fetches
the page rows with a stable ordering, lists the variant's filter
categories and normalizes the rows into display cards.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from fellowship.domains.boards.models import Category
from fellowship.domains.boards.repository import CategoryRepository, ListingRepository
from fellowship.domains.boards.schemas import ALL_FILTER, BoardContext, BoardPage, CategoryFilter
from fellowship.domains.boards.sources import BoardSource
from fellowship.domains.shared.interfaces import UserPermissions

logger = logging.getLogger(__name__)


class BoardQueryService:
    """Paginated, filtered and sorted reads shared by every board."""

    def __init__(self, session: Session):
        self.session = session
        self.category_repo = CategoryRepository(session)

    def _resolve_filter(self, context: BoardContext, source: BoardSource) -> Optional[Category]:
        requested = context.query.filter
        if not requested:
            return None
        category = self.category_repo.find_for_kind(source.kind, requested)
        if category is None:
            logger.debug("Unknown %s board filter %r, showing all", source.kind.value, requested)
        return category

    def query(self, context: BoardContext, source: BoardSource) -> BoardPage:
        """
        Run the board query for one source.

        Args:
            context: Parsed request parameters and the resolved viewer
            source: The board variant strategy

        Returns:
            BoardPage with the page items, totals and filter facets
        """
        query = context.query
        page_size = query.page_size

        active_category = self._resolve_filter(context, source)

        criteria = source.base_criteria(context) + source.category_criteria()
        if active_category is not None:
            criteria.append(Category.id == active_category.id)

        listings = ListingRepository(self.session, source.model)
        total = listings.count(criteria)
        rows = []
        # offsets at or past total select nothing
        if query.offset < total:
            rows = listings.fetch_page(
                criteria,
                sort=query.sort,
                offset=query.offset,
                limit=page_size,
                options=source.load_options()
            )
        filters = [CategoryFilter.model_validate(c) for c in self.category_repo.list_for_kind(source.kind)]

        cards = source.transform(rows, context.viewer)
        cards = source.annotate(self.session, cards, context.viewer)

        return BoardPage(
            items=cards,
            total=total,
            page=query.page,
            page_size=page_size,
            has_next_page=query.page * page_size < total,
            filters=filters,
            active_filter=active_category.name if active_category is not None else ALL_FILTER,
            sort=query.sort,
            can_moderate=UserPermissions(context.viewer).can_moderate(),
        )
