"""
Automatic initialization.
Seeds the default board categories on a fresh database.
"""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from .config.database import engine
from .config.settings import get_settings
from .domains.boards.models import Category, ListingKind
from .domains.boards.repository import CategoryRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: Dict[ListingKind, List[str]] = {
    ListingKind.GROUP: ["Bible Study", "Men", "Women", "Youth", "Couples", "Outreach"],
    ListingKind.SHARE: ["Books", "Clothing", "Furniture", "Kitchen", "Tools", "Toys"],
    ListingKind.NEED: ["Meals", "Rides", "Childcare", "Moving", "Repairs", "Other"],
    ListingKind.PRAYER: ["Health", "Family", "Work", "Guidance", "Thanksgiving", "Other"],
}


def init_categories(session: Session) -> List[Category]:
    """Create the default categories of every board that has none yet."""
    repo = CategoryRepository(session)
    created: List[Category] = []

    for kind, names in DEFAULT_CATEGORIES.items():
        existing = repo.list_for_kind(kind)
        if existing:
            logger.info("Categories for %s already exist (%d found). Skipping.", kind.value, len(existing))
            continue
        for name in names:
            created.append(repo.add(Category(name=name, type=kind.value)))
        logger.info("Created %d %s categories", len(names), kind.value)

    session.commit()
    return created


def run_auto_init(bind=None) -> None:
    """Run every automatic initialization task."""
    settings = get_settings()
    if not settings.seed_categories:
        logger.info("Category seeding disabled")
        return

    logger.info("Starting auto initialization...")
    with Session(bind or engine) as session:
        created = init_categories(session)
    logger.info("Auto initialization completed (%d categories created)", len(created))
