from typing import Generator

from sqlalchemy.orm import Session
from fellowship.config.database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; board actions commit through SqlAlchemyUoW."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
