from .uow import SqlAlchemyUoW
from .repository import BaseRepository, SqlAlchemyRepository

__all__ = [
    # Unit of Work
    "SqlAlchemyUoW",
    # Repository
    "BaseRepository",
    "SqlAlchemyRepository",
]
