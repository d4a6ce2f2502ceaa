from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Any
from sqlalchemy.orm import Session
from sqlalchemy import and_, func, select


T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """Row access every board and user repository offers."""

    @abstractmethod
    def get(self, id: Any) -> Optional[T]:
        """Get a row by primary key."""
        pass

    @abstractmethod
    def add(self, entity: T) -> T:
        """Stage a new row and assign its id."""
        pass

    @abstractmethod
    def remove(self, entity: T) -> None:
        """Hard-delete a row."""
        pass


class SqlAlchemyRepository(BaseRepository[T]):
    """
    Session-bound repository for one mapped class.

    Writes only flush; committing is left to the caller's unit of work so
    that an action and its audit entry land in one transaction.
    """

    def __init__(self, session: Session, model_class: type):
        self.session = session
        self.model_class = model_class

    def get(self, id: Any) -> Optional[T]:
        return self.session.get(self.model_class, id)

    def add(self, entity: T) -> T:
        self.session.add(entity)
        self.session.flush()  # surfaces unique constraint violations here
        return entity

    def remove(self, entity: T) -> None:
        self.session.delete(entity)
        self.session.flush()

    def count_where(self, conditions: List[Any]) -> int:
        """Count rows matching all of the given SQL conditions."""
        stmt = select(func.count()).select_from(self.model_class)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return self.session.execute(stmt).scalar_one()
