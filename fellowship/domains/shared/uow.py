from sqlalchemy.orm import Session


class SqlAlchemyUoW:
    """
    Transaction scope for one board action on a request-scoped session.

    Commits when the block exits cleanly and rolls back when it raises.
    The session stays open afterwards; the request dependency owns it.
    """

    def __init__(self, session: Session):
        self.session = session

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def flush(self):
        """Flush pending changes, e.g. to surface constraint violations early."""
        self.session.flush()
