from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .settings import get_settings

# Get database URL from centralized settings
settings = get_settings()
SQLALCHEMY_DATABASE_URL = settings.database_url


def build_engine(database_url: str, **kwargs):
    """Create an engine with the options appropriate for the backend."""
    if database_url.startswith("sqlite"):
        # check_same_thread is a SQLite-only option
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        sqlite_engine = create_engine(
            database_url,
            connect_args=connect_args,
            echo=False,
            **kwargs
        )
        # SQLite leaves foreign keys off unless asked per connection
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    # PostgreSQL with connection pooling for production
    return create_engine(
        database_url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_pre_ping=settings.pool_pre_ping,
        pool_recycle=3600,  # Recycle connections after 1 hour
        echo=False,
        **kwargs
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Import Base from the shared domain models
from ..domains.shared.db_base import Base
