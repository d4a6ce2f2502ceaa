"""
FastAPI application entry point.

Sets up the FastAPI application with logging, middleware, routers and the
startup tasks that prepare an empty database.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables first
load_dotenv()

# Import configuration
from .config import get_settings
from .logging_config import configure_logging

# Import consolidated API router
from .routes import router as api_router

# Get settings instance
settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def run_migrations_if_empty() -> None:
    """Apply Alembic migrations when the database has no tables yet."""
    from sqlalchemy import inspect
    from alembic.config import Config
    from alembic import command
    from .config.database import engine

    tables = inspect(engine).get_table_names()
    if tables:
        logger.debug("Database has %d tables; skipping migrations", len(tables))
        return

    logger.info("Database empty. Running Alembic upgrade head...")
    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    with engine.begin() as connection:
        cfg.attributes["connection"] = connection
        command.upgrade(cfg, "head")
    logger.info("Alembic migration completed.")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Community boards for groups, shared items, needs and prayer requests",
    version=settings.app_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Ensure database is initialized (run Alembic migrations) on startup
@app.on_event("startup")
def _ensure_database_initialized():
    if not settings.run_migrations_on_startup:
        return
    try:
        run_migrations_if_empty()
    except Exception:
        # Keep serving; the error is visible in the logs
        logger.exception("Database initialization failed")


# Run auto-initialization tasks (e.g., seed categories) after DB is ready
@app.on_event("startup")
def _run_auto_init_after_db_ready():
    try:
        from . import auto_init
        auto_init.run_auto_init()
    except Exception:
        logger.exception("Auto initialization error")


# Include routers
app.include_router(api_router)  # All API routes from consolidated router


# Root endpoint
@app.get("/")
def read_root():
    """Health check endpoint."""
    return {
        "message": "Fellowship boards backend is running!",
        "version": settings.app_version,
        "environment": settings.environment
    }
