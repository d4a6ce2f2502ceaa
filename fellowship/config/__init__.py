"""
Configuration management module.
"""
from .settings import Settings, get_settings, reload_settings
from .database import engine, SessionLocal, Base, build_engine
from .db import get_db

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Database
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "get_db",
]
