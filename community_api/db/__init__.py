"""
Database module

SQLAlchemy ORM models, engine lifecycle and DAOs
"""

from .base import Base, get_db, init_db, close_db, create_tables

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "create_tables",
]
