"""
Database engine and session for the comparison tray.
"""

from finclamp.db.database import engine, SessionLocal, get_db
from finclamp.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
