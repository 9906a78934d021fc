"""
SQLAlchemy ORM models.
"""

from datetime import datetime
import uuid

from sqlalchemy import Boolean, Column, DateTime, JSON, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class ComparisonRecord(Base):
    """A calculation pinned to the comparison tray."""

    __tablename__ = "comparisons"

    id = Column(String, primary_key=True, default=generate_uuid)
    calculator_id = Column(String(100), nullable=False, index=True)
    title = Column(String(255), nullable=True)

    # Snapshot of the store at the time it was pinned
    inputs = Column(JSON, nullable=False, default=dict)
    result = Column(JSON, nullable=False, default=dict)
    share_url = Column(String(2048), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
