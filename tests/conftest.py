"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finclamp.main import app
from finclamp.db.database import get_db
# Import all models to ensure all tables are created
from finclamp.db.models import Base, ComparisonRecord
from finclamp.calculators import get_calculator
from finclamp.state import AddressBar, InputStateStore


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def address_bar():
    """Fresh address bar with a single history entry."""
    return AddressBar("http://localhost/?in=emi")


@pytest.fixture
def emi_store(address_bar):
    """EMI calculator mounted on the shared address bar."""
    return InputStateStore(get_calculator("emi"), address_bar)


@pytest.fixture
def rd_store(address_bar):
    """RD calculator mounted on the same address bar as emi_store."""
    return InputStateStore(get_calculator("rd"), address_bar)
