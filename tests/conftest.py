# Point the app at the test database before any shareit module reads settings
import os
os.environ["DATABASE_URL"] = "sqlite:///./test_shareit.db"

import datetime
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from shareit.main import app
from shareit.database import Base, engine, get_db
from shareit.booking_service import BookingService
from shareit import models

# Fixed "now" for service-level tests
NOW = datetime.datetime(2030, 1, 15, 12, 0, 0)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


# --- Database Management Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def setup_db():
    """Creates and drops the test database tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Provides a session whose writes are rolled back after each test."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    yield session
    session.close()
    transaction.rollback()
    connection.close()


# --- Factories for the records the booking core reads ---
@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name: str = "User") -> models.User:
        counter["n"] += 1
        user = models.User(name=name, email=f"{name.lower()}{counter['n']}@example.com")
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_item(db_session):
    def _make_item(owner: models.User, available: bool = True, name: str = "Drill") -> models.Item:
        item = models.Item(
            name=name,
            description=f"{name} for rent",
            owner=owner,
            status=models.ItemStatus.AVAILABLE if available else models.ItemStatus.UNAVAILABLE
        )
        db_session.add(item)
        db_session.commit()
        return item

    return _make_item


@pytest.fixture
def make_booking(db_session):
    """Stores a booking directly, skipping the creation checks (e.g. for past windows)."""
    def _make_booking(
            item: models.Item,
            booker: models.User,
            start: datetime.datetime,
            end: datetime.datetime,
            status: models.BookingStatus = models.BookingStatus.WAITING
    ) -> models.Booking:
        booking = models.Booking(item=item, booker=booker, start_date=start, end_date=end, status=status)
        db_session.add(booking)
        db_session.commit()
        return booking

    return _make_booking


@pytest.fixture
def service(db_session):
    return BookingService(db_session, clock=lambda: NOW)


# --- API Test Client Fixture ---
@pytest.fixture(scope="function")
def client(db_session):
    """Provides a TestClient that shares the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
