"""
Shared fixtures: an in-memory SQLite database per test, model factories and
an API client wired to the same session.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["NOTIFICATION_EMAILS_ENABLED"] = "false"

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import (
    Base,
    Booking,
    BookingStatus,
    Property,
    PropertyStatus,
    RentalRequest,
    RentalRequestStatus,
    RentingType,
    User,
    UserRole,
)
from models.rental_request import add_months
from services.context import CurrentUser

TODAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_user(db, role=UserRole.USER, email=None, first_name="Test", last_name="User"):
    user = User(
        email=email or f"{role.value.lower()}-{db.query(User).count() + 1}@example.com",
        password="not-a-real-hash",
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.add(user)
    db.flush()
    return user


def make_property(
    db,
    owner,
    price=Decimal("600.00"),
    bedrooms=2,
    status=PropertyStatus.AVAILABLE,
    renting_type=RentingType.MONTHLY,
    name="Riverside flat",
):
    prop = Property(
        owner_id=owner.id,
        name=name,
        price=price,
        bedrooms=bedrooms,
        status=status,
        renting_type=renting_type,
    )
    db.add(prop)
    db.flush()
    return prop


def make_booking(
    db,
    prop,
    user,
    start_date,
    end_date,
    status=BookingStatus.UPCOMING,
    total_price=Decimal("1000.00"),
):
    booking = Booking(
        property_id=prop.id,
        user_id=user.id,
        start_date=start_date,
        end_date=end_date,
        number_of_guests=1,
        total_price=total_price,
        payment_status="Pending",
        status=status,
    )
    db.add(booking)
    db.flush()
    return booking


def make_rental_request(
    db,
    prop,
    user,
    start_date,
    months=7,
    status=RentalRequestStatus.PENDING,
    total_price=Decimal("4200.00"),
):
    rental_request = RentalRequest(
        property_id=prop.id,
        user_id=user.id,
        number_of_guests=2,
        proposed_monthly_rent=(total_price / months).quantize(Decimal("0.01")),
        total_price=total_price,
        message="",
        status=status,
    )
    rental_request.set_lease_period(start_date, months)
    db.add(rental_request)
    db.flush()
    return rental_request


def as_current(user):
    return CurrentUser(id=user.id, role=user.role)


# ---------------------------------------------------------------------------
# Common actors
# ---------------------------------------------------------------------------

@pytest.fixture
def landlord(db):
    return make_user(db, UserRole.LANDLORD, email="landlord@example.com", first_name="Lana", last_name="Lord")


@pytest.fixture
def tenant_user(db):
    return make_user(db, UserRole.USER, email="tenant@example.com", first_name="Tom", last_name="Tenant")


@pytest.fixture
def other_user(db):
    return make_user(db, UserRole.USER, email="other@example.com", first_name="Olga", last_name="Other")


@pytest.fixture
def admin(db):
    return make_user(db, UserRole.ADMIN, email="admin@example.com", first_name="Ada", last_name="Admin")


@pytest.fixture
def prop(db, landlord):
    return make_property(db, landlord)


@pytest.fixture
def daily_prop(db, landlord):
    return make_property(
        db, landlord, price=Decimal("100.00"), renting_type=RentingType.DAILY, name="Beach cabin"
    )


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from database import get_session
    from main import app

    def override_get_session():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user):
    from security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def days_from_today(days):
    return date.today() + timedelta(days=days)


