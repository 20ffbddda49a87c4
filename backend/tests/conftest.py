"""
Pytest configuration and shared fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from hotel_suite.database import Base, get_db
from hotel_suite.models import ontology  # noqa: F401
from hotel_suite.models.ontology import (
    Hotel, Department, Employee, EmployeeRole, WorkingStatus,
    RoomClass, Room, Guest, Booking, BookingStatus, InventoryItem
)
from hotel_suite.security.auth import get_password_hash, create_access_token
from hotel_suite.main import app

PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def token_for(employee: Employee) -> str:
    return create_access_token(employee.id, employee.role, employee.hotel_id)


def headers_for(employee: Employee) -> dict:
    return {"Authorization": f"Bearer {token_for(employee)}"}


def _add(db_session, obj):
    db_session.add(obj)
    db_session.commit()
    db_session.refresh(obj)
    return obj


# ============== Hotels and departments ==============

@pytest.fixture
def hotel(db_session):
    return _add(db_session, Hotel(
        name="Seaside Grand", address="1 Ocean Drive", city="Portsmouth",
        phone="555-0100", email="info@seaside.example.com", star_rating=4
    ))


@pytest.fixture
def other_hotel(db_session):
    return _add(db_session, Hotel(name="Mountain Lodge", city="Aspen", star_rating=3))


@pytest.fixture
def management_dept(db_session, hotel):
    return _add(db_session, Department(hotel_id=hotel.id, name="Management"))


@pytest.fixture
def front_desk_dept(db_session, hotel):
    return _add(db_session, Department(hotel_id=hotel.id, name="Front Desk"))


@pytest.fixture
def housekeeping_dept(db_session, hotel):
    return _add(db_session, Department(hotel_id=hotel.id, name="Housekeeping"))


@pytest.fixture
def other_dept(db_session, other_hotel):
    return _add(db_session, Department(hotel_id=other_hotel.id, name="Front Desk"))


# ============== Employees and auth ==============

@pytest.fixture
def admin(db_session):
    return _add(db_session, Employee(
        first_name="Alice", last_name="Admin", email="admin@hotel.example.com",
        password_hash=get_password_hash(PASSWORD), role=EmployeeRole.ADMIN,
        working_status=WorkingStatus.WORKING, salary=Decimal("6000"),
        hired_date=date(2020, 1, 1)
    ))


@pytest.fixture
def manager(db_session, management_dept):
    return _add(db_session, Employee(
        department_id=management_dept.id, first_name="Mark", last_name="Manager",
        email="manager@seaside.example.com", phone="555-0101",
        password_hash=get_password_hash(PASSWORD), role=EmployeeRole.MANAGER,
        working_status=WorkingStatus.WORKING, salary=Decimal("5000"),
        hired_date=date(2021, 3, 1)
    ))


@pytest.fixture
def receptionist(db_session, front_desk_dept):
    return _add(db_session, Employee(
        department_id=front_desk_dept.id, first_name="Rita", last_name="Reception",
        email="rita@seaside.example.com", phone="555-0102",
        password_hash=get_password_hash(PASSWORD), role=EmployeeRole.RECEPTIONIST,
        working_status=WorkingStatus.WORKING, hourly_pay=Decimal("15.00"),
        hired_date=date(2022, 6, 1)
    ))


@pytest.fixture
def other_manager(db_session, other_dept):
    return _add(db_session, Employee(
        department_id=other_dept.id, first_name="Olga", last_name="Other",
        email="olga@lodge.example.com", password_hash=get_password_hash(PASSWORD),
        role=EmployeeRole.MANAGER, working_status=WorkingStatus.WORKING,
        salary=Decimal("4500"), hired_date=date(2021, 1, 1)
    ))


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def manager_headers(manager):
    return headers_for(manager)


@pytest.fixture
def receptionist_headers(receptionist):
    return headers_for(receptionist)


@pytest.fixture
def other_manager_headers(other_manager):
    return headers_for(other_manager)


# ============== Rooms ==============

@pytest.fixture
def standard_class(db_session):
    return _add(db_session, RoomClass(class_type="Standard", bed_type="Double", description="Standard room"))


@pytest.fixture
def deluxe_class(db_session):
    return _add(db_session, RoomClass(class_type="Deluxe", bed_type="King", description="Deluxe room"))


@pytest.fixture
def room_101(db_session, hotel, standard_class):
    return _add(db_session, Room(
        hotel_id=hotel.id, room_class_id=standard_class.id, room_number="101",
        max_occupancy=2, base_price=Decimal("100.00")
    ))


@pytest.fixture
def room_102(db_session, hotel, deluxe_class):
    return _add(db_session, Room(
        hotel_id=hotel.id, room_class_id=deluxe_class.id, room_number="102",
        max_occupancy=3, base_price=Decimal("180.00")
    ))


@pytest.fixture
def other_room(db_session, other_hotel, standard_class):
    return _add(db_session, Room(
        hotel_id=other_hotel.id, room_class_id=standard_class.id, room_number="101",
        max_occupancy=2, base_price=Decimal("90.00")
    ))


# ============== Guests and bookings ==============

@pytest.fixture
def guest(db_session):
    return _add(db_session, Guest(
        first_name="Gary", last_name="Guest", email="gary@mail.example.com",
        phone="555-0200", date_of_birth=date(1985, 5, 20), nid="NID-1001"
    ))


@pytest.fixture
def booking(db_session, hotel, guest, room_101, receptionist):
    """Guest in room 101 from today for two nights"""
    today = date.today()
    return _add(db_session, Booking(
        hotel_id=hotel.id, guest_id=guest.id, room_id=room_101.id,
        employee_id=receptionist.id, check_in_date=today,
        check_out_date=today + timedelta(days=2), num_adults=2,
        status=BookingStatus.CONFIRMED
    ))


# ============== Inventory ==============

@pytest.fixture
def towels(db_session, hotel):
    return _add(db_session, InventoryItem(
        hotel_id=hotel.id, item_name="Bath Towel", category="Linen",
        quantity=Decimal("50"), unit="pcs", low_stock_threshold=20
    ))


@pytest.fixture
def soap(db_session, hotel):
    return _add(db_session, InventoryItem(
        hotel_id=hotel.id, item_name="Soap", category="Toiletries",
        quantity=Decimal("5"), unit="pcs", low_stock_threshold=10
    ))


@pytest.fixture
def make_headers():
    """Build auth headers for an arbitrary employee"""
    return headers_for
