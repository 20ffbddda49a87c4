"""
Seed data script

Creates the tables and a demo hotel:
  Seaside Grand
  ├── Management
  ├── Front Desk
  └── Housekeeping

Default accounts (password for all: 123456):
  admin@hotelsuite.example.com      Admin         (all hotels)
  manager@seaside.example.com       Manager       Seaside Grand
  frontdesk@seaside.example.com     Receptionist  Seaside Grand

Run from backend/: python init_data.py
"""
from datetime import date
from decimal import Decimal
from hotel_suite.database import SessionLocal, init_db
from hotel_suite.models.ontology import (
    Hotel, Department, Employee, EmployeeRole, WorkingStatus, RoomClass, Room
)
from hotel_suite.security.auth import get_password_hash

DEFAULT_PASSWORD = "123456"


def init_hotel(db):
    """Hotel and its departments"""
    hotel = db.query(Hotel).filter(Hotel.name == "Seaside Grand").first()
    if not hotel:
        hotel = Hotel(
            name="Seaside Grand", address="1 Ocean Drive", city="Portsmouth",
            phone="555-0100", email="info@seaside.example.com", star_rating=4
        )
        db.add(hotel)
        db.flush()

    departments = {}
    for name in ("Management", "Front Desk", "Housekeeping"):
        dept = db.query(Department).filter(
            Department.hotel_id == hotel.id, Department.name == name
        ).first()
        if not dept:
            dept = Department(hotel_id=hotel.id, name=name)
            db.add(dept)
            db.flush()
        departments[name] = dept

    db.commit()
    print(f"Hotel ready: {hotel.name} with {len(departments)} departments")
    return hotel, departments


def init_room_classes(db):
    class_defs = [
        {"class_type": "Standard", "bed_type": "Double", "description": "Standard double room"},
        {"class_type": "Twin", "bed_type": "Twin", "description": "Two single beds"},
        {"class_type": "Deluxe", "bed_type": "King", "description": "Sea view, king bed"},
    ]

    classes = {}
    for class_data in class_defs:
        room_class = db.query(RoomClass).filter(RoomClass.class_type == class_data["class_type"]).first()
        if not room_class:
            room_class = RoomClass(**class_data)
            db.add(room_class)
            db.flush()
        classes[class_data["class_type"]] = room_class

    db.commit()
    print(f"Room classes ready: {', '.join(classes)}")
    return classes


def init_rooms(db, hotel, classes):
    """Two floors: 1xx standard and twin, 2xx deluxe"""
    rooms = []
    for number in range(101, 107):
        class_type = "Standard" if number % 2 else "Twin"
        rooms.append({"room_number": str(number), "class_type": class_type,
                      "max_occupancy": 2, "base_price": Decimal("95.00")})
    for number in range(201, 205):
        rooms.append({"room_number": str(number), "class_type": "Deluxe",
                      "max_occupancy": 3, "base_price": Decimal("180.00")})

    created = 0
    for room_data in rooms:
        existing = db.query(Room).filter(
            Room.hotel_id == hotel.id, Room.room_number == room_data["room_number"]
        ).first()
        if not existing:
            db.add(Room(
                hotel_id=hotel.id,
                room_class_id=classes[room_data["class_type"]].id,
                room_number=room_data["room_number"],
                max_occupancy=room_data["max_occupancy"],
                base_price=room_data["base_price"],
            ))
            created += 1

    db.commit()
    total = db.query(Room).filter(Room.hotel_id == hotel.id).count()
    print(f"Rooms ready: {created} created, {total} total")


def init_employees(db, departments):
    employees = [
        {
            "email": "admin@hotelsuite.example.com", "first_name": "Ada", "last_name": "Admin",
            "role": EmployeeRole.ADMIN, "department_id": None, "salary": Decimal("7000"),
        },
        {
            "email": "manager@seaside.example.com", "first_name": "Mona", "last_name": "Marsh",
            "role": EmployeeRole.MANAGER, "department_id": departments["Management"].id,
            "salary": Decimal("5200"),
        },
        {
            "email": "frontdesk@seaside.example.com", "first_name": "Felix", "last_name": "Ford",
            "role": EmployeeRole.RECEPTIONIST, "department_id": departments["Front Desk"].id,
            "hourly_pay": Decimal("16.50"),
        },
    ]

    created = []
    for emp_data in employees:
        existing = db.query(Employee).filter(Employee.email == emp_data["email"]).first()
        if not existing:
            db.add(Employee(
                **emp_data,
                password_hash=get_password_hash(DEFAULT_PASSWORD),
                working_status=WorkingStatus.WORKING,
                hired_date=date.today(),
            ))
            created.append(emp_data["email"])

    db.commit()
    print(f"Employees ready: {created if created else 'already present'}")


def main():
    print("=" * 50)
    print("Hotel Suite seed data")
    print("=" * 50)

    init_db()
    print("Tables created")

    db = SessionLocal()
    try:
        hotel, departments = init_hotel(db)
        classes = init_room_classes(db)
        init_rooms(db, hotel, classes)
        init_employees(db, departments)
    finally:
        db.close()

    print("Done. Default password for all accounts: " + DEFAULT_PASSWORD)


if __name__ == "__main__":
    main()
