"""
ORM entities
Hotel, Department, Employee, RoomClass, Room, Guest, Booking, BookingFeature,
Transaction, InventoryItem, InventoryTransaction, MaintenanceLedgerEntry
"""
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Enum as SQLEnum, Numeric, LargeBinary, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from hotel_suite.database import Base


# Name of the built-in service account; never listed as staff
SYSTEM_ACCOUNT_NAME = "System"


# ============== Enums ==============

class EmployeeRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    HOUSEKEEPING = "housekeeping"
    STAFF = "staff"
    CONTRACTOR = "contractor"


# Roles a manager may hire into
STAFF_ROLES = (
    EmployeeRole.RECEPTIONIST, EmployeeRole.HOUSEKEEPING,
    EmployeeRole.STAFF, EmployeeRole.CONTRACTOR,
)


class WorkingStatus(str, Enum):
    WORKING = "working"
    INACTIVE = "inactive"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"


class InventoryTransactionType(str, Enum):
    ORDER = "Order"
    STOCK_COUNT = "Adjustment-Stock Count"
    USAGE = "Adjustment-Usage"
    DAMAGE = "Adjustment-Damage"
    RETURN = "Adjustment-Return"
    OTHER = "Adjustment-Other"


class AdjustmentType(str, Enum):
    """Kinds of manual stock adjustment, each logged as Adjustment-<kind>"""
    STOCK_COUNT = "Stock Count"
    USAGE = "Usage"
    DAMAGE = "Damage"
    RETURN = "Return"
    OTHER = "Other"

    @property
    def transaction_type(self) -> InventoryTransactionType:
        return InventoryTransactionType(f"Adjustment-{self.value}")


# Ledger rows that count towards inventory cost
COST_TRANSACTION_TYPES = (
    InventoryTransactionType.ORDER,
    InventoryTransactionType.DAMAGE,
    InventoryTransactionType.USAGE,
)


class InventoryTransactionStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# ============== Entities ==============

class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    address = Column(String(255))
    city = Column(String(100))
    phone = Column(String(20))
    email = Column(String(100))
    star_rating = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    departments = relationship("Department", back_populates="hotel")
    rooms = relationship("Room", back_populates="hotel")


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = (UniqueConstraint("hotel_id", "name", name="uq_department_hotel_name"),)

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    name = Column(String(100), nullable=False)

    hotel = relationship("Hotel", back_populates="departments")
    employees = relationship("Employee", back_populates="department")


class Employee(Base):
    """
    Staff member. Admins have no department; everybody else belongs to one,
    and through it to a hotel.
    """
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    phone = Column(String(20))
    password_hash = Column(String(255))                     # null: cannot log in
    role = Column(SQLEnum(EmployeeRole), nullable=False)
    working_status = Column(SQLEnum(WorkingStatus), default=WorkingStatus.WORKING, nullable=False)
    hourly_pay = Column(Numeric(10, 2))
    salary = Column(Numeric(10, 2))                         # monthly
    hired_date = Column(Date, nullable=False, default=date.today)
    termination_date = Column(Date)
    address = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    department = relationship("Department", back_populates="employees")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def hotel_id(self) -> Optional[int]:
        return self.department.hotel_id if self.department else None

    @property
    def is_active(self) -> bool:
        return self.working_status == WorkingStatus.WORKING


class RoomClass(Base):
    __tablename__ = "room_classes"

    id = Column(Integer, primary_key=True, index=True)
    class_type = Column(String(50), unique=True, nullable=False)   # Standard, Deluxe, Suite
    bed_type = Column(String(50))                                  # Single, Double, King
    description = Column(Text)

    rooms = relationship("Room", back_populates="room_class")


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("hotel_id", "room_number", name="uq_room_hotel_number"),)

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    room_class_id = Column(Integer, ForeignKey("room_classes.id"), nullable=False)
    room_number = Column(String(10), nullable=False)
    max_occupancy = Column(Integer, nullable=False, default=2)
    base_price = Column(Numeric(10, 2), nullable=False)
    room_image = Column(LargeBinary)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Hotel", back_populates="rooms")
    room_class = relationship("RoomClass", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room")


class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100))
    phone = Column(String(20))
    date_of_birth = Column(Date)
    nid = Column(String(50), unique=True, nullable=False)    # national id
    created_at = Column(DateTime, default=datetime.utcnow)

    bookings = relationship("Booking", back_populates="guest")


class Booking(Base):
    """One room for one guest over [check_in_date, check_out_date)"""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"))
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    num_adults = Column(Integer, nullable=False, default=1)
    num_children = Column(Integer, nullable=False, default=0)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)
    checked_out_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    guest = relationship("Guest", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")
    employee = relationship("Employee")
    features = relationship("BookingFeature", back_populates="booking")
    transactions = relationship("Transaction", back_populates="booking")

    @property
    def nights(self) -> int:
        return max((self.check_out_date - self.check_in_date).days, 1)


class BookingFeature(Base):
    """Extra charged to a stay (late checkout, minibar, extra bed...)"""
    __tablename__ = "booking_features"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    feature_name = Column(String(100), nullable=False)
    description = Column(Text)
    additional_price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    booking = relationship("Booking", back_populates="features")


class Transaction(Base):
    """Guest payment ledger"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    payment_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    remark = Column(String(255))

    booking = relationship("Booking", back_populates="transactions")


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    item_name = Column(String(100), nullable=False)
    category = Column(String(50))
    quantity = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    unit = Column(String(20))
    low_stock_threshold = Column(Integer)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    transactions = relationship("InventoryTransaction", back_populates="item")

    @property
    def is_low_stock(self) -> bool:
        return self.low_stock_threshold is not None and self.quantity <= self.low_stock_threshold


class InventoryTransaction(Base):
    """Inventory ledger: orders (pending until received) and stock adjustments"""
    __tablename__ = "inventory_transactions"

    id = Column(Integer, primary_key=True, index=True)
    inventory_id = Column(Integer, ForeignKey("inventory.id"), nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    transaction_type = Column(SQLEnum(InventoryTransactionType), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit_price = Column(Numeric(10, 2))
    status = Column(SQLEnum(InventoryTransactionStatus), nullable=False)
    reason = Column(String(255))
    transaction_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    receive_date = Column(DateTime)

    item = relationship("InventoryItem", back_populates="transactions")


class MaintenanceLedgerEntry(Base):
    __tablename__ = "bill_maintenance_ledger"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    service_type = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    ledger_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
