"""
Pydantic schemas
Request/response validation for the API
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator, ConfigDict
from hotel_suite.models.ontology import (
    EmployeeRole, WorkingStatus, BookingStatus, PaymentMethod,
    AdjustmentType, InventoryTransactionType, InventoryTransactionStatus
)


def _lower_email(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _not_null(value):
    """Update fields may be omitted but not cleared"""
    if value is None:
        raise ValueError("may not be null")
    return value


# ============== Auth Schemas ==============

class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)


class EmployeeProfile(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: EmployeeRole
    department_id: Optional[int] = None
    hotel_id: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    employee: EmployeeProfile


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=6)


# ============== Hotel Schemas ==============

class HotelBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    star_rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _lower_email(v)


class HotelCreate(HotelBase):
    pass


class HotelUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    star_rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _not_null(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _lower_email(v)


class HotelResponse(HotelBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class HotelLookup(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class DepartmentResponse(BaseModel):
    id: int
    hotel_id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


# ============== Employee Schemas ==============

class Address(BaseModel):
    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class EmployeeBase(BaseModel):
    department_id: int
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    hourly_pay: Optional[Decimal] = Field(None, ge=0)
    salary: Optional[Decimal] = Field(None, ge=0)
    hired_date: Optional[date] = None
    address: Optional[Address] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _lower_email(v)


class ManagerCreate(EmployeeBase):
    password: Optional[str] = Field(None, min_length=6)


class EmployeeCreate(EmployeeBase):
    role: EmployeeRole
    password: Optional[str] = Field(None, min_length=6)


class EmployeeUpdate(BaseModel):
    department_id: Optional[int] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[EmployeeRole] = None
    hourly_pay: Optional[Decimal] = Field(None, ge=0)
    salary: Optional[Decimal] = Field(None, ge=0)
    address: Optional[Address] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("department_id", "first_name", "last_name", "email", "role")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _lower_email(v)


class StatusUpdate(BaseModel):
    working_status: WorkingStatus


class EmployeeResponse(BaseModel):
    id: int
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    hotel_id: Optional[int] = None
    hotel_name: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: EmployeeRole
    working_status: WorkingStatus
    hourly_pay: Optional[Decimal] = None
    salary: Optional[Decimal] = None
    hired_date: date
    termination_date: Optional[date] = None
    address: Optional[dict] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Room Schemas ==============

class RoomClassCreate(BaseModel):
    class_type: str = Field(..., min_length=1, max_length=50)
    bed_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class RoomClassResponse(RoomClassCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)


class RoomCreate(BaseModel):
    hotel_id: int
    room_class_id: int
    room_number: str = Field(..., min_length=1, max_length=10)
    max_occupancy: int = Field(..., gt=0)
    base_price: Decimal = Field(..., gt=0)
    room_image: Optional[str] = None      # base64


class RoomUpdate(BaseModel):
    room_class_id: Optional[int] = None
    max_occupancy: Optional[int] = Field(None, gt=0)
    base_price: Optional[Decimal] = Field(None, gt=0)
    room_image: Optional[str] = None
    remove_image: bool = False

    @field_validator("room_class_id", "max_occupancy", "base_price")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)


class RoomResponse(BaseModel):
    id: int
    hotel_id: int
    room_number: str
    room_class_id: int
    class_type: Optional[str] = None
    bed_type: Optional[str] = None
    max_occupancy: int
    base_price: Decimal
    room_image: Optional[str] = None


# ============== Booking Schemas ==============

class GuestInfo(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None
    nid: str = Field(..., min_length=1, max_length=50)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _lower_email(v)


class BookingCreate(BaseModel):
    guest: GuestInfo
    room_ids: List[int] = Field(..., min_length=1)
    check_in_date: date
    check_out_date: date
    num_adults: int = Field(default=1, ge=1)
    num_children: int = Field(default=0, ge=0)
    deposit: Optional[Decimal] = Field(None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH

    @model_validator(mode="after")
    def validate_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check-out date must be after check-in date")
        if len(set(self.room_ids)) != len(self.room_ids):
            raise ValueError("room_ids contains duplicates")
        return self


class BookingResponse(BaseModel):
    id: int
    hotel_id: int
    room_id: int
    room_number: Optional[str] = None
    class_type: Optional[str] = None
    guest_id: int
    guest_first_name: Optional[str] = None
    guest_last_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_nid: Optional[str] = None
    check_in_date: date
    check_out_date: date
    num_adults: int
    num_children: int
    status: BookingStatus
    checked_out_at: Optional[datetime] = None
    created_at: datetime


class BookingExtend(BaseModel):
    new_check_out_date: date


class FeatureCreate(BaseModel):
    feature_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    additional_price: Decimal = Field(default=Decimal("0"), ge=0)


class FeatureResponse(FeatureCreate):
    id: int
    booking_id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    remark: Optional[str] = Field(None, max_length=255)


class TransactionResponse(BaseModel):
    id: int
    booking_id: int
    amount_paid: Decimal
    payment_method: PaymentMethod
    payment_date: datetime
    remark: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class BillResponse(BaseModel):
    booking_id: int
    room_number: str
    guest_name: str
    check_in_date: date
    check_out_date: date
    nights: int
    room_rate: Decimal
    room_charge: Decimal
    feature_charge: Decimal
    total_charge: Decimal
    total_paid: Decimal
    balance: Decimal
    features: List[FeatureResponse] = []
    payments: List[TransactionResponse] = []


class CheckoutRequest(BaseModel):
    settle_balance: bool = False
    payment_method: Optional[PaymentMethod] = None

    @model_validator(mode="after")
    def validate_settlement(self):
        if self.settle_balance and self.payment_method is None:
            raise ValueError("payment_method is required to settle the balance")
        return self


# ============== Inventory Schemas ==============

class InventoryItemCreate(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    low_stock_threshold: Optional[int] = Field(None, ge=0)


class InventoryItemUpdate(BaseModel):
    item_name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    low_stock_threshold: Optional[int] = Field(None, ge=0)

    @field_validator("item_name")
    @classmethod
    def validate_item_name(cls, v):
        return _not_null(v)


class InventoryItemResponse(BaseModel):
    id: int
    hotel_id: int
    item_name: str
    category: Optional[str] = None
    quantity: Decimal
    unit: Optional[str] = None
    low_stock_threshold: Optional[int] = None
    is_low_stock: bool = False
    last_updated: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class StockAdjustment(BaseModel):
    quantity_change: Decimal
    adjustment_type: AdjustmentType
    reason: Optional[str] = Field(None, max_length=255)

    @field_validator("quantity_change")
    @classmethod
    def validate_change(cls, v):
        if v == 0:
            raise ValueError("quantity_change must not be zero")
        return v


class OrderCreate(BaseModel):
    inventory_id: int
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    reason: Optional[str] = Field(None, max_length=255)


class InventoryTransactionResponse(BaseModel):
    id: int
    inventory_id: int
    item_name: Optional[str] = None
    transaction_type: InventoryTransactionType
    quantity: Decimal
    unit_price: Optional[Decimal] = None
    status: InventoryTransactionStatus
    reason: Optional[str] = None
    transaction_date: datetime
    receive_date: Optional[datetime] = None


class TransactionSummaryRow(BaseModel):
    """A None type marks a per-status subtotal; None status and type mark the grand total"""
    status: Optional[InventoryTransactionStatus] = None
    transaction_type: Optional[InventoryTransactionType] = None
    count: int
    total_quantity: Decimal
    total_value: Decimal


class TransactionSummaryResponse(BaseModel):
    month: str
    rows: List[TransactionSummaryRow]


# ============== Finance Schemas ==============

class MaintenanceEntryCreate(BaseModel):
    service_type: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    ledger_date: date


class AdminMaintenanceEntryCreate(MaintenanceEntryCreate):
    hotel_id: int


class MaintenanceEntryResponse(BaseModel):
    id: int
    hotel_id: int
    service_type: str
    amount: Decimal
    ledger_date: date
    model_config = ConfigDict(from_attributes=True)


class MonthlyAmount(BaseModel):
    month: str          # YYYY-MM
    amount: Decimal


class DepartmentSalary(BaseModel):
    department_id: int
    department_name: str
    employee_count: int
    estimated_salary: Decimal


class FinancialSummary(BaseModel):
    hotel_id: int
    start: date
    end: date
    revenue: Decimal
    inventory_cost: Decimal
    maintenance_cost: Decimal
    salary_cost: Decimal
    total_expenses: Decimal
    net_result: Decimal


class YearlySummary(BaseModel):
    hotel_id: int
    year: int
    employee_cost: Decimal
    revenue: Decimal
    maintenance_cost: Decimal
    total_expenses: Decimal
    profit_loss: Decimal


class YearlyRevenue(BaseModel):
    year: int
    revenue: Decimal


# ============== Dashboard Schemas ==============

class ActivityEntry(BaseModel):
    kind: str           # booking / checkout
    booking_id: int
    guest_name: str
    room_number: str
    timestamp: datetime


class ManagerDashboard(BaseModel):
    hotel_id: int
    as_of: date
    month_revenue: Decimal
    total_rooms: int
    occupied_rooms: int
    occupancy_rate: float
    average_daily_rate: Decimal
    low_stock_items: List[InventoryItemResponse] = []
    recent_activity: List[ActivityEntry] = []


class ReceptionistDashboard(BaseModel):
    hotel_id: int
    as_of: date
    total_rooms: int
    arrivals_today: int
    departures_today: int
    in_house: int
    free_rooms_tonight: int
