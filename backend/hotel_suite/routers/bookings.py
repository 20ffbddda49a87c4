"""
Booking routes (front desk)
"""
from typing import List, Optional
from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee, EmployeeRole
from hotel_suite.models.schemas import (
    RoomResponse, BookingCreate, BookingResponse, BookingExtend,
    FeatureCreate, FeatureResponse, PaymentCreate, TransactionResponse,
    BillResponse, CheckoutRequest
)
from hotel_suite.services.booking_service import BookingService
from hotel_suite.services.room_service import RoomService
from hotel_suite.security.auth import require_receptionist, resolve_hotel_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _scope(user: Employee) -> Optional[int]:
    """Hotel a booking must belong to; admins are not scoped"""
    return None if user.role == EmployeeRole.ADMIN else user.hotel_id


@router.get("/available-rooms", response_model=List[RoomResponse])
def available_rooms(
    check_in_date: date,
    check_out_date: date,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    bed_type: Optional[str] = None,
    class_type: Optional[str] = None,
    min_occupancy: Optional[int] = Query(None, gt=0),
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Rooms free for every night of [check_in_date, check_out_date)"""
    rooms = BookingService(db).get_available_rooms(
        resolve_hotel_id(current_user, hotel_id), check_in_date, check_out_date,
        min_price=min_price, max_price=max_price, bed_type=bed_type,
        class_type=class_type, min_occupancy=min_occupancy
    )
    room_service = RoomService(db)
    return [room_service.to_response(r) for r in rooms]


@router.post("", response_model=List[BookingResponse], status_code=201)
def create_booking(
    data: BookingCreate,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Book one or more rooms for a guest"""
    service = BookingService(db)
    bookings = service.create_bookings(resolve_hotel_id(current_user, hotel_id), current_user.id, data)
    return [service.to_response(b) for b in bookings]


@router.get("/current-guests", response_model=List[BookingResponse])
def current_guests(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
    email: Optional[str] = None,
    guest_id: Optional[int] = Query(None, gt=0),
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Guests in house today, or within the given dates"""
    service = BookingService(db)
    bookings = service.get_current_guests(
        resolve_hotel_id(current_user, hotel_id), from_date=from_date, to_date=to_date,
        first_name=first_name, last_name=last_name, phone=phone, email=email, guest_id=guest_id
    )
    return [service.to_response(b) for b in bookings]


@router.get("/checkouts-today", response_model=List[BookingResponse])
def checkouts_today(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    nid: Optional[str] = None,
    date_of_birth: Optional[date] = None,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    bookings = service.get_checkouts_today(
        resolve_hotel_id(current_user, hotel_id), first_name=first_name, last_name=last_name,
        email=email, phone=phone, nid=nid, date_of_birth=date_of_birth
    )
    return [service.to_response(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    return service.to_response(service.get_booking(booking_id, _scope(current_user)))


@router.post("/{booking_id}/extend", response_model=BookingResponse)
def extend_booking(
    booking_id: int,
    data: BookingExtend,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Move the check-out date later"""
    service = BookingService(db)
    booking = service.get_booking(booking_id, _scope(current_user))
    return service.to_response(service.extend_stay(booking, data.new_check_out_date))


@router.get("/{booking_id}/features", response_model=List[FeatureResponse])
def list_features(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    return service.get_features(service.get_booking(booking_id, _scope(current_user)))


@router.post("/{booking_id}/features", response_model=FeatureResponse, status_code=201)
def add_feature(
    booking_id: int,
    data: FeatureCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Charge an extra to the stay"""
    service = BookingService(db)
    return service.add_feature(service.get_booking(booking_id, _scope(current_user)), data)


@router.get("/{booking_id}/bill", response_model=BillResponse)
def get_bill(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    return service.get_bill(service.get_booking(booking_id, _scope(current_user)))


@router.post("/{booking_id}/payments", response_model=TransactionResponse, status_code=201)
def add_payment(
    booking_id: int,
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    return service.add_payment(service.get_booking(booking_id, _scope(current_user)), data)


@router.post("/{booking_id}/checkout", response_model=BillResponse)
def checkout(
    booking_id: int,
    data: Optional[CheckoutRequest] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Check out; returns the final bill"""
    data = data or CheckoutRequest()
    service = BookingService(db)
    booking = service.get_booking(booking_id, _scope(current_user))
    return service.checkout(booking, data.settle_balance, data.payment_method)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    service = BookingService(db)
    booking = service.get_booking(booking_id, _scope(current_user))
    return service.to_response(service.cancel(booking))
