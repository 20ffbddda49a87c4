"""
Booking service
Availability, reservations, in-house guests, bills, payments and check-out
"""
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from hotel_suite.errors import NotFoundError, ConflictError, InvalidRequestError, PermissionDeniedError
from hotel_suite.models.ontology import (
    Booking, BookingStatus, BookingFeature, Guest, Room, RoomClass,
    Transaction, PaymentMethod
)
from hotel_suite.models.schemas import BookingCreate, FeatureCreate, PaymentCreate

logger = logging.getLogger(__name__)


def overlapping(check_in: date, check_out: date):
    """Filter for confirmed bookings sharing at least one night with [check_in, check_out)"""
    return (
        Booking.status == BookingStatus.CONFIRMED,
        Booking.check_in_date < check_out,
        Booking.check_out_date > check_in,
    )


class BookingService:
    """Booking service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Availability ==============

    def busy_room_ids(self, check_in: date, check_out: date,
                      exclude_booking_id: Optional[int] = None):
        query = self.db.query(Booking.room_id).filter(*overlapping(check_in, check_out))
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query

    def get_available_rooms(self, hotel_id: int, check_in: date, check_out: date,
                            min_price: Optional[Decimal] = None,
                            max_price: Optional[Decimal] = None,
                            bed_type: Optional[str] = None,
                            class_type: Optional[str] = None,
                            min_occupancy: Optional[int] = None) -> List[Room]:
        """Rooms of the hotel free for every night of the stay"""
        if check_out <= check_in:
            raise InvalidRequestError("check-out date must be after check-in date")

        query = self.db.query(Room).join(RoomClass).options(
            joinedload(Room.room_class)
        ).filter(
            Room.hotel_id == hotel_id,
            Room.id.notin_(self.busy_room_ids(check_in, check_out).statement)
        )
        if min_price is not None:
            query = query.filter(Room.base_price >= min_price)
        if max_price is not None:
            query = query.filter(Room.base_price <= max_price)
        if bed_type:
            query = query.filter(func.lower(RoomClass.bed_type) == bed_type.lower())
        if class_type:
            query = query.filter(func.lower(RoomClass.class_type) == class_type.lower())
        if min_occupancy is not None:
            query = query.filter(Room.max_occupancy >= min_occupancy)

        return query.order_by(Room.base_price, Room.room_number).all()

    # ============== Reservations ==============

    def _upsert_guest(self, data) -> Guest:
        guest = self.db.query(Guest).filter(Guest.nid == data.nid).first()
        if guest:
            for key, value in data.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(guest, key, value)
        else:
            guest = Guest(**data.model_dump())
            self.db.add(guest)
            self.db.flush()
        return guest

    def create_bookings(self, hotel_id: int, employee_id: Optional[int],
                        data: BookingCreate) -> List[Booking]:
        """Guest plus one booking per selected room, all or nothing"""
        try:
            rooms = self.db.query(Room).filter(
                Room.id.in_(data.room_ids)
            ).with_for_update().all()
            found = {room.id: room for room in rooms}
            for room_id in data.room_ids:
                room = found.get(room_id)
                if room is None or room.hotel_id != hotel_id:
                    raise ConflictError(f"Room {room_id} is not available in this hotel")

            busy = {
                row.room_id for row in
                self.busy_room_ids(data.check_in_date, data.check_out_date).filter(
                    Booking.room_id.in_(data.room_ids)
                ).all()
            }
            if busy:
                numbers = ", ".join(sorted(found[r].room_number for r in busy))
                raise ConflictError(f"Room(s) {numbers} already booked for these dates")

            guest = self._upsert_guest(data.guest)

            bookings = []
            for room_id in data.room_ids:
                booking = Booking(
                    hotel_id=hotel_id,
                    guest_id=guest.id,
                    room_id=room_id,
                    employee_id=employee_id,
                    check_in_date=data.check_in_date,
                    check_out_date=data.check_out_date,
                    num_adults=data.num_adults,
                    num_children=data.num_children,
                    status=BookingStatus.CONFIRMED,
                )
                self.db.add(booking)
                bookings.append(booking)
            self.db.flush()

            if data.deposit:
                self.db.add(Transaction(
                    booking_id=bookings[0].id,
                    amount_paid=data.deposit,
                    payment_method=data.payment_method,
                    payment_date=datetime.utcnow(),
                    remark="Deposit",
                ))

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for booking in bookings:
            self.db.refresh(booking)
        logger.info(
            f"Guest {guest.id} booked room(s) {data.room_ids} in hotel {hotel_id} "
            f"from {data.check_in_date} to {data.check_out_date}"
        )
        return bookings

    def get_booking(self, booking_id: int, hotel_id: Optional[int] = None) -> Booking:
        """Fetch a booking; hotel_id None means no hotel scoping (admin)"""
        booking = self.db.query(Booking).options(
            joinedload(Booking.guest), joinedload(Booking.room).joinedload(Room.room_class)
        ).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if hotel_id is not None and booking.hotel_id != hotel_id:
            raise PermissionDeniedError("Booking belongs to another hotel")
        return booking

    def _ensure_confirmed(self, booking: Booking) -> None:
        if booking.status != BookingStatus.CONFIRMED:
            raise ConflictError(f"Booking {booking.id} is {booking.status.value}")

    # ============== Front desk lists ==============

    def _guest_filters(self, query, first_name=None, last_name=None, email=None,
                       phone=None, nid=None, date_of_birth=None, guest_id=None):
        if first_name:
            query = query.filter(func.lower(Guest.first_name).like(f"%{first_name.lower()}%"))
        if last_name:
            query = query.filter(func.lower(Guest.last_name).like(f"%{last_name.lower()}%"))
        if email:
            query = query.filter(func.lower(Guest.email).like(f"%{email.lower()}%"))
        if phone:
            query = query.filter(Guest.phone.like(f"%{phone}%"))
        if nid:
            query = query.filter(Guest.nid == nid)
        if date_of_birth:
            query = query.filter(Guest.date_of_birth == date_of_birth)
        if guest_id is not None:
            query = query.filter(Guest.id == guest_id)
        return query

    def _hotel_bookings(self, hotel_id: int):
        return self.db.query(Booking).join(Guest).join(Room).options(
            joinedload(Booking.guest), joinedload(Booking.room).joinedload(Room.room_class)
        ).filter(
            Booking.hotel_id == hotel_id,
            Booking.status == BookingStatus.CONFIRMED
        )

    def get_current_guests(self, hotel_id: int, from_date: Optional[date] = None,
                           to_date: Optional[date] = None, **guest_filters) -> List[Booking]:
        """In-house bookings; explicit date filters replace the today window"""
        query = self._hotel_bookings(hotel_id)
        if from_date is None and to_date is None:
            today = date.today()
            query = query.filter(Booking.check_in_date <= today, Booking.check_out_date >= today)
        else:
            if from_date is not None:
                query = query.filter(Booking.check_in_date >= from_date)
            if to_date is not None:
                query = query.filter(Booking.check_out_date <= to_date)
        query = self._guest_filters(query, **guest_filters)
        return query.order_by(Room.room_number, Booking.check_in_date).all()

    def get_checkouts_today(self, hotel_id: int, **guest_filters) -> List[Booking]:
        query = self._hotel_bookings(hotel_id).filter(Booking.check_out_date == date.today())
        query = self._guest_filters(query, **guest_filters)
        return query.order_by(Room.room_number).all()

    # ============== Stay changes ==============

    def extend_stay(self, booking: Booking, new_check_out: date) -> Booking:
        self._ensure_confirmed(booking)
        if new_check_out <= booking.check_out_date:
            raise InvalidRequestError("New check-out date must be after the current one")

        try:
            self.db.query(Room).filter(Room.id == booking.room_id).with_for_update().first()
            clash = self.busy_room_ids(
                booking.check_out_date, new_check_out, exclude_booking_id=booking.id
            ).filter(Booking.room_id == booking.room_id).first()
            if clash:
                raise ConflictError("Room is booked by another guest during the extension")

            old_check_out = booking.check_out_date
            booking.check_out_date = new_check_out
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} extended from {old_check_out} to {new_check_out}")
        return booking

    def get_features(self, booking: Booking) -> List[BookingFeature]:
        return self.db.query(BookingFeature).filter(
            BookingFeature.booking_id == booking.id
        ).order_by(BookingFeature.id).all()

    def add_feature(self, booking: Booking, data: FeatureCreate) -> BookingFeature:
        self._ensure_confirmed(booking)
        feature = BookingFeature(booking_id=booking.id, **data.model_dump())
        self.db.add(feature)
        self.db.commit()
        self.db.refresh(feature)
        logger.info(f"Feature '{feature.feature_name}' added to booking {booking.id}")
        return feature

    def cancel(self, booking: Booking) -> Booking:
        self._ensure_confirmed(booking)
        booking.status = BookingStatus.CANCELLED
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} cancelled")
        return booking

    # ============== Billing ==============

    def get_payments(self, booking: Booking) -> List[Transaction]:
        return self.db.query(Transaction).filter(
            Transaction.booking_id == booking.id
        ).order_by(Transaction.payment_date).all()

    def get_bill(self, booking: Booking) -> dict:
        """Room nights at base price plus extras, against payments made"""
        features = self.get_features(booking)
        payments = self.get_payments(booking)

        room_rate = Decimal(booking.room.base_price)
        room_charge = room_rate * booking.nights
        feature_charge = sum((Decimal(f.additional_price) for f in features), Decimal("0"))
        total_charge = room_charge + feature_charge
        total_paid = sum((Decimal(p.amount_paid) for p in payments), Decimal("0"))

        return {
            "booking_id": booking.id,
            "room_number": booking.room.room_number,
            "guest_name": f"{booking.guest.first_name} {booking.guest.last_name}",
            "check_in_date": booking.check_in_date,
            "check_out_date": booking.check_out_date,
            "nights": booking.nights,
            "room_rate": room_rate,
            "room_charge": room_charge,
            "feature_charge": feature_charge,
            "total_charge": total_charge,
            "total_paid": total_paid,
            "balance": total_charge - total_paid,
            "features": features,
            "payments": payments,
        }

    def add_payment(self, booking: Booking, data: PaymentCreate) -> Transaction:
        if booking.status == BookingStatus.CANCELLED:
            raise ConflictError(f"Booking {booking.id} is cancelled")
        payment = Transaction(
            booking_id=booking.id,
            amount_paid=data.amount,
            payment_method=data.payment_method,
            payment_date=datetime.utcnow(),
            remark=data.remark,
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"Payment {payment.id} of {payment.amount_paid} recorded for booking {booking.id}")
        return payment

    def checkout(self, booking: Booking, settle_balance: bool = False,
                 payment_method: Optional[PaymentMethod] = None) -> dict:
        """Check the guest out; an open balance blocks unless settled here"""
        self._ensure_confirmed(booking)

        try:
            bill = self.get_bill(booking)
            balance = bill["balance"]
            if balance > 0:
                if not settle_balance:
                    raise ConflictError(f"Outstanding balance of {balance} must be settled first")
                self.db.add(Transaction(
                    booking_id=booking.id,
                    amount_paid=balance,
                    payment_method=payment_method or PaymentMethod.CASH,
                    payment_date=datetime.utcnow(),
                    remark="Settled at check-out",
                ))

            booking.status = BookingStatus.CHECKED_OUT
            booking.checked_out_at = datetime.utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} checked out, settled {balance if balance > 0 else 0}")
        return self.get_bill(booking)

    def to_response(self, booking: Booking) -> dict:
        guest = booking.guest
        room = booking.room
        return {
            "id": booking.id,
            "hotel_id": booking.hotel_id,
            "room_id": booking.room_id,
            "room_number": room.room_number if room else None,
            "class_type": room.room_class.class_type if room and room.room_class else None,
            "guest_id": booking.guest_id,
            "guest_first_name": guest.first_name if guest else None,
            "guest_last_name": guest.last_name if guest else None,
            "guest_email": guest.email if guest else None,
            "guest_phone": guest.phone if guest else None,
            "guest_nid": guest.nid if guest else None,
            "check_in_date": booking.check_in_date,
            "check_out_date": booking.check_out_date,
            "num_adults": booking.num_adults,
            "num_children": booking.num_children,
            "status": booking.status,
            "checked_out_at": booking.checked_out_at,
            "created_at": booking.created_at,
        }
