"""
Room service
Manages Room and RoomClass objects
"""
import base64
import binascii
from typing import List, Optional
from datetime import date
import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from hotel_suite.errors import NotFoundError, ConflictError, InvalidRequestError
from hotel_suite.models.ontology import Room, RoomClass, Hotel, Booking, BookingStatus
from hotel_suite.models.schemas import RoomCreate, RoomUpdate, RoomClassCreate

logger = logging.getLogger(__name__)


def decode_image(data: str) -> bytes:
    """Decode a base64 image, accepting data: URLs"""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidRequestError("room_image is not valid base64")


def encode_image(data: Optional[bytes]) -> Optional[str]:
    if not data:
        return None
    return base64.b64encode(data).decode("ascii")


class RoomService:
    """Room service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Room classes ==============

    def get_room_classes(self) -> List[RoomClass]:
        return self.db.query(RoomClass).order_by(RoomClass.class_type).all()

    def get_room_class(self, room_class_id: int) -> RoomClass:
        room_class = self.db.query(RoomClass).filter(RoomClass.id == room_class_id).first()
        if not room_class:
            raise NotFoundError(f"Room class {room_class_id} not found")
        return room_class

    def create_room_class(self, data: RoomClassCreate) -> RoomClass:
        existing = self.db.query(RoomClass).filter(
            func.lower(RoomClass.class_type) == data.class_type.strip().lower()
        ).first()
        if existing:
            raise ConflictError(f"Room class '{data.class_type}' already exists")

        room_class = RoomClass(**data.model_dump())
        self.db.add(room_class)
        self.db.commit()
        self.db.refresh(room_class)
        logger.info(f"Room class {room_class.id} '{room_class.class_type}' created")
        return room_class

    # ============== Rooms ==============

    def get_rooms(self, hotel_id: int) -> List[Room]:
        return self.db.query(Room).options(
            joinedload(Room.room_class)
        ).filter(Room.hotel_id == hotel_id).order_by(Room.room_number).all()

    def get_room(self, room_id: int) -> Room:
        room = self.db.query(Room).options(
            joinedload(Room.room_class)
        ).filter(Room.id == room_id).first()
        if not room:
            raise NotFoundError(f"Room {room_id} not found")
        return room

    def create_room(self, data: RoomCreate) -> Room:
        """Add a room; the caller has already checked hotel scope"""
        if not self.db.query(Hotel).filter(Hotel.id == data.hotel_id).first():
            raise NotFoundError(f"Hotel {data.hotel_id} not found")
        self.get_room_class(data.room_class_id)

        existing = self.db.query(Room).filter(
            Room.hotel_id == data.hotel_id,
            Room.room_number == data.room_number
        ).first()
        if existing:
            raise ConflictError(f"Room {data.room_number} already exists in this hotel")

        room = Room(**data.model_dump(exclude={"room_image"}))
        if data.room_image:
            room.room_image = decode_image(data.room_image)

        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.id} ({room.room_number}) created in hotel {room.hotel_id}")
        return room

    def update_room(self, room: Room, data: RoomUpdate) -> Room:
        update_data = data.model_dump(exclude_unset=True)
        remove_image = update_data.pop('remove_image', False)
        image = update_data.pop('room_image', None)
        if not update_data and not remove_image and not image:
            raise InvalidRequestError("No fields to update")

        if 'room_class_id' in update_data:
            self.get_room_class(update_data['room_class_id'])
        for key, value in update_data.items():
            setattr(room, key, value)

        if remove_image:
            room.room_image = None
        elif image:
            room.room_image = decode_image(image)

        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.id} updated")
        return room

    def delete_room(self, room: Room) -> None:
        """Hard delete a room that no booking references"""
        active = self.db.query(Booking).filter(
            Booking.room_id == room.id,
            Booking.status == BookingStatus.CONFIRMED,
            Booking.check_out_date >= date.today()
        ).count()
        if active:
            raise ConflictError("Room has current or future bookings")

        history = self.db.query(Booking).filter(Booking.room_id == room.id).count()
        if history:
            raise ConflictError("Room is referenced by past bookings and cannot be deleted")

        room_id = room.id
        self.db.delete(room)
        self.db.commit()
        logger.info(f"Room {room_id} deleted")

    def to_response(self, room: Room) -> dict:
        room_class = room.room_class
        return {
            "id": room.id,
            "hotel_id": room.hotel_id,
            "room_number": room.room_number,
            "room_class_id": room.room_class_id,
            "class_type": room_class.class_type if room_class else None,
            "bed_type": room_class.bed_type if room_class else None,
            "max_occupancy": room.max_occupancy,
            "base_price": room.base_price,
            "room_image": encode_image(room.room_image),
        }
