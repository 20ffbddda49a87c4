"""
Room routes
Room classes are shared by all hotels; rooms belong to one hotel
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    RoomClassCreate, RoomClassResponse, RoomCreate, RoomUpdate, RoomResponse
)
from hotel_suite.services.room_service import RoomService
from hotel_suite.security.auth import (
    get_current_user, require_admin, require_manager, ensure_hotel_access
)

router = APIRouter(prefix="/rooms", tags=["Rooms"])


# ============== Room classes ==============

@router.get("/classes", response_model=List[RoomClassResponse])
def list_room_classes(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    return RoomService(db).get_room_classes()


@router.post("/classes", response_model=RoomClassResponse, status_code=201)
def create_room_class(
    data: RoomClassCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return RoomService(db).create_room_class(data)


# ============== Rooms ==============

@router.get("/hotel/{hotel_id}", response_model=List[RoomResponse])
def list_hotel_rooms(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Rooms of a hotel ordered by room number"""
    ensure_hotel_access(current_user, hotel_id)
    service = RoomService(db)
    return [service.to_response(r) for r in service.get_rooms(hotel_id)]


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = RoomService(db)
    room = service.get_room(room_id)
    ensure_hotel_access(current_user, room.hotel_id)
    return service.to_response(room)


@router.post("", response_model=RoomResponse, status_code=201)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    ensure_hotel_access(current_user, data.hotel_id)
    service = RoomService(db)
    return service.to_response(service.create_room(data))


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    service = RoomService(db)
    room = service.get_room(room_id)
    ensure_hotel_access(current_user, room.hotel_id)
    return service.to_response(service.update_room(room, data))


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    """Delete a room no booking refers to"""
    service = RoomService(db)
    room = service.get_room(room_id)
    ensure_hotel_access(current_user, room.hotel_id)
    service.delete_room(room)
    return {"message": "Room deleted"}
