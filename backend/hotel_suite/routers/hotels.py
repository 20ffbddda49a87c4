"""
Hotel administration routes (admin)
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    HotelCreate, HotelUpdate, HotelResponse, DepartmentCreate, DepartmentResponse
)
from hotel_suite.services.hotel_service import HotelService
from hotel_suite.security.auth import require_admin

router = APIRouter(prefix="/admin/hotels", tags=["Hotels"])


@router.get("", response_model=List[HotelResponse])
def list_hotels(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """All hotels ordered by name"""
    return HotelService(db).get_hotels()


@router.post("", response_model=HotelResponse, status_code=201)
def create_hotel(
    data: HotelCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return HotelService(db).create_hotel(data)


@router.get("/{hotel_id}", response_model=HotelResponse)
def get_hotel(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return HotelService(db).get_hotel(hotel_id)


@router.put("/{hotel_id}", response_model=HotelResponse)
def update_hotel(
    hotel_id: int,
    data: HotelUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return HotelService(db).update_hotel(hotel_id, data)


@router.delete("/{hotel_id}")
def delete_hotel(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Delete a hotel without departments or rooms"""
    HotelService(db).delete_hotel(hotel_id)
    return {"message": "Hotel deleted"}


# ============== Departments ==============

@router.get("/{hotel_id}/departments", response_model=List[DepartmentResponse])
def list_departments(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return HotelService(db).get_departments(hotel_id)


@router.post("/{hotel_id}/departments", response_model=DepartmentResponse, status_code=201)
def create_department(
    hotel_id: int,
    data: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return HotelService(db).create_department(hotel_id, data)
