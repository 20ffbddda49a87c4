"""
Manager administration routes (admin)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    ManagerCreate, EmployeeUpdate, StatusUpdate, EmployeeResponse, HotelLookup
)
from hotel_suite.services.employee_service import EmployeeService
from hotel_suite.services.hotel_service import HotelService
from hotel_suite.security.auth import require_admin

router = APIRouter(prefix="/managers", tags=["Managers"])


@router.get("", response_model=List[EmployeeResponse])
def list_managers(
    hotel_id: Optional[int] = Query(None, gt=0),
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Working managers with their hotel and department"""
    service = EmployeeService(db)
    managers = service.get_managers(hotel_id, name, email, phone)
    return [service.to_response(m) for m in managers]


@router.get("/lookups/hotels", response_model=List[HotelLookup])
def hotel_lookup(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Hotel id/name pairs for manager forms"""
    return [HotelLookup(id=h.id, name=h.name) for h in HotelService(db).get_hotel_lookup()]


@router.post("", response_model=EmployeeResponse, status_code=201)
def create_manager(
    data: ManagerCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    service = EmployeeService(db)
    return service.to_response(service.create_manager(data))


@router.put("/{emp_id}", response_model=EmployeeResponse)
def update_manager(
    emp_id: int,
    data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Update a manager, including a move to another hotel"""
    service = EmployeeService(db)
    return service.to_response(service.update_manager(emp_id, data))


@router.patch("/{emp_id}/status", response_model=EmployeeResponse)
def set_manager_status(
    emp_id: int,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    service = EmployeeService(db)
    return service.to_response(service.set_manager_status(emp_id, data.working_status))
