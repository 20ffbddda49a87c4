"""
Staff management routes (manager, own hotel)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee, EmployeeRole, WorkingStatus
from hotel_suite.models.schemas import (
    EmployeeCreate, EmployeeUpdate, StatusUpdate, EmployeeResponse, DepartmentResponse
)
from hotel_suite.services.employee_service import EmployeeService
from hotel_suite.security.auth import require_manager, resolve_hotel_id

router = APIRouter(prefix="/manager/employees", tags=["Employees"])


@router.get("", response_model=List[EmployeeResponse])
def list_employees(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    role: Optional[EmployeeRole] = None,
    status: Optional[WorkingStatus] = None,
    dept_id: Optional[int] = Query(None, gt=0),
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    """Non-manager employees of the hotel"""
    service = EmployeeService(db)
    employees = service.get_staff(
        resolve_hotel_id(current_user, hotel_id),
        name=name, email=email, phone=phone, role=role,
        working_status=status, department_id=dept_id
    )
    return [service.to_response(e) for e in employees]


@router.get("/departments", response_model=List[DepartmentResponse])
def list_departments(
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    return EmployeeService(db).get_hotel_departments(resolve_hotel_id(current_user, hotel_id))


@router.post("", response_model=EmployeeResponse, status_code=201)
def add_employee(
    data: EmployeeCreate,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    """Hire into a department of the hotel"""
    service = EmployeeService(db)
    employee = service.add_staff(resolve_hotel_id(current_user, hotel_id), data)
    return service.to_response(employee)


@router.put("/{emp_id}", response_model=EmployeeResponse)
def update_employee(
    emp_id: int,
    data: EmployeeUpdate,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    service = EmployeeService(db)
    employee = service.update_staff(resolve_hotel_id(current_user, hotel_id), emp_id, data)
    return service.to_response(employee)


@router.patch("/{emp_id}/status", response_model=EmployeeResponse)
def set_employee_status(
    emp_id: int,
    data: StatusUpdate,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    service = EmployeeService(db)
    employee = service.set_staff_status(resolve_hotel_id(current_user, hotel_id), emp_id, data.working_status)
    return service.to_response(employee)


@router.delete("/{emp_id}", response_model=EmployeeResponse)
def deactivate_employee(
    emp_id: int,
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    """Soft delete: the employee is set inactive"""
    service = EmployeeService(db)
    employee = service.deactivate_staff(resolve_hotel_id(current_user, hotel_id), emp_id)
    return service.to_response(employee)
