"""
Authentication routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    LoginRequest, LoginResponse, ChangePasswordRequest, EmployeeProfile
)
from hotel_suite.services.employee_service import EmployeeService
from hotel_suite.security.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Log in with email and password"""
    service = EmployeeService(db)
    result = service.authenticate(data.email, data.password)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )
    return LoginResponse(
        access_token=result["access_token"],
        token_type=result["token_type"],
        employee=EmployeeProfile.model_validate(result["employee"]),
    )


@router.get("/me", response_model=EmployeeProfile)
def get_current_user_info(current_user: Employee = Depends(get_current_user)):
    """Profile of the logged-in employee"""
    return EmployeeProfile.model_validate(current_user)


@router.post("/change-password")
def change_password(
    data: ChangePasswordRequest,
    current_user: Employee = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change own password"""
    service = EmployeeService(db)
    service.change_password(current_user, data.old_password, data.new_password)
    return {"message": "Password changed"}
