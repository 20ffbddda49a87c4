"""
Authentication and authorization
bcrypt password hashes, HS256 bearer tokens, role guards and hotel scoping
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import List, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from hotel_suite.config import settings
from hotel_suite.database import get_db
from hotel_suite.errors import PermissionDeniedError
from hotel_suite.models.ontology import Employee, EmployeeRole

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_password_hash(password: str) -> str:
    """Hash a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(employee_id: int, role: EmployeeRole,
                        hotel_id: Optional[int] = None) -> str:
    """Create a JWT carrying the employee id, role and hotel"""
    expire = datetime.now(UTC) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(employee_id),
        "role": role.value if isinstance(role, EmployeeRole) else str(role),
        "hotel_id": hotel_id,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode a JWT"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Employee:
    """Resolve the employee behind the bearer token"""
    payload = decode_token(credentials.credentials)

    try:
        employee_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    employee = db.query(Employee).filter(Employee.id == employee_id).first()

    if not employee:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is inactive"
        )

    return employee


def require_role(allowed_roles: List[EmployeeRole]):
    """Role guard factory; admins pass every guard"""
    async def role_checker(current_user: Employee = Depends(get_current_user)):
        if current_user.role != EmployeeRole.ADMIN and current_user.role not in allowed_roles:
            logger.warning(f"Employee {current_user.id} ({current_user.role.value}) denied, needs {[r.value for r in allowed_roles]}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user
    return role_checker


require_admin = require_role([EmployeeRole.ADMIN])
require_manager = require_role([EmployeeRole.MANAGER])
require_receptionist = require_role([EmployeeRole.RECEPTIONIST, EmployeeRole.MANAGER])


def ensure_hotel_access(user: Employee, hotel_id: int) -> None:
    """Raise 403 unless the user is an admin or works at the hotel"""
    if user.role == EmployeeRole.ADMIN:
        return
    if user.hotel_id != hotel_id:
        raise PermissionDeniedError("You do not have access to this hotel")


def resolve_hotel_id(user: Employee, hotel_id: Optional[int] = None) -> int:
    """
    Hotel a request operates on: the caller's own hotel, or for admins the
    explicitly requested one
    """
    if user.role == EmployeeRole.ADMIN:
        if hotel_id is None:
            raise PermissionDeniedError("Admin requests must name a hotel_id")
        return hotel_id
    if user.hotel_id is None:
        raise PermissionDeniedError("Employee is not assigned to a hotel")
    if hotel_id is not None and hotel_id != user.hotel_id:
        raise PermissionDeniedError("You do not have access to this hotel")
    return user.hotel_id
