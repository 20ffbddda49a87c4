"""
Employee service
Authentication, manager administration (admin) and staff administration (manager)
"""
from typing import List, Optional
from datetime import date
import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from hotel_suite.errors import (
    NotFoundError, ConflictError, InvalidRequestError, PermissionDeniedError
)
from hotel_suite.models.ontology import (
    Employee, EmployeeRole, WorkingStatus, Department, Hotel,
    STAFF_ROLES, SYSTEM_ACCOUNT_NAME
)
from hotel_suite.models.schemas import (
    ManagerCreate, EmployeeCreate, EmployeeUpdate
)
from hotel_suite.security.auth import get_password_hash, verify_password, create_access_token

logger = logging.getLogger(__name__)


def _name_filter(name: str):
    pattern = f"%{name.strip().lower()}%"
    return func.lower(Employee.first_name + " " + Employee.last_name).like(pattern)


class EmployeeService:
    """Employee service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Lookups ==============

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def get_employee_by_email(self, email: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(func.lower(Employee.email) == email.strip().lower()).first()

    def _ensure_email_free(self, email: str, employee_id: Optional[int] = None) -> None:
        existing = self.get_employee_by_email(email)
        if existing and existing.id != employee_id:
            raise ConflictError(f"Email '{email}' is already in use")

    def _get_department(self, department_id: int) -> Department:
        department = self.db.query(Department).filter(Department.id == department_id).first()
        if not department:
            raise NotFoundError(f"Department {department_id} not found")
        return department

    # ============== Authentication ==============

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """Verify credentials and issue a token; None on any failure"""
        employee = self.get_employee_by_email(email)
        if not employee or not employee.password_hash:
            logger.warning(f"Login failed for {email}: unknown account")
            return None
        if not employee.is_active:
            logger.warning(f"Login failed for {email}: account inactive")
            return None
        if not verify_password(password, employee.password_hash):
            logger.warning(f"Login failed for {email}: wrong password")
            return None

        token = create_access_token(employee.id, employee.role, employee.hotel_id)
        logger.info(f"Employee {employee.id} logged in")
        return {
            "access_token": token,
            "token_type": "bearer",
            "employee": employee,
        }

    def change_password(self, employee: Employee, old_password: str, new_password: str) -> None:
        if not employee.password_hash or not verify_password(old_password, employee.password_hash):
            raise InvalidRequestError("Old password is incorrect")
        employee.password_hash = get_password_hash(new_password)
        self.db.commit()
        logger.info(f"Employee {employee.id} changed password")

    # ============== Managers (admin) ==============

    def get_managers(self, hotel_id: Optional[int] = None, name: Optional[str] = None,
                     email: Optional[str] = None, phone: Optional[str] = None) -> List[Employee]:
        """Working managers with their department and hotel"""
        query = self.db.query(Employee).join(
            Department, Employee.department_id == Department.id
        ).join(
            Hotel, Department.hotel_id == Hotel.id
        ).options(
            joinedload(Employee.department).joinedload(Department.hotel)
        ).filter(
            Employee.role == EmployeeRole.MANAGER,
            Employee.working_status == WorkingStatus.WORKING,
            Employee.first_name != SYSTEM_ACCOUNT_NAME
        )

        if hotel_id is not None:
            query = query.filter(Department.hotel_id == hotel_id)
        if name:
            query = query.filter(_name_filter(name))
        if email:
            query = query.filter(func.lower(Employee.email).like(f"%{email.strip().lower()}%"))
        if phone:
            query = query.filter(Employee.phone.like(f"%{phone.strip()}%"))

        return query.order_by(Hotel.name, Employee.last_name, Employee.first_name).all()

    def get_manager(self, employee_id: int) -> Employee:
        employee = self.get_employee(employee_id)
        if not employee or employee.role != EmployeeRole.MANAGER:
            raise NotFoundError(f"Manager {employee_id} not found")
        return employee

    def create_manager(self, data: ManagerCreate) -> Employee:
        self._get_department(data.department_id)
        self._ensure_email_free(data.email)

        payload = data.model_dump(exclude={"password"})
        employee = Employee(
            **payload,
            role=EmployeeRole.MANAGER,
            working_status=WorkingStatus.WORKING,
            password_hash=get_password_hash(data.password) if data.password else None,
        )
        if employee.hired_date is None:
            employee.hired_date = date.today()

        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        logger.info(f"Manager {employee.id} created in department {employee.department_id}")
        return employee

    def update_manager(self, employee_id: int, data: EmployeeUpdate) -> Employee:
        """Update a manager, possibly moving them to another department or hotel"""
        employee = self.get_manager(employee_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise InvalidRequestError("No fields to update")
        if 'role' in update_data and update_data['role'] != EmployeeRole.MANAGER:
            raise InvalidRequestError("Manager role cannot be changed here")
        update_data.pop('role', None)
        if 'department_id' in update_data:
            self._get_department(update_data['department_id'])
        if 'email' in update_data:
            self._ensure_email_free(update_data['email'], employee_id)

        self._apply_update(employee, update_data)
        self.db.commit()
        self.db.refresh(employee)
        logger.info(f"Manager {employee_id} updated: {sorted(update_data)}")
        return employee

    def set_manager_status(self, employee_id: int, working_status: WorkingStatus) -> Employee:
        employee = self.get_manager(employee_id)
        self._apply_status(employee, working_status)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    # ============== Staff (manager, own hotel) ==============

    def get_staff(self, hotel_id: int, name: Optional[str] = None, email: Optional[str] = None,
                  phone: Optional[str] = None, role: Optional[EmployeeRole] = None,
                  working_status: Optional[WorkingStatus] = None,
                  department_id: Optional[int] = None) -> List[Employee]:
        """Non-manager employees of a hotel"""
        query = self.db.query(Employee).join(
            Department, Employee.department_id == Department.id
        ).options(
            joinedload(Employee.department).joinedload(Department.hotel)
        ).filter(
            Department.hotel_id == hotel_id,
            Employee.role.notin_([EmployeeRole.MANAGER, EmployeeRole.ADMIN]),
            Employee.first_name != SYSTEM_ACCOUNT_NAME
        )

        if name:
            query = query.filter(_name_filter(name))
        if email:
            query = query.filter(func.lower(Employee.email).like(f"%{email.strip().lower()}%"))
        if phone:
            query = query.filter(Employee.phone.like(f"%{phone.strip()}%"))
        if role is not None:
            query = query.filter(Employee.role == role)
        if working_status is not None:
            query = query.filter(Employee.working_status == working_status)
        if department_id is not None:
            query = query.filter(Employee.department_id == department_id)

        return query.order_by(Employee.last_name, Employee.first_name).all()

    def get_hotel_departments(self, hotel_id: int) -> List[Department]:
        return self.db.query(Department).filter(
            Department.hotel_id == hotel_id
        ).order_by(Department.name).all()

    def _get_staff_member(self, hotel_id: int, employee_id: int) -> Employee:
        employee = self.get_employee(employee_id)
        if not employee or employee.hotel_id != hotel_id or employee.role in (EmployeeRole.MANAGER, EmployeeRole.ADMIN):
            raise NotFoundError(f"Employee {employee_id} not found in this hotel")
        return employee

    def _get_hotel_department(self, hotel_id: int, department_id: int) -> Department:
        department = self._get_department(department_id)
        if department.hotel_id != hotel_id:
            raise PermissionDeniedError("Department does not belong to your hotel")
        return department

    def add_staff(self, hotel_id: int, data: EmployeeCreate) -> Employee:
        """Add an employee to a department of the manager's hotel"""
        try:
            self._get_hotel_department(hotel_id, data.department_id)
            if data.role not in STAFF_ROLES:
                raise InvalidRequestError(
                    f"Role must be one of {', '.join(r.value for r in STAFF_ROLES)}"
                )
            self._ensure_email_free(data.email)

            payload = data.model_dump(exclude={"password"})
            employee = Employee(
                **payload,
                working_status=WorkingStatus.WORKING,
                password_hash=get_password_hash(data.password) if data.password else None,
            )
            if employee.hired_date is None:
                employee.hired_date = date.today()
            self.db.add(employee)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(employee)
        logger.info(f"Employee {employee.id} ({employee.role.value}) added to hotel {hotel_id}")
        return employee

    def update_staff(self, hotel_id: int, employee_id: int, data: EmployeeUpdate) -> Employee:
        """Update an employee of the manager's hotel; roles are fixed"""
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise InvalidRequestError("No fields to update")

        try:
            employee = self.db.query(Employee).filter(Employee.id == employee_id).with_for_update().first()
            if not employee:
                raise NotFoundError(f"Employee {employee_id} not found")
            if employee.hotel_id != hotel_id or employee.role in (EmployeeRole.MANAGER, EmployeeRole.ADMIN):
                raise PermissionDeniedError("You can only update non-manager employees of your hotel")
            if 'role' in update_data and update_data['role'] != employee.role:
                raise InvalidRequestError("Employee role cannot be changed")
            update_data.pop('role', None)
            if 'department_id' in update_data:
                self._get_hotel_department(hotel_id, update_data['department_id'])
            if 'email' in update_data:
                self._ensure_email_free(update_data['email'], employee_id)

            self._apply_update(employee, update_data)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(employee)
        logger.info(f"Employee {employee_id} updated: {sorted(update_data)}")
        return employee

    def set_staff_status(self, hotel_id: int, employee_id: int, working_status: WorkingStatus) -> Employee:
        employee = self._get_staff_member(hotel_id, employee_id)
        self._apply_status(employee, working_status)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def deactivate_staff(self, hotel_id: int, employee_id: int) -> Employee:
        """Soft delete"""
        return self.set_staff_status(hotel_id, employee_id, WorkingStatus.INACTIVE)

    # ============== Helpers ==============

    def _apply_update(self, employee: Employee, update_data: dict) -> None:
        password = update_data.pop('password', None)
        if password:
            employee.password_hash = get_password_hash(password)
        for key, value in update_data.items():
            setattr(employee, key, value)

    def _apply_status(self, employee: Employee, working_status: WorkingStatus) -> None:
        if employee.working_status == working_status:
            return
        employee.working_status = working_status
        if working_status == WorkingStatus.INACTIVE:
            employee.termination_date = date.today()
        else:
            employee.termination_date = None
        logger.info(f"Employee {employee.id} status -> {working_status.value}")

    def to_response(self, employee: Employee) -> dict:
        department = employee.department
        return {
            "id": employee.id,
            "department_id": employee.department_id,
            "department_name": department.name if department else None,
            "hotel_id": department.hotel_id if department else None,
            "hotel_name": department.hotel.name if department and department.hotel else None,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "email": employee.email,
            "phone": employee.phone,
            "role": employee.role,
            "working_status": employee.working_status,
            "hourly_pay": employee.hourly_pay,
            "salary": employee.salary,
            "hired_date": employee.hired_date,
            "termination_date": employee.termination_date,
            "address": employee.address,
        }
