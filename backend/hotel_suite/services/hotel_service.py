"""
Hotel service
Manages Hotel and Department objects
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func
from hotel_suite.errors import NotFoundError, ConflictError, InvalidRequestError
from hotel_suite.models.ontology import Hotel, Department, Room
from hotel_suite.models.schemas import HotelCreate, HotelUpdate, DepartmentCreate

logger = logging.getLogger(__name__)


class HotelService:
    """Hotel service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Hotels ==============

    def get_hotels(self) -> List[Hotel]:
        return self.db.query(Hotel).order_by(Hotel.name).all()

    def get_hotel(self, hotel_id: int) -> Hotel:
        hotel = self.db.query(Hotel).filter(Hotel.id == hotel_id).first()
        if not hotel:
            raise NotFoundError(f"Hotel {hotel_id} not found")
        return hotel

    def get_hotel_by_name(self, name: str) -> Optional[Hotel]:
        return self.db.query(Hotel).filter(func.lower(Hotel.name) == name.strip().lower()).first()

    def create_hotel(self, data: HotelCreate) -> Hotel:
        """Create a hotel; names are unique"""
        if self.get_hotel_by_name(data.name):
            raise ConflictError(f"Hotel '{data.name}' already exists")

        hotel = Hotel(**data.model_dump())
        self.db.add(hotel)
        self.db.commit()
        self.db.refresh(hotel)
        logger.info(f"Hotel {hotel.id} '{hotel.name}' created")
        return hotel

    def update_hotel(self, hotel_id: int, data: HotelUpdate) -> Hotel:
        hotel = self.get_hotel(hotel_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise InvalidRequestError("No fields to update")
        if 'name' in update_data:
            existing = self.get_hotel_by_name(update_data['name'])
            if existing and existing.id != hotel_id:
                raise ConflictError(f"Hotel '{update_data['name']}' already exists")

        for key, value in update_data.items():
            setattr(hotel, key, value)

        self.db.commit()
        self.db.refresh(hotel)
        logger.info(f"Hotel {hotel_id} updated: {sorted(update_data)}")
        return hotel

    def delete_hotel(self, hotel_id: int) -> None:
        """Delete a hotel that no longer owns departments or rooms"""
        hotel = self.get_hotel(hotel_id)

        dept_count = self.db.query(Department).filter(Department.hotel_id == hotel_id).count()
        room_count = self.db.query(Room).filter(Room.hotel_id == hotel_id).count()
        if dept_count or room_count:
            raise ConflictError(
                f"Hotel still has {dept_count} department(s) and {room_count} room(s)"
            )

        self.db.delete(hotel)
        self.db.commit()
        logger.info(f"Hotel {hotel_id} deleted")

    def get_hotel_lookup(self) -> List[Hotel]:
        """id/name pairs for selection lists"""
        return self.db.query(Hotel.id, Hotel.name).order_by(Hotel.name).all()

    # ============== Departments ==============

    def get_departments(self, hotel_id: int) -> List[Department]:
        self.get_hotel(hotel_id)
        return self.db.query(Department).filter(
            Department.hotel_id == hotel_id
        ).order_by(Department.name).all()

    def get_department(self, department_id: int) -> Department:
        department = self.db.query(Department).filter(Department.id == department_id).first()
        if not department:
            raise NotFoundError(f"Department {department_id} not found")
        return department

    def create_department(self, hotel_id: int, data: DepartmentCreate) -> Department:
        """Create a department; names are unique within a hotel"""
        self.get_hotel(hotel_id)
        existing = self.db.query(Department).filter(
            Department.hotel_id == hotel_id,
            func.lower(Department.name) == data.name.strip().lower()
        ).first()
        if existing:
            raise ConflictError(f"Department '{data.name}' already exists in this hotel")

        department = Department(hotel_id=hotel_id, name=data.name.strip())
        self.db.add(department)
        self.db.commit()
        self.db.refresh(department)
        logger.info(f"Department {department.id} '{department.name}' created in hotel {hotel_id}")
        return department
