"""
Dashboard service
Summary statistics for the manager and receptionist landing pages
"""
from typing import List, Optional
from datetime import date, datetime, timedelta
from decimal import Decimal
import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from hotel_suite.config import settings
from hotel_suite.models.ontology import Room, Booking, BookingStatus, Transaction
from hotel_suite.services.booking_service import overlapping
from hotel_suite.services.finance_service import to_money
from hotel_suite.services.inventory_service import InventoryService, month_bounds

logger = logging.getLogger(__name__)


class DashboardService:
    """Dashboard service"""

    def __init__(self, db: Session):
        self.db = db

    def _total_rooms(self, hotel_id: int) -> int:
        return self.db.query(Room).filter(Room.hotel_id == hotel_id).count()

    def _occupied_tonight(self, hotel_id: int, today: date):
        """Confirmed bookings holding a room for the night starting today"""
        return self.db.query(Booking).filter(
            Booking.hotel_id == hotel_id,
            *overlapping(today, today + timedelta(days=1))
        )

    def _recent_activity(self, hotel_id: int, limit: int) -> List[dict]:
        bookings = self.db.query(Booking).options(
            joinedload(Booking.guest), joinedload(Booking.room)
        ).filter(Booking.hotel_id == hotel_id).order_by(
            func.coalesce(Booking.checked_out_at, Booking.created_at).desc()
        ).limit(limit).all()

        activity = []
        for booking in bookings:
            checked_out = booking.status == BookingStatus.CHECKED_OUT and booking.checked_out_at
            activity.append({
                "kind": "checkout" if checked_out else "booking",
                "booking_id": booking.id,
                "guest_name": f"{booking.guest.first_name} {booking.guest.last_name}",
                "room_number": booking.room.room_number,
                "timestamp": booking.checked_out_at if checked_out else booking.created_at,
            })
        return activity

    def manager_dashboard(self, hotel_id: int, today: Optional[date] = None) -> dict:
        today = today or date.today()
        month_start, _ = month_bounds(today)

        month_revenue = self.db.query(
            func.coalesce(func.sum(Transaction.amount_paid), 0)
        ).join(Booking, Transaction.booking_id == Booking.id).filter(
            Booking.hotel_id == hotel_id,
            Transaction.payment_date >= datetime.combine(month_start, datetime.min.time()),
            Transaction.payment_date < datetime.combine(today + timedelta(days=1), datetime.min.time())
        ).scalar()

        total_rooms = self._total_rooms(hotel_id)
        occupied = self._occupied_tonight(hotel_id, today).join(
            Room, Booking.room_id == Room.id
        ).with_entities(Room.base_price).all()
        occupied_rooms = len(occupied)
        room_revenue = sum((Decimal(row.base_price) for row in occupied), Decimal("0"))

        return {
            "hotel_id": hotel_id,
            "as_of": today,
            "month_revenue": to_money(month_revenue),
            "total_rooms": total_rooms,
            "occupied_rooms": occupied_rooms,
            "occupancy_rate": round(occupied_rooms / total_rooms * 100, 1) if total_rooms else 0.0,
            "average_daily_rate": to_money(room_revenue / occupied_rooms) if occupied_rooms else to_money(0),
            "low_stock_items": InventoryService(self.db).get_low_stock(hotel_id),
            "recent_activity": self._recent_activity(hotel_id, settings.DASHBOARD_ACTIVITY_LIMIT),
        }

    def receptionist_dashboard(self, hotel_id: int, today: Optional[date] = None) -> dict:
        today = today or date.today()
        confirmed = self.db.query(Booking).filter(
            Booking.hotel_id == hotel_id,
            Booking.status == BookingStatus.CONFIRMED
        )
        total_rooms = self._total_rooms(hotel_id)
        occupied_rooms = self._occupied_tonight(hotel_id, today).with_entities(
            Booking.room_id
        ).distinct().count()

        return {
            "hotel_id": hotel_id,
            "as_of": today,
            "total_rooms": total_rooms,
            "arrivals_today": confirmed.filter(Booking.check_in_date == today).count(),
            "departures_today": confirmed.filter(Booking.check_out_date == today).count(),
            "in_house": confirmed.filter(
                Booking.check_in_date <= today, Booking.check_out_date >= today
            ).count(),
            "free_rooms_tonight": max(total_rooms - occupied_rooms, 0),
        }
