"""
Dashboard routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import ManagerDashboard, ReceptionistDashboard
from hotel_suite.services.dashboard_service import DashboardService
from hotel_suite.security.auth import require_manager, require_receptionist, resolve_hotel_id

router = APIRouter(tags=["Dashboards"])


@router.get("/manager/dashboard", response_model=ManagerDashboard)
def manager_dashboard(
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_manager)
):
    """Revenue, occupancy, stock alerts and recent activity"""
    return DashboardService(db).manager_dashboard(resolve_hotel_id(current_user, hotel_id))


@router.get("/receptionist/dashboard", response_model=ReceptionistDashboard)
def receptionist_dashboard(
    hotel_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_receptionist)
):
    """Arrivals, departures and free rooms for today"""
    return DashboardService(db).receptionist_dashboard(resolve_hotel_id(current_user, hotel_id))
