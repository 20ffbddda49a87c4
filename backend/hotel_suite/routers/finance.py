"""
Manager financial routes (own hotel)
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    FinancialSummary, MonthlyAmount, DepartmentSalary,
    MaintenanceEntryCreate, MaintenanceEntryResponse
)
from hotel_suite.services.finance_service import FinanceService, check_year
from hotel_suite.security.auth import require_manager, resolve_hotel_id

router = APIRouter(prefix="/manager/financials", tags=["Financials"])


def _hotel(hotel_id: Optional[int] = Query(None, gt=0),
           current_user: Employee = Depends(require_manager)) -> int:
    return resolve_hotel_id(current_user, hotel_id)


@router.get("/summary", response_model=FinancialSummary)
def financial_summary(
    start: date,
    end: date,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Revenue against inventory, maintenance and salary cost for [start, end]"""
    return FinanceService(db).financial_summary(hotel_id, start, end)


@router.get("/revenue-monthly", response_model=List[MonthlyAmount])
def revenue_monthly(
    year: Optional[int] = None,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Twelve monthly revenue figures for the year"""
    return FinanceService(db).revenue_months(hotel_id, check_year(year))


@router.get("/salaries", response_model=List[DepartmentSalary])
def salaries(
    start: date,
    end: date,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    return FinanceService(db).salary_by_department(hotel_id, start, end)


@router.get("/maintenance-ledger", response_model=List[MaintenanceEntryResponse])
def list_maintenance(
    start: Optional[date] = None,
    end: Optional[date] = None,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    return FinanceService(db).get_maintenance_entries(hotel_id, start, end)


@router.post("/maintenance-ledger", response_model=MaintenanceEntryResponse, status_code=201)
def add_maintenance(
    data: MaintenanceEntryCreate,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Record a bill or maintenance expense"""
    return FinanceService(db).add_maintenance_entry(hotel_id, data)
