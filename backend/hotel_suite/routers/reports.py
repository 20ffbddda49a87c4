"""
Admin reporting routes
/reports: cost and revenue breakdowns for a date range
/expenses: yearly views and the maintenance ledger of any hotel
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.config import settings
from hotel_suite.database import get_db
from hotel_suite.models.ontology import Employee
from hotel_suite.models.schemas import (
    FinancialSummary, MonthlyAmount, DepartmentSalary, YearlySummary, YearlyRevenue,
    AdminMaintenanceEntryCreate, MaintenanceEntryCreate, MaintenanceEntryResponse
)
from hotel_suite.services.finance_service import FinanceService, check_year
from hotel_suite.security.auth import require_admin

router = APIRouter(prefix="/reports", tags=["Reports"])
expenses_router = APIRouter(prefix="/expenses", tags=["Expenses"])


# ============== Range reports ==============

@router.get("/inventory/{hotel_id}", response_model=List[MonthlyAmount])
def inventory_report(
    hotel_id: int,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Inventory cost by month"""
    return FinanceService(db).inventory_cost_by_month(hotel_id, start, end)


@router.get("/maintenance/{hotel_id}", response_model=List[MonthlyAmount])
def maintenance_report(
    hotel_id: int,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Maintenance cost by month"""
    return FinanceService(db).maintenance_cost_by_month(hotel_id, start, end)


@router.get("/salaries/{hotel_id}", response_model=List[DepartmentSalary])
def salary_report(
    hotel_id: int,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Estimated salary cost by department"""
    return FinanceService(db).salary_by_department(hotel_id, start, end)


@router.get("/revenue/{hotel_id}", response_model=List[MonthlyAmount])
def revenue_report(
    hotel_id: int,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Revenue by month"""
    return FinanceService(db).revenue_by_month(hotel_id, start, end)


@router.get("/financial-summary/{hotel_id}", response_model=FinancialSummary)
def summary_report(
    hotel_id: int,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return FinanceService(db).financial_summary(hotel_id, start, end)


# ============== Yearly views ==============

@expenses_router.get("/summary/{hotel_id}", response_model=YearlySummary)
def yearly_summary(
    hotel_id: int,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Employee cost, revenue and maintenance for a year"""
    return FinanceService(db).yearly_summary(hotel_id, check_year(year))


@expenses_router.get("/revenue-yearly/{hotel_id}", response_model=List[YearlyRevenue])
def revenue_yearly(
    hotel_id: int,
    years: int = Query(settings.DEFAULT_REVENUE_YEARS, ge=1, le=20),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return FinanceService(db).revenue_by_year(hotel_id, years)


@expenses_router.get("/revenue-monthly/{hotel_id}", response_model=List[MonthlyAmount])
def revenue_monthly(
    hotel_id: int,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return FinanceService(db).revenue_months(hotel_id, check_year(year))


@expenses_router.get("/maintenance-ledger", response_model=List[MaintenanceEntryResponse])
def list_maintenance(
    hotel_id: int = Query(..., gt=0),
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    return FinanceService(db).get_maintenance_entries(hotel_id, start, end)


@expenses_router.post("/maintenance-ledger", response_model=MaintenanceEntryResponse, status_code=201)
def add_maintenance(
    data: AdminMaintenanceEntryCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    entry = MaintenanceEntryCreate(**data.model_dump(exclude={"hotel_id"}))
    return FinanceService(db).add_maintenance_entry(data.hotel_id, entry)
