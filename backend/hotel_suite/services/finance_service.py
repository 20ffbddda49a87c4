"""
Finance service - expenses, revenue and the maintenance ledger

Date ranges are inclusive of both ends. Timestamp columns are compared
against [start 00:00, end + 1 day 00:00).

Salary cost is an estimate: employees carry either a monthly salary or an
hourly rate, and hourly staff are assumed to work 40 hours a week,
52 weeks a year.
"""
from typing import List, Optional
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func, extract
from hotel_suite.errors import InvalidRequestError, NotFoundError
from hotel_suite.models.ontology import (
    Hotel, Department, Employee, Booking, Transaction, InventoryTransaction,
    InventoryTransactionStatus, MaintenanceLedgerEntry, COST_TRANSACTION_TYPES
)
from hotel_suite.models.schemas import MaintenanceEntryCreate

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
HOURS_PER_YEAR = Decimal(40 * 52)


def to_money(value) -> Decimal:
    if value is None:
        return ZERO.quantize(CENT)
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _day_start(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time())


def _month_label(year, month) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def months_spanned(start: date, end: date) -> int:
    """Calendar months touched by [start, end]"""
    return (end.year - start.year) * 12 + end.month - start.month + 1


def monthly_cost(employee: Employee) -> Decimal:
    if employee.salary is not None:
        return Decimal(employee.salary)
    if employee.hourly_pay is not None:
        return Decimal(employee.hourly_pay) * HOURS_PER_YEAR / 12
    return ZERO


def annual_cost(employee: Employee) -> Decimal:
    if employee.salary is not None:
        return Decimal(employee.salary) * 12
    if employee.hourly_pay is not None:
        return Decimal(employee.hourly_pay) * HOURS_PER_YEAR
    return ZERO


def check_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidRequestError("End date must not be before start date")


def check_year(year: Optional[int], today: Optional[date] = None) -> int:
    """Default to the current year; accept 2000 up to next year"""
    current = (today or date.today()).year
    if year is None:
        return current
    if year < 2000 or year > current + 1:
        raise InvalidRequestError(f"Year must be between 2000 and {current + 1}")
    return year


class FinanceService:
    """Finance service"""

    def __init__(self, db: Session):
        self.db = db

    def _ensure_hotel(self, hotel_id: int) -> None:
        if not self.db.query(Hotel.id).filter(Hotel.id == hotel_id).first():
            raise NotFoundError(f"Hotel {hotel_id} not found")

    # ============== Maintenance ledger ==============

    def add_maintenance_entry(self, hotel_id: int, data: MaintenanceEntryCreate) -> MaintenanceLedgerEntry:
        self._ensure_hotel(hotel_id)
        entry = MaintenanceLedgerEntry(
            hotel_id=hotel_id,
            service_type=data.service_type.strip(),
            amount=data.amount,
            ledger_date=data.ledger_date,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"Maintenance entry {entry.id} ({entry.service_type}, {entry.amount}) added for hotel {hotel_id}")
        return entry

    def get_maintenance_entries(self, hotel_id: int, start: Optional[date] = None,
                                end: Optional[date] = None) -> List[MaintenanceLedgerEntry]:
        """Ledger rows, newest first"""
        self._ensure_hotel(hotel_id)
        query = self.db.query(MaintenanceLedgerEntry).filter(MaintenanceLedgerEntry.hotel_id == hotel_id)
        if start is not None and end is not None:
            check_range(start, end)
        if start is not None:
            query = query.filter(MaintenanceLedgerEntry.ledger_date >= start)
        if end is not None:
            query = query.filter(MaintenanceLedgerEntry.ledger_date <= end)
        return query.order_by(
            MaintenanceLedgerEntry.ledger_date.desc(), MaintenanceLedgerEntry.id.desc()
        ).all()

    # ============== Building blocks ==============

    def _revenue_query(self, hotel_id: int, start: date, end: date):
        return self.db.query(Transaction).join(
            Booking, Transaction.booking_id == Booking.id
        ).filter(
            Booking.hotel_id == hotel_id,
            Transaction.payment_date >= _day_start(start),
            Transaction.payment_date < _day_start(end + timedelta(days=1))
        )

    def _inventory_cost_query(self, hotel_id: int, start: date, end: date):
        return self.db.query(InventoryTransaction).filter(
            InventoryTransaction.hotel_id == hotel_id,
            InventoryTransaction.transaction_type.in_(COST_TRANSACTION_TYPES),
            InventoryTransaction.status == InventoryTransactionStatus.COMPLETED,
            InventoryTransaction.transaction_date >= _day_start(start),
            InventoryTransaction.transaction_date < _day_start(end + timedelta(days=1))
        )

    def _maintenance_query(self, hotel_id: int, start: date, end: date):
        return self.db.query(MaintenanceLedgerEntry).filter(
            MaintenanceLedgerEntry.hotel_id == hotel_id,
            MaintenanceLedgerEntry.ledger_date >= start,
            MaintenanceLedgerEntry.ledger_date <= end
        )

    def _employees_active_between(self, hotel_id: int, start: date, end: date) -> List[Employee]:
        """Hired by the end and not terminated before the start"""
        return self.db.query(Employee).join(
            Department, Employee.department_id == Department.id
        ).filter(
            Department.hotel_id == hotel_id,
            Employee.hired_date <= end,
            (Employee.termination_date.is_(None)) | (Employee.termination_date >= start)
        ).all()

    @staticmethod
    def _by_month(rows) -> List[dict]:
        return [
            {"month": _month_label(year, month), "amount": to_money(amount)}
            for year, month, amount in rows
        ]

    # ============== Range reports ==============

    def inventory_cost_by_month(self, hotel_id: int, start: date, end: date) -> List[dict]:
        check_range(start, end)
        self._ensure_hotel(hotel_id)
        year = extract('year', InventoryTransaction.transaction_date)
        month = extract('month', InventoryTransaction.transaction_date)
        rows = self._inventory_cost_query(hotel_id, start, end).with_entities(
            year, month,
            func.coalesce(func.sum(InventoryTransaction.quantity * InventoryTransaction.unit_price), 0)
        ).group_by(year, month).order_by(year, month).all()
        return self._by_month(rows)

    def maintenance_cost_by_month(self, hotel_id: int, start: date, end: date) -> List[dict]:
        check_range(start, end)
        self._ensure_hotel(hotel_id)
        year = extract('year', MaintenanceLedgerEntry.ledger_date)
        month = extract('month', MaintenanceLedgerEntry.ledger_date)
        rows = self._maintenance_query(hotel_id, start, end).with_entities(
            year, month, func.coalesce(func.sum(MaintenanceLedgerEntry.amount), 0)
        ).group_by(year, month).order_by(year, month).all()
        return self._by_month(rows)

    def revenue_by_month(self, hotel_id: int, start: date, end: date) -> List[dict]:
        check_range(start, end)
        self._ensure_hotel(hotel_id)
        year = extract('year', Transaction.payment_date)
        month = extract('month', Transaction.payment_date)
        rows = self._revenue_query(hotel_id, start, end).with_entities(
            year, month, func.coalesce(func.sum(Transaction.amount_paid), 0)
        ).group_by(year, month).order_by(year, month).all()
        return self._by_month(rows)

    def salary_by_department(self, hotel_id: int, start: date, end: date) -> List[dict]:
        """Estimated salary cost per department over the months the range touches"""
        check_range(start, end)
        self._ensure_hotel(hotel_id)
        months = months_spanned(start, end)

        departments = {}
        for employee in self._employees_active_between(hotel_id, start, end):
            dept = employee.department
            bucket = departments.setdefault(dept.id, {
                "department_id": dept.id,
                "department_name": dept.name,
                "employee_count": 0,
                "estimated_salary": ZERO,
            })
            bucket["employee_count"] += 1
            bucket["estimated_salary"] += monthly_cost(employee) * months

        result = sorted(departments.values(), key=lambda d: d["department_name"])
        for bucket in result:
            bucket["estimated_salary"] = to_money(bucket["estimated_salary"])
        return result

    def financial_summary(self, hotel_id: int, start: date, end: date) -> dict:
        check_range(start, end)
        self._ensure_hotel(hotel_id)
        revenue = self._revenue_query(hotel_id, start, end).with_entities(
            func.coalesce(func.sum(Transaction.amount_paid), 0)
        ).scalar()
        inventory_cost = self._inventory_cost_query(hotel_id, start, end).with_entities(
            func.coalesce(func.sum(InventoryTransaction.quantity * InventoryTransaction.unit_price), 0)
        ).scalar()
        maintenance_cost = self._maintenance_query(hotel_id, start, end).with_entities(
            func.coalesce(func.sum(MaintenanceLedgerEntry.amount), 0)
        ).scalar()
        salary_cost = sum(
            (d["estimated_salary"] for d in self.salary_by_department(hotel_id, start, end)), ZERO
        )

        revenue, inventory_cost, maintenance_cost = (
            to_money(revenue), to_money(inventory_cost), to_money(maintenance_cost)
        )
        total_expenses = inventory_cost + maintenance_cost + to_money(salary_cost)
        return {
            "hotel_id": hotel_id,
            "start": start,
            "end": end,
            "revenue": revenue,
            "inventory_cost": inventory_cost,
            "maintenance_cost": maintenance_cost,
            "salary_cost": to_money(salary_cost),
            "total_expenses": total_expenses,
            "net_result": revenue - total_expenses,
        }

    # ============== Yearly views ==============

    def yearly_summary(self, hotel_id: int, year: int) -> dict:
        """Estimated annual employee cost, revenue and maintenance for a year"""
        self._ensure_hotel(hotel_id)
        start, end = date(year, 1, 1), date(year, 12, 31)
        employee_cost = sum(
            (annual_cost(e) for e in self._employees_active_between(hotel_id, start, end)), ZERO
        )
        revenue = self._revenue_query(hotel_id, start, end).with_entities(
            func.coalesce(func.sum(Transaction.amount_paid), 0)
        ).scalar()
        maintenance_cost = self._maintenance_query(hotel_id, start, end).with_entities(
            func.coalesce(func.sum(MaintenanceLedgerEntry.amount), 0)
        ).scalar()

        employee_cost, revenue, maintenance_cost = (
            to_money(employee_cost), to_money(revenue), to_money(maintenance_cost)
        )
        total_expenses = employee_cost + maintenance_cost
        return {
            "hotel_id": hotel_id,
            "year": year,
            "employee_cost": employee_cost,
            "revenue": revenue,
            "maintenance_cost": maintenance_cost,
            "total_expenses": total_expenses,
            "profit_loss": revenue - total_expenses,
        }

    def revenue_by_year(self, hotel_id: int, years: int, today: Optional[date] = None) -> List[dict]:
        """Revenue for each of the last `years` years, oldest first, including empty years"""
        self._ensure_hotel(hotel_id)
        current = (today or date.today()).year
        first = current - years + 1
        year_col = extract('year', Transaction.payment_date)
        rows = self._revenue_query(hotel_id, date(first, 1, 1), date(current, 12, 31)).with_entities(
            year_col, func.coalesce(func.sum(Transaction.amount_paid), 0)
        ).group_by(year_col).all()
        totals = {int(y): amount for y, amount in rows}
        return [{"year": y, "revenue": to_money(totals.get(y))} for y in range(first, current + 1)]

    def revenue_months(self, hotel_id: int, year: int) -> List[dict]:
        """Twelve monthly revenue entries for a year, zero-filled"""
        totals = {
            entry["month"]: entry["amount"]
            for entry in self.revenue_by_month(hotel_id, date(year, 1, 1), date(year, 12, 31))
        }
        labels = [_month_label(year, m) for m in range(1, 13)]
        return [{"month": label, "amount": totals.get(label, to_money(0))} for label in labels]
