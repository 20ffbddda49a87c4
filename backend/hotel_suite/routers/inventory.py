"""
Inventory routes (manager, own hotel)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_suite.database import get_db
from hotel_suite.models.ontology import (
    Employee, InventoryTransactionStatus, InventoryTransactionType
)
from hotel_suite.models.schemas import (
    InventoryItemCreate, InventoryItemUpdate, InventoryItemResponse,
    StockAdjustment, OrderCreate, InventoryTransactionResponse,
    TransactionSummaryResponse
)
from hotel_suite.services.inventory_service import InventoryService
from hotel_suite.security.auth import require_manager, resolve_hotel_id

router = APIRouter(prefix="/manager/inventory", tags=["Inventory"])


def _hotel(hotel_id: Optional[int] = Query(None, gt=0),
           current_user: Employee = Depends(require_manager)) -> int:
    return resolve_hotel_id(current_user, hotel_id)


@router.get("", response_model=List[InventoryItemResponse])
def list_items(hotel_id: int = Depends(_hotel), db: Session = Depends(get_db)):
    """Items ordered by name"""
    return InventoryService(db).get_items(hotel_id)


@router.get("/low-stock", response_model=List[InventoryItemResponse])
def low_stock(hotel_id: int = Depends(_hotel), db: Session = Depends(get_db)):
    """Items at or below their low-stock threshold"""
    return InventoryService(db).get_low_stock(hotel_id)


@router.post("/items", response_model=InventoryItemResponse, status_code=201)
def create_item(
    data: InventoryItemCreate,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    return InventoryService(db).create_item(hotel_id, data)


@router.put("/items/{item_id}", response_model=InventoryItemResponse)
def update_item(
    item_id: int,
    data: InventoryItemUpdate,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    return InventoryService(db).update_item(hotel_id, item_id, data)


@router.patch("/items/{item_id}/adjust", response_model=InventoryItemResponse)
def adjust_item(
    item_id: int,
    data: StockAdjustment,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Apply a stock adjustment and log it"""
    return InventoryService(db).adjust_stock(hotel_id, item_id, data)


@router.post("/orders", response_model=InventoryTransactionResponse, status_code=201)
def place_order(
    data: OrderCreate,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    service = InventoryService(db)
    return service.to_transaction_response(service.place_order(hotel_id, data))


@router.post("/orders/{transaction_id}/receive", response_model=InventoryTransactionResponse)
def receive_order(
    transaction_id: int,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Receive a pending order into stock"""
    service = InventoryService(db)
    return service.to_transaction_response(service.receive_order(hotel_id, transaction_id))


@router.post("/orders/{transaction_id}/cancel", response_model=InventoryTransactionResponse)
def cancel_order(
    transaction_id: int,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    service = InventoryService(db)
    return service.to_transaction_response(service.cancel_order(hotel_id, transaction_id))


@router.get("/transactions", response_model=List[InventoryTransactionResponse])
def list_transactions(
    status: Optional[InventoryTransactionStatus] = None,
    transaction_type: Optional[InventoryTransactionType] = None,
    hotel_id: int = Depends(_hotel),
    db: Session = Depends(get_db)
):
    """Inventory ledger, newest first"""
    service = InventoryService(db)
    rows = service.get_transactions(hotel_id, status, transaction_type)
    return [service.to_transaction_response(tx, item_name) for tx, item_name in rows]


@router.get("/transaction-summary", response_model=TransactionSummaryResponse)
def transaction_summary(hotel_id: int = Depends(_hotel), db: Session = Depends(get_db)):
    """This month's ledger grouped by status and type, with subtotals"""
    return InventoryService(db).get_transaction_summary(hotel_id)
