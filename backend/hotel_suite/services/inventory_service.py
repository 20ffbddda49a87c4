"""
Inventory service
Items, stock adjustments and purchase orders; every stock movement is
written to the inventory ledger
"""
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func
from hotel_suite.errors import NotFoundError, ConflictError, InvalidRequestError
from hotel_suite.models.ontology import (
    InventoryItem, InventoryTransaction, InventoryTransactionType,
    InventoryTransactionStatus
)
from hotel_suite.models.schemas import (
    InventoryItemCreate, InventoryItemUpdate, StockAdjustment, OrderCreate
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def month_bounds(day: date):
    """First day of day's month and first day of the next month"""
    start = day.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


class InventoryService:
    """Inventory service, scoped to one hotel"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Items ==============

    def get_items(self, hotel_id: int) -> List[InventoryItem]:
        return self.db.query(InventoryItem).filter(
            InventoryItem.hotel_id == hotel_id
        ).order_by(InventoryItem.item_name).all()

    def get_item(self, hotel_id: int, item_id: int, for_update: bool = False) -> InventoryItem:
        query = self.db.query(InventoryItem).filter(
            InventoryItem.id == item_id,
            InventoryItem.hotel_id == hotel_id
        )
        if for_update:
            query = query.with_for_update()
        item = query.first()
        if not item:
            raise NotFoundError(f"Inventory item {item_id} not found")
        return item

    def _find_by_name(self, hotel_id: int, item_name: str) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(
            InventoryItem.hotel_id == hotel_id,
            func.lower(InventoryItem.item_name) == item_name.strip().lower()
        ).first()

    def create_item(self, hotel_id: int, data: InventoryItemCreate) -> InventoryItem:
        """New items start with zero stock"""
        if self._find_by_name(hotel_id, data.item_name):
            raise ConflictError(f"Item '{data.item_name}' already exists")

        item = InventoryItem(hotel_id=hotel_id, quantity=ZERO, **data.model_dump())
        item.item_name = item.item_name.strip()
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item.id} '{item.item_name}' created in hotel {hotel_id}")
        return item

    def update_item(self, hotel_id: int, item_id: int, data: InventoryItemUpdate) -> InventoryItem:
        item = self.get_item(hotel_id, item_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise InvalidRequestError("No fields to update")
        if 'item_name' in update_data:
            existing = self._find_by_name(hotel_id, update_data['item_name'])
            if existing and existing.id != item_id:
                raise ConflictError(f"Item '{update_data['item_name']}' already exists")

        for key, value in update_data.items():
            setattr(item, key, value)

        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item_id} updated: {sorted(update_data)}")
        return item

    def get_low_stock(self, hotel_id: int) -> List[InventoryItem]:
        return self.db.query(InventoryItem).filter(
            InventoryItem.hotel_id == hotel_id,
            InventoryItem.low_stock_threshold.isnot(None),
            InventoryItem.quantity <= InventoryItem.low_stock_threshold
        ).order_by(InventoryItem.item_name).all()

    # ============== Stock movements ==============

    def adjust_stock(self, hotel_id: int, item_id: int, data: StockAdjustment) -> InventoryItem:
        """Lock the item, apply the change and log a completed adjustment"""
        try:
            item = self.get_item(hotel_id, item_id, for_update=True)
            new_quantity = Decimal(item.quantity) + data.quantity_change
            if new_quantity < 0:
                raise InvalidRequestError(
                    f"Adjustment would leave '{item.item_name}' at {new_quantity}"
                )

            item.quantity = new_quantity
            item.last_updated = datetime.utcnow()
            self.db.add(InventoryTransaction(
                inventory_id=item.id,
                hotel_id=hotel_id,
                transaction_type=data.adjustment_type.transaction_type,
                quantity=data.quantity_change,
                status=InventoryTransactionStatus.COMPLETED,
                reason=data.reason,
                transaction_date=datetime.utcnow(),
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(item)
        logger.info(
            f"Inventory item {item_id} adjusted by {data.quantity_change} "
            f"({data.adjustment_type.value}), now {item.quantity}"
        )
        return item

    def place_order(self, hotel_id: int, data: OrderCreate) -> InventoryTransaction:
        """Pending order; stock changes only when it is received"""
        item = self.get_item(hotel_id, data.inventory_id)
        order = InventoryTransaction(
            inventory_id=item.id,
            hotel_id=hotel_id,
            transaction_type=InventoryTransactionType.ORDER,
            quantity=data.quantity,
            unit_price=data.unit_price,
            status=InventoryTransactionStatus.PENDING,
            reason=data.reason,
            transaction_date=datetime.utcnow(),
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Order {order.id} placed for {data.quantity} x item {item.id}")
        return order

    def _get_pending_order(self, hotel_id: int, transaction_id: int) -> InventoryTransaction:
        order = self.db.query(InventoryTransaction).filter(
            InventoryTransaction.id == transaction_id,
            InventoryTransaction.hotel_id == hotel_id,
            InventoryTransaction.transaction_type == InventoryTransactionType.ORDER,
            InventoryTransaction.status == InventoryTransactionStatus.PENDING
        ).with_for_update().first()
        if not order:
            raise NotFoundError(f"Pending order {transaction_id} not found")
        return order

    def receive_order(self, hotel_id: int, transaction_id: int) -> InventoryTransaction:
        """Add the ordered quantity to stock and complete the order"""
        try:
            order = self._get_pending_order(hotel_id, transaction_id)
            item = self.get_item(hotel_id, order.inventory_id, for_update=True)

            item.quantity = Decimal(item.quantity) + Decimal(order.quantity)
            item.last_updated = datetime.utcnow()
            order.status = InventoryTransactionStatus.COMPLETED
            order.receive_date = datetime.utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(order)
        logger.info(f"Order {transaction_id} received into item {order.inventory_id}")
        return order

    def cancel_order(self, hotel_id: int, transaction_id: int) -> InventoryTransaction:
        try:
            order = self._get_pending_order(hotel_id, transaction_id)
            order.status = InventoryTransactionStatus.CANCELLED
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(order)
        logger.info(f"Order {transaction_id} cancelled")
        return order

    # ============== Ledger ==============

    def get_transactions(self, hotel_id: int, status: Optional[InventoryTransactionStatus] = None,
                         transaction_type: Optional[InventoryTransactionType] = None) -> List[tuple]:
        """Ledger rows with item names, newest first"""
        query = self.db.query(InventoryTransaction, InventoryItem.item_name).join(
            InventoryItem, InventoryTransaction.inventory_id == InventoryItem.id
        ).filter(InventoryTransaction.hotel_id == hotel_id)
        if status is not None:
            query = query.filter(InventoryTransaction.status == status)
        if transaction_type is not None:
            query = query.filter(InventoryTransaction.transaction_type == transaction_type)
        return query.order_by(
            InventoryTransaction.transaction_date.desc(), InventoryTransaction.id.desc()
        ).all()

    def get_transaction_summary(self, hotel_id: int, today: Optional[date] = None) -> dict:
        """
        Current month grouped by status and type in rollup order: each
        status's groups, then its subtotal row, and a grand total row last
        """
        start, end = month_bounds(today or date.today())
        value = func.coalesce(
            func.sum(InventoryTransaction.quantity * func.coalesce(InventoryTransaction.unit_price, 0)), 0
        )
        rows = self.db.query(
            InventoryTransaction.status,
            InventoryTransaction.transaction_type,
            func.count(InventoryTransaction.id),
            func.coalesce(func.sum(InventoryTransaction.quantity), 0),
            value,
        ).filter(
            InventoryTransaction.hotel_id == hotel_id,
            InventoryTransaction.transaction_date >= datetime.combine(start, datetime.min.time()),
            InventoryTransaction.transaction_date < datetime.combine(end, datetime.min.time())
        ).group_by(
            InventoryTransaction.status, InventoryTransaction.transaction_type
        ).order_by(
            InventoryTransaction.status, InventoryTransaction.transaction_type
        ).all()

        def empty():
            return {"count": 0, "total_quantity": ZERO, "total_value": ZERO}

        result = []
        grand = empty()
        current, subtotal = None, None
        for status, tx_type, count, quantity, total in rows:
            if subtotal is not None and status != current:
                result.append({"status": current, "transaction_type": None, **subtotal})
                subtotal = None
            if subtotal is None:
                current, subtotal = status, empty()
            quantity, total = Decimal(str(quantity)), Decimal(str(total))
            result.append({
                "status": status, "transaction_type": tx_type,
                "count": count, "total_quantity": quantity, "total_value": total,
            })
            for target in (subtotal, grand):
                target["count"] += count
                target["total_quantity"] += quantity
                target["total_value"] += total

        if subtotal is not None:
            result.append({"status": current, "transaction_type": None, **subtotal})
        result.append({"status": None, "transaction_type": None, **grand})

        return {"month": start.strftime("%Y-%m"), "rows": result}

    def to_transaction_response(self, transaction: InventoryTransaction, item_name: Optional[str] = None) -> dict:
        return {
            "id": transaction.id,
            "inventory_id": transaction.inventory_id,
            "item_name": item_name if item_name is not None else (
                transaction.item.item_name if transaction.item else None
            ),
            "transaction_type": transaction.transaction_type,
            "quantity": transaction.quantity,
            "unit_price": transaction.unit_price,
            "status": transaction.status,
            "reason": transaction.reason,
            "transaction_date": transaction.transaction_date,
            "receive_date": transaction.receive_date,
        }
