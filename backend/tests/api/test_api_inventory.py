"""
Inventory API tests
"""
from decimal import Decimal
from fastapi.testclient import TestClient

from hotel_suite.models.ontology import (
    InventoryTransaction, InventoryTransactionType, InventoryTransactionStatus
)


class TestItems:
    """Inventory items"""

    def test_list_items_sorted(self, client: TestClient, manager_headers, towels, soap):
        response = client.get("/api/manager/inventory", headers=manager_headers)

        assert response.status_code == 200
        data = response.json()
        assert [i["item_name"] for i in data] == ["Bath Towel", "Soap"]
        assert [i["is_low_stock"] for i in data] == [False, True]

    def test_other_hotel_items_hidden(self, client: TestClient, other_manager_headers, towels):
        response = client.get("/api/manager/inventory", headers=other_manager_headers)

        assert response.json() == []

    def test_low_stock(self, client: TestClient, manager_headers, towels, soap):
        response = client.get("/api/manager/inventory/low-stock", headers=manager_headers)

        assert [i["item_name"] for i in response.json()] == ["Soap"]

    def test_create_item_starts_empty(self, client: TestClient, manager_headers):
        response = client.post("/api/manager/inventory/items", headers=manager_headers, json={
            "item_name": "Shampoo", "category": "Toiletries", "unit": "bottle", "low_stock_threshold": 12
        })

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["quantity"]) == 0
        assert data["is_low_stock"] is True

    def test_create_duplicate_name(self, client: TestClient, manager_headers, towels):
        response = client.post("/api/manager/inventory/items", headers=manager_headers,
                               json={"item_name": "bath towel"})

        assert response.status_code == 409

    def test_update_item(self, client: TestClient, manager_headers, towels):
        response = client.put(f"/api/manager/inventory/items/{towels.id}", headers=manager_headers,
                              json={"low_stock_threshold": 60})

        assert response.status_code == 200
        assert response.json()["is_low_stock"] is True

    def test_update_item_name_to_null(self, client: TestClient, manager_headers, towels):
        response = client.put(f"/api/manager/inventory/items/{towels.id}", headers=manager_headers,
                              json={"item_name": None})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "item_name"

    def test_update_item_of_other_hotel(self, client: TestClient, other_manager_headers, towels):
        response = client.put(f"/api/manager/inventory/items/{towels.id}", headers=other_manager_headers,
                              json={"unit": "box"})

        assert response.status_code == 404

    def test_receptionist_forbidden(self, client: TestClient, receptionist_headers):
        response = client.get("/api/manager/inventory", headers=receptionist_headers)

        assert response.status_code == 403


class TestAdjustments:
    """Stock adjustments"""

    def test_usage_adjustment_is_logged(self, client: TestClient, manager_headers, db_session, towels):
        response = client.patch(f"/api/manager/inventory/items/{towels.id}/adjust", headers=manager_headers, json={
            "quantity_change": "-8", "adjustment_type": "Usage", "reason": "Weekend rush"
        })

        assert response.status_code == 200
        assert Decimal(response.json()["quantity"]) == Decimal("42")

        log = db_session.query(InventoryTransaction).one()
        assert log.transaction_type == InventoryTransactionType.USAGE
        assert log.status == InventoryTransactionStatus.COMPLETED
        assert log.quantity == Decimal("-8")

    def test_negative_stock_rejected(self, client: TestClient, manager_headers, db_session, soap):
        response = client.patch(f"/api/manager/inventory/items/{soap.id}/adjust", headers=manager_headers, json={
            "quantity_change": "-6", "adjustment_type": "Damage"
        })

        assert response.status_code == 400
        db_session.refresh(soap)
        assert soap.quantity == Decimal("5")
        assert db_session.query(InventoryTransaction).count() == 0

    def test_zero_change_rejected(self, client: TestClient, manager_headers, soap):
        response = client.patch(f"/api/manager/inventory/items/{soap.id}/adjust", headers=manager_headers, json={
            "quantity_change": "0", "adjustment_type": "Other"
        })

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "quantity_change"

    def test_unknown_adjustment_type(self, client: TestClient, manager_headers, soap):
        response = client.patch(f"/api/manager/inventory/items/{soap.id}/adjust", headers=manager_headers, json={
            "quantity_change": "2", "adjustment_type": "Theft"
        })

        assert response.status_code == 400


class TestOrders:
    """Purchase orders"""

    def _order(self, client, headers, item_id, quantity="30", unit_price="1.50"):
        return client.post("/api/manager/inventory/orders", headers=headers, json={
            "inventory_id": item_id, "quantity": quantity, "unit_price": unit_price
        })

    def test_order_is_pending_until_received(self, client: TestClient, manager_headers, db_session, soap):
        response = self._order(client, manager_headers, soap.id)

        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "Pending"
        assert order["transaction_type"] == "Order"
        assert order["item_name"] == "Soap"
        db_session.refresh(soap)
        assert soap.quantity == Decimal("5")

        response = client.post(f"/api/manager/inventory/orders/{order['id']}/receive", headers=manager_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "Completed"
        assert response.json()["receive_date"] is not None
        db_session.refresh(soap)
        assert soap.quantity == Decimal("35")

    def test_receive_twice(self, client: TestClient, manager_headers, soap):
        order_id = self._order(client, manager_headers, soap.id).json()["id"]
        client.post(f"/api/manager/inventory/orders/{order_id}/receive", headers=manager_headers)

        response = client.post(f"/api/manager/inventory/orders/{order_id}/receive", headers=manager_headers)

        assert response.status_code == 404

    def test_cancel_order(self, client: TestClient, manager_headers, db_session, soap):
        order_id = self._order(client, manager_headers, soap.id).json()["id"]

        response = client.post(f"/api/manager/inventory/orders/{order_id}/cancel", headers=manager_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"
        db_session.refresh(soap)
        assert soap.quantity == Decimal("5")

        response = client.post(f"/api/manager/inventory/orders/{order_id}/receive", headers=manager_headers)
        assert response.status_code == 404

    def test_order_for_unknown_item(self, client: TestClient, manager_headers):
        response = self._order(client, manager_headers, 999)

        assert response.status_code == 404

    def test_order_quantity_must_be_positive(self, client: TestClient, manager_headers, soap):
        response = self._order(client, manager_headers, soap.id, quantity="0")

        assert response.status_code == 400


class TestLedger:
    """Transaction list and monthly summary"""

    def test_transactions_filtered(self, client: TestClient, manager_headers, towels, soap):
        client.patch(f"/api/manager/inventory/items/{towels.id}/adjust", headers=manager_headers,
                     json={"quantity_change": "-2", "adjustment_type": "Damage"})
        client.post("/api/manager/inventory/orders", headers=manager_headers,
                    json={"inventory_id": soap.id, "quantity": "10", "unit_price": "0.80"})

        response = client.get("/api/manager/inventory/transactions", headers=manager_headers)
        assert len(response.json()) == 2

        response = client.get("/api/manager/inventory/transactions", headers=manager_headers,
                              params={"status": "Pending"})
        data = response.json()
        assert [t["item_name"] for t in data] == ["Soap"]

        response = client.get("/api/manager/inventory/transactions", headers=manager_headers,
                              params={"transaction_type": "Adjustment-Damage"})
        assert [t["item_name"] for t in response.json()] == ["Bath Towel"]

    def test_transaction_summary(self, client: TestClient, manager_headers, towels, soap):
        client.patch(f"/api/manager/inventory/items/{towels.id}/adjust", headers=manager_headers,
                     json={"quantity_change": "-2", "adjustment_type": "Usage"})
        client.post("/api/manager/inventory/orders", headers=manager_headers,
                    json={"inventory_id": soap.id, "quantity": "10", "unit_price": "0.80"})
        client.post("/api/manager/inventory/orders", headers=manager_headers,
                    json={"inventory_id": towels.id, "quantity": "5", "unit_price": "4.00"})

        response = client.get("/api/manager/inventory/transaction-summary", headers=manager_headers)

        assert response.status_code == 200
        rows = response.json()["rows"]
        grand = rows[-1]
        assert grand["status"] is None and grand["transaction_type"] is None
        assert grand["count"] == 3
        assert Decimal(grand["total_value"]) == Decimal("28.00")

        pending = [r for r in rows if r["status"] == "Pending" and r["transaction_type"] is None]
        assert len(pending) == 1
        assert pending[0]["count"] == 2
        assert Decimal(pending[0]["total_quantity"]) == Decimal("15")

        groups = [r for r in rows if r["transaction_type"] is not None]
        assert {(r["status"], r["transaction_type"]) for r in groups} == {
            ("Completed", "Adjustment-Usage"), ("Pending", "Order")
        }
        assert [(r["status"], r["transaction_type"]) for r in rows] == [
            ("Completed", "Adjustment-Usage"), ("Completed", None),
            ("Pending", "Order"), ("Pending", None),
            (None, None),
        ]
