"""
Hotel administration API tests
Covers /api/admin/hotels and /api/managers
"""
import pytest
from fastapi.testclient import TestClient

from hotel_suite.models.ontology import Employee, EmployeeRole, WorkingStatus


class TestHotels:
    """Hotel CRUD"""

    def test_list_hotels(self, client: TestClient, admin_headers, hotel, other_hotel):
        response = client.get("/api/admin/hotels", headers=admin_headers)

        assert response.status_code == 200
        names = [h["name"] for h in response.json()]
        assert names == ["Mountain Lodge", "Seaside Grand"]

    def test_create_hotel(self, client: TestClient, admin_headers, db_session):
        response = client.post("/api/admin/hotels", headers=admin_headers, json={
            "name": "City Inn",
            "city": "Leeds",
            "email": "Desk@CityInn.example.com",
            "star_rating": 3
        })

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "City Inn"
        assert data["email"] == "desk@cityinn.example.com"

    def test_create_duplicate_hotel(self, client: TestClient, admin_headers, hotel):
        response = client.post("/api/admin/hotels", headers=admin_headers, json={"name": "seaside grand"})

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_create_hotel_invalid_rating(self, client: TestClient, admin_headers):
        response = client.post("/api/admin/hotels", headers=admin_headers, json={
            "name": "Bad Hotel", "star_rating": 9
        })

        assert response.status_code == 400

    def test_get_missing_hotel(self, client: TestClient, admin_headers):
        response = client.get("/api/admin/hotels/9999", headers=admin_headers)

        assert response.status_code == 404

    def test_update_hotel(self, client: TestClient, admin_headers, hotel):
        response = client.put(f"/api/admin/hotels/{hotel.id}", headers=admin_headers, json={
            "phone": "555-9999"
        })

        assert response.status_code == 200
        assert response.json()["phone"] == "555-9999"
        assert response.json()["name"] == "Seaside Grand"

    def test_update_hotel_empty(self, client: TestClient, admin_headers, hotel):
        response = client.put(f"/api/admin/hotels/{hotel.id}", headers=admin_headers, json={})

        assert response.status_code == 400

    def test_update_hotel_name_to_null(self, client: TestClient, admin_headers, hotel):
        response = client.put(f"/api/admin/hotels/{hotel.id}", headers=admin_headers, json={"name": None})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "name"

    def test_update_hotel_clears_email(self, client: TestClient, admin_headers, hotel):
        response = client.put(f"/api/admin/hotels/{hotel.id}", headers=admin_headers, json={"email": None})

        assert response.status_code == 200
        assert response.json()["email"] is None

    @pytest.mark.parametrize("email", ["a@.b.c", "x@y.z.", "not-an-email"])
    def test_create_hotel_invalid_email(self, client: TestClient, admin_headers, email):
        response = client.post("/api/admin/hotels", headers=admin_headers, json={
            "name": "Bad Email Hotel", "email": email
        })

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "email"

    def test_delete_hotel_with_departments(self, client: TestClient, admin_headers, hotel, management_dept):
        response = client.delete(f"/api/admin/hotels/{hotel.id}", headers=admin_headers)

        assert response.status_code == 409

    def test_delete_empty_hotel(self, client: TestClient, admin_headers, other_hotel):
        response = client.delete(f"/api/admin/hotels/{other_hotel.id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/admin/hotels/{other_hotel.id}", headers=admin_headers).status_code == 404


class TestDepartments:
    """Departments of a hotel"""

    def test_create_department(self, client: TestClient, admin_headers, hotel):
        response = client.post(f"/api/admin/hotels/{hotel.id}/departments", headers=admin_headers, json={
            "name": "Kitchen"
        })

        assert response.status_code == 201
        assert response.json()["hotel_id"] == hotel.id

    def test_duplicate_department_in_hotel(self, client: TestClient, admin_headers, hotel, front_desk_dept):
        response = client.post(f"/api/admin/hotels/{hotel.id}/departments", headers=admin_headers, json={
            "name": "front desk"
        })

        assert response.status_code == 409

    def test_same_department_name_in_other_hotel(self, client: TestClient, admin_headers, other_hotel,
                                                 front_desk_dept):
        response = client.post(f"/api/admin/hotels/{other_hotel.id}/departments", headers=admin_headers, json={
            "name": "Front Desk"
        })

        assert response.status_code == 201

    def test_list_departments(self, client: TestClient, admin_headers, hotel, front_desk_dept, management_dept):
        response = client.get(f"/api/admin/hotels/{hotel.id}/departments", headers=admin_headers)

        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["Front Desk", "Management"]


class TestManagers:
    """Manager administration"""

    def test_list_managers(self, client: TestClient, admin_headers, manager, other_manager, receptionist):
        response = client.get("/api/managers", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert [m["email"] for m in data] == ["olga@lodge.example.com", "manager@seaside.example.com"]
        assert data[1]["hotel_name"] == "Seaside Grand"
        assert data[1]["department_name"] == "Management"

    def test_list_managers_filters(self, client: TestClient, admin_headers, hotel, manager, other_manager):
        response = client.get(
            "/api/managers", params={"hotel_id": hotel.id, "name": "mark man"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [manager.id]

    def test_list_managers_skips_system_and_inactive(self, client: TestClient, admin_headers, db_session,
                                                     manager, management_dept):
        db_session.add(Employee(
            department_id=management_dept.id, first_name="System", last_name="Account",
            email="system@seaside.example.com", role=EmployeeRole.MANAGER
        ))
        db_session.add(Employee(
            department_id=management_dept.id, first_name="Ina", last_name="Active",
            email="ina@seaside.example.com", role=EmployeeRole.MANAGER,
            working_status=WorkingStatus.INACTIVE
        ))
        db_session.commit()

        response = client.get("/api/managers", headers=admin_headers)

        assert [m["id"] for m in response.json()] == [manager.id]

    def test_create_manager(self, client: TestClient, admin_headers, management_dept):
        response = client.post("/api/managers", headers=admin_headers, json={
            "department_id": management_dept.id,
            "first_name": "Nina",
            "last_name": "New",
            "email": "nina@seaside.example.com",
            "salary": "4800.00",
            "password": "manager-pass"
        })

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "manager"
        assert data["working_status"] == "working"

        login = client.post("/api/auth/login", json={"email": "nina@seaside.example.com", "password": "manager-pass"})
        assert login.status_code == 200

    def test_create_manager_unknown_department(self, client: TestClient, admin_headers):
        response = client.post("/api/managers", headers=admin_headers, json={
            "department_id": 9999, "first_name": "Nina", "last_name": "New",
            "email": "nina@seaside.example.com"
        })

        assert response.status_code == 404

    def test_create_manager_duplicate_email(self, client: TestClient, admin_headers, manager, management_dept):
        response = client.post("/api/managers", headers=admin_headers, json={
            "department_id": management_dept.id, "first_name": "Dup", "last_name": "Licate",
            "email": "manager@seaside.example.com"
        })

        assert response.status_code == 409

    def test_create_manager_invalid_email(self, client: TestClient, admin_headers, management_dept):
        response = client.post("/api/managers", headers=admin_headers, json={
            "department_id": management_dept.id, "first_name": "Bad", "last_name": "Email",
            "email": "not-an-email"
        })

        assert response.status_code == 400

    def test_move_manager_to_other_hotel(self, client: TestClient, admin_headers, manager, other_dept, other_hotel):
        response = client.put(f"/api/managers/{manager.id}", headers=admin_headers, json={
            "department_id": other_dept.id
        })

        assert response.status_code == 200
        assert response.json()["hotel_id"] == other_hotel.id

    def test_update_non_manager_is_not_found(self, client: TestClient, admin_headers, receptionist):
        response = client.put(f"/api/managers/{receptionist.id}", headers=admin_headers, json={
            "phone": "555-1234"
        })

        assert response.status_code == 404

    def test_deactivate_manager(self, client: TestClient, admin_headers, manager):
        response = client.patch(f"/api/managers/{manager.id}/status", headers=admin_headers, json={
            "working_status": "inactive"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["working_status"] == "inactive"
        assert data["termination_date"] is not None

    def test_hotel_lookup(self, client: TestClient, admin_headers, hotel, other_hotel):
        response = client.get("/api/managers/lookups/hotels", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == [
            {"id": other_hotel.id, "name": "Mountain Lodge"},
            {"id": hotel.id, "name": "Seaside Grand"},
        ]
