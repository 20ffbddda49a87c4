"""
Staff management API tests
Covers /api/manager/employees
"""
import pytest
from fastapi.testclient import TestClient

from hotel_suite.models.ontology import Employee, EmployeeRole, WorkingStatus


def _new_employee(department_id, **overrides):
    payload = {
        "department_id": department_id,
        "first_name": "Harry",
        "last_name": "Keeper",
        "email": "harry@seaside.example.com",
        "phone": "555-0300",
        "role": "housekeeping",
        "hourly_pay": "14.50",
        "address": {"street": "2 Harbour Rd", "city": "Portsmouth"},
    }
    payload.update(overrides)
    return payload


class TestListEmployees:
    """Listing and filters"""

    def test_list_excludes_managers(self, client: TestClient, manager_headers, manager, receptionist):
        response = client.get("/api/manager/employees", headers=manager_headers)

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [receptionist.id]

    def test_list_only_own_hotel(self, client: TestClient, manager_headers, receptionist, db_session, other_dept):
        db_session.add(Employee(
            department_id=other_dept.id, first_name="Far", last_name="Away",
            email="far@lodge.example.com", role=EmployeeRole.RECEPTIONIST
        ))
        db_session.commit()

        response = client.get("/api/manager/employees", headers=manager_headers)

        assert [e["email"] for e in response.json()] == ["rita@seaside.example.com"]

    def test_filter_by_role_and_status(self, client: TestClient, manager_headers, receptionist,
                                       db_session, housekeeping_dept):
        db_session.add(Employee(
            department_id=housekeeping_dept.id, first_name="Hank", last_name="Clean",
            email="hank@seaside.example.com", role=EmployeeRole.HOUSEKEEPING,
            working_status=WorkingStatus.INACTIVE
        ))
        db_session.commit()

        response = client.get(
            "/api/manager/employees", params={"role": "housekeeping", "status": "inactive"},
            headers=manager_headers
        )

        assert response.status_code == 200
        assert [e["email"] for e in response.json()] == ["hank@seaside.example.com"]

    def test_filter_by_name(self, client: TestClient, manager_headers, receptionist):
        response = client.get("/api/manager/employees", params={"name": "rita"}, headers=manager_headers)

        assert len(response.json()) == 1
        response = client.get("/api/manager/employees", params={"name": "zzz"}, headers=manager_headers)
        assert response.json() == []

    def test_receptionist_forbidden(self, client: TestClient, receptionist_headers):
        response = client.get("/api/manager/employees", headers=receptionist_headers)

        assert response.status_code == 403

    def test_list_departments(self, client: TestClient, manager_headers, front_desk_dept, other_dept):
        response = client.get("/api/manager/employees/departments", headers=manager_headers)

        assert response.status_code == 200
        names = [d["name"] for d in response.json()]
        assert "Front Desk" in names
        assert all(d["id"] != other_dept.id for d in response.json())


class TestAddEmployee:
    """Hiring"""

    def test_add_employee(self, client: TestClient, manager_headers, housekeeping_dept):
        response = client.post("/api/manager/employees", headers=manager_headers,
                               json=_new_employee(housekeeping_dept.id))

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "housekeeping"
        assert data["department_name"] == "Housekeeping"
        assert data["address"]["city"] == "Portsmouth"
        assert float(data["hourly_pay"]) == 14.5

    def test_add_to_other_hotel_department(self, client: TestClient, manager_headers, manager, other_dept):
        response = client.post("/api/manager/employees", headers=manager_headers,
                               json=_new_employee(other_dept.id))

        assert response.status_code == 403

    def test_add_manager_role_rejected(self, client: TestClient, manager_headers, housekeeping_dept):
        response = client.post("/api/manager/employees", headers=manager_headers,
                               json=_new_employee(housekeeping_dept.id, role="manager"))

        assert response.status_code == 400

    def test_add_duplicate_email(self, client: TestClient, manager_headers, receptionist, housekeeping_dept):
        response = client.post("/api/manager/employees", headers=manager_headers,
                               json=_new_employee(housekeeping_dept.id, email="rita@seaside.example.com"))

        assert response.status_code == 409

    def test_add_with_password_can_log_in(self, client: TestClient, manager_headers, front_desk_dept):
        response = client.post("/api/manager/employees", headers=manager_headers,
                               json=_new_employee(front_desk_dept.id, role="receptionist",
                                                  password="desk-pass-1"))
        assert response.status_code == 201

        login = client.post("/api/auth/login", json={
            "email": "harry@seaside.example.com", "password": "desk-pass-1"
        })
        assert login.status_code == 200


class TestUpdateEmployee:
    """Updates, status and soft delete"""

    def test_update_phone(self, client: TestClient, manager_headers, receptionist):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers, json={
            "phone": "555-7777"
        })

        assert response.status_code == 200
        assert response.json()["phone"] == "555-7777"

    def test_move_within_hotel(self, client: TestClient, manager_headers, receptionist, housekeeping_dept):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers, json={
            "department_id": housekeeping_dept.id
        })

        assert response.status_code == 200
        assert response.json()["department_id"] == housekeeping_dept.id

    def test_move_to_other_hotel_forbidden(self, client: TestClient, manager_headers, receptionist, other_dept):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers, json={
            "department_id": other_dept.id
        })

        assert response.status_code == 403

    def test_role_change_rejected(self, client: TestClient, manager_headers, receptionist):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers, json={
            "role": "staff"
        })

        assert response.status_code == 400

    def test_empty_update_rejected(self, client: TestClient, manager_headers, receptionist):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers, json={})

        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["first_name", "last_name", "email", "department_id"])
    def test_update_required_field_to_null(self, client: TestClient, manager_headers, receptionist, field):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers,
                              json={field: None})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == field

    def test_update_email_is_lower_cased(self, client: TestClient, manager_headers, receptionist):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers,
                              json={"email": "Front.Desk@Seaside.example.com"})

        assert response.status_code == 200
        assert response.json()["email"] == "front.desk@seaside.example.com"

    @pytest.mark.parametrize("email", ["a@.b.c", "x@y.z."])
    def test_update_invalid_email(self, client: TestClient, manager_headers, receptionist, email):
        response = client.put(f"/api/manager/employees/{receptionist.id}", headers=manager_headers,
                              json={"email": email})

        assert response.status_code == 400

    def test_update_manager_forbidden(self, client: TestClient, manager_headers, manager):
        response = client.put(f"/api/manager/employees/{manager.id}", headers=manager_headers, json={
            "phone": "555-0000"
        })

        assert response.status_code == 403

    def test_update_missing_employee(self, client: TestClient, manager_headers, manager):
        response = client.put("/api/manager/employees/9999", headers=manager_headers, json={"phone": "1"})

        assert response.status_code == 404

    def test_status_round_trip(self, client: TestClient, manager_headers, receptionist):
        """Going inactive stamps termination, reactivation clears it"""
        url = f"/api/manager/employees/{receptionist.id}/status"
        response = client.patch(url, headers=manager_headers, json={"working_status": "inactive"})
        assert response.status_code == 200
        assert response.json()["termination_date"] is not None

        response = client.patch(url, headers=manager_headers, json={"working_status": "working"})
        assert response.status_code == 200
        assert response.json()["termination_date"] is None

    def test_status_of_manager_not_found(self, client: TestClient, manager_headers, manager):
        response = client.patch(f"/api/manager/employees/{manager.id}/status", headers=manager_headers,
                                json={"working_status": "inactive"})

        assert response.status_code == 404

    def test_soft_delete(self, client: TestClient, manager_headers, receptionist, db_session):
        response = client.delete(f"/api/manager/employees/{receptionist.id}", headers=manager_headers)

        assert response.status_code == 200
        db_session.refresh(receptionist)
        assert receptionist.working_status == WorkingStatus.INACTIVE
