"""End-to-end API tests through FastAPI's TestClient."""

import pytest

from booking_admin.models import Role, Staff
from booking_admin.middleware.auth import hash_password
from booking_admin.redaction import REDACTION_MARKER


@pytest.fixture
def limited_headers(api, db) -> dict:
    """Login for a staff member whose role holds no permissions."""
    role = Role(role_name="Receptionist")
    db.add(role)
    db.flush()
    db.add(Staff(
        first_name="Rita",
        last_name="Reyes",
        email="rita@example.com",
        username="rita",
        hashed_password=hash_password("pw123456"),
        role_id=role.role_id,
    ))
    db.commit()
    resp = api.post("/api/auth/login", json={"identifier": "rita@example.com", "password": "pw123456"})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def _create_client(api, headers) -> dict:
    resp = api.post("/api/clients", headers=headers, json={
        "first_name": "Amy",
        "last_name": "Lee",
        "email": "amy.lee@example.com",
        "phone_number": "555-0100",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_service(api, headers) -> dict:
    resp = api.post("/api/services", headers=headers, json={
        "name": "Haircut",
        "duration_minutes": 30,
        "price": 50,
        "description": "Wash, cut and style",
        "category": "Hair",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestAuth:
    def test_login_returns_token_and_permissions(self, api, admin):
        resp = api.post("/api/auth/login", json={"identifier": "jane", "password": "admin123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["access_token"]
        assert body["display_name"] == "Jane Doe"
        assert body["role"] == "Admin"
        assert "logs_read_all" in body["permissions"]

    def test_bad_password(self, api, admin):
        resp = api.post("/api/auth/login", json={"identifier": "jane", "password": "nope"})
        assert resp.status_code == 401

    def test_me(self, api, auth_headers):
        resp = api.get("/api/auth/me", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["username"] == "jane"
        assert "hashed_password" not in resp.json()

    def test_missing_token(self, api):
        assert api.get("/api/logs").status_code in (401, 403)

    def test_garbage_token(self, api):
        resp = api.get("/api/logs", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_missing_permission_forbidden(self, api, limited_headers):
        assert api.get("/api/logs", headers=limited_headers).status_code == 403
        assert api.get("/api/history", headers=limited_headers).status_code == 403


class TestAppointmentFlow:
    def test_create_confirm_and_read_audit(self, api, auth_headers, admin):
        client = _create_client(api, auth_headers)
        service = _create_service(api, auth_headers)

        resp = api.post("/api/appointments", headers=auth_headers, json={
            "client_id": client["client_id"],
            "service_id": service["service_id"],
            "appointment_date": "2026-11-02",
            "start_time": "10:00:00",
            "end_time": "10:30:00",
        })
        assert resp.status_code == 201, resp.text
        appointment = resp.json()
        assert appointment["status"] == "pending"
        assert appointment["service_name"] == "Haircut"
        appointment_id = appointment["appointment_id"]

        resp = api.patch(
            f"/api/appointments/{appointment_id}",
            headers=auth_headers,
            json={"status": "confirmed", "staff_id": admin.staff_id},
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "confirmed"

        history = api.get("/api/history", headers=auth_headers).json()
        assert len(history) == 1
        assert history[0]["appointment_id"] == appointment_id
        assert history[0]["client_name"] == "Amy Lee"
        assert history[0]["status"] == "confirmed"
        assert history[0]["changed_by"] == "Jane Doe"

        logs = api.get("/api/logs", headers=auth_headers, params={"entity_type": "appointment"}).json()
        assert [log["action"] for log in logs] == ["update", "create"]
        assert logs[0]["changes"]["old"]["status"] == "pending"
        assert logs[0]["changes"]["new"]["status"] == "confirmed"
        assert logs[1]["changes"]["old"] is None

    def test_decline_without_reason(self, api, auth_headers):
        client = _create_client(api, auth_headers)
        service = _create_service(api, auth_headers)
        appointment = api.post("/api/appointments", headers=auth_headers, json={
            "client_id": client["client_id"],
            "service_id": service["service_id"],
            "appointment_date": "2026-11-02",
            "start_time": "10:00:00",
            "end_time": "10:30:00",
        }).json()

        resp = api.patch(
            f"/api/appointments/{appointment['appointment_id']}",
            headers=auth_headers,
            json={"status": "declined"},
        )
        assert resp.status_code == 400

    def test_unknown_appointment(self, api, auth_headers):
        assert api.get("/api/appointments/999", headers=auth_headers).status_code == 404
        assert api.delete("/api/appointments/999", headers=auth_headers).status_code == 404


class TestStaff:
    def test_create_staff_redacts_password_in_log(self, api, auth_headers, admin):
        resp = api.post("/api/staff", headers=auth_headers, json={
            "first_name": "John",
            "last_name": "Smith",
            "email": "john@example.com",
            "username": "john",
            "password": "hunter22",
            "role_id": admin.role_id,
        })
        assert resp.status_code == 201, resp.text
        staff = resp.json()
        assert staff["position"] == "Admin"

        logs = api.get("/api/logs", headers=auth_headers, params={"entity_type": "staff"}).json()
        assert logs[0]["changes"]["new"]["hashed_password"] == REDACTION_MARKER
        assert "hunter22" not in str(logs)

        ok = api.post(f"/api/staff/{staff['staff_id']}/verify-password", headers=auth_headers,
                      json={"password": "hunter22"})
        assert ok.json() == {"valid": True}
        bad = api.post(f"/api/staff/{staff['staff_id']}/verify-password", headers=auth_headers,
                       json={"password": "wrong"})
        assert bad.json() == {"valid": False}

    def test_duplicate_username(self, api, auth_headers, admin):
        resp = api.post("/api/staff", headers=auth_headers, json={
            "first_name": "Other",
            "last_name": "Jane",
            "email": "other@example.com",
            "username": "jane",
            "password": "pw",
            "role_id": admin.role_id,
        })
        assert resp.status_code == 409


class TestRoles:
    def test_role_lifecycle_audited(self, api, auth_headers):
        role = api.post("/api/roles", headers=auth_headers, json={"role_name": "Stylist"}).json()
        permission = api.get("/api/permissions", headers=auth_headers).json()[0]

        resp = api.post(f"/api/roles/{role['role_id']}/permissions", headers=auth_headers,
                        json={"permission_id": permission["permission_id"]})
        assert resp.status_code == 201
        again = api.post(f"/api/roles/{role['role_id']}/permissions", headers=auth_headers,
                         json={"permission_id": permission["permission_id"]})
        assert again.status_code == 409

        granted = api.get(f"/api/roles/{role['role_id']}/permissions", headers=auth_headers).json()
        assert [p["permission_id"] for p in granted] == [permission["permission_id"]]

        assert api.delete(f"/api/roles/{role['role_id']}", headers=auth_headers).status_code == 200

        logs = api.get("/api/logs", headers=auth_headers,
                       params={"entity_type": "role", "entity_id": role["role_id"]}).json()
        assert [log["action"] for log in logs] == ["delete", "update", "create"]
        assert logs[1]["changes"]["old"]["permissions"] == []
        assert logs[1]["changes"]["new"]["permissions"] == [permission["permission_name"]]

    def test_cannot_delete_assigned_role(self, api, auth_headers, admin):
        resp = api.delete(f"/api/roles/{admin.role_id}", headers=auth_headers)
        assert resp.status_code == 409


class TestClientsAndServices:
    def test_client_update_and_delete_logged(self, api, auth_headers):
        client = _create_client(api, auth_headers)
        resp = api.put(f"/api/clients/{client['client_id']}", headers=auth_headers, json={
            "first_name": "Amy",
            "last_name": "Lee",
            "email": "amy@new.example.com",
            "phone_number": "555-0100",
        })
        assert resp.status_code == 200
        assert api.delete(f"/api/clients/{client['client_id']}", headers=auth_headers).status_code == 200

        logs = api.get("/api/logs", headers=auth_headers, params={"entity_type": "client"}).json()
        assert [log["action"] for log in logs] == ["delete", "update", "create"]
        assert logs[1]["changes"]["old"]["email"] == "amy.lee@example.com"
        assert logs[1]["changes"]["new"]["email"] == "amy@new.example.com"
        assert all(log["changed_by"] == "Jane Doe" for log in logs)

    def test_invalid_service(self, api, auth_headers):
        resp = api.post("/api/services", headers=auth_headers, json={
            "name": "Free",
            "duration_minutes": 0,
            "price": 0,
            "description": "x",
            "category": "y",
        })
        assert resp.status_code == 400
