"""Tests for appointment mutations and their audit side effects."""

from datetime import time

import pytest

from booking_admin.exceptions import NotFoundError
from booking_admin.models import Appointment, AppointmentHistory, ChangeLog
from booking_admin.services import appointment_service
from booking_admin.services.audit_service import list_change_records


class TestBookingScenario:
    """Create then confirm an appointment, checking both audit tables."""

    def test_create_then_confirm(self, db, appointment_data, stylist):
        appointment = appointment_service.create_appointment(db, appointment_data, "Jane Doe")
        appointment_id = appointment.appointment_id

        (created,) = list_change_records(db)
        assert created["action"] == "create"
        assert created["entity_type"] == "appointment"
        assert created["entity_id"] == appointment_id
        assert created["changed_by"] == "Jane Doe"
        assert created["changes"]["old"] is None
        assert created["changes"]["new"]["status"] == "pending"

        snapshot = db.query(AppointmentHistory).one()
        assert snapshot.appointment_id == appointment_id
        assert snapshot.client_name == "Amy Lee"
        assert snapshot.service_price == 50.0

        appointment_service.confirm_or_decline(
            db, appointment_id, "confirmed", None, staff_id=stylist.staff_id
        )

        confirmed = list_change_records(db)[0]
        assert confirmed["action"] == "update"
        assert confirmed["changed_by"] == "Unknown"
        assert confirmed["changes"]["old"]["status"] == "pending"
        assert confirmed["changes"]["new"]["status"] == "confirmed"
        assert confirmed["changes"]["new"]["staff_id"] == stylist.staff_id

        db.expire_all()
        rows = db.query(AppointmentHistory).all()
        assert len(rows) == 1
        assert rows[0].status == "confirmed"
        assert rows[0].changed_by == "Unknown"


class TestCreate:
    def test_defaults_to_pending(self, db, appointment_data):
        appointment = appointment_service.create_appointment(db, appointment_data, "Jane")
        assert appointment.status == "pending"

    def test_end_before_start_rejected(self, db, appointment_data):
        appointment_data["end_time"] = time(9, 0)
        with pytest.raises(ValueError):
            appointment_service.create_appointment(db, appointment_data, "Jane")
        assert db.query(ChangeLog).count() == 0
        assert db.query(AppointmentHistory).count() == 0

    def test_unknown_client_rejected(self, db, appointment_data):
        appointment_data["client_id"] = 12345
        with pytest.raises(ValueError):
            appointment_service.create_appointment(db, appointment_data, "Jane")


class TestUpdate:
    def test_partial_update_logged_and_snapshotted(self, db, appointment_data):
        appointment = appointment_service.create_appointment(db, appointment_data, "Jane")
        appointment_service.update_appointment(
            db, appointment.appointment_id, {"notes": "Bring photos"}, "Jane"
        )

        update = list_change_records(db)[0]
        assert update["action"] == "update"
        assert update["changes"]["old"]["notes"] == "First visit"
        assert update["changes"]["new"]["notes"] == "Bring photos"
        assert update["changes"]["new"]["client_id"] == appointment_data["client_id"]
        assert db.query(AppointmentHistory).one().notes == "Bring photos"

    def test_missing_appointment(self, db):
        with pytest.raises(NotFoundError):
            appointment_service.update_appointment(db, 404, {"notes": "x"}, "Jane")

    def test_nothing_to_update(self, db, raw_appointment):
        with pytest.raises(ValueError):
            appointment_service.update_appointment(db, raw_appointment.appointment_id, {"bogus": 1}, "Jane")


class TestConfirmDecline:
    def test_confirm_requires_staff(self, db, raw_appointment):
        with pytest.raises(ValueError):
            appointment_service.confirm_or_decline(db, raw_appointment.appointment_id, "confirmed", "Jane")

    def test_decline_requires_reason(self, db, raw_appointment):
        with pytest.raises(ValueError):
            appointment_service.confirm_or_decline(db, raw_appointment.appointment_id, "declined", "Jane")

    def test_decline_stores_reason(self, db, raw_appointment, stylist):
        raw_appointment.staff_id = stylist.staff_id
        db.commit()
        appointment = appointment_service.confirm_or_decline(
            db, raw_appointment.appointment_id, "declined", "Jane", reason="Fully booked"
        )
        assert appointment.status == "declined"
        assert appointment.notes == "Fully booked"
        assert appointment.staff_id is None
        assert db.query(AppointmentHistory).one().status == "declined"

    def test_invalid_status(self, db, raw_appointment):
        with pytest.raises(ValueError):
            appointment_service.confirm_or_decline(db, raw_appointment.appointment_id, "pending", "Jane")


class TestDelete:
    def test_delete_logs_and_keeps_snapshot(self, db, appointment_data):
        appointment = appointment_service.create_appointment(db, appointment_data, "Jane")
        appointment_id = appointment.appointment_id

        appointment_service.delete_appointment(db, appointment_id, "Jane")

        assert db.query(Appointment).count() == 0
        deleted = list_change_records(db)[0]
        assert deleted["action"] == "delete"
        assert deleted["changes"]["new"] is None
        assert deleted["changes"]["old"]["appointment_id"] == appointment_id
        snapshot = db.query(AppointmentHistory).one()
        assert snapshot.appointment_id == appointment_id

    def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            appointment_service.delete_appointment(db, 1, "Jane")
