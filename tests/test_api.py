from sqlalchemy.exc import OperationalError
from fastapi.testclient import TestClient

from salon import settings
from salon.auth import get_current_admin
from salon.db import get_session
from salon.main import app
from tests.helpers import DAY

BOOKING = {
    "date": DAY,
    "time": "09:00",
    "service": "Haircut",
    "clientName": "Maria Ivanova",
    "clientPhone": "+359887123456",
}


def test_health_and_config(client):
    assert client.get("/api/health").json()["status"] == "ok"

    cfg = client.get("/api/config").json()
    assert cfg["business"]["name"] == "Test Salon"
    assert [s["name"] for s in cfg["stylists"]] == ["Iva", "Maria", "Desi"]
    assert cfg["workHours"]["slots"] == ["09:00", "09:30", "10:00"]


def test_book_then_slots_reflect_it(client, notifiers):
    response = client.post("/api/book", json=dict(BOOKING, stylist="Iva"))

    assert response.status_code == 201
    body = response.json()
    assert body["id"] >= 1
    assert body["confirmationCode"].startswith("FY-")
    assert "confirmation_code" not in body
    assert len(notifiers.telegram.sent("send_admin_new_booking")) == 1

    slots = client.get("/api/slots", params={"date": DAY}).json()
    assert slots[0] == {"time": "09:00", "status": "free", "available": 2}

    iva = client.get("/api/slots", params={"date": DAY, "stylist": "Iva"}).json()
    assert iva[0] == {"time": "09:00", "status": "taken", "available": 0}

    free = client.get("/api/available-stylists", params={"date": DAY, "time": "09:00"}).json()
    assert [s["name"] for s in free] == ["Maria", "Desi"]


def test_booking_survives_failing_operator_alert(client, notifiers):
    notifiers.telegram.error = RuntimeError("telegram down")

    response = client.post("/api/book", json=BOOKING)

    assert response.status_code == 201


def test_booking_errors_carry_kind(client):
    response = client.post("/api/book", json=dict(BOOKING, time="23:00"))
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid time", "kind": "InvalidTime"}

    response = client.post("/api/book", json={"date": DAY})
    assert response.status_code == 400
    assert response.json()["kind"] == "MissingField"


def test_slot_taken_and_blocked_status_codes(client):
    assert client.post("/api/book", json=dict(BOOKING, stylist="Iva")).status_code == 201

    taken = client.post("/api/book", json=dict(BOOKING, stylist="Iva", clientPhone="0888333444"))
    assert taken.status_code == 409
    assert taken.json()["kind"] == "SlotTaken"

    client.post("/api/admin/block-phone", json={"phone": "0889666777", "reason": "no-show"})
    blocked = client.post("/api/book", json=dict(BOOKING, time="10:00", clientPhone="0889666777"))
    assert blocked.status_code == 403
    assert blocked.json()["kind"] == "Blocked"

    assert client.post("/api/check-phone", json={"phone": "+359889666777"}).json() == {"blocked": True}


def test_slots_requires_valid_date(client):
    response = client.get("/api/slots", params={"date": "tomorrow"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Valid date required", "kind": "InvalidArgument"}


def test_status_endpoint(client):
    code = client.post("/api/book", json=BOOKING).json()["confirmationCode"]

    response = client.get(f"/api/status/{code.lower()}")
    assert response.status_code == 200
    assert response.json() == {
        "found": True,
        "status": "pending",
        "date": DAY,
        "time": "09:00",
        "service": "Haircut",
        "name": "Maria Ivanova",
        "stylist": None,
    }
    assert client.get("/api/status/FY-NOPE00").status_code == 404
    assert client.get("/api/status/FY").status_code == 400


def test_admin_moderation_flow(client, notifiers):
    appt_id = client.post("/api/book", json=dict(BOOKING, clientEmail="maria@mail.bg")).json()["id"]

    pending = client.get("/api/admin/notifications").json()
    assert [a["id"] for a in pending] == [appt_id]

    response = client.post("/api/admin/action", json={"id": appt_id, "action": "confirm"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "notifications": {"telegram": False, "email": True}}

    again = client.post("/api/admin/action", json={"id": appt_id, "action": "reject"})
    assert again.status_code == 409
    assert again.json()["kind"] == "AlreadyFinalized"

    assert client.post("/api/admin/action", json={"id": appt_id, "action": "maybe"}).status_code == 400
    assert client.post("/api/admin/action", json={"id": 999, "action": "confirm"}).status_code == 404

    stats = client.get("/api/admin/stats").json()
    assert stats == {"total": 1, "pending": 0, "revenue": 25}


def test_admin_back_office_endpoints(client):
    appt_id = client.post("/api/book", json=BOOKING).json()["id"]
    client.post("/api/admin/action", json={"id": appt_id, "action": "confirm"})

    assert client.post("/api/admin/edit", json={"id": appt_id, "clientName": "Maria I."}).json() == {
        "success": True
    }
    edited = client.post("/api/admin/edit-client", json={"phone": "0887123456", "clientName": "Mariya"})
    assert edited.json() == {"success": True, "updated": 1}

    rows = client.get("/api/admin/appointments", params={"search": "mariya"}).json()
    assert [r["id"] for r in rows] == [appt_id]
    assert rows[0]["client_phone"] == "0887123456"

    schedule = client.get("/api/admin/schedule", params={"date": DAY}).json()
    assert [r["id"] for r in schedule] == [appt_id]

    clients = client.get("/api/admin/clients").json()
    assert clients[0]["name"] == "Mariya"
    assert clients[0]["visits"] == 1

    chart = client.get("/api/admin/chart-data").json()
    assert len(chart["labels"]) == len(chart["values"]) == 7


def test_block_list_endpoints(client):
    client.post("/api/admin/block-phone", json={"phone": "+359887123456", "reason": "spam"})
    listed = client.get("/api/admin/blocked-phones").json()
    assert [(b["phone"], b["reason"]) for b in listed] == [("0887123456", "spam")]

    assert client.post("/api/admin/unblock-phone", json={"phone": "0887123456"}).json() == {"success": True}
    assert client.get("/api/admin/blocked-phones").json() == []
    assert client.post("/api/admin/block-phone", json={}).status_code == 400


def test_telegram_webhook_subscribes_contact(client, notifiers):
    update = {
        "message": {
            "chat": {"id": 4242},
            "from": {"first_name": "Maria"},
            "contact": {"phone_number": "359887123456", "first_name": "Maria"},
        }
    }
    assert client.post("/api/telegram/webhook", json=update).json() == {"ok": True, "subscribed": True}
    assert client.post("/api/telegram/webhook", json={"message": {"text": "hi"}}).json()["subscribed"] is False

    appt_id = client.post("/api/book", json=BOOKING).json()["id"]
    result = client.post("/api/admin/action", json={"id": appt_id, "action": "confirm"}).json()
    assert result["notifications"]["telegram"] is True
    assert notifiers.telegram.sent("send_confirmation")[0][1] == "4242"


def test_admin_routes_require_token(client):
    app.dependency_overrides.pop(get_current_admin)

    assert client.get("/api/admin/stats").status_code == 401

    bad = client.post("/api/admin/login", data={"username": "admin", "password": "wrong"})
    assert bad.status_code == 401

    login = client.post(
        "/api/admin/login",
        data={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/admin/stats", headers=headers).status_code == 200
    assert client.get("/api/admin/check-auth", headers=headers).json()["authenticated"] is True
    assert client.get("/api/admin/stats", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_datastore_failure_is_a_server_error(client):
    def broken_session():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        yield  # pragma: no cover

    app.dependency_overrides[get_session] = broken_session
    response = TestClient(app).get("/api/slots", params={"date": DAY})

    assert response.status_code == 500
    assert response.json()["kind"] == "StoreUnavailable"
