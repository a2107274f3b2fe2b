import json

import pytest

from app import redis_client as redis_module
from conftest import TODAY, TOMORROW, YESTERDAY, admin, resident


class FakeRedis:
    """Records pushed events."""

    def __init__(self):
        self.pushed = []

    def rpush(self, queue, value):
        self.pushed.append((queue, json.loads(value)))
        return len(self.pushed)


@pytest.fixture
def events(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_module, "redis_client", fake)
    return fake.pushed


def _book(client, resource_id, date, slot, user="u1"):
    return client.post(
        "/bookings/slot",
        json={"resource_id": resource_id, "date": date, "slot": slot},
        headers=resident(user),
    )


# ── Identity ─────────────────────────────────────────────────────────────


def test_missing_identity_is_401(client, make_resource):
    room = make_resource()
    resp = client.post(
        "/bookings/slot",
        json={"resource_id": room.id, "date": TODAY, "slot": "10:00-11:00"},
    )
    assert resp.status_code == 401


def test_admin_routes_reject_residents(client):
    assert client.get("/bookings/", headers=resident()).status_code == 403
    assert client.put("/settings/booking-limits", json={"daily_limit": 5}, headers=resident()).status_code == 403


# ── Bookings ─────────────────────────────────────────────────────────────


def test_book_slot_returns_201(client, make_resource):
    room = make_resource()

    resp = _book(client, room.id, TODAY, "10:00-11:00")

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "active"
    assert body["user_id"] == "u1"
    assert body["resource"]["name"] == "Study Room 1"


@pytest.mark.parametrize(
    "payload,code",
    [
        ({"date": TODAY, "slot": "10:00-11:00"}, "InvalidInput"),
        ({"resource_id": 1, "date": "2025/05/28", "slot": "10:00-11:00"}, "InvalidInput"),
        ({"resource_id": 1, "date": TOMORROW, "slot": "07:00-08:00"}, "InvalidSlot"),
        ({"resource_id": 1, "date": YESTERDAY, "slot": "10:00-11:00"}, "PastSlot"),
    ],
)
def test_rejections_are_400_with_code(client, make_resource, payload, code):
    make_resource()

    resp = client.post("/bookings/slot", json=payload, headers=resident())

    assert resp.status_code == 400
    assert resp.json()["code"] == code


def test_unknown_resource_is_404(client):
    resp = _book(client, 999, TODAY, "10:00-11:00")
    assert resp.status_code == 404
    assert resp.json()["code"] == "ResourceNotFound"


def test_double_booking_is_409(client, make_resource):
    room = make_resource()
    assert _book(client, room.id, TOMORROW, "10:00-11:00", user="u1").status_code == 201

    resp = _book(client, room.id, TOMORROW, "10:00-11:00", user="u2")

    assert resp.status_code == 409
    assert resp.json()["code"] == "SlotConflict"


def test_daily_limit_message(client, make_resource):
    room = make_resource()
    _book(client, room.id, TODAY, "10:00-11:00")
    _book(client, room.id, TODAY, "11:00-12:00")

    resp = _book(client, room.id, TODAY, "13:00-14:00")

    assert resp.status_code == 400
    assert resp.json()["code"] == "DailyLimitExceeded"
    assert "Max 2 per day" in resp.json()["detail"]


def test_my_bookings_only_lists_own(client, add_booking, make_resource):
    room = make_resource()
    add_booking("u1", room, YESTERDAY, "10:00-11:00")
    add_booking("u1", room, TOMORROW, "10:00-11:00")
    add_booking("u2", room, TOMORROW, "11:00-12:00")

    resp = client.get("/bookings/my", headers=resident("u1"))

    assert resp.status_code == 200
    rows = resp.json()
    assert [(r["date"], r["is_past"]) for r in rows] == [(TOMORROW, False), (YESTERDAY, True)]


def test_admin_lists_all_bookings(client, add_booking, make_resource):
    room = make_resource()
    add_booking("u1", room, TOMORROW, "10:00-11:00")
    add_booking("u2", room, TOMORROW, "11:00-12:00")

    resp = client.get("/bookings/", headers=admin())

    assert resp.status_code == 200
    assert {r["user_id"] for r in resp.json()} == {"u1", "u2"}


def test_cancel_flow(client, make_resource):
    room = make_resource()
    booking_id = _book(client, room.id, TOMORROW, "10:00-11:00").json()["id"]

    assert client.put(f"/bookings/cancel/{booking_id}", headers=resident("u2")).status_code == 403

    resp = client.put(f"/bookings/cancel/{booking_id}", headers=resident("u1"))
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"

    again = client.put(f"/bookings/cancel/{booking_id}", headers=resident("u1"))
    assert again.status_code == 400
    assert again.json()["code"] == "AlreadyCancelled"


def test_cancel_missing_booking_is_404(client):
    resp = client.put("/bookings/cancel/12345", headers=resident())
    assert resp.status_code == 404
    assert resp.json()["code"] == "BookingNotFound"


def test_admin_cancel(client, make_resource):
    room = make_resource()
    booking_id = _book(client, room.id, TOMORROW, "10:00-11:00").json()["id"]

    assert client.put(f"/bookings/admin/cancel/{booking_id}", headers=resident("u1")).status_code == 403

    resp = client.put(f"/bookings/admin/cancel/{booking_id}", headers=admin())
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"


def test_cancel_past_booking_rejected(client, add_booking, make_resource):
    room = make_resource()
    booking = add_booking("u1", room, YESTERDAY, "10:00-11:00")

    resp = client.put(f"/bookings/cancel/{booking.id}", headers=resident("u1"))

    assert resp.status_code == 400
    assert resp.json()["code"] == "PastBooking"


# ── Availability ─────────────────────────────────────────────────────────


def test_available_slots_endpoint(client, make_resource):
    washer = make_resource(name="Washer 1", type="laundry")
    _book(client, washer.id, TOMORROW, "10:00-11:00")

    resp = client.get(f"/resources/{washer.id}/available-slots", params={"date": TOMORROW}, headers=resident())

    assert resp.status_code == 200
    body = resp.json()
    assert body["resource_type"] == "laundry"
    assert "10:00-11:00" not in body["available_slots"]
    assert len(body["available_slots"]) == 7


def test_available_slots_requires_date(client, make_resource):
    washer = make_resource(name="Washer 1", type="laundry")

    resp = client.get(f"/resources/{washer.id}/available-slots", headers=resident())

    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidInput"


# ── Resources ────────────────────────────────────────────────────────────


def test_create_and_list_resources(client):
    resp = client.post(
        "/resources/",
        json={"name": "Washer 3", "type": "laundry", "location": "Block B"},
        headers=admin(),
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["status"] == "available"
    assert created["picture"] == "default-resource.png"

    listed = client.get("/resources/", params={"type": "laundry"}).json()
    assert [r["name"] for r in listed] == ["Washer 3"]
    assert client.get("/resources/", params={"type": "sports"}).json() == []


def test_create_resource_with_unknown_type(client):
    resp = client.post(
        "/resources/",
        json={"name": "Sauna", "type": "sauna", "location": "Basement"},
        headers=admin(),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidInput"


def test_get_missing_resource(client):
    assert client.get("/resources/999").status_code == 404


def test_update_resource(client, make_resource):
    room = make_resource()

    resp = client.patch(f"/resources/{room.id}", json={"location": "Annex"}, headers=admin())

    assert resp.status_code == 200
    assert resp.json()["location"] == "Annex"
    assert resp.json()["name"] == "Study Room 1"


def test_out_of_service_blocks_booking(client, make_resource):
    room = make_resource()

    resp = client.put(f"/resources/status/{room.id}", json={"status": "out-of-service"}, headers=admin())
    assert resp.status_code == 200
    assert resp.json()["status"] == "out-of-service"

    booked = _book(client, room.id, TOMORROW, "10:00-11:00")
    assert booked.status_code == 400
    assert booked.json()["code"] == "ResourceUnavailable"


def test_invalid_status_rejected(client, make_resource):
    room = make_resource()
    resp = client.put(f"/resources/status/{room.id}", json={"status": "broken"}, headers=admin())
    assert resp.status_code == 422


@pytest.mark.parametrize(
    "payload",
    [{"status": None}, {"name": None}, {"type": None}, {"type": ""}, {"location": ""}],
)
def test_update_rejects_null_or_empty_fields(client, make_resource, payload):
    room = make_resource()

    resp = client.patch(f"/resources/{room.id}", json=payload, headers=admin())

    assert resp.status_code == 422
    current = client.get(f"/resources/{room.id}").json()
    assert current["type"] == "study_room"
    assert current["status"] == "available"


def test_update_to_unknown_type_rejected(client, make_resource):
    room = make_resource()

    resp = client.patch(f"/resources/{room.id}", json={"type": "sauna"}, headers=admin())

    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidInput"


def test_delete_resource_cascades_bookings(client, make_resource):
    room = make_resource()
    _book(client, room.id, TOMORROW, "10:00-11:00")

    assert client.delete(f"/resources/{room.id}", headers=admin()).status_code == 204
    assert client.get(f"/resources/{room.id}").status_code == 404
    assert client.get("/bookings/my", headers=resident("u1")).json() == []


# ── Settings ─────────────────────────────────────────────────────────────


def test_get_settings(client):
    resp = client.get("/settings/", headers=resident())

    assert resp.status_code == 200
    body = resp.json()
    assert [rt["value"] for rt in body["resource_types"]] == ["laundry", "study_room", "sports"]
    assert body["booking_limits"] == {"daily_limit": 2, "weekly_limit": 4, "advance_booking_limit": 1}


def test_manage_resource_types(client):
    resp = client.post(
        "/settings/resource-types",
        json={"value": "Music Room", "label": "Music Room", "icon": "music"},
        headers=admin(),
    )
    assert resp.status_code == 200
    assert "music_room" in [rt["value"] for rt in resp.json()["resource_types"]]

    dup = client.post(
        "/settings/resource-types",
        json={"value": "music_room", "label": "Music"},
        headers=admin(),
    )
    assert dup.status_code == 400
    assert dup.json()["code"] == "CatalogInvalid"

    resp = client.request("DELETE", "/settings/resource-types", json={"value": "music_room"}, headers=admin())
    assert "music_room" not in [rt["value"] for rt in resp.json()["resource_types"]]


def test_manage_time_slots(client, make_resource):
    washer = make_resource(name="Washer 1", type="laundry")

    resp = client.post(
        "/settings/resource-types/time-slots",
        json={"resource_type": "laundry", "slot": "17:00-18:00"},
        headers=admin(),
    )
    assert resp.status_code == 200

    slots = client.get(
        f"/resources/{washer.id}/available-slots", params={"date": TOMORROW}, headers=resident()
    ).json()["available_slots"]
    assert slots[-1] == "17:00-18:00"

    overlap = client.post(
        "/settings/resource-types/time-slots",
        json={"resource_type": "laundry", "slot": "17:30-18:30"},
        headers=admin(),
    )
    assert overlap.status_code == 400
    assert overlap.json()["code"] == "CatalogInvalid"

    missing = client.post(
        "/settings/resource-types/time-slots",
        json={"resource_type": "sauna", "slot": "06:00-07:00"},
        headers=admin(),
    )
    assert missing.status_code == 404

    resp = client.request(
        "DELETE",
        "/settings/resource-types/time-slots",
        json={"resource_type": "laundry", "slot": "17:00-18:00"},
        headers=admin(),
    )
    laundry = next(rt for rt in resp.json()["resource_types"] if rt["value"] == "laundry")
    assert "17:00-18:00" not in laundry["time_slots"]


def test_update_booking_limits(client, make_resource):
    resp = client.put("/settings/booking-limits", json={"daily_limit": 1}, headers=admin())
    assert resp.status_code == 200
    assert resp.json()["booking_limits"]["daily_limit"] == 1
    assert resp.json()["booking_limits"]["weekly_limit"] == 4

    room = make_resource()
    assert _book(client, room.id, TODAY, "10:00-11:00").status_code == 201
    assert _book(client, room.id, TODAY, "11:00-12:00").json()["code"] == "DailyLimitExceeded"


def test_negative_limit_rejected(client):
    resp = client.put("/settings/booking-limits", json={"weekly_limit": -1}, headers=admin())
    assert resp.status_code == 422


# ── Events / health ──────────────────────────────────────────────────────


def test_booking_events_pushed(client, events, make_resource):
    room = make_resource()
    booking_id = _book(client, room.id, TOMORROW, "10:00-11:00").json()["id"]
    client.put(f"/bookings/cancel/{booking_id}", headers=resident("u1"))

    assert [(queue, event["type"]) for queue, event in events] == [
        ("events:p2p", "booking_created"),
        ("events:p2p", "booking_cancelled"),
    ]
    created = events[0][1]
    assert created["booking_id"] == booking_id
    assert created["slot"] == "10:00-11:00"
    assert "ts" in created


def test_resource_status_broadcast(client, events, make_resource):
    room = make_resource()

    client.put(f"/resources/status/{room.id}", json={"status": "out-of-service"}, headers=admin())

    queue, event = events[-1]
    assert queue == "events:broadcast"
    assert event["type"] == "resource_status_changed"
    assert "out of service" in event["message"]


def test_rejected_booking_emits_nothing(client, events, make_resource):
    room = make_resource()
    _book(client, room.id, YESTERDAY, "10:00-11:00")
    assert events == []


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "redis": None}
