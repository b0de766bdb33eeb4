from datetime import date, timedelta

from tutorledger.core.errors import StoreError
from tutorledger.db.models.coaching_session import SessionStatus
from tutorledger.db.store import EntityStore


def _upcoming(day_of_week: int) -> date:
    today = date.today()
    return today + timedelta(days=(day_of_week - today.isoweekday() % 7) % 7)


def _create_student(client, day_of_week, start_time="09:00:00", price=40):
    response = client.post(
        "/api/v1/students",
        json={
            "name": "Alice",
            "hourly_rate": 40,
            "category": "gym",
            "schedule": [
                {
                    "days_of_week": [day_of_week],
                    "start_time": start_time,
                    "duration_minutes": 60,
                    "category": "gym",
                    "price": price,
                }
            ],
        },
    )
    assert response.status_code == 200, response.text
    student = response.json()
    slots = client.get("/api/v1/slots", params={"student_id": student["id"]}).json()
    return student, slots[0]


def test_complete_then_repeat_is_rejected(api_client):
    client, _ = api_client
    monday = _upcoming(1)
    _, slot = _create_student(client, 1)

    due = client.get("/api/v1/dashboard/due", params={"on": monday.isoformat()}).json()
    assert [(item["kind"], item["id"]) for item in due] == [("slot", slot["id"])]
    assert due[0]["student_name"] == "Alice"
    assert due[0]["start_time"] == "09:00:00"

    ref = {"kind": "slot", "id": slot["id"], "on": monday.isoformat()}
    response = client.post("/api/v1/dashboard/complete", json=ref)
    assert response.status_code == 200, response.text
    [session] = response.json()["sessions"]
    assert session["status"] == "completed"
    assert session["price"] == 40.0
    assert session["schedule_slot_id"] == slot["id"]
    assert session["session_date"] == monday.isoformat()

    again = client.post("/api/v1/dashboard/miss", json=ref)
    assert again.status_code == 409
    assert client.get("/api/v1/dashboard/due", params={"on": monday.isoformat()}).json() == []


def test_reschedule_round_trip(api_client):
    client, _ = api_client
    monday = _upcoming(1)
    wednesday = monday + timedelta(days=2)
    student, slot = _create_student(client, 1)

    response = client.post(
        "/api/v1/dashboard/reschedule",
        json={
            "kind": "slot",
            "id": slot["id"],
            "on": monday.isoformat(),
            "new_date": wednesday.isoformat(),
            "new_time": "15:00:00",
        },
    )
    assert response.status_code == 200, response.text
    original, follow_up = response.json()["sessions"]
    assert original["status"] == "rescheduled"
    assert original["rescheduled_to_date"] == wednesday.isoformat()
    assert follow_up["status"] == "pending"
    assert follow_up["schedule_slot_id"] is None

    assert client.get("/api/v1/dashboard/due", params={"on": monday.isoformat()}).json() == []
    due = client.get("/api/v1/dashboard/due", params={"on": wednesday.isoformat()}).json()
    assert [(item["kind"], item["id"]) for item in due] == [("session", follow_up["id"])]
    assert due[0]["start_time"] == "15:00:00"

    done = client.post(
        "/api/v1/dashboard/complete",
        json={"kind": "session", "id": follow_up["id"], "on": wednesday.isoformat()},
    )
    assert done.status_code == 200, done.text
    assert done.json()["sessions"][0]["id"] == follow_up["id"]
    assert done.json()["sessions"][0]["status"] == "completed"

    sessions = client.get("/api/v1/sessions", params={"student_id": student["id"]}).json()
    assert sorted(s["status"] for s in sessions) == ["completed", "rescheduled"]


def test_reschedule_into_the_past_is_rejected(api_client):
    client, _ = api_client
    today = date.today()
    _, slot = _create_student(client, today.isoweekday() % 7)

    response = client.post(
        "/api/v1/dashboard/reschedule",
        json={
            "kind": "slot",
            "id": slot["id"],
            "new_date": (today - timedelta(days=1)).isoformat(),
            "new_time": "10:00:00",
        },
    )

    assert response.status_code == 422
    assert client.get("/api/v1/sessions").json() == []
    due = client.get("/api/v1/dashboard/due").json()
    assert [(item["kind"], item["id"]) for item in due] == [("slot", slot["id"])]


def test_item_not_due_on_that_day(api_client):
    client, _ = api_client
    monday = _upcoming(1)
    _, slot = _create_student(client, 1)

    response = client.post(
        "/api/v1/dashboard/complete",
        json={"kind": "slot", "id": slot["id"], "on": (monday + timedelta(days=1)).isoformat()},
    )

    assert response.status_code == 409


def test_partial_reschedule_failure_names_orphaned_session(api_client, monkeypatch):
    client, _ = api_client
    monday = _upcoming(1)
    _, slot = _create_student(client, 1)
    real_insert = EntityStore.insert

    def flaky_insert(self, model, **fields):
        if fields.get("status") == SessionStatus.pending:
            raise StoreError("connection lost")
        return real_insert(self, model, **fields)

    monkeypatch.setattr(EntityStore, "insert", flaky_insert)

    response = client.post(
        "/api/v1/dashboard/reschedule",
        json={
            "kind": "slot",
            "id": slot["id"],
            "on": monday.isoformat(),
            "new_date": (monday + timedelta(days=2)).isoformat(),
            "new_time": "15:00:00",
        },
    )

    assert response.status_code == 500
    detail = response.json()["detail"]
    [orphan] = client.get("/api/v1/sessions").json()
    assert detail["rescheduled_session_id"] == orphan["id"]
    assert orphan["status"] == "rescheduled"


def test_summary_counts_due_items_and_earnings(api_client):
    client, _ = api_client
    monday = _upcoming(1)
    _, slot = _create_student(client, 1, price=55)
    client.post(
        "/api/v1/dashboard/complete",
        json={"kind": "slot", "id": slot["id"], "on": monday.isoformat()},
    )
    _create_student(client, 1, start_time="18:00:00")

    response = client.get("/api/v1/dashboard/summary", params={"on": monday.isoformat()})

    assert response.status_code == 200
    summary = response.json()
    assert summary["total_earnings"] == 55.0
    assert summary["due_count"] == 1
    assert len(summary["monthly"]) == 6
    assert summary["monthly"][-1]["earnings"] == 55.0
