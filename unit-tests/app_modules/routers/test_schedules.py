# Test the schedules route of the API

import pytest
import sys
import os
import icalendar
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import unit_test_utils
from unit_test_utils import dt
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..', '..', 'app'))
from app import app
from fastapi.testclient import TestClient

@pytest.fixture
def setup_teardown():
    store = unit_test_utils.Store()
    unit_test_utils.install_store(app, store)
    owner, owner_key = store.add_user()
    other, other_key = store.add_user()
    calendar = store.add_calendar(owner, name="Work")
    yield {
        "store": store,
        "owner": owner,
        "other": other,
        "calendar": calendar,
        "headers": unit_test_utils.auth_headers(owner, owner_key),
        "other_headers": unit_test_utils.auth_headers(other, other_key),
    }
    app.dependency_overrides.clear()

def _schedule_body(start="2024-05-01T09:00:00", end="2024-05-01T10:00:00", title="Standup"):
    return {"title": title, "description": "Daily", "start_time": start, "end_time": end, "location": "Room 1"}

def test_create_schedule(setup_teardown):
    s = setup_teardown
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules/"

    response = client.post(url, json=_schedule_body())
    assert response.status_code == 401

    response = client.post(url, json=_schedule_body(), headers=s["headers"])
    assert response.status_code == 201
    body = response.json()
    assert body["resultCode"] == "201-1"
    assert body["data"]["title"] == "Standup"
    assert body["data"]["user_id"] == s["owner"].id
    assert body["data"]["start_time"] == "2024-05-01T09:00:00"

    response = client.post(url, json=_schedule_body(), headers=s["other_headers"])
    assert response.status_code == 403

    response = client.post(url, json=_schedule_body(start="2024-05-01T11:00:00"), headers=s["headers"])
    assert response.status_code == 400
    assert response.json()["resultCode"] == "400-1"

    response = client.post("/api/calendars/999/schedules/", json=_schedule_body(), headers=s["headers"])
    assert response.status_code == 404

def test_create_schedule_validation(setup_teardown):
    s = setup_teardown
    client = TestClient(app)
    response = client.post(
        f"/api/calendars/{s['calendar'].id}/schedules/",
        json={"title": "No times"},
        headers=s["headers"],
    )
    assert response.status_code == 422

def test_get_schedule(setup_teardown):
    s = setup_teardown
    store = s["store"]
    schedule = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-01T09:00"), dt("2024-05-01T10:00"))
    second = store.add_calendar(s["owner"], name="Home")
    client = TestClient(app)

    response = client.get(f"/api/calendars/{s['calendar'].id}/schedules/{schedule.id}", headers=s["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["id"] == schedule.id

    # Right schedule, wrong calendar
    response = client.get(f"/api/calendars/{second.id}/schedules/{schedule.id}", headers=s["headers"])
    assert response.status_code == 400

    response = client.get(f"/api/calendars/{s['calendar'].id}/schedules/999", headers=s["headers"])
    assert response.status_code == 404

    response = client.get(f"/api/calendars/{s['calendar'].id}/schedules/{schedule.id}", headers=s["other_headers"])
    assert response.status_code == 403

def test_update_schedule(setup_teardown):
    s = setup_teardown
    store = s["store"]
    schedule = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-01T09:00"), dt("2024-05-01T10:00"))
    foreign = store.add_schedule(s["calendar"], s["other"], dt("2024-05-02T09:00"), dt("2024-05-02T10:00"))
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules"

    response = client.put(f"{url}/{schedule.id}", json=_schedule_body(title="Retro"), headers=s["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Retro"
    assert store.schedules.find_by_id(schedule.id).title == "Retro"

    # Calendar owner but not the author
    response = client.put(f"{url}/{foreign.id}", json=_schedule_body(title="Mine"), headers=s["headers"])
    assert response.status_code == 403
    assert store.schedules.find_by_id(foreign.id).title == "Meeting"

def test_delete_schedule(setup_teardown):
    s = setup_teardown
    store = s["store"]
    schedule = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-01T09:00"), dt("2024-05-01T10:00"))
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules/{schedule.id}"

    assert client.delete(url, headers=s["other_headers"]).status_code == 403
    response = client.delete(url, headers=s["headers"])
    assert response.status_code == 200
    assert response.json()["data"] == {}
    assert store.schedules.find_by_id(schedule.id) is None
    assert client.delete(url, headers=s["headers"]).status_code == 404

def test_get_schedules_by_range(setup_teardown):
    s = setup_teardown
    store = s["store"]
    first = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-01T09:00"), dt("2024-05-01T10:00"))
    second = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-03T23:00"), dt("2024-05-04T01:00"))
    store.add_schedule(s["calendar"], s["owner"], dt("2024-05-05T09:00"), dt("2024-05-05T10:00"))
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules/"

    response = client.get(url, params={"start_date": "2024-05-01", "end_date": "2024-05-03"}, headers=s["headers"])
    assert response.status_code == 200
    assert [x["id"] for x in response.json()["data"]] == [first.id, second.id]

    response = client.get(url, params={"start_date": "2024-05-03", "end_date": "2024-05-01"}, headers=s["headers"])
    assert response.status_code == 400

    response = client.get(url, params={"start_date": "yesterday", "end_date": "2024-05-01"}, headers=s["headers"])
    assert response.status_code == 400
    assert response.json()["resultCode"] == "400-2"

@pytest.mark.parametrize("view, date, expected_titles", [
    ("daily", "2024-03-13", ["Wednesday"]),
    ("weekly", "2024-03-13", ["Sunday", "Wednesday", "Saturday"]),
    ("monthly", "2024-03-13", ["Sunday", "Wednesday", "Saturday", "Last of March"]),
])
def test_granular_views(setup_teardown, view, date, expected_titles):
    s = setup_teardown
    store = s["store"]
    calendar, owner = s["calendar"], s["owner"]
    store.add_schedule(calendar, owner, dt("2024-03-10T08:00"), dt("2024-03-10T09:00"), title="Sunday")
    store.add_schedule(calendar, owner, dt("2024-03-13T08:00"), dt("2024-03-13T09:00"), title="Wednesday")
    store.add_schedule(calendar, owner, dt("2024-03-16T08:00"), dt("2024-03-16T09:00"), title="Saturday")
    store.add_schedule(calendar, owner, dt("2024-03-31T23:00"), dt("2024-03-31T23:59:59"), title="Last of March")
    store.add_schedule(calendar, owner, dt("2024-04-01T00:00"), dt("2024-04-01T01:00"), title="April")
    client = TestClient(app)

    response = client.get(
        f"/api/calendars/{calendar.id}/schedules/{view}", params={"date": date}, headers=s["headers"]
    )
    assert response.status_code == 200
    assert [x["title"] for x in response.json()["data"]] == expected_titles

def test_granular_views_errors(setup_teardown):
    s = setup_teardown
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules"

    response = client.get(f"{url}/weekly", params={"date": "13/03/2024"}, headers=s["headers"])
    assert response.status_code == 400
    assert response.json()["resultCode"] == "400-2"

    response = client.get(f"{url}/monthly", params={"date": "2024-03-13"}, headers=s["other_headers"])
    assert response.status_code == 403

    response = client.get(f"{url}/daily", params={"date": "2024-03-13"})
    assert response.status_code == 401

def test_export_schedules(setup_teardown):
    s = setup_teardown
    store = s["store"]
    schedule = store.add_schedule(s["calendar"], s["owner"], dt("2024-05-01T09:00"), dt("2024-05-01T10:00"),
                                  title="Standup", location="Room 1")
    client = TestClient(app)
    url = f"/api/calendars/{s['calendar'].id}/schedules/export"

    response = client.get(url, params={"start_date": "2024-05-01", "end_date": "2024-05-31"}, headers=s["headers"])
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert "attachment" in response.headers["content-disposition"]

    cal = icalendar.Calendar.from_ical(response.content)
    assert str(cal.get("x-wr-calname")) == "Work"
    events = list(cal.walk("VEVENT"))
    assert len(events) == 1
    assert str(events[0].get("uid")) == f"schedulr-{s['calendar'].id}-{schedule.id}"

    response = client.get(url, params={"start_date": "2024-05-01", "end_date": "2024-05-31"}, headers=s["other_headers"])
    assert response.status_code == 403
    assert response.json()["resultCode"] == "403-1"
