"""Calendar endpoints: identity resolution, provider calls and error mapping."""

import pytest


def create(client, username="anna", **overrides):
    body = {
        "eventSummary": "Keuring elektriciteit",
        "eventLocation": "Kerkstraat 1, Gent",
        "eventDescription": "Klant: Janssens",
        "eventStart": "2030-03-04T09:00:00",
        "eventEnd": "2030-03-04T10:30:00",
    }
    body.update(overrides)
    return client.post(f"/calendars/{username}/events", json=body)


def test_create_then_list_round_trips_event_fields(client):
    response = create(client)
    assert response.status_code == 200
    event_id = response.json()["id"]

    events = client.get("/calendars/anna/events").json()["events"]
    assert [event["id"] for event in events] == [event_id]
    event = events[0]
    assert event["summary"] == "Keuring elektriciteit"
    assert event["location"] == "Kerkstraat 1, Gent"
    assert event["description"] == "Klant: Janssens"
    assert event["start"] == {"dateTime": "2030-03-04T09:00:00", "timeZone": "Europe/Brussels"}
    assert event["end"] == {"dateTime": "2030-03-04T10:30:00", "timeZone": "Europe/Brussels"}


def test_list_returns_at_most_three_events_by_start(client):
    for day in (9, 5, 7, 6, 8):
        create(client, eventStart=f"2030-03-0{day}T09:00:00", eventEnd=f"2030-03-0{day}T10:00:00")

    events = client.get("/calendars/anna/events").json()["events"]

    starts = [event["start"]["dateTime"] for event in events]
    assert starts == ["2030-03-05T09:00:00", "2030-03-06T09:00:00", "2030-03-07T09:00:00"]


def test_calendar_is_selected_by_directory_email(client, calendar):
    create(client, username="bert")
    client.get("/calendars/bert/events")

    assert {calendar_id for _, calendar_id in calendar.calls} == {"bert@example.com"}


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("GET", "/calendars/nobody/events", None),
        (
            "POST",
            "/calendars/nobody/events",
            {
                "eventSummary": "x",
                "eventLocation": "y",
                "eventDescription": "z",
                "eventStart": "2030-01-01T10:00:00",
                "eventEnd": "2030-01-01T11:00:00",
            },
        ),
        (
            "PUT",
            "/calendars/nobody/events/evt1",
            {"eventStart": "2030-01-01T10:00:00", "eventEnd": "2030-01-01T11:00:00"},
        ),
        ("DELETE", "/calendars/nobody/events/evt1", None),
    ],
)
def test_unknown_user_is_404_without_calendar_call(client, calendar, method, path, body):
    response = client.request(method, path, json=body)

    assert response.status_code == 404
    assert response.json()["error"] == "User nobody not found"
    assert response.json()["code"] == "USER_NOT_FOUND"
    assert calendar.calls == []


def test_username_match_is_case_sensitive(client):
    assert client.get("/calendars/Anna/events").status_code == 404


def test_directory_failure_is_500(client, directory, calendar):
    directory.unavailable = True

    response = client.get("/calendars/anna/events")

    assert response.status_code == 500
    assert response.json()["error"] == "Database error: connection refused"
    assert calendar.calls == []


def test_reschedule_bumps_sequence_and_returns_event(client):
    event_id = create(client).json()["id"]

    response = client.put(
        f"/calendars/anna/events/{event_id}",
        json={"eventStart": "2030-03-11T14:00:00", "eventEnd": "2030-03-11T15:00:00"},
    )

    assert response.status_code == 200
    event = response.json()
    assert event["sequence"] == 1
    assert event["summary"] == "Keuring elektriciteit"
    assert event["start"]["dateTime"] == "2030-03-11T14:00:00"


def test_reschedule_rejects_end_before_start(client, calendar):
    response = client.put(
        "/calendars/anna/events/evt1",
        json={"eventStart": "2030-03-11T14:00:00", "eventEnd": "2030-03-11T13:00:00"},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_REQUEST"
    assert calendar.calls == []


def test_delete_existing_event(client, calendar):
    event_id = create(client).json()["id"]

    response = client.delete(f"/calendars/anna/events/{event_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "id": event_id}
    assert calendar.calendars["anna@example.com"] == {}


def test_delete_missing_event_reports_provider_message(client):
    response = client.delete("/calendars/anna/events/does-not-exist")

    assert response.status_code == 500
    body = response.json()
    assert "Not Found" in body["error"]
    assert body["code"] == "CALENDAR_OPERATION_FAILED"


def test_provider_failure_is_normalized(client, calendar):
    calendar.failure = "Rate Limit Exceeded"

    response = client.get("/calendars/anna/events")

    assert response.status_code == 500
    assert response.json()["error"] == "Calendar list failed: Rate Limit Exceeded"


def test_create_requires_all_fields(client, calendar):
    response = client.post("/calendars/anna/events", json={"eventSummary": "only a title"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Invalid request"
    assert any("eventStart" in detail for detail in body["details"])
    assert calendar.calls == []


def test_create_accepts_snake_case_fields(client):
    response = client.post(
        "/calendars/anna/events",
        json={
            "summary": "Keuring gas",
            "location": "Markt 2",
            "description": "",
            "start": "2030-05-01T08:00:00",
            "end": "2030-05-01T09:00:00",
        },
    )

    assert response.status_code == 200


def test_create_rejects_aware_end_before_naive_start(client, calendar):
    # 08:00 UTC is 09:00 in Brussels, before the 10:00 Brussels start
    response = create(client, eventStart="2030-03-04T10:00:00", eventEnd="2030-03-04T08:00:00Z")

    assert response.status_code == 422
    assert calendar.calls == []


def test_create_accepts_aware_end_after_naive_start(client):
    response = create(client, eventStart="2030-03-04T10:00:00", eventEnd="2030-03-04T10:00:00Z")

    assert response.status_code == 200
