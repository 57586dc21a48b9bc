from __future__ import annotations

from fitness_calendar.logs import LogEntry, LogStore


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_page_serves_calendar_shell(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert "calendar-days" in resp.text
    assert "activity-modal" in resp.text


def test_view_snapshot(client):
    data = client.get("/view").json()

    assert data["grid"]["title"] == "February 2024"
    assert data["grid"]["leading_blanks"] == 4
    assert len(data["grid"]["days"]) == 29
    assert data["grid"]["fixed_remaining"] == 5
    assert data["grid"]["credits_remaining"] == 50
    assert data["modal"] == {"open": False}
    assert data["reset_prompt"].startswith("Are you sure you want to erase all data for February?")


def test_navigate(client):
    data = client.post("/view/navigate", json={"delta": -2}).json()

    assert data["grid"]["title"] == "December 2023"


def test_navigate_requires_integer_delta(client):
    assert client.post("/view/navigate", json={"delta": "soon"}).status_code == 400


def test_show_month_rejects_invalid_month(client):
    assert client.post("/view/month", json={"year": 2024, "month": 13}).status_code == 400


def test_log_credit_class_through_modal(client, memory_storage):
    opened = client.post("/view/days/11/open").json()
    assert opened["modal"]["title"] == "Log for 2024-02-11"
    assert opened["modal"]["activity_type"] == "pilates"

    typed = client.post("/view/modal/type", json={"activity_type": "classpass"}).json()
    assert typed["modal"]["shows_cost_input"] is True

    saved = client.post("/view/modal/save", json={"cost_draft": "12"}).json()

    assert saved["modal"] == {"open": False}
    assert saved["grid"]["days"][10]["label"] == "12 Credits"
    assert saved["grid"]["credits_remaining"] == 38
    assert LogStore(memory_storage).load() == {"2024-02-11": LogEntry.credit(12)}


def test_non_numeric_cost_saves_zero(client):
    client.post("/view/days/11/open")
    client.post("/view/modal/type", json={"activity_type": "classpass"})
    client.post("/view/modal/save", json={"cost_draft": "abc"})

    assert client.get("/logs").json() == {"2024-02-11": {"type": "classpass", "cost": 0}}


def test_delete_and_close(client):
    client.post("/view/days/10/open")
    client.post("/view/modal/save", json={})

    reopened = client.post("/view/days/10/open").json()
    assert reopened["modal"]["can_delete"] is True

    deleted = client.post("/view/modal/delete").json()
    assert deleted["modal"] == {"open": False}
    assert client.get("/logs").json() == {}

    client.post("/view/days/10/open")
    assert client.post("/view/modal/close").json()["modal"] == {"open": False}


def test_modal_events_need_open_modal(client):
    assert client.post("/view/modal/save", json={}).status_code == 409
    assert client.post("/view/modal/type", json={"activity_type": "classpass"}).status_code == 409


def test_unknown_activity_type(client):
    client.post("/view/days/1/open")

    assert client.post("/view/modal/type", json={"activity_type": "yoga"}).status_code == 400


def test_bad_day_and_date_key(client):
    assert client.post("/view/days/30/open").status_code == 400
    assert client.post("/view/dates/2024-2-01/open").status_code == 400


def test_reset_requires_confirmation(client, session, february_logs):
    session.store.save({**february_logs, "2024-03-01": LogEntry.fixed()})

    refused = client.post("/view/reset")
    assert refused.status_code == 400
    assert "cannot be undone" in refused.json()["detail"]
    assert len(session.store.logs) == 3

    data = client.post("/view/reset", params={"confirm": "true"}).json()
    assert data["grid"]["fixed_remaining"] == 5
    assert client.get("/logs").json() == {"2024-03-01": {"type": "pilates", "cost": 1}}


def test_calendar_read_does_not_move_view(client, session, february_logs):
    session.store.save(february_logs)

    data = client.get("/calendar/2024/2").json()

    assert data["fixed_remaining"] == 4
    assert data["credits_remaining"] == 38
    assert data["days"][9]["label"] == "Pilates"
    assert client.get("/calendar/2024/13").status_code == 400
    assert (session.view.year, session.view.month) == (2024, 2)


def test_navigate_past_last_year_keeps_view_usable(client):
    assert client.post("/view/month", json={"year": 9999, "month": 12}).status_code == 200
    assert client.post("/view/navigate", json={"delta": 1}).status_code == 400

    resp = client.get("/view")

    assert resp.status_code == 200
    assert resp.json()["grid"]["title"] == "December 9999"


def test_padded_date_key_is_rejected(client):
    assert client.post("/view/dates/%202024-02-10/open").status_code == 400
    assert client.post("/view/modal/save", json={}).status_code == 409
    assert client.get("/logs").json() == {}


def test_navigate_rejects_fractional_delta(client):
    assert client.post("/view/navigate", json={"delta": 1.5}).status_code == 400
    assert client.post("/view/navigate", json={"delta": 1.0}).json()["grid"]["title"] == "March 2024"
