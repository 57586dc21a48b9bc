import threading
from collections.abc import Callable
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse

from fitness_calendar.calendar_view import render
from fitness_calendar.config import DATA_DIR, configure_logging
from fitness_calendar.logs import LogStore
from fitness_calendar.modal import ModalNotOpenError
from fitness_calendar.session import CalendarSession
from fitness_calendar.storage import JsonFileStorage

configure_logging()

app = FastAPI(title="Fitness Calendar")

SESSION_LOCK = threading.Lock()
_session: CalendarSession | None = None


def get_session() -> CalendarSession:
    global _session
    if _session is None:
        _session = CalendarSession.start(LogStore(JsonFileStorage(DATA_DIR)))
    return _session


def snapshot(session: CalendarSession) -> dict[str, Any]:
    return {**session.snapshot(), "reset_prompt": session.reset_prompt()}


def run_event(handler: Callable[[CalendarSession], Any]) -> dict[str, Any]:
    """Apply one UI event to the session and return the redrawn view."""
    with SESSION_LOCK:
        session = get_session()
        try:
            handler(session)
        except ModalNotOpenError as err:
            raise HTTPException(status_code=409, detail=str(err)) from err
        except ValueError as err:
            raise HTTPException(status_code=400, detail=str(err)) from err
        return snapshot(session)


def as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise HTTPException(status_code=400, detail=f"{name} must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as err:
        raise HTTPException(status_code=400, detail=f"{name} must be an integer.") from err


@app.get("/", response_class=HTMLResponse)
def page() -> str:
    return """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Fitness Calendar</title>
  <style>
    :root {
      --bg: #e8eef6;
      --panel: #ffffff;
      --line: #d7e0eb;
      --text: #172333;
      --muted: #6b7e93;
      --blue: #1e58d1;
      --pink: #ed4e95;
      --bad: #c0392b;
      --shadow: 0 12px 26px rgba(11, 25, 41, 0.08);
      --radius: 12px;
    }

    * { box-sizing: border-box; }

    body {
      margin: 0;
      color: var(--text);
      font-family: system-ui, -apple-system, "Segoe UI", Roboto, Arial, sans-serif;
      background: linear-gradient(180deg, #f4f7fb 0%, var(--bg) 100%);
    }

    .wrap { max-width: 880px; margin: 0 auto; padding: 18px; }

    .stats { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; margin-bottom: 14px; }
    .stat {
      background: var(--panel);
      border: 1px solid var(--line);
      border-radius: var(--radius);
      box-shadow: var(--shadow);
      padding: 14px;
    }
    .stat .label { color: var(--muted); font-size: 13px; }
    .stat .value { font-size: 34px; font-weight: 700; }
    .stat .value.negative { color: var(--bad); }

    .cal-head { display: flex; align-items: center; justify-content: space-between; gap: 8px; margin-bottom: 10px; }
    .cal-head h2 { margin: 0; font-size: 22px; }

    .btn {
      border: 1px solid var(--line);
      background: var(--panel);
      color: var(--text);
      border-radius: 8px;
      padding: 7px 12px;
      cursor: pointer;
    }
    .btn.primary { background: var(--blue); border-color: var(--blue); color: #fff; }
    .btn.danger { color: var(--bad); }
    .btn.selected { outline: 2px solid var(--blue); }

    .dow, .days { display: grid; grid-template-columns: repeat(7, 1fr); gap: 6px; }
    .dow div { color: var(--muted); font-size: 12px; text-align: center; padding: 4px 0; }

    .day-cell {
      min-height: 76px;
      background: var(--panel);
      border: 1px solid var(--line);
      border-radius: 10px;
      padding: 6px;
      cursor: pointer;
    }
    .day-cell.empty { background: transparent; border: 0; cursor: default; }
    .day-number { font-size: 13px; color: var(--muted); }
    .log-entry { margin-top: 6px; font-size: 12px; border-radius: 6px; padding: 3px 6px; color: #fff; }
    .log-pilates { background: var(--pink); }
    .log-classpass { background: var(--blue); }

    .modal {
      position: fixed;
      inset: 0;
      background: rgba(11, 24, 39, 0.45);
      display: none;
      justify-content: center;
      align-items: center;
      padding: 16px;
      z-index: 50;
    }

    .modal.open { display: flex; }

    .modal-card {
      width: min(420px, 100%);
      border-radius: 14px;
      border: 1px solid #d4e1ef;
      background: #fff;
      box-shadow: 0 24px 44px rgba(12, 26, 42, 0.24);
      padding: 18px;
    }

    .modal-top { display: flex; justify-content: space-between; align-items: center; margin-bottom: 12px; }
    .modal-top h3 { margin: 0; }
    .type-row { display: flex; gap: 8px; margin-bottom: 12px; }
    .modal-footer { display: flex; justify-content: space-between; gap: 8px; margin-top: 14px; }
    .hidden { display: none; }
  </style>
</head>
<body>
  <div class="wrap">
    <div class="stats">
      <div class="stat"><div class="label">Pilates classes left</div><div class="value" id="pilates-left">-</div></div>
      <div class="stat"><div class="label">ClassPass credits left</div><div class="value" id="credits-left">-</div></div>
    </div>

    <div class="cal-head">
      <button class="btn" id="prev-month-btn">&lsaquo;</button>
      <h2 id="month-year-header"></h2>
      <button class="btn" id="next-month-btn">&rsaquo;</button>
    </div>
    <div class="dow"><div>Sun</div><div>Mon</div><div>Tue</div><div>Wed</div><div>Thu</div><div>Fri</div><div>Sat</div></div>
    <div class="days" id="calendar-days"></div>
    <p><button class="btn danger" id="reset-month-btn">Reset month</button></p>
  </div>

  <div id="activity-modal" class="modal">
    <div class="modal-card">
      <div class="modal-top">
        <h3 id="modal-title"></h3>
        <button class="btn" id="modal-close-btn">&times;</button>
      </div>
      <div class="type-row">
        <button class="btn" id="pilates-btn" data-type="pilates">Pilates</button>
        <button class="btn" id="classpass-btn" data-type="classpass">ClassPass</button>
      </div>
      <div id="credits-input-group">
        <label for="credit-cost">Credits used</label>
        <input id="credit-cost" type="number" min="0" />
      </div>
      <div class="modal-footer">
        <button class="btn danger" id="delete-btn">Delete</button>
        <button class="btn primary" id="save-btn">Save</button>
      </div>
    </div>
  </div>

  <script>
    let resetPrompt = '';

    async function send(url, body) {
      const resp = await fetch(url, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify(body || {}),
      });
      const data = await resp.json();
      if (!resp.ok) {
        alert(data.detail || 'Request failed.');
        return null;
      }
      draw(data);
      return data;
    }

    function drawGrid(grid) {
      document.getElementById('month-year-header').textContent = grid.title;
      const pilates = document.getElementById('pilates-left');
      const credits = document.getElementById('credits-left');
      pilates.textContent = grid.fixed_remaining;
      credits.textContent = grid.credits_remaining;
      pilates.classList.toggle('negative', grid.fixed_remaining < 0);
      credits.classList.toggle('negative', grid.credits_remaining < 0);

      const days = document.getElementById('calendar-days');
      days.innerHTML = '';
      for (let i = 0; i < grid.leading_blanks; i++) {
        const empty = document.createElement('div');
        empty.className = 'day-cell empty';
        days.appendChild(empty);
      }
      grid.days.forEach((cell) => {
        const el = document.createElement('div');
        el.className = 'day-cell';
        el.dataset.day = cell.day;
        const num = document.createElement('div');
        num.className = 'day-number';
        num.textContent = cell.day;
        el.appendChild(num);
        if (cell.label) {
          const log = document.createElement('div');
          log.className = `log-entry log-${cell.activity_type}`;
          log.textContent = cell.label;
          el.appendChild(log);
        }
        days.appendChild(el);
      });
    }

    function drawModal(state) {
      const overlay = document.getElementById('activity-modal');
      overlay.classList.toggle('open', state.open);
      if (!state.open) return;
      document.getElementById('modal-title').textContent = state.title;
      document.getElementById('pilates-btn').classList.toggle('selected', state.activity_type === 'pilates');
      document.getElementById('classpass-btn').classList.toggle('selected', state.activity_type === 'classpass');
      document.getElementById('credits-input-group').classList.toggle('hidden', !state.shows_cost_input);
      document.getElementById('delete-btn').classList.toggle('hidden', !state.can_delete);
      const input = document.getElementById('credit-cost');
      if (document.activeElement !== input) input.value = state.cost_draft;
    }

    function draw(snapshot) {
      resetPrompt = snapshot.reset_prompt;
      drawGrid(snapshot.grid);
      drawModal(snapshot.modal);
    }

    document.getElementById('prev-month-btn').addEventListener('click', () => send('/view/navigate', { delta: -1 }));
    document.getElementById('next-month-btn').addEventListener('click', () => send('/view/navigate', { delta: 1 }));
    document.getElementById('reset-month-btn').addEventListener('click', () => {
      if (confirm(resetPrompt)) send('/view/reset?confirm=true');
    });
    document.getElementById('calendar-days').addEventListener('click', (e) => {
      const cell = e.target.closest('.day-cell:not(.empty)');
      if (cell) send(`/view/days/${cell.dataset.day}/open`);
    });
    document.getElementById('modal-close-btn').addEventListener('click', () => send('/view/modal/close'));
    document.getElementById('activity-modal').addEventListener('click', (e) => {
      if (e.target.id === 'activity-modal') send('/view/modal/close');
    });
    ['pilates-btn', 'classpass-btn'].forEach((id) => {
      const btn = document.getElementById(id);
      btn.addEventListener('click', () => send('/view/modal/type', {
        activity_type: btn.dataset.type,
        cost_draft: document.getElementById('credit-cost').value,
      }));
    });
    document.getElementById('save-btn').addEventListener('click', () => send('/view/modal/save', {
      cost_draft: document.getElementById('credit-cost').value,
    }));
    document.getElementById('delete-btn').addEventListener('click', () => send('/view/modal/delete'));

    fetch('/view').then((resp) => resp.json()).then(draw);
  </script>
</body>
</html>
    """


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.get("/view")
def get_view() -> dict[str, Any]:
    return run_event(lambda session: None)


@app.post("/view/navigate")
def navigate(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    delta = as_int(payload.get("delta"), "delta")
    return run_event(lambda session: session.navigate(delta))


@app.post("/view/month")
def show_month(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    year = as_int(payload.get("year"), "year")
    month = as_int(payload.get("month"), "month")
    return run_event(lambda session: session.show_month(year, month))


@app.post("/view/days/{day}/open")
def open_day(day: int) -> dict[str, Any]:
    return run_event(lambda session: session.open_day(day))


@app.post("/view/dates/{date_key}/open")
def open_date(date_key: str) -> dict[str, Any]:
    return run_event(lambda session: session.open_date(date_key))


@app.post("/view/modal/type")
def select_activity_type(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    activity_type = str(payload.get("activity_type", "")).strip().lower()
    cost_draft = payload.get("cost_draft")

    def apply(session: CalendarSession) -> None:
        session.select_activity_type(activity_type)
        if cost_draft is not None:
            session.set_cost_draft(str(cost_draft))

    return run_event(apply)


@app.post("/view/modal/save")
def save_modal(payload: dict[str, Any] = Body(default={})) -> dict[str, Any]:
    cost_draft = payload.get("cost_draft")
    return run_event(lambda session: session.save_modal(None if cost_draft is None else str(cost_draft)))


@app.post("/view/modal/delete")
def delete_modal() -> dict[str, Any]:
    return run_event(lambda session: session.delete_modal())


@app.post("/view/modal/close")
def close_modal() -> dict[str, Any]:
    return run_event(lambda session: session.close_modal())


@app.post("/view/reset")
def reset_month(confirm: bool = Query(default=False)) -> dict[str, Any]:
    if not confirm:
        with SESSION_LOCK:
            prompt = get_session().reset_prompt()
        raise HTTPException(status_code=400, detail=prompt)
    return run_event(lambda session: session.reset_displayed_month())


@app.get("/logs")
def get_logs() -> dict[str, dict[str, Any]]:
    with SESSION_LOCK:
        logs = get_session().store.logs
    return {key: entry.as_dict() for key, entry in sorted(logs.items())}


@app.get("/calendar/{year}/{month}")
def get_calendar(year: int, month: int) -> dict[str, Any]:
    with SESSION_LOCK:
        logs = get_session().store.logs
    try:
        return render(year, month, logs).as_dict()
    except ValueError as err:
        raise HTTPException(status_code=400, detail=str(err)) from err


def run() -> None:
    uvicorn.run("fitness_calendar.main:app", host="127.0.0.1", port=8000)
