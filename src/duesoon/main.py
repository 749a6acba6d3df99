# src/duesoon/main.py

import json
import logging
from datetime import date
from typing import List, Optional

from dateutil import tz as dtz

from .calendar_logic import chunk_weeks, month_grid, shift_month
from .config import default_db_path, load_config
from .data import DraftStore
from .formatting import draft_metadata, format_occurrence
from .models import ScheduleMode, Tone
from .schedule import ScheduleEditor
from .tones import coerce_tone, resize_tone_sequence

MODES = {"1": ScheduleMode.MANUAL, "2": ScheduleMode.WEEKLY, "3": ScheduleMode.CADENCE}


def print_month(editor: ScheduleEditor, month: date):
    selected = {e.day for e in editor.manual.entries}
    print(f"\n  {month.strftime('%Y-%m')}")
    print("  Mo  Tu  We  Th  Fr  Sa  Su")
    for week in chunk_weeks(month_grid(month)):
        cells = []
        for d in week:
            if d.month != month.month:
                cells.append("   ")
            elif d in selected:
                cells.append(f"[{d.day:>2}"[:3])
            elif d < editor.today:
                cells.append("  .")
            else:
                cells.append(f"{d.day:>3}")
        print("  " + " ".join(cells))


def input_tones(count: int) -> List[Tone]:
    raw = input(f"  Tone sequence for {count} reminders (gentle/neutral/firm, comma-separated) [empty=gentle]: ")
    tones = [coerce_tone(t) for t in raw.split(",") if t.strip()]
    return resize_tone_sequence(tones, max(1, count))


def input_manual(editor: ScheduleEditor):
    month = editor.today.replace(day=1)
    while True:
        print_month(editor, month)
        cmd = input("  Date to toggle (YYYY-MM-DD), '<'/'>' for month, empty=done: ").strip()
        if not cmd:
            break
        if cmd in ("<", ">"):
            month = shift_month(month, -1 if cmd == "<" else 1)
            continue
        try:
            day = date.fromisoformat(cmd)
        except ValueError:
            print("  Invalid date.")
            continue
        if day < editor.today:
            print("  Dates in the past cannot be selected.")
            continue
        editor.toggle_manual_date(day)
        month = day.replace(day=1)

    for entry in list(editor.manual.entries):
        t = input(f"  Time for {entry.day.isoformat()} [{entry.time}]: ").strip()
        if t:
            editor.update_manual_time(entry.day, t)
        tone = input(f"  Tone for {entry.day.isoformat()} [{entry.tone.value}]: ").strip()
        if tone:
            editor.update_manual_tone(entry.day, coerce_tone(tone, entry.tone))


def input_weekly(editor: ScheduleEditor):
    days_str = input("  Weekdays (0=Mon … 6=Sun), comma-separated: ")
    for wd in sorted(set(editor.weekly.days)):
        editor.toggle_weekday(wd)
    for wd in {int(x) for x in days_str.split(",") if x.strip().isdigit() and int(x) <= 6}:
        editor.toggle_weekday(wd)
    t = input(f"  Time of day [{editor.weekly.time}]: ").strip()
    if t:
        editor.set_weekly_time(t)
    mx = input(f"  Maximum reminders [{editor.weekly.max_reminders}]: ").strip()
    if mx:
        editor.set_weekly_max(mx)
    count = len(editor.weekly.tones)
    for i, tone in enumerate(input_tones(count)):
        editor.set_weekly_tone(i, tone)


def input_cadence(editor: ScheduleEditor, due_date: Optional[date]):
    editor.set_cadence_frequency(input(f"  Every how many days? [{editor.cadence.frequency_days}]: ").strip()
                                 or editor.cadence.frequency_days)
    fallback = "due date" if due_date else "today"
    start_str = input(f"  Start date (YYYY-MM-DD) [empty={fallback}]: ").strip()
    editor.set_cadence_start_date(date.fromisoformat(start_str) if start_str else None)
    t = input(f"  Start time [{editor.cadence.start_time}]: ").strip()
    if t:
        editor.set_cadence_start_time(t)
    mx = input(f"  Maximum reminders [{editor.cadence.max_reminders}]: ").strip()
    if mx:
        editor.set_cadence_max(mx)
    count = len(editor.cadence.tones)
    for i, tone in enumerate(input_tones(count)):
        editor.set_cadence_tone(i, tone)


def run_wizard(today: Optional[date] = None, config: Optional[dict] = None, store: Optional[DraftStore] = None):
    logging.basicConfig(level=logging.INFO)
    cfg = config or load_config()
    zone = dtz.gettz(cfg['timezone']) if cfg.get('timezone') else dtz.tzlocal()

    print("DueSoon reminder schedule wizard")
    choice = input("Mode? [1] manual dates, [2] weekly pattern, [3] every N days: ").strip()
    mode = MODES.get(choice, ScheduleMode.MANUAL)
    editor = ScheduleEditor(mode, today=today, default_time=cfg['default_time'],
                            default_max_reminders=cfg['default_max_reminders'])

    due_str = input("Invoice due date (YYYY-MM-DD) [empty=none]: ").strip()
    due_date = date.fromisoformat(due_str) if due_str else None

    if mode is ScheduleMode.MANUAL:
        input_manual(editor)
    elif mode is ScheduleMode.WEEKLY:
        input_weekly(editor)
    else:
        input_cadence(editor, due_date)

    if not editor.can_submit():
        print("\nThe schedule is incomplete and cannot be submitted.")
        return None

    occurrences = editor.preview(due_date=due_date)
    print(f"\n{len(occurrences)} upcoming reminders:")
    for occ in occurrences:
        print(" ", format_occurrence(occ))

    payload = editor.payload(zone)
    print("\nPayload:")
    print(json.dumps(payload, indent=2))

    if input("\nSave as draft? (y/n) ").lower() == "y":
        own_store = store is None
        store = store or DraftStore(cfg.get('db_path') or default_db_path())
        try:
            client = input("  Client name: ").strip()
            params = editor.draft_params({'client': client} if client else {},
                                         timezone=cfg.get('timezone'))
            draft = store.create_draft(params, draft_metadata(editor, client), 'schedule', '/new-reminder/schedule')
            print(f"Draft saved with id {draft.id}.")
        finally:
            if own_store:
                store.close()
    return payload


if __name__ == "__main__":
    run_wizard()
