import re
from datetime import date, tzinfo
from typing import Dict, List, Optional

from duesoon.models import Occurrence, ScheduleMode
from duesoon.schedule import ScheduleEditor

_CURRENCY_CHARS = re.compile(r"[A-Za-z$€£¥₹₦₽₱₴₭₮₩]")

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_occurrence(occ: Occurrence) -> str:
    # strftime ist locale-abhängig, daher eigene Namen
    d = occ.day
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day:02d} {d.year} at {occ.time} ({occ.tone.value})"


def schedule_status(editor: ScheduleEditor) -> str:
    """Kurzer Statustext für die Entwurfsliste."""
    if editor.mode is ScheduleMode.MANUAL:
        return f"Manual ({len(editor.manual.entries)} dates)"
    if editor.mode is ScheduleMode.WEEKLY:
        return f"Weekly cadence ({len(editor.weekly.days)} days)"
    freq = editor.cadence.frequency_days
    return f"Cadence every {freq if freq else '?'} days"


def format_amount_display(amount: Optional[str], currency: Optional[str] = None) -> Optional[str]:
    if not amount:
        return None
    if _CURRENCY_CHARS.search(amount):
        return amount
    return f"{currency.upper()} {amount}" if currency else amount


def draft_metadata(editor: ScheduleEditor, client_name: Optional[str] = None,
                   amount: Optional[str] = None, currency: Optional[str] = None) -> Dict[str, Optional[str]]:
    return {
        'client_name': client_name or "New reminder",
        'amount_display': format_amount_display(amount, currency),
        'status': schedule_status(editor),
        'next_action': "Review the reminder summary.",
    }


def schedule_lines(payload: Optional[dict], tz: Optional[tzinfo] = None,
                   today: Optional[date] = None, due_date: Optional[date] = None) -> List[str]:
    """Vorschau-Zeilen für einen gespeicherten Plan (z.B. aus einer Rechnung)."""
    if not payload:
        return ["No reminders scheduled"]
    editor = ScheduleEditor.from_payload(payload, tz=tz, today=today)
    occurrences = editor.preview(due_date=due_date)
    if not occurrences:
        return ["No reminders scheduled"]
    return [format_occurrence(o) for o in occurrences]
