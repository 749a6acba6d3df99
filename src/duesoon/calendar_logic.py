from datetime import date, timedelta
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from duesoon.models import ManualEntry, Occurrence, Tone
from duesoon.tones import tone_for_occurrence


def _occurrence_bound(max_reminders: Optional[float], tones: List[Tone]) -> int:
    # Ohne Obergrenze bestimmt die Länge der Tonfall-Sequenz die Anzahl
    if max_reminders is None:
        return len(tones)
    # Bruchteile abrunden: 2.5 heißt höchstens 2 Termine
    return int(max_reminders)


def generate_manual_occurrences(entries: Iterable[ManualEntry]) -> List[Occurrence]:
    """Manuelle Termine: ein Termin pro Datum, aufsteigend sortiert, Tonfall je Eintrag."""
    by_day = {}
    for entry in entries:
        # erster Eintrag pro Datum gewinnt
        by_day.setdefault(entry.day, entry)
    return [
        Occurrence(day=e.day, time=e.time, tone=e.tone)
        for e in sorted(by_day.values(), key=lambda e: e.day)
    ]


def generate_weekly_occurrences(
    weekdays: Iterable[int],
    time: str,
    max_reminders: Optional[int],
    tones: List[Tone],
    today: date,
) -> List[Occurrence]:
    """
    Ab `today` (inklusive) Tag für Tag vorwärts laufen und an jedem gewählten
    Wochentag (0=Montag … 6=Sonntag) einen Termin erzeugen, bis
    `max_reminders` erreicht ist.
    """
    selected = {wd for wd in weekdays if 0 <= wd <= 6}
    limit = _occurrence_bound(max_reminders, tones)
    out: List[Occurrence] = []
    if not selected or limit <= 0:
        return out

    cursor = today
    while len(out) < limit:
        if cursor.weekday() in selected:
            out.append(Occurrence(cursor, time, tone_for_occurrence(tones, len(out))))
        cursor += timedelta(days=1)
    return out


def generate_cadence_occurrences(
    frequency_days: int,
    start_date: Optional[date],
    start_time: str,
    max_reminders: Optional[int],
    tones: List[Tone],
    today: date,
    due_date: Optional[date] = None,
) -> List[Occurrence]:
    """
    Termin k liegt bei start + k * frequency_days.
    Voraussetzung: frequency_days >= 1 (wird vom Aufrufer geprüft).
    """
    start = start_date or due_date or today
    limit = _occurrence_bound(max_reminders, tones)
    return [
        Occurrence(start + timedelta(days=k * frequency_days), start_time, tone_for_occurrence(tones, k))
        for k in range(max(0, limit))
    ]


def month_grid(month: date) -> List[date]:
    """42 Tage (6 Wochen, Montag zuerst) rund um den Monat von `month`."""
    first = month.replace(day=1)
    start = first - timedelta(days=first.weekday())
    return [start + timedelta(days=i) for i in range(42)]


def chunk_weeks(cells: List[date]) -> List[List[date]]:
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def shift_month(month: date, delta: int) -> date:
    """Ersten Tag des um `delta` Monate verschobenen Monats liefern."""
    return month.replace(day=1) + relativedelta(months=delta)
