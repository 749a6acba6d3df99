"""
Umwandlung zwischen Editor-Zustand (Schedule-Dataclasses) und dem
Wire-Payload, den das Backend zum Planen der Erinnerungen erwartet.

Die Feldnamen des Payloads (mode, manual_dates, weekly_pattern, cadence,
tone_sequence, max_reminders) sind mit dem Backend abgestimmt und dürfen
nicht verändert werden.
"""
import math
import re
from datetime import date, datetime, time as dtime, tzinfo
from typing import Any, Dict, List, Optional, Tuple, Union

from dateutil import parser as dtparser
from dateutil import tz as dtz

from duesoon.models import (
    CadenceSchedule, ManualEntry, ManualSchedule, Schedule, ScheduleMode,
    Tone, WeeklySchedule,
)
from duesoon.tones import coerce_tone

DEFAULT_TIME = "09:00"

_HHMM = re.compile(r"^\d{2}:\d{2}$")
_HHMMSS = re.compile(r"^\d{2}:\d{2}:\d{2}$")
_TIME_INPUT = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

SchedulePayload = Dict[str, Any]


def to_number_value(value) -> Optional[Union[int, float]]:
    """
    Tolerante Zahl-Umwandlung: Zahlen und numerische Strings werden
    übernommen, alles andere (leer, Text, NaN) wird zu None und nie zu 0.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if float(number).is_integer() else number


def to_time_of_day(value: Optional[str]) -> str:
    """HH:MM -> HH:MM:SS, fehlende Werte werden zu 09:00:00."""
    if not value:
        return f"{DEFAULT_TIME}:00"
    if _HHMM.match(value):
        return f"{value}:00"
    if _HHMMSS.match(value):
        return value
    return f"{value}:00"


def trim_time(value: Optional[str]) -> str:
    """HH:MM:SS -> HH:MM für die Anzeige."""
    if not value:
        return DEFAULT_TIME
    if ":" in value:
        return value[:5]
    return value


def _parse_time(value: Optional[str]) -> dtime:
    m = _TIME_INPUT.match((value or "").strip())
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour < 24 and minute < 60:
            return dtime(hour, minute)
    return dtime.fromisoformat(DEFAULT_TIME)


def to_date_time(day: date, time_value: Optional[str], tz: Optional[tzinfo] = None) -> str:
    """Datum + Uhrzeit als ISO-8601 mit Offset der Zeitzone `tz`."""
    zone = tz or dtz.tzlocal()
    combined = datetime.combine(day, _parse_time(time_value)).replace(tzinfo=zone)
    return combined.isoformat(timespec="seconds")


def _parse_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date.fromisoformat(value.strip()[:10])
    return None


def _tones(values) -> List[Tone]:
    return [coerce_tone(t) for t in (values or [])]


def summary_from_wire(mode: ScheduleMode, raw: Dict[str, Any]) -> Schedule:
    """camelCase-Zusammenfassung (z.B. aus einem Entwurf) in eine Dataclass überführen."""
    mode = ScheduleMode(mode)
    if mode is ScheduleMode.MANUAL:
        entries = []
        for item in raw.get("entries") or []:
            day = _parse_date(item.get("date"))
            if day is None:
                continue
            entries.append(ManualEntry(day, item.get("time") or "", coerce_tone(item.get("tone"))))
        return ManualSchedule(entries=entries)
    if mode is ScheduleMode.WEEKLY:
        return WeeklySchedule(
            days=[int(d) for d in raw.get("days") or []],
            time=raw.get("time") or "",
            max_reminders=to_number_value(raw.get("maxReminders")),
            tones=_tones(raw.get("tones")),
        )
    return CadenceSchedule(
        frequency_days=to_number_value(raw.get("frequencyDays")),
        start_date=_parse_date(raw.get("startDate")),
        start_time=raw.get("startTime") or "",
        max_reminders=to_number_value(raw.get("maxReminders")),
        tones=_tones(raw.get("tones")),
    )


def summary_to_wire(summary: Schedule) -> Dict[str, Any]:
    """Dataclass -> camelCase-Zusammenfassung (Vorschau und Entwurf)."""
    if isinstance(summary, ManualSchedule):
        return {
            "entries": [
                {"date": e.day.isoformat(), "time": e.time, "tone": e.tone.value}
                for e in summary.entries
            ]
        }
    if isinstance(summary, WeeklySchedule):
        return {
            "days": list(summary.days),
            "time": summary.time,
            "maxReminders": summary.max_reminders,
            "tones": [t.value for t in summary.tones],
        }
    return {
        "frequencyDays": summary.frequency_days,
        "startDate": summary.start_date.isoformat() if summary.start_date else None,
        "startTime": summary.start_time,
        "maxReminders": summary.max_reminders,
        "tones": [t.value for t in summary.tones],
    }


def build_schedule_payload(
    mode: Union[ScheduleMode, str],
    summary: Union[Schedule, Dict[str, Any], None],
    tz: Optional[tzinfo] = None,
) -> Optional[SchedulePayload]:
    """
    Editor-Zustand -> Wire-Payload.
    Ein manueller Plan ohne Einträge ergibt None (noch kein Plan), nicht
    eine leere Liste.
    """
    if not summary:
        return None
    mode = ScheduleMode(mode)
    if isinstance(summary, dict):
        summary = summary_from_wire(mode, summary)
    if summary.mode is not mode:
        raise ValueError(f"Schedule of mode {summary.mode.value!r} passed as {mode.value!r}")

    if mode is ScheduleMode.MANUAL:
        if not summary.entries:
            return None
        return {
            "mode": mode.value,
            "manual_dates": [to_date_time(e.day, e.time, tz) for e in summary.entries],
            "tone_sequence": [e.tone.value for e in summary.entries],
            "max_reminders": len(summary.entries),
        }
    if mode is ScheduleMode.WEEKLY:
        return {
            "mode": mode.value,
            "weekly_pattern": {
                "weekdays": list(summary.days),
                "time_of_day": to_time_of_day(summary.time),
            },
            "tone_sequence": [t.value for t in summary.tones],
            "max_reminders": to_number_value(summary.max_reminders),
        }
    return {
        "mode": mode.value,
        "cadence": {
            "frequency_days": to_number_value(summary.frequency_days),
            "start_date": summary.start_date.isoformat() if summary.start_date else None,
            "start_time": to_time_of_day(summary.start_time) if summary.start_time else None,
        },
        "tone_sequence": [t.value for t in summary.tones],
        "max_reminders": to_number_value(summary.max_reminders),
    }


def _manual_tone(tones: List[Tone], index: int) -> Tone:
    if index < len(tones):
        return tones[index]
    if tones:
        return tones[index % len(tones)]
    return Tone.GENTLE


def _frequency(value) -> Union[int, float]:
    # fehlender Rhythmus wird als "jeden Tag" gelesen
    number = to_number_value(value)
    return 1 if number is None else number


def schedule_payload_to_summary(
    payload: SchedulePayload,
    tz: Optional[tzinfo] = None,
) -> Tuple[ScheduleMode, Schedule]:
    """Wire-Payload -> (Modus, Dataclass) für den Editor."""
    mode = ScheduleMode(payload.get("mode"))
    tones = _tones(payload.get("tone_sequence"))

    if mode is ScheduleMode.MANUAL:
        zone = tz or dtz.tzlocal()
        entries = []
        for index, value in enumerate(payload.get("manual_dates") or []):
            moment = dtparser.isoparse(value)
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=zone)
            local = moment.astimezone(zone)
            entries.append(ManualEntry(local.date(), local.strftime("%H:%M"), _manual_tone(tones, index)))
        return mode, ManualSchedule(entries=entries)

    if mode is ScheduleMode.WEEKLY:
        pattern = payload.get("weekly_pattern") or {}
        return mode, WeeklySchedule(
            days=list(pattern.get("weekdays") or []),
            time=trim_time(pattern.get("time_of_day") or DEFAULT_TIME),
            max_reminders=payload.get("max_reminders"),
            tones=tones,
        )

    cadence = payload.get("cadence") or {}
    return mode, CadenceSchedule(
        frequency_days=_frequency(cadence.get("frequency_days")),
        start_date=_parse_date(cadence.get("start_date")),
        start_time=trim_time(cadence.get("start_time") or DEFAULT_TIME),
        max_reminders=payload.get("max_reminders"),
        tones=tones,
    )
