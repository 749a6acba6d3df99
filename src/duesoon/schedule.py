# src/duesoon/schedule.py
"""
Bearbeitbarer Zustand des Erinnerungsplans.

Der Editor hält für alle drei Modi (manuell, wöchentlich, Rhythmus) einen
eigenen Zustand; aktiv ist immer genau einer. Beim Moduswechsel bleiben die
Eingaben der anderen Modi erhalten, damit man hin- und herschalten kann.
"""
import json
import logging
from datetime import date, tzinfo
from typing import Any, Dict, List, Optional, Union

from duesoon.calendar_logic import (
    generate_cadence_occurrences, generate_manual_occurrences, generate_weekly_occurrences,
)
from duesoon.codec import (
    SchedulePayload, build_schedule_payload, schedule_payload_to_summary,
    summary_from_wire, summary_to_wire, to_number_value,
)
from duesoon.models import (
    CadenceSchedule, ManualEntry, ManualSchedule, Occurrence, Schedule,
    ScheduleMode, Tone, WeeklySchedule,
)
from duesoon.tones import build_tone_sequence, resize_tone_sequence

DEFAULT_WEEKDAYS = [0, 2]       # Montag, Mittwoch
DEFAULT_FREQUENCY_DAYS = 4


def _tone_count(max_reminders) -> int:
    return max(1, int(max_reminders or 1))


def _with_tone(tones: List[Tone], index: int, tone: Tone) -> List[Tone]:
    if not 0 <= index < len(tones):
        raise KeyError(f"No reminder #{index + 1} in a sequence of {len(tones)}")
    tones = list(tones)
    tones[index] = Tone(tone)
    return tones


class ScheduleEditor:
    def __init__(
        self,
        mode: ScheduleMode = ScheduleMode.MANUAL,
        today: Optional[date] = None,
        default_time: str = "09:00",
        default_max_reminders: int = 5,
    ):
        self.mode = ScheduleMode(mode)
        self.today = today or date.today()
        self.default_time = default_time
        self.manual = ManualSchedule(entries=[ManualEntry(self.today, default_time, Tone.GENTLE)])
        self.weekly = WeeklySchedule(
            days=list(DEFAULT_WEEKDAYS),
            time=default_time,
            max_reminders=default_max_reminders,
            tones=build_tone_sequence(default_max_reminders),
        )
        self.cadence = CadenceSchedule(
            frequency_days=DEFAULT_FREQUENCY_DAYS,
            start_date=None,
            start_time=default_time,
            max_reminders=default_max_reminders,
            tones=build_tone_sequence(default_max_reminders),
        )

    # Modus
    def set_mode(self, mode: Union[ScheduleMode, str]):
        self.mode = ScheduleMode(mode)

    @property
    def current(self) -> Schedule:
        if self.mode is ScheduleMode.MANUAL:
            return self.manual
        if self.mode is ScheduleMode.WEEKLY:
            return self.weekly
        return self.cadence

    def can_submit(self) -> bool:
        """Einzige Stelle, die entscheidet, ob der Plan abgeschickt werden darf."""
        if self.mode is ScheduleMode.MANUAL:
            entries = self.manual.entries
            return bool(entries) and all((e.time or "").strip() for e in entries)
        if self.mode is ScheduleMode.WEEKLY:
            return bool(self.weekly.days) and bool((self.weekly.time or "").strip())
        freq = to_number_value(self.cadence.frequency_days)
        return freq is not None and freq >= 1 and bool((self.cadence.start_time or "").strip())

    def to_wire_summary(self) -> Dict[str, Any]:
        return summary_to_wire(self.current)

    def payload(self, tz: Optional[tzinfo] = None) -> Optional[SchedulePayload]:
        return build_schedule_payload(self.mode, self.current, tz)

    def preview(self, today: Optional[date] = None, due_date: Optional[date] = None) -> List[Occurrence]:
        """Kommende Termine des aktiven Modus; leer, solange der Plan ungültig ist."""
        if not self.can_submit():
            return []
        today = today or self.today
        if self.mode is ScheduleMode.MANUAL:
            return generate_manual_occurrences(self.manual.entries)
        if self.mode is ScheduleMode.WEEKLY:
            w = self.weekly
            return generate_weekly_occurrences(w.days, w.time, w.max_reminders, w.tones, today)
        c = self.cadence
        return generate_cadence_occurrences(
            int(c.frequency_days), c.start_date, c.start_time, c.max_reminders, c.tones,
            today, due_date=due_date,
        )

    # Manuelle Termine
    def toggle_manual_date(self, day: date) -> bool:
        """
        Datum hinzufügen oder, falls schon gewählt, wieder entfernen.
        Gibt True zurück, wenn das Datum danach ausgewählt ist.
        """
        if any(e.day == day for e in self.manual.entries):
            self.remove_manual_date(day)
            return False
        self.manual.entries.append(ManualEntry(day, self.default_time, Tone.GENTLE))
        self.manual.entries.sort(key=lambda e: e.day)
        return True

    def remove_manual_date(self, day: date):
        self.manual.entries = [e for e in self.manual.entries if e.day != day]

    def _manual_entry(self, day: date) -> ManualEntry:
        for e in self.manual.entries:
            if e.day == day:
                return e
        raise KeyError(f"No manual reminder on {day.isoformat()}")

    def update_manual_time(self, day: date, value: str):
        self._manual_entry(day).time = value

    def update_manual_tone(self, day: date, tone: Tone):
        self._manual_entry(day).tone = Tone(tone)

    # Wochenmuster
    def toggle_weekday(self, weekday: int):
        if weekday in self.weekly.days:
            self.weekly.days = [d for d in self.weekly.days if d != weekday]
        else:
            self.weekly.days = sorted(self.weekly.days + [weekday])

    def set_weekly_time(self, value: str):
        self.weekly.time = value

    def set_weekly_max(self, value):
        self.weekly.max_reminders = to_number_value(value)
        self.weekly.tones = resize_tone_sequence(self.weekly.tones, _tone_count(self.weekly.max_reminders))

    def set_weekly_tone(self, index: int, tone: Tone):
        self.weekly.tones = _with_tone(self.weekly.tones, index, tone)

    # Rhythmus
    def set_cadence_frequency(self, value):
        self.cadence.frequency_days = to_number_value(value)

    def set_cadence_start_date(self, value: Optional[date]):
        self.cadence.start_date = value

    def set_cadence_start_time(self, value: str):
        self.cadence.start_time = value

    def set_cadence_max(self, value):
        self.cadence.max_reminders = to_number_value(value)
        self.cadence.tones = resize_tone_sequence(self.cadence.tones, _tone_count(self.cadence.max_reminders))

    def set_cadence_tone(self, index: int, tone: Tone):
        self.cadence.tones = _with_tone(self.cadence.tones, index, tone)

    # Laden gespeicherter Zustände
    def hydrate(self, mode: Union[ScheduleMode, str], summary: Union[Schedule, Dict[str, Any], None]):
        """Nicht-leere Teile einer gespeicherten Zusammenfassung übernehmen."""
        mode = ScheduleMode(mode)
        self.mode = mode
        if not summary:
            return
        if isinstance(summary, dict):
            summary = summary_from_wire(mode, summary)

        if mode is ScheduleMode.MANUAL:
            if summary.entries:
                self.manual.entries = [
                    ManualEntry(e.day, e.time or self.default_time, e.tone or Tone.GENTLE)
                    for e in summary.entries
                ]
            return
        if mode is ScheduleMode.WEEKLY:
            if summary.days:
                self.weekly.days = list(summary.days)
            if summary.time:
                self.weekly.time = summary.time
            if summary.max_reminders is not None:
                self.weekly.max_reminders = summary.max_reminders
            if summary.tones:
                self.weekly.tones = list(summary.tones)
            self.weekly.tones = resize_tone_sequence(self.weekly.tones, _tone_count(self.weekly.max_reminders))
            return
        if summary.frequency_days:
            self.cadence.frequency_days = summary.frequency_days
        if summary.start_date:
            self.cadence.start_date = summary.start_date
        if summary.start_time:
            self.cadence.start_time = summary.start_time
        if summary.max_reminders is not None:
            self.cadence.max_reminders = summary.max_reminders
        if summary.tones:
            self.cadence.tones = list(summary.tones)
        self.cadence.tones = resize_tone_sequence(self.cadence.tones, _tone_count(self.cadence.max_reminders))

    def replace(self, mode: Union[ScheduleMode, str], summary: Schedule):
        """Zustand eines Modus vollständig ersetzen (z.B. aus einem Backend-Payload)."""
        mode = ScheduleMode(mode)
        if summary.mode is not mode:
            raise ValueError(f"Schedule of mode {summary.mode.value!r} passed as {mode.value!r}")
        setattr(self, mode.value, summary)
        self.mode = mode

    @classmethod
    def from_summary(cls, mode, summary, today: Optional[date] = None, **kwargs) -> "ScheduleEditor":
        editor = cls(mode, today=today, **kwargs)
        editor.hydrate(mode, summary)
        return editor

    @classmethod
    def from_payload(cls, payload: Optional[SchedulePayload], tz: Optional[tzinfo] = None,
                     today: Optional[date] = None, **kwargs) -> "ScheduleEditor":
        if not payload:
            return cls(today=today, **kwargs)
        mode, summary = schedule_payload_to_summary(payload, tz)
        editor = cls(mode, today=today, **kwargs)
        editor.replace(mode, summary)
        return editor

    @classmethod
    def from_draft_params(cls, params: Dict[str, str], today: Optional[date] = None, **kwargs) -> "ScheduleEditor":
        mode_param = params.get('scheduleMode')
        try:
            mode = ScheduleMode(mode_param)
        except ValueError:
            mode = ScheduleMode.MANUAL
        summary = None
        raw = params.get('scheduleSummary')
        if raw:
            try:
                summary = json.loads(raw)
            except ValueError as e:
                logging.warning(f"[DueSoon] Ungültige Plan-Zusammenfassung im Entwurf: {e}")
        if not isinstance(summary, dict):
            summary = None
        return cls.from_summary(mode, summary, today=today, **kwargs)

    def draft_params(self, base_params: Optional[Dict[str, str]] = None,
                     timezone: Optional[str] = None) -> Dict[str, str]:
        params = dict(base_params or {})
        params.pop('draftId', None)
        params['scheduleMode'] = self.mode.value
        params['scheduleSummary'] = json.dumps(self.to_wire_summary())
        if timezone:
            params['timezone'] = timezone
        return params
