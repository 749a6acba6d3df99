# src/duesoon/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union


class ScheduleMode(str, Enum):
    MANUAL = "manual"
    WEEKLY = "weekly"
    CADENCE = "cadence"


class Tone(str, Enum):
    """Tonfall einer Erinnerung (sanft, neutral, bestimmt)."""
    GENTLE = "gentle"
    NEUTRAL = "neutral"
    FIRM = "firm"


@dataclass
class ManualEntry:
    """Ein vom Nutzer gewähltes Datum mit Uhrzeit und eigenem Tonfall."""
    day: date
    time: str = "09:00"           # HH:MM
    tone: Tone = Tone.GENTLE


@dataclass
class ManualSchedule:
    mode: ClassVar[ScheduleMode] = ScheduleMode.MANUAL
    entries: List[ManualEntry] = field(default_factory=list)


@dataclass
class WeeklySchedule:
    """Wochenmuster: gleiche Uhrzeit an allen gewählten Wochentagen."""
    mode: ClassVar[ScheduleMode] = ScheduleMode.WEEKLY
    days: List[int] = field(default_factory=list)    # 0=Montag … 6=Sonntag
    time: str = "09:00"
    max_reminders: Optional[int] = None
    tones: List[Tone] = field(default_factory=list)


@dataclass
class CadenceSchedule:
    """Fester Rhythmus: alle X Tage ab Startdatum."""
    mode: ClassVar[ScheduleMode] = ScheduleMode.CADENCE
    frequency_days: Optional[int] = None
    start_date: Optional[date] = None    # None = Fälligkeitsdatum bzw. heute
    start_time: str = "09:00"
    max_reminders: Optional[int] = None
    tones: List[Tone] = field(default_factory=list)


Schedule = Union[ManualSchedule, WeeklySchedule, CadenceSchedule]

SCHEDULE_TYPES: Dict[ScheduleMode, type] = {
    ScheduleMode.MANUAL: ManualSchedule,
    ScheduleMode.WEEKLY: WeeklySchedule,
    ScheduleMode.CADENCE: CadenceSchedule,
}


@dataclass(frozen=True)
class Occurrence:
    """Ein konkreter Versandtermin."""
    day: date
    time: str
    tone: Tone


@dataclass
class ReminderDraft:
    """Zwischengespeicherter, noch nicht abgeschickter Erinnerungs-Entwurf."""
    id: str
    params: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Optional[str]] = field(default_factory=dict)
    last_step: Optional[str] = None
    last_path: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
