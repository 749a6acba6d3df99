from duesoon.models import (
    CadenceSchedule, ManualEntry, ManualSchedule, Occurrence, ScheduleMode,
    Tone, WeeklySchedule,
)
from duesoon.codec import build_schedule_payload, schedule_payload_to_summary
from duesoon.schedule import ScheduleEditor
