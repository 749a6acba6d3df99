from datetime import date

import pytest
from dateutil import tz

from duesoon.codec import (
    build_schedule_payload, schedule_payload_to_summary, to_date_time,
    to_number_value, to_time_of_day, trim_time,
)
from duesoon.models import (
    CadenceSchedule, ManualEntry, ManualSchedule, ScheduleMode, Tone, WeeklySchedule,
)

G, N, F = Tone.GENTLE, Tone.NEUTRAL, Tone.FIRM
UTC = tz.UTC
BERLIN = tz.gettz("Europe/Berlin")


@pytest.mark.parametrize("raw,expected", [
    (7, 7),
    ("7", 7),
    (" 12 ", 12),
    ("2.5", 2.5),
    (4.0, 4),
    (0, 0),
    ("", None),
    ("   ", None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
    (None, None),
    (True, None),
])
def test_to_number_value(raw, expected):
    assert to_number_value(raw) == expected


def test_time_of_day_normalization():
    assert to_time_of_day("08:15") == "08:15:00"
    assert to_time_of_day("08:15:30") == "08:15:30"
    assert to_time_of_day("") == "09:00:00"
    assert to_time_of_day(None) == "09:00:00"
    assert trim_time("08:15:30") == "08:15"
    assert trim_time("") == "09:00"


def test_to_date_time_uses_zone_offset():
    assert to_date_time(date(2025, 4, 5), "10:30", UTC) == "2025-04-05T10:30:00+00:00"
    assert to_date_time(date(2025, 4, 5), "10:30", BERLIN) == "2025-04-05T10:30:00+02:00"
    assert to_date_time(date(2025, 1, 5), "10:30", BERLIN) == "2025-01-05T10:30:00+01:00"


@pytest.mark.parametrize("bad", ["", None, "abc", "25:00", "9"])
def test_to_date_time_malformed_time_defaults_to_nine(bad):
    assert to_date_time(date(2025, 4, 5), bad, UTC) == "2025-04-05T09:00:00+00:00"


def test_manual_payload():
    summary = ManualSchedule(entries=[
        ManualEntry(date(2025, 4, 5), "10:30", F),
        ManualEntry(date(2025, 4, 9), "09:00", G),
    ])
    payload = build_schedule_payload(ScheduleMode.MANUAL, summary, UTC)
    assert payload == {
        "mode": "manual",
        "manual_dates": ["2025-04-05T10:30:00+00:00", "2025-04-09T09:00:00+00:00"],
        "tone_sequence": ["firm", "gentle"],
        "max_reminders": 2,
    }


def test_empty_manual_payload_is_none():
    assert build_schedule_payload("manual", ManualSchedule(entries=[]), UTC) is None
    assert build_schedule_payload("manual", {"entries": []}, UTC) is None
    assert build_schedule_payload("manual", None) is None


def test_weekly_payload_copies_weekdays_verbatim():
    summary = WeeklySchedule(days=[2, 0], time="08:15", max_reminders=3, tones=[G, F, N])
    payload = build_schedule_payload("weekly", summary)
    assert payload == {
        "mode": "weekly",
        "weekly_pattern": {"weekdays": [2, 0], "time_of_day": "08:15:00"},
        "tone_sequence": ["gentle", "firm", "neutral"],
        "max_reminders": 3,
    }


def test_cadence_payload_does_not_turn_garbage_into_zero():
    summary = {"frequencyDays": "abc", "startDate": None, "startTime": "", "maxReminders": "", "tones": ["firm"]}
    payload = build_schedule_payload("cadence", summary)
    assert payload == {
        "mode": "cadence",
        "cadence": {"frequency_days": None, "start_date": None, "start_time": None},
        "tone_sequence": ["firm"],
        "max_reminders": None,
    }


def test_cadence_payload():
    summary = CadenceSchedule(frequency_days=4, start_date=date(2025, 4, 5), start_time="07:05",
                              max_reminders=3, tones=[G, N, F])
    payload = build_schedule_payload(ScheduleMode.CADENCE, summary)
    assert payload["cadence"] == {"frequency_days": 4, "start_date": "2025-04-05", "start_time": "07:05:00"}
    assert payload["max_reminders"] == 3
    assert payload["tone_sequence"] == ["gentle", "neutral", "firm"]


def test_mode_mismatch_is_rejected():
    with pytest.raises(ValueError):
        build_schedule_payload("weekly", ManualSchedule(entries=[ManualEntry(date(2025, 4, 5))]))


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        schedule_payload_to_summary({"mode": "monthly"})


def test_decode_manual_converts_into_zone():
    payload = {"mode": "manual", "manual_dates": ["2025-04-05T07:30:00Z", "2025-04-06T10:00:00"],
               "tone_sequence": ["firm", "neutral"], "max_reminders": 2}
    mode, summary = schedule_payload_to_summary(payload, BERLIN)
    assert mode is ScheduleMode.MANUAL
    assert summary.entries == [
        ManualEntry(date(2025, 4, 5), "09:30", F),
        ManualEntry(date(2025, 4, 6), "10:00", N),
    ]


@pytest.mark.parametrize("tones,expected", [
    (["firm"], [F, F, F]),
    (["gentle", "firm"], [G, F, G]),
    ([], [G, G, G]),
])
def test_decode_manual_tone_backfill(tones, expected):
    payload = {"mode": "manual", "tone_sequence": tones, "manual_dates": [
        "2025-04-05T09:00:00+00:00", "2025-04-06T09:00:00+00:00", "2025-04-07T09:00:00+00:00",
    ]}
    _, summary = schedule_payload_to_summary(payload, UTC)
    assert [e.tone for e in summary.entries] == expected


def test_decode_weekly_trims_seconds():
    payload = {"mode": "weekly", "weekly_pattern": {"weekdays": [4, 1], "time_of_day": "10:45:00"},
               "tone_sequence": ["neutral"], "max_reminders": 4}
    mode, summary = schedule_payload_to_summary(payload)
    assert mode is ScheduleMode.WEEKLY
    assert summary == WeeklySchedule(days=[4, 1], time="10:45", max_reminders=4, tones=[N])


def test_decode_cadence_defaults_missing_time():
    payload = {"mode": "cadence", "cadence": {"frequency_days": 3, "start_date": None, "start_time": None},
               "tone_sequence": [], "max_reminders": None}
    _, summary = schedule_payload_to_summary(payload)
    assert summary == CadenceSchedule(frequency_days=3, start_date=None, start_time="09:00",
                                      max_reminders=None, tones=[])


@pytest.mark.parametrize("raw,expected", [(None, 1), ("abc", 1), ("6", 6), (2, 2)])
def test_decode_cadence_frequency_defaults_to_every_day(raw, expected):
    payload = {"mode": "cadence", "cadence": {"frequency_days": raw, "start_date": "2025-04-05", "start_time": "08:00:00"},
               "tone_sequence": ["firm"], "max_reminders": 1}
    _, summary = schedule_payload_to_summary(payload)
    assert summary.frequency_days == expected


@pytest.mark.parametrize("zone", [UTC, BERLIN, tz.gettz("America/New_York")])
def test_round_trip_manual(zone):
    summary = ManualSchedule(entries=[
        ManualEntry(date(2025, 3, 29), "02:30", G),
        ManualEntry(date(2025, 4, 5), "23:45", F),
        ManualEntry(date(2025, 12, 31), "00:15", N),
    ])
    mode, decoded = schedule_payload_to_summary(build_schedule_payload("manual", summary, zone), zone)
    assert mode is ScheduleMode.MANUAL
    assert decoded == summary


def test_round_trip_weekly():
    summary = WeeklySchedule(days=[0, 2, 6], time="18:30", max_reminders=4, tones=[G, N, F, F])
    mode, decoded = schedule_payload_to_summary(build_schedule_payload("weekly", summary))
    assert mode is ScheduleMode.WEEKLY
    assert decoded == summary


def test_round_trip_cadence():
    summary = CadenceSchedule(frequency_days=4, start_date=date(2025, 4, 5), start_time="07:05",
                              max_reminders=3, tones=[F, G, G])
    mode, decoded = schedule_payload_to_summary(build_schedule_payload("cadence", summary))
    assert mode is ScheduleMode.CADENCE
    assert decoded == summary
