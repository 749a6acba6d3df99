# tests/test_calendar_logic.py

from datetime import date, timedelta
import pytest

from duesoon.models import ManualEntry, Occurrence, Tone
from duesoon.calendar_logic import (
    chunk_weeks, generate_cadence_occurrences, generate_manual_occurrences,
    generate_weekly_occurrences, month_grid, shift_month,
)

G, N, F = Tone.GENTLE, Tone.NEUTRAL, Tone.FIRM
MONDAY = date(2025, 4, 7)


def test_manual_sorted_and_deduplicated():
    entries = [
        ManualEntry(date(2025, 4, 9), "10:00", F),
        ManualEntry(date(2025, 4, 5), "09:00", N),
        ManualEntry(date(2025, 4, 9), "18:00", G),
    ]
    occ = generate_manual_occurrences(entries)
    assert occ == [
        Occurrence(date(2025, 4, 5), "09:00", N),
        Occurrence(date(2025, 4, 9), "10:00", F),
    ]


def test_manual_empty():
    assert generate_manual_occurrences([]) == []


def test_weekly_mon_wed_bounded_by_max():
    occ = generate_weekly_occurrences([0, 2], "09:00", 5, [G] * 5, MONDAY)
    assert [o.day for o in occ] == [
        date(2025, 4, 7), date(2025, 4, 9), date(2025, 4, 14), date(2025, 4, 16), date(2025, 4, 21),
    ]
    assert [o.day.weekday() for o in occ] == [0, 2, 0, 2, 0]
    assert all(o.time == "09:00" for o in occ)


def test_weekly_tones_cycle_by_occurrence_index():
    occ = generate_weekly_occurrences([0], "08:00", 3, [G, F], MONDAY)
    assert [o.tone for o in occ] == [G, F, G]


def test_weekly_rolls_over_year_boundary():
    # 29.12.2025 ist ein Montag, nächste Freitage liegen im Januar 2026
    occ = generate_weekly_occurrences([4], "09:00", 2, [G, G], date(2025, 12, 29))
    assert [o.day for o in occ] == [date(2026, 1, 2), date(2026, 1, 9)]


def test_weekly_empty_weekdays_produces_nothing():
    assert generate_weekly_occurrences([], "09:00", 5, [G], MONDAY) == []


def test_weekly_without_max_uses_tone_sequence_length():
    occ = generate_weekly_occurrences([0, 1, 2, 3, 4, 5, 6], "09:00", None, [G, N, F], MONDAY)
    assert len(occ) == 3
    assert occ[0].day == MONDAY


def test_cadence_arithmetic():
    occ = generate_cadence_occurrences(4, date(2025, 4, 5), "09:00", 3, [G, G, G], MONDAY)
    assert [o.day for o in occ] == [date(2025, 4, 5), date(2025, 4, 9), date(2025, 4, 13)]


def test_cadence_falls_back_to_due_date_then_today():
    occ = generate_cadence_occurrences(7, None, "10:00", 2, [G], MONDAY, due_date=date(2025, 5, 1))
    assert [o.day for o in occ] == [date(2025, 5, 1), date(2025, 5, 8)]
    occ = generate_cadence_occurrences(7, None, "10:00", 2, [G], MONDAY)
    assert [o.day for o in occ] == [MONDAY, MONDAY + timedelta(days=7)]


def test_cadence_month_and_leap_day():
    occ = generate_cadence_occurrences(1, date(2024, 2, 27), "09:00", 4, [G], MONDAY)
    assert [o.day for o in occ] == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_cadence_tones():
    occ = generate_cadence_occurrences(2, date(2025, 1, 30), "09:00", 4, [G, N, F, F], MONDAY)
    assert [o.tone for o in occ] == [G, N, F, F]
    assert occ[1].day == date(2025, 2, 1)


@pytest.mark.parametrize("month", [date(2025, 4, 15), date(2025, 9, 1), date(2026, 2, 28)])
def test_month_grid_starts_on_monday_and_covers_month(month):
    cells = month_grid(month)
    assert len(cells) == 42
    assert cells[0].weekday() == 0
    assert month.replace(day=1) in cells
    assert all((cells[i + 1] - cells[i]).days == 1 for i in range(41))


def test_month_grid_april_2025():
    cells = month_grid(date(2025, 4, 15))
    # 1. April 2025 ist ein Dienstag
    assert cells[0] == date(2025, 3, 31)
    assert cells[-1] == date(2025, 5, 11)
    weeks = chunk_weeks(cells)
    assert len(weeks) == 6
    assert all(len(w) == 7 for w in weeks)


def test_shift_month():
    assert shift_month(date(2025, 1, 31), 1) == date(2025, 2, 1)
    assert shift_month(date(2025, 1, 15), -1) == date(2024, 12, 1)


def test_fractional_max_is_floored():
    assert len(generate_weekly_occurrences([0, 2], "09:00", 2.5, [G], MONDAY)) == 2
    occ = generate_cadence_occurrences(3, MONDAY, "09:00", 2.5, [G], MONDAY)
    assert [o.day for o in occ] == [MONDAY, MONDAY + timedelta(days=3)]
