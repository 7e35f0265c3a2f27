# src/warfengine/dispensing.py
from collections import defaultdict
from typing import Sequence

import numpy as np

from .types import DAYS_PER_WEEK, DaySchedule, PillLineSummary, TotalPillsSummary


def weekday_occurrences(days: int, start_day_of_week: int) -> np.ndarray:
    """
    How many times each weekday (0=Mon ... 6=Sun) falls inside a horizon.

    Example: 10 days starting Wednesday (2) ->
      [1, 1, 2, 2, 2, 1, 1]
    """
    if days <= 0:
        return np.zeros(DAYS_PER_WEEK, dtype=int)
    weekdays = (start_day_of_week + np.arange(days)) % DAYS_PER_WEEK
    return np.bincount(weekdays, minlength=DAYS_PER_WEEK)


def summarize_dispensing(schedule: Sequence[DaySchedule], days_until_appointment: int,
                         start_day_of_week: int) -> TotalPillsSummary:
    """
    Whole tablets to dispense per strength so the weekly schedule covers
    days_until_appointment days starting on start_day_of_week.

    Pharmacies hand out whole tablets even when the patient takes halves, so
    half tablets are paired up and an unpaired half costs a whole tablet.
    One line per strength taken at least once inside the horizon, larger
    strengths first; no lines when the horizon is 0 days.
    """
    header = f"Total tablets until appointment ({days_until_appointment} days):"
    if days_until_appointment <= 0:
        return TotalPillsSummary(header=header, pill_lines=())

    occurrences = weekday_occurrences(days_until_appointment, start_day_of_week)
    whole: dict[int, int] = defaultdict(int)
    halves: dict[int, int] = defaultdict(int)
    for day in schedule:
        times = int(occurrences[day.day_index])
        for p in day.pills:
            n_whole = int(p.count)
            whole[p.strength_mg] += n_whole * times
            halves[p.strength_mg] += (1 if p.is_half else 0) * times

    lines = []
    for mg in sorted(set(whole) | set(halves), reverse=True):
        dispensed = whole[mg] + (halves[mg] + 1) // 2
        if dispensed == 0:
            continue
        lines.append(PillLineSummary(strength_mg=mg, dispensed_count=dispensed,
                                     usage_note=_usage_note(whole[mg], halves[mg])))
    return TotalPillsSummary(header=header, pill_lines=tuple(lines))


def _usage_note(whole: int, halves: int) -> str:
    if halves == 0:
        return ""
    if halves % 2 == 0:
        return "split tablets in half"
    used = whole + halves / 2.0
    return f"split tablets in half ({used:.1f} tablets used)"
