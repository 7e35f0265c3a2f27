from collections import defaultdict
from typing import Iterable

from .types import DAYS_PER_WEEK, DoseTierAssignment

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def group_days_by_dose(assignment: DoseTierAssignment) -> dict[float, list[int]]:
    """
    Group weekday indices by the dose they receive under an assignment.
    """
    buckets: dict[float, list[int]] = defaultdict(list)
    for day in range(DAYS_PER_WEEK):
        buckets[assignment.dose_for(day)].append(day)
    return dict(buckets)


def format_mg(dose_mg: float) -> str:
    """5.0 -> '5', 7.5 -> '7.5'"""
    return f"{round(dose_mg, 2):g}"


def format_days(days: Iterable[int]) -> str:
    """
    Human-readable weekday list. Runs of 3+ consecutive days collapse to a range.
      (4, 5, 6) -> 'Fri-Sun'    (0, 2, 4) -> 'Mon, Wed, Fri'    (5, 6) -> 'Sat, Sun'
    """
    ordered = sorted(set(days))
    parts: list[str] = []
    i = 0
    while i < len(ordered):
        j = i
        while j + 1 < len(ordered) and ordered[j + 1] == ordered[j] + 1:
            j += 1
        if j - i >= 2:
            parts.append(f"{DAY_NAMES[ordered[i]]}-{DAY_NAMES[ordered[j]]}")
        else:
            parts.extend(DAY_NAMES[d] for d in ordered[i:j + 1])
        i = j + 1
    return ", ".join(parts)
