# src/warfengine/dosing.py
from __future__ import annotations

from typing import Iterator, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .solvers import snap_dose
from .types import DAYS_PER_WEEK, DoseTierAssignment, SpecialDayPattern

# --------------------------
# Rule tables
# --------------------------
# Special-day groups tried for each pattern, smallest group first. The last
# group is the full pattern; the smaller ones give "adjust only Sunday" style
# regimens that clinicians write when the weekly change is small.
SPECIAL_DAY_GROUPS: dict[str, tuple[tuple[int, ...], ...]] = {
    "none": (),
    "fri-sun": ((6,), (5, 6), (4, 5, 6)),
    "mon-wed-fri": ((2,), (0, 4), (0, 2, 4)),
    "weekends": ((6,), (5, 6)),
}

# Base-dose seeds for a group of k special days and weekly dose W:
#   ratio seeds : base = W / ((7 - k) + r * k), i.e. special ~ r * base
#   step seeds  : the even split W / 7 moved by n steps along the representable grid
# The special dose is always the remainder (W - base * (7 - k)) / k, snapped to the grid.
SPECIAL_TO_BASE_RATIOS: tuple[float, ...] = (0.0, 0.5, 1.5, 2.0)
BASE_STEP_OFFSETS: tuple[int, ...] = (-2, -1, 0, 1, 2)


def special_day_groups(pattern: SpecialDayPattern) -> tuple[tuple[int, ...], ...]:
    try:
        return SPECIAL_DAY_GROUPS[pattern]
    except KeyError:
        raise ValueError(f"Unknown special_day_pattern {pattern!r}; "
                         f"expected one of {sorted(SPECIAL_DAY_GROUPS)}.") from None


def uniform_assignment(weekly_dose: float, grid: Sequence[float]) -> DoseTierAssignment:
    """Same dose every day: W / 7 snapped to the nearest representable dose."""
    return DoseTierAssignment(base_dose_mg=snap_dose(weekly_dose / DAYS_PER_WEEK, grid))


def enumerate_assignments(weekly_dose: float, pattern: SpecialDayPattern, grid: Sequence[float],
                          config: EngineConfig = DEFAULT_CONFIG) -> Iterator[DoseTierAssignment]:
    """
    Lazily yield candidate ways to split the week into one or two dose tiers.

    weekly_dose : target weekly dose (mg)
    pattern     : special-day pattern; "none" yields the uniform assignment only
    grid        : ascending daily doses the tablet set can realize (see solvers.representable_doses)

    Every yielded assignment uses only grid doses, keeps each day within
    min(weekly_dose, config.max_daily_dose_mg), keeps the special dose within
    config.special_dose_multiplier_limit of a positive base, has at most
    config.max_stop_days stop days, and lands within
    config.weekly_tolerance_mg of weekly_dose. The uniform assignment comes
    first; duplicates are skipped.
    """
    groups = special_day_groups(pattern)
    ceiling = min(weekly_dose, config.max_daily_dose_mg)
    seen: set[tuple] = set()

    candidates = [uniform_assignment(weekly_dose, grid)]
    for days in groups:
        k = len(days)
        for base_seed in _base_seeds(weekly_dose, k, grid):
            base = snap_dose(base_seed, grid)
            special = snap_dose((weekly_dose - base * (DAYS_PER_WEEK - k)) / k, grid)
            candidates.append(DoseTierAssignment(base_dose_mg=base, special_dose_mg=special, special_days=days))

    for assignment in candidates:
        key = (assignment.base_dose_mg, assignment.special_dose_mg, assignment.special_days)
        if key in seen:
            continue
        seen.add(key)
        if _acceptable(assignment, weekly_dose, ceiling, config):
            yield assignment


def _base_seeds(weekly_dose: float, k: int, grid: Sequence[float]) -> list[float]:
    seeds = [weekly_dose / ((DAYS_PER_WEEK - k) + r * k) for r in SPECIAL_TO_BASE_RATIOS]

    even = snap_dose(weekly_dose / DAYS_PER_WEEK, grid)
    idx = list(grid).index(even)
    for step in BASE_STEP_OFFSETS:
        if 0 <= idx + step < len(grid):
            seeds.append(grid[idx + step])
    return seeds


def _acceptable(a: DoseTierAssignment, weekly_dose: float, ceiling: float, config: EngineConfig) -> bool:
    tol = config.dose_tolerance_mg
    doses = [a.base_dose_mg] if a.is_uniform else [a.base_dose_mg, a.special_dose_mg]

    if any(d < 0 for d in doses):
        return False
    if any(d > ceiling + tol for d in doses):
        return False
    if a.is_uniform:
        # A whole week off is only right when nothing is prescribed
        if a.base_dose_mg <= tol and weekly_dose > tol:
            return False
    else:
        # Normal days always carry tablets; only the special days may be stop days
        if a.base_dose_mg <= tol:
            return False
        if abs(a.special_dose_mg - a.base_dose_mg) < tol:
            return False
        if a.special_dose_mg > a.base_dose_mg * config.special_dose_multiplier_limit + tol:
            return False
        if stop_days(a, tol) > config.max_stop_days:
            return False
    return abs(a.weekly_total() - weekly_dose) <= config.weekly_tolerance_mg + 1e-9


def stop_days(a: DoseTierAssignment, tol: float = DEFAULT_CONFIG.dose_tolerance_mg) -> int:
    """Days of the week without warfarin under an assignment."""
    return sum(1 for day in range(DAYS_PER_WEEK) if a.dose_for(day) <= tol)
