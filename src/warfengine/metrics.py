# src/warfengine/metrics.py
from .types import RegimenOption


def weekly_deviation(option: RegimenOption, weekly_dose: float) -> float:
    """|weekly_dose_actual - weekly_dose| (mg), rounded to kill float noise."""
    return round(abs(option.weekly_dose_actual - weekly_dose), 6)

def distinct_strengths(option: RegimenOption) -> int:
    """Number of tablet strengths the patient needs across the week."""
    return len({p.strength_mg for d in option.weekly_schedule for p in d.pills})

def half_usages(option: RegimenOption) -> int:
    """Half tablets taken per week."""
    return sum(1 for d in option.weekly_schedule for p in d.pills if p.is_half)

def tier_count(option: RegimenOption) -> int:
    """Distinct daily doses in the week (1 = same dose every day)."""
    return len({d.total_dose_mg for d in option.weekly_schedule})

def total_pieces(option: RegimenOption) -> int:
    """Pieces (whole or half tablets) taken per week."""
    return sum(int(p.count) + (1 if p.is_half else 0) for d in option.weekly_schedule for p in d.pills)

def layout_key(option: RegimenOption) -> tuple:
    """Day-by-day pill layout; two options with the same key are the same regimen."""
    return tuple(
        tuple((p.strength_mg, p.count) for p in d.pills)
        for d in sorted(option.weekly_schedule, key=lambda d: d.day_index)
    )
