# src/warfengine/config.py
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables for regimen generation.

    dose_tolerance_mg             : two doses closer than this are treated as equal
    weekly_tolerance_mg           : max |weekly_dose_actual - weekly_dose| for a returned option
    max_tablets_per_day           : max pieces on one day (a half tablet counts as one piece)
    max_daily_dose_mg             : absolute ceiling for any single day
    special_dose_multiplier_limit : special-day dose may not exceed this multiple of the base dose
    max_stop_days                 : max days without warfarin in a two-tier week
    max_suggestions               : how many ranked options are returned
    """
    dose_tolerance_mg: float = 0.01
    weekly_tolerance_mg: float = 0.5
    max_tablets_per_day: int = 4
    max_daily_dose_mg: float = 15.0
    special_dose_multiplier_limit: float = 2.5
    max_stop_days: int = 3
    max_suggestions: int = 5

    def __post_init__(self):
        _validate_positive("dose_tolerance_mg", self.dose_tolerance_mg)
        if not (self.weekly_tolerance_mg >= 0):
            raise ValueError(f"weekly_tolerance_mg must be >= 0 (got {self.weekly_tolerance_mg}).")
        _validate_positive_int("max_tablets_per_day", self.max_tablets_per_day)
        _validate_positive("max_daily_dose_mg", self.max_daily_dose_mg)
        if not (self.special_dose_multiplier_limit > 1):
            raise ValueError(f"special_dose_multiplier_limit must be > 1 (got {self.special_dose_multiplier_limit}).")
        if not (isinstance(self.max_stop_days, int) and 0 <= self.max_stop_days < 7):
            raise ValueError(f"max_stop_days must be an integer in 0..6 (got {self.max_stop_days}).")
        _validate_positive_int("max_suggestions", self.max_suggestions)


def _validate_positive(name: str, x: float) -> None:
    if not (x > 0):
        raise ValueError(f"{name} must be > 0 (got {x}).")

def _validate_positive_int(name: str, x: int) -> None:
    if not (isinstance(x, int) and x > 0):
        raise ValueError(f"{name} must be a positive integer (got {x}).")


DEFAULT_CONFIG = EngineConfig()
