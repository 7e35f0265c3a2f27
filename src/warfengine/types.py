# src/warfengine/types.py
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence

# All doses are in MILLIGRAMS. Weekdays are indexed Monday=0 ... Sunday=6.
SpecialDayPattern = Literal["none", "fri-sun", "mon-wed-fri", "weekends"]

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class CalculationInput:
    """
    Everything one regimen calculation needs. Fully determines the output.

    weekly_dose            : prescribed total weekly dose, mg
    allow_half             : whether tablets may be split in half
    available_pills        : tablet strengths (mg) the pharmacy can dispense
    special_day_pattern    : which weekdays may receive a different dose
    days_until_appointment : dispensing horizon, in days
    start_day_of_week      : weekday the supply starts on (0=Mon ... 6=Sun)
    """
    weekly_dose: float
    allow_half: bool
    available_pills: Sequence[int]
    special_day_pattern: SpecialDayPattern = "none"
    days_until_appointment: int = 7
    start_day_of_week: int = 0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "CalculationInput":
        """
        Build an input from the host's snake_case payload, e.g.
          {"weekly_dose": 35, "allow_half": True, "available_pills": [2, 3, 5],
           "special_day_pattern": "fri-sun", "days_until_appointment": 28,
           "start_day_of_week": 2}
        Unknown keys are ignored.
        """
        if "weekly_dose" not in payload:
            raise ValueError("payload is missing 'weekly_dose'.")
        return cls(
            weekly_dose=float(payload["weekly_dose"]),
            allow_half=bool(payload.get("allow_half", True)),
            available_pills=tuple(payload.get("available_pills", ())),
            special_day_pattern=payload.get("special_day_pattern", "none"),
            days_until_appointment=int(payload.get("days_until_appointment", 7)),
            start_day_of_week=int(payload.get("start_day_of_week", 0)),
        )


@dataclass(frozen=True)
class TabletSpec:
    """A tablet strength the pharmacy stocks."""
    strength_mg: int
    available: bool = True

    def __post_init__(self):
        if isinstance(self.strength_mg, bool) or not isinstance(self.strength_mg, int) or self.strength_mg <= 0:
            raise ValueError(f"strength_mg must be a positive integer (got {self.strength_mg!r}).")


@dataclass(frozen=True)
class PillUsage:
    """
    How many tablets of one strength are taken on one day.

    count : whole or half-integer number of tablets (1.5 = one whole + one half)
    """
    strength_mg: int
    count: float

    @property
    def is_half(self) -> bool:
        return abs((self.count % 1.0) - 0.5) < 1e-9

    @property
    def dose_mg(self) -> float:
        return self.strength_mg * self.count

    def to_dict(self) -> dict:
        return {"mg": self.strength_mg, "count": self.count, "is_half": self.is_half}


@dataclass(frozen=True)
class DaySchedule:
    day_index: int
    total_dose_mg: float
    pills: tuple[PillUsage, ...] = ()
    is_special_day: bool = False

    @property
    def is_stop_day(self) -> bool:
        return self.total_dose_mg == 0

    def to_dict(self) -> dict:
        return {
            "day_index": self.day_index,
            "total_dose": self.total_dose_mg,
            "pills": [p.to_dict() for p in self.pills],
            "is_stop_day": self.is_stop_day,
            "is_special_day": self.is_special_day,
        }


@dataclass(frozen=True)
class PillLineSummary:
    strength_mg: int
    dispensed_count: int
    usage_note: str = ""

    def to_dict(self) -> dict:
        return {"mg": self.strength_mg, "dispensed_count": self.dispensed_count, "usage_note": self.usage_note}


@dataclass(frozen=True)
class TotalPillsSummary:
    """Whole tablets to hand out per strength until the next appointment."""
    header: str
    pill_lines: tuple[PillLineSummary, ...] = ()

    def to_dict(self) -> dict:
        return {"header": self.header, "pill_lines": [line.to_dict() for line in self.pill_lines]}


@dataclass(frozen=True)
class RegimenOption:
    """
    One candidate weekly regimen.

    description       : clinician-facing summary, e.g. "5 mg daily except 7.5 mg Fri-Sun"
    weekly_dose_actual: sum of the 7 day totals (may differ slightly from the target)
    weekly_schedule   : exactly 7 DaySchedule entries, Monday first
    total_pills_summary: dispensing need until the next appointment
    """
    description: str
    weekly_dose_actual: float
    weekly_schedule: tuple[DaySchedule, ...]
    total_pills_summary: TotalPillsSummary

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "weekly_dose_actual": self.weekly_dose_actual,
            "weekly_schedule": [d.to_dict() for d in self.weekly_schedule],
            "total_pills_summary": self.total_pills_summary.to_dict(),
        }


@dataclass(frozen=True)
class DoseTierAssignment:
    """
    Maps the week onto at most two dose levels.

    base_dose_mg    : dose on every day not listed in special_days
    special_dose_mg : dose on the special days (ignored when there are none)
    special_days    : weekday indices receiving special_dose_mg
    """
    base_dose_mg: float
    special_dose_mg: float = 0.0
    special_days: tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_uniform(self) -> bool:
        return not self.special_days

    def dose_for(self, day_index: int) -> float:
        return self.special_dose_mg if day_index in self.special_days else self.base_dose_mg

    def weekly_total(self) -> float:
        return sum(self.dose_for(day) for day in range(DAYS_PER_WEEK))


@dataclass(frozen=True)
class Decomposition:
    """
    Tablets realizing one day's dose.

    exact : False when no combination hits target_mg and pills give the closest total
    """
    target_mg: float
    pills: tuple[PillUsage, ...]
    exact: bool = True

    @property
    def dose_mg(self) -> float:
        return sum(p.dose_mg for p in self.pills)
