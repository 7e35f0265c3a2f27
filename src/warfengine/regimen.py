# src/warfengine/regimen.py
import logging
from typing import Mapping, Optional, Sequence

import numpy as np

from .config import DEFAULT_CONFIG, EngineConfig
from .dispensing import summarize_dispensing
from .helpers import format_days, format_mg, group_days_by_dose
from .solvers import decompose_dose
from .types import DAYS_PER_WEEK, DaySchedule, Decomposition, DoseTierAssignment, RegimenOption

logger = logging.getLogger(__name__)


def assemble_regimen(assignment: DoseTierAssignment, strengths: Sequence[int], allow_half: bool,
                     days_until_appointment: int, start_day_of_week: int,
                     weekly_dose: Optional[float] = None,
                     decompositions: Optional[Mapping[float, Decomposition]] = None,
                     config: EngineConfig = DEFAULT_CONFIG) -> Optional[RegimenOption]:
    """
    Turn a dose-tier assignment into a full 7-day regimen.

    Each distinct dose level is decomposed once and reused on every day that
    receives it. A level the tablets cannot hit exactly uses the closest
    achievable dose, and the day total is what the patient actually takes.
    decompositions, when given, is a precomputed dose -> Decomposition table
    (see solvers.decomposition_table); levels missing from it are searched.
    Returns None when weekly_dose is given and the realized weekly total is
    further than config.weekly_tolerance_mg from it.
    """
    known = decompositions or {}
    levels = {}
    for dose in group_days_by_dose(assignment):
        dec = known.get(dose)
        if dec is None:
            dec = decompose_dose(dose, strengths, allow_half, config)
        if not dec.exact:
            logger.debug("%s mg not realizable with %s; using %s mg",
                         format_mg(dose), tuple(strengths), format_mg(dec.dose_mg))
        levels[dose] = dec

    schedule = []
    for day in range(DAYS_PER_WEEK):
        dec = levels[assignment.dose_for(day)]
        schedule.append(DaySchedule(
            day_index=day,
            total_dose_mg=dec.dose_mg,
            pills=dec.pills,
            is_special_day=day in assignment.special_days,
        ))

    weekly_actual = sum(d.total_dose_mg for d in schedule)
    if weekly_dose is not None and abs(weekly_actual - weekly_dose) > config.weekly_tolerance_mg + 1e-9:
        return None

    return RegimenOption(
        description=describe_assignment(assignment),
        weekly_dose_actual=weekly_actual,
        weekly_schedule=tuple(schedule),
        total_pills_summary=summarize_dispensing(schedule, days_until_appointment, start_day_of_week),
    )


def describe_assignment(assignment: DoseTierAssignment) -> str:
    """
    Clinician-facing one-liner, e.g.
      "5 mg daily"
      "5 mg daily except 7.5 mg Fri-Sun"
      "5 mg daily except no dose on Sun"
      "No dose except 2 mg Sun"
    """
    base = assignment.base_dose_mg
    if assignment.is_uniform:
        if base == 0:
            return "No warfarin (0 mg daily)"
        return f"{format_mg(base)} mg daily"

    days = format_days(assignment.special_days)
    if base == 0:
        return f"No dose except {format_mg(assignment.special_dose_mg)} mg {days}"
    if assignment.special_dose_mg == 0:
        return f"{format_mg(base)} mg daily except no dose on {days}"
    return f"{format_mg(base)} mg daily except {format_mg(assignment.special_dose_mg)} mg {days}"


def prefer_exact(options: Sequence[RegimenOption], weekly_dose: float,
                 config: EngineConfig = DEFAULT_CONFIG) -> list[RegimenOption]:
    """
    Drop options missing the weekly target when at least one option hits it.
    """
    exact = [o for o in options
             if np.isclose(o.weekly_dose_actual, weekly_dose, rtol=0.0, atol=config.dose_tolerance_mg)]
    return exact if exact else list(options)
