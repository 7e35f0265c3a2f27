# src/warfengine/suggest.py
import logging
import math
from typing import Any, Mapping

from .config import DEFAULT_CONFIG, EngineConfig
from .dosing import enumerate_assignments, special_day_groups
from .ranking import rank_options
from .regimen import assemble_regimen, prefer_exact
from .solvers import decomposition_table
from .tablets import resolve_inventory, strengths_of
from .types import DAYS_PER_WEEK, CalculationInput, RegimenOption

logger = logging.getLogger(__name__)


def generate_suggestions(inp: CalculationInput, config: EngineConfig = DEFAULT_CONFIG) -> list[RegimenOption]:
    """
    Compute ranked weekly regimens for a prescribed weekly dose.

    Pipeline: tablet inventory -> representable daily doses -> dose-tier
    assignments -> per-day tablet decomposition -> 7-day regimens with a
    dispensing summary -> exact-first filter -> ranking.

    Invalid data (negative or non-finite weekly dose, no tablets, negative
    horizon, start day outside 0-6) and infeasible targets both return [].
    Malformed tablet strengths or an unknown special-day pattern raise ValueError.

    Pure and deterministic: the same input always gives the same list.
    """
    inventory = resolve_inventory(inp.available_pills)
    special_day_groups(inp.special_day_pattern)

    reason = _invalid_reason(inp, inventory)
    if reason:
        logger.info("No suggestions: %s", reason)
        return []

    strengths = strengths_of(inventory)
    table = decomposition_table(strengths, inp.allow_half, config)
    grid = tuple(table)

    options: list[RegimenOption] = []
    n_assignments = 0
    for assignment in enumerate_assignments(inp.weekly_dose, inp.special_day_pattern, grid, config):
        n_assignments += 1
        opt = assemble_regimen(
            assignment, strengths, inp.allow_half,
            days_until_appointment=inp.days_until_appointment,
            start_day_of_week=inp.start_day_of_week,
            weekly_dose=inp.weekly_dose,
            decompositions=table,
            config=config,
        )
        if opt is not None:
            options.append(opt)
    logger.debug("%d assignments enumerated, %d regimens assembled for %s mg/week",
                 n_assignments, len(options), inp.weekly_dose)

    ranked = rank_options(prefer_exact(options, inp.weekly_dose, config), inp.weekly_dose, config)
    if not ranked:
        logger.info("No suggestions: %s mg/week is not achievable with %s mg tablets (allow_half=%s)",
                    inp.weekly_dose, strengths, inp.allow_half)
    return ranked


def generate_suggestions_from_mapping(payload: Mapping[str, Any],
                                      config: EngineConfig = DEFAULT_CONFIG) -> list[dict]:
    """
    Host boundary: snake_case payload in, list of plain dicts out.
    See CalculationInput.from_mapping for the accepted keys.
    """
    inp = CalculationInput.from_mapping(payload)
    return [opt.to_dict() for opt in generate_suggestions(inp, config)]


def _invalid_reason(inp: CalculationInput, inventory) -> str:
    if not isinstance(inp.weekly_dose, (int, float)) or not math.isfinite(inp.weekly_dose):
        return f"weekly_dose must be a finite number (got {inp.weekly_dose!r})"
    if inp.weekly_dose < 0:
        return f"weekly_dose must be >= 0 (got {inp.weekly_dose})"
    if not inventory:
        return "no tablet strengths selected"
    if inp.days_until_appointment < 0:
        return f"days_until_appointment must be >= 0 (got {inp.days_until_appointment})"
    if not (0 <= inp.start_day_of_week < DAYS_PER_WEEK):
        return f"start_day_of_week must be 0-6 (got {inp.start_day_of_week})"
    return ""
