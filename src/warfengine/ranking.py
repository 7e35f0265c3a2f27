# src/warfengine/ranking.py
from typing import Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .metrics import distinct_strengths, half_usages, layout_key, tier_count, total_pieces, weekly_deviation
from .types import RegimenOption


def rank_options(options: Sequence[RegimenOption], weekly_dose: float,
                 config: EngineConfig = DEFAULT_CONFIG) -> list[RegimenOption]:
    """
    Deduplicate and order candidate regimens, best first, and keep the top
    config.max_suggestions.

    Order:
      1) closest weekly total to weekly_dose
      2) fewer distinct tablet strengths
      3) fewer half tablets per week
      4) fewer dose tiers (same dose every day first)
      5) fewer pieces per week
      6) description, so equal scores stay in a stable order
    Options with an identical day-by-day layout keep only the first seen.
    An empty input returns an empty list.
    """
    unique: dict[tuple, RegimenOption] = {}
    for opt in options:
        unique.setdefault(layout_key(opt), opt)

    ranked = sorted(unique.values(), key=lambda o: (
        weekly_deviation(o, weekly_dose),
        distinct_strengths(o),
        half_usages(o),
        tier_count(o),
        total_pieces(o),
        o.description,
    ))
    return ranked[:config.max_suggestions]
