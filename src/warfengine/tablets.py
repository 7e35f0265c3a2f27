# src/warfengine/tablets.py
from types import MappingProxyType
from typing import Iterable, Mapping

from .types import TabletSpec

# Warfarin tablet strengths stocked by the pharmacy (mg).
PILL_STRENGTHS_MG: tuple[int, ...] = (1, 2, 3, 5)

# Strengths selected when a session starts. Read-only: hosts copy it, never edit it.
DEFAULT_AVAILABLE_PILLS: Mapping[int, bool] = MappingProxyType({1: False, 2: True, 3: True, 5: True})


def selected_strengths(selection: Mapping[int, bool] = DEFAULT_AVAILABLE_PILLS) -> tuple[int, ...]:
    """
    Turn a {strength_mg: selected} mapping into the ascending tuple of selected strengths.
    Example: {1: False, 2: True, 3: True, 5: True} -> (2, 3, 5)
    """
    return tuple(sorted(int(mg) for mg, on in selection.items() if on))


def resolve_inventory(available_pills: Iterable[int]) -> tuple[TabletSpec, ...]:
    """
    Validate and order the strengths usable in one calculation.

    Duplicates collapse; the result is sorted ascending. A zero, negative or
    non-integer strength raises ValueError (a malformed catalog, not a dosing
    condition). An empty input gives an empty tuple.
    """
    specs = {TabletSpec(strength_mg=_as_strength(mg)) for mg in available_pills}
    return tuple(sorted(specs, key=lambda s: s.strength_mg))


def strengths_of(inventory: Iterable[TabletSpec]) -> tuple[int, ...]:
    return tuple(s.strength_mg for s in inventory if s.available)


def _as_strength(mg) -> int:
    # Accept 5.0 from JSON payloads, reject 2.5
    if isinstance(mg, float) and mg.is_integer():
        return int(mg)
    return mg
