# src/warfengine/solvers.py
from itertools import combinations_with_replacement
from typing import Iterator, Sequence

import numpy as np

from .config import DEFAULT_CONFIG, EngineConfig
from .types import Decomposition, PillUsage

# A piece is one thing the patient takes: (strength_mg, is_half).
Piece = tuple[int, bool]


def decompose_dose(target_mg: float, strengths: Sequence[int], allow_half: bool,
                   config: EngineConfig = DEFAULT_CONFIG) -> Decomposition:
    """
    Find the tablets that realize one day's dose.

    Exhaustive bounded search over every multiset of at most
    config.max_tablets_per_day pieces (whole tablets, plus half tablets when
    allow_half). Greedy coin change is not optimal for arbitrary strength sets
    (6 mg from {1, 3, 4}: greedy 4+1+1, optimal 3+3), and with at most a handful
    of strengths the full search is a few thousand combinations.

    Preference among combinations hitting the target:
      1) fewest pieces
      2) fewest distinct strengths
      3) fewest half tablets
      4) larger strengths first
    If nothing hits the target, the closest total wins (ties toward the lower
    dose), then the same preferences, and the result is flagged exact=False.

    Returns a Decomposition; pills are ordered larger strength first.
    """
    if target_mg <= config.dose_tolerance_mg:
        return Decomposition(target_mg=float(target_mg), pills=(), exact=True)

    best_key = None
    best_combo: tuple[Piece, ...] = ()
    for combo in _candidate_combos(strengths, allow_half, config.max_tablets_per_day):
        dose = _combo_half_units(combo) / 2.0
        miss = round(abs(dose - target_mg), 9)
        if miss < config.dose_tolerance_mg:
            miss = 0.0
        key = (miss, dose, *_preference(combo))
        if best_key is None or key < best_key:
            best_key, best_combo = key, combo

    exact = best_key is not None and best_key[0] == 0.0
    return Decomposition(target_mg=float(target_mg), pills=_aggregate(best_combo), exact=exact)


def decomposition_table(strengths: Sequence[int], allow_half: bool,
                        config: EngineConfig = DEFAULT_CONFIG) -> dict[float, Decomposition]:
    """
    The preferred exact decomposition of every reachable daily dose, in one
    pass over the search space. Keys are ascending doses (mg), 0 included.
    Each entry equals decompose_dose(dose, strengths, allow_half, config).
    """
    best: dict[int, tuple[tuple, tuple[Piece, ...]]] = {}
    for combo in _candidate_combos(strengths, allow_half, config.max_tablets_per_day):
        units = _combo_half_units(combo)
        key = _preference(combo)
        if units not in best or key < best[units][0]:
            best[units] = (key, combo)
    return {
        units / 2.0: Decomposition(target_mg=units / 2.0, pills=_aggregate(combo), exact=True)
        for units, (_, combo) in sorted(best.items())
    }


def representable_doses(strengths: Sequence[int], allow_half: bool,
                        config: EngineConfig = DEFAULT_CONFIG) -> tuple[float, ...]:
    """
    Every daily dose (mg) reachable within the piece budget, ascending, 0 included.
    Example: strengths (2, 3), no halves, 2 pieces -> (0, 2, 3, 4, 5, 6)
    """
    return tuple(decomposition_table(strengths, allow_half, config))


def snap_dose(target_mg: float, grid: Sequence[float]) -> float:
    """
    Nearest value of an ascending dose grid. Ties go to the lower dose.
    """
    if len(grid) == 0:
        raise ValueError("Cannot snap a dose onto an empty grid.")
    arr = np.asarray(grid, dtype=float)
    return float(arr[int(np.argmin(np.abs(arr - target_mg)))])


def _pieces(strengths: Sequence[int], allow_half: bool) -> list[Piece]:
    pieces: list[Piece] = []
    for mg in sorted(set(strengths), reverse=True):
        pieces.append((mg, False))
        if allow_half:
            pieces.append((mg, True))
    return pieces


def _candidate_combos(strengths: Sequence[int], allow_half: bool,
                      max_pieces: int) -> Iterator[tuple[Piece, ...]]:
    pieces = _pieces(strengths, allow_half)
    for n in range(0, max_pieces + 1):
        for combo in combinations_with_replacement(pieces, n):
            halves = [mg for mg, half in combo if half]
            # Two halves of one strength are a whole tablet
            if len(halves) != len(set(halves)):
                continue
            yield combo


def _combo_half_units(combo: tuple[Piece, ...]) -> int:
    return sum(mg if half else 2 * mg for mg, half in combo)


def _preference(combo: tuple[Piece, ...]) -> tuple:
    n_pieces = len(combo)
    n_strengths = len({mg for mg, _ in combo})
    n_halves = sum(1 for _, half in combo if half)
    larger_first = tuple(sorted((-mg for mg, _ in combo)))
    return (n_pieces, n_strengths, n_halves, larger_first)


def _aggregate(combo: tuple[Piece, ...]) -> tuple[PillUsage, ...]:
    counts: dict[int, float] = {}
    for mg, half in combo:
        counts[mg] = counts.get(mg, 0.0) + (0.5 if half else 1.0)
    return tuple(PillUsage(strength_mg=mg, count=counts[mg]) for mg in sorted(counts, reverse=True))
