import numpy as np
import pytest

from warfengine.config import EngineConfig
from warfengine.solvers import decompose_dose, decomposition_table, representable_doses, snap_dose
from warfengine.types import PillUsage


def test_half_tablet_realizes_quarter_dose():
    """2.5 mg from {1, 2, 3, 5} with halves allowed is a single half 5 mg tablet."""
    dec = decompose_dose(2.5, (1, 2, 3, 5), allow_half=True)
    assert dec.exact
    assert dec.pills == (PillUsage(strength_mg=5, count=0.5),)
    assert dec.pills[0].is_half


def test_beats_greedy_on_awkward_strengths():
    """
    Greedy coin change picks 4 + 1 + 1 for 6 mg from {1, 3, 4};
    the exhaustive search finds 3 + 3.
    """
    dec = decompose_dose(6, (1, 3, 4), allow_half=False)
    assert dec.exact
    assert dec.pills == (PillUsage(strength_mg=3, count=2),)


def test_prefers_fewer_distinct_strengths():
    # 4 mg: 2+2 and 3+1 are both two tablets, 2+2 needs one strength
    dec = decompose_dose(4, (1, 2, 3), allow_half=False)
    assert dec.pills == (PillUsage(strength_mg=2, count=2),)


def test_prefers_larger_strengths_on_full_tie():
    # 6 mg: 5+1 and 4+2 tie on pieces, strengths and halves
    dec = decompose_dose(6, (1, 2, 4, 5), allow_half=False)
    assert dec.pills == (PillUsage(strength_mg=5, count=1), PillUsage(strength_mg=1, count=1))


def test_whole_plus_half_of_one_strength():
    dec = decompose_dose(7.5, (5,), allow_half=True)
    assert dec.exact
    assert dec.pills == (PillUsage(strength_mg=5, count=1.5),)
    assert dec.pills[0].is_half
    assert np.isclose(dec.dose_mg, 7.5)


def test_inexact_without_halves_goes_to_lower_dose():
    """2.5 mg is unreachable with whole 2/3 mg tablets; 2 and 3 are equally close, the lower wins."""
    dec = decompose_dose(2.5, (2, 3), allow_half=False)
    assert not dec.exact
    assert np.isclose(dec.dose_mg, 2.0)
    assert dec.pills == (PillUsage(strength_mg=2, count=1),)


def test_zero_dose_is_empty_and_exact():
    dec = decompose_dose(0, (2, 3, 5), allow_half=True)
    assert dec.exact
    assert dec.pills == ()
    assert dec.dose_mg == 0


def test_no_strengths_is_inexact():
    dec = decompose_dose(5, (), allow_half=True)
    assert not dec.exact
    assert dec.pills == ()


def test_piece_budget_limits_search():
    """Four 5 mg tablets is the most one day can hold by default."""
    assert decompose_dose(20, (5,), allow_half=False).exact
    dec = decompose_dose(25, (5,), allow_half=False)
    assert not dec.exact
    assert np.isclose(dec.dose_mg, 20.0)

    roomy = EngineConfig(max_tablets_per_day=5)
    assert decompose_dose(25, (5,), allow_half=False, config=roomy).exact


def test_pill_sum_matches_target_over_grid():
    """Every exact decomposition sums to its target within 1e-6."""
    strengths = (1, 2, 3, 5)
    for target in np.arange(0.0, 15.5, 0.5):
        dec = decompose_dose(float(target), strengths, allow_half=True)
        assert dec.exact
        assert abs(sum(p.strength_mg * p.count for p in dec.pills) - target) < 1e-6


def test_representable_doses():
    cfg = EngineConfig(max_tablets_per_day=2)
    assert representable_doses((2, 3), allow_half=False, config=cfg) == (0, 2, 3, 4, 5, 6)

    with_halves = representable_doses((5,), allow_half=True, config=cfg)
    assert with_halves == (0, 2.5, 5, 7.5, 10)


def test_snap_dose():
    grid = (0.0, 3.5, 4.0, 6.0)
    assert snap_dose(3.9, grid) == 4.0
    assert snap_dose(3.75, grid) == 3.5   # tie -> lower
    assert snap_dose(-1.0, grid) == 0.0
    assert snap_dose(100.0, grid) == 6.0
    with pytest.raises(ValueError):
        snap_dose(1.0, ())


def test_table_agrees_with_single_searches():
    """The one-pass table gives the same tablets as searching each dose on its own."""
    for strengths, half in (((1, 2, 3, 5), True), ((2, 3), False), ((1, 3, 4), False)):
        table = decomposition_table(strengths, allow_half=half)
        assert tuple(table) == representable_doses(strengths, allow_half=half)
        for dose, dec in table.items():
            assert dec == decompose_dose(dose, strengths, allow_half=half)
