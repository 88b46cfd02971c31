import pytest

from air_indices.simulator import (
    INITIAL_STATE,
    WALK_BOUNDS,
    RandomWalkSource,
    StateCell,
    vary,
)
from air_indices.snapshot import MeasurementSnapshot


class FixedStep:
    def __init__(self, step):
        self.step = step

    def uniform(self, low, high):
        return self.step


def test_vary_reflects_above_band():
    assert vary(10.0, 5.0, 0.0, 12.0, FixedStep(5.0)) == pytest.approx(11.4)


def test_vary_reflects_below_band():
    assert vary(1.0, 5.0, 0.0, 12.0, FixedStep(-5.0)) == pytest.approx(0.8)


def test_vary_rounds_to_three_decimals():
    assert vary(1.0, 1.0, 0.0, 12.0, FixedStep(0.123456)) == 1.123


def test_walk_stays_in_band():
    source = RandomWalkSource(seed=3)
    for _ in range(2000):
        snap = source.step()
        for name, (_, low, high) in WALK_BOUNDS.items():
            assert low <= snap.get(name) <= high


def test_seeded_walks_are_reproducible():
    a = RandomWalkSource(seed=11)
    b = RandomWalkSource(seed=11)
    for _ in range(10):
        assert a.step().measures() == b.step().measures()


def test_initial_snapshot():
    snap = RandomWalkSource().initial_snapshot()
    assert snap.measures() == INITIAL_STATE


def test_state_cell_swaps_whole_snapshots():
    first = MeasurementSnapshot.capture(INITIAL_STATE)
    cell = StateCell(first)
    second = MeasurementSnapshot.capture({"co2": 900})

    cell.set(second)

    assert cell.get() is second
    assert first.co2 == 600.0
