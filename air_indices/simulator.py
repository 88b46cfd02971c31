"""
Demo state source: a bounded random walk over every tracked variable.

Each tick nudges every variable by a uniform step.  Values leaving their
band are reflected back inside with damping.
"""

from __future__ import annotations

import random
import threading
from typing import Dict, Optional, Tuple

from air_indices.snapshot import MEASURE_FIELDS, MeasurementSnapshot

REFLECTION_DAMPING = 0.2

# variable -> (max step, soft low, soft high)
WALK_BOUNDS: Dict[str, Tuple[float, float, float]] = {
    "co2": (20.0, 450.0, 1500.0),
    "no2": (2.0, 20.0, 120.0),
    "nh3": (0.002, 0.01, 0.08),
    "co": (0.05, 0.2, 3.0),
    "temp": (0.12, 19.0, 26.0),
    "rh": (0.3, 35.0, 65.0),
    "pres": (0.05, 1008.0, 1018.0),
}

INITIAL_STATE: Dict[str, float] = {
    "co2": 600.0,
    "no2": 40.0,
    "nh3": 0.02,
    "co": 0.5,
    "temp": 22.5,
    "rh": 50.0,
    "pres": 1013.0,
}


def vary(value: float, delta: float, low: float, high: float,
         rng: Optional[random.Random] = None) -> float:
    rng = rng or random
    new_value = value + rng.uniform(-delta, delta)
    if new_value < low:
        new_value = low + (low - new_value) * REFLECTION_DAMPING
    if new_value > high:
        new_value = high - (new_value - high) * REFLECTION_DAMPING
    return round(new_value, 3)


class StateCell:
    """
    Holds the live current snapshot.

    Only the producer calls ``set``; readers get the immutable snapshot that
    was current at the time of the call.
    """

    def __init__(self, initial: MeasurementSnapshot) -> None:
        self._current = initial
        self._lock = threading.Lock()

    def get(self) -> MeasurementSnapshot:
        with self._lock:
            return self._current

    def set(self, snapshot: MeasurementSnapshot) -> None:
        with self._lock:
            self._current = snapshot


class RandomWalkSource:
    def __init__(self,
                 initial: Optional[Dict[str, float]] = None,
                 *,
                 seed: Optional[int] = None) -> None:
        self._values = dict(INITIAL_STATE if initial is None else initial)
        self._rng = random.Random(seed)

    def initial_snapshot(self) -> MeasurementSnapshot:
        return MeasurementSnapshot.capture(self._values)

    def step(self) -> MeasurementSnapshot:
        for name in MEASURE_FIELDS:
            current = self._values.get(name)
            if current is None or name not in WALK_BOUNDS:
                continue
            delta, low, high = WALK_BOUNDS[name]
            self._values[name] = vary(current, delta, low, high, self._rng)
        return MeasurementSnapshot.capture(self._values)
