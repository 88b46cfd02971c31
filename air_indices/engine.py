from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from air_indices.config import (
    AQ_WEIGHTS,
    COMFORT_MAX_RAW,
    COMFORT_SETPOINTS,
    COMFORT_WEIGHTS,
    CORRELATION_PRECISION,
    CORRELATION_SAMPLES,
    GAQI_WEIGHTS,
    GEI_CORR_WEIGHT,
    POLLUTANT_THRESHOLDS,
    SCORE_PRECISION,
    VOLATILITY_SAMPLES,
    VOLATILITY_SIGMA_MAX,
    VOLATILITY_WEIGHTS,
)
from air_indices.snapshot import MeasurementSnapshot
from air_indices.stats import pearson, std

logger = logging.getLogger(__name__)

SnapshotLike = Union[MeasurementSnapshot, Mapping]


@dataclass(frozen=True)
class IndexResult:
    aql: float = 0.0
    aq_penalty: float = 0.0
    tci: float = 0.0
    tci_penalty_pct: float = 0.0
    sri: float = 0.0
    volatility_penalty: float = 0.0
    gei: float = 0.0
    corr_co2_no2: float = 0.0
    corr_co_nh3: float = 0.0
    gaqi: float = 0.0

    @classmethod
    def zero(cls) -> "IndexResult":
        return cls()

    def as_dict(self) -> Dict[str, float]:
        return {
            "AQL": self.aql,
            "AQ_penalty": self.aq_penalty,
            "TCI": self.tci,
            "TCI_penalty_pct": self.tci_penalty_pct,
            "SRI": self.sri,
            "Volatility_penalty": self.volatility_penalty,
            "GEI": self.gei,
            "corr_co2_no2": self.corr_co2_no2,
            "corr_co_nh3": self.corr_co_nh3,
            "GAQI": self.gaqi,
        }


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _as_snapshot(value: SnapshotLike) -> MeasurementSnapshot:
    if isinstance(value, MeasurementSnapshot):
        return value
    return MeasurementSnapshot.from_dict(value)


def _tail(window: Sequence[MeasurementSnapshot], size: int) -> List[MeasurementSnapshot]:
    if size <= 0:
        return []
    return list(window[-size:])


def _series(window: Sequence[MeasurementSnapshot], name: str) -> List[float]:
    return [value for value in (s.get(name) for s in window) if value is not None]


def pollutant_penalty(value: Optional[float], good: float, bad: float) -> float:
    """
    Linear 0-100 penalty between the "good" and "bad" thresholds.

    Missing readings and readings at or below ``good`` cost nothing; anything
    at or above ``bad`` saturates at 100.
    """
    if value is None or value <= good:
        return 0.0
    span = bad - good
    if span <= 0:
        return 100.0
    return clamp((value - good) / span, 0.0, 1.0) * 100.0


def air_quality_penalty(state: MeasurementSnapshot) -> float:
    weights = AQ_WEIGHTS
    penalties = {
        name: pollutant_penalty(state.get(name), *POLLUTANT_THRESHOLDS[name])
        for name in ("co2", "no2", "nh3", "co")
    }
    weighted = (
        penalties["co2"] * weights.co2
        + penalties["no2"] * weights.no2
        + penalties["nh3"] * weights.nh3
        + penalties["co"] * weights.co
    )
    if weights.total > 0:
        weighted /= weights.total
    return clamp(weighted, 0.0, 100.0)


def comfort_penalty(state: MeasurementSnapshot) -> float:
    """
    Weighted absolute deviation from the comfort set-points, as a percentage
    of the worst expected raw deviation.  Missing fields contribute nothing.
    """
    raw = 0.0
    for name, setpoint, weight in zip(("temp", "rh", "pres"), COMFORT_SETPOINTS, COMFORT_WEIGHTS):
        value = state.get(name)
        if value is not None:
            raw += abs(value - setpoint) * weight
    if COMFORT_MAX_RAW <= 0:
        return 0.0
    return clamp(raw / COMFORT_MAX_RAW * 100.0, 0.0, 100.0)


def volatility_penalty(window: Sequence[MeasurementSnapshot]) -> float:
    recent = _tail(window, VOLATILITY_SAMPLES)
    term = 0.0
    for name, sigma_max, weight in zip(("co2", "temp", "rh"), VOLATILITY_SIGMA_MAX, VOLATILITY_WEIGHTS):
        values = _series(recent, name)
        sigma = std(values) if len(values) >= 2 else 0.0
        if sigma_max > 0:
            term += (sigma / sigma_max) * weight
    return clamp(term * 100.0, 0.0, 100.0)


def _paired_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    if not a or not b or len(a) != len(b):
        return 0.0
    return pearson(a, b)


def gas_correlations(window: Sequence[MeasurementSnapshot]) -> Tuple[float, float]:
    """
    Pearson correlations (co2 vs no2, co vs nh3) over the long window.

    Missing readings are dropped per series, so a pair whose filtered series
    end up with different lengths is not comparable and scores 0.
    """
    recent = _tail(window, CORRELATION_SAMPLES)
    series = {name: _series(recent, name) for name in ("co2", "no2", "nh3", "co")}
    return (
        _paired_correlation(series["co2"], series["no2"]),
        _paired_correlation(series["co"], series["nh3"]),
    )


def equilibrium_index(corr_co2_no2: float, corr_co_nh3: float) -> float:
    return clamp(
        100.0 - abs(corr_co2_no2) * GEI_CORR_WEIGHT - abs(corr_co_nh3) * GEI_CORR_WEIGHT,
        0.0,
        100.0,
    )


def global_index(aq_penalty: float, tci_penalty: float, gei: float, vol_penalty: float) -> float:
    weights = GAQI_WEIGHTS
    blended = (
        weights.aq * aq_penalty
        + weights.comfort * tci_penalty
        + weights.equilibrium * (100.0 - gei)
        + weights.volatility * vol_penalty
    )
    if weights.total > 0:
        blended /= weights.total
    return clamp(100.0 - blended, 0.0, 100.0)


def _compute(state: MeasurementSnapshot, window: Sequence[MeasurementSnapshot]) -> IndexResult:
    aq = air_quality_penalty(state)
    tci_penalty = comfort_penalty(state)
    vol = volatility_penalty(window)
    corr_a, corr_b = gas_correlations(window)
    gei = equilibrium_index(corr_a, corr_b)
    gaqi = global_index(aq, tci_penalty, gei, vol)

    return IndexResult(
        aql=round(clamp(100.0 - aq, 0.0, 100.0), SCORE_PRECISION),
        aq_penalty=round(aq, SCORE_PRECISION),
        tci=round(clamp(100.0 - tci_penalty, 0.0, 100.0), SCORE_PRECISION),
        tci_penalty_pct=round(tci_penalty, SCORE_PRECISION),
        sri=round(clamp(100.0 - vol, 0.0, 100.0), SCORE_PRECISION),
        volatility_penalty=round(vol, SCORE_PRECISION),
        gei=round(gei, SCORE_PRECISION),
        corr_co2_no2=round(corr_a, CORRELATION_PRECISION),
        corr_co_nh3=round(corr_b, CORRELATION_PRECISION),
        gaqi=round(gaqi, SCORE_PRECISION),
    )


def compute_indices(state: SnapshotLike,
                    window: Sequence[SnapshotLike] = ()) -> IndexResult:
    """
    Compute the full index set for the current state and a history window.

    ``window`` is expected to be already restricted to the desired lookback;
    the volatility term uses its most recent samples and the correlation
    term its longer tail.  Never raises: an unexpected failure yields the
    all-zero result.
    """
    try:
        current = _as_snapshot(state)
        snapshots = [_as_snapshot(entry) for entry in window]
        result = _compute(current, snapshots)
    except Exception:
        logger.exception("Index computation failed, returning zero result")
        return IndexResult.zero()

    logger.debug("Indices over %d samples: %s", len(snapshots), result)
    return result


def gaqi_components(result: IndexResult) -> Dict[str, Dict[str, float]]:
    """
    Weighted contribution of every penalty to the global blend.
    """
    weights = GAQI_WEIGHTS
    total = weights.total if weights.total > 0 else 1.0
    penalties = {
        "air_quality": (weights.aq, result.aq_penalty),
        "thermal_comfort": (weights.comfort, result.tci_penalty_pct),
        "gas_equilibrium": (weights.equilibrium, round(100.0 - result.gei, SCORE_PRECISION)),
        "volatility": (weights.volatility, result.volatility_penalty),
    }
    return {
        name: {
            "weight": round(weight / total, 4),
            "penalty": penalty,
            "contribution": round(weight / total * penalty, SCORE_PRECISION),
        }
        for name, (weight, penalty) in penalties.items()
    }
