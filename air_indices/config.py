"""
Configuration for the environmental indices engine and its dashboard service.

Values can be overridden via environment variables so operators can tune the
formulas without changing code.  Numeric overrides are parsed as floats (or
ints for counts); anything unparseable falls back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Tuple

# Pollutant (good, bad) thresholds.  At or below "good" a pollutant costs
# nothing; at or above "bad" it saturates the penalty.
DEFAULT_CO2_THRESHOLDS = (600.0, 2000.0)  # ppm
DEFAULT_NO2_THRESHOLDS = (40.0, 200.0)  # µg/m³
DEFAULT_NH3_THRESHOLDS = (0.01, 0.1)  # ppm
DEFAULT_CO_THRESHOLDS = (0.5, 10.0)  # ppm

DEFAULT_AQ_WEIGHT_CO2 = 0.50
DEFAULT_AQ_WEIGHT_NO2 = 0.25
DEFAULT_AQ_WEIGHT_NH3 = 0.15
DEFAULT_AQ_WEIGHT_CO = 0.10

# Thermal comfort set-points (temp °C, rh %, pres hPa) and deviation weights.
DEFAULT_COMFORT_SETPOINTS = (22.0, 50.0, 1013.0)
DEFAULT_COMFORT_WEIGHTS = (2.5, 0.5, 0.02)
DEFAULT_COMFORT_MAX_RAW = 76.0

# Expected worst-case sigmas (co2, temp, rh) over the short window.
DEFAULT_VOLATILITY_SIGMA_MAX = (500.0, 3.0, 10.0)
DEFAULT_VOLATILITY_WEIGHTS = (0.4, 0.3, 0.3)
DEFAULT_VOLATILITY_SAMPLES = 60

DEFAULT_CORRELATION_SAMPLES = 1200  # ~20 minutes at 1 Hz
DEFAULT_GEI_CORR_WEIGHT = 40.0

DEFAULT_GAQI_WEIGHT_AQ = 0.45
DEFAULT_GAQI_WEIGHT_COMFORT = 0.25
DEFAULT_GAQI_WEIGHT_EQUILIBRIUM = 0.20
DEFAULT_GAQI_WEIGHT_VOLATILITY = 0.10

SCORE_PRECISION = 2
CORRELATION_PRECISION = 3

DEFAULT_HISTORY_CAPACITY = 60 * 30  # 30 minutes at 1 sample/second
DEFAULT_TICK_SECONDS = 1.0
DEFAULT_INDEX_LOOKBACK_SECONDS = 60 * 20


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_tuple(name: str, default: Tuple[float, ...]) -> Tuple[float, ...]:
    """
    Parse a comma (or semicolon) separated float list such as "600,2000".

    The override must have as many entries as the default, otherwise the
    default wins.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    parts = []
    for token in raw.replace(";", ",").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            parts.append(float(token))
        except ValueError:
            continue
    return tuple(parts) if len(parts) == len(default) else default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class AirQualityWeights:
    co2: float = _env_float("INDICES_AQ_WEIGHT_CO2", DEFAULT_AQ_WEIGHT_CO2)
    no2: float = _env_float("INDICES_AQ_WEIGHT_NO2", DEFAULT_AQ_WEIGHT_NO2)
    nh3: float = _env_float("INDICES_AQ_WEIGHT_NH3", DEFAULT_AQ_WEIGHT_NH3)
    co: float = _env_float("INDICES_AQ_WEIGHT_CO", DEFAULT_AQ_WEIGHT_CO)

    @property
    def total(self) -> float:
        return self.co2 + self.no2 + self.nh3 + self.co


@dataclass(frozen=True)
class GlobalWeights:
    aq: float = _env_float("INDICES_GAQI_WEIGHT_AQ", DEFAULT_GAQI_WEIGHT_AQ)
    comfort: float = _env_float("INDICES_GAQI_WEIGHT_COMFORT", DEFAULT_GAQI_WEIGHT_COMFORT)
    equilibrium: float = _env_float(
        "INDICES_GAQI_WEIGHT_EQUILIBRIUM", DEFAULT_GAQI_WEIGHT_EQUILIBRIUM
    )
    volatility: float = _env_float(
        "INDICES_GAQI_WEIGHT_VOLATILITY", DEFAULT_GAQI_WEIGHT_VOLATILITY
    )

    @property
    def total(self) -> float:
        return self.aq + self.comfort + self.equilibrium + self.volatility


AQ_WEIGHTS = AirQualityWeights()
GAQI_WEIGHTS = GlobalWeights()

POLLUTANT_THRESHOLDS: Dict[str, Tuple[float, ...]] = {
    "co2": _env_tuple("INDICES_CO2_THRESHOLDS", DEFAULT_CO2_THRESHOLDS),
    "no2": _env_tuple("INDICES_NO2_THRESHOLDS", DEFAULT_NO2_THRESHOLDS),
    "nh3": _env_tuple("INDICES_NH3_THRESHOLDS", DEFAULT_NH3_THRESHOLDS),
    "co": _env_tuple("INDICES_CO_THRESHOLDS", DEFAULT_CO_THRESHOLDS),
}

COMFORT_SETPOINTS = _env_tuple("INDICES_COMFORT_SETPOINTS", DEFAULT_COMFORT_SETPOINTS)
COMFORT_WEIGHTS = _env_tuple("INDICES_COMFORT_WEIGHTS", DEFAULT_COMFORT_WEIGHTS)
COMFORT_MAX_RAW = _env_float("INDICES_COMFORT_MAX_RAW", DEFAULT_COMFORT_MAX_RAW)

VOLATILITY_SIGMA_MAX = _env_tuple(
    "INDICES_VOLATILITY_SIGMA_MAX", DEFAULT_VOLATILITY_SIGMA_MAX
)
VOLATILITY_WEIGHTS = _env_tuple("INDICES_VOLATILITY_WEIGHTS", DEFAULT_VOLATILITY_WEIGHTS)
VOLATILITY_SAMPLES = _env_int("INDICES_VOLATILITY_SAMPLES", DEFAULT_VOLATILITY_SAMPLES)

CORRELATION_SAMPLES = _env_int("INDICES_CORRELATION_SAMPLES", DEFAULT_CORRELATION_SAMPLES)
GEI_CORR_WEIGHT = _env_float("INDICES_GEI_CORR_WEIGHT", DEFAULT_GEI_CORR_WEIGHT)

HISTORY_CAPACITY = _env_int("INDICES_HISTORY_CAPACITY", DEFAULT_HISTORY_CAPACITY)
TICK_SECONDS = _env_float("INDICES_TICK_SECONDS", DEFAULT_TICK_SECONDS)
INDEX_LOOKBACK_SECONDS = _env_int(
    "INDICES_INDEX_LOOKBACK_SECONDS", DEFAULT_INDEX_LOOKBACK_SECONDS
)
SIMULATOR_ENABLED = _env_flag("INDICES_SIMULATOR_ENABLED", True)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 3000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
