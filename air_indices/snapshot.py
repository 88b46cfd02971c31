from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

MEASURE_FIELDS = ("co2", "no2", "nh3", "co", "temp", "rh", "pres")
GAS_FIELDS = ("co2", "no2", "nh3", "co")


def _to_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _truncate_millis(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def parse_timestamp(value) -> datetime:
    """
    Accept a datetime, epoch milliseconds or an ISO-8601 string.

    Naive values are taken to be UTC.  The result is always UTC with
    millisecond resolution.
    """
    if isinstance(value, datetime):
        return _truncate_millis(value)
    if value is None:
        raise ValueError("timestamp missing")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _truncate_millis(datetime.fromtimestamp(value / 1000.0, tz=timezone.utc))
    text = str(value).strip()
    if text.isdigit():
        return parse_timestamp(int(text))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    for fmt in (None, "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f"):
        try:
            parsed = datetime.fromisoformat(text) if fmt is None else datetime.strptime(text, fmt)
        except ValueError:
            continue
        return _truncate_millis(parsed)
    raise ValueError(f"invalid timestamp: {value}")


def format_timestamp(value: datetime) -> str:
    return _truncate_millis(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utcnow() -> datetime:
    return _truncate_millis(datetime.now(timezone.utc))


@dataclass(frozen=True)
class MeasurementSnapshot:
    """
    One timestamped reading of every tracked variable.

    Any measure may be missing (None).  Instances are immutable, so storing
    one in the history buffer can never be altered by later state updates.
    """

    timestamp: datetime
    co2: Optional[float] = None
    no2: Optional[float] = None
    nh3: Optional[float] = None
    co: Optional[float] = None
    temp: Optional[float] = None
    rh: Optional[float] = None
    pres: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))
        for name in MEASURE_FIELDS:
            object.__setattr__(self, name, _to_float(getattr(self, name)))

    @classmethod
    def capture(cls, measures: Mapping, timestamp=None) -> "MeasurementSnapshot":
        return cls(
            timestamp=utcnow() if timestamp is None else timestamp,
            **{name: measures.get(name) for name in MEASURE_FIELDS},
        )

    @classmethod
    def from_dict(cls, data: Mapping) -> "MeasurementSnapshot":
        """
        Build from the wire shape ``{"timestamp": ..., "measures": {...}}``.

        A flat mapping with the measures at the top level is accepted too.
        """
        measures = data.get("measures")
        if not isinstance(measures, Mapping):
            measures = data
        return cls.capture(measures, timestamp=data.get("timestamp"))

    def get(self, name: str) -> Optional[float]:
        if name not in MEASURE_FIELDS:
            return None
        return getattr(self, name)

    def measures(self) -> Dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in MEASURE_FIELDS}

    def to_dict(self) -> Dict:
        return {"timestamp": format_timestamp(self.timestamp), "measures": self.measures()}
