from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence

from air_indices.config import (
    CORRELATION_PRECISION,
    HISTORY_CAPACITY,
    INDEX_LOOKBACK_SECONDS,
    TICK_SECONDS,
)
from air_indices.engine import compute_indices, gaqi_components
from air_indices.history import HistoryBuffer
from air_indices.simulator import RandomWalkSource, StateCell
from air_indices.snapshot import GAS_FIELDS, MeasurementSnapshot, format_timestamp, utcnow
from air_indices.stats import pearson

logger = logging.getLogger(__name__)

SPIKE_CO2 = 1200.0
SPIKE_NO2 = 150.0


class IndicesService:
    """
    Owns the live state, the history buffer and the producer thread, and
    builds the dashboard payloads from them.
    """

    def __init__(self,
                 *,
                 source: Optional[RandomWalkSource] = None,
                 history: Optional[HistoryBuffer] = None,
                 tick_seconds: float = TICK_SECONDS,
                 lookback_seconds: int = INDEX_LOOKBACK_SECONDS) -> None:
        self.source = RandomWalkSource() if source is None else source
        self.history = HistoryBuffer(HISTORY_CAPACITY) if history is None else history
        self.state = StateCell(self.source.initial_snapshot())
        self.tick_seconds = tick_seconds
        self.lookback_seconds = lookback_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # -- producer -----------------------------------------------------------

    def record(self, snapshot: MeasurementSnapshot) -> None:
        self.state.set(snapshot)
        self.history.append(snapshot)

    def tick(self) -> MeasurementSnapshot:
        snapshot = self.source.step()
        self.record(snapshot)
        return snapshot

    def _run(self) -> None:
        while not self._stop.wait(self.tick_seconds):
            try:
                self.tick()
            except Exception:
                logger.exception("State tick failed")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="state-ticker", daemon=True)
        self._thread.start()
        logger.info("State ticker started (every %.2fs)", self.tick_seconds)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=max(self.tick_seconds, 1.0) * 2)
        self._thread = None
        logger.info("State ticker stopped")

    # -- payloads -------------------------------------------------------------

    def current(self) -> Dict:
        state = self.state.get()
        window = self.history.window_by_time(self.lookback_seconds)
        indices = compute_indices(state, window)
        return {
            "timestamp": format_timestamp(utcnow()),
            "measures": state.measures(),
            "indices": indices.as_dict(),
        }

    def breakdown(self) -> Dict:
        state = self.state.get()
        window = self.history.window_by_time(self.lookback_seconds)
        indices = compute_indices(state, window)
        return {
            "timestamp": format_timestamp(utcnow()),
            "measures": state.measures(),
            "indices": indices.as_dict(),
            "components": gaqi_components(indices),
        }

    def history_series(self, seconds: int) -> Dict:
        window = self.history.window_by_time(seconds)
        return {
            "requested_sec": seconds,
            "length": len(window),
            "series": [entry.to_dict() for entry in window],
        }

    def correlations(self, names: Sequence[str], seconds: int) -> Dict:
        window = self.history.window_by_time(seconds)
        series: Dict[str, List[float]] = {
            name: [v for v in (entry.get(name) for entry in window) if v is not None]
            for name in names
        }
        corr: Dict[str, float] = {}
        for i, first in enumerate(names):
            for second in names[i:]:
                a = series[first]
                b = series[second]
                r = pearson(a, b) if len(a) >= 2 and len(a) == len(b) else 0.0
                corr[f"{first}-{second}"] = round(r, CORRELATION_PRECISION)
        return {"vars": list(names), "sec": seconds, "corr": corr}

    def scatterbar(self, seconds: int, x_var: str, y_var: str, step: int) -> Dict:
        window = self.history.window_by_time(seconds)
        points = []
        for entry in window[::step]:
            gases = {name: entry.get(name) for name in GAS_FIELDS}
            total = sum(value for value in gases.values() if value is not None)
            spike = (gases["co2"] or 0.0) > SPIKE_CO2 or (gases["no2"] or 0.0) > SPIKE_NO2
            points.append(
                {
                    "timestamp": format_timestamp(entry.timestamp),
                    "x": entry.get(x_var),
                    "y": entry.get(y_var),
                    **gases,
                    "total": round(total, 3),
                    "event": "spike" if spike else None,
                }
            )
        return {
            "requested_sec": seconds,
            "xVar": x_var,
            "yVar": y_var,
            "step": step,
            "count": len(points),
            "points": points,
        }

    def health(self) -> Dict:
        return {
            "ok": True,
            "time": format_timestamp(utcnow()),
            "historyLen": len(self.history),
            "historyCapacity": self.history.capacity,
        }


_SERVICE: Optional[IndicesService] = None


def get_service() -> IndicesService:
    global _SERVICE
    if _SERVICE is None:
        _SERVICE = IndicesService()
    return _SERVICE


def set_service(service: Optional[IndicesService]) -> None:
    global _SERVICE
    _SERVICE = service
