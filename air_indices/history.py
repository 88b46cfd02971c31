from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime
from typing import Deque, List, Mapping, Optional, Union

from air_indices.config import HISTORY_CAPACITY
from air_indices.snapshot import MeasurementSnapshot, parse_timestamp, utcnow

logger = logging.getLogger(__name__)


class HistoryBuffer:
    """
    Capacity-bounded, arrival-ordered history of measurement snapshots.

    The oldest entries are dropped first once ``capacity`` is reached.  One
    producer appends while any number of readers query windows; all access
    goes through a single lock and readers always get a list copy.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._entries: Deque[MeasurementSnapshot] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, snapshot: Union[MeasurementSnapshot, Mapping]) -> MeasurementSnapshot:
        if not isinstance(snapshot, MeasurementSnapshot):
            snapshot = MeasurementSnapshot.from_dict(snapshot)
        with self._lock:
            evicting = len(self._entries) == self._capacity
            self._entries.append(snapshot)
        if evicting:
            logger.debug("History at capacity (%d), evicted oldest entry", self._capacity)
        return snapshot

    def latest(self) -> Optional[MeasurementSnapshot]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> List[MeasurementSnapshot]:
        with self._lock:
            return list(self._entries)

    def window_by_time(self, seconds: float, now: Optional[datetime] = None) -> List[MeasurementSnapshot]:
        """
        Entries with ``timestamp >= now - seconds``, oldest first.

        The cutoff is compared in epoch seconds, so any lookback (however
        far before year 1) is valid and simply returns everything.
        """
        now = utcnow() if now is None else parse_timestamp(now)
        cutoff = now.timestamp() - float(seconds)
        with self._lock:
            return [entry for entry in self._entries if entry.timestamp.timestamp() >= cutoff]

    def window_by_count(self, n: int) -> List[MeasurementSnapshot]:
        if n <= 0:
            return []
        with self._lock:
            entries = list(self._entries)
        return entries[-n:]
