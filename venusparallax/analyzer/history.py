"""
Append-only record of parallax calculations.

Appends are serialized with a lock; reads return snapshots. Observers
registered with ``subscribe`` are notified after every append.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Protocol, TYPE_CHECKING

import pandas as pd

from ..utils.timescales import ensure_utc

if TYPE_CHECKING:
    from .engine import ParallaxResult

log = logging.getLogger(__name__)


class ParallaxObserver(Protocol):
    """Receives every result appended to a CalculationHistory."""

    def on_parallax_computed(self, result: "ParallaxResult") -> None:
        ...


class CalculationHistory:
    """
    Ordered, append-only sequence of ParallaxResult objects.

    Nothing is evicted implicitly; ``clear()`` is the only way to drop entries.
    """

    def __init__(self):
        self._results: List["ParallaxResult"] = []
        self._observers: List[ParallaxObserver] = []
        self._lock = threading.Lock()

    def append(self, result: "ParallaxResult") -> None:
        with self._lock:
            self._results.append(result)
            observers = list(self._observers)

        # Notification failures never reach the caller; the result is already recorded.
        for observer in observers:
            try:
                observer.on_parallax_computed(result)
            except Exception:
                log.exception(f"Observer {observer!r} failed while handling a parallax result")

    def filter(self,
               start_date: Optional[datetime] = None,
               end_date: Optional[datetime] = None,
               max_error: Optional[float] = None) -> List["ParallaxResult"]:
        """
        Results whose observation time lies in [start_date, end_date] and whose
        error percentage does not exceed ``max_error``.

        Every criterion is optional. Naive datetimes are taken as UTC.
        """
        start = ensure_utc(start_date) if start_date is not None else None
        end = ensure_utc(end_date) if end_date is not None else None

        def matches(result: "ParallaxResult") -> bool:
            if start is not None and result.when < start:
                return False
            if end is not None and result.when > end:
                return False
            if max_error is not None and result.error_percent > max_error:
                return False
            return True

        return self.filter_by(matches)

    def filter_by(self, predicate: Callable[["ParallaxResult"], bool]) -> List["ParallaxResult"]:
        return [result for result in self.snapshot() if predicate(result)]

    def snapshot(self) -> List["ParallaxResult"]:
        with self._lock:
            return list(self._results)

    def latest(self) -> Optional["ParallaxResult"]:
        with self._lock:
            return self._results[-1] if self._results else None

    def clear(self) -> None:
        with self._lock:
            count = len(self._results)
            self._results.clear()
        log.info(f"Cleared {count} calculation(s) from history")

    def subscribe(self, observer: ParallaxObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unsubscribe(self, observer: ParallaxObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per result, in insertion order."""
        return pd.DataFrame([result.as_dict() for result in self.snapshot()])

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __iter__(self) -> Iterator["ParallaxResult"]:
        return iter(self.snapshot())
