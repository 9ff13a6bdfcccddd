"""Time-boxed, per-city cache for current-conditions reports."""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from weather_data import WeatherReport, utc_now


@dataclass(frozen=True)
class CacheEntry:
    """A cached report and the instant it was stored."""
    report: WeatherReport
    cached_at: datetime


class ReportCache:
    """
    Holds at most one report per city for `ttl`.

    An entry is fresh while `now - cached_at <= ttl`; an expired entry is
    dropped on lookup. Lookups and stores are each done under one lock so
    concurrent callers never see a half-written entry.
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=15), clock: Callable[[], datetime] = utc_now):
        if ttl < timedelta(0):
            raise ValueError("Cache ttl must not be negative")
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, city: str) -> Optional[WeatherReport]:
        """Return the cached report for `city`, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(city)
            if entry is None:
                return None

            cache_age = self.clock() - entry.cached_at
            if cache_age <= self.ttl:
                logging.debug(
                    f"Using cached weather for {city} (age: {cache_age.total_seconds():.1f}s, "
                    f"TTL: {self.ttl.total_seconds():.0f}s)"
                )
                return entry.report

            logging.info(
                f"Cache expired for {city} (age: {cache_age.total_seconds():.1f}s > "
                f"TTL: {self.ttl.total_seconds():.0f}s)"
            )
            del self._entries[city]
            return None

    def put(self, city: str, report: WeatherReport) -> None:
        with self._lock:
            self._entries[city] = CacheEntry(report=report, cached_at=self.clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
