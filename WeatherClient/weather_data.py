"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Default clock: current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WeatherReport:
    """Current conditions for one location, stamped at fetch time."""
    temperature: float  # degrees Celsius
    conditions: str  # e.g., "scattered clouds"
    humidity: int  # percentage 0-100
    wind_speed: float  # meters/second
    timestamp: datetime  # when we fetched it, not the upstream "dt"
    city: Optional[str] = None

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """Seconds elapsed since this report was fetched."""
        now = now or utc_now()
        return (now - self.timestamp).total_seconds()

    def is_stale(self, max_age_seconds: int = 900, now: Optional[datetime] = None) -> bool:
        """Check if this report is older than max_age_seconds."""
        return self.age_seconds(now) > max_age_seconds


@dataclass(frozen=True)
class ForecastEntry:
    """One day of a forecast, sampled at the first interval of that day."""
    date: date
    temperature: float
    conditions: str
