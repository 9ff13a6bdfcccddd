"""Weather client with time-boxed caching and forecast aggregation."""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from openweather_provider import OpenWeatherProvider
from report_cache import ReportCache
from weather_data import ForecastEntry, WeatherReport, utc_now
from weather_provider import ConfigurationError, ValidationError, WeatherProviderBase

DEFAULT_CACHE_DURATION = timedelta(minutes=15)
MAX_FORECAST_DAYS = 5
SAMPLES_PER_DAY = 8  # upstream forecast samples are three hours apart


class WeatherClient:
    """
    Single point of contact with the upstream weather provider.

    Current conditions are cached per city for `cache_duration`; a cache hit
    returns the stored report unchanged, including its original timestamp.
    Forecasts are never cached. Errors from the provider propagate to the
    caller untouched; there is no internal retry or stale fallback.
    """

    units = "metric"

    def __init__(
        self,
        api_key: str,
        base_url: str = OpenWeatherProvider.BASE_URL,
        cache_duration: Union[timedelta, float] = DEFAULT_CACHE_DURATION,
        timeout: float = 10,
        lang: str = "en",
        provider: Optional[WeatherProviderBase] = None,
        cache: Optional[ReportCache] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the weather client.

        Args:
            api_key: Upstream API key, required
            base_url: Upstream API root
            cache_duration: How long a current-conditions report stays fresh
                (a timedelta, or a number of seconds)
            timeout: HTTP request timeout in seconds
            lang: Language code for condition descriptions
            provider: Provider to use instead of the OpenWeather one
            cache: Cache to use instead of a fresh one; its own ttl applies
            clock: Returns the current instant as an aware UTC datetime

        Raises:
            ConfigurationError: If api_key is missing or blank
        """
        if not api_key or not str(api_key).strip():
            logging.error("Weather client created without an API key")
            raise ConfigurationError("Missing weather API key")

        if not isinstance(cache_duration, timedelta):
            try:
                cache_duration = timedelta(seconds=cache_duration)
            except (TypeError, ValueError, OverflowError) as e:
                raise ConfigurationError(f"Invalid cache duration {cache_duration!r}: {e}") from e
        if cache_duration < timedelta(0):
            raise ConfigurationError(f"Cache duration must not be negative, got {cache_duration}")

        self.api_key = api_key
        self.base_url = base_url
        self.cache_duration = cache_duration
        self.timeout = timeout

        if provider is None:
            provider = OpenWeatherProvider(
                api_key=api_key,
                base_url=base_url,
                units=self.units,
                lang=lang,
                timeout=timeout,
                clock=clock,
            )
        if cache is None:
            cache = ReportCache(ttl=cache_duration, clock=clock)

        self.provider = provider
        self.cache = cache

    def get_current(self, city: str) -> WeatherReport:
        """
        Get current conditions for a city, using the cache if still fresh.

        Raises:
            UpstreamError: If the provider request fails
            ParseError: If the provider response is malformed
        """
        cached = self.cache.get(city)
        if cached is not None:
            return cached

        logging.info(f"Fetching current weather for {city} from provider...")
        report = self.provider.get_current(city)
        self.cache.put(city, report)
        return report

    def get_forecast(self, city: str, days: int = MAX_FORECAST_DAYS) -> List[ForecastEntry]:
        """
        Get a daily forecast of up to `days` entries, one per calendar date.

        `days` above 5 is reduced to 5. Each day is represented by its first
        three-hour sample, not an average. Fewer entries are returned when
        upstream has fewer samples than requested.

        Raises:
            ValidationError: If days is not an integer of at least 1
            UpstreamError: If the provider request fails
            ParseError: If the provider response is malformed
        """
        if isinstance(days, bool) or not isinstance(days, int):
            raise ValidationError(f"days must be an integer, got {days!r}")
        if days < 1:
            raise ValidationError(f"days must be at least 1, got {days}")
        if days > MAX_FORECAST_DAYS:
            logging.debug(f"Clamping forecast request from {days} to {MAX_FORECAST_DAYS} days")
            days = MAX_FORECAST_DAYS

        count = days * SAMPLES_PER_DAY
        samples = self.provider.get_forecast_samples(city, count)

        entries: List[ForecastEntry] = []
        for sample in samples[:count:SAMPLES_PER_DAY]:
            if entries and sample.date <= entries[-1].date:
                logging.warning(f"Dropping forecast sample for {sample.date}: not after {entries[-1].date}")
                continue
            entries.append(sample)

        logging.info(f"Forecast for {city}: {len(entries)} of {days} days")
        return entries
