"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import List, Optional

from weather_data import ForecastEntry, WeatherReport


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, city: str) -> WeatherReport:
        """
        Fetch current weather for a city.

        Returns:
            WeatherReport: Current conditions, stamped at fetch time

        Raises:
            UpstreamError: If the provider cannot be reached or refuses the request
            ParseError: If the provider's response has an unexpected shape
        """
        pass

    @abstractmethod
    def get_forecast_samples(self, city: str, count: int) -> List[ForecastEntry]:
        """
        Fetch up to `count` 3-hour forecast samples for a city, in upstream order.

        Raises:
            UpstreamError: If the provider cannot be reached or refuses the request
            ParseError: If the sample list or a sample is malformed
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when fetching weather fails."""
    pass


class ConfigurationError(WeatherProviderError):
    """Required configuration (such as the API key) is missing or invalid."""
    pass


class ValidationError(WeatherProviderError):
    """Caller input is outside the accepted contract."""
    pass


class UpstreamError(WeatherProviderError):
    """The weather provider returned an error status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, timed_out: bool = False):
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        super().__init__(message)


class ParseError(WeatherProviderError):
    """The provider answered successfully but not in the expected shape."""
    pass
