"""OpenWeather Current Weather and 5 day / 3 hour Forecast API provider implementation."""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping

import requests

from weather_data import ForecastEntry, WeatherReport, utc_now
from weather_provider import ParseError, UpstreamError, WeatherProviderBase


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather 2.5 APIs.

    Current conditions come from https://openweathermap.org/current and the
    forecast from https://openweathermap.org/forecast5, which returns a flat
    list of samples spaced three hours apart.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        units: str = "metric",
        lang: str = "en",
        timeout: float = 10,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: API root, without the trailing endpoint name
            units: Temperature units ("metric", "imperial", or "standard")
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
            clock: Returns the instant used to stamp fetched reports
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout
        self.clock = clock

    def get_current(self, city: str) -> WeatherReport:
        """
        Fetch current weather from the OpenWeather Current Weather API.

        Returns:
            WeatherReport: Current conditions stamped with the fetch time

        Raises:
            UpstreamError: If the API request fails
            ParseError: If the response is missing an expected field
        """
        data = self._request("weather", {"q": city})

        main_data = data.get("main")
        if not isinstance(main_data, dict) or not main_data:
            logging.error("Response missing 'main' block")
            raise ParseError("Response missing 'main' block")

        weather = _first_condition(data)
        wind_data = data.get("wind")
        if not isinstance(wind_data, dict):
            raise ParseError("Response missing 'wind' block")

        try:
            report = WeatherReport(
                temperature=float(_require(main_data, "temp", "main")),
                conditions=str(_require(weather, "description", "weather[0]")),
                humidity=int(_require(main_data, "humidity", "main")),
                wind_speed=float(_require(wind_data, "speed", "wind")),
                timestamp=self.clock(),
                city=city,
            )
        except (TypeError, ValueError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise ParseError(f"Failed to parse response: {str(e)}") from e

        logging.info(f"Successfully parsed weather for {city}: {report.temperature}°C, {report.conditions}")
        return report

    def get_forecast_samples(self, city: str, count: int) -> List[ForecastEntry]:
        """
        Fetch `count` three-hour samples from the OpenWeather Forecast API.

        Each sample is mapped to a ForecastEntry dated by its `dt_txt`
        (falling back to the UTC date of `dt`). Upstream may return fewer
        samples than requested.
        """
        data = self._request("forecast", {"q": city, "cnt": count})

        samples = data.get("list")
        if not isinstance(samples, list):
            logging.error("Response missing 'list' of forecast samples")
            raise ParseError("Response missing 'list' of forecast samples")

        logging.debug(f"Forecast returned {len(samples)} of {count} requested samples")
        return [_parse_sample(sample, index) for index, sample in enumerate(samples)]

    def _request(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET one endpoint and return the decoded JSON object."""
        url = f"{self.base_url}/{endpoint}"
        query = dict(params, appid=self.api_key, units=self.units, lang=self.lang)

        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: {params}, units={self.units}, lang={self.lang}")

            response = requests.get(url, params=query, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")
        except requests.exceptions.Timeout as e:
            logging.error(f"Timed out after {self.timeout}s waiting for {url}")
            raise UpstreamError(f"Request timed out after {self.timeout}s", timed_out=True) from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise UpstreamError(f"Network error: {str(e)}") from e

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Response body is not JSON: {response.text[:500]}")
            raise ParseError(f"Failed to parse response: {str(e)}") from e

        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

        logging.debug(f"API response (truncated): {str(data)[:500]}...")
        return data

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise UpstreamError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        if not isinstance(error_data, dict):
            error_data = {}
        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
        parameters = error_data.get("parameters", [])

        logging.error(f"OpenWeather API error response: {error_data}")

        error_msg = f"OpenWeather API error {cod}: {message}"
        if parameters:
            error_msg += f" (parameters: {', '.join(map(str, parameters))})"

        raise UpstreamError(error_msg, status_code=response.status_code)


def _require(mapping: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in mapping or mapping[key] is None:
        raise ParseError(f"Response missing '{where}.{key}'")
    return mapping[key]


def _first_condition(data: Mapping[str, Any]) -> Mapping[str, Any]:
    weather_array = data.get("weather")
    if not isinstance(weather_array, list) or not weather_array or not isinstance(weather_array[0], dict):
        logging.error("Response missing 'weather' array")
        raise ParseError("Response missing 'weather' array")
    return weather_array[0]


def _parse_sample(sample: Any, index: int) -> ForecastEntry:
    if not isinstance(sample, dict):
        raise ParseError(f"Forecast sample {index} is not an object")

    main_data = sample.get("main")
    if not isinstance(main_data, dict):
        raise ParseError(f"Forecast sample {index} missing 'main' block")

    try:
        if sample.get("dt_txt"):
            day = datetime.strptime(sample["dt_txt"], "%Y-%m-%d %H:%M:%S").date()
        elif sample.get("dt") is not None:
            day = datetime.fromtimestamp(sample["dt"], tz=timezone.utc).date()
        else:
            raise ParseError(f"Forecast sample {index} has neither 'dt_txt' nor 'dt'")

        return ForecastEntry(
            date=day,
            temperature=float(_require(main_data, "temp", "main")),
            conditions=str(_require(_first_condition(sample), "description", "weather[0]")),
        )
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise ParseError(f"Failed to parse forecast sample {index}: {str(e)}") from e
