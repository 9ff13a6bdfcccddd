"""Integration tests - can optionally hit real API (disabled by default)."""
import os
import pytest
from openweather_provider import OpenWeatherProvider
from weather_service import WeatherClient


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration():
    """
    Integration test that hits the real OpenWeather API.

    Set OPENWEATHER_API_KEY environment variable to run this test.
    """
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"))

    weather = provider.get_current("London")

    assert weather.temperature is not None
    assert weather.conditions
    assert 0 <= weather.humidity <= 100


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_weather_client_integration():
    """Integration test for WeatherClient with real API."""
    client = WeatherClient(api_key=os.environ.get("OPENWEATHER_API_KEY"), cache_duration=60)

    # First call
    weather1 = client.get_current("London")
    assert weather1.temperature is not None

    # Second call should use cache
    weather2 = client.get_current("London")
    assert weather2.timestamp == weather1.timestamp

    forecast = client.get_forecast("London", 3)
    assert 1 <= len(forecast) <= 3
    assert [e.date for e in forecast] == sorted({e.date for e in forecast})
