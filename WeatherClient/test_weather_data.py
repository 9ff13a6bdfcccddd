"""Tests for weather_data module."""
from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone

import pytest
from weather_data import ForecastEntry, WeatherReport, utc_now


def make_report(timestamp):
    return WeatherReport(
        temperature=20.5,
        conditions="scattered clouds",
        humidity=65,
        wind_speed=3.6,
        timestamp=timestamp,
        city="London",
    )


def test_weather_report_creation():
    """Test creating WeatherReport with required fields."""
    stamp = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    report = make_report(stamp)

    assert report.temperature == 20.5
    assert report.conditions == "scattered clouds"
    assert report.humidity == 65
    assert report.wind_speed == 3.6
    assert report.timestamp == stamp
    assert report.city == "London"


def test_weather_report_is_immutable():
    report = make_report(utc_now())

    with pytest.raises(FrozenInstanceError):
        report.temperature = 0.0


def test_weather_report_is_stale():
    """Test is_stale() against an explicit 'now'."""
    stamp = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    report = make_report(stamp)
    an_hour_later = stamp + timedelta(hours=1)

    assert report.age_seconds(an_hour_later) == 3600
    assert report.is_stale(max_age_seconds=900, now=an_hour_later) is True
    assert report.is_stale(max_age_seconds=7200, now=an_hour_later) is False


def test_weather_report_fresh():
    """Test that a just-fetched report is not stale."""
    report = make_report(utc_now())

    assert report.is_stale(max_age_seconds=900) is False


def test_forecast_entry_equality():
    first = ForecastEntry(date=date(2024, 1, 1), temperature=18.5, conditions="sunny")
    second = ForecastEntry(date=date(2024, 1, 1), temperature=18.5, conditions="sunny")

    assert first == second
    assert first.date < date(2024, 1, 2)
