"""Tests for the per-city report cache."""
import threading
from datetime import timedelta

import pytest
from report_cache import ReportCache
from weather_data import WeatherReport


def make_report(clock, city="London", temperature=20.0):
    return WeatherReport(
        temperature=temperature,
        conditions="clear sky",
        humidity=60,
        wind_speed=5.0,
        timestamp=clock(),
        city=city,
    )


def test_cache_miss_when_empty(clock):
    cache = ReportCache(clock=clock)

    assert cache.get("London") is None
    assert len(cache) == 0


def test_cache_hit_within_ttl(clock):
    cache = ReportCache(ttl=timedelta(minutes=15), clock=clock)
    report = make_report(clock)
    cache.put("London", report)

    clock.advance(minutes=15)  # exactly at the boundary is still fresh

    assert cache.get("London") is report


def test_cache_expires_after_ttl(clock):
    cache = ReportCache(ttl=timedelta(minutes=15), clock=clock)
    cache.put("London", make_report(clock))

    clock.advance(minutes=15, seconds=1)

    assert cache.get("London") is None
    assert len(cache) == 0


def test_cache_is_keyed_per_city(clock):
    cache = ReportCache(clock=clock)
    london = make_report(clock, "London", 20.0)
    paris = make_report(clock, "Paris", 25.0)

    cache.put("London", london)
    cache.put("Paris", paris)

    assert cache.get("London") is london
    assert cache.get("Paris") is paris


def test_cache_put_replaces_entry(clock):
    cache = ReportCache(clock=clock)
    cache.put("London", make_report(clock, temperature=20.0))
    newer = make_report(clock, temperature=21.0)

    cache.put("London", newer)

    assert cache.get("London") is newer
    assert len(cache) == 1


def test_cache_clear(clock):
    cache = ReportCache(clock=clock)
    cache.put("London", make_report(clock))

    cache.clear()

    assert cache.get("London") is None


def test_cache_rejects_negative_ttl(clock):
    with pytest.raises(ValueError):
        ReportCache(ttl=timedelta(seconds=-1), clock=clock)


def test_cache_concurrent_puts(clock):
    cache = ReportCache(clock=clock)
    cities = [f"city-{i}" for i in range(50)]

    threads = [threading.Thread(target=cache.put, args=(c, make_report(clock, c))) for c in cities]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 50
    assert all(cache.get(c).city == c for c in cities)
