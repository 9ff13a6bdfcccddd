"""Command-line weather lookup built on WeatherClient."""
import argparse
import logging
import os
import signal
import sys
import time
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from openweather_provider import OpenWeatherProvider
from weather_data import ForecastEntry, WeatherReport
from weather_provider import ConfigurationError, WeatherProviderError
from weather_service import MAX_FORECAST_DAYS, WeatherClient

EXIT_OK = 0
EXIT_CLIENT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("weather-client", description="Current weather and daily forecasts")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--cache-ttl", type=int, default=900, help="Seconds a current report stays cached")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)

    current = commands.add_parser("current", help="Current conditions for a city")
    current.add_argument("city")
    current.add_argument("--refresh", type=float, default=30.0, help="Seconds between polls when repeating")
    current.add_argument("--repeat", type=int, default=1, help="Number of polls (0 polls until interrupted)")

    forecast = commands.add_parser("forecast", help="Daily forecast for a city")
    forecast.add_argument("city")
    forecast.add_argument("--days", type=int, default=MAX_FORECAST_DAYS)

    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config() -> Tuple[str, str, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY", "")
    base_url = os.getenv("WEATHER_BASE_URL", OpenWeatherProvider.BASE_URL)
    lang = os.getenv("WEATHER_LANG", "en")

    logging.info("Configuration loaded: base_url=%s lang=%s", base_url, lang)
    return api_key, base_url, lang


def build_weather_client(api_key: str, base_url: str, lang: str, args: argparse.Namespace) -> WeatherClient:
    client = WeatherClient(
        api_key=api_key,
        base_url=base_url,
        cache_duration=args.cache_ttl,
        timeout=args.timeout,
        lang=lang,
    )
    logging.info("Weather client ready (cache ttl=%ss)", args.cache_ttl)
    return client


def format_report_lines(report: WeatherReport) -> Tuple[str, str, str]:
    temp = f"{report.temperature:+.1f}°C"
    condition = report.conditions.capitalize()
    info = f"Hum {report.humidity}%  Wind {report.wind_speed:.1f}m/s"
    return f"{report.city}: {temp} {condition}", info, f"Updated {report.timestamp:%Y-%m-%d %H:%M:%S %Z}"


def format_forecast_lines(city: str, entries: List[ForecastEntry]) -> List[str]:
    lines = [f"{city}: {len(entries)}-day forecast"]
    for entry in entries:
        lines.append(f"{entry.date:%a %Y-%m-%d}  {entry.temperature:+.1f}°C  {entry.conditions}")
    return lines


def current_loop(client: WeatherClient, args: argparse.Namespace) -> None:
    poll = 0
    while True:
        poll += 1
        logging.info("Poll %s: fetching weather for %s", poll, args.city)
        report = client.get_current(args.city)
        print("\n".join(format_report_lines(report)), flush=True)

        if args.repeat and poll >= args.repeat:
            return
        time.sleep(max(args.refresh, 1.0))


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, base_url, lang = load_config()

    try:
        client = build_weather_client(api_key, base_url, lang, args)
    except ConfigurationError as err:
        logging.error("Configuration error: %s", err)
        return EXIT_CONFIG_ERROR

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        if args.command == "forecast":
            entries = client.get_forecast(args.city, args.days)
            print("\n".join(format_forecast_lines(args.city, entries)))
        else:
            current_loop(client, args)
    except WeatherProviderError as err:
        logging.error("Weather fetch failed: %s", err)
        return EXIT_CLIENT_ERROR
    except KeyboardInterrupt:
        logging.info("Stopping")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
