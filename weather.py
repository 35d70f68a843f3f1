import json
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

WTTR_URL = "https://wttr.in/{location}?format=j1"
USER_AGENT = "jeek-dashboard"


class WeatherError(Exception):
    pass


@dataclass(frozen=True)
class WeatherReport:
    location: str
    condition: str
    temperature_c: str
    feels_like_c: str = ""
    humidity: str = ""


def _first_value(items, default=""):
    # wttr.in wraps most strings as [{"value": "..."}]
    if isinstance(items, list) and items:
        first = items[0]
        if isinstance(first, dict):
            value = first.get("value")
            if isinstance(value, str):
                return value.strip()
    return default


def parse_wttr_payload(payload, location: str = "") -> WeatherReport:
    if not isinstance(payload, dict):
        raise WeatherError("unexpected weather payload")
    current = payload.get("current_condition")
    if not isinstance(current, list) or not current or not isinstance(current[0], dict):
        raise WeatherError("weather payload has no current condition")
    now = current[0]

    temp = now.get("temp_C")
    if temp is None:
        raise WeatherError("weather payload has no temperature")

    area_name = location
    areas = payload.get("nearest_area")
    if isinstance(areas, list) and areas and isinstance(areas[0], dict):
        area_name = _first_value(areas[0].get("areaName"), location) or location

    return WeatherReport(
        location=area_name or "?",
        condition=_first_value(now.get("weatherDesc"), "?"),
        temperature_c=str(temp),
        feels_like_c=str(now.get("FeelsLikeC") or ""),
        humidity=str(now.get("humidity") or ""),
    )


def fetch_weather(location: str = "", timeout: float = 5.0) -> WeatherReport:
    url = WTTR_URL.format(location=quote(location.strip()))
    try:
        request = Request(url, headers={"User-Agent": USER_AGENT})
        with urlopen(request, timeout=timeout) as resp:
            data = resp.read().decode("utf-8", errors="replace")
    except (URLError, HTTPError, TimeoutError, OSError) as exc:
        raise WeatherError(f"weather request failed: {exc}") from exc
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise WeatherError("weather response is not JSON") from exc
    return parse_wttr_payload(payload, location)


def format_report(report: WeatherReport) -> str:
    text = f"{report.location}: {report.condition}, {report.temperature_c}°C"
    if report.feels_like_c:
        text += f" (feels {report.feels_like_c}°C)"
    if report.humidity:
        text += f", humidity {report.humidity}%"
    return text
