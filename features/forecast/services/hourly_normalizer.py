import re
from typing import Any, Dict, Iterable, List, Optional

from features.forecast.models.forecast_types import HourlyPoint
from features.common.utils.conversions import UnitConversions, compass_text_to_degrees

MIN_HOURS = 1
MAX_HOURS = 48

# "15 mph", "10 to 20 mph"
_MPH_PATTERN = re.compile(r"(\d+)(?:\s*to\s*(\d+))?\s*mph", re.IGNORECASE)


def mph_from_text(text: Optional[str]) -> Optional[float]:
    """Parse an NWS wind string into mph, taking the upper bound of a range."""
    # windGust is sometimes a quantitative {"unitCode", "value"} object or null
    if not text or not isinstance(text, str):
        return None
    match = _MPH_PATTERN.search(text)
    if not match:
        return None
    low = float(match.group(1))
    high = float(match.group(2)) if match.group(2) else None
    return max(low, high) if high is not None else low


def _knots_from_text(text: Optional[str]) -> Optional[float]:
    knots = UnitConversions.miles_per_hour_to_knots(mph_from_text(text))
    return round(knots, 1) if knots is not None else None


def clamp_hours(hours: int) -> int:
    """Clamp a requested hour count into the supported 1-48 range."""
    return min(max(hours, MIN_HOURS), MAX_HOURS)


def normalize_period(period: Dict[str, Any]) -> HourlyPoint:
    """Convert one NWS forecastHourly period into an HourlyPoint."""
    direction_text = period.get("windDirection")
    if not isinstance(direction_text, str) or not direction_text:
        direction_text = None
    direction_deg = compass_text_to_degrees(direction_text)

    return HourlyPoint(
        time=period.get("startTime") or None,
        wind_knots=_knots_from_text(period.get("windSpeed")),
        gust_knots=_knots_from_text(period.get("windGust")),
        direction_text=direction_text,
        direction_deg=round(direction_deg, 1) if direction_deg is not None else None,
        short_forecast_text=period.get("shortForecast"),
    )


def normalize_periods(periods: Iterable[Dict[str, Any]], hours: int) -> List[HourlyPoint]:
    """Normalize the first clamp_hours(hours) periods, in provider order."""
    limit = clamp_hours(hours)
    points: List[HourlyPoint] = []
    for period in periods:
        if len(points) >= limit:
            break
        points.append(normalize_period(period or {}))
    return points
