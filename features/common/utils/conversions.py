import math
from typing import Optional

MISSING_TOKENS = {"", "MM", "NaN"}

COMPASS_POINTS = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]
COMPASS_SECTOR_DEGREES = 360 / len(COMPASS_POINTS)  # 22.5
DIRECTION_PLACEHOLDER = "—"


def parse_numeric(token: Optional[str]) -> Optional[float]:
    """Parse a raw report token, collapsing missing-value sentinels to None."""
    if token is None:
        return None
    token = token.strip()
    if token in MISSING_TOKENS:
        return None
    try:
        value = float(token)
    except (ValueError, TypeError):
        return None
    return value if math.isfinite(value) else None


class UnitConversions:
    """Centralized utility for unit conversions across the application.

    Every helper passes None straight through so missing readings never
    turn into numbers.
    """

    @staticmethod
    def meters_per_second_to_knots(ms: Optional[float]) -> Optional[float]:
        """Convert meters per second to knots."""
        if ms is None:
            return None
        return ms * 1.94384

    @staticmethod
    def meters_to_feet(meters: Optional[float]) -> Optional[float]:
        """Convert meters to feet."""
        if meters is None:
            return None
        return meters * 3.28084

    @staticmethod
    def celsius_to_fahrenheit(celsius: Optional[float]) -> Optional[float]:
        """Convert Celsius to Fahrenheit."""
        if celsius is None:
            return None
        return celsius * 9 / 5 + 32

    @staticmethod
    def miles_per_hour_to_knots(mph: Optional[float]) -> Optional[float]:
        """Convert miles per hour to knots."""
        if mph is None:
            return None
        return mph * 0.868976


def compass_text_to_degrees(text: Optional[str]) -> Optional[float]:
    """Map a 16-point compass abbreviation (e.g. 'NNE') to degrees."""
    if not text:
        return None
    direction = text.strip().upper()
    if direction not in COMPASS_POINTS:
        return None
    return COMPASS_POINTS.index(direction) * COMPASS_SECTOR_DEGREES


def degrees_to_compass_text(degrees: Optional[float]) -> str:
    """Convert degrees to the nearest of the 16 compass points."""
    if degrees is None or not math.isfinite(degrees):
        return DIRECTION_PLACEHOLDER
    # Half-up rounding so 11.25 lands on NNE rather than banker's N
    index = math.floor(degrees / COMPASS_SECTOR_DEGREES + 0.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]
