import logging
import math
from typing import Iterable, List, Optional, Sequence

from features.buoys.models.buoy_types import Observation
from features.forecast.models.forecast_types import HourlyPoint
from features.legs.models.leg_types import Signals

logger = logging.getLogger(__name__)

# Only the next few hours matter to a skipper deciding whether to leave
NEAR_TERM_WINDOW = 6

# Gust factor: both an absolute floor and a ratio to the sustained wind
GUST_FLOOR_KNOTS = 20.0
GUST_FACTOR = 1.35
GUST_SPREAD_KNOTS = 5.0

VISIBILITY_KEYWORDS = ("fog", "patchy fog", "dense fog", "haze", "smoke", "mist", "low clouds")

# NE to E quadrant, the Santa Ana direction on the Southern California coast
OFFSHORE_EVENT_NAME = "santa ana"
OFFSHORE_DIRECTION_MIN = 30.0
OFFSHORE_DIRECTION_MAX = 120.0
OFFSHORE_GUST_KNOTS = 25.0


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def near_term(hourly: Sequence[HourlyPoint]) -> List[HourlyPoint]:
    return list(hourly[:NEAR_TERM_WINDOW])


def is_gusty_pair(wind: Optional[float], gust: Optional[float]) -> bool:
    """True when gust clears max(20, 1.35 x wind) and beats wind by 5 kt."""
    if not (_finite(wind) and _finite(gust)):
        return False
    return gust >= max(GUST_FLOOR_KNOTS, GUST_FACTOR * wind) and (gust - wind) >= GUST_SPREAD_KNOTS


def _summaries(points: Iterable[HourlyPoint]) -> List[str]:
    return [p.short_forecast_text.lower() for p in points if p.short_forecast_text]


def detect_gusty(observations: Iterable[Observation], points: Iterable[HourlyPoint]) -> bool:
    if any(is_gusty_pair(o.sustained_wind_knots, o.gust_knots) for o in observations):
        return True
    return any(is_gusty_pair(p.wind_knots, p.gust_knots) for p in points)


def detect_reduced_visibility(points: Iterable[HourlyPoint]) -> bool:
    return any(
        keyword in summary
        for summary in _summaries(points)
        for keyword in VISIBILITY_KEYWORDS
    )


def mean_direction(points: Iterable[HourlyPoint]) -> Optional[float]:
    """Arithmetic mean of the defined directions, None if there are none."""
    directions = [p.direction_deg for p in points if _finite(p.direction_deg)]
    if not directions:
        return None
    return sum(directions) / len(directions)


def peak(values: Iterable[Optional[float]]) -> Optional[float]:
    defined = [v for v in values if _finite(v)]
    return max(defined) if defined else None


def detect_offshore_wind_event(points: Sequence[HourlyPoint]) -> bool:
    if any(OFFSHORE_EVENT_NAME in summary for summary in _summaries(points)):
        return True

    direction = mean_direction(points)
    max_gust = peak(p.gust_knots for p in points)
    if direction is None or max_gust is None:
        return False
    return OFFSHORE_DIRECTION_MIN <= direction <= OFFSHORE_DIRECTION_MAX and max_gust >= OFFSHORE_GUST_KNOTS


def detect_signals(
    observations: Iterable[Observation],
    hourly: Sequence[HourlyPoint]
) -> Signals:
    """Derive hazard flags from a leg's observations and hourly window."""
    observations = [o for o in observations if o is not None]
    points = near_term(hourly)

    signals = Signals(
        gusty=detect_gusty(observations, points),
        reduced_visibility=detect_reduced_visibility(points),
        offshore_wind_event=detect_offshore_wind_event(points),
    )
    logger.debug(f"Signals from {len(observations)} observations and {len(points)} hourly points: {signals}")
    return signals
