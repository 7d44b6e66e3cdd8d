"""Go/no-go classification for a route leg.

Classification is an ordered pipeline of pure steps::

    baseline_status -> escalate (gusty) -> apply_override (offshore event)

Each step can only keep or raise the level, and the offshore override always
wins. Missing data fails every threshold test, so a leg with no usable
readings comes out green.
"""
import logging
import math
from typing import Iterable, List, Optional, Sequence

from features.buoys.models.buoy_types import Observation
from features.forecast.models.forecast_types import HourlyPoint
from features.legs.models.leg_types import (
    ComfortProfile,
    RISK_BY_STATUS,
    Signals,
    Status,
    StatusResult
)
from features.legs.services.signal_detector import near_term, peak

logger = logging.getLogger(__name__)

# Short-period seas feel rougher than their height suggests
SHORT_PERIOD_SECONDS = 7.0
SHORT_PERIOD_PENALTY_FEET = 1.0

COMFORT_WAVE_ALLOWANCE_FEET = 1.0
RED_WAVE_MULTIPLIER = 1.5

RATIONALE = {
    Status.GREEN: "Favorable conditions with manageable winds and seas.",
    Status.YELLOW: "Moderate conditions expected. Monitor winds/sea state and adjust timing.",
    Status.RED: "Plan exceeds comfort limits. Consider alternate timing or route.",
}

_ESCALATION = {
    Status.GREEN: Status.YELLOW,
    Status.YELLOW: Status.RED,
    Status.RED: Status.RED,
}


def _exceeds(value: Optional[float], limit: float) -> bool:
    return value is not None and value > limit


def effective_wave_feet(obs: Observation) -> Optional[float]:
    if obs.wave_height_feet is None or not math.isfinite(obs.wave_height_feet):
        return None
    period = obs.dominant_wave_period_seconds
    if period is not None and period < SHORT_PERIOD_SECONDS:
        return obs.wave_height_feet + SHORT_PERIOD_PENALTY_FEET
    return obs.wave_height_feet


def max_effective_wave_feet(observations: Iterable[Observation]) -> Optional[float]:
    return peak(effective_wave_feet(o) for o in observations)


def baseline_status(
    comfort: ComfortProfile,
    wave_feet: Optional[float],
    peak_wind: Optional[float],
    peak_gust: Optional[float]
) -> Status:
    comfort_wave = comfort.wave_feet + COMFORT_WAVE_ALLOWANCE_FEET

    if (wave_feet is not None and wave_feet >= RED_WAVE_MULTIPLIER * comfort_wave) \
            or _exceeds(peak_gust, comfort.gust_knots):
        return Status.RED
    if _exceeds(wave_feet, comfort_wave) or _exceeds(peak_wind, comfort.wind_knots):
        return Status.YELLOW
    return Status.GREEN


def escalate(status: Status, signals: Signals) -> Status:
    """Raise one level when gusty."""
    return _ESCALATION[status] if signals.gusty else status


def apply_override(status: Status, signals: Signals) -> Status:
    """An offshore wind event is always red."""
    return Status.RED if signals.offshore_wind_event else status


def build_rationale(status: Status, peak_gust: Optional[float], wave_feet: Optional[float]) -> str:
    rationale = RATIONALE[status]
    parts: List[str] = []
    if peak_gust is not None:
        parts.append(f"gusts ~{peak_gust:.0f}kt")
    if wave_feet is not None:
        parts.append(f"seas ~{wave_feet:.1f}ft")
    if parts:
        rationale += f" ({', '.join(parts)})"
    return rationale


def classify(
    comfort: ComfortProfile,
    observations: Iterable[Observation],
    hourly: Sequence[HourlyPoint],
    signals: Signals
) -> StatusResult:
    """Classify a leg into green/yellow/red with a risk level and rationale."""
    observations = [o for o in observations if o is not None]
    points = near_term(hourly)

    wave_feet = max_effective_wave_feet(observations)
    peak_wind = peak(p.wind_knots for p in points)
    peak_gust = peak(p.gust_knots for p in points)

    status = baseline_status(comfort, wave_feet, peak_wind, peak_gust)
    status = escalate(status, signals)
    status = apply_override(status, signals)

    logger.debug(
        f"Classified {status.value}: wave={wave_feet} wind={peak_wind} gust={peak_gust} signals={signals}"
    )
    return StatusResult(
        status=status,
        risk=RISK_BY_STATUS[status],
        rationale=build_rationale(status, peak_gust, wave_feet),
    )
