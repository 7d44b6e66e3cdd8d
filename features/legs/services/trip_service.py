import asyncio
import logging
from typing import List, Optional

from features.buoys.models.buoy_types import Observation
from features.common.utils.conversions import degrees_to_compass_text
from features.legs.models.leg_types import (
    BuoyReading,
    ComfortProfile,
    FleetSnapshot,
    LegAssessment,
    LegConfig,
    LegDetail,
    Status
)
from features.legs.services.alert_builder import build_alerts
from features.legs.services.fleet_aggregator import FleetAggregator
from features.legs.services.leg_service import LegService
from features.legs.services.risk_classifier import classify
from features.legs.services.signal_detector import detect_signals, near_term
from core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_STATUS = "unknown"
DETAIL_HOURS = 12

def reading_status(obs: Optional[Observation], comfort: ComfortProfile) -> str:
    """Quick comfort check for a single buoy card."""
    if obs is None:
        return UNKNOWN_STATUS
    if (obs.gust_knots or 0) > comfort.gust_knots or (obs.wave_height_feet or 0) > comfort.wave_feet:
        return Status.RED.value
    if (obs.sustained_wind_knots or 0) > comfort.wind_knots:
        return Status.YELLOW.value
    return Status.GREEN.value

class TripService:
    """Scores every configured leg from one fresh snapshot of buoys and forecasts."""

    def __init__(
        self,
        leg_service: LegService,
        aggregator: FleetAggregator,
        hours: int = settings.hourly_default_hours,
        detail_hours: int = DETAIL_HOURS
    ):
        self.leg_service = leg_service
        self.aggregator = aggregator
        self.hours = hours
        self.detail_hours = detail_hours

    def _assess(self, leg: LegConfig, snapshot: FleetSnapshot) -> LegAssessment:
        watched = [snapshot.observations.get(sid) for sid in leg.station_ids]
        observations = [o for o in watched if o is not None]
        hourly = snapshot.hourly.get(leg.leg_id, [])

        signals = detect_signals(observations, hourly)
        result = classify(leg.comfort, observations, hourly, signals)

        logger.info(
            f"Leg {leg.leg_id}: {result.status.value} from {len(observations)}/{len(leg.station_ids)} "
            f"buoys and {len(near_term(hourly))} hourly points"
        )
        return LegAssessment(
            leg_id=leg.leg_id,
            title=leg.title,
            distance=leg.distance,
            window=leg.window,
            comfort_copy=leg.comfort_copy,
            status=result.status,
            risk=result.risk,
            rationale=result.rationale,
            signals=signals,
            buoys=leg.station_ids,
            alerts=build_alerts(hourly, signals),
        )

    async def assess_all(self) -> List[LegAssessment]:
        legs = self.leg_service.get_legs()
        snapshot = await self.aggregator.collect(legs, self.hours)
        return [self._assess(leg, snapshot) for leg in legs]

    async def assess_leg(self, leg_id: str) -> LegDetail:
        leg = self.leg_service.get_leg(leg_id)
        # Narrative forecast is taken halfway between the leg ends
        snapshot, locations, forecast_line = await asyncio.gather(
            self.aggregator.collect([leg], self.hours),
            self.aggregator.gather_locations(leg, self.detail_hours),
            self.aggregator.fetch_forecast_line(
                (leg.start.lat + leg.end.lat) / 2,
                (leg.start.lon + leg.end.lon) / 2
            )
        )
        assessment = self._assess(leg, snapshot)

        readings = []
        for buoy in leg.buoys:
            obs = snapshot.observations.get(buoy.station_id)
            readings.append(BuoyReading(
                station_id=buoy.station_id,
                name=buoy.name,
                obs=obs,
                wind_direction_text=degrees_to_compass_text(obs.wind_direction_deg if obs else None),
                status=reading_status(obs, leg.comfort),
            ))

        return LegDetail(
            **assessment.model_dump(),
            start=leg.start,
            end=leg.end,
            midpoint=leg.midpoint,
            duration=leg.duration,
            readings=readings,
            hourly=near_term(snapshot.hourly.get(leg.leg_id, [])),
            locations=locations,
            forecast_line=forecast_line,
        )
