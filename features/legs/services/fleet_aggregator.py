import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from features.buoys.models.buoy_types import BuoyResult, Observation
from features.forecast.models.forecast_types import HourlyPoint
from features.legs.models.leg_types import FleetSnapshot, LegConfig, LocationForecast, Waypoint

logger = logging.getLogger(__name__)

class BuoySource(Protocol):
    async def get_observations(self, station_ids: Iterable[str]) -> List[BuoyResult]: ...

    async def get_observation(self, station_id: str) -> BuoyResult: ...

class HourlySource(Protocol):
    async def get_hourly(self, lat: float, lon: float, hours: int) -> List[HourlyPoint]: ...

class ForecastSource(Protocol):
    async def get_forecast(self, lat: float, lon: float) -> Dict[str, Any]: ...

class FleetAggregator:
    """Retrieves everything one evaluation cycle needs, tolerating partial failure.

    Observations are fetched in two tiers: one batched call for every unique
    station, then individual retries for stations the batch could not fill.
    Hourly forecasts are fetched once per leg midpoint. All retrievals run
    concurrently and every failure is reduced to None or an empty list for
    that station or leg only.
    """

    def __init__(
        self,
        buoy_source: BuoySource,
        hourly_source: HourlySource,
        forecast_source: Optional[ForecastSource] = None
    ):
        self.buoy_source = buoy_source
        self.hourly_source = hourly_source
        self.forecast_source = forecast_source

    async def _fetch_batch(self, station_ids: List[str]) -> Dict[str, Optional[Observation]]:
        try:
            results = await self.buoy_source.get_observations(station_ids)
        except Exception as e:
            logger.warning(f"⚠️ Batched buoy fetch failed, falling back to single fetches: {str(e)}")
            return {}

        requested = set(station_ids)
        observations: Dict[str, Optional[Observation]] = {}
        for result in results or []:
            if result is None or result.station_id not in requested:
                continue
            observations.setdefault(result.station_id, result.obs)
        return observations

    async def _fetch_single(self, station_id: str) -> Optional[Observation]:
        try:
            result = await self.buoy_source.get_observation(station_id)
        except Exception as e:
            logger.warning(f"⚠️ Single buoy fetch failed for {station_id}: {str(e)}")
            return None
        return result.obs if result is not None else None

    async def gather_observations(self, station_ids: Iterable[str]) -> Dict[str, Optional[Observation]]:
        """Map every requested station id to its latest Observation or None."""
        unique_ids = list(dict.fromkeys(station_ids))
        if not unique_ids:
            return {}

        observations = await self._fetch_batch(unique_ids)

        missing = [sid for sid in unique_ids if observations.get(sid) is None]
        if missing:
            logger.info(f"🔁 Retrying {len(missing)} station(s) individually: {', '.join(missing)}")
            singles = await asyncio.gather(*(self._fetch_single(sid) for sid in missing))
            observations.update(zip(missing, singles))

        return {sid: observations.get(sid) for sid in unique_ids}

    async def _fetch_hourly(self, leg: LegConfig, hours: int) -> List[HourlyPoint]:
        try:
            return list(await self.hourly_source.get_hourly(leg.midpoint.lat, leg.midpoint.lon, hours))
        except Exception as e:
            logger.warning(f"⚠️ Hourly forecast failed for leg {leg.leg_id} ({leg.midpoint.name}): {str(e)}")
            return []

    async def gather_hourly(self, legs: Sequence[LegConfig], hours: int) -> Dict[str, List[HourlyPoint]]:
        """Map every leg id to its midpoint's hourly points (empty on failure)."""
        results = await asyncio.gather(*(self._fetch_hourly(leg, hours) for leg in legs))
        return {leg.leg_id: points for leg, points in zip(legs, results)}

    async def collect(self, legs: Sequence[LegConfig], hours: int) -> FleetSnapshot:
        """Fetch observations for all watched stations and hourly points for all legs."""
        station_ids = [sid for leg in legs for sid in leg.station_ids]
        observations, hourly = await asyncio.gather(
            self.gather_observations(station_ids),
            self.gather_hourly(legs, hours)
        )
        return FleetSnapshot(observations=observations, hourly=hourly)

    async def _fetch_location(self, key: str, label: str, point: Waypoint, hours: int) -> LocationForecast:
        try:
            points = list(await self.hourly_source.get_hourly(point.lat, point.lon, hours))
        except Exception as e:
            logger.warning(f"⚠️ Hourly forecast failed for {label}: {str(e)}")
            points = []
        return LocationForecast(key=key, label=label, lat=point.lat, lon=point.lon, hours=points)

    async def gather_locations(self, leg: LegConfig, hours: int) -> List[LocationForecast]:
        """Hourly strips for the start, midpoint and end of a leg, in that order."""
        return list(await asyncio.gather(
            self._fetch_location("start", f"{leg.start.name} (Start)", leg.start, hours),
            self._fetch_location("mid", leg.midpoint.name, leg.midpoint, hours),
            self._fetch_location("end", f"{leg.end.name} (End)", leg.end, hours)
        ))

    async def fetch_forecast_line(self, lat: float, lon: float) -> Optional[str]:
        """First narrative period's detailed (or short) forecast, None when unavailable."""
        if self.forecast_source is None:
            return None
        try:
            forecast = await self.forecast_source.get_forecast(lat, lon)
        except Exception as e:
            logger.warning(f"⚠️ Narrative forecast failed for {lat},{lon}: {str(e)}")
            return None

        properties = forecast.get("properties") if isinstance(forecast, dict) else None
        periods = (properties or {}).get("periods") or []
        first = periods[0] if periods and isinstance(periods[0], dict) else {}
        return first.get("detailedForecast") or first.get("shortForecast") or None
