import asyncio
import logging
import aiohttp
from typing import Any, Dict, List, Optional

from features.forecast.models.forecast_types import HourlyPoint
from features.forecast.services.hourly_normalizer import normalize_periods
from features.common.exceptions.upstream_exceptions import (
    UpstreamError,
    UpstreamPayloadError,
    UpstreamStatusError
)
from features.common.services.cache_config import cache_enabled, cache_key, cache_ttl, get_cache
from core.config import settings

logger = logging.getLogger(__name__)

def format_coordinate(value: float) -> str:
    """NWS accepts at most four decimals and redirects anything longer."""
    return f"{value:.4f}".rstrip("0").rstrip(".")

class NWSClient:
    """Client for the api.weather.gov points and gridpoint forecast endpoints."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._cache = get_cache("nws")

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": settings.user_agent,
                    "Accept": settings.nws_accept
                },
                timeout=aiohttp.ClientTimeout(total=settings.request["timeout"])
            )
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    async def _get_json(self, url: str, source: str) -> Dict[str, Any]:
        session = await self._init_session()
        try:
            async with session.get(url) as response:
                if not response.ok:
                    raise UpstreamStatusError(source, response.status)
                # NWS answers with application/geo+json
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(f"{source} request failed: {e}") from e
        except ValueError as e:
            raise UpstreamPayloadError(f"{source} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamPayloadError(f"{source} returned unexpected payload")
        return data

    async def _cached_json(self, namespace: str, key: str, url: str, source: str) -> Dict[str, Any]:
        full_key = cache_key(namespace, key)
        if cache_enabled():
            cached = await self._cache.get(full_key)
            if cached is not None:
                return cached

        data = await self._get_json(url, source)

        if cache_enabled():
            await self._cache.set(full_key, data, ttl=cache_ttl(namespace))
        return data

    async def get_point_properties(self, lat: float, lon: float) -> Dict[str, Any]:
        """Resolve a coordinate to its NWS gridpoint metadata."""
        coords = f"{format_coordinate(lat)},{format_coordinate(lon)}"
        data = await self._cached_json(
            "nws_points",
            coords,
            f"{settings.nws_base_url}/points/{coords}",
            "points"
        )
        return data.get("properties") or {}

    async def get_hourly_periods(self, lat: float, lon: float) -> List[Dict[str, Any]]:
        """Get the raw forecastHourly periods for a coordinate."""
        properties = await self.get_point_properties(lat, lon)
        hourly_url = properties.get("forecastHourly")
        if not hourly_url:
            raise UpstreamPayloadError("no forecastHourly URL")

        data = await self._cached_json("nws_hourly", hourly_url, hourly_url, "hourly")
        periods = (data.get("properties") or {}).get("periods") or []
        return [p for p in periods if isinstance(p, dict)]

    async def get_hourly(self, lat: float, lon: float, hours: int) -> List[HourlyPoint]:
        """Get normalized hourly points for a coordinate.

        Raises:
            UpstreamError: points or hourly lookup failed
        """
        periods = await self.get_hourly_periods(lat, lon)
        return normalize_periods(periods, hours)

    async def get_forecast(self, lat: float, lon: float) -> Dict[str, Any]:
        """Get the narrative (12-hour period) forecast JSON for a coordinate."""
        properties = await self.get_point_properties(lat, lon)
        forecast_url = properties.get("forecast") or properties.get("forecastZone")
        if not forecast_url:
            raise UpstreamPayloadError("no forecast URL")

        return await self._cached_json("nws_forecast", forecast_url, forecast_url, "forecast")
