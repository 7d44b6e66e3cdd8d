import asyncio
import logging
import aiohttp
from typing import Iterable, List, Optional

from features.buoys.models.buoy_types import BuoyResult
from features.buoys.services.report_parser import parse_realtime_report
from features.common.exceptions.upstream_exceptions import (
    UpstreamError,
    UpstreamPayloadError,
    UpstreamStatusError
)
from features.common.services.cache_config import cache_enabled, cache_key, cache_ttl, get_cache
from core.config import settings

logger = logging.getLogger(__name__)

class NDBCBuoyClient:
    CACHE_NAMESPACE = "ndbc_observations"

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._cache = get_cache(self.CACHE_NAMESPACE)

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": settings.user_agent},
                timeout=aiohttp.ClientTimeout(total=settings.request["timeout"])
            )
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    def _report_url(self, station_id: str) -> str:
        # realtime2 file names are upper case (46232.txt, PTGC1.txt)
        return f"{settings.ndbc_base_url}{station_id.upper()}.{settings.ndbc_report_suffix}"

    async def fetch_report(self, station_id: str) -> str:
        """Fetch the raw realtime2 report body for a station.

        Raises:
            UpstreamStatusError: NDBC answered with a non-success status
            UpstreamPayloadError: the report body could not be decoded
            UpstreamError: the request itself failed
        """
        key = cache_key("station", station_id.upper())
        if cache_enabled():
            cached = await self._cache.get(key)
            if cached is not None:
                return cached

        session = await self._init_session()
        try:
            async with session.get(self._report_url(station_id)) as response:
                if not response.ok:
                    raise UpstreamStatusError("NDBC", response.status)
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(f"NDBC request failed: {e}") from e
        except UnicodeDecodeError as e:
            raise UpstreamPayloadError(f"NDBC returned an undecodable report: {e.reason}") from e

        if cache_enabled():
            await self._cache.set(key, text, ttl=cache_ttl(self.CACHE_NAMESPACE))
        return text

    async def get_observation(self, station_id: str) -> BuoyResult:
        """Get the latest observation for a station.

        Never raises: upstream failures come back as a result with ok=False and
        an error string, unparsable reports as ok=True with obs=None.
        """
        try:
            text = await self.fetch_report(station_id)
        except UpstreamStatusError as e:
            logger.warning(f"⚠️ NDBC returned {e.status} for station {station_id}")
            return BuoyResult(station_id=station_id, ok=False, status=e.status, error=str(e))
        except UpstreamError as e:
            logger.error(f"❌ Error fetching observation for station {station_id}: {str(e)}")
            return BuoyResult(station_id=station_id, ok=False, error=str(e))
        except Exception as e:
            logger.error(f"❌ Unexpected error fetching observation for station {station_id}: {str(e)}")
            return BuoyResult(station_id=station_id, ok=False, error=str(e) or "fetch error")

        obs = parse_realtime_report(text)
        if obs is None:
            logger.warning(f"⚠️ Could not parse realtime report for station {station_id}")
        return BuoyResult(station_id=station_id, obs=obs)

    async def get_observations(self, station_ids: Iterable[str]) -> List[BuoyResult]:
        """Fetch several stations concurrently, one result per id in order."""
        return list(await asyncio.gather(
            *(self.get_observation(station_id) for station_id in station_ids)
        ))
