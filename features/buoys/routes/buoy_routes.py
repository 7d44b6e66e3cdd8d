import logging
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from features.buoys.models.buoy_types import BuoyBatchResponse, BuoyResponse
from features.buoys.services.ndbc_buoy_client import NDBCBuoyClient

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/buoys",
    tags=["Buoys"]
)

def get_buoy_client(request: Request) -> NDBCBuoyClient:
    """Dependency to get the NDBCBuoyClient instance."""
    return request.app.state.buoy_client

@router.get(
    "",
    response_model=BuoyBatchResponse,
    summary="Get latest observations for several buoys",
    description="Returns the latest decoded NDBC observation for each requested station. "
                "Stations that fail upstream are reported with ok=false and an error string."
)
async def get_buoys(
    ids: str = Query("", description="Comma separated station ids, e.g. 46232,46086"),
    client: NDBCBuoyClient = Depends(get_buoy_client)
):
    """Get latest observations for a batch of stations."""
    station_ids = list(dict.fromkeys(s.strip() for s in ids.split(",") if s.strip()))
    if not station_ids:
        return JSONResponse(status_code=400, content={"error": "ids=46232,46086 required"})

    results = await client.get_observations(station_ids)
    return BuoyBatchResponse(ok=True, results=results)

@router.get(
    "/{station_id}",
    response_model=BuoyResponse,
    summary="Get latest observation for one buoy",
    description="Returns the latest decoded NDBC observation for the station, "
                "or a 502 with the failing id when NDBC cannot be reached"
)
async def get_buoy(
    station_id: str,
    client: NDBCBuoyClient = Depends(get_buoy_client)
):
    """Get the latest observation for a single station."""
    result = await client.get_observation(station_id.strip())
    if not result.ok:
        return JSONResponse(
            status_code=502,
            content={"id": result.station_id, "error": result.error or "fetch error"}
        )
    return BuoyResponse(station_id=result.station_id, obs=result.obs)
