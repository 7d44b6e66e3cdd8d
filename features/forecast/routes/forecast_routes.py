import logging
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from features.forecast.models.forecast_types import ForecastResponse, HourlyForecastResponse
from features.forecast.services.nws_client import NWSClient
from features.common.exceptions.upstream_exceptions import UpstreamError
from core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/forecast",
    tags=["Forecast"]
)

def get_nws_client(request: Request) -> NWSClient:
    """Dependency to get the NWSClient instance."""
    return request.app.state.nws_client

@router.get(
    "/hourly",
    response_model=HourlyForecastResponse,
    summary="Get normalized hourly forecast",
    description="Returns NWS hourly periods for a coordinate with wind and gust in knots "
                "and direction in degrees. hours is clamped to 1-48."
)
async def get_hourly_forecast(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    hours: int = Query(settings.hourly_default_hours),
    client: NWSClient = Depends(get_nws_client)
):
    """Get hourly forecast points for a coordinate."""
    try:
        points = await client.get_hourly(lat, lon, hours)
    except UpstreamError as e:
        logger.error(f"❌ Error fetching hourly forecast for {lat},{lon}: {str(e)}")
        return JSONResponse(status_code=502, content={"error": str(e) or "nws error"})

    return HourlyForecastResponse(lat=lat, lon=lon, hours=points)

@router.get(
    "",
    response_model=ForecastResponse,
    summary="Get narrative forecast",
    description="Returns the raw NWS narrative forecast for a coordinate"
)
async def get_forecast(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    client: NWSClient = Depends(get_nws_client)
):
    """Get the narrative forecast for a coordinate."""
    try:
        forecast = await client.get_forecast(lat, lon)
    except UpstreamError as e:
        logger.error(f"❌ Error fetching forecast for {lat},{lon}: {str(e)}")
        return JSONResponse(status_code=502, content={"error": str(e) or "nws error"})

    return ForecastResponse(lat=lat, lon=lon, forecast=forecast)
