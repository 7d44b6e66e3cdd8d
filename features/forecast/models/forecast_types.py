from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

class HourlyPoint(BaseModel):
    """One NWS hourly period decoded into knots and degrees.

    Ranged speeds ("10 to 20 mph") are stored as the upper bound, an
    expected maximum rather than an average.
    """
    time: Optional[str] = None
    wind_knots: Optional[float] = Field(None, alias="windKnots")
    gust_knots: Optional[float] = Field(None, alias="gustKnots")
    direction_text: Optional[str] = Field(None, alias="directionText")
    direction_deg: Optional[float] = Field(None, alias="directionDeg")
    short_forecast_text: Optional[str] = Field(None, alias="shortForecastText")

    class Config:
        populate_by_name = True
        frozen = True

class HourlyForecastResponse(BaseModel):
    lat: float
    lon: float
    hours: List[HourlyPoint]

class ForecastResponse(BaseModel):
    """Narrative NWS forecast passed through untouched."""
    lat: float
    lon: float
    forecast: Dict[str, Any]
