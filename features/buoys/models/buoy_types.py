from typing import Optional, List
from pydantic import BaseModel, Field

class Observation(BaseModel):
    """Latest decoded reading from one NDBC station, in sailing units."""
    time: Optional[str] = None  # ISO-8601 UTC, None if any time column is missing
    wind_direction_deg: Optional[float] = Field(None, alias="windDirectionDeg")
    sustained_wind_knots: Optional[float] = Field(None, alias="sustainedWindKnots")
    gust_knots: Optional[float] = Field(None, alias="gustKnots")
    wave_height_feet: Optional[float] = Field(None, alias="waveHeightFeet")
    dominant_wave_period_seconds: Optional[float] = Field(None, alias="dominantWavePeriodSeconds")
    mean_wave_direction_deg: Optional[float] = Field(None, alias="meanWaveDirectionDeg")
    air_temp_f: Optional[float] = Field(None, alias="airTempF")
    water_temp_f: Optional[float] = Field(None, alias="waterTempF")
    pressure_hpa: Optional[float] = Field(None, alias="pressureHpa")

    class Config:
        populate_by_name = True
        frozen = True

class BuoyResult(BaseModel):
    """Outcome of fetching one station. obs is None when the report was unusable."""
    station_id: str = Field(alias="id")
    ok: bool = True
    obs: Optional[Observation] = None
    status: Optional[int] = None  # upstream HTTP status on failure
    error: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True

class BuoyBatchResponse(BaseModel):
    ok: bool = True
    results: List[BuoyResult]

class BuoyResponse(BaseModel):
    station_id: str = Field(alias="id")
    obs: Optional[Observation] = None

    class Config:
        populate_by_name = True
