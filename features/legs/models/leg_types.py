from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from features.buoys.models.buoy_types import Observation
from features.forecast.models.forecast_types import HourlyPoint

class Status(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

class RiskLevel(str, Enum):
    LOW = "LOW"
    ELEVATED = "ELEVATED"
    HIGH = "HIGH"

RISK_BY_STATUS: Dict[Status, RiskLevel] = {
    Status.GREEN: RiskLevel.LOW,
    Status.YELLOW: RiskLevel.ELEVATED,
    Status.RED: RiskLevel.HIGH,
}

class AlertType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    STATEMENT = "statement"

class ComfortProfile(BaseModel):
    """Per-leg comfort limits: sustained wind, gust and wave height."""
    wind_knots: float = Field(alias="windKt")
    gust_knots: float = Field(alias="gustKt")
    wave_feet: float = Field(alias="waveFt")

    class Config:
        populate_by_name = True
        frozen = True

class Waypoint(BaseModel):
    name: str
    lat: float
    lon: float

class WatchedBuoy(BaseModel):
    station_id: str = Field(alias="id")
    name: str

    class Config:
        populate_by_name = True

class LegConfig(BaseModel):
    """Static definition of one route leg."""
    leg_id: str = Field(alias="id")
    start: Waypoint = Field(alias="from")
    end: Waypoint = Field(alias="to")
    midpoint: Waypoint
    distance: str
    duration: Optional[str] = None
    window: str
    comfort_copy: str = Field(alias="comfortCopy")
    comfort: ComfortProfile
    buoys: List[WatchedBuoy]

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def title(self) -> str:
        return f"Leg {self.leg_id}: {self.start.name} → {self.end.name}"

    @property
    def station_ids(self) -> List[str]:
        return [b.station_id for b in self.buoys]

class Signals(BaseModel):
    gusty: bool = False
    reduced_visibility: bool = Field(False, alias="reducedVisibility")
    offshore_wind_event: bool = Field(False, alias="offshoreWindEvent")

    class Config:
        populate_by_name = True
        frozen = True

class StatusResult(BaseModel):
    status: Status
    risk: RiskLevel
    rationale: str

    class Config:
        frozen = True

class Alert(BaseModel):
    type: AlertType
    title: str
    subtitle: Optional[str] = None

class FleetSnapshot(BaseModel):
    """Everything retrieved for one evaluation cycle."""
    observations: Dict[str, Optional[Observation]]
    hourly: Dict[str, List[HourlyPoint]]

    class Config:
        frozen = True

class LegAssessment(BaseModel):
    leg_id: str = Field(alias="id")
    title: str
    distance: str
    window: str
    comfort_copy: str = Field(alias="comfortCopy")
    status: Status
    risk: RiskLevel
    rationale: str
    signals: Signals
    buoys: List[str]
    alerts: List[Alert]

    class Config:
        populate_by_name = True

class BuoyReading(BaseModel):
    station_id: str = Field(alias="id")
    name: str
    obs: Optional[Observation] = None
    wind_direction_text: str = Field(alias="windDirectionText")
    status: str  # green / yellow / red, or "unknown" without an observation

    class Config:
        populate_by_name = True

class LocationForecast(BaseModel):
    """Hourly strip for one point along a leg (start, mid or end)."""
    key: str
    label: str
    lat: float
    lon: float
    hours: List[HourlyPoint]

class LegDetail(LegAssessment):
    start: Waypoint = Field(alias="from")
    end: Waypoint = Field(alias="to")
    midpoint: Waypoint
    duration: Optional[str] = None
    readings: List[BuoyReading]
    hourly: List[HourlyPoint]
    locations: List[LocationForecast] = []
    forecast_line: Optional[str] = Field(None, alias="forecastLine")
