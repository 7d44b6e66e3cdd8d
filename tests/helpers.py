"""Fakes and builders shared across the test suite."""
from typing import Dict, Iterable, List, Optional

from features.buoys.models.buoy_types import BuoyResult, Observation
from features.forecast.models.forecast_types import HourlyPoint

SAMPLE_REPORT = """\
#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE
#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft
2024 06 01 12 00 270 10.3 13.1   1.5     9   6.2 280 1015.2  20.0  19.0  15.1   MM   MM    MM
2024 06 01 11 50 260  9.8 12.0   1.4     9   6.0 280 1015.3  19.9  19.0  15.0   MM   MM    MM
"""


class FakeResponse:
    """Stands in for aiohttp.ClientResponse inside `async with session.get(...)`."""

    def __init__(self, status: int = 200, text="", payload=None):
        self.status = status
        self._text = text
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status < 400

    async def text(self) -> str:
        if isinstance(self._text, Exception):
            raise self._text
        return self._text

    async def json(self, content_type=None):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Minimal aiohttp.ClientSession replacement keyed by URL."""

    def __init__(self, routes: Dict[str, object]):
        self.routes = routes
        self.calls: List[str] = []
        self.closed = False

    def get(self, url: str, **kwargs):
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return FakeResponse(status=404)
        return route

    async def close(self):
        self.closed = True


class FakeBuoySource:
    """Buoy collaborator with scripted batch and single results."""

    def __init__(
        self,
        batch: Optional[Dict[str, Optional[Observation]]] = None,
        singles: Optional[Dict[str, Optional[Observation]]] = None,
        batch_error: Optional[Exception] = None,
        failing_singles: Iterable[str] = ()
    ):
        self.batch = batch or {}
        self.singles = singles or {}
        self.batch_error = batch_error
        self.failing_singles = set(failing_singles)
        self.batch_calls: List[List[str]] = []
        self.single_calls: List[str] = []

    async def get_observations(self, station_ids):
        station_ids = list(station_ids)
        self.batch_calls.append(station_ids)
        if self.batch_error:
            raise self.batch_error
        return [
            BuoyResult(station_id=sid, obs=self.batch[sid])
            for sid in station_ids if sid in self.batch
        ]

    async def get_observation(self, station_id):
        self.single_calls.append(station_id)
        if station_id in self.failing_singles:
            raise RuntimeError(f"boom {station_id}")
        return BuoyResult(station_id=station_id, obs=self.singles.get(station_id))


class FakeHourlySource:
    """Hourly collaborator keyed by (lat, lon)."""

    def __init__(self, by_coordinate=None, failing=()):
        self.by_coordinate = by_coordinate or {}
        self.failing = set(failing)
        self.calls = []

    async def get_hourly(self, lat, lon, hours):
        self.calls.append((lat, lon, hours))
        if (lat, lon) in self.failing:
            raise RuntimeError("hourly down")
        return list(self.by_coordinate.get((lat, lon), []))[:hours]


class FakeForecastSource:
    """Narrative forecast collaborator returning one payload or raising."""

    def __init__(self, payload=None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def get_forecast(self, lat, lon):
        self.calls.append((lat, lon))
        if self.error:
            raise self.error
        return self.payload

def make_obs(**kwargs) -> Observation:
    return Observation(**kwargs)


def make_point(**kwargs) -> HourlyPoint:
    return HourlyPoint(**kwargs)
