import asyncio

from helpers import FakeBuoySource, FakeForecastSource, FakeHourlySource, make_obs, make_point
from features.legs.models.leg_types import LegConfig
from features.legs.services.fleet_aggregator import FleetAggregator


def _leg(leg_id: str, lat: float, lon: float, buoys) -> LegConfig:
    return LegConfig.model_validate({
        "id": leg_id,
        "from": {"name": "A", "lat": lat - 0.1, "lon": lon},
        "to": {"name": "B", "lat": lat + 0.1, "lon": lon},
        "midpoint": {"name": "Mid", "lat": lat, "lon": lon},
        "distance": "10 nm est",
        "window": "06:00-12:00",
        "comfortCopy": "up to 20 kt / 5 ft",
        "comfort": {"windKt": 20, "gustKt": 25, "waveFt": 5},
        "buoys": [{"id": b, "name": f"Buoy {b}"} for b in buoys],
    })


OBS_A = make_obs(sustained_wind_knots=10.0)
OBS_B = make_obs(sustained_wind_knots=12.0)
OBS_C = make_obs(sustained_wind_knots=14.0)


def test_station_ids_are_deduplicated_before_batch():
    source = FakeBuoySource(batch={"a": OBS_A, "b": OBS_B})
    aggregator = FleetAggregator(source, FakeHourlySource())

    observations = asyncio.run(aggregator.gather_observations(["a", "b", "a", "b"]))

    assert source.batch_calls == [["a", "b"]]
    assert source.single_calls == []
    assert observations == {"a": OBS_A, "b": OBS_B}


def test_missing_and_null_batch_entries_fall_back_to_single_fetch():
    source = FakeBuoySource(
        batch={"a": OBS_A, "b": None},
        singles={"b": OBS_B, "c": OBS_C},
    )
    aggregator = FleetAggregator(source, FakeHourlySource())

    observations = asyncio.run(aggregator.gather_observations(["a", "b", "c"]))

    assert sorted(source.single_calls) == ["b", "c"]
    assert observations == {"a": OBS_A, "b": OBS_B, "c": OBS_C}


def test_single_failures_degrade_to_none():
    source = FakeBuoySource(batch={"a": OBS_A}, failing_singles=["b"])
    aggregator = FleetAggregator(source, FakeHourlySource())

    observations = asyncio.run(aggregator.gather_observations(["a", "b"]))

    assert observations == {"a": OBS_A, "b": None}


def test_batch_failure_falls_back_for_every_station():
    source = FakeBuoySource(batch_error=RuntimeError("batch down"), singles={"a": OBS_A})
    aggregator = FleetAggregator(source, FakeHourlySource())

    observations = asyncio.run(aggregator.gather_observations(["a", "b"]))

    assert sorted(source.single_calls) == ["a", "b"]
    assert observations == {"a": OBS_A, "b": None}


def test_no_station_ids_means_no_calls():
    source = FakeBuoySource()
    aggregator = FleetAggregator(source, FakeHourlySource())

    assert asyncio.run(aggregator.gather_observations([])) == {}
    assert source.batch_calls == []


def test_hourly_fetched_per_leg_midpoint_with_failures_isolated():
    points = [make_point(wind_knots=10.0), make_point(wind_knots=11.0)]
    hourly_source = FakeHourlySource(
        by_coordinate={(33.0, -117.0): points},
        failing=[(34.0, -118.0)],
    )
    legs = [_leg("1", 33.0, -117.0, ["a"]), _leg("2", 34.0, -118.0, ["b"])]
    aggregator = FleetAggregator(FakeBuoySource(), hourly_source)

    hourly = asyncio.run(aggregator.gather_hourly(legs, 12))

    assert hourly == {"1": points, "2": []}
    assert sorted(hourly_source.calls) == [(33.0, -117.0, 12), (34.0, -118.0, 12)]


def test_collect_builds_snapshot_for_all_legs():
    source = FakeBuoySource(batch={"a": OBS_A, "b": OBS_B, "c": OBS_C})
    hourly_source = FakeHourlySource(by_coordinate={(33.0, -117.0): [make_point(gust_knots=20.0)]})
    legs = [_leg("1", 33.0, -117.0, ["a", "b"]), _leg("2", 34.0, -118.0, ["b", "c"])]
    aggregator = FleetAggregator(source, hourly_source)

    snapshot = asyncio.run(aggregator.collect(legs, 6))

    assert source.batch_calls == [["a", "b", "c"]]
    assert snapshot.observations == {"a": OBS_A, "b": OBS_B, "c": OBS_C}
    assert set(snapshot.hourly) == {"1", "2"}
    assert snapshot.hourly["2"] == []


def test_forecast_line_ignores_malformed_payloads():
    aggregator = FleetAggregator(FakeBuoySource(), FakeHourlySource(), FakeForecastSource(payload=["not", "a", "dict"]))

    assert asyncio.run(aggregator.fetch_forecast_line(33.0, -117.0)) is None
