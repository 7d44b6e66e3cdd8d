import pytest

from features.forecast.services.hourly_normalizer import (
    clamp_hours,
    mph_from_text,
    normalize_period,
    normalize_periods
)


def _period(i: int = 0, **overrides) -> dict:
    period = {
        "number": i + 1,
        "startTime": f"2024-06-01T{i % 24:02d}:00:00-07:00",
        "windSpeed": "10 mph",
        "windDirection": "W",
        "shortForecast": "Sunny",
    }
    period.update(overrides)
    return period


@pytest.mark.parametrize("text, expected", [
    ("15 mph", 15),
    ("10 to 20 mph", 20),
    ("20 to 10 mph", 20),
    ("5 MPH", 5),
    ("around 12mph", 12),
    ("", None),
    (None, None),
    ("calm", None),
    ("15 kt", None),
    ({"unitCode": "wmoUnit:km_h-1", "value": 30}, None),
])
def test_mph_from_text(text, expected):
    assert mph_from_text(text) == expected


def test_normalize_period_converts_to_knots_and_degrees():
    point = normalize_period(_period(windSpeed="10 to 20 mph", windGust="30 mph", windDirection="NE"))

    assert point.time == "2024-06-01T00:00:00-07:00"
    assert point.wind_knots == 17.4  # 20 mph upper bound
    assert point.gust_knots == 26.1
    assert point.direction_text == "NE"
    assert point.direction_deg == 45.0
    assert point.short_forecast_text == "Sunny"


def test_normalize_period_handles_missing_fields():
    point = normalize_period({})

    assert point.time is None
    assert point.wind_knots is None
    assert point.gust_knots is None
    assert point.direction_text is None
    assert point.direction_deg is None
    assert point.short_forecast_text is None


def test_normalize_period_unknown_direction_keeps_text():
    point = normalize_period(_period(windDirection="VRB"))

    assert point.direction_text == "VRB"
    assert point.direction_deg is None


@pytest.mark.parametrize("requested, expected", [
    (-5, 1), (0, 1), (1, 1), (12, 12), (48, 48), (100, 48),
])
def test_clamp_hours(requested, expected):
    assert clamp_hours(requested) == expected


def test_normalize_periods_takes_leading_periods_in_order():
    periods = [_period(i) for i in range(60)]

    assert len(normalize_periods(periods, 0)) == 1
    assert len(normalize_periods(periods, 100)) == 48

    points = normalize_periods(periods, 3)
    assert [p.time for p in points] == [p["startTime"] for p in periods[:3]]


def test_normalize_periods_with_fewer_periods_than_requested():
    assert len(normalize_periods([_period(0), _period(1)], 12)) == 2
    assert normalize_periods([], 12) == []
