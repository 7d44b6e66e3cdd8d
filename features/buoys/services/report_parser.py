"""Decoder for NDBC realtime2 standard meteorological reports.

A report looks like::

    #YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP ...
    #yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC ...
    2024 06 01 12 00 270 10.3 13.1   1.5     9   6.2 280 1015.2  20.0  19.0 ...

Only the newest row (the first data line) is decoded. Missing values are
written as ``MM`` by NDBC and always come back as None.
"""
import logging
import re
from typing import Dict, List, Optional

from features.buoys.models.buoy_types import Observation
from features.common.utils.conversions import UnitConversions, parse_numeric

logger = logging.getLogger(__name__)

YEAR_COLUMNS = ("YY", "YYYY")
TIME_COLUMNS = ("MM", "DD", "hh", "mm")
_ALPHA = re.compile(r"[A-Za-z]")


def _find_header(lines: List[str]) -> Optional[int]:
    for index, line in enumerate(lines):
        tokens = line.lstrip("#").split()
        if len(tokens) >= 5 and tokens[0] in YEAR_COLUMNS and tuple(tokens[1:5]) == TIME_COLUMNS:
            return index
    return None


def _build_row(header: List[str], data: List[str]) -> Dict[str, str]:
    row: Dict[str, str] = {}
    for name, value in zip(header, data):
        # MM is both "month" and the missing marker; the first column wins
        row.setdefault(name, value)
    return row


def _build_timestamp(row: Dict[str, str]) -> Optional[str]:
    year = next((row[c] for c in YEAR_COLUMNS if c in row), None)
    parts = [year] + [row.get(c) for c in TIME_COLUMNS]
    if any(parse_numeric(p) is None for p in parts):
        return None
    yy, mo, dd, hh, mn = parts
    return f"{yy}-{mo}-{dd}T{hh}:{mn}:00Z"


def parse_realtime_report(text: Optional[str]) -> Optional[Observation]:
    """Parse the latest observation out of a raw realtime2 report body.

    Returns None when the report has no recognisable header, no data line, or
    a data line shorter than the header.
    """
    if not text:
        return None

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    header_index = _find_header(lines)
    if header_index is None:
        logger.debug("No time-column header found in report")
        return None

    header = lines[header_index].lstrip("#").split()
    data_index = header_index + 1
    # Skip the units row (degT, m/s, ...) but never a numeric row
    if data_index < len(lines) and _ALPHA.search(lines[data_index]):
        data_index += 1
    if data_index >= len(lines):
        logger.debug("Report has a header but no data line")
        return None

    data = lines[data_index].split()
    if len(data) < len(header):
        logger.debug(f"Data line has {len(data)} tokens, header has {len(header)}")
        return None

    row = _build_row(header, data)

    return Observation(
        time=_build_timestamp(row),
        wind_direction_deg=parse_numeric(row.get("WDIR")),
        sustained_wind_knots=UnitConversions.meters_per_second_to_knots(parse_numeric(row.get("WSPD"))),
        gust_knots=UnitConversions.meters_per_second_to_knots(parse_numeric(row.get("GST"))),
        wave_height_feet=UnitConversions.meters_to_feet(parse_numeric(row.get("WVHT"))),
        dominant_wave_period_seconds=parse_numeric(row.get("DPD")),
        mean_wave_direction_deg=parse_numeric(row.get("MWD")),
        air_temp_f=UnitConversions.celsius_to_fahrenheit(parse_numeric(row.get("ATMP"))),
        water_temp_f=UnitConversions.celsius_to_fahrenheit(parse_numeric(row.get("WTMP"))),
        pressure_hpa=parse_numeric(row.get("PRES")),
    )
