from typing import List, Sequence

from features.forecast.models.forecast_types import HourlyPoint
from features.legs.models.leg_types import Alert, AlertType, Signals
from features.legs.services.signal_detector import near_term

def build_alerts(hourly: Sequence[HourlyPoint], signals: Signals) -> List[Alert]:
    """Heads-up lines for a leg card, warnings first then the NWS summary."""
    points = near_term(hourly)
    if not points:
        return []

    alerts: List[Alert] = []
    if signals.offshore_wind_event:
        alerts.append(Alert(
            type=AlertType.WARNING,
            title="Possible offshore (NE/E) gusts next hours",
            subtitle="Watch gaps/channel alignments"
        ))
    if signals.reduced_visibility:
        alerts.append(Alert(
            type=AlertType.WARNING,
            title="Reduced visibility expected",
            subtitle="Fog, haze or smoke in the NWS hourly"
        ))

    summary = points[0].short_forecast_text
    if summary:
        alerts.append(Alert(type=AlertType.INFO, title=summary, subtitle="NWS hourly"))

    return alerts
