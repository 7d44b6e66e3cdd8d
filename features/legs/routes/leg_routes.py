from typing import List
from fastapi import APIRouter, Depends, Request
from features.legs.models.leg_types import LegAssessment, LegDetail
from features.legs.services.trip_service import TripService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/legs",
    tags=["Legs"]
)

def get_trip_service(request: Request) -> TripService:
    """Dependency to get the TripService instance."""
    return request.app.state.trip_service

@router.get(
    "",
    response_model=List[LegAssessment],
    summary="Get go/no-go status for every leg",
    description="Scores each route leg from its watched buoys and the hourly forecast at its "
                "midpoint. Returns status (green/yellow/red), risk level, rationale and alerts."
)
async def get_legs(
    service: TripService = Depends(get_trip_service)
) -> List[LegAssessment]:
    """Get assessments for all configured legs."""
    return await service.assess_all()

@router.get(
    "/{leg_id}",
    response_model=LegDetail,
    summary="Get leg detail",
    description="Returns the leg assessment plus per-buoy readings and the near-term hourly forecast"
)
async def get_leg(
    leg_id: str,
    service: TripService = Depends(get_trip_service)
) -> LegDetail:
    """Get the assessment and supporting data for one leg."""
    return await service.assess_leg(leg_id)
