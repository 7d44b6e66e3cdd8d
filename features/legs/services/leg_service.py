import json
import logging
from typing import List, Optional
from fastapi import HTTPException
from pathlib import Path

from features.legs.models.leg_types import LegConfig
from core.config import settings

logger = logging.getLogger(__name__)

class LegService:
    def __init__(self, legs_file: Optional[Path] = None):
        self.legs_file = Path(legs_file or settings.legs_file)
        self._legs: Optional[List[LegConfig]] = None

    def _load_legs(self) -> List[LegConfig]:
        """Load route legs from JSON file."""
        if self._legs is not None:
            return self._legs

        try:
            with open(self.legs_file) as f:
                legs_data = json.load(f)
            self._legs = [LegConfig.model_validate(leg) for leg in legs_data]
            logger.info(f"Loaded {len(self._legs)} route legs from {self.legs_file}")
            return self._legs
        except Exception as e:
            logger.error(f"❌ Error loading route legs from {self.legs_file}: {str(e)}")
            raise HTTPException(
                status_code=500,
                detail=f"Error loading route legs: {str(e)}"
            )

    def get_legs(self) -> List[LegConfig]:
        return list(self._load_legs())

    def get_leg(self, leg_id: str) -> LegConfig:
        """Get leg by ID."""
        leg = next(
            (l for l in self._load_legs() if l.leg_id == leg_id),
            None
        )

        if not leg:
            raise HTTPException(
                status_code=404,
                detail=f"Leg {leg_id} not found"
            )
        return leg

    def watched_station_ids(self) -> List[str]:
        """Union of every leg's watched stations, without duplicates."""
        return list(dict.fromkeys(
            station_id for leg in self._load_legs() for station_id in leg.station_ids
        ))
