from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Any, Optional

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    """Application settings."""

    # NDBC realtime2 standard meteorological reports
    ndbc_base_url: str = "https://www.ndbc.noaa.gov/data/realtime2/"
    ndbc_report_suffix: str = "txt"

    # NWS gridded forecasts
    nws_base_url: str = "https://api.weather.gov"
    nws_accept: str = "application/geo+json"

    # NWS and NDBC both ask for an identifying User-Agent
    user_agent: str = "sailing-conditions-api (ops@sailing-conditions.local)"

    # Hourly forecast window
    hourly_default_hours: int = 12

    # Route leg definitions
    legs_file: str = str(BASE_DIR / "data" / "legs.json")

    cache: Dict[str, Any] = {
        "enabled": True,
        "prefix": "sailing_conditions"
    }

    request: Dict = {
        "timeout": 20
    }

    log_level: str = "INFO"

    def get_cache_ttl(self) -> Dict[str, Optional[int]]:
        """Get cache TTL values in seconds, keyed by cache namespace."""
        return {
            "ndbc_observations": 300,   # 5 minutes (NDBC posts roughly every 10 minutes)
            "nws_points": 86400,        # 24 hours, grid lookups rarely change
            "nws_hourly": 900,          # 15 minutes
            "nws_forecast": 900         # 15 minutes
        }

    model_config = SettingsConfigDict(
        env_prefix="sail_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
