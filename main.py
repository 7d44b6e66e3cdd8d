from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from core.config import settings
from core.logging_config import setup_logging

# Feature routes
from features.buoys.routes.buoy_routes import router as buoy_router
from features.forecast.routes.forecast_routes import router as forecast_router
from features.legs.routes.leg_routes import router as leg_router

# Services and clients
from features.buoys.services.ndbc_buoy_client import NDBCBuoyClient
from features.forecast.services.nws_client import NWSClient
from features.legs.services.fleet_aggregator import FleetAggregator
from features.legs.services.leg_service import LegService
from features.legs.services.trip_service import TripService

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        logger.info("🚀 Starting Sailing Conditions API...")

        buoy_client = NDBCBuoyClient()
        nws_client = NWSClient()
        leg_service = LegService()

        # Fail fast on a broken legs file rather than on the first request
        legs = leg_service.get_legs()
        logger.info(f"⛵ Watching {len(leg_service.watched_station_ids())} buoys across {len(legs)} legs")

        app.state.buoy_client = buoy_client
        app.state.nws_client = nws_client
        app.state.leg_service = leg_service
        app.state.trip_service = TripService(
            leg_service=leg_service,
            aggregator=FleetAggregator(
                buoy_source=buoy_client,
                hourly_source=nws_client,
                forecast_source=nws_client
            ),
            hours=settings.hourly_default_hours
        )

        logger.info("✨ API startup complete - ready to serve requests")
        yield

    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
        raise
    finally:
        logger.info("🔄 Shutting down API...")
        if hasattr(app.state, "buoy_client"):
            await app.state.buoy_client.close()
        if hasattr(app.state, "nws_client"):
            await app.state.nws_client.close()
        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Sailing Conditions API",
    description="Buoy observations, hourly marine forecasts and go/no-go risk per route leg",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include feature routers
app.include_router(buoy_router)
app.include_router(forecast_router)
app.include_router(leg_router)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "time": datetime.now(timezone.utc).isoformat()
    }

@app.get("/ping")
async def ping():
    return {"ok": True, "now": int(time.time() * 1000)}

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
