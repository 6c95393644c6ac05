"""FastAPI application."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from floodwatch.core.exceptions import InvalidForecastParameter
from floodwatch.core.formatter import format_output
from floodwatch.core.service import FloodForecastService
from floodwatch.utils.config import settings
from floodwatch.utils.constants import REGION_CATALOG

app = FastAPI(
    title="Floodwatch API",
    description="Regional flood risk classification and N-day flood forecasts for India",
    version=settings.app.version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_service() -> FloodForecastService:
    return FloodForecastService.from_settings()


class ForecastResponse(BaseModel):
    region: str
    state: str
    risk_level: str
    degraded: bool
    forecast: dict
    formatted_output: Optional[str] = None


@app.exception_handler(InvalidForecastParameter)
async def invalid_parameter_handler(request: Request, exc: InvalidForecastParameter):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
async def health(service: FloodForecastService = Depends(get_service)):
    """Health check endpoint."""
    feed = service.reservoir_client is not None and service.reservoir_client.configured
    snapshot = service.observation_cache.snapshot
    return {
        "status": "healthy" if feed else "degraded",
        "reservoir_feed": "configured" if feed else "static catalog",
        "snapshot_fetched_at": snapshot.fetched_at.isoformat() if snapshot else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/v1/regions")
def list_regions(service: FloodForecastService = Depends(get_service)):
    """Catalogued cities with their baseline risk."""
    regions = service.regions()
    return {"count": len(regions), "regions": regions}


@app.get("/api/v1/risk/{region}")
def region_risk(
    region: str,
    state: Optional[str] = Query(None),
    service: FloodForecastService = Depends(get_service),
):
    """Current risk level for a region from its reservoir readings."""
    assessment = service.assess_region_risk(region, state)
    stress = service.reservoir_stress(region)
    return {"assessment": assessment.to_dict(), "reservoir_stress": stress.to_dict()}


@app.get("/api/v1/forecast", response_model=ForecastResponse)
def forecast(
    region: str = Query(..., min_length=1),
    state: Optional[str] = Query(None),
    days: int = Query(settings.forecast.default_days, ge=1, le=settings.forecast.max_days),
    audience: Optional[str] = Query(None, pattern="^(dashboard|researcher)$"),
    service: FloodForecastService = Depends(get_service),
):
    """N-day flood probability forecast."""
    report = service.forecast(region, state=state, days=days)
    return ForecastResponse(
        region=report.region,
        state=report.state,
        risk_level=report.risk_level.value,
        degraded=report.degraded,
        forecast=report.to_dict(),
        formatted_output=format_output(report, audience) if audience else None,
    )


@app.get("/api/v1/historical/{region}")
def historical(
    region: str,
    year: Optional[int] = Query(None, ge=1900, le=2100),
    service: FloodForecastService = Depends(get_service),
):
    """Twelve-month rainfall pattern for a region."""
    return service.historical_pattern(region, year).to_dict()


@app.get("/api/v1/reservoirs/{state}/districts")
def district_reservoirs(state: str, service: FloodForecastService = Depends(get_service)):
    """Reservoir conditions grouped by district."""
    summaries = service.district_summaries(state)
    if not summaries and not any(entry[0].lower() == state.lower() for entry in REGION_CATALOG.values()):
        raise HTTPException(status_code=404, detail=f"No reservoir data for state: {state}")
    return {"state": state, "districts": [s.to_dict() for s in summaries]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)
