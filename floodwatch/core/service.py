"""Flood forecast service: gathers feeds, degrades to fallbacks, builds reports."""

from datetime import datetime, timedelta
from typing import Callable, Optional

from loguru import logger

from floodwatch.core.analyzer import analyze
from floodwatch.core.exceptions import DataSourceError, InvalidForecastParameter
from floodwatch.core.forecast import ForecastGenerator, HistoryContext, default_generator
from floodwatch.core.historical import HistoricalAggregator
from floodwatch.core.models import (
    DataSourceStatus,
    DistrictReservoirSummary,
    ForecastReport,
    HistoricalPattern,
    RegionObservation,
    ReservoirStressAssessment,
    RiskAssessment,
    RiskLevel,
    WeatherReading,
)
from floodwatch.core.risk import (
    DEFAULT_THRESHOLDS,
    RiskThresholds,
    assess_reservoir_stress,
    baseline_risk,
    classify_region,
    clamp_fill,
    observations_for_region,
    state_for_region,
    summarize_districts,
    to_number,
)
from floodwatch.data_sources.cache import SnapshotCache, utc_now
from floodwatch.data_sources.imd_client import IMDClient, rainfall_factor
from floodwatch.data_sources.reservoir_client import ReservoirClient
from floodwatch.data_sources.river_client import RiverGaugeClient
from floodwatch.utils.config import settings
from floodwatch.utils.constants import FACTOR_CAPS, FALLBACK_FILL_BY_RISK, REGION_CATALOG

MODEL_VERSION = "floodwatch-v2"


def catalog_observations() -> list[RegionObservation]:
    """Static per-city readings used when the reservoir feed is down."""
    observations = []
    for name, (state, lat, lon, level) in REGION_CATALOG.items():
        observations.append(RegionObservation(
            region_id=name,
            state=state,
            district=name.title(),
            coordinates=(lat, lon),
            reservoir_fill_percent=FALLBACK_FILL_BY_RISK[level],
            inflow_rate=0.0,
            outflow_rate=0.0,
        ))
    return observations


class FloodForecastService:
    """Builds risk assessments and forecasts for regions."""

    def __init__(
        self,
        reservoir_client: Optional[ReservoirClient] = None,
        weather_client: Optional[IMDClient] = None,
        river_client: Optional[RiverGaugeClient] = None,
        generator: Optional[ForecastGenerator] = None,
        cache_ttl: timedelta = timedelta(hours=6),
        clock: Callable[[], datetime] = utc_now,
        thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
    ):
        self.reservoir_client = reservoir_client
        self.weather_client = weather_client
        self.river_client = river_client or RiverGaugeClient()
        self.generator = generator or ForecastGenerator()
        self.clock = clock
        self.thresholds = thresholds
        self.observation_cache = SnapshotCache(ttl=cache_ttl, clock=clock)
        self.rainfall_cache = SnapshotCache(ttl=cache_ttl, clock=clock)

    @classmethod
    def from_settings(cls) -> "FloodForecastService":
        reservoir_client = ReservoirClient()
        if not reservoir_client.configured:
            logger.info("No reservoir data source configured, using static catalog")
            reservoir_client = None
        return cls(
            reservoir_client=reservoir_client,
            weather_client=IMDClient(),
            generator=default_generator(),
            cache_ttl=timedelta(hours=settings.forecast.cache_ttl_hours),
            thresholds=RiskThresholds.from_settings(),
        )

    # ============ FEEDS ============

    def observations(self, force_refresh: bool = False) -> tuple[tuple, DataSourceStatus]:
        """Current reservoir snapshot, or the static catalog when unavailable."""
        if self.reservoir_client is None:
            return tuple(catalog_observations()), DataSourceStatus("reservoirs", False, detail="not configured")
        try:
            items = self.observation_cache.get_or_load(self.reservoir_client.fetch_observations, force_refresh)
        except DataSourceError as e:
            logger.warning(f"Reservoir feed unavailable, using static catalog: {e}")
            return tuple(catalog_observations()), DataSourceStatus("reservoirs", False, detail=str(e))
        if not items:
            logger.warning("Reservoir feed returned no rows, using static catalog")
            return tuple(catalog_observations()), DataSourceStatus("reservoirs", False, detail="no rows")
        return items, DataSourceStatus("reservoirs", True, records=len(items))

    def rainfall_records(self, force_refresh: bool = False) -> tuple[tuple, DataSourceStatus]:
        if self.reservoir_client is None:
            return (), DataSourceStatus("rainfall_history", False, detail="not configured")
        try:
            items = self.rainfall_cache.get_or_load(self.reservoir_client.fetch_rainfall_records, force_refresh)
        except DataSourceError as e:
            logger.warning(f"Rainfall history unavailable: {e}")
            return (), DataSourceStatus("rainfall_history", False, detail=str(e))
        return items, DataSourceStatus("rainfall_history", True, records=len(items))

    def weather(self, region: str, coordinates: Optional[tuple]) -> tuple[Optional[WeatherReading], DataSourceStatus]:
        if self.weather_client is None:
            return None, DataSourceStatus("weather", False, detail="not configured")
        if coordinates is None:
            return None, DataSourceStatus("weather", False, detail="no coordinates")
        try:
            reading = self.weather_client.get_current_weather(coordinates[0], coordinates[1])
        except DataSourceError as e:
            logger.warning(f"Weather unavailable for {region}: {e}")
            return None, DataSourceStatus("weather", False, detail=str(e))
        return reading, DataSourceStatus("weather", True, records=1 + len(reading.forecast))

    # ============ QUERIES ============

    def regions(self) -> list[dict]:
        return [
            {"region": name, "state": state, "coordinates": [lat, lon], "baseline_risk": level}
            for name, (state, lat, lon, level) in sorted(REGION_CATALOG.items())
        ]

    def region_observations(self, region: str, state: Optional[str] = None) -> list[RegionObservation]:
        items, _ = self.observations()
        return observations_for_region(region, items, state)

    def assess_region_risk(self, region: str, state: Optional[str] = None) -> RiskAssessment:
        state = state or state_for_region(region)
        relevant = self.region_observations(region, state)
        base = baseline_risk(region)
        level = classify_region(relevant, base_level=base, thresholds=self.thresholds)

        max_fill = max((clamp_fill(o.reservoir_fill_percent) for o in relevant), default=0.0)
        max_inflow = max((max(0.0, to_number(o.inflow_rate)) for o in relevant), default=0.0)
        if relevant:
            reasoning = (
                f"{len(relevant)} reservoir reading(s): peak fill {max_fill:.1f}%, "
                f"peak inflow {max_inflow:.0f} cusecs"
            )
        else:
            reasoning = "No reservoir readings for this region"
        if base is not None:
            reasoning += f"; baseline {base.value}"

        return RiskAssessment(
            region=region,
            state=state,
            risk_level=level,
            base_level=base,
            observation_count=len(relevant),
            max_fill_percent=max_fill,
            max_inflow=max_inflow,
            reasoning=reasoning,
        )

    def reservoir_stress(self, region: str) -> ReservoirStressAssessment:
        items, _ = self.observations()
        return assess_reservoir_stress(region, items)

    def district_summaries(self, state: str) -> list[DistrictReservoirSummary]:
        items, _ = self.observations()
        return summarize_districts(items, state, thresholds=self.thresholds)

    def historical_pattern(self, region: str, year: Optional[int] = None) -> HistoricalPattern:
        records, _ = self.rainfall_records()
        year = year or self.clock().year
        return HistoricalAggregator(records).resolve(region, year)

    # ============ FORECAST ============

    def forecast(self, region: str, state: Optional[str] = None, days: Optional[int] = None) -> ForecastReport:
        """Forecast report for a region.

        Unavailable feeds degrade to fallbacks. Invalid parameters raise
        InvalidForecastParameter. Anything else yields a degraded report
        built from fallback factors only.
        """
        days = settings.forecast.default_days if days is None else days
        self._validate_days(days)
        state = state or state_for_region(region)

        try:
            return self._build_report(region, state, days)
        except InvalidForecastParameter:
            raise
        except Exception:
            logger.exception(f"Forecast failed for {region}, returning fallback report")
            return self._fallback_report(region, state, days)

    @staticmethod
    def _validate_days(days):
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidForecastParameter(f"days must be an integer, got {days!r}")
        if days <= 0:
            raise InvalidForecastParameter(f"days must be positive, got {days}")
        if days > settings.forecast.max_days:
            raise InvalidForecastParameter(f"days must be at most {settings.forecast.max_days}, got {days}")

    def _build_report(self, region: str, state: str, days: int) -> ForecastReport:
        logger.info(f"Forecast {region} ({state or 'unknown state'}), {days} days")

        items, reservoir_status = self.observations()
        relevant = observations_for_region(region, items, state)
        base = baseline_risk(region)
        risk_level = classify_region(relevant, base_level=base, thresholds=self.thresholds)

        reservoir_factor = None
        if reservoir_status.fetched and relevant:
            reservoir_factor = max(clamp_fill(o.reservoir_fill_percent) for o in relevant)

        records, rainfall_status = self.rainfall_records()
        pattern = HistoricalAggregator(records).resolve(region, self.clock().year)
        history = HistoryContext.from_pattern(pattern)

        reading, weather_status = self.weather(region, self._coordinates(region, relevant))
        river = self.river_client.get_river_reading(region, state, relevant)
        river_status = DataSourceStatus("river_gauge", True, records=1, detail=f"{river.river_name} (estimated)")

        forecast_days = self.generator.generate(
            region,
            risk_level,
            reservoir_factor,
            rainfall_factor(reading),
            days,
            history=history,
            river=river,
            state=state,
        )

        statuses = [reservoir_status, rainfall_status, weather_status, river_status]
        degraded = any(not s.fetched and s.detail != "not configured" for s in statuses)
        if degraded:
            logger.warning(f"Forecast for {region} built with fallback data")

        return ForecastReport(
            region=region,
            state=state,
            generated_at=self.clock(),
            days=forecast_days,
            summary=analyze(forecast_days),
            risk_level=risk_level,
            data_sources=statuses,
            model_info=self._model_info(pattern),
            degraded=degraded,
        )

    def _fallback_report(self, region: str, state: str, days: int) -> ForecastReport:
        level = baseline_risk(region) or RiskLevel.LOW
        forecast_days = self.generator.generate(region, level, None, None, days, state=state)
        return ForecastReport(
            region=region,
            state=state,
            generated_at=self.clock(),
            days=forecast_days,
            summary=analyze(forecast_days),
            risk_level=level,
            data_sources=[],
            model_info=self._model_info(None),
            degraded=True,
        )

    @staticmethod
    def _coordinates(region: str, relevant: list) -> Optional[tuple]:
        entry = REGION_CATALOG.get(region.strip().lower())
        if entry is not None:
            return entry[1], entry[2]
        for o in relevant:
            if o.coordinates != (0.0, 0.0):
                return o.coordinates
        return None

    def _model_info(self, pattern: Optional[HistoricalPattern]) -> dict:
        return {
            "version": MODEL_VERSION,
            "noise": type(self.generator.noise).__name__,
            "factors": {name: {"cap": cap, "weight": weight} for name, (cap, weight) in FACTOR_CAPS.items()},
            "history_source": pattern.source.value if pattern else None,
            "history_records": pattern.record_count if pattern else 0,
        }
