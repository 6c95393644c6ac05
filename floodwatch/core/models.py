"""Domain models for flood risk and forecasting."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from floodwatch.utils.constants import RISK_LEVELS


class RiskLevel(str, Enum):
    """Ordinal flood risk: low < medium < high < severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return RISK_LEVELS[self.value]["rank"]

    @property
    def color(self) -> str:
        return RISK_LEVELS[self.value]["color"]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def coerce(cls, value) -> "RiskLevel":
        """Accept a RiskLevel, its name, or an ordinal 0..3. Anything else is LOW."""
        if isinstance(value, RiskLevel):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.LOW
        if isinstance(value, int) and not isinstance(value, bool):
            for level in cls:
                if level.rank == value:
                    return level
        return cls.LOW


class PatternSource(str, Enum):
    """Which fallback tier produced a historical rainfall pattern."""

    EXACT_YEAR = "exact_year"
    REGION_AVERAGE = "region_average"
    STATE_PEERS = "state_peers"
    CANONICAL = "canonical"


@dataclass(frozen=True)
class RegionObservation:
    """One reservoir reading for a region, from a single fetch cycle."""
    region_id: str
    state: str
    district: str
    coordinates: tuple[float, float] = (0.0, 0.0)
    reservoir_fill_percent: float = 0.0
    inflow_rate: float = 0.0
    outflow_rate: float = 0.0
    river_level: Optional[float] = None
    reservoir_name: str = ""
    last_updated: Optional[datetime] = None

    @property
    def net_inflow(self) -> float:
        return self.inflow_rate - self.outflow_rate

    def to_dict(self) -> dict:
        return {
            "region_id": self.region_id,
            "state": self.state,
            "district": self.district,
            "coordinates": list(self.coordinates),
            "reservoir_name": self.reservoir_name,
            "reservoir_fill_percent": self.reservoir_fill_percent,
            "inflow_rate": self.inflow_rate,
            "outflow_rate": self.outflow_rate,
            "river_level": self.river_level,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class HistoricalRainfallRecord:
    region: str
    year: int
    month: int
    total_rainfall_mm: float
    state: Optional[str] = None


@dataclass(frozen=True)
class MonthlyRainfall:
    month: int
    rainfall_mm: float


@dataclass(frozen=True)
class HistoricalPattern:
    """Twelve monthly rainfall values plus the tier they came from."""
    region: str
    year: int
    source: PatternSource
    months: tuple[MonthlyRainfall, ...]
    record_count: int = 0
    # Mean over months that actually had samples; None for the canonical curve
    sampled_average_mm: Optional[float] = None

    @property
    def average_rainfall_mm(self) -> float:
        return sum(m.rainfall_mm for m in self.months) / len(self.months)

    def to_dict(self) -> dict:
        return {
            "region": self.region,
            "year": self.year,
            "source": self.source.value,
            "record_count": self.record_count,
            "average_rainfall_mm": round(self.average_rainfall_mm, 1),
            "sampled_average_mm": self.sampled_average_mm,
            "months": [{"month": m.month, "rainfall_mm": m.rainfall_mm} for m in self.months],
        }


@dataclass(frozen=True)
class FactorBreakdown:
    """Capped points contributed by each factor."""
    rainfall: float
    reservoir: float
    ground_saturation: float
    historical_pattern: float
    seasonal_terrain: float

    def to_dict(self) -> dict:
        return {
            "rainfall": self.rainfall,
            "reservoir": self.reservoir,
            "ground_saturation": self.ground_saturation,
            "historical_pattern": self.historical_pattern,
            "seasonal_terrain": self.seasonal_terrain,
        }


@dataclass(frozen=True)
class ForecastDay:
    date: date
    day_index: int
    probability: float
    confidence: float
    expected_rainfall_mm: float
    risk_level: RiskLevel
    factors: FactorBreakdown
    river_level_change_m: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day_index": self.day_index,
            "probability": self.probability,
            "confidence": self.confidence,
            "expected_rainfall_mm": self.expected_rainfall_mm,
            "risk_level": self.risk_level.value,
            "factors": self.factors.to_dict(),
            "river_level_change_m": self.river_level_change_m,
        }


@dataclass(frozen=True)
class ForecastSummary:
    peak_day: Optional[ForecastDay]
    average_probability: float
    initial_trend: str
    sustained_high_risk: bool
    high_risk_days: int = 0

    def to_dict(self) -> dict:
        return {
            "peak_day": self.peak_day.to_dict() if self.peak_day else None,
            "average_probability": self.average_probability,
            "initial_trend": self.initial_trend,
            "sustained_high_risk": self.sustained_high_risk,
            "high_risk_days": self.high_risk_days,
        }


@dataclass(frozen=True)
class DailyRainfall:
    date: str
    rainfall_mm: float
    category: str = "no_rain"


@dataclass(frozen=True)
class WeatherReading:
    """Current weather for a location; optional forecast enrichment."""
    rainfall_mm: float
    humidity: Optional[float] = None
    temperature: Optional[float] = None
    forecast: tuple[DailyRainfall, ...] = ()
    source: str = "Open-Meteo API"


@dataclass(frozen=True)
class RiverReading:
    river_name: str
    current_level: float
    danger_level: float
    warning_level: float
    normal_level: float
    trend: str = "stable"

    @property
    def danger_ratio(self) -> float:
        if self.danger_level <= 0:
            return 0.0
        return self.current_level / self.danger_level

    def to_dict(self) -> dict:
        return {
            "river_name": self.river_name,
            "current_level": self.current_level,
            "danger_level": self.danger_level,
            "warning_level": self.warning_level,
            "normal_level": self.normal_level,
            "trend": self.trend,
        }


@dataclass(frozen=True)
class RiskAssessment:
    region: str
    state: str
    risk_level: RiskLevel
    base_level: Optional[RiskLevel]
    observation_count: int
    max_fill_percent: float
    max_inflow: float
    reasoning: str

    def to_dict(self) -> dict:
        return {
            "region": self.region,
            "state": self.state,
            "risk_level": self.risk_level.value,
            "base_level": self.base_level.value if self.base_level else None,
            "observation_count": self.observation_count,
            "max_fill_percent": self.max_fill_percent,
            "max_inflow": self.max_inflow,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class ReservoirStressAssessment:
    region: str
    risk_level: RiskLevel
    probability_increase: int
    affected_population: int
    average_score: float
    relevant_reservoirs: int
    reasoning: str

    def to_dict(self) -> dict:
        return {
            "region": self.region,
            "risk_level": self.risk_level.value,
            "probability_increase": self.probability_increase,
            "affected_population": self.affected_population,
            "average_score": self.average_score,
            "relevant_reservoirs": self.relevant_reservoirs,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class DistrictReservoirSummary:
    district: str
    state: str
    coordinates: tuple[float, float]
    reservoir_count: int
    avg_fill_percent: float
    total_inflow: float
    risk_level: RiskLevel

    def to_dict(self) -> dict:
        return {
            "district": self.district,
            "state": self.state,
            "coordinates": list(self.coordinates),
            "reservoir_count": self.reservoir_count,
            "avg_fill_percent": self.avg_fill_percent,
            "total_inflow": self.total_inflow,
            "risk_level": self.risk_level.value,
        }


@dataclass(frozen=True)
class DataSourceStatus:
    name: str
    fetched: bool
    records: int = 0
    detail: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "fetched": self.fetched, "records": self.records, "detail": self.detail}


@dataclass
class ForecastReport:
    """Complete forecast output for one region."""
    region: str
    state: str
    generated_at: datetime
    days: list
    summary: ForecastSummary
    risk_level: RiskLevel
    data_sources: list = field(default_factory=list)
    model_info: dict = field(default_factory=dict)
    degraded: bool = False

    def to_dict(self) -> dict:
        return {
            "region": self.region,
            "state": self.state,
            "generated_at": self.generated_at.isoformat(),
            "risk_level": self.risk_level.value,
            "degraded": self.degraded,
            "forecasts": [d.to_dict() for d in self.days],
            "summary": self.summary.to_dict(),
            "data_sources": [s.to_dict() for s in self.data_sources],
            "model_info": self.model_info,
        }
