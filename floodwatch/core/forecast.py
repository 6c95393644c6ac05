"""N-day flood probability forecast.

Each day combines five capped factors into a base probability, shapes it
with a risk-level trend, and adds injectable deterministic noise.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional, Protocol

import numpy as np

from floodwatch.core.exceptions import InvalidForecastParameter
from floodwatch.core.models import FactorBreakdown, ForecastDay, HistoricalPattern, PatternSource, RiskLevel, RiverReading
from floodwatch.core.risk import state_for_region, to_number
from floodwatch.utils.config import settings
from floodwatch.utils.constants import (
    CONFIDENCE_DECAY_PER_DAY,
    CONFIDENCE_FLOOR,
    CONFIDENCE_START,
    DEFAULT_PRONENESS_POINTS,
    DEFAULT_TERRAIN_POINTS,
    EXPECTED_RAINFALL_MULTIPLIER,
    FACTOR_CAPS,
    FALLBACK_AVERAGE_RAINFALL_MM,
    FALLBACK_HISTORICAL_POINTS,
    FALLBACK_RAINFALL_FACTOR,
    FALLBACK_RESERVOIR_FACTOR,
    FLOOD_PRONE_STATES,
    HISTORICAL_RAINFALL_BONUS,
    MISSING_RESERVOIR_PENALTY,
    PROBABILITY_MAX,
    PROBABILITY_MIN,
    PROBABILITY_THRESHOLDS,
    RIVER_RISE_PER_PROBABILITY_M,
    SEASONAL_COEFFICIENTS,
    SPARSE_HISTORY_PENALTY,
    SPARSE_HISTORY_RECORDS,
    TERRAIN_CLASSES,
)


# ============ NOISE SOURCES ============

class NoiseSource(Protocol):
    def __call__(self, day_index: int) -> float: ...


class NoNoise:
    def __call__(self, day_index: int) -> float:
        return 0.0


@dataclass(frozen=True)
class SinusoidalNoise:
    """Pure function of the day index."""
    amplitude: float = 3.0
    frequency: float = 0.7

    def __call__(self, day_index: int) -> float:
        return self.amplitude * math.sin(day_index * self.frequency)


@dataclass(frozen=True)
class SeededNoise:
    """Uniform noise, reproducible per (seed, day)."""
    seed: int = 42
    amplitude: float = 3.0

    def __call__(self, day_index: int) -> float:
        rng = np.random.default_rng([abs(self.seed), abs(day_index)])
        return float(rng.uniform(-self.amplitude, self.amplitude))


def build_noise(kind: str, seed: int = 42, amplitude: float = 3.0) -> NoiseSource:
    kind = (kind or "none").lower()
    if kind == "sinusoidal":
        return SinusoidalNoise(amplitude=amplitude)
    if kind == "seeded":
        return SeededNoise(seed=seed, amplitude=amplitude)
    if kind == "none":
        return NoNoise()
    raise ValueError(f"Unknown noise source: {kind}")


# ============ FACTORS ============

@dataclass(frozen=True)
class HistoryContext:
    """What the forecast knows about past rainfall."""
    record_count: int = 0
    average_rainfall_mm: Optional[float] = None

    @classmethod
    def from_pattern(cls, pattern: HistoricalPattern) -> "HistoryContext":
        if pattern.source == PatternSource.CANONICAL:
            return cls(record_count=0, average_rainfall_mm=None)
        return cls(record_count=pattern.record_count, average_rainfall_mm=pattern.sampled_average_mm)


def trend_multiplier(risk_level: RiskLevel, day_index: int) -> float:
    """Shape of the forecast over the window for a given risk level."""
    if risk_level == RiskLevel.SEVERE:
        # High start, steady decline
        return max(0.8, 1.3 - 0.05 * day_index)
    if risk_level == RiskLevel.HIGH:
        # Peaks on day 4
        return max(0.85, 1.25 - 0.06 * abs(day_index - 4))
    if risk_level == RiskLevel.MEDIUM:
        return 1.0 + 0.15 * math.sin(0.9 * day_index)
    return 0.75


def probability_risk_level(probability: float) -> RiskLevel:
    if probability >= PROBABILITY_THRESHOLDS["severe"]:
        return RiskLevel.SEVERE
    if probability >= PROBABILITY_THRESHOLDS["high"]:
        return RiskLevel.HIGH
    if probability >= PROBABILITY_THRESHOLDS["medium"]:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def terrain_points(region: str) -> float:
    name = region.lower()
    for keywords, points in TERRAIN_CLASSES:
        if any(k in name for k in keywords):
            return points
    return DEFAULT_TERRAIN_POINTS


def proneness_points(region: str, state: str = "") -> float:
    text = f"{region} {state or state_for_region(region)}".lower()
    for name, points in FLOOD_PRONE_STATES.items():
        if name in text:
            return points
    return DEFAULT_PRONENESS_POINTS


def historical_points(region: str, state: str, history: Optional[HistoryContext]) -> float:
    cap = FACTOR_CAPS["historical_pattern"][0]
    if history is None or history.average_rainfall_mm is None:
        return FALLBACK_HISTORICAL_POINTS
    points = proneness_points(region, state)
    for minimum, bonus in HISTORICAL_RAINFALL_BONUS:
        if history.average_rainfall_mm > minimum:
            points += bonus
            break
    return min(cap, points)


def river_intensity(river: RiverReading) -> float:
    intensity = river.danger_ratio * 100
    if river.trend == "rising":
        intensity *= 1.3
    elif river.trend == "falling":
        intensity *= 0.8
    return max(0.0, min(100.0, intensity))


def _intensity(value, fallback: float) -> float:
    if value is None:
        return fallback
    return max(0.0, min(100.0, to_number(value)))


# ============ GENERATOR ============

class ForecastGenerator:
    """Deterministic N-day flood probability forecaster."""

    def __init__(
        self,
        noise: Optional[NoiseSource] = None,
        today: Callable[[], date] = date.today,
    ):
        self.noise = noise if noise is not None else NoNoise()
        self.today = today

    def generate(
        self,
        region: str,
        risk_level,
        reservoir_factor: Optional[float],
        rainfall_factor: Optional[float],
        days: int,
        history: Optional[HistoryContext] = None,
        river: Optional[RiverReading] = None,
        start_date: Optional[date] = None,
        state: str = "",
    ) -> list[ForecastDay]:
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidForecastParameter(f"days must be an integer, got {days!r}")
        if days <= 0:
            raise InvalidForecastParameter(f"days must be positive, got {days}")

        level = RiskLevel.coerce(risk_level)
        start = start_date or self.today()

        has_reservoir = reservoir_factor is not None
        reservoir = _intensity(reservoir_factor, FALLBACK_RESERVOIR_FACTOR)
        if river is not None:
            reservoir = max(reservoir, river_intensity(river))
        rainfall = _intensity(rainfall_factor, FALLBACK_RAINFALL_FACTOR)

        penalty = 0.0
        if history is None or history.record_count < SPARSE_HISTORY_RECORDS:
            penalty += SPARSE_HISTORY_PENALTY
        if not has_reservoir:
            penalty += MISSING_RESERVOIR_PENALTY

        average_rainfall = FALLBACK_AVERAGE_RAINFALL_MM
        if history is not None and history.average_rainfall_mm is not None:
            average_rainfall = history.average_rainfall_mm

        hist_points = historical_points(region, state, history)
        terrain = terrain_points(region)

        forecast = []
        for day_index in range(days):
            day = start + timedelta(days=day_index)
            factors = self._factors(rainfall, reservoir, hist_points, terrain, day, day_index)

            probability = self._base_probability(factors) * trend_multiplier(level, day_index)
            probability += self.noise(day_index)
            probability = round(max(PROBABILITY_MIN, min(PROBABILITY_MAX, probability)), 1)

            confidence = CONFIDENCE_START - CONFIDENCE_DECAY_PER_DAY * day_index - penalty
            confidence = max(CONFIDENCE_FLOOR, min(CONFIDENCE_START, confidence))

            expected = probability / 100 * average_rainfall * EXPECTED_RAINFALL_MULTIPLIER
            river_change = None
            if river is not None:
                river_change = round(probability / 100 * RIVER_RISE_PER_PROBABILITY_M, 2)

            forecast.append(ForecastDay(
                date=day,
                day_index=day_index,
                probability=probability,
                confidence=confidence,
                expected_rainfall_mm=round(expected, 1),
                risk_level=probability_risk_level(probability),
                factors=factors,
                river_level_change_m=river_change,
            ))

        return forecast

    @staticmethod
    def _factors(
        rainfall: float,
        reservoir: float,
        hist_points: float,
        terrain: float,
        day: date,
        day_index: int,
    ) -> FactorBreakdown:
        caps = {name: cap for name, (cap, _) in FACTOR_CAPS.items()}
        saturation = rainfall * 0.2 + reservoir * 0.05 + day_index * 0.5
        seasonal = terrain * SEASONAL_COEFFICIENTS[day.month - 1]
        return FactorBreakdown(
            rainfall=round(caps["rainfall"] * rainfall / 100, 2),
            reservoir=round(caps["reservoir"] * reservoir / 100, 2),
            ground_saturation=round(min(caps["ground_saturation"], saturation), 2),
            historical_pattern=round(min(caps["historical_pattern"], hist_points), 2),
            seasonal_terrain=round(min(caps["seasonal_terrain"], seasonal), 2),
        )

    @staticmethod
    def _base_probability(factors: FactorBreakdown) -> float:
        points = factors.to_dict()
        total = 0.0
        for name, (cap, weight) in FACTOR_CAPS.items():
            total += weight * points[name] / cap
        return total * 100


def default_generator() -> ForecastGenerator:
    cfg = settings.forecast
    return ForecastGenerator(noise=build_noise(cfg.noise, cfg.noise_seed, cfg.noise_amplitude))


def generate_forecast(
    region: str,
    risk_level,
    reservoir_factor: Optional[float],
    rainfall_factor: Optional[float],
    days: int,
    **kwargs,
) -> list[ForecastDay]:
    return default_generator().generate(region, risk_level, reservoir_factor, rainfall_factor, days, **kwargs)
