"""Flood risk classification from reservoir fill and inflow."""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional

from floodwatch.core.models import (
    DistrictReservoirSummary,
    RegionObservation,
    ReservoirStressAssessment,
    RiskLevel,
)
from floodwatch.utils.config import settings
from floodwatch.utils.constants import (
    CRITICAL_FILL_PERCENT,
    FILL_THRESHOLDS,
    HIGH_NET_INFLOW,
    INFLOW_THRESHOLDS,
    OVERFLOW_FILL_PERCENT,
    REGION_CATALOG,
    REGION_RESERVOIRS,
    STRESS_FILL_POINTS,
    STRESS_LEVELS,
    STRESS_NET_INFLOW_POINTS,
)


@dataclass(frozen=True)
class RiskThresholds:
    severe_fill_percent: float = FILL_THRESHOLDS["severe"]
    high_fill_percent: float = FILL_THRESHOLDS["high"]
    medium_fill_percent: float = FILL_THRESHOLDS["medium"]
    high_inflow: float = INFLOW_THRESHOLDS["high"]
    medium_inflow: float = INFLOW_THRESHOLDS["medium"]
    low_inflow: float = INFLOW_THRESHOLDS["low"]

    @classmethod
    def from_settings(cls) -> "RiskThresholds":
        risk = settings.risk
        return cls(
            severe_fill_percent=risk.severe_fill_percent,
            high_fill_percent=risk.high_fill_percent,
            medium_fill_percent=risk.medium_fill_percent,
            high_inflow=risk.high_inflow_cusecs,
            medium_inflow=risk.medium_inflow_cusecs,
            low_inflow=risk.low_inflow_cusecs,
        )


DEFAULT_THRESHOLDS = RiskThresholds.from_settings()


@dataclass(frozen=True)
class RiskSignal:
    """A single (fill, inflow) reading contributing to a region's risk."""
    fill_percent: float = 0.0
    inflow: float = 0.0


def to_number(value) -> float:
    """Coerce feed values to float; None, NaN and junk become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def clamp_fill(value) -> float:
    return max(0.0, min(100.0, to_number(value)))


def classify_risk(
    fill_percent,
    inflow,
    current_level=None,
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
) -> RiskLevel:
    """Map reservoir fill % and inflow (cusecs) to a risk level.

    `current_level` is an optional baseline (RiskLevel, name or ordinal);
    the result never falls below it.
    """
    fill = clamp_fill(fill_percent)
    flow = max(0.0, to_number(inflow))

    if fill >= thresholds.severe_fill_percent or flow >= thresholds.high_inflow:
        level = RiskLevel.SEVERE
    elif fill >= thresholds.high_fill_percent or flow >= thresholds.medium_inflow:
        level = RiskLevel.HIGH
    elif fill >= thresholds.medium_fill_percent or flow >= thresholds.low_inflow:
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.LOW

    if current_level is not None:
        level = max(level, RiskLevel.coerce(current_level))
    return level


def combine_risk(*levels) -> RiskLevel:
    """Combine signals by taking the maximum level."""
    coerced = [RiskLevel.coerce(level) for level in levels if level is not None]
    return max(coerced, default=RiskLevel.LOW)


def combine_signals(*signals: RiskSignal) -> RiskSignal:
    """Merge signals so that classify(combined) == max(classify(each))."""
    if not signals:
        return RiskSignal()
    return RiskSignal(
        fill_percent=max(clamp_fill(s.fill_percent) for s in signals),
        inflow=max(max(0.0, to_number(s.inflow)) for s in signals),
    )


def classify_signal(signal: RiskSignal, thresholds: RiskThresholds = DEFAULT_THRESHOLDS) -> RiskLevel:
    return classify_risk(signal.fill_percent, signal.inflow, thresholds=thresholds)


def classify_region(
    observations: Iterable[RegionObservation],
    base_level=None,
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
) -> RiskLevel:
    """Risk for a region is the maximum over every contributing reading."""
    levels = [
        classify_risk(o.reservoir_fill_percent, o.inflow_rate, thresholds=thresholds)
        for o in observations
    ]
    return combine_risk(base_level, *levels)


def baseline_risk(region: str) -> Optional[RiskLevel]:
    """Catalogued baseline risk for a known city, or None."""
    entry = REGION_CATALOG.get(region.strip().lower())
    if entry is None:
        return None
    return RiskLevel.coerce(entry[3])


def state_for_region(region: str) -> str:
    entry = REGION_CATALOG.get(region.strip().lower())
    return entry[0] if entry else ""


def observations_for_region(
    region: str,
    observations: Iterable[RegionObservation],
    state: Optional[str] = None,
) -> list[RegionObservation]:
    """Readings relevant to a region: by district, known reservoir name, then state."""
    name = region.strip().lower()
    state_name = (state or state_for_region(region)).strip().lower()
    reservoir_names = [r.lower() for r in REGION_RESERVOIRS.get(name, [])]

    observations = list(observations)
    by_district = [
        o for o in observations
        if o.district.lower() == name or o.region_id.lower() == name
        or any(r in o.reservoir_name.lower() for r in reservoir_names)
    ]
    if by_district:
        return by_district
    if state_name:
        return [o for o in observations if o.state.lower() == state_name]
    return []


def assess_reservoir_stress(
    region: str,
    observations: Iterable[RegionObservation],
) -> ReservoirStressAssessment:
    """Score-based stress of the reservoirs feeding a region."""
    relevant = observations_for_region(region, observations)
    if not relevant:
        return ReservoirStressAssessment(
            region=region,
            risk_level=RiskLevel.LOW,
            probability_increase=0,
            affected_population=0,
            average_score=0.0,
            relevant_reservoirs=0,
            reasoning="No relevant reservoir data found for this region.",
        )

    total = 0.0
    critical = high_inflow = overflow = 0
    for o in relevant:
        fill = clamp_fill(o.reservoir_fill_percent)
        net_inflow = to_number(o.inflow_rate) - to_number(o.outflow_rate)

        score = 0.0
        for minimum, points in STRESS_FILL_POINTS:
            if fill >= minimum:
                score += points
                break
        if fill >= CRITICAL_FILL_PERCENT:
            critical += 1
            if fill >= OVERFLOW_FILL_PERCENT and net_inflow > 0:
                overflow += 1

        for minimum, points in STRESS_NET_INFLOW_POINTS:
            if net_inflow > minimum:
                score += points
                break
        if net_inflow > HIGH_NET_INFLOW:
            high_inflow += 1

        total += score

    avg = total / len(relevant)
    reasoning = f"Flood risk for {region}: "

    if avg >= STRESS_LEVELS["severe"][0] or overflow > 0:
        level = RiskLevel.SEVERE
        reasoning += f"Severe risk due to high reservoir levels (avg score: {avg:.0f})"
        if overflow:
            reasoning += f" and {overflow} reservoir(s) nearing overflow."
    elif avg >= STRESS_LEVELS["high"][0] or critical > 0:
        level = RiskLevel.HIGH
        reasoning += f"High risk, average reservoir stress is significant (avg score: {avg:.0f})"
        if critical:
            reasoning += f" with {critical} reservoir(s) at critical levels."
    elif avg >= STRESS_LEVELS["medium"][0] or high_inflow > 0:
        level = RiskLevel.MEDIUM
        reasoning += f"Medium risk with some reservoir stress (avg score: {avg:.0f})"
        if high_inflow:
            reasoning += f" and {high_inflow} reservoir(s) experiencing high inflows."
    else:
        level = RiskLevel.LOW
        reasoning += f"Low risk, reservoir conditions are stable (avg score: {avg:.0f})."

    _, increase, population = STRESS_LEVELS[level.value]
    return ReservoirStressAssessment(
        region=region,
        risk_level=level,
        probability_increase=increase,
        affected_population=population,
        average_score=round(avg, 1),
        relevant_reservoirs=len(relevant),
        reasoning=reasoning.strip(),
    )


def summarize_districts(
    observations: Iterable[RegionObservation],
    state: str,
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
) -> list[DistrictReservoirSummary]:
    """Group a state's reservoirs by district."""
    grouped = defaultdict(list)
    for o in observations:
        if o.state.lower() == state.lower():
            grouped[o.district or "Unknown"].append(o)

    summaries = []
    for district, items in grouped.items():
        fills = [clamp_fill(o.reservoir_fill_percent) for o in items]
        summaries.append(DistrictReservoirSummary(
            district=district,
            state=items[0].state,
            coordinates=items[0].coordinates,
            reservoir_count=len(items),
            avg_fill_percent=round(sum(fills) / len(fills), 2),
            total_inflow=sum(max(0.0, to_number(o.inflow_rate)) for o in items),
            risk_level=classify_region(items, thresholds=thresholds),
        ))

    summaries.sort(key=lambda s: (-s.risk_level.rank, s.district))
    return summaries
