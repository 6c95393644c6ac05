"""River gauge estimates from CWC basin reference levels.

There is no public live CWC feed, so levels are placed between the basin's
normal and warning marks by the region's flood proneness, and the trend
follows the net inflow of the region's reservoirs.
"""

from typing import Iterable

from loguru import logger

from floodwatch.core.models import RegionObservation, RiverReading
from floodwatch.utils.constants import DEFAULT_RIVER_BASIN, RIVER_BASINS, WARNING_LEVEL_FRACTION

HIGH_PRONENESS = ("bihar", "assam", "kerala", "odisha")
LOW_PRONENESS = ("rajasthan", "gujarat")

# Net inflow (cusecs) beyond which a river counts as rising or falling
TREND_TOLERANCE = 500.0
RISING_OFFSET_M = 0.15
FALLING_OFFSET_M = -0.1


def proneness_multiplier(region: str, state: str = "") -> float:
    """Fraction of the normal-to-warning range the river currently sits at."""
    text = f"{region} {state}".lower()
    if any(name in text for name in HIGH_PRONENESS):
        return 0.8
    if any(name in text for name in LOW_PRONENESS):
        return 0.4
    return 0.6


def inflow_trend(observations: Iterable[RegionObservation]) -> str:
    net = sum(o.net_inflow for o in observations)
    if net > TREND_TOLERANCE:
        return "rising"
    if net < -TREND_TOLERANCE:
        return "falling"
    return "stable"


class RiverGaugeClient:
    """Deterministic river level estimator keyed by state basin."""

    def __init__(self, basins: dict = None):
        self.basins = basins if basins is not None else RIVER_BASINS

    def basin_for(self, state: str) -> tuple:
        for name, basin in self.basins.items():
            if name.lower() == (state or "").strip().lower():
                return basin
        return DEFAULT_RIVER_BASIN

    def get_river_reading(
        self,
        region: str,
        state: str,
        observations: Iterable[RegionObservation] = (),
    ) -> RiverReading:
        river_name, danger, normal = self.basin_for(state)
        warning = normal + (danger - normal) * WARNING_LEVEL_FRACTION

        trend = inflow_trend(observations)
        level = normal + (warning - normal) * proneness_multiplier(region, state)
        if trend == "rising":
            level += RISING_OFFSET_M
        elif trend == "falling":
            level += FALLING_OFFSET_M
        level = max(normal * 0.8, min(danger * 1.1, level))

        logger.debug(f"{river_name} near {region}: {level:.2f}m ({trend})")
        return RiverReading(
            river_name=river_name,
            current_level=round(level, 2),
            danger_level=danger,
            warning_level=round(warning, 2),
            normal_level=normal,
            trend=trend,
        )
