"""Historical monthly rainfall patterns with tiered fallback.

Resolution order for a (region, year) request:

1. the region's own records for that year;
2. the region's records averaged per calendar month across all years;
3. other regions in the same state, resolved the same way (year first,
   then all years), averaged across the peer regions;
4. the canonical monsoon curve.

Every tier yields exactly twelve months. Months without samples are 0.
"""

from typing import Iterable, Mapping, Optional

import pandas as pd

from floodwatch.core.models import HistoricalPattern, HistoricalRainfallRecord, MonthlyRainfall, PatternSource
from floodwatch.core.risk import to_number
from floodwatch.utils.constants import CANONICAL_MONSOON_CURVE, REGION_CATALOG

MONTHS = list(range(1, 13))
COLUMNS = ["region", "state", "year", "month", "rainfall_mm"]


def canonical_pattern() -> list[MonthlyRainfall]:
    return [MonthlyRainfall(month=m, rainfall_mm=v) for m, v in zip(MONTHS, CANONICAL_MONSOON_CURVE)]


class HistoricalAggregator:
    """Reduce historical rainfall rows to a 12-month pattern."""

    def __init__(
        self,
        records: Iterable[HistoricalRainfallRecord],
        region_states: Optional[Mapping[str, str]] = None,
    ):
        rows = []
        for r in records:
            month = int(to_number(r.month))
            if month < 1 or month > 12:
                continue
            rows.append({
                "region": r.region.strip().lower(),
                "state": (r.state or "").strip().lower(),
                "year": int(to_number(r.year)),
                "month": month,
                "rainfall_mm": max(0.0, to_number(r.total_rainfall_mm)),
            })
        self.frame = pd.DataFrame(rows, columns=COLUMNS)

        if region_states is None:
            region_states = {name: entry[0] for name, entry in REGION_CATALOG.items()}
        self.region_states = {k.strip().lower(): v.strip().lower() for k, v in region_states.items()}

    def __len__(self) -> int:
        return len(self.frame)

    def get_historical_pattern(self, region: str, year: int) -> list[MonthlyRainfall]:
        return list(self.resolve(region, year).months)

    def resolve(self, region: str, year: int) -> HistoricalPattern:
        key = region.strip().lower()
        frame = self.frame

        own = frame[frame["region"] == key]
        own_year = own[own["year"] == year]
        if not own_year.empty:
            return self._pattern(region, year, PatternSource.EXACT_YEAR, self._first_per_month(own_year), len(own_year))
        if not own.empty:
            return self._pattern(region, year, PatternSource.REGION_AVERAGE, self._mean_per_month(own), len(own))

        state = self.region_states.get(key, "")
        if state:
            # Rows without a state column still match through the catalog
            catalogued = [r for r, s in self.region_states.items() if s == state]
            in_state = (frame["state"] == state) | frame["region"].isin(catalogued)
            peers = frame[in_state & (frame["region"] != key)]
            if not peers.empty:
                peers_year = peers[peers["year"] == year]
                subset = peers_year if not peers_year.empty else peers
                return self._pattern(region, year, PatternSource.STATE_PEERS, self._mean_per_month(subset), len(subset))

        return HistoricalPattern(
            region=region,
            year=year,
            source=PatternSource.CANONICAL,
            months=tuple(canonical_pattern()),
            record_count=0,
        )

    @staticmethod
    def _first_per_month(df: pd.DataFrame) -> pd.Series:
        # Overlapping sources may repeat a month; the first one found wins.
        first = df.drop_duplicates(subset=["month"], keep="first")
        return first.set_index("month")["rainfall_mm"]

    @staticmethod
    def _mean_per_month(df: pd.DataFrame) -> pd.Series:
        deduped = df.drop_duplicates(subset=["region", "year", "month"], keep="first")
        return deduped.groupby("month")["rainfall_mm"].mean()

    @staticmethod
    def _pattern(region: str, year: int, source: PatternSource, by_month: pd.Series, count: int) -> HistoricalPattern:
        sampled_average = round(float(by_month.mean()), 1) if not by_month.empty else None
        filled = by_month.reindex(MONTHS, fill_value=0.0)
        months = tuple(
            MonthlyRainfall(month=int(m), rainfall_mm=round(float(v), 1))
            for m, v in filled.items()
        )
        return HistoricalPattern(
            region=region,
            year=year,
            source=source,
            months=months,
            record_count=count,
            sampled_average_mm=sampled_average,
        )


def get_historical_pattern(
    region: str,
    year: int,
    records: Iterable[HistoricalRainfallRecord] = (),
) -> list[MonthlyRainfall]:
    return HistoricalAggregator(records).get_historical_pattern(region, year)
