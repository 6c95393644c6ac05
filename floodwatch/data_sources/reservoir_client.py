"""Reservoir level and monthly rainfall feed (PostgREST / Supabase tables)."""

from datetime import datetime
from typing import Optional

import httpx
from loguru import logger

from floodwatch.core.exceptions import DataSourceError
from floodwatch.core.models import HistoricalRainfallRecord, RegionObservation
from floodwatch.core.risk import clamp_fill, to_number
from floodwatch.utils.config import settings

RESERVOIR_COLUMNS = (
    "reservoir_name,state,district,current_level_mcm,capacity_mcm,percentage_full,"
    "inflow_cusecs,outflow_cusecs,lat,long,last_updated"
)
RAINFALL_COLUMNS = "location,state,year,month,total_rainfall_mm"


def _parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def fill_percent(row: dict) -> float:
    """Use percentage_full, else derive it from current level over capacity."""
    if row.get("percentage_full") is not None:
        return clamp_fill(row["percentage_full"])
    capacity = to_number(row.get("capacity_mcm"))
    if capacity > 0:
        return clamp_fill(to_number(row.get("current_level_mcm")) / capacity * 100)
    return 0.0


def parse_reservoir_row(row: dict) -> RegionObservation:
    district = row.get("district") or "Unknown"
    name = row.get("reservoir_name") or "Unknown Reservoir"
    return RegionObservation(
        region_id=district.lower(),
        state=row.get("state") or "Unknown",
        district=district,
        coordinates=(to_number(row.get("lat")), to_number(row.get("long"))),
        reservoir_fill_percent=fill_percent(row),
        inflow_rate=max(0.0, to_number(row.get("inflow_cusecs"))),
        outflow_rate=max(0.0, to_number(row.get("outflow_cusecs"))),
        river_level=None,
        reservoir_name=name,
        last_updated=_parse_timestamp(row.get("last_updated")),
    )


def parse_rainfall_row(row: dict) -> Optional[HistoricalRainfallRecord]:
    location = row.get("location")
    month = int(to_number(row.get("month")))
    year = int(to_number(row.get("year")))
    if not location or not 1 <= month <= 12 or year <= 0:
        return None
    return HistoricalRainfallRecord(
        region=location,
        year=year,
        month=month,
        total_rainfall_mm=max(0.0, to_number(row.get("total_rainfall_mm"))),
        state=row.get("state") or None,
    )


class ReservoirClient:
    """Reads the reservoir and rainfall tables over the PostgREST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        cfg = settings.data_source
        self.base_url = (base_url or cfg.base_url or "").rstrip("/")
        self.api_key = api_key or cfg.api_key
        self.timeout = cfg.timeout_seconds
        self.limit = cfg.page_limit
        self.reservoir_table = cfg.reservoir_table
        self.rainfall_table = cfg.rainfall_table
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _get(self, table: str, params: dict) -> list[dict]:
        if not self.configured:
            raise DataSourceError(table, "no data source URL configured")

        url = f"{self.base_url}/rest/v1/{table}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(url, params=params, headers=self._headers())
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"{table} fetch failed: {e}")
            raise DataSourceError(table, str(e)) from e
        except ValueError as e:
            raise DataSourceError(table, f"invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise DataSourceError(table, f"expected a list of rows, got {type(data).__name__}")
        return data

    def fetch_reservoir_rows(self, state: Optional[str] = None) -> list[dict]:
        params = {
            "select": RESERVOIR_COLUMNS,
            "reservoir_name": "not.is.null",
            "order": "last_updated.desc",
            "limit": self.limit,
        }
        if state:
            params["state"] = f"eq.{state}"
        rows = self._get(self.reservoir_table, params)
        logger.info(f"Fetched {len(rows)} reservoir rows")
        return rows

    def fetch_rainfall_rows(self, region: Optional[str] = None) -> list[dict]:
        params = {
            "select": RAINFALL_COLUMNS,
            "order": "year.desc,month.desc",
            "limit": self.limit,
        }
        if region:
            params["location"] = f"ilike.*{region}*"
        rows = self._get(self.rainfall_table, params)
        logger.info(f"Fetched {len(rows)} rainfall rows")
        return rows

    def fetch_observations(self, state: Optional[str] = None) -> list[RegionObservation]:
        return [parse_reservoir_row(r) for r in self.fetch_reservoir_rows(state)]

    def fetch_rainfall_records(self, region: Optional[str] = None) -> list[HistoricalRainfallRecord]:
        records = (parse_rainfall_row(r) for r in self.fetch_rainfall_rows(region))
        return [r for r in records if r is not None]
