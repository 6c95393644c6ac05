"""Shared fixtures."""

import os

os.environ.setdefault("APP_ENV", "test")

from datetime import date, datetime, timedelta, timezone

import pytest

from floodwatch.core.exceptions import DataSourceError
from floodwatch.core.forecast import ForecastGenerator, NoNoise
from floodwatch.core.models import FactorBreakdown, ForecastDay, HistoricalRainfallRecord, RegionObservation, RiskLevel

START = date(2024, 7, 1)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class StubReservoirClient:
    """Stands in for ReservoirClient; set `fail` to simulate an outage."""

    configured = True

    def __init__(self, observations=(), records=(), fail=False):
        self.observations = list(observations)
        self.records = list(records)
        self.fail = fail
        self.calls = 0

    def fetch_observations(self, state=None):
        self.calls += 1
        if self.fail:
            raise DataSourceError("indian_reservoir_levels", "connection refused")
        return self.observations

    def fetch_rainfall_records(self, region=None):
        if self.fail:
            raise DataSourceError("monthly_rainfall_data", "connection refused")
        return self.records


def make_observation(district="Mumbai", state="Maharashtra", fill=40.0, inflow=0.0, outflow=0.0, name=""):
    return RegionObservation(
        region_id=district.lower(),
        state=state,
        district=district,
        coordinates=(19.0, 72.8),
        reservoir_fill_percent=fill,
        inflow_rate=inflow,
        outflow_rate=outflow,
        reservoir_name=name or f"{district} Dam",
    )


def make_day(index: int, probability: float, start: date = START) -> ForecastDay:
    return ForecastDay(
        date=start + timedelta(days=index),
        day_index=index,
        probability=probability,
        confidence=90.0,
        expected_rainfall_mm=10.0,
        risk_level=RiskLevel.LOW,
        factors=FactorBreakdown(0.0, 0.0, 0.0, 0.0, 0.0),
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 7, 1, 6, 0, tzinfo=timezone.utc))


@pytest.fixture
def generator():
    return ForecastGenerator(noise=NoNoise(), today=lambda: START)


@pytest.fixture
def rainfall_records():
    return [
        HistoricalRainfallRecord("Pune", 2023, 6, 150.0, "Maharashtra"),
        HistoricalRainfallRecord("Pune", 2023, 7, 300.0, "Maharashtra"),
        HistoricalRainfallRecord("Pune", 2022, 7, 200.0, "Maharashtra"),
        HistoricalRainfallRecord("Nagpur", 2023, 7, 100.0, "Maharashtra"),
        HistoricalRainfallRecord("Patna", 2023, 8, 250.0, "Bihar"),
    ]
