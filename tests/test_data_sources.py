from datetime import datetime

import httpx
import pytest

from conftest import make_observation
from floodwatch.core.exceptions import DataSourceError
from floodwatch.core.models import WeatherReading
from floodwatch.data_sources.imd_client import IMDClient, categorize_rainfall, rainfall_factor
from floodwatch.data_sources.reservoir_client import (
    ReservoirClient,
    fill_percent,
    parse_rainfall_row,
    parse_reservoir_row,
)
from floodwatch.data_sources.river_client import RiverGaugeClient, inflow_trend, proneness_multiplier

BASE_URL = "https://feed.example.org"

RESERVOIR_ROW = {
    "reservoir_name": "Koyna",
    "state": "Maharashtra",
    "district": "Satara",
    "current_level_mcm": 2500,
    "capacity_mcm": 2836,
    "percentage_full": 88.2,
    "inflow_cusecs": 12000,
    "outflow_cusecs": 4000,
    "lat": 17.4,
    "long": 73.75,
    "last_updated": "2024-07-01T06:00:00Z",
}


def transport_for(handler):
    return httpx.MockTransport(handler)


class TestReservoirRows:
    def test_parse_full_row(self):
        obs = parse_reservoir_row(RESERVOIR_ROW)
        assert obs.district == "Satara"
        assert obs.region_id == "satara"
        assert obs.reservoir_fill_percent == 88.2
        assert obs.net_inflow == 8000
        assert obs.coordinates == (17.4, 73.75)
        assert obs.last_updated.year == 2024

    def test_parse_row_with_nulls(self):
        obs = parse_reservoir_row({"reservoir_name": "X", "percentage_full": None, "inflow_cusecs": None, "last_updated": "garbage"})
        assert obs.district == "Unknown"
        assert obs.reservoir_fill_percent == 0.0
        assert obs.inflow_rate == 0.0
        assert obs.last_updated is None

    def test_fill_derived_from_capacity(self):
        assert fill_percent({"current_level_mcm": 50, "capacity_mcm": 200}) == 25.0
        assert fill_percent({"percentage_full": 140}) == 100.0
        assert fill_percent({"capacity_mcm": 0}) == 0.0

    def test_parse_rainfall_row(self):
        record = parse_rainfall_row({"location": "Pune", "state": "Maharashtra", "year": 2023, "month": 7, "total_rainfall_mm": "310.5"})
        assert record.month == 7
        assert record.total_rainfall_mm == 310.5

    @pytest.mark.parametrize("row", [
        {"location": "Pune", "year": 2023, "month": 13, "total_rainfall_mm": 1},
        {"location": None, "year": 2023, "month": 7, "total_rainfall_mm": 1},
        {"location": "Pune", "year": None, "month": 7, "total_rainfall_mm": 1},
    ])
    def test_unusable_rainfall_rows(self, row):
        assert parse_rainfall_row(row) is None


class TestReservoirClient:
    def test_fetch_observations(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            seen["apikey"] = request.headers.get("apikey")
            return httpx.Response(200, json=[RESERVOIR_ROW])

        client = ReservoirClient(base_url=BASE_URL, api_key="k", transport=transport_for(handler))
        observations = client.fetch_observations(state="Maharashtra")
        assert len(observations) == 1
        assert seen["path"] == "/rest/v1/indian_reservoir_levels"
        assert seen["params"]["state"] == "eq.Maharashtra"
        assert seen["apikey"] == "k"

    def test_fetch_rainfall_records_skips_bad_rows(self):
        rows = [
            {"location": "Pune", "year": 2023, "month": 7, "total_rainfall_mm": 300},
            {"location": "Pune", "year": 2023, "month": 0, "total_rainfall_mm": 300},
        ]
        client = ReservoirClient(base_url=BASE_URL, transport=transport_for(lambda r: httpx.Response(200, json=rows)))
        assert len(client.fetch_rainfall_records()) == 1

    def test_http_error_raises_data_source_error(self):
        client = ReservoirClient(base_url=BASE_URL, transport=transport_for(lambda r: httpx.Response(503)))
        with pytest.raises(DataSourceError):
            client.fetch_reservoir_rows()

    def test_non_list_payload(self):
        client = ReservoirClient(base_url=BASE_URL, transport=transport_for(lambda r: httpx.Response(200, json={"message": "x"})))
        with pytest.raises(DataSourceError):
            client.fetch_reservoir_rows()

    def test_unconfigured(self):
        client = ReservoirClient()
        assert not client.configured
        with pytest.raises(DataSourceError):
            client.fetch_observations()


class TestIMDClient:
    PAYLOAD = {
        "hourly": {
            "time": ["2024-06-30T05:00", "2024-06-30T12:00", "2024-07-01T03:00", "2024-07-01T09:00"],
            "precipitation": [50.0, 10.0, 5.5, 7.0],
        },
        "daily": {"time": ["2024-07-01", "2024-07-02"], "precipitation_sum": [12.5, 80.0]},
        "current": {"relative_humidity_2m": 88, "temperature_2m": 27.5},
    }

    def client(self, handler):
        return IMDClient(transport=transport_for(handler), now=lambda: datetime(2024, 7, 1, 6, 0))

    def test_current_weather(self):
        reading = self.client(lambda r: httpx.Response(200, json=self.PAYLOAD)).get_current_weather(19.0, 72.8)
        assert reading.rainfall_mm == 15.5
        assert reading.humidity == 88.0
        assert [d.category for d in reading.forecast] == ["moderate", "very_heavy"]

    def test_sparse_payload(self):
        reading = self.client(lambda r: httpx.Response(200, json={})).get_current_weather(19.0, 72.8)
        assert reading.rainfall_mm == 0.0
        assert reading.forecast == ()
        assert reading.temperature is None

    def test_failure_raises_data_source_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(DataSourceError):
            self.client(handler).get_current_weather(19.0, 72.8)

    @pytest.mark.parametrize("mm,category", [
        (0, "no_rain"), (5, "light"), (20, "moderate"), (50, "heavy"), (100, "very_heavy"), (200, "extremely_heavy"),
    ])
    def test_categories(self, mm, category):
        assert categorize_rainfall(mm) == category

    def test_rainfall_factor(self):
        assert rainfall_factor(None) is None
        assert rainfall_factor(WeatherReading(rainfall_mm=32.2)) == 50.0
        assert rainfall_factor(WeatherReading(rainfall_mm=500)) == 100.0


class TestRiverGauge:
    def test_known_basin(self):
        reading = RiverGaugeClient().get_river_reading("Patna", "Bihar")
        assert reading.river_name == "Ganga"
        assert reading.danger_level == 10.2
        assert reading.trend == "stable"
        assert reading.normal_level < reading.current_level < reading.warning_level

    def test_unknown_state_uses_local_river(self):
        assert RiverGaugeClient().get_river_reading("Atlantis", "Nowhere").river_name == "Local River"

    def test_trend_from_net_inflow(self):
        assert inflow_trend([make_observation(inflow=5000, outflow=1000)]) == "rising"
        assert inflow_trend([make_observation(inflow=0, outflow=2000)]) == "falling"
        assert inflow_trend([]) == "stable"

    def test_rising_river_is_higher(self):
        client = RiverGaugeClient()
        calm = client.get_river_reading("Pune", "Maharashtra")
        rising = client.get_river_reading("Pune", "Maharashtra", [make_observation(inflow=9000)])
        assert rising.current_level > calm.current_level

    def test_proneness(self):
        assert proneness_multiplier("Patna", "Bihar") == 0.8
        assert proneness_multiplier("Jaipur", "Rajasthan") == 0.4
        assert proneness_multiplier("Pune", "Maharashtra") == 0.6
