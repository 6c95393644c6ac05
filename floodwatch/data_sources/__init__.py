"""Data sources module."""

from floodwatch.data_sources.cache import SnapshotCache
from floodwatch.data_sources.imd_client import IMDClient, categorize_rainfall, rainfall_factor
from floodwatch.data_sources.reservoir_client import ReservoirClient
from floodwatch.data_sources.river_client import RiverGaugeClient

__all__ = ["SnapshotCache", "IMDClient", "categorize_rainfall", "rainfall_factor", "ReservoirClient", "RiverGaugeClient"]
