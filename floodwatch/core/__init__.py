"""Core module."""
from floodwatch.core.analyzer import analyze
from floodwatch.core.forecast import ForecastGenerator, generate_forecast
from floodwatch.core.historical import HistoricalAggregator, get_historical_pattern
from floodwatch.core.models import RiskLevel
from floodwatch.core.risk import classify_risk
