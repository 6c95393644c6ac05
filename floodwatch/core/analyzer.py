"""Summary statistics over a forecast sequence."""

from typing import Sequence

from floodwatch.core.models import ForecastDay, ForecastSummary
from floodwatch.utils.constants import SUSTAINED_HIGH_MIN_DAYS, SUSTAINED_HIGH_PROBABILITY


def analyze(forecast: Sequence[ForecastDay]) -> ForecastSummary:
    """Peak day, mean probability, initial trend and sustained-high-risk flag."""
    if not forecast:
        return ForecastSummary(
            peak_day=None,
            average_probability=0.0,
            initial_trend="stable",
            sustained_high_risk=False,
            high_risk_days=0,
        )

    peak = min(forecast, key=lambda d: (-d.probability, d.date))
    average = round(sum(d.probability for d in forecast) / len(forecast), 1)

    if len(forecast) >= 3:
        trend = "rising" if forecast[2].probability > forecast[0].probability else "falling"
    else:
        trend = "stable"

    high_days = sum(1 for d in forecast if d.probability > SUSTAINED_HIGH_PROBABILITY)

    return ForecastSummary(
        peak_day=peak,
        average_probability=average,
        initial_trend=trend,
        sustained_high_risk=high_days >= SUSTAINED_HIGH_MIN_DAYS,
        high_risk_days=high_days,
    )


def describe(summary: ForecastSummary) -> dict:
    """Human-readable strings for dashboards."""
    if summary.peak_day is None:
        return {
            "average_risk": "No data available",
            "peak_risk_day": "Unknown",
            "trend": "Cannot determine trend",
            "sustained_high_risk": "Insufficient data",
        }

    avg = summary.average_probability
    if avg >= 70:
        label = "Severe Risk"
    elif avg >= 50:
        label = "High Risk"
    elif avg >= 30:
        label = "Medium Risk"
    else:
        label = "Low Risk"

    trends = {
        "rising": "Rising trend - risk increasing",
        "falling": "Falling trend - risk decreasing",
        "stable": "Insufficient data for trend analysis",
    }

    if summary.sustained_high_risk:
        sustained = f"Yes, {summary.high_risk_days} days with elevated risk detected"
    else:
        sustained = "No sustained high-risk period identified"

    peak = summary.peak_day
    return {
        "average_risk": f"{label} ({avg:.1f}% average)",
        "peak_risk_day": f"{peak.date.strftime('%d %b %Y')} ({peak.probability}% probability)",
        "trend": trends[summary.initial_trend],
        "sustained_high_risk": sustained,
    }
