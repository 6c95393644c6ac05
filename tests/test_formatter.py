import json
from datetime import datetime, timezone

from conftest import make_day
from floodwatch.core.analyzer import analyze
from floodwatch.core.formatter import format_output
from floodwatch.core.models import DataSourceStatus, ForecastReport, RiskLevel


def report(degraded=False):
    days = [make_day(i, p) for i, p in enumerate([40.0, 75.0, 80.0, 72.0])]
    return ForecastReport(
        region="patna",
        state="Bihar",
        generated_at=datetime(2024, 7, 1, 6, 0, tzinfo=timezone.utc),
        days=days,
        summary=analyze(days),
        risk_level=RiskLevel.SEVERE,
        data_sources=[DataSourceStatus("reservoirs", not degraded), DataSourceStatus("weather", True)],
        degraded=degraded,
    )


def test_dashboard_markdown():
    text = format_output(report())
    assert text.startswith("**FLOOD FORECAST: Patna** (Bihar)")
    assert "**Risk:** SEVERE" in text
    assert "Rising trend - risk increasing" in text
    assert "- 2024-07-03: 80.0%" in text
    assert "fallback values" not in text


def test_dashboard_notes_degraded_sources():
    assert "unavailable (reservoirs)" in format_output(report(degraded=True))


def test_researcher_json():
    data = json.loads(format_output(report(), "researcher"))
    assert data["region"] == "patna"
    assert len(data["forecasts"]) == 4
    assert data["summary"]["sustained_high_risk"] is True
    assert data["analysis"]["average_risk"] == "High Risk (66.8% average)"
