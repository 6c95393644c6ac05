"""Output formatters for forecast reports."""

import json

from floodwatch.core.analyzer import describe
from floodwatch.core.models import ForecastReport


class DashboardFormatter:
    """Markdown summary for dashboard operators."""

    def format(self, report: ForecastReport) -> str:
        described = describe(report.summary)
        lines = [
            f"**FLOOD FORECAST: {report.region.title()}** ({report.state or 'Unknown state'})",
            f"**Risk:** {report.risk_level.value.upper()} | **Generated:** {report.generated_at.strftime('%Y-%m-%d %H:%M')} UTC",
            "",
            "**OUTLOOK:**",
            f"- Average: {described['average_risk']}",
            f"- Peak: {described['peak_risk_day']}",
            f"- Trend: {described['trend']}",
            f"- Sustained: {described['sustained_high_risk']}",
            "",
        ]

        if report.days:
            lines.append("**DAILY:**")
            for d in report.days:
                lines.append(
                    f"- {d.date.isoformat()}: {d.probability:.1f}% [{d.risk_level.value.upper()}] "
                    f"conf {d.confidence:.0f}% | rain {d.expected_rainfall_mm:.1f}mm"
                )
            lines.append("")

        if report.degraded:
            failed = [s.name for s in report.data_sources if not s.fetched]
            note = f" ({', '.join(failed)})" if failed else ""
            lines.append(f"*Some data sources were unavailable{note}; fallback values used.*")

        return "\n".join(lines)


class ResearcherFormatter:
    """JSON with full details."""

    def format(self, report: ForecastReport) -> dict:
        data = report.to_dict()
        data["analysis"] = describe(report.summary)
        return data

    def to_json(self, report: ForecastReport) -> str:
        return json.dumps(self.format(report), indent=2, default=str)


def format_output(report: ForecastReport, audience: str = "dashboard") -> str:
    if audience == "researcher":
        return ResearcherFormatter().to_json(report)
    return DashboardFormatter().format(report)
