"""Main entry point for floodwatch."""

import sys
from loguru import logger

from floodwatch.utils.logger import setup_logging

USAGE = "Usage: python main.py [api|forecast <region> [days] [researcher]|risk <region>]"


def main():
    """Run the application."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    setup_logging()
    cmd = sys.argv[1]

    if cmd == "api":
        import uvicorn
        from floodwatch.utils.config import settings
        logger.info("Starting API server...")
        uvicorn.run("floodwatch.api.main:app", host=settings.api.host, port=settings.api.port, reload=settings.api.reload)

    elif cmd == "forecast":
        if len(sys.argv) < 3:
            print(USAGE)
            sys.exit(1)
        from floodwatch.core.exceptions import InvalidForecastParameter
        from floodwatch.core.formatter import format_output
        from floodwatch.core.service import FloodForecastService

        days = int(sys.argv[3]) if len(sys.argv) > 3 and sys.argv[3].lstrip("-").isdigit() else None
        audience = "researcher" if "researcher" in sys.argv[3:] else "dashboard"
        try:
            report = FloodForecastService.from_settings().forecast(sys.argv[2], days=days)
        except InvalidForecastParameter as e:
            print(f"Invalid request: {e}")
            sys.exit(2)
        print(format_output(report, audience))

    elif cmd == "risk":
        if len(sys.argv) < 3:
            print(USAGE)
            sys.exit(1)
        from floodwatch.core.service import FloodForecastService
        service = FloodForecastService.from_settings()
        assessment = service.assess_region_risk(sys.argv[2])
        stress = service.reservoir_stress(sys.argv[2])
        print(f"{assessment.region.title()}: {assessment.risk_level.value.upper()}")
        print(f"  {assessment.reasoning}")
        print(f"  {stress.reasoning}")

    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
