"""IMD-categorized precipitation data via the Open-Meteo API."""

from datetime import datetime, timedelta
from typing import Callable, Optional

import httpx
from loguru import logger

from floodwatch.core.exceptions import DataSourceError
from floodwatch.core.models import DailyRainfall, WeatherReading
from floodwatch.core.risk import to_number
from floodwatch.utils.config import settings
from floodwatch.utils.constants import HEAVY_RAIN_MM


def categorize_rainfall(mm: float) -> str:
    """Categorize 24h rainfall per IMD standards."""
    if mm < 2.5:
        return "no_rain"
    elif mm < 7.5:
        return "light"
    elif mm < 35.5:
        return "moderate"
    elif mm < 64.4:
        return "heavy"
    elif mm < 124.4:
        return "very_heavy"
    return "extremely_heavy"


def rainfall_factor(reading: Optional[WeatherReading]) -> Optional[float]:
    """Rainfall intensity 0-100, saturating at the IMD heavy-rain threshold."""
    if reading is None:
        return None
    return round(min(100.0, reading.rainfall_mm / HEAVY_RAIN_MM * 100), 1)


class IMDClient:
    """Client for precipitation data via Open-Meteo (free, no API key)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.base_url = base_url or settings.imd.base_url
        self.timeout = settings.imd.timeout_seconds
        self.timezone = settings.imd.timezone
        self.transport = transport
        self.now = now

    def _fetch(self, params: dict) -> dict:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(self.base_url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as e:
            logger.error(f"Weather fetch failed: {e}")
            raise DataSourceError("open-meteo", str(e)) from e
        except ValueError as e:
            raise DataSourceError("open-meteo", f"invalid JSON: {e}") from e

    def get_current_weather(self, lat: float, lon: float, days: int = 7) -> WeatherReading:
        """Last-24h rainfall plus a daily precipitation forecast."""
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": "precipitation",
            "current": "relative_humidity_2m,temperature_2m",
            "daily": "precipitation_sum",
            "timezone": self.timezone,
            "past_days": 1,
            "forecast_days": max(1, min(days, 16)),
        }
        data = self._fetch(params)

        hourly = data.get("hourly") or {}
        times = hourly.get("time") or []
        precip = hourly.get("precipitation") or []

        # Sum last 24 hours
        now = self.now()
        last_24h = 0.0
        for i, t in enumerate(times):
            try:
                t_dt = datetime.fromisoformat(t)
            except (TypeError, ValueError):
                continue
            if now - timedelta(hours=24) <= t_dt <= now and i < len(precip):
                last_24h += to_number(precip[i])

        daily = data.get("daily") or {}
        forecast = tuple(
            DailyRainfall(date=d, rainfall_mm=round(to_number(mm), 1), category=categorize_rainfall(to_number(mm)))
            for d, mm in zip(daily.get("time") or [], daily.get("precipitation_sum") or [])
        )

        current = data.get("current") or {}
        humidity = current.get("relative_humidity_2m")
        temperature = current.get("temperature_2m")

        logger.info(f"Current rainfall at ({lat}, {lon}): {last_24h:.1f}mm")
        return WeatherReading(
            rainfall_mm=round(last_24h, 1),
            humidity=None if humidity is None else to_number(humidity),
            temperature=None if temperature is None else to_number(temperature),
            forecast=forecast,
        )
