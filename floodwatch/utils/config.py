"""Configuration loader for floodwatch."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class DataSourceConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    reservoir_table: str = "indian_reservoir_levels"
    rainfall_table: str = "monthly_rainfall_data"
    timeout_seconds: int = 30
    page_limit: int = 10000


class IMDConfig(BaseModel):
    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_seconds: int = 30
    timezone: str = "Asia/Kolkata"


class RiskConfig(BaseModel):
    severe_fill_percent: float = 90.0
    high_fill_percent: float = 75.0
    medium_fill_percent: float = 50.0
    high_inflow_cusecs: float = 10000.0
    medium_inflow_cusecs: float = 5000.0
    low_inflow_cusecs: float = 1000.0


class ForecastConfig(BaseModel):
    default_days: int = 10
    max_days: int = 30
    cache_ttl_hours: int = 6
    noise: str = "sinusoidal"
    noise_seed: int = 42
    noise_amplitude: float = 3.0


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True
    workers: int = 1
    cors_origins: list[str] = ["http://localhost:5173"]


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    rotation: str = "10 MB"
    retention: str = "7 days"


class AppConfig(BaseModel):
    name: str = "floodwatch"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    data_source: DataSourceConfig = DataSourceConfig()
    imd: IMDConfig = IMDConfig()
    risk: RiskConfig = RiskConfig()
    forecast: ForecastConfig = ForecastConfig()
    api: APIConfig = APIConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("FLOODWATCH_DATA_URL"):
        yaml_config.setdefault("data_source", {})["base_url"] = os.getenv("FLOODWATCH_DATA_URL")
    if os.getenv("FLOODWATCH_DATA_KEY"):
        yaml_config.setdefault("data_source", {})["api_key"] = os.getenv("FLOODWATCH_DATA_KEY")
    if os.getenv("FLOODWATCH_LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("FLOODWATCH_LOG_LEVEL")

    return Settings(**yaml_config) if yaml_config else Settings()


settings = get_settings()
