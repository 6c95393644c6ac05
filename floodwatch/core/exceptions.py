"""Error types raised by floodwatch."""


class FloodwatchError(Exception):
    """Base class for floodwatch errors."""


class DataSourceError(FloodwatchError):
    """An upstream feed (reservoirs, rainfall, weather) could not be read."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class InvalidForecastParameter(FloodwatchError, ValueError):
    """A forecast was requested with an unusable parameter."""
