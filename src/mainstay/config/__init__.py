"""Settings for Mainstay."""

from .config import Config, ExtractionSettings, HttpConfig, MonitoringConfig, settings

__all__ = ["Config", "ExtractionSettings", "HttpConfig", "MonitoringConfig", "settings"]
