"""Core configuration and logging."""
from .config import LogFormat, Settings, StoreMode, get_settings
from .logging_config import configure_logging

__all__ = ["get_settings", "Settings", "StoreMode", "LogFormat", "configure_logging"]
