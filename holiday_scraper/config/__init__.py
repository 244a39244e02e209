"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import AppConfig, FetcherConfig, StorageConfig, TableLayout

__all__ = [
    "AppConfig",
    "ConfigLocator",
    "ConfigRepository",
    "FetcherConfig",
    "StorageConfig",
    "TableLayout",
]
