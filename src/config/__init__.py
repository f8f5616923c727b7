"""Configuration module for the categorization suggestion engine."""

from .settings import SuggestionSettings, get_settings
from .tax_config_loader import TaxConfigLoader, ConfigMetadata, get_config_loader

__all__ = [
    "SuggestionSettings",
    "get_settings",
    "TaxConfigLoader",
    "ConfigMetadata",
    "get_config_loader",
]
