"""
Tax Configuration Loader.

Loads ATO tax-year parameters from YAML configuration files, enabling:
- Annual bracket/threshold updates without code changes
- Environment-specific overrides
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Default config directory
CONFIG_DIR = Path(__file__).parent / "tax_parameters"

REQUIRED_PARAMS = [
    "income_brackets",
    "immediate_deduction_threshold",
    "low_value_pool_threshold",
    "pool_first_year_rate",
    "pool_subsequent_year_rate",
]


@dataclass
class ConfigMetadata:
    """Metadata about a configuration file."""
    version: str
    tax_year: int
    income_year: str
    source: str  # "ATO", "custom"
    ato_references: List[str] = field(default_factory=list)
    last_updated: str = ""
    notes: str = ""


class TaxConfigLoader:
    """
    Loads tax configuration from YAML files.

    Files are named tax_year_<year>.yaml where <year> is the year the
    income year ends in (2025 = 1 July 2024 to 30 June 2025).
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the config loader.

        Args:
            config_dir: Directory containing YAML config files.
                       Defaults to src/config/tax_parameters/
        """
        self.config_dir = config_dir or CONFIG_DIR
        self._configs: Dict[int, Dict[str, Any]] = {}
        self._metadata: Dict[int, ConfigMetadata] = {}

    def available_years(self) -> List[int]:
        """Tax years with a parameter file on disk."""
        years = []
        for path in self.config_dir.glob("tax_year_*.yaml"):
            suffix = path.stem[len("tax_year_"):]
            if suffix.isdigit():
                years.append(int(suffix))
        return sorted(years)

    def load_config(self, tax_year: int) -> Dict[str, Any]:
        """
        Load configuration for a specific tax year.

        Args:
            tax_year: The tax year to load (e.g., 2025)

        Returns:
            Dictionary of tax parameters

        Raises:
            ValueError: If no file exists for the year or required
                        parameters are missing
        """
        if tax_year in self._configs:
            return self._configs[tax_year]

        config = self._load_from_file(tax_year)
        config = self._apply_env_overrides(config, tax_year)
        self._validate_config(config, tax_year)

        self._configs[tax_year] = config
        return config

    def _load_from_file(self, tax_year: int) -> Dict[str, Any]:
        """Load configuration from the year's YAML file."""
        year_file = self.config_dir / f"tax_year_{tax_year}.yaml"
        if not year_file.exists():
            raise ValueError(
                f"Unsupported tax year {tax_year}. "
                f"Available: {self.available_years()}"
            )

        logger.info(f"Loading tax config from {year_file}")
        with open(year_file, "r", encoding="utf-8") as f:
            year_config = yaml.safe_load(f) or {}

        if "_metadata" in year_config:
            self._metadata[tax_year] = ConfigMetadata(**year_config.pop("_metadata"))

        return year_config

    def _apply_env_overrides(self, config: Dict[str, Any], tax_year: int) -> Dict[str, Any]:
        """Apply environment variable overrides to scalar parameters."""
        # Environment variables like TAX_2025_LOW_VALUE_POOL_THRESHOLD=1000
        prefix = f"TAX_{tax_year}_"

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            param_name = key[len(prefix):].lower()
            if param_name == "income_brackets":
                logger.warning(f"Ignoring env override for bracket table: {key}")
                continue
            try:
                config[param_name] = float(value)
                logger.info(f"Applied env override: {param_name}={value}")
            except ValueError:
                logger.warning(f"Could not parse env override: {key}={value}")

        return config

    def _validate_config(self, config: Dict[str, Any], tax_year: int) -> None:
        """Validate configuration for completeness and consistency."""
        missing = [p for p in REQUIRED_PARAMS if p not in config]
        if missing:
            raise ValueError(f"Missing required parameters for {tax_year}: {missing}")

        thresholds = [row[0] for row in config["income_brackets"]]
        if thresholds != sorted(thresholds):
            raise ValueError(f"Income brackets for {tax_year} are not in ascending order")

    def get_metadata(self, tax_year: int) -> Optional[ConfigMetadata]:
        """Get metadata for a tax year's configuration."""
        self.load_config(tax_year)
        return self._metadata.get(tax_year)


@lru_cache()
def get_config_loader() -> TaxConfigLoader:
    """Get the shared loader for the packaged parameter files."""
    return TaxConfigLoader()
