from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from config.tax_config_loader import TaxConfigLoader, get_config_loader


# (threshold, rate) - rate applies to income above threshold
BracketTable = List[Tuple[float, float]]


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized ATO constants for a given income year.

    NOTE: Values here should be reviewed annually against ATO published figures.
    tax_year is the year the income year ends in (2025 = 2024-25).
    """

    tax_year: int
    income_brackets: BracketTable

    # Depreciating asset thresholds
    immediate_deduction_threshold: float = 300.0  # $300 or less: claim outright
    low_value_pool_threshold: float = 1000.0  # Under $1,000: may be pooled

    # Low-value pool rates (diminishing value)
    pool_first_year_rate: float = 0.1875  # Half of 37.5% in the year of allocation
    pool_subsequent_year_rate: float = 0.375

    # Fallback when an asset archetype cannot be identified
    generic_asset_rate: float = 0.20
    generic_asset_life_years: int = 5

    @property
    def income_year(self) -> str:
        """ATO style label, e.g. '2024-25'."""
        return f"{self.tax_year - 1}-{str(self.tax_year)[-2:]}"

    def marginal_rate(self, taxable_income: float) -> float:
        """
        Marginal rate for the next dollar of taxable_income.

        Income exactly on a threshold stays in the lower bracket
        ($18,200 is taxed at 0%, $18,201 at 16%).
        """
        current = self.income_brackets[0][1]
        for threshold, bracket_rate in self.income_brackets:
            if taxable_income > threshold:
                current = bracket_rate
            else:
                break
        return current

    @staticmethod
    def for_2025() -> "TaxYearConfig":
        # Resident individual rates for 2024-25 (Stage 3 tax cuts).
        brackets = [
            (0, 0.0),
            (18200, 0.16),
            (45000, 0.30),
            (135000, 0.37),
            (190000, 0.45),
        ]
        return TaxYearConfig(tax_year=2025, income_brackets=brackets)

    @staticmethod
    def for_year(tax_year: int, loader: Optional[TaxConfigLoader] = None) -> "TaxYearConfig":
        """
        Load tax configuration for any supported year from YAML files.

        Args:
            tax_year: The tax year to load
            loader: Optional loader (defaults to the packaged parameter files)

        Returns:
            TaxYearConfig for the specified year

        Raises:
            ValueError: If the tax year is not supported
        """
        loader = loader or get_config_loader()
        params = loader.load_config(tax_year)

        brackets = [(float(threshold), float(r)) for threshold, r in params["income_brackets"]]
        return TaxYearConfig(
            tax_year=tax_year,
            income_brackets=brackets,
            immediate_deduction_threshold=float(params["immediate_deduction_threshold"]),
            low_value_pool_threshold=float(params["low_value_pool_threshold"]),
            pool_first_year_rate=float(params["pool_first_year_rate"]),
            pool_subsequent_year_rate=float(params["pool_subsequent_year_rate"]),
            generic_asset_rate=float(params.get("generic_asset_rate", 0.20)),
            generic_asset_life_years=int(params.get("generic_asset_life_years", 5)),
        )
