from .tax_year_config import TaxYearConfig
from .tax_benefit import (
    BenefitComparison,
    get_marginal_tax_rate,
    calculate_first_year_depreciation,
    calculate_category_tax_benefit,
    calculate_depreciation_tax_benefit,
    compare_tax_benefits,
)

__all__ = [
    "TaxYearConfig",
    "BenefitComparison",
    "get_marginal_tax_rate",
    "calculate_first_year_depreciation",
    "calculate_category_tax_benefit",
    "calculate_depreciation_tax_benefit",
    "compare_tax_benefits",
]
