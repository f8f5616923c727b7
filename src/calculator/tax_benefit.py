"""
Tax Benefit Calculator.

Dollar value of tax saved by claiming an amount under a given ATO
category, at the taxpayer's marginal rate:

- Immediate-deduction categories deduct the full amount this year.
- The low-value pool (D6) deducts 18.75% in the first year and 37.5%
  of the declining balance in later years.

Figures are computed in Decimal and rounded to cents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from calculator.decimal_math import (
    ZERO,
    HUNDRED,
    to_decimal,
    money,
    multiply,
    subtract,
    divide,
    to_float,
    Numeric,
)
from calculator.tax_year_config import TaxYearConfig
from models.ato_categories import AtoCategory, DeductionTreatment

logger = logging.getLogger(__name__)

CategoryInput = Union[AtoCategory, str]


@dataclass(frozen=True)
class BenefitComparison:
    """Benefit of the current treatment versus a proposed one."""
    current_benefit: float
    suggested_benefit: float
    difference: float  # suggested - current; negative = current already optimal
    percentage_improvement: float

    @property
    def is_improvement(self) -> bool:
        return self.difference > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_benefit": self.current_benefit,
            "suggested_benefit": self.suggested_benefit,
            "difference": self.difference,
            "percentage_improvement": round(self.percentage_improvement, 2),
        }


def _default_config(config: Optional[TaxYearConfig]) -> TaxYearConfig:
    return config or TaxYearConfig.for_2025()


def _non_negative(value: Numeric, name: str) -> Decimal:
    """Convert to Decimal, rejecting negative and non-numeric input."""
    result = to_decimal(value)
    if result < 0:
        raise ValueError(f"{name} must not be negative, got {value!r}")
    return result


def _require_category(category: Optional[CategoryInput]) -> AtoCategory:
    parsed = AtoCategory.parse(category)
    if parsed is None:
        raise ValueError("A deduction category is required to calculate a tax benefit")
    return parsed


def get_marginal_tax_rate(taxable_income: Numeric, config: Optional[TaxYearConfig] = None) -> float:
    """
    Marginal rate from the progressive bracket table.

    Examples:
        >>> get_marginal_tax_rate(75000)
        0.3
        >>> get_marginal_tax_rate(18200)
        0.0
    """
    income = _non_negative(taxable_income, "taxable_income")
    return _default_config(config).marginal_rate(float(income))


def calculate_first_year_depreciation(
    amount: Numeric,
    rate_value: Numeric,
    is_first_year: bool = True,
    config: Optional[TaxYearConfig] = None,
) -> float:
    """
    Depreciation claimable for a pooled asset.

    The first year uses the pool's first-year rate (18.75%) regardless
    of rate_value; later years use rate_value.
    """
    amount_d = _non_negative(amount, "amount")
    if is_first_year:
        return to_float(money(multiply(amount_d, _default_config(config).pool_first_year_rate)))
    return to_float(money(multiply(amount_d, rate_value)))


def _deductible_amount(
    amount: Decimal,
    category: AtoCategory,
    is_first_year: bool,
    config: TaxYearConfig,
) -> Decimal:
    treatment = category.treatment
    if treatment is DeductionTreatment.IMMEDIATE:
        return amount
    elif treatment is DeductionTreatment.POOLED:
        pool_rate = config.pool_first_year_rate if is_first_year else config.pool_subsequent_year_rate
        return multiply(amount, pool_rate)
    raise ValueError(f"Unhandled deduction treatment {treatment!r} for {category.value}")


def _benefit(
    amount: Decimal,
    category: AtoCategory,
    marginal_rate: Numeric,
    is_first_year: bool,
    config: TaxYearConfig,
) -> Decimal:
    deductible = _deductible_amount(amount, category, is_first_year, config)
    return money(multiply(deductible, marginal_rate))


def calculate_category_tax_benefit(
    amount: Numeric,
    category: CategoryInput,
    taxable_income: Numeric,
    is_first_year: bool = True,
    config: Optional[TaxYearConfig] = None,
) -> float:
    """
    Tax saved by claiming amount under category.

    Args:
        amount: Expense or asset cost
        category: ATO category code
        taxable_income: Used to look up the marginal rate
        is_first_year: For pooled categories, whether this is the year of allocation
        config: Tax year constants (defaults to 2024-25)

    Returns:
        Non-negative dollar benefit, rounded to cents

    Raises:
        ValueError: On negative/non-numeric amount or income, or missing category
    """
    cfg = _default_config(config)
    amount_d = _non_negative(amount, "amount")
    parsed = _require_category(category)
    marginal = get_marginal_tax_rate(taxable_income, cfg)
    return to_float(_benefit(amount_d, parsed, marginal, is_first_year, cfg))


def calculate_depreciation_tax_benefit(
    amount: Numeric,
    depreciation_rate: Numeric,
    taxable_income: Numeric,
    config: Optional[TaxYearConfig] = None,
) -> float:
    """Tax saved by one year's depreciation of amount at depreciation_rate."""
    amount_d = _non_negative(amount, "amount")
    rate_d = _non_negative(depreciation_rate, "depreciation_rate")
    marginal = get_marginal_tax_rate(taxable_income, config)
    return to_float(money(multiply(amount_d, rate_d, marginal)))


def compare_tax_benefits(
    amount: Numeric,
    current_category: CategoryInput,
    suggested_category: CategoryInput,
    taxable_income: Numeric,
    is_first_year: bool = True,
    prior_year_rate: Optional[Numeric] = None,
    config: Optional[TaxYearConfig] = None,
) -> BenefitComparison:
    """
    Compare the benefit of two categorizations of the same amount.

    Args:
        amount: Expense or asset cost
        current_category: Category the record is in now
        suggested_category: Proposed category
        taxable_income: Used to look up the marginal rate
        is_first_year: Pool year of allocation flag
        prior_year_rate: Marginal rate the current treatment was claimed at,
                         when it differs from this year's
        config: Tax year constants (defaults to 2024-25)

    Returns:
        BenefitComparison where difference = suggested - current
    """
    cfg = _default_config(config)
    amount_d = _non_negative(amount, "amount")
    current = _require_category(current_category)
    suggested = _require_category(suggested_category)
    marginal = get_marginal_tax_rate(taxable_income, cfg)
    current_rate = marginal if prior_year_rate is None else _non_negative(prior_year_rate, "prior_year_rate")

    current_benefit = _benefit(amount_d, current, current_rate, is_first_year, cfg)
    suggested_benefit = _benefit(amount_d, suggested, marginal, is_first_year, cfg)
    difference = subtract(suggested_benefit, current_benefit)

    if current_benefit > 0:
        improvement = multiply(divide(difference, current_benefit), HUNDRED)
    elif suggested_benefit > 0:
        improvement = HUNDRED
    else:
        improvement = ZERO

    logger.debug(
        f"Compared {current.value} -> {suggested.value} on ${amount_d}: "
        f"{current_benefit} vs {suggested_benefit}"
    )

    return BenefitComparison(
        current_benefit=to_float(current_benefit),
        suggested_benefit=to_float(suggested_benefit),
        difference=to_float(difference),
        percentage_improvement=to_float(improvement),
    )
