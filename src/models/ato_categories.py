"""ATO deduction category codes (individual tax return, D1-D15)."""

from enum import Enum
from typing import Optional, Union


class DeductionTreatment(str, Enum):
    """How a category's amount reaches the return."""
    IMMEDIATE = "immediate"  # Full amount deducted in the year incurred
    POOLED = "pooled"        # Depreciated through the low-value pool


class AtoCategory(str, Enum):
    """ATO deduction category labels."""
    D1 = "D1"
    D2 = "D2"
    D3 = "D3"
    D4 = "D4"
    D5 = "D5"
    D6 = "D6"
    D7 = "D7"
    D8 = "D8"
    D9 = "D9"
    D10 = "D10"
    D11 = "D11"
    D12 = "D12"
    D13 = "D13"
    D14 = "D14"
    D15 = "D15"

    @property
    def display_name(self) -> str:
        return CATEGORY_DISPLAY_NAMES[self]

    @property
    def treatment(self) -> DeductionTreatment:
        if self is AtoCategory.D6:
            return DeductionTreatment.POOLED
        return DeductionTreatment.IMMEDIATE

    @classmethod
    def parse(cls, value: Union["AtoCategory", str, None]) -> Optional["AtoCategory"]:
        """
        Convert a code to AtoCategory.

        None and blank strings mean "not categorized" and return None.

        Raises:
            ValueError: If the code is not a known ATO category
        """
        if value is None or isinstance(value, cls):
            return value
        code = str(value).strip().upper()
        if not code:
            return None
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown ATO category code: {value!r}")


CATEGORY_DISPLAY_NAMES = {
    AtoCategory.D1: "Work-related Car Expenses",
    AtoCategory.D2: "Work-related Travel Expenses",
    AtoCategory.D3: "Work-related Clothing, Laundry and Dry-Cleaning",
    AtoCategory.D4: "Work-related Self-Education Expenses",
    AtoCategory.D5: "Other Work-related Expenses",
    AtoCategory.D6: "Low-Value Pool Deduction",
    AtoCategory.D7: "Interest, Dividend and Investment Income Deductions",
    AtoCategory.D8: "Gifts and Donations",
    AtoCategory.D9: "Cost of Managing Tax Affairs",
    AtoCategory.D10: "Personal Superannuation Contributions",
    AtoCategory.D11: "Deductible Amount of Undeducted Purchase Price",
    AtoCategory.D12: "Other Deductions",
    AtoCategory.D13: "Early Stage Venture Capital",
    AtoCategory.D14: "Early Stage Investor",
    AtoCategory.D15: "Other Deductions Not Claimable Elsewhere",
}

# Roles the suggestion rules care about
IMMEDIATE_DEDUCTION_CATEGORY = AtoCategory.D5
LOW_VALUE_POOL_CATEGORY = AtoCategory.D6
CLOTHING_CATEGORY = AtoCategory.D3
EDUCATION_CATEGORY = AtoCategory.D4
TRAVEL_CATEGORY = AtoCategory.D2
DONATIONS_CATEGORY = AtoCategory.D8

# Catch-all buckets a better-fitting category can be proposed from
# (an uncategorized record also qualifies)
GENERIC_CATEGORIES = frozenset({AtoCategory.D5})

UNCATEGORIZED_LABEL = "Uncategorized"


def category_label(category: Optional[AtoCategory]) -> str:
    """Code for display, or 'Uncategorized'."""
    if category is None:
        return UNCATEGORIZED_LABEL
    return category.value


def category_name(category: Optional[AtoCategory]) -> str:
    """Display name with code, e.g. 'Low-Value Pool Deduction (D6)'."""
    if category is None:
        return UNCATEGORIZED_LABEL
    return f"{category.display_name} ({category.value})"
