"""
Asset Classifier.

Decides whether a purchase is a depreciable asset from its description
and cost, and which archetype/rate applies.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from calculator.tax_year_config import TaxYearConfig


@dataclass(frozen=True)
class AssetKeyword:
    """One row of the keyword table."""
    keyword: str
    asset_type: str
    rate: float
    life_years: int


# First match wins, in this order. "Dell computer monitor" is a computer,
# "desk chair" is a desk.
ASSET_KEYWORDS: Tuple[AssetKeyword, ...] = (
    AssetKeyword("laptop", "laptop", 0.30, 3),
    AssetKeyword("computer", "computer", 0.30, 3),
    AssetKeyword("monitor", "monitor", 0.30, 3),
    AssetKeyword("desk", "desk", 0.20, 5),
    AssetKeyword("chair", "chair", 0.20, 5),
    AssetKeyword("furniture", "furniture", 0.20, 5),
    AssetKeyword("printer", "printer", 0.25, 4),
    AssetKeyword("phone", "phone", 0.25, 4),
    AssetKeyword("tablet", "tablet", 0.30, 3),
    AssetKeyword("tools", "tools", 0.25, 4),
    AssetKeyword("equipment", "equipment", 0.25, 4),
    AssetKeyword("camera", "camera", 0.25, 4),
    AssetKeyword("software", "software", 0.30, 3),
)

GENERIC_ASSET_TYPE = "asset"


@dataclass(frozen=True)
class AssetClassification:
    """Outcome of classifying one item."""
    is_asset: bool
    asset_type: Optional[str] = None
    suggested_rate: Optional[float] = None
    life_years: Optional[int] = None
    matched_keyword: bool = False

    @property
    def label(self) -> str:
        return self.asset_type or GENERIC_ASSET_TYPE


NOT_AN_ASSET = AssetClassification(is_asset=False)


def find_asset_keyword(description: str) -> Optional[AssetKeyword]:
    """First keyword row contained in description, or None."""
    lower_desc = description.lower()
    for row in ASSET_KEYWORDS:
        if row.keyword in lower_desc:
            return row
    return None


def is_depreciable_asset(
    description: str,
    amount: float,
    config: Optional[TaxYearConfig] = None,
) -> AssetClassification:
    """
    Classify an item as a depreciable asset.

    - Below the $300 floor: never an asset (claim it outright).
    - A keyword match: that archetype's rate and effective life.
    - No match but over the floor: a generic asset at 20% over 5 years.
    """
    config = config or TaxYearConfig.for_2025()
    floor = config.immediate_deduction_threshold

    if amount < floor:
        return NOT_AN_ASSET

    row = find_asset_keyword(description)
    if row is not None:
        return AssetClassification(
            is_asset=True,
            asset_type=row.asset_type,
            suggested_rate=row.rate,
            life_years=row.life_years,
            matched_keyword=True,
        )

    if amount > floor:
        return AssetClassification(
            is_asset=True,
            asset_type=None,
            suggested_rate=config.generic_asset_rate,
            life_years=config.generic_asset_life_years,
        )

    return NOT_AN_ASSET
