"""Records the suggestion engine reviews."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ato_categories import AtoCategory


class ReceiptForSuggestion(BaseModel):
    """
    An already-categorized expense or asset purchase.

    ato_category_code may be missing; category-dependent rules then skip
    the record while description rules still run.
    """
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    vendor: str
    amount: float = Field(gt=0, allow_inf_nan=False, description="Purchase amount in dollars")
    category: str = ""  # Free-text user category, e.g. "Equipment"
    ato_category_code: Optional[AtoCategory] = None
    date: str
    description: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("ato_category_code", mode="before")
    @classmethod
    def parse_category(cls, v):
        return AtoCategory.parse(v)

    @property
    def match_text(self) -> str:
        """Vendor and description, lower-cased, for keyword matching."""
        return f"{self.vendor} {self.description or ''}".lower()
