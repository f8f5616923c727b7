from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class WorkArrangement(str, Enum):
    """Where the taxpayer does their work."""
    OFFICE = "office"
    HYBRID = "hybrid"
    REMOTE = "remote"
    MIXED = "mixed"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CASUAL = "casual"
    CONTRACTOR = "contractor"
    SELF_EMPLOYED = "self-employed"


class InvestmentType(str, Enum):
    SHARES = "shares"
    PROPERTY = "property"
    CRYPTO = "crypto"
    BONDS = "bonds"
    OTHER = "other"


class AustralianState(str, Enum):
    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    WA = "WA"
    SA = "SA"
    TAS = "TAS"
    ACT = "ACT"
    NT = "NT"


class TaxpayerProfile(BaseModel):
    """
    Income profile of the taxpayer the suggestions are generated for.

    taxable_income drives the marginal rate every benefit figure is
    computed at, so it is required. The situational flags are supplied
    by onboarding and default to the most common answers.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    taxable_income: float = Field(ge=0, description="Taxable income for the year")
    occupation: str = Field(min_length=1)
    age: int = Field(ge=0, le=130)

    has_vehicle: bool = False
    work_arrangement: WorkArrangement = WorkArrangement.OFFICE
    has_investments: bool = False
    investment_types: List[InvestmentType] = Field(default_factory=list)
    is_studying: bool = False
    study_field: Optional[str] = None
    has_home_office: bool = False
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    years_with_accountant: int = Field(default=0, ge=0)

    industry: Optional[str] = None
    years_in_current_role: Optional[int] = Field(default=None, ge=0)
    previous_year_deductions: Optional[float] = Field(default=None, ge=0)
    state: Optional[AustralianState] = None
