from .ato_categories import (
    AtoCategory,
    DeductionTreatment,
    IMMEDIATE_DEDUCTION_CATEGORY,
    LOW_VALUE_POOL_CATEGORY,
    GENERIC_CATEGORIES,
    category_label,
    category_name,
)
from .taxpayer import (
    TaxpayerProfile,
    WorkArrangement,
    EmploymentType,
    InvestmentType,
    AustralianState,
)
from .records import ReceiptForSuggestion

__all__ = [
    'AtoCategory',
    'DeductionTreatment',
    'IMMEDIATE_DEDUCTION_CATEGORY',
    'LOW_VALUE_POOL_CATEGORY',
    'GENERIC_CATEGORIES',
    'category_label',
    'category_name',
    'TaxpayerProfile',
    'WorkArrangement',
    'EmploymentType',
    'InvestmentType',
    'AustralianState',
    'ReceiptForSuggestion',
]
