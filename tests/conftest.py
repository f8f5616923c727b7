"""Pytest configuration and fixtures for test suite."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


def _make_record(record_id=1, vendor="Officeworks", amount=100.0, ato_category_code="D5",
                description=None, date="2025-02-14", **extra):
    """Build a ReceiptForSuggestion with sensible defaults."""
    from models.records import ReceiptForSuggestion
    return ReceiptForSuggestion(
        id=record_id,
        vendor=vendor,
        amount=amount,
        ato_category_code=ato_category_code,
        description=description,
        date=date,
        **extra,
    )


@pytest.fixture
def make_record():
    """Factory fixture for ReceiptForSuggestion."""
    return _make_record


@pytest.fixture
def settings():
    """Default engine settings, ignoring any .env file or environment."""
    from config.settings import SuggestionSettings
    return SuggestionSettings(_env_file=None)


@pytest.fixture
def tax_config():
    """2024-25 ATO constants."""
    from calculator.tax_year_config import TaxYearConfig
    return TaxYearConfig.for_2025()


@pytest.fixture
def profile():
    """Full-time employee on the 30% marginal rate."""
    from models.taxpayer import TaxpayerProfile
    return TaxpayerProfile(
        taxable_income=75000,
        occupation="Software Engineer",
        age=35,
        work_arrangement="hybrid",
        has_home_office=True,
    )


@pytest.fixture
def low_income_profile():
    """Income under the tax-free threshold (0% marginal rate)."""
    from models.taxpayer import TaxpayerProfile
    return TaxpayerProfile(taxable_income=15000, occupation="Student", age=20, is_studying=True)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def engine(settings, tax_config, fixed_clock):
    """Engine with deterministic ids and timestamps."""
    from suggestions import CategorizationSuggestionEngine, SequentialIdGenerator
    return CategorizationSuggestionEngine(
        settings=settings,
        config=tax_config,
        id_generator=SequentialIdGenerator(),
        clock=fixed_clock,
    )


@pytest.fixture
def sample_records():
    """One record for each scenario the engine recognises, plus a no-op."""
    return [
        _make_record(1, "Officeworks", 150.0, "D5", "office supplies"),
        _make_record(2, "Dell", 1500.0, "D5", "workstation computer"),
        _make_record(3, "JB Hi-Fi", 250.0, "D6", "wireless mouse"),
        _make_record(4, "Workwear Group", 120.0, "D5", "work uniform shirt"),
    ]
