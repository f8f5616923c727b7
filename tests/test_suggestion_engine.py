"""
Tests for suggestion generation.

Covers:
1. Worked scenarios (office supplies, workstation, pooled mouse, uniform)
2. Ranking order and id assignment
3. Determinism with injected ids and clock
4. Filtering
5. Input validation and error propagation
6. Throughput on 100 records
"""

import time
import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


def _types(suggestions):
    return [s.suggestion_type.value for s in suggestions]


class TestScenarios:
    """End-to-end scenarios on a 30% marginal rate."""

    def test_empty_input(self, engine, profile):
        """No records, no suggestions."""
        assert engine.generate_suggestions([], profile) == []

    def test_office_supplies_below_floor(self, engine, profile, make_record):
        """$150 office supplies yields no move-to-pool suggestion."""
        record = make_record(1, "Officeworks", 150.0, "D5", "office supplies")
        suggestions = engine.generate_suggestions([record], profile)
        assert "move_to_pool" not in _types(suggestions)
        assert suggestions == []

    def test_workstation_computer(self, engine, profile, make_record):
        """$1,500 workstation yields a critical setup-depreciation suggestion."""
        from suggestions.models import SuggestionPriority, SuggestionType

        record = make_record(2, "Dell", 1500.0, "D5", "workstation computer")
        suggestions = engine.generate_suggestions([record], profile)

        setup = [s for s in suggestions if s.suggestion_type is SuggestionType.SETUP_DEPRECIATION]
        assert len(setup) == 1
        assert setup[0].priority is SuggestionPriority.CRITICAL
        assert setup[0].tax_impact == -315.0
        assert setup[0].record_id == 2

    def test_workstation_also_flags_missing_depreciation(self, engine, profile, make_record):
        """Both depreciation rules fire for the same record; neither is collapsed."""
        record = make_record(2, "Dell", 1500.0, "D5", "workstation computer")
        suggestions = engine.generate_suggestions([record], profile)
        assert _types(suggestions) == ["setup_depreciation", "missing_depreciation"]

    def test_pooled_mouse(self, engine, profile, make_record):
        """$250 pooled mouse yields switch-to-immediate with a positive impact."""
        from models.ato_categories import AtoCategory

        record = make_record(3, "JB Hi-Fi", 250.0, "D6", "wireless mouse")
        [suggestion] = engine.generate_suggestions([record], profile)

        assert suggestion.suggestion_type.value == "switch_to_immediate"
        assert suggestion.tax_impact > 0
        assert suggestion.suggested_category is AtoCategory.D5

    def test_uniform_shirt(self, engine, profile, make_record):
        """$120 uniform shirt yields a zero-impact recategorize to clothing."""
        from models.ato_categories import AtoCategory

        record = make_record(4, "Workwear Group", 120.0, "D5", "work uniform shirt")
        [suggestion] = engine.generate_suggestions([record], profile)

        assert suggestion.suggestion_type.value == "recategorize"
        assert suggestion.suggested_category is AtoCategory.D3
        assert suggestion.tax_impact == 0.0

    def test_move_to_pool_never_surfaces_at_default_rates(self, engine, profile, make_record):
        """Immediate deduction beats the pool in year one, so nothing is suggested."""
        record = make_record(5, "IKEA", 800.0, "D5", "office desk")
        assert "move_to_pool" not in _types(engine.generate_suggestions([record], profile))

    def test_missing_category_does_not_raise(self, engine, profile, make_record):
        """Uncategorized records only get description-based suggestions."""
        records = [
            make_record(6, "Qantas", 450.0, None, "flight to Sydney"),
            make_record(7, "Apple", 2500.0, None, "laptop"),
        ]
        suggestions = engine.generate_suggestions(records, profile)
        assert _types(suggestions) == ["recategorize"]
        assert suggestions[0].current_category is None
        assert suggestions[0].current_category_label == "Uncategorized"

    def test_zero_marginal_rate(self, engine, low_income_profile, sample_records):
        """With nothing to gain, only compliance and recategorize suggestions remain."""
        suggestions = engine.generate_suggestions(sample_records, low_income_profile)
        assert "switch_to_immediate" not in _types(suggestions)
        assert "setup_depreciation" in _types(suggestions)


class TestRanking:
    """Tests for ordering and id assignment."""

    def test_sample_order(self, engine, profile, sample_records):
        """Critical first, then by impact within a priority."""
        suggestions = engine.generate_suggestions(sample_records, profile)
        assert _types(suggestions) == [
            "setup_depreciation",     # critical
            "missing_depreciation",   # high, +135.00
            "switch_to_immediate",    # high, +60.94
            "recategorize",           # medium
        ]

    def test_sorted_by_priority_then_impact(self, engine, profile, make_record):
        """Sort key holds across a mixed batch."""
        records = [
            make_record(i, "Vendor", amount, cat, desc)
            for i, (amount, cat, desc) in enumerate([
                (120, "D5", "uniform"),
                (260, "D6", "keyboard"),
                (1800, "D5", "laptop"),
                (90, "D6", "headset"),
                (1200, "D5", "office chair"),
                (700, None, "training course"),
            ])
        ]
        suggestions = engine.generate_suggestions(records, profile)
        keys = [(s.priority.rank, -s.tax_impact) for s in suggestions]
        assert keys == sorted(keys)

    def test_ids_assigned_in_evaluation_order(self, engine, profile, sample_records):
        """Ids follow record then catalog order, before sorting."""
        suggestions = engine.generate_suggestions(sample_records, profile)
        assert [s.id for s in suggestions] == ["sugg-0001", "sugg-0002", "sugg-0003", "sugg-0004"]

    def test_default_ids_unique_and_time_ordered(self, settings, tax_config, profile, sample_records):
        """Default ids are sugg-<ms>-<seq>-<random>."""
        from suggestions import CategorizationSuggestionEngine

        engine = CategorizationSuggestionEngine(settings=settings, config=tax_config)
        suggestions = engine.generate_suggestions(sample_records * 5, profile)
        ids = [s.id for s in suggestions]
        assert len(set(ids)) == len(ids)
        assert all(i.startswith("sugg-") and len(i.split("-")) == 4 for i in ids)

    def test_sort_is_stable(self):
        """Equal keys keep their input order."""
        from suggestions.ranker import sort_suggestions
        from suggestions.models import (
            Confidence, Suggestion, SuggestionPriority, SuggestionType,
        )
        from models.ato_categories import AtoCategory

        def make(sid):
            return Suggestion(
                id=sid, record_id=sid, current_category=AtoCategory.D5,
                suggested_category=AtoCategory.D3, suggestion_type=SuggestionType.RECATEGORIZE,
                title="t", description="d", reason="r",
                current_tax_benefit=10.0, suggested_tax_benefit=10.0, tax_impact=0.0,
                amount=50.0, item_description="item", confidence=Confidence.MEDIUM,
                priority=SuggestionPriority.MEDIUM, rule_id="RULE-WRONG-CAT",
            )

        items = [make("a"), make("b"), make("c")]
        assert [s.id for s in sort_suggestions(items)] == ["a", "b", "c"]


class TestInvariants:
    """Properties every generated suggestion must satisfy."""

    def test_impact_equals_difference(self, engine, profile, sample_records):
        """tax_impact == suggested - current."""
        for s in engine.generate_suggestions(sample_records, profile):
            assert abs(s.tax_impact - (s.suggested_tax_benefit - s.current_tax_benefit)) <= 1e-6
            assert s.impact_is_consistent

    def test_rule_ids_in_catalog(self, engine, profile, sample_records):
        """Every suggestion names a catalog rule."""
        from suggestions.rules import RULES_BY_ID
        for s in engine.generate_suggestions(sample_records, profile):
            assert s.rule_id in RULES_BY_ID
            assert s.ato_reference == RULES_BY_ID[s.rule_id].ato_reference

    def test_new_suggestions_pending(self, engine, profile, sample_records, fixed_clock):
        """Created pending with the injected timestamp."""
        from suggestions.models import SuggestionStatus
        for s in engine.generate_suggestions(sample_records, profile):
            assert s.status is SuggestionStatus.PENDING
            assert s.created_at == fixed_clock()
            assert s.reviewed_at is None

    def test_confidence_levels(self, engine, profile, sample_records):
        """Exact threshold matches and multi-keyword matches are high confidence."""
        from suggestions.models import Confidence
        suggestions = engine.generate_suggestions(sample_records, profile)
        assert all(s.confidence is Confidence.HIGH for s in suggestions)


class TestDeterminism:
    """Same input, same output."""

    def test_repeatable_with_injected_ids(self, settings, tax_config, fixed_clock, profile, sample_records):
        """Two runs with fresh sequential generators are identical."""
        from suggestions import CategorizationSuggestionEngine, SequentialIdGenerator

        def run():
            engine = CategorizationSuggestionEngine(
                settings=settings, config=tax_config,
                id_generator=SequentialIdGenerator(), clock=fixed_clock,
            )
            return [s.to_dict() for s in engine.generate_suggestions(sample_records, profile)]

        assert run() == run()

    def test_repeatable_modulo_ids(self, settings, tax_config, profile, sample_records):
        """Default ids differ between runs but content does not."""
        from suggestions import CategorizationSuggestionEngine

        engine = CategorizationSuggestionEngine(settings=settings, config=tax_config)

        def content():
            return [
                {k: v for k, v in s.to_dict().items() if k not in ("id", "created_at")}
                for s in engine.generate_suggestions(sample_records, profile)
            ]

        assert content() == content()

    def test_yaml_config_matches_inline(self, settings, profile, sample_records, fixed_clock):
        """The packaged 2025 parameter file agrees with the inline table."""
        from calculator.tax_year_config import TaxYearConfig
        from suggestions import CategorizationSuggestionEngine, SequentialIdGenerator

        def run(config):
            engine = CategorizationSuggestionEngine(
                settings=settings, config=config,
                id_generator=SequentialIdGenerator(), clock=fixed_clock,
            )
            return [s.to_dict() for s in engine.generate_suggestions(sample_records, profile)]

        assert run(TaxYearConfig.for_year(2025)) == run(TaxYearConfig.for_2025())


class TestFiltering:
    """Tests for filter_suggestions."""

    @pytest.fixture
    def suggestions(self, engine, profile, sample_records):
        return engine.generate_suggestions(sample_records, profile)

    def test_no_criteria_returns_all(self, suggestions):
        """An empty filter matches everything."""
        from suggestions import filter_suggestions
        assert filter_suggestions(suggestions) == suggestions

    def test_by_priority(self, suggestions):
        """Keyword criteria, string values."""
        from suggestions import filter_suggestions
        result = filter_suggestions(suggestions, priority="high")
        assert _types(result) == ["missing_depreciation", "switch_to_immediate"]

    def test_conjunction(self, suggestions):
        """All provided criteria must match."""
        from suggestions import filter_suggestions
        result = filter_suggestions(suggestions, {"priority": "high", "type": "switch_to_immediate"})
        assert _types(result) == ["switch_to_immediate"]
        assert filter_suggestions(suggestions, priority="critical", type="recategorize") == []

    def test_by_status(self, suggestions):
        """Status filter."""
        from suggestions import filter_suggestions, accept_suggestion
        accept_suggestion(suggestions[0])
        assert filter_suggestions(suggestions, status="accepted") == [suggestions[0]]
        assert len(filter_suggestions(suggestions, status="pending")) == 3

    def test_by_category(self, suggestions):
        """Suggested-category filter."""
        from suggestions import SuggestionFilter, filter_suggestions
        from models.ato_categories import AtoCategory
        result = filter_suggestions(suggestions, SuggestionFilter(category=AtoCategory.D3))
        assert _types(result) == ["recategorize"]

    def test_unknown_field(self, suggestions):
        """Typos in filter fields are errors."""
        from suggestions import filter_suggestions
        with pytest.raises(ValueError):
            filter_suggestions(suggestions, colour="red")


class TestValidation:
    """Structurally invalid input raises."""

    def test_dict_input(self, engine):
        """Plain dicts are validated into models."""
        records = [{"id": "r1", "vendor": "JB Hi-Fi", "amount": 250, "ato_category_code": "d6",
                    "date": "2025-01-10", "description": "keyboard"}]
        profile = {"taxable_income": 75000, "occupation": "Nurse", "age": 30}
        [suggestion] = engine.generate_suggestions(records, profile)
        assert suggestion.record_id == "r1"

    @pytest.mark.parametrize("amount", [-5, 0, "abc"])
    def test_invalid_amount(self, engine, profile, amount):
        """Non-positive or non-numeric amounts are rejected."""
        from pydantic import ValidationError
        record = {"id": 1, "vendor": "X", "amount": amount, "ato_category_code": "D5", "date": "2025-01-01"}
        with pytest.raises(ValidationError):
            engine.generate_suggestions([record], profile)

    def test_unknown_category_code(self, engine, profile):
        """Codes outside D1-D15 are rejected."""
        from pydantic import ValidationError
        record = {"id": 1, "vendor": "X", "amount": 50, "ato_category_code": "D99", "date": "2025-01-01"}
        with pytest.raises(ValidationError):
            engine.generate_suggestions([record], profile)

    def test_profile_missing_income(self, engine, make_record):
        """taxable_income is required."""
        from pydantic import ValidationError
        with pytest.raises(ValidationError):
            engine.generate_suggestions([make_record()], {"occupation": "Nurse", "age": 30})

    def test_rule_failure_propagates(self, settings, tax_config, profile, make_record):
        """A failing rule aborts generation."""
        from suggestions import CategorizationSuggestionEngine
        from suggestions.rules import SuggestionRule

        class ExplodingRule(SuggestionRule):
            rule_id = "RULE-X"

            def applies(self, record, context):
                return True

            def build(self, record, profile, context):
                raise RuntimeError("boom")

        engine = CategorizationSuggestionEngine(settings=settings, config=tax_config, rules=[ExplodingRule()])
        with pytest.raises(RuntimeError):
            engine.generate_suggestions([make_record()], profile)


class TestPerformance:
    """Throughput."""

    def test_hundred_records_under_one_second(self, engine, profile, make_record):
        """100 records against the full catalog in well under a second."""
        templates = [
            (150.0, "D5", "office supplies"),
            (1500.0, "D5", "workstation computer"),
            (250.0, "D6", "wireless mouse"),
            (120.0, "D5", "work uniform shirt"),
            (800.0, "D5", "office desk"),
            (450.0, None, "flight to Melbourne"),
            (2200.0, "D5", "camera equipment"),
            (60.0, "D8", "charity donation"),
            (350.0, "D5", "online course"),
            (95.0, "D6", "phone case"),
        ]
        records = [
            make_record(i, "Vendor", *templates[i % len(templates)])
            for i in range(100)
        ]

        start = time.perf_counter()
        suggestions = engine.generate_suggestions(records, profile)
        elapsed = time.perf_counter() - start

        assert elapsed < 1.0
        assert len(suggestions) > 0
