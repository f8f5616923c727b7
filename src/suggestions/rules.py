"""
Suggestion Rule Catalog.

Five rules, evaluated in catalog order against every record. Each rule is
a predicate (applies) plus a producer (build) that prices the proposed
treatment against the current one. Rules never assign ids, timestamps or
status; that is the ranker's job.

| Rule           | Fires on                                  | Proposes |
|----------------|-------------------------------------------|----------|
| RULE-D5-D6     | D5, $300 <= amount < $1,000               | D6 pool  |
| RULE-IMM-DEP   | D5, amount >= $1,000                      | depreciate (D6) |
| RULE-DEP-IMM   | D6, amount < $300                         | D5 outright |
| RULE-WRONG-CAT | D5 or uncategorized + category keywords   | D3/D4/D2/D8 |
| RULE-MISS-DEP  | D5, amount >= large-asset threshold       | depreciation schedule |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from calculator.decimal_math import money, multiply, subtract, to_float, format_money, format_percentage
from calculator.tax_benefit import (
    calculate_category_tax_benefit,
    calculate_depreciation_tax_benefit,
    compare_tax_benefits,
)
from calculator.tax_year_config import TaxYearConfig
from config.settings import SuggestionSettings
from models.ato_categories import (
    AtoCategory,
    IMMEDIATE_DEDUCTION_CATEGORY,
    LOW_VALUE_POOL_CATEGORY,
    CLOTHING_CATEGORY,
    EDUCATION_CATEGORY,
    TRAVEL_CATEGORY,
    DONATIONS_CATEGORY,
    GENERIC_CATEGORIES,
    category_label,
    category_name,
)
from models.records import ReceiptForSuggestion
from models.taxpayer import TaxpayerProfile

from .asset_classifier import find_asset_keyword, is_depreciable_asset
from .models import Confidence, MatchStrength, SuggestionPriority, SuggestionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleContext:
    """Constants shared by every rule in one generation run."""
    config: TaxYearConfig
    settings: SuggestionSettings


@dataclass
class RuleMatch:
    """Suggestion content produced by a rule, before ranking."""
    rule: "SuggestionRule"
    record: ReceiptForSuggestion
    current_category: Optional[AtoCategory]
    suggested_category: AtoCategory
    title: str
    description: str
    reason: str
    current_benefit: float
    suggested_benefit: float
    priority: SuggestionPriority
    match_strength: MatchStrength
    confidence: Optional[Confidence] = None  # Rule-specific override
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def tax_impact(self) -> float:
        return to_float(subtract(self.suggested_benefit, self.current_benefit))


class SuggestionRule:
    """Base class for catalog rules."""
    rule_id: str = ""
    name: str = ""
    type: SuggestionType
    description: str = ""
    priority: SuggestionPriority = SuggestionPriority.MEDIUM
    ato_reference: str = ""
    # Matches with tax_impact <= 0 are dropped unless this is False
    requires_positive_impact: bool = True

    def applies(self, record: ReceiptForSuggestion, context: RuleContext) -> bool:
        raise NotImplementedError

    def build(
        self,
        record: ReceiptForSuggestion,
        profile: TaxpayerProfile,
        context: RuleContext,
    ) -> Optional[RuleMatch]:
        raise NotImplementedError

    def check(
        self,
        record: ReceiptForSuggestion,
        profile: TaxpayerProfile,
        context: RuleContext,
    ) -> Optional[RuleMatch]:
        """Evaluate the trigger and, if it fires, produce the match."""
        if not self.applies(record, context):
            return None
        return self.build(record, profile, context)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"


class MoveToPoolRule(SuggestionRule):
    """
    Rule 1: D5 -> D6 (Low Value Pool)

    Assets from $300 up to $1,000 may be pooled. In the first year the pool
    only yields 18.75%, so against a full immediate claim this rarely
    produces a positive impact and is usually dropped by the ranker.
    """
    rule_id = "RULE-D5-D6"
    name = "D5 to D6 Low Value Pool"
    type = SuggestionType.MOVE_TO_POOL
    description = "Assets under $1,000 may benefit from low-value pool depreciation"
    priority = SuggestionPriority.HIGH
    ato_reference = "ATO Low-Value Pool Rules - D6"
    requires_positive_impact = True

    def applies(self, record, context):
        config = context.config
        return (
            record.ato_category_code is IMMEDIATE_DEDUCTION_CATEGORY
            and config.immediate_deduction_threshold <= record.amount < config.low_value_pool_threshold
        )

    def build(self, record, profile, context):
        config, settings = context.config, context.settings
        asset = is_depreciable_asset(record.match_text, record.amount, config)
        if not asset.is_asset:
            return None

        comparison = compare_tax_benefits(
            record.amount,
            IMMEDIATE_DEDUCTION_CATEGORY,
            LOW_VALUE_POOL_CATEGORY,
            profile.taxable_income,
            is_first_year=settings.assume_first_year,
            config=config,
        )

        if not asset.matched_keyword:
            confidence = Confidence.LOW
        elif comparison.percentage_improvement > settings.move_to_pool_high_confidence_improvement:
            confidence = Confidence.HIGH
        else:
            confidence = Confidence.MEDIUM

        if comparison.difference > settings.move_to_pool_high_priority_delta:
            priority = SuggestionPriority.HIGH
        else:
            priority = SuggestionPriority.MEDIUM

        return RuleMatch(
            rule=self,
            record=record,
            current_category=IMMEDIATE_DEDUCTION_CATEGORY,
            suggested_category=LOW_VALUE_POOL_CATEGORY,
            title="Move to Low-Value Pool for Better Depreciation",
            description=(
                f"This {asset.label} ({format_money(record.amount)}) qualifies for the low-value pool (D6) "
                f"which provides 37.5% depreciation (18.75% in first year)."
            ),
            reason=(
                f"Assets under {format_money(config.low_value_pool_threshold)} can be pooled for accelerated "
                f"depreciation. Current D5 depreciation ({format_percentage(asset.suggested_rate)}) "
                f"vs D6 pool ({format_percentage(config.pool_subsequent_year_rate, 1)})."
            ),
            current_benefit=comparison.current_benefit,
            suggested_benefit=comparison.suggested_benefit,
            priority=priority,
            match_strength=MatchStrength.KEYWORD if asset.matched_keyword else MatchStrength.HEURISTIC,
            confidence=confidence,
            metadata={
                "depreciation_rate": asset.suggested_rate,
                "asset_life_years": asset.life_years,
                "threshold_amount": config.low_value_pool_threshold,
                "original_category_name": category_name(IMMEDIATE_DEDUCTION_CATEGORY),
                "suggested_category_name": category_name(LOW_VALUE_POOL_CATEGORY),
            },
        )


class SetupDepreciationRule(SuggestionRule):
    """
    Rule 2: Immediate to Depreciation

    An immediate claim of $1,000 or more is not allowed for a depreciating
    asset; it has to be written off over its effective life. Always
    surfaced, even though the first-year benefit goes down.
    """
    rule_id = "RULE-IMM-DEP"
    name = "Immediate to Depreciation"
    type = SuggestionType.SETUP_DEPRECIATION
    description = "Large assets should be depreciated over time"
    priority = SuggestionPriority.CRITICAL
    ato_reference = "ATO Depreciation Rules - TR 2017/2"
    requires_positive_impact = False

    def applies(self, record, context):
        return (
            record.ato_category_code is IMMEDIATE_DEDUCTION_CATEGORY
            and record.amount >= context.config.low_value_pool_threshold
        )

    def build(self, record, profile, context):
        config = context.config
        asset = is_depreciable_asset(record.match_text, record.amount, config)
        if not asset.is_asset:
            return None

        first_year_claim = money(multiply(record.amount, asset.suggested_rate))
        current_benefit = calculate_category_tax_benefit(
            record.amount, IMMEDIATE_DEDUCTION_CATEGORY, profile.taxable_income, config=config
        )
        suggested_benefit = calculate_depreciation_tax_benefit(
            record.amount, asset.suggested_rate, profile.taxable_income, config=config
        )

        return RuleMatch(
            rule=self,
            record=record,
            current_category=record.ato_category_code,
            suggested_category=LOW_VALUE_POOL_CATEGORY,
            title="Set Up Depreciation for Large Asset",
            description=(
                f"This {asset.label} costs {format_money(record.amount)} and should be depreciated over "
                f"{asset.life_years} years rather than claimed immediately."
            ),
            reason=(
                f"Assets over {format_money(config.low_value_pool_threshold)} must be depreciated. "
                f"First year claim: {format_money(first_year_claim)} at "
                f"{format_percentage(asset.suggested_rate)} depreciation rate."
            ),
            current_benefit=current_benefit,
            suggested_benefit=suggested_benefit,
            priority=SuggestionPriority.CRITICAL,
            match_strength=MatchStrength.EXACT,
            metadata={
                "depreciation_rate": asset.suggested_rate,
                "asset_life_years": asset.life_years,
                "threshold_amount": config.low_value_pool_threshold,
                "first_year_claim": to_float(first_year_claim),
                "original_category_name": category_name(record.ato_category_code),
                "suggested_category_name": category_name(LOW_VALUE_POOL_CATEGORY),
            },
        )


class SwitchToImmediateRule(SuggestionRule):
    """
    Rule 3: Depreciation to Immediate

    Items under $300 can be claimed outright; pooling them only gets
    18.75% this year.
    """
    rule_id = "RULE-DEP-IMM"
    name = "Depreciation to Immediate"
    type = SuggestionType.SWITCH_TO_IMMEDIATE
    description = "Small assets under $300 can be immediately deducted"
    priority = SuggestionPriority.HIGH
    ato_reference = "ATO Immediate Deduction Rules - $300 threshold"
    requires_positive_impact = True

    def applies(self, record, context):
        return (
            record.ato_category_code is LOW_VALUE_POOL_CATEGORY
            and record.amount < context.config.immediate_deduction_threshold
        )

    def build(self, record, profile, context):
        config, settings = context.config, context.settings
        comparison = compare_tax_benefits(
            record.amount,
            LOW_VALUE_POOL_CATEGORY,
            IMMEDIATE_DEDUCTION_CATEGORY,
            profile.taxable_income,
            is_first_year=settings.assume_first_year,
            config=config,
        )
        keyword = find_asset_keyword(record.match_text)
        item = keyword.asset_type if keyword else "item"
        threshold = format_money(config.immediate_deduction_threshold)

        return RuleMatch(
            rule=self,
            record=record,
            current_category=LOW_VALUE_POOL_CATEGORY,
            suggested_category=IMMEDIATE_DEDUCTION_CATEGORY,
            title="Claim Immediately Instead of Pooling",
            description=(
                f"This {format_money(record.amount)} {item} is under {threshold} "
                f"and can be immediately deducted in full."
            ),
            reason=(
                f"Assets under {threshold} qualify for immediate deduction. Get the full tax benefit "
                f"this year instead of spreading it over multiple years."
            ),
            current_benefit=comparison.current_benefit,
            suggested_benefit=comparison.suggested_benefit,
            priority=SuggestionPriority.HIGH,
            match_strength=MatchStrength.EXACT,
            metadata={
                "threshold_amount": config.immediate_deduction_threshold,
                "original_category_name": category_name(LOW_VALUE_POOL_CATEGORY),
                "suggested_category_name": f"{category_name(IMMEDIATE_DEDUCTION_CATEGORY)} - Immediate",
            },
        )


@dataclass(frozen=True)
class CategoryKeywordGroup:
    keywords: Tuple[str, ...]
    category: AtoCategory
    reason: str


# First group with any keyword present wins
CATEGORY_KEYWORD_GROUPS: Tuple[CategoryKeywordGroup, ...] = (
    CategoryKeywordGroup(
        ("uniform", "shirt", "pants", "apron", "chef", "scrubs"),
        CLOTHING_CATEGORY,
        "Work-related clothing should be categorized under D3",
    ),
    CategoryKeywordGroup(
        ("course", "training", "certificate", "diploma", "degree", "study"),
        EDUCATION_CATEGORY,
        "Education expenses belong in D4 Self-Education",
    ),
    CategoryKeywordGroup(
        ("flight", "hotel", "accommodation", "travel", "airbnb"),
        TRAVEL_CATEGORY,
        "Travel expenses should be in D2 Work-Related Travel",
    ),
    CategoryKeywordGroup(
        ("charity", "donation", "gift"),
        DONATIONS_CATEGORY,
        "Donations belong in D8 Gifts and Donations",
    ),
)


def find_category_group(text: str) -> Tuple[Optional[CategoryKeywordGroup], List[str]]:
    """First matching keyword group and the keywords from it found in text."""
    lower = text.lower()
    for group in CATEGORY_KEYWORD_GROUPS:
        hits = [kw for kw in group.keywords if kw in lower]
        if hits:
            return group, hits
    return None, []


class RecategorizeRule(SuggestionRule):
    """
    Rule 4: Wrong Category

    A catch-all (D5) or uncategorized record whose description points at a
    specific category. Usually zero tax impact; surfaced anyway so the
    return is categorized correctly.
    """
    rule_id = "RULE-WRONG-CAT"
    name = "Better Category Available"
    type = SuggestionType.RECATEGORIZE
    description = "A more appropriate ATO category exists"
    priority = SuggestionPriority.MEDIUM
    ato_reference = "ATO Deduction Categories"
    requires_positive_impact = False

    def applies(self, record, context):
        current = record.ato_category_code
        if current is not None and current not in GENERIC_CATEGORIES:
            return False
        group, _ = find_category_group(record.match_text)
        return group is not None and group.category is not current

    def build(self, record, profile, context):
        group, hits = find_category_group(record.match_text)
        current = record.ato_category_code
        comparison = compare_tax_benefits(
            record.amount,
            current or IMMEDIATE_DEDUCTION_CATEGORY,
            group.category,
            profile.taxable_income,
            config=context.config,
        )

        return RuleMatch(
            rule=self,
            record=record,
            current_category=current,
            suggested_category=group.category,
            title=f"Better Category: {group.category.value}",
            description=(
                f'Based on the description "{record.vendor}", this expense appears to be '
                f"{group.category.display_name}."
            ),
            reason=group.reason,
            current_benefit=comparison.current_benefit,
            suggested_benefit=comparison.suggested_benefit,
            priority=SuggestionPriority.MEDIUM,
            match_strength=MatchStrength.KEYWORD,
            confidence=Confidence.HIGH if len(hits) > 1 else Confidence.MEDIUM,
            metadata={
                "matched_keywords": hits,
                "original_category_name": category_label(current),
                "suggested_category_name": group.category.display_name,
            },
        )


class MissingDepreciationRule(SuggestionRule):
    """
    Rule 5: Missing Depreciation

    A large asset claimed in D5 has no depreciation schedule, so nothing is
    recorded to carry into later years. Compliance flag.
    """
    rule_id = "RULE-MISS-DEP"
    name = "Missing Depreciation Setup"
    type = SuggestionType.MISSING_DEPRECIATION
    description = "Asset appears to not have depreciation configured"
    priority = SuggestionPriority.HIGH
    ato_reference = "ATO Depreciation Rules"
    requires_positive_impact = False

    def applies(self, record, context):
        return (
            record.ato_category_code is IMMEDIATE_DEDUCTION_CATEGORY
            and record.amount >= context.settings.large_asset_threshold
        )

    def build(self, record, profile, context):
        config = context.config
        asset = is_depreciable_asset(record.match_text, record.amount, config)
        if not asset.is_asset:
            return None

        first_year_claim = money(multiply(record.amount, asset.suggested_rate))
        suggested_benefit = calculate_depreciation_tax_benefit(
            record.amount, asset.suggested_rate, profile.taxable_income, config=config
        )

        return RuleMatch(
            rule=self,
            record=record,
            current_category=IMMEDIATE_DEDUCTION_CATEGORY,
            suggested_category=LOW_VALUE_POOL_CATEGORY,
            title="Set Up Depreciation for This Asset",
            description=(
                f"This {format_money(record.amount)} {asset.label} should be depreciated over "
                f"{asset.life_years} years."
            ),
            reason=(
                f"Assets over {format_money(context.settings.large_asset_threshold)} must be depreciated. "
                f"You'll claim {format_money(first_year_claim)} this year and continue claiming in future years."
            ),
            current_benefit=0.0,  # No schedule recorded, nothing carried forward
            suggested_benefit=suggested_benefit,
            priority=SuggestionPriority.HIGH,
            match_strength=MatchStrength.EXACT,
            metadata={
                "depreciation_rate": asset.suggested_rate,
                "asset_life_years": asset.life_years,
                "threshold_amount": context.settings.large_asset_threshold,
                "first_year_claim": to_float(first_year_claim),
            },
        )


ALL_SUGGESTION_RULES: Tuple[SuggestionRule, ...] = (
    MoveToPoolRule(),
    SetupDepreciationRule(),
    SwitchToImmediateRule(),
    RecategorizeRule(),
    MissingDepreciationRule(),
)

RULES_BY_ID: Dict[str, SuggestionRule] = {rule.rule_id: rule for rule in ALL_SUGGESTION_RULES}


def get_rule(rule_id: str) -> SuggestionRule:
    """
    Look up a catalog rule.

    Raises:
        KeyError: If rule_id is not in the catalog
    """
    try:
        return RULES_BY_ID[rule_id]
    except KeyError:
        raise KeyError(f"Unknown suggestion rule: {rule_id}")


def evaluate_record(
    record: ReceiptForSuggestion,
    profile: TaxpayerProfile,
    context: RuleContext,
    rules: Sequence[SuggestionRule] = ALL_SUGGESTION_RULES,
) -> List[RuleMatch]:
    """
    Run every rule against one record.

    A record can match several rules; every match is kept.
    """
    matches = []
    for rule in rules:
        try:
            match = rule.check(record, profile, context)
        except Exception as e:
            logger.error(f"Error running rule {rule.rule_id} for record {record.id}: {e}")
            raise
        if match is not None:
            logger.debug(f"Rule {rule.rule_id} matched record {record.id} (impact {match.tax_impact:.2f})")
            matches.append(match)
    return matches
