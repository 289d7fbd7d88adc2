"""
Deck scoring from classified warnings.

Every warning code maps to exactly one Tier, fixed when the check is
written. The score depends only on how many warnings fall in each tier, so
the order of warnings never changes it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple

from deck_warnings import Category, WarningItem


class Tier(Enum):
    FUNDAMENTAL = 1  # Deck cannot function or is illegal
    CONSISTENCY = 2  # Draw, search, energy count
    EFFICIENCY = 3  # Weak attacks, energy colors, energy excess
    ATTENTION = 4  # Everything else worth a look
    POSITIVE = "positive"


TIER_DEDUCTIONS: Dict[Tier, int] = {
    Tier.FUNDAMENTAL: 25,
    Tier.CONSISTENCY: 15,
    Tier.EFFICIENCY: 8,
    Tier.ATTENTION: 3,
}

MAX_POSITIVE_BONUS = 10


TIER_BY_CODE: Dict[Tuple[Category, str], Tier] = {
    # Legality
    (Category.LEGALITY, "DECK_SIZE"): Tier.FUNDAMENTAL,
    (Category.LEGALITY, "COPY_LIMIT"): Tier.FUNDAMENTAL,
    (Category.LEGALITY, "BANNED_CARD"): Tier.ATTENTION,
    (Category.LEGALITY, "NO_BASIC_CREATURE"): Tier.FUNDAMENTAL,

    # Consistency
    (Category.CONSISTENCY, "LOW_BASIC_COUNT"): Tier.FUNDAMENTAL,
    (Category.CONSISTENCY, "HIGH_MULLIGAN_RISK"): Tier.ATTENTION,
    (Category.CONSISTENCY, "GOOD_BASIC_COUNT"): Tier.POSITIVE,
    (Category.CONSISTENCY, "NO_DRAW_SUPPORT"): Tier.CONSISTENCY,
    (Category.CONSISTENCY, "INSUFFICIENT_DRAW"): Tier.CONSISTENCY,
    (Category.CONSISTENCY, "INSUFFICIENT_SEARCH"): Tier.CONSISTENCY,
    (Category.CONSISTENCY, "LOW_TRAINER_COUNT"): Tier.CONSISTENCY,
    (Category.CONSISTENCY, "LOW_ENERGY"): Tier.CONSISTENCY,
    (Category.CONSISTENCY, "TOO_MUCH_ENERGY"): Tier.EFFICIENCY,
    (Category.CONSISTENCY, "GOOD_ENERGY_COUNT"): Tier.POSITIVE,
    (Category.CONSISTENCY, "ENERGY_TYPE_MISMATCH"): Tier.FUNDAMENTAL,
    (Category.CONSISTENCY, "TOO_MANY_ENERGY_TYPES"): Tier.EFFICIENCY,
    (Category.CONSISTENCY, "EVOLUTION_MISSING_BASIC"): Tier.FUNDAMENTAL,
    (Category.CONSISTENCY, "EVOLUTION_MISSING_STAGE1"): Tier.FUNDAMENTAL,
    (Category.CONSISTENCY, "EVOLUTION_BOTTLENECK"): Tier.ATTENTION,
    (Category.CONSISTENCY, "EVOLUTION_BOTTLENECK_SKIPPED"): Tier.POSITIVE,
    (Category.CONSISTENCY, "LOW_STAGE2_CONSISTENCY"): Tier.ATTENTION,
    (Category.CONSISTENCY, "HIGH_DEAD_DRAW_RISK"): Tier.ATTENTION,
    (Category.CONSISTENCY, "FEW_CREATURES"): Tier.ATTENTION,
    (Category.CONSISTENCY, "TOO_MANY_CREATURES"): Tier.ATTENTION,
    (Category.CONSISTENCY, "GOOD_CREATURE_COUNT"): Tier.POSITIVE,
    (Category.CONSISTENCY, "SINGLE_PRIZE_RISK"): Tier.ATTENTION,

    # Power
    (Category.POWER, "NO_ATTACKERS"): Tier.FUNDAMENTAL,
    (Category.POWER, "FEW_ATTACKERS"): Tier.EFFICIENCY,
    (Category.POWER, "WEAK_ATTACKS"): Tier.EFFICIENCY,
    (Category.POWER, "GOOD_ATTACKERS"): Tier.POSITIVE,
    (Category.POWER, "LOW_DAMAGE_OUTPUT"): Tier.ATTENTION,
    (Category.POWER, "NO_GUST"): Tier.ATTENTION,

    # Speed
    (Category.SPEED, "SLOW_ENERGY_SETUP"): Tier.CONSISTENCY,
    (Category.SPEED, "MISSING_SWITCH"): Tier.CONSISTENCY,
    (Category.SPEED, "SLOW_SETUP"): Tier.ATTENTION,
    (Category.SPEED, "GOOD_SETUP"): Tier.POSITIVE,

    # Matchup
    (Category.MATCHUP, "NO_TYPE_DIVERSITY"): Tier.ATTENTION,

    # Economy
    (Category.ECONOMY, "TOO_MANY_MULTI_PRIZE"): Tier.EFFICIENCY,
    (Category.ECONOMY, "FAVORABLE_PRIZE_TRADE"): Tier.POSITIVE,
}


@dataclass(frozen=True)
class TierCounts:
    tier1: int = 0
    tier2: int = 0
    tier3: int = 0
    tier4: int = 0
    positives: int = 0

    @property
    def total_issues(self) -> int:
        return self.tier1 + self.tier2 + self.tier3 + self.tier4


def classify(warning: WarningItem) -> Tier:
    """
    Tier of a warning, looked up by category and code.

    Raises:
        KeyError: if the code has no tier
    """
    key = (warning.category, warning.code)
    if key not in TIER_BY_CODE:
        raise KeyError(f"No tier for {warning.category.value}/{warning.code}")
    return TIER_BY_CODE[key]


def count_tiers(warnings: Iterable[WarningItem], positives: Iterable[WarningItem] = ()) -> TierCounts:
    """Count classified warnings per tier; ``positives`` are counted as positives outright."""
    counts = {tier: 0 for tier in Tier}
    for warning in warnings:
        counts[classify(warning)] += 1
    counts[Tier.POSITIVE] += sum(1 for _ in positives)
    return TierCounts(
        tier1=counts[Tier.FUNDAMENTAL],
        tier2=counts[Tier.CONSISTENCY],
        tier3=counts[Tier.EFFICIENCY],
        tier4=counts[Tier.ATTENTION],
        positives=counts[Tier.POSITIVE],
    )


def score_from_counts(tier1: int, tier2: int, tier3: int, tier4: int, positives: int) -> int:
    """
    Score a deck 0-100 from its tier counts.

    Deductions and the positive bonus are applied first, then caps in a fixed
    order. Each cap can only lower the running score.
    """
    score = (
        100
        - TIER_DEDUCTIONS[Tier.FUNDAMENTAL] * tier1
        - TIER_DEDUCTIONS[Tier.CONSISTENCY] * tier2
        - TIER_DEDUCTIONS[Tier.EFFICIENCY] * tier3
        - TIER_DEDUCTIONS[Tier.ATTENTION] * tier4
        + min(MAX_POSITIVE_BONUS, 2 * positives)
    )

    # Tier caps
    if tier1 > 0:
        score = min(score, 50)
    elif tier2 > 0:
        score = min(score, 70)
    elif tier3 > 0:
        score = min(score, 85)

    # Total issue caps
    total = tier1 + tier2 + tier3 + tier4
    if total >= 8:
        score = min(score, 50)
    elif total >= 6:
        score = min(score, 65)
    elif total >= 4:
        score = min(score, 75)

    if tier1 >= 2:
        score = min(score, 25)

    # A clean deck still never scores a perfect 100
    if total == 0 and positives >= 5:
        score = min(score, 95)

    return max(0, min(100, score))


def calculate_score(warnings: Iterable[WarningItem], positives: Iterable[WarningItem] = ()) -> int:
    """Classify ``warnings`` and score them; order does not matter."""
    counts = count_tiers(warnings, positives)
    return score_from_counts(counts.tier1, counts.tier2, counts.tier3, counts.tier4, counts.positives)


def score_label(score: int) -> str:
    """Grade band for a score."""
    if score >= 90:
        return "Excellent"
    if score >= 75:
        return "Good"
    if score >= 60:
        return "Fair"
    if score >= 40:
        return "Needs Work"
    return "Unplayable"
