"""
Format legality checker for TCG decks.

Deck size, copy limits, the ban list and the Basic-creature requirement are
reported as issues; nothing here refuses to analyze an illegal deck.
"""
from __future__ import annotations

import json
import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from card_lists import is_banned, is_unlimited_copies
from models import Deck
from utils import canonicalize_name

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "standard"

# Built-in rules; a JSON file with the same shape can replace them
FORMAT_RULES: Dict[str, Dict[str, Any]] = {
    "standard": {
        "deck_size": 60,
        "max_copies_per_card": 4,
    },
    "expanded": {
        "deck_size": 60,
        "max_copies_per_card": 4,
    },
    "unlimited": {
        "deck_size": 60,
        "max_copies_per_card": 4,
        "banned_cards": [],
    },
}


class LegalityIssue(NamedTuple):
    """Represents a legality issue found in a deck."""
    category: str  # 'deck_size', 'copy_limit', 'banned', 'basic'
    message: str
    card_name: Optional[str] = None
    count: Optional[int] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class LegalityReport:
    """Report of deck legality checking."""
    format_name: str
    deck_size: int
    expected_size: int
    issues: Tuple[LegalityIssue, ...]

    @property
    def legal(self) -> bool:
        return not self.issues

    def by_category(self, category: str) -> List[LegalityIssue]:
        return [issue for issue in self.issues if issue.category == category]

    def get_summary(self) -> str:
        """Get a human-readable summary."""
        if self.legal:
            return f"✅ Legal in {self.format_name}"
        return f"❌ Illegal in {self.format_name} ({len(self.issues)} issues)"


class FormatChecker:
    """Checks deck legality against format rules."""

    def __init__(self, rules: Optional[Dict[str, Dict[str, Any]]] = None,
                 rules_file: Optional[Union[str, Path]] = None):
        """
        Initialize the format checker.

        Args:
            rules: Format rules keyed by format name (defaults to FORMAT_RULES)
            rules_file: Optional JSON file that replaces the built-in rules
        """
        if rules_file is not None:
            rules = self._load_format_rules(rules_file)
        self.format_rules = rules if rules is not None else FORMAT_RULES

    def _load_format_rules(self, rules_file: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
        """Load format rules from JSON file."""
        try:
            with open(rules_file, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Format rules file not found: {rules_file}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in format rules file: {e}")

    def check_deck_legality(self, deck: Deck, format_name: str = DEFAULT_FORMAT) -> LegalityReport:
        """
        Check if a deck is legal in the specified format.

        Args:
            deck: The deck to check
            format_name: Name of the format to check against

        Returns:
            LegalityReport with results

        Raises:
            KeyError: if the format is unknown
        """
        if format_name not in self.format_rules:
            raise KeyError(
                f"Unknown format: {format_name} (available: {', '.join(self.format_rules)})"
            )

        rules = self.format_rules[format_name]
        expected = rules.get('deck_size', 60)

        issues: List[LegalityIssue] = []
        issues.extend(self._check_deck_size(deck, expected))
        issues.extend(self._check_copy_limits(deck, rules.get('max_copies_per_card', 4)))
        issues.extend(self._check_banned_cards(deck, rules.get('banned_cards')))
        issues.extend(self._check_basic_creatures(deck))

        logger.debug("Legality check for %s in %s: %d issues", deck.name or "deck", format_name, len(issues))

        return LegalityReport(
            format_name=format_name,
            deck_size=deck.total_cards,
            expected_size=expected,
            issues=tuple(issues),
        )

    def _check_deck_size(self, deck: Deck, expected: int) -> List[LegalityIssue]:
        total = deck.total_cards
        if total == expected:
            return []
        if total < expected:
            suggestion = f"Add {expected - total} cards"
        else:
            suggestion = f"Remove {total - expected} cards"
        return [LegalityIssue(
            category='deck_size',
            message=f"Deck has {total} cards (must be exactly {expected})",
            count=total,
            suggestion=suggestion,
        )]

    def _check_copy_limits(self, deck: Deck, max_copies: int) -> List[LegalityIssue]:
        """Copies are counted by name across all printings."""
        totals: "OrderedDict[str, int]" = OrderedDict()
        names: Dict[str, str] = {}
        for entry in deck.entries:
            if is_unlimited_copies(entry.card):
                continue
            key = canonicalize_name(entry.card.name)
            totals[key] = totals.get(key, 0) + entry.quantity
            names.setdefault(key, entry.card.name)

        issues = []
        for key, quantity in totals.items():
            if quantity > max_copies:
                issues.append(LegalityIssue(
                    category='copy_limit',
                    message=f"Too many copies: {quantity} of {names[key]} (maximum: {max_copies})",
                    card_name=names[key],
                    count=quantity,
                    suggestion=f"Remove {quantity - max_copies} copies",
                ))
        return issues

    def _check_banned_cards(self, deck: Deck, banned_cards: Optional[List[str]]) -> List[LegalityIssue]:
        """Check for banned cards; formats without their own list use the shared ban list."""
        banned = {canonicalize_name(name) for name in banned_cards or ()}
        issues = []
        for entry in deck.entries:
            if entry.quantity <= 0:
                continue
            key = canonicalize_name(entry.card.name)
            banned_here = key in banned if banned_cards is not None else is_banned(entry.card)
            if banned_here:
                issues.append(LegalityIssue(
                    category='banned',
                    message=f"Banned card: {entry.card.name}",
                    card_name=entry.card.name,
                    count=entry.quantity,
                    suggestion="Remove this card from your deck",
                ))
        return issues

    def _check_basic_creatures(self, deck: Deck) -> List[LegalityIssue]:
        if deck.count(lambda card: card.is_basic) > 0:
            return []
        return [LegalityIssue(
            category='basic',
            message="Deck has no Basic creatures and can never start a game",
            count=0,
            suggestion="Add Basic creatures",
        )]


def check_deck_legality(deck: Deck, format_name: str = DEFAULT_FORMAT) -> LegalityReport:
    """Convenience function using the built-in format rules."""
    return FormatChecker().check_deck_legality(deck, format_name)
