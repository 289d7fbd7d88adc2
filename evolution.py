"""
Evolution line reconstruction.

Groups a deck's creatures into Basic -> Stage 1 -> Stage 2 lines, diagnoses
missing stages and quantity bottlenecks, and attaches draw consistency odds
to each line. Malformed references (cycles, dangling ``evolves_from`` names,
untagged stages) never raise; they degrade to partial or unknown lines.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from card_lists import has_evolution_skip
from models import Card, Deck, DeckEntry
from probability import LineConsistency, evolution_line_consistency
from utils import canonicalize_name

logger = logging.getLogger(__name__)

MAX_EVOLUTION_DEPTH = 3


class LineType(str, Enum):
    SINGLE = "single"  # Basic -> Stage 1
    DOUBLE = "double"  # Basic -> Stage 1 -> Stage 2


class Bottleneck(str, Enum):
    BASIC = "basic"
    STAGE1 = "stage1"
    STAGE2 = "stage2"
    NONE = "none"


@dataclass(frozen=True)
class EvolutionLine:
    """
    One reconstructed evolution line, keyed by its earliest known ancestor.

    ``stage1`` and ``stage2`` hold the first entry at that stage. Branched
    lines (Eevee into several Stage 1s) keep every entry in the
    ``*_branches`` tuples, and the stage counts add the branches up.
    """
    name: str
    basic: Optional[DeckEntry]
    stage1: Optional[DeckEntry]
    stage2: Optional[DeckEntry]
    line_type: LineType
    bottleneck: Bottleneck
    consistency: LineConsistency
    stage1_branches: Tuple[DeckEntry, ...] = field(default_factory=tuple)
    stage2_branches: Tuple[DeckEntry, ...] = field(default_factory=tuple)
    bottleneck_suppressed: bool = False
    missing_basic: bool = False
    missing_stage1: bool = False
    issues: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def basic_count(self) -> int:
        return self.basic.quantity if self.basic else 0

    @property
    def stage1_count(self) -> int:
        return sum(entry.quantity for entry in self.stage1_branches)

    @property
    def stage2_count(self) -> int:
        return sum(entry.quantity for entry in self.stage2_branches)

    @property
    def is_branched(self) -> bool:
        return len(self.stage1_branches) > 1 or len(self.stage2_branches) > 1

    @property
    def stage1_names(self) -> List[str]:
        return [entry.card.name for entry in self.stage1_branches]

    @property
    def stage2_names(self) -> List[str]:
        return [entry.card.name for entry in self.stage2_branches]

    @property
    def structure(self) -> str:
        """Counts per stage, e.g. "4-3-3"; empty later stages are left off."""
        counts = [self.basic_count, self.stage1_count, self.stage2_count]
        return "-".join(str(q) for i, q in enumerate(counts) if i == 0 or q > 0)

    @property
    def is_unknown(self) -> bool:
        """No stage could be placed in this line."""
        return self.basic is None and self.stage1 is None and self.stage2 is None

    @property
    def is_evolution(self) -> bool:
        return self.stage1 is not None or self.stage2 is not None

    @property
    def has_bottleneck(self) -> bool:
        return self.bottleneck != Bottleneck.NONE


# ===== GRAPH WALK =====

def _index_creatures(deck: Deck) -> Dict[str, DeckEntry]:
    """
    Index creature entries by canonical name.

    Duplicate printings of one name are merged by summing quantities; the
    first printing's card is kept. Quantity-0 entries are indexed so names
    still resolve.
    """
    index: Dict[str, DeckEntry] = {}
    for entry in deck.entries:
        if not entry.card.is_creature:
            continue
        key = canonicalize_name(entry.card.name)
        if key in index:
            merged = index[key]
            index[key] = DeckEntry(card=merged.card, quantity=merged.quantity + entry.quantity)
        else:
            index[key] = entry
    return index


def _root_name(card: Card, index: Dict[str, DeckEntry]) -> str:
    """
    Name of the earliest known ancestor of ``card``.

    Walks ``evolves_from`` at most MAX_EVOLUTION_DEPTH steps. A dangling
    reference ends the walk on the missing name; a cycle ends it on the last
    card reached.
    """
    current = card
    visited = {canonicalize_name(card.name)}
    for _ in range(MAX_EVOLUTION_DEPTH):
        parent_name = current.evolves_from
        if not parent_name:
            break
        parent_key = canonicalize_name(parent_name)
        if parent_key in visited:
            logger.debug("Evolution cycle at %s -> %s", current.name, parent_name)
            break
        parent = index.get(parent_key)
        if parent is None:
            return parent_name
        visited.add(parent_key)
        current = parent.card
    return current.name


def _stage_of(card: Card, index: Dict[str, DeckEntry]) -> Optional[int]:
    """Tagged stage, or one inferred from the parent when the card has none."""
    if card.stage is not None:
        return card.stage
    if not card.evolves_from:
        return None
    parent = index.get(canonicalize_name(card.evolves_from))
    if parent is not None and parent.card.stage == 1:
        return 2
    return 1


def _has_stage2_above(stage1_branches: List[DeckEntry], deck: Deck) -> bool:
    keys = {canonicalize_name(entry.card.name) for entry in stage1_branches}
    for entry in deck.entries:
        card = entry.card
        if not card.is_creature or entry.quantity <= 0:
            continue
        if "Stage 2" in card.subtypes and card.evolves_from and canonicalize_name(card.evolves_from) in keys:
            return True
    return False


def _join_names(entries: List[DeckEntry]) -> str:
    return "/".join(entry.card.name for entry in entries)


# ===== DIAGNOSIS =====

def _diagnose(
    name: str,
    slots: Dict[int, List[DeckEntry]],
    deck: Deck,
    skip_available: bool,
) -> EvolutionLine:
    basics = slots.get(0, [])
    stage1s = slots.get(1, [])
    stage2s = slots.get(2, [])
    basic = basics[0] if basics else None
    stage1 = stage1s[0] if stage1s else None
    stage2 = stage2s[0] if stage2s else None

    # Stage counts add up every branch
    basic_qty = basic.quantity if basic else 0
    stage1_qty = sum(entry.quantity for entry in stage1s)
    stage2_qty = sum(entry.quantity for entry in stage2s)

    issues: List[str] = []
    recommendations: List[str] = []

    missing_basic = basic is None and stage1 is not None
    missing_stage1 = stage2 is not None and stage1 is None
    if missing_stage1 and skip_available and basic is not None:
        # Rare Candy style cards evolve the Basic directly
        missing_stage1 = False

    if missing_basic:
        issues.append(f"No Basic for the {name} line")
        recommendations.append(f"Add the Basic {name} so the line can be played")
    if missing_stage1:
        issues.append(f"{_join_names(stage2s)} has no Stage 1 in the deck")
        recommendations.append(f"Add {stage2.card.evolves_from or 'its Stage 1'} or an evolution-skip card")

    bottleneck = Bottleneck.NONE
    if stage2 is not None and stage2_qty > stage1_qty:
        bottleneck = Bottleneck.STAGE1
        issues.append(
            f"Evolution bottleneck: only {stage1_qty} Stage 1 for {stage2_qty} {_join_names(stage2s)}"
        )
        recommendations.append(
            f"Balance the line: use {stage2_qty}-{stage2_qty}-{stage2_qty} "
            f"or {stage2_qty + 1}-{stage2_qty}-{stage2_qty}"
        )
    elif stage1 is not None and stage1_qty > basic_qty:
        bottleneck = Bottleneck.BASIC
        issues.append(f"Not enough Basic {name} for {stage1_qty} {_join_names(stage1s)}")
        recommendations.append(f"Increase the Basic to at least {stage1_qty}")

    suppressed = bottleneck != Bottleneck.NONE and skip_available

    if basic and stage1 and stage2 and bottleneck == Bottleneck.NONE:
        good_pattern = (
            (basic_qty, stage1_qty, stage2_qty) in {(4, 3, 3), (3, 2, 2), (4, 2, 3)}
            or (basic_qty == stage2_qty + 1 and stage1_qty == stage2_qty)
        )
        if not good_pattern:
            recommendations.append(
                "Consider 4-3-3 for maximum consistency" if stage2_qty >= 3
                else f"Consider {stage2_qty + 1}-{stage2_qty}-{stage2_qty} for better consistency"
            )

    line_type = LineType.SINGLE
    if stage2 is not None or (stage1s and _has_stage2_above(stage1s, deck)):
        line_type = LineType.DOUBLE

    consistency = evolution_line_consistency(
        basic_qty,
        stage1_qty,
        stage2_qty if stage2 is not None else None,
        deck.total_cards,
    )

    return EvolutionLine(
        name=name,
        basic=basic,
        stage1=stage1,
        stage2=stage2,
        line_type=line_type,
        bottleneck=bottleneck,
        consistency=consistency,
        stage1_branches=tuple(stage1s),
        stage2_branches=tuple(stage2s),
        bottleneck_suppressed=suppressed,
        missing_basic=missing_basic,
        missing_stage1=missing_stage1,
        issues=tuple(issues),
        recommendations=tuple(recommendations),
    )


def _unknown_line(name: str, deck: Deck) -> EvolutionLine:
    return EvolutionLine(
        name=name,
        basic=None,
        stage1=None,
        stage2=None,
        line_type=LineType.SINGLE,
        bottleneck=Bottleneck.NONE,
        consistency=evolution_line_consistency(0, 0, None, deck.total_cards),
        issues=(f"Could not place {name} in an evolution line",),
    )


# ===== PUBLIC API =====

def build_evolution_lines(deck: Deck) -> List[EvolutionLine]:
    """
    Reconstruct every evolution line in ``deck``.

    Lines are returned in order of first appearance in the deck. Every entry
    with a positive quantity is kept on its line; sibling evolutions become
    branches of the same stage.

    Args:
        deck: Deck to inspect (only creature entries are used)

    Returns:
        List of EvolutionLine
    """
    index = _index_creatures(deck)
    skip_available = has_evolution_skip(deck)

    groups: Dict[str, Dict[int, List[DeckEntry]]] = {}
    display_names: Dict[str, str] = {}
    unknown: Dict[str, str] = {}
    order: List[str] = []

    for key, entry in index.items():
        card = entry.card
        stage = _stage_of(card, index)

        if stage is None or (stage > 0 and not card.evolves_from):
            # Evolved card with nothing to walk back from
            line_key = f"?{key}"
            if line_key not in unknown:
                unknown[line_key] = card.name
                order.append(line_key)
            continue

        root = card.name if stage == 0 else _root_name(card, index)
        line_key = canonicalize_name(root)
        if line_key not in groups:
            groups[line_key] = {}
            display_names[line_key] = root
            order.append(line_key)

        if entry.quantity > 0:
            groups[line_key].setdefault(stage, []).append(entry)

    lines: List[EvolutionLine] = []
    for line_key in order:
        if line_key in unknown:
            lines.append(_unknown_line(unknown[line_key], deck))
        else:
            lines.append(_diagnose(display_names[line_key], groups[line_key], deck, skip_available))

    logger.debug("Built %d evolution lines for %s", len(lines), deck.name or "deck")
    return lines


def line_score(line: EvolutionLine) -> float:
    """Headline consistency of a line: its top stage's on-curve probability."""
    if line.stage2 is not None:
        return line.consistency.turn_three_stage2
    if line.stage1 is not None:
        return line.consistency.turn_two_stage1
    return 1.0 if line.basic is not None else 0.0


def overall_line_score(lines: List[EvolutionLine]) -> int:
    """Average headline consistency of the evolving lines, 0-100 (100 when none evolve)."""
    evolving = [line for line in lines if line.is_evolution]
    if not evolving:
        return 100
    return round(sum(line_score(line) for line in evolving) / len(evolving) * 100)
