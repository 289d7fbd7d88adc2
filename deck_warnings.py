"""
Unified warning system for deck analysis.

A WarningContext is built once per deck from the card counts, draw
statistics, evolution lines and legality report. Independent checks, grouped
by category, each return zero or more WarningItems; the engine only runs
them, isolates failures, and ranks the result.
"""
from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from card_lists import (
    basic_energy_type,
    has_evolution_skip,
    is_basic_energy,
    is_draw_trainer,
    is_energy_acceleration,
    is_gust_card,
    is_multi_prize,
    is_search_card,
    is_special_energy,
    is_switch_card,
)
from evolution import EvolutionLine, build_evolution_lines
from format_checker import DEFAULT_FORMAT, FormatChecker, LegalityReport
from models import Card, Deck, Supertype
from probability import DeckProbabilities, deck_probabilities, prize_probability_any
from utils import format_percent

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Warning severity levels"""
    CRITICAL = "critical"  # Deck is illegal or cannot function
    HIGH = "high"  # Likely to lose games on its own
    MEDIUM = "medium"  # Noticeable performance cost
    LOW = "low"  # Minor or situational
    INFO = "info"  # Notable, often positive


SEVERITY_RANK: Dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
    Severity.INFO: 4,
}


class Category(str, Enum):
    LEGALITY = "legality"
    CONSISTENCY = "consistency"
    POWER = "power"
    SPEED = "speed"
    MATCHUP = "matchup"
    ECONOMY = "economy"


@dataclass(frozen=True)
class EstimatedImpact:
    """Rough effect of a warning; negative values are harm."""
    win_rate: float = 0.0
    consistency: float = 0.0
    speed_turns: float = 0.0


@dataclass(frozen=True)
class WarningItem:
    """A single warning with structured data"""
    id: str
    code: str  # Stable ID: "LOW_BASIC_COUNT"
    severity: Severity
    category: Category
    title: str
    description: str
    suggestions: Tuple[str, ...] = ()
    priority: int = 5  # 1-10, higher is more urgent
    estimated_impact: EstimatedImpact = field(default_factory=EstimatedImpact)
    cards: Tuple[str, ...] = ()  # Card names the warning is about


@dataclass(frozen=True)
class CheckFailure:
    """A check that raised; kept for diagnostics, never shown in a report."""
    check: str
    category: Category
    error: str


@dataclass(frozen=True)
class WarningsReport:
    """Ranked warnings plus any checks that failed to run"""
    items: Tuple[WarningItem, ...]
    failures: Tuple[CheckFailure, ...] = ()

    def by_severity(self) -> Dict[Severity, List[WarningItem]]:
        """Group warnings by severity"""
        out: Dict[Severity, List[WarningItem]] = defaultdict(list)
        for w in self.items:
            out[w.severity].append(w)
        return dict(out)

    def by_category(self) -> Dict[Category, List[WarningItem]]:
        out: Dict[Category, List[WarningItem]] = defaultdict(list)
        for w in self.items:
            out[w.category].append(w)
        return dict(out)

    def codes(self) -> List[str]:
        return [w.code for w in self.items]

    def get_critical(self) -> List[WarningItem]:
        """Get only critical warnings"""
        return [w for w in self.items if w.severity == Severity.CRITICAL]


@dataclass(frozen=True)
class WarningContext:
    """Everything the checks read, computed once per deck"""
    deck: Deck
    deck_size: int

    # Card counts
    creature_count: int
    basic_count: int
    stage1_count: int
    trainer_count: int
    energy_count: int
    draw_count: int
    search_count: int
    switch_count: int
    gust_count: int
    acceleration_count: int
    attacker_count: int
    strong_attacker_count: int
    multi_prize_count: int
    single_prize_count: int

    # Attack and energy profile
    max_damage: int
    max_attack_cost: int
    total_attack_cost: int
    energy_types: FrozenSet[str]
    required_energy_types: FrozenSet[str]
    has_special_energy: bool
    creature_types: FrozenSet[str]
    has_evolution_skip: bool

    # Reports from other modules
    probabilities: DeckProbabilities
    evolution_lines: Tuple[EvolutionLine, ...]
    legality: LegalityReport

    @property
    def recommended_energy(self) -> int:
        """Energy count the attack costs call for, kept within 12-15."""
        per_attacker = math.ceil(self.total_attack_cost / 6) if self.total_attack_cost > 0 else 2
        return max(12, min(15, per_attacker + 3))

    @property
    def energy_type_count(self) -> int:
        """Distinct basic energy types, with all special energy counted as one type."""
        return len(self.energy_types) + (1 if self.has_special_energy else 0)


# Type for warning checks
WarningCheck = Callable[[WarningContext], List[WarningItem]]

# Attacks at or above this damage can 2-3 hit most creatures
STRONG_ATTACK_DAMAGE = 60


def _is_attacker(card: Card) -> bool:
    return card.is_creature and any(attack.damage > 0 for attack in card.attacks)


def _is_strong_attacker(card: Card) -> bool:
    return card.is_creature and card.max_damage >= STRONG_ATTACK_DAMAGE


def build_context(deck: Deck, format_name: str = DEFAULT_FORMAT,
                  checker: Optional[FormatChecker] = None) -> WarningContext:
    """
    Compute counts, draw statistics, evolution lines and legality for ``deck``.

    Args:
        deck: Deck to evaluate
        format_name: Format the legality checks use
        checker: Optional FormatChecker with custom rules

    Returns:
        WarningContext shared by every check
    """
    checker = checker or FormatChecker()
    entries = [e for e in deck.entries if e.quantity > 0]

    creatures = [e for e in entries if e.card.supertype == Supertype.CREATURE]
    energy = [e for e in entries if e.card.supertype == Supertype.ENERGY]

    energy_types = {basic_energy_type(e.card) for e in energy if is_basic_energy(e.card)}
    energy_types.discard(None)

    required: set = set()
    total_attack_cost = 0
    creature_types: set = set()
    for e in creatures:
        creature_types.update(e.card.types)
        for attack in e.card.attacks:
            total_attack_cost += attack.cost * e.quantity
            required.update(t for t in attack.energy_cost if t != "Colorless")

    multi_prize = deck.count(is_multi_prize)
    creature_count = sum(e.quantity for e in creatures)
    basic_count = deck.count(lambda c: c.is_basic)
    stage1_count = deck.count(lambda c: c.stage == 1)
    energy_count = sum(e.quantity for e in energy)
    draw_count = deck.count(is_draw_trainer)
    search_count = deck.count(is_search_card)
    attacker_count = deck.count(_is_attacker)

    probabilities = deck_probabilities(
        deck_size=deck.total_cards,
        basic_count=basic_count,
        playable_count=creature_count + draw_count,
        energy_count=energy_count,
        stage1_count=stage1_count,
        search_count=search_count,
        attacker_count=attacker_count,
    )

    return WarningContext(
        deck=deck,
        deck_size=deck.total_cards,
        creature_count=creature_count,
        basic_count=basic_count,
        stage1_count=stage1_count,
        trainer_count=deck.count(lambda c: c.supertype == Supertype.TRAINER),
        energy_count=energy_count,
        draw_count=draw_count,
        search_count=search_count,
        switch_count=deck.count(is_switch_card),
        gust_count=deck.count(is_gust_card),
        acceleration_count=deck.count(is_energy_acceleration),
        attacker_count=attacker_count,
        strong_attacker_count=deck.count(_is_strong_attacker),
        multi_prize_count=multi_prize,
        single_prize_count=creature_count - multi_prize,
        max_damage=max((e.card.max_damage for e in creatures), default=0),
        max_attack_cost=max((e.card.max_attack_cost for e in creatures), default=0),
        total_attack_cost=total_attack_cost,
        energy_types=frozenset(energy_types),
        required_energy_types=frozenset(required),
        has_special_energy=any(is_special_energy(e.card) for e in energy),
        creature_types=frozenset(creature_types),
        has_evolution_skip=has_evolution_skip(deck),
        probabilities=probabilities,
        evolution_lines=tuple(build_evolution_lines(deck)),
        legality=checker.check_deck_legality(deck, format_name),
    )


def _warning(
    code: str,
    category: Category,
    severity: Severity,
    title: str,
    description: str,
    suggestions: Sequence[str] = (),
    priority: int = 5,
    win_rate: float = 0.0,
    consistency: float = 0.0,
    speed_turns: float = 0.0,
    cards: Iterable[str] = (),
) -> WarningItem:
    return WarningItem(
        id=f"{category.value}:{code.lower()}",
        code=code,
        severity=severity,
        category=category,
        title=title,
        description=description,
        suggestions=tuple(suggestions),
        priority=priority,
        estimated_impact=EstimatedImpact(win_rate=win_rate, consistency=consistency, speed_turns=speed_turns),
        cards=tuple(cards),
    )


# ===== LEGALITY CHECKS =====

def check_deck_size(ctx: WarningContext) -> List[WarningItem]:
    issues = ctx.legality.by_category('deck_size')
    if not issues:
        return []
    issue = issues[0]
    return [_warning(
        "DECK_SIZE", Category.LEGALITY, Severity.CRITICAL,
        "Illegal deck size",
        issue.message,
        suggestions=[issue.suggestion] if issue.suggestion else [],
        priority=10,
        win_rate=-100,
    )]


def check_copy_limit(ctx: WarningContext) -> List[WarningItem]:
    """One warning covering every card over the copy limit"""
    issues = ctx.legality.by_category('copy_limit')
    if not issues:
        return []
    return [_warning(
        "COPY_LIMIT", Category.LEGALITY, Severity.CRITICAL,
        "Too many copies",
        "; ".join(issue.message for issue in issues),
        suggestions=[f"{issue.card_name}: {issue.suggestion}" for issue in issues],
        priority=9,
        win_rate=-50,
        cards=[issue.card_name for issue in issues],
    )]


def check_banned_cards(ctx: WarningContext) -> List[WarningItem]:
    issues = ctx.legality.by_category('banned')
    if not issues:
        return []
    names = [issue.card_name for issue in issues]
    return [_warning(
        "BANNED_CARD", Category.LEGALITY, Severity.HIGH,
        "Banned cards",
        f"{', '.join(names)} {'is' if len(names) == 1 else 'are'} banned in {ctx.legality.format_name}.",
        suggestions=["Remove banned cards before playing in sanctioned events"],
        priority=8,
        win_rate=-20,
        cards=names,
    )]


def check_basic_presence(ctx: WarningContext) -> List[WarningItem]:
    if ctx.basic_count > 0:
        return []
    return [_warning(
        "NO_BASIC_CREATURE", Category.LEGALITY, Severity.CRITICAL,
        "No Basic creatures",
        "Without a Basic creature the deck can never draw a legal opening hand.",
        suggestions=["Add at least 8-12 Basic creatures"],
        priority=10,
        win_rate=-100,
        consistency=-100,
    )]


# ===== CONSISTENCY CHECKS =====

def check_basic_count(ctx: WarningContext) -> List[WarningItem]:
    mulligan = ctx.probabilities.mulligan_rate
    if ctx.basic_count == 0:
        return []
    if ctx.basic_count < 8:
        return [_warning(
            "LOW_BASIC_COUNT", Category.CONSISTENCY,
            Severity.CRITICAL if mulligan > 0.25 else Severity.HIGH,
            "Too few Basic creatures",
            f"{ctx.basic_count} Basics gives a {format_percent(mulligan)} chance to mulligan.",
            suggestions=["Run at least 8 Basic creatures, ideally 10-12"],
            priority=9,
            win_rate=-round(mulligan * 30, 1),
            consistency=-round(mulligan * 100, 1),
        )]
    if mulligan > 0.15:
        return [_warning(
            "HIGH_MULLIGAN_RISK", Category.CONSISTENCY, Severity.LOW,
            "Noticeable mulligan risk",
            f"Opening hands miss a Basic {format_percent(mulligan)} of the time.",
            suggestions=["A couple more Basics or Basic search would lower this"],
            priority=4,
            win_rate=-round(mulligan * 10, 1),
            consistency=-round(mulligan * 50, 1),
        )]
    return [_warning(
        "GOOD_BASIC_COUNT", Category.CONSISTENCY, Severity.INFO,
        "Good Basic count",
        f"{ctx.basic_count} Basics keep the mulligan rate at {format_percent(mulligan)}.",
        priority=1,
    )]


def check_draw_support(ctx: WarningContext) -> List[WarningItem]:
    if ctx.draw_count == 0:
        return [_warning(
            "NO_DRAW_SUPPORT", Category.CONSISTENCY, Severity.CRITICAL,
            "No draw support",
            "The deck has no cards that draw, so it relies on one card per turn.",
            suggestions=["Add draw Supporters such as Professor's Research or Iono"],
            priority=9,
            win_rate=-25,
            consistency=-30,
        )]
    if ctx.draw_count < 6:
        return [_warning(
            "INSUFFICIENT_DRAW", Category.CONSISTENCY,
            Severity.HIGH if ctx.draw_count < 4 else Severity.MEDIUM,
            "Not enough draw support",
            f"Only {ctx.draw_count} draw cards; most decks run 6-10.",
            suggestions=[f"Add {6 - ctx.draw_count} more draw Supporters"],
            priority=7,
            win_rate=-10,
            consistency=-15,
        )]
    return []


def check_search(ctx: WarningContext) -> List[WarningItem]:
    if ctx.search_count >= 4:
        return []
    return [_warning(
        "INSUFFICIENT_SEARCH", Category.CONSISTENCY, Severity.MEDIUM,
        "Not enough creature search",
        f"Only {ctx.search_count} search cards to find the creatures you need.",
        suggestions=["Add Quick Ball, Ultra Ball or Nest Ball"],
        priority=6,
        win_rate=-8,
        consistency=-12,
    )]


def check_trainer_count(ctx: WarningContext) -> List[WarningItem]:
    if ctx.trainer_count >= 20:
        return []
    return [_warning(
        "LOW_TRAINER_COUNT", Category.CONSISTENCY, Severity.MEDIUM,
        "Low Trainer count",
        f"{ctx.trainer_count} Trainers; competitive decks usually run 25-35.",
        suggestions=["Trade weaker creatures or extra energy for Trainers"],
        priority=5,
        win_rate=-6,
        consistency=-10,
    )]


def check_energy_count(ctx: WarningContext) -> List[WarningItem]:
    recommended = ctx.recommended_energy
    if ctx.energy_count < 10:
        return [_warning(
            "LOW_ENERGY", Category.CONSISTENCY, Severity.HIGH,
            "Not enough energy",
            f"{ctx.energy_count} energy will strand attackers; about {recommended} fits these attacks.",
            suggestions=[f"Run around {recommended} energy"],
            priority=7,
            win_rate=-12,
            consistency=-15,
            speed_turns=1,
        )]
    if ctx.energy_count > 20:
        return [_warning(
            "TOO_MUCH_ENERGY", Category.CONSISTENCY, Severity.MEDIUM,
            "Too much energy",
            f"{ctx.energy_count} energy crowds out Trainers; about {recommended} fits these attacks.",
            suggestions=[f"Cut down to around {recommended} energy"],
            priority=5,
            win_rate=-6,
            consistency=-8,
        )]
    if abs(ctx.energy_count - recommended) <= 2:
        return [_warning(
            "GOOD_ENERGY_COUNT", Category.CONSISTENCY, Severity.INFO,
            "Good energy count",
            f"{ctx.energy_count} energy matches the attack costs.",
            priority=1,
        )]
    return []


def check_energy_types(ctx: WarningContext) -> List[WarningItem]:
    warnings = []
    missing = sorted(ctx.required_energy_types - ctx.energy_types)
    if missing:
        warnings.append(_warning(
            "ENERGY_TYPE_MISMATCH", Category.CONSISTENCY, Severity.CRITICAL,
            "Attacks need energy the deck does not run",
            f"No basic energy provides {', '.join(missing)}.",
            suggestions=[f"Add {t} Energy" for t in missing],
            priority=9,
            win_rate=-30,
            consistency=-25,
        ))
    if ctx.energy_type_count > 2:
        warnings.append(_warning(
            "TOO_MANY_ENERGY_TYPES", Category.CONSISTENCY, Severity.MEDIUM,
            "Too many energy types",
            f"{ctx.energy_type_count} energy types make it hard to power any one attacker.",
            suggestions=["Focus on one or two energy types"],
            priority=5,
            win_rate=-6,
            consistency=-10,
        ))
    return warnings


def check_evolution_structure(ctx: WarningContext) -> List[WarningItem]:
    """Lines missing a stage they need, one warning per kind of gap"""
    warnings = []
    missing_basic = [line for line in ctx.evolution_lines if line.missing_basic]
    missing_stage1 = [line for line in ctx.evolution_lines if line.missing_stage1]

    if missing_basic:
        warnings.append(_warning(
            "EVOLUTION_MISSING_BASIC", Category.CONSISTENCY, Severity.CRITICAL,
            "Evolutions without their Basic",
            "These lines have no Basic to evolve from: "
            + ", ".join(line.name for line in missing_basic) + ".",
            suggestions=[r for line in missing_basic for r in line.recommendations[:1]],
            priority=9,
            win_rate=-20,
            consistency=-20,
            cards=[card for line in missing_basic for card in line.stage1_names],
        ))
    if missing_stage1:
        warnings.append(_warning(
            "EVOLUTION_MISSING_STAGE1", Category.CONSISTENCY, Severity.CRITICAL,
            "Stage 2 without a Stage 1",
            "These Stage 2 creatures cannot evolve: "
            + ", ".join(card for line in missing_stage1 for card in line.stage2_names) + ".",
            suggestions=["Add the Stage 1 or an evolution-skip card such as Rare Candy"],
            priority=9,
            win_rate=-20,
            consistency=-20,
            cards=[card for line in missing_stage1 for card in line.stage2_names],
        ))
    return warnings


def check_evolution_bottlenecks(ctx: WarningContext) -> List[WarningItem]:
    warnings = []
    blocked = [line for line in ctx.evolution_lines if line.has_bottleneck and not line.bottleneck_suppressed]
    skipped = [line for line in ctx.evolution_lines if line.has_bottleneck and line.bottleneck_suppressed]

    if blocked:
        warnings.append(_warning(
            "EVOLUTION_BOTTLENECK", Category.CONSISTENCY, Severity.MEDIUM,
            "Evolution bottleneck",
            "; ".join(f"{line.name} ({line.structure}) is short on {line.bottleneck.value}" for line in blocked),
            suggestions=[r for line in blocked for r in line.recommendations[:1]],
            priority=6,
            win_rate=-8,
            consistency=-10,
            cards=[line.name for line in blocked],
        ))
    if skipped:
        warnings.append(_warning(
            "EVOLUTION_BOTTLENECK_SKIPPED", Category.CONSISTENCY, Severity.INFO,
            "Uneven lines covered by evolution skip",
            "Evolution-skip cards support the ratios of "
            + ", ".join(f"{line.name} ({line.structure})" for line in skipped) + ".",
            priority=1,
            cards=[line.name for line in skipped],
        ))
    return warnings


def check_stage2_consistency(ctx: WarningContext) -> List[WarningItem]:
    weak = [
        line for line in ctx.evolution_lines
        if line.stage2 is not None and line.consistency.turn_three_stage2 < 0.40
    ]
    if not weak:
        return []
    return [_warning(
        "LOW_STAGE2_CONSISTENCY", Category.CONSISTENCY, Severity.MEDIUM,
        "Stage 2 rarely online by turn 3",
        "; ".join(
            f"{line.name} line: {format_percent(line.consistency.turn_three_stage2, 0)} by turn 3"
            for line in weak
        ),
        suggestions=["Increase line counts or add more search and draw"],
        priority=5,
        win_rate=-5,
        consistency=-10,
        speed_turns=1,
        cards=[card for line in weak for card in line.stage2_names],
    )]


def check_dead_draw(ctx: WarningContext) -> List[WarningItem]:
    rate = ctx.probabilities.dead_draw_rate
    if rate <= 0.10:
        return []
    return [_warning(
        "HIGH_DEAD_DRAW_RISK", Category.CONSISTENCY, Severity.MEDIUM,
        "Risk of dead opening hands",
        f"{format_percent(rate)} of opening hands hold no creature and no draw card.",
        suggestions=["Add draw Supporters or creatures"],
        priority=5,
        win_rate=-round(rate * 20, 1),
        consistency=-round(rate * 100, 1),
    )]


def check_creature_count(ctx: WarningContext) -> List[WarningItem]:
    if ctx.creature_count < 12:
        return [_warning(
            "FEW_CREATURES", Category.CONSISTENCY, Severity.MEDIUM,
            "Few creatures",
            f"{ctx.creature_count} creatures; running out of attackers is likely.",
            suggestions=["Most decks run 12-20 creatures"],
            priority=5,
            win_rate=-5,
        )]
    if ctx.creature_count > 25:
        return [_warning(
            "TOO_MANY_CREATURES", Category.CONSISTENCY, Severity.LOW,
            "Too many creatures",
            f"{ctx.creature_count} creatures leave little room for Trainers.",
            suggestions=["Cut to around 20 creatures and add draw or search"],
            priority=4,
            win_rate=-4,
        )]
    return [_warning(
        "GOOD_CREATURE_COUNT", Category.CONSISTENCY, Severity.INFO,
        "Good creature count",
        f"{ctx.creature_count} creatures is a healthy number.",
        priority=1,
    )]


def check_prize_risk(ctx: WarningContext) -> List[WarningItem]:
    """Lines that depend on a single copy of a lower stage"""
    thin = []
    for line in ctx.evolution_lines:
        if not line.is_evolution:
            continue
        for entry in (line.basic, *line.stage1_branches):
            if entry is not None and entry.quantity == 1:
                thin.append(entry.card.name)
    if not thin:
        return []
    chance = prize_probability_any(1, deck_size=ctx.deck_size or 60)
    return [_warning(
        "SINGLE_PRIZE_RISK", Category.CONSISTENCY, Severity.LOW,
        "Single-copy evolution pieces",
        f"{', '.join(thin)} can be prized ({format_percent(chance, 0)} each game), stranding the line.",
        suggestions=["Run at least two copies of each lower stage"],
        priority=3,
        win_rate=-2,
        consistency=-round(chance * 50, 1),
        cards=thin,
    )]


# ===== POWER CHECKS =====

def check_attackers(ctx: WarningContext) -> List[WarningItem]:
    if ctx.attacker_count == 0:
        return [_warning(
            "NO_ATTACKERS", Category.POWER, Severity.CRITICAL,
            "No attackers",
            "None of the creatures has a damaging attack.",
            suggestions=["Add creatures with attacks that deal damage"],
            priority=10,
            win_rate=-60,
        )]
    if ctx.attacker_count < 6:
        return [_warning(
            "FEW_ATTACKERS", Category.POWER, Severity.MEDIUM,
            "Few attackers",
            f"Only {ctx.attacker_count} cards can attack.",
            suggestions=["Add more creatures with strong attacks"],
            priority=6,
            win_rate=-10,
        )]
    if ctx.strong_attacker_count < 4:
        return [_warning(
            "WEAK_ATTACKS", Category.POWER, Severity.MEDIUM,
            "Attacks lack power",
            f"Only {ctx.strong_attacker_count} attackers reach {STRONG_ATTACK_DAMAGE} damage.",
            suggestions=[f"Add attackers that hit for {STRONG_ATTACK_DAMAGE}+ damage"],
            priority=6,
            win_rate=-10,
        )]
    return [_warning(
        "GOOD_ATTACKERS", Category.POWER, Severity.INFO,
        "Good attackers",
        f"{ctx.strong_attacker_count} attackers hit for {STRONG_ATTACK_DAMAGE}+ damage.",
        priority=1,
    )]


def check_damage_output(ctx: WarningContext) -> List[WarningItem]:
    if ctx.attacker_count == 0 or ctx.max_damage >= 200:
        return []
    return [_warning(
        "LOW_DAMAGE_OUTPUT", Category.POWER,
        Severity.HIGH if ctx.max_damage < 150 else Severity.MEDIUM,
        "Low damage ceiling",
        f"The best attack deals {ctx.max_damage}; big creatures will take 2+ hits.",
        suggestions=["Add an attacker that can deal 200+ damage"],
        priority=5,
        win_rate=-8,
        speed_turns=1,
    )]


def check_gust(ctx: WarningContext) -> List[WarningItem]:
    if ctx.gust_count > 0:
        return []
    return [_warning(
        "NO_GUST", Category.POWER, Severity.HIGH,
        "No gust effects",
        "Nothing can pull an opponent's Benched creature into the Active Spot.",
        suggestions=["Add Boss's Orders or Counter Catcher"],
        priority=6,
        win_rate=-15,
    )]


# ===== SPEED CHECKS =====

def check_energy_acceleration(ctx: WarningContext) -> List[WarningItem]:
    if ctx.max_attack_cost < 3 or ctx.acceleration_count > 0:
        return []
    return [_warning(
        "SLOW_ENERGY_SETUP", Category.SPEED, Severity.MEDIUM,
        "Slow energy setup",
        f"Attacks cost up to {ctx.max_attack_cost} energy with no way to attach extra.",
        suggestions=["Add energy acceleration or cheaper attackers"],
        priority=6,
        win_rate=-8,
        speed_turns=1,
    )]


def check_switch(ctx: WarningContext) -> List[WarningItem]:
    if ctx.switch_count > 0:
        return []
    return [_warning(
        "MISSING_SWITCH", Category.SPEED, Severity.MEDIUM,
        "No switching cards",
        "A stuck Active creature cannot retreat for free.",
        suggestions=["Add Switch or Escape Rope"],
        priority=5,
        win_rate=-6,
        speed_turns=0.5,
    )]


def check_setup_speed(ctx: WarningContext) -> List[WarningItem]:
    turn1 = ctx.probabilities.setup_for_turn(1)
    turn3 = ctx.probabilities.setup_for_turn(3)
    if turn1 < 0.50:
        return [_warning(
            "SLOW_SETUP", Category.SPEED, Severity.HIGH,
            "Unreliable first turn",
            f"Basic plus energy on turn 1 only {format_percent(turn1)} of the time.",
            suggestions=["Add Basics, energy or search"],
            priority=6,
            win_rate=-8,
            speed_turns=1,
        )]
    if turn3 < 0.40:
        return [_warning(
            "SLOW_SETUP", Category.SPEED, Severity.MEDIUM,
            "Slow setup",
            f"A powered attacker by turn 3 only {format_percent(turn3)} of the time.",
            suggestions=["Add search and draw to find attackers sooner"],
            priority=5,
            win_rate=-5,
            speed_turns=1,
        )]
    if turn3 >= 0.50:
        return [_warning(
            "GOOD_SETUP", Category.SPEED, Severity.INFO,
            "Fast setup",
            f"A powered attacker by turn 3 {format_percent(turn3)} of the time.",
            priority=1,
        )]
    return []


# ===== MATCHUP CHECKS =====

def check_type_diversity(ctx: WarningContext) -> List[WarningItem]:
    if len(ctx.creature_types) != 1:
        return []
    only = next(iter(ctx.creature_types))
    return [_warning(
        "NO_TYPE_DIVERSITY", Category.MATCHUP, Severity.LOW,
        "Single creature type",
        f"Every creature is {only}; one resistant opponent can wall the deck.",
        suggestions=["Consider a secondary attacker of another type"],
        priority=3,
        win_rate=-3,
    )]


# ===== ECONOMY CHECKS =====

def check_prize_trade(ctx: WarningContext) -> List[WarningItem]:
    multi = ctx.multi_prize_count
    single = ctx.single_prize_count
    if multi > 8 or (multi > 4 and single < multi):
        return [_warning(
            "TOO_MANY_MULTI_PRIZE", Category.ECONOMY, Severity.MEDIUM,
            "Unfavorable prize trade",
            f"{multi} multi-prize creatures give up 2-3 prizes each when knocked out.",
            suggestions=["Mix in single-prize attackers"],
            priority=5,
            win_rate=-8,
        )]
    if multi <= 4 and single > 0 and single >= multi * 2:
        return [_warning(
            "FAVORABLE_PRIZE_TRADE", Category.ECONOMY, Severity.INFO,
            "Favorable prize trade",
            f"{single} single-prize creatures against {multi} multi-prize.",
            priority=1,
        )]
    return []


# ===== CHECK REGISTRY =====

CHECKS: Dict[Category, Tuple[WarningCheck, ...]] = {
    Category.LEGALITY: (
        check_deck_size,
        check_copy_limit,
        check_banned_cards,
        check_basic_presence,
    ),
    Category.CONSISTENCY: (
        check_basic_count,
        check_draw_support,
        check_search,
        check_trainer_count,
        check_energy_count,
        check_energy_types,
        check_evolution_structure,
        check_evolution_bottlenecks,
        check_stage2_consistency,
        check_dead_draw,
        check_creature_count,
        check_prize_risk,
    ),
    Category.POWER: (
        check_attackers,
        check_damage_output,
        check_gust,
    ),
    Category.SPEED: (
        check_energy_acceleration,
        check_switch,
        check_setup_speed,
    ),
    Category.MATCHUP: (
        check_type_diversity,
    ),
    Category.ECONOMY: (
        check_prize_trade,
    ),
}


def default_checks() -> List[Tuple[Category, WarningCheck]]:
    """Return the standard set of checks, paired with their category"""
    return [(category, check) for category, checks in CHECKS.items() for check in checks]


# ===== MAIN EVALUATION FUNCTION =====

def sort_warnings(items: Iterable[WarningItem]) -> List[WarningItem]:
    """Most severe first, then highest priority; ties keep their order."""
    return sorted(items, key=lambda w: (SEVERITY_RANK[w.severity], -w.priority))


def evaluate_warnings(
    ctx: WarningContext,
    checks: Optional[List[Tuple[Category, WarningCheck]]] = None,
) -> WarningsReport:
    """
    Run every check against the context.

    A check that raises is logged and recorded as a CheckFailure; the
    remaining checks still run. Warnings are never deduplicated.

    Args:
        ctx: WarningContext with deck data
        checks: Optional custom check set (uses defaults if None)

    Returns:
        WarningsReport with ranked warnings and any failures
    """
    if checks is None:
        checks = default_checks()

    items: List[WarningItem] = []
    failures: List[CheckFailure] = []

    for category, check in checks:
        name = getattr(check, "__name__", repr(check))
        try:
            items.extend(check(ctx))
        except Exception as e:
            logger.exception("Warning check %s failed", name)
            failures.append(CheckFailure(check=name, category=category, error=f"{type(e).__name__}: {e}"))

    return WarningsReport(items=tuple(sort_warnings(items)), failures=tuple(failures))


def aggregate_win_rate_impact(items: Iterable[WarningItem]) -> float:
    """
    Combined win-rate impact with diminishing returns.

    Impacts are taken most harmful first; each one counts 0.8 times as much
    as the one before. The total never drops below -90.
    """
    impacts = sorted(w.estimated_impact.win_rate for w in items)
    total = 0.0
    factor = 1.0
    for impact in impacts:
        total += impact * factor
        factor *= 0.8
    return max(-90.0, total)


# ===== REPORTING =====

def warning_summary(report: WarningsReport) -> str:
    """Generate human-readable warnings summary"""
    if not report.items:
        return "No warnings detected - deck looks clean!"

    lines = [f"Total Warnings: {len(report.items)}"]
    by_severity = report.by_severity()

    for severity in Severity:
        warnings = by_severity.get(severity, [])
        if warnings:
            lines.append(f"\n{severity.value.upper()} ({len(warnings)}):")
            for w in warnings:
                lines.append(f"\n  {w.title}")
                lines.append(f"    {w.description}")
                for suggestion in w.suggestions[:3]:
                    lines.append(f"    💡 {suggestion}")

    return "\n".join(lines)
