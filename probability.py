"""
Hypergeometric draw statistics for deck evaluation.

All functions are pure and never raise on numeric edge cases: degenerate
inputs (empty deck, no successes, drawing more cards than the deck holds)
return defined sentinel values of 0.0 or 1.0 instead of NaN.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

OPENING_HAND_SIZE = 7
PRIZE_COUNT = 6
STANDARD_DECK_SIZE = 60

# Setup probabilities multiply per-resource odds as if they were independent.
# Later turns are scaled down so the compounding does not overestimate setup.
# This is a heuristic convention, not a sequential draw model.
DAMPENING_BY_TURN: Dict[int, float] = {1: 1.0, 2: 0.8}
LATE_TURN_DAMPENING = 0.7


# ===== PRIMITIVES =====

def comb(n: int, k: int) -> float:
    """
    Binomial coefficient as a running product, never materializing factorials.

    Returns 0.0 when k < 0 or k > n.
    """
    if k < 0 or k > n:
        return 0.0
    result = 1.0
    for i in range(1, k + 1):
        result = result * (n - i + 1) / i
    return result


def probability_none(deck_size: int, success_count: int, draw_count: int) -> float:
    """
    Probability of drawing zero successes.

    P(X=0) = prod_{i<draw} (deck - success - i) / (deck - i)

    Sentinels:
        success_count <= 0         -> 1.0
        draw_count <= 0            -> 1.0
        draw_count > deck_size     -> 0.0
        success_count >= deck_size -> 0.0
    """
    if success_count <= 0 or draw_count <= 0:
        return 1.0
    if draw_count > deck_size or success_count >= deck_size:
        return 0.0

    probability = 1.0
    for i in range(draw_count):
        probability *= (deck_size - success_count - i) / (deck_size - i)
        if probability <= 0.0:
            return 0.0
    return probability


def probability_at_least_one(deck_size: int, success_count: int, draw_count: int) -> float:
    """Probability of drawing at least one success."""
    return 1.0 - probability_none(deck_size, success_count, draw_count)


def probability_exactly(deck_size: int, success_count: int, draw_count: int, k: int) -> float:
    """Probability of drawing exactly ``k`` successes; 0.0 when impossible."""
    if deck_size <= 0 or draw_count < 0 or draw_count > deck_size:
        return 0.0
    success_count = max(0, min(success_count, deck_size))
    total = comb(deck_size, draw_count)
    if total == 0:
        return 0.0
    value = comb(success_count, k) * comb(deck_size - success_count, draw_count - k) / total
    return min(1.0, max(0.0, value))


def probability_at_least(deck_size: int, success_count: int, draw_count: int, k: int) -> float:
    """Probability of drawing ``k`` or more successes."""
    if k <= 0:
        return 1.0
    if k == 1:
        return probability_at_least_one(deck_size, success_count, draw_count)
    upper = min(success_count, draw_count)
    total = sum(probability_exactly(deck_size, success_count, draw_count, i) for i in range(k, upper + 1))
    return min(1.0, max(0.0, total))


# ===== DERIVED METRICS =====

def mulligan_rate(basic_count: int, deck_size: int = STANDARD_DECK_SIZE,
                  hand_size: int = OPENING_HAND_SIZE) -> float:
    """Chance the opening hand holds no Basic creature."""
    return probability_none(deck_size, basic_count, hand_size)


def dead_draw_rate(playable_count: int, deck_size: int = STANDARD_DECK_SIZE,
                   hand_size: int = OPENING_HAND_SIZE) -> float:
    """Chance the opening hand holds no creature and no draw trainer."""
    return probability_none(deck_size, playable_count, hand_size)


def draws_by_turn(turn: int) -> int:
    """Cards seen by turn N: the opening hand plus one draw per turn after the first."""
    return OPENING_HAND_SIZE + (turn - 1)


def dampening_for_turn(turn: int) -> float:
    return DAMPENING_BY_TURN.get(turn, LATE_TURN_DAMPENING)


@dataclass(frozen=True)
class SetupRequirement:
    """A resource class needed for setup: ``minimum`` copies out of ``count`` in the deck."""
    name: str
    count: int
    minimum: int = 1


def setup_probability(requirements: Iterable[SetupRequirement], deck_size: int, turn: int) -> float:
    """
    Approximate chance of holding every requirement by ``turn``.

    Per-resource probabilities are multiplied as if independent, then scaled
    by the turn's dampening factor.
    """
    draws = draws_by_turn(turn)
    probability = 1.0
    for req in requirements:
        probability *= probability_at_least(deck_size, req.count, draws, req.minimum)
    return probability * dampening_for_turn(turn)


def deck_setup_by_turn(
    deck_size: int,
    basic_count: int,
    energy_count: int,
    stage1_count: int,
    search_count: int,
    attacker_count: int,
) -> Dict[int, float]:
    """
    Setup probabilities for turns 1-3, in turn order.

    Turn 1: a Basic and an energy.
    Turn 2: a Stage 1 (a Basic when the deck runs no Stage 1) and a search card.
    Turn 3: an attacker and two energy.
    """
    turn_two_piece = stage1_count if stage1_count > 0 else basic_count
    plan = {
        1: (SetupRequirement("basic", basic_count), SetupRequirement("energy", energy_count)),
        2: (SetupRequirement("stage1", turn_two_piece), SetupRequirement("search", search_count)),
        3: (SetupRequirement("attacker", attacker_count), SetupRequirement("energy", energy_count, 2)),
    }
    return {turn: setup_probability(reqs, deck_size, turn) for turn, reqs in plan.items()}


@dataclass(frozen=True)
class LineConsistency:
    """Chance of having an evolution line's stages online on time."""
    turn_two_stage1: float
    turn_three_stage2: float


def evolution_line_consistency(
    basic_count: int,
    stage1_count: int,
    stage2_count: Optional[int] = None,
    deck_size: int = STANDARD_DECK_SIZE,
) -> LineConsistency:
    """
    Turn-2 Stage 1 and turn-3 Stage 2 probabilities for one evolution line.

    Each stage must be drawn by the turn it is played (Basic by turn 1,
    Stage 1 by turn 2, Stage 2 by turn 3). A line without a Stage 2
    contributes a factor of 1 for that stage.
    """
    p_basic = probability_at_least_one(deck_size, basic_count, draws_by_turn(1))
    p_stage1 = probability_at_least_one(deck_size, stage1_count, draws_by_turn(2))
    p_stage2 = 1.0
    if stage2_count is not None:
        p_stage2 = probability_at_least_one(deck_size, stage2_count, draws_by_turn(3))

    return LineConsistency(
        turn_two_stage1=p_basic * p_stage1 * dampening_for_turn(2),
        turn_three_stage2=p_basic * p_stage1 * p_stage2 * dampening_for_turn(3),
    )


# ===== PRIZE RISK =====

def prize_probability_any(copies: int, prizes: int = PRIZE_COUNT,
                          deck_size: int = STANDARD_DECK_SIZE) -> float:
    """Chance at least one copy of a card is set aside as a prize."""
    return probability_at_least_one(deck_size, copies, prizes)


def prize_probability_all(copies: int, prizes: int = PRIZE_COUNT,
                          deck_size: int = STANDARD_DECK_SIZE) -> float:
    """Chance every copy of a card is prized, leaving none to draw."""
    if copies <= 0:
        return 0.0
    return probability_exactly(deck_size, copies, prizes, copies)


# ===== DECK SUMMARY =====

@dataclass(frozen=True)
class DeckProbabilities:
    """Draw statistics reported for a whole deck."""
    mulligan_rate: float
    dead_draw_rate: float
    setup_by_turn: Tuple[Tuple[int, float], ...]

    def setup_for_turn(self, turn: int) -> float:
        for t, probability in self.setup_by_turn:
            if t == turn:
                return probability
        return 0.0


def deck_probabilities(
    deck_size: int,
    basic_count: int,
    playable_count: int,
    energy_count: int,
    stage1_count: int,
    search_count: int,
    attacker_count: int,
) -> DeckProbabilities:
    setup = deck_setup_by_turn(
        deck_size=deck_size,
        basic_count=basic_count,
        energy_count=energy_count,
        stage1_count=stage1_count,
        search_count=search_count,
        attacker_count=attacker_count,
    )
    return DeckProbabilities(
        mulligan_rate=mulligan_rate(basic_count, deck_size),
        dead_draw_rate=dead_draw_rate(playable_count, deck_size),
        setup_by_turn=tuple(sorted(setup.items())),
    )
