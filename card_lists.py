"""
Single source of truth for card classification lists.
All card names are stored canonicalized (lowercase, accents stripped) for
consistent matching.

IMPORTANT: the engine never substring-matches card names at call sites. Every
classification goes through one of the named predicates at the bottom of this
module, so the matching surface stays small and testable.
"""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional

from models import Card, Deck, Supertype
from utils import canonicalize_name as _canon


# =========================================================================
# EVOLUTION SKIP
# Cards that let a Basic evolve straight into its Stage 2. Decks running
# them legitimately play fewer Stage 1 copies than Stage 2 copies.
# =========================================================================
EVOLUTION_SKIP_CARDS: FrozenSet[str] = frozenset({
    "rare candy",
    "pokemon breeder",
    "pokemon breeder fields",
})


# =========================================================================
# DRAW SUPPORT
# Supporters (and a few items) whose main job is refilling the hand.
# =========================================================================
DRAW_SUPPORTERS: FrozenSet[str] = frozenset({
    "professor's research",
    "professor oak",
    "professor juniper",
    "professor sycamore",
    "professor elm's lecture",
    "marnie",
    "cynthia",
    "cynthia's ambition",
    "iono",
    "n",
    "hop",
    "lillie",
    "bianca",
    "shauna",
    "tierno",
    "judge",
    "colress's experiment",
    "bill",
    "steven's resolve",
    "erika's hospitality",
    "bruno",
    "roxanne",
    "hau",
    "sada's vitality",
})

# Rules-text phrases that mark a trainer as card draw when it is not listed above
DRAW_TEXT_MARKERS: FrozenSet[str] = frozenset({
    "draw a card",
    "draw cards",
    "draw 2 cards",
    "draw 3 cards",
    "draw 4 cards",
    "draw 5 cards",
    "draw 6 cards",
    "draw 7 cards",
    "draw until you have",
    "draws a card",
})


# =========================================================================
# CREATURE SEARCH
# =========================================================================
SEARCH_CARDS: FrozenSet[str] = frozenset({
    "quick ball",
    "ultra ball",
    "nest ball",
    "level ball",
    "great ball",
    "poke ball",
    "timer ball",
    "dusk ball",
    "master ball",
    "hisuian heavy ball",
    "buddy-buddy poffin",
    "evolution incense",
    "pokemon communication",
    "pokemon fan club",
    "battle vip pass",
    "capturing aroma",
    "secret box",
    "irida",
    "arven",
    "sonia",
    "brock's scouting",
})

SEARCH_TEXT_MARKERS: FrozenSet[str] = frozenset({
    "search your deck for a pokemon",
    "search your deck for up to 2 pokemon",
    "search your deck for a basic pokemon",
    "search your deck for an evolution pokemon",
    "search your deck for a creature",
})


# =========================================================================
# MOBILITY
# =========================================================================
SWITCH_CARDS: FrozenSet[str] = frozenset({
    "switch",
    "switch cart",
    "escape rope",
    "prime catcher",
    "guzma",
    "tate & liza",
    "scoop up net",
    "bird keeper",
    "float stone",
    "air balloon",
    "rescue board",
})

GUST_CARDS: FrozenSet[str] = frozenset({
    "boss's orders",
    "guzma",
    "lysandre",
    "cross switcher",
    "prime catcher",
    "counter catcher",
    "pokemon catcher",
})


# =========================================================================
# ENERGY ACCELERATION
# =========================================================================
ENERGY_ACCELERATION_CARDS: FrozenSet[str] = frozenset({
    "elesa's sparkle",
    "welder",
    "dark patch",
    "metal saucer",
    "melony",
    "sada's vitality",
    "magma basin",
    "max elixir",
    "twin energy",
    "double turbo energy",
    "double colorless energy",
})


# =========================================================================
# FORMAT RULES
# =========================================================================
BANNED_CARDS: FrozenSet[str] = frozenset({
    "lysandre's trump card",
    "forest of giant plants",
    "hex maniac",
    "ghetsis",
    "wally",
})

# Cards exempt from the 4-copy rule (in addition to Basic Energy)
UNLIMITED_COPY_NAMES: FrozenSet[str] = frozenset({
    "arceus",
})

# Subtypes that give up more than one prize when knocked out
MULTI_PRIZE_SUBTYPES: FrozenSet[str] = frozenset({
    "EX",
    "GX",
    "V",
    "VMAX",
    "VSTAR",
    "V-UNION",
    "TAG TEAM",
})

BASIC_ENERGY_SYMBOLS: Dict[str, str] = {
    "G": "Grass",
    "R": "Fire",
    "W": "Water",
    "L": "Lightning",
    "P": "Psychic",
    "F": "Fighting",
    "D": "Darkness",
    "M": "Metal",
    "Y": "Fairy",
}


def _text_has_marker(texts: Iterable[str], markers: FrozenSet[str]) -> bool:
    for text in texts:
        canon = _canon(text)
        if any(marker in canon for marker in markers):
            return True
    return False


# ===== NAMED PREDICATES =====

def is_evolution_skip_card(card: Card) -> bool:
    """Trainer that lets a Basic skip its Stage 1 (e.g. Rare Candy)."""
    return card.supertype == Supertype.TRAINER and _canon(card.name) in EVOLUTION_SKIP_CARDS


def has_evolution_skip(deck: Deck) -> bool:
    """True when the deck runs at least one copy of an evolution-skip card."""
    return any(entry.quantity > 0 and is_evolution_skip_card(entry.card) for entry in deck.entries)


def is_draw_supporter(card: Card) -> bool:
    """Trainer whose name is on the draw-support list."""
    return card.supertype == Supertype.TRAINER and _canon(card.name) in DRAW_SUPPORTERS


def is_draw_trainer(card: Card) -> bool:
    """Draw supporter, or any trainer whose rules text draws cards."""
    if card.supertype != Supertype.TRAINER:
        return False
    return is_draw_supporter(card) or _text_has_marker(card.rules, DRAW_TEXT_MARKERS)


def is_search_card(card: Card) -> bool:
    """Trainer that fetches creatures from the deck."""
    if card.supertype != Supertype.TRAINER:
        return False
    return _canon(card.name) in SEARCH_CARDS or _text_has_marker(card.rules, SEARCH_TEXT_MARKERS)


def is_switch_card(card: Card) -> bool:
    return card.supertype == Supertype.TRAINER and _canon(card.name) in SWITCH_CARDS


def is_gust_card(card: Card) -> bool:
    return card.supertype == Supertype.TRAINER and _canon(card.name) in GUST_CARDS


def is_energy_acceleration(card: Card) -> bool:
    """
    Card that puts extra energy into play.

    Listed trainers and special energy count by name; creatures count when
    one of their abilities attaches energy.
    """
    if _canon(card.name) in ENERGY_ACCELERATION_CARDS:
        return True
    if card.supertype == Supertype.CREATURE:
        for ability in card.abilities:
            text = _canon(ability.text)
            if "attach" in text and "energy" in text:
                return True
    return False


def is_basic_energy(card: Card) -> bool:
    """Energy with no subtypes or the Basic subtype."""
    if card.supertype != Supertype.ENERGY:
        return False
    return not card.subtypes or "Basic" in card.subtypes


def is_special_energy(card: Card) -> bool:
    return card.supertype == Supertype.ENERGY and "Special" in card.subtypes


def basic_energy_type(card: Card) -> Optional[str]:
    """
    Type provided by a basic energy card, read from its name.

    "Fire Energy" and "Basic Fire Energy" both provide "Fire".
    """
    if not is_basic_energy(card):
        return None
    name = card.name.strip()
    if name.lower().startswith("basic "):
        name = name[6:]
    if name.lower().endswith(" energy"):
        name = name[:-7]
    name = name.strip()
    if name.startswith("{") and name.endswith("}"):
        name = BASIC_ENERGY_SYMBOLS.get(name[1:-1].upper(), name)
    return name.title() if name else None


def is_unlimited_copies(card: Card) -> bool:
    """Cards the 4-copy rule does not apply to."""
    if is_basic_energy(card):
        return True
    return any(token in UNLIMITED_COPY_NAMES for token in _canon(card.name).split())


def is_banned(card: Card) -> bool:
    return _canon(card.name) in BANNED_CARDS


def is_multi_prize(card: Card) -> bool:
    """Creature that gives up two or more prizes when knocked out."""
    if card.supertype != Supertype.CREATURE:
        return False
    return any(subtype.upper() in MULTI_PRIZE_SUBTYPES for subtype in card.subtypes)
