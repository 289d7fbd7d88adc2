"""
Shared pytest fixtures: small card factories and a balanced 60-card deck.
"""

import pytest

from models import Ability, Attack, Card, Deck, Supertype

STAGE_TAGS = {0: "Basic", 1: "Stage 1", 2: "Stage 2"}


def make_creature(name, stage=0, evolves_from=None, damage=30, cost=("Colorless",),
                  types=("Colorless",), subtypes=(), abilities=()):
    """A creature with one attack; ``damage=None`` gives it no attacks."""
    attacks = ()
    if damage is not None:
        attacks = (Attack(name=f"{name} Attack", energy_cost=tuple(cost), damage=damage),)
    return Card(
        name=name,
        supertype=Supertype.CREATURE,
        subtypes=frozenset({STAGE_TAGS[stage], *subtypes}),
        hp=70 + 40 * stage,
        evolves_from=evolves_from,
        attacks=attacks,
        abilities=tuple(Ability(name="Ability", text=text) for text in abilities),
        types=tuple(types),
    )


def make_trainer(name, subtype="Item", rules=()):
    return Card(name=name, supertype=Supertype.TRAINER, subtypes=frozenset({subtype}), rules=tuple(rules))


def make_energy(name="Fire Energy", special=False):
    return Card(name=name, supertype=Supertype.ENERGY, subtypes=frozenset({"Special" if special else "Basic"}))


def balanced_pairs():
    """(card, quantity) pairs for a sound Fire deck with a 4-3-3 Stage 2 line."""
    fire = ("Fire",)
    return [
        (make_creature("Charmander", damage=30, cost=fire, types=fire), 4),
        (make_creature("Charmeleon", 1, "Charmander", damage=60, cost=("Fire", "Colorless"), types=fire), 3),
        (make_creature("Charizard", 2, "Charmeleon", damage=200, cost=("Fire", "Fire"), types=fire), 3),
        (make_creature("Pidgey", damage=20), 4),
        (make_creature("Tauros", damage=60, cost=("Colorless", "Colorless")), 4),
        (make_creature("Bidoof", damage=10), 2),
        (make_trainer("Professor's Research", "Supporter"), 4),
        (make_trainer("Iono", "Supporter"), 4),
        (make_trainer("Ultra Ball"), 4),
        (make_trainer("Nest Ball"), 4),
        (make_trainer("Rare Candy"), 4),
        (make_trainer("Boss's Orders", "Supporter"), 3),
        (make_trainer("Switch"), 3),
        (make_energy("Fire Energy"), 14),
    ]


def replace_pairs(pairs, **quantities):
    """Copy of ``pairs`` with quantities changed by card name (underscores for spaces)."""
    wanted = {name.replace("_", " "): qty for name, qty in quantities.items()}
    return [(card, wanted.get(card.name, qty)) for card, qty in pairs]


@pytest.fixture
def creature():
    return make_creature


@pytest.fixture
def trainer():
    return make_trainer


@pytest.fixture
def energy():
    return make_energy


@pytest.fixture
def balanced_deck():
    return Deck.from_pairs(balanced_pairs(), name="Charizard")


@pytest.fixture
def evolution_deck():
    """Builds a deck around one Basic -> Stage 1 -> Stage 2 line with chosen counts."""

    def build(basic=4, stage1=3, stage2=3, skip=0):
        pairs = [
            (make_creature("Charmander", types=("Fire",)), basic),
            (make_creature("Charmeleon", 1, "Charmander", types=("Fire",)), stage1),
            (make_creature("Charizard", 2, "Charmeleon", damage=180, types=("Fire",)), stage2),
            (make_creature("Pidgey"), 8),
            (make_trainer("Professor's Research", "Supporter"), 4),
        ]
        if skip:
            pairs.append((make_trainer("Rare Candy"), skip))
        pairs = [(card, qty) for card, qty in pairs if qty > 0]
        return Deck.from_pairs(pairs, name="Evolution Test")

    return build
