import json

import pytest
from pydantic import ValidationError

from models import Attack, Card, Deck, DeckEntry, Supertype

API_CARD = {
    "id": "obf-125",
    "name": "Charizard ex",
    "supertype": "Pokémon",
    "subtypes": ["Stage 2", "ex"],
    "hp": "330",
    "types": ["Darkness"],
    "evolvesFrom": "Charmeleon",
    "abilities": [{"name": "Infernal Reign", "text": "Attach up to 3 Basic Fire Energy", "type": "Ability"}],
    "attacks": [
        {"name": "Burning Darkness", "cost": ["Fire", "Fire"], "damage": "180+", "text": None},
    ],
    "images": {"small": "https://example.invalid/obf/125.png"},
}


def test_card_from_api_payload():
    card = Card.model_validate(API_CARD)
    assert card.name == "Charizard ex"
    assert card.supertype == Supertype.CREATURE
    assert card.subtypes == frozenset({"Stage 2", "ex"})
    assert card.hp == 330
    assert card.evolves_from == "Charmeleon"
    assert card.attacks[0].damage == 180
    assert card.attacks[0].cost == 2
    assert card.attacks[0].text == ""
    assert card.stage == 2
    assert not card.is_basic


def test_supertype_aliases():
    assert Card(name="Pidgey", supertype="pokemon").supertype == Supertype.CREATURE
    assert Card(name="Pidgey", supertype="Creature").supertype == Supertype.CREATURE
    assert Card(name="Switch", supertype="Trainer").supertype == Supertype.TRAINER
    assert Card(name="Fire Energy", supertype="ENERGY").supertype == Supertype.ENERGY


@pytest.mark.parametrize("data", [
    {"name": "Pidgey"},
    {"name": "Pidgey", "supertype": None},
    {"name": "Pidgey", "supertype": "Spell"},
    {"name": "   ", "supertype": "Pokémon"},
    {"name": "Pidgey", "supertype": "Pokémon", "hp": -10},
    {"name": "Pidgey", "supertype": "Pokémon", "attacks": [{"name": "Peck", "damage": True}]},
])
def test_malformed_cards_are_rejected(data):
    with pytest.raises(ValidationError):
        Card.model_validate(data)


def test_negative_quantity_is_rejected():
    card = Card(name="Pidgey", supertype=Supertype.CREATURE)
    with pytest.raises(ValidationError):
        DeckEntry(card=card, quantity=-1)


def test_models_are_frozen():
    card = Card(name="Pidgey", supertype=Supertype.CREATURE)
    with pytest.raises(ValidationError):
        card.name = "Pidgeotto"


def test_stage_inference():
    untagged_basic = Card(name="Pidgey", supertype=Supertype.CREATURE)
    assert untagged_basic.is_basic
    assert untagged_basic.stage == 0

    untagged_evolved = Card(name="Pidgeotto", supertype=Supertype.CREATURE, evolves_from="Pidgey")
    assert not untagged_evolved.is_basic
    assert untagged_evolved.stage is None

    blank_parent = Card(name="Pidgey", supertype=Supertype.CREATURE, evolves_from="  ")
    assert blank_parent.evolves_from is None

    trainer = Card(name="Switch", supertype=Supertype.TRAINER)
    assert trainer.stage is None
    assert not trainer.is_basic


def test_attack_properties():
    card = Card(
        name="Tauros",
        supertype=Supertype.CREATURE,
        attacks=[
            Attack(name="Tackle", energy_cost=("Colorless",), damage=20),
            {"name": "Rampage", "energyCost": ["Colorless", "Colorless", "Colorless"], "damage": "120×"},
        ],
    )
    assert card.max_damage == 120
    assert card.max_attack_cost == 3
    assert card.min_attack_cost == 1
    assert Card(name="Switch", supertype=Supertype.TRAINER).min_attack_cost is None


def test_deck_counts(balanced_deck):
    assert balanced_deck.total_cards == 60
    assert balanced_deck.unique_cards == 14
    assert balanced_deck.count(lambda c: c.is_basic) == 14
    assert len(balanced_deck.by_supertype(Supertype.ENERGY)) == 1
    assert [e.card.name for e in balanced_deck.cards_matching(lambda c: c.stage == 2)] == ["Charizard"]


def test_deck_from_json_shapes():
    entries = [
        {"card": {"name": "Pidgey", "supertype": "Pokémon", "subtypes": ["Basic"]}, "quantity": 4},
        {"card": {"name": "Fire Energy", "supertype": "Energy"}, "count": 10},
    ]
    from_list = Deck.from_json(entries, name="List")
    from_dict = Deck.from_json({"name": "Dict", "entries": entries})
    from_text = Deck.from_json(json.dumps({"entries": entries}), name="Text")

    assert from_list.name == "List"
    assert from_dict.name == "Dict"
    assert from_text.name == "Text"
    assert from_list.total_cards == from_dict.total_cards == from_text.total_cards == 14


def test_deck_from_json_rejects_bad_quantity():
    with pytest.raises(ValidationError):
        Deck.from_json([{"card": {"name": "Pidgey", "supertype": "Pokémon"}, "quantity": -2}])


def test_zero_quantity_is_allowed():
    deck = Deck.from_pairs([(Card(name="Pidgey", supertype=Supertype.CREATURE), 0)])
    assert deck.total_cards == 0
    assert deck.cards_matching(lambda c: True) == []
