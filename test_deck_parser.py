import pytest

from conftest import make_creature, make_trainer
from deck_parser import (
    EXAMPLE_DECKLIST,
    DeckParseError,
    DeckParser,
    DecklistLine,
    basic_energy_card,
    parse_decklist,
    resolve_deck,
)
from format_checker import check_deck_legality
from models import Supertype

PTCGL_EXPORT = """Pokémon: 7
4 Charmander OBF 26
3 Charizard ex OBF 125

Trainer: 4
4 Ultra Ball SVI 196

Energy: 6
6 Basic {R} Energy SVE 2

Total Cards: 17
"""


class FakeAPI:
    def __init__(self, cards):
        self.cards = cards
        self.calls = []

    def get_card(self, name, set_code=None, number=None):
        self.calls.append((name, set_code, number))
        return self.cards.get(name)


def test_parse_ptcgl_export():
    decklist = DeckParser().parse_text(PTCGL_EXPORT, name="Zard")
    assert decklist.name == "Zard"
    assert decklist.total_cards == 17
    assert decklist.skipped == ()
    assert decklist.lines[0] == DecklistLine(4, "Charmander", "OBF", "26", Supertype.CREATURE)
    assert decklist.lines[1].name == "Charizard ex"
    assert decklist.lines[2].section == Supertype.TRAINER
    assert decklist.lines[3] == DecklistLine(6, "Basic {R} Energy", "SVE", "2", Supertype.ENERGY)


def test_parse_plain_lines():
    text = """# my list
4x Nest Ball
2  Boss's   Orders
// sideboard ideas
12 Fire Energy
"""
    decklist = DeckParser().parse_text(text)
    assert [(line.quantity, line.name) for line in decklist.lines] == [
        (4, "Nest Ball"),
        (2, "Boss's Orders"),
        (12, "Fire Energy"),
    ]
    assert all(line.set_code is None and line.section is None for line in decklist.lines)


def test_unreadable_lines_are_skipped():
    decklist = DeckParser().parse_text("Charizard ex\n4 Charmander\n")
    assert decklist.skipped == ("Charizard ex",)
    assert decklist.total_cards == 4


def test_empty_decklist_raises():
    with pytest.raises(DeckParseError):
        DeckParser().parse_text("# nothing here\n\n")
    # DeckParseError is a ValueError so callers can catch both
    with pytest.raises(ValueError):
        DeckParser().parse_text("")


def test_parse_file(tmp_path):
    path = tmp_path / "charizard_ex-list.txt"
    path.write_text(PTCGL_EXPORT, encoding="utf-8")
    decklist = parse_decklist(path)
    assert decklist.name == "Charizard Ex List"
    assert len(decklist.lines) == 4

    with pytest.raises(FileNotFoundError):
        parse_decklist(tmp_path / "missing.txt")


@pytest.mark.parametrize("name, expected", [
    ("Fire Energy", True),
    ("Basic Fire Energy", True),
    ("Basic {R} Energy", True),
    ("darkness energy", True),
    ("Jet Energy", False),
    ("Energy Search", False),
])
def test_basic_energy_card(name, expected):
    card = basic_energy_card(name)
    assert (card is not None) == expected
    if card is not None:
        assert card.supertype == Supertype.ENERGY
        assert "Basic" in card.subtypes


def test_resolve_deck():
    decklist = DeckParser().parse_text(PTCGL_EXPORT + "1 Unknown Card XYZ 1\n", name="Zard")
    api = FakeAPI({
        "Charmander": make_creature("Charmander"),
        "Charizard ex": make_creature("Charizard ex", 2, "Charmeleon", subtypes=["ex"]),
        "Ultra Ball": make_trainer("Ultra Ball"),
    })

    deck, missing = resolve_deck(decklist, api)

    assert missing == ["Unknown Card"]
    assert deck.name == "Zard"
    assert deck.total_cards == 17
    assert [e.card.name for e in deck.entries] == ["Charmander", "Charizard ex", "Ultra Ball", "Basic {R} Energy"]
    # Basic energy never reaches the API
    assert ("Basic {R} Energy", "SVE", "2") not in api.calls
    assert ("Charmander", "OBF", "26") in api.calls


def test_example_decklist_is_legal():
    decklist = DeckParser().parse_text(EXAMPLE_DECKLIST)
    assert decklist.skipped == ()
    assert decklist.total_cards == 60

    creatures = {
        "Charmander": make_creature("Charmander"),
        "Charmeleon": make_creature("Charmeleon", 1, "Charmander"),
        "Charizard ex": make_creature("Charizard ex", 2, "Charmeleon", subtypes=["ex"]),
        "Pidgey": make_creature("Pidgey"),
    }
    trainers = {
        line.name: make_trainer(line.name)
        for line in decklist.lines if line.section == Supertype.TRAINER
    }
    deck, missing = resolve_deck(decklist, FakeAPI({**creatures, **trainers}))

    assert missing == []
    report = check_deck_legality(deck)
    assert report.legal, report.issues
