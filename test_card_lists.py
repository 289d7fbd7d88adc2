from card_lists import (
    basic_energy_type,
    has_evolution_skip,
    is_banned,
    is_basic_energy,
    is_draw_supporter,
    is_draw_trainer,
    is_energy_acceleration,
    is_evolution_skip_card,
    is_gust_card,
    is_multi_prize,
    is_search_card,
    is_special_energy,
    is_switch_card,
    is_unlimited_copies,
)
from conftest import make_creature, make_energy, make_trainer
from models import Deck


def test_evolution_skip_card():
    assert is_evolution_skip_card(make_trainer("Rare Candy"))
    assert is_evolution_skip_card(make_trainer("RARE CANDY"))
    assert is_evolution_skip_card(make_trainer("Pokémon Breeder"))
    assert not is_evolution_skip_card(make_trainer("Candy Jar"))
    # Only trainers count
    assert not is_evolution_skip_card(make_creature("Rare Candy"))


def test_has_evolution_skip_needs_a_copy():
    candy = make_trainer("Rare Candy")
    assert has_evolution_skip(Deck.from_pairs([(candy, 1)]))
    assert not has_evolution_skip(Deck.from_pairs([(candy, 0)]))
    assert not has_evolution_skip(Deck())


def test_draw_predicates():
    assert is_draw_supporter(make_trainer("Professor's Research", "Supporter"))
    assert is_draw_supporter(make_trainer("Professor’s Research", "Supporter"))
    assert is_draw_trainer(make_trainer("Iono", "Supporter"))
    assert is_draw_trainer(make_trainer("Trekking Shoes", rules=["Look at the top card. You may draw a card."]))
    assert not is_draw_trainer(make_trainer("Switch"))
    assert not is_draw_trainer(make_creature("Iono"))


def test_search_predicates():
    assert is_search_card(make_trainer("Ultra Ball"))
    assert is_search_card(make_trainer("Poké Ball"))
    assert is_search_card(make_trainer("Fan Call", rules=["Search your deck for a Pokémon and put it into your hand."]))
    assert not is_search_card(make_trainer("Switch"))


def test_mobility_predicates():
    assert is_switch_card(make_trainer("Switch"))
    assert is_gust_card(make_trainer("Boss's Orders", "Supporter"))
    # Prime Catcher both gusts and switches
    assert is_switch_card(make_trainer("Prime Catcher"))
    assert is_gust_card(make_trainer("Prime Catcher"))
    assert not is_gust_card(make_trainer("Switch"))


def test_energy_acceleration():
    assert is_energy_acceleration(make_trainer("Elesa's Sparkle", "Supporter"))
    assert is_energy_acceleration(make_energy("Double Turbo Energy", special=True))
    assert is_energy_acceleration(
        make_creature("Charizard ex", 2, "Charmeleon", abilities=["Attach up to 3 Basic Fire Energy cards"])
    )
    assert not is_energy_acceleration(make_creature("Pidgey", abilities=["Heal 30 damage"]))


def test_basic_energy_classification():
    assert is_basic_energy(make_energy("Fire Energy"))
    assert not is_basic_energy(make_energy("Jet Energy", special=True))
    assert is_special_energy(make_energy("Jet Energy", special=True))
    assert not is_basic_energy(make_trainer("Energy Search"))


def test_basic_energy_type():
    assert basic_energy_type(make_energy("Fire Energy")) == "Fire"
    assert basic_energy_type(make_energy("Basic Water Energy")) == "Water"
    assert basic_energy_type(make_energy("Basic {R} Energy")) == "Fire"
    assert basic_energy_type(make_energy("Jet Energy", special=True)) is None


def test_unlimited_copies():
    assert is_unlimited_copies(make_energy("Lightning Energy"))
    assert is_unlimited_copies(make_creature("Arceus V"))
    assert not is_unlimited_copies(make_creature("Pidgey"))
    assert not is_unlimited_copies(make_energy("Jet Energy", special=True))


def test_banned():
    assert is_banned(make_trainer("Lysandre's Trump Card"))
    assert not is_banned(make_trainer("Lysandre", "Supporter"))


def test_multi_prize():
    assert is_multi_prize(make_creature("Charizard ex", 2, "Charmeleon", subtypes=["ex"]))
    assert is_multi_prize(make_creature("Lugia V", subtypes=["V"]))
    assert not is_multi_prize(make_creature("Pidgey"))
    assert not is_multi_prize(make_trainer("Boss's Orders", "V"))
