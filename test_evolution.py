from conftest import make_creature
from evolution import (
    Bottleneck,
    LineType,
    build_evolution_lines,
    line_score,
    overall_line_score,
)
from models import Card, Deck, Supertype


def by_name(lines):
    return {line.name: line for line in lines}


def test_balanced_lines(balanced_deck):
    lines = build_evolution_lines(balanced_deck)
    assert [line.name for line in lines] == ["Charmander", "Pidgey", "Tauros", "Bidoof"]

    charizard = lines[0]
    assert charizard.structure == "4-3-3"
    assert charizard.line_type == LineType.DOUBLE
    assert charizard.bottleneck == Bottleneck.NONE
    assert charizard.stage2.card.name == "Charizard"
    assert charizard.issues == ()

    pidgey = lines[1]
    assert pidgey.structure == "4"
    assert not pidgey.is_evolution
    assert pidgey.line_type == LineType.SINGLE


def test_stage1_bottleneck_without_skip(evolution_deck):
    line = by_name(build_evolution_lines(evolution_deck(4, 2, 3)))["Charmander"]
    assert line.bottleneck == Bottleneck.STAGE1
    assert not line.bottleneck_suppressed
    assert any("bottleneck" in issue for issue in line.issues)


def test_bottleneck_suppressed_by_skip_card(evolution_deck):
    line = by_name(build_evolution_lines(evolution_deck(4, 2, 3, skip=4)))["Charmander"]
    assert line.bottleneck == Bottleneck.STAGE1
    assert line.bottleneck_suppressed


def test_basic_bottleneck(evolution_deck):
    line = by_name(build_evolution_lines(evolution_deck(2, 3, 0)))["Charmander"]
    assert line.bottleneck == Bottleneck.BASIC
    assert line.line_type == LineType.SINGLE
    assert line.structure == "2-3"


def test_missing_stage1(evolution_deck):
    lines = by_name(build_evolution_lines(evolution_deck(4, 0, 3)))
    # The Stage 2 can only be traced back to the absent Stage 1
    line = lines["Charmeleon"]
    assert line.missing_stage1
    assert not line.missing_basic
    assert line.bottleneck == Bottleneck.STAGE1
    assert not line.bottleneck_suppressed
    assert lines["Charmander"].structure == "4"

    with_candy = by_name(build_evolution_lines(evolution_deck(4, 0, 3, skip=4)))["Charmeleon"]
    assert with_candy.bottleneck_suppressed


def test_missing_basic(evolution_deck):
    line = by_name(build_evolution_lines(evolution_deck(0, 3, 3)))["Charmander"]
    assert line.missing_basic
    assert line.basic is None
    assert line.structure == "0-3-3"


def test_duplicate_printings_are_merged():
    deck = Deck.from_pairs([
        (make_creature("Charmander"), 2),
        (make_creature("Charmeleon", 1, "Charmander"), 3),
        (make_creature("CHARMANDER"), 2),
    ])
    lines = build_evolution_lines(deck)
    assert len(lines) == 1
    assert lines[0].basic_count == 4
    assert lines[0].bottleneck == Bottleneck.NONE


def test_cycles_do_not_raise():
    deck = Deck.from_pairs([
        (make_creature("Alpha", 1, "Beta"), 2),
        (make_creature("Beta", 1, "Alpha"), 2),
    ])
    lines = build_evolution_lines(deck)
    assert len(lines) == 2
    assert all(line.is_evolution for line in lines)


def test_deep_chains_terminate():
    names = ["A", "B", "C", "D", "E", "F"]
    pairs = [(make_creature("A"), 1)]
    pairs += [(make_creature(child, 1, parent), 1) for parent, child in zip(names, names[1:])]
    lines = build_evolution_lines(Deck.from_pairs(pairs))
    assert lines[0].name == "A"
    assert len(lines) >= 1


def test_unplaceable_card_is_reported_as_unknown():
    deck = Deck.from_pairs([(make_creature("Orphan", 1), 2), (make_creature("Pidgey"), 4)])
    lines = build_evolution_lines(deck)
    orphan = lines[0]
    assert orphan.is_unknown
    assert orphan.name == "Orphan"
    assert orphan.bottleneck == Bottleneck.NONE
    assert orphan.issues


def test_dangling_untagged_evolution():
    mystery = Card(name="Mystery", supertype=Supertype.CREATURE, evolves_from="Nobody")
    lines = build_evolution_lines(Deck.from_pairs([(mystery, 2)]))
    assert lines[0].name == "Nobody"
    assert lines[0].stage1.card.name == "Mystery"
    assert lines[0].missing_basic


def test_zero_quantity_entries_do_not_fill_slots():
    deck = Deck.from_pairs([
        (make_creature("Charmander"), 4),
        (make_creature("Charmeleon", 1, "Charmander"), 0),
    ])
    line = build_evolution_lines(deck)[0]
    assert line.stage1 is None
    assert not line.is_evolution


def test_overall_line_score(balanced_deck):
    lines = build_evolution_lines(balanced_deck)
    assert overall_line_score(lines) == round(line_score(lines[0]) * 100)
    assert overall_line_score(lines[1:]) == 100
    assert overall_line_score([]) == 100


def eeveelution_deck(eevee=2):
    return Deck.from_pairs([
        (make_creature("Eevee"), eevee),
        (make_creature("Vaporeon", 1, "Eevee"), 2),
        (make_creature("Jolteon", 1, "Eevee"), 2),
        (make_creature("Flareon", 1, "Eevee"), 2),
    ])


def test_sibling_stage1s_share_one_line():
    [line] = build_evolution_lines(eeveelution_deck())
    assert line.name == "Eevee"
    assert line.is_branched
    assert line.stage1.card.name == "Vaporeon"
    assert line.stage1_names == ["Vaporeon", "Jolteon", "Flareon"]
    assert line.stage1_count == 6
    assert line.structure == "2-6"
    assert line.bottleneck == Bottleneck.BASIC
    assert any("Vaporeon/Jolteon/Flareon" in issue for issue in line.issues)


def test_branches_are_balanced_by_their_total():
    [line] = build_evolution_lines(eeveelution_deck(eevee=6))
    assert line.bottleneck == Bottleneck.NONE


def test_sibling_stage2s_are_added_up():
    deck = Deck.from_pairs([
        (make_creature("Ralts"), 4),
        (make_creature("Kirlia", 1, "Ralts"), 2),
        (make_creature("Gardevoir ex", 2, "Kirlia", subtypes=["ex"]), 2),
        (make_creature("Gallade", 2, "Kirlia"), 1),
    ])
    [line] = build_evolution_lines(deck)
    assert line.stage2_names == ["Gardevoir ex", "Gallade"]
    assert line.structure == "4-2-3"
    assert line.line_type == LineType.DOUBLE
    assert line.bottleneck == Bottleneck.STAGE1
