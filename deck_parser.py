"""
Deck list parsing utilities for Pokémon TCG Live style decklists.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple, Union

from card_lists import BASIC_ENERGY_SYMBOLS
from models import Card, Deck, DeckEntry, Supertype

logger = logging.getLogger(__name__)


class DeckParseError(ValueError):
    """Raised when a decklist contains no usable card lines."""


class DecklistLine(NamedTuple):
    quantity: int
    name: str
    set_code: Optional[str] = None
    number: Optional[str] = None
    section: Optional[Supertype] = None


@dataclass(frozen=True)
class Decklist:
    """Card lines read from a text decklist, before card data is fetched."""
    name: Optional[str]
    lines: Tuple[DecklistLine, ...]
    skipped: Tuple[str, ...] = ()

    @property
    def total_cards(self) -> int:
        return sum(line.quantity for line in self.lines)


# Shown by the dashboard's "Use Example Deck" button
EXAMPLE_DECKLIST = """Pokémon: 14
4 Charmander OBF 26
3 Charmeleon OBF 27
3 Charizard ex OBF 125
4 Pidgey MEW 16

Trainer: 34
4 Professor's Research SVI 189
4 Ultra Ball SVI 196
4 Nest Ball SVI 181
4 Rare Candy SVI 191
3 Boss's Orders PAL 172
4 Iono PAL 185
3 Switch SVI 194
4 Arven SVI 166
4 Buddy-Buddy Poffin TEF 144

Energy: 12
12 Basic Fire Energy SVE 2"""


_SECTIONS = {
    "pokemon": Supertype.CREATURE,
    "pokémon": Supertype.CREATURE,
    "creature": Supertype.CREATURE,
    "trainer": Supertype.TRAINER,
    "energy": Supertype.ENERGY,
}

_ENERGY_TYPES = "|".join(sorted(set(BASIC_ENERGY_SYMBOLS.values())))
BASIC_ENERGY_PATTERN = re.compile(
    rf'^(?:basic\s+)?(\{{[A-Z]\}}|{_ENERGY_TYPES})\s+energy$', re.IGNORECASE
)


class DeckParser:
    """Parser for PTCGL-style and plain "4 Card Name" decklists."""

    def __init__(self):
        self.patterns = [
            # "4 Charizard ex OBF 125" - export format with set code and number
            re.compile(r'^(\d+)x?\s+(.+?)\s+([A-Z][A-Z0-9-]{1,7})\s+(\d+[a-zA-Z]?)$'),
            # "4 Charizard ex" or "4x Charizard ex"
            re.compile(r'^(\d+)x?\s+(.+)$', re.IGNORECASE),
        ]

        self.section_pattern = re.compile(r'^(pok[eé]mon|creatures?|trainers?|energy)\s*:?\s*(\d+)?$', re.IGNORECASE)

        # Lines to ignore (comments, totals, empty lines)
        self.ignore_patterns = [
            re.compile(r'^\s*$'),  # Empty lines
            re.compile(r'^\s*#'),  # Comments starting with #
            re.compile(r'^\s*//'),  # Comments starting with //
            re.compile(r'^total\s+cards\s*:?\s*\d*$', re.IGNORECASE),
        ]

    def parse_text(self, text: str, name: Optional[str] = None) -> Decklist:
        """
        Parse decklist text.

        Raises:
            DeckParseError: if no card lines are found
        """
        lines: List[DecklistLine] = []
        skipped: List[str] = []
        section: Optional[Supertype] = None

        for raw in text.splitlines():
            line = raw.strip()
            if self._should_ignore_line(line):
                continue

            header = self.section_pattern.match(line)
            if header:
                key = header.group(1).lower().rstrip('s')
                section = _SECTIONS.get(key)
                continue

            parsed = self._parse_line(line, section)
            if parsed is None:
                logger.warning("Skipping unreadable decklist line: %r", line)
                skipped.append(line)
                continue
            lines.append(parsed)

        if not lines:
            raise DeckParseError("No valid card lines found in decklist")

        return Decklist(name=name, lines=tuple(lines), skipped=tuple(skipped))

    def parse_file(self, file_path: Union[str, Path]) -> Decklist:
        """
        Parse a decklist file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            DeckParseError: If the file holds no card lines
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Decklist file not found: {file_path}")

        # Set deck name from file name
        deck_name = path.stem.replace('_', ' ').replace('-', ' ').title()

        try:
            text = path.read_text(encoding='utf-8')
        except UnicodeDecodeError:
            text = path.read_text(encoding='latin-1')

        return self.parse_text(text, name=deck_name)

    def _should_ignore_line(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.ignore_patterns)

    def _parse_line(self, line: str, section: Optional[Supertype]) -> Optional[DecklistLine]:
        match = self.patterns[0].match(line)
        if match:
            return DecklistLine(
                quantity=int(match.group(1)),
                name=match.group(2).strip(),
                set_code=match.group(3),
                number=match.group(4),
                section=section,
            )

        match = self.patterns[1].match(line)
        if match:
            return DecklistLine(
                quantity=int(match.group(1)),
                name=re.sub(r'\s+', ' ', match.group(2)).strip(),
                section=section,
            )

        return None


def basic_energy_card(name: str) -> Optional[Card]:
    """Build a Basic Energy card locally when ``name`` names one."""
    if not BASIC_ENERGY_PATTERN.match(name.strip()):
        return None
    return Card(name=name.strip(), supertype=Supertype.ENERGY, subtypes=frozenset({"Basic"}))


def resolve_deck(decklist: Decklist, api) -> Tuple[Deck, List[str]]:
    """
    Turn parsed lines into a Deck using a card-data client.

    Basic Energy is built locally. Cards the client cannot find are left out
    of the deck and returned by name.

    Args:
        decklist: Parsed decklist
        api: Object with ``get_card(name, set_code, number)``, e.g. PokemonTCGAPI

    Returns:
        (Deck, names of cards that could not be found)
    """
    entries: List[DeckEntry] = []
    missing: List[str] = []

    for line in decklist.lines:
        card = basic_energy_card(line.name)
        if card is None:
            card = api.get_card(line.name, line.set_code, line.number)
        if card is None:
            missing.append(line.name)
            continue
        entries.append(DeckEntry(card=card, quantity=line.quantity))

    if missing:
        logger.warning("Could not find %d cards: %s", len(missing), ", ".join(missing))

    return Deck(entries=tuple(entries), name=decklist.name), missing


def parse_decklist(file_path: Union[str, Path]) -> Decklist:
    """
    Convenience function to parse a decklist file.

    Args:
        file_path: Path to the decklist file

    Returns:
        Decklist
    """
    parser = DeckParser()
    return parser.parse_file(file_path)
