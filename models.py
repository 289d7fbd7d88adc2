"""
Data models for TCG deck analysis.

Cards and decks are validated at the boundary with pydantic and are immutable
once built. Malformed card data (missing or unknown supertype, negative
quantity, empty name) raises ``pydantic.ValidationError`` instead of being
silently defaulted.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from utils import parse_damage, parse_optional_int


class Supertype(str, Enum):
    """Top-level card kind."""
    CREATURE = "CREATURE"
    TRAINER = "TRAINER"
    ENERGY = "ENERGY"


# Spellings seen in card data for each supertype
_SUPERTYPE_ALIASES: Dict[str, Supertype] = {
    "creature": Supertype.CREATURE,
    "pokemon": Supertype.CREATURE,
    "pokémon": Supertype.CREATURE,
    "trainer": Supertype.TRAINER,
    "energy": Supertype.ENERGY,
}

STAGE_SUBTYPES = ("Stage 1", "Stage 2")


class Attack(BaseModel):
    """A single attack printed on a creature card."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    energy_cost: Tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("energy_cost", "energyCost", "cost"),
    )
    damage: int = Field(default=0, ge=0)
    text: str = ""

    @field_validator("damage", mode="before")
    @classmethod
    def _parse_damage(cls, v):
        return parse_damage(v)

    @field_validator("energy_cost", mode="before")
    @classmethod
    def _none_cost(cls, v):
        return () if v is None else v

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, v):
        return "" if v is None else v

    @property
    def cost(self) -> int:
        """Number of energy needed to use this attack."""
        return len(self.energy_cost)


class Ability(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, v):
        return "" if v is None else v


class Card(BaseModel):
    """
    An immutable card value object.

    Accepts both snake_case and the camelCase keys used by public card APIs
    (``evolvesFrom``), and ignores unrelated fields such as ``id`` or
    ``images``.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    supertype: Supertype
    subtypes: FrozenSet[str] = frozenset()
    hp: Optional[int] = Field(default=None, ge=0)
    evolves_from: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("evolves_from", "evolvesFrom"),
    )
    attacks: Tuple[Attack, ...] = ()
    abilities: Tuple[Ability, ...] = ()
    types: Tuple[str, ...] = ()
    rules: Tuple[str, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("card name must be a non-empty string")
        return v.strip()

    @field_validator("supertype", mode="before")
    @classmethod
    def _validate_supertype(cls, v):
        if isinstance(v, Supertype):
            return v
        if not isinstance(v, str):
            raise ValueError("supertype is required")
        key = v.strip().lower()
        if key not in _SUPERTYPE_ALIASES:
            raise ValueError(f"unknown supertype: {v!r}")
        return _SUPERTYPE_ALIASES[key]

    @field_validator("hp", mode="before")
    @classmethod
    def _parse_hp(cls, v):
        return parse_optional_int(v)

    @field_validator("evolves_from", mode="before")
    @classmethod
    def _blank_evolves_from(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("subtypes", "attacks", "abilities", "types", "rules", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return () if v is None else v

    # ===== DERIVED PROPERTIES =====

    @property
    def is_creature(self) -> bool:
        return self.supertype == Supertype.CREATURE

    @property
    def is_basic(self) -> bool:
        """A Basic creature: tagged "Basic", or an untagged creature that evolves from nothing."""
        if not self.is_creature:
            return False
        if "Basic" in self.subtypes:
            return True
        return self.evolves_from is None and not any(s in self.subtypes for s in STAGE_SUBTYPES)

    @property
    def stage(self) -> Optional[int]:
        """
        Evolution stage: 0 for Basic, 1 for Stage 1, 2 for Stage 2.

        Returns None for non-creatures and for evolved creatures whose stage
        is not tagged.
        """
        if not self.is_creature:
            return None
        if "Stage 2" in self.subtypes:
            return 2
        if "Stage 1" in self.subtypes:
            return 1
        if self.is_basic:
            return 0
        return None

    @property
    def max_damage(self) -> int:
        return max((a.damage for a in self.attacks), default=0)

    @property
    def max_attack_cost(self) -> int:
        return max((a.cost for a in self.attacks), default=0)

    @property
    def min_attack_cost(self) -> Optional[int]:
        if not self.attacks:
            return None
        return min(a.cost for a in self.attacks)


class DeckEntry(BaseModel):
    """A card and how many copies of it the deck runs."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    card: Card
    quantity: int = Field(ge=0, validation_alias=AliasChoices("quantity", "count", "qty"))


class Deck(BaseModel):
    """
    An ordered list of deck entries.

    Deck size and copy limits are checked by the analysis, never enforced
    here.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entries: Tuple[DeckEntry, ...] = ()
    name: Optional[str] = None

    @property
    def total_cards(self) -> int:
        """Total number of cards in the deck."""
        return sum(entry.quantity for entry in self.entries)

    @property
    def unique_cards(self) -> int:
        return len(self.entries)

    def count(self, predicate) -> int:
        """Total quantity of entries whose card satisfies ``predicate``."""
        return sum(entry.quantity for entry in self.entries if predicate(entry.card))

    def cards_matching(self, predicate) -> List[DeckEntry]:
        return [entry for entry in self.entries if entry.quantity > 0 and predicate(entry.card)]

    def by_supertype(self, supertype: Supertype) -> List[DeckEntry]:
        return [entry for entry in self.entries if entry.card.supertype == supertype]

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Any, int]], name: Optional[str] = None) -> "Deck":
        """
        Build a deck from (card, quantity) pairs.

        Cards may be ``Card`` instances or raw dictionaries.
        """
        entries = [DeckEntry.model_validate({"card": card, "quantity": qty}) for card, qty in pairs]
        return cls(entries=tuple(entries), name=name)

    @classmethod
    def from_json(cls, data: Any, name: Optional[str] = None) -> "Deck":
        """
        Build a deck from decoded JSON.

        Accepts either a list of ``{"card": {...}, "quantity": n}`` objects or
        an object with ``entries`` (and optionally ``name``).
        """
        if isinstance(data, str):
            data = json.loads(data)
        if isinstance(data, dict):
            payload = dict(data)
            if name is not None:
                payload["name"] = name
            return cls.model_validate(payload)
        return cls.model_validate({"entries": data, "name": name})
