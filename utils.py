"""
Shared utility functions for the TCG Deck Analyzer.
Common operations used across multiple modules.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Any, Optional


def canonicalize_name(name: str) -> str:
    """
    Canonicalize card names for consistent matching.

    Transforms:
    - Normalizes Unicode (NFKD)
    - Removes combining characters (accents, so "Pokémon" matches "Pokemon")
    - Case-folds to lowercase
    - Normalizes quotes/apostrophes
    - Keeps only alphanumeric, spaces, commas, hyphens, apostrophes, ampersands
    - Collapses whitespace

    Args:
        name: Card name to canonicalize

    Returns:
        Canonicalized string for comparison

    Examples:
        >>> canonicalize_name("Boss’s Orders")
        "boss's orders"
        >>> canonicalize_name("Pokémon Catcher")
        "pokemon catcher"
    """
    if not name:
        return ""

    # Normalize Unicode
    name = unicodedata.normalize("NFKD", name)

    # Remove combining characters (accents)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))

    # Casefold for case-insensitive comparison
    name = name.casefold()

    # Normalize curly apostrophes/quotes to plain
    name = name.replace("’", "'").replace("‘", "'")
    name = name.replace("“", '"').replace("”", '"')

    # Keep only safe characters
    name = re.sub(r"[^a-z0-9 ,'&-]+", " ", name)

    # Collapse whitespace
    name = re.sub(r"\s+", " ", name).strip()

    return name


def parse_damage(value: Any) -> int:
    """
    Parse an attack damage value into an integer.

    Card data writes damage as strings with modifiers ("30+", "120×",
    "50-"). Only the leading number counts; blank or missing damage is 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError("damage must be a number or a damage string")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else 0


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse HP-style values ("70", 70, "", None) into an optional integer."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        match = re.match(r"(\d+)", value)
        if not match:
            raise ValueError(f"not a number: {value!r}")
        return int(match.group(1))
    return value


def format_percent(probability: float, digits: int = 1) -> str:
    """Format a probability in [0, 1] as a percentage string."""
    return f"{probability * 100:.{digits}f}%"

