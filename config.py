"""
Application settings read from the environment.

Only the CLI, the dashboard and the card-data client read these; the
analysis engine itself takes no configuration.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_URL = "https://api.pokemontcg.io/v2"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    log_level: str = "INFO"
    timeout: float = 10.0
    user_agent: str = "TCGDeckAnalyzer/1.0"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ValueError: if DECK_ANALYZER_TIMEOUT is not a positive number
    """
    env = os.environ if environ is None else environ

    api_url = env.get("POKEMON_TCG_API_URL", DEFAULT_API_URL).rstrip("/")
    api_key = env.get("POKEMON_TCG_API_KEY") or None
    log_level = env.get("DECK_ANALYZER_LOG_LEVEL", "INFO").upper()

    raw_timeout = env.get("DECK_ANALYZER_TIMEOUT", "10")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ValueError(f"DECK_ANALYZER_TIMEOUT must be a number, got {raw_timeout!r}")
    if timeout <= 0:
        raise ValueError("DECK_ANALYZER_TIMEOUT must be positive")

    return Settings(
        api_url=api_url,
        api_key=api_key,
        log_level=log_level,
        timeout=timeout,
    )
