"""
Pokémon TCG API client for fetching card data.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import requests
from pydantic import ValidationError

from config import Settings, load_settings
from logger_config import log_card_lookup
from models import Card

logger = logging.getLogger(__name__)

CardRequest = Union[str, Tuple[str, Optional[str], Optional[str]]]


class PokemonTCGAPI:
    """Client for the public Pokémon TCG card API."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.base_url = self.settings.api_url
        self.headers = {
            'User-Agent': self.settings.user_agent,
            'Accept': 'application/json',
        }
        if self.settings.api_key:
            self.headers['X-Api-Key'] = self.settings.api_key
        self.cache: Dict[str, Optional[Card]] = {}
        self.last_request_time = 0.0
        self.min_delay = 0.1  # Minimum 100ms between requests

    def _make_request_with_retry(self, url: str, params: Dict[str, Any],
                                 max_retries: int = 3) -> Optional[requests.Response]:
        """
        Make a request with exponential backoff retry for rate limiting.

        Args:
            url: The URL to request
            params: Query parameters
            max_retries: Maximum number of retry attempts

        Returns:
            Response object if successful or 404, None if all retries failed
        """
        for attempt in range(max_retries + 1):
            # Rate limiting
            time_since_last = time.time() - self.last_request_time
            if time_since_last < self.min_delay:
                time.sleep(self.min_delay - time_since_last)

            try:
                self.last_request_time = time.time()
                response = requests.get(url, headers=self.headers, params=params,
                                        timeout=self.settings.timeout)
            except requests.RequestException as e:
                if attempt < max_retries:
                    wait_time = 2 ** attempt + random.uniform(0, 1)
                    logger.warning("Request to %s failed (%s); retrying in %.1fs", url, e, wait_time)
                    time.sleep(wait_time)
                    continue
                logger.error("Request to %s failed after %d attempts: %s", url, attempt + 1, e)
                return None

            if response.status_code in (200, 404):
                return response

            if response.status_code == 429:
                if attempt < max_retries:
                    retry_after = response.headers.get('Retry-After')
                    if retry_after:
                        try:
                            wait_time = float(retry_after)
                        except ValueError:
                            wait_time = 2 ** attempt
                    else:
                        wait_time = 2 ** attempt + random.uniform(0, 1)  # Jitter
                    logger.warning("Rate limited by card API; waiting %.1fs", wait_time)
                    time.sleep(wait_time)
                    continue
                logger.error("Rate limit retries exhausted for %s", url)
                return None

            # Other HTTP error - don't retry
            logger.error("Card API returned HTTP %d for %s", response.status_code, url)
            return None

        return None

    @staticmethod
    def _build_query(card_name: str, set_code: Optional[str] = None, number: Optional[str] = None) -> str:
        escaped = card_name.replace('"', '\\"')
        parts = [f'!name:"{escaped}"']
        if set_code:
            parts.append(f"set.ptcgoCode:{set_code.upper()}")
        if number:
            parts.append(f"number:{number}")
        return " ".join(parts)

    def _search(self, query: str) -> Optional[List[Dict[str, Any]]]:
        response = self._make_request_with_retry(f"{self.base_url}/cards", {'q': query, 'pageSize': 1})
        if response is None or response.status_code != 200:
            return None
        return response.json().get('data', [])

    def get_card(self, card_name: str, set_code: Optional[str] = None,
                 number: Optional[str] = None) -> Optional[Card]:
        """
        Fetch a card by name, preferring the given printing.

        Args:
            card_name: Exact card name
            set_code: Optional PTCGL set code (e.g. "OBF")
            number: Optional collector number within the set

        Returns:
            Card if found, None otherwise
        """
        cache_key = "|".join(filter(None, [card_name, set_code, number]))
        if cache_key in self.cache:
            return self.cache[cache_key]

        card = None
        if set_code:
            card = self._first_card(self._build_query(card_name, set_code, number))
        if card is None:
            card = self._first_card(self._build_query(card_name))

        log_card_lookup(logger, card_name, card is not None, set_code=set_code, number=number)
        self.cache[cache_key] = card
        return card

    def _first_card(self, query: str) -> Optional[Card]:
        results = self._search(query)
        if not results:
            return None
        try:
            return self._parse_card_data(results[0])
        except ValidationError as e:
            logger.warning("Card API returned unusable data for %s: %s", query, e)
            return None

    def _parse_card_data(self, data: Dict[str, Any]) -> Card:
        """Parse card data from a Pokémon TCG API response."""
        return Card.model_validate(data)

    def get_cards_batch(self, card_requests: Iterable[CardRequest]) -> Dict[str, Optional[Card]]:
        """
        Fetch multiple cards with built-in rate limiting and retry logic.

        Args:
            card_requests: Card names or (card_name, set_code, number) tuples

        Returns:
            Dictionary mapping card names to Card objects (or None if not found)
        """
        results: Dict[str, Optional[Card]] = {}
        for request in card_requests:
            if isinstance(request, tuple):
                card_name, set_code, number = request
                results[card_name] = self.get_card(card_name, set_code, number)
            else:
                results[request] = self.get_card(request)
        return results
