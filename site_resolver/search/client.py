"""
Google Custom Search client for company website search.
"""

import logging
import random
import time
from typing import Callable, List, Dict, Any, Optional

import requests

from site_resolver.core.config import SearchConfig
from site_resolver.core.exceptions import SearchAPIError, RateLimitError
from site_resolver.core.models import RawSearchItem


API_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
MAX_API_RESULTS = 10
RATE_LIMIT_STATUSES = (429, 403)
RESPONSE_FIELDS = "items(title,link,snippet),error"


def backoff_delay(retry_count: int, initial_delay_ms: int, max_jitter_ms: int,
                  jitter: Callable[[], float] = random.random) -> float:
    """
    Compute the wait before the next retry.

    Args:
        retry_count: Number of retries already made (0 for the first retry)
        initial_delay_ms: Base delay in milliseconds
        max_jitter_ms: Upper bound of the random jitter in milliseconds
        jitter: Source of uniform random numbers in [0, 1)

    Returns:
        Delay in seconds: initial * 2**retry_count + jitter
    """
    delay_ms = initial_delay_ms * (2 ** retry_count) + jitter() * max_jitter_ms
    return delay_ms / 1000.0


class GoogleSearchClient:
    """
    Client for the Google Custom Search JSON API.

    Retries rate limit and quota errors with exponential backoff. Every other
    failure degrades to an empty result list, so a bad query never fails the
    whole company.
    """

    def __init__(self, config: SearchConfig,
                 sleep: Callable[[float], None] = time.sleep,
                 jitter: Callable[[], float] = random.random):
        """
        Initialize the search client.

        Args:
            config: Search settings (API key, engine ID, timeouts, retries)
            sleep: Function used to wait between retries
            jitter: Source of uniform random numbers for backoff jitter
        """
        self.config = config
        self.base_url = API_ENDPOINT
        self._sleep = sleep
        self._jitter = jitter
        self.logger = logging.getLogger(__name__)

    def _build_params(self, query: str) -> Dict[str, Any]:
        return {
            "key": self.config.api_key,
            "cx": self.config.search_engine_id,
            "q": query,
            "num": min(self.config.max_links_per_company, MAX_API_RESULTS),
            "gl": "br",
            "lr": "lang_pt",
            "fields": RESPONSE_FIELDS,
        }

    def execute_query(self, query: str, retry_count: int = 0) -> List[RawSearchItem]:
        """
        Run one search query.

        Args:
            query: Query text
            retry_count: Retries already spent on this query

        Returns:
            List of RawSearchItem objects; empty on any failure
        """
        try:
            return self._search(query)

        except RateLimitError as e:
            if retry_count >= self.config.max_retries:
                self.logger.warning(
                    f"Giving up on query after {retry_count} retries: {query!r} ({e})"
                )
                return []

            delay = backoff_delay(
                retry_count,
                self.config.initial_retry_delay_ms,
                self.config.max_jitter_ms,
                self._jitter,
            )
            self.logger.warning(f"{e}. Retrying in {delay:.2f}s...")
            self._sleep(delay)
            return self.execute_query(query, retry_count + 1)

        except SearchAPIError as e:
            self.logger.error(f"Search failed for query {query!r}: {e}")
            return []

    def _search(self, query: str) -> List[RawSearchItem]:
        """
        Send the request and parse the response.

        Raises:
            RateLimitError: On HTTP 429 or 403
            SearchAPIError: For network errors, other HTTP errors or bad payloads
        """
        params = self._build_params(query)
        self.logger.debug(f"Executing query {query!r} (key {self.config.masked_api_key})")

        try:
            response = requests.get(
                self.base_url,
                params=params,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise SearchAPIError(f"Network error during search: {e}")

        if response.status_code in RATE_LIMIT_STATUSES:
            raise RateLimitError(f"Rate limit or quota exceeded (HTTP {response.status_code})")

        if response.status_code != 200:
            raise SearchAPIError(
                f"API request failed with status {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SearchAPIError(f"Invalid JSON response: {e}")

        if not isinstance(data, dict):
            raise SearchAPIError("Unexpected response payload")

        error = data.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise SearchAPIError(f"API returned an error: {message}")

        return self._parse_items(data.get("items") or [])

    def _parse_items(self, raw_items: Any) -> List[RawSearchItem]:
        if not isinstance(raw_items, list):
            raise SearchAPIError("Response 'items' is not a list")

        items = []
        for raw in raw_items:
            # Skip malformed results
            if not isinstance(raw, dict):
                continue
            items.append(RawSearchItem(
                title=str(raw.get("title") or ""),
                link=str(raw.get("link") or ""),
                snippet=str(raw.get("snippet") or ""),
            ))
        return items
