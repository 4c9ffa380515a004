# recipebook/services/country_cache.py
import logging
import time

import requests

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 24 * 60 * 60
EXCLUDED_COUNTRIES = ("Palestine", "Iran")


def fetch_country_names(url, timeout=10, excluded=EXCLUDED_COUNTRIES, session=None):
    """Download country names from a restcountries-style endpoint, sorted alphabetically"""
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.RequestException as e:
        logger.warning("Country list request failed: %s", e)
        raise UpstreamError("Could not load the country list") from e
    except ValueError as e:
        raise UpstreamError("Country list response was not valid JSON") from e

    names = {
        entry['name']['common']
        for entry in payload
        if isinstance(entry, dict) and isinstance(entry.get('name'), dict) and entry['name'].get('common')
    }
    return sorted(name for name in names if name not in excluded)


class CountryCache:
    """
    Country list with a time-to-live. One instance is created per app and
    shared by reference with the registration flow.
    """

    def __init__(self, fetch, ttl=DEFAULT_TTL, clock=time.monotonic):
        self.fetch = fetch
        self.ttl = ttl
        self.clock = clock
        self.value = []
        self.fetched_at = None

    def is_fresh(self):
        return bool(self.value) and self.fetched_at is not None \
            and self.clock() - self.fetched_at < self.ttl

    def get(self):
        if not self.is_fresh():
            self.value = list(self.fetch())
            self.fetched_at = self.clock()
            logger.info("Country list refreshed: %d entries", len(self.value))
        return self.value
