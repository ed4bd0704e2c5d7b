"""
speedrun.com API Client

Thin, rate-limited wrapper around the public speedrun.com REST API. Every
request passes through a single RateLimiter so the exporter never sends more
than one request per REQUEST_INTERVAL_S, and failed requests are retried a
bounded number of times with a fixed backoff before a TransportError is
raised.

Username and platform lookups are cached for the life of the client, so each
id referenced by many runs is fetched at most once.

Usage:
    from srcexport.ingestion.client import SpeedrunClient
    client = SpeedrunClient()
    game = client.fetch_object("games", {"abbreviation": "sms"})
"""

import time

import requests

from srcexport.config import (
    MAX_REQUEST_ATTEMPTS,
    PAGE_SIZE,
    REQUEST_INTERVAL_S,
    REQUEST_TIMEOUT_S,
    RETRY_BACKOFF_S,
    SPEEDRUN_API_BASE,
    USER_AGENT,
)
from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class ExportError(Exception):
    """Base exception for failures that abort an export"""
    pass


class NotFoundError(ExportError):
    """Raised when the requested game does not exist"""
    pass


class TransportError(ExportError):
    """Raised when the API cannot be reached after all retries"""
    pass


class FormatError(ExportError):
    """Raised when a response lacks the expected payload envelope"""
    pass


class RateLimiter:
    """Enforces a minimum spacing between consecutive requests."""

    def __init__(self, interval=REQUEST_INTERVAL_S, clock=time.monotonic, sleep=time.sleep):
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last = None

    def acquire(self):
        """Block until a request is permitted, then claim the slot."""
        if self._last is not None:
            delta = self._clock() - self._last
            if delta < self.interval:
                self._sleep(self.interval - delta)
        self._last = self._clock()


class SpeedrunClient:
    """Sequential speedrun.com API client with retry and lookup caches."""

    def __init__(
        self,
        base_url=SPEEDRUN_API_BASE,
        session=None,
        rate_limiter=None,
        max_attempts=MAX_REQUEST_ATTEMPTS,
        retry_backoff=RETRY_BACKOFF_S,
        timeout=REQUEST_TIMEOUT_S,
        sleep=time.sleep,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})
        self._limiter = rate_limiter or RateLimiter()
        self._max_attempts = max_attempts
        self._retry_backoff = retry_backoff
        self._timeout = timeout
        self._sleep = sleep

        self._usernames = {}
        self._platforms = {}

    def _get_json(self, url, params=None):
        last_error = None
        for attempt in range(1, self._max_attempts + 1):
            self._limiter.acquire()
            logger.debug(f"GET {url} params={params or {}} (attempt {attempt}/{self._max_attempts})")
            try:
                response = self._session.get(url, params=params, timeout=self._timeout)
                response.raise_for_status()
                return response.json()
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                logger.warning(
                    f"Request to {url} failed (attempt {attempt}/{self._max_attempts}): {exc}"
                )
                if attempt < self._max_attempts:
                    self._sleep(self._retry_backoff)

        raise TransportError(
            f"Failed after {self._max_attempts} attempts: {url} params={params} "
            f"(last error: {last_error})"
        ) from last_error

    def fetch_object(self, path, query=None):
        """
        Fetch one API resource and unwrap its ``data`` envelope.

        Args:
            path: Resource path relative to the API base (e.g. "games")
            query: Optional query-string parameters

        Returns:
            The ``data`` member of the response body

        Raises:
            TransportError: If every attempt failed
            FormatError: If the body has no ``data`` member
        """
        body = self._get_json(f"{self.base_url}{path}", dict(query) if query else None)
        if not isinstance(body, dict) or body.get("data") is None:
            raise FormatError(f"Unexpected response format from {path}")
        return body["data"]

    def fetch_page(self, path, query, offset, page_size=PAGE_SIZE):
        """Fetch one page of a list resource."""
        params = dict(query or {})
        params["offset"] = offset
        params["max"] = page_size
        data = self.fetch_object(path, params)
        if not isinstance(data, list):
            raise FormatError(f"Expected a list page from {path}, got {type(data).__name__}")
        return data

    def paginate(self, path, query=None, page_size=PAGE_SIZE):
        """
        Yield every object of a paged resource, page by page.

        Pagination stops at the first page holding fewer than page_size items.
        """
        offset = 0
        while True:
            page = self.fetch_page(path, query, offset, page_size)
            yield from page
            if len(page) < page_size:
                break
            offset += page_size

    def resolve_username(self, user_id):
        """Return a user's international name, or None. Cached per id."""
        if not user_id:
            return None
        if user_id not in self._usernames:
            user = self.fetch_object(f"users/{user_id}")
            names = user.get("names") if isinstance(user, dict) else None
            self._usernames[user_id] = (names or {}).get("international")
        return self._usernames[user_id]

    def resolve_platform_name(self, platform_id):
        """Return a platform's display name, or None. Cached per id."""
        if not platform_id:
            return None
        if platform_id not in self._platforms:
            platform = self.fetch_object(f"platforms/{platform_id}")
            self._platforms[platform_id] = platform.get("name") if isinstance(platform, dict) else None
        return self._platforms[platform_id]
