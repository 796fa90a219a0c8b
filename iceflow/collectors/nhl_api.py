"""
NHL API Client

Client for the NHL web API endpoints that feed the league tables.
Handles rate limiting, response caching and retries with backoff.
"""

import threading
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable

import httpx
import yaml
from diskcache import Cache
from loguru import logger

DEFAULT_CONFIG_PATH = Path("config/api_config.yaml")


def current_season(today: date | None = None) -> str:
    """
    Season id ("20252026") for a date.

    Training camps open in September, so from September onward the new
    season is current.
    """
    today = today or date.today()
    start_year = today.year if today.month >= 9 else today.year - 1
    return f"{start_year}{start_year + 1}"


def format_season(season: str) -> str:
    """Display form of a season id: "20252026" -> "2025-26"."""
    return f"{season[:4]}-{season[6:8]}"


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load the API configuration file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        return yaml.safe_load(f) or {}


class RateLimiter:
    """
    Rate limiter shared by every worker thread using one client.

    The whole check-sleep-stamp sequence runs under a lock, so concurrent
    callers are released one at a time, ``request_delay`` apart.
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        request_delay: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.requests_per_minute = requests_per_minute
        self.request_delay = request_delay
        self._clock = clock
        self._sleep = sleep
        self.last_request_time: float | None = None
        self.request_count: int = 0
        self.window_start: float = clock()
        self._lock = threading.Lock()

    def wait_if_needed(self) -> float:
        """Block until another request is allowed; returns the request time."""
        with self._lock:
            return self._wait_locked()

    def _wait_locked(self) -> float:
        now = self._clock()

        if now - self.window_start >= 60:
            self.request_count = 0
            self.window_start = now

        if self.request_count >= self.requests_per_minute:
            sleep_time = 60 - (now - self.window_start)
            if sleep_time > 0:
                logger.debug(f"Rate limit reached, sleeping for {sleep_time:.2f}s")
                self._sleep(sleep_time)
            self.request_count = 0
            now = self.window_start = self._clock()

        if self.last_request_time is not None:
            elapsed = now - self.last_request_time
            if elapsed < self.request_delay:
                self._sleep(self.request_delay - elapsed)

        self.last_request_time = self._clock()
        self.request_count += 1
        return self.last_request_time


class NHLApiClient:
    """
    Client for the NHL web API.

    Only the endpoints the analytics pipeline consumes are wrapped: club
    season stats (skaters and goalies per team).
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        config: dict[str, Any] | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the NHL API client.

        Args:
            config_path: Path to API configuration file. Defaults to config/api_config.yaml
            config: Already-loaded configuration (skips reading the file)
            http_client: HTTP client to use instead of building one
            sleep: Sleep function used for retry backoff and rate limiting
        """
        self.config = config if config is not None else load_config(config_path)
        api_config = self.config["api"]
        self.base_url = api_config["base_url"].rstrip("/")
        self.timeout = api_config.get("timeout", 30)
        self._sleep = sleep

        rate_config = api_config["rate_limit"]
        self.rate_limiter = RateLimiter(
            requests_per_minute=rate_config["requests_per_minute"],
            request_delay=rate_config["request_delay"],
            sleep=sleep,
        )
        self.max_retries = rate_config["max_retries"]
        self.retry_delay = rate_config["retry_delay"]
        self.retry_backoff = rate_config["retry_backoff"]

        cache_config = self.config.get("cache", {})
        self.cache_ttl = timedelta(hours=cache_config.get("ttl_hours", 24))
        if cache_config.get("enabled", False):
            cache_dir = Path(cache_config["directory"])
            cache_dir.mkdir(parents=True, exist_ok=True)
            self.cache: Cache | None = Cache(str(cache_dir))
        else:
            self.cache = None

        self.client = http_client or httpx.Client(timeout=self.timeout)

        logger.info("NHL API client initialized")

    def _get_cache_key(self, url: str, params: dict[str, Any] | None = None) -> str:
        """Generate a cache key for the request."""
        key = url
        if params:
            key += "?" + "&".join(f"{k}={v}" for k, v in sorted(params.items()))
        return key

    def _make_request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        use_cache: bool = True,
    ) -> dict[str, Any]:
        """
        Make an HTTP request with rate limiting, caching, and retry logic.

        Args:
            url: Full URL to request
            params: Query parameters
            use_cache: Whether to use caching for this request

        Returns:
            JSON response data

        Raises:
            httpx.HTTPError: If request fails after all retries
        """
        cache_key = self._get_cache_key(url, params)

        if use_cache and self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {url}")
                return cached

        last_error: httpx.HTTPError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                self.rate_limiter.wait_if_needed()
                response = self.client.get(url, params=params)
                response.raise_for_status()
                data = response.json()

                if use_cache and self.cache is not None:
                    self.cache.set(cache_key, data, expire=self.cache_ttl.total_seconds())

                return data

            except httpx.HTTPError as e:
                last_error = e
                if attempt < self.max_retries:
                    sleep_time = self.retry_delay * (self.retry_backoff**attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries + 1}), "
                        f"retrying in {sleep_time}s: {e}"
                    )
                    self._sleep(sleep_time)

        logger.error(f"Request failed after {self.max_retries + 1} attempts: {url}")
        raise last_error  # type: ignore[misc]

    def _build_url(self, endpoint: str, **kwargs: Any) -> str:
        """Build full URL from endpoint template."""
        return f"{self.base_url}{endpoint.format(**kwargs)}"

    def get_club_stats(
        self, team_abbrev: str, season: str | None = None, game_type: int = 2
    ) -> dict[str, Any]:
        """
        Get a team's season skater and goalie statistics.

        Args:
            team_abbrev: Team abbreviation (e.g., "TOR")
            season: Season in YYYYYYYY format, defaults to the current season
            game_type: Game type (2=regular season, 3=playoffs)

        Returns:
            Club stats with "skaters" and "goalies" lists
        """
        endpoint = self.config["endpoints"]["club_stats"]
        url = self._build_url(
            endpoint,
            team_abbrev=team_abbrev,
            season=season or current_season(),
            game_type=game_type,
        )
        return self._make_request(url)

    def clear_cache(self) -> None:
        """Clear the request cache."""
        if self.cache is not None:
            self.cache.clear()
            logger.info("Cache cleared")

    def close(self) -> None:
        """Close the HTTP client and cache."""
        self.client.close()
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "NHLApiClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
