"""
Directory Client Module - HTTP access to the directory backend.
===============================================================

Fetches department data and trending lists with:
- Per-request timeout (5 seconds by default)
- Automatic retries with exponential backoff for connection errors
- TTL caching of department data and trending lists
- Failure degrading to empty data: nothing here raises to the caller

Endpoints (relative to the configured base URL):
    GET  /departments           -> {"departments": {name: [entity, ...]}}
    POST /departments           -> {"data": [entity, ...]}
    GET  /departments/list      -> {"departments": [name, ...]}
    POST /trending-labs         -> {"trendingLabs": [name, ...]}
    POST /analytics/click
    POST /analytics/view
"""

import time
from typing import Any, Optional

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from labcompass.data.base import CatalogSource
from labcompass.data.cache import TTLCache
from labcompass.shared.config import get_settings
from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import ClickType, Entity
from labcompass.shared.utils import DepartmentCatalog, normalize_query, parse_catalog, parse_entities

logger = get_logger(__name__)

_ALL_DEPARTMENTS_KEY = "__all__"

# Retried; HTTP error statuses are not
_TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


class DirectoryClient(CatalogSource):
    """
    Client for the directory REST API.

    Example:
        >>> with DirectoryClient() as client:
        ...     catalog = client.fetch_department_catalog()
        ...     trending = client.fetch_trending_names("statistics")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        catalog_cache: Optional[TTLCache] = None,
        trending_cache: Optional[TTLCache] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL, e.g. http://localhost:3001/api
            timeout: Per-request timeout in seconds
            max_retries: Retries after the first attempt for connection errors
            catalog_cache: Cache for department data (created from settings if None)
            trending_cache: Cache for trending lists (created from settings if None)
            session: Pre-configured requests session
        """
        settings = get_settings()
        api_config = settings.api

        self.base_url = (base_url or settings.get_effective_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.get_effective_timeout()
        self.max_retries = max_retries if max_retries is not None else api_config.max_retries
        self.retry_min_wait = api_config.retry_min_wait
        self.retry_max_wait = api_config.retry_max_wait
        self.user_agent = api_config.user_agent

        self.catalog_cache = (
            catalog_cache if catalog_cache is not None
            else TTLCache(ttl=settings.cache.catalog_ttl)
        )
        self.trending_cache = (
            trending_cache if trending_cache is not None
            else TTLCache(ttl=settings.cache.trending_ttl)
        )

        self._session = session

        logger.debug(f"DirectoryClient initialized: base_url={self.base_url}, timeout={self.timeout}s")

    @property
    def session(self) -> requests.Session:
        """Get or create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                }
            )
        return self._session

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Perform a JSON request.

        Returns:
            Decoded JSON body, or None on any failure (already logged)
        """
        url = f"{self.base_url}{path}"

        @retry(
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(min=self.retry_min_wait, max=self.retry_max_wait),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                f"Retry {retry_state.attempt_number}/{self.max_retries} for {method} {url}"
            ),
        )
        def _request_with_retry() -> requests.Response:
            return self.session.request(method, url, json=payload, timeout=self.timeout)

        start = time.perf_counter()
        try:
            response = _request_with_retry()
            response.raise_for_status()
            body = response.json()
        except requests.Timeout:
            logger.error(f"Request timeout for {method} {url} - backend may not be running")
            return None
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Request failed for {method} {url}: {e}")
            return None

        if not isinstance(body, dict):
            logger.error(f"Unexpected response body from {url}: {type(body).__name__}")
            return None

        logger.debug(f"{method} {url} in {(time.perf_counter() - start) * 1000:.1f}ms")
        return body

    # ─────────────────────────────────────────────────────────────────────────
    # Department Data
    # ─────────────────────────────────────────────────────────────────────────

    def fetch_department_catalog(self) -> DepartmentCatalog:
        cached = self.catalog_cache.get(_ALL_DEPARTMENTS_KEY)
        if cached is not None:
            return cached

        body = self._request("GET", "/departments")
        if body is None:
            return {}

        catalog = parse_catalog(body.get("departments") or {})
        self.catalog_cache.set(_ALL_DEPARTMENTS_KEY, catalog)
        logger.info(f"Fetched catalog: {len(catalog)} departments")
        return catalog

    def fetch_department(self, name: str) -> list[Entity]:
        normalized = normalize_query(name)
        if not normalized:
            return []

        full = self.catalog_cache.get(_ALL_DEPARTMENTS_KEY)
        if full is not None and normalized in full:
            return full[normalized]

        cached = self.catalog_cache.get(normalized)
        if cached is not None:
            return cached

        body = self._request("POST", "/departments", {"department": name})
        if body is None:
            return []

        entities = parse_entities(body.get("data") or [], normalized)
        self.catalog_cache.set(normalized, entities)
        logger.info(f"Fetched {name}: {len(entities)} results")
        return entities

    def fetch_department_list(self) -> list[str]:
        body = self._request("GET", "/departments/list")
        if body is None:
            return []
        return [str(d) for d in body.get("departments") or []]

    def clear_cache(self) -> None:
        """Drop cached department data."""
        self.catalog_cache.clear()

    # ─────────────────────────────────────────────────────────────────────────
    # Trending & Analytics
    # ─────────────────────────────────────────────────────────────────────────

    def fetch_trending_names(self, department: str) -> list[str]:
        normalized = normalize_query(department)
        if not normalized:
            return []

        cached = self.trending_cache.get(normalized)
        if cached is not None:
            return cached

        body = self._request("POST", "/trending-labs", {"department": normalized})
        if body is None:
            return []

        names = [str(n) for n in body.get("trendingLabs") or [] if n]
        self.trending_cache.set(normalized, names)
        logger.debug(f"Trending for {normalized}: {names}")
        return names

    def clear_trending_cache(self) -> None:
        """Drop cached trending lists so the next lookup reflects new clicks."""
        self.trending_cache.clear()

    def track_click(self, entity_name: str, department: str, click_type: ClickType | str) -> bool:
        click_value = click_type.value if isinstance(click_type, ClickType) else str(click_type)
        body = self._request(
            "POST",
            "/analytics/click",
            {
                "professorName": entity_name,
                "departmentName": normalize_query(department),
                "clickType": click_value,
            },
        )
        if body is None:
            return False

        self.clear_trending_cache()
        return True

    def track_view(self, entity_name: str, department: str) -> bool:
        body = self._request(
            "POST",
            "/analytics/view",
            {"professorName": entity_name, "departmentName": normalize_query(department)},
        )
        return body is not None

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Close the underlying session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "DirectoryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        self.close()
