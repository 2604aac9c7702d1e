"""
Resilient client for the catalog service.

The order service needs one menu item per order line. The catalog is
another process, so the call can fail in two very different ways:

- The catalog answers "404, no such item". That is a definitive business
  answer. It is re-raised unchanged as MenuItemNotFoundError, never
  retried, and never counted by the circuit breaker.
- The catalog can't be reached, times out, answers 5xx, answers garbage,
  or the circuit is already open. All of these become
  CatalogUnavailableError after the retry budget is spent.

Composition (outermost first):
    RetryPolicy -> CircuitBreaker -> httpx.Client.get

Every attempt passes through the breaker, so the breaker sees each
transport failure. The per-attempt timeout lives on the httpx client.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ordering.resilience import CircuitBreaker, CircuitOpenError, RetryPolicy
from shared.config import Settings, get_settings
from shared.exceptions import CatalogUnavailableError, MenuItemNotFoundError
from shared.models import MenuItem

logger = logging.getLogger("catalog_gateway")


class CatalogGateway:
    """
    Looks up menu items by id with retry, circuit breaking and a fallback.

    Example:
        gateway = CatalogGateway.from_settings(get_settings())
        item = gateway.resolve("menu-1")
    """

    # Raised on the first attempt, never retried
    IGNORED_BY_RETRY = (MenuItemNotFoundError, CircuitOpenError)

    def __init__(
        self,
        client: httpx.Client,
        retry_policy: Optional[RetryPolicy] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        """
        Args:
            client: httpx client with base_url and timeout already configured
            retry_policy: Retry policy for transient failures
            circuit_breaker: Breaker shared by every caller in the process
        """
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy(
            ignore=self.IGNORED_BY_RETRY,
        )
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            "catalog", ignore=(MenuItemNotFoundError,),
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CatalogGateway":
        """Build a gateway with a real HTTP client and policies from settings."""
        settings = settings or get_settings()
        client = httpx.Client(
            base_url=settings.catalog_service_url,
            timeout=settings.catalog_timeout_seconds,
        )
        retry_policy = RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            wait_seconds=settings.retry_wait_seconds,
            multiplier=settings.retry_multiplier,
            ignore=cls.IGNORED_BY_RETRY,
        )
        circuit_breaker = CircuitBreaker(
            "catalog",
            failure_rate_threshold=settings.breaker_failure_rate_threshold,
            sliding_window_size=settings.breaker_sliding_window_size,
            minimum_number_of_calls=settings.breaker_minimum_calls,
            wait_duration_in_open_state=settings.breaker_wait_seconds,
            permitted_calls_in_half_open_state=settings.breaker_half_open_calls,
            ignore=(MenuItemNotFoundError,),
        )
        return cls(client, retry_policy, circuit_breaker)

    def resolve(self, product_id: str) -> MenuItem:
        """
        Fetch one menu item.

        Raises:
            MenuItemNotFoundError: The catalog says the id does not exist
            CatalogUnavailableError: The catalog could not be reached
        """
        logger.info(f"Attempting to fetch menu item with id: {product_id}")
        if not product_id:
            raise MenuItemNotFoundError(product_id)
        try:
            return self.retry_policy.call(self.circuit_breaker.call, self._fetch, product_id)
        except MenuItemNotFoundError:
            raise
        except Exception as e:
            return self._fallback(product_id, e)

    def _fetch(self, product_id: str) -> MenuItem:
        """One attempt. Raises on anything but a 2xx with a valid body."""
        response = self.client.get(f"/menu-items/{self._path_segment(product_id)}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise MenuItemNotFoundError(product_id)
        response.raise_for_status()
        try:
            return MenuItem.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise httpx.DecodingError(f"Malformed menu item payload for {product_id}: {e}") from e

    @staticmethod
    def _path_segment(product_id: str) -> str:
        """Encode the id as exactly one path segment, dot segments included."""
        segment = quote(product_id, safe="")
        if segment in (".", ".."):
            segment = segment.replace(".", "%2E")
        return segment

    def _fallback(self, product_id: str, error: Exception) -> MenuItem:
        logger.error(
            f"Circuit breaker activated for Menu Service while fetching {product_id}. Error: {error}"
        )
        raise CatalogUnavailableError() from error

    def close(self) -> None:
        self.client.close()
