"""
Tests for the resilient catalog gateway.

The catalog is faked with httpx.MockTransport, so every request the
gateway makes is visible to the test.
"""

from decimal import Decimal

import httpx
import pytest

from ordering.catalog_gateway import CatalogGateway
from ordering.resilience import CircuitBreaker, CircuitState, RetryPolicy
from shared.config import Settings
from shared.exceptions import CatalogUnavailableError, MenuItemNotFoundError

BURGER_JSON = {
    "id": "menu-1",
    "name": "Classic Burger",
    "description": "Artisan burger",
    "price": "12.90",
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": None,
}


class FakeCatalogServer:
    """Records requests and answers with a scripted response."""

    def __init__(self, respond):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def make_gateway(server: FakeCatalogServer, breaker: CircuitBreaker = None) -> CatalogGateway:
    client = httpx.Client(transport=httpx.MockTransport(server), base_url="http://catalog")
    retry_policy = RetryPolicy(
        max_attempts=3,
        ignore=CatalogGateway.IGNORED_BY_RETRY,
        sleep=lambda _: None,
    )
    breaker = breaker or CircuitBreaker("catalog", ignore=(MenuItemNotFoundError,))
    return CatalogGateway(client, retry_policy, breaker)


class TestResolve:
    def test_success(self):
        server = FakeCatalogServer(lambda request: httpx.Response(200, json=BURGER_JSON))
        gateway = make_gateway(server)

        item = gateway.resolve("menu-1")

        assert item.id == "menu-1"
        assert item.price == Decimal("12.90")
        assert server.requests[0].url.path == "/menu-items/menu-1"

    def test_not_found_is_not_retried_or_counted(self):
        server = FakeCatalogServer(lambda request: httpx.Response(404, json={"detail": "nope"}))
        gateway = make_gateway(server)

        for _ in range(10):
            with pytest.raises(MenuItemNotFoundError) as exc_info:
                gateway.resolve("menu-404")

        assert exc_info.value.menu_item_id == "menu-404"
        assert len(server.requests) == 10
        assert gateway.circuit_breaker.failure_count == 0
        assert gateway.circuit_breaker.state == CircuitState.CLOSED

    @pytest.mark.parametrize("product_id", ["../health", "..", "a/b", "menu 1?x=1"])
    def test_id_is_sent_as_one_path_segment(self, product_id):
        """Ids can't escape /menu-items/; the catalog answers 404 for them."""
        def respond(request):
            if request.url.path == "/health":
                return httpx.Response(200, json={"status": "healthy"})
            return httpx.Response(404, json={"detail": "nope"})

        server = FakeCatalogServer(respond)
        breaker = CircuitBreaker(
            "catalog",
            sliding_window_size=4,
            minimum_number_of_calls=2,
            ignore=(MenuItemNotFoundError,),
        )
        gateway = make_gateway(server, breaker)

        with pytest.raises(MenuItemNotFoundError):
            gateway.resolve(product_id)

        assert len(server.requests) == 1
        raw_path = server.requests[0].url.raw_path.decode()
        assert raw_path.startswith("/menu-items/")
        assert "/" not in raw_path[len("/menu-items/"):]
        assert breaker.failure_count == 0
        assert breaker.state == CircuitState.CLOSED

    def test_empty_id_is_not_found_without_a_request(self):
        server = FakeCatalogServer(lambda request: httpx.Response(200, json=BURGER_JSON))
        gateway = make_gateway(server)

        with pytest.raises(MenuItemNotFoundError):
            gateway.resolve("")

        assert server.requests == []

    def test_server_errors_are_retried_then_unavailable(self):
        server = FakeCatalogServer(lambda request: httpx.Response(500))
        gateway = make_gateway(server)

        with pytest.raises(CatalogUnavailableError) as exc_info:
            gateway.resolve("menu-1")

        assert exc_info.value.status_code == 503
        assert len(server.requests) == 3
        assert gateway.circuit_breaker.failure_count == 3

    def test_transient_failure_then_success(self):
        responses = iter([httpx.Response(503), httpx.Response(200, json=BURGER_JSON)])
        server = FakeCatalogServer(lambda request: next(responses))
        gateway = make_gateway(server)

        assert gateway.resolve("menu-1").name == "Classic Burger"
        assert len(server.requests) == 2

    def test_connection_error_is_unavailable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(FakeCatalogServer(refuse))

        with pytest.raises(CatalogUnavailableError):
            gateway.resolve("menu-1")

    @pytest.mark.parametrize("body", [
        {"json": {"unexpected": True}},
        {"text": "<html>not json</html>"},
    ])
    def test_malformed_payload_is_unavailable(self, body):
        gateway = make_gateway(FakeCatalogServer(lambda request: httpx.Response(200, **body)))

        with pytest.raises(CatalogUnavailableError):
            gateway.resolve("menu-1")

    def test_open_circuit_short_circuits(self):
        server = FakeCatalogServer(lambda request: httpx.Response(500))
        breaker = CircuitBreaker(
            "catalog",
            sliding_window_size=2,
            minimum_number_of_calls=2,
            ignore=(MenuItemNotFoundError,),
        )
        gateway = make_gateway(server, breaker)

        with pytest.raises(CatalogUnavailableError):
            gateway.resolve("menu-1")
        assert breaker.state == CircuitState.OPEN
        calls_so_far = len(server.requests)

        with pytest.raises(CatalogUnavailableError):
            gateway.resolve("menu-1")

        assert len(server.requests) == calls_so_far


class TestFromSettings:
    def test_policies_follow_settings(self):
        settings = Settings(
            catalog_service_url="http://catalog:9000",
            retry_max_attempts=5,
            breaker_sliding_window_size=20,
        )

        gateway = CatalogGateway.from_settings(settings)
        try:
            assert gateway.client.base_url.host == "catalog"
            assert gateway.client.base_url.port == 9000
            assert gateway.retry_policy.max_attempts == 5
            assert gateway.circuit_breaker.sliding_window_size == 20
        finally:
            gateway.close()
