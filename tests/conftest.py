"""Shared pytest fixtures for all tests."""
from __future__ import annotations

import json
import os
import tempfile

import httpx
import pytest

# Keep the web app's storage out of the working tree.
os.environ.setdefault("STOREFRONT_STATE_DIR", tempfile.mkdtemp(prefix="storefront_"))

from storefront.core.api import BookstoreAPI  # noqa: E402
from storefront.core.cart import CartClient, ClientContext  # noqa: E402
from storefront.core.config import Settings  # noqa: E402
from storefront.core.feedback import Page  # noqa: E402
from storefront.core.storage import ClientStorage  # noqa: E402

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """Records requests and answers them from a route table."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, object]] = {}
        self.unreachable = False

    def on(self, method: str, path: str, status: int = 200, body: object = None) -> None:
        self.routes[(method, path)] = (status, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = self.routes.get(
            (request.method, request.url.path),
            (404, {"message": "Not found", "status": 404}),
        )
        if body is None:
            return httpx.Response(status)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BACKEND_URL, transport=httpx.MockTransport(self))


@pytest.fixture
def settings() -> Settings:
    return Settings(api_url=BACKEND_URL, default_user_id="guest", toast_seconds=0.05)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(settings: Settings, backend: FakeBackend) -> BookstoreAPI:
    return BookstoreAPI(settings, client=backend.client())


@pytest.fixture
def storage() -> ClientStorage:
    store = ClientStorage(":memory:")
    yield store
    store.close()


@pytest.fixture
def page() -> Page:
    return Page()


@pytest.fixture
def ctx(settings, storage, api, page) -> ClientContext:
    return ClientContext.create(settings, storage, api, page)


@pytest.fixture
def cart(ctx: ClientContext) -> CartClient:
    return CartClient(ctx)


@pytest.fixture
def listing_html() -> str:
    """A rendered listing: three cards, one without a price."""
    return """
<html><body>
<select id="genreFilter">
  <option value="">All genres</option>
  <option value="Poetry">Poetry</option>
</select>
<select id="sortBy">
  <option value="">Featured</option>
  <option value="title">Title (A-Z)</option>
  <option value="title-desc">Title (Z-A)</option>
  <option value="price">Price (low to high)</option>
  <option value="price-desc">Price (high to low)</option>
  <option value="author">Author</option>
</select>
<span id="resultCount">3</span>
<div id="bookGrid" style="display: grid">
  <div class="book-card" data-book-id="b1" data-genre="Fiction" data-title="Zebra Tales"
       data-price="12.50" data-author="Young">Zebra Tales</div>
  <div class="book-card" data-book-id="b2" data-genre="Drama" data-title="apple orchard"
       data-author="Adams">apple orchard</div>
  <div class="book-card" data-book-id="b3" data-genre="Fiction" data-title="Middle March"
       data-price="5" data-author="Eliot">Middle March</div>
</div>
<div id="noResults" style="display: none">No books match.</div>
</body></html>
"""


@pytest.fixture
def payment_form() -> dict:
    return {
        "cardName": "Ada Lovelace",
        "cardNumber": "4111 1111 1111 1111",
        "expiryDate": "12/29",
        "cvv": "123",
        "billingAddress": "1 Analytical Way",
    }
