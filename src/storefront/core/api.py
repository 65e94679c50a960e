"""Async client for the bookstore backend REST API."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog

from .config import Settings
from .errors import BackendError, TransportError
from .models import BookPayload, CartLineItem, Order, Recommendations, ShoppingCart

log = structlog.get_logger()

T = TypeVar("T")


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class BookstoreAPI:
    """Thin wrapper over the backend endpoints.

    Every call checks the response status: a non-success status raises
    BackendError carrying the ``message`` from the JSON error body, and any
    transport or decoding failure raises TransportError. Nothing is retried.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.api_url, timeout=settings.timeout
        )

    async def __aenter__(self) -> BookstoreAPI:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.error("backend_unreachable", method=method, path=path, error=str(e))
            raise TransportError(str(e)) from e

        if not resp.is_success:
            body: dict = {}
            try:
                parsed = resp.json()
                if isinstance(parsed, dict):
                    body = parsed
            except ValueError:
                # undecodable or non-JSON error bodies carry no message
                pass
            log.warning(
                "backend_error",
                method=method,
                path=path,
                status=resp.status_code,
                message=body.get("message", ""),
            )
            raise BackendError(resp.status_code, body.get("message") or "", body)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            log.error("backend_bad_json", method=method, path=path, status=resp.status_code)
            raise TransportError(f"Invalid JSON from {path}") from e

    def _parse(self, path: str, data: Any, build: Callable[[Any], T]) -> T:
        """Build a model from a decoded body, treating a wrong shape as a transport failure."""
        try:
            return build(data)
        except (AttributeError, TypeError, ValueError) as e:
            log.error("backend_bad_shape", path=path, error=str(e))
            raise TransportError(f"Unexpected response from {path}") from e

    # Books

    async def create_book(self, payload: BookPayload) -> dict:
        return await self._request("POST", "/api/books", json=payload.to_json())

    async def update_book(self, book_id: str, payload: BookPayload) -> dict:
        return await self._request(
            "PUT", f"/api/books/{_segment(book_id)}", json=payload.to_json()
        )

    async def delete_book(self, book_id: str) -> None:
        await self._request("DELETE", f"/api/books/{_segment(book_id)}")

    # Cart

    async def get_cart(self, user_id: str) -> ShoppingCart:
        path = f"/api/cart/{_segment(user_id)}"
        data = await self._request("GET", path)
        return self._parse(path, data or {"userId": user_id}, ShoppingCart.from_json)

    async def add_cart_item(self, user_id: str, item: CartLineItem) -> dict | None:
        return await self._request(
            "POST", f"/api/cart/{_segment(user_id)}/items", json=item.to_json()
        )

    async def remove_cart_item(self, user_id: str, book_id: str) -> dict | None:
        return await self._request(
            "DELETE", f"/api/cart/{_segment(user_id)}/items/{_segment(book_id)}"
        )

    async def update_cart_item(self, user_id: str, book_id: str, quantity: Any) -> dict | None:
        return await self._request(
            "PUT",
            f"/api/cart/{_segment(user_id)}/items/{_segment(book_id)}",
            params={"quantity": quantity},
        )

    async def clear_cart(self, user_id: str) -> None:
        await self._request("DELETE", f"/api/cart/{_segment(user_id)}")

    # Orders

    async def checkout(self, user_id: str) -> Order:
        path = f"/api/orders/checkout/{_segment(user_id)}"
        data = await self._request("POST", path)
        return self._parse(path, data or {}, Order.from_json)

    async def user_orders(self, user_id: str) -> list[Order]:
        path = f"/api/orders/user/{_segment(user_id)}"
        data = await self._request("GET", path)
        return self._parse(path, data or [], lambda orders: [Order.from_json(o) for o in orders])

    async def recommendations(self, user_id: str, limit: int = 10) -> Recommendations:
        path = f"/api/recommendations/{_segment(user_id)}"
        data = await self._request("GET", path, params={"limit": limit})
        return self._parse(path, data or {}, Recommendations.from_json)
