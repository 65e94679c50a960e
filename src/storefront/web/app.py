"""FastAPI front for the storefront handlers.

Each form route runs one handler against the bookstore backend and answers
with the UI effects it produced (alerts, toast, navigation, reload) so the
page can apply them.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.admin import BookAdmin
from ..core.api import BookstoreAPI
from ..core.cart import CartClient, ClientContext
from ..core.config import Settings
from ..core.errors import BackendError, StorefrontError
from ..core.feedback import Page
from ..core.listing import ListingPage
from ..core.storage import USER_ID_KEY, ClientStorage

log = structlog.get_logger()

MAX_BODY_BYTES = 200_000

settings = Settings.from_env()
storage = ClientStorage.in_dir(settings.state_dir)


def _make_api() -> BookstoreAPI:
    return BookstoreAPI(settings)


app = FastAPI(title="Storefront", docs_url=None, redoc_url=None)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


async def _body(request: Request) -> dict:
    raw = await request.body()
    if len(raw) > MAX_BODY_BYTES:
        raise HTTPException(status_code=413, detail="Request too large.")
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail="Body must be JSON.") from e
    return body if isinstance(body, dict) else {}


def _page(body: dict) -> Page:
    confirmed = bool(body.get("confirmed"))
    return Page(confirm=lambda message: confirmed, toast_seconds=settings.toast_seconds)


def _context(api: BookstoreAPI, page: Page) -> ClientContext:
    return ClientContext.create(settings, storage, api, page)


def _error_response(e: StorefrontError) -> JSONResponse:
    status = e.status_code if isinstance(e, BackendError) else 502
    return JSONResponse({"error": str(e)}, status_code=status)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "0.1.0",
        "environment": os.environ.get("ENV", "dev"),
        "backend": settings.api_url,
    }


@app.post("/session/user")
async def set_user(request: Request):
    body = await _body(request)
    user_id = str(body.get("userId") or "").strip()
    if not user_id:
        return JSONResponse({"error": "userId is required."}, status_code=400)
    storage.set_item(USER_ID_KEY, user_id)
    log.info("user_selected", user_id=user_id)
    return {"userId": user_id}


@app.delete("/session/user")
async def forget_user():
    storage.remove_item(USER_ID_KEY)
    log.info("user_forgotten")
    return {"userId": settings.default_user_id}


# Book admin


@app.post("/books")
async def create_book(request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await BookAdmin(_context(api, page)).create_book(body)
    return page.effects()


@app.post("/books/{book_id}")
async def update_book(book_id: str, request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await BookAdmin(_context(api, page)).update_book(book_id, body)
    return page.effects()


@app.post("/books/{book_id}/delete")
async def delete_book(book_id: str, request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await BookAdmin(_context(api, page)).delete_book(book_id)
    return page.effects()


# Cart


@app.post("/cart/items")
async def add_to_cart(request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        cart = CartClient(_context(api, page))
        await cart.add_to_cart(str(body.get("bookId") or ""), body.get("quantity", 1))
    return page.effects()


@app.post("/cart/items/quick")
async def quick_add_to_cart(request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        cart = CartClient(_context(api, page))
        await cart.quick_add_to_cart(str(body.get("bookId") or ""), body.get("quantity", 1))
    return page.effects()


@app.post("/cart/items/{book_id}/quantity")
async def update_cart_quantity(book_id: str, request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await CartClient(_context(api, page)).update_cart_quantity(book_id, body.get("quantity"))
    return page.effects()


@app.post("/cart/items/{book_id}/delete")
async def remove_from_cart(book_id: str, request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await CartClient(_context(api, page)).remove_from_cart(book_id)
    return page.effects()


@app.post("/cart/clear")
async def clear_cart(request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        await CartClient(_context(api, page)).clear_cart()
    return page.effects()


@app.post("/checkout")
async def checkout(request: Request):
    body = await _body(request)
    page = _page(body)
    async with _make_api() as api:
        cart = CartClient(_context(api, page))
        cart.show_checkout_modal()
        order = await cart.process_checkout(body)
    effects = page.effects()
    effects["orderId"] = order.id if order else None
    effects["modalOpen"] = cart.modal.visible
    return effects


@app.get("/cart")
async def view_cart():
    async with _make_api() as api:
        try:
            cart = await CartClient(_context(api, Page())).view_cart()
        except StorefrontError as e:
            return _error_response(e)
    return asdict(cart)


@app.get("/orders")
async def order_history():
    async with _make_api() as api:
        try:
            orders = await CartClient(_context(api, Page())).order_history()
        except StorefrontError as e:
            return _error_response(e)
    return [asdict(o) for o in orders]


@app.get("/recommendations")
async def recommendations(limit: int = 10):
    async with _make_api() as api:
        try:
            recs = await CartClient(_context(api, Page())).recommendations(limit)
        except StorefrontError as e:
            return _error_response(e)
    return asdict(recs)


# Listing


@app.post("/listing")
async def listing(request: Request):
    body = await _body(request)
    html = body.get("html") or ""
    if not html:
        return JSONResponse({"error": "Listing HTML is required."}, status_code=400)

    page = ListingPage.from_html(html)
    genres = page.init_recommendation_filters()
    page.genre = str(body.get("genre") or "")
    page.sort_key = str(body.get("sortBy") or "")
    visible = page.filter_books()
    page.sort_books()
    return {
        "genres": genres,
        "visible": visible,
        "noResults": page.no_results_visible,
        "order": [c.book_id for c in page.cards],
        "html": page.render(),
    }


def main():
    port = int(os.environ.get("PORT", "8000"))
    is_dev = os.environ.get("ENV", "dev") == "dev"
    uvicorn.run(
        "storefront.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
