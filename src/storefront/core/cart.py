"""Cart and checkout handlers."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

import structlog

from .api import BookstoreAPI
from .config import Settings
from .errors import BackendError, StorefrontError, TransportError, ValidationFailed
from .feedback import Page
from .forms import FormSource, PaymentForm, parse_int, require_payment_fields
from .models import CartLineItem, Order, Recommendations, ShoppingCart
from .storage import ClientStorage, current_user_id

log = structlog.get_logger()

ADDED_MESSAGE = "Book added to cart!"
ADD_FAILED_MESSAGE = "Failed to add book to cart"
REMOVE_CONFIRM = "Remove this book from your cart?"
REMOVE_FAILED_MESSAGE = "Failed to remove item from cart"
UPDATE_FAILED_MESSAGE = "Failed to update quantity"
CLEAR_CONFIRM = "Remove every book from your cart?"
CLEAR_FAILED_MESSAGE = "Failed to clear cart"
MISSING_PAYMENT_MESSAGE = "Please fill in all payment fields"
CHECKOUT_FAILED_MESSAGE = "Checkout failed. Some books may no longer be in stock."


@dataclass
class ClientContext:
    """Everything a handler needs, passed in rather than read from globals."""

    settings: Settings
    user_id: str
    api: BookstoreAPI
    page: Page

    @classmethod
    def create(
        cls, settings: Settings, storage: ClientStorage, api: BookstoreAPI, page: Page
    ) -> ClientContext:
        user_id = current_user_id(storage, settings.default_user_id)
        return cls(settings=settings, user_id=user_id, api=api, page=page)


class CheckoutModal:
    def __init__(self) -> None:
        self.visible = False
        self.form = PaymentForm()

    def show(self) -> None:
        self.visible = True

    def close(self) -> None:
        self.visible = False
        self.form.reset()


class CartClient:
    """Handlers behind the cart page and the add-to-cart buttons."""

    def __init__(self, ctx: ClientContext, modal: CheckoutModal | None = None) -> None:
        self.ctx = ctx
        self.modal = modal or CheckoutModal()

    @property
    def user_id(self) -> str:
        return self.ctx.user_id

    async def _add(self, book_id: str, quantity: object) -> None:
        item = CartLineItem(book_id=book_id, quantity=parse_int(quantity))
        await self.ctx.api.add_cart_item(self.user_id, item)
        log.info("cart_item_added", user_id=self.user_id, book_id=book_id, quantity=item.quantity)

    async def add_to_cart(self, book_id: str, quantity: object) -> bool:
        """Add ``quantity`` copies of a book and acknowledge with an alert."""
        try:
            await self._add(book_id, quantity)
        except BackendError as e:
            self.ctx.page.alert(e.message or ADD_FAILED_MESSAGE)
            return False
        except TransportError:
            self.ctx.page.alert(ADD_FAILED_MESSAGE)
            return False
        self.ctx.page.alert(ADDED_MESSAGE)
        return True

    async def quick_add_to_cart(self, book_id: str, quantity: object = 1) -> bool:
        """Add a book from the listing and acknowledge with a toast."""
        try:
            await self._add(book_id, quantity)
        except BackendError as e:
            self.ctx.page.notify(e.message or ADD_FAILED_MESSAGE, "error")
            return False
        except TransportError:
            self.ctx.page.notify(ADD_FAILED_MESSAGE, "error")
            return False
        self.ctx.page.notify(ADDED_MESSAGE, "success")
        return True

    async def remove_from_cart(self, book_id: str) -> bool:
        if not self.ctx.page.confirm(REMOVE_CONFIRM):
            return False
        try:
            await self.ctx.api.remove_cart_item(self.user_id, book_id)
        except StorefrontError as e:
            log.error("cart_remove_failed", user_id=self.user_id, book_id=book_id, error=str(e))
            self.ctx.page.alert(REMOVE_FAILED_MESSAGE)
            return False
        self.ctx.page.reload()
        return True

    async def update_cart_quantity(self, book_id: str, quantity: object) -> bool:
        try:
            await self.ctx.api.update_cart_item(self.user_id, book_id, quantity)
        except StorefrontError as e:
            log.error("cart_update_failed", user_id=self.user_id, book_id=book_id, error=str(e))
            self.ctx.page.alert(UPDATE_FAILED_MESSAGE)
            return False
        self.ctx.page.reload()
        return True

    async def clear_cart(self) -> bool:
        if not self.ctx.page.confirm(CLEAR_CONFIRM):
            return False
        try:
            await self.ctx.api.clear_cart(self.user_id)
        except StorefrontError as e:
            log.error("cart_clear_failed", user_id=self.user_id, error=str(e))
            self.ctx.page.alert(CLEAR_FAILED_MESSAGE)
            return False
        self.ctx.page.reload()
        return True

    async def view_cart(self) -> ShoppingCart:
        return await self.ctx.api.get_cart(self.user_id)

    async def order_history(self) -> list[Order]:
        return await self.ctx.api.user_orders(self.user_id)

    async def recommendations(self, limit: int = 10) -> Recommendations:
        return await self.ctx.api.recommendations(self.user_id, limit)

    def show_checkout_modal(self) -> None:
        self.modal.show()

    def close_checkout_modal(self) -> None:
        self.modal.close()

    def show_notification(self, message: str, kind: str = "success") -> None:
        self.ctx.page.notify(message, kind)

    async def process_checkout(self, form: FormSource | None = None) -> Order | None:
        """Validate the payment form and turn the cart into an order.

        Payment fields are only checked for presence; they are never sent.
        On a validation failure the modal is left exactly as it was.
        """
        if form is None:
            form = self.modal.form.values
        try:
            require_payment_fields(form)
        except ValidationFailed as e:
            log.info("checkout_validation_failed", user_id=self.user_id, missing=e.missing)
            self.ctx.page.alert(MISSING_PAYMENT_MESSAGE)
            return None

        self.close_checkout_modal()

        try:
            order = await self.ctx.api.checkout(self.user_id)
        except BackendError as e:
            self.ctx.page.alert(e.message or CHECKOUT_FAILED_MESSAGE)
            return None
        except TransportError:
            self.ctx.page.alert(CHECKOUT_FAILED_MESSAGE)
            return None

        log.info("order_placed", user_id=self.user_id, order_id=order.id)
        self.ctx.page.alert(f"Order placed successfully! Order ID: {order.id}")
        self.ctx.page.navigate(f"/orders?{urlencode({'userId': self.user_id})}")
        return order
