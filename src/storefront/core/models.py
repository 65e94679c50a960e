"""Data models for the bookstore client."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

log = structlog.get_logger()

ORDER_STATUSES = ("PENDING", "CONFIRMED", "COMPLETED", "CANCELLED")


@dataclass
class CartLineItem:
    book_id: str
    # None stands for a quantity that did not parse; it goes out as JSON null
    quantity: int | None

    def to_json(self) -> dict:
        return {"bookId": self.book_id, "quantity": self.quantity}

    @classmethod
    def from_json(cls, data: dict) -> CartLineItem:
        return cls(book_id=str(data.get("bookId", "")), quantity=int(data.get("quantity") or 0))


@dataclass
class ShoppingCart:
    user_id: str
    id: str = ""
    items: list[CartLineItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> ShoppingCart:
        return cls(
            id=str(data.get("id") or ""),
            user_id=str(data.get("userId") or ""),
            items=[CartLineItem.from_json(i) for i in data.get("items") or []],
        )

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity or 0 for item in self.items)


@dataclass
class BookPayload:
    isbn: str = ""
    title: str = ""
    description: str = ""
    author: str = ""
    publisher: str = ""
    picture_url: str = ""
    price: float | None = None
    inventory: int | None = None
    genre: str = ""
    publication_year: int | None = None

    def to_json(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "publisher": self.publisher,
            "pictureUrl": self.picture_url,
            "price": self.price,
            "inventory": self.inventory,
            "genre": self.genre,
            "publicationYear": self.publication_year,
        }


@dataclass
class PaymentFields:
    card_name: str = ""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    billing_address: str = ""

    def missing(self) -> list[str]:
        """Return the form ids of fields left blank."""
        values = {
            "cardName": self.card_name,
            "cardNumber": self.card_number,
            "expiryDate": self.expiry_date,
            "cvv": self.cvv,
            "billingAddress": self.billing_address,
        }
        return [name for name, value in values.items() if not value.strip()]


@dataclass
class OrderItem:
    book_id: str
    book_title: str = ""
    quantity: int = 0
    price_at_purchase: float = 0.0

    @classmethod
    def from_json(cls, data: dict) -> OrderItem:
        return cls(
            book_id=str(data.get("bookId") or ""),
            book_title=data.get("bookTitle") or "",
            quantity=int(data.get("quantity") or 0),
            price_at_purchase=float(data.get("priceAtPurchase") or 0.0),
        )


@dataclass
class Order:
    id: str
    user_id: str = ""
    items: list[OrderItem] = field(default_factory=list)
    total_amount: float = 0.0
    order_date: str = ""
    status: str = "PENDING"

    @classmethod
    def from_json(cls, data: dict) -> Order:
        status = str(data.get("status") or "PENDING")
        if status not in ORDER_STATUSES:
            log.warning("unknown_order_status", order_id=data.get("id"), status=status)
        return cls(
            id=str(data.get("id") or ""),
            user_id=str(data.get("userId") or ""),
            items=[OrderItem.from_json(i) for i in data.get("items") or []],
            total_amount=float(data.get("totalAmount") or 0.0),
            order_date=str(data.get("orderDate") or ""),
            status=status,
        )


@dataclass
class Recommendations:
    books: list[dict] = field(default_factory=list)
    fallback: bool = False
    message: str = ""

    @classmethod
    def from_json(cls, data: dict) -> Recommendations:
        return cls(
            books=list(data.get("books") or []),
            fallback=bool(data.get("fallback")),
            message=data.get("message") or "",
        )
