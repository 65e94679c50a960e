"""Read field sets out of submitted forms, and mask payment input."""

from __future__ import annotations

import re
from collections.abc import Mapping

from .errors import ValidationFailed
from .models import BookPayload, PaymentFields

# Any mapping of element id -> current value works as a form: a dict, a
# starlette FormData, a parsed query string.
FormSource = Mapping[str, str]

PAYMENT_FIELD_IDS = ("cardName", "cardNumber", "expiryDate", "cvv", "billingAddress")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(value: object) -> int | None:
    """Parse the leading integer of ``value``; None when there is none.

    ``"3"`` -> 3, ``"12abc"`` -> 12, ``"4.9"`` -> 4, ``"abc"`` -> None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value if value is not None else ""))
    return int(match.group(1)) if match else None


def parse_float(value: object) -> float | None:
    """Parse the leading decimal number of ``value``; None when there is none."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _FLOAT_PREFIX.match(str(value if value is not None else ""))
    return float(match.group(1)) if match else None


def _field(form: FormSource, name: str) -> str:
    return str(form.get(name) or "")


def read_book_payload(form: FormSource) -> BookPayload:
    """Build the book payload from the book form.

    Numbers that do not parse are forwarded as null; the backend decides.
    """
    return BookPayload(
        isbn=_field(form, "isbn"),
        title=_field(form, "title"),
        description=_field(form, "description"),
        author=_field(form, "author"),
        publisher=_field(form, "publisher"),
        picture_url=_field(form, "pictureUrl"),
        price=parse_float(form.get("price")),
        inventory=parse_int(form.get("inventory")),
        genre=_field(form, "genre"),
        publication_year=parse_int(form.get("publicationYear")),
    )


def read_payment_fields(form: FormSource) -> PaymentFields:
    return PaymentFields(
        card_name=_field(form, "cardName"),
        card_number=_field(form, "cardNumber"),
        expiry_date=_field(form, "expiryDate"),
        cvv=_field(form, "cvv"),
        billing_address=_field(form, "billingAddress"),
    )


def require_payment_fields(form: FormSource) -> PaymentFields:
    """Return the payment fields, raising ValidationFailed if any is blank."""
    fields = read_payment_fields(form)
    missing = fields.missing()
    if missing:
        raise ValidationFailed(missing)
    return fields


def format_card_number(value: str) -> str:
    """Regroup a card number into blocks of four: ``"41111111"`` -> ``"4111 1111"``."""
    compact = re.sub(r"\s", "", value)
    return " ".join(compact[i : i + 4] for i in range(0, len(compact), 4))


def format_expiry(value: str) -> str:
    """Mask an expiry date as ``MM/YY`` while it is being typed."""
    digits = re.sub(r"\D", "", value)
    if len(digits) >= 2:
        return f"{digits[:2]}/{digits[2:4]}"
    return digits


class PaymentForm:
    """Mutable payment form state behind the checkout modal."""

    def __init__(self, **values: str) -> None:
        self.values: dict[str, str] = dict.fromkeys(PAYMENT_FIELD_IDS, "")
        for name, value in values.items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        if name == "cardNumber":
            value = format_card_number(value)
        elif name == "expiryDate":
            value = format_expiry(value)
        self.values[name] = value

    def reset(self) -> None:
        self.values = dict.fromkeys(PAYMENT_FIELD_IDS, "")
