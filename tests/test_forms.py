"""Tests for form reading, number parsing and payment masking."""
from __future__ import annotations

import pytest

from storefront.core.errors import ValidationFailed
from storefront.core.forms import (
    PaymentForm,
    format_card_number,
    format_expiry,
    parse_float,
    parse_int,
    read_book_payload,
    require_payment_fields,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("3", 3), (" 12abc", 12), ("4.9", 4), ("-2", -2), ("abc", None), ("", None), (None, None), (7, 7)],
)
def test_parse_int_reads_leading_integer(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("19.99", 19.99), ("5", 5.0), (".5", 0.5), ("12.5usd", 12.5), ("", None), ("n/a", None)],
)
def test_parse_float_reads_leading_number(raw, expected):
    assert parse_float(raw) == expected


def test_book_payload_from_form():
    form = {
        "isbn": "9780441013593",
        "title": "Dune",
        "description": "Spice.",
        "author": "Frank Herbert",
        "publisher": "Ace",
        "pictureUrl": "https://example.com/dune.jpg",
        "price": "9.99",
        "inventory": "12",
        "genre": "Science Fiction",
        "publicationYear": "1965",
    }

    payload = read_book_payload(form).to_json()

    assert payload == {
        "isbn": "9780441013593",
        "title": "Dune",
        "description": "Spice.",
        "author": "Frank Herbert",
        "publisher": "Ace",
        "pictureUrl": "https://example.com/dune.jpg",
        "price": 9.99,
        "inventory": 12,
        "genre": "Science Fiction",
        "publicationYear": 1965,
    }


def test_unparseable_numbers_are_forwarded_as_null():
    payload = read_book_payload({"title": "Dune", "price": "free", "inventory": ""}).to_json()

    assert payload["price"] is None
    assert payload["inventory"] is None
    assert payload["publicationYear"] is None
    assert payload["isbn"] == ""


def test_card_number_is_grouped_in_fours():
    assert format_card_number("4111111111111111") == "4111 1111 1111 1111"
    assert format_card_number("4111 11111") == "4111 1111 1"
    assert format_card_number("") == ""


def test_expiry_gets_slash_after_month():
    assert format_expiry("1") == "1"
    assert format_expiry("12") == "12/"
    assert format_expiry("12/2") == "12/2"
    assert format_expiry("1a2b29") == "12/29"
    assert format_expiry("122999") == "12/29"


def test_payment_form_masks_on_input_and_resets():
    form = PaymentForm(cardNumber="55554444", expiryDate="0330")

    assert form.values["cardNumber"] == "5555 4444"
    assert form.values["expiryDate"] == "03/30"

    form.reset()
    assert set(form.values.values()) == {""}


def test_require_payment_fields_lists_blank_fields(payment_form):
    payment_form["cardName"] = ""
    payment_form["billingAddress"] = "   "

    with pytest.raises(ValidationFailed) as exc:
        require_payment_fields(payment_form)

    assert exc.value.missing == ["cardName", "billingAddress"]


def test_require_payment_fields_passes_complete_form(payment_form):
    fields = require_payment_fields(payment_form)
    assert fields.card_name == "Ada Lovelace"
