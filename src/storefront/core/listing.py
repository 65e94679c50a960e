"""Filter and sort a server-rendered book listing.

The listing arrives as HTML: a ``#bookGrid`` container of ``.book-card``
elements, each carrying ``data-genre``, ``data-title``, ``data-price`` and
``data-author``. ``ListingPage`` parses it once and then only reorders cards
or toggles their visibility, never edits their content.
"""

from __future__ import annotations

import locale
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from bs4 import BeautifulSoup, Tag

from .forms import parse_float, parse_int

log = structlog.get_logger()

DEFAULT_MAX_QUANTITY = 999


def _collate(value: str) -> str:
    return locale.strxfrm(value.casefold())


@dataclass
class BookCard:
    element: Tag

    def _data(self, name: str) -> str:
        return str(self.element.get(f"data-{name}") or "")

    @property
    def book_id(self) -> str:
        return self._data("book-id")

    @property
    def genre(self) -> str:
        return self._data("genre")

    @property
    def title(self) -> str:
        return self._data("title")

    @property
    def author(self) -> str:
        return self._data("author")

    @property
    def price(self) -> float:
        return parse_float(self._data("price")) or 0.0

    @property
    def visible(self) -> bool:
        return "display: none" not in str(self.element.get("style") or "")

    @visible.setter
    def visible(self, value: bool) -> None:
        if value:
            if "style" in self.element.attrs:
                del self.element["style"]
        else:
            self.element["style"] = "display: none"


def _by_title(cards: list[BookCard]) -> list[BookCard]:
    return sorted(cards, key=lambda c: _collate(c.title))


def _by_title_desc(cards: list[BookCard]) -> list[BookCard]:
    return sorted(cards, key=lambda c: _collate(c.title), reverse=True)


def _by_price(cards: list[BookCard]) -> list[BookCard]:
    return sorted(cards, key=lambda c: c.price)


def _by_price_desc(cards: list[BookCard]) -> list[BookCard]:
    return sorted(cards, key=lambda c: c.price, reverse=True)


def _by_author(cards: list[BookCard]) -> list[BookCard]:
    return sorted(cards, key=lambda c: _collate(c.author))


SORTERS: dict[str, Callable[[list[BookCard]], list[BookCard]]] = {
    "title": _by_title,
    "title-desc": _by_title_desc,
    "price": _by_price,
    "price-desc": _by_price_desc,
    "author": _by_author,
}


def _select_value(select: Tag | None) -> str:
    if select is None:
        return ""
    chosen = select.find("option", selected=True)
    return str(chosen.get("value", "")) if chosen else ""


def _set_select_value(select: Tag | None, value: str) -> None:
    if select is None:
        return
    for option in select.find_all("option"):
        if value and str(option.get("value", "")).lower() == value.lower():
            option["selected"] = "selected"
        elif "selected" in option.attrs:
            del option["selected"]


class ListingPage:
    def __init__(self, html: str) -> None:
        self.source_html = html
        self._parse()

    @classmethod
    def from_html(cls, html: str) -> ListingPage:
        return cls(html)

    def _parse(self) -> None:
        self.soup = BeautifulSoup(self.source_html, "html.parser")
        self.grid = self.soup.find(id="bookGrid")
        self.genre_select = self.soup.find(id="genreFilter")
        self.sort_select = self.soup.find(id="sortBy")
        self.no_results = self.soup.find(id="noResults")
        self.count_label = self.soup.find(id="resultCount")
        self.cards = [BookCard(el) for el in self.soup.select("#bookGrid .book-card")]
        # Requested control values; kept even when no option carries them
        self._genre = _select_value(self.genre_select)
        self._sort_key = _select_value(self.sort_select)

    # Control values

    @property
    def genre(self) -> str:
        return self._genre

    @genre.setter
    def genre(self, value: str) -> None:
        self._genre = value
        _set_select_value(self.genre_select, value)

    @property
    def sort_key(self) -> str:
        return self._sort_key

    @sort_key.setter
    def sort_key(self, value: str) -> None:
        self._sort_key = value
        _set_select_value(self.sort_select, value)

    @property
    def genre_options(self) -> list[str]:
        if self.genre_select is None:
            return []
        return [
            str(o.get("value", ""))
            for o in self.genre_select.find_all("option")
            if o.get("value")
        ]

    @property
    def visible_cards(self) -> list[BookCard]:
        return [c for c in self.cards if c.visible]

    @property
    def no_results_visible(self) -> bool:
        if self.no_results is None:
            return False
        return "display: block" in str(self.no_results.get("style") or "")

    @property
    def grid_visible(self) -> bool:
        if self.grid is None:
            return False
        return "display: none" not in str(self.grid.get("style") or "")

    # Operations

    def init_recommendation_filters(self) -> list[str]:
        """Fill the genre dropdown with the distinct genres on the page.

        Options are rebuilt from scratch, so calling this twice is harmless.
        The empty "all genres" option is kept.
        """
        genres = sorted({c.genre for c in self.cards if c.genre})
        if self.genre_select is None:
            return genres
        for option in self.genre_select.find_all("option"):
            if option.get("value"):
                option.decompose()
        for genre in genres:
            option = self.soup.new_tag("option", value=genre)
            option.string = genre
            self.genre_select.append(option)
        log.debug("genre_filter_populated", genres=len(genres))
        return genres

    def filter_books(self) -> int:
        selected = self.genre.lower()
        visible = 0
        for card in self.cards:
            match = not selected or card.genre.lower() == selected
            card.visible = match
            if match:
                visible += 1

        if self.count_label is not None:
            self.count_label.string = str(visible)
        if self.no_results is not None:
            self.no_results["style"] = "display: none" if visible else "display: block"
        if self.grid is not None:
            self.grid["style"] = "display: grid" if visible else "display: none"
        return visible

    def sort_books(self) -> list[BookCard]:
        sorter = SORTERS.get(self.sort_key)
        if sorter is None:
            return self.cards
        self.cards = sorter(self.cards)
        if self.grid is not None:
            for card in self.cards:
                self.grid.append(card.element.extract())
        return self.cards

    def reset_filters(self) -> None:
        """Clear the controls and go back to the server-rendered order."""
        self.genre = ""
        self.sort_key = ""
        self.reload()

    def reload(self) -> None:
        self._parse()

    def render(self) -> str:
        return str(self.soup)


class QuantityInput:
    """A quantity box bounded by 1 and its own ``max`` attribute."""

    def __init__(self, value: object = 1, max_value: object = None) -> None:
        self.max = parse_int(max_value) or DEFAULT_MAX_QUANTITY
        self.value = parse_int(value) or 1

    @classmethod
    def from_element(cls, element: Tag) -> QuantityInput:
        return cls(element.get("value", 1), element.get("max"))

    def increase(self) -> int:
        if self.value < self.max:
            self.value += 1
        return self.value

    def decrease(self) -> int:
        if self.value > 1:
            self.value -= 1
        return self.value
