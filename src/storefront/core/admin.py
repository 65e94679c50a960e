"""Book management handlers for the admin pages."""

from __future__ import annotations

import structlog

from .errors import StorefrontError
from .forms import FormSource, read_book_payload

log = structlog.get_logger()


class BookAdmin:
    def __init__(self, ctx) -> None:
        self.ctx = ctx

    async def create_book(self, form: FormSource) -> dict | None:
        payload = read_book_payload(form)
        try:
            book = await self.ctx.api.create_book(payload)
        except StorefrontError as e:
            log.error("book_create_failed", isbn=payload.isbn, error=str(e))
            self.ctx.page.alert("Failed to create book")
            return None
        self.ctx.page.alert("Book created successfully!")
        self.ctx.page.reload()
        return book

    async def update_book(self, book_id: str, form: FormSource) -> dict | None:
        try:
            book = await self.ctx.api.update_book(book_id, read_book_payload(form))
        except StorefrontError as e:
            log.error("book_update_failed", book_id=book_id, error=str(e))
            self.ctx.page.alert("Failed to update book")
            return None
        self.ctx.page.alert("Book updated successfully!")
        self.ctx.page.navigate("/admin")
        return book

    async def delete_book(self, book_id: str) -> bool:
        if not self.ctx.page.confirm("Are you sure you want to delete this book?"):
            return False
        try:
            await self.ctx.api.delete_book(book_id)
        except StorefrontError as e:
            log.error("book_delete_failed", book_id=book_id, error=str(e))
            self.ctx.page.alert("Failed to delete book")
            return False
        self.ctx.page.alert("Book deleted successfully!")
        self.ctx.page.reload()
        return True
