"""Exceptions raised by the storefront client."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for every failure reported back to the user."""


class ValidationFailed(StorefrontError):
    """Required form fields were left empty; nothing was sent."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class TransportError(StorefrontError):
    """The request never produced a usable response."""


class BackendError(StorefrontError):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str = "", body: dict | None = None) -> None:
        super().__init__(message or f"Request failed with status {status_code}")
        self.status_code = status_code
        self.message = message
        self.body = body or {}
