"""
Exceptions raised by the upstream clients and the image helpers.
Routes translate them into HTTP responses.
"""

from typing import Any, Optional


class ProxyError(Exception):
    """Base error carrying a readable message and an optional HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class UpstreamError(ProxyError):
    """Non-2xx answer or network failure from Shopify or OpenAI."""


class NotFoundError(ProxyError):
    """The referenced product or image does not exist."""


class InvalidImageError(ProxyError):
    """Image bytes could not be decoded."""


class EditServiceError(UpstreamError):
    """The image edit call failed."""
