"""External API client implementations."""

from .paystack_client import HttpPaystackClient

__all__ = [
    "HttpPaystackClient",
]
