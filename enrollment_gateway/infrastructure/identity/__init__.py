"""Identity provider implementations."""

from .request_identity import RequestIdentityProvider

__all__ = ["RequestIdentityProvider"]
