from __future__ import annotations
from typing import Optional


class ProviderError(Exception):
    """Base class for backend-level failures."""

class ProviderClientError(ProviderError):
    """
    Non-retryable: caller/config issue (missing settings, unknown backend,
    rejected request). The fix is change input/config, not retry.
    """

class ProviderTransientError(ProviderError):
    """
    Retryable: rate limits, network hiccups, 5xx, etc.
    Nothing in chatwire retries; the flag is for the caller.
    """

class ConfigurationError(ProviderClientError):
    """A required adapter setting (base URL, credential) is empty."""

class UnsupportedBackendError(ProviderClientError):
    """No adapter is registered under the requested name."""

class TransportError(ProviderTransientError):
    """Non-success HTTP status, or I/O failure while reading the body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        s = self.status_code
        if s is None:
            return True
        return s == 429 or 500 <= s <= 599

class DecodeError(ProviderError):
    """A stream line or a serialized context could not be parsed."""

class DeliveryError(ProviderError):
    """The event receiver has gone away; the completion call aborts."""
