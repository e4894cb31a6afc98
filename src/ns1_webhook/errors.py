"""Error taxonomy for the NS1 webhook solver."""

from __future__ import annotations


class WebhookError(Exception):
    """Base class for all solver errors."""


class InitializationError(WebhookError):
    """The secret store client could not be built."""


class ConfigDecodeError(WebhookError):
    """The per-request solver config blob is malformed."""


class SecretNotFoundError(WebhookError):
    """The credential secret does not exist or the API server is unreachable."""


class MissingKeyError(WebhookError):
    """A required field is absent from the secret data."""


class ProviderAPIError(WebhookError):
    """An NS1 API call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordNotFoundError(ProviderAPIError):
    """NS1 reported that the requested record does not exist."""
