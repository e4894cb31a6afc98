"""Abstract base class for TXT record clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self

from ns1_webhook.models import TxtRecord


class RecordClient(ABC):
    """Interface for provider clients that manage ACME DNS-01 challenge TXT records."""

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def get_txt_record(self, zone: str, name: str) -> TxtRecord:
        """Fetch a TXT record.

        Args:
            zone: DNS zone name (e.g. "example.com").
            name: Fully qualified record name without trailing dot
                (e.g. "_acme-challenge.example.com").

        Raises:
            RecordNotFoundError: The record does not exist.
            ProviderAPIError: The lookup failed for any other reason.
        """

    @abstractmethod
    def create_txt_record(self, record: TxtRecord) -> TxtRecord:
        """Create a TXT record and return it as stored by the provider."""

    @abstractmethod
    def delete_txt_record(self, zone: str, name: str) -> None:
        """Delete a TXT record.

        Raises:
            RecordNotFoundError: The record does not exist.
            ProviderAPIError: The delete failed for any other reason.
        """
