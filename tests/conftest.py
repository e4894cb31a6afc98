"""Shared test fixtures for cert-manager-webhook-ns1."""

from unittest.mock import MagicMock

import pytest

from ns1_webhook.dns import RecordClientCache
from ns1_webhook.dns.base import RecordClient
from ns1_webhook.errors import RecordNotFoundError
from ns1_webhook.kube import SecretStore
from ns1_webhook.models import ChallengeRequest, TxtRecord


class FakeRecordClient(RecordClient):
    """In-memory record store that counts writes."""

    def __init__(self, api_key="k1", api_url=None):
        self.api_key = api_key
        self.api_url = api_url
        self.records: dict[tuple[str, str], TxtRecord] = {}
        self.create_calls: list[TxtRecord] = []
        self.delete_calls: list[tuple[str, str]] = []
        self.closed = False

    def get_txt_record(self, zone, name):
        try:
            return self.records[(zone, name)]
        except KeyError:
            raise RecordNotFoundError("record not found", status_code=404) from None

    def create_txt_record(self, record):
        self.create_calls.append(record)
        self.records[(record.zone, record.name)] = record
        return record

    def delete_txt_record(self, zone, name):
        self.delete_calls.append((zone, name))
        if self.records.pop((zone, name), None) is None:
            raise RecordNotFoundError("record not found", status_code=404)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeRecordClient()


@pytest.fixture
def client_cache(fake_client):
    return RecordClientCache(factory=lambda api_key, api_url: fake_client)


@pytest.fixture
def secret_store():
    store = MagicMock(spec=SecretStore)
    store.get_secret.return_value = {"api-key": b"k1"}
    return store


@pytest.fixture
def challenge_request():
    return ChallengeRequest(
        resource_namespace="ns",
        resolved_zone="example.com.",
        resolved_fqdn="_acme-challenge.example.com.",
        key="abc123",
        config={"zoneName": "example.com", "apiKeySecretRef": "ns1-credentials"},
    )
