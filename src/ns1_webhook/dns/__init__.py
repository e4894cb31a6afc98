"""Record client factory — one cached NS1 client per API URL, rebuilt when the key rotates."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ns1_webhook.dns.base import RecordClient
from ns1_webhook.dns.ns1 import NS1RecordClient

logger = logging.getLogger(__name__)


class RecordClientCache:
    """Hands out record clients keyed by API URL and credential.

    Only the most recent API key per URL is kept. When a rotated key arrives,
    the client built for the old key is closed and dropped.
    """

    def __init__(self, factory: Callable[..., RecordClient] = NS1RecordClient) -> None:
        self._factory = factory
        self._clients: dict[str, tuple[str, RecordClient]] = {}
        self._lock = threading.Lock()

    def get(self, api_key: str, api_url: str | None = None) -> RecordClient:
        url = api_url or ""
        stale = None
        with self._lock:
            entry = self._clients.get(url)
            if entry is not None and entry[0] == api_key:
                return entry[1]
            if entry is not None:
                stale = entry[1]
            client = self._factory(api_key=api_key, api_url=api_url or None)
            self._clients[url] = (api_key, client)

        if stale is None:
            logger.debug("Built record client for %s", api_url or "default API URL")
        else:
            logger.info("API key changed for %s, replacing record client", api_url or "default API URL")
            stale.close()
        return client

    def close(self) -> None:
        with self._lock:
            clients = [client for _, client in self._clients.values()]
            self._clients.clear()
        for client in clients:
            client.close()


__all__ = ["NS1RecordClient", "RecordClient", "RecordClientCache"]
