"""NS1 record client — get/create/delete TXT records via the NS1 REST API."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from ns1_webhook.dns.base import RecordClient
from ns1_webhook.errors import ProviderAPIError, RecordNotFoundError
from ns1_webhook.models import TXT, TxtRecord

DEFAULT_API_URL = "https://api.nsone.net/v1"
_REQUEST_TIMEOUT = 10


class NS1RecordClient(RecordClient):
    """Record client backed by the NS1 API."""

    def __init__(
        self,
        api_key: str,
        api_url: str | None = None,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self._client = _http_client or httpx.Client(
            headers={"X-NSONE-Key": api_key},
            timeout=_REQUEST_TIMEOUT,
        )

    def _record_url(self, zone: str, name: str) -> str:
        return f"{self._api_url}/zones/{quote(zone, safe='')}/{quote(name, safe='')}/{TXT}"

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ProviderAPIError(f"{method} {url} failed: {e}") from e

        if resp.status_code == 404:
            raise RecordNotFoundError(f"{method} {url}: record not found", status_code=404)
        if resp.is_error:
            raise ProviderAPIError(
                f"{method} {url} returned {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        return resp

    def get_txt_record(self, zone: str, name: str) -> TxtRecord:
        url = self._record_url(zone, name)
        resp = self._send("GET", url)
        try:
            return TxtRecord.from_dict(resp.json())
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderAPIError(f"GET {url} returned an unreadable record: {e}", status_code=resp.status_code) from e

    def create_txt_record(self, record: TxtRecord) -> TxtRecord:
        resp = self._send("PUT", self._record_url(record.zone, record.name), json=record.to_dict())
        try:
            return TxtRecord.from_dict(resp.json())
        except (AttributeError, KeyError, TypeError, ValueError):
            return record

    def delete_txt_record(self, zone: str, name: str) -> None:
        self._send("DELETE", self._record_url(zone, name))

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()


def _error_message(resp: httpx.Response) -> str:
    """Pull the ``message`` field out of an NS1 error body, falling back to raw text."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and "message" in body:
        return str(body["message"])
    return resp.text
