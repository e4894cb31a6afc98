"""Kubernetes connection config and Secret lookups."""

from __future__ import annotations

import base64
import logging
import os
import ssl
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self
from urllib.parse import quote

import httpx

from ns1_webhook.errors import InitializationError, MissingKeyError, SecretNotFoundError

logger = logging.getLogger(__name__)

_SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
_REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class ClusterConfig:
    """Credentials for talking to the Kubernetes API server."""

    host: str
    token: str = field(default="", repr=False)
    ca_cert: str | None = None
    verify: bool = True


def load_incluster_config(service_account_dir: Path = _SERVICE_ACCOUNT_DIR) -> ClusterConfig:
    """Build a ClusterConfig from the pod's service account mount."""
    host = os.environ.get("KUBERNETES_SERVICE_HOST")
    port = os.environ.get("KUBERNETES_SERVICE_PORT")
    if not host or not port:
        raise InitializationError("KUBERNETES_SERVICE_HOST and KUBERNETES_SERVICE_PORT must be set")

    try:
        token = (service_account_dir / "token").read_text().strip()
    except OSError as e:
        raise InitializationError(f"Unable to read service account token: {e}") from e

    ca_path = service_account_dir / "ca.crt"
    if ":" in host:
        host = f"[{host}]"
    return ClusterConfig(
        host=f"https://{host}:{port}",
        token=token,
        ca_cert=str(ca_path) if ca_path.exists() else None,
    )


class SecretStore:
    """Reads Secrets from the Kubernetes core/v1 API."""

    def __init__(
        self,
        cluster_config: ClusterConfig,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._client = _http_client or _build_http_client(cluster_config)

    def get_secret(self, namespace: str, name: str) -> dict[str, bytes]:
        """Return the decoded ``data`` map of Secret ``namespace/name``."""
        if not name:
            raise SecretNotFoundError(f"unable to get secret `{name}/{namespace}`; apiKeySecretRef is not set")

        path = f"/api/v1/namespaces/{quote(namespace, safe='')}/secrets/{quote(name, safe='')}"
        try:
            resp = self._client.get(path)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Unable to get secret %s/%s", name, namespace)
            raise SecretNotFoundError(f"unable to get secret `{name}/{namespace}`; {e}") from e

        try:
            data = resp.json().get("data") or {}
            return {key: base64.b64decode(value, validate=True) for key, value in data.items()}
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Unable to decode secret %s/%s", name, namespace)
            raise SecretNotFoundError(f"unable to decode secret `{name}/{namespace}`; {e}") from e

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def string_from_secret_data(data: dict[str, bytes], key: str) -> str:
    """Return ``data[key]`` as text, raising MissingKeyError if it is absent or not UTF-8."""
    try:
        value = data[key]
    except KeyError:
        raise MissingKeyError(f"key {key!r} not found in secret data") from None
    try:
        return value.decode()
    except UnicodeDecodeError as e:
        raise MissingKeyError(f"key {key!r} in secret data is not valid UTF-8: {e}") from e


def _build_http_client(cluster_config: ClusterConfig) -> httpx.Client:
    headers = {"Accept": "application/json"}
    if cluster_config.token:
        headers["Authorization"] = f"Bearer {cluster_config.token}"
    try:
        verify: bool | ssl.SSLContext = cluster_config.verify
        if verify and cluster_config.ca_cert:
            verify = ssl.create_default_context(cafile=cluster_config.ca_cert)
        return httpx.Client(
            base_url=cluster_config.host,
            headers=headers,
            verify=verify,
            timeout=_REQUEST_TIMEOUT,
        )
    except (OSError, ValueError) as e:
        raise InitializationError(f"Unable to connect to {cluster_config.host}: {e}") from e
