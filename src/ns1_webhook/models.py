"""Value types passed between the host, the solver and the NS1 client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any

from ns1_webhook.errors import ConfigDecodeError

TXT = "TXT"


@dataclass(frozen=True)
class ChallengeRequest:
    """A single present/cleanup request issued by cert-manager.

    ``config`` is the opaque solver config from the Issuer: ``None``, an
    already-decoded mapping, or raw JSON text.
    """

    resource_namespace: str
    resolved_zone: str
    resolved_fqdn: str
    key: str
    config: dict | str | bytes | None = None
    uid: str = ""
    action: str = ""
    type: str = "dns-01"
    dns_name: str = ""
    allow_ambient_credentials: bool = False

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "action": self.action,
            "type": self.type,
            "dnsName": self.dns_name,
            "key": self.key,
            "resourceNamespace": self.resource_namespace,
            "resolvedFQDN": self.resolved_fqdn,
            "resolvedZone": self.resolved_zone,
            "allowAmbientCredentials": self.allow_ambient_credentials,
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChallengeRequest:
        return cls(
            uid=data.get("uid", ""),
            action=data.get("action", ""),
            type=data.get("type", "dns-01"),
            dns_name=data.get("dnsName", ""),
            key=data["key"],
            resource_namespace=data["resourceNamespace"],
            resolved_fqdn=data["resolvedFQDN"],
            resolved_zone=data["resolvedZone"],
            allow_ambient_credentials=bool(data.get("allowAmbientCredentials", False)),
            config=data.get("config"),
        )


_CONFIG_FIELDS = {
    "zoneName": "zone_name",
    "apiUrl": "api_url",
    "apiKeySecretRef": "api_key_secret_ref",
}


@dataclass(frozen=True)
class ProviderConfig:
    """Solver config for one request, plus the API key once it is resolved."""

    zone_name: str = ""
    api_url: str = ""
    api_key_secret_ref: str = ""
    api_key: str = field(default="", repr=False)

    def with_api_key(self, api_key: str) -> ProviderConfig:
        return replace(self, api_key=api_key)

    def with_zone_fallback(self, zone: str) -> ProviderConfig:
        """Return a copy using ``zone`` when no zoneName was configured."""
        if self.zone_name:
            return self
        return replace(self, zone_name=zone)


def load_provider_config(raw: dict | str | bytes | None) -> ProviderConfig:
    """Decode the solver config blob into a ProviderConfig.

    ``None`` decodes to an empty config. Unknown keys are ignored.
    """
    if raw is None:
        return ProviderConfig()

    if isinstance(raw, (str, bytes)):
        try:
            data: Any = json.loads(raw)
        except ValueError as e:
            raise ConfigDecodeError(f"error decoding solver config: {e}") from e
    else:
        data = raw

    if data is None:
        return ProviderConfig()
    if not isinstance(data, dict):
        raise ConfigDecodeError(f"error decoding solver config: expected a JSON object, got {type(data).__name__}")

    kwargs = {}
    for wire_name, attr in _CONFIG_FIELDS.items():
        value = data.get(wire_name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigDecodeError(f"error decoding solver config: {wire_name} must be a string")
        kwargs[attr] = value
    return ProviderConfig(**kwargs)


@dataclass(frozen=True)
class TxtRecord:
    """An NS1 TXT record keyed by (zone, name)."""

    zone: str
    name: str
    ttl: int
    answers: tuple[str, ...] = ()

    @property
    def type(self) -> str:
        return TXT

    def to_dict(self) -> dict:
        return {
            "zone": self.zone,
            "domain": self.name,
            "type": TXT,
            "ttl": self.ttl,
            "answers": [{"answer": [value]} for value in self.answers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> TxtRecord:
        # NS1 answers carry rdata as a list; a TXT answer has exactly one element.
        answers = []
        for answer in data.get("answers", []):
            rdata = answer.get("answer", [])
            answers.extend(str(part) for part in rdata)
        return cls(
            zone=data["zone"],
            name=data["domain"],
            ttl=int(data.get("ttl", 0)),
            answers=tuple(answers),
        )
