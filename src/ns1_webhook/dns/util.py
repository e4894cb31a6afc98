"""DNS name helpers."""

from __future__ import annotations


def record_name(fqdn: str) -> str:
    """Strip exactly one trailing dot from an FQDN.

    cert-manager hands over ``resolvedFQDN`` and ``resolvedZone`` with a
    trailing dot; NS1 stores names without it.

    Args:
        fqdn: Fully qualified name (e.g. "_acme-challenge.example.com.").

    Returns:
        The name without the trailing dot (e.g. "_acme-challenge.example.com").
    """
    return fqdn.removesuffix(".")
