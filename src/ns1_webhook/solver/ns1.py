"""NS1 solver — publish and remove DNS-01 TXT records in an NS1 zone."""

from __future__ import annotations

import logging

from ns1_webhook.dns import RecordClientCache
from ns1_webhook.dns.base import RecordClient
from ns1_webhook.dns.util import record_name
from ns1_webhook.errors import InitializationError, MissingKeyError, RecordNotFoundError
from ns1_webhook.kube import ClusterConfig, SecretStore, string_from_secret_data
from ns1_webhook.models import ChallengeRequest, ProviderConfig, TxtRecord, load_provider_config
from ns1_webhook.solver.base import ChallengeSolver

logger = logging.getLogger(__name__)

API_KEY_FIELD = "api-key"
_CHALLENGE_TTL = 3600


class NS1Solver(ChallengeSolver):
    """Solver that keeps one TXT record per challenge FQDN in NS1."""

    def __init__(
        self,
        _secret_store: SecretStore | None = None,
        _clients: RecordClientCache | None = None,
    ) -> None:
        self._secret_store = _secret_store
        self._clients = _clients or RecordClientCache()

    def name(self) -> str:
        return "ns1"

    def initialize(self, cluster_config: ClusterConfig) -> None:
        self._secret_store = SecretStore(cluster_config)
        logger.info("Connected to Kubernetes API at %s", cluster_config.host)

    def present(self, request: ChallengeRequest) -> None:
        logger.info(
            "Present: namespace=%s zone=%s fqdn=%s",
            request.resource_namespace,
            request.resolved_zone,
            request.resolved_fqdn,
        )
        config, client = self._resolve(request)
        name = record_name(request.resolved_fqdn)

        try:
            existing = client.get_txt_record(config.zone_name, name)
        except RecordNotFoundError:
            existing = None

        if existing is not None:
            if request.key not in existing.answers:
                logger.warning(
                    "TXT record %s in zone %s exists without the requested key, leaving it in place",
                    name,
                    config.zone_name,
                )
            else:
                logger.info("TXT record %s already present in zone %s", name, config.zone_name)
            return

        record = TxtRecord(zone=config.zone_name, name=name, ttl=_CHALLENGE_TTL, answers=(request.key,))
        client.create_txt_record(record)
        logger.info("Added TXT record %s to zone %s", name, config.zone_name)

    def cleanup(self, request: ChallengeRequest) -> None:
        logger.info(
            "CleanUp: namespace=%s zone=%s fqdn=%s",
            request.resource_namespace,
            request.resolved_zone,
            request.resolved_fqdn,
        )
        config, client = self._resolve(request)
        name = record_name(request.resolved_fqdn)

        try:
            client.delete_txt_record(config.zone_name, name)
        except RecordNotFoundError:
            logger.warning("TXT record %s not found in zone %s, skipping delete", name, config.zone_name)
            return
        logger.info("Deleted TXT record %s from zone %s", name, config.zone_name)

    def close(self) -> None:
        """Close the secret store and every cached record client."""
        self._clients.close()
        if self._secret_store is not None:
            self._secret_store.close()

    def _resolve(self, request: ChallengeRequest) -> tuple[ProviderConfig, RecordClient]:
        """Decode the solver config, load the API key and pick a record client.

        Config and credential errors propagate before any NS1 call is made.
        """
        if self._secret_store is None:
            raise InitializationError("solver used before initialize()")

        config = load_provider_config(request.config).with_zone_fallback(record_name(request.resolved_zone))
        secret = self._secret_store.get_secret(request.resource_namespace, config.api_key_secret_ref)
        try:
            api_key = string_from_secret_data(secret, API_KEY_FIELD)
        except MissingKeyError:
            logger.error(
                "Unable to get %s from secret %s/%s",
                API_KEY_FIELD,
                config.api_key_secret_ref,
                request.resource_namespace,
            )
            raise
        config = config.with_api_key(api_key)

        return config, self._clients.get(config.api_key, config.api_url)
