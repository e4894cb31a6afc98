"""Process entry point — logging setup, solver construction and the present/cleanup hook."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from ns1_webhook.config import AppConfig, load_config
from ns1_webhook.errors import WebhookError
from ns1_webhook.kube import ClusterConfig, load_incluster_config
from ns1_webhook.models import ChallengeRequest
from ns1_webhook.solver import NS1Solver

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: AppConfig) -> None:
    """Install a stderr handler at the configured level."""
    logging.basicConfig(level=config.log_level, format=_LOG_FORMAT, stream=sys.stderr)


def create_solver(config: AppConfig) -> NS1Solver:
    """Validate process config and build an uninitialized solver."""
    if not config.group_name:
        raise ValueError("GROUP_NAME must be specified")
    return NS1Solver()


def run(action: str, request: ChallengeRequest, config: AppConfig, cluster_config: ClusterConfig) -> None:
    """Initialize a solver against the cluster and run one action on ``request``."""
    solver = create_solver(config)
    solver.initialize(cluster_config)
    try:
        if action == "present":
            solver.present(request)
        else:
            solver.cleanup(request)
    finally:
        solver.close()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cert-manager-webhook-ns1",
        description="Present or clean up an ACME DNS-01 challenge TXT record in NS1.",
    )
    parser.add_argument("action", choices=["present", "cleanup"])
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Read a ChallengeRequest JSON document from stdin and run ``action`` on it."""
    args = _parse_args(argv)

    try:
        config = load_config()
    except ValueError as e:
        logging.basicConfig(format=_LOG_FORMAT, stream=sys.stderr)
        logger.error("%s", e)
        return 1
    configure_logging(config)
    logger.info("Starting cert-manager webhook NS1 for group %s", config.group_name)

    try:
        request = ChallengeRequest.from_dict(json.load(sys.stdin))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid challenge request on stdin: %s", e)
        return 1

    try:
        run(args.action, request, config, load_incluster_config())
    except WebhookError as e:
        logger.error("%s failed for %s: %s", args.action, request.resolved_fqdn, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
