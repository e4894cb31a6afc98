"""Abstract base class for cert-manager DNS-01 solvers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ns1_webhook.kube import ClusterConfig
from ns1_webhook.models import ChallengeRequest


class ChallengeSolver(ABC):
    """The contract cert-manager's webhook server drives."""

    @abstractmethod
    def name(self) -> str:
        """Solver name referenced by the Issuer's ``solverName``."""

    @abstractmethod
    def initialize(self, cluster_config: ClusterConfig) -> None:
        """Connect to the cluster. Called once before present/cleanup.

        Raises:
            InitializationError: The cluster client could not be built.
        """

    @abstractmethod
    def present(self, request: ChallengeRequest) -> None:
        """Publish the challenge TXT record. Must be idempotent."""

    @abstractmethod
    def cleanup(self, request: ChallengeRequest) -> None:
        """Remove the challenge TXT record. Must be idempotent."""
