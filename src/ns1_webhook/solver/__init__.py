"""DNS-01 challenge solvers."""

from __future__ import annotations

from ns1_webhook.solver.base import ChallengeSolver
from ns1_webhook.solver.ns1 import NS1Solver

__all__ = ["ChallengeSolver", "NS1Solver"]
