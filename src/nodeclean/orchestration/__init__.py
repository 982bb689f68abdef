"""High-level orchestration entry points.

Responsibility: Runs the ordered per-node cleanup steps against the
certificate authority, caches and stored-configuration database, and
aggregates the outcome.
"""

from .decommission import (
    STEPS,
    DecommissionResult,
    Decommissioner,
    NodeOutcome,
    build_decommissioner,
    normalize_nodes,
)

__all__ = [
    "STEPS",
    "DecommissionResult",
    "Decommissioner",
    "NodeOutcome",
    "build_decommissioner",
    "normalize_nodes",
]
