"""Decommission managed nodes from a configuration-management infrastructure."""

__all__ = [
    "cli",
    "collaborators",
    "config",
    "core",
    "orchestration",
    "storeconfigs",
]
