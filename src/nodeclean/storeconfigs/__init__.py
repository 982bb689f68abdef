"""Stored-configuration database access and cleanup.

Responsibility: Maps the stored-configuration schema, exposes the queries the
cleanup needs, and removes or unexports a decommissioned node's resources.
"""

from .database import HostDB, ParamNameDB, ParamValueDB, ResourceDB, create_session_factory, init_db
from .store import StoredConfigStore
from .unexport import StoredConfigCleaner

__all__ = [
    "HostDB",
    "ParamNameDB",
    "ParamValueDB",
    "ResourceDB",
    "StoredConfigCleaner",
    "StoredConfigStore",
    "create_session_factory",
    "init_db",
]
