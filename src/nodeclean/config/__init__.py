"""Configuration loading utilities.

Responsibility: Loads and validates the decommissioning configuration (CA,
caches, stored configurations, logging) with override support using Pydantic.
"""

from .loader import load_config
from .schema import DecommissionConfig
from .settings import Settings, get_settings

__all__ = ["load_config", "DecommissionConfig", "Settings", "get_settings"]
