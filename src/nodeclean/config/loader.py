"""Helpers for reading configuration files."""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

import yaml
from pydantic import ValidationError

from ..core.exceptions import ConfigError
from .schema import DecommissionConfig


def _merge_dict(base: MutableMapping[str, Any], updates: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            base[key] = _merge_dict(deepcopy(base[key]), value)
        else:
            base[key] = deepcopy(value)
    return base


def _parse_override(override: str) -> Dict[str, Any]:
    if "=" not in override:
        raise ConfigError(f"Override '{override}' must be in key=value format")
    key, raw_value = override.split("=", 1)
    # JSON first so numbers, lists and bools survive
    try:
        value = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    nested_keys = key.split(".")
    current: Dict[str, Any] = {}
    cursor = current
    for nested_key in nested_keys[:-1]:
        cursor[nested_key] = {}
        cursor = cursor[nested_key]
    cursor[nested_keys[-1]] = value
    return current


def load_config(path: str | Path | None = None, overrides: Optional[Iterable[str]] = None) -> DecommissionConfig:
    """Load a :class:`DecommissionConfig` from YAML, or defaults when ``path`` is None."""
    payload: MutableMapping[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", metadata={"path": str(path)})
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
        if not isinstance(payload, Mapping):
            raise ConfigError(f"Config file {path} must contain a mapping", metadata={"path": str(path)})
        payload = deepcopy(dict(payload))

    for override in overrides or ():
        payload = _merge_dict(payload, _parse_override(override))

    try:
        return DecommissionConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
