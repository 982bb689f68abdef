"""File-backed per-node caches: facts, node snapshots and reports."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from ..core.logging import get_logger

LOGGER = get_logger(__name__)


class KeyValueCache(Protocol):
    def destroy(self, node: str) -> bool:
        ...


class YamlCacheStore:
    """One ``<node>.yaml`` document per node in ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, node: str) -> Path:
        return self.directory / f"{node}.yaml"

    def destroy(self, node: str) -> bool:
        path = self.path_for(node)
        if not path.exists():
            LOGGER.debug("No cached entry at %s", path)
            return False
        path.unlink()
        return True


class ReportStore:
    """Reports live in a ``<node>/`` directory under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, node: str) -> Path:
        return self.directory / node

    def destroy(self, node: str) -> bool:
        path = self.path_for(node)
        if not path.exists():
            LOGGER.debug("No reports at %s", path)
            return False
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        return True
