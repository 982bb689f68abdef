"""Stored-configuration cleanup for a decommissioned node.

A node's stored configuration is either removed wholesale or, in unexport
mode, kept in place while every exported resource whose type supports
``ensure`` is forced to ``ensure => absent``. Consumers of those exported
resources then remove them on their next configuration run, after which the
host can be removed for good.
"""

from __future__ import annotations

from typing import Optional

from ..core.logging import get_logger
from ..core.resource_types import ENSURE, DefinitionLookup, TypeLookup, is_ensurable
from .database import HostDB, ParamNameDB, ParamValueDB, ResourceDB
from .store import StoredConfigStore

LOGGER = get_logger(__name__)

ABSENT = "absent"


class StoredConfigCleaner:
    def __init__(
        self,
        store: StoredConfigStore,
        catalog: TypeLookup,
        definitions: DefinitionLookup,
        *,
        command_name: str = "nodeclean clean",
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.definitions = definitions
        self.command_name = command_name

    def clean(self, node: str, unexport: bool = False) -> None:
        host = self.store.find_host(node)
        if host is None:
            LOGGER.info("No entries found for %s in storedconfigs.", node)
            return

        if unexport:
            self.unexport(host)
            LOGGER.info("Force %s's exported resources to absent", node)
            LOGGER.warning(
                "Please wait for other hosts to check out their configuration before finishing clean-up with:"
            )
            LOGGER.warning("$ %s %s", self.command_name, node)
        else:
            self.store.destroy_host(host)
            LOGGER.info("%s storeconfigs removed", node)

    def unexport(self, host: HostDB) -> int:
        """Mark every ensurable exported resource of ``host`` absent.

        Each resource is committed on its own; a failure leaves earlier
        resources marked and propagates. Returns the number of resources marked.
        """
        param_name: Optional[ParamNameDB] = None
        marked = 0
        for resource in self.store.exported_resources(host):
            if not is_ensurable(resource.restype, self.catalog, self.definitions):
                continue
            if param_name is None:
                param_name = self.store.find_or_create_param_name(ENSURE)
            self._mark_absent(resource, param_name)
            marked += 1
        return marked

    def _mark_absent(self, resource: ResourceDB, param_name: ParamNameDB) -> None:
        name = resource.name
        line = 0
        previous = _ensure_value(resource)
        try:
            if previous is not None:
                line = int(previous.line or 0)
                self.store.delete_param_value(previous.id)
            self.store.add_param_value(resource, param_name, ABSENT, line)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        LOGGER.info('%s has been marked as "absent"', name)


def _ensure_value(resource: ResourceDB) -> Optional[ParamValueDB]:
    for param_value in resource.param_values:
        if param_value.param_name is not None and param_value.param_name.name == ENSURE:
            return param_value
    return None
