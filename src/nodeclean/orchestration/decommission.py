"""Decommission nodes: certificates, cached facts and nodes, reports, stored configs.

Nodes are processed in the order given and, for each node, the cleanup steps
run in a fixed order. Any unexpected collaborator failure is wrapped in a
:class:`CollaboratorFailure`. Under the ``abort`` failure policy it stops the
whole run: the remaining steps and all later nodes are skipped and reported as
not attempted. Under ``continue`` the failing node is recorded and the next
node is processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..collaborators import CertificateAuthority, KeyValueCache, LocalCertificateAuthority, ReportStore, YamlCacheStore
from ..config.schema import DecommissionConfig
from ..core.exceptions import CollaboratorFailure, DecommissionError, InvalidInputError
from ..core.logging import get_logger, node_context
from ..core.resource_types import DefinitionRegistry, NativeTypeCatalog
from ..storeconfigs import StoredConfigCleaner, StoredConfigStore, create_session_factory

LOGGER = get_logger(__name__)

STEPS = ("cert", "facts", "node", "reports", "storeconfigs")
FAILURE_POLICIES = ("abort", "continue")


@dataclass
class NodeOutcome:
    node: str
    completed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    error: Optional[DecommissionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DecommissionResult:
    outcomes: List[NodeOutcome] = field(default_factory=list)
    not_attempted: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.outcomes) and not self.not_attempted and all(outcome.ok for outcome in self.outcomes)

    @property
    def errors(self) -> List[DecommissionError]:
        return [outcome.error for outcome in self.outcomes if outcome.error is not None]


def normalize_nodes(nodes: Sequence[str]) -> List[str]:
    if isinstance(nodes, str):
        nodes = [nodes]
    if not nodes:
        raise InvalidInputError("At least one node should be passed")
    normalized = []
    for node in nodes:
        name = node.strip().lower()
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise InvalidInputError(f"Invalid node name '{node}'", metadata={"node": node})
        normalized.append(name)
    return normalized


class Decommissioner:
    def __init__(
        self,
        *,
        facts_cache: KeyValueCache,
        node_cache: KeyValueCache,
        report_store: KeyValueCache,
        ca: Optional[CertificateAuthority] = None,
        storeconfigs: Optional[StoredConfigCleaner] = None,
        failure_policy: str = "abort",
        trace: bool = False,
    ) -> None:
        if failure_policy not in FAILURE_POLICIES:
            raise ValueError(f"Unknown failure policy '{failure_policy}'")
        self.ca = ca
        self.facts_cache = facts_cache
        self.node_cache = node_cache
        self.report_store = report_store
        self.storeconfigs = storeconfigs
        self.failure_policy = failure_policy
        self.trace = trace

    def decommission(self, nodes: Sequence[str], unexport: bool = False) -> DecommissionResult:
        """Clean every trace of ``nodes``.

        Raises :class:`InvalidInputError` before touching anything when no
        usable node names are given. Collaborator failures are reported in the
        returned result rather than raised.
        """
        names = normalize_nodes(nodes)
        result = DecommissionResult()
        for index, node in enumerate(names):
            outcome = NodeOutcome(node=node)
            result.outcomes.append(outcome)
            with node_context(node):
                try:
                    self._clean_node(node, unexport, outcome)
                except DecommissionError as exc:
                    outcome.error = exc
                    self._report(exc)
                    if self.failure_policy == "abort":
                        result.not_attempted.extend(names[index + 1:])
                        break
        if result.not_attempted:
            LOGGER.warning("Aborted before cleaning: %s", ", ".join(result.not_attempted))
        return result

    def _steps(self) -> List[tuple[str, Callable[[str, bool], bool]]]:
        return [
            ("cert", lambda node, unexport: self.clean_cert(node)),
            ("facts", lambda node, unexport: self.clean_cached_facts(node)),
            ("node", lambda node, unexport: self.clean_cached_node(node)),
            ("reports", lambda node, unexport: self.clean_reports(node)),
            ("storeconfigs", self.clean_storeconfigs),
        ]

    def _clean_node(self, node: str, unexport: bool, outcome: NodeOutcome) -> None:
        for step, action in self._steps():
            try:
                ran = action(node, unexport)
            except DecommissionError:
                raise
            except Exception as exc:
                raise CollaboratorFailure(
                    f"Cleaning {step} for {node} failed: {exc}",
                    metadata={"node": node, "step": step, "error": type(exc).__name__},
                ) from exc
            if ran:
                outcome.completed.append(step)
            else:
                outcome.skipped.append(step)

    def _report(self, exc: DecommissionError) -> None:
        if self.trace:
            LOGGER.error("%s", exc, exc_info=exc)
        else:
            LOGGER.error("%s", exc)

    def clean_cert(self, node: str) -> bool:
        if self.ca is None:
            LOGGER.info("Not managing %s certs as this host is not a CA", node)
            return False
        self.ca.revoke(node)
        self.ca.destroy(node)
        LOGGER.info("%s certificates removed from ca", node)
        return True

    def clean_cached_facts(self, node: str) -> bool:
        self.facts_cache.destroy(node)
        LOGGER.info("%s's facts removed", node)
        return True

    def clean_cached_node(self, node: str) -> bool:
        self.node_cache.destroy(node)
        LOGGER.info("%s's cached node removed", node)
        return True

    def clean_reports(self, node: str) -> bool:
        self.report_store.destroy(node)
        LOGGER.info("%s's reports removed", node)
        return True

    def clean_storeconfigs(self, node: str, unexport: bool = False) -> bool:
        if self.storeconfigs is None:
            LOGGER.debug("Stored configurations disabled; skipping %s", node)
            return False
        try:
            self.storeconfigs.clean(node, unexport)
        except Exception:
            # Leave the session usable for the next node
            self.storeconfigs.store.rollback()
            raise
        return True

    def close(self) -> None:
        if self.storeconfigs is not None:
            self.storeconfigs.store.db.close()


def build_decommissioner(config: DecommissionConfig, *, session: Optional[Session] = None) -> Decommissioner:
    """Wire a :class:`Decommissioner` from configuration."""
    ca = LocalCertificateAuthority(config.ca.ssl_dir) if config.ca.enabled else None

    cleaner = None
    if config.storeconfigs.enabled:
        if session is None:
            session = create_session_factory(config.storeconfigs.database_url)()
        catalog = NativeTypeCatalog()
        for name, attributes in config.storeconfigs.native_types.items():
            catalog.register(name, attributes)
        definitions = DefinitionRegistry(config.storeconfigs.definitions)
        cleaner = StoredConfigCleaner(StoredConfigStore(session), catalog, definitions)

    return Decommissioner(
        ca=ca,
        facts_cache=YamlCacheStore(config.cache.facts_dir),
        node_cache=YamlCacheStore(config.cache.node_dir),
        report_store=ReportStore(config.cache.reports_dir),
        storeconfigs=cleaner,
        failure_policy=config.failure_policy,
        trace=config.logging.trace,
    )
