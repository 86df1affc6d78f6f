"""
Reconcile service orchestrator.

Coordinates the build -> diff -> apply pipeline for a definition set:
loads state, builds the desired graph, computes the change set, enforces
the destructive-change policy and hands the plan to the executor.

Dependencies: reconciler.core, reconciler.boundary, reconciler.configs
System role: Library facade used by CLIs and stack programs
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping

from reconciler.boundary.provider import ResourceProvider, get_provider
from reconciler.boundary.state import SqlStateStore, StateStore
from reconciler.configs import Settings, get_settings
from reconciler.core.differ import Differ
from reconciler.core.exceptions import ChangeSetError, DestructiveChangeError
from reconciler.core.executor import Executor
from reconciler.core.graph_builder import GraphBuilder
from reconciler.models import ApplyReport, ChangeSet, ResourceDefinition, ResourceGraph

logger = logging.getLogger(__name__)

Definitions = Iterable[ResourceDefinition | Mapping[str, Any]]


class ReconcileService:
    """
    Reconcile service orchestrator.

    Builder and state store errors abort a run before any provider call.
    Only the executor writes state.
    """

    def __init__(
        self,
        state_store: StateStore,
        provider: ResourceProvider,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize reconcile service.

        Args:
            state_store: Deployed state persistence
            provider: Cloud control plane
            settings: Engine settings (defaults to the global settings)
        """
        self.settings = settings or get_settings()
        self.state_store = state_store
        self.provider = provider
        self.builder = GraphBuilder()
        self.differ = Differ()
        self.executor = Executor(state_store, provider, self.settings.executor)

    @classmethod
    async def create(cls, settings: Settings | None = None) -> "ReconcileService":
        """
        Build a service wired from settings, with state tables created.

        Args:
            settings: Engine settings (defaults to the global settings)

        Returns:
            ReconcileService: Ready-to-use service
        """
        settings = settings or get_settings()
        store = SqlStateStore.from_settings(settings.state_store)
        await store.initialize()
        return cls(store, get_provider(settings.provider), settings)

    async def close(self) -> None:
        """Release the state store connection, if the store holds one."""
        close = getattr(self.state_store, "close", None)
        if close is not None:
            await close()

    def build(self, definitions: Definitions) -> ResourceGraph:
        """
        Build the desired graph.

        Args:
            definitions: Resource definitions in declaration order

        Returns:
            ResourceGraph: Validated, acyclic graph

        Raises:
            GraphError: On duplicate ids, unresolved references or cycles
            InvalidDefinitionError: On malformed definitions
        """
        return self.builder.build(definitions)

    async def plan(self, definitions: Definitions) -> ChangeSet:
        """
        Compute the change set for a definition set without applying it.

        Args:
            definitions: Resource definitions in declaration order

        Returns:
            ChangeSet: Ordered plan against the current state

        Raises:
            GraphError: If the definition set is invalid
            StateStoreError: If state cannot be loaded
        """
        graph = self.build(definitions)
        snapshot = await self.state_store.load()
        return self.differ.diff(graph, snapshot)

    async def apply(
        self,
        definitions: Definitions,
        approve_destructive: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> ApplyReport:
        """
        Plan and apply a definition set.

        Args:
            definitions: Resource definitions in declaration order
            approve_destructive: Allow deleting or replacing stateful resources
            cancel_event: When set, no further entries are started

        Returns:
            ApplyReport: Outcome of every entry

        Raises:
            DestructiveChangeError: If the plan destroys stateful data without approval
        """
        change_set = await self.plan(definitions)
        return await self._execute(change_set, approve_destructive, cancel_event)

    async def apply_change_set(
        self,
        change_set: ChangeSet,
        approve_destructive: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> ApplyReport:
        """
        Apply a previously computed plan.

        Args:
            change_set: Plan returned by plan()
            approve_destructive: Allow deleting or replacing stateful resources
            cancel_event: When set, no further entries are started

        Returns:
            ApplyReport: Outcome of every entry

        Raises:
            ChangeSetError: If state changed since the plan was computed
            DestructiveChangeError: If the plan destroys stateful data without approval
        """
        snapshot = await self.state_store.load()
        if snapshot.version != change_set.snapshot_version:
            raise ChangeSetError(
                "Plan is stale: state changed since it was computed",
                {
                    "planned_version": change_set.snapshot_version,
                    "current_version": snapshot.version,
                },
            )
        return await self._execute(change_set, approve_destructive, cancel_event)

    async def destroy(
        self,
        approve_destructive: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> ApplyReport:
        """
        Delete every deployed resource.

        Args:
            approve_destructive: Allow deleting stateful resources
            cancel_event: When set, no further entries are started

        Returns:
            ApplyReport: Outcome of every delete
        """
        return await self.apply([], approve_destructive, cancel_event)

    def check_policy(self, change_set: ChangeSet, approve_destructive: bool) -> None:
        """
        Enforce the stateful-resource confirmation policy.

        Args:
            change_set: Plan to check
            approve_destructive: Caller approved data-destroying changes

        Raises:
            DestructiveChangeError: If the plan destroys stateful data without approval
        """
        if approve_destructive or not self.settings.policy.require_stateful_confirmation:
            return
        destructive = change_set.destructive_stateful_entries()
        if destructive:
            logical_ids = list(dict.fromkeys(entry.logical_id for entry in destructive))
            logger.warning(
                f"{__name__}:check_policy - Refusing plan that destroys {', '.join(logical_ids)}"
            )
            raise DestructiveChangeError(logical_ids)

    async def _execute(
        self,
        change_set: ChangeSet,
        approve_destructive: bool,
        cancel_event: asyncio.Event | None,
    ) -> ApplyReport:
        self.check_policy(change_set, approve_destructive)
        if not change_set.has_changes:
            logger.info(f"{__name__}:apply - No changes, state v{change_set.snapshot_version} is current")
        return await self.executor.apply(change_set, cancel_event)
