"""
Desired-state differ.

Compares the desired ResourceGraph with the last-known StateSnapshot and
produces an ordered ChangeSet.

Decision per logical id:
1. Declared but absent from state -> CREATE
2. Present with identical declared properties -> NOOP
3. Present with changed properties -> UPDATE when every changed property is
   mutable for the kind, REPLACE otherwise (a kind change always replaces)
4. In state but no longer declared -> DELETE
5. A node depending on a replaced node is replaced too: the new physical id
   only exists after apply, so the old dependent would keep pointing at a
   deleted resource.

Ordering:
- Provisioning entries (create / update / replace create_new) wait for the
  provisioning entries of the node's dependencies.
- Removal entries (delete / replace delete_old) wait for the removal or
  update of every resource that referenced the old physical resource.
- A replacement's create_new waits for its own delete_old.
- Final order is a topological order of the blocker graph; removal entries
  sort first in reverse dependency order, then provisioning and no-op
  entries in dependency order. Ties follow declaration order, then the
  persisted state order for resources that are no longer declared.

Dependencies: networkx, reconciler.core.resource_kinds, reconciler.core.ordering
System role: Second stage of the build -> diff -> apply pipeline
"""

import logging
from typing import Any

import networkx as nx

from reconciler.core.exceptions import ChangeSetError
from reconciler.core.ordering import cycle_path, dependency_graph, topological_order
from reconciler.core.resource_kinds import requires_replacement
from reconciler.models.change_set import ChangeSet, ChangeSetEntry, Operation, ReplacePhase
from reconciler.models.resource import ResourceGraph, ResourceNode
from reconciler.models.state import DeployedResource, StateSnapshot

logger = logging.getLogger(__name__)

_REMOVAL_PHASE = 0
_PROVISION_PHASE = 1


def changed_properties(previous: dict[str, Any], desired: dict[str, Any]) -> list[str]:
    """
    Names of properties whose declared value differs.

    Args:
        previous: Last-applied declared properties
        desired: Newly declared properties

    Returns:
        list[str]: Changed, added or removed property names, sorted
    """
    names = set(previous) | set(desired)
    return sorted(
        name
        for name in names
        if name not in previous or name not in desired or previous[name] != desired[name]
    )


def _entry(
    logical_id: str,
    step: str,
    operation: Operation,
    node: ResourceNode | None = None,
    prior: DeployedResource | None = None,
    phase: ReplacePhase | None = None,
    changed: list[str] | None = None,
) -> ChangeSetEntry:
    """Build an entry; removal entries carry the deployed kind."""
    source = prior if phase == ReplacePhase.DELETE_OLD or node is None else node
    return ChangeSetEntry(
        entry_id=f"{logical_id}:{step}",
        logical_id=logical_id,
        kind=source.kind,
        operation=operation,
        phase=phase,
        desired=node,
        prior=prior,
        changed_properties=list(changed or []),
    )


class Differ:
    """Computes change sets from desired graphs and state snapshots."""

    def diff(self, desired: ResourceGraph, snapshot: StateSnapshot) -> ChangeSet:
        """
        Compute the ordered change set that reconciles state with the graph.

        Args:
            desired: Desired resource graph
            snapshot: Last-known deployed state

        Returns:
            ChangeSet: Entries in a dependency-safe execution order

        Raises:
            ChangeSetError: If the blocker graph cannot be ordered
        """
        decisions, changes = self._decide(desired, snapshot)
        entries = self._build_entries(desired, snapshot, decisions, changes)
        ordered = self._order(desired, snapshot, entries)

        change_set = ChangeSet(entries=ordered, snapshot_version=snapshot.version)
        summary = ", ".join(f"{op.value}={n}" for op, n in change_set.counts().items())
        logger.info(
            f"{__name__}:diff - Planned {len(change_set)} entries against "
            f"state v{snapshot.version} ({summary or 'empty'})"
        )
        return change_set

    def _decide(
        self,
        desired: ResourceGraph,
        snapshot: StateSnapshot,
    ) -> tuple[dict[str, Operation], dict[str, list[str]]]:
        """Pick an operation per logical id (desired nodes in dependency order)."""
        decisions: dict[str, Operation] = {}
        changes: dict[str, list[str]] = {}

        for logical_id in desired.topological_order():
            node = desired.nodes[logical_id]
            prior = snapshot.get(logical_id)
            if prior is None:
                decisions[logical_id] = Operation.CREATE
                continue

            changed = changed_properties(prior.properties, node.properties)
            if prior.kind != node.kind:
                decision = Operation.REPLACE
            elif not changed:
                decision = Operation.NOOP
            elif requires_replacement(node.kind, changed):
                decision = Operation.REPLACE
            else:
                decision = Operation.UPDATE

            if decision != Operation.REPLACE and any(
                decisions.get(dependency) == Operation.REPLACE
                for dependency in node.dependencies
            ):
                decision = Operation.REPLACE

            decisions[logical_id] = decision
            changes[logical_id] = changed

        for logical_id in snapshot.logical_ids:
            if logical_id not in desired:
                decisions[logical_id] = Operation.DELETE

        return decisions, changes

    def _build_entries(
        self,
        desired: ResourceGraph,
        snapshot: StateSnapshot,
        decisions: dict[str, Operation],
        changes: dict[str, list[str]],
    ) -> list[ChangeSetEntry]:
        """Create entries and wire their blockers."""
        entries: list[ChangeSetEntry] = []
        provision_entry: dict[str, str] = {}
        removal_entry: dict[str, str] = {}
        update_entry: dict[str, str] = {}

        for logical_id, decision in decisions.items():
            node = desired.get(logical_id)
            prior = snapshot.get(logical_id)
            changed = changes.get(logical_id, [])

            if decision == Operation.CREATE:
                created = _entry(logical_id, "create", decision, node=node, changed=changed)
                provision_entry[logical_id] = created.entry_id
                entries.append(created)
            elif decision == Operation.UPDATE:
                updated = _entry(logical_id, "update", decision, node=node, prior=prior, changed=changed)
                provision_entry[logical_id] = updated.entry_id
                update_entry[logical_id] = updated.entry_id
                entries.append(updated)
            elif decision == Operation.NOOP:
                entries.append(_entry(logical_id, "noop", decision, node=node, prior=prior))
            elif decision == Operation.DELETE:
                deleted = _entry(logical_id, "delete", decision, prior=prior)
                removal_entry[logical_id] = deleted.entry_id
                entries.append(deleted)
            else:
                delete_old = _entry(
                    logical_id, "delete_old", decision, prior=prior,
                    phase=ReplacePhase.DELETE_OLD, changed=changed,
                )
                create_new = _entry(
                    logical_id, "create_new", decision, node=node, prior=prior,
                    phase=ReplacePhase.CREATE_NEW, changed=changed,
                )
                create_new.blockers.append(delete_old.entry_id)
                removal_entry[logical_id] = delete_old.entry_id
                provision_entry[logical_id] = create_new.entry_id
                entries.extend([delete_old, create_new])

        old_dependents: dict[str, list[str]] = {}
        for logical_id, deployed in snapshot.resources.items():
            for dependency in deployed.dependencies:
                old_dependents.setdefault(dependency, []).append(logical_id)

        for change in entries:
            if change.provisions_physical:
                node: ResourceNode = change.desired
                for dependency in node.dependencies:
                    blocker = provision_entry.get(dependency)
                    if blocker is not None and blocker not in change.blockers:
                        change.blockers.append(blocker)
            elif change.removes_physical:
                for dependent in old_dependents.get(change.logical_id, []):
                    blocker = removal_entry.get(dependent) or update_entry.get(dependent)
                    if blocker is not None and blocker not in change.blockers:
                        change.blockers.append(blocker)

        return entries

    def _order(
        self,
        desired: ResourceGraph,
        snapshot: StateSnapshot,
        entries: list[ChangeSetEntry],
    ) -> list[ChangeSetEntry]:
        """Sort entries topologically over blockers with phase-aware tie-breaks."""
        provision_rank = {logical_id: rank for rank, logical_id in enumerate(desired.topological_order())}
        removal_rank = self._removal_ranks(desired, snapshot)

        by_id = {change.entry_id: change for change in entries}
        priority = {}
        for change in entries:
            if change.removes_physical:
                priority[change.entry_id] = (_REMOVAL_PHASE, removal_rank[change.logical_id])
            else:
                priority[change.entry_id] = (_PROVISION_PHASE, provision_rank[change.logical_id])

        blockers_graph = dependency_graph(
            list(by_id),
            {change.entry_id: change.blockers for change in entries},
        )
        try:
            ordered_ids = topological_order(blockers_graph, priority)
        except nx.NetworkXUnfeasible as e:
            cycle = cycle_path(blockers_graph)
            raise ChangeSetError(
                f"Change set blockers form a cycle: {' -> '.join(cycle)}",
                {"cycle": cycle},
            ) from e

        position = {entry_id: index for index, entry_id in enumerate(ordered_ids)}
        ordered = []
        for entry_id in ordered_ids:
            change = by_id[entry_id]
            change.blockers.sort(key=position.__getitem__)
            ordered.append(change)
        return ordered

    @staticmethod
    def _removal_ranks(desired: ResourceGraph, snapshot: StateSnapshot) -> dict[str, int]:
        """Rank deployed resources so dependents come before their dependencies."""
        logical_ids = snapshot.logical_ids
        state_position = {logical_id: index for index, logical_id in enumerate(logical_ids)}

        def tie_break(logical_id: str) -> tuple[int, int]:
            node = desired.get(logical_id)
            if node is not None:
                return (0, node.declaration_index)
            return (1, state_position[logical_id])

        # Reverse edges: a resource is removable once everything that used it is.
        dependents_first: dict[str, list[str]] = {logical_id: [] for logical_id in logical_ids}
        for logical_id, deployed in snapshot.resources.items():
            for dependency in deployed.dependencies:
                if dependency in dependents_first:
                    dependents_first[dependency].append(logical_id)

        try:
            ordered = topological_order(
                dependency_graph(logical_ids, dependents_first),
                {logical_id: tie_break(logical_id) for logical_id in logical_ids},
            )
        except nx.NetworkXUnfeasible:
            logger.warning(f"{__name__}:_removal_ranks - Stored dependencies form a cycle, using state order")
            ordered = sorted(logical_ids, key=tie_break)
        return {logical_id: rank for rank, logical_id in enumerate(ordered)}


def diff(desired: ResourceGraph, snapshot: StateSnapshot) -> ChangeSet:
    """Diff with a default Differ."""
    return Differ().diff(desired, snapshot)
