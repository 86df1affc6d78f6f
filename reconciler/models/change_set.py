"""
Change set models.

A change set is the ordered list of operations that reconciles the desired
graph with the last-known state. It is built fresh by the differ for every
run and discarded once the executor is done with it.

Dependencies: pydantic
System role: Plan contract between differ and executor
"""

import enum
from collections import Counter

from pydantic import BaseModel, Field

from reconciler.models.resource import RemovalPolicy, ResourceKind, ResourceNode
from reconciler.models.state import DeployedResource


class Operation(str, enum.Enum):
    """Per-resource reconciliation decision."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"


class ReplacePhase(str, enum.Enum):
    """
    The two halves of a replacement.

    DELETE_OLD: Remove the previous physical resource
    CREATE_NEW: Create the new physical resource with a fresh id
    """

    DELETE_OLD = "delete_old"
    CREATE_NEW = "create_new"


class ChangeSetEntry(BaseModel):
    """
    One schedulable step of a change set.

    Attributes:
        entry_id: Unique id within the change set ("<logical id>:<step>")
        logical_id: Resource this entry acts on
        kind: Resource kind
        operation: Reconciliation decision for the resource
        phase: Which half of a replacement this entry is (REPLACE only)
        blockers: Entry ids that must succeed before this one starts
        desired: Desired node (create, update, replace/create_new, noop)
        prior: Deployed resource before the run (update, delete, replace, noop)
        changed_properties: Property names whose declared value changed
    """

    entry_id: str
    logical_id: str
    kind: ResourceKind
    operation: Operation
    phase: ReplacePhase | None = None
    blockers: list[str] = Field(default_factory=list)
    desired: ResourceNode | None = None
    prior: DeployedResource | None = None
    changed_properties: list[str] = Field(default_factory=list)

    @property
    def removes_physical(self) -> bool:
        """True when this entry deletes (or retains and forgets) a physical resource."""
        return self.operation == Operation.DELETE or self.phase == ReplacePhase.DELETE_OLD

    @property
    def provisions_physical(self) -> bool:
        """True when this entry creates or updates a physical resource."""
        return self.operation in (Operation.CREATE, Operation.UPDATE) or (
            self.phase == ReplacePhase.CREATE_NEW
        )

    def describe(self) -> str:
        """Short human-readable form, e.g. 'delete network (replace)'."""
        if self.phase == ReplacePhase.DELETE_OLD:
            return f"delete {self.logical_id} (replace)"
        if self.phase == ReplacePhase.CREATE_NEW:
            return f"create {self.logical_id} (replace)"
        return f"{self.operation.value} {self.logical_id}"


class ChangeSet(BaseModel):
    """Ordered change set; every entry appears after all of its blockers."""

    entries: list[ChangeSetEntry] = Field(default_factory=list)
    snapshot_version: int = Field(default=0, description="State version the plan was computed against")

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, entry_id: str) -> ChangeSetEntry | None:
        """Look up an entry by id."""
        for entry in self.entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def entries_for(self, logical_id: str) -> list[ChangeSetEntry]:
        """All entries acting on a logical id, in change-set order."""
        return [entry for entry in self.entries if entry.logical_id == logical_id]

    @property
    def decisions(self) -> dict[str, Operation]:
        """Reconciliation decision per logical id."""
        decisions: dict[str, Operation] = {}
        for entry in self.entries:
            decisions.setdefault(entry.logical_id, entry.operation)
        return decisions

    @property
    def has_changes(self) -> bool:
        """True unless every entry is a no-op."""
        return any(entry.operation != Operation.NOOP for entry in self.entries)

    def counts(self) -> dict[Operation, int]:
        """Number of resources per decision (a replacement counts once)."""
        return dict(Counter(self.decisions.values()))

    def describe(self) -> list[str]:
        """Entry descriptions in execution order, no-ops omitted."""
        return [
            entry.describe()
            for entry in self.entries
            if entry.operation != Operation.NOOP
        ]

    def destructive_stateful_entries(self) -> list[ChangeSetEntry]:
        """
        Entries that would destroy data held by a stateful resource.

        Covers deletes and replacement deletes of stateful kinds whose
        removal policy is destroy. Retained resources are only forgotten.
        """
        from reconciler.core.resource_kinds import is_stateful

        return [
            entry
            for entry in self.entries
            if entry.removes_physical
            and entry.prior is not None
            and entry.prior.removal_policy == RemovalPolicy.DESTROY
            and is_stateful(entry.prior.kind)
        ]
