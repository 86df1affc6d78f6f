"""
Domain models for the reconciliation engine.

Pydantic schemas for definitions, graphs, deployed state, change sets and
apply reports.
"""

from reconciler.models.resource import (
    RemovalPolicy,
    ResourceDefinition,
    ResourceGraph,
    ResourceKind,
    ResourceNode,
)
from reconciler.models.state import DeployedResource, StateSnapshot
from reconciler.models.change_set import ChangeSet, ChangeSetEntry, Operation, ReplacePhase
from reconciler.models.report import (
    ApplyReport,
    EntryResult,
    EntryState,
    FailureReason,
    SkipCause,
)

__all__ = [
    "RemovalPolicy",
    "ResourceDefinition",
    "ResourceGraph",
    "ResourceKind",
    "ResourceNode",
    "DeployedResource",
    "StateSnapshot",
    "ChangeSet",
    "ChangeSetEntry",
    "Operation",
    "ReplacePhase",
    "ApplyReport",
    "EntryResult",
    "EntryState",
    "FailureReason",
    "SkipCause",
]
