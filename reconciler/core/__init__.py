"""
Core reconciliation logic.

Contains the exception hierarchy, the graph builder and the differ.
The executor lives in reconciler.core.executor and is imported directly,
since it depends on the boundary layer.
"""

from reconciler.core.exceptions import (
    ChangeSetError,
    CorruptStateError,
    CyclicDependencyError,
    DestructiveChangeError,
    DuplicateResourceError,
    GraphError,
    InvalidDefinitionError,
    ProviderOperationError,
    ProviderThrottlingError,
    ProviderTimeoutError,
    ReconcilerException,
    ReferenceResolutionError,
    StateStoreError,
    UnresolvedReferenceError,
)
from reconciler.core.graph_builder import GraphBuilder, build_graph
from reconciler.core.differ import Differ, diff
from reconciler.core.references import get_att, ref

__all__ = [
    # Exceptions
    "ReconcilerException",
    "InvalidDefinitionError",
    "GraphError",
    "DuplicateResourceError",
    "UnresolvedReferenceError",
    "CyclicDependencyError",
    "ChangeSetError",
    "ReferenceResolutionError",
    "StateStoreError",
    "CorruptStateError",
    "ProviderOperationError",
    "ProviderThrottlingError",
    "ProviderTimeoutError",
    "DestructiveChangeError",
    # Pipeline stages
    "GraphBuilder",
    "build_graph",
    "Differ",
    "diff",
    # References
    "ref",
    "get_att",
]
