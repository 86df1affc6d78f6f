"""
Resource graph builder.

Turns a declarative definition set into an immutable ResourceGraph:
validates each definition, rejects duplicate logical ids, converts
references into dependency edges and computes a deterministic topological
order. Pure transformation; on any error no graph is produced.

Dependencies: pydantic, networkx, reconciler.core.references, reconciler.core.ordering
System role: First stage of the build -> diff -> apply pipeline
"""

import logging
from typing import Any, Iterable, Mapping

import networkx as nx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from reconciler.core.exceptions import (
    CyclicDependencyError,
    DuplicateResourceError,
    InvalidDefinitionError,
    UnresolvedReferenceError,
)
from reconciler.core.ordering import cycle_path, dependency_graph, topological_order
from reconciler.core.references import find_references
from reconciler.models.resource import ResourceDefinition, ResourceGraph, ResourceNode

logger = logging.getLogger(__name__)

_PROPERTIES = TypeAdapter(dict[str, Any])


class GraphBuilder:
    """Builds ResourceGraph instances from definition sets."""

    def build(
        self,
        definitions: Iterable[ResourceDefinition | Mapping[str, Any]],
    ) -> ResourceGraph:
        """
        Build the dependency graph for a definition set.

        Args:
            definitions: Definitions in declaration order (models or plain mappings)

        Returns:
            ResourceGraph: Graph with one node per logical id

        Raises:
            InvalidDefinitionError: If a definition or intrinsic is malformed
            DuplicateResourceError: If a logical id is declared twice
            UnresolvedReferenceError: If a reference targets an undeclared id
            CyclicDependencyError: If references form a cycle
        """
        parsed = [self._parse(raw) for raw in definitions]

        seen: set[str] = set()
        for definition in parsed:
            if definition.logical_id in seen:
                raise DuplicateResourceError(definition.logical_id)
            seen.add(definition.logical_id)

        nodes: dict[str, ResourceNode] = {}
        for index, definition in enumerate(parsed):
            properties = self._normalize(definition)
            dependencies = find_references(properties, definition.logical_id)
            for target in dependencies:
                if target not in seen:
                    raise UnresolvedReferenceError(definition.logical_id, target)
            nodes[definition.logical_id] = ResourceNode(
                logical_id=definition.logical_id,
                kind=definition.kind,
                properties=properties,
                removal_policy=definition.removal_policy,
                dependencies=tuple(dependencies),
                declaration_index=index,
            )

        dependencies_graph = dependency_graph(
            list(nodes),
            {logical_id: node.dependencies for logical_id, node in nodes.items()},
        )
        try:
            ordered = topological_order(
                dependencies_graph,
                {logical_id: node.declaration_index for logical_id, node in nodes.items()},
            )
        except nx.NetworkXUnfeasible as e:
            raise CyclicDependencyError(cycle_path(dependencies_graph)) from e

        graph = ResourceGraph(nodes=nodes, order=tuple(ordered))
        logger.debug(
            f"{__name__}:build - Built graph with {len(graph)} nodes "
            f"and {graph.edge_count} edges"
        )
        return graph

    @staticmethod
    def _normalize(definition: ResourceDefinition) -> dict[str, Any]:
        """
        Copy properties into their JSON form (tuples become lists).

        Persisted state holds JSON, so declared values must compare equal
        to what a later load returns.
        """
        try:
            return _PROPERTIES.dump_python(definition.properties, mode="json")
        except PydanticSerializationError as e:
            raise InvalidDefinitionError(
                f"Properties of {definition.logical_id} are not JSON-serializable: {e}",
                logical_id=definition.logical_id,
            ) from e

    @staticmethod
    def _parse(raw: ResourceDefinition | Mapping[str, Any]) -> ResourceDefinition:
        """Validate one raw definition."""
        if isinstance(raw, ResourceDefinition):
            return raw
        try:
            return ResourceDefinition.model_validate(dict(raw))
        except (ValidationError, TypeError, ValueError) as e:
            logical_id = raw.get("logical_id") if isinstance(raw, Mapping) else None
            raise InvalidDefinitionError(
                f"Invalid resource definition: {e}",
                logical_id=logical_id if isinstance(logical_id, str) else None,
            ) from e


def build_graph(
    definitions: Iterable[ResourceDefinition | Mapping[str, Any]],
) -> ResourceGraph:
    """Build a graph with a default GraphBuilder."""
    return GraphBuilder().build(definitions)
