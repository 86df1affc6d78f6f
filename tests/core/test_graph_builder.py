"""
Test suite for the resource graph builder.

Tests dependency extraction, deterministic ordering and every rejection
path: duplicates, unresolved references, cycles and malformed definitions.

System role: Verification of the first pipeline stage
"""

import pytest

from reconciler.core.exceptions import (
    CyclicDependencyError,
    DuplicateResourceError,
    InvalidDefinitionError,
    UnresolvedReferenceError,
)
from reconciler.core.graph_builder import GraphBuilder, build_graph
from reconciler.core.references import get_att, ref
from reconciler.models import ResourceDefinition, ResourceKind


def _network(logical_id: str, **properties) -> dict:
    return {"logical_id": logical_id, "kind": "network", "properties": properties}


@pytest.fixture
def builder() -> GraphBuilder:
    """Provide GraphBuilder instance for testing."""
    return GraphBuilder()


class TestGraphBuilderBuild:
    """Test suite for GraphBuilder.build() on valid input."""

    def test_build_should_create_one_node_per_logical_id(
        self, builder: GraphBuilder, chain_definitions: list[ResourceDefinition]
    ) -> None:
        """Test every definition becomes exactly one node."""
        # Act
        graph = builder.build(chain_definitions)

        # Assert
        assert len(graph) == 3
        assert set(graph.nodes) == {"A", "B", "C"}

    def test_build_should_turn_references_into_dependencies(
        self, builder: GraphBuilder, chain_definitions: list[ResourceDefinition]
    ) -> None:
        """Test Ref intrinsics become dependency edges."""
        graph = builder.build(chain_definitions)

        assert graph.nodes["A"].dependencies == ()
        assert graph.nodes["B"].dependencies == ("A",)
        assert graph.nodes["C"].dependencies == ("B",)
        assert graph.edge_count == 2

    def test_build_should_find_nested_references(self, builder: GraphBuilder) -> None:
        """Test references inside lists and dicts at any depth are found."""
        definitions = [
            _network("A"),
            _network("B"),
            {
                "logical_id": "RT",
                "kind": "route_table",
                "properties": {
                    "routes": [{"cidr_block": "0.0.0.0/0", "gateway_id": get_att("B", "id")}],
                    "vpc": {"nested": [ref("A")]},
                },
            },
        ]

        graph = builder.build(definitions)

        assert graph.nodes["RT"].dependencies == ("B", "A")

    def test_build_should_order_dependencies_first_with_declaration_tie_break(
        self, builder: GraphBuilder
    ) -> None:
        """Test topological order falls back to declaration order."""
        definitions = [
            {"logical_id": "App", "kind": "compute", "properties": {"subnet": ref("Subnet")}},
            _network("Vpc"),
            {"logical_id": "Subnet", "kind": "subnet", "properties": {"vpc_id": ref("Vpc")}},
            _network("Other"),
        ]

        graph = builder.build(definitions)

        assert graph.topological_order() == ["Vpc", "Subnet", "App", "Other"]
        assert [node.logical_id for node in graph.iter_nodes()] == ["App", "Vpc", "Subnet", "Other"]

    def test_build_should_report_dependents(
        self, builder: GraphBuilder, chain_definitions: list[ResourceDefinition]
    ) -> None:
        """Test dependents_of lists direct dependents."""
        graph = builder.build(chain_definitions)

        assert graph.dependents_of("A") == ["B"]
        assert graph.dependents_of("C") == []

    def test_build_should_copy_properties(self, builder: GraphBuilder) -> None:
        """Test later mutation of the input does not leak into the graph."""
        properties = {"cidr_block": "10.0.0.0/16", "tags": {"Name": "a"}}
        definitions = [{"logical_id": "A", "kind": "network", "properties": properties}]

        graph = builder.build(definitions)
        properties["tags"]["Name"] = "changed"

        assert graph.nodes["A"].properties["tags"] == {"Name": "a"}

    def test_build_graph_should_accept_empty_input(self) -> None:
        """Test an empty definition set builds an empty graph."""
        graph = build_graph([])

        assert len(graph) == 0
        assert graph.topological_order() == []


class TestGraphBuilderErrors:
    """Test suite for GraphBuilder.build() rejection paths."""

    def test_build_should_reject_duplicate_logical_ids(self, builder: GraphBuilder) -> None:
        """Test duplicate ids raise DuplicateResourceError."""
        with pytest.raises(DuplicateResourceError) as exc_info:
            builder.build([_network("A"), _network("A")])

        assert exc_info.value.logical_id == "A"

    def test_build_should_reject_unresolved_reference(self, builder: GraphBuilder) -> None:
        """Test references to undeclared ids raise UnresolvedReferenceError."""
        definitions = [{"logical_id": "B", "kind": "subnet", "properties": {"vpc_id": ref("Missing")}}]

        with pytest.raises(UnresolvedReferenceError) as exc_info:
            builder.build(definitions)

        assert exc_info.value.logical_id == "B"
        assert exc_info.value.reference == "Missing"

    def test_build_should_reject_cycle_with_path(self, builder: GraphBuilder) -> None:
        """Test a reference cycle raises CyclicDependencyError naming the cycle."""
        definitions = [
            _network("A", peer=ref("C")),
            _network("B", peer=ref("A")),
            _network("C", peer=ref("B")),
            _network("D"),
        ]

        with pytest.raises(CyclicDependencyError) as exc_info:
            builder.build(definitions)

        cycle = exc_info.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"A", "B", "C"}
        assert "D" not in cycle

    def test_build_should_reject_self_reference_as_cycle(self, builder: GraphBuilder) -> None:
        """Test a resource referencing itself is a cycle."""
        with pytest.raises(CyclicDependencyError) as exc_info:
            builder.build([_network("A", me=ref("A"))])

        assert exc_info.value.cycle == ["A", "A"]

    @pytest.mark.parametrize(
        "definition",
        [
            {"logical_id": "A", "kind": "teleporter", "properties": {}},
            {"logical_id": "", "kind": "network", "properties": {}},
            {"logical_id": "A", "kind": "network", "properties": {}, "unknown": 1},
            {"logical_id": "A", "kind": "network", "properties": {"x": {"Fn::GetAtt": ["B"]}}},
            {"logical_id": "A", "kind": "network", "properties": {"x": {"Ref": 5}}},
        ],
    )
    def test_build_should_reject_malformed_definitions(
        self, builder: GraphBuilder, definition: dict
    ) -> None:
        """Test malformed definitions and intrinsics raise InvalidDefinitionError."""
        with pytest.raises(InvalidDefinitionError):
            builder.build([_network("B"), definition])

    def test_build_should_accept_models_and_mappings_together(self, builder: GraphBuilder) -> None:
        """Test model instances and plain mappings can be mixed."""
        definitions = [
            ResourceDefinition(logical_id="A", kind=ResourceKind.NETWORK),
            {"logical_id": "B", "kind": "subnet", "properties": {"vpc_id": ref("A")}},
        ]

        graph = builder.build(definitions)

        assert graph.nodes["B"].kind == ResourceKind.SUBNET

    def test_build_should_store_properties_in_json_form(self, builder: GraphBuilder) -> None:
        """Test tuples become lists so declared values match what state returns."""
        graph = builder.build([_network("A", ports=(22, 80), nested={"cidrs": ("10.0.0.0/16",)})])

        assert graph.nodes["A"].properties == {"ports": [22, 80], "nested": {"cidrs": ["10.0.0.0/16"]}}

    def test_build_should_reject_properties_that_are_not_json(self, builder: GraphBuilder) -> None:
        """Test values without a JSON form raise InvalidDefinitionError naming the resource."""
        with pytest.raises(InvalidDefinitionError) as exc_info:
            builder.build([_network("A", handle=object())])

        assert exc_info.value.details["logical_id"] == "A"
