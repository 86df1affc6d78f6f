"""
Stack definition collector.

A stack is an ordered list of resource definitions. Components append to it
and hand each other references (`{"Ref": ...}` / `{"Fn::GetAtt": ...}`)
instead of live values; the engine resolves them during apply.

Dependencies: reconciler.models, reconciler.core.references
"""

import logging
from typing import Any

from reconciler.core.references import get_att, ref
from reconciler.models import RemovalPolicy, ResourceDefinition, ResourceKind

from IAC.utils.tags import resource_tags, with_tags

logger = logging.getLogger(__name__)


class StackDefinition:
    """
    Ordered definition set for one deployment.

    Attributes:
        name: Stack name
        outputs: Named references exported by the stack
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.outputs: dict[str, Any] = {}
        self._definitions: list[ResourceDefinition] = []

    def __len__(self) -> int:
        return len(self._definitions)

    def add(
        self,
        logical_id: str,
        kind: ResourceKind,
        properties: dict[str, Any],
        removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
    ) -> dict[str, str]:
        """
        Declare a resource.

        Args:
            logical_id: Stable identifier within the stack
            kind: Resource kind
            properties: Declared properties, references allowed
            removal_policy: What happens to the physical resource on delete

        Returns:
            dict: Ref to the new resource's physical id
        """
        self._definitions.append(
            ResourceDefinition(
                logical_id=logical_id,
                kind=kind,
                properties=properties,
                removal_policy=removal_policy,
            )
        )
        return ref(logical_id)

    def export(self, name: str, value: Any) -> None:
        """Register a named stack output."""
        self.outputs[name] = value

    @property
    def definitions(self) -> list[ResourceDefinition]:
        """Definitions in declaration order."""
        return list(self._definitions)

    @property
    def logical_ids(self) -> list[str]:
        return [definition.logical_id for definition in self._definitions]


class StackComponent:
    """
    Base class for components that declare related resources.

    Logical ids and Name tags follow `{component name}-{suffix}`; every
    resource is tagged with the stack, component class and logical id.
    """

    def __init__(self, stack: StackDefinition, name: str, environment: str) -> None:
        self.stack = stack
        self.name = name
        self.environment = environment

    def _declare(
        self,
        suffix: str,
        kind: ResourceKind,
        properties: dict[str, Any],
        removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
        extra_tags: dict[str, str] | None = None,
    ) -> str:
        """
        Declare a tagged child resource.

        Returns:
            str: Logical id of the declared resource
        """
        logical_id = f"{self.name}-{suffix}"
        tags = resource_tags(
            self.stack.name, self.environment, type(self).__name__, logical_id, **(extra_tags or {})
        )
        self.stack.add(logical_id, kind, with_tags(properties, tags), removal_policy)
        logger.debug(f"{__name__}:_declare - {kind.value} {logical_id}")
        return logical_id

    @staticmethod
    def ref(logical_id: str) -> dict[str, str]:
        return ref(logical_id)

    @staticmethod
    def get_att(logical_id: str, attribute: str) -> dict[str, list[str]]:
        return get_att(logical_id, attribute)
