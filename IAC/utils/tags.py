"""
Tags for declared resources.

Every resource carries the project defaults plus its place in the stack
(stack, component, logical id), so a deployed resource can be traced back
to the definition that declared it.
"""

from typing import Any

from IAC.configs.constants import DEFAULT_TAGS


def resource_tags(
    stack_name: str,
    environment: str,
    component: str,
    logical_id: str,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Build the tag set for one declared resource.

    Args:
        stack_name: Stack the resource belongs to
        environment: Deployment environment
        component: Component that declared the resource
        logical_id: Logical id, also used as the Name tag
        **extra_tags: Additional tags, overriding the defaults

    Returns:
        Dictionary of tags
    """
    tags = {
        **DEFAULT_TAGS,
        "Environment": environment,
        "StackName": stack_name,
        "Component": component,
        "LogicalId": logical_id,
        "Name": logical_id,
    }
    tags.update(extra_tags)
    return tags


def with_tags(properties: dict[str, Any], tags: dict[str, str]) -> dict[str, Any]:
    """Copy of properties with tags attached; tags already declared win."""
    return {**properties, "tags": {**tags, **properties.get("tags", {})}}
