"""
Reference intrinsics inside property values.

A property value may embed `{"Ref": "<logical id>"}` (the target's physical
id) or `{"Fn::GetAtt": ["<logical id>", "<attribute>"]}` (one of the target's
provider outputs) at any depth. The builder extracts them as dependency
edges; the executor substitutes real values right before a provider call.

Dependencies: None
System role: Reference discovery and resolution
"""

from typing import Any, Callable, Final

from reconciler.core.exceptions import InvalidDefinitionError

REF_KEY: Final[str] = "Ref"
GET_ATT_KEY: Final[str] = "Fn::GetAtt"


def ref(logical_id: str) -> dict[str, str]:
    """Build a reference to another resource's physical id."""
    return {REF_KEY: logical_id}


def get_att(logical_id: str, attribute: str) -> dict[str, list[str]]:
    """Build a reference to one of another resource's output attributes."""
    return {GET_ATT_KEY: [logical_id, attribute]}


def _parse_intrinsic(value: dict, owner: str) -> tuple[str, str | None] | None:
    """Return (target, attribute) if value is an intrinsic, else None."""
    if len(value) != 1:
        return None
    if REF_KEY in value:
        target = value[REF_KEY]
        if not isinstance(target, str) or not target:
            raise InvalidDefinitionError(f"Ref must name a logical id, got {target!r}", owner)
        return target, None
    if GET_ATT_KEY in value:
        args = value[GET_ATT_KEY]
        if (
            not isinstance(args, (list, tuple))
            or len(args) != 2
            or not all(isinstance(arg, str) and arg for arg in args)
        ):
            raise InvalidDefinitionError(
                f"{GET_ATT_KEY} expects [logical_id, attribute], got {args!r}", owner
            )
        return args[0], args[1]
    return None


def find_references(value: Any, owner: str) -> list[str]:
    """
    Collect referenced logical ids from a property value.

    Args:
        value: Property value (any JSON-native structure)
        owner: Logical id holding the value, for error messages

    Returns:
        list[str]: Referenced logical ids, first-occurrence order, no duplicates

    Raises:
        InvalidDefinitionError: If an intrinsic is malformed
    """
    found: list[str] = []

    def walk(item: Any) -> None:
        if isinstance(item, dict):
            intrinsic = _parse_intrinsic(item, owner)
            if intrinsic is not None:
                if intrinsic[0] not in found:
                    found.append(intrinsic[0])
                return
            for child in item.values():
                walk(child)
        elif isinstance(item, (list, tuple)):
            for child in item:
                walk(child)

    walk(value)
    return found


def resolve_references(value: Any, lookup: Callable[[str, str | None], Any]) -> Any:
    """
    Return a copy of value with every intrinsic replaced by its resolved value.

    Args:
        value: Property value possibly containing intrinsics
        lookup: Called with (logical_id, attribute or None) for each intrinsic

    Returns:
        Any: Value with intrinsics substituted
    """
    if isinstance(value, dict):
        intrinsic = _parse_intrinsic(value, owner="")
        if intrinsic is not None:
            return lookup(*intrinsic)
        return {key: resolve_references(child, lookup) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [resolve_references(child, lookup) for child in value]
    return value
