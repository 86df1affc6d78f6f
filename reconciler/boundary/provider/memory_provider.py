"""
In-memory provider.

Simulates a cloud control plane: assigns kind-prefixed physical ids,
returns outputs with derived attributes (ARN, endpoint, addresses) and
supports fault injection for failure, throttling and hanging calls.
Used for local runs and throughout the test suite.

Dependencies: asyncio (stdlib), reconciler.core.resource_kinds
System role: Default ResourceProvider implementation
"""

import asyncio
import copy
import hashlib
import itertools
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from reconciler.boundary.provider.base import ProviderResult
from reconciler.core.exceptions import ProviderOperationError, ProviderThrottlingError
from reconciler.core.resource_kinds import get_kind_spec
from reconciler.models.resource import ResourceKind

logger = logging.getLogger(__name__)

_FAIL = "fail"
_THROTTLE = "throttle"
_HANG = "hang"


@dataclass
class _Fault:
    mode: str
    remaining: int | None
    message: str


@dataclass
class _SimulatedResource:
    kind: ResourceKind
    logical_id: str
    properties: dict[str, Any]
    outputs: dict[str, Any]


class InMemoryProvider:
    """
    Simulated control plane.

    Faults are keyed by operation and target, where the target is either the
    logical id or the physical id of the resource.

    Attributes:
        resources: physical id -> simulated resource
        calls: (operation, kind, logical id) for every call, in start order
        max_in_flight: Highest number of concurrently running calls seen
    """

    def __init__(
        self,
        region: str = "us-east-1",
        account_id: str = "123456789012",
        latency_seconds: float = 0.0,
    ) -> None:
        self.region = region
        self.account_id = account_id
        self.latency_seconds = latency_seconds
        self.resources: dict[str, _SimulatedResource] = {}
        self.calls: list[tuple[str, ResourceKind, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._faults: dict[tuple[str, str], _Fault] = {}
        self._counter = itertools.count(1)
        self._logical_ids: dict[str, str] = {}

    # Fault injection

    def fail_on(self, operation: str, target: str, message: str = "Simulated provider failure") -> None:
        """Make every `operation` call on target fail permanently."""
        self._faults[(operation, target)] = _Fault(_FAIL, None, message)

    def throttle(self, operation: str, target: str, times: int) -> None:
        """Make the next `times` calls of `operation` on target raise a throttling error."""
        self._faults[(operation, target)] = _Fault(_THROTTLE, times, "Rate exceeded")

    def hang(self, operation: str, target: str) -> None:
        """Make `operation` calls on target never return."""
        self._faults[(operation, target)] = _Fault(_HANG, None, "")

    def clear_faults(self) -> None:
        """Remove every injected fault."""
        self._faults.clear()

    # Introspection

    def find(self, logical_id: str) -> _SimulatedResource | None:
        """Return the live simulated resource created for a logical id."""
        for resource in self.resources.values():
            if resource.logical_id == logical_id:
                return resource
        return None

    def operations(self, logical_id: str) -> list[str]:
        """Operations called for a logical id, in start order."""
        return [operation for operation, _, target in self.calls if target == logical_id]

    # Provider API

    async def create(
        self,
        kind: ResourceKind,
        logical_id: str,
        properties: dict[str, Any],
    ) -> ProviderResult:
        """
        Create a simulated resource.

        Args:
            kind: Resource kind
            logical_id: Logical id of the resource
            properties: Resolved properties

        Returns:
            ProviderResult: New physical id and outputs

        Raises:
            ProviderOperationError: On an injected failure
            ProviderThrottlingError: On an injected throttle
        """
        async with self._call("create", kind, logical_id, None):
            physical_id = self._new_physical_id(kind)
            outputs = self._outputs(kind, physical_id, properties)
            self.resources[physical_id] = _SimulatedResource(
                kind=kind,
                logical_id=logical_id,
                properties=copy.deepcopy(properties),
                outputs=outputs,
            )
            self._logical_ids[physical_id] = logical_id
        logger.debug(f"{__name__}:create - {kind.value} {logical_id} -> {physical_id}")
        return ProviderResult(physical_id=physical_id, outputs=copy.deepcopy(outputs))

    async def update(
        self,
        kind: ResourceKind,
        physical_id: str,
        properties: dict[str, Any],
        changed: list[str],
    ) -> ProviderResult:
        """
        Update a simulated resource in place.

        Args:
            kind: Resource kind
            physical_id: Resource to update
            properties: Full resolved properties
            changed: Names of properties that changed

        Returns:
            ProviderResult: Same physical id with refreshed outputs

        Raises:
            ProviderOperationError: If the resource does not exist or on an injected failure
        """
        logical_id = self._logical_ids.get(physical_id, physical_id)
        async with self._call("update", kind, logical_id, physical_id):
            resource = self.resources.get(physical_id)
            if resource is None:
                raise ProviderOperationError(
                    f"Resource {physical_id} does not exist",
                    operation="update",
                    target=physical_id,
                )
            resource.properties = copy.deepcopy(properties)
            resource.outputs = self._outputs(kind, physical_id, properties)
        logger.debug(f"{__name__}:update - {kind.value} {physical_id} changed {changed}")
        return ProviderResult(physical_id=physical_id, outputs=copy.deepcopy(resource.outputs))

    async def delete(self, kind: ResourceKind, physical_id: str) -> None:
        """
        Delete a simulated resource. Absent resources are treated as deleted.

        Args:
            kind: Resource kind
            physical_id: Resource to delete

        Raises:
            ProviderOperationError: On an injected failure
        """
        logical_id = self._logical_ids.get(physical_id, physical_id)
        async with self._call("delete", kind, logical_id, physical_id):
            self.resources.pop(physical_id, None)
        logger.debug(f"{__name__}:delete - {kind.value} {physical_id}")

    # Internals

    @asynccontextmanager
    async def _call(
        self,
        operation: str,
        kind: ResourceKind,
        logical_id: str,
        physical_id: str | None,
    ) -> AsyncIterator[None]:
        """Record the call, track concurrency and apply injected faults."""
        self.calls.append((operation, kind, logical_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self._before(operation, logical_id, physical_id)
            yield
        finally:
            self.in_flight -= 1

    async def _before(self, operation: str, logical_id: str, physical_id: str | None) -> None:
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        else:
            await asyncio.sleep(0)

        fault = self._faults.get((operation, logical_id))
        if fault is None and physical_id is not None:
            fault = self._faults.get((operation, physical_id))
        if fault is None:
            return

        target = physical_id or logical_id
        if fault.mode == _HANG:
            await asyncio.Event().wait()
        elif fault.mode == _THROTTLE:
            if fault.remaining:
                fault.remaining -= 1
                raise ProviderThrottlingError(fault.message, operation=operation, target=target)
        else:
            raise ProviderOperationError(fault.message, operation=operation, target=target)

    def _new_physical_id(self, kind: ResourceKind) -> str:
        spec = get_kind_spec(kind)
        number = next(self._counter)
        if spec.arn_service == "iam":
            return f"{spec.id_prefix}{number:017X}"
        return f"{spec.id_prefix}-{number:017x}"

    def _outputs(self, kind: ResourceKind, physical_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Echo properties and add the attributes a real control plane derives."""
        spec = get_kind_spec(kind)
        outputs = copy.deepcopy(properties)
        outputs["id"] = physical_id
        outputs["arn"] = f"arn:aws:{spec.arn_service}:{self.region}:{self.account_id}:{kind.value}/{physical_id}"

        if kind in (ResourceKind.ROLE, ResourceKind.INSTANCE_PROFILE):
            resource_type = "role" if kind == ResourceKind.ROLE else "instance-profile"
            name = properties.get("name", physical_id)
            outputs["arn"] = f"arn:aws:iam::{self.account_id}:{resource_type}/{name}"
            outputs["name"] = name
        elif kind == ResourceKind.DATABASE:
            suffix = hashlib.sha256(physical_id.encode()).hexdigest()[:12]
            identifier = properties.get("identifier", physical_id)
            outputs["endpoint"] = f"{identifier}.{suffix}.{self.region}.rds.amazonaws.com"
            outputs["port"] = properties.get("port", 3306)
        elif kind == ResourceKind.COMPUTE:
            number = int(physical_id.rsplit("-", 1)[-1], 16)
            outputs["private_ip"] = f"10.0.{number // 250 % 250}.{number % 250 + 4}"
            outputs["public_dns"] = f"ec2-{physical_id}.{self.region}.compute.amazonaws.com"
        elif kind == ResourceKind.SECURITY_GROUP:
            outputs["group_id"] = physical_id
        return outputs
