"""
Exception hierarchy for the reconciliation engine.

Provides layered exception structure for builder, state store, provider and
policy errors. All exceptions carry a details dict for observability.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the engine
"""

from typing import Any


class ReconcilerException(Exception):
    """Base exception for all reconciliation engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidDefinitionError(ReconcilerException):
    """Raised when a resource definition cannot be parsed into a node."""

    def __init__(
        self,
        message: str,
        logical_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if logical_id:
            details["logical_id"] = logical_id
        super().__init__(message, details)


class GraphError(ReconcilerException):
    """Base exception for dependency graph construction errors."""

    pass


class DuplicateResourceError(GraphError):
    """Raised when two definitions share a logical id."""

    def __init__(self, logical_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["logical_id"] = logical_id
        self.logical_id = logical_id
        super().__init__(f"Duplicate logical id: {logical_id}", details)


class UnresolvedReferenceError(GraphError):
    """Raised when a node references a logical id that is not defined."""

    def __init__(
        self,
        logical_id: str,
        reference: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize unresolved reference error.

        Args:
            logical_id: Node holding the reference
            reference: Logical id that could not be found
            details: Additional context
        """
        details = details or {}
        details["logical_id"] = logical_id
        details["reference"] = reference
        self.logical_id = logical_id
        self.reference = reference
        super().__init__(f"{logical_id} references undefined resource {reference}", details)


class CyclicDependencyError(GraphError):
    """Raised when references form a cycle."""

    def __init__(self, cycle: list[str], details: dict[str, Any] | None = None) -> None:
        """
        Initialize cyclic dependency error.

        Args:
            cycle: Logical ids along the cycle, first id repeated at the end
            details: Additional context
        """
        details = details or {}
        details["cycle"] = cycle
        self.cycle = cycle
        super().__init__(f"Dependency cycle: {' -> '.join(cycle)}", details)


class ChangeSetError(ReconcilerException):
    """Raised when change-set entries cannot be ordered."""

    pass


class ReferenceResolutionError(ReconcilerException):
    """Raised when a reference cannot be resolved to a deployed value."""

    def __init__(
        self,
        logical_id: str,
        attribute: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize reference resolution error.

        Args:
            logical_id: Referenced logical id
            attribute: Requested output attribute (None for the physical id)
            details: Additional context
        """
        details = details or {}
        details["reference"] = logical_id
        if attribute:
            details["attribute"] = attribute
        target = f"{logical_id}.{attribute}" if attribute else logical_id
        super().__init__(f"Cannot resolve reference to {target}", details)


class StateStoreError(ReconcilerException):
    """Raised when the state store backend fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize state store error.

        Args:
            message: Error message
            operation: Operation that failed (load, commit, initialize)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class CorruptStateError(StateStoreError):
    """Raised when persisted state cannot be parsed into the expected shape."""

    def __init__(
        self,
        message: str,
        logical_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if logical_id:
            details["logical_id"] = logical_id
        super().__init__(message, operation="load", details=details)


class ProviderOperationError(ReconcilerException):
    """Raised when a provider API call fails."""

    transient: bool = False

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        target: str | None = None,
        transient: bool | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider operation error.

        Args:
            message: Provider error message
            operation: Provider operation (create, update, delete)
            target: Logical or physical id the call acted on
            transient: Override the class default retry classification
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if target:
            details["target"] = target
        if transient is not None:
            self.transient = transient
        super().__init__(message, details)


class ProviderThrottlingError(ProviderOperationError):
    """Raised when the provider rejects a call because of rate limits."""

    transient = True


class ProviderTimeoutError(ProviderOperationError):
    """Raised when a provider call exceeds its deadline."""

    pass


class DestructiveChangeError(ReconcilerException):
    """Raised when a plan deletes or replaces stateful resources without approval."""

    def __init__(self, logical_ids: list[str], details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["logical_ids"] = logical_ids
        self.logical_ids = logical_ids
        super().__init__(
            f"Plan destroys stateful resources without approval: {', '.join(logical_ids)}",
            details,
        )
