"""
Apply report models.

Run-level report produced by the executor: one result per change-set entry
with its terminal state, plus aggregate counts and the first failure.

Dependencies: pydantic
System role: User-visible outcome of an apply run
"""

import enum
from collections import Counter

from pydantic import BaseModel, Field

from reconciler.models.change_set import Operation, ReplacePhase


class EntryState(str, enum.Enum):
    """
    Executor state machine for a single entry.

    PENDING: Waiting for blockers
    IN_FLIGHT: Provider call running
    SUCCEEDED: Provider call done and state committed
    FAILED: Provider call or commit failed
    SKIPPED: Not attempted (a blocker failed or the run was cancelled)
    """

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class FailureReason(str, enum.Enum):
    """Why an entry failed."""

    PROVIDER_ERROR = "provider_error"
    TIMEOUT = "timeout"
    STATE_STORE_ERROR = "state_store_error"
    RESOLUTION_ERROR = "resolution_error"
    INTERNAL_ERROR = "internal_error"


class SkipCause(str, enum.Enum):
    """Why an entry was skipped."""

    DEPENDENCY_FAILED = "dependency_failed"
    CANCELLED = "cancelled"


class EntryResult(BaseModel):
    """Terminal outcome of one change-set entry."""

    entry_id: str
    logical_id: str
    operation: Operation
    phase: ReplacePhase | None = None
    state: EntryState = EntryState.PENDING
    physical_id: str | None = None
    attempts: int = Field(default=0, description="Provider call attempts, retries included")
    failure_reason: FailureReason | None = None
    error: str | None = Field(default=None, description="Underlying error message")
    skip_cause: SkipCause | None = None
    blocked_by: str | None = Field(
        default=None,
        description="Failed entry whose failure caused this skip",
    )
    skipped_dependents: list[str] = Field(
        default_factory=list,
        description="Entries skipped because this entry failed",
    )


class ApplyReport(BaseModel):
    """Structured summary of an apply run."""

    results: list[EntryResult] = Field(default_factory=list)
    first_failure_id: str | None = None
    cancelled: bool = False

    def get(self, entry_id: str) -> EntryResult | None:
        """Look up an entry result by id."""
        for result in self.results:
            if result.entry_id == entry_id:
                return result
        return None

    @property
    def counts(self) -> dict[EntryState, int]:
        """Number of entries per terminal state."""
        return dict(Counter(result.state for result in self.results))

    @property
    def applied_count(self) -> int:
        """Succeeded entries that changed something."""
        return sum(
            1
            for result in self.results
            if result.state == EntryState.SUCCEEDED and result.operation != Operation.NOOP
        )

    @property
    def first_failure(self) -> EntryResult | None:
        """Result of the entry that failed first."""
        if self.first_failure_id is None:
            return None
        return self.get(self.first_failure_id)

    @property
    def succeeded(self) -> bool:
        """True when every entry succeeded."""
        return all(result.state == EntryState.SUCCEEDED for result in self.results)

    def resource_states(self) -> dict[str, EntryState]:
        """
        Terminal state per logical id.

        A replacement has two entries; the worse of the two wins
        (failed over skipped over succeeded).
        """
        rank = {
            EntryState.SUCCEEDED: 0,
            EntryState.SKIPPED: 1,
            EntryState.FAILED: 2,
            EntryState.IN_FLIGHT: 3,
            EntryState.PENDING: 3,
        }
        states: dict[str, EntryState] = {}
        for result in self.results:
            current = states.get(result.logical_id)
            if current is None or rank[result.state] > rank[current]:
                states[result.logical_id] = result.state
        return states

    def summary_lines(self) -> list[str]:
        """Human-readable lines: one per entry, failures with their skipped chain."""
        lines = []
        for result in self.results:
            line = f"{result.entry_id}: {result.state.value}"
            if result.state == EntryState.FAILED:
                line += f" ({result.failure_reason.value if result.failure_reason else 'error'}: {result.error})"
                if result.skipped_dependents:
                    line += f" -> skipped {', '.join(result.skipped_dependents)}"
            elif result.state == EntryState.SKIPPED and result.skip_cause:
                line += f" ({result.skip_cause.value}"
                line += f" via {result.blocked_by})" if result.blocked_by else ")"
            lines.append(line)
        return lines
