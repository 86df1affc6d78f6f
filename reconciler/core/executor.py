"""
Change set executor.

Runs the entries of a ChangeSet against a provider, committing every
successful entry to the state store as it lands.

Scheduling:
- An entry starts once all of its blockers have succeeded; at most
  `max_concurrency` provider calls run at once.
- A failed entry skips every entry that transitively waits on it; unrelated
  entries keep running and in-flight entries always finish.
- Setting the cancel event stops new entries from starting; pending
  entries are skipped, in-flight entries finish.
- State is never rolled back. Each entry commits on its own, so a
  replacement whose delete_old succeeded and create_new failed leaves the
  logical id absent from state.
- An unexpected exception fails only its entry (internal_error). If apply
  itself is interrupted it waits for in-flight entries before re-raising.

Provider calls are bounded by `operation_timeout_seconds` and transient
errors (throttling) are retried with exponential backoff and jitter.

Dependencies: asyncio (stdlib), tenacity, reconciler.boundary
System role: Third stage of the build -> diff -> apply pipeline
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from reconciler.boundary.provider.base import ProviderResult, ResourceProvider
from reconciler.boundary.state.state_store import StateStore
from reconciler.configs import ExecutorSettings
from reconciler.core.exceptions import (
    ProviderOperationError,
    ProviderTimeoutError,
    ReferenceResolutionError,
    StateStoreError,
)
from reconciler.core.references import resolve_references
from reconciler.models.change_set import ChangeSet, ChangeSetEntry, Operation
from reconciler.models.report import (
    ApplyReport,
    EntryResult,
    EntryState,
    FailureReason,
    SkipCause,
)
from reconciler.models.resource import RemovalPolicy
from reconciler.models.state import DeployedResource
from reconciler.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ProviderOperationError) and error.transient


class Executor:
    """
    Applies change sets with bounded concurrency.

    Usage:
        executor = Executor(store, provider, settings.executor)
        report = await executor.apply(change_set)
    """

    def __init__(
        self,
        state_store: StateStore,
        provider: ResourceProvider,
        settings: ExecutorSettings | None = None,
    ) -> None:
        """
        Initialize executor.

        Args:
            state_store: Store receiving one commit per successful entry
            provider: Control plane used for create/update/delete
            settings: Concurrency, timeout and retry settings
        """
        self.state_store = state_store
        self.provider = provider
        self.settings = settings or ExecutorSettings()
        self._commit_lock = asyncio.Lock()

    async def apply(
        self,
        change_set: ChangeSet,
        cancel_event: asyncio.Event | None = None,
    ) -> ApplyReport:
        """
        Execute a change set.

        Args:
            change_set: Ordered entries produced by the differ
            cancel_event: When set, no further entries are started

        Returns:
            ApplyReport: Terminal state of every entry
        """
        run = _Run(change_set)
        cancel_waiter = asyncio.create_task(cancel_event.wait()) if cancel_event else None
        running: dict[asyncio.Task, str] = {}

        logger.info(f"{__name__}:apply - Applying {len(change_set)} entries")
        try:
            while True:
                if cancel_event is not None and cancel_event.is_set() and not run.cancelled:
                    run.cancel()
                    logger.warning(f"{__name__}:apply - Cancellation requested, no new entries start")

                if not run.cancelled:
                    for entry in run.ready(self.settings.max_concurrency - len(running)):
                        task = asyncio.create_task(self._execute(entry, run))
                        running[task] = entry.entry_id

                if not running:
                    break

                waitables: set[asyncio.Future] = set(running)
                if cancel_waiter is not None and not cancel_waiter.done():
                    waitables.add(cancel_waiter)
                done, _ = await asyncio.wait(waitables, return_when=asyncio.FIRST_COMPLETED)

                for task in done:
                    entry_id = running.pop(task, None)
                    if entry_id is None:
                        continue
                    # _execute records every expected failure on the result
                    task.result()
                    if run.results[entry_id].state == EntryState.FAILED:
                        run.fail(entry_id)
        except BaseException:
            if running:
                logger.warning(
                    f"{__name__}:apply - Run interrupted, waiting for {len(running)} in-flight entries"
                )
                await asyncio.wait(running)
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        report = run.report()
        counts = ", ".join(f"{state.value}={n}" for state, n in report.counts.items())
        logger.info(
            f"{__name__}:apply - Run finished ({counts or 'empty'}), "
            f"{report.applied_count} applied"
        )
        return report

    async def _execute(self, entry: ChangeSetEntry, run: "_Run") -> None:
        """Run one entry to a terminal state, recording the outcome on its result."""
        result = run.results[entry.entry_id]
        result.state = EntryState.IN_FLIGHT
        log_with_context(
            logger,
            logging.DEBUG,
            f"{__name__}:_execute - Starting {entry.describe()}",
            entry_id=entry.entry_id,
            operation=entry.operation,
        )

        try:
            if entry.removes_physical:
                await self._remove(entry, result)
            else:
                await self._provision(entry, result, run)
        except ProviderTimeoutError as e:
            self._record_failure(entry, result, FailureReason.TIMEOUT, e)
        except ProviderOperationError as e:
            self._record_failure(entry, result, FailureReason.PROVIDER_ERROR, e)
        except StateStoreError as e:
            self._record_failure(entry, result, FailureReason.STATE_STORE_ERROR, e)
        except ReferenceResolutionError as e:
            self._record_failure(entry, result, FailureReason.RESOLUTION_ERROR, e)
        except Exception as e:
            self._record_failure(entry, result, FailureReason.INTERNAL_ERROR, e)
        else:
            result.state = EntryState.SUCCEEDED
            logger.info(f"{__name__}:_execute - {entry.describe()} succeeded")

    async def _remove(self, entry: ChangeSetEntry, result: EntryResult) -> None:
        """Delete (or forget, for retained resources) the prior physical resource."""
        prior = entry.prior
        result.physical_id = prior.physical_id
        if prior.removal_policy == RemovalPolicy.RETAIN:
            logger.info(
                f"{__name__}:_remove - Retaining {entry.logical_id} ({prior.physical_id}), "
                f"removing it from state only"
            )
        else:
            await self._call_provider(
                entry,
                result,
                lambda: self.provider.delete(prior.kind, prior.physical_id),
            )
        await self._commit(entry.logical_id, None)

    async def _provision(self, entry: ChangeSetEntry, result: EntryResult, run: "_Run") -> None:
        """Create or update the desired resource and commit it."""
        node = entry.desired
        properties = resolve_references(node.properties, run.lookup)

        provider_result: ProviderResult
        if entry.operation == Operation.UPDATE:
            provider_result = await self._call_provider(
                entry,
                result,
                lambda: self.provider.update(
                    node.kind,
                    entry.prior.physical_id,
                    properties,
                    list(entry.changed_properties),
                ),
            )
        else:
            provider_result = await self._call_provider(
                entry,
                result,
                lambda: self.provider.create(node.kind, node.logical_id, properties),
            )

        result.physical_id = provider_result.physical_id
        deployed = DeployedResource(
            physical_id=provider_result.physical_id,
            kind=node.kind,
            properties=node.properties,
            outputs=provider_result.outputs,
            dependencies=list(node.dependencies),
            removal_policy=node.removal_policy,
        )
        await self._commit(entry.logical_id, deployed)
        run.known[entry.logical_id] = deployed

    async def _call_provider(
        self,
        entry: ChangeSetEntry,
        result: EntryResult,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Invoke a provider operation with a deadline and transient-error retries.

        Args:
            entry: Entry being executed
            result: Result whose attempt counter is updated
            call: Zero-argument coroutine factory for the provider call

        Returns:
            Whatever the provider call returns

        Raises:
            ProviderTimeoutError: If an attempt exceeds the deadline
            ProviderOperationError: If the call fails permanently or retries run out
        """
        timeout = self.settings.operation_timeout_seconds
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.settings.max_attempts),
            wait=wait_exponential_jitter(
                multiplier=self.settings.retry_initial_backoff_seconds,
                max=self.settings.retry_max_backoff_seconds,
                jitter=self.settings.retry_jitter_seconds,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_call_provider - Retry {retry_state.attempt_number}/"
                f"{self.settings.max_attempts} for {entry.entry_id} after transient error"
            ),
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                result.attempts += 1
                try:
                    return await asyncio.wait_for(call(), timeout=timeout)
                except asyncio.TimeoutError as e:
                    raise ProviderTimeoutError(
                        f"Provider call exceeded {timeout}s",
                        operation=entry.operation.value,
                        target=entry.logical_id,
                    ) from e
                except ProviderOperationError:
                    raise
                except Exception as e:
                    raise ProviderOperationError(
                        f"Provider call failed: {e}",
                        operation=entry.operation.value,
                        target=entry.logical_id,
                    ) from e

    async def _commit(self, logical_id: str, resource: DeployedResource | None) -> None:
        async with self._commit_lock:
            await self.state_store.commit(logical_id, resource)

    @staticmethod
    def _record_failure(
        entry: ChangeSetEntry,
        result: EntryResult,
        reason: FailureReason,
        error: Exception,
    ) -> None:
        result.state = EntryState.FAILED
        result.failure_reason = reason
        result.error = getattr(error, "message", str(error))
        log_exception_with_context(
            logger,
            f"{__name__}:_execute - {entry.describe()} failed ({reason.value})",
            error,
            entry_id=entry.entry_id,
            attempts=result.attempts,
        )


class _Run:
    """Mutable bookkeeping for one apply call."""

    def __init__(self, change_set: ChangeSet) -> None:
        self.entries = list(change_set.entries)
        self.cancelled = False
        self.first_failure_id: str | None = None
        self.results: dict[str, EntryResult] = {
            entry.entry_id: EntryResult(
                entry_id=entry.entry_id,
                logical_id=entry.logical_id,
                operation=entry.operation,
                phase=entry.phase,
            )
            for entry in self.entries
        }

        self.dependents: dict[str, list[str]] = {entry.entry_id: [] for entry in self.entries}
        for entry in self.entries:
            for blocker in entry.blockers:
                if blocker in self.dependents:
                    self.dependents[blocker].append(entry.entry_id)

        # Values references resolve to; replaced resources are unknown until recreated
        self.known: dict[str, DeployedResource] = {}
        for entry in self.entries:
            if entry.prior is not None and entry.operation in (Operation.NOOP, Operation.UPDATE):
                self.known[entry.logical_id] = entry.prior

    def lookup(self, logical_id: str, attribute: str | None) -> Any:
        """Resolve a Ref (attribute None) or Fn::GetAtt against known resources."""
        deployed = self.known.get(logical_id)
        if deployed is None:
            raise ReferenceResolutionError(logical_id, attribute)
        if attribute is None:
            return deployed.physical_id
        if attribute not in deployed.outputs:
            raise ReferenceResolutionError(logical_id, attribute)
        return deployed.outputs[attribute]

    def ready(self, capacity: int) -> list[ChangeSetEntry]:
        """
        Entries that can start now, in change-set order.

        No-op entries complete here without a provider call and do not use
        capacity; completing one can unblock later entries in the same pass.
        """
        started: list[ChangeSetEntry] = []
        progressed = True
        while progressed:
            progressed = False
            for entry in self.entries:
                result = self.results[entry.entry_id]
                if result.state != EntryState.PENDING or not self._unblocked(entry):
                    continue
                if entry.operation == Operation.NOOP:
                    result.state = EntryState.SUCCEEDED
                    result.physical_id = entry.prior.physical_id if entry.prior else None
                    progressed = True
                elif len(started) < capacity:
                    result.state = EntryState.IN_FLIGHT
                    started.append(entry)
        return started

    def _unblocked(self, entry: ChangeSetEntry) -> bool:
        return all(
            self.results[blocker].state == EntryState.SUCCEEDED
            for blocker in entry.blockers
            if blocker in self.results
        )

    def fail(self, entry_id: str) -> None:
        """Skip every pending entry that transitively waits on a failed entry."""
        if self.first_failure_id is None:
            self.first_failure_id = entry_id
        failed = self.results[entry_id]
        queue = list(self.dependents[entry_id])
        while queue:
            dependent_id = queue.pop(0)
            dependent = self.results[dependent_id]
            if dependent.state != EntryState.PENDING:
                continue
            dependent.state = EntryState.SKIPPED
            dependent.skip_cause = SkipCause.DEPENDENCY_FAILED
            dependent.blocked_by = entry_id
            failed.skipped_dependents.append(dependent_id)
            queue.extend(self.dependents[dependent_id])
        if failed.skipped_dependents:
            logger.warning(
                f"{__name__}:fail - {entry_id} failed, skipping {', '.join(failed.skipped_dependents)}"
            )

    def cancel(self) -> None:
        """Skip every entry that has not started."""
        self.cancelled = True
        for result in self.results.values():
            if result.state == EntryState.PENDING:
                result.state = EntryState.SKIPPED
                result.skip_cause = SkipCause.CANCELLED

    def report(self) -> ApplyReport:
        return ApplyReport(
            results=[self.results[entry.entry_id] for entry in self.entries],
            first_failure_id=self.first_failure_id,
            cancelled=self.cancelled,
        )
