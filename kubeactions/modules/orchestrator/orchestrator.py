"""
Mutation Orchestrator - sequences the kubectl steps of a request.

Create Deployment and Create Service are two steps (create, then label);
everything else is a single step. Steps run strictly in order and the first
failure aborts the rest. Nothing is retried or rolled back.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from kubeactions.modules.commands import (
    DEFAULT_BINARY,
    CommandSpec,
    MutationRequest,
    Operation,
    ResourceKind,
    build,
    build_label,
    build_list,
)
from kubeactions.modules.errors import (
    ExecutionError,
    NonZeroExitError,
    PartialFailureError,
)
from kubeactions.modules.executor import ExecutionResult, ProcessExecutor
from kubeactions.modules.resources import ResourceRef, parse_resource_names

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    """Overall result of an orchestrated request."""

    FULL_SUCCESS = "full_success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


@dataclass(frozen=True)
class OrchestrationOutcome:
    """What was planned, what ran, and how it ended."""

    requested_steps: Tuple[CommandSpec, ...]
    completed_steps: Tuple[ExecutionResult, ...]
    status: OutcomeStatus
    error: Optional[ExecutionError] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.FULL_SUCCESS

    @property
    def output(self) -> str:
        """Stdout of every successful step, joined by newlines."""
        return "\n".join(step.stdout for step in self.completed_steps if step.success)

    @property
    def commands(self) -> List[str]:
        return [spec.display() for spec in self.requested_steps]

    def raise_for_status(self) -> None:
        """
        Raise the error matching a non-successful outcome.

        Raises:
            SpawnError / CommandTimeoutError: The executor failed on the first step
            NonZeroExitError: The first step exited non-zero; message is its stderr
            PartialFailureError: A later step exited non-zero or could not run
        """
        if self.succeeded:
            return

        if self.error is not None:
            if self.status is not OutcomeStatus.PARTIAL_SUCCESS:
                raise self.error
            failed_index = len(self.completed_steps)
            message = self.error.message
        else:
            failed = self.completed_steps[-1]
            failed_index = len(self.completed_steps) - 1
            message = failed.stderr.strip() or f"kubectl exited with code {failed.exit_code}"
            if self.status is not OutcomeStatus.PARTIAL_SUCCESS:
                raise NonZeroExitError(message, failed.exit_code)

        failed_spec = self.requested_steps[failed_index]
        raise PartialFailureError(
            f"Step {failed_index + 1} ({failed_spec.display()}) failed "
            f"after earlier steps succeeded: {message}",
            completed_output=self.output,
        ) from self.error


class MutationOrchestrator:
    """Runs mutation requests through builder and executor."""

    def __init__(
        self,
        executor: ProcessExecutor,
        binary: str = DEFAULT_BINARY,
        timeout: Optional[float] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            executor: Anything with ``async run(spec, timeout)``
            binary: kubectl executable handed to the builder
            timeout: Per-process timeout; None defers to the executor default
        """
        self.executor = executor
        self.binary = binary
        self.timeout = timeout

    def plan(self, request: MutationRequest) -> List[CommandSpec]:
        """Return the ordered steps a request will run."""
        steps = [build(request, self.binary)]
        if self._needs_label(request):
            # expose always creates a Service, whatever kind was requested
            kind = (
                ResourceKind.SERVICE
                if request.operation is Operation.EXPOSE
                else request.kind
            )
            steps.append(build_label(kind, request.name, request.namespace, self.binary))
        return steps

    async def execute(self, request: MutationRequest) -> OrchestrationOutcome:
        """Plan and run a mutation request."""
        logger.info(
            f"Executing {request.operation.value} {request.kind.value} "
            f"{' '.join(request.names)} in namespace {request.namespace}"
        )
        return await self.run(self.plan(request))

    async def run(self, steps: Sequence[CommandSpec]) -> OrchestrationOutcome:
        """
        Run prebuilt steps sequentially.

        Status rules:
        1. Every step exits 0 -> FULL_SUCCESS
        2. First step exits non-zero or the executor raises on it -> FAILURE
        3. A later step exits non-zero or the executor raises on it -> PARTIAL_SUCCESS
        """
        steps = tuple(steps)
        completed: List[ExecutionResult] = []

        for index, spec in enumerate(steps):
            try:
                result = await self.executor.run(spec, self.timeout)
            except ExecutionError as e:
                logger.error(f"Step {index + 1}/{len(steps)} could not run: {e}")
                return OrchestrationOutcome(
                    requested_steps=steps,
                    completed_steps=tuple(completed),
                    status=OutcomeStatus.FAILURE if index == 0 else OutcomeStatus.PARTIAL_SUCCESS,
                    error=e,
                )

            completed.append(result)
            if not result.success:
                status = OutcomeStatus.FAILURE if index == 0 else OutcomeStatus.PARTIAL_SUCCESS
                logger.error(
                    f"Step {index + 1}/{len(steps)} failed with code {result.exit_code}: "
                    f"{result.stderr.strip()}"
                )
                return OrchestrationOutcome(
                    requested_steps=steps,
                    completed_steps=tuple(completed),
                    status=status,
                )
            logger.info(f"Step {index + 1}/{len(steps)} succeeded: {result.stdout.strip()}")

        return OrchestrationOutcome(
            requested_steps=steps,
            completed_steps=tuple(completed),
            status=OutcomeStatus.FULL_SUCCESS,
        )

    async def list_resources(self, kind: str, namespace: str) -> List[ResourceRef]:
        """
        List existing objects of a kind.

        Raises:
            KubeActionsError: The listing failed
        """
        outcome = await self.run([build_list(kind, namespace, self.binary)])
        outcome.raise_for_status()
        return parse_resource_names(kind, outcome.completed_steps[-1].stdout)

    @staticmethod
    def _needs_label(request: MutationRequest) -> bool:
        if request.operation is Operation.EXPOSE:
            return True
        return request.operation is Operation.CREATE and request.kind in (
            ResourceKind.DEPLOYMENT,
            ResourceKind.SERVICE,
        )
