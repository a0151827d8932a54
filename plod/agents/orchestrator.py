"""
Orchestrator
============
The central loop of plod. Drives the Poll → Detect → Fix → Publish → Re-poll
feedback cycle until the build succeeds, the wall-clock budget runs out, or
the remediation cap is hit.

Cycle (one pass of the loop):
    1. Budget check     — elapsed > max_poll_time → final status check, stop
    2. Poll             — run the status command, classify its output
         success        → record, stop
         pending        → record, sleep interval, next cycle
         failure        → continue
    3. Failure gate     — attempts == max_work_iterations → stop (cap reached)
    4. Remediate        — sleep grace period (3 × interval) so CI logs settle,
                          extract failures, run the remediation agent
    5. Change check     — git status --porcelain
         no changes     → record, sleep interval, next cycle (nothing to publish)
         changes        → record, publish, sleep interval, next cycle

Guardrails:
    - Budget is checked at the top of a cycle only; a remediation already in
      progress is allowed to finish.
    - The attempt counter grows once per observed failure that passes the gate,
      whether or not the agent changed anything. Pending cycles never consume it.
    - The failure-extraction command may exit non-zero; if it printed anything
      that output is the failure detail. This is the only tolerated error.
    - Every other command or agent error aborts the run and propagates.
      No partial RunResult is returned.
"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from plod.agents.git_agent import GitAgent
from plod.agents.workers import RemediationAgent, RemediationError, create_worker
from plod.core.config import AGENT_TIMEOUT_MINUTES
from plod.core.constants import FAILURE_WAIT_MULTIPLIER
from plod.executor.command_runner import CommandExecutionError, CommandResult, CommandRunner
from plod.models.iteration_record import IterationRecord
from plod.models.run_config import RunConfig
from plod.models.run_result import RunResult, TerminationReason
from plod.parser.status_classifier import BuildStatus, classify
from plod.utils.events import EventSink, LoggingEventSink, RunEvent

logger = logging.getLogger(__name__)

_DETAILS_PREVIEW_CHARS = 200

OrchestratorError = (CommandExecutionError, RemediationError)


class Orchestrator:
    """
    Runs the build feedback loop for one RunConfig.

    Parameters
    ----------
    runner : CommandRunner or None
        Executes status / extraction / publish commands.
    worker : RemediationAgent or None
        Edits the workspace. Built from ``config.work`` when omitted.
    git_agent : GitAgent or None
        Detects pending changes after the agent ran.
    events : EventSink or None
        Receives structured progress events (default: JSON log lines).
    agent_timeout_minutes : float
        Timeout for one agent session (PLOD_AGENT_TIMEOUT_MINUTES).
    clock : callable
        Monotonic seconds source, injectable for tests.
    sleep : callable
        Async sleep, injectable for tests.

    A run is not re-entrant; use one Orchestrator per concurrent run.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        worker: Optional[RemediationAgent] = None,
        git_agent: Optional[GitAgent] = None,
        events: Optional[EventSink] = None,
        agent_timeout_minutes: float = AGENT_TIMEOUT_MINUTES,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.runner = runner or CommandRunner()
        self.worker = worker
        self.git_agent = git_agent or GitAgent(self.runner)
        self.events = events or LoggingEventSink()
        self.agent_timeout_minutes = agent_timeout_minutes
        self._clock = clock
        self._sleep = sleep

    def _emit(self, kind: str, **detail) -> None:
        self.events.emit(RunEvent(kind=kind, detail=detail))

    async def run(self, config: RunConfig) -> RunResult:
        """Execute the full feedback loop."""
        try:
            return await self._loop(config)
        except OrchestratorError as exc:
            self._emit("run_aborted", error=type(exc).__name__, message=str(exc))
            raise

    async def _loop(self, config: RunConfig) -> RunResult:
        polling = config.polling
        worker = self.worker or create_worker(config.work)

        iterations: List[IterationRecord] = []
        work_iteration = 0
        cycle = 0
        failure_wait_seconds = polling.interval_seconds * FAILURE_WAIT_MULTIPLIER
        max_poll_seconds = polling.max_poll_time_minutes * 60
        start = self._clock()

        def finish(status: BuildStatus, reason: TerminationReason) -> RunResult:
            elapsed = self._clock() - start
            self._emit(
                "run_terminated",
                reason=reason,
                finalStatus=status,
                iterations=len(iterations),
                workIterations=work_iteration,
            )
            return RunResult(
                iterations=list(iterations),
                final_status=status,
                max_iterations_reached=reason == "iteration_cap",
                termination_reason=reason,
                elapsed_seconds=round(elapsed, 2),
            )

        def record(status: BuildStatus, worked_on: bool) -> None:
            iterations.append(IterationRecord(
                cycle=cycle,
                work_iteration=work_iteration,
                status=status,
                worked_on=worked_on,
            ))

        while True:
            # --- (1) Budget check ---
            elapsed = self._clock() - start
            if elapsed > max_poll_seconds:
                self._emit("max_poll_time_exceeded", elapsedMinutes=int(elapsed // 60))
                final_status = await self._check_status(config)
                return finish(final_status, "budget_exceeded")

            cycle += 1
            self._emit("cycle_started", cycle=cycle, workIteration=work_iteration)

            # --- (2) Poll ---
            status = await self._check_status(config)

            if status == "success":
                record(status, worked_on=False)
                self._emit("build_succeeded")
                return finish(status, "success")

            if status == "pending":
                record(status, worked_on=False)
                await self._sleep(polling.interval_seconds)
                continue

            # --- (3) Failure gate ---
            if work_iteration >= polling.max_work_iterations:
                self._emit("max_work_iterations_reached", count=work_iteration)
                return finish(status, "iteration_cap")

            work_iteration += 1
            self._emit(
                "work_iteration_start",
                iteration=work_iteration,
                maxWorkIterations=polling.max_work_iterations,
            )

            # --- (4) Remediate ---
            self._emit("waiting_for_logs", waitingForLogs=failure_wait_seconds)
            await self._sleep(failure_wait_seconds)

            failure_details = await self._extract_failures(config)
            self._emit(
                "failures_extracted",
                detailsLength=len(failure_details),
                detailsPreview=failure_details[:_DETAILS_PREVIEW_CHARS],
            )

            self._emit("claude_started", iteration=work_iteration)
            work_result = await worker.work(
                config.work, failure_details, timeout_minutes=self.agent_timeout_minutes
            )
            self._emit(
                "claude_finished",
                success=work_result.success,
                outputLength=len(work_result.output),
            )
            if not work_result.output:
                logger.warning("Agent completed but produced no text output")

            # --- (5) Change check ---
            if not await self.git_agent.has_pending_changes():
                self._emit("no_changes", message="Agent made no changes, skipping publish")
                record(status, worked_on=True)
                await self._sleep(polling.interval_seconds)
                continue

            record(status, worked_on=True)

            self._emit("publishing_changes")
            await self.runner.run(config.commands.publish)
            self._emit("fixes_published", iteration=work_iteration)

            await self._sleep(polling.interval_seconds)

    async def _check_status(self, config: RunConfig) -> BuildStatus:
        result = await self.runner.run(config.commands.check_build_status)
        status = classify(result.stdout)
        self._emit("build_status", status=status)
        return status

    async def _extract_failures(self, config: RunConfig) -> str:
        """
        Run the failure-extraction command.

        Many extraction tools exit non-zero precisely because failures exist.
        Such an error is tolerated when the command printed anything.
        """
        try:
            result: CommandResult = await self.runner.run(config.commands.check_build_failures)
        except CommandExecutionError as exc:
            if not (exc.stdout or exc.stderr):
                raise
            self._emit("failures_tolerated", exitCode=exc.exit_code)
            result = CommandResult(stdout=exc.stdout, stderr=exc.stderr, exit_code=exc.exit_code)
        return result.stdout or result.stderr
