"""
CLI Worker
==========
Remediation agent that spawns ``work.command`` with ``work.args`` as a
subprocess (e.g. ``claude -p "<prompt>" --permission-mode acceptEdits``).

The argument following ``-p`` is replaced by the full prompt (failure details
+ configured prompt). Arguments are passed as an argv list, never through a
shell, so failure text cannot be interpreted as shell syntax.
"""
import logging
from typing import Optional

from plod.agents.workers import RemediationError, WorkResult, build_prompt, prompt_index
from plod.core.config import AGENT_TIMEOUT_MINUTES
from plod.executor.command_runner import CommandExecutionError, CommandRunner
from plod.models.run_config import WorkConfig

logger = logging.getLogger(__name__)


class CliWorker:
    """Runs the configured agent CLI through a CommandRunner."""

    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or CommandRunner()

    async def work(
        self,
        work_config: WorkConfig,
        failure_details: str,
        timeout_minutes: float = AGENT_TIMEOUT_MINUTES,
    ) -> WorkResult:
        args = list(work_config.args)
        args[prompt_index(work_config)] = build_prompt(work_config, failure_details)
        argv = [work_config.command, *args]

        logger.info("Starting agent CLI: %s (timeout %g min)", work_config.command, timeout_minutes)
        try:
            result = await self.runner.run(argv, timeout_seconds=timeout_minutes * 60)
        except CommandExecutionError as exc:
            raise RemediationError(f"Agent command failed: {exc}", exc) from exc

        return WorkResult(success=True, output=result.stdout)
