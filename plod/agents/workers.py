"""
Remediation Workers
===================
Shared contract for the agents that edit the working tree after a failure.

A worker receives the WorkConfig from plod.config.json plus the extracted
failure text, splices the text into the configured prompt, runs the agent,
and returns a WorkResult. It never publishes, never checks for changes and
never retries; those decisions belong to the Orchestrator.

Backends:
    sdk — Claude Agent SDK session in-process (claude_worker.ClaudeWorker)
    cli — spawn work.command with work.args (cli_worker.CliWorker)
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from plod.core.config import AGENT_TIMEOUT_MINUTES
from plod.core.constants import PROMPT_FLAG, PROMPT_HEADER
from plod.models.run_config import WorkConfig


@dataclass
class WorkResult:
    """Final outcome of one agent session."""
    success: bool
    output: str = ""


class RemediationError(Exception):
    """The work config was malformed, the agent failed, or it timed out."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class RemediationAgent(Protocol):
    async def work(
        self,
        work_config: WorkConfig,
        failure_details: str,
        timeout_minutes: float = AGENT_TIMEOUT_MINUTES,
    ) -> WorkResult:
        ...


def prompt_index(work_config: WorkConfig) -> int:
    """
    Return the index in ``work_config.args`` holding the prompt text.

    Raises
    ------
    RemediationError
        If the -p flag is missing or has no value after it.
    """
    args = work_config.args
    try:
        flag_index = args.index(PROMPT_FLAG)
    except ValueError:
        flag_index = -1
    if flag_index == -1 or flag_index >= len(args) - 1:
        raise RemediationError(f"Invalid work config: {PROMPT_FLAG} flag requires a prompt argument")
    return flag_index + 1


def build_prompt(work_config: WorkConfig, failure_details: str) -> str:
    """Splice the failure details in front of the configured prompt."""
    prompt = work_config.args[prompt_index(work_config)]
    return f"{PROMPT_HEADER}\n\n{failure_details}\n\n{prompt}"


def create_worker(work_config: WorkConfig) -> RemediationAgent:
    """Instantiate the backend selected by ``work.backend``."""
    if work_config.backend == "cli":
        from plod.agents.cli_worker import CliWorker
        return CliWorker()
    from plod.agents.claude_worker import ClaudeWorker
    return ClaudeWorker()
