"""
Command Runner
==============
Runs the external commands of the feedback loop (status check, failure
extraction, publish, git status) and returns structured results.

BOUNDARY RULES:
    - Runner ONLY executes and captures output.
    - Runner NEVER classifies build status, that is the StatusClassifier's job.
    - Runner NEVER decides whether a failure is tolerable, that is the Orchestrator's job.

COMMAND FORMS:
    - str        → interpreted by ``sh -c`` (pipes, redirects, variables work)
    - list[str]  → executed directly, no shell expansion

SECURITY:
    Shell strings come from plod.config.json and must be trusted. Never build
    a shell string from untrusted input; use the argv form instead.

CLEANUP:
    Every process is started in its own session. On timeout, cancellation or
    any other early exit the whole process group is killed before returning.
"""
import asyncio
import logging
import os
import shlex
import signal
from dataclasses import dataclass
from typing import List, Optional, Union

from plod.core.config import COMMAND_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

CommandSpec = Union[str, List[str]]


# ---------------------------------------------------------------------------
# Command Result / Error
# ---------------------------------------------------------------------------
@dataclass
class CommandResult:
    """
    Successful outcome of one command execution.

    Fields
    ------
    stdout : str
        Trimmed standard output.
    stderr : str
        Trimmed standard error.
    exit_code : int
        Always 0 for a returned result.
    """
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


class CommandExecutionError(Exception):
    """
    A command exited non-zero, timed out, or could not be started.

    ``exit_code`` is -1 for timeouts and spawn failures. ``stdout`` is kept
    so callers can salvage output from tools that exit non-zero on purpose.
    """

    def __init__(self, command: str, exit_code: int, stderr: str = "", stdout: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        message = f"Command failed ({exit_code}): {command}"
        detail = stderr or stdout
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def describe_command(spec: CommandSpec) -> str:
    """Render a command spec for logs and error messages."""
    if isinstance(spec, str):
        return spec
    return shlex.join(spec)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------
class CommandRunner:
    """
    Executes shell strings or argv lists with a timeout.

    Parameters
    ----------
    timeout_seconds : float
        Default timeout for every command (PLOD_COMMAND_TIMEOUT_SECONDS).
    cwd : str or None
        Working directory for spawned processes (default: current directory).
    """

    def __init__(self, timeout_seconds: float = COMMAND_TIMEOUT_SECONDS, cwd: Optional[str] = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.cwd = cwd

    async def run(self, spec: CommandSpec, timeout_seconds: Optional[float] = None) -> CommandResult:
        """
        Run a command and return its trimmed output.

        Raises
        ------
        CommandExecutionError
            Non-zero exit, timeout, or the program could not be started.
        """
        command = describe_command(spec)
        timeout = timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        logger.debug("Running command: %s (timeout %.0fs)", command, timeout)

        try:
            if isinstance(spec, str):
                proc = await asyncio.create_subprocess_shell(
                    spec,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=self.cwd,
                    start_new_session=True,
                )
            else:
                proc = await asyncio.create_subprocess_exec(
                    *spec,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=self.cwd,
                    start_new_session=True,
                )
        except OSError as exc:
            raise CommandExecutionError(command, -1, str(exc)) from exc

        try:
            stdout_b, stderr_b = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error("Command timed out after %.0fs: %s", timeout, command)
            raise CommandExecutionError(command, -1, f"Command timed out after {timeout:g} seconds")
        finally:
            if proc.returncode is None:
                await _kill(proc)

        stdout = stdout_b.decode("utf-8", errors="replace").strip()
        stderr = stderr_b.decode("utf-8", errors="replace").strip()

        if proc.returncode != 0:
            raise CommandExecutionError(command, proc.returncode, stderr, stdout)

        return CommandResult(stdout=stdout, stderr=stderr, exit_code=0)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill the process group of a still-running command and reap it."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        # Exited between the returncode check and the kill
        pass
    await proc.wait()
