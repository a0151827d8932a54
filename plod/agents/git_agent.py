"""
Git Agent
=========
Inspects the working tree after a remediation attempt.
Publishing itself is delegated to the configured publish command.
"""
import logging
from typing import List, Optional

from plod.core.constants import GIT_STATUS_COMMAND
from plod.executor.command_runner import CommandRunner

logger = logging.getLogger(__name__)


class GitAgent:
    """
    Agent responsible for detecting pending changes in the local workspace.
    """

    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or CommandRunner()

    async def changed_paths(self) -> List[str]:
        """
        Return paths with pending changes, tracked or untracked.

        Parses ``git status --porcelain`` lines of the form ``XY path``.
        Errors from git propagate as CommandExecutionError.
        """
        result = await self.runner.run(list(GIT_STATUS_COMMAND))
        paths = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            # stdout is trimmed, so the first line may have lost its leading space
            entry = line[3:] if len(line) > 3 and line[2] == " " else line[2:]
            paths.append(entry.strip())
        return paths

    async def has_pending_changes(self) -> bool:
        paths = await self.changed_paths()
        logger.info("Working tree has %d changed path(s)", len(paths))
        return bool(paths)
