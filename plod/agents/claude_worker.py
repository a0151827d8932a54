"""
Claude Worker
=============
Runs a Claude Agent SDK session in the current working directory to fix
build failures. The agent edits files directly (permission mode acceptEdits);
plod only collects its textual output.

Streaming Model:
    The SDK yields messages over time. They are consumed here, inside one
    timeout that spans the whole session, and folded into a bounded text
    accumulator. Callers only ever see the final WorkResult.

The Claude Worker does NOT:
    - Publish anything (that's the publish command's job)
    - Detect working-tree changes (that's git_agent's job)
    - Retry on failure (a failed session aborts the run)
"""
import asyncio
import json
import logging
import os
from collections import deque
from typing import Optional

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    SystemMessage,
    TextBlock,
    query,
)

from plod.agents.workers import RemediationError, WorkResult, build_prompt
from plod.core.config import AGENT_MAX_TURNS, AGENT_MODEL, AGENT_TIMEOUT_MINUTES
from plod.core.constants import (
    AGENT_ALLOWED_TOOLS,
    AGENT_PERMISSION_MODE,
    AGENT_SETTING_SOURCES,
)
from plod.models.run_config import WorkConfig

logger = logging.getLogger(__name__)

_PROMPT_PREVIEW_CHARS = 500
_MAX_OUTPUT_CHARS = 200_000


class _OutputAccumulator:
    """Keeps the most recent text chunks up to a character budget."""

    def __init__(self, max_chars: int = _MAX_OUTPUT_CHARS) -> None:
        self.max_chars = max_chars
        self._chunks: deque = deque()
        self._size = 0
        self.truncated = False

    def add(self, text: str) -> None:
        if not text:
            return
        self._chunks.append(text)
        self._size += len(text)
        while self._size > self.max_chars and len(self._chunks) > 1:
            dropped = self._chunks.popleft()
            self._size -= len(dropped)
            self.truncated = True

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    def text(self) -> str:
        joined = "".join(self._chunks)
        if len(joined) > self.max_chars:
            self.truncated = True
            return joined[-self.max_chars:]
        return joined


class ClaudeWorker:
    """
    Remediation agent backed by the Claude Agent SDK.

    Parameters
    ----------
    model : str
        Model alias for the session (PLOD_AGENT_MODEL).
    max_turns : int
        Upper bound on agent turns (PLOD_AGENT_MAX_TURNS).
    cwd : str or None
        Directory the agent works in (default: current directory).
    """

    def __init__(
        self,
        model: str = AGENT_MODEL,
        max_turns: int = AGENT_MAX_TURNS,
        cwd: Optional[str] = None,
    ) -> None:
        self.model = model
        self.max_turns = max_turns
        self.cwd = cwd

    async def work(
        self,
        work_config: WorkConfig,
        failure_details: str,
        timeout_minutes: float = AGENT_TIMEOUT_MINUTES,
    ) -> WorkResult:
        """Run one agent session; raise RemediationError on any failure."""
        prompt = build_prompt(work_config, failure_details)
        logger.info(json.dumps({
            "event": "claude_prompt",
            "promptLength": len(prompt),
            "promptPreview": prompt[:_PROMPT_PREVIEW_CHARS],
        }))

        try:
            return await asyncio.wait_for(self._session(prompt), timeout=timeout_minutes * 60)
        except asyncio.TimeoutError as exc:
            raise RemediationError(f"Claude agent timed out after {timeout_minutes:g} minutes", exc) from exc
        except RemediationError:
            raise
        except Exception as exc:
            raise RemediationError("Failed to run Claude agent", exc) from exc

    def _options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            cwd=self.cwd or os.getcwd(),
            max_turns=self.max_turns,
            model=self.model,
            permission_mode=AGENT_PERMISSION_MODE,
            allowed_tools=list(AGENT_ALLOWED_TOOLS),
            setting_sources=list(AGENT_SETTING_SOURCES),
        )

    async def _session(self, prompt: str) -> WorkResult:
        output = _OutputAccumulator()
        success = True

        async for message in query(prompt=prompt, options=self._options()):
            logger.debug(json.dumps({"event": "claude_message", "messageType": type(message).__name__}))

            if isinstance(message, AssistantMessage):
                for block in message.content:
                    if isinstance(block, TextBlock):
                        output.add(block.text)
            elif isinstance(message, ResultMessage):
                success = not message.is_error
                logger.info(json.dumps({
                    "event": "claude_result",
                    "isError": message.is_error,
                    "numTurns": getattr(message, "num_turns", None),
                }))
            elif isinstance(message, SystemMessage):
                logger.debug(json.dumps({"event": "claude_system", "subtype": getattr(message, "subtype", "")}))

        text = output.text()
        logger.info(json.dumps({
            "event": "claude_complete",
            "chunks": output.chunk_count,
            "outputLength": len(text),
            "truncated": output.truncated,
        }))
        return WorkResult(success=success, output=text)
