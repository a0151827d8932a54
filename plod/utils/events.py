"""
Run Events
==========
Structured notifications emitted by the Orchestrator while it runs.

The Orchestrator never logs its decisions directly; it emits RunEvents to a
sink. The default sink writes one JSON object per event to the ``plod.events``
logger. Tests swap in a RecordingEventSink (or NullEventSink to mute).

Event kinds:
    cycle_started, build_status, build_succeeded, work_iteration_start,
    waiting_for_logs, failures_extracted, failures_tolerated, claude_started,
    claude_finished, no_changes, publishing_changes, fixes_published,
    max_poll_time_exceeded, max_work_iterations_reached, run_terminated,
    run_aborted
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol

logger = logging.getLogger("plod.events")


@dataclass
class RunEvent:
    """An event emitted during a run."""
    kind: str
    detail: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        return json.dumps({"event": self.kind, **self.detail}, default=str)


class EventSink(Protocol):
    def emit(self, event: RunEvent) -> None:
        ...


class LoggingEventSink:
    """Writes events as JSON lines. Failure-type events log at WARNING."""

    _WARNING_KINDS = {"max_poll_time_exceeded", "max_work_iterations_reached", "run_aborted"}

    def emit(self, event: RunEvent) -> None:
        level = logging.WARNING if event.kind in self._WARNING_KINDS else logging.INFO
        logger.log(level, event.to_json())


class RecordingEventSink:
    """Keeps events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[RunEvent] = []

    def emit(self, event: RunEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]

    def of_kind(self, kind: str) -> List[RunEvent]:
        return [e for e in self.events if e.kind == kind]


class NullEventSink:
    def emit(self, event: RunEvent) -> None:
        pass
