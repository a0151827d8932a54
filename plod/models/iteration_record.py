"""
Iteration Record Model
======================
Pydantic model representing one poll cycle of the feedback loop.

Fields:
    cycle           — poll cycle counter (1-based), one per pass through the loop
    work_iteration  — remediation attempts made so far (0 until the first failure)
    status          — BuildStatus observed in this cycle
    worked_on       — True if the remediation agent was invoked in this cycle
    timestamp       — UTC time the record was appended

Records are immutable once created and appended in chronological order.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from plod.parser.status_classifier import BuildStatus


class IterationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle: int
    work_iteration: int = 0
    status: BuildStatus
    worked_on: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
