"""
Run Result Model
================
Pydantic model for the final outcome of one orchestration run.
Constructed exactly once, when the loop exits.

Fields:
    iterations             — IterationRecords in chronological order
    final_status           — the status observed at the moment the loop terminated
    max_iterations_reached — True only for iteration-cap termination
    termination_reason     — "success" | "budget_exceeded" | "iteration_cap"
    elapsed_seconds        — wall clock duration of the run
"""
from typing import List, Literal

from pydantic import BaseModel

from plod.models.iteration_record import IterationRecord
from plod.parser.status_classifier import BuildStatus

TerminationReason = Literal["success", "budget_exceeded", "iteration_cap"]


class RunResult(BaseModel):
    iterations: List[IterationRecord] = []
    final_status: BuildStatus
    max_iterations_reached: bool = False
    termination_reason: TerminationReason
    elapsed_seconds: float = 0.0

    @property
    def worked_count(self) -> int:
        """Number of cycles in which the remediation agent ran."""
        return sum(1 for record in self.iterations if record.worked_on)

    @property
    def succeeded(self) -> bool:
        return self.final_status == "success"
