"""
Unit Tests — Output Formatter
=============================
Every assertion uses exact string equality.
"""
from plod.core.output_formatter import (
    CHECK,
    CROSS,
    RULE,
    WARN,
    exit_code_for,
    format_config_summary,
    format_outcome,
    format_run_summary,
)
from plod.models.iteration_record import IterationRecord
from plod.models.run_config import RunConfig
from plod.models.run_result import RunResult

CONFIG = RunConfig.model_validate({
    "commands": {
        "publish": ["git", "push"],
        "checkBuildStatus": "./status.sh",
        "checkBuildFailures": "./failures.sh",
    },
    "work": {"command": "claude", "args": ["-p", "fix"]},
    "polling": {"intervalSeconds": 10, "maxPollTimeMinutes": 30, "maxWorkIterations": 5},
})


def _result(final_status, reason, records=()):
    return RunResult(
        iterations=list(records),
        final_status=final_status,
        max_iterations_reached=reason == "iteration_cap",
        termination_reason=reason,
    )


def test_symbols():
    assert (CHECK, CROSS, WARN) == ("✓", "✗", "⚠")
    assert RULE == "=" * 60


def test_config_summary():
    assert format_config_summary(CONFIG) == [
        "Configuration:",
        "  Poll interval: 10s",
        "  Max poll time: 30min",
        "  Max iterations: 5",
        "  Status command: ./status.sh",
        "  Failures command: ./failures.sh",
        "  Publish command: git push",
        "  Work command: claude -p fix (sdk)",
    ]


def test_run_summary_counts_worked_cycles():
    records = [
        IterationRecord(cycle=1, work_iteration=1, status="failure", worked_on=True),
        IterationRecord(cycle=2, work_iteration=1, status="pending"),
        IterationRecord(cycle=3, work_iteration=1, status="success"),
    ]
    assert format_run_summary(_result("success", "success", records)) == [
        RULE,
        "Summary:",
        RULE,
        "Total iterations: 3",
        "Final status: success",
        "Max iterations reached: No",
        "Times Claude fixed issues: 1",
    ]


def test_run_summary_cap():
    lines = format_run_summary(_result("failure", "iteration_cap"))
    assert "Max iterations reached: Yes" in lines
    assert "Total iterations: 0" in lines


def test_outcomes():
    assert format_outcome(_result("success", "success")) == ("✓ Build succeeded!", "green")
    assert format_outcome(_result("failure", "iteration_cap")) == ("⚠ Max iterations reached", "yellow")
    assert format_outcome(_result("pending", "budget_exceeded")) == ("✗ Build failed", "red")


def test_exit_codes():
    assert exit_code_for(_result("success", "success")) == 0
    assert exit_code_for(_result("failure", "iteration_cap")) == 1
    assert exit_code_for(_result("pending", "budget_exceeded")) == 1
