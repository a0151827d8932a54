"""
Output Formatter
================
THE SINGLE SOURCE OF TRUTH for the human-readable CLI output strings.

STRICT DETERMINISM CONTRACT:
  - This module NEVER prints, colours, or logs (the CLI does that).
  - This module NEVER reads environment variables.
  - Given the same inputs, it ALWAYS returns the exact same strings.

Colour names returned alongside messages are click colour names.
"""
from typing import List, Tuple

from plod.executor.command_runner import describe_command
from plod.models.run_config import RunConfig
from plod.models.run_result import RunResult

# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------
# Import these constants instead of typing the characters inline.
CHECK = "✓"
CROSS = "✗"
WARN = "⚠"

RULE = "=" * 60


def format_config_summary(config: RunConfig) -> List[str]:
    """Lines describing the loaded configuration."""
    work = config.work
    work_line = " ".join([work.command, *work.args])
    return [
        "Configuration:",
        f"  Poll interval: {config.polling.interval_seconds}s",
        f"  Max poll time: {config.polling.max_poll_time_minutes}min",
        f"  Max iterations: {config.polling.max_work_iterations}",
        f"  Status command: {describe_command(config.commands.check_build_status)}",
        f"  Failures command: {describe_command(config.commands.check_build_failures)}",
        f"  Publish command: {describe_command(config.commands.publish)}",
        f"  Work command: {work_line} ({work.backend})",
    ]


def format_run_summary(result: RunResult) -> List[str]:
    """Lines summarising a finished run."""
    return [
        RULE,
        "Summary:",
        RULE,
        f"Total iterations: {len(result.iterations)}",
        f"Final status: {result.final_status}",
        f"Max iterations reached: {'Yes' if result.max_iterations_reached else 'No'}",
        f"Times Claude fixed issues: {result.worked_count}",
    ]


def format_outcome(result: RunResult) -> Tuple[str, str]:
    """Return (message, colour) for the final verdict line."""
    if result.final_status == "success":
        return f"{CHECK} Build succeeded!", "green"
    if result.max_iterations_reached:
        return f"{WARN} Max iterations reached", "yellow"
    return f"{CROSS} Build failed", "red"


def exit_code_for(result: RunResult) -> int:
    """0 only when the run ended with a successful build."""
    return 0 if result.final_status == "success" else 1
