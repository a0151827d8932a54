"""
Results Writer
==============
Serializes a finished RunResult into a results JSON file (CI artifact /
dashboard input).
"""
import json
import logging
import os

from plod.core.output_formatter import format_outcome
from plod.models.run_config import RunConfig
from plod.models.run_result import RunResult

logger = logging.getLogger(__name__)


class ResultsWriter:
    """
    Service responsible for compiling the history of a run
    into a structured JSON file.
    """

    @staticmethod
    def build_payload(result: RunResult, config: RunConfig) -> dict:
        message, _ = format_outcome(result)
        return {
            "configuration": config.model_dump(mode="json", by_alias=True),
            "iterations": [r.model_dump(mode="json") for r in result.iterations],
            "final_results": {
                "status": result.final_status,
                "termination_reason": result.termination_reason,
                "max_iterations_reached": result.max_iterations_reached,
                "total_iterations": len(result.iterations),
                "worked_count": result.worked_count,
                "elapsed_seconds": result.elapsed_seconds,
                "summary": message,
            },
        }

    @staticmethod
    def write_results(result: RunResult, config: RunConfig, output_path: str = "results.json") -> bool:
        """
        Compile the run and write it to ``output_path``.
        Returns False (and logs) if the file could not be written.
        """
        data = ResultsWriter.build_payload(result, config)
        abs_output = os.path.abspath(output_path)
        try:
            parent = os.path.dirname(abs_output)
            if parent:
                os.makedirs(parent, exist_ok=True)
            logger.info("Writing final results to %s", abs_output)
            with open(abs_output, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            return True
        except OSError as e:
            logger.error("Failed to write %s: %s", abs_output, e, exc_info=True)
            return False
