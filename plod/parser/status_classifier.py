"""
Status Classifier
=================
Maps the raw output of the status-check command to one of three build states.

Classification Strategy:
    1. Normalise: lower-case and trim the text.
    2. Test keyword patterns in STRICT PRIORITY ORDER — success, failure, pending.
    3. First whole-word match wins, anywhere in the text.
    4. No match → "pending" (keep waiting; never guess success or failure).

Known limitation:
    Matching is whole-word, not negation aware. "this is not a success"
    classifies as success. Status commands must print one unambiguous keyword.

Pure function — no side effects, no failure mode, any string accepted.
"""
import re
from typing import Literal

BuildStatus = Literal["success", "failure", "pending"]


# ---------------------------------------------------------------------------
# Keyword Patterns (priority order)
# ---------------------------------------------------------------------------
_STATUS_PATTERNS: list[tuple[BuildStatus, re.Pattern]] = [
    ("success", re.compile(r"\b(success|successful|passed|pass|ok)\b")),
    ("failure", re.compile(r"\b(fail(ure|ed)?|error|broken)\b")),
    ("pending", re.compile(r"\b(pending|running|in.?progress|building|queued)\b")),
]

DEFAULT_STATUS: BuildStatus = "pending"


def classify(text: str) -> BuildStatus:
    """
    Classify status-command output.

    Parameters
    ----------
    text : str
        Raw stdout of the status-check command.

    Returns
    -------
    BuildStatus
        "success", "failure" or "pending".
    """
    normalized = (text or "").lower().strip()
    for status, pattern in _STATUS_PATTERNS:
        if pattern.search(normalized):
            return status
    return DEFAULT_STATUS
