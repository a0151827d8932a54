"""
Constants
Centralised storage for system-wide constants, defaults, and agent rules.
"""
VERSION = "0.1.0"
DEFAULT_CONFIG_FILENAME = "plod.config.json"

# Polling defaults applied before validation
DEFAULT_INTERVAL_SECONDS = 10
DEFAULT_MAX_POLL_TIME_MINUTES = 30
DEFAULT_MAX_WORK_ITERATIONS = 10

# Grace period before extracting failures = interval * multiplier
FAILURE_WAIT_MULTIPLIER = 3

# Change detection (tracked + untracked)
GIT_STATUS_COMMAND = ["git", "status", "--porcelain"]

# Remediation agent invocation
PROMPT_FLAG = "-p"
PROMPT_HEADER = "Build failures detected:"
AGENT_ALLOWED_TOOLS = ["Read", "Write", "Edit", "Bash", "Grep", "Glob", "Task"]
AGENT_PERMISSION_MODE = "acceptEdits"
AGENT_SETTING_SOURCES = ["project"]
