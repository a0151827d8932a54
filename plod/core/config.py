"""
Configuration
=============
Loads process-level settings from environment variables / .env file using python-dotenv.

The run configuration itself (commands, work, polling) lives in
plod.config.json and is loaded by plod.services.config_loader.

Environment Variables:
    PLOD_COMMAND_TIMEOUT_SECONDS — Max seconds a single external command may run (default: 300)
    PLOD_AGENT_TIMEOUT_MINUTES   — Max minutes one remediation agent session may run (default: 10)
    PLOD_AGENT_MODEL             — Model alias passed to the Agent SDK (default: sonnet)
    PLOD_AGENT_MAX_TURNS         — Max agent turns per session (default: 10)
    PLOD_LOG_DIR                 — Directory for the dated log file; empty disables it (default: logs)
    PLOD_LOG_LEVEL               — Root log level (default: INFO)

Timeout Philosophy:
    Ordinary commands (status check, failure extraction, publish, git status)
    share COMMAND_TIMEOUT_SECONDS. The remediation agent is slow by nature and
    gets its own, much larger, AGENT_TIMEOUT_MINUTES. Neither is related to
    the poll interval.
"""
import os
from dotenv import load_dotenv

load_dotenv()

COMMAND_TIMEOUT_SECONDS = float(os.getenv("PLOD_COMMAND_TIMEOUT_SECONDS", 300))
AGENT_TIMEOUT_MINUTES = float(os.getenv("PLOD_AGENT_TIMEOUT_MINUTES", 10))
AGENT_MODEL = os.getenv("PLOD_AGENT_MODEL", "sonnet")
AGENT_MAX_TURNS = int(os.getenv("PLOD_AGENT_MAX_TURNS", 10))

LOG_DIR = os.getenv("PLOD_LOG_DIR", "logs")
LOG_LEVEL = os.getenv("PLOD_LOG_LEVEL", "INFO").upper()
