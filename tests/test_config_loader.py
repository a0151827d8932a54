"""
Unit Tests — Config Loader
==========================
plod.config.json loading: parsing, defaults, schema validation, error types.
"""
import json

import pytest
from pydantic import ValidationError

from plod.services.config_loader import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    apply_defaults,
    load_config,
    load_config_from,
)

VALID = {
    "commands": {
        "publish": "git push",
        "checkBuildStatus": "gh run list --limit 1 --json conclusion -q '.[0].conclusion'",
        "checkBuildFailures": "gh run view --log-failed",
    },
    "work": {
        "command": "claude",
        "args": ["-p", "Fix the failing build"],
    },
    "polling": {
        "intervalSeconds": 15,
        "maxPollTimeMinutes": 20,
        "maxWorkIterations": 3,
    },
}


def _write(tmp_path, data, name="plod.config.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return str(path)


# ---------------------------------------------------------------------------
# 1. Happy path
# ---------------------------------------------------------------------------
class TestLoad:

    def test_valid_json(self, tmp_path):
        config = load_config_from(_write(tmp_path, VALID))
        assert config.commands.publish == "git push"
        assert config.work.command == "claude"
        assert config.work.backend == "sdk"
        assert config.polling.interval_seconds == 15
        assert config.polling.max_poll_time_minutes == 20
        assert config.polling.max_work_iterations == 3

    def test_default_filename_in_cwd(self, tmp_path):
        _write(tmp_path, VALID)
        assert load_config(cwd=str(tmp_path)).polling.max_work_iterations == 3

    def test_yaml_file(self, tmp_path):
        contents = (
            "commands:\n"
            "  publish: git push\n"
            "  checkBuildStatus: ./status.sh\n"
            "  checkBuildFailures: ./failures.sh\n"
            "work:\n"
            "  command: claude\n"
            "  args: ['-p', 'fix it']\n"
            "  backend: cli\n"
        )
        config = load_config_from(_write(tmp_path, contents, name="plod.config.yaml"))
        assert config.commands.check_build_status == "./status.sh"
        assert config.work.backend == "cli"
        assert config.polling.interval_seconds == 10

    def test_argv_commands(self, tmp_path):
        data = json.loads(json.dumps(VALID))
        data["commands"]["publish"] = ["git", "push", "origin", "HEAD"]
        config = load_config_from(_write(tmp_path, data))
        assert config.commands.publish == ["git", "push", "origin", "HEAD"]

    def test_unknown_keys_ignored(self, tmp_path):
        data = dict(VALID, notes="for humans")
        assert load_config_from(_write(tmp_path, data)).work.command == "claude"

    def test_config_is_frozen(self, tmp_path):
        config = load_config_from(_write(tmp_path, VALID))
        with pytest.raises(ValidationError):
            config.polling.interval_seconds = 1


# ---------------------------------------------------------------------------
# 2. Defaults
# ---------------------------------------------------------------------------
class TestDefaults:

    def test_missing_polling_section(self, tmp_path):
        data = {k: v for k, v in VALID.items() if k != "polling"}
        polling = load_config_from(_write(tmp_path, data)).polling
        assert (polling.interval_seconds, polling.max_poll_time_minutes, polling.max_work_iterations) == (10, 30, 10)

    def test_partial_polling_section(self, tmp_path):
        data = dict(VALID, polling={"maxWorkIterations": 2})
        polling = load_config_from(_write(tmp_path, data)).polling
        assert polling.max_work_iterations == 2
        assert polling.interval_seconds == 10

    def test_snake_case_polling_keys(self, tmp_path):
        data = dict(VALID, polling={"interval_seconds": 5})
        assert load_config_from(_write(tmp_path, data)).polling.interval_seconds == 5

    def test_apply_defaults_leaves_non_dicts(self):
        assert apply_defaults([1, 2]) == [1, 2]
        assert apply_defaults(None) is None


# ---------------------------------------------------------------------------
# 3. Errors
# ---------------------------------------------------------------------------
class TestErrors:

    def test_not_found(self, tmp_path):
        path = str(tmp_path / "missing.json")
        with pytest.raises(ConfigNotFoundError) as exc_info:
            load_config_from(path)
        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_config_from(_write(tmp_path, "{not json"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_config_from(_write(tmp_path, "work: [unclosed", name="plod.config.yml"))

    def test_missing_required_section(self, tmp_path):
        data = {k: v for k, v in VALID.items() if k != "commands"}
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config_from(_write(tmp_path, data))
        assert any(err["loc"][0] == "commands" for err in exc_info.value.errors)

    @pytest.mark.parametrize("field,value", [
        ("intervalSeconds", 0),
        ("maxPollTimeMinutes", -5),
        ("maxWorkIterations", "many"),
    ])
    def test_non_positive_polling_rejected(self, tmp_path, field, value):
        data = dict(VALID, polling=dict(VALID["polling"], **{field: value}))
        with pytest.raises(ConfigValidationError):
            load_config_from(_write(tmp_path, data))

    @pytest.mark.parametrize("command", ["", "   ", []])
    def test_empty_command_rejected(self, tmp_path, command):
        data = dict(VALID, commands=dict(VALID["commands"], publish=command))
        with pytest.raises(ConfigValidationError):
            load_config_from(_write(tmp_path, data))

    def test_unknown_backend_rejected(self, tmp_path):
        data = dict(VALID, work=dict(VALID["work"], backend="magic"))
        with pytest.raises(ConfigValidationError):
            load_config_from(_write(tmp_path, data))

    def test_top_level_array_rejected(self, tmp_path):
        with pytest.raises(ConfigValidationError):
            load_config_from(_write(tmp_path, "[]"))
