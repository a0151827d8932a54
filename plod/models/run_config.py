"""
Run Config Model
================
Pydantic models for plod.config.json. This is the validated, immutable
contract handed to the Orchestrator; it is never mutated during a run.

File keys are camelCase (``checkBuildStatus``, ``intervalSeconds``) while
Python attributes are snake_case. Both spellings are accepted on input.

Fields:
    commands.publish              — publish the working-tree changes (e.g. git push)
    commands.check_build_status   — prints a status keyword (success / failure / pending)
    commands.check_build_failures — prints failure details for the agent
    work.command / work.args      — remediation agent invocation; args must hold "-p <prompt>"
    work.backend                  — "sdk" (Claude Agent SDK) or "cli" (spawn work.command)
    polling.interval_seconds      — seconds between status checks
    polling.max_poll_time_minutes — wall-clock budget for the whole run
    polling.max_work_iterations   — maximum remediation attempts

A command is either a single shell-interpreted string or an argv list that
bypasses the shell.
"""
from typing import Annotated, List, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PositiveInt
from pydantic.alias_generators import to_camel


def _check_command(value: Union[str, List[str]]) -> Union[str, List[str]]:
    if isinstance(value, str):
        if not value.strip():
            raise ValueError("command must not be empty")
        return value
    if not value or not value[0].strip():
        raise ValueError("command argv must start with a program name")
    return value


CommandSpec = Annotated[Union[str, List[str]], AfterValidator(_check_command)]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CommandsConfig(_ConfigModel):
    publish: CommandSpec
    check_build_status: CommandSpec
    check_build_failures: CommandSpec


class WorkConfig(_ConfigModel):
    command: str = Field(min_length=1)
    args: List[str] = []
    backend: Literal["sdk", "cli"] = "sdk"


class PollingConfig(_ConfigModel):
    interval_seconds: PositiveInt
    max_poll_time_minutes: PositiveInt
    max_work_iterations: PositiveInt


class RunConfig(_ConfigModel):
    commands: CommandsConfig
    work: WorkConfig
    polling: PollingConfig
