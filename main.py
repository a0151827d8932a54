"""plod CLI: CI build failure feedback loop automation."""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from plod.agents.orchestrator import Orchestrator, OrchestratorError
from plod.core.config import LOG_DIR, LOG_LEVEL
from plod.core.constants import DEFAULT_CONFIG_FILENAME, VERSION
from plod.core.output_formatter import (
    CHECK,
    CROSS,
    exit_code_for,
    format_config_summary,
    format_outcome,
    format_run_summary,
)
from plod.models.run_config import RunConfig
from plod.services.config_loader import (
    ConfigAccessError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_config_from,
)
from plod.services.results_writer import ResultsWriter
from plod.utils.logging_config import setup_logging

logger = logging.getLogger("main")

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    help="Path to plod.config.json.",
)


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="plod")
@config_option
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CI build failure feedback loop automation with the Claude Agent SDK."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(start, config_path=config_path)


@cli.command()
@config_option
@click.option(
    "--results-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the run history as JSON to this path.",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def start(config_path: Path, results_file: Optional[Path] = None, verbose: bool = False) -> None:
    """Monitor build status and automatically fix failures."""
    setup_logging(level=logging.DEBUG if verbose else LOG_LEVEL, log_dir=LOG_DIR)
    click.secho("\nplod - Starting build monitoring...\n", bold=True)

    config = _load_or_exit(config_path)
    click.secho(f"{CHECK} Configuration loaded\n", fg="green")
    _echo_lines(format_config_summary(config))
    click.echo()

    try:
        result = asyncio.run(Orchestrator().run(config))
    except OrchestratorError as exc:
        logger.error("Run aborted: %s", exc)
        click.secho(f"\n{CROSS} Error: {exc}", fg="red", err=True)
        sys.exit(1)

    click.echo()
    for i, line in enumerate(format_run_summary(result)):
        click.secho(line, bold=i < 3)

    if results_file is not None:
        ResultsWriter.write_results(result, config, str(results_file))

    message, colour = format_outcome(result)
    click.secho(f"\n{message}", fg=colour)
    sys.exit(exit_code_for(result))


@cli.command()
@config_option
def validate(config_path: Path) -> None:
    """Validate plod.config.json without running."""
    click.secho("\nValidating configuration...\n", bold=True)
    config = _load_or_exit(config_path)
    click.secho(f"{CHECK} Configuration is valid\n", fg="green")
    click.echo("Configuration:")
    click.echo(config.model_dump_json(by_alias=True, indent=2))


def _load_or_exit(config_path: Path) -> RunConfig:
    click.echo(f"Loading configuration from {config_path}...")
    try:
        return load_config_from(str(config_path))
    except ConfigError as exc:
        _report_config_error(exc)
        sys.exit(1)


def _report_config_error(error: ConfigError) -> None:
    """Print a tailored message for each configuration failure."""
    if isinstance(error, ConfigNotFoundError):
        click.secho(f"\n{CROSS} Configuration file not found: {error.path}", fg="red", err=True)
        click.echo(f"\nCreate a {DEFAULT_CONFIG_FILENAME} file in your project root.", err=True)
    elif isinstance(error, ConfigParseError):
        click.secho(f"\n{CROSS} Failed to parse configuration: {error.path}", fg="red", err=True)
        click.echo("\nMake sure the configuration file is valid JSON (or YAML).", err=True)
        click.echo(f"Error: {error.cause}", err=True)
    elif isinstance(error, ConfigValidationError):
        click.secho(f"\n{CROSS} Configuration validation failed: {error.path}", fg="red", err=True)
        click.echo("\nConfiguration does not match expected schema.", err=True)
        for err in error.errors:
            location = ".".join(str(part) for part in err.get("loc", ()))
            click.echo(f"  - {location}: {err.get('msg', '')}", err=True)
    elif isinstance(error, ConfigAccessError):
        click.secho(f"\n{CROSS} Failed to access configuration file: {error.path}", fg="red", err=True)
        click.echo("\nCheck file permissions and path.", err=True)
        click.echo(f"Error: {error.cause}", err=True)
    else:
        click.secho(f"\n{CROSS} {error}", fg="red", err=True)


def _echo_lines(lines) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":
    cli()
