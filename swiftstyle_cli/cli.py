"""Typer-based CLI for the swiftstyle conformance checker."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler

from . import __version__, runner
from .builtin_rules import BUILTIN_RULES
from .config_manager import load_config
from .errors import ConfigError
from .registry import RuleRegistry, load
from .reporter import FORMATS, Reporter, err_console

app = typer.Typer(
    help="Swift style conformance checker with automatic fixes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"swiftstyle v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """swiftstyle: check Swift sources against a style guide and fix what can be fixed."""
    pass


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    package_logger = logging.getLogger("swiftstyle_cli")
    package_logger.handlers[:] = [RichHandler(console=err_console, show_time=False, show_path=False)]
    package_logger.setLevel(level)
    package_logger.propagate = False


def _load_registry(
    reporter: Reporter,
    config_path: Optional[Path],
    **option_overrides: Optional[int],
) -> RuleRegistry:
    try:
        style_config = load_config(config_path)
        options = style_config.options.with_overrides(**option_overrides)
        return load(BUILTIN_RULES, dataclasses.replace(style_config, options=options))
    except ConfigError as exc:
        reporter.fatal(str(exc))
        raise typer.Exit(code=2)


def _reporter(output_format: str, show_diff: bool = False) -> Reporter:
    if output_format not in FORMATS:
        Reporter().fatal(f"Unknown format '{output_format}'. Choose from: {', '.join(FORMATS)}")
        raise typer.Exit(code=2)
    return Reporter(output_format, show_diff=show_diff)


@app.command("check")
def check_command(
    paths: List[Path] = typer.Argument(..., exists=True, help="Swift files or directories to check."),
    fix: bool = typer.Option(False, "--fix", help="Apply fixes and rewrite files in place."),
    diff: bool = typer.Option(False, "--diff", help="Show fixes as a unified diff without writing files."),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a .swiftstyle.toml file."),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", min=1, help="Number of worker threads."),
    max_fix_iterations: Optional[int] = typer.Option(
        None, "--max-fix-iterations", min=1, help="Upper bound on fix passes per file."
    ),
    line_length: Optional[int] = typer.Option(None, "--line-length", min=1, help="Maximum line length."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv)."),
):
    """Check files for style violations, optionally fixing them.

    Exit status: 0 when clean or fully fixed, 1 when violations remain,
    2 on configuration or tool errors.
    """
    _configure_logging(verbose)
    reporter = _reporter(output_format, show_diff=diff)
    registry = _load_registry(
        reporter,
        config_path,
        jobs=jobs,
        max_fix_iterations=max_fix_iterations,
        line_length=line_length,
    )

    batch = runner.run(paths, registry, fix=fix or diff, write=not diff)
    raise typer.Exit(code=reporter.render(batch))


@app.command("rules")
def rules_command(
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a .swiftstyle.toml file."),
):
    """List every built-in rule with its effective configuration."""
    reporter = _reporter(output_format)
    registry = _load_registry(reporter, config_path)
    reporter.render_catalogue(registry)


if __name__ == "__main__":
    app()
