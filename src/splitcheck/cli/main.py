#!/usr/bin/env python3
"""
Main CLI Entry Point for SplitCheck

Provides the `splitcheck` command group and its general-purpose commands.
"""

import logging
import os

import click

from ..core.config import get_config
from ..core.currency import format_currency, format_number
from ..core.expression import ExpressionEvaluator


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    SplitCheck - Bill Splitting Calculator

    Settles shared expenses between members, suggests who pays whom, and
    reports spending analytics across sessions.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["SPLITCHECK_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("splitcheck").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from splitcheck import __author__, __version__

    click.echo(f"SplitCheck v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  Currency: {config_obj.engine.currency}")
    click.echo(f"  Precision: {config_obj.engine.precision}")
    click.echo(f"  Rounding: {config_obj.engine.rounding_method.value}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command(name="eval")
@click.argument("expression")
@click.option("--raw", is_flag=True, help="Print the bare number instead of a formatted amount")
@click.pass_context
def eval_command(ctx: click.Context, expression: str, raw: bool) -> None:
    """
    Evaluate a money expression the way item prices are evaluated.

    Examples:
      splitcheck eval "2*25000"
      splitcheck eval "1,250,000 + 50000" --raw
    """
    settings = ctx.obj["config"].engine
    value = ExpressionEvaluator(settings.rounder).evaluate(expression)

    if raw:
        click.echo(format_number(value, settings.precision, thousands_sep=""))
    else:
        click.echo(format_currency(value, settings.currency, settings.precision, settings.rounding_method))


# Import and register subcommands
from .analytics import analytics  # noqa: E402
from .settle import settle  # noqa: E402

main.add_command(settle)
main.add_command(analytics)


if __name__ == "__main__":
    main()
