#!/usr/bin/env python3
"""
Settle CLI - Session Settlement Command

Settles one session file with an equal split, a custom percentage split or a
tip, and prints or writes the result.
"""

from pathlib import Path

import click

from ..settlement import (
    ExportFormat,
    SessionLoadError,
    SettlementEngine,
    SettlementExporter,
    SplitValidationError,
    calculate_custom_split,
    calculate_with_tip,
    load_session,
    suggest_transfers,
)

TEXT_FORMATS = (ExportFormat.SUMMARY.value, ExportFormat.DETAILED.value)


def parse_percentages(values: tuple[str, ...]) -> dict[str, float]:
    """Parse MEMBER_ID=PCT pairs from repeated --percent options."""
    percentages: dict[str, float] = {}
    for value in values:
        member_id, sep, pct = value.partition("=")
        if not sep or not member_id.strip():
            raise click.BadParameter(f"Expected MEMBER_ID=PCT, got {value!r}", param_hint="--percent")
        try:
            percentages[member_id.strip()] = float(pct)
        except ValueError as e:
            message = f"Percentage for {member_id!r} is not a number: {pct!r}"
            raise click.BadParameter(message, param_hint="--percent") from e
    return percentages


@click.command()
@click.argument("session_file", type=click.Path(path_type=Path))
@click.option("--session-id", help="Session to settle when the file holds several (default: first)")
@click.option("--tip", help="Tip amount, a number or expression (e.g. '0.1*350000')")
@click.option(
    "--tip-mode",
    type=click.Choice(["equal", "proportional"]),
    default="equal",
    help="How the tip is shared (default: equal)",
)
@click.option("--percent", "percent", multiple=True, metavar="MEMBER_ID=PCT", help="Custom split share, repeatable")
@click.option(
    "--format",
    type=click.Choice([f.value for f in ExportFormat]),
    default="summary",
    help="Output format (default: summary)",
)
@click.option("--output", type=click.Path(path_type=Path), help="Write the result to a file instead of stdout")
@click.option("--transfers/--no-transfers", default=True, help="Append payment suggestions to text output")
@click.pass_context
def settle(
    ctx: click.Context,
    session_file: Path,
    session_id: str | None,
    tip: str | None,
    tip_mode: str,
    percent: tuple[str, ...],
    format: str,
    output: Path | None,
    transfers: bool,
) -> None:
    """
    Settle a session: who pays, who is refunded, and who pays whom.

    Examples:
      splitcheck settle dinner.json
      splitcheck settle backup.json --session-id s42 --format detailed
      splitcheck settle dinner.json --tip 50000 --tip-mode proportional
      splitcheck settle dinner.json --percent m1=60 --percent m2=40 --format csv
    """
    if tip and percent:
        raise click.UsageError("--tip and --percent cannot be combined")

    config = ctx.obj["config"]

    try:
        session = load_session(session_file, session_id)
    except SessionLoadError as e:
        raise click.ClickException(str(e)) from e

    settings = config.engine.with_currency(session.settings.currency)
    engine = SettlementEngine(settings)

    if ctx.obj.get("verbose", False):
        click.echo(f"Session: {session.metadata.name or session.id} ({len(session.members)} members)")
        click.echo(f"Location: {session.location or 'unknown'}")
        click.echo()

    try:
        if percent:
            result = calculate_custom_split(engine, session, parse_percentages(percent))
        elif tip:
            result = calculate_with_tip(engine, session, tip, tip_mode)
        else:
            result = engine.calculate_session(session)
    except SplitValidationError as e:
        raise click.ClickException(str(e)) from e

    exporter = SettlementExporter(settings)
    text = exporter.export(result, format)

    if transfers and format in TEXT_FORMATS:
        suggestions = suggest_transfers(result, settings.rounder, settings.currency)
        text = f"{text}\n\n{exporter.export_transfers(suggestions)}"

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        click.echo(f"Result saved to: {output}")
    else:
        click.echo(text)
