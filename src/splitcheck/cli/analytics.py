#!/usr/bin/env python3
"""
Analytics CLI - Spending Analysis Command

Aggregates every session in a data file and reports overview figures,
insights, and optionally a dashboard image.
"""

from pathlib import Path

import click

from ..analysis import AnalyticsAggregator, DashboardConfig, DashboardRenderer
from ..settlement import SessionLoadError, load_sessions


@click.command()
@click.argument("data_file", type=click.Path(path_type=Path))
@click.option(
    "--format", type=click.Choice(["json", "csv"]), default="json", help="Export format (default: json)"
)
@click.option("--output", type=click.Path(path_type=Path), help="Write the export to a file instead of stdout")
@click.option("--dashboard", type=click.Path(path_type=Path), help="Directory for a dashboard image")
@click.option(
    "--chart-format",
    type=click.Choice(["png", "pdf", "svg"]),
    default="png",
    help="Dashboard image format (default: png)",
)
@click.pass_context
def analytics(
    ctx: click.Context,
    data_file: Path,
    format: str,
    output: Path | None,
    dashboard: Path | None,
    chart_format: str,
) -> None:
    """
    Analyse spending across all sessions in a session file or data export.

    Examples:
      splitcheck analytics backup.json
      splitcheck analytics backup.json --format csv --output summary.csv
      splitcheck analytics backup.json --dashboard charts --chart-format pdf
    """
    config = ctx.obj["config"]
    verbose = ctx.obj.get("verbose", False)

    try:
        sessions = load_sessions(data_file)
    except SessionLoadError as e:
        raise click.ClickException(str(e)) from e

    settings = config.engine
    if sessions:
        settings = settings.with_currency(sessions[0].settings.currency)

    aggregator = AnalyticsAggregator(settings)
    result = aggregator.generate_session_analytics(sessions)

    if verbose:
        click.echo(f"Sessions analysed: {result.overview.total_sessions}")
        for insight in aggregator.generate_insights(result):
            click.echo(f"  {insight.title}: {insight.description}")
        click.echo()

    text = aggregator.export_analytics(result, format)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Analytics saved to: {output}")
    else:
        click.echo(text)

    if dashboard:
        try:
            renderer = DashboardRenderer(settings, DashboardConfig(output_format=chart_format))
            output_file = renderer.generate_dashboard(result, dashboard)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Dashboard generation failed: {e}") from e
        click.echo(f"Dashboard saved to: {output_file}")
