"""Dashboard command."""

import click

from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.cli.formatting import format_currency, format_percent
from ledgerlens.domain.dashboard import DashboardService
from ledgerlens.domain.errors import DomainError
from ledgerlens.domain.trends import format_period


@click.command("dashboard")
@click.option("--company", "company_id", type=int, help="Company ID")
@click.pass_context
def dashboard(ctx, company_id: int | None):
    """Show performance metrics, profit trend and insights."""
    service = DashboardService(ctx.obj["db"])
    try:
        result = service.build_dashboard(company_id=company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    metrics = result.metrics
    click.echo("\nPerformance Metrics")
    click.echo("-" * 60)
    click.echo(f"{'Total Revenue':<30} {format_currency(metrics.total_revenue):>20}")
    click.echo(f"{'Net Profit':<30} {format_currency(metrics.total_profit):>20}")
    click.echo(f"{'Average Margin':<30} {format_percent(metrics.average_margin):>20}")
    click.echo(
        f"{'Profitable Months':<30} "
        f"{f'{metrics.profitable_months}/{metrics.total_months}':>20}"
    )
    click.echo(f"{'Profit Rate':<30} {format_percent(metrics.profitability_percent):>20}")
    click.echo(f"{'Revenue Growth':<30} {format_percent(metrics.revenue_growth):>20}")
    click.echo(f"{'Profit Growth':<30} {format_percent(metrics.profit_growth):>20}")

    if metrics.best_month is not None:
        best = metrics.best_month
        click.echo(
            f"{'Best Month':<30} {format_period(best.period_start, best.period_end):>20} "
            f"{format_currency(best.net_profit)}"
        )
    if metrics.worst_month is not None:
        worst = metrics.worst_month
        click.echo(
            f"{'Worst Month':<30} {format_period(worst.period_start, worst.period_end):>20} "
            f"{format_currency(worst.net_profit)}"
        )

    click.echo("\nProfit Trend")
    click.echo("-" * 60)
    if not result.trend:
        click.echo("No report data available.")
    for point in result.trend:
        click.echo(
            f"{point.period:<10} {format_currency(point.gross_profit):>16} "
            f"{format_currency(point.net_profit):>16} {format_percent(point.margin):>10}"
        )

    click.echo("\nInsights")
    click.echo("-" * 60)
    for insight in result.insights:
        click.echo(f"[{insight.severity.value.upper():<7}] {insight.text}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
