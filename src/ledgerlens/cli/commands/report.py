"""Company and report viewing commands."""

import click

from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.cli.formatting import format_currency, format_percent
from ledgerlens.domain.dashboard import DashboardService
from ledgerlens.domain.errors import DomainError
from ledgerlens.domain.trends import format_period


@click.command("companies")
@click.pass_context
def list_companies(ctx):
    """List companies."""
    companies = ctx.obj["db"].list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo(f"{'ID':<6} {'External ID':<14} {'Name':<40}")
    click.echo("-" * 60)
    for company in companies:
        click.echo(f"{company.id:<6} {company.external_company_id:<14} {company.name:<40}")


@click.command("reports")
@click.option("--company", "company_id", type=int, help="Company ID")
@click.option("--show-empty", is_flag=True, help="Include periods with no gross or net profit")
@click.pass_context
def list_reports(ctx, company_id: int | None, show_empty: bool):
    """List reports with gross profit, net profit and net margin."""
    service = DashboardService(ctx.obj["db"])
    try:
        reports = service.list_reports(company_id=company_id, include_empty=show_empty)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not reports:
        click.echo("No reports found.")
        return

    click.echo(f"\nFound {len(reports)} report(s):")
    click.echo("-" * 90)
    click.echo(
        f"{'ID':<6} {'Period':<24} {'Gross Profit':>18} {'Net Profit':>18} {'Net Margin':>12}"
    )
    click.echo("-" * 90)
    for report in reports:
        click.echo(
            f"{report.id:<6} {format_period(report.period_start, report.period_end):<24} "
            f"{format_currency(report.gross_profit):>18} "
            f"{format_currency(report.net_profit):>18} "
            f"{format_percent(report.net_margin):>12}"
        )


@click.command("report")
@click.argument("report_id", type=int)
@click.option("--show-zero", is_flag=True, help="Include zero-valued line items")
@click.pass_context
def show_report(ctx, report_id: int, show_zero: bool):
    """Show a report's financial breakdown by category."""
    service = DashboardService(ctx.obj["db"])
    try:
        report, groups = service.get_report_breakdown(report_id, hide_zero=not show_zero)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nReport {report.id} ({report.external_report_id})")
    click.echo(f"  Period: {format_period(report.period_start, report.period_end)}")
    click.echo(f"  Gross Profit: {format_currency(report.gross_profit)}")
    click.echo(f"  Net Profit: {format_currency(report.net_profit)}")
    click.echo(f"  Net Margin: {format_percent(report.net_margin)}")

    if not groups:
        click.echo("\nNo line items recorded.")
        return

    for group in groups:
        click.echo()
        click.echo(f"{group.category.value:<50} {format_currency(group.subtotal):>20}")
        if not group.items:
            click.echo(
                f"    No transactions recorded for {group.category.value.lower()} in this period"
            )
            continue
        for item in group.items:
            click.echo(f"    {item.account.name:<46} {format_currency(item.value):>20}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(list_companies)
    cli.add_command(list_reports)
    cli.add_command(show_report)
