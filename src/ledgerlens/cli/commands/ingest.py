"""Statement ingestion command."""

import json
from pathlib import Path

import click

from ledgerlens.cli.error_handling import handle_domain_error
from ledgerlens.domain.entities import AccountConflictPolicy
from ledgerlens.domain.errors import DomainError
from ledgerlens.domain.ingestion import IngestionService


@click.command("ingest")
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--account-policy",
    type=click.Choice([policy.value for policy in AccountConflictPolicy]),
    default=AccountConflictPolicy.FIRST_WRITE_WINS.value,
    show_default=True,
    envvar="LEDGERLENS_ACCOUNT_POLICY",
    help="How to handle an account reference whose name or category disagrees with the stored account",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    envvar="LEDGERLENS_WORKERS",
    help="Threads used to validate statements",
)
@click.option("--strict", is_flag=True, help="Exit with failure if any statement fails")
@click.option("--json", "as_json", is_flag=True, help="Print the response body as JSON")
@click.pass_context
def ingest(ctx, json_file: str, account_policy: str, workers: int, strict: bool, as_json: bool):
    """Ingest a batch of period statements from a JSON file."""
    db = ctx.obj["db"]
    service = IngestionService(
        db, account_policy=AccountConflictPolicy(account_policy), max_workers=workers
    )

    try:
        result = service.ingest_batch(Path(json_file).read_text(encoding="utf-8-sig"))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if as_json:
        click.echo(json.dumps(result.to_response(), indent=2))
    else:
        click.echo("\nIngestion complete:")
        click.echo(f"  {result.message}")
        click.echo(f"  Processed: {result.processed_count} reports")
        if result.errors:
            click.echo(f"  Errors: {len(result.errors)}")
            for error in result.errors:
                click.echo(f"    {error}", err=True)

    if not result.success or (strict and result.errors):
        ctx.exit(1)


def register_commands(cli):
    """Register ingest command with main CLI."""
    cli.add_command(ingest)
