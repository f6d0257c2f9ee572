"""Cross-document reconciliation command."""

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.errors import DomainError
from gstrsync.domain.reconciliation import Reconciler


@click.command("reconcile")
@click.argument("document_id")
@click.argument("other_id")
@click.pass_context
def reconcile(ctx, document_id: str, other_id: str):
    """Remove from DOCUMENT_ID every invoice already present in OTHER_ID."""
    reconciler = Reconciler(ctx.obj["db"])
    try:
        result = reconciler.reconcile(document_id, other_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if result.no_op:
        click.echo(f"Document {other_id} has no invoice numbers; nothing to reconcile.")
        return
    click.echo(f"Removed {result.removed} rows from {document_id}")
    click.echo(f"  Remaining canonical rows: {len(result.document.canonical)}")


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile)
