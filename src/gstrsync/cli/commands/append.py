"""Manual row append command."""

import csv

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.errors import DomainError
from gstrsync.domain.synchronization import ViewSynchronizer


@click.command("append")
@click.argument("document_id")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def append_rows(ctx, document_id: str, csv_file: str):
    """Append manually entered rows to a processed document.

    CSV_FILE carries one row per line with raw field names as headers
    (invoiceNumber, gstin, taxableValue, igst, ...) plus optional ledger
    fields (ledgerName, acceptCredit, action, actionReason, narration).
    """
    with open(csv_file, "r", encoding="utf-8-sig", newline="") as f:
        rows = [
            {key.strip(): value for key, value in row.items() if key}
            for row in csv.DictReader(f)
        ]

    synchronizer = ViewSynchronizer(ctx.obj["db"])
    try:
        document = synchronizer.append_rows(document_id, rows)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Appended rows to {document.id}; canonical rows: {len(document.canonical)}")


def register_commands(cli):
    """Register append command with main CLI."""
    cli.add_command(append_rows)
