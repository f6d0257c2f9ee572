"""Processing and document display commands."""

import json

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.entities import ProcessedDocument, ViewName
from gstrsync.domain.errors import DomainError
from gstrsync.domain.export import export_row
from gstrsync.domain.processing import DocumentProcessor

VIEW_CHOICES = [view.value for view in ViewName]


def echo_summary(document: ProcessedDocument) -> None:
    """Print the row counts of a document's collections."""
    click.echo(f"  Document ID: {document.id}")
    click.echo(f"  Canonical rows: {len(document.canonical)}")
    click.echo(f"  Reverse charge: {len(document.reverse_charge)}")
    click.echo(f"  Mismatched: {len(document.mismatched)}")
    click.echo(f"  Disallow: {len(document.disallow)}")


@click.command("process")
@click.argument("import_id")
@click.pass_context
def process_import(ctx, import_id: str):
    """Classify an import into its canonical set and views."""
    processor = DocumentProcessor(ctx.obj["db"])
    try:
        document = processor.process(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo("\nProcessing complete:")
    echo_summary(document)


@click.command("show")
@click.argument("document_id")
@click.option(
    "--view",
    type=click.Choice(VIEW_CHOICES),
    default=ViewName.CANONICAL.value,
    show_default=True,
    help="Collection to display",
)
@click.option("--json", "as_json", is_flag=True, help="Print rows as JSON")
@click.pass_context
def show_document(ctx, document_id: str, view: str, as_json: bool):
    """Show the rows of one view of a processed document."""
    processor = DocumentProcessor(ctx.obj["db"])
    try:
        document = processor.get_processed(document_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    rows = document.view(ViewName(view))
    if as_json:
        click.echo(json.dumps([export_row(row) for row in rows], indent=2))
        return

    if not rows:
        click.echo(f"No {view} rows.")
        return

    click.echo(f"\n{view} rows of {document.id}:")
    click.echo("-" * 120)
    for row in rows:
        ledger = row.ledger_name or ""
        amount = f"{row.invoice_amount:,.2f}" if row.invoice_amount is not None else "-"
        click.echo(
            f"{row.serial_no:4d} | {row.invoice_number or '':16s} | {row.gstin or '':15s} | "
            f"{(row.supplier_name or '')[:24]:24s} | {row.slab or 'Custom':6s} | "
            f"{amount:>14s} | {ledger}"
        )


def register_commands(cli):
    """Register processing commands with main CLI."""
    cli.add_command(process_import)
    cli.add_command(show_document)
