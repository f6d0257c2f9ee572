"""Ledger-field edit command."""

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.entities import EDITABLE_FIELDS, EditRequest, ViewName
from gstrsync.domain.errors import DomainError
from gstrsync.domain.synchronization import ViewSynchronizer

CLEARABLE = [name.replace("_", "-") for name in EDITABLE_FIELDS]


@click.command("edit")
@click.argument("document_id")
@click.option(
    "--view",
    required=True,
    type=click.Choice([view.value for view in ViewName]),
    help="View whose numbering --serial refers to",
)
@click.option("--serial", type=int, help="Serial number of the row in the view")
@click.option("--index", type=int, help="Zero-based position of the row in the view")
@click.option("--ledger-name", help="Ledger name (include [disallow] to disallow the row)")
@click.option("--accept-credit", help="Accept credit (yes/no)")
@click.option("--action", help="Action (accept/reject/pending)")
@click.option("--action-reason", help="Reason for the action")
@click.option("--narration", help="Narration")
@click.option("--itc", "itc_availability", help="ITC availability (yes/no)")
@click.option("--supplier-name", help="Supplier name")
@click.option(
    "--clear",
    "clear",
    multiple=True,
    type=click.Choice(CLEARABLE),
    help="Clear a field (repeatable)",
)
@click.pass_context
def edit_row(
    ctx,
    document_id: str,
    view: str,
    serial: int | None,
    index: int | None,
    clear: tuple[str, ...],
    **values: str | None,
):
    """Edit the ledger fields of one row and sync every view.

    Examples:
        gstrsync edit DOC --view canonical --serial 3 --ledger-name "Purchase 18%"
        gstrsync edit DOC --view mismatched --serial 1 --ledger-name "Misc [disallow]"
        gstrsync edit DOC --view disallow --serial 2 --clear ledger-name
    """
    if serial is None and index is None:
        click.echo("Error: --serial or --index is required", err=True)
        ctx.exit(1)

    fields = {name: value for name, value in values.items() if value is not None}
    for name in clear:
        fields[name.replace("-", "_")] = None
    if not fields:
        click.echo("Error: no field to edit", err=True)
        ctx.exit(1)

    synchronizer = ViewSynchronizer(ctx.obj["db"])
    edit = EditRequest(serial_no=serial, index=index, **fields)
    try:
        document = synchronizer.update_ledger_fields(document_id, view, [edit])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated {view} row of {document.id}")
    click.echo(
        f"  Reverse charge: {len(document.reverse_charge)} | "
        f"Mismatched: {len(document.mismatched)} | Disallow: {len(document.disallow)}"
    )


def register_commands(cli):
    """Register edit command with main CLI."""
    cli.add_command(edit_row)
