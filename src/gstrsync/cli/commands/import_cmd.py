"""Raw import commands."""

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.errors import DomainError
from gstrsync.domain.raw_import import ImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option(
    "--source",
    required=True,
    type=click.Choice(["2A", "2B"], case_sensitive=False),
    help="Filing export the file came from",
)
@click.option("--company", required=True, help="Company ID")
@click.pass_context
def import_csv(ctx, csv_file: str, source: str, company: str):
    """Import a GSTR-2A or GSTR-2B CSV export."""
    service = ImportService(ctx.obj["db"])

    try:
        raw_import = service.import_csv(
            csv_file_path=csv_file, source_type=source, company_id=company
        )
        click.echo("\nImport complete:")
        click.echo(f"  Import ID: {raw_import.id}")
        click.echo(f"  Rows: {len(raw_import.rows)}")
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)


@click.command("imports")
@click.option("--company", help="Only show imports of this company")
@click.pass_context
def list_imports(ctx, company: str | None):
    """List raw imports."""
    service = ImportService(ctx.obj["db"])

    imports = service.list_imports(company_id=company)
    if not imports:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 100)
    for item in imports:
        created = item.created_at.strftime("%Y-%m-%d %H:%M")
        click.echo(
            f"{item.id} | {item.source_type.value} | {item.company_id or '-':10s} | "
            f"{len(item.rows):5d} rows | {created} | {item.source_file_name or ''}"
        )


@click.command("delete")
@click.argument("import_id")
@click.pass_context
def delete_import(ctx, import_id: str):
    """Delete an import and its processed document."""
    service = ImportService(ctx.obj["db"])
    try:
        service.delete_import(import_id)
        click.echo(f"Deleted import {import_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_csv)
    cli.add_command(list_imports)
    cli.add_command(delete_import)
