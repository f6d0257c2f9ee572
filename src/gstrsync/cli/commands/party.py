"""Party master commands."""

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.errors import DomainError
from gstrsync.domain.master_data import MasterDataService


@click.group("party")
def party_group():
    """Manage party masters used to name suppliers."""
    pass


@party_group.command("add")
@click.argument("gstin")
@click.argument("party_name")
@click.option("--company", required=True, help="Company ID")
@click.pass_context
def add_party(ctx, gstin: str, party_name: str, company: str):
    """Register PARTY_NAME as the supplier name for GSTIN.

    Examples:
        gstrsync party add 27AAAAA0000A1Z5 "Acme Traders" --company C1
    """
    service = MasterDataService(ctx.obj["db"])
    try:
        party = service.add_party(company_id=company, gstin=gstin, party_name=party_name)
        click.echo(f"Added party '{party.party_name}' for {party.gstin} (ID: {party.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@party_group.command("list")
@click.option("--company", required=True, help="Company ID")
@click.pass_context
def list_parties(ctx, company: str):
    """List the party masters of a company."""
    service = MasterDataService(ctx.obj["db"])

    parties = service.list_parties(company)
    if not parties:
        click.echo("No parties found.")
        return

    click.echo("\nParties:")
    click.echo("-" * 60)
    for party in parties:
        click.echo(f"ID: {party.id:3d} | {party.gstin:15s} | {party.party_name}")


@party_group.command("update")
@click.argument("party_id", type=int)
@click.option("--gstin", help="New GSTIN")
@click.option("--name", "party_name", help="New party name")
@click.pass_context
def update_party(ctx, party_id: int, gstin: str | None, party_name: str | None):
    """Change the GSTIN or name of a party master entry.

    Examples:
        gstrsync party update 3 --name "Acme Traders Pvt Ltd"
    """
    if gstin is None and party_name is None:
        click.echo("Nothing to update; pass --gstin or --name.", err=True)
        ctx.exit(1)
    service = MasterDataService(ctx.obj["db"])
    try:
        party = service.update_party(party_id, gstin=gstin, party_name=party_name)
        click.echo(f"Updated party {party.id}: {party.gstin} | {party.party_name}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@party_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--company", required=True, help="Company ID")
@click.pass_context
def import_parties(ctx, csv_file: str, company: str):
    """Load party masters from a purchase register CSV.

    The register needs "Particulars" and "GSTIN/UIN" columns; title rows
    above the header are skipped. GSTINs the company already has are not
    imported again.

    Examples:
        gstrsync party import purchase_register.csv --company C1
    """
    service = MasterDataService(ctx.obj["db"])
    try:
        result = service.import_parties_csv(csv_file, company)
        message = f"Imported {len(result.imported)} parties."
        if result.skipped:
            message += f" {result.skipped} duplicate(s) skipped."
        click.echo(message)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)


@party_group.command("remove")
@click.argument("party_id", type=int)
@click.pass_context
def remove_party(ctx, party_id: int):
    """Remove a party master entry."""
    service = MasterDataService(ctx.obj["db"])
    try:
        service.remove_party(party_id)
        click.echo(f"Removed party {party_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group)
