"""Ledger name master commands."""

import click
from gstrsync.cli.error_handling import handle_domain_error
from gstrsync.domain.errors import DomainError
from gstrsync.domain.master_data import MasterDataService


@click.group("ledger")
def ledger_group():
    """Manage the ledger names offered for row assignment."""
    pass


@ledger_group.command("seed")
@click.pass_context
def seed_ledgers(ctx):
    """Load the default ledger names into an empty table."""
    service = MasterDataService(ctx.obj["db"])
    count = service.seed_ledger_names()
    if count:
        click.echo(f"Seeded {count} ledger names")
    else:
        click.echo("Ledger names already present; nothing seeded.")


@ledger_group.command("list")
@click.pass_context
def list_ledgers(ctx):
    """List ledger names."""
    service = MasterDataService(ctx.obj["db"])

    ledgers = service.list_ledger_names()
    if not ledgers:
        click.echo("No ledger names found. Run 'gstrsync ledger seed' to load the defaults.")
        return

    click.echo("\nLedger names:")
    click.echo("-" * 60)
    for ledger in ledgers:
        click.echo(f"ID: {ledger.id:3d} | {ledger.name}")


@ledger_group.command("add")
@click.argument("name")
@click.pass_context
def add_ledger(ctx, name: str):
    """Add a ledger name.

    Examples:
        gstrsync ledger add "Courier Charges"
    """
    service = MasterDataService(ctx.obj["db"])
    try:
        ledger = service.add_ledger_name(name)
        click.echo(f"Added ledger '{ledger.name}' (ID: {ledger.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@ledger_group.command("rename")
@click.argument("ledger_id", type=int)
@click.argument("name")
@click.pass_context
def rename_ledger(ctx, ledger_id: int, name: str):
    """Rename a ledger name."""
    service = MasterDataService(ctx.obj["db"])
    try:
        ledger = service.rename_ledger_name(ledger_id, name)
        click.echo(f"Renamed ledger {ledger.id} to '{ledger.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@ledger_group.command("remove")
@click.argument("ledger_id", type=int)
@click.pass_context
def remove_ledger(ctx, ledger_id: int):
    """Remove a ledger name."""
    service = MasterDataService(ctx.obj["db"])
    try:
        service.remove_ledger_name(ledger_id)
        click.echo(f"Removed ledger {ledger_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group)
