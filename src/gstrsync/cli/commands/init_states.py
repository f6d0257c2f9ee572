"""Initialize the GST state-code table."""

import click
from gstrsync.domain.master_data import MasterDataService


# GSTIN state-code prefixes
DEFAULT_STATE_CODES = [
    ("01", "Jammu and Kashmir"),
    ("02", "Himachal Pradesh"),
    ("03", "Punjab"),
    ("04", "Chandigarh"),
    ("05", "Uttarakhand"),
    ("06", "Haryana"),
    ("07", "Delhi"),
    ("08", "Rajasthan"),
    ("09", "Uttar Pradesh"),
    ("10", "Bihar"),
    ("11", "Sikkim"),
    ("12", "Arunachal Pradesh"),
    ("13", "Nagaland"),
    ("14", "Manipur"),
    ("15", "Mizoram"),
    ("16", "Tripura"),
    ("17", "Meghalaya"),
    ("18", "Assam"),
    ("19", "West Bengal"),
    ("20", "Jharkhand"),
    ("21", "Odisha"),
    ("22", "Chhattisgarh"),
    ("23", "Madhya Pradesh"),
    ("24", "Gujarat"),
    ("26", "Dadra and Nagar Haveli and Daman and Diu"),
    ("27", "Maharashtra"),
    ("29", "Karnataka"),
    ("30", "Goa"),
    ("31", "Lakshadweep"),
    ("32", "Kerala"),
    ("33", "Tamil Nadu"),
    ("34", "Puducherry"),
    ("35", "Andaman and Nicobar Islands"),
    ("36", "Telangana"),
    ("37", "Andhra Pradesh"),
    ("38", "Ladakh"),
    ("97", "Other Territory"),
]


@click.command("init-states")
@click.option("--force", is_flag=True, help="Overwrite existing state codes")
@click.pass_context
def init_states(ctx, force: bool):
    """Initialize database with the GST state-code table."""
    db = ctx.obj["db"]
    service = MasterDataService(db)

    created = service.seed_state_codes(DEFAULT_STATE_CODES, force=force)
    if not created:
        click.echo("State codes already exist. Use --force to overwrite.")
        return
    click.echo(f"Loaded {created} state codes.")


def register_commands(cli):
    """Register init-states command with main CLI."""
    cli.add_command(init_states)
