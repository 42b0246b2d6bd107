"""Initialize project command."""

import click

from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success, echo_warning, get_app_settings


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the teacal data directory and local database.

    This creates the data directory and the SQLite database that backs
    the local store and the sync outbox.
    """
    settings = get_app_settings(ctx)
    data_dir = settings.data_dir

    echo_info(f"Initializing teacal in {data_dir}")

    db_path = get_db_path(data_dir)
    await init_db(db_path)
    echo_success("Local database initialized")

    if settings.remote_configured:
        echo_success(f"Remote store: {settings.supabase_url}")
    else:
        echo_warning(
            "No remote store configured; data stays on this machine. "
            "Set TEACAL_SUPABASE_URL and TEACAL_SUPABASE_ANON_KEY to sync."
        )

    click.echo()
    click.echo("teacal is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create an account:")
    click.echo("     teacal register")
    click.echo()
    click.echo("  2. Log a drink:")
    click.echo('     teacal records add "珍珠奶茶" --size medium --sweetness 半糖 --topping 珍珠')
