"""CLI entry point for teacal."""

import logging

import click

from .commands import budget, calories, init, login, prefs, records, register, serve, sync
from .config import get_settings
from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version="0.1.0", prog_name="teacal")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(ctx, verbose: bool):
    """teacal: milk tea calorie tracker.

    Logs drinks and a weekly calorie budget. Data syncs to a hosted
    Supabase project when one is configured and stays on this machine
    otherwise.

    Example usage:

        # Initialize the local database
        teacal init

        # Create an account
        teacal register

        # Estimate and log drinks
        teacal calories -s large --sweetness 半糖 -t 珍珠
        teacal records add "珍珠奶茶" -u alice -t 珍珠

        # Check the week
        teacal budget show -u alice
    """
    try:
        settings = get_settings()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format=LOG_FORMAT,
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# Register commands
main.add_command(init)
main.add_command(register)
main.add_command(login)
main.add_command(records)
main.add_command(budget)
main.add_command(prefs)
main.add_command(calories)
main.add_command(sync)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
