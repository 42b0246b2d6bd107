"""Account commands."""

import click
import questionary

from ..services.accounts import AccountService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    get_sync_service,
)


async def _ask_credentials(username: str | None, password: str | None, confirm: bool):
    if not username:
        username = await questionary.text("Username:").ask_async()
    if not password:
        password = await questionary.password("Password:").ask_async()
        if confirm and password is not None:
            again = await questionary.password("Repeat password:").ask_async()
            if again != password:
                return username, None
    return username, password


@click.command()
@click.option("--username", help="Account name (prompted if omitted)")
@click.option("--password", help="Password (prompted if omitted)")
@click.pass_context
@async_command
async def register(ctx, username: str | None, password: str | None):
    """Create an account.

    Registers with the remote store when one is configured, otherwise
    locally. Passwords need at least 6 characters.
    """
    ensure_initialized(ctx)
    username, password = await _ask_credentials(username, password, confirm=True)
    if password is None:
        echo_error("Passwords do not match")
        ctx.exit(1)

    service = AccountService(get_sync_service(ctx))
    result = await service.register(username, password)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    profile = result.data
    echo_success(f"Registered {profile.username} ({result.source.value} store)")
    echo_info(f"User id: {profile.id}")
    echo_info(f"Use --user {profile.username} or set TEACAL_USER to log drinks")


@click.command()
@click.option("--username", help="Account name (prompted if omitted)")
@click.option("--password", help="Password (prompted if omitted)")
@click.pass_context
@async_command
async def login(ctx, username: str | None, password: str | None):
    """Check a username and password."""
    ensure_initialized(ctx)
    username, password = await _ask_credentials(username, password, confirm=False)

    service = AccountService(get_sync_service(ctx))
    result = await service.authenticate(username, password)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"Welcome back, {result.data.username}")
    click.echo(result.data.get_summary())
