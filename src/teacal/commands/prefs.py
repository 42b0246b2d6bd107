"""Preference commands."""

import json

import click

from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_queued,
    echo_success,
    ensure_initialized,
    format_table,
    get_sync_service,
    resolve_user_id,
    user_option,
)


def _parse_value(raw: str):
    """JSON when it parses (numbers, booleans, lists), plain text otherwise."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@click.group()
@click.pass_context
def prefs(ctx):
    """Show or change user preferences."""
    ensure_initialized(ctx)


@prefs.command()
@user_option
@click.pass_context
@async_command
async def show(ctx, user: str):
    """List all preferences."""
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    result = await sync.get_preferences(user_id)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    if not result.data:
        echo_info("No preferences set")
        return

    rows = [[key, json.dumps(value, ensure_ascii=False)] for key, value in sorted(result.data.items())]
    click.echo()
    click.echo(format_table(["Key", "Value"], rows))
    click.echo()


@prefs.command(name="set")
@user_option
@click.argument("key")
@click.argument("value")
@click.pass_context
@async_command
async def set_pref(ctx, user: str, key: str, value: str):
    """Set a preference, e.g. `teacal prefs set theme dark`."""
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    result = await sync.set_preference(user_id, key, _parse_value(value))
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"{key} saved")
    echo_queued(result)
