"""Sync and migration commands."""

import click

from ..services.migration import MigrationService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    get_sync_service,
    resolve_user_id,
    user_option,
)


@click.group()
@click.pass_context
def sync(ctx):
    """Inspect and drive syncing with the remote store."""
    ensure_initialized(ctx)


@sync.command()
@click.pass_context
@async_command
async def status(ctx):
    """Show the sync state and queued writes."""
    service = get_sync_service(ctx)
    if service.remote_configured:
        # One cheap call so the state reflects reachability
        await service.flush_outbox()
    info = await service.sync_status()

    click.echo()
    click.echo(f"State:            {info['state']}")
    click.echo(f"Remote store:     {'configured' if info['remote_configured'] else 'not configured'}")
    click.echo(f"Pending writes:   {info['pending_writes']}")
    click.echo()


@sync.command()
@click.pass_context
@async_command
async def flush(ctx):
    """Replay writes queued while the remote store was unreachable."""
    service = get_sync_service(ctx)
    if not service.remote_configured:
        echo_info("No remote store configured; nothing to flush")
        return

    result = await service.flush_outbox()
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"Flushed {result.data} queued write(s)")
    remaining = (await service.sync_status())["pending_writes"]
    if remaining:
        echo_warning(f"{remaining} write(s) still pending; remote store unreachable")


@sync.command()
@user_option
@click.option("--check", is_flag=True, help="Only report whether migration is needed")
@click.option("--preferences", is_flag=True, help="Also push local preferences")
@click.pass_context
@async_command
async def migrate(ctx, user: str, check: bool, preferences: bool):
    """Copy local-only records to the remote store.

    Safe to run repeatedly: records already on the remote are skipped.
    """
    service = get_sync_service(ctx)
    user_id = await resolve_user_id(service, user)
    migration = MigrationService(service)

    if check:
        result = await migration.check_migration_needed(user_id)
        if not result.success:
            echo_error(result.error)
            ctx.exit(1)
        report = result.data
        echo_info(f"Local records: {report.local_records_count}")
        echo_info(f"Remote records: {report.remote_records_count}")
        if report.needs_migration:
            echo_warning("Migration needed: run 'teacal sync migrate'")
        else:
            echo_success("No migration needed")
        return

    result = await migration.migrate(user_id)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)
    echo_success(f"Migrated {result.data['migrated_count']} record(s)")

    if preferences:
        result = await migration.sync_preferences(user_id)
        if not result.success:
            echo_error(result.error)
            ctx.exit(1)
        echo_success(f"Synced {result.data['synced_count']} preference(s)")
