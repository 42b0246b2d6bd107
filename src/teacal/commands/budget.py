"""Weekly budget commands."""

import click

from ..services.budget import weekly_summary
from .base import (
    async_command,
    echo_error,
    echo_queued,
    echo_success,
    echo_warning,
    ensure_initialized,
    get_sync_service,
    resolve_user_id,
    user_option,
)

# A week of drinks comfortably fits in one page
WEEK_RECORD_LIMIT = 200


@click.group()
@click.pass_context
def budget(ctx):
    """Show or change the weekly calorie budget."""
    ensure_initialized(ctx)


@budget.command()
@user_option
@click.pass_context
@async_command
async def show(ctx, user: str):
    """Show this week's calories against the budget."""
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    weekly_budget = await sync.get_budget(user_id)
    result = await sync.get_records(user_id, limit=WEEK_RECORD_LIMIT)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    summary = weekly_summary(result.data, weekly_budget)
    click.echo()
    click.echo(f"Week of {summary.week_start:%Y-%m-%d}")
    click.echo("-" * 40)
    click.echo(f"Budget:    {summary.budget} kcal")
    click.echo(f"Consumed:  {summary.consumed} kcal ({summary.record_count} drinks)")
    click.echo(f"Remaining: {summary.remaining} kcal")
    click.echo(f"Used:      {summary.percentage}%")
    click.echo()
    if summary.over_budget:
        echo_warning(f"Over budget by {summary.consumed - summary.budget} kcal")


@budget.command(name="set")
@user_option
@click.argument("value", type=int)
@click.pass_context
@async_command
async def set_budget(ctx, user: str, value: int):
    """Set the weekly budget in kcal."""
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    result = await sync.set_budget(user_id, value)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"Weekly budget set to {result.data} kcal")
    echo_queued(result)
