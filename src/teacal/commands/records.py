"""Tea record commands."""

import click

from ..models.ingredients import CupSize
from ..models.tea_record import TeaRecord
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

SIZE_CHOICE = click.Choice([s.value for s in CupSize])


@click.group()
@click.pass_context
def records(ctx):
    """Log and manage drinks.

    Commands for listing, adding, editing, and deleting tea records.
    """
    ensure_initialized(ctx)


@records.command(name="list")
@user_option
@click.option("--limit", "-n", default=50, type=int, help="Number of records (default: 50)")
@click.option("--offset", default=0, type=int, help="Skip this many records")
@click.pass_context
@async_command
async def list_records(ctx, user: str, limit: int, offset: int):
    """List recent records, newest first."""
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    result = await sync.get_records(user_id, limit=limit, offset=offset)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    if not result.data:
        echo_info("No records found. Add one with 'teacal records add'")
        return

    headers = ["ID", "Date", "Drink", "Size", "Sugar", "Toppings", "kcal"]
    rows = []
    for record in result.data:
        rows.append([
            record.id,
            record.recorded_at.strftime("%Y-%m-%d %H:%M"),
            record.tea_name[:20],
            record.size.value,
            record.sweetness_label,
            ", ".join(record.toppings) or "-",
            str(record.estimated_calories if record.estimated_calories is not None else "?"),
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(result.data)} record(s) from {result.source.value} store")


@records.command()
@user_option
@click.argument("tea_name")
@click.option("--size", "-s", type=SIZE_CHOICE, default="medium", help="Cup size")
@click.option("--sweetness", default="50", help="Sugar percent or label, e.g. 半糖")
@click.option("--topping", "-t", "toppings", multiple=True, help="Topping name (repeatable)")
@click.option("--brand", "-b", help="Shop or brand")
@click.option("--calories", type=int, help="Override the estimated calories")
@click.option("--mood", help="How you felt")
@click.option("--notes", help="Free text notes")
@click.option("--rating", type=click.IntRange(1, 5), help="Rating from 1 to 5")
@click.pass_context
@async_command
async def add(
    ctx,
    user: str,
    tea_name: str,
    size: str,
    sweetness: str,
    toppings: tuple[str, ...],
    brand: str | None,
    calories: int | None,
    mood: str | None,
    notes: str | None,
    rating: int | None,
):
    """Log a drink.

    Calories are estimated from size, sugar and toppings unless given.

    Examples:

        teacal records add "珍珠奶茶" -s medium --sweetness 半糖 -t 珍珠

        teacal records add "杨枝甘露" -s large --sweetness 30 --calories 350
    """
    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)

    record = TeaRecord(
        user_id=user_id,
        tea_name=tea_name,
        size=size,
        sweetness_level=sweetness,
        toppings=list(toppings),
        brand=brand,
        estimated_calories=calories,
        is_manual_calories=calories is not None,
        mood=mood,
        notes=notes,
        rating=rating,
    )
    result = await sync.add_record(record)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    saved = result.data
    echo_success(f"Logged {saved.tea_name}: {saved.estimated_calories} kcal (ID: {saved.id})")
    echo_queued(result)


@records.command()
@user_option
@click.argument("record_id")
@click.option("--name", "tea_name", help="Drink name")
@click.option("--size", "-s", type=SIZE_CHOICE, help="Cup size")
@click.option("--sweetness", help="Sugar percent or label")
@click.option("--topping", "-t", "toppings", multiple=True, help="Replace toppings (repeatable)")
@click.option("--brand", "-b", help="Shop or brand")
@click.option("--calories", type=int, help="Set calories by hand")
@click.option("--notes", help="Free text notes")
@click.option("--rating", type=click.IntRange(1, 5), help="Rating from 1 to 5")
@click.pass_context
@async_command
async def edit(ctx, user: str, record_id: str, **fields):
    """Change fields of a record."""
    patch = {k: v for k, v in fields.items() if v not in (None, ())}
    if "toppings" in patch:
        patch["toppings"] = list(patch["toppings"])
    if "sweetness" in patch:
        patch["sweetness_level"] = patch.pop("sweetness")
    if "calories" in patch:
        patch["estimated_calories"] = patch.pop("calories")
        patch["is_manual_calories"] = True
    if not patch:
        echo_info("Nothing to change")
        return

    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)
    result = await sync.update_record(record_id, user_id, patch)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"Record {record_id} updated")
    echo_queued(result)


@records.command()
@user_option
@click.argument("record_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, user: str, record_id: str, yes: bool):
    """Delete a record."""
    if not yes and not click.confirm(f"Delete record {record_id}?"):
        echo_info("Cancelled")
        return

    sync = get_sync_service(ctx)
    user_id = await resolve_user_id(sync, user)
    result = await sync.delete_record(record_id, user_id)
    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    echo_success(f"Record {record_id} deleted")
    echo_queued(result)
