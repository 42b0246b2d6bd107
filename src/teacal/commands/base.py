"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..config import Settings, get_settings
from ..services.data_sync import DataSyncService


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_app_settings(ctx: click.Context) -> Settings:
    """Settings loaded by the root command, or fresh ones."""
    obj = ctx.find_root().obj or {}
    return obj.get("settings") or get_settings()


def get_data_dir(ctx: click.Context) -> Path:
    """Get the data directory path."""
    return Path(get_app_settings(ctx).data_dir)


def get_sync_service(ctx: click.Context) -> DataSyncService:
    return DataSyncService.from_settings(get_app_settings(ctx))


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_data_dir(ctx) / "teacal.db"
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'teacal init' first."
        )
        ctx.exit(1)


async def resolve_user_id(sync: DataSyncService, user: str) -> str:
    """Accept a username known locally, or a raw user id."""
    profile = await sync.users.get_by_username(user)
    return profile.id if profile else user


def user_option(f):
    """--user option, also read from TEACAL_USER."""
    return click.option(
        "--user",
        "-u",
        "user",
        envvar="TEACAL_USER",
        required=True,
        help="Username or user id (or set TEACAL_USER)",
    )(f)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def echo_queued(result) -> None:
    """Tell the user a write is waiting for the remote store."""
    if result.queued:
        echo_warning("Remote store unreachable; saved locally and queued for sync")


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(lines)
