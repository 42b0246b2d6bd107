"""Services for teacal."""

from .accounts import AccountService
from .budget import WeeklySummary, week_start, weekly_summary
from .data_sync import DataSyncService
from .migration import MigrationService

__all__ = [
    "AccountService",
    "DataSyncService",
    "MigrationService",
    "WeeklySummary",
    "week_start",
    "weekly_summary",
]
