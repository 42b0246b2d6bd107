"""Clients for the hosted data store."""

from .base import RemoteStore
from .supabase import SupabaseClient

__all__ = ["RemoteStore", "SupabaseClient"]
