"""Supabase hosted store client."""

from .client import SupabaseClient

__all__ = ["SupabaseClient"]
