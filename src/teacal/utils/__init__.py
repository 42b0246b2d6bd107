"""Utilities for teacal."""
