"""Web API for teacal."""

from .app import create_app

__all__ = ["create_app"]
