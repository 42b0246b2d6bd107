"""CLI commands for teacal."""

from .accounts import login, register
from .budget import budget
from .calories import calories
from .init import init
from .prefs import prefs
from .records import records
from .serve import serve
from .sync import sync

__all__ = [
    "budget",
    "calories",
    "init",
    "login",
    "prefs",
    "records",
    "register",
    "serve",
    "sync",
]
