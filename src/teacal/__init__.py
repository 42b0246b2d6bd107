"""teacal: milk tea calorie tracker with a local-first sync layer."""

__version__ = "0.1.0"
