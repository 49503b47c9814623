"""Mirror events from one Google calendar into another."""

__version__ = "1.0.0"
