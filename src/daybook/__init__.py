"""daybook - day planning and habit tracking."""

__version__ = "0.1.0"
