"""Terminal screens and state for choosing, following and reviewing database backups, restores and schedules."""

__version__ = "0.1.0"