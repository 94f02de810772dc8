"""Punch list: a personal task list with a REST backend and a console client."""

__version__ = "2.0.0"
