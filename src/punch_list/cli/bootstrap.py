# src/punch_list/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the concrete TaskStore handed to the API,
- builds the TaskClient handed to the console front end.
"""

from __future__ import annotations

import logging

from ..client.task_client import TaskClient
from ..config import get_settings
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(settings=None) -> TaskStore:
    """
    Create the TaskStore from the provided settings.

    Constructing the store synchronizes the schema, so call this before serving.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return TaskStore(settings.tasks_db_path)


def create_client(settings=None) -> TaskClient:
    if settings is None:
        settings = get_settings()

    logger.debug("TaskClient base_url=%s", settings.base_url)
    return TaskClient(
        settings.base_url,
        timeout=float(getattr(settings, "http_timeout_seconds", 10.0)),
    )
