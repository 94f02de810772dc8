# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from punch_list.api.server import create_app
from punch_list.client.task_client import TaskClient
from punch_list.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_app and the bootstrap helpers.

    We use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and .env files.
    """
    return SimpleNamespace(
        app_name="punch-list-test",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "database.sqlite3",
        greeting="Hello, Tasks.",
        cors_origins=["*"],
        base_url="http://testserver",
        http_timeout_seconds=5.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real SQLite store: its behaviour is part of what we test."""
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def app(store: TaskStore, settings: SimpleNamespace) -> FastAPI:
    return create_app(store, settings)


@pytest.fixture()
def http(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client(http: TestClient) -> TaskClient:
    """TaskClient talking to the in-process API through the TestClient transport."""
    return TaskClient(http=http)
