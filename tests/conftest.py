"""Pytest fixtures for the Dropbox task tests."""

from unittest.mock import MagicMock

import pytest

from dropbox_tasks.services import dropbox_service
from dropbox_tasks.services.run_context import RunContext
from dropbox_tasks.services.storage import LocalStorage


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def run_context(storage):
    context = RunContext(storage, task_id="test")
    yield context
    context.cleanup()


@pytest.fixture
def client(monkeypatch):
    """Mocked Dropbox client returned to every task.

    The access token each task rendered is recorded in ``client.tokens``.
    """
    mock = MagicMock()
    mock.tokens = []

    def create_client(token):
        mock.tokens.append(token)
        return mock

    monkeypatch.setattr(dropbox_service, "create_client", create_client)
    return mock
