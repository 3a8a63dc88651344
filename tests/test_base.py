import pytest

from dropbox_tasks.tasks.base import DropboxTask
from dropbox_tasks.tasks.registry import TASK_TYPES


def test_task_without_run_cannot_be_built():
    class Rename(DropboxTask):
        type = "Rename"

    with pytest.raises(TypeError, match="abstract"):
        Rename(accessToken="fake-token")


@pytest.mark.parametrize("task_class", list(TASK_TYPES.values()))
def test_registered_tasks_implement_run(task_class):
    assert not getattr(task_class, "__abstractmethods__", None)
