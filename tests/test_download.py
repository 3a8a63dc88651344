import os

import pytest
from dropbox import exceptions, files

from dropbox_tasks.services.errors import NotFoundError, StorageIOError
from dropbox_tasks.tasks.download import Download

from factories import file_metadata


def test_download_to_storage(client, run_context, storage):
    def download_to_file(local_path, path):
        with open(local_path, "wb") as f:
            f.write(b"hello dropbox")
        return file_metadata(path, size=13)

    client.files_download_to_file.side_effect = download_to_file
    task = Download(accessToken="fake-token", from_="/docs/hello.txt")

    output = task.run(run_context)

    assert output.uri.startswith("storage:///")
    assert output.uri.endswith("/hello.txt")
    assert output.file.size == 13
    with storage.get_file(output.uri) as f:
        assert f.read() == b"hello dropbox"
    assert os.listdir(run_context.working_dir) == []


def test_download_not_found_removes_temp_file(client, run_context, storage):
    error = files.DownloadError.path(files.LookupError.not_found)
    client.files_download_to_file.side_effect = exceptions.ApiError("req-1", error, None, None)
    task = Download(accessToken="fake-token", from_="/docs/missing.txt")

    with pytest.raises(NotFoundError, match="File not found at Dropbox path: /docs/missing.txt"):
        task.run(run_context)

    assert os.listdir(run_context.working_dir) == []
    assert os.listdir(storage.base_dir) == []


def test_download_local_write_failure(client, run_context, storage):
    client.files_download_to_file.side_effect = OSError(28, "No space left on device")
    task = Download(accessToken="fake-token", from_="/docs/big.iso")

    with pytest.raises(StorageIOError, match="No space left on device"):
        task.run(run_context)

    assert os.listdir(run_context.working_dir) == []
    assert os.listdir(storage.base_dir) == []
