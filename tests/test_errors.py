import logging

import pytest
from dropbox import exceptions, files
from requests.exceptions import ConnectionError

from dropbox_tasks.services.errors import (
    NotFoundError,
    RemoteOperationError,
    ValidationError,
    lookup_not_found,
    translate_errors,
    write_conflict,
)

logger = logging.getLogger("test")


def test_lookup_not_found():
    assert lookup_not_found(files.GetMetadataError.path(files.LookupError.not_found), "path")
    assert not lookup_not_found(files.GetMetadataError.path(files.LookupError.not_folder), "path")
    assert not lookup_not_found(files.RelocationError.from_write(files.WriteError.no_write_permission), "from_lookup")
    assert not lookup_not_found(None, "path")


def test_write_conflict_unwraps_upload_failures():
    failure = files.UploadWriteFailed(
        reason=files.WriteError.conflict(files.WriteConflictError.file_ancestor),
        upload_session_id="session-1",
    )

    assert write_conflict(files.UploadError.path(failure), "path")
    assert not write_conflict(files.UploadError.other, "path")


def test_api_errors_go_through_the_handler():
    api_error = exceptions.ApiError("req-1", files.LookupError.not_found, None, None)

    with pytest.raises(NotFoundError, match="nothing here") as exc_info:
        with translate_errors(logger, lambda error: NotFoundError("nothing here")):
            raise api_error

    assert exc_info.value.__cause__ is api_error


def test_task_errors_pass_through():
    with pytest.raises(ValidationError):
        with translate_errors(logger, lambda error: None):
            raise ValidationError("bad")


def test_http_errors_are_remote_failures():
    with pytest.raises(RemoteOperationError):
        with translate_errors(logger, lambda error: None):
            raise exceptions.InternalServerError("req-1", 500, "boom")


def test_connection_errors_are_remote_failures():
    with pytest.raises(RemoteOperationError, match="Could not reach Dropbox"):
        with translate_errors(logger, lambda error: None):
            raise ConnectionError("connection refused")
