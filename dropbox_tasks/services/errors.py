from contextlib import contextmanager

from dropbox import exceptions as dbx_exceptions
from requests.exceptions import RequestException

INVALID_TOKEN_MESSAGE = "Invalid access token. Please check your secret or token."
RATE_LIMIT_MESSAGE = "Dropbox API rate limit exceeded. Please wait before trying again."


class TaskError(Exception):
    """Base class for every failure a task reports to its caller"""


class ValidationError(TaskError):
    """Missing or malformed task configuration"""


class AuthenticationError(TaskError):
    pass


class RateLimitError(TaskError):
    def __init__(self, message, backoff=None):
        super().__init__(message)
        self.backoff = backoff


class NotFoundError(TaskError):
    pass


class ConflictError(TaskError):
    pass


class RemoteOperationError(TaskError):
    pass


class StorageIOError(TaskError):
    pass


def lookup_not_found(error, tag):
    """Check whether a Dropbox error union carries a LookupError.not_found under `tag`"""
    if error is None or not hasattr(error, f"is_{tag}"):
        return False
    if not getattr(error, f"is_{tag}")():
        return False
    lookup = getattr(error, f"get_{tag}")()
    return hasattr(lookup, "is_not_found") and lookup.is_not_found()


def write_conflict(error, tag):
    """Check whether a Dropbox error union carries a WriteError.conflict under `tag`"""
    if error is None or not hasattr(error, f"is_{tag}"):
        return False
    if not getattr(error, f"is_{tag}")():
        return False
    write_error = getattr(error, f"get_{tag}")()
    # UploadError.path wraps the WriteError in an UploadWriteFailed
    write_error = getattr(write_error, "reason", write_error)
    return hasattr(write_error, "is_conflict") and write_error.is_conflict()


@contextmanager
def translate_errors(task_logger, on_api_error):
    """Translate exceptions raised by the Dropbox SDK into task errors.

    Authentication and rate limit failures are mapped the same way for every
    task. ``ApiError`` is handed to ``on_api_error``, which returns the
    classified ``TaskError`` for the route that failed. Anything else coming
    from the SDK is reported as a ``RemoteOperationError``.
    """
    try:
        yield
    except TaskError:
        raise
    except dbx_exceptions.AuthError as e:
        task_logger.error(f"Invalid Dropbox access token: {e.error}")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from e
    except dbx_exceptions.RateLimitError as e:
        task_logger.error(f"Dropbox API rate limit exceeded, backoff: {e.backoff}")
        raise RateLimitError(RATE_LIMIT_MESSAGE, backoff=e.backoff) from e
    except dbx_exceptions.ApiError as e:
        error = on_api_error(e.error)
        task_logger.error(str(error))
        raise error from e
    except dbx_exceptions.DropboxException as e:
        task_logger.error(f"Dropbox request failed: {e}")
        raise RemoteOperationError(f"Dropbox request failed: {e}") from e
    except RequestException as e:
        task_logger.error(f"Could not reach Dropbox: {e}")
        raise RemoteOperationError(f"Could not reach Dropbox: {e}") from e
