import os
import shutil
import uuid
import logging
from urllib.parse import unquote

from dropbox_tasks.services.errors import StorageIOError

logger = logging.getLogger(__name__)

STORAGE_SCHEME = "storage://"


def is_storage_uri(value):
    return isinstance(value, str) and value.startswith(STORAGE_SCHEME)


class LocalStorage:
    """Internal storage backed by a local directory.

    Blobs are addressed by ``storage:///<prefix>/<name>`` URIs, where the prefix
    is unique per stored file.
    """

    def __init__(self, base_dir):
        self.base_dir = os.path.abspath(base_dir)
        os.makedirs(self.base_dir, exist_ok=True)

    def _local_path(self, uri):
        if not is_storage_uri(uri):
            raise StorageIOError(f"Not an internal storage URI: {uri}")

        relative = unquote(uri[len(STORAGE_SCHEME):]).lstrip("/")
        local_path = os.path.abspath(os.path.join(self.base_dir, relative))
        if not relative or os.path.commonpath([self.base_dir, local_path]) != self.base_dir:
            raise StorageIOError(f"Storage URI points outside of the storage root: {uri}")
        return local_path

    def put_file(self, path, name=None):
        """Copy a local file into storage and return its URI"""
        name = name or os.path.basename(path)
        prefix = uuid.uuid4().hex
        target = os.path.join(self.base_dir, prefix, name)
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            shutil.copyfile(path, target)
        except OSError as e:
            logger.error(f"Error storing file {path}: {e}")
            raise StorageIOError(f"Failed to write file to internal storage: {e}") from e

        uri = f"{STORAGE_SCHEME}/{prefix}/{name}"
        logger.info(f"Stored {path} as {uri}")
        return uri

    def put_bytes(self, content, name):
        prefix = uuid.uuid4().hex
        target = os.path.join(self.base_dir, prefix, name)
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error storing {name}: {e}")
            raise StorageIOError(f"Failed to write file to internal storage: {e}") from e
        return f"{STORAGE_SCHEME}/{prefix}/{name}"

    def get_file(self, uri):
        """Open a stored blob for binary reading"""
        local_path = self._local_path(uri)
        try:
            return open(local_path, "rb")
        except OSError as e:
            raise StorageIOError(f"Failed to read file from internal storage: {uri}") from e

    def size(self, uri):
        try:
            return os.path.getsize(self._local_path(uri))
        except OSError as e:
            raise StorageIOError(f"Failed to read file from internal storage: {uri}") from e

    def exists(self, uri):
        try:
            return os.path.isfile(self._local_path(uri))
        except StorageIOError:
            return False

    def delete(self, uri):
        local_path = self._local_path(uri)
        if not os.path.isfile(local_path):
            return False
        os.remove(local_path)
        shutil.rmtree(os.path.dirname(local_path), ignore_errors=True)
        return True
