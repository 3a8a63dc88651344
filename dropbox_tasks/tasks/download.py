import os
import posixpath
from typing import Any

from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import DownloadOutput
from dropbox_tasks.services import dropbox_service
from dropbox_tasks.services.errors import NotFoundError, StorageIOError, lookup_not_found, translate_errors
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class Download(DropboxTask):
    """Download a file from Dropbox into internal storage"""
    type = "Download"

    from_: Any = Field(alias="from")

    def run(self, run_context) -> DownloadOutput:
        logger = run_context.logger
        path = resolve_path(run_context, self.from_, "from")
        client = self.create_client(run_context)

        def on_api_error(error):
            if lookup_not_found(error, "path"):
                return NotFoundError(f"File not found at Dropbox path: {path}")
            return self.remote_error(
                "Could not download file. Verify the path exists and you have permissions.", error
            )

        temp_path = run_context.create_temp_file()
        try:
            try:
                with translate_errors(logger, on_api_error):
                    metadata = dropbox_service.download_to_file(client, path, temp_path)
            except OSError as e:
                logger.error(f"Could not write downloaded file to '{temp_path}': {e}")
                raise StorageIOError(f"Failed to write downloaded file: {e}") from e
            uri = run_context.storage.put_file(temp_path, name=metadata.name or posixpath.basename(path))
        finally:
            os.remove(temp_path)

        logger.info(f"File '{metadata.name}' ({metadata.size} bytes) downloaded to internal storage: {uri}")
        return DownloadOutput(uri=uri, file=DropboxFile.of(metadata))
