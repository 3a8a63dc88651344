from typing import Any

from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FileOutput
from dropbox_tasks.services.errors import NotFoundError, lookup_not_found, translate_errors
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class GetMetadata(DropboxTask):
    type = "GetMetadata"

    path: Any
    include_media_info: Any = Field(default=False, alias="includeMediaInfo")

    def run(self, run_context) -> FileOutput:
        logger = run_context.logger
        path = resolve_path(run_context, self.path, "path")
        include_media_info = run_context.render_as(self.include_media_info, bool, False, "includeMediaInfo")
        client = self.create_client(run_context)

        def on_api_error(error):
            if lookup_not_found(error, "path"):
                return NotFoundError(f"File or folder not found at Dropbox path: {path}")
            return self.remote_error(
                "Could not get metadata. Verify the path is valid and you have permissions.", error
            )

        with translate_errors(logger, on_api_error):
            logger.info(f"Getting metadata for Dropbox path: '{path}'")
            metadata = client.files_get_metadata(path, include_media_info=include_media_info)

        logger.info(f"Successfully retrieved metadata for: {metadata.name}")
        return FileOutput(file=DropboxFile.of(metadata))
