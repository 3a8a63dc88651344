from typing import Any

from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FileOutput
from dropbox_tasks.services.errors import NotFoundError, lookup_not_found, translate_errors
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class Delete(DropboxTask):
    """Delete a file or folder, folders are deleted with their contents"""
    type = "Delete"

    from_: Any = Field(alias="from")

    def run(self, run_context) -> FileOutput:
        logger = run_context.logger
        path = resolve_path(run_context, self.from_, "from")
        client = self.create_client(run_context)

        def on_api_error(error):
            if lookup_not_found(error, "path_lookup"):
                return NotFoundError(f"File or folder not found at Dropbox path: {path}")
            return self.remote_error(
                "Could not delete item. Verify the path is valid and you have permissions.", error
            )

        with translate_errors(logger, on_api_error):
            logger.info(f"Deleting item from Dropbox path: '{path}'")
            result = client.files_delete_v2(path)

        logger.info(f"Successfully deleted item: {result.metadata.name}")
        return FileOutput(file=DropboxFile.of(result.metadata))
