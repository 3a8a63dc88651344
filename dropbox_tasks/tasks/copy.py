from typing import Any

from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FileOutput
from dropbox_tasks.services.errors import ConflictError, NotFoundError, lookup_not_found, translate_errors, write_conflict
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class Copy(DropboxTask):
    """Copy a file or folder to a different location in Dropbox"""
    type = "Copy"

    from_: Any = Field(alias="from")
    to: Any
    autorename: Any = False

    def run(self, run_context) -> FileOutput:
        logger = run_context.logger

        from_path = resolve_path(run_context, self.from_, "from")
        to_path = resolve_path(run_context, self.to, "to")
        autorename = run_context.render_as(self.autorename, bool, False, "autorename")

        client = self.create_client(run_context)

        def on_api_error(error):
            if lookup_not_found(error, "from_lookup"):
                return NotFoundError(f"Could not copy item: Source path not found: {from_path}")
            if write_conflict(error, "to"):
                return ConflictError(
                    f"Could not copy item: A file or folder already exists at the destination path: {to_path}"
                )
            return self.remote_error("Could not copy item.", error)

        with translate_errors(logger, on_api_error):
            logger.info(f"Copying Dropbox item from '{from_path}' to '{to_path}'")
            result = client.files_copy_v2(from_path, to_path, autorename=autorename)

        logger.info(f"Successfully copied item: {result.metadata.name}")
        return FileOutput(file=DropboxFile.of(result.metadata))
