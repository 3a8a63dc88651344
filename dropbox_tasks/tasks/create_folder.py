from typing import Any

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FileOutput
from dropbox_tasks.services.errors import ConflictError, translate_errors, write_conflict
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class CreateFolder(DropboxTask):
    type = "CreateFolder"

    path: Any
    autorename: Any = False

    def run(self, run_context) -> FileOutput:
        logger = run_context.logger
        path = resolve_path(run_context, self.path, "path")
        autorename = run_context.render_as(self.autorename, bool, False, "autorename")
        client = self.create_client(run_context)

        def on_api_error(error):
            if write_conflict(error, "path"):
                return ConflictError(f"Could not create folder: A file or folder already exists at path: {path}")
            return self.remote_error("Could not create folder.", error)

        with translate_errors(logger, on_api_error):
            logger.info(f"Creating folder at Dropbox path: '{path}'")
            result = client.files_create_folder_v2(path, autorename=autorename)

        logger.info(f"Successfully created folder: {result.metadata.name}")
        return FileOutput(file=DropboxFile.of(result.metadata))
