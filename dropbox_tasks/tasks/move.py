from typing import Any

from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FileOutput
from dropbox_tasks.services.errors import ConflictError, NotFoundError, lookup_not_found, translate_errors, write_conflict
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.tasks.base import DropboxTask


class Move(DropboxTask):
    """Move a file or folder to a different location in Dropbox"""
    type = "Move"

    from_: Any = Field(alias="from")
    to: Any
    autorename: Any = False
    allow_ownership_transfer: Any = Field(default=False, alias="allowOwnershipTransfer")

    def run(self, run_context) -> FileOutput:
        logger = run_context.logger

        from_path = resolve_path(run_context, self.from_, "from")
        to_path = resolve_path(run_context, self.to, "to")
        autorename = run_context.render_as(self.autorename, bool, False, "autorename")
        allow_ownership = run_context.render_as(
            self.allow_ownership_transfer, bool, False, "allowOwnershipTransfer"
        )

        client = self.create_client(run_context)

        def on_api_error(error):
            if lookup_not_found(error, "from_lookup"):
                return NotFoundError(f"Could not move item: Source path not found: {from_path}")
            if write_conflict(error, "to"):
                return ConflictError(
                    f"Could not move item: A file or folder already exists at the destination path: {to_path}"
                )
            return self.remote_error("Could not move item.", error)

        with translate_errors(logger, on_api_error):
            logger.info(f"Moving Dropbox item from '{from_path}' to '{to_path}'")
            result = client.files_move_v2(
                from_path,
                to_path,
                autorename=autorename,
                allow_ownership_transfer=allow_ownership,
            )

        logger.info(f"Successfully moved item: {result.metadata.name}")
        return FileOutput(file=DropboxFile.of(result.metadata))
