from typing import Any

from dropbox.files import WriteMode
from pydantic import Field

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import UploadOutput
from dropbox_tasks.services import dropbox_service
from dropbox_tasks.services.errors import ConflictError, StorageIOError, ValidationError, translate_errors, write_conflict
from dropbox_tasks.services.paths import resolve_path
from dropbox_tasks.services.storage import is_storage_uri
from dropbox_tasks.tasks.base import DropboxTask

WRITE_MODES = {
    "ADD": WriteMode.add,
    "OVERWRITE": WriteMode.overwrite,
}


class Upload(DropboxTask):
    """Upload a file from internal storage to Dropbox.

    ``mode`` is ``ADD`` (default), which keeps an existing file at the
    destination, or ``OVERWRITE``. With ``autorename`` Dropbox appends a suffix
    such as ``(1)`` instead of failing on a conflict.
    """
    type = "Upload"

    from_: Any = Field(alias="from")
    to: Any
    mode: Any = "ADD"
    autorename: Any = False

    def run(self, run_context) -> UploadOutput:
        logger = run_context.logger

        from_uri = run_context.render_as(self.from_, str, "", "from").strip()
        if not from_uri:
            raise ValidationError("'from' is required and cannot be empty")
        if not is_storage_uri(from_uri):
            raise ValidationError(f"Invalid 'from': must be an internal storage URI (storage://...). Got: {from_uri}")

        to_path = resolve_path(run_context, self.to, "to")

        mode_name = run_context.render_as(self.mode, str, "ADD", "mode").strip().upper()
        if mode_name not in WRITE_MODES:
            raise ValidationError(f"Invalid 'mode': {mode_name}. Must be 'ADD' or 'OVERWRITE'.")
        autorename = run_context.render_as(self.autorename, bool, False, "autorename")

        client = self.create_client(run_context)

        def on_api_error(error):
            if write_conflict(error, "path"):
                return ConflictError(f"Could not upload file: A file already exists at the destination path: {to_path}")
            return self.remote_error(
                "Could not upload file. Verify the path is valid and you have permissions.", error
            )

        try:
            size = run_context.storage.size(from_uri)
            with run_context.storage.get_file(from_uri) as stream:
                with translate_errors(logger, on_api_error):
                    logger.info(f"Uploading file from '{from_uri}' to Dropbox path '{to_path}'")
                    metadata = dropbox_service.upload_stream(
                        client, stream, size, to_path, WRITE_MODES[mode_name], autorename
                    )
        except OSError as e:
            logger.error(f"Could not read file from internal storage '{from_uri}': {e}")
            raise StorageIOError(f"Failed to read file from internal storage: {from_uri}") from e

        logger.info(f"File successfully uploaded to Dropbox: {metadata.name}")
        return UploadOutput(
            file=DropboxFile.of(metadata),
            rev=metadata.rev,
            content_hash=metadata.content_hash,
        )
