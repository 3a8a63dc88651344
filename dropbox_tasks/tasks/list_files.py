from typing import Any

from pydantic import Field

from dropbox_tasks.models.outputs import FetchType, PagedOutput
from dropbox_tasks.services.errors import NotFoundError, lookup_not_found, translate_errors
from dropbox_tasks.services.pagination import Page, PagedResultCollector
from dropbox_tasks.services.paths import resolve_optional_path
from dropbox_tasks.tasks.base import DropboxTask


class ListFiles(DropboxTask):
    """List the files and folders of a Dropbox directory.

    ``from`` defaults to the root of the account. ``limit`` is the page size
    requested from Dropbox, every page is read unless ``fetchType`` is
    ``FETCH_ONE``.
    """
    type = "List"

    from_: Any = Field(default=None, alias="from")
    recursive: Any = False
    limit: Any = 2000
    fetch_type: Any = Field(default=FetchType.FETCH, alias="fetchType")

    def run(self, run_context) -> PagedOutput:
        logger = run_context.logger

        # Dropbox addresses the root folder with an empty path
        path = resolve_optional_path(run_context, self.from_, "from") or ""
        recursive = run_context.render_as(self.recursive, bool, False, "recursive")
        limit = run_context.render_as(self.limit, int, None, "limit")
        fetch_type = run_context.render_as(self.fetch_type, FetchType, FetchType.FETCH, "fetchType")

        client = self.create_client(run_context)

        def fetch_page(cursor):
            if cursor is None:
                result = client.files_list_folder(path, recursive=recursive, limit=limit)
            else:
                result = client.files_list_folder_continue(cursor)
            return Page(result.entries, result.has_more, result.cursor)

        def on_api_error(error):
            if lookup_not_found(error, "path"):
                return NotFoundError(f"Could not list Dropbox folder, path not found: {path or '/'}")
            return self.remote_error(
                "Could not list Dropbox folder. Verify the path exists and you have permissions.", error
            )

        with translate_errors(logger, on_api_error):
            logger.info(f"Listing files in Dropbox path: '{path or '/'}'")
            output = PagedResultCollector(run_context, fetch_type, store_name="list.jsonl").collect(fetch_page)

        run_context.metric("files.count", output.size)
        logger.debug(f"Found {output.size} entries")
        return output
