from typing import Any, List

from dropbox.files import SearchOptions
from pydantic import Field

from dropbox_tasks.models.outputs import FetchType, PagedOutput
from dropbox_tasks.services.errors import NotFoundError, ValidationError, lookup_not_found, translate_errors
from dropbox_tasks.services.pagination import Page, PagedResultCollector
from dropbox_tasks.services.paths import resolve_optional_path
from dropbox_tasks.tasks.base import DropboxTask


def _match_metadata(match):
    # SearchMatchV2.metadata is a MetadataV2 union
    return match.metadata.get_metadata()


class Search(DropboxTask):
    """Search files and folders, optionally under a given path"""
    type = "Search"

    query: Any
    path: Any = None
    max_results: Any = Field(default=None, alias="maxResults")
    file_extensions: Any = Field(default=None, alias="fileExtensions")
    fetch_type: Any = Field(default=FetchType.FETCH, alias="fetchType")

    def run(self, run_context) -> PagedOutput:
        logger = run_context.logger

        query = run_context.render_as(self.query, str, None, "query")
        if not query:
            raise ValidationError("'query' is required")
        path = resolve_optional_path(run_context, self.path, "path")
        max_results = run_context.render_as(self.max_results, int, None, "maxResults")
        file_extensions = run_context.render_as(self.file_extensions, List[str], None, "fileExtensions")
        fetch_type = run_context.render_as(self.fetch_type, FetchType, FetchType.FETCH, "fetchType")

        options = SearchOptions()
        if path:
            options.path = path
        if max_results is not None:
            options.max_results = max_results
        if file_extensions:
            options.file_extensions = file_extensions

        client = self.create_client(run_context)

        def fetch_page(cursor):
            if cursor is None:
                result = client.files_search_v2(query, options=options)
            else:
                result = client.files_search_continue_v2(cursor)
            return Page([_match_metadata(match) for match in result.matches], result.has_more, result.cursor)

        def on_api_error(error):
            if lookup_not_found(error, "path"):
                return NotFoundError(f"Could not perform search: search path not found: {path}")
            return self.remote_error("Could not perform search.", error)

        with translate_errors(logger, on_api_error):
            logger.info(f"Searching Dropbox for query: '{query}'")
            output = PagedResultCollector(run_context, fetch_type, store_name="search.jsonl").collect(fetch_page)

        run_context.metric("files.count", output.size)
        logger.debug(f"Found {output.size} search results")
        return output
