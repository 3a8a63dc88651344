import os
import json
import logging
from typing import Any, Callable, List, NamedTuple, Optional

from requests.exceptions import RequestException

from dropbox_tasks.models.dropbox_file import DropboxFile
from dropbox_tasks.models.outputs import FetchType, PagedOutput, RowOutput, RowsOutput, StoredOutput
from dropbox_tasks.services.errors import StorageIOError

logger = logging.getLogger(__name__)


class Page(NamedTuple):
    entries: List[Any]
    has_more: bool
    cursor: Optional[str] = None


def read_records(stream):
    """Read back the JSON lines written by a STORE collection"""
    for line in stream:
        line = line.strip()
        if line:
            yield json.loads(line)


class PagedResultCollector:
    """Walks a cursor-based listing and shapes the entries by fetch type.

    `fetch_page` is called with None for the first page and with the previous
    page's cursor afterwards. Entries are SDK metadata objects, converted with
    `DropboxFile.of`. In STORE mode entries are written to a temporary file as
    pages arrive; the file only reaches internal storage once the last page
    has been read.
    """

    def __init__(self, run_context, fetch_type: FetchType, store_name: str = "results.jsonl"):
        self.run_context = run_context
        self.fetch_type = fetch_type
        self.store_name = store_name

    def collect(self, fetch_page: Callable[[Optional[str]], Page]) -> PagedOutput:
        if self.fetch_type == FetchType.STORE:
            return self._collect_to_storage(fetch_page)

        entries = []
        for page in self._pages(fetch_page, lambda: len(entries)):
            entries.extend(DropboxFile.of(metadata) for metadata in page.entries)

        if self.fetch_type == FetchType.FETCH_ONE:
            return RowOutput(row=entries[0] if entries else None, size=len(entries))
        return RowsOutput(rows=entries, size=len(entries))

    def _pages(self, fetch_page, count):
        page = fetch_page(None)
        pages = 1
        while True:
            yield page
            if self.fetch_type == FetchType.FETCH_ONE and count() > 0:
                break
            if not page.has_more:
                break
            page = fetch_page(page.cursor)
            pages += 1
        logger.debug(f"Read {pages} page(s), {count()} entries")

    def _collect_to_storage(self, fetch_page):
        temp_path = self.run_context.create_temp_file(suffix=".jsonl")
        size = 0
        try:
            with open(temp_path, "w", encoding="utf-8") as sink:
                for page in self._pages(fetch_page, lambda: size):
                    for metadata in page.entries:
                        sink.write(json.dumps(DropboxFile.of(metadata).to_record()))
                        sink.write("\n")
                        size += 1
            uri = self.run_context.storage.put_file(temp_path, name=self.store_name)
        except RequestException:
            # transport failures from fetch_page are classified by the caller
            raise
        except OSError as e:
            raise StorageIOError(f"Failed to write results to internal storage: {e}") from e
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

        return StoredOutput(uri=uri, size=size)
