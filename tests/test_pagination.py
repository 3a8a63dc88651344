import os
from unittest.mock import MagicMock

import pytest
from dropbox import exceptions, files
from requests.exceptions import ConnectionError

from dropbox_tasks.models.outputs import FetchType, RowOutput, RowsOutput, StoredOutput
from dropbox_tasks.services.pagination import Page, PagedResultCollector, read_records

from factories import file_metadata, folder_metadata

A = file_metadata("/data/A.txt")
B = file_metadata("/data/B.txt")
C = folder_metadata("/data/C")
D = file_metadata("/data/D.txt")


def three_pages():
    pages = {
        None: Page([A], True, "c1"),
        "c1": Page([B, C], True, "c2"),
        "c2": Page([D], False, "c3"),
    }
    return MagicMock(side_effect=lambda cursor: pages[cursor])


def names(entries):
    return [entry.name for entry in entries]


def test_fetch_reads_every_page_in_order(run_context):
    fetch_page = three_pages()

    output = PagedResultCollector(run_context, FetchType.FETCH).collect(fetch_page)

    assert isinstance(output, RowsOutput)
    assert names(output.rows) == ["A.txt", "B.txt", "C", "D.txt"]
    assert output.size == 4
    assert [call.args[0] for call in fetch_page.call_args_list] == [None, "c1", "c2"]


def test_fetch_one_stops_after_first_page(run_context):
    fetch_page = three_pages()

    output = PagedResultCollector(run_context, FetchType.FETCH_ONE).collect(fetch_page)

    assert isinstance(output, RowOutput)
    assert output.row.name == "A.txt"
    assert output.size == 1
    fetch_page.assert_called_once_with(None)


def test_fetch_one_buffers_the_whole_first_page(run_context):
    fetch_page = MagicMock(side_effect=[Page([B, C], True, "c1")])

    output = PagedResultCollector(run_context, FetchType.FETCH_ONE).collect(fetch_page)

    assert output.row.name == "B.txt"
    assert output.size == 2
    fetch_page.assert_called_once_with(None)


def test_fetch_one_skips_empty_pages(run_context):
    fetch_page = MagicMock(side_effect=[Page([], True, "c1"), Page([D], True, "c2")])

    output = PagedResultCollector(run_context, FetchType.FETCH_ONE).collect(fetch_page)

    assert output.row.name == "D.txt"
    assert fetch_page.call_count == 2


def test_fetch_one_without_results(run_context):
    fetch_page = MagicMock(return_value=Page([], False, None))

    output = PagedResultCollector(run_context, FetchType.FETCH_ONE).collect(fetch_page)

    assert output.row is None
    assert output.size == 0


def test_empty_page_with_more_continues(run_context):
    fetch_page = MagicMock(side_effect=[Page([A], True, "c1"), Page([], True, "c2"), Page([B], False, None)])

    output = PagedResultCollector(run_context, FetchType.FETCH).collect(fetch_page)

    assert names(output.rows) == ["A.txt", "B.txt"]
    assert fetch_page.call_count == 3


def test_store_writes_records_in_order(run_context, storage):
    fetch_page = three_pages()

    output = PagedResultCollector(run_context, FetchType.STORE).collect(fetch_page)

    assert isinstance(output, StoredOutput)
    assert output.size == 4
    with storage.get_file(output.uri) as f:
        records = list(read_records(f))
    assert [record["name"] for record in records] == ["A.txt", "B.txt", "C", "D.txt"]
    assert records[0]["id"] == "/data/a.txt"
    assert records[0]["displayPath"] == "/data/A.txt"
    assert records[0]["kind"] == "file"
    assert records[0]["size"] == 12
    assert records[2]["kind"] == "folder"
    assert records[2]["size"] is None


def test_failure_mid_loop_commits_nothing(run_context, storage):
    error = exceptions.ApiError("req", files.ListFolderContinueError.reset, None, None)
    fetch_page = MagicMock(side_effect=[Page([A], True, "c1"), error])

    with pytest.raises(exceptions.ApiError):
        PagedResultCollector(run_context, FetchType.STORE).collect(fetch_page)

    assert os.listdir(storage.base_dir) == []
    assert os.listdir(run_context.working_dir) == []


def test_store_lets_transport_errors_through(run_context, storage):
    fetch_page = MagicMock(side_effect=[Page([A], True, "c1"), ConnectionError("connection reset")])

    with pytest.raises(ConnectionError):
        PagedResultCollector(run_context, FetchType.STORE).collect(fetch_page)

    assert os.listdir(storage.base_dir) == []
