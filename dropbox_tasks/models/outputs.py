from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from dropbox_tasks.models.dropbox_file import DropboxFile


class FetchType(str, Enum):
    FETCH_ONE = "FETCH_ONE"
    FETCH = "FETCH"
    STORE = "STORE"


class TaskOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self):
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FileOutput(TaskOutput):
    file: DropboxFile


class UploadOutput(TaskOutput):
    file: DropboxFile
    rev: Optional[str] = None
    content_hash: Optional[str] = Field(default=None, alias="contentHash")


class DownloadOutput(TaskOutput):
    uri: str
    file: DropboxFile


class PagedOutput(TaskOutput):
    size: int


class RowOutput(PagedOutput):
    """First entry found, FETCH_ONE"""
    row: Optional[DropboxFile] = None


class RowsOutput(PagedOutput):
    """All entries in memory, FETCH"""
    rows: List[DropboxFile]


class StoredOutput(PagedOutput):
    """Entries written to internal storage as JSON lines, STORE"""
    uri: str
