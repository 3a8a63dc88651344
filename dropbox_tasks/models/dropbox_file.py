from datetime import datetime
from enum import Enum
from typing import Optional

from dropbox.files import FileMetadata, FolderMetadata
from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class DropboxFile(BaseModel):
    """A Dropbox file or folder, as reported in task outputs"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    # path_lower, stable for the lifetime of the entry
    id: Optional[str] = None
    display_path: Optional[str] = Field(default=None, alias="displayPath")
    kind: Optional[EntryKind] = None
    size: Optional[int] = None
    modified_at: Optional[datetime] = Field(default=None, alias="modifiedAt")

    @classmethod
    def of(cls, metadata):
        """Build an entry from a Dropbox SDK metadata object"""
        fields = {
            "name": metadata.name,
            "id": metadata.path_lower,
            "display_path": metadata.path_display,
        }
        if isinstance(metadata, FileMetadata):
            fields.update(kind=EntryKind.FILE, size=metadata.size, modified_at=metadata.client_modified)
        elif isinstance(metadata, FolderMetadata):
            fields.update(kind=EntryKind.FOLDER)
        return cls(**fields)

    def to_record(self):
        return self.model_dump(mode="json", by_alias=True)
