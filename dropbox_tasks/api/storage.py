import os
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from dropbox_tasks import config
from dropbox_tasks.services.errors import StorageIOError
from dropbox_tasks.services.storage import LocalStorage

logger = logging.getLogger(__name__)

router = APIRouter()

_storage = None


def get_storage():
    global _storage
    if _storage is None:
        _storage = LocalStorage(config.STORAGE_DIR)
    return _storage


@router.post("")
async def put_file(file: UploadFile = File(...), storage: LocalStorage = Depends(get_storage)):
    """Store an uploaded file and return its internal storage URI"""
    content = await file.read()
    uri = storage.put_bytes(content, os.path.basename(file.filename or "upload"))
    logger.info(f"Stored upload {file.filename} ({len(content)} bytes) as {uri}")
    return {"uri": uri, "size": len(content)}


@router.get("")
def get_file(uri: str = Query(...), storage: LocalStorage = Depends(get_storage)):
    """Stream a stored file back"""
    try:
        stream = storage.get_file(uri)
    except StorageIOError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    def iter_file():
        with stream:
            yield from iter(lambda: stream.read(64 * 1024), b"")

    return StreamingResponse(iter_file(), media_type="application/octet-stream")
